from __future__ import annotations

"""Configuration loading and validation for BitVoyager.

Loads YAML configuration, applies defaults, and downgrades unsupported
values with a warning instead of failing mid-session.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import yaml  # type: ignore
except Exception:  # pragma: no cover - dependency issues handled at runtime
    yaml = None  # type: ignore

from storage import BACKENDS

ALLOWED_MODES = {"standard", "learning"}


def _load_yaml(path: Path) -> Dict[str, Any]:
    if yaml is None:
        print("ERROR: pyyaml is not installed. Please install dependencies.", file=sys.stderr)
        sys.exit(1)
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"ERROR: Config file not found: {path}", file=sys.stderr)
        sys.exit(1)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML, or the packaged defaults when path is None."""
    if path:
        return _load_yaml(Path(path))
    return _load_yaml(Path(__file__).with_name("defaults.yml"))


def _non_negative(section: Dict[str, Any], name: str, default: float) -> None:
    try:
        value = float(section.get(name, default))
    except (TypeError, ValueError):
        value = -1.0
    if value < 0:
        print(f"WARNING: learning.{name} must be a non-negative number, using {default}.")
        value = default
    section[name] = value


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    for section in ("storage", "export", "bank", "learning", "ui"):
        if not isinstance(cfg.get(section), dict):
            cfg[section] = {}

    storage = cfg["storage"]
    export = cfg["export"]
    bank = cfg["bank"]
    learning = cfg["learning"]
    ui = cfg["ui"]

    storage.setdefault("backend", "file")
    storage.setdefault("path", "./.bitvoyager/local_storage.json")
    if not isinstance(storage.get("keys"), dict):
        storage["keys"] = {}
    storage["keys"].setdefault("session_id", "bitvoyager_session_id")
    storage["keys"].setdefault("metrics", "bitvoyager_metrics")
    storage["keys"].setdefault("profile", "pythonLearningProfile")

    export.setdefault("directory", "./exports")
    export.setdefault("indent", 2)

    bank.setdefault("path", None)
    bank.setdefault("max_id", 18)

    learning.setdefault("questions_per_mission", 5)
    ui.setdefault("explain", False)
    ui.setdefault("default_mode", None)

    # Enum validations
    backend = storage.get("backend")
    if backend not in BACKENDS:
        print(f"WARNING: Unsupported storage backend '{backend}', using 'file'.")
        storage["backend"] = "file"

    mode = ui.get("default_mode")
    if mode is not None and mode not in ALLOWED_MODES:
        print(f"WARNING: Unsupported default_mode '{mode}', asking at start.")
        ui["default_mode"] = None

    indent = export.get("indent")
    if indent is not None and (not isinstance(indent, int) or indent < 0):
        print("WARNING: export.indent must be a non-negative integer, using 2.")
        export["indent"] = 2

    try:
        bank["max_id"] = max(1, int(bank.get("max_id", 18)))
    except (TypeError, ValueError):
        print("WARNING: bank.max_id must be an integer, using 18.")
        bank["max_id"] = 18

    try:
        learning["questions_per_mission"] = max(1, int(learning.get("questions_per_mission", 5)))
    except (TypeError, ValueError):
        print("WARNING: learning.questions_per_mission must be an integer, using 5.")
        learning["questions_per_mission"] = 5

    _non_negative(learning, "initial_skill", 0.0)
    _non_negative(learning, "completion_gain", 0.15)
    _non_negative(learning, "skip_penalty", 0.05)
    _non_negative(learning, "failure_penalty", 0.05)
    if learning["initial_skill"] > 1:
        print("WARNING: learning.initial_skill must be <= 1, using 1.0.")
        learning["initial_skill"] = 1.0

    return cfg
