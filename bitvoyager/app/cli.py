from __future__ import annotations

"""CLI for BitVoyager: run missions and manage the local study data."""

import argparse
from typing import Any, Dict, List

from storage import StorageKeys, open_storage

from ..config.config import load_config, validate_config
from ..metrics.tracker import build_tracker
from ..util.randomness import seed_if_needed
from .console import export_study_data, run_console
from .events import EventBus
from .mission_manager import MissionManager, Phase, default_collaborators, reset_study


def _build_ui() -> Dict[str, Any]:
    def ask(prompt: str) -> str:
        return input(prompt)

    def inform(msg: str) -> None:
        print(msg)

    return {"ask": ask, "inform": inform}


def _choose_mode(ui: Dict[str, Any], preset: str | None) -> str:
    if preset:
        return preset
    answer = ui["ask"]("Choose mode [standard/learning]: ").strip().lower()
    return {"s": "standard", "l": "learning"}.get(answer, answer)


def _run(cfg: Dict[str, Any], mode: str | None) -> int:
    seed_if_needed()
    ui = _build_ui()
    storage = open_storage(cfg)
    tracker = build_tracker(cfg, storage)
    manager = MissionManager(tracker, default_collaborators(cfg, storage))
    bus = EventBus()
    manager.bind(bus)

    ui["inform"](f"Session {tracker.session_id}")
    while manager.phase is Phase.MODE_UNSELECTED:
        choice = _choose_mode(ui, mode or cfg["ui"].get("default_mode"))
        manager.select_mode(choice)
        if manager.phase is Phase.MODE_UNSELECTED and mode:
            return 2

    while manager.phase is Phase.ERRORED:
        ui["inform"](f"Mission Initialization Failed: {manager.progress.error}")
        if ui["ask"]("Retry mission? [y/N]: ").strip().lower() != "y":
            return 1
        manager.retry()

    phase = run_console(manager, bus, tracker, ui)
    if phase is Phase.COMPLETE:
        ui["inform"]("\nMission Complete!")
        if manager.progress.show_export:
            ui["inform"]("If you are on your third completion, please remember to export your study data.")
            if ui["ask"]("Export study data now? [y/N]: ").strip().lower() == "y":
                export_study_data(tracker, ui["inform"])
    return 0


def main(argv: List[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="bitvoyager")
    p.add_argument("--config", default=None, help="Path to YAML config")
    sub = p.add_subparsers(dest="cmd", required=True)

    rp = sub.add_parser("run", help="Play one mission in the console")
    rp.add_argument("--mode", choices=["standard", "learning"], default=None)
    rp.add_argument("--explain", action="store_true")

    sub.add_parser("show-metrics", help="Print the current metrics snapshot")
    sub.add_parser("export", help="Write the metrics export document")
    sub.add_parser("reset-metrics", help="Start a new session id with zeroed counters")
    sub.add_parser("reset-study", help="Remove session id, metrics and learning profile")

    sp = sub.add_parser("summarize", help="Summarize exported documents")
    sp.add_argument("files", nargs="+")
    sp.add_argument("--parquet", default=None, help="Write challenge rows to this Parquet file")
    sp.add_argument("--ndjson", default=None, help="Write challenge rows to this NDJSON file")

    args = p.parse_args(argv)
    cfg = validate_config(load_config(args.config))

    if args.cmd == "run":
        if args.explain or cfg["ui"].get("explain"):
            from .explain import enable as explain_enable
            explain_enable(True)
        return _run(cfg, args.mode)

    if args.cmd == "show-metrics":
        tracker = build_tracker(cfg)
        print(tracker.get_metrics_data().to_document(indent=2))
        return 0

    if args.cmd == "export":
        tracker = build_tracker(cfg)
        tracker.export_metrics()
        if tracker.last_export_path is None:
            return 1
        print(tracker.last_export_path)
        return 0

    if args.cmd == "reset-metrics":
        tracker = build_tracker(cfg)
        print(tracker.reset_metrics())
        return 0

    if args.cmd == "reset-study":
        reset_study(open_storage(cfg), StorageKeys(**cfg["storage"]["keys"]))
        print("Study data removed.")
        return 0

    if args.cmd == "summarize":
        from analytics import AnalyticsConfig, export_ndjson, load_exports, session_frame, summarize_by_difficulty, write_parquet

        acfg = AnalyticsConfig()
        df = load_exports(args.files)
        print(session_frame(args.files).to_string(index=False))
        print()
        print(summarize_by_difficulty(df, acfg).to_string())
        if args.parquet:
            write_parquet(df, args.parquet)
        if args.ndjson:
            export_ndjson(df, args.ndjson)
        return 0

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
