import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from bitvoyager.config.config import load_config, validate_config


class ConfigTests(unittest.TestCase):
    def test_packaged_defaults(self) -> None:
        cfg = validate_config(load_config())
        self.assertEqual(cfg["storage"]["backend"], "file")
        self.assertEqual(cfg["storage"]["keys"]["metrics"], "bitvoyager_metrics")
        self.assertEqual(cfg["storage"]["keys"]["session_id"], "bitvoyager_session_id")
        self.assertEqual(cfg["storage"]["keys"]["profile"], "pythonLearningProfile")
        self.assertEqual(cfg["export"]["indent"], 2)
        self.assertEqual(cfg["bank"]["max_id"], 18)
        self.assertIsNone(cfg["ui"]["default_mode"])

    def test_empty_config_gets_defaults(self) -> None:
        cfg = validate_config({})
        self.assertEqual(cfg["learning"]["questions_per_mission"], 5)
        self.assertEqual(cfg["learning"]["completion_gain"], 0.15)
        self.assertFalse(cfg["ui"]["explain"])

    def test_bad_values_are_downgraded(self) -> None:
        raw = {
            "storage": {"backend": "cloud"},
            "export": {"indent": -3},
            "bank": {"max_id": "many"},
            "learning": {"questions_per_mission": "x", "skip_penalty": -1, "initial_skill": 4},
            "ui": {"default_mode": "arcade"},
        }
        out = io.StringIO()
        with redirect_stdout(out):
            cfg = validate_config(raw)
        self.assertEqual(cfg["storage"]["backend"], "file")
        self.assertEqual(cfg["export"]["indent"], 2)
        self.assertEqual(cfg["bank"]["max_id"], 18)
        self.assertEqual(cfg["learning"]["questions_per_mission"], 5)
        self.assertEqual(cfg["learning"]["skip_penalty"], 0.05)
        self.assertEqual(cfg["learning"]["initial_skill"], 1.0)
        self.assertIsNone(cfg["ui"]["default_mode"])
        self.assertEqual(out.getvalue().count("WARNING:"), 7)

    def test_none_indent_is_compact(self) -> None:
        cfg = validate_config({"export": {"indent": None}})
        self.assertIsNone(cfg["export"]["indent"])

    def test_load_from_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "cfg.yml"
            path.write_text("storage:\n  backend: memory\n", encoding="utf-8")
            cfg = validate_config(load_config(str(path)))
        self.assertEqual(cfg["storage"]["backend"], "memory")
        self.assertEqual(cfg["storage"]["keys"]["metrics"], "bitvoyager_metrics")

    def test_missing_file_exits(self) -> None:
        err = io.StringIO()
        with redirect_stderr(err), self.assertRaises(SystemExit) as ctx:
            load_config("/nonexistent/bitvoyager.yml")
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("Config file not found", err.getvalue())


if __name__ == "__main__":
    unittest.main()
