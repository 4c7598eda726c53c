import json
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from teletext_core.config import AppConfig, config_path, load_config, save_config


class ConfigTests(unittest.TestCase):
    def test_load_default_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg = load_config(Path(tmp) / "missing.json")
            self.assertIsInstance(cfg, AppConfig)
            self.assertEqual(cfg.timing.boot_ms, 1000)
            self.assertEqual(cfg.timing.clearing_ms, 100)
            self.assertEqual(cfg.navigation.initial_page, 100)
            self.assertEqual(cfg.ui.page_name, "TELETEXT ZERO")
            self.assertEqual(cfg.weather.city, "LONDON")

    def test_save_and_reload(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            cfg = load_config(path)
            cfg.timing.clearing_ms = 250
            cfg.ui.scale = 3
            save_config(cfg, path)
            reloaded = load_config(path)
            self.assertEqual(reloaded.timing.clearing_ms, 250)
            self.assertEqual(reloaded.ui.scale, 3)

    def test_invalid_json_falls_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_config(path), AppConfig())
            path.write_text("[1, 2]", encoding="utf-8")
            self.assertEqual(load_config(path), AppConfig())

    def test_normalisation(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            raw = {
                "config_version": 2,
                "timing": {"boot_ms": 10, "clearing_ms": 9000},
                "navigation": {"initial_page": 4000},
                "ui": {"page_name": "A VERY LONG TELETEXT SERVICE NAME INDEED", "scale": 0},
                "weather": {"city": "  paris "},
                "unknown": {"x": 1},
            }
            path.write_text(json.dumps(raw), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.timing.boot_ms, 1000)
            self.assertEqual(cfg.timing.clearing_ms, 500)
            self.assertEqual(cfg.navigation.initial_page, 999)
            self.assertEqual(len(cfg.ui.page_name), 28)
            self.assertEqual(cfg.ui.scale, 1)
            self.assertEqual(cfg.weather.city, "PARIS")

    def test_migrate_v1_shape(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            old = {"screen": {"boot_ms": 1500, "clearing_ms": 200, "page_name": "CEEFAX"}}
            path.write_text(json.dumps(old), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.config_version, 2)
            self.assertEqual(cfg.timing.boot_ms, 1500)
            self.assertEqual(cfg.timing.clearing_ms, 200)
            self.assertEqual(cfg.ui.page_name, "CEEFAX")

    def test_config_path_env_override(self):
        with patch.dict(os.environ, {"TELETEXT_CONFIG": "/tmp/tt/custom.json"}):
            self.assertEqual(config_path(), Path("/tmp/tt/custom.json"))

    def test_diagnostics_section_only_keeps_log_rotation(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(json.dumps({"diagnostics": {"keep_log_files": 3, "max_bundle_mb": 5}}), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.diagnostics.keep_log_files, 3)
            save_config(cfg, path)
            saved = json.loads(path.read_text(encoding="utf-8"))
            self.assertEqual(saved["diagnostics"], {"keep_log_files": 3})


if __name__ == "__main__":
    unittest.main()
