import json
import tempfile
from pathlib import Path

import config_paths


def _with_config_dir(cfg_dir, fn):
    orig_dir = config_paths.CONFIG_DIR
    orig_json = config_paths.CONFIG_JSON
    try:
        config_paths.CONFIG_DIR = str(cfg_dir)
        config_paths.CONFIG_JSON = str(cfg_dir / "config.json")
        return fn()
    finally:
        config_paths.CONFIG_DIR = orig_dir
        config_paths.CONFIG_JSON = orig_json


def test_load_config_defaults_without_json():
    with tempfile.TemporaryDirectory() as tmp:
        cfg_dir = Path(tmp) / "p6grid"
        cfg_dir.mkdir(parents=True, exist_ok=True)
        cfg = _with_config_dir(cfg_dir, lambda: config_paths.load_config(environ={}))
        assert cfg["SUPABASE_URL"] is None
        assert cfg["SUPABASE_KEY"] is None
        assert cfg["REQUEST_TIMEOUT"] == 15.0
        assert cfg["LOG_LEVEL"] == "INFO"
        assert cfg["DEFAULT_TABLE"] == "engineering"


def test_load_config_reads_json_overrides():
    with tempfile.TemporaryDirectory() as tmp:
        cfg_dir = Path(tmp) / "p6grid"
        cfg_dir.mkdir(parents=True, exist_ok=True)
        (cfg_dir / "config.json").write_text(
            json.dumps(
                {
                    "supabase_url": "https://example.supabase.co",
                    "supabase_anon_key": "anon",
                    "request_timeout_seconds": 5,
                    "log_level": "debug",
                    "default_table": "qaqc",
                }
            )
        )
        cfg = _with_config_dir(cfg_dir, lambda: config_paths.load_config(environ={}))
        assert cfg["SUPABASE_URL"] == "https://example.supabase.co"
        assert cfg["SUPABASE_KEY"] == "anon"
        assert cfg["REQUEST_TIMEOUT"] == 5.0
        assert cfg["LOG_LEVEL"] == "DEBUG"
        assert cfg["DEFAULT_TABLE"] == "qaqc"


def test_environment_wins_over_json():
    with tempfile.TemporaryDirectory() as tmp:
        cfg_dir = Path(tmp) / "p6grid"
        cfg_dir.mkdir(parents=True, exist_ok=True)
        (cfg_dir / "config.json").write_text(json.dumps({"supabase_url": "https://json"}))
        env = {"SUPABASE_URL": "https://env", "P6GRID_SUPABASE_KEY": "k1", "SUPABASE_ANON_KEY": "k2"}
        cfg = _with_config_dir(cfg_dir, lambda: config_paths.load_config(environ=env))
        assert cfg["SUPABASE_URL"] == "https://env"
        assert cfg["SUPABASE_KEY"] == "k1"


def test_malformed_json_falls_back_to_defaults():
    with tempfile.TemporaryDirectory() as tmp:
        cfg_dir = Path(tmp) / "p6grid"
        cfg_dir.mkdir(parents=True, exist_ok=True)
        (cfg_dir / "config.json").write_text("{not json")
        cfg = _with_config_dir(cfg_dir, lambda: config_paths.load_config(environ={}))
        assert cfg["SUPABASE_URL"] is None
        assert cfg["REQUEST_TIMEOUT"] == 15.0


def test_wrongly_typed_entries_are_ignored():
    with tempfile.TemporaryDirectory() as tmp:
        cfg_dir = Path(tmp) / "p6grid"
        cfg_dir.mkdir(parents=True, exist_ok=True)
        (cfg_dir / "config.json").write_text(
            json.dumps({"request_timeout_seconds": "fast", "supabase_url": 42, "log_level": ""})
        )
        cfg = _with_config_dir(cfg_dir, lambda: config_paths.load_config(environ={}))
        assert cfg["REQUEST_TIMEOUT"] == 15.0
        assert cfg["SUPABASE_URL"] is None
        assert cfg["LOG_LEVEL"] == "INFO"
