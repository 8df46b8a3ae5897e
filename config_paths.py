import json
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "p6grid")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
LOG_PATH = os.path.join(CONFIG_DIR, "p6grid.log")

# default settings
REQUEST_TIMEOUT_DEFAULT = 15.0
LOG_LEVEL_DEFAULT = "INFO"
DEFAULT_TABLE_DEFAULT = "engineering"

# config key -> environment variables, first set one wins
ENV_OVERRIDES = {
    "SUPABASE_URL": ("P6GRID_SUPABASE_URL", "SUPABASE_URL"),
    "SUPABASE_KEY": ("P6GRID_SUPABASE_KEY", "SUPABASE_ANON_KEY"),
    "LOG_LEVEL": ("P6GRID_LOG_LEVEL",),
}


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)


def _read_json(path):
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _non_empty_str(value):
    return isinstance(value, str) and value.strip() != ""


def load_config(environ=None):
    environ = os.environ if environ is None else environ
    cfg = {
        "SUPABASE_URL": None,
        "SUPABASE_KEY": None,
        "REQUEST_TIMEOUT": REQUEST_TIMEOUT_DEFAULT,
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
        "DEFAULT_TABLE": DEFAULT_TABLE_DEFAULT,
    }

    data = _read_json(CONFIG_JSON)
    url = data.get("supabase_url")
    if _non_empty_str(url):
        cfg["SUPABASE_URL"] = url.strip()
    key = data.get("supabase_anon_key")
    if _non_empty_str(key):
        cfg["SUPABASE_KEY"] = key.strip()
    timeout = data.get("request_timeout_seconds")
    if isinstance(timeout, (int, float)) and not isinstance(timeout, bool) and timeout > 0:
        cfg["REQUEST_TIMEOUT"] = float(timeout)
    level = data.get("log_level")
    if _non_empty_str(level):
        cfg["LOG_LEVEL"] = level.strip().upper()
    table = data.get("default_table")
    if _non_empty_str(table):
        cfg["DEFAULT_TABLE"] = table.strip()

    for name, env_names in ENV_OVERRIDES.items():
        for env_name in env_names:
            value = environ.get(env_name)
            if _non_empty_str(value):
                cfg[name] = value.strip().upper() if name == "LOG_LEVEL" else value.strip()
                break

    return cfg
