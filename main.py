import curses
import locale
import logging
import os
import sys

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")

from config_paths import LOG_PATH, ensure_config_dirs, load_config
from notifications import Notifier
from orchestrator import Orchestrator
from record_store import RecordStore
from request_runner import RequestRunner
from tables import TABLES, TABLES_BY_KEY

__version__ = "0.1.0"

USAGE = (
    "p6grid - terminal client for the P6 project-controls tables\n\n"
    "Usage:\n"
    "  p6grid [--table NAME]\n"
    "  p6grid --demo [--table NAME]\n"
    "  p6grid -v\n\n"
    f"Tables: {', '.join(TABLES_BY_KEY)}\n"
    "Store URL and key come from ~/.config/p6grid/config.json or\n"
    "P6GRID_SUPABASE_URL / P6GRID_SUPABASE_KEY.\n"
)

logger = logging.getLogger("p6grid")


def _parse_args(args):
    """Return ``{"help", "version", "demo", "table"}``; raises ValueError on bad input."""
    opts = {"help": False, "version": False, "demo": False, "table": None}
    it = iter(args)
    for arg in it:
        if arg in ("-h", "--help"):
            opts["help"] = True
        elif arg in ("-v", "-V", "--version"):
            opts["version"] = True
        elif arg == "--demo":
            opts["demo"] = True
        elif arg == "--table":
            name = next(it, None)
            if name is None:
                raise ValueError("--table needs a table name")
            opts["table"] = name
        elif arg.startswith("--table="):
            opts["table"] = arg.split("=", 1)[1]
        else:
            raise ValueError(f"Unknown argument: {arg}")
    if opts["table"] is not None and opts["table"] not in TABLES_BY_KEY:
        raise ValueError(
            f"Unknown table '{opts['table']}' (choose from {', '.join(TABLES_BY_KEY)})"
        )
    return opts


def _setup_logging(level_name):
    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        level = logging.INFO
    try:
        ensure_config_dirs()
        handler = logging.FileHandler(LOG_PATH, encoding="utf-8")
    except OSError:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(level)


def build_stores(cfg, demo=False):
    if demo:
        from demo_data import DemoDataInitializer

        return DemoDataInitializer().stores()

    url, key = cfg.get("SUPABASE_URL"), cfg.get("SUPABASE_KEY")
    if not url or not key:
        raise ValueError(
            "Missing store configuration: set supabase_url and supabase_anon_key in "
            "config.json, or P6GRID_SUPABASE_URL and P6GRID_SUPABASE_KEY (or run with --demo)"
        )
    timeout = cfg.get("REQUEST_TIMEOUT", 15.0)
    return {schema.key: RecordStore(url, key, schema, timeout=timeout) for schema in TABLES}


def main():
    try:
        opts = _parse_args(sys.argv[1:])
    except ValueError as e:
        print(f"p6grid: {e}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        sys.exit(2)

    if opts["version"]:
        print(__version__)
        return

    if opts["help"]:
        print(USAGE)
        return

    cfg = load_config()
    _setup_logging(cfg.get("LOG_LEVEL", "INFO"))

    try:
        stores = build_stores(cfg, demo=opts["demo"])
    except ValueError as e:
        print(f"p6grid: {e}", file=sys.stderr)
        sys.exit(1)

    table = opts["table"] or cfg.get("DEFAULT_TABLE")
    if table not in TABLES_BY_KEY:
        table = TABLES[0].key

    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        pass

    logger.info("starting p6grid %s (demo=%s, table=%s)", __version__, opts["demo"], table)

    def curses_main(stdscr):
        Orchestrator(stdscr, stores, RequestRunner(), Notifier(), initial_table=table).run()

    curses.wrapper(curses_main)


if __name__ == "__main__":
    main()
