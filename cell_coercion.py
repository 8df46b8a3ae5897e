import math
import re

import pandas as pd

from table_schema import (
    BOOLEAN,
    CODE,
    DECIMAL,
    INTEGER,
    TIMESTAMP,
)

_TRUE_WORDS = {"1", "true", "t", "yes", "y", "on"}
_FALSE_WORDS = {"0", "false", "f", "no", "n", "off"}
_LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

EDIT_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M"


def is_blank(value) -> bool:
    """True for null, absent (NaN/NA/NaT) and empty-string values."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, float) and math.isnan(value):
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def is_null(value) -> bool:
    if isinstance(value, str):
        return False
    return is_blank(value)


def to_text(value) -> str:
    if is_null(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def leading_number(text):
    """Numeric prefix of ``text`` or None, the way lenient float parsing reads it."""
    if not isinstance(text, str):
        return None
    m = _LEADING_NUMBER.match(text)
    if not m:
        return None
    return float(m.group(0))


def parse_timestamp(value):
    if is_blank(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value
    try:
        ts = pd.to_datetime(value, errors="raise")
    except (ValueError, TypeError, OverflowError):
        return None
    if ts is pd.NaT or pd.isna(ts):
        return None
    return ts


def local_timestamp(value):
    """Parsed timestamp in local wall-clock time; naive values are taken as local."""
    ts = parse_timestamp(value)
    if ts is not None and ts.tzinfo is not None:
        ts = ts.to_pydatetime().astimezone()
    return ts


def is_number_text(text) -> bool:
    stripped = "" if text is None else str(text).strip()
    if stripped == "":
        return False
    try:
        value = float(stripped)
    except ValueError:
        return False
    return math.isfinite(value)


# ---------- coercers (edit/form string -> stored value) ----------


def coerce_text(text):
    text = "" if text is None else str(text)
    return text if text != "" else None


def coerce_code(text):
    text = coerce_text(text)
    return text.upper() if text is not None else None


def coerce_integer(text):
    stripped = "" if text is None else str(text).strip()
    if stripped == "":
        return None
    try:
        return int(stripped)
    except ValueError:
        pass
    value = float(stripped)
    if not math.isfinite(value):
        raise ValueError(f"Cannot coerce '{text}' to integer")
    return int(value)


def coerce_decimal(text):
    stripped = "" if text is None else str(text).strip()
    if stripped == "":
        return None
    value = float(stripped)
    if not math.isfinite(value):
        raise ValueError(f"Cannot coerce '{text}' to decimal")
    return value


def coerce_timestamp(text):
    stripped = "" if text is None else str(text).strip()
    if stripped == "":
        return None
    if parse_timestamp(stripped) is None:
        raise ValueError(f"Cannot coerce '{text}' to timestamp")
    return stripped


def coerce_boolean(text):
    if isinstance(text, bool):
        return text
    stripped = "" if text is None else str(text).strip()
    if stripped == "":
        return None
    lowered = stripped.lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise ValueError(f"Cannot coerce '{text}' to boolean")


COERCERS = {
    INTEGER: coerce_integer,
    DECIMAL: coerce_decimal,
    TIMESTAMP: coerce_timestamp,
    BOOLEAN: coerce_boolean,
    CODE: coerce_text,
}


def coerce_cell_value(column, text):
    coerce = column.coerce or COERCERS.get(column.kind, coerce_text)
    value = coerce(text)
    if column.allowed_values is not None and value is not None:
        if value not in column.allowed_values:
            raise ValueError(f"'{value}' is not one of {', '.join(column.allowed_values)}")
    return value


# ---------- presentation ----------


def edit_text(column, value) -> str:
    """Initial pending text when a cell enters editing."""
    if is_blank(value):
        return ""
    if column.kind == TIMESTAMP:
        ts = parse_timestamp(value)
        if ts is None:
            return ""
        if ts.tzinfo is not None:
            ts = ts.tz_convert("UTC")
        return ts.strftime(EDIT_TIMESTAMP_FORMAT)
    return to_text(value)


def display_text(column, value) -> str:
    if column is not None and column.display == "percent":
        if is_blank(value):
            return "0.0%"
        try:
            return f"{float(value) * 100:.1f}%"
        except (TypeError, ValueError):
            return to_text(value)
    if is_blank(value):
        return "-"
    if column is None:
        return to_text(value)
    if column.kind == TIMESTAMP:
        ts = local_timestamp(value)
        if ts is None:
            return "Invalid Date"
        return f"{ts.month}/{ts.day}/{ts.year}"
    if column.kind == BOOLEAN:
        return "Yes" if value else "No"
    return to_text(value)
