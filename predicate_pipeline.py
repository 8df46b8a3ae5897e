"""Search, column filters, date buckets and lookup filters over a snapshot.

Every function here is pure: it reads a snapshot ``DataFrame`` and returns
a new frame (or a list of options). Survivors keep their relative order.
"""
import locale
from functools import cmp_to_key

import pandas as pd

from cell_coercion import is_blank, leading_number, local_timestamp, to_text
from table_schema import DATE_FILTER

BLANK = "BLANK"


def column_values(records, name):
    if name in records.columns:
        return records[name]
    return pd.Series([None] * len(records), index=records.index, dtype=object)


def month_bucket(value):
    """``YYYY-MM`` key in local time, or None when blank/unparsable."""
    ts = local_timestamp(value)
    if ts is None:
        return None
    return f"{ts.year:04d}-{ts.month:02d}"


def format_bucket(key: str) -> str:
    if key == BLANK:
        return "(Blanks)"
    try:
        year, month = key.split("-")
        return pd.Timestamp(year=int(year), month=int(month), day=1).strftime("%b %Y")
    except (ValueError, TypeError):
        return key


def blank_mask(records, name):
    return column_values(records, name).map(is_blank).astype(bool)


def search_mask(records, columns, term):
    term = term.lower()
    mask = pd.Series(False, index=records.index)
    for col in columns:
        values = column_values(records, col.name)
        hits = values.map(lambda v: (not is_blank(v)) and term in to_text(v).lower())
        mask |= hits.astype(bool)
    return mask


def equality_mask(records, name, value):
    if value == BLANK:
        return blank_mask(records, name)
    values = column_values(records, name)
    return values.map(lambda v: (not is_blank(v)) and to_text(v) == value).astype(bool)


def bucket_mask(records, name, key):
    if key == BLANK:
        return blank_mask(records, name)
    values = column_values(records, name)
    return values.map(lambda v: month_bucket(v) == key).astype(bool)


def apply(records, schema, search_term="", filters=None, lookup_filters=None):
    mask = pd.Series(True, index=records.index)

    if search_term:
        mask &= search_mask(records, schema.search_columns, search_term)

    for name, value in (lookup_filters or {}).items():
        if value:
            mask &= equality_mask(records, name, value)

    for name, value in (filters or {}).items():
        if not value:
            continue
        col = schema.column(name)
        if col is not None and col.filter == DATE_FILTER:
            mask &= bucket_mask(records, name, value)
        else:
            mask &= equality_mask(records, name, value)

    return records.loc[mask]


# ---------- filter choices ----------


def _option_cmp(a: str, b: str) -> int:
    num_a = leading_number(a)
    num_b = leading_number(b)
    if num_a is not None and num_b is not None:
        return (num_a > num_b) - (num_a < num_b)
    return locale.strcoll(a, b)


def filter_options(records, name, allow_blank=True):
    values = column_values(records, name)
    distinct = {to_text(v) for v in values if not is_blank(v)}
    options = sorted(distinct, key=cmp_to_key(_option_cmp))
    if allow_blank and bool(values.map(is_blank).any()):
        options.insert(0, BLANK)
    return options


def date_filter_options(records, name, newest_first=True, allow_blank=True):
    values = column_values(records, name)
    keys = set()
    blanks = 0
    for v in values:
        if is_blank(v):
            blanks += 1
            continue
        key = month_bucket(v)
        if key is not None:
            keys.add(key)
    options = sorted(keys, reverse=newest_first)
    if allow_blank and blanks:
        options.insert(0, BLANK)
    return options


def lookup_options(records, name):
    values = column_values(records, name)
    return sorted({to_text(v) for v in values if not is_blank(v)})


def options_for(records, schema, column):
    if column.filter == DATE_FILTER:
        return date_filter_options(
            records,
            column.name,
            newest_first=schema.date_options_newest_first,
            allow_blank=column.filter_blank,
        )
    return filter_options(records, column.name, allow_blank=column.filter_blank)


def option_label(column, value) -> str:
    if column is not None and column.filter == DATE_FILTER:
        return format_bucket(value)
    if value == BLANK:
        return "(Blanks)"
    return value
