"""Single-key sort over a snapshot.

Values are compared raw: strings by locale collation, everything else with
the ordering operators of the stored value. Timestamps are stored as text,
so they sort as text (same-format ISO strings sort chronologically, mixed
offsets or formats do not). Nulls always compare larger than any value.
"""
import locale
from functools import cmp_to_key

from cell_coercion import is_null, to_text

ASC = "asc"
DESC = "desc"


def compare_values(a, b) -> int:
    a_null = is_null(a)
    b_null = is_null(b)
    if a_null or b_null:
        return int(a_null) - int(b_null)

    if isinstance(a, str) and isinstance(b, str):
        return locale.strcoll(a, b)

    try:
        if a < b:
            return -1
        if a > b:
            return 1
        return 0
    except TypeError:
        # mixed types: fall back to their text form
        return locale.strcoll(to_text(a), to_text(b))


def apply(records, sort_field=None, direction=ASC):
    if not sort_field or sort_field not in records.columns or len(records) < 2:
        return records

    values = list(records[sort_field])
    order = sorted(
        range(len(values)),
        key=cmp_to_key(lambda i, j: compare_values(values[i], values[j])),
        reverse=(direction == DESC),
    )
    return records.iloc[order]


def toggle(sort_field, direction, field):
    """Next (field, direction) after the user picks ``field``."""
    if sort_field == field:
        return field, (DESC if direction == ASC else ASC)
    return field, ASC
