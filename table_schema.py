from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple


# column kinds
TEXT = "text"
INTEGER = "integer"
DECIMAL = "decimal"
TIMESTAMP = "timestamp"
BOOLEAN = "boolean"
CODE = "code"
IDENTIFIER = "identifier"

NUMERIC_KINDS = {INTEGER, DECIMAL}

# filter widgets
VALUE_FILTER = "value"
DATE_FILTER = "date"


@dataclass(frozen=True)
class ColumnSpec:
    """Capability descriptor for one column of a table.

    ``mutable`` columns may enter inline editing. ``coerce`` overrides the
    kind's default coercer, ``allowed_values`` closes the edit surface to a
    fixed vocabulary and ``uppercase`` normalizes as the user types.
    """

    name: str
    label: str
    kind: str = TEXT
    mutable: bool = False
    coerce: Optional[Callable[[str], Any]] = None
    allowed_values: Optional[Tuple[str, ...]] = None
    uppercase: bool = False
    filter: Optional[str] = None
    filter_blank: bool = True
    searchable: bool = False
    sortable: bool = True
    display: Optional[str] = None
    placeholder: str = ""


@dataclass(frozen=True)
class FormField:
    name: str
    label: str
    kind: str = TEXT
    allowed_values: Optional[Tuple[str, ...]] = None
    placeholder: str = ""


@dataclass(frozen=True)
class TableSchema:
    key: str
    title: str
    base_table: str
    id_column: str
    order_column: str
    columns: Tuple[ColumnSpec, ...]
    create_fields: Tuple[FormField, ...] = ()
    fetch_source: Optional[str] = None
    lookup_columns: Tuple[ColumnSpec, ...] = ()
    date_options_newest_first: bool = True
    search_hint: str = "Search records..."
    _by_name: dict = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        by_name = {c.name: c for c in self.columns}
        for c in self.lookup_columns:
            by_name.setdefault(c.name, c)
        object.__setattr__(self, "_by_name", by_name)

    @property
    def source(self) -> str:
        return self.fetch_source or self.base_table

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    @property
    def search_columns(self) -> list[ColumnSpec]:
        return [c for c in self.columns if c.searchable]

    @property
    def filter_columns(self) -> list[ColumnSpec]:
        return [c for c in self.columns if c.filter]

    @property
    def editable_columns(self) -> list[ColumnSpec]:
        return [c for c in self.columns if c.mutable]

    def column(self, name: str) -> Optional[ColumnSpec]:
        return self._by_name.get(name)

    def is_editable(self, name: str) -> bool:
        col = self.column(name)
        return bool(col and col.mutable)
