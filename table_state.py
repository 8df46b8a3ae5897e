import itertools
from dataclasses import dataclass
from typing import Optional

import pandas as pd

import comparator
import predicate_pipeline
from pagination import PAGE_SIZE, Paginator

_mount_ids = itertools.count(1)


@dataclass
class EditingCursor:
    record_id: str
    field: str
    pending: str = ""


def empty_snapshot(schema):
    return pd.DataFrame(columns=[schema.id_column, *schema.column_names], dtype=object)


def build_snapshot(schema, rows):
    rows = list(rows or [])
    if not rows:
        return empty_snapshot(schema)
    df = pd.DataFrame(rows, dtype=object)
    for name in [schema.id_column, *schema.column_names]:
        if name not in df.columns:
            df[name] = pd.Series([None] * len(df), index=df.index, dtype=object)
    return df.reset_index(drop=True)


class TableState:
    """Everything one mounted table view owns.

    The snapshot is the last fetched result set; search, filters, sort and
    page are derived-view settings; ``editing`` and ``delete_armed`` are the
    single-cell and single-row interaction cursors.
    """

    def __init__(self, schema, page_size: int = PAGE_SIZE):
        self.schema = schema
        self.records = empty_snapshot(schema)
        self.loading = True
        self.mount_id = next(_mount_ids)
        self.mounted = True

        self.search_term = ""
        self.filters: dict[str, str] = {c.name: "" for c in schema.filter_columns}
        self.lookup_filters: dict[str, str] = {c.name: "" for c in schema.lookup_columns}
        self.sort_field: Optional[str] = None
        self.sort_direction = comparator.ASC
        self.paginator = Paginator(0, page_size)

        self.editing: Optional[EditingCursor] = None
        self.delete_armed: Optional[str] = None

    # ---------- lifecycle ----------
    def unmount(self):
        self.mounted = False
        self.editing = None
        self.delete_armed = None

    def is_live(self) -> bool:
        return self.mounted

    # ---------- snapshot ----------
    def replace_snapshot(self, rows):
        self.records = build_snapshot(self.schema, rows)
        self.loading = False

    def _id_mask(self, record_id):
        return self.records[self.schema.id_column] == record_id

    def find_record(self, record_id) -> Optional[dict]:
        if self.records.empty:
            return None
        hits = self.records.loc[self._id_mask(record_id)]
        if hits.empty:
            return None
        return hits.iloc[0].to_dict()

    def patch_record(self, record_id, field, value) -> bool:
        if self.records.empty:
            return False
        mask = self._id_mask(record_id)
        if not mask.any():
            return False
        if field in self.records.columns:
            values = self.records[field].tolist()
        else:
            values = [None] * len(self.records)
        for pos, hit in enumerate(mask.tolist()):
            if hit:
                values[pos] = value
        # rebuilt as object so None stays None instead of becoming NaN
        self.records[field] = pd.Series(values, index=self.records.index, dtype=object)
        return True

    def remove_record(self, record_id) -> bool:
        if self.records.empty:
            return False
        mask = self._id_mask(record_id)
        if not mask.any():
            return False
        self.records = self.records.loc[~mask].reset_index(drop=True)
        return True

    # ---------- view settings ----------
    def set_search_term(self, term: str):
        self.search_term = term or ""
        self.paginator.reset()

    def set_filter(self, field: str, value: str):
        self.filters[field] = value or ""
        self.paginator.reset()

    def set_lookup_filter(self, field: str, value: str):
        self.lookup_filters[field] = value or ""
        self.paginator.reset()

    def clear_all(self):
        self.filters = {name: "" for name in self.filters}
        self.lookup_filters = {name: "" for name in self.lookup_filters}
        self.sort_field = None
        self.sort_direction = comparator.ASC
        self.paginator.reset()

    def toggle_sort(self, field: str):
        self.sort_field, self.sort_direction = comparator.toggle(
            self.sort_field, self.sort_direction, field
        )

    def set_page(self, page: int):
        self.paginator.go_to(page)

    @property
    def active_filter_count(self) -> int:
        count = sum(1 for v in self.filters.values() if v)
        count += sum(1 for v in self.lookup_filters.values() if v)
        return count + (1 if self.sort_field is not None else 0)

    @property
    def is_filtered(self) -> bool:
        return bool(self.search_term) or any(self.filters.values()) or any(self.lookup_filters.values())

    # ---------- derived view ----------
    def filtered(self):
        return predicate_pipeline.apply(
            self.records,
            self.schema,
            search_term=self.search_term,
            filters=self.filters,
            lookup_filters=self.lookup_filters,
        )

    def sorted_records(self):
        return comparator.apply(self.filtered(), self.sort_field, self.sort_direction)

    def view(self):
        return self.paginator.slice(self.sorted_records())
