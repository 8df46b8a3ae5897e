from dataclasses import dataclass
from typing import Any

PAGE_SIZE = 15


@dataclass
class PageSlice:
    page_records: Any
    total_pages: int
    start_index: int
    end_index: int
    current_page: int
    total_items: int

    @property
    def is_empty(self) -> bool:
        return self.total_items == 0

    def showing_text(self) -> str:
        if self.is_empty:
            return "No records found"
        return f"Showing {self.start_index + 1} to {self.end_index} of {self.total_items} results"


class Paginator:
    """1-based page cursor over a result set of ``total_rows`` items.

    Requests outside ``[1, total_pages]`` are clamped, never rejected.
    """

    def __init__(self, total_rows: int = 0, page_size: int = PAGE_SIZE):
        self.page_size = page_size
        self.current_page = 1
        self.total_rows = max(0, total_rows)
        self._clamp()

    def _clamp(self):
        self.current_page = max(1, min(self.current_page, self.page_count))

    def update_total_rows(self, total_rows: int):
        self.total_rows = max(0, total_rows)
        self._clamp()

    def reset(self):
        self.current_page = 1

    def go_to(self, page: int):
        self.current_page = page
        self._clamp()

    def next_page(self):
        if self.page_end < self.total_rows:
            self.current_page += 1
            self._clamp()

    def prev_page(self):
        if self.current_page > 1:
            self.current_page -= 1
            self._clamp()

    def first_page(self):
        self.current_page = 1

    def last_page(self):
        self.current_page = self.page_count

    @property
    def total_pages(self) -> int:
        return -(-self.total_rows // self.page_size)

    @property
    def page_count(self) -> int:
        return max(1, self.total_pages)

    @property
    def page_start(self) -> int:
        return (self.current_page - 1) * self.page_size

    @property
    def page_end(self) -> int:
        return min(self.total_rows, self.page_start + self.page_size)

    def slice(self, records) -> PageSlice:
        self.update_total_rows(len(records))
        start, end = self.page_start, self.page_end
        return PageSlice(
            page_records=records.iloc[start:end],
            total_pages=self.total_pages,
            start_index=start,
            end_index=end,
            current_page=self.current_page,
            total_items=self.total_rows,
        )


def apply(records, page_size: int = PAGE_SIZE, current_page: int = 1) -> PageSlice:
    paginator = Paginator(len(records), page_size)
    paginator.go_to(current_page)
    return paginator.slice(records)


def page_window(current_page: int, total_pages: int, max_visible: int = 5) -> list:
    """Page-number strip with ``"..."`` gaps, e.g. ``[1, '...', 4, 5, 6, '...', 10]``."""
    if total_pages <= max_visible:
        return list(range(1, total_pages + 1))
    if current_page <= 3:
        return [1, 2, 3, 4, "...", total_pages]
    if current_page >= total_pages - 2:
        return [1, "...", *range(total_pages - 3, total_pages + 1)]
    return [1, "...", current_page - 1, current_page, current_page + 1, "...", total_pages]
