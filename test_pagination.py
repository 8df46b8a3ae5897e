import unittest

import pandas as pd
import pytest

import pagination
from pagination import Paginator, page_window


def _frame(n):
    return pd.DataFrame({"id": [f"r{i}" for i in range(n)]}, dtype=object)


class PaginatorTests(unittest.TestCase):
    def test_sixteen_records_split_into_two_pages(self):
        records = _frame(16)
        first = pagination.apply(records, 15, 1)
        second = pagination.apply(records, 15, 2)

        self.assertEqual(len(first.page_records), 15)
        self.assertEqual(len(second.page_records), 1)
        self.assertEqual(first.total_pages, 2)
        self.assertEqual(second.page_records["id"].tolist(), ["r15"])

    def test_pages_concatenate_back_to_the_input(self):
        records = _frame(47)
        pages = [pagination.apply(records, 15, p).page_records for p in range(1, 5)]
        self.assertEqual(pd.concat(pages)["id"].tolist(), records["id"].tolist())

    def test_out_of_range_pages_are_clamped(self):
        records = _frame(16)
        self.assertEqual(pagination.apply(records, 15, 9).current_page, 2)
        self.assertEqual(pagination.apply(records, 15, 0).current_page, 1)
        self.assertEqual(pagination.apply(records, 15, -3).current_page, 1)

    def test_empty_result_has_zero_pages_and_no_records_text(self):
        page = pagination.apply(_frame(0), 15, 1)
        self.assertEqual(page.total_pages, 0)
        self.assertTrue(page.is_empty)
        self.assertEqual(len(page.page_records), 0)
        self.assertEqual(page.showing_text(), "No records found")

    def test_showing_text_reports_one_based_range(self):
        page = pagination.apply(_frame(16), 15, 2)
        self.assertEqual(page.showing_text(), "Showing 16 to 16 of 16 results")

    def test_next_and_prev_stay_in_bounds(self):
        p = Paginator(16, 15)
        p.prev_page()
        self.assertEqual(p.current_page, 1)
        p.next_page()
        p.next_page()
        self.assertEqual(p.current_page, 2)
        p.last_page()
        self.assertEqual(p.current_page, 2)
        p.first_page()
        self.assertEqual(p.current_page, 1)

    def test_shrinking_total_pulls_current_page_back(self):
        p = Paginator(100, 15)
        p.go_to(7)
        p.update_total_rows(20)
        self.assertEqual(p.current_page, 2)


@pytest.mark.parametrize(
    "current, total, expected",
    [
        (1, 0, []),
        (1, 3, [1, 2, 3]),
        (2, 5, [1, 2, 3, 4, 5]),
        (1, 10, [1, 2, 3, 4, "...", 10]),
        (3, 10, [1, 2, 3, 4, "...", 10]),
        (5, 10, [1, "...", 4, 5, 6, "...", 10]),
        (9, 10, [1, "...", 7, 8, 9, 10]),
    ],
)
def test_page_window(current, total, expected):
    assert page_window(current, total) == expected
