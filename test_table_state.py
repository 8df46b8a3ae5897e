import unittest

from comparator import ASC, DESC
from table_state import TableState
from tables import DYNAMIC_ACTUAL_DATA, ENGINEERING

ID = ENGINEERING.id_column


def _rows(n):
    return [
        {ID: f"e{i:02d}", "dgt_dtfid": f"DTF-{i:02d}", "dgt_revision": i % 3, "dgt_status": "A"}
        for i in range(n)
    ]


class TableStateTests(unittest.TestCase):
    def setUp(self):
        self.state = TableState(ENGINEERING)
        self.state.replace_snapshot(_rows(20))

    def test_replace_snapshot_clears_loading_and_fills_missing_columns(self):
        self.assertFalse(self.state.loading)
        self.assertIn("dgt_actualreturndate", self.state.records.columns)
        self.assertIsNone(self.state.find_record("e00")["dgt_actualreturndate"])

    def test_patch_record_keeps_null_as_null(self):
        self.assertTrue(self.state.patch_record("e05", "dgt_revision", None))
        record = self.state.find_record("e05")
        self.assertIsNone(record["dgt_revision"])
        self.assertEqual(self.state.find_record("e04")["dgt_revision"], 1)

    def test_patch_record_unknown_id_is_a_no_op(self):
        self.assertFalse(self.state.patch_record("nope", "dgt_revision", 9))

    def test_remove_record(self):
        self.assertTrue(self.state.remove_record("e03"))
        self.assertIsNone(self.state.find_record("e03"))
        self.assertEqual(len(self.state.records), 19)

    def test_filter_changes_reset_the_page(self):
        self.state.view()
        self.state.set_page(2)
        self.assertEqual(self.state.paginator.current_page, 2)
        self.state.set_filter("dgt_revision", "1")
        self.assertEqual(self.state.paginator.current_page, 1)

    def test_search_change_resets_the_page(self):
        self.state.view()
        self.state.set_page(2)
        self.state.set_search_term("DTF")
        self.assertEqual(self.state.paginator.current_page, 1)

    def test_view_applies_filter_then_sort_then_page(self):
        self.state.set_filter("dgt_revision", "2")
        self.state.toggle_sort("dgt_dtfid")
        self.state.toggle_sort("dgt_dtfid")
        self.assertEqual(self.state.sort_direction, DESC)
        page = self.state.view()
        self.assertEqual(page.total_items, 6)
        self.assertEqual(page.page_records[ID].tolist(), ["e17", "e14", "e11", "e08", "e05", "e02"])

    def test_clear_all_resets_filters_and_sort_but_not_search(self):
        self.state.set_search_term("DTF-1")
        self.state.set_filter("dgt_status", "A")
        self.state.toggle_sort("dgt_revision")
        self.assertEqual(self.state.active_filter_count, 2)

        self.state.clear_all()
        self.assertEqual(self.state.filters["dgt_status"], "")
        self.assertIsNone(self.state.sort_field)
        self.assertEqual(self.state.sort_direction, ASC)
        self.assertEqual(self.state.search_term, "DTF-1")
        self.assertEqual(self.state.active_filter_count, 0)

    def test_clear_all_resets_lookup_filters_and_counts_them(self):
        state = TableState(DYNAMIC_ACTUAL_DATA)
        state.set_lookup_filter("zone_code", "Z1")
        state.set_lookup_filter("trade_code", "ELEC")
        self.assertEqual(state.active_filter_count, 2)

        state.clear_all()
        self.assertEqual(state.lookup_filters, {"zone_code": "", "level_code": "", "trade_code": ""})
        self.assertEqual(state.active_filter_count, 0)

    def test_unmount_clears_cursors(self):
        self.state.delete_armed = "e01"
        self.state.unmount()
        self.assertFalse(self.state.is_live())
        self.assertIsNone(self.state.delete_armed)

    def test_each_state_gets_its_own_mount_id(self):
        other = TableState(ENGINEERING)
        self.assertNotEqual(other.mount_id, self.state.mount_id)
