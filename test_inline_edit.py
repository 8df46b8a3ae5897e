import unittest

from inline_edit import InlineEditController
from notifications import ERROR, SUCCESS, Notifier
from record_store import MemoryRecordStore
from request_runner import RequestRunner
from table_state import TableState
from tables import ENGINEERING, QAQC_HSE


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def _setup(schema, rows):
    store = MemoryRecordStore(schema, rows)
    runner = RequestRunner(threaded=False)
    notifier = Notifier(clock=FakeClock())
    state = TableState(schema)
    state.replace_snapshot(store.fetch_all())
    store.calls.clear()
    return state, store, runner, notifier, InlineEditController(state, store, runner, notifier)


ENG_ID = ENGINEERING.id_column
QA_ID = QAQC_HSE.id_column


class InlineEditEngineeringTests(unittest.TestCase):
    def setUp(self):
        rows = [
            {ENG_ID: "e1", "created_at": "2024-01-02T00:00:00", "dgt_revision": 3, "dgt_status": "A"},
            {ENG_ID: "e2", "created_at": "2024-01-01T00:00:00", "dgt_revision": 1, "dgt_status": "B"},
        ]
        self.state, self.store, self.runner, self.notifier, self.editor = _setup(ENGINEERING, rows)

    def test_begin_seeds_pending_with_current_value(self):
        self.assertTrue(self.editor.begin("e1", "dgt_revision"))
        self.assertEqual(self.editor.cursor.pending, "3")
        self.assertTrue(self.editor.is_editing("e1", "dgt_revision"))

    def test_revision_cleared_to_empty_is_stored_as_null(self):
        self.editor.begin("e1", "dgt_revision")
        self.editor.set_value("")
        self.assertTrue(self.editor.commit())
        self.runner.drain()

        self.assertEqual(self.store.calls, [("update_by_key", "e1", {"dgt_revision": None})])
        self.assertIsNone(self.state.find_record("e1")["dgt_revision"])
        self.assertIsNone(self.store.rows[0]["dgt_revision"])
        self.assertFalse(self.editor.editing)
        self.assertEqual(self.notifier.active().kind, SUCCESS)

    def test_update_failure_leaves_snapshot_untouched(self):
        self.store.fail_next("update_by_key", "permission denied")
        self.editor.begin("e1", "dgt_revision")
        self.editor.set_value("7")
        self.editor.commit()
        self.runner.drain()

        self.assertEqual(self.state.find_record("e1")["dgt_revision"], 3)
        note = self.notifier.active()
        self.assertEqual(note.kind, ERROR)
        self.assertEqual(note.message, "Failed to update: permission denied")
        self.assertFalse(self.editor.editing)

    def test_invalid_number_issues_no_request(self):
        self.editor.begin("e1", "dgt_revision")
        self.editor.set_value("three")
        self.assertFalse(self.editor.commit())
        self.runner.drain()

        self.assertEqual(self.store.calls, [])
        self.assertEqual(self.notifier.active().message, "Invalid value for column 'Rev'")
        self.assertEqual(self.state.find_record("e1")["dgt_revision"], 3)

    def test_status_is_uppercased_while_typing(self):
        self.editor.begin("e2", "dgt_status")
        self.editor.set_value("")
        self.editor.type_text("u")
        self.editor.type_text("r")
        self.assertEqual(self.editor.cursor.pending, "UR")
        self.editor.commit()
        self.runner.drain()
        self.assertEqual(self.state.find_record("e2")["dgt_status"], "UR")

    def test_cancel_discards_pending_value(self):
        self.editor.begin("e1", "dgt_revision")
        self.editor.set_value("9")
        self.editor.cancel()
        self.runner.drain()
        self.assertEqual(self.store.calls, [])
        self.assertEqual(self.state.find_record("e1")["dgt_revision"], 3)

    def test_read_only_column_never_enters_editing(self):
        self.assertFalse(self.editor.begin("e1", "dgt_dtfid"))
        self.assertFalse(self.editor.editing)
        self.assertEqual(self.notifier.active().message, "'DTF ID' is read-only")

    def test_starting_a_new_edit_commits_the_open_one(self):
        self.editor.begin("e1", "dgt_revision")
        self.editor.set_value("4")
        self.editor.begin("e2", "dgt_revision")
        self.runner.drain()

        self.assertEqual(self.state.find_record("e1")["dgt_revision"], 4)
        self.assertTrue(self.editor.is_editing("e2", "dgt_revision"))

    def test_beginning_an_edit_disarms_delete(self):
        self.state.delete_armed = "e2"
        self.editor.begin("e1", "dgt_revision")
        self.assertIsNone(self.state.delete_armed)

    def test_result_for_unmounted_view_is_dropped(self):
        self.editor.begin("e1", "dgt_revision")
        self.editor.set_value("8")
        self.editor.commit()
        self.state.unmount()
        self.runner.drain()

        self.assertEqual(self.state.find_record("e1")["dgt_revision"], 3)
        self.assertIsNone(self.notifier.active())


class InlineEditClosedVocabularyTests(unittest.TestCase):
    def setUp(self):
        rows = [{QA_ID: "q1", "created_at": "2024-01-01T00:00:00", "dgt_status": "OPN"}]
        self.state, self.store, self.runner, self.notifier, self.editor = _setup(QAQC_HSE, rows)

    def test_status_cycles_through_allowed_codes(self):
        self.editor.begin("q1", "dgt_status")
        self.assertEqual(self.editor.choices(), ["", "OPN", "CLS", "REJ"])
        self.editor.cycle_choice(1)
        self.assertEqual(self.editor.cursor.pending, "CLS")
        self.editor.cycle_choice(-2)
        self.assertEqual(self.editor.cursor.pending, "")

    def test_typing_is_ignored_for_closed_vocabulary(self):
        self.editor.begin("q1", "dgt_status")
        self.editor.type_text("X")
        self.assertEqual(self.editor.cursor.pending, "OPN")

    def test_commit_writes_chosen_code(self):
        self.editor.begin("q1", "dgt_status")
        self.editor.cycle_choice(2)
        self.editor.commit()
        self.runner.drain()
        self.assertEqual(self.state.find_record("q1")["dgt_status"], "REJ")
        self.assertEqual(self.store.calls, [("update_by_key", "q1", {"dgt_status": "REJ"})])

    def test_only_status_is_editable(self):
        self.assertFalse(self.editor.begin("q1", "dgt_docid"))
        self.assertEqual([c.name for c in QAQC_HSE.editable_columns], ["dgt_status"])
