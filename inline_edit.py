import logging

from cell_coercion import coerce_cell_value, edit_text
from table_state import EditingCursor

logger = logging.getLogger(__name__)


class InlineEditController:
    """Single-cell editing: Idle -> Editing(record, field, pending) -> Idle.

    Commit writes one field through the store and, once the store accepts
    it, patches that field of that record in the snapshot. Failures leave
    the snapshot alone. The controller returns to Idle as soon as the
    request is issued; nothing is retried.
    """

    def __init__(self, state, store, runner, notifier):
        self.state = state
        self.store = store
        self.runner = runner
        self.notifier = notifier

    @property
    def cursor(self):
        return self.state.editing

    @property
    def editing(self) -> bool:
        return self.state.editing is not None

    def is_editing(self, record_id, field) -> bool:
        cur = self.state.editing
        return cur is not None and cur.record_id == record_id and cur.field == field

    def begin(self, record_id, field) -> bool:
        column = self.state.schema.column(field)
        if column is None or not column.mutable:
            label = column.label if column else field
            self.notifier.set_status(f"'{label}' is read-only")
            return False
        record = self.state.find_record(record_id)
        if record is None:
            return False
        if self.editing:
            self.commit()
        self.state.delete_armed = None
        self.state.editing = EditingCursor(record_id, field, edit_text(column, record.get(field)))
        return True

    # ---------- pending value ----------
    def set_value(self, text: str):
        cur = self.state.editing
        if cur is None:
            return
        column = self.state.schema.column(cur.field)
        text = "" if text is None else str(text)
        if column.uppercase:
            text = text.upper()
        cur.pending = text

    def type_text(self, text: str):
        cur = self.state.editing
        if cur is None:
            return
        if self.choices() is not None:
            return
        self.set_value(cur.pending + text)

    def backspace(self):
        cur = self.state.editing
        if cur is None or self.choices() is not None:
            return
        cur.pending = cur.pending[:-1]

    def choices(self):
        cur = self.state.editing
        if cur is None:
            return None
        column = self.state.schema.column(cur.field)
        if column.allowed_values is None:
            return None
        return ["", *column.allowed_values]

    def cycle_choice(self, delta: int = 1):
        choices = self.choices()
        if not choices:
            return
        cur = self.state.editing
        try:
            idx = choices.index(cur.pending)
        except ValueError:
            idx = 0
        cur.pending = choices[(idx + delta) % len(choices)]

    # ---------- transitions ----------
    def cancel(self):
        self.state.editing = None

    def commit(self) -> bool:
        cur = self.state.editing
        if cur is None:
            return False
        self.state.editing = None

        column = self.state.schema.column(cur.field)
        try:
            value = coerce_cell_value(column, cur.pending)
        except ValueError:
            self.notifier.show_error(f"Invalid value for column '{column.label}'")
            return False

        record_id, field = cur.record_id, cur.field
        payload = {field: value}
        logger.info("update %s %s=%r", record_id, field, value)

        def on_success(_):
            self.state.patch_record(record_id, field, value)
            self.notifier.show_success("Updated successfully")

        def on_error(err):
            self.notifier.show_error(f"Failed to update: {err}")

        self.runner.submit(
            f"update {self.state.schema.key}",
            lambda: self.store.update_by_key(record_id, payload),
            on_success,
            on_error,
            is_live=self.state.is_live,
        )
        return True
