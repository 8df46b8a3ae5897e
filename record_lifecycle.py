import logging
from typing import Optional

from cell_coercion import coerce_boolean, coerce_decimal, coerce_integer, coerce_text, is_number_text
from table_schema import BOOLEAN, DECIMAL, INTEGER, NUMERIC_KINDS

logger = logging.getLogger(__name__)

NUMBER_ERROR = "Must be a valid number"


class CreateForm:
    """Values, field errors and submission flags of a table's create form."""

    def __init__(self, fields):
        self.fields = tuple(fields)
        self.values: dict = {}
        self.errors: dict[str, str] = {}
        self.is_open = False
        self.saving = False
        self.focus = 0
        self.reset()

    def reset(self):
        self.values = {f.name: (False if f.kind == BOOLEAN else "") for f in self.fields}
        self.errors = {}
        self.focus = 0

    def field(self, name):
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def focused_field(self):
        if not self.fields:
            return None
        return self.fields[self.focus % len(self.fields)]

    def move_focus(self, delta: int):
        if self.fields:
            self.focus = (self.focus + delta) % len(self.fields)

    def set_value(self, name, value):
        f = self.field(name)
        if f is None:
            return
        if f.kind == BOOLEAN:
            self.values[name] = bool(value)
        else:
            self.values[name] = "" if value is None else str(value)
        self.errors.pop(name, None)

    def toggle(self, name):
        f = self.field(name)
        if f is not None and f.kind == BOOLEAN:
            self.values[name] = not self.values.get(name, False)

    def cycle_choice(self, name, delta: int = 1):
        f = self.field(name)
        if f is None or f.allowed_values is None:
            return
        choices = ["", *f.allowed_values]
        current = self.values.get(name, "")
        idx = choices.index(current) if current in choices else 0
        self.values[name] = choices[(idx + delta) % len(choices)]

    def validate(self) -> dict[str, str]:
        errors = {}
        for f in self.fields:
            if f.kind not in NUMERIC_KINDS:
                continue
            text = self.values.get(f.name, "")
            if str(text).strip() and not is_number_text(text):
                errors[f.name] = NUMBER_ERROR
        self.errors = errors
        return errors

    def payload(self) -> dict:
        data = {}
        for f in self.fields:
            raw = self.values.get(f.name)
            if f.kind == BOOLEAN:
                data[f.name] = coerce_boolean(raw) if raw is not None else False
            elif f.kind == INTEGER:
                data[f.name] = coerce_integer(raw)
            elif f.kind == DECIMAL:
                data[f.name] = coerce_decimal(raw)
            else:
                data[f.name] = coerce_text(raw)
        return data


class RecordLifecycleController:
    """Fetch, create (then re-fetch) and two-step delete for one table."""

    def __init__(self, state, store, runner, notifier):
        self.state = state
        self.store = store
        self.runner = runner
        self.notifier = notifier
        self.form = CreateForm(state.schema.create_fields)
        self.pending_deletes: set = set()

    def _submit(self, label, fn, on_success, on_error):
        self.runner.submit(
            f"{label} {self.state.schema.key}",
            fn,
            on_success,
            on_error,
            is_live=self.state.is_live,
        )

    # ---------- fetch ----------
    def refresh(self):
        def on_success(rows):
            self.state.replace_snapshot(rows or [])
            logger.info("fetched %d %s rows", len(self.state.records), self.state.schema.key)

        def on_error(err):
            self.state.loading = False
            self.notifier.show_error(f"Failed to fetch data: {err}")

        self._submit("fetch", self.store.fetch_all, on_success, on_error)

    # ---------- create ----------
    def open_create(self):
        self.state.delete_armed = None
        self.form.reset()
        self.form.is_open = True

    def close_create(self):
        self.form.is_open = False

    def submit_create(self) -> bool:
        if not self.form.is_open or self.form.saving:
            return False
        if self.form.validate():
            return False

        payload = self.form.payload()
        self.form.saving = True
        logger.info("insert into %s", self.state.schema.base_table)

        def on_success(_row):
            self.form.saving = False
            self.form.is_open = False
            self.notifier.show_success("Record created successfully")
            self.refresh()

        def on_error(err):
            self.form.saving = False
            self.notifier.show_error(f"Failed to create record: {err}")

        self._submit("insert", lambda: self.store.insert(payload), on_success, on_error)
        return True

    # ---------- delete ----------
    def arm_delete(self, record_id):
        self.state.editing = None
        self.state.delete_armed = record_id

    def disarm(self):
        self.state.delete_armed = None

    def is_armed(self, record_id) -> bool:
        return record_id is not None and self.state.delete_armed == record_id

    def confirm_delete(self, record_id: Optional[str] = None) -> bool:
        record_id = record_id if record_id is not None else self.state.delete_armed
        if not self.is_armed(record_id) or record_id in self.pending_deletes:
            return False
        self.pending_deletes.add(record_id)
        self.state.delete_armed = None
        logger.info("delete %s from %s", record_id, self.state.schema.base_table)

        def on_success(_):
            self.pending_deletes.discard(record_id)
            self.state.remove_record(record_id)
            self.notifier.show_success("Record deleted successfully")

        def on_error(err):
            self.pending_deletes.discard(record_id)
            self.notifier.show_error(f"Failed to delete record: {err}")

        self._submit("delete", lambda: self.store.delete_by_key(record_id), on_success, on_error)
        return True
