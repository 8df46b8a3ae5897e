import curses
import logging

import predicate_pipeline
from grid_pane import GridPane
from inline_edit import InlineEditController
from pagination import PAGE_SIZE
from record_lifecycle import RecordLifecycleController
from table_state import TableState

logger = logging.getLogger(__name__)

KEY_ENTER = (10, 13, curses.KEY_ENTER)
KEY_BACKSPACE = (curses.KEY_BACKSPACE, 127, 8)
KEY_ESC = 27


class TableView:
    """One mounted table: state, controllers, grid cursor and key handling."""

    def __init__(self, schema, store, runner, notifier, prompt, page_size=PAGE_SIZE):
        self.schema = schema
        self.store = store
        self.runner = runner
        self.notifier = notifier
        self.prompt = prompt

        self.state = TableState(schema, page_size)
        self.grid = GridPane(schema)
        self.editor = InlineEditController(self.state, store, runner, notifier)
        self.lifecycle = RecordLifecycleController(self.state, store, runner, notifier)

    # ---------- lifecycle ----------
    def mount(self):
        logger.info("mount %s", self.schema.key)
        self.state.loading = True
        self.lifecycle.refresh()

    def unmount(self):
        logger.info("unmount %s", self.schema.key)
        self.state.unmount()
        self.lifecycle.close_create()

    def refresh(self):
        self.state.loading = True
        self.lifecycle.refresh()

    # ---------- view helpers ----------
    def page(self):
        page = self.state.view()
        self.grid.clamp_row(len(page.page_records))
        return page

    def current_record(self, page=None):
        page = page if page is not None else self.page()
        if page.page_records.empty:
            return None
        return page.page_records.iloc[self.grid.curr_row].to_dict()

    def current_record_id(self, page=None):
        record = self.current_record(page)
        if record is None:
            return None
        return record.get(self.schema.id_column)

    @property
    def current_column(self):
        return self.schema.columns[self.grid.curr_col]

    @property
    def mode(self) -> str:
        if self.lifecycle.form.is_open:
            return "CREATE"
        if self.state.editing is not None:
            return "EDIT"
        if self.state.delete_armed is not None:
            return "DELETE?"
        return "GRID"

    def status_context(self, page):
        return {
            "notification": self.notifier.active(),
            "title": self.schema.title,
            "mode": self.mode,
            "loading": self.state.loading,
            "page": page,
            "total_records": len(self.state.records),
            "filtered": self.state.is_filtered,
            "filter_count": self.state.active_filter_count,
            "armed": self.state.delete_armed is not None,
        }

    # ---------- keys ----------
    def handle_key(self, ch):
        if ch == -1:
            return
        if self.state.editing is not None:
            self._handle_edit_key(ch)
            return
        if self.state.delete_armed is not None:
            if ch in (ord("x"), ord("y")):
                self.lifecycle.confirm_delete()
                return
            if ch == KEY_ESC:
                self.lifecycle.disarm()
                return
            # any other action disarms and then proceeds
            self.lifecycle.disarm()
        self._handle_grid_key(ch)

    def _move_away(self, ch):
        rows = len(self.page().page_records)
        if ch == curses.KEY_UP:
            self.grid.move_up()
        elif ch == curses.KEY_DOWN:
            self.grid.move_down(rows)
        elif ch == curses.KEY_LEFT:
            self.grid.move_left()
        elif ch in (curses.KEY_RIGHT, 9):
            self.grid.move_right()

    def _handle_edit_key(self, ch):
        editor = self.editor
        if ch in KEY_ENTER:
            editor.commit()
            return
        if ch == KEY_ESC:
            editor.cancel()
            return

        if editor.choices() is not None:
            if ch in (ord(" "), ord("j"), ord("l")):
                editor.cycle_choice(1)
                return
            if ch in (ord("k"), ord("h")):
                editor.cycle_choice(-1)
                return
        elif ch in KEY_BACKSPACE:
            editor.backspace()
            return
        elif ch == 21:  # Ctrl+U
            editor.set_value("")
            return
        elif 32 <= ch <= 126:
            editor.type_text(chr(ch))
            return

        if ch in (curses.KEY_UP, curses.KEY_DOWN, curses.KEY_LEFT, curses.KEY_RIGHT, 9):
            editor.commit()
            self._move_away(ch)

    def _handle_grid_key(self, ch):
        state = self.state
        grid = self.grid
        paginator = state.paginator
        rows = len(self.page().page_records)

        if ch in (ord("h"), curses.KEY_LEFT):
            grid.move_left()
        elif ch in (ord("l"), curses.KEY_RIGHT):
            grid.move_right()
        elif ch in (ord("j"), curses.KEY_DOWN):
            grid.move_down(rows)
        elif ch in (ord("k"), curses.KEY_UP):
            grid.move_up()
        elif ch in (ord("n"), curses.KEY_NPAGE):
            paginator.next_page()
            grid.curr_row = 0
        elif ch in (ord("p"), curses.KEY_PPAGE):
            paginator.prev_page()
            grid.curr_row = 0
        elif ch == ord("g"):
            paginator.first_page()
            grid.curr_row = 0
        elif ch == ord("G"):
            paginator.last_page()
            grid.curr_row = 0
        elif ch == ord("/"):
            self._prompt_search()
        elif ch == ord("f"):
            self._prompt_filter()
        elif ch == ord("z"):
            self._prompt_lookup()
        elif ch == ord("s"):
            self._toggle_sort()
        elif ch == ord("c"):
            state.clear_all()
            grid.curr_row = 0
        elif ch in KEY_ENTER or ch == ord("i"):
            self._begin_edit()
        elif ch == ord("x"):
            record_id = self.current_record_id()
            if record_id is not None:
                self.lifecycle.arm_delete(record_id)
        elif ch == ord("a"):
            if self.schema.create_fields:
                self.lifecycle.open_create()
            else:
                self.notifier.set_status(f"{self.schema.title} has no create form")
        elif ch == ord("r"):
            self.refresh()

    # ---------- actions ----------
    def _begin_edit(self):
        record_id = self.current_record_id()
        if record_id is None:
            return
        self.editor.begin(record_id, self.current_column.name)

    def _toggle_sort(self):
        column = self.current_column
        if not column.sortable:
            self.notifier.set_status(f"'{column.label}' is not sortable")
            return
        self.state.toggle_sort(column.name)

    def _prompt_search(self):
        def on_change(term):
            self.state.set_search_term(term)
            self.grid.curr_row = 0

        self.prompt.start_text(
            "Search",
            self.state.search_term,
            on_submit=on_change,
            on_change=on_change,
        )

    def _prompt_filter(self):
        column = self.current_column
        if not column.filter:
            self.notifier.set_status(f"'{column.label}' has no filter")
            return
        options = predicate_pipeline.options_for(self.state.records, self.schema, column)

        def on_submit(value):
            self.state.set_filter(column.name, value)
            self.grid.curr_row = 0

        self.prompt.start_choice(
            column.label,
            options,
            current=self.state.filters.get(column.name, ""),
            on_submit=on_submit,
            format_option=lambda v: predicate_pipeline.option_label(column, v),
        )

    def _prompt_lookup(self):
        columns = self.schema.lookup_columns
        if not columns:
            self.notifier.set_status(f"{self.schema.title} has no lookup filters")
            return
        labels = {c.name: c.label for c in columns}

        def on_pick_column(name):
            if not name:
                for c in columns:
                    self.state.set_lookup_filter(c.name, "")
                self.grid.curr_row = 0
                return
            self._prompt_lookup_value(self.schema.column(name))

        self.prompt.start_choice(
            "Lookup",
            [c.name for c in columns],
            on_submit=on_pick_column,
            format_option=lambda v: labels.get(v, v),
        )

    def _prompt_lookup_value(self, column):
        options = predicate_pipeline.lookup_options(self.state.records, column.name)

        def on_submit(value):
            self.state.set_lookup_filter(column.name, value)
            self.grid.curr_row = 0

        self.prompt.start_choice(
            column.label,
            options,
            current=self.state.lookup_filters.get(column.name, ""),
            on_submit=on_submit,
        )
