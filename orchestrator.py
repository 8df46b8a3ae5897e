import curses
import logging

from create_form_view import CreateFormView
from overlay import OverlayView
from prompt_bar import PromptBar
from screen_layout import ScreenLayout
from status_bar import render_status
from table_view import TableView
from tables import TABLES

logger = logging.getLogger(__name__)


class TableTabs:
    """Which table is mounted. Switching unmounts the old view and mounts a fresh one."""

    def __init__(self, stores, runner, notifier, prompt, tables=TABLES):
        self.tables = tuple(tables)
        self.stores = stores
        self.runner = runner
        self.notifier = notifier
        self.prompt = prompt
        self.index = 0
        self.view = None

    def index_of(self, key):
        for i, schema in enumerate(self.tables):
            if schema.key == key:
                return i
        return 0

    def switch(self, index):
        index %= len(self.tables)
        if self.view is not None and index == self.index:
            return self.view
        if self.view is not None:
            self.view.unmount()
        if self.prompt.active:
            self.prompt.cancel()
        self.index = index
        schema = self.tables[index]
        self.view = TableView(schema, self.stores[schema.key], self.runner, self.notifier, self.prompt)
        self.view.mount()
        return self.view

    def next(self, delta=1):
        return self.switch(self.index + delta)

    def labels(self):
        return [f"{i + 1}:{s.title}" for i, s in enumerate(self.tables)]


class Orchestrator:
    def __init__(self, stdscr, stores, runner, notifier, initial_table="engineering"):
        self.stdscr = stdscr
        curses.curs_set(0)
        curses.raw()
        self.stdscr.nodelay(False)
        self.stdscr.timeout(100)

        self.layout = ScreenLayout(stdscr)
        self.runner = runner
        self.notifier = notifier

        # ---- overlay ----
        self.overlay = OverlayView(self.layout)

        # ---- prompt ----
        self.prompt = PromptBar(self._set_status)

        # ---- tabs ----
        self.tabs = TableTabs(stores, runner, notifier, self.prompt)
        self.tabs.switch(self.tabs.index_of(initial_table))
        self.form_view = CreateFormView(self.layout, self.tabs.view.lifecycle)

    @property
    def view(self):
        return self.tabs.view

    def _set_status(self, msg, seconds=3):
        self.notifier.set_status(msg, seconds)

    def _switch_tab(self, index):
        view = self.tabs.switch(index)
        self.form_view = CreateFormView(self.layout, view.lifecycle)

    # ---------------- UI ----------------

    def _draw_tabs(self):
        win = self.layout.tabs_win
        win.erase()
        x = 0
        _, w = win.getmaxyx()
        for i, label in enumerate(self.tabs.labels()):
            text = f" {label} "
            attr = curses.A_REVERSE | curses.A_BOLD if i == self.tabs.index else curses.A_DIM
            if x >= w - 1:
                break
            try:
                win.addnstr(0, x, text, max(1, w - x - 1), attr)
            except curses.error:
                pass
            x += len(text) + 1
        win.refresh()

    def redraw(self):
        try:
            curses.curs_set(1 if (self.prompt.active and self.prompt.kind == "text") else 0)
        except curses.error:
            pass

        if self.overlay.visible:
            self.overlay.draw()
            return

        view = self.view
        page = view.page()

        self._draw_tabs()
        view.grid.draw(self.layout.table_win, page, view.state)

        sw = self.layout.status_win
        sw.erase()
        _, w = sw.getmaxyx()
        text = render_status(view.status_context(page), w)
        attr = curses.A_REVERSE
        note = self.notifier.active()
        if note is not None and note.kind == "error":
            attr |= curses.A_BOLD
        try:
            sw.addnstr(0, 0, text, max(1, w - 1), attr)
        except curses.error:
            pass
        sw.refresh()

        pw = self.layout.prompt_win
        pw.erase()
        if self.prompt.active:
            self.prompt.draw(pw)
        else:
            hint = " ? help  / search  f filter  a add  x delete  Enter edit"
            if view.state.search_term:
                hint = f" search: {view.state.search_term}"
            try:
                pw.addnstr(0, 0, hint, max(1, w - 1), curses.A_DIM)
            except curses.error:
                pass
            pw.refresh()

        if self.form_view.visible:
            self.form_view.draw()

    def handle_key(self, ch):
        """Route one key. Returns False when the app should quit."""
        if ch in (3, 24):  # Ctrl+C / Ctrl+X
            return False

        if self.overlay.visible:
            self.overlay.handle_key(ch)
            return True

        if self.prompt.active:
            self.prompt.handle_key(ch)
            return True

        if self.form_view.visible:
            self.form_view.handle_key(ch)
            return True

        if ch == -1:
            return True

        view = self.view
        idle = view.state.editing is None and view.state.delete_armed is None
        if idle:
            if ord("1") <= ch <= ord(str(len(self.tabs.tables))):
                self._switch_tab(ch - ord("1"))
                return True
            if ch == 9:
                self._switch_tab(self.tabs.index + 1)
                return True
            if ch == curses.KEY_BTAB:
                self._switch_tab(self.tabs.index - 1)
                return True
            if ch == ord("?"):
                self.overlay.open_help()
                return True

        view.handle_key(ch)
        return True

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()
        self.redraw()

        while True:
            ch = self.stdscr.getch()
            self.runner.drain()
            if not self.handle_key(ch):
                break
            self.redraw()

        self.view.unmount()
