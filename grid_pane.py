import curses

from cell_coercion import display_text
from comparator import ASC


def header_label(column, state) -> str:
    """Column label with sort arrow and a ``*`` when a filter is set on it."""
    label = column.label
    if state.sort_field == column.name:
        label += " ^" if state.sort_direction == ASC else " v"
    if state.filters.get(column.name) or state.lookup_filters.get(column.name):
        label += "*"
    return label


def cell_text(column, record, state, id_column) -> str:
    cur = state.editing
    if cur is not None and cur.record_id == record.get(id_column) and cur.field == column.name:
        if column.allowed_values is not None:
            return f"<{cur.pending or ' '}>"
        return f"{cur.pending}_"
    return display_text(column, record.get(column.name))


class GridPane:
    PAIR_CELL_TEXT = 1
    PAIR_ARMED = 2
    PAIR_EDITING = 3
    MAX_COL_WIDTH = 32

    def __init__(self, schema):
        self.schema = schema
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(self.PAIR_CELL_TEXT, curses.COLOR_WHITE, -1)
            curses.init_pair(self.PAIR_ARMED, curses.COLOR_WHITE, curses.COLOR_RED)
            curses.init_pair(self.PAIR_EDITING, curses.COLOR_BLACK, curses.COLOR_YELLOW)
        except curses.error:
            pass

        # curr_row is relative to the current page
        self.curr_row = 0
        self.curr_col = 0
        self.col_offset = 0
        self.rendered_col_widths = {}
        self.visible_rows = None

    @property
    def columns(self):
        return self.schema.columns

    def _attr(self, pair):
        try:
            return curses.color_pair(pair)
        except curses.error:
            return 0

    def column_widths(self, rows, state):
        widths = []
        for col in self.columns:
            max_len = len(header_label(col, state))
            for record in rows:
                max_len = max(max_len, len(cell_text(col, record, state, self.schema.id_column)))
            if col.placeholder:
                max_len = max(max_len, min(len(col.placeholder), 12))
            widths.append(min(self.MAX_COL_WIDTH, max_len + 2))
        return widths

    # ---------- navigation ----------
    def move_left(self):
        self.curr_col = max(0, self.curr_col - 1)

    def move_right(self):
        self.curr_col = min(len(self.columns) - 1, self.curr_col + 1)

    def _reachable(self, row_count):
        if self.visible_rows is None:
            return row_count
        return min(row_count, self.visible_rows)

    def move_down(self, row_count):
        self.curr_row = min(max(0, self._reachable(row_count) - 1), self.curr_row + 1)

    def move_up(self):
        self.curr_row = max(0, self.curr_row - 1)

    def clamp_row(self, row_count):
        self.curr_row = min(max(0, self.curr_row), max(0, self._reachable(row_count) - 1))

    # ---------- rendering ----------
    def draw(self, win, page, state):
        win.erase()
        try:
            win.bkgd(" ", self._attr(self.PAIR_CELL_TEXT))
        except curses.error:
            pass
        h, w = win.getmaxyx()
        # rows live on lines 1 .. h-2
        self.visible_rows = max(1, h - 2)

        rows = [] if state.loading else page.page_records.to_dict("records")
        self.clamp_row(len(rows))

        widths = self.column_widths(rows, state)
        row_w = max(3, len(str(page.end_index)) + 1)
        avail_w = w - (row_w + 1)

        max_cols = 0
        used = 0
        for cw in widths[self.col_offset :]:
            if used + cw + 1 > avail_w:
                break
            used += cw + 1
            max_cols += 1
        max_cols = max(1, max_cols)

        if self.curr_col < self.col_offset:
            self.col_offset = self.curr_col
        elif self.curr_col >= self.col_offset + max_cols:
            self.col_offset = self.curr_col - max_cols + 1
        self.col_offset = max(0, min(self.col_offset, len(self.columns) - 1))

        visible_cols = tuple(range(self.col_offset, min(len(self.columns), self.col_offset + max_cols)))
        self.rendered_col_widths = {}

        # header
        x = row_w + 1
        for c in visible_cols:
            col = self.columns[c]
            eff_cw = min(widths[c], max(1, w - x - 1))
            self.rendered_col_widths[c] = eff_cw
            attr = curses.A_BOLD
            if c == self.curr_col:
                attr |= curses.A_UNDERLINE
            try:
                win.addnstr(0, x, header_label(col, state)[:eff_cw].ljust(eff_cw), eff_cw, attr)
            except curses.error:
                pass
            x += eff_cw + 1

        if state.loading:
            self._draw_message(win, 2, "Loading...")
            win.refresh()
            return
        if page.is_empty:
            self._draw_message(win, 2, "No records found")
            win.refresh()
            return

        # rows
        id_col = self.schema.id_column
        base_attr = self._attr(self.PAIR_CELL_TEXT)
        for i, record in enumerate(rows):
            y = 1 + i
            if y >= h - 1:
                break
            record_id = record.get(id_col)
            armed = state.delete_armed is not None and state.delete_armed == record_id
            label = "DEL?" if armed else str(page.start_index + i + 1)
            try:
                win.addnstr(y, 0, label.rjust(row_w), row_w, curses.A_BOLD if armed else curses.A_DIM)
            except curses.error:
                pass

            x = row_w + 1
            for c in visible_cols:
                col = self.columns[c]
                eff_cw = self.rendered_col_widths.get(c, widths[c])
                text = cell_text(col, record, state, id_col)
                editing = state.editing is not None and state.editing.record_id == record_id and state.editing.field == col.name

                if editing:
                    attr = self._attr(self.PAIR_EDITING) | curses.A_BOLD
                elif armed:
                    attr = self._attr(self.PAIR_ARMED)
                elif i == self.curr_row and c == self.curr_col:
                    attr = base_attr | curses.A_REVERSE
                else:
                    attr = base_attr
                    if col.mutable and i == self.curr_row:
                        attr |= curses.A_UNDERLINE

                cell = text[:eff_cw].ljust(eff_cw)
                try:
                    win.addnstr(y, x, cell, eff_cw, attr)
                except curses.error:
                    pass
                x += eff_cw + 1

        win.refresh()

    def _draw_message(self, win, y, text):
        h, w = win.getmaxyx()
        if y >= h:
            y = max(0, h - 1)
        x = max(0, (w - len(text)) // 2)
        try:
            win.addnstr(y, x, text, max(1, w - x - 1), curses.A_DIM)
        except curses.error:
            pass
