import curses

from table_schema import BOOLEAN


class CreateFormView:
    """Modal overlay for a table's create form; owns keys while open."""

    def __init__(self, layout, lifecycle):
        self.layout = layout
        self.lifecycle = lifecycle
        self.win = None

    @property
    def form(self):
        return self.lifecycle.form

    @property
    def visible(self):
        return self.form.is_open

    def open(self):
        self.lifecycle.open_create()

    def close(self):
        self.lifecycle.close_create()
        self.win = None

    def handle_key(self, ch):
        form = self.form
        if not form.is_open or ch == -1:
            return
        if form.saving:
            return

        if ch == 27:  # Esc
            self.close()
            return
        if ch in (10, 13, curses.KEY_ENTER):
            self.lifecycle.submit_create()
            return
        if ch in (9, curses.KEY_DOWN):
            form.move_focus(1)
            return
        if ch in (curses.KEY_BTAB, curses.KEY_UP):
            form.move_focus(-1)
            return

        field = form.focused_field
        if field is None:
            return

        if field.kind == BOOLEAN:
            if ch in (ord(" "), curses.KEY_LEFT, curses.KEY_RIGHT):
                form.toggle(field.name)
            return

        if field.allowed_values is not None:
            if ch in (ord(" "), curses.KEY_RIGHT):
                form.cycle_choice(field.name, 1)
            elif ch == curses.KEY_LEFT:
                form.cycle_choice(field.name, -1)
            return

        current = form.values.get(field.name, "")
        if ch in (curses.KEY_BACKSPACE, 127, 8):
            form.set_value(field.name, current[:-1])
        elif ch == 21:  # Ctrl+U
            form.set_value(field.name, "")
        elif 32 <= ch <= 126:
            form.set_value(field.name, current + chr(ch))

    # ---------- rendering ----------
    def lines(self):
        form = self.form
        out = []
        label_w = max((len(f.label) for f in form.fields), default=0) + 2
        for idx, field in enumerate(form.fields):
            value = form.values.get(field.name)
            if field.kind == BOOLEAN:
                shown = "[x]" if value else "[ ]"
            elif field.allowed_values is not None:
                shown = f"< {value or '-'} >"
            else:
                shown = value or ""
                if not shown and field.placeholder:
                    shown = f"({field.placeholder})"
            marker = ">" if idx == form.focus else " "
            line = f"{marker} {field.label.ljust(label_w)}{shown}"
            err = form.errors.get(field.name)
            if err:
                line += f"  !! {err}"
            out.append(line)
        return out

    def draw(self):
        if not self.visible:
            return
        form = self.form
        title = " Add record "
        footer = " Saving... " if form.saving else " Enter save | Tab next | Esc cancel "
        body = self.lines()

        h = min(self.layout.H, len(body) + 4)
        w = min(self.layout.W, max(60, max((len(l) for l in body), default=0) + 4))
        y = max(0, (self.layout.table_h - h) // 2)
        x = max(0, (self.layout.W - w) // 2)
        self.win = curses.newwin(h, w, y, x)
        self.win.leaveok(True)

        win = self.win
        win.erase()
        win.box()
        try:
            win.addnstr(0, 2, title, w - 4, curses.A_BOLD)
        except curses.error:
            pass
        for i, line in enumerate(body[: max(0, h - 4)]):
            attr = curses.A_REVERSE if i == form.focus else 0
            try:
                win.addnstr(1 + i, 1, line.ljust(w - 2), w - 2, attr)
            except curses.error:
                pass
        try:
            win.addnstr(h - 2, 1, footer, w - 2, curses.A_DIM)
        except curses.error:
            pass
        win.refresh()
