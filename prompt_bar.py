import curses
from typing import Callable, Optional


class PromptBar:
    """One-line prompt in the bottom bar: free text or a choice list.

    Text prompts report every change through ``on_change`` (live search) and
    restore the initial value on Esc. Choice prompts cycle with j/k or the
    arrow keys and submit on Enter.
    """

    def __init__(self, set_status_cb: Callable[[str, int], None]):
        self._set_status = set_status_cb
        self._reset()

    def _reset(self):
        self.active = False
        self.kind: Optional[str] = None  # text | choice
        self.label = ""
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0
        self.initial = ""
        self.options: list = []
        self.index = 0
        self.format_option: Callable[[str], str] = lambda v: v
        self.on_submit: Optional[Callable[[str], None]] = None
        self.on_change: Optional[Callable[[str], None]] = None

    # ---------- public API ----------
    def cancel(self):
        self._reset()

    def start_text(self, label, initial="", on_submit=None, on_change=None):
        self._reset()
        self.active = True
        self.kind = "text"
        self.label = label
        self.initial = initial or ""
        self.buffer = self.initial
        self.cursor = len(self.buffer)
        self.on_submit = on_submit
        self.on_change = on_change

    def start_choice(self, label, options, current="", on_submit=None, format_option=None):
        self._reset()
        self.active = True
        self.kind = "choice"
        self.label = label
        self.options = ["", *[o for o in options if o != ""]]
        self.index = self.options.index(current) if current in self.options else 0
        self.on_submit = on_submit
        if format_option is not None:
            self.format_option = format_option

    @property
    def selected(self) -> str:
        if self.kind == "choice":
            return self.options[self.index] if self.options else ""
        return self.buffer

    def handle_key(self, ch):
        if not self.active:
            return

        if ch in (10, 13, curses.KEY_ENTER):
            value = self.selected
            cb = self.on_submit
            self._reset()
            if cb is not None:
                cb(value)
            return

        if ch == 27:  # Esc
            if self.kind == "text" and self.on_change is not None and self.buffer != self.initial:
                self.on_change(self.initial)
            self._reset()
            self._set_status("Canceled", 2)
            return

        if self.kind == "choice":
            self._handle_choice_key(ch)
        else:
            self._handle_text_key(ch)

    def _handle_choice_key(self, ch):
        if not self.options:
            return
        if ch in (ord("j"), curses.KEY_DOWN, curses.KEY_RIGHT, ord("l"), 9):
            self.index = (self.index + 1) % len(self.options)
        elif ch in (ord("k"), curses.KEY_UP, curses.KEY_LEFT, ord("h"), curses.KEY_BTAB):
            self.index = (self.index - 1) % len(self.options)
        elif ch == curses.KEY_HOME:
            self.index = 0
        elif ch == curses.KEY_END:
            self.index = len(self.options) - 1

    def _handle_text_key(self, ch):
        before = self.buffer
        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if self.cursor > 0:
                self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
                self.cursor -= 1
        elif ch == curses.KEY_LEFT:
            self.cursor = max(0, self.cursor - 1)
        elif ch == curses.KEY_RIGHT:
            self.cursor = min(len(self.buffer), self.cursor + 1)
        elif ch == curses.KEY_HOME:
            self.cursor = 0
        elif ch == curses.KEY_END:
            self.cursor = len(self.buffer)
        elif 32 <= ch <= 126:
            self.buffer = self.buffer[: self.cursor] + chr(ch) + self.buffer[self.cursor :]
            self.cursor += 1
        if self.buffer != before and self.on_change is not None:
            self.on_change(self.buffer)

    def draw(self, win):
        if not self.active:
            return
        prompt = f"{self.label}: "
        h, w = win.getmaxyx()
        text_w = max(1, w - len(prompt) - 1)

        if self.kind == "choice":
            shown = []
            for i, opt in enumerate(self.options):
                text = self.format_option(opt) if opt else "All"
                shown.append(f"[{text}]" if i == self.index else text)
            visible = " ".join(shown)
            try:
                win.addnstr(0, 0, prompt, len(prompt))
                win.addnstr(0, len(prompt), visible, text_w)
            except curses.error:
                pass
            win.refresh()
            return

        if self.cursor < self.hscroll:
            self.hscroll = self.cursor
        elif self.cursor > self.hscroll + text_w:
            self.hscroll = self.cursor - text_w

        visible = self.buffer[self.hscroll : self.hscroll + text_w]
        try:
            win.addnstr(0, 0, prompt, len(prompt))
            win.addnstr(0, len(prompt), visible, text_w)
            win.move(0, len(prompt) + (self.cursor - self.hscroll))
        except curses.error:
            pass
        win.refresh()
