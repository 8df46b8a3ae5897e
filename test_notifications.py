from notifications import ERROR, INFO, SUCCESS, Notifier


class Clock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


def test_success_toast_expires_after_three_seconds():
    clock = Clock()
    notifier = Notifier(clock=clock)
    notifier.show_success("Updated successfully")
    assert notifier.active().kind == SUCCESS
    clock.now += 2.9
    assert notifier.active() is not None
    clock.now += 0.2
    assert notifier.active() is None


def test_error_toast_lasts_longer_and_replaces_previous():
    clock = Clock()
    notifier = Notifier(clock=clock)
    notifier.set_status("hello")
    assert notifier.active().kind == INFO
    notifier.show_error("Failed to fetch data: boom")
    clock.now += 4
    note = notifier.active()
    assert note.kind == ERROR
    assert note.message == "Failed to fetch data: boom"


def test_hide():
    notifier = Notifier(clock=Clock())
    notifier.show_success("x")
    notifier.hide()
    assert notifier.active() is None
