import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

SUCCESS = "success"
ERROR = "error"
INFO = "info"


@dataclass
class Notification:
    kind: str
    message: str
    until: float


class Notifier:
    """Transient toast shown in the status bar until it expires."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self.current: Optional[Notification] = None

    def show(self, kind: str, message: str, seconds: float = 4):
        self.current = Notification(kind, message, self._clock() + seconds)
        if kind == ERROR:
            logger.warning("%s", message)

    def show_success(self, message: str, seconds: float = 3):
        self.show(SUCCESS, message, seconds)

    def show_error(self, message: str, seconds: float = 5):
        self.show(ERROR, message, seconds)

    def set_status(self, message: str, seconds: float = 3):
        self.show(INFO, message, seconds)

    def hide(self):
        self.current = None

    def active(self) -> Optional[Notification]:
        if self.current is None:
            return None
        if self._clock() >= self.current.until:
            self.current = None
            return None
        return self.current
