import logging
import queue
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from record_store import StoreError

logger = logging.getLogger(__name__)


@dataclass
class _Job:
    label: str
    fn: Callable[[], Any]
    on_success: Callable[[Any], None]
    on_error: Callable[[StoreError], None]
    is_live: Optional[Callable[[], bool]]


class RequestRunner:
    """Runs store requests off the UI thread and hands results back to it.

    Workers only compute; outcomes are queued and applied by ``drain()``,
    which the main loop calls every tick. Outcomes whose owner is no longer
    live (``is_live()`` false, e.g. a view torn down by a tab switch) are
    dropped. With ``threaded=False`` the request runs inside ``submit`` but
    is still delivered by ``drain()``.
    """

    def __init__(self, threaded: bool = True):
        self.threaded = threaded
        self._results: "queue.Queue[tuple]" = queue.Queue()
        self._lock = threading.Lock()
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    def submit(self, label, fn, on_success, on_error, is_live=None):
        job = _Job(label, fn, on_success, on_error, is_live)
        with self._lock:
            self._in_flight += 1
        if self.threaded:
            t = threading.Thread(target=self._run, args=(job,), daemon=True)
            t.start()
        else:
            self._run(job)

    def _run(self, job: _Job):
        try:
            result = job.fn()
        except StoreError as e:
            self._results.put((job, False, e))
            return
        except Exception as e:
            logger.exception("request %s crashed", job.label)
            self._results.put((job, False, StoreError(str(e) or e.__class__.__name__)))
            return
        self._results.put((job, True, result))

    def drain(self) -> int:
        delivered = 0
        while True:
            try:
                job, ok, payload = self._results.get_nowait()
            except queue.Empty:
                break
            with self._lock:
                self._in_flight -= 1
            if job.is_live is not None and not job.is_live():
                logger.debug("dropping %s result for unmounted view", job.label)
                continue
            if ok:
                job.on_success(payload)
            else:
                job.on_error(payload)
            delivered += 1
        return delivered
