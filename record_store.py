import copy
import json
import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from cell_coercion import to_text

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A failed store request; ``str()`` is the backend's detail message."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self):
        return self.message


def _error_detail(body: bytes, fallback: str) -> str:
    text = body.decode("utf-8", errors="replace").strip() if body else ""
    if not text:
        return fallback
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return text
    if isinstance(payload, dict):
        for key in ("message", "error_description", "error", "hint", "details"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return text


class RecordStore:
    """Row CRUD for one table through a PostgREST endpoint (Supabase REST).

    Reads come from ``schema.source`` (a view for some tables); writes always
    target ``schema.base_table`` by ``schema.id_column``.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        schema,
        timeout: float = 15.0,
        opener: Callable = urlopen,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.schema = schema
        self.timeout = timeout
        self._open = opener

    # ---------- operations ----------
    def fetch_all(self) -> list[dict]:
        query = {"select": "*", "order": f"{self.schema.order_column}.desc"}
        rows = self._request("GET", self.schema.source, query)
        if not isinstance(rows, list):
            raise StoreError("Unexpected response from store")
        return rows

    def insert(self, partial: dict) -> dict:
        rows = self._request(
            "POST",
            self.schema.base_table,
            body=partial,
            prefer="return=representation",
        )
        if isinstance(rows, list) and rows:
            return rows[0]
        return dict(partial)

    def update_by_key(self, record_id, partial: dict) -> None:
        query = {self.schema.id_column: f"eq.{record_id}"}
        self._request("PATCH", self.schema.base_table, query, body=partial, prefer="return=minimal")

    def delete_by_key(self, record_id) -> None:
        query = {self.schema.id_column: f"eq.{record_id}"}
        self._request("DELETE", self.schema.base_table, query, prefer="return=minimal")

    # ---------- transport ----------
    def _url(self, resource: str, query: Optional[dict]) -> str:
        url = f"{self.base_url}/rest/v1/{quote(resource)}"
        if query:
            url += "?" + urlencode(query, safe=",.*")
        return url

    def _request(self, method, resource, query=None, body=None, prefer=None):
        url = self._url(resource, query)
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }
        data = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"
        if prefer:
            headers["Prefer"] = prefer

        logger.debug("%s %s", method, url)
        request = Request(url, data=data, headers=headers, method=method)
        try:
            with self._open(request, timeout=self.timeout) as resp:
                raw = resp.read()
        except HTTPError as e:
            detail = _error_detail(e.read() if e.fp else b"", f"HTTP {e.code}")
            logger.warning("%s %s failed: %s", method, url, detail)
            raise StoreError(detail, status=e.code) from e
        except URLError as e:
            logger.warning("%s %s failed: %s", method, url, e.reason)
            raise StoreError(str(e.reason)) from e
        except (TimeoutError, OSError) as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise StoreError(str(e) or "Request failed") from e

        if not raw:
            return None
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StoreError(f"Invalid response from store: {e}") from e


class MemoryRecordStore:
    """In-process stand-in with the same contract, used by ``--demo``.

    ``fail_next(op, message)`` makes the next ``op`` (``fetch_all``,
    ``insert``, ``update_by_key`` or ``delete_by_key``) raise StoreError.
    """

    def __init__(self, schema, rows=None, id_factory: Optional[Callable[[], str]] = None):
        self.schema = schema
        self.rows: list[dict] = [dict(r) for r in (rows or [])]
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._failures: dict[str, str] = {}
        self._lock = threading.Lock()
        self.calls: list[tuple] = []

    def fail_next(self, op: str, message: str):
        self._failures[op] = message

    def _check(self, op: str, *args):
        self.calls.append((op, *args))
        message = self._failures.pop(op, None)
        if message is not None:
            raise StoreError(message)

    def _find(self, record_id) -> Optional[dict]:
        for row in self.rows:
            if row.get(self.schema.id_column) == record_id:
                return row
        return None

    def fetch_all(self) -> list[dict]:
        with self._lock:
            self._check("fetch_all")
            col = self.schema.order_column
            ordered = sorted(
                self.rows,
                key=lambda r: (r.get(col) is not None, to_text(r.get(col))),
                reverse=True,
            )
            return copy.deepcopy(ordered)

    def insert(self, partial: dict) -> dict:
        with self._lock:
            self._check("insert", dict(partial))
            row = dict(partial)
            row[self.schema.id_column] = self._id_factory()
            if self.schema.order_column == "created_at":
                row["created_at"] = datetime.now(timezone.utc).isoformat()
            self.rows.append(row)
            return dict(row)

    def update_by_key(self, record_id, partial: dict) -> None:
        with self._lock:
            self._check("update_by_key", record_id, dict(partial))
            row = self._find(record_id)
            if row is not None:
                row.update(partial)

    def delete_by_key(self, record_id) -> None:
        with self._lock:
            self._check("delete_by_key", record_id)
            self.rows = [r for r in self.rows if r.get(self.schema.id_column) != record_id]
