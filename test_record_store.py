import io
import json
import unittest
from urllib.error import HTTPError, URLError

from record_store import MemoryRecordStore, RecordStore, StoreError
from tables import DYNAMIC_ACTUAL_DATA, ENGINEERING


class FakeResponse:
    def __init__(self, body=b""):
        self._body = body

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class RecordingOpener:
    def __init__(self, body=b"", error=None):
        self.body = body
        self.error = error
        self.requests = []
        self.timeouts = []

    def __call__(self, request, timeout=None):
        self.requests.append(request)
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        return FakeResponse(self.body)


def _store(schema, opener):
    return RecordStore("https://demo.supabase.co/", "anon-key", schema, timeout=7, opener=opener)


class RecordStoreWireTests(unittest.TestCase):
    def test_fetch_all_reads_source_newest_first(self):
        opener = RecordingOpener(json.dumps([{"a": 1}]).encode())
        rows = _store(ENGINEERING, opener).fetch_all()

        self.assertEqual(rows, [{"a": 1}])
        req = opener.requests[0]
        self.assertEqual(req.get_method(), "GET")
        self.assertEqual(
            req.full_url,
            "https://demo.supabase.co/rest/v1/dbp6_bd041engineering?select=*&order=created_at.desc",
        )
        self.assertEqual(req.get_header("Apikey"), "anon-key")
        self.assertEqual(req.get_header("Authorization"), "Bearer anon-key")
        self.assertEqual(opener.timeouts, [7])

    def test_dynamic_table_reads_view_but_writes_base_table(self):
        opener = RecordingOpener(b"[]")
        store = _store(DYNAMIC_ACTUAL_DATA, opener)
        store.fetch_all()
        store.update_by_key("d1", {"dgt_pctcomplete": 0.5})

        self.assertIn("/rest/v1/v_dynamic_actuals_with_filters?", opener.requests[0].full_url)
        self.assertEqual(
            opener.requests[1].full_url,
            "https://demo.supabase.co/rest/v1/dgt_dbp6bd06dynamicactualdata"
            "?dgt_dbp6bd06dynamicactualdataid=eq.d1",
        )

    def test_update_sends_single_field_patch(self):
        opener = RecordingOpener(b"")
        _store(ENGINEERING, opener).update_by_key("e1", {"dgt_revision": None})

        req = opener.requests[0]
        self.assertEqual(req.get_method(), "PATCH")
        self.assertEqual(json.loads(req.data.decode()), {"dgt_revision": None})
        self.assertEqual(req.get_header("Content-type"), "application/json")
        self.assertTrue(req.full_url.endswith("?dgt_dbp6bd041engineeringid=eq.e1"))

    def test_insert_asks_for_representation(self):
        opener = RecordingOpener(json.dumps([{"id": "x", "dgt_dtfid": "D"}]).encode())
        row = _store(ENGINEERING, opener).insert({"dgt_dtfid": "D"})

        req = opener.requests[0]
        self.assertEqual(req.get_method(), "POST")
        self.assertEqual(req.get_header("Prefer"), "return=representation")
        self.assertEqual(row, {"id": "x", "dgt_dtfid": "D"})

    def test_delete_targets_one_key(self):
        opener = RecordingOpener(b"")
        _store(ENGINEERING, opener).delete_by_key("e9")
        req = opener.requests[0]
        self.assertEqual(req.get_method(), "DELETE")
        self.assertTrue(req.full_url.endswith("?dgt_dbp6bd041engineeringid=eq.e9"))

    def test_http_error_surfaces_backend_message(self):
        body = json.dumps({"message": "new row violates row-level security policy"}).encode()
        error = HTTPError("https://x", 403, "Forbidden", {}, io.BytesIO(body))
        store = _store(ENGINEERING, RecordingOpener(error=error))

        with self.assertRaises(StoreError) as ctx:
            store.update_by_key("e1", {"dgt_status": "A"})
        self.assertEqual(str(ctx.exception), "new row violates row-level security policy")
        self.assertEqual(ctx.exception.status, 403)

    def test_http_error_without_body_falls_back_to_status(self):
        error = HTTPError("https://x", 500, "Server Error", {}, io.BytesIO(b""))
        store = _store(ENGINEERING, RecordingOpener(error=error))
        with self.assertRaises(StoreError) as ctx:
            store.fetch_all()
        self.assertEqual(str(ctx.exception), "HTTP 500")

    def test_network_error_becomes_store_error(self):
        store = _store(ENGINEERING, RecordingOpener(error=URLError("connection refused")))
        with self.assertRaises(StoreError) as ctx:
            store.fetch_all()
        self.assertEqual(str(ctx.exception), "connection refused")

    def test_non_list_fetch_response_is_an_error(self):
        store = _store(ENGINEERING, RecordingOpener(b'{"rows": []}'))
        with self.assertRaises(StoreError):
            store.fetch_all()


class MemoryRecordStoreTests(unittest.TestCase):
    def test_fail_next_applies_once(self):
        store = MemoryRecordStore(ENGINEERING, [])
        store.fail_next("fetch_all", "boom")
        with self.assertRaises(StoreError):
            store.fetch_all()
        self.assertEqual(store.fetch_all(), [])

    def test_fetch_returns_copies(self):
        store = MemoryRecordStore(ENGINEERING, [{ENGINEERING.id_column: "e1", "created_at": "x"}])
        rows = store.fetch_all()
        rows[0]["created_at"] = "changed"
        self.assertEqual(store.rows[0]["created_at"], "x")
