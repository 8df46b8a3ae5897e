from datetime import datetime, timedelta, timezone

from record_store import MemoryRecordStore
from tables import ACTUAL_RESOURCES, DYNAMIC_ACTUAL_DATA, ENGINEERING, QAQC_HSE, TABLES

_BASE = datetime(2024, 1, 8, 9, 0, tzinfo=timezone.utc)


def _ts(days):
    return (_BASE + timedelta(days=days)).isoformat()


class DemoDataInitializer:
    """Deterministic sample rows for ``--demo`` runs against the in-memory store."""

    def __init__(self, rows_per_table=40):
        self.rows_per_table = rows_per_table

    def rows(self, schema):
        builder = {
            ENGINEERING.key: self._engineering,
            QAQC_HSE.key: self._qaqc,
            ACTUAL_RESOURCES.key: self._resources,
            DYNAMIC_ACTUAL_DATA.key: self._dynamic,
        }[schema.key]
        return [builder(i) for i in range(self.rows_per_table)]

    def stores(self):
        return {schema.key: MemoryRecordStore(schema, self.rows(schema)) for schema in TABLES}

    # ---------- per-table rows ----------
    def _engineering(self, i):
        statuses = ("A", "B", "C", "D", "UR", "E", None)
        return {
            ENGINEERING.id_column: f"eng-{i:04d}",
            "created_at": _ts(i),
            "dgt_dtfid": f"DTF-{100 + i}",
            "dgt_transmittalref": f"TR-{(i % 9) + 1:03d}",
            "dgt_transmittalsubject": f"Transmittal package {i + 1}",
            "dgt_discipline": (i % 5) + 1,
            "dgt_transmittaltype": (i % 3) + 1,
            "dgt_actualsubmissiondate": None if i % 6 == 0 else _ts(i * 7),
            "dgt_actualreturndate": None if i % 4 == 0 else _ts(i * 7 + 14),
            "dgt_revision": i % 4,
            "dgt_status": statuses[i % len(statuses)],
            "is_long_lead": i % 10 == 0,
        }

    def _qaqc(self, i):
        statuses = ("OPN", "CLS", "REJ")
        return {
            QAQC_HSE.id_column: f"qa-{i:04d}",
            "created_at": _ts(i),
            "dgt_docid": f"QA-{200 + i}",
            "dgt_docref": f"REF-{(i % 7) + 1:02d}",
            "dgt_documentsubject": f"Inspection report {i + 1}",
            "dgt_discipline": (i % 4) + 1,
            "dgt_documenttype": ("ITP", "NCR", "HSE")[i % 3],
            "dgt_submissiondate": _ts(i * 5),
            "dgt_responsedate": None if i % 3 == 0 else _ts(i * 5 + 10),
            "dgt_revision": i % 3,
            "dgt_status": statuses[i % len(statuses)],
        }

    def _resources(self, i):
        return {
            ACTUAL_RESOURCES.id_column: f"res-{i:04d}",
            "created_at": _ts(i),
            "resource_name": ("Welder", "Rigger", "Electrician", "Fitter", "Scaffolder")[i % 5],
            "dgt_resourcediscipline": (i % 4) + 1,
            "dgt_resourcetype": (i % 2) + 1,
            "dgt_resourcecount": 2 + (i * 3) % 17,
            "dgt_sequential": i + 1,
        }

    def _dynamic(self, i):
        started = i % 3 != 0
        return {
            DYNAMIC_ACTUAL_DATA.id_column: f"dyn-{i:04d}",
            "dgt_activityid": f"A{1000 + i * 10}",
            "dgt_activityname": f"Activity {i + 1}",
            "dgt_plannedearlystart": _ts(i * 4),
            "dgt_plannedearlyfinish": _ts(i * 4 + 20),
            "dgt_projectid": f"P6-{(i % 2) + 1}",
            "dgt_actualstart": _ts(i * 4 + 1) if started else None,
            "dgt_actualfinish": _ts(i * 4 + 25) if started and i % 2 == 0 else None,
            "dgt_pctcomplete": round((i % 11) / 10, 2),
            "zone_code": f"Z{(i % 3) + 1}",
            "level_code": f"L{(i % 4) + 1:02d}",
            "trade_code": ("CIV", "MEC", "ELE")[i % 3],
        }
