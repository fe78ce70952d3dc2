"""
test_repository.py — Data source adapters.

  - SqlReportRepository against an in-memory SQLite database
  - HttpReportRepository against httpx.MockTransport
"""

import asyncio
from datetime import datetime

import httpx
import pytest
from sqlalchemy import text

from timereport.core.errors import DataIntegrityError, TransientFetchError
from timereport.services.aggregation import build_report
from timereport.services.repository import HttpReportRepository, SqlReportRepository

HOUR_MS = 3_600_000

SOURCE = {
    "/employees": [{"employee_id": "E1", "first_name": "Ana"}],
    "/locations": [{"location_id": "L1", "name": "Hotel Sol"}],
    "/employees/E1/time-entries": [
        {"entry_id": "T1", "employee_id": "E1", "status": "completed",
         "clock_in_time": "2023-01-01T09:00:00Z", "clock_out_time": "2023-01-01T17:00:00Z"},
    ],
    "/time-entries/T1/activity-logs": [
        {"activity_id": "A1", "time_entry_id": "T1", "location_id": "L1",
         "check_in_time": "2023-01-01T10:00:00Z", "check_out_time": "2023-01-01T12:00:00Z"},
    ],
}


def run_http(handler, call):
    """Runs ``call(repository)`` with a repository wired to a mock transport."""
    async def _main():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await call(HttpReportRepository(client, "http://source/"))
    return asyncio.run(_main())


def serve(overrides=None):
    routes = dict(SOURCE, **(overrides or {}))

    def handler(request):
        if request.url.path not in routes:
            return httpx.Response(404, json={"detail": "not found"})
        return httpx.Response(200, json=routes[request.url.path])
    return handler


# ===========================================================================
# SQL
# ===========================================================================

class TestSqlReportRepository:

    def test_lists_records(self, seeded_db):
        repo = SqlReportRepository(seeded_db)
        assert [e.first_name for e in repo.list_employees()] == ["Ana", "Luis"]
        assert {l.name for l in repo.list_locations()} == {"Hotel Sol", "Hotel Mar"}
        assert [e.entry_id for e in repo.list_time_entries("E2")] == ["T2", "T3"]
        assert [l.activity_id for l in repo.list_activity_logs("T1")] == ["A1", "A2", "A3"]

    def test_report_from_database(self, seeded_db):
        result = asyncio.run(build_report(SqlReportRepository(seeded_db), "2023-01-01", "2023-01-31", tz="UTC"))
        assert result.kpis.total_duration_ms == 12 * HOUR_MS
        assert [(r.label, r.hours) for r in result.hours_by_location] == [("Hotel Sol", 4.0), ("Hotel Mar", 2.0)]

    def test_database_error_is_transient(self, seeded_db):
        seeded_db.execute(text("DROP TABLE activity_logs"))
        with pytest.raises(TransientFetchError):
            SqlReportRepository(seeded_db).list_activity_logs("T1")


# ===========================================================================
# HTTP
# ===========================================================================

class TestHttpReportRepository:

    def test_report_from_remote_source(self):
        result = run_http(serve(), lambda repo: build_report(repo, "2023-01-01", "2023-01-31", tz="UTC"))
        assert result.kpis.total_duration_ms == 8 * HOUR_MS
        assert [(r.label, r.hours) for r in result.hours_by_location] == [("Hotel Sol", 2.0)]
        assert result.hours_by_employee[0].label == "Ana"

    def test_server_error_is_transient(self):
        def handler(request):
            return httpx.Response(503)

        with pytest.raises(TransientFetchError, match="503"):
            run_http(handler, lambda repo: repo.list_employees())

    def test_connection_error_is_transient(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransientFetchError):
            run_http(handler, lambda repo: repo.list_locations())

    def test_non_list_payload_is_integrity_error(self):
        with pytest.raises(DataIntegrityError):
            run_http(serve({"/locations": {"items": []}}), lambda repo: repo.list_locations())

    def test_invalid_record_is_integrity_error(self):
        bad = {"/employees/E1/time-entries": [{"entry_id": "T1", "status": "completed"}]}
        with pytest.raises(DataIntegrityError):
            run_http(serve(bad), lambda repo: repo.list_time_entries("E1"))

    def test_timestamps_parsed_as_aware(self):
        entries = run_http(serve(), lambda repo: repo.list_time_entries("E1"))
        assert entries[0].clock_in_time.utcoffset() is not None
        assert entries[0].clock_in_time.replace(tzinfo=None) == datetime(2023, 1, 1, 9)
