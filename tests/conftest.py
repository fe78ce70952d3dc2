"""
conftest.py — Shared pytest fixtures for the time report test suite.

Most tests drive the report core with an in-memory repository. API and SQL
adapter tests use an in-memory SQLite database shared through StaticPool.
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from timereport.db import models
from timereport.schemas.records import ActivityLog, Employee, Location, TimeEntry


# ---------------------------------------------------------------------------
# Record builders
# ---------------------------------------------------------------------------

def make_entry(entry_id, employee_id, clock_in, hours, status="completed"):
    """A time entry starting at ``clock_in`` lasting ``hours`` (no clock-out unless completed)."""
    clock_out = clock_in + timedelta(hours=hours) if status == "completed" else None
    return TimeEntry(
        entry_id=entry_id,
        employee_id=employee_id,
        clock_in_time=clock_in,
        clock_out_time=clock_out,
        status=status,
    )


def make_log(entry_id, location_id, check_in, hours=None):
    """An activity log; ``hours=None`` leaves it checked in."""
    return ActivityLog(
        time_entry_id=entry_id,
        location_id=location_id,
        check_in_time=check_in,
        check_out_time=check_in + timedelta(hours=hours) if hours is not None else None,
    )


class InMemoryRepository:
    """Sync data source that records every fetch it serves."""

    def __init__(self, employees=(), locations=(), entries=(), logs=()):
        self.employees = list(employees)
        self.locations = list(locations)
        self.entries = list(entries)
        self.logs = list(logs)
        self.calls = []

    def list_employees(self):
        self.calls.append(("employees", None))
        return list(self.employees)

    def list_locations(self):
        self.calls.append(("locations", None))
        return list(self.locations)

    def list_time_entries(self, employee_id):
        self.calls.append(("time_entries", employee_id))
        return [e for e in self.entries if e.employee_id == employee_id]

    def list_activity_logs(self, time_entry_id):
        self.calls.append(("activity_logs", time_entry_id))
        return [l for l in self.logs if l.time_entry_id == time_entry_id]

    def fetched(self, kind):
        return [key for call_kind, key in self.calls if call_kind == kind]


# ---------------------------------------------------------------------------
# Core fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def employees():
    return [
        Employee(employee_id="E1", first_name="Ana", last_name="Ruiz"),
        Employee(employee_id="E2", first_name="Luis", last_name="Gil"),
    ]


@pytest.fixture
def locations():
    return [
        Location(location_id="L1", name="Hotel Sol"),
        Location(location_id="L2", name="Hotel Mar"),
    ]


@pytest.fixture
def january_repository(employees, locations):
    """
    E1: 8h on Jan 1 with 3h at L1 and 2h at L2 (plus one open log).
    E2: 4h on Jan 2 with 1h at L1, and a running entry on Jan 3.
    """
    return InMemoryRepository(
        employees=employees,
        locations=locations,
        entries=[
            make_entry("T1", "E1", datetime(2023, 1, 1, 9), 8),
            make_entry("T2", "E2", datetime(2023, 1, 2, 9), 4),
            make_entry("T3", "E2", datetime(2023, 1, 3, 9), 0, status="running"),
        ],
        logs=[
            make_log("T1", "L1", datetime(2023, 1, 1, 9), 3),
            make_log("T1", "L2", datetime(2023, 1, 1, 13), 2),
            make_log("T1", "L2", datetime(2023, 1, 1, 16)),
            make_log("T2", "L1", datetime(2023, 1, 2, 10), 1),
        ],
    )


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    models.Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def seeded_db(db_session):
    """Same data as ``january_repository``, stored in SQLite."""
    db_session.add_all([
        models.Employee(employee_id="E1", first_name="Ana", last_name="Ruiz"),
        models.Employee(employee_id="E2", first_name="Luis", last_name="Gil"),
        models.Location(location_id="L1", name="Hotel Sol"),
        models.Location(location_id="L2", name="Hotel Mar"),
    ])
    db_session.flush()
    db_session.add_all([
        models.TimeEntry(entry_id="T1", employee_id="E1", status="completed",
                         clock_in_time=datetime(2023, 1, 1, 9), clock_out_time=datetime(2023, 1, 1, 17)),
        models.TimeEntry(entry_id="T2", employee_id="E2", status="completed",
                         clock_in_time=datetime(2023, 1, 2, 9), clock_out_time=datetime(2023, 1, 2, 13)),
        models.TimeEntry(entry_id="T3", employee_id="E2", status="running",
                         clock_in_time=datetime(2023, 1, 3, 9)),
    ])
    db_session.flush()
    db_session.add_all([
        models.ActivityLog(activity_id="A1", time_entry_id="T1", location_id="L1",
                           check_in_time=datetime(2023, 1, 1, 9), check_out_time=datetime(2023, 1, 1, 12)),
        models.ActivityLog(activity_id="A2", time_entry_id="T1", location_id="L2",
                           check_in_time=datetime(2023, 1, 1, 13), check_out_time=datetime(2023, 1, 1, 15)),
        models.ActivityLog(activity_id="A3", time_entry_id="T1", location_id="L2",
                           check_in_time=datetime(2023, 1, 1, 16)),
        models.ActivityLog(activity_id="A4", time_entry_id="T2", location_id="L1",
                           check_in_time=datetime(2023, 1, 2, 10), check_out_time=datetime(2023, 1, 2, 11)),
    ])
    db_session.commit()
    return db_session
