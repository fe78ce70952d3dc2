# timereport/services/aggregation.py
"""
Report aggregation over employees, their time entries and the activity logs
recorded inside each entry.

Fetchers are called one at a time: time entries once per employee, activity
logs once per qualifying entry. A fetcher may be a plain function or a
coroutine function. Any failure aborts the whole report.
"""
import inspect
import logging
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, AsyncIterator, Callable, Dict, Iterable, List, Tuple, Type, TypeVar, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ValidationError

from timereport.core.config import settings
from timereport.core.errors import DataIntegrityError, InvalidRangeError, ReportError, TransientFetchError
from timereport.schemas.records import ActivityLog, Employee, Location, TimeEntry
from timereport.schemas.report import Kpis, LabeledHours, ReportResult
from timereport.services.formatting import ms_to_hours

logger = logging.getLogger(__name__)

END_OF_DAY = time(23, 59, 59, 999000)
UNKNOWN_LABEL = "Unknown"

DateInput = Union[date, str, None]
Fetcher = Callable[..., Any]
RecordT = TypeVar("RecordT", bound=BaseModel)


# --- Date range ---

def _parse_date(value: DateInput, name: str) -> date:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidRangeError(f"{name} is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise InvalidRangeError(f"{name} '{value}' is not a valid YYYY-MM-DD date") from None


def resolve_range(start_date: DateInput, end_date: DateInput) -> Tuple[datetime, datetime]:
    """Returns (start 00:00:00.000, end 23:59:59.999) for two calendar dates."""
    start = _parse_date(start_date, "start_date")
    end = _parse_date(end_date, "end_date")
    if start > end:
        raise InvalidRangeError(f"start_date {start} is after end_date {end}")
    return datetime.combine(start, time.min), datetime.combine(end, END_OF_DAY)


def report_timezone(tz: Union[tzinfo, str, None] = None) -> tzinfo:
    tz = tz if tz is not None else settings.REPORT_TIMEZONE
    if isinstance(tz, str):
        try:
            return ZoneInfo(tz)
        except (ZoneInfoNotFoundError, ValueError):
            raise InvalidRangeError(f"Unknown report timezone '{tz}'") from None
    return tz


def to_local(ts: datetime, tz: tzinfo) -> datetime:
    # Naive timestamps are already in report-local time.
    if ts.tzinfo is None:
        return ts
    return ts.astimezone(tz).replace(tzinfo=None)


def elapsed_ms(start: datetime, end: datetime, tz: tzinfo) -> float:
    if (start.tzinfo is None) != (end.tzinfo is None):
        start, end = to_local(start, tz), to_local(end, tz)
    return (end - start) / timedelta(milliseconds=1)


# --- Fetching ---

async def call_source(fetcher: Fetcher, *args, what: str) -> Any:
    """Calls a sync or async data-source function, mapping failures to TransientFetchError."""
    try:
        result = fetcher(*args)
        if inspect.isawaitable(result):
            result = await result
        # Lazy results (generators, cursors) can fail while being read.
        result = list(result) if result is not None else []
    except ReportError:
        raise
    except Exception as exc:
        logger.error("Fetching %s failed: %s", what, exc)
        raise TransientFetchError(f"Could not fetch {what}: {exc}") from exc
    return result


def coerce_records(items: Iterable[Any], model: Type[RecordT], what: str) -> List[RecordT]:
    records = []
    for item in items or []:
        if isinstance(item, model):
            records.append(item)
            continue
        try:
            records.append(model.model_validate(item, from_attributes=True))
        except ValidationError as exc:
            raise DataIntegrityError(f"Malformed {what} record: {exc.errors()[0]['msg']} ({item!r})") from exc
    return records


async def fetch_records(fetcher: Fetcher, key: str, model: Type[RecordT], what: str) -> List[RecordT]:
    items = await call_source(fetcher, key, what=f"{what} for '{key}'")
    return coerce_records(items, model, what)


# --- Filtering ---

def is_qualifying(entry: TimeEntry, start: datetime, end: datetime, tz: tzinfo) -> bool:
    if not entry.is_completed:
        return False
    return start <= to_local(entry.clock_in_time, tz) <= end


def entry_duration_ms(entry: TimeEntry, tz: tzinfo) -> float:
    duration = elapsed_ms(entry.clock_in_time, entry.clock_out_time, tz)
    if duration < 0:
        raise DataIntegrityError(
            f"Time entry '{entry.entry_id}' clocks out at {entry.clock_out_time} "
            f"before clocking in at {entry.clock_in_time}"
        )
    return duration


def activity_duration_ms(log: ActivityLog, tz: tzinfo) -> float:
    duration = elapsed_ms(log.check_in_time, log.check_out_time, tz)
    if duration < 0:
        raise DataIntegrityError(
            f"Activity log at location '{log.location_id}' for entry '{log.time_entry_id}' "
            f"checks out before it checks in"
        )
    return duration


async def iter_qualifying_entries(
    employees: List[Employee],
    start: datetime,
    end: datetime,
    fetch_time_entries: Fetcher,
    tz: tzinfo,
) -> AsyncIterator[Tuple[Employee, TimeEntry, float]]:
    """Yields (employee, entry, duration_ms) for every qualifying entry, employees in input order."""
    for employee in employees:
        entries = await fetch_records(fetch_time_entries, employee.employee_id, TimeEntry, "time entries")
        for entry in entries:
            if is_qualifying(entry, start, end, tz):
                yield employee, entry, entry_duration_ms(entry, tz)


async def completed_activity(
    fetch_activity_logs: Fetcher, entry: TimeEntry, tz: tzinfo
) -> List[Tuple[ActivityLog, float]]:
    """Activity logs of an entry that have been checked out, with their durations."""
    logs = await fetch_records(fetch_activity_logs, entry.entry_id, ActivityLog, "activity logs")
    return [(log, activity_duration_ms(log, tz)) for log in logs if log.check_out_time is not None]


# --- Aggregation ---

def _materialize(totals: Dict[str, float], labels: Dict[str, str], dimension: str) -> List[LabeledHours]:
    rows = []
    for key, ms in totals.items():
        label = labels.get(key)
        if not label:
            logger.warning("No %s label for id '%s'; labelling it %s", dimension, key, UNKNOWN_LABEL)
            label = UNKNOWN_LABEL
        rows.append(LabeledHours(label=label, hours=ms_to_hours(ms)))
    # sorted() is stable, so equal hours keep first-seen order.
    return sorted(rows, key=lambda row: row.hours, reverse=True)


async def generate_report(
    employees: Iterable[Any],
    locations: Iterable[Any],
    start_date: DateInput,
    end_date: DateInput,
    fetch_time_entries: Fetcher,
    fetch_activity_logs: Fetcher,
    tz: Union[tzinfo, str, None] = None,
) -> ReportResult:
    """
    Builds the KPIs and the per-employee and per-location hour breakdowns
    for the inclusive calendar range [start_date, end_date].

    Raises InvalidRangeError before any fetch, TransientFetchError when a
    fetcher fails and DataIntegrityError for malformed records.
    """
    start, end = resolve_range(start_date, end_date)
    zone = report_timezone(tz)
    employees = coerce_records(employees, Employee, "employee")
    locations = coerce_records(locations, Location, "location")
    logger.info("Generating report", extra={"start_date": start, "end_date": end})

    total_ms = 0.0
    active_employees = set()
    by_employee: Dict[str, float] = {}
    by_location: Dict[str, float] = {}

    async for employee, entry, duration in iter_qualifying_entries(employees, start, end, fetch_time_entries, zone):
        active_employees.add(employee.employee_id)
        total_ms += duration
        by_employee[employee.employee_id] = by_employee.get(employee.employee_id, 0) + duration

        for log, activity_ms in await completed_activity(fetch_activity_logs, entry, zone):
            by_location[log.location_id] = by_location.get(log.location_id, 0) + activity_ms

    active_count = len(active_employees)
    kpis = Kpis(
        total_duration_ms=total_ms,
        distinct_active_employee_count=active_count,
        average_workday_duration_ms=total_ms / active_count if active_count > 0 else 0,
    )
    logger.info(
        "Report ready: %d active employees, %d locations", active_count, len(by_location),
        extra={"duration_ms": total_ms},
    )
    return ReportResult(
        kpis=kpis,
        hours_by_employee=_materialize(
            by_employee, {e.employee_id: e.first_name for e in employees}, "employee"
        ),
        hours_by_location=_materialize(
            by_location, {l.location_id: l.name for l in locations}, "location"
        ),
    )


async def build_report(repository, start_date: DateInput, end_date: DateInput, tz=None) -> ReportResult:
    """Validates the range, loads employees and locations, then aggregates."""
    resolve_range(start_date, end_date)
    employees = await call_source(repository.list_employees, what="employees")
    locations = await call_source(repository.list_locations, what="locations")
    return await generate_report(
        employees, locations, start_date, end_date,
        repository.list_time_entries, repository.list_activity_logs, tz=tz,
    )
