# timereport/services/productivity.py
# Splits each qualifying workday into time spent at locations and time travelling between them.
import logging
from typing import Any, Iterable, List

from timereport.schemas.records import Employee, Location
from timereport.schemas.report import ProductivityRow, Visit
from timereport.services.aggregation import (
    UNKNOWN_LABEL,
    call_source,
    coerce_records,
    completed_activity,
    iter_qualifying_entries,
    report_timezone,
    resolve_range,
    to_local,
)

logger = logging.getLogger(__name__)


def full_name(employee: Employee) -> str:
    return " ".join(part for part in (employee.first_name, employee.last_name) if part)


async def generate_productivity_report(
    employees: Iterable[Any],
    locations: Iterable[Any],
    start_date,
    end_date,
    fetch_time_entries,
    fetch_activity_logs,
    tz=None,
) -> List[ProductivityRow]:
    """One row per qualifying time entry, newest workday first."""
    start, end = resolve_range(start_date, end_date)
    zone = report_timezone(tz)
    employees = coerce_records(employees, Employee, "employee")
    location_names = {l.location_id: l.name for l in coerce_records(locations, Location, "location")}

    rows = []
    async for employee, entry, total_ms in iter_qualifying_entries(employees, start, end, fetch_time_entries, zone):
        visits = []
        location_ms = 0.0
        for log, duration in await completed_activity(fetch_activity_logs, entry, zone):
            location_ms += duration
            name = location_names.get(log.location_id)
            if not name:
                logger.warning("No location found for id '%s'; labelling it %s", log.location_id, UNKNOWN_LABEL)
                name = UNKNOWN_LABEL
            visits.append(Visit(
                location_name=name,
                duration_ms=duration,
                start_time=log.check_in_time,
                end_time=log.check_out_time,
            ))

        rows.append(ProductivityRow(
            employee_id=employee.employee_id,
            employee_name=full_name(employee),
            work_date=to_local(entry.clock_in_time, zone).date(),
            total_work_ms=total_ms,
            location_ms=location_ms,
            travel_ms=max(0.0, total_ms - location_ms),
            visits=visits,
        ))

    rows.sort(key=lambda row: row.work_date, reverse=True)
    return rows


async def build_productivity_report(repository, start_date, end_date, tz=None) -> List[ProductivityRow]:
    resolve_range(start_date, end_date)
    employees = await call_source(repository.list_employees, what="employees")
    locations = await call_source(repository.list_locations, what="locations")
    return await generate_productivity_report(
        employees, locations, start_date, end_date,
        repository.list_time_entries, repository.list_activity_logs, tz=tz,
    )
