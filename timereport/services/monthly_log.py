# timereport/services/monthly_log.py
# Monthly register of worked shifts: one row per calendar day for every employee who worked that month.
import calendar
import logging
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List

from timereport.core.errors import InvalidRangeError
from timereport.schemas.records import Employee
from timereport.schemas.report import DailyLog, EmployeeMonthlyLog, LoggedShift
from timereport.services.aggregation import (
    call_source,
    coerce_records,
    iter_qualifying_entries,
    report_timezone,
    resolve_range,
    to_local,
)
from timereport.services.productivity import full_name

logger = logging.getLogger(__name__)


def month_bounds(year: int, month: int):
    """First and last calendar day of the month."""
    if not 1 <= month <= 12:
        raise InvalidRangeError(f"month {month} is not between 1 and 12")
    if not date.min.year <= year <= date.max.year:
        raise InvalidRangeError(f"year {year} is out of range")
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


async def generate_monthly_log(
    employees: Iterable[Any],
    year: int,
    month: int,
    fetch_time_entries,
    tz=None,
) -> List[EmployeeMonthlyLog]:
    """
    Completed shifts grouped by day for each employee, covering every day of
    the month. Employees without a completed shift that month are left out.
    """
    first_day, last_day = month_bounds(year, month)
    start, end = resolve_range(first_day, last_day)
    zone = report_timezone(tz)
    employees = coerce_records(employees, Employee, "employee")

    shifts: Dict[str, Dict[int, List[LoggedShift]]] = {}
    async for employee, entry, duration in iter_qualifying_entries(employees, start, end, fetch_time_entries, zone):
        clock_in = to_local(entry.clock_in_time, zone)
        shifts.setdefault(employee.employee_id, {}).setdefault(clock_in.day, []).append(LoggedShift(
            clock_in=entry.clock_in_time,
            clock_out=entry.clock_out_time,
            duration_ms=duration,
        ))

    logs = []
    for employee in employees:
        by_day = shifts.get(employee.employee_id)
        if not by_day:
            continue
        daily_logs = []
        current = first_day
        while current <= last_day:
            entries = by_day.get(current.day, [])
            daily_logs.append(DailyLog(
                day=current.day,
                work_date=current,
                entries=entries,
                total_duration_ms=sum(shift.duration_ms for shift in entries),
            ))
            current += timedelta(days=1)
        logs.append(EmployeeMonthlyLog(
            employee_id=employee.employee_id,
            employee_name=full_name(employee),
            daily_logs=daily_logs,
            monthly_total_ms=sum(day.total_duration_ms for day in daily_logs),
        ))

    logger.info("Monthly log for %04d-%02d: %d employees", year, month, len(logs))
    return logs


async def build_monthly_log(repository, year: int, month: int, tz=None) -> List[EmployeeMonthlyLog]:
    month_bounds(year, month)
    employees = await call_source(repository.list_employees, what="employees")
    return await generate_monthly_log(employees, year, month, repository.list_time_entries, tz=tz)
