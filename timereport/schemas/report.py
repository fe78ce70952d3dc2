# timereport/schemas/report.py
from pydantic import BaseModel
from datetime import date, datetime
from typing import List

class Kpis(BaseModel):
    # Milliseconds, unlike the hour-based breakdowns below.
    total_duration_ms: float = 0
    distinct_active_employee_count: int = 0
    average_workday_duration_ms: float = 0

class LabeledHours(BaseModel):
    label: str
    hours: float

class ReportResult(BaseModel):
    kpis: Kpis
    hours_by_employee: List[LabeledHours]
    hours_by_location: List[LabeledHours]

class Visit(BaseModel):
    location_name: str
    duration_ms: float
    start_time: datetime
    end_time: datetime

class ProductivityRow(BaseModel):
    employee_id: str
    employee_name: str
    work_date: date
    total_work_ms: float
    location_ms: float
    travel_ms: float
    visits: List[Visit]

class LoggedShift(BaseModel):
    clock_in: datetime
    clock_out: datetime
    duration_ms: float

class DailyLog(BaseModel):
    day: int
    work_date: date
    entries: List[LoggedShift]
    total_duration_ms: float

class EmployeeMonthlyLog(BaseModel):
    employee_id: str
    employee_name: str
    daily_logs: List[DailyLog]
    monthly_total_ms: float
