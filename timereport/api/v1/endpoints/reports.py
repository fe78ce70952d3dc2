# timereport/api/v1/endpoints/reports.py
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from typing import List, Literal
from datetime import date

from timereport.api.deps import get_repository
from timereport.schemas.chart import ChartGeometry
from timereport.schemas.report import EmployeeMonthlyLog, ProductivityRow, ReportResult
from timereport.services import aggregation, charting, monthly_log, productivity
from timereport.services.formatting import format_duration

router = APIRouter()

# --- Pydantic Schemas ---
class KpiDisplay(BaseModel):
    total_duration: str
    active_employees: int
    average_workday: str

class ReportCharts(BaseModel):
    by_employee: ChartGeometry
    by_location: ChartGeometry

class ReportSummary(BaseModel):
    report: ReportResult
    display: KpiDisplay
    charts: ReportCharts


# --- API Endpoints ---

@router.get("/summary", response_model=ReportSummary)
async def read_report_summary(start_date: date, end_date: date, repository=Depends(get_repository)):
    """ KPIs, hour breakdowns and chart layouts for the inclusive date range. """
    report = await aggregation.build_report(repository, start_date, end_date)
    layout = charting.default_layout()
    return ReportSummary(
        report=report,
        display=KpiDisplay(
            total_duration=format_duration(report.kpis.total_duration_ms),
            active_employees=report.kpis.distinct_active_employee_count,
            average_workday=format_duration(report.kpis.average_workday_duration_ms),
        ),
        charts=ReportCharts(
            by_employee=charting.chart_from_hours(report.hours_by_employee, layout),
            by_location=charting.chart_from_hours(report.hours_by_location, layout),
        ),
    )


@router.get("/charts/{dimension}", response_model=ChartGeometry)
async def read_report_chart(
    dimension: Literal["employees", "locations"],
    start_date: date,
    end_date: date,
    repository=Depends(get_repository),
):
    """ Bar chart layout for one grouping dimension; zero width when nothing was worked. """
    report = await aggregation.build_report(repository, start_date, end_date)
    rows = report.hours_by_employee if dimension == "employees" else report.hours_by_location
    return charting.chart_from_hours(rows, charting.default_layout())


@router.get("/productivity", response_model=List[ProductivityRow])
async def read_productivity_report(start_date: date, end_date: date, repository=Depends(get_repository)):
    """ Per-workday split between time on site and travel time. """
    return await productivity.build_productivity_report(repository, start_date, end_date)


@router.get("/monthly-log", response_model=List[EmployeeMonthlyLog])
async def read_monthly_log(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
    repository=Depends(get_repository),
):
    """ Day-by-day register of completed shifts for each employee who worked that month. """
    return await monthly_log.build_monthly_log(repository, year, month)
