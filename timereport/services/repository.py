# timereport/services/repository.py
# Read-only data sources for the report core: the local database or a remote REST service.
import logging
from typing import Any, List, Type

import httpx
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from timereport.core.config import settings
from timereport.core.errors import DataIntegrityError, TransientFetchError
from timereport.db import models
from timereport.schemas.records import ActivityLog, Employee, Location, TimeEntry

logger = logging.getLogger(__name__)


class SqlReportRepository:
    """Reads records through a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def _all(self, query, schema: Type, what: str) -> List[Any]:
        try:
            rows = query.all()
        except SQLAlchemyError as exc:
            logger.error("Database read of %s failed: %s", what, exc)
            raise TransientFetchError(f"Database read of {what} failed") from exc
        try:
            return [schema.model_validate(row) for row in rows]
        except ValidationError as exc:
            raise DataIntegrityError(f"Malformed {what} row: {exc.errors()[0]['msg']}") from exc

    def list_employees(self) -> List[Employee]:
        query = self.db.query(models.Employee).order_by(models.Employee.first_name, models.Employee.employee_id)
        return self._all(query, Employee, "employees")

    def list_locations(self) -> List[Location]:
        return self._all(self.db.query(models.Location), Location, "locations")

    def list_time_entries(self, employee_id: str) -> List[TimeEntry]:
        query = self.db.query(models.TimeEntry).filter(
            models.TimeEntry.employee_id == employee_id
        ).order_by(models.TimeEntry.clock_in_time)
        return self._all(query, TimeEntry, "time entries")

    def list_activity_logs(self, time_entry_id: str) -> List[ActivityLog]:
        query = self.db.query(models.ActivityLog).filter(
            models.ActivityLog.time_entry_id == time_entry_id
        ).order_by(models.ActivityLog.check_in_time)
        return self._all(query, ActivityLog, "activity logs")


class HttpReportRepository:
    """
    Reads records from a remote REST data source. The caller owns the
    AsyncClient and closes it.
    """

    def __init__(self, client: httpx.AsyncClient, base_url: str = "", timeout: float = None):
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.DATA_SOURCE_TIMEOUT

    async def _get(self, path: str, schema: Type, what: str) -> List[Any]:
        try:
            response = await self.client.get(f"{self.base_url}{path}", timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as http_err:
            logger.error("Data source returned %s for %s", http_err.response.status_code, path)
            raise TransientFetchError(
                f"Data source returned HTTP {http_err.response.status_code} for {what}"
            ) from http_err
        except httpx.RequestError as e:
            logger.error("Data source request for %s failed: %s", path, e)
            raise TransientFetchError(f"Data source request for {what} failed: {e}") from e
        except ValueError as e:
            raise DataIntegrityError(f"Data source sent invalid JSON for {what}") from e

        if not isinstance(payload, list):
            raise DataIntegrityError(f"Expected a list of {what}, got {type(payload).__name__}")
        try:
            return [schema.model_validate(item) for item in payload]
        except ValidationError as exc:
            raise DataIntegrityError(f"Malformed {what} record: {exc.errors()[0]['msg']}") from exc

    async def list_employees(self) -> List[Employee]:
        return await self._get("/employees", Employee, "employees")

    async def list_locations(self) -> List[Location]:
        return await self._get("/locations", Location, "locations")

    async def list_time_entries(self, employee_id: str) -> List[TimeEntry]:
        return await self._get(f"/employees/{employee_id}/time-entries", TimeEntry, "time entries")

    async def list_activity_logs(self, time_entry_id: str) -> List[ActivityLog]:
        return await self._get(f"/time-entries/{time_entry_id}/activity-logs", ActivityLog, "activity logs")
