# timereport/api/deps.py
from fastapi import Depends
from sqlalchemy.orm import Session
import httpx

from timereport.core.config import settings
from timereport.db import session
from timereport.services.repository import HttpReportRepository, SqlReportRepository

def get_sql_repository(db: Session = Depends(session.get_db)) -> SqlReportRepository:
    return SqlReportRepository(db)

async def get_http_repository():
    async with httpx.AsyncClient() as client:
        yield HttpReportRepository(client, settings.DATA_SOURCE_URL)

def select_repository_dependency(data_source: str):
    """The repository dependency for DATA_SOURCE; only the database source opens a session."""
    return get_http_repository if data_source == "http" else get_sql_repository

get_repository = select_repository_dependency(settings.DATA_SOURCE)
