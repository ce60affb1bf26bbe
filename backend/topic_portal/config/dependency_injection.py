from typing import Generator, Optional

from fastapi import Request
from sqlalchemy.orm import Session

from topic_portal.core.config import settings
from topic_portal.db.database import Database
from topic_portal.schemas.submission import Discipline
from topic_portal.services.export_service import ExportService


def create_database() -> Database:
    """
    Build the storage client from settings; the application opens it at startup
    """
    return Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Yield one session per request from the process-wide storage client
    """
    yield from get_database(request).get_db()


def get_discipline_filter(discipline: Optional[str] = None) -> Optional[Discipline]:
    """
    Parse the optional discipline query parameter; an empty value means all disciplines
    """
    return Discipline.from_query(discipline)


_export_service_instance = None

def get_export_service() -> ExportService:
    """
    Get the ExportService singleton
    """
    global _export_service_instance
    if _export_service_instance is None:
        _export_service_instance = ExportService(timezone=settings.REPORT_TIMEZONE)
    return _export_service_instance
