import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from topic_portal.config.dependency_injection import get_db, get_discipline_filter, get_export_service
from topic_portal.core.errors import SubmissionError
from topic_portal.core.security import get_current_admin
from topic_portal.crud import submission as crud_submission
from topic_portal.schemas.submission import Discipline
from topic_portal.services.export_service import ExportFormat, ExportService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", dependencies=[Depends(get_current_admin)])
def export_submissions(
    export_format: str = Query("csv", alias="format"),
    discipline: Optional[Discipline] = Depends(get_discipline_filter),
    db: Session = Depends(get_db),
    export_service: ExportService = Depends(get_export_service),
):
    """
    Download submissions as a CSV table or a Word report.

    The format is checked before any query runs; an empty result is a 404.
    """
    fmt = ExportFormat.parse(export_format)
    try:
        items = crud_submission.list_submissions(db, discipline=discipline)
        export_file = export_service.export(items, fmt, discipline)
    except SubmissionError:
        raise
    except Exception:
        logger.exception("Export error")
        raise HTTPException(status_code=500, detail="Failed to export submissions")

    return StreamingResponse(
        iter([export_file.content]),
        media_type=export_file.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export_file.filename}"'},
    )
