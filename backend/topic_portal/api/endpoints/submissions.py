import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from topic_portal.config.dependency_injection import get_db, get_discipline_filter
from topic_portal.core.config import settings
from topic_portal.core.errors import SubmissionError
from topic_portal.core.security import get_current_admin
from topic_portal.crud import submission as crud_submission
from topic_portal.models.submission import start_of_day
from topic_portal.schemas.response import StandardResponse
from topic_portal.schemas.submission import (
    Discipline,
    SubmissionCreate,
    SubmissionCreated,
    SubmissionDeleted,
    SubmissionInDB,
    SubmissionListResponse,
    SubmissionStats,
    SubmissionUpdate,
    SubmissionUpdated,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=StandardResponse[SubmissionCreated], status_code=status.HTTP_201_CREATED)
def create_submission(
    submission_in: SubmissionCreate,
    db: Session = Depends(get_db),
):
    """
    Accept a student's topic submission

    Args:
        submission_in: validated and normalised submission fields
        db: database session

    Returns:
        StandardResponse[SubmissionCreated]: id, full name and matric number of the new record
    """
    try:
        created = crud_submission.create(db, obj_in=submission_in)
    except SubmissionError:
        raise
    except Exception:
        logger.exception("Submission error")
        raise HTTPException(status_code=500, detail="An error occurred while submitting your topic")

    return StandardResponse(
        message="Topic submitted successfully!",
        data=SubmissionCreated.model_validate(created),
    )


@router.get(
    "",
    response_model=SubmissionListResponse,
    dependencies=[Depends(get_current_admin)],
)
def list_submissions(
    discipline: Optional[Discipline] = Depends(get_discipline_filter),
    search: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """
    List submissions newest first, optionally filtered by discipline and a search term.

    The response also carries dashboard counters (total, per discipline and
    today in the report time zone) computed over every stored submission.
    """
    try:
        items = crud_submission.list_submissions(db, discipline=discipline, search=search)
        stats = crud_submission.get_stats(db, today_start=start_of_day(settings.REPORT_TIMEZONE))
    except SubmissionError:
        raise
    except Exception:
        logger.exception("Fetch error")
        raise HTTPException(status_code=500, detail="Failed to fetch submissions")

    data = [SubmissionInDB.model_validate(item) for item in items]
    return SubmissionListResponse(data=data, count=len(data), stats=SubmissionStats(**stats))


@router.put(
    "/{submission_id}",
    response_model=StandardResponse[SubmissionUpdated],
    dependencies=[Depends(get_current_admin)],
)
def update_submission(
    submission_id: str,
    submission_in: SubmissionUpdate,
    db: Session = Depends(get_db),
):
    try:
        updated = crud_submission.update_submission(db, obj_id=submission_id, obj_in=submission_in)
    except SubmissionError:
        raise
    except Exception:
        logger.exception("Update error")
        raise HTTPException(status_code=500, detail="Failed to update submission")

    return StandardResponse(
        message="Submission updated successfully!",
        data=SubmissionUpdated.model_validate(updated),
    )


@router.delete(
    "/{submission_id}",
    response_model=StandardResponse[SubmissionDeleted],
    dependencies=[Depends(get_current_admin)],
)
def delete_submission(
    submission_id: str,
    db: Session = Depends(get_db),
):
    try:
        deleted = crud_submission.remove_submission(db, obj_id=submission_id)
    except SubmissionError:
        raise
    except Exception:
        logger.exception("Delete error")
        raise HTTPException(status_code=500, detail="Failed to delete submission")

    return StandardResponse(
        message="Submission deleted successfully",
        data=SubmissionDeleted.model_validate(deleted),
    )
