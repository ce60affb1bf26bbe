import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from topic_portal.core.errors import (
    DuplicateMatricNumberError,
    DuplicateNameError,
    SubmissionNotFoundError,
)
from topic_portal.crud.base import CRUDBase, SortDirection
from topic_portal.models.submission import TopicSubmission, utcnow
from topic_portal.schemas.submission import Discipline, SubmissionCreate, SubmissionUpdate

logger = logging.getLogger(__name__)

NEWEST_FIRST = [("created_at", SortDirection.DESC)]


class CRUDSubmission(CRUDBase[TopicSubmission, SubmissionCreate, SubmissionUpdate]):
    def get_by_matric_number(self, db: Session, *, matric_number: str) -> Optional[TopicSubmission]:
        return (
            db.query(self.model)
            .filter(self.model.matric_number == matric_number.strip().upper())
            .first()
        )

    def get_by_full_name(self, db: Session, *, full_name: str) -> Optional[TopicSubmission]:
        """Case-insensitive exact match on the full name."""
        return (
            db.query(self.model)
            .filter(func.lower(self.model.full_name) == full_name.strip().lower())
            .first()
        )

    def list_submissions(
        self,
        db: Session,
        *,
        discipline: Optional[Discipline] = None,
        search: Optional[str] = None,
    ) -> List[TopicSubmission]:
        """
        Fetch submissions newest first.

        Args:
            db: database session
            discipline: only return this discipline when given
            search: case-insensitive substring matched against name, matric number and topic

        Returns:
            List[TopicSubmission]: matching submissions, ordered by created_at descending
        """
        filters = {"discipline": discipline.value if discipline else None}
        query = self._filtered(db, filters)
        term = (search or "").strip().lower()
        if term:
            query = query.filter(
                or_(
                    func.lower(self.model.full_name).contains(term, autoescape=True),
                    func.lower(self.model.matric_number).contains(term, autoescape=True),
                    func.lower(self.model.project_topic).contains(term, autoescape=True),
                )
            )
        return self._sorted(query, NEWEST_FIRST).all()

    def get_stats(self, db: Session, *, today_start: datetime) -> Dict[str, int]:
        """
        Count every stored submission, per discipline, and those created since ``today_start``.
        """
        stats = {"total": 0, "today": 0}
        stats.update({discipline.value: 0 for discipline in Discipline})
        rows = (
            db.query(self.model.discipline, func.count(self.model.id))
            .group_by(self.model.discipline)
            .all()
        )
        for discipline, count in rows:
            stats[discipline] = count
            stats["total"] += count
        stats["today"] = (
            db.query(func.count(self.model.id))
            .filter(self.model.created_at >= today_start)
            .scalar()
        )
        return stats

    def translate_integrity_error(self, exc: IntegrityError) -> Optional[Exception]:
        # Only the matric number constraint maps to a domain error
        if "matric_number" in str(exc.orig):
            return DuplicateMatricNumberError()
        return None

    def create(self, db: Session, *, obj_in: SubmissionCreate) -> TopicSubmission:
        """
        Insert a submission after the duplicate-name check.

        The name check and the insert are separate statements, so two
        concurrent creations with the same name can both succeed. Matric
        number uniqueness is always enforced by the unique index.

        Raises:
            DuplicateNameError: a submission with the same name (ignoring case) exists
            DuplicateMatricNumberError: the matric number is already used
        """
        if self.get_by_full_name(db, full_name=obj_in.full_name) is not None:
            logger.warning("Rejected duplicate full name for matric %s", obj_in.matric_number)
            raise DuplicateNameError()
        try:
            db_obj = super().create(db, obj_in=obj_in)
        except DuplicateMatricNumberError:
            logger.warning("Rejected duplicate matric number %s", obj_in.matric_number)
            raise
        logger.info("Created submission %s (%s)", db_obj.id, db_obj.matric_number)
        return db_obj

    def update_submission(self, db: Session, *, obj_id: str, obj_in: SubmissionUpdate) -> TopicSubmission:
        """
        Overwrite all four fields of a submission and refresh updated_at.

        The full-name uniqueness rule only applies on creation and is not
        re-checked here.

        Raises:
            SubmissionNotFoundError: no submission has this id
            DuplicateMatricNumberError: another submission owns the matric number
        """
        db_obj = self.get(db, obj_id)
        if db_obj is None:
            raise SubmissionNotFoundError()

        owner = self.get_by_matric_number(db, matric_number=obj_in.matric_number)
        if owner is not None and owner.id != db_obj.id:
            logger.warning("Rejected update of %s: matric %s belongs to %s", obj_id, obj_in.matric_number, owner.id)
            raise DuplicateMatricNumberError("A submission with this matric number already exists")

        update_data = obj_in.model_dump(mode="json")
        update_data["updated_at"] = utcnow()
        db_obj = self.update(db, db_obj=db_obj, obj_in=update_data)
        logger.info("Updated submission %s (%s)", db_obj.id, db_obj.matric_number)
        return db_obj

    def remove_submission(self, db: Session, *, obj_id: str) -> TopicSubmission:
        """
        Permanently delete a submission.

        Raises:
            SubmissionNotFoundError: no submission has this id
        """
        db_obj = self.remove(db, obj_id=obj_id)
        if db_obj is None:
            raise SubmissionNotFoundError()
        logger.info("Deleted submission %s (%s)", db_obj.id, db_obj.matric_number)
        return db_obj


# Instantiate and expose to the API layer
submission = CRUDSubmission(TopicSubmission)
