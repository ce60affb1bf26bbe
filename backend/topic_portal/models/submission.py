import uuid
from datetime import datetime, UTC
from typing import Optional

import pytz
from sqlalchemy import Column, String, DateTime, Index
from topic_portal.db.base_class import Base


def utcnow() -> datetime:
    # Stored as naive UTC so SQLite and Postgres round-trip the same value
    return datetime.now(UTC).replace(tzinfo=None)


def start_of_day(timezone: str, now: Optional[datetime] = None) -> datetime:
    """Midnight of the current day in ``timezone``, as naive UTC."""
    tz = pytz.timezone(timezone)
    local = pytz.utc.localize(now or utcnow()).astimezone(tz)
    midnight = tz.localize(datetime(local.year, local.month, local.day))
    return midnight.astimezone(pytz.utc).replace(tzinfo=None)


class TopicSubmission(Base):
    """Project topic submission model

    One student's topic record. Field rules are applied by the schemas layer
    before anything reaches this table; the table itself only guarantees
    matric number uniqueness.

    Attributes:
        id: generated uuid4 hex, immutable
        full_name: student's full name, trimmed
        matric_number: student identifier, trimmed and upper-cased, unique
        discipline: 'linguistics' or 'communication'
        project_topic: proposed topic text, trimmed
        created_at: insertion time
        updated_at: time of the last update
    """
    __tablename__ = "topic_submissions"

    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    full_name = Column(String(100), nullable=False)
    matric_number = Column(String(20), nullable=False, unique=True)
    discipline = Column(String(20), nullable=False)
    project_topic = Column(String(500), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_topic_submissions_name_matric", full_name, matric_number),
        Index("ix_topic_submissions_discipline_created", discipline, created_at.desc()),
    )
