"""
Schema initialisation.

Creates every table and index registered on the declarative base.
"""
import logging

from sqlalchemy.engine import Engine

from topic_portal.db.base_class import Base

# Import all models so they are registered on Base.metadata
from topic_portal.models.submission import TopicSubmission  # noqa: F401

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready: %s", sorted(Base.metadata.tables))
