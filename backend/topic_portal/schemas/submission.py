import re
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from topic_portal.core.errors import InvalidDisciplineError
from topic_portal.schemas.response import ListResponse

FULL_NAME_PATTERN = re.compile(r"^[A-Za-z\s]+$")
MATRIC_NUMBER_PATTERN = re.compile(r"^[A-Z0-9/]+$")


class Discipline(str, Enum):
    LINGUISTICS = "linguistics"
    COMMUNICATION = "communication"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_query(cls, value: Optional[str]) -> Optional["Discipline"]:
        """An empty or missing filter means all disciplines."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            raise InvalidDisciplineError() from None


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire and snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Shared input fields
class SubmissionBase(CamelModel):
    """Submission input model

    Used for both creation and update: every field is required, strings are
    trimmed, and the matric number is upper-cased before the field rules run.

    Attributes:
        full_name: 2-100 characters, letters and spaces only
        matric_number: 3-20 characters, uppercase letters, digits and '/'
        discipline: linguistics or communication
        project_topic: 10-500 characters
    """
    full_name: str = Field(..., description="Student full name")
    matric_number: str = Field(..., description="Student matric number")
    discipline: Discipline = Field(..., description="Field of study")
    project_topic: str = Field(..., description="Proposed project topic")

    @model_validator(mode="before")
    @classmethod
    def check_required_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        missing = []
        for name, field in cls.model_fields.items():
            value = data.get(field.alias, data.get(name))
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(field.alias)
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")
        return data

    @field_validator("full_name", mode="before")
    @classmethod
    def validate_full_name(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Full name must be a string")
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Full name must be at least 2 characters")
        if len(value) > 100:
            raise ValueError("Full name cannot exceed 100 characters")
        if not FULL_NAME_PATTERN.match(value):
            raise ValueError("Full name should only contain letters and spaces")
        return value

    @field_validator("matric_number", mode="before")
    @classmethod
    def validate_matric_number(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Matric number must be a string")
        value = value.strip().upper()
        if len(value) < 3:
            raise ValueError("Matric number must be at least 3 characters")
        if len(value) > 20:
            raise ValueError("Matric number cannot exceed 20 characters")
        if not MATRIC_NUMBER_PATTERN.match(value):
            raise ValueError(
                "Matric number should only contain uppercase letters, numbers, and forward slashes"
            )
        return value

    @field_validator("discipline", mode="before")
    @classmethod
    def validate_discipline(cls, value: Any) -> Any:
        if isinstance(value, Discipline):
            return value
        if not isinstance(value, str) or value not in {d.value for d in Discipline}:
            raise ValueError("Discipline must be either linguistics or communication")
        return value

    @field_validator("project_topic", mode="before")
    @classmethod
    def validate_project_topic(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Project topic must be a string")
        value = value.strip()
        if len(value) < 10:
            raise ValueError("Project topic must be at least 10 characters")
        if len(value) > 500:
            raise ValueError("Project topic cannot exceed 500 characters")
        return value


class SubmissionCreate(SubmissionBase):
    pass


class SubmissionUpdate(SubmissionBase):
    """All four fields are overwritten on update."""
    pass


# Response models
class SubmissionCreated(CamelModel):
    id: str
    full_name: str
    matric_number: str


class SubmissionDeleted(SubmissionCreated):
    pass


class SubmissionUpdated(SubmissionCreated):
    discipline: Discipline
    project_topic: str
    updated_at: datetime


class SubmissionInDB(SubmissionCreated):
    """Stored submission record

    Attributes:
        id: generated identifier
        created_at: insertion time (UTC)
        updated_at: time of the last update (UTC)
    """
    discipline: Discipline
    project_topic: str
    created_at: datetime
    updated_at: datetime


class SubmissionStats(CamelModel):
    """Dashboard counters over every stored submission, regardless of filters."""
    total: int = 0
    linguistics: int = 0
    communication: int = 0
    today: int = 0


class SubmissionListResponse(ListResponse[SubmissionInDB]):
    stats: SubmissionStats = Field(default_factory=SubmissionStats)
