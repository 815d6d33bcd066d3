"""Record list models: one board per course type and gender."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class CourseType(StrEnum):
    """Pool course types."""

    LCM = "LCM"  # Long Course Meters (50m)
    SCM = "SCM"  # Short Course Meters (25m)
    SCY = "SCY"  # Short Course Yards (25y)


class ListGender(StrEnum):
    """Gender a list is scoped to. Lists created before genders existed have none."""

    MALE = "male"
    FEMALE = "female"


class RecordList(BaseModel):
    """An ordered board of records belonging to one club."""

    id: str | None = None
    club_id: str
    title: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    course_type: CourseType = CourseType.LCM
    gender: ListGender | None = None
    created_at: datetime | None = None

    def __str__(self) -> str:
        return f"{self.title} ({self.course_type.value})"


class RecordListCreate(BaseModel):
    """Request to create a record list. Slug defaults to the slugified title."""

    title: str = Field(min_length=1)
    slug: str | None = None
    course_type: CourseType = CourseType.LCM
    gender: ListGender | None = None


class RecordListUpdate(BaseModel):
    """Partial update. The slug is immutable once created."""

    title: str | None = Field(default=None, min_length=1)
    course_type: CourseType | None = None
    gender: ListGender | None = None
