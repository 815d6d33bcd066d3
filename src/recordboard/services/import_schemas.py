"""Pydantic schemas for CSV import and bulk upload."""

from pydantic import BaseModel, Field

from recordboard.models.record import RecordFlags
from recordboard.models.record_list import CourseType


class CSVRecord(RecordFlags):
    """A validated row from a records CSV file."""

    event_name: str
    time_ms: int = Field(gt=0)
    swimmer_name: str
    record_date: str | None = None
    location: str | None = None
    row_number: int = 0


class CSVParseResult(BaseModel):
    """Parsed rows plus human-readable row errors. Errors never abort a parse."""

    records: list[CSVRecord] = []
    errors: list[str] = []

    def add_error(self, row: int, message: str) -> None:
        self.errors.append(f"Row {row}: {message}")


class BulkImportFile(BaseModel):
    """One file staged for bulk upload. Title and course type may be edited before commit."""

    filename: str
    title: str
    slug: str
    course_type: CourseType = CourseType.LCM
    records: list[CSVRecord] = []
    errors: list[str] = []


class ImportProgress(BaseModel):
    """Reported after each file finishes, successfully or not."""

    current: int
    total: int

    @property
    def done(self) -> bool:
        return self.current >= self.total


class BulkImportResult(BaseModel):
    """Per-file outcome lines of a bulk upload."""

    success: list[str] = []
    failed: list[str] = []

    @property
    def total(self) -> int:
        return len(self.success) + len(self.failed)

    def summary(self) -> str:
        """e.g. "3 of 5 lists created, 2 failed"."""
        text = f"{len(self.success)} of {self.total} lists created"
        if self.failed:
            text += f", {len(self.failed)} failed"
        return text


class CSVImportResult(BaseModel):
    """Result of appending a CSV to an existing list."""

    created_count: int = 0
    errors: list[str] = []
