"""Swim record models.

A record is the best time for one event in one list. When a record is broken
the old row stays in the list as history: `is_current=False` and
`superseded_by` pointing at the record that replaced it.
"""

from datetime import datetime

from pydantic import BaseModel, Field, computed_field

from recordboard.time_codec import format_ms_to_time

FLAG_NAMES: tuple[str, ...] = (
    "is_world_record",
    "is_national",
    "is_current_national",
    "is_provincial",
    "is_current_provincial",
    "is_split",
    "is_relay_split",
    "is_new",
)


class RecordFlags(BaseModel):
    """Independent annotations shown next to a record."""

    is_world_record: bool = False
    is_national: bool = False
    is_current_national: bool = False
    is_provincial: bool = False
    is_current_provincial: bool = False
    is_split: bool = False
    is_relay_split: bool = False
    is_new: bool = False


class SwimRecord(RecordFlags):
    """A record row, current or historical."""

    id: str | None = None
    record_list_id: str | None = None

    event_name: str
    time_ms: int = Field(default=0, ge=0)  # 0 = no time recorded
    swimmer_name: str = ""
    record_date: str | None = None  # "YYYY", "YYYY-MM" or "YYYY-MM-DD"
    location: str | None = None
    sort_order: int = 0

    is_current: bool = True
    superseded_by: str | None = None

    created_at: datetime | None = None

    @computed_field
    @property
    def time_formatted(self) -> str:
        """Display time, empty when no time is recorded."""
        return format_ms_to_time(self.time_ms)

    @property
    def flags(self) -> RecordFlags:
        return RecordFlags(**{name: getattr(self, name) for name in FLAG_NAMES})

    @property
    def is_history(self) -> bool:
        return not self.is_current

    def __str__(self) -> str:
        return f"{self.event_name}: {self.time_formatted or '-'} {self.swimmer_name}".strip()


class EditableRecord(RecordFlags):
    """A row submitted from the list editor.

    Rows without an id are inserted. A new row with `breaks_record_id` set
    replaces that (current) record when saved.
    """

    id: str | None = None
    event_name: str
    time_ms: int = Field(default=0, ge=0)
    swimmer_name: str = ""
    record_date: str | None = None
    location: str | None = None
    sort_order: int | None = None
    breaks_record_id: str | None = None


class RecordReplacement(RecordFlags):
    """Values for the record that replaces a broken one. Event and position are inherited."""

    time_ms: int = Field(default=0, ge=0)
    swimmer_name: str = ""
    record_date: str | None = None
    location: str | None = None


class RecordWithHistory(BaseModel):
    """A current record and the records it superseded, most recent first."""

    record: SwimRecord
    history: list[SwimRecord] = []
