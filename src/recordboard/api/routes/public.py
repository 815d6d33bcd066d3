"""Public read API for embedding record boards on club websites.

No authentication. CORS is open (see create_app).
"""

from fastapi import APIRouter, Query
from pydantic import BaseModel

from recordboard.api.dependencies import ClubDAODep, RecordDAODep, RecordListDAODep
from recordboard.errors import NotFoundError
from recordboard.models.club import Club
from recordboard.models.record import RecordFlags, RecordWithHistory, SwimRecord
from recordboard.models.record_list import CourseType, ListGender, RecordList
from recordboard.services.history import attach_history, filter_board
from recordboard.services.list_grouping import ordered_lists

router = APIRouter(prefix="/public", tags=["public"])


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================


class PublicListSummary(BaseModel):
    slug: str
    title: str
    course_type: CourseType
    gender: ListGender | None = None

    @classmethod
    def from_list(cls, record_list: RecordList) -> "PublicListSummary":
        return cls(
            slug=record_list.slug,
            title=record_list.title,
            course_type=record_list.course_type,
            gender=record_list.gender,
        )


class PublicClub(BaseModel):
    slug: str
    short_name: str
    full_name: str
    logo_url: str | None = None
    record_lists: list[PublicListSummary]


class PublicRecord(BaseModel):
    event_name: str
    swimmer_name: str
    time_ms: int
    time_formatted: str
    record_date: str | None = None
    location: str | None = None
    flags: RecordFlags

    @classmethod
    def from_record(cls, record: SwimRecord) -> "PublicRecord":
        return cls(
            event_name=record.event_name,
            swimmer_name=record.swimmer_name,
            time_ms=record.time_ms,
            time_formatted=record.time_formatted,
            record_date=record.record_date,
            location=record.location,
            flags=record.flags,
        )


class PublicRecordWithHistory(PublicRecord):
    history: list[PublicRecord] = []

    @classmethod
    def from_entry(cls, entry: RecordWithHistory) -> "PublicRecordWithHistory":
        return cls(
            **PublicRecord.from_record(entry.record).model_dump(),
            history=[PublicRecord.from_record(r) for r in entry.history],
        )


class PublicBoard(BaseModel):
    club_slug: str
    club_name: str
    list: PublicListSummary
    records: list[PublicRecordWithHistory]


# =============================================================================
# ENDPOINTS
# =============================================================================


def _club_by_slug(clubs: ClubDAODep, slug: str) -> Club:
    club = clubs.find_by_slug(slug)
    if club is None:
        raise NotFoundError("Club not found")
    return club


@router.get("/clubs/{slug}", response_model=PublicClub)
def get_public_club(slug: str, clubs: ClubDAODep, lists: RecordListDAODep) -> PublicClub:
    """Club display data and its lists in navigation order."""
    club = _club_by_slug(clubs, slug)
    return PublicClub(
        slug=club.slug,
        short_name=club.short_name,
        full_name=club.full_name,
        logo_url=club.logo_url,
        record_lists=[
            PublicListSummary.from_list(rl) for rl in ordered_lists(lists.find_by_club(club.id))
        ],
    )


@router.get("/clubs/{slug}/records", response_model=PublicBoard)
def get_public_records(
    slug: str,
    clubs: ClubDAODep,
    lists: RecordListDAODep,
    records: RecordDAODep,
    list_slug: str | None = Query(default=None, alias="list"),
    q: str | None = Query(
        default=None, max_length=100, description="Event, swimmer or location text"
    ),
) -> PublicBoard:
    """Current records of one list, each with its history.

    Without `?list=` the club's first-created list is shown. `?q=` narrows the
    board to records whose event, swimmer or location contains the text.
    """
    club = _club_by_slug(clubs, slug)
    record_list = lists.find_by_slug(club.id, list_slug) if list_slug else lists.find_first(club.id)
    if record_list is None:
        raise NotFoundError("Record list not found")

    board = filter_board(attach_history(records.find_by_list(record_list.id)), q)
    return PublicBoard(
        club_slug=club.slug,
        club_name=club.short_name,
        list=PublicListSummary.from_list(record_list),
        records=[PublicRecordWithHistory.from_entry(entry) for entry in board],
    )
