"""Record list navigation order and record list management."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from recordboard.dao.record_list_dao import RecordListDAO
from recordboard.errors import NotFoundError, ValidationFailed
from recordboard.logging import get_logger
from recordboard.models.record_list import (
    CourseType,
    ListGender,
    RecordList,
    RecordListCreate,
    RecordListUpdate,
)

logger = get_logger(__name__)

COURSE_ORDER: tuple[CourseType, ...] = (CourseType.SCM, CourseType.SCY, CourseType.LCM)
# None is the trailing group for lists created before genders existed
GENDER_ORDER: tuple[ListGender | None, ...] = (ListGender.MALE, ListGender.FEMALE, None)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_SLUG_UNSAFE = re.compile(r"[^a-z0-9-]")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def slugify(text: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to one hyphen, trim hyphens.

    >>> slugify("Boys 11-12 (SCM)")
    'boys-11-12-scm'
    """
    return _NON_ALNUM.sub("-", text.lower()).strip("-")


def clean_slug(slug: str | None, fallback: str) -> str:
    """A user-typed slug with unsafe characters removed, or the slugified fallback."""
    cleaned = _SLUG_UNSAFE.sub("", (slug or "").strip().lower())
    cleaned = cleaned or slugify(fallback)
    if not cleaned:
        raise ValidationFailed("A URL slug is required")
    return cleaned


@dataclass
class RecordListGroup:
    """Lists sharing a course type and gender, in navigation order."""

    course_type: CourseType
    gender: ListGender | None
    lists: list[RecordList] = field(default_factory=list)

    @property
    def label(self) -> str:
        gender = self.gender.value.title() if self.gender else "Other"
        return f"{self.course_type.value} {gender}"


def _created(record_list: RecordList) -> datetime:
    created = record_list.created_at
    if created is None:
        return _EPOCH
    if created.tzinfo is None:
        return created.replace(tzinfo=timezone.utc)
    return created


def group_record_lists(lists: list[RecordList]) -> list[RecordListGroup]:
    """Group lists by course (SCM, SCY, LCM) then gender (male, female, none).

    Within a group lists are ordered by title, case-insensitively, with
    creation time breaking ties. Empty groups are left out.
    """
    buckets: dict[tuple[CourseType, ListGender | None], list[RecordList]] = {}
    for record_list in lists:
        buckets.setdefault((record_list.course_type, record_list.gender), []).append(record_list)

    groups = []
    for course in COURSE_ORDER:
        for gender in GENDER_ORDER:
            members = buckets.get((course, gender))
            if not members:
                continue
            members.sort(key=lambda rl: (rl.title.casefold(), _created(rl)))
            groups.append(RecordListGroup(course_type=course, gender=gender, lists=members))
    return groups


def ordered_lists(lists: list[RecordList]) -> list[RecordList]:
    """Flatten `group_record_lists` into one navigation-ordered list."""
    return [rl for group in group_record_lists(lists) for rl in group.lists]


class RecordListService:
    """Create, edit and browse a club's record lists."""

    def __init__(self, record_list_dao: RecordListDAO | None = None):
        self.record_list_dao = record_list_dao or RecordListDAO()

    def get_list(self, record_list_id: str) -> RecordList:
        record_list = self.record_list_dao.get_by_id(record_list_id)
        if record_list is None:
            raise NotFoundError("Record list not found")
        return record_list

    def list_grouped(self, club_id: str) -> list[RecordListGroup]:
        return group_record_lists(self.record_list_dao.find_by_club(club_id))

    def create_list(self, club_id: str, data: RecordListCreate) -> RecordList:
        """Create a list. A taken slug raises DuplicateSlugError from the DAO."""
        title = data.title.strip()
        if not title:
            raise ValidationFailed("Title is required")
        record_list = self.record_list_dao.create(
            RecordList(
                club_id=club_id,
                title=title,
                slug=clean_slug(data.slug, title),
                course_type=data.course_type,
                gender=data.gender,
            )
        )
        logger.info(
            "record_list_created",
            record_list_id=record_list.id,
            club_id=club_id,
            slug=record_list.slug,
        )
        return record_list

    def update_list(self, record_list_id: str, data: RecordListUpdate) -> RecordList:
        """Change title, course type or gender. Explicit nulls clear the gender."""
        self.get_list(record_list_id)
        updates = data.model_dump(exclude_unset=True)
        if "title" in updates:
            if not updates["title"] or not updates["title"].strip():
                raise ValidationFailed("Title is required")
            updates["title"] = updates["title"].strip()
        if updates.get("course_type") is None:
            updates.pop("course_type", None)
        updates = {k: v.value if hasattr(v, "value") else v for k, v in updates.items()}

        updated = self.record_list_dao.partial_update(record_list_id, updates)
        if updated is None:
            raise NotFoundError("Record list not found")
        logger.info("record_list_updated", record_list_id=record_list_id, fields=sorted(updates))
        return updated

    def delete_list(self, record_list_id: str) -> None:
        """Delete a list and, by cascade, all its records."""
        self.get_list(record_list_id)
        self.record_list_dao.delete(record_list_id)
        logger.info("record_list_deleted", record_list_id=record_list_id)
