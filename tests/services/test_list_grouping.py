"""Tests for record list grouping and record list management."""

from datetime import datetime, timedelta, timezone

import pytest

from recordboard.errors import DuplicateSlugError, NotFoundError, ValidationFailed
from recordboard.models import CourseType, ListGender, RecordList, RecordListCreate, RecordListUpdate
from recordboard.services.list_grouping import (
    RecordListService,
    clean_slug,
    group_record_lists,
    ordered_lists,
    slugify,
)

_T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_list(title: str, course: str, gender: str | None, minutes: int = 0) -> RecordList:
    return RecordList(
        id=title,
        club_id="club-1",
        title=title,
        slug=slugify(title),
        course_type=CourseType(course),
        gender=ListGender(gender) if gender else None,
        created_at=_T0 + timedelta(minutes=minutes),
    )


class TestSlugify:
    """Tests for slugify and clean_slug."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Boys 11-12 (SCM)", "boys-11-12-scm"),
            ("  River Valley  ", "river-valley"),
            ("Girls_13&Over", "girls-13-over"),
            ("--LCM--", "lcm"),
            ("!!!", ""),
        ],
    )
    def test_slugify(self, text: str, expected: str):
        assert slugify(text) == expected

    def test_clean_slug_keeps_user_hyphens(self):
        assert clean_slug("My-Slug!", "ignored") == "my-slug"

    def test_clean_slug_falls_back_to_title(self):
        assert clean_slug(None, "Open Women LCM") == "open-women-lcm"
        assert clean_slug("   ", "Open Women LCM") == "open-women-lcm"

    def test_clean_slug_empty_everywhere(self):
        with pytest.raises(ValidationFailed):
            clean_slug("!!", "??")


class TestGroupRecordLists:
    """Tests for group_record_lists."""

    def test_course_then_gender_order(self):
        lists = [
            make_list("L1", "LCM", "male"),
            make_list("L2", "SCM", None),
            make_list("L3", "SCM", "female"),
        ]
        groups = group_record_lists(lists)

        assert [(g.course_type.value, g.gender) for g in groups] == [
            ("SCM", ListGender.FEMALE),
            ("SCM", None),
            ("LCM", ListGender.MALE),
        ]

    def test_full_order(self):
        lists = [
            make_list("a", "LCM", None),
            make_list("b", "SCY", "female"),
            make_list("c", "SCM", "male"),
            make_list("d", "LCM", "female"),
            make_list("e", "SCY", "male"),
        ]
        assert [rl.title for rl in ordered_lists(lists)] == ["c", "e", "b", "d", "a"]

    def test_title_then_created_at_within_group(self):
        lists = [
            make_list("boys 13-14", "SCM", "male", minutes=1),
            make_list("Boys 11-12", "SCM", "male", minutes=5),
            make_list("Boys 11-12 ", "SCM", "male", minutes=3),
        ]
        lists[2] = lists[2].model_copy(update={"title": "Boys 11-12", "id": "dup"})
        group = group_record_lists(lists)[0]

        assert [rl.id for rl in group.lists] == ["dup", "Boys 11-12", "boys 13-14"]

    def test_empty_groups_omitted(self):
        groups = group_record_lists([make_list("x", "SCY", "female")])
        assert len(groups) == 1
        assert groups[0].label == "SCY Female"

    def test_ungrouped_label(self):
        assert group_record_lists([make_list("x", "LCM", None)])[0].label == "LCM Other"


class TestRecordListService:
    """Tests for RecordListService against the in-memory DAO."""

    def test_create_defaults_slug_from_title(self, record_list_dao, club):
        service = RecordListService(record_list_dao)
        created = service.create_list(club.id, RecordListCreate(title="Girls 13-14 SCM", course_type=CourseType.SCM))

        assert created.slug == "girls-13-14-scm"
        assert created.course_type == CourseType.SCM
        assert created.club_id == club.id

    def test_duplicate_slug_in_club(self, record_list_dao, club):
        service = RecordListService(record_list_dao)
        service.create_list(club.id, RecordListCreate(title="Open", slug="open"))

        with pytest.raises(DuplicateSlugError, match="already exists"):
            service.create_list(club.id, RecordListCreate(title="Open Again", slug="open"))

    def test_same_slug_in_other_club(self, record_list_dao, club):
        service = RecordListService(record_list_dao)
        service.create_list(club.id, RecordListCreate(title="Open"))
        other = service.create_list("other-club", RecordListCreate(title="Open"))
        assert other.slug == "open"

    def test_update_keeps_slug(self, record_list_dao, record_list):
        service = RecordListService(record_list_dao)
        updated = service.update_list(
            record_list.id,
            RecordListUpdate(title="Boys 11-12 SCM", course_type=CourseType.SCM, gender=ListGender.MALE),
        )

        assert updated.title == "Boys 11-12 SCM"
        assert updated.course_type == CourseType.SCM
        assert updated.gender == ListGender.MALE
        assert updated.slug == record_list.slug

    def test_update_can_clear_gender(self, record_list_dao, club):
        service = RecordListService(record_list_dao)
        created = service.create_list(club.id, RecordListCreate(title="X", gender=ListGender.FEMALE))
        updated = service.update_list(created.id, RecordListUpdate(gender=None))
        assert updated.gender is None

    def test_update_missing_list(self, record_list_dao):
        with pytest.raises(NotFoundError):
            RecordListService(record_list_dao).update_list("nope", RecordListUpdate(title="x"))

    def test_delete_cascades_records(self, record_list_dao, record_dao, record_list):
        record_dao.add(record_list_id=record_list.id, event_name="50 Free")
        RecordListService(record_list_dao).delete_list(record_list.id)

        assert record_list_dao.get_by_id(record_list.id) is None
        assert record_dao.find_by_list(record_list.id) == []

    def test_list_grouped(self, record_list_dao, club):
        service = RecordListService(record_list_dao)
        service.create_list(club.id, RecordListCreate(title="LCM Boys", course_type=CourseType.LCM, gender=ListGender.MALE))
        service.create_list(club.id, RecordListCreate(title="SCM Girls", course_type=CourseType.SCM, gender=ListGender.FEMALE))

        groups = service.list_grouped(club.id)
        assert [g.lists[0].title for g in groups] == ["SCM Girls", "LCM Boys"]
