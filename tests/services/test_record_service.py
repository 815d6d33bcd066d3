"""Tests for RecordService against in-memory DAOs."""

import pytest

from recordboard.errors import NotFoundError, ValidationFailed
from recordboard.models import EditableRecord, RecordReplacement
from recordboard.services.history import break_record
from recordboard.services.record_service import STANDARD_EVENTS, RecordService


@pytest.fixture
def service(record_dao, record_list_dao) -> RecordService:
    return RecordService(record_dao, record_list_dao)


class TestSaveRecords:
    """Tests for save_records."""

    def test_new_rows_appended_after_existing(self, service, record_dao, record_list):
        record_dao.add(record_list_id=record_list.id, event_name="50 Free", sort_order=4)

        service.save_records(
            record_list.id,
            [
                EditableRecord(event_name="100 Free", time_ms=55000, swimmer_name="A"),
                EditableRecord(event_name="200 Free", time_ms=120000, swimmer_name="B"),
            ],
        )

        rows = record_dao.find_by_list(record_list.id)
        assert [(r.event_name, r.sort_order) for r in rows] == [
            ("50 Free", 4),
            ("100 Free", 5),
            ("200 Free", 6),
        ]

    def test_existing_rows_updated_in_place(self, service, record_dao, record_list):
        existing = record_dao.add(record_list_id=record_list.id, event_name="50 Free", time_ms=25000)

        board = service.save_records(
            record_list.id,
            [
                EditableRecord(
                    id=existing.id,
                    event_name=" 50 Free ",
                    time_ms=24560,
                    swimmer_name="John Smith",
                    is_provincial=True,
                )
            ],
        )

        stored = record_dao.get_by_id(existing.id)
        assert stored.time_ms == 24560
        assert stored.event_name == "50 Free"
        assert stored.is_provincial is True
        assert len(board) == 1

    def test_pending_break_committed(self, service, record_dao, record_list):
        """Scenario: break R1, fill in the new time, save."""
        r1 = record_dao.add(
            record_list_id=record_list.id, event_name="50 Free", time_ms=25000, swimmer_name="Old"
        )
        placeholder = break_record(r1)
        new_row = placeholder.model_copy(update={"time_ms": 24560, "swimmer_name": "New"})

        board = service.save_records(record_list.id, [new_row])

        old = record_dao.get_by_id(r1.id)
        assert old.is_current is False
        assert len(board) == 1
        r2 = board[0].record
        assert old.superseded_by == r2.id
        assert r2.event_name == "50 Free"
        assert r2.is_new is True
        assert r2.sort_order == r1.sort_order
        assert [h.id for h in board[0].history] == [r1.id]

    def test_history_rows_cannot_be_edited(self, service, record_dao, record_list):
        old = record_dao.add(
            record_list_id=record_list.id, event_name="50 Free", is_current=False, superseded_by="x"
        )
        with pytest.raises(ValidationFailed):
            service.save_records(record_list.id, [EditableRecord(id=old.id, event_name="50 Free")])

    def test_breaking_twice_rejected_before_any_write(self, service, record_dao, record_list):
        r1 = record_dao.add(record_list_id=record_list.id, event_name="50 Free")
        row = break_record(r1)

        with pytest.raises(ValidationFailed, match="already been broken"):
            service.save_records(record_list.id, [row, row])
        assert len(record_dao.find_by_list(record_list.id)) == 1

    def test_unknown_record_id(self, service, record_list):
        with pytest.raises(NotFoundError):
            service.save_records(record_list.id, [EditableRecord(id="missing", event_name="50 Free")])

    def test_blank_event_name_rejected_before_any_write(self, service, record_dao, record_list):
        with pytest.raises(ValidationFailed, match="Event name"):
            service.save_records(
                record_list.id,
                [EditableRecord(event_name="50 Free"), EditableRecord(event_name="  ")],
            )
        assert record_dao.find_by_list(record_list.id) == []

    def test_break_row_takes_old_event_and_position(self, service, record_dao, record_list):
        r1 = record_dao.add(id="R1", record_list_id=record_list.id, event_name="50 Free", sort_order=0)
        record_dao.add(id="R9", record_list_id=record_list.id, event_name="100 Free", sort_order=1)

        board = service.save_records(
            record_list.id,
            [
                EditableRecord(
                    event_name="200 Back", time_ms=24100, swimmer_name="A", breaks_record_id=r1.id
                )
            ],
        )

        current = [r for r in record_dao.find_by_list(record_list.id) if r.is_current]
        new = next(r for r in current if r.id != "R9")
        assert (new.event_name, new.sort_order, new.is_new) == ("50 Free", 0, True)
        assert [e.record.event_name for e in board] == ["50 Free", "100 Free"]
        assert [h.id for h in board[0].history] == ["R1"]

    def test_break_row_keeps_explicit_position(self, service, record_dao, record_list):
        r1 = record_dao.add(record_list_id=record_list.id, event_name="50 Free", sort_order=3)

        service.save_records(
            record_list.id,
            [EditableRecord(event_name="50 Free", sort_order=7, breaks_record_id=r1.id)],
        )

        new = next(r for r in record_dao.find_by_list(record_list.id) if r.is_current)
        assert new.sort_order == 7
        assert new.is_new is True

    def test_missing_list(self, service):
        with pytest.raises(NotFoundError):
            service.save_records("nope", [])


class TestBreakAndCommit:
    """Tests for the one-step break."""

    def test_break_scenario(self, service, record_dao, record_list):
        r1 = record_dao.add(
            id="R1", record_list_id=record_list.id, event_name="50 Free", time_ms=25000, sort_order=2
        )

        r2 = service.break_and_commit(r1.id)

        assert r2.event_name == "50 Free"
        assert r2.is_new is True
        assert r2.time_ms == 0
        assert r2.is_current is True
        assert r2.sort_order == 2
        old = record_dao.get_by_id("R1")
        assert old.is_current is False
        assert old.superseded_by == r2.id
        assert old.time_ms == 25000

    def test_break_with_replacement_values(self, service, record_dao, record_list):
        r1 = record_dao.add(record_list_id=record_list.id, event_name="100 Back", is_national=True)

        r2 = service.break_and_commit(
            r1.id,
            RecordReplacement(time_ms=58120, swimmer_name=" Ana ", record_date="2024-07", is_provincial=True),
        )

        assert r2.time_ms == 58120
        assert r2.swimmer_name == "Ana"
        assert r2.record_date == "2024-07"
        assert r2.is_provincial is True
        assert r2.is_national is False
        assert r2.is_new is True

    def test_break_history_rejected(self, service, record_dao, record_list):
        old = record_dao.add(
            record_list_id=record_list.id, event_name="50 Free", is_current=False, superseded_by="x"
        )
        with pytest.raises(ValidationFailed):
            service.break_and_commit(old.id)

    def test_break_missing_record(self, service):
        with pytest.raises(NotFoundError):
            service.break_and_commit("missing")


class TestOtherOperations:
    """Tests for import, standard events, reorder and delete."""

    def test_import_csv_appends(self, service, record_dao, record_list):
        record_dao.add(record_list_id=record_list.id, event_name="50 Free", sort_order=0)

        result = service.import_csv(
            record_list.id,
            "Event,Time,Swimmer,is_National\n100 Free,55.10,A,yes\n200 Free,bad,B,\n",
        )

        assert result.created_count == 1
        assert result.errors == ['Row 3: Invalid time format "bad"']
        imported = record_dao.find_by_list(record_list.id)[-1]
        assert imported.event_name == "100 Free"
        assert imported.sort_order == 1
        assert imported.is_national is True

    def test_import_csv_nothing_valid(self, service, record_dao, record_list):
        result = service.import_csv(record_list.id, "Event,Time\n50 Free,24.56\n")
        assert result.created_count == 0
        assert len(result.errors) == 1
        assert record_dao.find_by_list(record_list.id) == []

    def test_add_standard_events_skips_existing(self, service, record_dao, record_list):
        record_dao.add(record_list_id=record_list.id, event_name="50 free", sort_order=0)

        added = service.add_standard_events(record_list.id)

        assert len(added) == len(STANDARD_EVENTS) - 1
        assert "50 Free" not in [r.event_name for r in added]
        assert added[0].sort_order == 1
        assert all(r.time_ms == 0 and r.swimmer_name == "" for r in added)

        assert service.add_standard_events(record_list.id) == []

    def test_reorder(self, service, record_dao, record_list):
        a = record_dao.add(record_list_id=record_list.id, event_name="50 Free", sort_order=0)
        b = record_dao.add(record_list_id=record_list.id, event_name="100 Free", sort_order=1)

        board = service.reorder(record_list.id, [b.id, a.id])

        assert [e.record.id for e in board] == [b.id, a.id]

    def test_reorder_unknown_id(self, service, record_list):
        with pytest.raises(ValidationFailed):
            service.reorder(record_list.id, ["nope"])

    def test_delete_record(self, service, record_dao, record_list):
        a = record_dao.add(record_list_id=record_list.id, event_name="50 Free")
        service.delete_record(a.id)
        assert record_dao.get_by_id(a.id) is None

        with pytest.raises(NotFoundError):
            service.delete_record(a.id)

    def test_get_board_treats_legacy_rows_as_current(self, service, record_dao, record_list):
        record_dao.add(record_list_id=record_list.id, event_name="50 Free")
        board = service.get_board(record_list.id)
        assert board[0].record.is_current is True
