"""Service for editing the records of one list."""

from recordboard.dao.record_dao import RecordDAO
from recordboard.dao.record_list_dao import RecordListDAO
from recordboard.errors import NotFoundError, ValidationFailed
from recordboard.logging import get_logger
from recordboard.models.record import (
    FLAG_NAMES,
    EditableRecord,
    RecordReplacement,
    RecordWithHistory,
    SwimRecord,
)
from recordboard.models.record_list import RecordList
from recordboard.services.csv_parser import parse_records_csv
from recordboard.services.history import attach_history, break_record, supersede_fields
from recordboard.services.import_schemas import CSVImportResult, CSVRecord

logger = get_logger(__name__)

STANDARD_EVENTS: tuple[str, ...] = (
    "50 Free", "100 Free", "200 Free", "400 Free", "800 Free", "1500 Free",
    "50 Back", "100 Back", "200 Back",
    "50 Breast", "100 Breast", "200 Breast",
    "50 Fly", "100 Fly", "200 Fly",
    "200 IM", "400 IM",
)  # fmt: skip


def record_from_csv(row: CSVRecord, record_list_id: str, sort_order: int) -> SwimRecord:
    """Build an insertable record from a parsed CSV row, carrying every flag."""
    return SwimRecord(
        record_list_id=record_list_id,
        event_name=row.event_name,
        time_ms=row.time_ms,
        swimmer_name=row.swimmer_name,
        record_date=row.record_date,
        location=row.location,
        sort_order=sort_order,
        **{name: getattr(row, name) for name in FLAG_NAMES},
    )


def _editable_fields(row: EditableRecord) -> dict:
    event_name = row.event_name.strip()
    if not event_name:
        raise ValidationFailed("Event name is required")
    fields = {
        "event_name": event_name,
        "time_ms": row.time_ms,
        "swimmer_name": row.swimmer_name.strip(),
        "record_date": row.record_date or None,
        "location": row.location or None,
    }
    fields.update({name: getattr(row, name) for name in FLAG_NAMES})
    if row.sort_order is not None:
        fields["sort_order"] = row.sort_order
    return fields


def _next_sort_order(records: list[SwimRecord]) -> int:
    return max((r.sort_order for r in records), default=-1) + 1


class RecordService:
    """Reads and writes the records of a record list.

    Single-record operations stop at the first failure and propagate it.
    """

    def __init__(
        self,
        record_dao: RecordDAO | None = None,
        record_list_dao: RecordListDAO | None = None,
    ):
        self.record_dao = record_dao or RecordDAO()
        self.record_list_dao = record_list_dao or RecordListDAO()

    def _require_list(self, record_list_id: str) -> RecordList:
        record_list = self.record_list_dao.get_by_id(record_list_id)
        if record_list is None:
            raise NotFoundError("Record list not found")
        return record_list

    def _require_record(self, record_id: str) -> SwimRecord:
        record = self.record_dao.get_by_id(record_id)
        if record is None:
            raise NotFoundError("Record not found")
        return record

    # =========================================================================
    # Reads
    # =========================================================================

    def get_board(self, record_list_id: str) -> list[RecordWithHistory]:
        """Current records in display order, each with its history."""
        self._require_list(record_list_id)
        return attach_history(self.record_dao.find_by_list(record_list_id))

    # =========================================================================
    # Writes
    # =========================================================================

    def save_records(
        self, record_list_id: str, rows: list[EditableRecord]
    ) -> list[RecordWithHistory]:
        """Save the editor's rows.

        Rows with an id are updated in place; rows without one are appended.
        A new row with `breaks_record_id` supersedes that record once inserted;
        it takes the old record's event (and position, unless one is given)
        and is flagged new.
        Everything is validated before the first write.

        Raises:
            NotFoundError: list or a referenced record does not exist
            ValidationFailed: a row edits history or breaks a non-current record
        """
        self._require_list(record_list_id)
        existing = self.record_dao.find_by_list(record_list_id)
        by_id = {r.id: r for r in existing}

        # Validate every row and build its fields before the first write
        staged: list[tuple[EditableRecord, dict]] = []
        breaking: set[str] = set()
        next_order = _next_sort_order(existing)
        for row in rows:
            if row.id:
                stored = by_id.get(row.id)
                if stored is None:
                    raise NotFoundError(f"Record {row.id} is not in this list")
                if not stored.is_current:
                    raise ValidationFailed("Historical records can't be edited")
            if row.breaks_record_id:
                if row.id:
                    raise ValidationFailed("Only a new row can replace a record")
                target = by_id.get(row.breaks_record_id)
                if target is None:
                    raise NotFoundError("The record being broken no longer exists")
                if not target.is_current or row.breaks_record_id in breaking:
                    raise ValidationFailed("This record has already been broken")
                breaking.add(row.breaks_record_id)
                # The replacement takes over the old record's event and position
                placeholder = break_record(target)
                sort_order = placeholder.sort_order if row.sort_order is None else row.sort_order
                row = row.model_copy(
                    update={
                        "event_name": placeholder.event_name,
                        "sort_order": sort_order,
                        "is_new": True,
                    }
                )

            fields = _editable_fields(row)
            if not row.id and "sort_order" not in fields:
                fields["sort_order"] = next_order
                next_order += 1
            staged.append((row, fields))

        updated = created = 0
        for row, fields in staged:
            if row.id:
                self.record_dao.partial_update(row.id, fields)
                updated += 1
                continue

            new_record = self.record_dao.create(
                SwimRecord(record_list_id=record_list_id, **fields)
            )
            created += 1
            if row.breaks_record_id:
                self.record_dao.partial_update(
                    row.breaks_record_id, supersede_fields(new_record.id)
                )
                logger.info(
                    "record_broken",
                    old_record_id=row.breaks_record_id,
                    new_record_id=new_record.id,
                )

        logger.info(
            "records_saved",
            record_list_id=record_list_id,
            created=created,
            updated=updated,
        )
        return self.get_board(record_list_id)

    def break_and_commit(
        self, record_id: str, replacement: RecordReplacement | None = None
    ) -> SwimRecord:
        """Break a current record in one step and return its replacement.

        The replacement keeps the old record's event and position. Time,
        swimmer, date, location and flags come from `replacement` when given;
        it is always marked new.
        """
        old = self._require_record(record_id)
        placeholder = break_record(old)

        values = {}
        if replacement is not None:
            values = {
                "time_ms": replacement.time_ms,
                "swimmer_name": replacement.swimmer_name.strip(),
                "record_date": replacement.record_date or None,
                "location": replacement.location or None,
                **{name: getattr(replacement, name) for name in FLAG_NAMES},
            }
        values["is_new"] = True

        new_record = self.record_dao.create(
            SwimRecord(
                record_list_id=old.record_list_id,
                event_name=placeholder.event_name,
                sort_order=placeholder.sort_order,
                **values,
            )
        )
        self.record_dao.partial_update(old.id, supersede_fields(new_record.id))
        logger.info("record_broken", old_record_id=old.id, new_record_id=new_record.id)
        return new_record

    def delete_record(self, record_id: str) -> None:
        self._require_record(record_id)
        self.record_dao.delete(record_id)
        logger.info("record_deleted", record_id=record_id)

    def import_csv(self, record_list_id: str, text: str) -> CSVImportResult:
        """Append the valid rows of a CSV to an existing list.

        Row errors are returned, not raised. A failed insert propagates.
        """
        self._require_list(record_list_id)
        parsed = parse_records_csv(text)
        if not parsed.records:
            return CSVImportResult(created_count=0, errors=parsed.errors)

        start = _next_sort_order(self.record_dao.find_by_list(record_list_id))
        created = self.record_dao.create_many(
            [
                record_from_csv(row, record_list_id, start + i)
                for i, row in enumerate(parsed.records)
            ]
        )
        logger.info(
            "records_imported",
            record_list_id=record_list_id,
            created=len(created),
            errors=len(parsed.errors),
        )
        return CSVImportResult(created_count=len(created), errors=parsed.errors)

    def add_standard_events(self, record_list_id: str) -> list[SwimRecord]:
        """Append empty rows for standard events the list doesn't have yet."""
        self._require_list(record_list_id)
        existing = self.record_dao.find_by_list(record_list_id)
        present = {r.event_name.strip().casefold() for r in existing if r.is_current}
        missing = [e for e in STANDARD_EVENTS if e.casefold() not in present]
        if not missing:
            return []

        start = _next_sort_order(existing)
        return self.record_dao.create_many(
            [
                SwimRecord(record_list_id=record_list_id, event_name=event, sort_order=start + i)
                for i, event in enumerate(missing)
            ]
        )

    def reorder(self, record_list_id: str, ordered_ids: list[str]) -> list[RecordWithHistory]:
        """Set `sort_order` of current records to their position in `ordered_ids`."""
        self._require_list(record_list_id)
        current_ids = {
            r.id for r in self.record_dao.find_by_list(record_list_id) if r.is_current
        }
        unknown = [record_id for record_id in ordered_ids if record_id not in current_ids]
        if unknown:
            raise ValidationFailed(f"Unknown record ids: {', '.join(unknown)}")
        if len(set(ordered_ids)) != len(ordered_ids):
            raise ValidationFailed("Record ids must not repeat")

        for position, record_id in enumerate(ordered_ids):
            self.record_dao.partial_update(record_id, {"sort_order": position})
        return self.get_board(record_list_id)
