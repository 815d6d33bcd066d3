"""CSV export of record lists.

Every row is written, current and historical, one line each. The flag
headers are parser aliases, so an export can be imported again.
"""

import csv
import io

from recordboard.dao.record_dao import RecordDAO
from recordboard.dao.record_list_dao import RecordListDAO
from recordboard.errors import NotFoundError
from recordboard.logging import get_logger
from recordboard.models.record import SwimRecord
from recordboard.models.record_list import RecordList
from recordboard.services.csv_parser import TEMPLATE_HEADERS
from recordboard.services.history import attach_history
from recordboard.services.list_grouping import ordered_lists
from recordboard.time_codec import format_ms_to_time

logger = get_logger(__name__)

# Header text -> model attribute, in column order
EXPORT_FLAG_COLUMNS: tuple[tuple[str, str], ...] = (
    ("is_World_Record", "is_world_record"),
    ("is_National", "is_national"),
    ("is_Current_National", "is_current_national"),
    ("is_Provincial", "is_provincial"),
    ("is_Current_Provincial", "is_current_provincial"),
    ("is_Split", "is_split"),
    ("is_RelaySplit", "is_relay_split"),
    ("is_New", "is_new"),
)

EXPORT_HEADERS: tuple[str, ...] = (
    "Record List",
    *TEMPLATE_HEADERS[:5],
    *(header for header, _ in EXPORT_FLAG_COLUMNS),
)


def export_order(records: list[SwimRecord]) -> list[SwimRecord]:
    """Each current record followed by its history, then any unlinked rows."""
    ordered: list[SwimRecord] = []
    for entry in attach_history(records):
        ordered.append(entry.record)
        ordered.extend(entry.history)

    placed = {r.id for r in ordered}
    leftovers = sorted((r for r in records if r.id not in placed), key=lambda r: r.sort_order)
    return ordered + leftovers


def _row(record_list: RecordList, record: SwimRecord) -> list[str]:
    return [
        record_list.title,
        record.event_name,
        format_ms_to_time(record.time_ms),
        record.swimmer_name,
        record.record_date or "",
        record.location or "",
        *("true" if getattr(record, attr) else "" for _, attr in EXPORT_FLAG_COLUMNS),
    ]


def export_records_csv(lists_with_records: list[tuple[RecordList, list[SwimRecord]]]) -> str:
    """Render lists and their records as one CSV document."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for record_list, records in lists_with_records:
        for record in export_order(records):
            writer.writerow(_row(record_list, record))
    return buffer.getvalue()


class ExportService:
    """Load lists from the data store and export them."""

    def __init__(
        self,
        record_list_dao: RecordListDAO | None = None,
        record_dao: RecordDAO | None = None,
    ):
        self.record_list_dao = record_list_dao or RecordListDAO()
        self.record_dao = record_dao or RecordDAO()

    def export_list(self, record_list_id: str) -> str:
        record_list = self.record_list_dao.get_by_id(record_list_id)
        if record_list is None:
            raise NotFoundError("Record list not found")
        records = self.record_dao.find_by_list(record_list_id)
        logger.info("records_exported", record_list_id=record_list_id, rows=len(records))
        return export_records_csv([(record_list, records)])

    def export_club(self, club_id: str) -> str:
        """Every list of a club, in navigation order."""
        lists = ordered_lists(self.record_list_dao.find_by_club(club_id))
        records = self.record_dao.find_by_lists([rl.id for rl in lists])
        by_list: dict[str, list[SwimRecord]] = {}
        for record in records:
            by_list.setdefault(record.record_list_id, []).append(record)
        logger.info("club_records_exported", club_id=club_id, lists=len(lists), rows=len(records))
        return export_records_csv([(rl, by_list.get(rl.id, [])) for rl in lists])
