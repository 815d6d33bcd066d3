"""Create one record list per CSV file.

Files are committed one at a time. A file that fails is reported and the
next file still runs; nothing is rolled back.
"""

import re
from collections.abc import Callable, Iterable

from recordboard.dao.record_dao import RecordDAO
from recordboard.dao.record_list_dao import RecordListDAO
from recordboard.errors import RecordBoardError
from recordboard.logging import get_logger
from recordboard.models.record_list import CourseType, RecordList
from recordboard.services.csv_parser import parse_records_csv
from recordboard.services.import_schemas import BulkImportFile, BulkImportResult, ImportProgress
from recordboard.services.list_grouping import slugify
from recordboard.services.record_service import record_from_csv

logger = get_logger(__name__)

_CSV_EXTENSION = re.compile(r"\.csv$", re.IGNORECASE)

# Checked in this order; the first hit wins
COURSE_DETECTION_ORDER = (CourseType.SCM, CourseType.SCY, CourseType.LCM)


def _stem(filename: str) -> str:
    return _CSV_EXTENSION.sub("", filename)


def title_from_filename(filename: str) -> str:
    """'Boys_11-12_SCM.csv' -> 'Boys 11-12 SCM'. Hyphens are kept for age ranges."""
    return _stem(filename).replace("_", " ").strip()


def slug_from_filename(filename: str) -> str:
    return slugify(_stem(filename))


def detect_course_type(filename: str) -> CourseType:
    upper = _stem(filename).upper()
    for course in COURSE_DETECTION_ORDER:
        if course.value in upper:
            return course
    return CourseType.LCM


def prepare_file(filename: str, text: str) -> BulkImportFile:
    """Parse a file and derive its default title, slug and course type."""
    parsed = parse_records_csv(text)
    return BulkImportFile(
        filename=filename,
        title=title_from_filename(filename),
        slug=slug_from_filename(filename),
        course_type=detect_course_type(filename),
        records=parsed.records,
        errors=parsed.errors,
    )


ProgressCallback = Callable[[ImportProgress], None]


class BulkImportService:
    """Commit prepared files as new record lists of one club."""

    def __init__(
        self,
        record_list_dao: RecordListDAO | None = None,
        record_dao: RecordDAO | None = None,
    ):
        self.record_list_dao = record_list_dao or RecordListDAO()
        self.record_dao = record_dao or RecordDAO()

    def run(
        self,
        club_id: str,
        files: Iterable[BulkImportFile],
        on_progress: ProgressCallback | None = None,
    ) -> BulkImportResult:
        """Import each file in order and report per-file outcomes.

        Args:
            club_id: Club receiving the new lists
            files: Prepared files (title and course type may have been edited)
            on_progress: Called after each file, whether it succeeded or not

        Returns:
            BulkImportResult with one success or failure line per file
        """
        files = list(files)
        result = BulkImportResult()
        total = len(files)

        for index, file in enumerate(files, start=1):
            self._import_file(club_id, file, result)
            if on_progress is not None:
                on_progress(ImportProgress(current=index, total=total))

        logger.info(
            "bulk_import_finished",
            club_id=club_id,
            created=len(result.success),
            failed=len(result.failed),
        )
        return result

    def _import_file(self, club_id: str, file: BulkImportFile, result: BulkImportResult) -> None:
        if not file.records:
            result.failed.append(f"{file.title}: No valid records")
            return
        if not file.title.strip() or not file.slug:
            result.failed.append(f"{file.filename}: A title and URL slug are required")
            return

        try:
            record_list = self.record_list_dao.create(
                RecordList(
                    club_id=club_id,
                    title=file.title,
                    slug=file.slug,
                    course_type=file.course_type,
                )
            )
        except RecordBoardError as e:
            logger.warning("bulk_import_list_failed", filename=file.filename, error=e.detail)
            result.failed.append(f"{file.title}: {e.detail}")
            return

        try:
            self.record_dao.create_many(
                [
                    record_from_csv(row, record_list.id, position)
                    for position, row in enumerate(file.records)
                ]
            )
        except RecordBoardError as e:
            logger.warning(
                "bulk_import_records_failed",
                filename=file.filename,
                record_list_id=record_list.id,
                error=e.detail,
            )
            result.failed.append(f"{file.title}: Records failed - {e.detail}")
            return

        logger.info(
            "bulk_import_file_created",
            filename=file.filename,
            record_list_id=record_list.id,
            records=len(file.records),
        )
        result.success.append(f"{file.title}: {len(file.records)} records")
