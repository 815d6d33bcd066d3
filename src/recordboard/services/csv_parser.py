"""Parse loosely structured records CSV files.

Column headers are matched case-insensitively against a table of aliases, so
exports from spreadsheets, meet software and older versions of the board all
import without editing. Bad rows are skipped and reported; they never stop
the parse.
"""

import csv
import io
import re
from datetime import datetime

from recordboard.logging import get_logger
from recordboard.services.import_schemas import CSVParseResult, CSVRecord
from recordboard.time_codec import parse_time_to_ms

logger = get_logger(__name__)

# Logical column -> accepted header names, first match wins
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "event": ("event", "event_name", "eventname"),
    "time": ("time", "time_ms", "record_time"),
    "swimmer": ("swimmer", "swimmer_name", "swimmername", "name", "athlete"),
    "date": ("date", "record_date", "recorddate"),
    "location": ("location", "meet", "venue"),
    "is_national": ("is_national", "national", "canadian_record"),
    "is_current_national": ("is_current_national", "current_national", "current_canadian"),
    "is_provincial": ("is_provincial", "provincial", "provincial_record"),
    "is_current_provincial": ("is_current_provincial", "current_provincial"),
    "is_split": ("is_split", "split", "split_time"),
    "is_relay_split": ("is_relay_split", "relay_split", "relay", "is_relaysplit"),
    "is_new": ("is_new", "new", "new_record"),
    "is_world_record": ("is_world_record", "world_record", "world", "wr"),
}

FLAG_COLUMNS = (
    "is_national",
    "is_current_national",
    "is_provincial",
    "is_current_provincial",
    "is_split",
    "is_relay_split",
    "is_new",
    "is_world_record",
)

TRUTHY_VALUES = frozenset({"true", "yes", "1", "x"})

TEMPLATE_HEADERS = (
    "Event",
    "Time",
    "Swimmer",
    "Date",
    "Location",
    "is_World_Record",
    "is_National",
    "is_Current_National",
    "is_Provincial",
    "is_Current_Provincial",
    "is_Split",
    "is_RelaySplit",
    "is_New",
)
TEMPLATE_EXAMPLE = ("50 Free", "24.56", "John Smith", "2024-03-15", "City Championships")

_YEAR = re.compile(r"^\d{4}$")
_YEAR_MONTH = re.compile(r"^(\d{4})[-/](\d{1,2})$")
_FULL_DATE = re.compile(r"^(\d{4})[-/](\d{1,2})[-/](\d{1,2})$")

# Loose formats tried in order; the flag says whether the format has a day
LOOSE_DATE_FORMATS: tuple[tuple[str, bool], ...] = (
    ("%B %Y", False),  # March 2024
    ("%b %Y", False),  # Mar 2024
    ("%B %d, %Y", True),  # March 15, 2024
    ("%b %d, %Y", True),  # Mar 15, 2024
    ("%B %d %Y", True),
    ("%b %d %Y", True),
    ("%d %B %Y", True),  # 15 March 2024
    ("%d %b %Y", True),
    ("%m/%d/%Y", True),  # 03/15/2024
    ("%m-%d-%Y", True),
    ("%Y-%m-%dT%H:%M:%S", True),
    ("%Y-%m-%d %H:%M:%S", True),
)


def parse_boolean(value: str | None) -> bool:
    """True for "true", "yes", "1" or "x" (any case); False for anything else."""
    if not value:
        return False
    return value.strip().lower() in TRUTHY_VALUES


def normalize_date(value: str | None) -> str | None:
    """Normalize a record date while keeping its granularity.

    "2024" -> "2024", "2024/3" -> "2024-03", "2024-3-5" -> "2024-03-05",
    "March 2024" -> "2024-03". Strings that cannot be read pass through as-is.
    """
    if value is None or not value.strip():
        return None

    trimmed = value.strip()

    if _YEAR.match(trimmed):
        return trimmed

    if match := _YEAR_MONTH.match(trimmed):
        year, month = match.groups()
        return f"{year}-{int(month):02d}"

    if match := _FULL_DATE.match(trimmed):
        year, month, day = match.groups()
        return f"{year}-{int(month):02d}-{int(day):02d}"

    for fmt, has_day in LOOSE_DATE_FORMATS:
        try:
            parsed = datetime.strptime(trimmed, fmt)
        except ValueError:
            continue
        return parsed.strftime("%Y-%m-%d" if has_day else "%Y-%m")

    return trimmed


def _find_column(row: dict[str, str], column: str) -> str | None:
    for alias in COLUMN_ALIASES[column]:
        if alias in row:
            return row[alias]
    return None


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_records_csv(text: str) -> CSVParseResult:
    """Parse records CSV text.

    The first non-blank line is the header. Row numbers in error messages
    count the header as row 1, so the first data row is row 2. A line the
    csv module rejects is reported as its own row error and parsing goes on
    with the next line; an unreadable header ends the parse.

    Args:
        text: Raw CSV content

    Returns:
        CSVParseResult with the valid records and one message per bad row
    """
    result = CSVParseResult()
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))

    header: list[str] | None = None
    row_num = 1
    while True:
        try:
            raw = next(reader)
        except StopIteration:
            break
        except csv.Error as e:
            # The reader drops the bad line and resumes at the next one
            if header is None:
                result.add_error(row_num, f"Malformed CSV header: {e}")
                break
            row_num += 1
            result.add_error(row_num, f"Malformed CSV: {e}")
            continue

        if not any(cell.strip() for cell in raw):
            continue

        if header is None:
            header = [cell.strip().lower() for cell in raw]
            continue

        row_num += 1
        if len(raw) > len(header):
            result.add_error(
                row_num,
                f"Too many fields: expected {len(header)} fields but parsed {len(raw)}",
            )
        elif len(raw) < len(header):
            result.add_error(
                row_num,
                f"Too few fields: expected {len(header)} fields but parsed {len(raw)}",
            )

        row: dict[str, str] = {}
        for name, cell in zip(header, raw):
            row.setdefault(name, cell)

        record = _parse_row(row, row_num, result)
        if record is not None:
            result.records.append(record)

    logger.debug(
        "csv_parsed",
        records=len(result.records),
        errors=len(result.errors),
    )
    return result


def _parse_row(row: dict[str, str], row_num: int, result: CSVParseResult) -> CSVRecord | None:
    event = _clean(_find_column(row, "event"))
    time = _clean(_find_column(row, "time"))
    swimmer = _clean(_find_column(row, "swimmer"))

    if not event or not time or not swimmer:
        result.add_error(row_num, "Missing required field (event, time, or swimmer)")
        return None

    time_ms = parse_time_to_ms(time)
    if time_ms <= 0:
        result.add_error(row_num, f'Invalid time format "{time}"')
        return None

    flags = {column: parse_boolean(_find_column(row, column)) for column in FLAG_COLUMNS}

    return CSVRecord(
        event_name=event,
        time_ms=time_ms,
        swimmer_name=swimmer,
        record_date=normalize_date(_find_column(row, "date")),
        location=_clean(_find_column(row, "location")),
        row_number=row_num,
        **flags,
    )


def generate_csv_template() -> str:
    """CSV template with every recognised column and one example row."""
    example = list(TEMPLATE_EXAMPLE) + [""] * (len(TEMPLATE_HEADERS) - len(TEMPLATE_EXAMPLE))
    return "\n".join([",".join(TEMPLATE_HEADERS), ",".join(example)])


def summarize_errors(errors: list[str], limit: int = 5) -> list[str]:
    """First `limit` errors, then "...and N more errors" for the rest."""
    if len(errors) <= limit:
        return list(errors)
    return [*errors[:limit], f"...and {len(errors) - limit} more errors"]
