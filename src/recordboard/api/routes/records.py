"""Record endpoints: the list editor's reads and writes.

Reading a board needs any membership in the club; every change needs owner
or editor.
"""

from fastapi import APIRouter, Request, status
from pydantic import BaseModel

from recordboard.api.auth import CurrentUser, authorize_list
from recordboard.api.dependencies import (
    ClubServiceDep,
    RecordDAODep,
    RecordListServiceDep,
    RecordServiceDep,
    SettingsDep,
)
from recordboard.errors import NotFoundError
from recordboard.models.record import (
    EditableRecord,
    RecordReplacement,
    RecordWithHistory,
    SwimRecord,
)
from recordboard.services.csv_parser import generate_csv_template, summarize_errors

router = APIRouter(tags=["records"])


# =============================================================================
# REQUEST/RESPONSE SCHEMAS
# =============================================================================


class SaveRecordsRequest(BaseModel):
    records: list[EditableRecord]


class ReorderRequest(BaseModel):
    record_ids: list[str]


class CSVImportResponse(BaseModel):
    created_count: int
    errors: list[str]
    error_count: int


def _record_or_404(records: RecordDAODep, record_id: str) -> SwimRecord:
    record = records.get_by_id(record_id)
    if record is None:
        raise NotFoundError("Record not found")
    return record


# =============================================================================
# BOARD
# =============================================================================


@router.get("/lists/{list_id}/records", response_model=list[RecordWithHistory])
def get_records(
    list_id: str,
    user: CurrentUser,
    clubs: ClubServiceDep,
    lists: RecordListServiceDep,
    records: RecordServiceDep,
) -> list[RecordWithHistory]:
    """Current records in order, each with its history (most recent first)."""
    authorize_list(list_id, user, lists, clubs)
    return records.get_board(list_id)


@router.put("/lists/{list_id}/records", response_model=list[RecordWithHistory])
def save_records(
    list_id: str,
    data: SaveRecordsRequest,
    user: CurrentUser,
    clubs: ClubServiceDep,
    lists: RecordListServiceDep,
    records: RecordServiceDep,
) -> list[RecordWithHistory]:
    """Save edited and new rows, committing any pending record breaks."""
    authorize_list(list_id, user, lists, clubs, edit=True)
    return records.save_records(list_id, data.records)


@router.put("/lists/{list_id}/records/order", response_model=list[RecordWithHistory])
def reorder_records(
    list_id: str,
    data: ReorderRequest,
    user: CurrentUser,
    clubs: ClubServiceDep,
    lists: RecordListServiceDep,
    records: RecordServiceDep,
) -> list[RecordWithHistory]:
    authorize_list(list_id, user, lists, clubs, edit=True)
    return records.reorder(list_id, data.record_ids)


@router.post(
    "/lists/{list_id}/records/standard-events",
    response_model=list[SwimRecord],
    status_code=status.HTTP_201_CREATED,
)
def add_standard_events(
    list_id: str,
    user: CurrentUser,
    clubs: ClubServiceDep,
    lists: RecordListServiceDep,
    records: RecordServiceDep,
) -> list[SwimRecord]:
    """Add empty rows for the standard events not on the list yet."""
    authorize_list(list_id, user, lists, clubs, edit=True)
    return records.add_standard_events(list_id)


# =============================================================================
# CSV
# =============================================================================


@router.get("/records/csv-template")
def csv_template() -> dict:
    return {"template": generate_csv_template()}


@router.post("/lists/{list_id}/records/import", response_model=CSVImportResponse)
async def import_records_csv(
    list_id: str,
    request: Request,
    user: CurrentUser,
    clubs: ClubServiceDep,
    lists: RecordListServiceDep,
    records: RecordServiceDep,
    settings: SettingsDep,
) -> CSVImportResponse:
    """Append the rows of a CSV request body to the list."""
    authorize_list(list_id, user, lists, clubs, edit=True)
    text = (await request.body()).decode("utf-8-sig", errors="replace")
    result = records.import_csv(list_id, text)
    return CSVImportResponse(
        created_count=result.created_count,
        errors=summarize_errors(result.errors, settings.max_csv_errors_shown),
        error_count=len(result.errors),
    )


# =============================================================================
# SINGLE RECORDS
# =============================================================================


@router.post(
    "/records/{record_id}/break", response_model=SwimRecord, status_code=status.HTTP_201_CREATED
)
def break_record(
    record_id: str,
    user: CurrentUser,
    clubs: ClubServiceDep,
    lists: RecordListServiceDep,
    dao: RecordDAODep,
    records: RecordServiceDep,
    replacement: RecordReplacement | None = None,
) -> SwimRecord:
    """Replace a current record; the old one moves to history."""
    record = _record_or_404(dao, record_id)
    authorize_list(record.record_list_id, user, lists, clubs, edit=True)
    return records.break_and_commit(record_id, replacement)


@router.delete("/records/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_record(
    record_id: str,
    user: CurrentUser,
    clubs: ClubServiceDep,
    lists: RecordListServiceDep,
    dao: RecordDAODep,
    records: RecordServiceDep,
) -> None:
    record = _record_or_404(dao, record_id)
    authorize_list(record.record_list_id, user, lists, clubs, edit=True)
    records.delete_record(record_id)
