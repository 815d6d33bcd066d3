"""Record list endpoints, including CSV export and bulk upload.

Reads need any membership in the list's club; changes need owner or editor.
"""

from fastapi import APIRouter, File, Form, UploadFile, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from recordboard import get_logger
from recordboard.api.auth import CurrentUser, authorize_club, authorize_list
from recordboard.api.dependencies import (
    BulkImportServiceDep,
    ClubServiceDep,
    ExportServiceDep,
    RecordListServiceDep,
    SettingsDep,
)
from recordboard.models.record_list import (
    CourseType,
    ListGender,
    RecordList,
    RecordListCreate,
    RecordListUpdate,
)
from recordboard.services.bulk_import import prepare_file
from recordboard.services.csv_parser import summarize_errors
from recordboard.services.import_schemas import BulkImportFile, CSVRecord

logger = get_logger(__name__)

router = APIRouter(tags=["record-lists"])


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================


class RecordListGroupOut(BaseModel):
    course_type: CourseType
    gender: ListGender | None = None
    label: str
    lists: list[RecordList]


class BulkImportPreview(BaseModel):
    """A staged file as the user reviews it before committing."""

    filename: str
    title: str
    slug: str
    course_type: CourseType
    record_count: int
    records: list[CSVRecord]
    errors: list[str]


class BulkImportResponse(BaseModel):
    success: list[str]
    failed: list[str]
    summary: str


def _csv_download(text: str, filename: str) -> PlainTextResponse:
    return PlainTextResponse(
        text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def _read_upload(upload: UploadFile) -> str:
    return (await upload.read()).decode("utf-8-sig", errors="replace")


# =============================================================================
# LISTS
# =============================================================================


@router.get("/clubs/{club_id}/lists", response_model=list[RecordListGroupOut])
def list_record_lists(
    club_id: str, user: CurrentUser, clubs: ClubServiceDep, lists: RecordListServiceDep
) -> list[RecordListGroupOut]:
    """The club's lists grouped by course type and gender."""
    authorize_club(club_id, user, clubs)
    return [
        RecordListGroupOut(
            course_type=group.course_type,
            gender=group.gender,
            label=group.label,
            lists=group.lists,
        )
        for group in lists.list_grouped(club_id)
    ]


@router.post(
    "/clubs/{club_id}/lists", response_model=RecordList, status_code=status.HTTP_201_CREATED
)
def create_record_list(
    club_id: str,
    data: RecordListCreate,
    user: CurrentUser,
    clubs: ClubServiceDep,
    lists: RecordListServiceDep,
) -> RecordList:
    authorize_club(club_id, user, clubs, edit=True)
    return lists.create_list(club_id, data)


@router.get("/lists/{list_id}", response_model=RecordList)
def get_record_list(
    list_id: str, user: CurrentUser, clubs: ClubServiceDep, lists: RecordListServiceDep
) -> RecordList:
    return authorize_list(list_id, user, lists, clubs)


@router.patch("/lists/{list_id}", response_model=RecordList)
def update_record_list(
    list_id: str,
    data: RecordListUpdate,
    user: CurrentUser,
    clubs: ClubServiceDep,
    lists: RecordListServiceDep,
) -> RecordList:
    """Change title, course type or gender. The slug can't change."""
    authorize_list(list_id, user, lists, clubs, edit=True)
    return lists.update_list(list_id, data)


@router.delete("/lists/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_record_list(
    list_id: str, user: CurrentUser, clubs: ClubServiceDep, lists: RecordListServiceDep
) -> None:
    """Delete the list and all of its records."""
    authorize_list(list_id, user, lists, clubs, edit=True)
    lists.delete_list(list_id)


# =============================================================================
# EXPORT
# =============================================================================


@router.get("/lists/{list_id}/export", response_class=PlainTextResponse)
def export_record_list(
    list_id: str,
    user: CurrentUser,
    clubs: ClubServiceDep,
    lists: RecordListServiceDep,
    export: ExportServiceDep,
) -> PlainTextResponse:
    record_list = authorize_list(list_id, user, lists, clubs)
    return _csv_download(export.export_list(list_id), f"{record_list.slug}.csv")


@router.get("/clubs/{club_id}/export", response_class=PlainTextResponse)
def export_club(
    club_id: str, user: CurrentUser, clubs: ClubServiceDep, export: ExportServiceDep
) -> PlainTextResponse:
    authorize_club(club_id, user, clubs)
    club = clubs.get_club(club_id)
    return _csv_download(export.export_club(club_id), f"{club.slug}-records.csv")


# =============================================================================
# BULK UPLOAD
# =============================================================================


async def _prepare_uploads(
    files: list[UploadFile],
    titles: list[str] | None,
    course_types: list[CourseType] | None,
) -> list[BulkImportFile]:
    """Parse uploads and apply per-file title/course overrides (matched by position)."""
    prepared = []
    for index, upload in enumerate(files):
        staged = prepare_file(upload.filename or f"file-{index + 1}.csv", await _read_upload(upload))
        if titles and index < len(titles) and titles[index].strip():
            staged.title = titles[index].strip()
        if course_types and index < len(course_types):
            staged.course_type = course_types[index]
        prepared.append(staged)
    return prepared


@router.post("/clubs/{club_id}/bulk-import/preview", response_model=list[BulkImportPreview])
async def preview_bulk_import(
    club_id: str,
    user: CurrentUser,
    clubs: ClubServiceDep,
    settings: SettingsDep,
    files: list[UploadFile] = File(...),
) -> list[BulkImportPreview]:
    """Parse files without writing anything, for review before committing."""
    authorize_club(club_id, user, clubs, edit=True)
    prepared = await _prepare_uploads(files, None, None)
    return [
        BulkImportPreview(
            filename=f.filename,
            title=f.title,
            slug=f.slug,
            course_type=f.course_type,
            record_count=len(f.records),
            records=f.records,
            errors=summarize_errors(f.errors, settings.max_csv_errors_shown),
        )
        for f in prepared
    ]


@router.post("/clubs/{club_id}/bulk-import", response_model=BulkImportResponse)
async def run_bulk_import(
    club_id: str,
    user: CurrentUser,
    clubs: ClubServiceDep,
    bulk: BulkImportServiceDep,
    files: list[UploadFile] = File(...),
    titles: list[str] | None = Form(default=None),
    course_types: list[CourseType] | None = Form(default=None),
) -> BulkImportResponse:
    """Create one list per file. Failed files are reported, not fatal."""
    authorize_club(club_id, user, clubs, edit=True)
    prepared = await _prepare_uploads(files, titles, course_types)
    result = bulk.run(club_id, prepared)
    logger.info("bulk_import_requested", club_id=club_id, files=len(prepared), user_id=str(user.id))
    return BulkImportResponse(success=result.success, failed=result.failed, summary=result.summary())
