"""FastAPI dependencies for dependency injection.

Usage in routes:
    from recordboard.api.dependencies import RecordServiceDep

    @router.get("/lists/{list_id}/records")
    def get_records(list_id: str, records: RecordServiceDep):
        return records.get_board(list_id)

Tests replace the DAO getters through `app.dependency_overrides`; services
are built on top of whatever DAOs those return.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client, create_client

from recordboard.config import Settings, get_settings
from recordboard.dao.club_dao import ClubDAO, MembershipDAO
from recordboard.dao.record_dao import RecordDAO
from recordboard.dao.record_list_dao import RecordListDAO
from recordboard.services.bulk_import import BulkImportService
from recordboard.services.club_service import ClubService
from recordboard.services.export import ExportService
from recordboard.services.list_grouping import RecordListService
from recordboard.services.record_service import RecordService

# Bearer token security scheme
security = HTTPBearer(auto_error=False)

BearerCredentials = Annotated[HTTPAuthorizationCredentials | None, Depends(security)]


def get_settings_dep() -> Settings:
    """Get application settings (dependency wrapper)."""
    return get_settings()


SettingsDep = Annotated[Settings, Depends(get_settings_dep)]


@lru_cache
def get_supabase_client(supabase_url: str, supabase_key: str) -> Client:
    """Create cached Supabase client."""
    return create_client(supabase_url, supabase_key)


def get_supabase(settings: SettingsDep) -> Client:
    """Shared anon client: public reads and token verification."""
    return get_supabase_client(
        settings.supabase_url,
        settings.supabase_key.get_secret_value(),
    )


SupabaseDep = Annotated[Client, Depends(get_supabase)]


def get_request_client(
    settings: SettingsDep,
    credentials: BearerCredentials,
    anon_client: SupabaseDep,
) -> Client:
    """Client for this request's data access.

    With a bearer token a fresh client is scoped to the user, so row-level
    security sees them. The shared client is never given a user token.
    """
    if credentials is None:
        return anon_client
    client = create_client(settings.supabase_url, settings.supabase_key.get_secret_value())
    client.postgrest.auth(credentials.credentials)
    return client


RequestClientDep = Annotated[Client, Depends(get_request_client)]


def get_club_dao(client: RequestClientDep) -> ClubDAO:
    """Get ClubDAO instance."""
    return ClubDAO(client)


def get_membership_dao(client: RequestClientDep) -> MembershipDAO:
    """Get MembershipDAO instance."""
    return MembershipDAO(client)


def get_record_list_dao(client: RequestClientDep) -> RecordListDAO:
    """Get RecordListDAO instance."""
    return RecordListDAO(client)


def get_record_dao(client: RequestClientDep) -> RecordDAO:
    """Get RecordDAO instance."""
    return RecordDAO(client)


ClubDAODep = Annotated[ClubDAO, Depends(get_club_dao)]
MembershipDAODep = Annotated[MembershipDAO, Depends(get_membership_dao)]
RecordListDAODep = Annotated[RecordListDAO, Depends(get_record_list_dao)]
RecordDAODep = Annotated[RecordDAO, Depends(get_record_dao)]


def get_club_service(clubs: ClubDAODep, memberships: MembershipDAODep) -> ClubService:
    return ClubService(clubs, memberships)


def get_record_list_service(lists: RecordListDAODep) -> RecordListService:
    return RecordListService(lists)


def get_record_service(records: RecordDAODep, lists: RecordListDAODep) -> RecordService:
    return RecordService(records, lists)


def get_bulk_import_service(lists: RecordListDAODep, records: RecordDAODep) -> BulkImportService:
    return BulkImportService(lists, records)


def get_export_service(lists: RecordListDAODep, records: RecordDAODep) -> ExportService:
    return ExportService(lists, records)


ClubServiceDep = Annotated[ClubService, Depends(get_club_service)]
RecordListServiceDep = Annotated[RecordListService, Depends(get_record_list_service)]
RecordServiceDep = Annotated[RecordService, Depends(get_record_service)]
BulkImportServiceDep = Annotated[BulkImportService, Depends(get_bulk_import_service)]
ExportServiceDep = Annotated[ExportService, Depends(get_export_service)]
