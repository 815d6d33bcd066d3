"""Authentication and per-club authorization dependencies.

Usage:
    from recordboard.api.auth import CurrentUser, authorize_list

    @router.delete("/lists/{list_id}")
    def delete_list(list_id: str, user: CurrentUser, lists: RecordListServiceDep,
                    clubs: ClubServiceDep):
        authorize_list(list_id, user, lists, clubs, edit=True)
        ...

Roles are per club, so authorization happens inside the route once the club
is known, always before anything is written.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, status

from recordboard import get_logger
from recordboard.api.dependencies import BearerCredentials, SupabaseDep
from recordboard.errors import PermissionDenied
from recordboard.models.club import MemberRole
from recordboard.models.record_list import RecordList
from recordboard.models.user import AuthUser
from recordboard.services.club_service import ClubService
from recordboard.services.list_grouping import RecordListService

logger = get_logger(__name__)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(credentials: BearerCredentials, client: SupabaseDep) -> AuthUser:
    """Verify the bearer token with Supabase Auth.

    Raises:
        HTTPException 401: Missing or invalid token
    """
    if credentials is None:
        raise _unauthorized("Missing authorization header")

    try:
        user_response = client.auth.get_user(credentials.credentials)
    except Exception as e:
        logger.warning("auth_failed", error=str(e))
        raise _unauthorized("Invalid or expired token") from e

    if not user_response or not user_response.user:
        raise _unauthorized("Invalid or expired token")

    return AuthUser(id=UUID(str(user_response.user.id)), email=user_response.user.email)


CurrentUser = Annotated[AuthUser, Depends(get_current_user)]


def authorize_club(
    club_id: str, user: AuthUser, clubs: ClubService, *, edit: bool = False, owner: bool = False
) -> MemberRole:
    """The user's role in the club, or an error if it is not enough."""
    try:
        if owner:
            return clubs.require_owner(club_id, user.id)
        if edit:
            return clubs.require_editor(club_id, user.id)
        return clubs.require_member(club_id, user.id)
    except PermissionDenied:
        logger.warning("club_role_denied", club_id=club_id, user_id=str(user.id), edit=edit, owner=owner)
        raise


def authorize_list(
    record_list_id: str,
    user: AuthUser,
    lists: RecordListService,
    clubs: ClubService,
    *,
    edit: bool = False,
) -> RecordList:
    """Load a list and check the user's role in its club."""
    record_list = lists.get_list(record_list_id)
    authorize_club(record_list.club_id, user, clubs, edit=edit)
    return record_list
