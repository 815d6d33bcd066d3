"""Club and membership endpoints.

All endpoints require authentication. Settings and member management are
owner-only.
"""

from uuid import UUID

from fastapi import APIRouter, status
from pydantic import BaseModel, EmailStr, Field

from recordboard.api.auth import CurrentUser, authorize_club
from recordboard.api.dependencies import ClubServiceDep
from recordboard.models.club import (
    Club,
    ClubSettingsUpdate,
    ClubWithRole,
    MemberRole,
    Membership,
)

router = APIRouter(prefix="/clubs", tags=["clubs"])


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================


class ClubCreate(BaseModel):
    """Request body for creating a club. Slug defaults to the slugified short name."""

    short_name: str = Field(min_length=1, max_length=10)
    full_name: str = Field(min_length=1)
    slug: str | None = None
    logo_url: str | None = None


class MemberAdd(BaseModel):
    email: EmailStr
    role: MemberRole = MemberRole.VIEWER


class MemberRoleUpdate(BaseModel):
    role: MemberRole


class OwnershipTransfer(BaseModel):
    new_owner_id: UUID


# =============================================================================
# CLUBS
# =============================================================================


@router.get("", response_model=list[ClubWithRole])
def list_my_clubs(user: CurrentUser, clubs: ClubServiceDep) -> list[ClubWithRole]:
    """Clubs the current user belongs to, with their role in each."""
    return clubs.clubs_for_user(user.id)


@router.post("", response_model=Club, status_code=status.HTTP_201_CREATED)
def create_club(data: ClubCreate, user: CurrentUser, clubs: ClubServiceDep) -> Club:
    """Create a club. The creator becomes its owner."""
    return clubs.create_club(
        user.id,
        short_name=data.short_name,
        full_name=data.full_name,
        slug=data.slug,
        logo_url=data.logo_url,
    )


@router.get("/{club_id}", response_model=ClubWithRole)
def get_club(club_id: str, user: CurrentUser, clubs: ClubServiceDep) -> ClubWithRole:
    role = authorize_club(club_id, user, clubs)
    return ClubWithRole(club=clubs.get_club(club_id), role=role)


@router.patch("/{club_id}", response_model=Club)
def update_club_settings(
    club_id: str, data: ClubSettingsUpdate, user: CurrentUser, clubs: ClubServiceDep
) -> Club:
    """Update short name, full name or logo (owner only)."""
    return clubs.update_settings(club_id, user.id, data)


# =============================================================================
# MEMBERS (owner only)
# =============================================================================


@router.get("/{club_id}/members", response_model=list[Membership])
def list_members(club_id: str, user: CurrentUser, clubs: ClubServiceDep) -> list[Membership]:
    return clubs.list_members(club_id, user.id)


@router.post("/{club_id}/members", status_code=status.HTTP_204_NO_CONTENT)
def add_member(club_id: str, data: MemberAdd, user: CurrentUser, clubs: ClubServiceDep) -> None:
    """Add an existing user by email."""
    clubs.add_member(club_id, user.id, data.email, data.role)


@router.patch("/{club_id}/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def change_member_role(
    club_id: str,
    member_id: str,
    data: MemberRoleUpdate,
    user: CurrentUser,
    clubs: ClubServiceDep,
) -> None:
    clubs.change_role(club_id, user.id, member_id, data.role)


@router.delete("/{club_id}/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(club_id: str, member_id: str, user: CurrentUser, clubs: ClubServiceDep) -> None:
    clubs.remove_member(club_id, user.id, member_id)


@router.post("/{club_id}/transfer", status_code=status.HTTP_204_NO_CONTENT)
def transfer_ownership(
    club_id: str, data: OwnershipTransfer, user: CurrentUser, clubs: ClubServiceDep
) -> None:
    clubs.transfer_ownership(club_id, user.id, data.new_owner_id)
