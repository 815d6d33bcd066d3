"""Club (tenant) and membership models."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class MemberRole(StrEnum):
    """Per-club roles.

    Permission hierarchy:
        owner  → settings, members, ownership transfer, plus everything editors do
        editor → create/edit/delete record lists and records, imports
        viewer → read-only dashboard access
    """

    OWNER = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"


def is_owner(role: MemberRole | None) -> bool:
    """Owner-only actions: settings, member management, ownership transfer."""
    return role == MemberRole.OWNER


def can_edit(role: MemberRole | None) -> bool:
    """Record and record list mutations."""
    return role in (MemberRole.OWNER, MemberRole.EDITOR)


class Club(BaseModel):
    """A swim club publishing record boards. Slug is fixed at creation."""

    id: str | None = None
    user_id: UUID | None = None  # creator (auth.users)
    short_name: str = Field(min_length=1, max_length=10)
    full_name: str = Field(min_length=1)
    logo_url: str | None = None
    slug: str
    created_at: datetime | None = None

    def __str__(self) -> str:
        return self.short_name


class ClubSettingsUpdate(BaseModel):
    """Fields an owner may change. The slug is deliberately absent."""

    short_name: str | None = Field(default=None, min_length=1, max_length=10)
    full_name: str | None = Field(default=None, min_length=1)
    logo_url: str | None = None


class Membership(BaseModel):
    """A user's role in one club."""

    id: str | None = None
    club_id: str
    user_id: UUID
    role: MemberRole
    email: EmailStr | None = None  # populated by get_club_members_with_email
    created_at: datetime | None = None

    @property
    def is_owner(self) -> bool:
        return is_owner(self.role)

    @property
    def can_edit(self) -> bool:
        return can_edit(self.role)


class ClubWithRole(BaseModel):
    """A club as seen by one user, from the "memberships for user" query."""

    club: Club
    role: MemberRole

    @property
    def is_owner(self) -> bool:
        return is_owner(self.role)

    @property
    def can_edit(self) -> bool:
        return can_edit(self.role)
