"""Authenticated user model."""

from uuid import UUID

from pydantic import BaseModel


class AuthUser(BaseModel):
    """A Supabase Auth user. Roles are per club, see Membership."""

    id: UUID  # auth.users.id
    email: str | None = None
