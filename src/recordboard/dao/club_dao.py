"""Data Access Objects for clubs and club memberships."""

from uuid import UUID

from supabase import Client

from recordboard.dao.base import BaseDAO
from recordboard.errors import DataStoreError
from recordboard.models.club import Club, ClubWithRole, MemberRole, Membership


def club_from_row(row: dict) -> Club:
    return Club(
        id=str(row["id"]),
        user_id=UUID(str(row["user_id"])) if row.get("user_id") else None,
        short_name=row["short_name"],
        full_name=row["full_name"],
        logo_url=row.get("logo_url"),
        slug=row["slug"],
        created_at=row.get("created_at"),
    )


class ClubDAO(BaseDAO[Club]):
    """DAO for Club entities."""

    table_name = "clubs"
    model_class = Club
    duplicate_message = "A club with this URL slug already exists. Please choose a different one."

    def __init__(self, client: Client | None = None):
        super().__init__(client)

    def find_by_slug(self, slug: str) -> Club | None:
        """Find a club by its public URL slug."""
        result = self._run(self.table.select("*").eq("slug", slug).limit(1))
        if not result.data:
            return None
        return self._to_model(result.data[0])

    def update_settings(self, id: str, updates: dict) -> Club | None:
        """Update short name, full name and logo. Other keys are ignored."""
        allowed = {k: v for k, v in updates.items() if k in ("short_name", "full_name", "logo_url")}
        return self.partial_update(id, allowed)

    def _to_model(self, row: dict) -> Club:
        return club_from_row(row)

    def _to_db(self, model: Club) -> dict:
        data = {
            "short_name": model.short_name,
            "full_name": model.full_name,
            "slug": model.slug,
            "logo_url": model.logo_url,
        }
        if model.id:
            data["id"] = model.id
        if model.user_id:
            data["user_id"] = str(model.user_id)
        return data


class MembershipDAO(BaseDAO[Membership]):
    """DAO for club memberships.

    Membership changes go through database functions that enforce the
    "at least one owner" rule and resolve users by email.
    """

    table_name = "club_members"
    model_class = Membership

    def __init__(self, client: Client | None = None):
        super().__init__(client)

    def find_for_user(self, user_id: UUID) -> list[ClubWithRole]:
        """Clubs the user belongs to, with their role, oldest membership first."""
        result = self._run(
            self.table.select("role, created_at, clubs(*)")
            .eq("user_id", str(user_id))
            .order("created_at")
        )
        return [
            ClubWithRole(club=club_from_row(row["clubs"]), role=MemberRole(row["role"]))
            for row in result.data
            if row.get("clubs")
        ]

    def get_role(self, club_id: str, user_id: UUID) -> MemberRole | None:
        """The user's role in a club, or None if not a member."""
        result = self._run(
            self.table.select("role")
            .eq("club_id", club_id)
            .eq("user_id", str(user_id))
            .limit(1)
        )
        if not result.data:
            return None
        return MemberRole(result.data[0]["role"])

    def add_owner(self, club_id: str, user_id: UUID) -> Membership:
        """Make the creator of a new club its owner."""
        return self.create(Membership(club_id=club_id, user_id=user_id, role=MemberRole.OWNER))

    def list_with_email(self, club_id: str) -> list[Membership]:
        data = self._rpc("get_club_members_with_email", {"p_club_id": club_id})
        return [self._to_model(row) for row in data or []]

    def add_by_email(self, club_id: str, email: str, role: MemberRole) -> None:
        self._rpc(
            "add_club_member_by_email",
            {"p_club_id": club_id, "p_email": email, "p_role": role.value},
        )

    def update_role(self, member_id: str, role: MemberRole) -> None:
        self._rpc("update_club_member_role", {"p_member_id": member_id, "p_new_role": role.value})

    def remove(self, member_id: str) -> None:
        self._rpc("remove_club_member", {"p_member_id": member_id})

    def transfer_ownership(self, club_id: str, new_owner_id: UUID) -> None:
        self._rpc(
            "transfer_club_ownership",
            {"p_club_id": club_id, "p_new_owner_id": str(new_owner_id)},
        )

    def _rpc(self, function: str, params: dict):
        result = self._run(self.client.rpc(function, params))
        if result is None:
            raise DataStoreError(f"{function} returned no response")
        return result.data

    def _to_model(self, row: dict) -> Membership:
        return Membership(
            id=str(row["id"]) if row.get("id") else None,
            club_id=str(row["club_id"]),
            user_id=UUID(str(row["user_id"])),
            role=MemberRole(row["role"]),
            email=row.get("email"),
            created_at=row.get("created_at"),
        )

    def _to_db(self, model: Membership) -> dict:
        return {
            "club_id": model.club_id,
            "user_id": str(model.user_id),
            "role": model.role.value,
        }
