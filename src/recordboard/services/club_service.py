"""Club creation, settings and membership management."""

from uuid import UUID

from recordboard.dao.club_dao import ClubDAO, MembershipDAO
from recordboard.errors import NotFoundError, PermissionDenied, ValidationFailed
from recordboard.logging import get_logger
from recordboard.models.club import (
    Club,
    ClubSettingsUpdate,
    ClubWithRole,
    MemberRole,
    Membership,
    can_edit,
    is_owner,
)
from recordboard.services.list_grouping import clean_slug

logger = get_logger(__name__)


class ClubService:
    """Club operations for an authenticated user.

    Every mutating method checks the caller's role first; nothing is written
    when the check fails.
    """

    def __init__(
        self,
        club_dao: ClubDAO | None = None,
        membership_dao: MembershipDAO | None = None,
    ):
        self.club_dao = club_dao or ClubDAO()
        self.membership_dao = membership_dao or MembershipDAO()

    # =========================================================================
    # Role checks
    # =========================================================================

    def role_for(self, club_id: str, user_id: UUID) -> MemberRole | None:
        return self.membership_dao.get_role(club_id, user_id)

    def require_member(self, club_id: str, user_id: UUID) -> MemberRole:
        role = self.role_for(club_id, user_id)
        if role is None:
            # Non-members don't learn whether the club exists
            raise NotFoundError("Club not found")
        return role

    def require_editor(self, club_id: str, user_id: UUID) -> MemberRole:
        role = self.require_member(club_id, user_id)
        if not can_edit(role):
            raise PermissionDenied("Only owners and editors can change records")
        return role

    def require_owner(self, club_id: str, user_id: UUID) -> MemberRole:
        role = self.require_member(club_id, user_id)
        if not is_owner(role):
            raise PermissionDenied("Only club owners can do that")
        return role

    # =========================================================================
    # Clubs
    # =========================================================================

    def clubs_for_user(self, user_id: UUID) -> list[ClubWithRole]:
        return self.membership_dao.find_for_user(user_id)

    def get_club(self, club_id: str) -> Club:
        club = self.club_dao.get_by_id(club_id)
        if club is None:
            raise NotFoundError("Club not found")
        return club

    def create_club(
        self,
        user_id: UUID,
        short_name: str,
        full_name: str,
        slug: str | None = None,
        logo_url: str | None = None,
    ) -> Club:
        """Create a club and make `user_id` its owner."""
        short_name = short_name.strip()
        full_name = full_name.strip()
        if not short_name or not full_name:
            raise ValidationFailed("Short name and full name are required")

        club = self.club_dao.create(
            Club(
                user_id=user_id,
                short_name=short_name,
                full_name=full_name,
                slug=clean_slug(slug, short_name),
                logo_url=logo_url or None,
            )
        )
        self.membership_dao.add_owner(club.id, user_id)
        logger.info("club_created", club_id=club.id, slug=club.slug, user_id=str(user_id))
        return club

    def update_settings(self, club_id: str, user_id: UUID, data: ClubSettingsUpdate) -> Club:
        """Owner-only. The slug never changes."""
        self.require_owner(club_id, user_id)
        updates = data.model_dump(exclude_unset=True)
        for key in ("short_name", "full_name"):
            if key in updates:
                value = (updates[key] or "").strip()
                if not value:
                    raise ValidationFailed(f"{key.replace('_', ' ').capitalize()} is required")
                updates[key] = value
        if "logo_url" in updates:
            updates["logo_url"] = updates["logo_url"] or None

        club = self.club_dao.update_settings(club_id, updates)
        if club is None:
            raise NotFoundError("Club not found")
        logger.info("club_settings_updated", club_id=club_id, fields=sorted(updates))
        return club

    # =========================================================================
    # Members
    # =========================================================================

    def list_members(self, club_id: str, user_id: UUID) -> list[Membership]:
        self.require_owner(club_id, user_id)
        return self.membership_dao.list_with_email(club_id)

    def add_member(self, club_id: str, user_id: UUID, email: str, role: MemberRole) -> None:
        """Add an existing user by email. Ownership only moves by transfer."""
        self.require_owner(club_id, user_id)
        if role == MemberRole.OWNER:
            raise ValidationFailed("Use ownership transfer to make someone the owner")
        self.membership_dao.add_by_email(club_id, email.strip().lower(), role)
        logger.info("club_member_added", club_id=club_id, role=role.value)

    def _require_member_row(self, club_id: str, member_id: str) -> Membership:
        member = self.membership_dao.get_by_id(member_id)
        if member is None or member.club_id != club_id:
            raise NotFoundError("Member not found")
        return member

    def change_role(
        self, club_id: str, user_id: UUID, member_id: str, role: MemberRole
    ) -> None:
        self.require_owner(club_id, user_id)
        member = self._require_member_row(club_id, member_id)
        if member.is_owner or role == MemberRole.OWNER:
            raise ValidationFailed("Use ownership transfer to change the owner")
        self.membership_dao.update_role(member_id, role)
        logger.info("club_member_role_changed", club_id=club_id, member_id=member_id, role=role.value)

    def remove_member(self, club_id: str, user_id: UUID, member_id: str) -> None:
        self.require_owner(club_id, user_id)
        member = self._require_member_row(club_id, member_id)
        if member.is_owner:
            raise ValidationFailed("The club owner can't be removed")
        self.membership_dao.remove(member_id)
        logger.info("club_member_removed", club_id=club_id, member_id=member_id)

    def transfer_ownership(self, club_id: str, user_id: UUID, new_owner_id: UUID) -> None:
        """Hand the club to another existing member."""
        self.require_owner(club_id, user_id)
        if new_owner_id == user_id:
            raise ValidationFailed("You already own this club")
        if self.role_for(club_id, new_owner_id) is None:
            raise ValidationFailed("The new owner must already be a member of the club")
        self.membership_dao.transfer_ownership(club_id, new_owner_id)
        logger.info(
            "club_ownership_transferred",
            club_id=club_id,
            from_user_id=str(user_id),
            to_user_id=str(new_owner_id),
        )
