"""Data Access Objects for recordboard database operations."""

from recordboard.dao.base import BaseDAO, SupabaseClient, translate_error
from recordboard.dao.club_dao import ClubDAO, MembershipDAO
from recordboard.dao.record_dao import RecordDAO
from recordboard.dao.record_list_dao import RecordListDAO

__all__ = [
    # Base
    "BaseDAO",
    "SupabaseClient",
    "translate_error",
    # DAOs
    "ClubDAO",
    "MembershipDAO",
    "RecordDAO",
    "RecordListDAO",
]
