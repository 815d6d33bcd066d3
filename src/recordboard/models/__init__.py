"""Pydantic models for club record boards."""

from recordboard.models.club import (
    Club,
    ClubSettingsUpdate,
    ClubWithRole,
    MemberRole,
    Membership,
    can_edit,
    is_owner,
)
from recordboard.models.record import (
    FLAG_NAMES,
    EditableRecord,
    RecordFlags,
    RecordReplacement,
    RecordWithHistory,
    SwimRecord,
)
from recordboard.models.record_list import (
    CourseType,
    ListGender,
    RecordList,
    RecordListCreate,
    RecordListUpdate,
)
from recordboard.models.user import AuthUser

__all__ = [
    # Club
    "Club",
    "ClubSettingsUpdate",
    "ClubWithRole",
    "MemberRole",
    "Membership",
    "can_edit",
    "is_owner",
    # Record
    "EditableRecord",
    "FLAG_NAMES",
    "RecordFlags",
    "RecordReplacement",
    "RecordWithHistory",
    "SwimRecord",
    # Record list
    "CourseType",
    "ListGender",
    "RecordList",
    "RecordListCreate",
    "RecordListUpdate",
    # User
    "AuthUser",
]
