"""
User record and list filters.
"""

from dataclasses import dataclass
from typing import ClassVar, Dict, Optional

from pydantic import field_validator

from academix_admin.models.college import College
from academix_admin.models.common import (
    FalseByDefault,
    LenientDatetime,
    LenientStr,
    QueryFilters,
    Record,
    RecordId,
    RequiredText,
    TrueByDefault,
    nested_or_none,
)
from academix_admin.models.roles import UserRole


class User(Record):
    id: RecordId
    email: RequiredText
    full_name: RequiredText
    role: RequiredText
    college_id: LenientStr = None
    student_id: LenientStr = None
    mobile: LenientStr = None
    profile_image_url: LenientStr = None
    is_active: TrueByDefault = True
    is_verified: FalseByDefault = False
    created_at: LenientDatetime = None
    updated_at: LenientDatetime = None
    college: Optional[College] = None

    @field_validator("college", mode="wrap")
    @classmethod
    def _lenient_college(cls, value, handler):
        return nested_or_none(value, handler)

    @property
    def user_role(self) -> Optional[UserRole]:
        return UserRole.from_string(self.role)

    @property
    def role_display_name(self) -> str:
        role = self.user_role
        return role.display_name if role else self.role

    @property
    def status(self) -> str:
        return "Active" if self.is_active else "Inactive"


@dataclass(frozen=True)
class UserFilters(QueryFilters):
    QUERY_ALIASES: ClassVar[Dict[str, str]] = {"college_id": "collegeId"}

    search: Optional[str] = None
    role: Optional[UserRole] = None
    college_id: Optional[str] = None
    is_active: Optional[bool] = None
