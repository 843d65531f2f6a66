"""
College record and list filters.
"""

from dataclasses import dataclass
from typing import Optional

from academix_admin.models.common import (
    LenientDatetime,
    LenientStr,
    QueryFilters,
    Record,
    RecordId,
    RequiredText,
    TextOrEmpty,
    TrueByDefault,
)


class College(Record):
    id: RecordId
    name: RequiredText
    code: RequiredText
    address: TextOrEmpty = ""
    phone: TextOrEmpty = ""
    email: TextOrEmpty = ""
    website: TextOrEmpty = ""
    logo_url: LenientStr = None
    is_active: TrueByDefault = True
    created_at: LenientDatetime = None
    updated_at: LenientDatetime = None

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.code})"


@dataclass(frozen=True)
class CollegeFilters(QueryFilters):
    search: Optional[str] = None
    is_active: Optional[bool] = None
