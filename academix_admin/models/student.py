"""
Student and individual user records.

Both are user accounts: a student belongs to a college and is listed from
users?role=student, an individual user has no college and lives under its
own collection.
"""

from dataclasses import dataclass
from typing import ClassVar, Dict, Optional

from academix_admin.models.common import LenientInt, LenientStr, QueryFilters, TextOrEmpty
from academix_admin.models.user import User


class Student(User):
    year: LenientStr = None

    @property
    def year_label(self) -> str:
        return f"Year {self.year}" if self.year else "-"


class IndividualUser(User):
    role: TextOrEmpty = "individual"
    books_purchased: LenientInt = None
    last_login: LenientStr = None


@dataclass(frozen=True)
class StudentFilters(QueryFilters):
    QUERY_ALIASES: ClassVar[Dict[str, str]] = {"college_id": "collegeId"}

    search: Optional[str] = None
    college_id: Optional[str] = None
    is_active: Optional[bool] = None


@dataclass(frozen=True)
class IndividualUserFilters(QueryFilters):
    search: Optional[str] = None
