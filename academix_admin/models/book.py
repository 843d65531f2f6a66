"""
Book record, its nested summaries, categories and list filters.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import field_validator

from academix_admin.models.common import (
    Count,
    nested_or_none,
    QueryFilters,
    LenientDatetime,
    LenientFloat,
    LenientInt,
    LenientStr,
    Record,
    RecordId,
    RequiredText,
    TrueByDefault,
)


class Creator(Record):
    id: RecordId
    full_name: LenientStr = None
    email: LenientStr = None


class CollegeSummary(Record):
    id: RecordId
    name: LenientStr = None
    code: LenientStr = None


class Book(Record):
    """A catalog book; file fields stay None until an upload succeeds"""

    id: RecordId
    name: RequiredText
    description: LenientStr = None
    authorname: LenientStr = None
    isbn: LenientStr = None
    publisher: LenientStr = None
    publication_year: LenientInt = None
    language: LenientStr = None
    category: LenientStr = None
    subject: LenientStr = None
    rate: LenientStr = None
    rating: LenientFloat = None
    year: LenientStr = None
    semester: LenientInt = None
    pages: LenientInt = None
    college_id: LenientStr = None
    download_count: Count = 0
    is_active: TrueByDefault = True
    created_by: LenientStr = None
    created_at: LenientDatetime = None
    updated_at: LenientDatetime = None
    creator: Optional[Creator] = None
    college: Optional[CollegeSummary] = None

    pdf_url: LenientStr = None
    pdf_original_name: LenientStr = None
    cover_image_url: LenientStr = None
    cover_original_name: LenientStr = None

    @field_validator("creator", "college", mode="wrap")
    @classmethod
    def _lenient_nested(cls, value, handler):
        return nested_or_none(value, handler)

    @property
    def has_pdf(self) -> bool:
        return bool(self.pdf_url)

    @property
    def has_cover(self) -> bool:
        return bool(self.cover_image_url)

    @property
    def display_rating(self) -> str:
        return f"{self.rating:.1f}" if self.rating is not None else "N/A"


class BookCategory(str, Enum):
    COMPUTER_SCIENCE = "Computer Science"
    MATHEMATICS = "Mathematics"
    PHYSICS = "Physics"
    CHEMISTRY = "Chemistry"
    BIOLOGY = "Biology"
    ENGINEERING = "Engineering"
    MEDICINE = "Medicine"
    LAW = "Law"
    BUSINESS = "Business"
    LITERATURE = "Literature"
    HISTORY = "History"
    PHILOSOPHY = "Philosophy"
    PSYCHOLOGY = "Psychology"
    EDUCATION = "Education"
    OTHER = "Other"

    @classmethod
    def from_string(cls, value: Optional[str]) -> Optional["BookCategory"]:
        if not value:
            return None
        for category in cls:
            if category.value.lower() == value.strip().lower():
                return category
        return None


@dataclass(frozen=True)
class BookFilters(QueryFilters):
    """Query filters for the book list endpoint"""
    search: Optional[str] = None
    category: Optional[BookCategory] = None
    subject: Optional[str] = None
    year: Optional[int] = None
    semester: Optional[int] = None
    author: Optional[str] = None
    publisher: Optional[str] = None
    college_id: Optional[str] = None
    is_active: Optional[bool] = None
