"""
Question paper record and list filters.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from academix_admin.models.common import (
    LenientDatetime,
    LenientInt,
    LenientStr,
    QueryFilters,
    Record,
    RecordId,
    RequiredText,
    TrueByDefault,
)


class ExamType(str, Enum):
    MIDTERM = "midterm"
    FINAL = "final"
    QUIZ = "quiz"
    PRACTICE = "practice"

    @property
    def display_name(self) -> str:
        return self.value.title()

    @classmethod
    def from_string(cls, value: Optional[str]) -> Optional["ExamType"]:
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class QuestionPaper(Record):
    """
    A past exam paper. `year` is the academic year (1-4) and `semester`
    is 1-8; both are required. The PDF fields are filled in by upload:
    `pdf_url` is the storage URL and `pdf_access_url` the signed URL.
    """

    id: RecordId
    title: RequiredText
    subject: RequiredText
    year: int
    semester: int
    description: LenientStr = None
    exam_type: LenientStr = None
    marks: LenientInt = None
    college_id: LenientStr = None
    is_active: TrueByDefault = True
    created_at: LenientDatetime = None
    updated_at: LenientDatetime = None

    pdf_url: LenientStr = None
    pdf_access_url: LenientStr = None
    pdf_original_name: LenientStr = None

    @property
    def has_pdf(self) -> bool:
        return bool(self.pdf_url)

    @property
    def formatted_exam_type(self) -> str:
        exam_type = ExamType.from_string(self.exam_type)
        if exam_type is not None:
            return exam_type.display_name
        return self.exam_type or "N/A"

    @property
    def formatted_year_semester(self) -> str:
        return f"Year {self.year}, Semester {self.semester}"


@dataclass(frozen=True)
class QuestionPaperFilters(QueryFilters):
    """Query filters for the question paper list endpoint"""
    search: Optional[str] = None
    subject: Optional[str] = None
    year: Optional[int] = None
    semester: Optional[int] = None
    exam_type: Optional[ExamType] = None
    college_id: Optional[str] = None
