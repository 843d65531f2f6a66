"""
Domain records decoded from backend responses.
"""

from academix_admin.models.attachment import (
    BOOK_COVER,
    BOOK_PDF,
    QUESTION_PAPER_PDF,
    AttachmentKind,
    AttachmentPayload,
    AttachmentResult,
    FileReference,
    UploadReport,
)
from academix_admin.models.book import Book, BookCategory, BookFilters, CollegeSummary, Creator
from academix_admin.models.college import College, CollegeFilters
from academix_admin.models.common import Page, PaginationParams, Record, parse_record, parse_records
from academix_admin.models.dashboard import AuthLog, AuthLogFilters, ChartPoint, DashboardActivity, DashboardStats
from academix_admin.models.question_paper import ExamType, QuestionPaper, QuestionPaperFilters
from academix_admin.models.roles import AccessModule, RolePermissions, UserRole
from academix_admin.models.setting import SystemSetting
from academix_admin.models.student import IndividualUser, IndividualUserFilters, Student, StudentFilters
from academix_admin.models.user import User, UserFilters

__all__ = [
    "AccessModule",
    "AttachmentKind",
    "AttachmentPayload",
    "AttachmentResult",
    "AuthLog",
    "AuthLogFilters",
    "BOOK_COVER",
    "BOOK_PDF",
    "Book",
    "BookCategory",
    "BookFilters",
    "ChartPoint",
    "College",
    "CollegeFilters",
    "CollegeSummary",
    "Creator",
    "DashboardActivity",
    "DashboardStats",
    "ExamType",
    "FileReference",
    "IndividualUser",
    "IndividualUserFilters",
    "Page",
    "PaginationParams",
    "QUESTION_PAPER_PDF",
    "QuestionPaper",
    "QuestionPaperFilters",
    "Record",
    "RolePermissions",
    "Student",
    "StudentFilters",
    "SystemSetting",
    "UploadReport",
    "User",
    "UserFilters",
    "UserRole",
    "parse_record",
    "parse_records",
]
