"""
Domain API services, one per backend resource.
"""

from academix_admin.services.auth import AuthService, AuthSession
from academix_admin.services.books import BooksService
from academix_admin.services.colleges import CollegesService
from academix_admin.services.dashboard import DashboardService
from academix_admin.services.question_papers import QuestionPapersService
from academix_admin.services.role_access import RoleAccessService
from academix_admin.services.settings import SettingsService
from academix_admin.services.students import IndividualUsersService, StudentsService
from academix_admin.services.users import UsersService

__all__ = [
    "AuthService",
    "AuthSession",
    "BooksService",
    "CollegesService",
    "DashboardService",
    "IndividualUsersService",
    "QuestionPapersService",
    "RoleAccessService",
    "SettingsService",
    "StudentsService",
    "UsersService",
]
