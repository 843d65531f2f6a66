"""
Entity state controllers: observable lists kept in step with the backend.
"""

from academix_admin.controllers.auth import AuthController
from academix_admin.controllers.base import AttachableEntityController, EntityController
from academix_admin.controllers.books import BooksController
from academix_admin.controllers.colleges import CollegesController
from academix_admin.controllers.dashboard import DashboardController
from academix_admin.controllers.question_papers import QuestionPapersController
from academix_admin.controllers.settings import SettingsController
from academix_admin.controllers.state import AuthSnapshot, DashboardSnapshot, ListSnapshot, ObservableState
from academix_admin.controllers.students import IndividualUsersController, StudentsController
from academix_admin.controllers.users import AccountController, UsersController

__all__ = [
    "AccountController",
    "AttachableEntityController",
    "AuthController",
    "AuthSnapshot",
    "BooksController",
    "CollegesController",
    "DashboardController",
    "DashboardSnapshot",
    "EntityController",
    "IndividualUsersController",
    "ListSnapshot",
    "ObservableState",
    "QuestionPapersController",
    "SettingsController",
    "StudentsController",
    "UsersController",
]
