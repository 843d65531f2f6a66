"""
Application context: builds and owns every collaborator.

There is no global registry; code that needs a controller or service is
handed the context (or the specific object) explicitly.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from academix_admin.config import AdminConfig
from academix_admin.controllers.auth import AuthController
from academix_admin.controllers.books import BooksController
from academix_admin.controllers.colleges import CollegesController
from academix_admin.controllers.dashboard import DashboardController
from academix_admin.controllers.question_papers import QuestionPapersController
from academix_admin.controllers.settings import SettingsController
from academix_admin.controllers.students import IndividualUsersController, StudentsController
from academix_admin.controllers.users import UsersController
from academix_admin.http_client import ApiClient
from academix_admin.logging_config import get_logger
from academix_admin.notifications import Notifier
from academix_admin.services.auth import AuthService
from academix_admin.services.books import BooksService
from academix_admin.services.colleges import CollegesService
from academix_admin.services.dashboard import DashboardService
from academix_admin.services.question_papers import QuestionPapersService
from academix_admin.services.role_access import RoleAccessService
from academix_admin.services.settings import SettingsService
from academix_admin.services.students import IndividualUsersService, StudentsService
from academix_admin.services.users import UsersService
from academix_admin.token_store import CredentialStore


logger = get_logger("context")


class AppContext:
    """Wires config → credential store → HTTP client → services → controllers"""

    def __init__(
        self,
        config: Optional[AdminConfig] = None,
        notifier: Optional[Notifier] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or AdminConfig.load_default()
        self.notifier = notifier or Notifier()

        self.credentials = CredentialStore(self.config.credentials_file)
        self.client = ApiClient(self.config, self.credentials, transport=transport)
        self.access = RoleAccessService(self.credentials)

        self.auth_service = AuthService(self.client)
        self.books_service = BooksService(self.client, self.access)
        self.question_papers_service = QuestionPapersService(self.client, self.access)
        self.colleges_service = CollegesService(self.client, self.access)
        self.users_service = UsersService(self.client, self.access)
        self.settings_service = SettingsService(self.client, self.access)
        self.students_service = StudentsService(self.client, self.access)
        self.individual_users_service = IndividualUsersService(self.client, self.access)
        self.dashboard_service = DashboardService(self.client, self.access)

        page_size = self.config.page_size
        self.auth = AuthController(self.auth_service, self.credentials, self.access, self.notifier)
        self.books = BooksController(self.books_service, self.notifier, page_size)
        self.question_papers = QuestionPapersController(self.question_papers_service, self.notifier, page_size)
        self.colleges = CollegesController(self.colleges_service, self.notifier, page_size)
        self.users = UsersController(self.users_service, self.notifier, page_size)
        self.settings = SettingsController(self.settings_service, self.notifier)
        self.students = StudentsController(self.students_service, self.notifier, page_size)
        self.individual_users = IndividualUsersController(self.individual_users_service, self.notifier, page_size)
        self.dashboard = DashboardController(self.dashboard_service, self.notifier)

    async def start(self) -> None:
        """Restore any stored session"""
        await self.auth.check_authentication_status()
        logger.debug(f"Context started (authenticated={self.auth.is_authenticated})")

    async def close(self) -> None:
        await self.client.close()

    @classmethod
    @asynccontextmanager
    async def create(
        cls,
        config: Optional[AdminConfig] = None,
        notifier: Optional[Notifier] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> AsyncIterator["AppContext"]:
        context = cls(config, notifier, transport)
        try:
            await context.start()
            yield context
        finally:
            await context.close()
