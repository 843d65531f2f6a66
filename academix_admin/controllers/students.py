"""
Students and individual users controllers.
"""

from typing import Any, List, Mapping, Optional

from academix_admin.controllers.users import AccountController, UsersController
from academix_admin.models.book import Book
from academix_admin.models.student import IndividualUser, IndividualUserFilters, Student, StudentFilters
from academix_admin.notifications import Notifier
from academix_admin.services.students import IndividualUsersService, StudentsService


class StudentsController(UsersController):
    entity_label = "Student"

    def __init__(self, service: StudentsService, notifier: Optional[Notifier] = None, page_size: int = 20):
        super().__init__(service, notifier, page_size)

    def _current_filters(self) -> StudentFilters:
        filters = self.state.filters
        return filters if isinstance(filters, StudentFilters) else StudentFilters()

    async def register(self, details: Mapping[str, Any]) -> Optional[Student]:
        """Register a student account and add it to the list"""
        student = await self._create_record(details)
        if student is not None:
            self.notifier.success("Student registered", f'Student "{student.full_name}" registered successfully')
        return student

    async def filter_by_college(self, college_id: Optional[str]) -> None:
        await self.apply_filters(self._current_filters().copy_with(college_id=college_id or None))

    async def search_students(self, query: str) -> None:
        """Reload the list narrowed to `query`; an empty query clears the search"""
        await self.apply_filters(self._current_filters().copy_with(search=query.strip() or None))

    async def clear_filters(self) -> None:
        await self.apply_filters(StudentFilters())

    async def my_books(self) -> List[Book]:
        try:
            return await self.service.my_books()
        except Exception as e:
            self._fail("Failed to load student books", e)
            return []


class IndividualUsersController(AccountController[IndividualUser]):
    entity_label = "Individual user"

    def __init__(self, service: IndividualUsersService, notifier: Optional[Notifier] = None,
                 page_size: int = 20):
        super().__init__(service, notifier, page_size)

    async def search_users(self, query: str) -> None:
        await self.apply_filters(IndividualUserFilters(search=query.strip() or None))

    async def reset_password(self, user_id: str, new_password: str) -> bool:
        try:
            await self.service.reset_password(user_id, new_password)
        except Exception as e:
            self._fail("Failed to change password", e)
            return False
        self.notifier.success("Password changed", f"Password updated for individual user {user_id}")
        return True
