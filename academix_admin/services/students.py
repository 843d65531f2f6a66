"""
Students and individual users API services.

Students are `users` rows with role=student; registering one goes through
auth/register. Individual users (accounts without a college) have their own
`individual-users` collection, managed by super admins only.
"""

from typing import Any, List, Mapping

from academix_admin.logging_config import get_logger
from academix_admin.models.book import Book
from academix_admin.models.common import extract_list, parse_records
from academix_admin.models.roles import AccessModule
from academix_admin.models.student import IndividualUser, Student
from academix_admin.services.base import ResourceService
from academix_admin.services.users import UsersService


logger = get_logger("services.students")

STUDENT_ROLE = "student"


class StudentsService(UsersService):
    model = Student
    module = AccessModule.STUDENTS
    list_params = {"role": STUDENT_ROLE}

    async def create(self, metadata: Mapping[str, Any]) -> Student:
        """Register a student account; the role is always student"""
        self.access.validate_modify(self.module)
        logger.info("Registering student")
        response = await self.client.post("auth/register", {**metadata, "role": STUDENT_ROLE})
        student = self._decode(response.data)
        logger.info(f"Registered student {student.id}")
        return student

    async def my_books(self) -> List[Book]:
        """Books available to the signed-in student"""
        response = await self.client.get("books/my-books")
        return parse_records(Book, extract_list(response.data, "books"), skip_invalid=True)


class IndividualUsersService(ResourceService[IndividualUser]):
    collection = "individual-users"
    record_key = "user"
    list_key = "users"
    model = IndividualUser
    module = AccessModule.USERS

    async def reset_password(self, user_id: str, new_password: str) -> bool:
        """PUT individual-users/<id>/password; no current password is needed"""
        self.access.validate_modify(self.module)
        await self.client.put(self._path(user_id, "password"), {"newPassword": new_password})
        logger.info(f"Password reset for individual user {user_id}")
        return True

    async def activate(self, user_id: str) -> bool:
        self.access.validate_modify(self.module)
        await self.client.put(self._path(user_id, "activate"))
        logger.info(f"Activated individual user {user_id}")
        return True

    async def deactivate(self, user_id: str) -> bool:
        self.access.validate_modify(self.module)
        await self.client.put(self._path(user_id, "deactivate"))
        logger.info(f"Deactivated individual user {user_id}")
        return True
