"""
Colleges API service.
"""

from typing import Any, Dict

from academix_admin.models.book import Book
from academix_admin.models.college import College
from academix_admin.models.common import Page, PaginationParams
from academix_admin.models.roles import AccessModule
from academix_admin.models.user import User
from academix_admin.services.base import ResourceService


class CollegesService(ResourceService[College]):
    collection = "colleges"
    record_key = "college"
    list_key = "colleges"
    model = College
    module = AccessModule.COLLEGES

    async def get_stats(self, college_id: str) -> Dict[str, Any]:
        """Counts reported by the backend (users, books, ...) as a plain mapping"""
        self.access.validate_access(self.module)
        response = await self.client.get(self._path(college_id, "stats"))
        data = response.data
        if isinstance(data, dict) and isinstance(data.get("stats"), dict):
            return data["stats"]
        return data if isinstance(data, dict) else {}

    async def list_users(self, college_id: str, page: int = 1, limit: int = 20) -> Page[User]:
        self.access.validate_access(self.module)
        pagination = PaginationParams(page=page, limit=limit)
        response = await self.client.get(self._path(college_id, "users"), params=pagination.to_query_params())
        return Page.from_response(User, response.data, "users", pagination)

    async def list_books(self, college_id: str, page: int = 1, limit: int = 20) -> Page[Book]:
        self.access.validate_access(self.module)
        pagination = PaginationParams(page=page, limit=limit)
        response = await self.client.get(self._path(college_id, "books"), params=pagination.to_query_params())
        return Page.from_response(Book, response.data, "books", pagination)
