"""
Books API service: CRUD on `books`, PDF/cover uploads, search, access logging,
categories and statistics.
"""

from typing import Any, Dict, List, Optional, Union

from academix_admin.logging_config import get_logger
from academix_admin.models.attachment import BOOK_COVER, BOOK_PDF, AttachmentPayload, FileReference
from academix_admin.models.book import Book
from academix_admin.models.common import PaginationParams, extract_list, parse_records
from academix_admin.models.roles import AccessModule
from academix_admin.services.base import AttachableResourceService


logger = get_logger("services.books")

ACCESS_TYPES = ("view", "download")


class BooksService(AttachableResourceService[Book]):
    collection = "books"
    record_key = "book"
    list_key = "books"
    model = Book
    module = AccessModule.BOOKS
    attachment_kinds = {BOOK_PDF.purpose: BOOK_PDF, BOOK_COVER.purpose: BOOK_COVER}

    async def upload_pdf(
        self,
        book_id: str,
        file_name: str,
        file_path: Optional[str] = None,
        file_bytes: Optional[Union[bytes, bytearray]] = None,
    ) -> FileReference:
        payload = AttachmentPayload(
            BOOK_PDF.purpose, file_name, file_path=file_path,
            file_bytes=bytes(file_bytes) if file_bytes is not None else None,
        )
        return await self.upload_attachment(book_id, payload)

    async def upload_cover(
        self,
        book_id: str,
        file_name: str,
        file_path: Optional[str] = None,
        file_bytes: Optional[Union[bytes, bytearray]] = None,
    ) -> FileReference:
        payload = AttachmentPayload(
            BOOK_COVER.purpose, file_name, file_path=file_path,
            file_bytes=bytes(file_bytes) if file_bytes is not None else None,
        )
        return await self.upload_attachment(book_id, payload)

    async def search(self, query: str, page: int = 1, limit: int = 20) -> List[Book]:
        """GET books/search?q=<query>; malformed rows are skipped"""
        self.access.validate_access(self.module)
        params = {"q": query.strip(), **PaginationParams(page=page, limit=limit).to_query_params()}
        response = await self.client.get(self._path("search"), params=params)
        return parse_records(Book, extract_list(response.data, self.list_key), skip_invalid=True)

    async def log_access(self, book_id: str, access_type: str = "view") -> bool:
        """Record a view or download of a book"""
        if access_type not in ACCESS_TYPES:
            raise ValueError(f"access_type must be one of {ACCESS_TYPES}")
        await self.client.post(self._path(book_id, "access"), {"access_type": access_type})
        logger.debug(f"Logged {access_type} for book {book_id}")
        return True

    async def categories(self) -> List[str]:
        """Category names the backend offers"""
        self.access.validate_access(self.module)
        response = await self.client.get(self._path("categories"))
        return [str(c) for c in extract_list(response.data, "categories") if c]

    async def statistics(self) -> Dict[str, Any]:
        self.access.validate_access(self.module)
        response = await self.client.get(self._path("statistics"))
        data = response.data
        return dict(data) if isinstance(data, dict) else {}
