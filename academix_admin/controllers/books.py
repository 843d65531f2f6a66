"""
Books controller: the book list plus PDF/cover uploads, search and local
views over the loaded books.
"""

from typing import Any, Dict, List, Optional, Union

from academix_admin.controllers.base import AttachableEntityController
from academix_admin.models.attachment import BOOK_COVER, BOOK_PDF, AttachmentPayload
from academix_admin.models.book import Book, BookCategory
from academix_admin.notifications import Notifier
from academix_admin.services.books import BooksService


class BooksController(AttachableEntityController[Book]):
    entity_label = "Book"

    def __init__(self, service: BooksService, notifier: Optional[Notifier] = None, page_size: int = 20):
        super().__init__(service, notifier, page_size)

    async def upload_pdf(
        self,
        book_id: str,
        file_name: str,
        file_path: Optional[str] = None,
        file_bytes: Optional[Union[bytes, bytearray]] = None,
    ) -> bool:
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
    ) -> bool:
        payload = AttachmentPayload(
            BOOK_COVER.purpose, file_name, file_path=file_path,
            file_bytes=bytes(file_bytes) if file_bytes is not None else None,
        )
        return await self.upload_attachment(book_id, payload)

    async def toggle_active(self, book_id: str) -> bool:
        book = self.get_local(book_id)
        if book is None:
            return False
        return await self.update(book_id, {"is_active": not book.is_active}) is not None

    async def search(self, query: str) -> List[Book]:
        """Server-side search; results are returned, the list is left alone"""
        if not query.strip():
            return []
        try:
            return await self.service.search(query.strip())
        except Exception as e:
            self._fail("Search failed", e)
            return []

    async def categories(self) -> List[str]:
        try:
            return await self.service.categories()
        except Exception as e:
            self._fail("Failed to load book categories", e)
            return []

    # Local views over the loaded list

    def by_category(self, category: Union[BookCategory, str]) -> List[Book]:
        wanted = category.value if isinstance(category, BookCategory) else category
        return [b for b in self.items if (b.category or "").lower() == wanted.lower()]

    def by_year(self, year: Union[int, str]) -> List[Book]:
        return [b for b in self.items if b.year == str(year)]

    def by_semester(self, semester: int) -> List[Book]:
        return [b for b in self.items if b.semester == semester]

    def statistics(self) -> Dict[str, Any]:
        books = self.items
        return {
            "total": len(books),
            "active": sum(1 for b in books if b.is_active),
            "inactive": sum(1 for b in books if not b.is_active),
            "with_pdf": sum(1 for b in books if b.has_pdf),
            "with_cover": sum(1 for b in books if b.has_cover),
            "total_downloads": sum(b.download_count for b in books),
        }
