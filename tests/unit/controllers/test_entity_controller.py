"""
Unit Tests for the entity list controllers
Tests for: loading and paging, observers, updates, book views
"""
import asyncio

import pytest
from faker import Faker

from academix_admin.controllers.books import BooksController
from academix_admin.controllers.colleges import CollegesController
from academix_admin.exceptions import NetworkError, NotFoundError
from academix_admin.models.book import BookCategory, BookFilters
from academix_admin.models.college import College
from academix_admin.models.common import Page

fake = Faker()


async def _seed_books(service, count):
    for index in range(count):
        await service.create({
            "name": f"Book {index + 1}",
            "category": "Mathematics" if index % 2 else "Physics",
            "year": "2024" if index < 2 else "2023",
            "semester": index + 1,
            "download_count": index * 10,
        })


class TestLoading:
    """Test first page and load-more behaviour"""

    @pytest.mark.asyncio
    async def test_load_first_page(self, books_controller, book_service):
        """Test load replaces items with page one"""
        await _seed_books(book_service, 3)

        await books_controller.load()

        assert [b.name for b in books_controller.items] == ["Book 1", "Book 2"]
        assert books_controller.total_items == 3
        assert books_controller.has_more is True
        assert books_controller.current_page == 1
        assert not books_controller.is_loading

    @pytest.mark.asyncio
    async def test_load_more_appends(self, books_controller, book_service):
        """Test load_more requests the next page and appends it"""
        await _seed_books(book_service, 3)
        await books_controller.load()

        await books_controller.load_more()

        assert len(books_controller.items) == 3
        assert books_controller.current_page == 2
        assert books_controller.has_more is False
        assert book_service.list_calls[-1][1:] == (2, 2)

    @pytest.mark.asyncio
    async def test_load_more_failure_reverts_page(self, books_controller, book_service):
        """Test a failed load_more keeps the page so a retry asks again"""
        await _seed_books(book_service, 3)
        await books_controller.load()
        book_service.list_error = NetworkError()

        await books_controller.load_more()

        assert books_controller.current_page == 1
        assert len(books_controller.items) == 2
        assert books_controller.has_error

        book_service.list_error = None
        await books_controller.load_more()
        assert book_service.list_calls[-1][1] == 2
        assert len(books_controller.items) == 3

    @pytest.mark.asyncio
    async def test_load_more_without_more_is_noop(self, books_controller, book_service):
        """Test load_more does nothing on the last page"""
        await _seed_books(book_service, 1)
        await books_controller.load()
        calls = len(book_service.list_calls)

        await books_controller.load_more()

        assert len(book_service.list_calls) == calls

    @pytest.mark.asyncio
    async def test_concurrent_load_ignored(self, books_controller, book_service):
        """Test a load while another is in flight returns immediately"""
        await _seed_books(book_service, 2)
        original_list = book_service.list
        release = asyncio.Event()

        async def slow_list(filters=None, page=1, limit=20):
            await release.wait()
            return await original_list(filters, page, limit)

        book_service.list = slow_list
        first = asyncio.ensure_future(books_controller.load())
        await asyncio.sleep(0)
        assert books_controller.is_loading

        await books_controller.load()
        release.set()
        await first

        assert len(book_service.list_calls) == 1

    @pytest.mark.asyncio
    async def test_load_failure_sets_error(self, books_controller, book_service, notifier):
        """Test a failed load stores the message and clears the flag"""
        book_service.list_error = NetworkError(timed_out=True)

        await books_controller.load()

        assert books_controller.error == "Request timed out. Please try again."
        assert not books_controller.is_loading
        assert notifier.last.title == "Failed to load books"

    @pytest.mark.asyncio
    async def test_apply_filters_passes_filters(self, books_controller, book_service):
        """Test filters are stored and sent with the request"""
        filters = BookFilters(category=BookCategory.PHYSICS)

        await books_controller.apply_filters(filters)

        assert book_service.list_calls[-1][0] == filters
        assert books_controller.state.filters == filters

    @pytest.mark.asyncio
    async def test_refresh_clears_before_request(self, books_controller, book_service):
        """Test refresh empties the list then reloads"""
        await _seed_books(book_service, 2)
        await books_controller.load()
        seen = []
        books_controller.subscribe(lambda snap: seen.append((len(snap.items), snap.is_loading)))

        await books_controller.refresh()

        assert seen[0] == (0, True)
        assert len(books_controller.items) == 2


class TestObservers:
    """Test subscription and batched notifications"""

    @pytest.mark.asyncio
    async def test_observer_sees_final_state_once(self, books_controller, book_metadata):
        """Test a create notifies observers with the appended record and no saving flag"""
        await books_controller.create(book_metadata)
        snapshots = []
        books_controller.subscribe(snapshots.append)

        await books_controller.create(book_metadata)

        assert snapshots[-1].is_saving is False
        assert len(snapshots[-1].items) == 2
        assert all(not (len(s.items) == 2 and s.is_saving) for s in snapshots)

    @pytest.mark.asyncio
    async def test_unsubscribe(self, books_controller, book_metadata):
        """Test an unsubscribed observer is not called"""
        calls = []
        unsubscribe = books_controller.subscribe(calls.append)
        unsubscribe()

        await books_controller.create(book_metadata)

        assert calls == []

    def test_items_is_a_copy(self, books_controller):
        """Test mutating items does not touch controller state"""
        items = books_controller.items
        items.append("not a book")

        assert books_controller.items == []

    @pytest.mark.asyncio
    async def test_clear_error(self, books_controller, book_service):
        """Test clear_error resets the message"""
        book_service.list_error = NetworkError()
        await books_controller.load()

        books_controller.clear_error()

        assert books_controller.error == ""
        assert not books_controller.has_error


class TestUpdate:
    """Test update and toggle"""

    @pytest.mark.asyncio
    async def test_update_replaces_in_place(self, books_controller, book_service):
        """Test the updated record keeps its position"""
        await _seed_books(book_service, 2)
        await books_controller.load()

        updated = await books_controller.update("book-1", {"name": "Renamed"})

        assert updated.name == "Renamed"
        assert [b.name for b in books_controller.items] == ["Renamed", "Book 2"]

    @pytest.mark.asyncio
    async def test_toggle_active(self, books_controller, book_service):
        """Test toggle_active flips is_active"""
        await _seed_books(book_service, 1)
        await books_controller.load()

        assert await books_controller.toggle_active("book-1") is True

        assert books_controller.get_local("book-1").is_active is False

    @pytest.mark.asyncio
    async def test_toggle_untracked_book(self, books_controller):
        """Test toggle_active on an unknown id does nothing"""
        assert await books_controller.toggle_active("missing") is False


class TestBookViews:
    """Test local views over the loaded books"""

    @pytest.mark.asyncio
    async def test_local_filters(self, book_service, notifier):
        """Test category, year and semester views"""
        controller = BooksController(book_service, notifier, page_size=10)
        await _seed_books(book_service, 4)
        await controller.load()

        assert [b.name for b in controller.by_category(BookCategory.MATHEMATICS)] == ["Book 2", "Book 4"]
        assert [b.name for b in controller.by_category("physics")] == ["Book 1", "Book 3"]
        assert [b.name for b in controller.by_year(2024)] == ["Book 1", "Book 2"]
        assert [b.name for b in controller.by_semester(3)] == ["Book 3"]

    @pytest.mark.asyncio
    async def test_statistics(self, book_service, notifier):
        """Test statistics counts loaded books"""
        controller = BooksController(book_service, notifier, page_size=10)
        await _seed_books(book_service, 3)
        await controller.load()

        stats = controller.statistics()

        assert stats["total"] == 3
        assert stats["active"] == 3
        assert stats["with_pdf"] == 0
        assert stats["total_downloads"] == 30

    @pytest.mark.asyncio
    async def test_search_does_not_touch_list(self, books_controller, book_service):
        """Test search returns matches without changing items"""
        await _seed_books(book_service, 2)

        results = await books_controller.search("book 2")

        assert [b.name for b in results] == ["Book 2"]
        assert books_controller.items == []

    @pytest.mark.asyncio
    async def test_blank_search(self, books_controller):
        """Test a blank query returns nothing"""
        assert await books_controller.search("   ") == []


class TestQuestionPaperViews:
    """Test local views over the loaded question papers"""

    @pytest.mark.asyncio
    async def test_subject_and_year_views(self, papers_controller, paper_service, paper_metadata):
        """Test subject matching ignores case"""
        await paper_service.create(paper_metadata(subject="Networks", year=2, semester=3))
        await paper_service.create(paper_metadata(subject="Compilers", year=2, semester=4))
        await papers_controller.load()

        assert [p.subject for p in papers_controller.by_subject("networks")] == ["Networks"]
        assert len(papers_controller.by_year_semester(2)) == 2
        assert [p.semester for p in papers_controller.by_year_semester(2, 4)] == [4]


class FakeCollegesService:
    def __init__(self, colleges, stats_error=None):
        self.colleges = colleges
        self.stats_error = stats_error

    async def list(self, filters=None, page=1, limit=20):
        return Page(items=self.colleges, total=len(self.colleges), page=page, limit=limit)

    async def get_stats(self, college_id):
        if self.stats_error:
            raise self.stats_error
        return {"users": 12, "books": 30}


class TestCollegesController:
    """Test colleges controller helpers"""

    def _colleges(self):
        return [
            College(id="1", name=fake.company(), code="ENG01", is_active=True),
            College(id="2", name=fake.company(), code="MED02", is_active=False),
        ]

    @pytest.mark.asyncio
    async def test_find_by_code_case_insensitive(self, notifier):
        """Test lookup by code ignores case"""
        controller = CollegesController(FakeCollegesService(self._colleges()), notifier)
        await controller.load()

        assert controller.find_by_code("med02").id == "2"
        assert controller.find_by_code("XXX") is None
        assert [c.id for c in controller.active_colleges] == ["1"]

    @pytest.mark.asyncio
    async def test_stats_failure(self, notifier):
        """Test stats failure returns None and records the error"""
        service = FakeCollegesService([], stats_error=NotFoundError("[404] College not found"))
        controller = CollegesController(service, notifier)

        assert await controller.get_stats("9") is None
        assert controller.error == "[404] College not found"
