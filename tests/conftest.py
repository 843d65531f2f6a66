"""
AcademixStore Admin - Test Configuration and Fixtures
"""
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import httpx
import pytest
from faker import Faker
from jose import jwt

from academix_admin.config import AdminConfig
from academix_admin.controllers.books import BooksController
from academix_admin.controllers.question_papers import QuestionPapersController
from academix_admin.exceptions import AcademixError
from academix_admin.http_client import ApiClient
from academix_admin.models.attachment import (
    BOOK_COVER,
    BOOK_PDF,
    QUESTION_PAPER_PDF,
    AttachmentKind,
    AttachmentPayload,
    FileReference,
)
from academix_admin.models.book import Book
from academix_admin.models.common import Page
from academix_admin.models.question_paper import QuestionPaper
from academix_admin.notifications import MemoryNotifier
from academix_admin.services.role_access import RoleAccessService
from academix_admin.token_store import CredentialStore

fake = Faker()

API_BASE_URL = "https://api.test/api/"
TEST_SIGNING_KEY = "test-signing-key"


# ============================================
# HTTP backend double
# ============================================

class MockBackend:
    """
    Canned responses keyed by (method, path) for httpx.MockTransport.

    A route is either (status, json_body), an exception to raise, or a
    callable taking the request. Unknown routes answer 404.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], Any] = {}

    def add(self, method: str, path: str, status: int = 200, json: Any = None) -> None:
        self.routes[(method.upper(), "/api/" + path.lstrip("/"))] = (status, json)

    def add_raw(self, method: str, full_path: str, route: Any) -> None:
        self.routes[(method.upper(), full_path)] = route

    def fail(self, method: str, path: str, error: Exception) -> None:
        self.routes[(method.upper(), "/api/" + path.lstrip("/"))] = error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"success": False, "message": "Route not found"})
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        status, body = route
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        full_path = "/api/" + path.lstrip("/")
        return [r for r in self.requests if r.method == method.upper() and r.url.path == full_path]


# ============================================
# Controller service double
# ============================================

class FakeResourceService:
    """
    In-memory stand-in for an attachable resource service.

    Records every create/upload/delete call. Set `create_error`,
    `upload_errors[purpose]`, `upload_error` or `delete_error` to make the
    matching call raise.
    """

    def __init__(self, model, kinds: Mapping[str, AttachmentKind], id_prefix: str):
        self.model = model
        self.attachment_kinds = dict(kinds)
        self.id_prefix = id_prefix
        self.records: Dict[str, Any] = {}
        self.create_calls: List[Dict[str, Any]] = []
        self.upload_calls: List[Tuple[str, str, str, Optional[int]]] = []
        self.delete_calls: List[str] = []
        self.list_calls: List[Tuple[Any, int, int]] = []
        self.create_error: Optional[Exception] = None
        self.upload_error: Optional[Exception] = None
        self.upload_errors: Dict[str, Exception] = {}
        self.delete_error: Optional[Exception] = None
        self.list_error: Optional[Exception] = None
        self._counter = 0

    async def create(self, metadata: Mapping[str, Any]):
        self.create_calls.append(dict(metadata))
        if self.create_error is not None:
            raise self.create_error
        self._counter += 1
        record = self.model.model_validate({"id": f"{self.id_prefix}-{self._counter}", **metadata})
        self.records[record.id] = record
        return record

    async def update(self, record_id: str, changes: Mapping[str, Any]):
        record = self.records[record_id].copy_with(**changes)
        self.records[record_id] = record
        return record

    async def delete(self, record_id: str) -> bool:
        self.delete_calls.append(record_id)
        if self.delete_error is not None:
            raise self.delete_error
        self.records.pop(record_id, None)
        return True

    async def list(self, filters=None, page: int = 1, limit: int = 20) -> Page:
        self.list_calls.append((filters, page, limit))
        if self.list_error is not None:
            raise self.list_error
        items = list(self.records.values())
        start = (page - 1) * limit
        return Page(
            items=items[start:start + limit],
            total=len(items),
            page=page,
            limit=limit,
            total_pages=max(1, math.ceil(len(items) / limit)),
        )

    async def search(self, query: str):
        return [r for r in self.records.values() if query.lower() in r.name.lower()]

    def attachment_kind(self, purpose: str) -> AttachmentKind:
        if purpose not in self.attachment_kinds:
            raise AcademixError(f"No '{purpose}' attachment", code="UNKNOWN_ATTACHMENT")
        return self.attachment_kinds[purpose]

    async def upload_attachment(self, record_id: str, payload: AttachmentPayload) -> FileReference:
        self.upload_calls.append((record_id, payload.purpose, payload.file_name, payload.size))
        error = self.upload_errors.get(payload.purpose) or self.upload_error
        if error is not None:
            raise error
        self.attachment_kind(payload.purpose)
        return FileReference(
            url=f"https://files.test/{record_id}/{payload.file_name}",
            original_name=payload.file_name,
        )


# ============================================
# Fixtures
# ============================================

@pytest.fixture
def config(tmp_path) -> AdminConfig:
    """Config pointed at the mock API with credentials under tmp_path"""
    return AdminConfig(api_base_url=API_BASE_URL, config_dir=str(tmp_path), timeout=5.0)


@pytest.fixture
def credentials(config) -> CredentialStore:
    return CredentialStore(config.credentials_file)


@pytest.fixture
def backend() -> MockBackend:
    return MockBackend()


@pytest.fixture
def api_client(config, credentials, backend) -> ApiClient:
    return ApiClient(config, credentials, transport=backend.transport)


@pytest.fixture
def access(credentials) -> RoleAccessService:
    """Role access with a super admin signed in"""
    service = RoleAccessService(credentials)
    service.set_role("super_admin")
    return service


@pytest.fixture
def notifier() -> MemoryNotifier:
    return MemoryNotifier()


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Build an HS256 JWT; the client never verifies the signature"""
    def _make_token(role: str = "super_admin", expires_in: timedelta = timedelta(hours=1), **claims) -> str:
        payload = {
            "sub": claims.pop("sub", fake.uuid4()),
            "role": role,
            "exp": int((datetime.now(timezone.utc) + expires_in).timestamp()),
        }
        payload.update(claims)
        return jwt.encode(payload, TEST_SIGNING_KEY, algorithm="HS256")
    return _make_token


@pytest.fixture
def book_service() -> FakeResourceService:
    return FakeResourceService(Book, {BOOK_PDF.purpose: BOOK_PDF, BOOK_COVER.purpose: BOOK_COVER}, "book")


@pytest.fixture
def paper_service() -> FakeResourceService:
    return FakeResourceService(QuestionPaper, {QUESTION_PAPER_PDF.purpose: QUESTION_PAPER_PDF}, "qp")


@pytest.fixture
def books_controller(book_service, notifier) -> BooksController:
    return BooksController(book_service, notifier, page_size=2)


@pytest.fixture
def papers_controller(paper_service, notifier) -> QuestionPapersController:
    return QuestionPapersController(paper_service, notifier)


@pytest.fixture
def book_metadata() -> Dict[str, Any]:
    return {
        "name": fake.catch_phrase(),
        "authorname": fake.name(),
        "year": "2024",
        "semester": 3,
    }


@pytest.fixture
def paper_metadata() -> Callable[..., Dict[str, Any]]:
    def _paper_metadata(**overrides) -> Dict[str, Any]:
        values = {
            "title": fake.sentence(nb_words=3).rstrip("."),
            "subject": fake.word().title(),
            "year": fake.random_int(1, 4),
            "semester": fake.random_int(1, 8),
            "exam_type": "final",
        }
        values.update(overrides)
        return values
    return _paper_metadata


@pytest.fixture
def pdf_payload() -> AttachmentPayload:
    return AttachmentPayload.from_bytes("pdf", "book.pdf", b"%PDF" + b"0" * 996)


@pytest.fixture
def cover_payload() -> AttachmentPayload:
    return AttachmentPayload.from_bytes("cover", "cover.png", b"\x89PNG" + b"0" * 96)
