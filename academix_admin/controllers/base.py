"""
Entity State Controllers
========================

A controller owns the local list of one entity type for the session. The
list only ever holds records the backend confirmed: a record is appended
after create succeeds and removed after delete succeeds. Every failure is
caught here, turned into a readable message in `state.error` and reported
through the notifier; nothing is raised to the caller.

AttachableEntityController adds the create-then-upload workflow used by
books and question papers:

    record = await controller.create_with_attachments(
        {"name": "Algorithms", "year": 2024, "semester": 3},
        [AttachmentPayload("pdf", "book.pdf", file_bytes=data)],
    )
    # record is None only when create itself failed
    # controller.last_upload_report tells which uploads failed
"""

from typing import Any, Callable, Generic, List, Mapping, Optional, Sequence, Tuple, TypeVar

from academix_admin.exceptions import (
    AcademixError,
    AttachmentUploadFailedError,
    CreationFailedError,
    DeletionFailedError,
    describe_error,
)
from academix_admin.logging_config import get_logger
from academix_admin.models.attachment import (
    AttachmentKind,
    AttachmentPayload,
    AttachmentResult,
    FileReference,
    UploadReport,
)
from academix_admin.models.common import QueryFilters, Record
from academix_admin.notifications import Notifier
from academix_admin.controllers.state import ListSnapshot, ObservableState
from academix_admin.services.base import AttachableResourceService, ResourceService


R = TypeVar("R", bound=Record)

logger = get_logger("controllers")


class EntityController(Generic[R]):
    """Observable, server-confirmed list of one entity type"""

    entity_label = "Record"

    def __init__(
        self,
        service: ResourceService[R],
        notifier: Optional[Notifier] = None,
        page_size: int = 20,
    ):
        self.service = service
        self.notifier = notifier or Notifier()
        self.page_size = page_size
        self._state: ObservableState[ListSnapshot[R]] = ObservableState(ListSnapshot())

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def state(self) -> ListSnapshot[R]:
        return self._state.value

    @property
    def items(self) -> List[R]:
        return list(self._state.value.items)

    @property
    def is_loading(self) -> bool:
        return self._state.value.is_loading

    @property
    def is_loading_more(self) -> bool:
        return self._state.value.is_loading_more

    @property
    def error(self) -> str:
        return self._state.value.error

    @property
    def has_error(self) -> bool:
        return self._state.value.has_error

    @property
    def current_page(self) -> int:
        return self._state.value.page

    @property
    def total_items(self) -> int:
        return self._state.value.total_items

    @property
    def has_more(self) -> bool:
        return self._state.value.has_more

    def subscribe(self, callback: Callable[[ListSnapshot[R]], None]) -> Callable[[], None]:
        return self._state.subscribe(callback)

    def clear_error(self) -> None:
        self._state.update(error="")

    def get_local(self, record_id: str) -> Optional[R]:
        for item in self._state.value.items:
            if item.id == record_id:
                return item
        return None

    # ------------------------------------------------------------------
    # Local list mutations (only after a confirmed response)
    # ------------------------------------------------------------------

    def _append(self, record: R) -> None:
        snapshot = self._state.value
        self._state.update(items=snapshot.items + (record,), total_items=snapshot.total_items + 1)

    def _replace(self, record: R) -> bool:
        items = self._state.value.items
        for index, item in enumerate(items):
            if item.id == record.id:
                self._state.update(items=items[:index] + (record,) + items[index + 1:])
                return True
        return False

    def _remove(self, record_id: str) -> bool:
        snapshot = self._state.value
        remaining = tuple(item for item in snapshot.items if item.id != record_id)
        if len(remaining) == len(snapshot.items):
            return False
        self._state.update(items=remaining, total_items=max(0, snapshot.total_items - 1))
        return True

    def _fail(self, title: str, error: BaseException) -> str:
        """Record a failure in state and notify; returns the message"""
        message = describe_error(error)
        if isinstance(error, AcademixError):
            logger.warning(f"{title}: {error.message}", extra={"error_code": error.code})
        else:
            logger.log_error_with_context(error, context=f"{type(self).__name__}: {title}")
        self._state.update(error=message)
        self.notifier.error(title, message)
        return message

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self, filters: Optional[QueryFilters] = None, refresh: bool = False) -> None:
        """
        Load the first page. A call made while another load is in flight
        returns immediately. With `refresh`, the current items are cleared
        before the request.
        """
        if self._state.value.is_loading:
            return

        with self._state.batch():
            if filters is not None:
                self._state.update(filters=filters)
            if refresh:
                self._state.update(items=(), page=1, total_items=0, has_more=False)
            self._state.update(is_loading=True, error="")

        try:
            page = await self.service.list(self._state.value.filters, 1, self.page_size)
        except Exception as e:
            with self._state.batch():
                self._state.update(is_loading=False)
                self._fail(f"Failed to load {self.entity_label.lower()}s", e)
            return

        self._state.update(
            items=tuple(page.items),
            page=page.page,
            total_items=page.total,
            total_pages=page.total_pages,
            has_more=page.has_more,
            is_loading=False,
        )

    async def load_more(self) -> None:
        """Fetch the next page and append it; on failure the page is reverted"""
        snapshot = self._state.value
        if snapshot.is_loading or snapshot.is_loading_more or not snapshot.has_more:
            return

        previous_page = snapshot.page
        next_page = previous_page + 1
        self._state.update(is_loading_more=True, page=next_page)

        try:
            page = await self.service.list(snapshot.filters, next_page, self.page_size)
        except Exception as e:
            with self._state.batch():
                self._state.update(is_loading_more=False, page=previous_page)
                self._fail(f"Failed to load more {self.entity_label.lower()}s", e)
            return

        known = {item.id for item in self._state.value.items}
        fresh = tuple(item for item in page.items if item.id not in known)
        self._state.update(
            items=self._state.value.items + fresh,
            total_items=page.total,
            total_pages=page.total_pages,
            has_more=page.has_more,
            is_loading_more=False,
        )

    async def refresh(self) -> None:
        await self.load(refresh=True)

    async def apply_filters(self, filters: Optional[QueryFilters]) -> None:
        self._state.update(filters=filters)
        await self.load(refresh=True)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def _create_record(self, metadata: Mapping[str, Any], keep_saving: bool = False) -> Optional[R]:
        """
        Create call plus append; no success notification.

        With `keep_saving`, is_saving stays set for the caller to clear.
        """
        self._state.update(is_saving=True, error="")
        try:
            record = await self.service.create(metadata)
        except Exception as e:
            cause = e if isinstance(e, AcademixError) else None
            failure = CreationFailedError(self.entity_label.lower(), describe_error(e), cause=cause)
            with self._state.batch():
                self._state.update(is_saving=False)
                self._fail(f"Failed to create {self.entity_label.lower()}", failure)
            return None

        with self._state.batch():
            self._append(record)
            if not keep_saving:
                self._state.update(is_saving=False)
        return record

    async def create(self, metadata: Mapping[str, Any]) -> Optional[R]:
        record = await self._create_record(metadata)
        if record is not None:
            self.notifier.success(f"{self.entity_label} created", f"{self.entity_label} {record.id} created")
        return record

    async def update(self, record_id: str, changes: Mapping[str, Any]) -> Optional[R]:
        self._state.update(is_saving=True, error="")
        try:
            record = await self.service.update(record_id, changes)
        except Exception as e:
            with self._state.batch():
                self._state.update(is_saving=False)
                self._fail(f"Failed to update {self.entity_label.lower()}", e)
            return None

        with self._state.batch():
            self._replace(record)
            self._state.update(is_saving=False)
        self.notifier.success(f"{self.entity_label} updated", f"{self.entity_label} {record_id} updated")
        return record

    async def delete(self, record_id: str) -> bool:
        """
        Delete on the backend, then drop the local entry with that id.
        An untracked id is still sent; the local removal is then a no-op.
        """
        self._state.update(is_saving=True, error="")
        try:
            await self.service.delete(record_id)
        except Exception as e:
            failure = DeletionFailedError(self.entity_label.lower(), record_id, describe_error(e))
            with self._state.batch():
                self._state.update(is_saving=False)
                self._fail(f"Failed to delete {self.entity_label.lower()}", failure)
            return False

        with self._state.batch():
            self._remove(record_id)
            self._state.update(is_saving=False)
        self.notifier.success(f"{self.entity_label} deleted", f"{self.entity_label} {record_id} deleted")
        return True


class AttachableEntityController(EntityController[R]):
    """Entity controller whose records carry uploaded files"""

    service: AttachableResourceService[R]

    def __init__(
        self,
        service: AttachableResourceService[R],
        notifier: Optional[Notifier] = None,
        page_size: int = 20,
    ):
        super().__init__(service, notifier, page_size)
        self.last_upload_report: Optional[UploadReport] = None

    def _merge_reference(self, record: R, kind: AttachmentKind, reference: FileReference) -> R:
        """Patch the file fields onto `record` and into the list if it is still tracked"""
        current = self.get_local(record.id) or record
        patched = current.copy_with(**reference.record_changes(kind))
        self._replace(patched)
        return patched

    async def _upload_one(self, record: R, payload: AttachmentPayload) -> Tuple[AttachmentResult, R]:
        result = AttachmentResult(purpose=payload.purpose, file_name=payload.file_name)
        try:
            kind = self.service.attachment_kind(payload.purpose)
            result.reference = await self.service.upload_attachment(record.id, payload)
        except Exception as e:
            result.error = AttachmentUploadFailedError(record.id, payload.purpose, describe_error(e))
            logger.warning(f"Upload of {payload.purpose} for {record.id} failed: {result.error.reason}")
            return result, record
        return result, self._merge_reference(record, kind, result.reference)

    async def create_with_attachments(
        self,
        metadata: Mapping[str, Any],
        attachments: Sequence[AttachmentPayload] = (),
    ) -> Optional[R]:
        """
        Create the record, then upload each attachment in order.

        Returns None only when create failed; in that case nothing is
        uploaded and the list is unchanged. Otherwise the record is in the
        list and the return value carries whichever file references were
        uploaded. A failed upload never rolls back the create or stops the
        remaining uploads; per-attachment outcomes are in
        `last_upload_report`.
        """
        self.last_upload_report = None
        record = await self._create_record(metadata, keep_saving=True)
        if record is None:
            return None

        report = UploadReport(record_id=record.id)
        try:
            for payload in attachments:
                result, record = await self._upload_one(record, payload)
                report.results.append(result)
        finally:
            self._state.update(is_saving=False)
        self.last_upload_report = report

        label = self.entity_label
        if report.failed:
            failed = ", ".join(f"{r.purpose} ({r.error.reason})" for r in report.failed)
            message = f"{label} created, but upload failed for: {failed}. Retry the upload separately."
            self._state.update(error=message)
            self.notifier.warning("Partial success", message)
        elif report.results:
            self.notifier.success(f"{label} created", f"{label} {record.id} created with {len(report.results)} file(s)")
        else:
            self.notifier.success(f"{label} created", f"{label} {record.id} created")
        return record

    async def upload_attachment(self, record_id: str, payload: AttachmentPayload) -> bool:
        """Upload one file to an existing record (the retry path)"""
        self._state.update(is_saving=True, error="")
        try:
            kind = self.service.attachment_kind(payload.purpose)
            reference = await self.service.upload_attachment(record_id, payload)
        except Exception as e:
            failure = AttachmentUploadFailedError(record_id, payload.purpose, describe_error(e))
            with self._state.batch():
                self._state.update(is_saving=False)
                self._fail("Upload failed", failure)
            return False

        with self._state.batch():
            current = self.get_local(record_id)
            if current is not None:
                self._replace(current.copy_with(**reference.record_changes(kind)))
            self._state.update(is_saving=False)
        self.notifier.success("Upload complete", f"{payload.file_name} uploaded")
        return True
