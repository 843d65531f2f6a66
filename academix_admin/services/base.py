"""
Shared CRUD plumbing for the resource services.

Each service call is one request: no retry, no caching. Writes check the
role's modify permission before anything is sent; reads check module access.
"""

from typing import Any, Dict, Generic, Mapping, Optional, Type, TypeVar

from academix_admin.exceptions import AcademixError
from academix_admin.http_client import ApiClient
from academix_admin.logging_config import get_logger
from academix_admin.models.attachment import AttachmentKind, AttachmentPayload, FileReference
from academix_admin.models.common import (
    Page,
    PaginationParams,
    QueryFilters,
    Record,
    extract_record,
    parse_record,
)
from academix_admin.models.roles import AccessModule
from academix_admin.services.role_access import RoleAccessService


R = TypeVar("R", bound=Record)

logger = get_logger("services")


class ResourceService(Generic[R]):
    """
    CRUD for one backend collection.

    Subclasses set:
        collection   URL segment, e.g. "question-papers"
        record_key   key a single record may be nested under, e.g. "question_paper"
        list_key     key of the item list in list responses, e.g. "question_papers"
        model        the Record subclass
        module       AccessModule guarding the collection
        list_params  query parameters every list request carries
    """

    collection: str = ""
    record_key: str = ""
    list_key: str = ""
    model: Type[R]
    module: AccessModule
    list_params: Dict[str, Any] = {}

    def __init__(self, client: ApiClient, access: RoleAccessService):
        self.client = client
        self.access = access

    @property
    def entity_name(self) -> str:
        return self.record_key.replace("_", " ")

    def _path(self, record_id: Optional[str] = None, *parts: str) -> str:
        segments = [self.collection]
        if record_id is not None:
            segments.append(str(record_id))
        segments.extend(parts)
        return "/".join(segments)

    def _decode(self, data: Any) -> R:
        return parse_record(self.model, extract_record(data, self.record_key))

    async def create(self, metadata: Mapping[str, Any]) -> R:
        self.access.validate_modify(self.module)
        logger.info(f"Creating {self.entity_name}")
        response = await self.client.post(self._path(), dict(metadata))
        record = self._decode(response.data)
        logger.info(f"Created {self.entity_name} {record.id}")
        return record

    async def get_by_id(self, record_id: str) -> R:
        self.access.validate_access(self.module)
        response = await self.client.get(self._path(record_id))
        return self._decode(response.data)

    async def list(
        self,
        filters: Optional[QueryFilters] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Page[R]:
        self.access.validate_access(self.module)
        pagination = PaginationParams(page=page, limit=limit)
        params: Dict[str, Any] = pagination.to_query_params()
        params.update(self.list_params)
        if filters is not None:
            params.update(filters.to_query_params())
        logger.debug(f"Listing {self.collection} with {params}")
        response = await self.client.get(self._path(), params=params)
        return Page.from_response(self.model, response.data, self.list_key, pagination)

    async def update(self, record_id: str, changes: Mapping[str, Any]) -> R:
        self.access.validate_modify(self.module)
        logger.info(f"Updating {self.entity_name} {record_id}")
        response = await self.client.put(self._path(record_id), dict(changes))
        return self._decode(response.data)

    async def delete(self, record_id: str) -> bool:
        self.access.validate_modify(self.module)
        logger.info(f"Deleting {self.entity_name} {record_id}")
        await self.client.delete(self._path(record_id))
        return True


class AttachableResourceService(ResourceService[R]):
    """A resource whose files are uploaded to <collection>/<id>/upload-<kind>"""

    attachment_kinds: Dict[str, AttachmentKind] = {}

    def attachment_kind(self, purpose: str) -> AttachmentKind:
        try:
            return self.attachment_kinds[purpose]
        except KeyError:
            raise AcademixError(
                f"{self.entity_name.title()} has no '{purpose}' attachment",
                code="UNKNOWN_ATTACHMENT",
                details={"purpose": purpose},
            ) from None

    async def upload_attachment(self, record_id: str, payload: AttachmentPayload) -> FileReference:
        """Upload one file and return the reference the backend stored"""
        self.access.validate_modify(self.module)
        kind = self.attachment_kind(payload.purpose)
        logger.info(f"Uploading {payload.purpose} '{payload.file_name}' for {self.entity_name} {record_id}")
        response = await self.client.upload_file(
            kind.endpoint(record_id),
            kind.form_field,
            payload.file_name,
            file_path=payload.file_path,
            file_bytes=payload.file_bytes,
        )
        return FileReference.from_response(response.data, kind, fallback_name=payload.file_name)
