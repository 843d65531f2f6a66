"""
Attachment types: which endpoint a file goes to, the payload to send, and
the file reference decoded from the upload response.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from academix_admin.exceptions import AcademixError, RecordParseError


@dataclass(frozen=True)
class AttachmentKind:
    """
    One upload endpoint: POST <collection>/<id>/<suffix>, file part named
    `form_field`. The url/access_url/original_name fields name the record
    attributes a successful upload fills in.
    """
    purpose: str
    collection: str
    suffix: str
    form_field: str
    url_field: str
    original_name_field: str
    access_url_field: Optional[str] = None
    record_key: Optional[str] = None

    def endpoint(self, record_id: str) -> str:
        return f"{self.collection}/{record_id}/{self.suffix}"


BOOK_PDF = AttachmentKind(
    purpose="pdf",
    collection="books",
    suffix="upload-pdf",
    form_field="book",
    url_field="pdf_url",
    original_name_field="pdf_original_name",
    record_key="book",
)

BOOK_COVER = AttachmentKind(
    purpose="cover",
    collection="books",
    suffix="upload-cover",
    form_field="cover",
    url_field="cover_image_url",
    original_name_field="cover_original_name",
    record_key="book",
)

QUESTION_PAPER_PDF = AttachmentKind(
    purpose="pdf",
    collection="question-papers",
    suffix="upload-pdf",
    form_field="question_paper",
    url_field="pdf_url",
    original_name_field="pdf_original_name",
    access_url_field="pdf_access_url",
    record_key="question_paper",
)


@dataclass(frozen=True)
class AttachmentPayload:
    """
    A file to upload after the record exists.

    Exactly one of `file_path` (filesystem access) or `file_bytes` (in-memory
    buffer) must be given.
    """
    purpose: str
    file_name: str
    file_path: Optional[str] = None
    file_bytes: Optional[bytes] = None

    def __post_init__(self):
        if (self.file_path is None) == (self.file_bytes is None):
            raise ValueError("Exactly one of file_path or file_bytes must be provided")
        if not self.file_name:
            raise ValueError("file_name must not be empty")

    @property
    def size(self) -> Optional[int]:
        return len(self.file_bytes) if self.file_bytes is not None else None

    @classmethod
    def from_path(cls, purpose: str, file_path: str, file_name: Optional[str] = None) -> "AttachmentPayload":
        return cls(purpose=purpose, file_name=file_name or Path(file_path).name, file_path=file_path)

    @classmethod
    def from_bytes(cls, purpose: str, file_name: str, data: Union[bytes, bytearray]) -> "AttachmentPayload":
        return cls(purpose=purpose, file_name=file_name, file_bytes=bytes(data))


def _first_text(data: Dict[str, Any], *keys: Optional[str]) -> Optional[str]:
    for key in keys:
        if key and isinstance(data.get(key), str) and data[key]:
            return data[key]
    return None


@dataclass(frozen=True)
class FileReference:
    """Remote URL plus the original filename echoed back by the backend"""
    url: str
    original_name: Optional[str] = None
    access_url: Optional[str] = None

    @classmethod
    def from_response(cls, data: Any, kind: AttachmentKind, fallback_name: Optional[str] = None) -> "FileReference":
        """
        Decode an upload response.

        Accepts the flat form {"pdf_url", "signed_url", "original_name"} and
        the form where the updated record is nested under the record key.
        """
        if not isinstance(data, dict):
            raise RecordParseError("FileReference", ["<root>"], reason="expected object")

        sources = [data]
        if kind.record_key and isinstance(data.get(kind.record_key), dict):
            sources.append(data[kind.record_key])

        url = access_url = original_name = None
        for source in sources:
            url = url or _first_text(source, kind.url_field, "url", "file_url")
            access_url = access_url or _first_text(source, "signed_url", kind.access_url_field)
            original_name = original_name or _first_text(
                source, "original_name", "originalName", kind.original_name_field
            )

        if url is None:
            raise RecordParseError("FileReference", [kind.url_field])
        return cls(url=url, original_name=original_name or fallback_name, access_url=access_url)

    def record_changes(self, kind: AttachmentKind) -> Dict[str, Optional[str]]:
        """Record attributes to patch for this reference"""
        changes = {kind.url_field: self.url, kind.original_name_field: self.original_name}
        if kind.access_url_field:
            changes[kind.access_url_field] = self.access_url
        return changes


@dataclass
class AttachmentResult:
    """Outcome of one upload inside a create-with-attachments call"""
    purpose: str
    file_name: str
    reference: Optional[FileReference] = None
    error: Optional[AcademixError] = None

    @property
    def succeeded(self) -> bool:
        return self.reference is not None


@dataclass
class UploadReport:
    """Per-attachment outcomes for one record, in upload order"""
    record_id: str
    results: List[AttachmentResult] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return all(result.succeeded for result in self.results)

    @property
    def failed(self) -> List[AttachmentResult]:
        return [result for result in self.results if not result.succeeded]

    @property
    def succeeded(self) -> List[AttachmentResult]:
        return [result for result in self.results if result.succeeded]
