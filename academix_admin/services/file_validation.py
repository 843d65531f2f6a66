"""
Pre-upload checks for attachment files and question paper form values.

Callers run these before building an AttachmentPayload; the upload path
itself does not re-validate.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

MAX_PDF_SIZE_BYTES = 52428800  # 50MB
MAX_IMAGE_SIZE_BYTES = 5242880  # 5MB
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")


@dataclass
class FileValidationResult:
    is_valid: bool
    error_message: Optional[str] = None

    @classmethod
    def ok(cls) -> "FileValidationResult":
        return cls(is_valid=True)

    @classmethod
    def fail(cls, message: str) -> "FileValidationResult":
        return cls(is_valid=False, error_message=message)


def validate_pdf_file(file_name: str, file_size_bytes: int,
                      max_size_bytes: int = MAX_PDF_SIZE_BYTES) -> FileValidationResult:
    """`.pdf` extension (any case) and at most 50MB"""
    if not file_name.lower().endswith(".pdf"):
        return FileValidationResult.fail("Only PDF files are allowed")
    if file_size_bytes > max_size_bytes:
        return FileValidationResult.fail("PDF file must be less than 50MB")
    return FileValidationResult.ok()


def validate_image_file(file_name: str, file_size_bytes: int,
                        max_size_bytes: int = MAX_IMAGE_SIZE_BYTES) -> FileValidationResult:
    if not file_name.lower().endswith(IMAGE_EXTENSIONS):
        return FileValidationResult.fail("Only JPG, PNG or WEBP images are allowed")
    if file_size_bytes > max_size_bytes:
        return FileValidationResult.fail("Image file must be less than 5MB")
    return FileValidationResult.ok()


def validate_file_on_disk(file_path: str, purpose: str,
                          max_pdf_size_bytes: int = MAX_PDF_SIZE_BYTES) -> FileValidationResult:
    """Validate a local file for `purpose` ("pdf" or "cover")"""
    path = Path(file_path)
    if not path.is_file():
        return FileValidationResult.fail(f"File not found: {file_path}")
    size = path.stat().st_size
    if purpose == "cover":
        return validate_image_file(path.name, size)
    return validate_pdf_file(path.name, size, max_pdf_size_bytes)


def _int_or_none(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


@dataclass
class FormValidationResult:
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_question_paper_form(values: Mapping[str, Any]) -> FormValidationResult:
    """
    Check question paper metadata before create.

    title and subject are required; year must be 1-4, semester 1-8 and
    marks, when given, a non-negative number.
    """
    result = FormValidationResult()

    for name, label in (("title", "Title"), ("subject", "Subject")):
        if not str(values.get(name) or "").strip():
            result.errors[name] = f"{label} is required"

    for name, label, low, high in (("year", "Year", 1, 4), ("semester", "Semester", 1, 8)):
        raw = values.get(name)
        if raw is None or str(raw).strip() == "":
            result.errors[name] = f"{label} is required"
            continue
        number = _int_or_none(raw)
        if number is None:
            result.errors[name] = f"{label} must be a number"
        elif not low <= number <= high:
            result.errors[name] = f"{label} must be between {low} and {high}"

    marks = values.get("marks")
    if marks is not None and str(marks).strip() != "":
        number = _int_or_none(marks)
        if number is None:
            result.errors["marks"] = "Marks must be a number"
        elif number < 0:
            result.errors["marks"] = "Marks must be a positive number"

    return result
