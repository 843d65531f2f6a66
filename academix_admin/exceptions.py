"""
Custom Exceptions for the AcademixStore Admin Client
====================================================

Every failure the client can surface is an AcademixError subclass, so
controllers can catch one base class at their boundary and still tell the
categories apart.

Usage:
    from academix_admin.exceptions import UnauthorizedError, NetworkError

    try:
        await books.delete(book_id)
    except UnauthorizedError as e:
        logger.warning(f"Delete rejected: {e}")
        raise
"""

from typing import Optional, Any, Dict, List


class AcademixError(Exception):
    """Base exception for all client errors"""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Transport & HTTP Errors
# ============================================

class NetworkError(AcademixError):
    """Request never produced a response (timeout, refused connection)"""

    def __init__(self, message: str = "Unable to connect to server", timed_out: bool = False):
        super().__init__(message, code="NETWORK_ERROR", details={"timed_out": timed_out})
        self.timed_out = timed_out


class ApiError(AcademixError):
    """Backend answered with a non-2xx status or an unsuccessful envelope"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: str = "API_ERROR",
        payload: Any = None
    ):
        details = {"status_code": status_code}
        if payload is not None:
            details["payload"] = payload
        super().__init__(message, code=code, details=details)
        self.status_code = status_code


class UnauthorizedError(ApiError):
    """401/403 from the backend"""

    def __init__(self, message: str = "Not authorized", status_code: Optional[int] = 401, payload: Any = None):
        super().__init__(message, status_code=status_code, code="UNAUTHORIZED", payload=payload)


class AccessDeniedError(UnauthorizedError):
    """Current role may not perform the action; raised before any request"""

    def __init__(self, message: str = "Access denied", module: Optional[str] = None):
        super().__init__(message, status_code=None)
        self.code = "ACCESS_DENIED"
        if module:
            self.details["module"] = module


class NotFoundError(ApiError):
    """404 from the backend"""

    def __init__(self, message: str = "Resource not found", payload: Any = None):
        super().__init__(message, status_code=404, code="NOT_FOUND", payload=payload)


class RequestValidationError(ApiError):
    """400/422: the backend rejected the request body or parameters"""

    def __init__(self, message: str, status_code: int = 400, payload: Any = None):
        super().__init__(message, status_code=status_code, code="VALIDATION_ERROR", payload=payload)


class ServerError(ApiError):
    """5xx from the backend"""

    def __init__(self, message: str, status_code: int = 500, payload: Any = None):
        super().__init__(message, status_code=status_code, code="SERVER_ERROR", payload=payload)


# ============================================
# Decoding Errors
# ============================================

class RecordParseError(AcademixError):
    """A response record is missing required fields or has unusable values"""

    def __init__(self, record_type: str, fields: List[str], reason: str = ""):
        message = f"Malformed {record_type} record: invalid or missing {', '.join(fields)}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(
            message,
            code="RECORD_PARSE_ERROR",
            details={"record_type": record_type, "fields": fields}
        )
        self.record_type = record_type
        self.fields = fields


# ============================================
# Workflow Errors
# ============================================

class CreationFailedError(AcademixError):
    """Entity create call failed; no record exists"""

    def __init__(self, entity: str, reason: str, cause: Optional[AcademixError] = None):
        super().__init__(
            f"Failed to create {entity}: {reason}",
            code="CREATION_FAILED",
            details={"entity": entity, "cause": cause.code if cause else None}
        )
        self.entity = entity
        self.reason = reason


class AttachmentUploadFailedError(AcademixError):
    """One attachment upload failed after the record was created"""

    def __init__(self, record_id: str, purpose: str, reason: str):
        super().__init__(
            f"Failed to upload {purpose} for {record_id}: {reason}",
            code="ATTACHMENT_UPLOAD_FAILED",
            details={"record_id": record_id, "purpose": purpose}
        )
        self.record_id = record_id
        self.purpose = purpose
        self.reason = reason


class DeletionFailedError(AcademixError):
    """Delete call failed; the record is kept locally"""

    def __init__(self, entity: str, record_id: str, reason: str):
        super().__init__(
            f"Failed to delete {entity} {record_id}: {reason}",
            code="DELETION_FAILED",
            details={"entity": entity, "record_id": record_id}
        )
        self.entity = entity
        self.record_id = record_id
        self.reason = reason


class LoginRejectedError(AcademixError):
    """Credentials were accepted but the account may not use this console"""

    def __init__(self, message: str, role: Optional[str] = None):
        super().__init__(message, code="LOGIN_REJECTED", details={"role": role})
        self.role = role


def describe_error(error: BaseException) -> str:
    """
    Human-readable message for an error caught at a controller boundary.

    Backend messages are passed through; transport failures and unknown
    exceptions get a generic message.
    """
    if isinstance(error, NetworkError):
        if error.timed_out:
            return "Request timed out. Please try again."
        return "Network error. Please check your connection and try again."
    if isinstance(error, AccessDeniedError):
        return error.message
    if isinstance(error, UnauthorizedError):
        return f"{error.message}. Please sign in again." if error.status_code == 401 else error.message
    if isinstance(error, AcademixError):
        return error.message
    return "An unexpected error occurred. Please try again."
