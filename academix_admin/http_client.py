"""
HTTP Client Wrapper
===================

Authenticated REST calls against the AcademixStore backend.

Every request:
  - carries `Authorization: Bearer <token>` when the credential store has one
  - carries an `X-Request-ID` that is also stamped on log records
  - uses the configured timeout (connect/read/write/pool)

Responses use the envelope {"success": bool, "data": ..., "message": str}.
Failures are raised as classified AcademixError subclasses with the message
formatted as "[<status>] <message>". Nothing is retried; a 401 is raised to
the caller unchanged.
"""

import json
import time
import mimetypes
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Union
from urllib.parse import urlsplit

import aiofiles
import httpx

from academix_admin.config import AdminConfig
from academix_admin.exceptions import (
    AcademixError,
    ApiError,
    NetworkError,
    NotFoundError,
    RequestValidationError,
    ServerError,
    UnauthorizedError,
)
from academix_admin.logging_config import get_logger, generate_request_id, set_request_id
from academix_admin.token_store import CredentialStore


logger = get_logger("http")


@dataclass
class ApiResponse:
    """Decoded backend response"""
    status_code: int
    data: Any
    message: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return 200 <= self.status_code < 300


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


def _extract_message(body: Any, fallback: str) -> str:
    """Pull the most useful error text out of a response body"""
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, list) and value:
                # FastAPI-style validation detail: [{"loc": [...], "msg": "..."}]
                parts = [item.get("msg", str(item)) if isinstance(item, dict) else str(item) for item in value]
                return "; ".join(parts)
            if isinstance(value, dict) and value.get("message"):
                return str(value["message"])
    if isinstance(body, str) and body.strip():
        return body.strip()[:200]
    return fallback


def classify_error(status_code: int, body: Any, reason: str = "") -> ApiError:
    """Map a failed response onto the error taxonomy"""
    message = f"[{status_code}] {_extract_message(body, reason or 'Request failed')}"

    if status_code in (401, 403):
        return UnauthorizedError(message, status_code=status_code, payload=body)
    if status_code == 404:
        return NotFoundError(message, payload=body)
    if status_code in (400, 422):
        return RequestValidationError(message, status_code=status_code, payload=body)
    if status_code >= 500:
        return ServerError(message, status_code=status_code, payload=body)
    return ApiError(message, status_code=status_code, payload=body)


class ApiClient:
    """
    Thin async wrapper around httpx.AsyncClient.

    Usage:
        async with ApiClient(config, credentials) as client:
            response = await client.get("books", params={"page": 1})
            books = response.data
    """

    def __init__(
        self,
        config: AdminConfig,
        credentials: CredentialStore,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.credentials = credentials
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> str:
        url = self.config.api_base_url
        return url if url.endswith("/") else url + "/"

    @property
    def origin(self) -> str:
        """Scheme and host of the API, without the /api/ prefix"""
        parts = urlsplit(self.base_url)
        return f"{parts.scheme}://{parts.netloc}"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.config.timeout),
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _get_headers(self, auth: bool, request_id: str) -> Dict[str, str]:
        headers = {"X-Request-ID": request_id}
        if auth:
            token = await self.credentials.get_token()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _send(self, method: str, path: str, auth: bool, **kwargs: Any) -> httpx.Response:
        """Send with auth headers; transport failures and non-2xx statuses raise"""
        request_id = generate_request_id()
        set_request_id(request_id)
        headers = await self._get_headers(auth, request_id)

        start = time.perf_counter()
        try:
            response = await self._get_client().request(method, path, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out after {self.config.timeout}s")
            raise NetworkError("Request timed out", timed_out=True) from e
        except httpx.RequestError as e:
            logger.warning(f"{method} {path} failed: {type(e).__name__}: {e}")
            raise NetworkError(f"Unable to connect to server: {e}") from e

        duration_ms = (time.perf_counter() - start) * 1000
        logger.log_request(method, path, response.status_code, duration_ms, request_id=request_id)

        if not response.is_success:
            raise classify_error(response.status_code, _decode_body(response), response.reason_phrase)
        return response

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
        files: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        auth: bool = True,
    ) -> ApiResponse:
        """Send one request and return the unwrapped envelope"""
        response = await self._send(
            method, path, auth, params=params, json=json_body, files=files, data=data,
        )
        body = _decode_body(response)

        if isinstance(body, dict) and "success" in body:
            if body.get("success") is False:
                message = _extract_message(body, "Request failed")
                raise ApiError(f"[{response.status_code}] {message}", status_code=response.status_code, payload=body)
            return ApiResponse(
                status_code=response.status_code,
                data=body.get("data"),
                message=body.get("message"),
                headers=dict(response.headers),
            )

        return ApiResponse(status_code=response.status_code, data=body, headers=dict(response.headers))

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None, auth: bool = True) -> ApiResponse:
        return await self.request("GET", path, params=params, auth=auth)

    async def post(self, path: str, body: Any = None, params: Optional[Dict[str, Any]] = None,
                   auth: bool = True) -> ApiResponse:
        return await self.request("POST", path, params=params, json_body=body, auth=auth)

    async def put(self, path: str, body: Any = None) -> ApiResponse:
        return await self.request("PUT", path, json_body=body)

    async def patch(self, path: str, body: Any = None) -> ApiResponse:
        return await self.request("PATCH", path, json_body=body)

    async def delete(self, path: str) -> ApiResponse:
        return await self.request("DELETE", path)

    async def upload_file(
        self,
        path: str,
        field_name: str,
        file_name: str,
        file_path: Optional[str] = None,
        file_bytes: Optional[Union[bytes, bytearray]] = None,
        fields: Optional[Dict[str, Any]] = None,
    ) -> ApiResponse:
        """
        Multipart upload of one file.

        Exactly one of `file_path` / `file_bytes` is used as the source; the
        part is sent under `field_name` with `file_name` as its filename.
        """
        if (file_path is None) == (file_bytes is None):
            raise ValueError("Exactly one of file_path or file_bytes must be provided")

        if file_path is not None:
            try:
                async with aiofiles.open(file_path, "rb") as f:
                    content = await f.read()
            except OSError as e:
                raise AcademixError(
                    f"Could not read {file_path}: {e.strerror or e}",
                    code="FILE_READ_ERROR",
                    details={"file_path": file_path},
                ) from e
        else:
            content = bytes(file_bytes)

        content_type = mimetypes.guess_type(file_name)[0] or "application/octet-stream"
        logger.debug(f"Uploading {file_name} ({len(content)} bytes) to {path} as '{field_name}'")
        return await self.request(
            "POST",
            path,
            files={field_name: (file_name, content, content_type)},
            data=fields,
        )

    async def download_file(
        self,
        path: str,
        save_path: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> int:
        """GET a file and write the raw body to `save_path`; returns the byte count"""
        response = await self._send("GET", path, True, params=params)
        content = response.content
        try:
            async with aiofiles.open(save_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            raise AcademixError(
                f"Could not write {save_path}: {e.strerror or e}",
                code="FILE_WRITE_ERROR",
                details={"file_path": save_path},
            ) from e
        logger.debug(f"Downloaded {len(content)} bytes from {path} to {save_path}")
        return len(content)
