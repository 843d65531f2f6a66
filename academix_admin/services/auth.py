"""
Auth API service: login, logout, profile, token refresh, registration and
the backend health check.

Login and register responses look like:

    {"success": true, "data": {"user": {...}, "token": "<jwt>", "refresh_token": "..."}}
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from academix_admin.exceptions import ApiError
from academix_admin.http_client import ApiClient
from academix_admin.logging_config import get_logger
from academix_admin.models.common import parse_record
from academix_admin.models.user import User


logger = get_logger("services.auth")


@dataclass
class AuthSession:
    """Token and user payload returned by login/register"""
    token: str
    user: Dict[str, Any] = field(default_factory=dict)
    refresh_token: Optional[str] = None

    @property
    def user_id(self) -> Optional[str]:
        value = self.user.get("id")
        return str(value) if value is not None else None

    @property
    def role(self) -> Optional[str]:
        return self.user.get("role")

    @property
    def college_id(self) -> Optional[str]:
        value = self.user.get("college_id")
        return str(value) if value is not None else None

    @property
    def college_name(self) -> Optional[str]:
        college = self.user.get("college")
        return college.get("name") if isinstance(college, dict) else None

    @classmethod
    def from_response(cls, data: Any, status_code: int) -> "AuthSession":
        if not isinstance(data, dict):
            raise ApiError(f"[{status_code}] Response data field is empty", status_code=status_code)
        user = data.get("user")
        token = data.get("token") or data.get("access_token")
        if not isinstance(user, dict) or not token:
            raise ApiError(f"[{status_code}] User data or token missing from response", status_code=status_code)
        return cls(token=token, user=user, refresh_token=data.get("refresh_token"))


class AuthService:
    """Endpoints under auth/; none of them are role-gated"""

    def __init__(self, client: ApiClient):
        self.client = client

    async def login(self, email: str, password: str) -> AuthSession:
        response = await self.client.post("auth/login", {"email": email, "password": password}, auth=False)
        return AuthSession.from_response(response.data, response.status_code)

    async def register(self, user_data: Mapping[str, Any]) -> AuthSession:
        response = await self.client.post("auth/register", dict(user_data), auth=False)
        return AuthSession.from_response(response.data, response.status_code)

    async def logout(self) -> bool:
        await self.client.post("auth/logout")
        return True

    async def current_user(self) -> User:
        response = await self.client.get("auth/me")
        data = response.data
        if isinstance(data, dict) and isinstance(data.get("user"), dict):
            data = data["user"]
        return parse_record(User, data)

    async def refresh(self) -> str:
        """Exchange the current token for a new one"""
        response = await self.client.post("auth/refresh")
        data = response.data if isinstance(response.data, dict) else {}
        token = data.get("token") or data.get("access_token")
        if not token:
            raise ApiError(f"[{response.status_code}] Token missing from refresh response",
                           status_code=response.status_code)
        return token

    async def health_check(self) -> Dict[str, Any]:
        """GET /health at the server root (outside the /api prefix)"""
        response = await self.client.get(f"{self.client.origin}/health", auth=False)
        data = response.data
        logger.debug(f"Health check: {data}")
        return data if isinstance(data, dict) else {"status": data}
