"""
Auth controller: sign-in with role checks, sign-out and session status.

Only admins may use the console:
  - with a college id, the account must be a college admin of that college
  - without one, the account must be a super admin
"""

from typing import Callable, Optional

from academix_admin.controllers.state import AuthSnapshot, ObservableState
from academix_admin.exceptions import (
    AcademixError,
    LoginRejectedError,
    NetworkError,
    UnauthorizedError,
    ApiError,
    describe_error,
)
from academix_admin.logging_config import get_logger, set_user_id
from academix_admin.models.roles import UserRole
from academix_admin.models.user import User
from academix_admin.notifications import Notifier
from academix_admin.services.auth import AuthService, AuthSession
from academix_admin.services.role_access import RoleAccessService
from academix_admin.token_store import CredentialStore


logger = get_logger("controllers.auth")

SUPER_ADMIN_REQUIRED = "Super admin access required. Please provide College ID for college admin access."


def login_error_message(error: BaseException) -> str:
    """Sign-in specific wording for the common failure statuses"""
    if isinstance(error, LoginRejectedError):
        return error.message
    if isinstance(error, ApiError):
        if error.status_code == 401:
            return "Invalid email or password."
        if error.status_code == 403:
            return "Access denied. Please check your permissions."
        if error.status_code == 429:
            return "Too many login attempts. Please try again later."
        if error.status_code is not None and error.status_code >= 500:
            return "Server error. Please try again later."
        return error.message
    if isinstance(error, NetworkError):
        return describe_error(error)
    return "Please check your credentials and try again."


def check_console_access(session: AuthSession, college_id: Optional[str]) -> None:
    """Raise LoginRejectedError when the account may not sign in this way"""
    role = session.role
    if college_id:
        if role != UserRole.COLLEGE_ADMIN.value:
            raise LoginRejectedError("College ID provided but user is not a college admin", role=role)
        if session.college_id != college_id:
            raise LoginRejectedError("College ID does not match user's assigned college", role=role)
    elif role != UserRole.SUPER_ADMIN.value:
        raise LoginRejectedError(SUPER_ADMIN_REQUIRED, role=role)


class AuthController:
    def __init__(
        self,
        service: AuthService,
        credentials: CredentialStore,
        access: RoleAccessService,
        notifier: Optional[Notifier] = None,
    ):
        self.service = service
        self.credentials = credentials
        self.access = access
        self.notifier = notifier or Notifier()
        self._state: ObservableState[AuthSnapshot] = ObservableState(AuthSnapshot())

    @property
    def state(self) -> AuthSnapshot:
        return self._state.value

    @property
    def is_authenticated(self) -> bool:
        return self._state.value.is_authenticated

    @property
    def is_loading(self) -> bool:
        return self._state.value.is_loading

    @property
    def error(self) -> str:
        return self._state.value.error

    def subscribe(self, callback: Callable[[AuthSnapshot], None]) -> Callable[[], None]:
        return self._state.subscribe(callback)

    def clear_error(self) -> None:
        self._state.update(error="")

    async def login(self, email: str, password: str, college_id: Optional[str] = None) -> bool:
        college_id = (college_id or "").strip() or None
        self._state.update(is_loading=True, error="")
        try:
            session = await self.service.login(email, password)
            check_console_access(session, college_id)
            saved = await self.credentials.save_token(
                session.token,
                user_id=session.user_id,
                user_role=session.role,
                refresh_token=session.refresh_token,
            )
            if not saved:
                raise AcademixError("Failed to save authentication data", code="CREDENTIAL_STORE_ERROR")
        except Exception as e:
            message = login_error_message(e)
            logger.log_auth_event("login", False, user_email=email, reason=message)
            self._state.update(is_loading=False, is_authenticated=False, error=message)
            self.notifier.error("Sign In Failed", message)
            return False

        await self.access.refresh_role()
        if session.user_id:
            set_user_id(session.user_id)
        logger.log_auth_event("login", True, user_email=email, role=session.role)
        self._state.update(
            is_loading=False,
            is_authenticated=True,
            user_id=session.user_id,
            role=session.role,
        )
        if session.role == UserRole.SUPER_ADMIN.value:
            self.notifier.success("Welcome!", "Signed in as Super Admin")
        else:
            self.notifier.success("Welcome!", f"Signed in as College Admin for {session.college_name or college_id}")
        return True

    async def logout(self) -> None:
        """Sign out; local credentials are cleared even if the API call fails"""
        self._state.update(is_loading=True)
        try:
            await self.service.logout()
        except Exception as e:
            logger.info(f"API logout failed, continuing with local logout: {describe_error(e)}")

        await self.credentials.delete_token()
        self.access.clear_role()
        set_user_id("")
        logger.log_auth_event("logout", True)
        self._state.set(AuthSnapshot())
        self.notifier.success("Logged Out", "You have been successfully logged out")

    async def check_authentication_status(self, verify: bool = False) -> bool:
        """
        Restore the session from stored credentials.

        A stored token that is expired or undecodable is deleted. With
        `verify`, a locally valid token is also confirmed against auth/me.
        """
        token = await self.credentials.get_token()
        if not token:
            self._state.set(AuthSnapshot())
            return False

        if not self.credentials.is_token_valid(token):
            logger.info("Stored token expired or invalid; clearing it")
            await self.credentials.delete_token()
            self.access.clear_role()
            self._state.set(AuthSnapshot())
            return False

        role = await self.access.refresh_role()
        self._state.update(
            is_authenticated=True,
            user_id=await self.credentials.get_user_id(),
            role=role.value if role else None,
        )
        if verify:
            return await self.verify_current_token()
        return True

    async def verify_current_token(self) -> bool:
        """
        Confirm the token with the backend. A 401/403 clears the session;
        network and server errors keep the local token.
        """
        try:
            await self.service.current_user()
        except UnauthorizedError:
            logger.info("Token rejected by backend; clearing session")
            await self.credentials.delete_token()
            self.access.clear_role()
            self._state.set(AuthSnapshot())
            return False
        except Exception as e:
            logger.info(f"Token verification failed, keeping local token: {describe_error(e)}")
            return self.is_authenticated
        self._state.update(is_authenticated=True)
        return True

    async def current_user(self) -> Optional[User]:
        try:
            return await self.service.current_user()
        except Exception as e:
            logger.warning(f"Could not load current user: {describe_error(e)}")
            return None

    async def refresh_token(self) -> bool:
        """Swap in a new token; the stored user id and role are left as they are"""
        try:
            token = await self.service.refresh()
        except Exception as e:
            logger.warning(f"Token refresh failed: {describe_error(e)}")
            return False
        return await self.credentials.save_token(token)

    async def ensure_fresh_token(self, minutes: int = 5) -> bool:
        """Refresh when the token expires within `minutes`; False when signed out"""
        if not self.is_authenticated:
            return False
        if await self.credentials.will_expire_soon(minutes):
            return await self.refresh_token()
        return True

    async def has_role(self, role: UserRole) -> bool:
        return UserRole.from_string(await self.credentials.get_user_role()) == role

    async def is_super_admin(self) -> bool:
        return await self.has_role(UserRole.SUPER_ADMIN)

    async def is_college_admin(self) -> bool:
        return await self.has_role(UserRole.COLLEGE_ADMIN)

    async def health_check(self) -> bool:
        """Check the backend is up; failures are logged, never reported to the user"""
        try:
            await self.service.health_check()
            return True
        except Exception as e:
            logger.info(f"Backend health check failed: {describe_error(e)}")
            return False
