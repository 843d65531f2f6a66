"""
Role Access Service
===================

Holds the signed-in user's role and answers module access questions.

The role is loaded from the credential store (the stored role, or the
`role` claim of the stored token) by `refresh_role()`; checks are then
synchronous.
"""

from typing import List, Optional, Union

from academix_admin.exceptions import AccessDeniedError
from academix_admin.logging_config import get_logger
from academix_admin.models.roles import AccessModule, RolePermissions, UserRole
from academix_admin.token_store import CredentialStore


logger = get_logger("role_access")

ModuleLike = Union[AccessModule, str]


def _as_module(module: ModuleLike) -> Optional[AccessModule]:
    if isinstance(module, AccessModule):
        return module
    return AccessModule.from_string(module)


class RoleAccessService:
    """Access checks for the current session's role"""

    def __init__(self, credentials: CredentialStore):
        self.credentials = credentials
        self._role: Optional[UserRole] = None

    @property
    def current_role(self) -> Optional[UserRole]:
        return self._role

    @property
    def has_role(self) -> bool:
        return self._role is not None

    @property
    def is_super_admin(self) -> bool:
        return self._role == UserRole.SUPER_ADMIN

    @property
    def is_college_admin(self) -> bool:
        return self._role == UserRole.COLLEGE_ADMIN

    def set_role(self, role: Optional[Union[UserRole, str]]) -> None:
        self._role = role if isinstance(role, UserRole) or role is None else UserRole.from_string(role)

    def clear_role(self) -> None:
        self._role = None

    async def refresh_role(self) -> Optional[UserRole]:
        """Reload the role from the stored credentials"""
        role = UserRole.from_string(await self.credentials.get_user_role())
        if role is None:
            token = await self.credentials.get_token()
            if token:
                claims = self.credentials.decode_token(token) or {}
                role = UserRole.from_string(claims.get("role"))
        self._role = role
        logger.debug(f"Role refreshed: {role.value if role else 'none'}")
        return role

    def accessible_modules(self) -> List[AccessModule]:
        if self._role is None:
            return []
        return RolePermissions.modules_for_role(self._role)

    def has_access(self, module: ModuleLike) -> bool:
        resolved = _as_module(module)
        if self._role is None or resolved is None:
            return False
        return RolePermissions.has_module_access(self._role, resolved)

    def can_modify(self, module: ModuleLike) -> bool:
        resolved = _as_module(module)
        if self._role is None or resolved is None:
            return False
        return RolePermissions.can_modify(self._role, resolved)

    def access_denied_message(self, module: ModuleLike) -> str:
        if self._role is None:
            return "You must be signed in to access this feature."
        resolved = _as_module(module)
        if resolved is None:
            return "The requested feature is not available."
        return f"Your {self._role.display_name} role does not have access to {resolved.display_name}."

    def validate_access(self, module: ModuleLike) -> None:
        """Raise AccessDeniedError unless the role can read `module`"""
        if not self.has_access(module):
            raise AccessDeniedError(self.access_denied_message(module), module=str(getattr(module, "value", module)))

    def validate_modify(self, module: ModuleLike) -> None:
        """Raise AccessDeniedError unless the role can write `module`"""
        if not self.can_modify(module):
            raise AccessDeniedError(self.access_denied_message(module), module=str(getattr(module, "value", module)))
