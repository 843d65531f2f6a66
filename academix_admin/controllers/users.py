"""
Users controller.

AccountController holds the activate/deactivate flow shared by every kind
of account list (users, students, individual users).
"""

from typing import Optional, TypeVar

from academix_admin.controllers.base import EntityController
from academix_admin.models.common import Record
from academix_admin.models.user import User
from academix_admin.notifications import Notifier
from academix_admin.services.users import UsersService


R = TypeVar("R", bound=Record)


class AccountController(EntityController[R]):
    """Entity list whose service exposes activate(id) and deactivate(id)"""

    async def _set_active(self, user_id: str, active: bool) -> bool:
        action = "activate" if active else "deactivate"
        label = self.entity_label.lower()
        try:
            if active:
                await self.service.activate(user_id)
            else:
                await self.service.deactivate(user_id)
        except Exception as e:
            self._fail(f"Failed to {action} {label}", e)
            return False

        current = self.get_local(user_id)
        if current is not None:
            self._replace(current.copy_with(is_active=active))
        self.notifier.success(f"{self.entity_label} {action}d", f"{self.entity_label} {user_id} {action}d")
        return True

    async def activate(self, user_id: str) -> bool:
        return await self._set_active(user_id, True)

    async def deactivate(self, user_id: str) -> bool:
        return await self._set_active(user_id, False)

    @property
    def active_count(self) -> int:
        return sum(1 for item in self.items if getattr(item, "is_active", False))


class UsersController(AccountController[User]):
    entity_label = "User"

    def __init__(self, service: UsersService, notifier: Optional[Notifier] = None, page_size: int = 20):
        super().__init__(service, notifier, page_size)

    async def change_password(self, user_id: str, current_password: str, new_password: str) -> bool:
        try:
            await self.service.change_password(user_id, current_password, new_password)
        except Exception as e:
            self._fail("Failed to change password", e)
            return False
        self.notifier.success("Password changed", "Password updated successfully")
        return True
