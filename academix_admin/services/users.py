"""
Users API service.
"""

from academix_admin.logging_config import get_logger
from academix_admin.models.roles import AccessModule
from academix_admin.models.user import User
from academix_admin.services.base import ResourceService


logger = get_logger("services.users")


class UsersService(ResourceService[User]):
    collection = "users"
    record_key = "user"
    list_key = "users"
    model = User
    module = AccessModule.USERS

    async def change_password(self, user_id: str, current_password: str, new_password: str) -> bool:
        """PUT users/<id>/password; any signed-in user may change their own"""
        await self.client.put(
            self._path(user_id, "password"),
            {"currentPassword": current_password, "newPassword": new_password},
        )
        logger.info(f"Password changed for user {user_id}")
        return True

    async def activate(self, user_id: str) -> bool:
        self.access.validate_modify(self.module)
        await self.client.put(self._path(user_id, "activate"))
        logger.info(f"Activated user {user_id}")
        return True

    async def deactivate(self, user_id: str) -> bool:
        self.access.validate_modify(self.module)
        await self.client.put(self._path(user_id, "deactivate"))
        logger.info(f"Deactivated user {user_id}")
        return True
