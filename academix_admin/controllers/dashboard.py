"""
Dashboard controller: summary counts, recent activity and the
authentication log view.
"""

from typing import Callable, Optional

from academix_admin.controllers.state import DashboardSnapshot, ObservableState
from academix_admin.exceptions import AcademixError, describe_error
from academix_admin.logging_config import get_logger
from academix_admin.models.dashboard import AuthLogFilters, DashboardStats
from academix_admin.notifications import Notifier
from academix_admin.services.dashboard import DashboardService


logger = get_logger("controllers.dashboard")


class DashboardController:
    def __init__(self, service: DashboardService, notifier: Optional[Notifier] = None):
        self.service = service
        self.notifier = notifier or Notifier()
        self._state: ObservableState[DashboardSnapshot] = ObservableState(DashboardSnapshot())

    @property
    def state(self) -> DashboardSnapshot:
        return self._state.value

    @property
    def stats(self) -> Optional[DashboardStats]:
        return self._state.value.stats

    @property
    def error(self) -> str:
        return self._state.value.error

    def subscribe(self, callback: Callable[[DashboardSnapshot], None]) -> Callable[[], None]:
        return self._state.subscribe(callback)

    def _fail(self, title: str, error: BaseException) -> None:
        message = describe_error(error)
        if isinstance(error, AcademixError):
            logger.warning(f"{title}: {error.message}", extra={"error_code": error.code})
        else:
            logger.log_error_with_context(error, context=f"DashboardController: {title}")
        self._state.update(error=message, is_loading=False)
        self.notifier.error(title, message)

    async def load(self, activity_limit: int = 10) -> bool:
        """Fetch stats and recent activity together; neither is kept if either fails"""
        self._state.update(is_loading=True, error="")
        try:
            stats = await self.service.stats()
            activities = await self.service.activities(limit=activity_limit)
        except Exception as e:
            self._fail("Failed to load dashboard", e)
            return False
        self._state.update(stats=stats, activities=tuple(activities), is_loading=False)
        return True

    async def load_auth_logs(self, filters: Optional[AuthLogFilters] = None, page: int = 1,
                             limit: int = 20) -> bool:
        self._state.update(is_loading=True, error="")
        try:
            logs = await self.service.auth_logs(filters, page, limit)
        except Exception as e:
            self._fail("Failed to load authentication logs", e)
            return False
        self._state.update(auth_logs=tuple(logs.items), auth_log_total=logs.total, is_loading=False)
        return True

    async def update_user_status(self, user_id: str, status: str) -> bool:
        try:
            await self.service.update_user_status(user_id, status)
        except Exception as e:
            self._fail("Failed to update user status", e)
            return False
        self.notifier.success("Status updated", f"User {user_id} is now {status.strip().lower()}")
        return True

    async def export_users_csv(self, save_path: str) -> bool:
        try:
            await self.service.export_users_csv(save_path)
        except Exception as e:
            self._fail("Failed to export users", e)
            return False
        self.notifier.success("Export complete", f"Users saved to {save_path}")
        return True
