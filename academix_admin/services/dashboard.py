"""
Dashboard API service: summary counts, the activity feed, authentication
logs, account status changes and the users CSV export.
"""

import math
from typing import Any, Dict, List, Optional

from academix_admin.exceptions import AcademixError
from academix_admin.http_client import ApiClient
from academix_admin.logging_config import get_logger
from academix_admin.models.common import Page, PaginationParams, extract_list, parse_record, parse_records
from academix_admin.models.dashboard import AuthLog, AuthLogFilters, DashboardActivity, DashboardStats
from academix_admin.models.roles import AccessModule
from academix_admin.services.role_access import RoleAccessService


logger = get_logger("services.dashboard")

USER_STATUSES = ("active", "inactive", "suspended")


class DashboardService:
    def __init__(self, client: ApiClient, access: RoleAccessService):
        self.client = client
        self.access = access

    async def stats(self) -> DashboardStats:
        self.access.validate_access(AccessModule.DASHBOARD)
        response = await self.client.get("dashboard/stats")
        data = response.data
        if isinstance(data, dict) and isinstance(data.get("stats"), dict):
            data = data["stats"]
        return parse_record(DashboardStats, data if isinstance(data, dict) else {})

    async def activities(self, limit: int = 10, page: int = 1) -> List[DashboardActivity]:
        """Recent activity, newest first as returned; malformed rows are skipped"""
        self.access.validate_access(AccessModule.DASHBOARD)
        params = PaginationParams(page=page, limit=limit).to_query_params()
        response = await self.client.get("dashboard/activities", params=params)
        return parse_records(DashboardActivity, extract_list(response.data, "activities"), skip_invalid=True)

    async def auth_logs(
        self,
        filters: Optional[AuthLogFilters] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Page[AuthLog]:
        self.access.validate_access(AccessModule.AUTH_LOGS)
        pagination = PaginationParams(page=page, limit=limit)
        params: Dict[str, Any] = pagination.to_query_params()
        if filters is not None:
            params.update(filters.to_query_params())
        response = await self.client.get("auth/logs", params=params)
        return _auth_log_page(response.data, pagination)

    async def update_user_status(self, user_id: str, status: str) -> bool:
        """PATCH users/<id>/status with one of USER_STATUSES"""
        status = status.strip().lower()
        if status not in USER_STATUSES:
            raise AcademixError(
                f"Unknown user status '{status}'",
                code="VALIDATION_ERROR",
                details={"allowed": list(USER_STATUSES)},
            )
        self.access.validate_modify(AccessModule.USERS)
        await self.client.patch(f"users/{user_id}/status", {"status": status})
        logger.info(f"User {user_id} status set to {status}")
        return True

    async def export_users_csv(self, save_path: str) -> int:
        """Download export/users/csv to `save_path`; returns bytes written"""
        self.access.validate_access(AccessModule.USERS)
        size = await self.client.download_file("export/users/csv", save_path)
        logger.info(f"Exported users CSV to {save_path} ({size} bytes)")
        return size


def _auth_log_page(data: Any, pagination: PaginationParams) -> Page[AuthLog]:
    # Log listings report total_count/current_page at the top level
    items = parse_records(AuthLog, extract_list(data, "logs"), skip_invalid=True)
    meta = data if isinstance(data, dict) else {}
    if isinstance(meta.get("pagination"), dict):
        meta = meta["pagination"]
    total = _int_or(meta.get("total_count", meta.get("total")), len(items))
    total_pages = _int_or(meta.get("total_pages"), max(1, math.ceil(total / pagination.limit)))
    return Page(
        items=items,
        total=total,
        page=_int_or(meta.get("current_page", meta.get("page")), pagination.page),
        limit=pagination.limit,
        total_pages=total_pages,
    )


def _int_or(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
