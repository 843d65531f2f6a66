"""
Dashboard summary, activity feed and authentication log records.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from pydantic import field_validator

from academix_admin.models.common import (
    Count,
    LenientDatetime,
    LenientFloat,
    LenientStr,
    QueryFilters,
    Record,
    RecordId,
    TextOrEmpty,
    parse_records,
)


class ChartPoint(Record):
    label: TextOrEmpty = ""
    value: LenientFloat = 0.0
    date: LenientDatetime = None


class DashboardStats(Record):
    total_users: Count = 0
    total_students: Count = 0
    total_colleges: Count = 0
    active_users: Count = 0
    total_revenue: LenientFloat = 0.0
    user_growth_chart: List[ChartPoint] = []
    revenue_chart: List[ChartPoint] = []

    @field_validator("user_growth_chart", "revenue_chart", mode="before")
    @classmethod
    def _chart_points(cls, value):
        # Points that fail to decode are dropped, not the whole summary
        return parse_records(ChartPoint, value if isinstance(value, list) else [], skip_invalid=True)

    @property
    def inactive_users(self) -> int:
        return max(0, self.total_users - self.active_users)


class DashboardActivity(Record):
    id: RecordId
    action: TextOrEmpty = ""
    description: TextOrEmpty = ""
    user_id: LenientStr = None
    user_name: LenientStr = None
    timestamp: LenientDatetime = None


class AuthLog(Record):
    """One sign-in, sign-out or token event"""

    id: RecordId
    user_id: LenientStr = None
    user_name: LenientStr = None
    action: TextOrEmpty = ""
    ip_address: LenientStr = None
    user_agent: LenientStr = None
    timestamp: LenientDatetime = None


@dataclass(frozen=True)
class AuthLogFilters(QueryFilters):
    user_id: Optional[str] = None
    action: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    def to_query_params(self):
        params = super().to_query_params()
        for key in ("start_date", "end_date"):
            if isinstance(params.get(key), datetime):
                params[key] = params[key].isoformat()
        return params
