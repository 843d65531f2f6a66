"""
Colleges controller.
"""

from typing import Any, Dict, Optional

from academix_admin.controllers.base import EntityController
from academix_admin.models.college import College
from academix_admin.notifications import Notifier
from academix_admin.services.colleges import CollegesService


class CollegesController(EntityController[College]):
    entity_label = "College"

    def __init__(self, service: CollegesService, notifier: Optional[Notifier] = None, page_size: int = 20):
        super().__init__(service, notifier, page_size)

    async def get_stats(self, college_id: str) -> Optional[Dict[str, Any]]:
        try:
            return await self.service.get_stats(college_id)
        except Exception as e:
            self._fail("Failed to load college statistics", e)
            return None

    def find_by_code(self, code: str) -> Optional[College]:
        for college in self.items:
            if college.code.lower() == code.lower():
                return college
        return None

    @property
    def active_colleges(self):
        return [c for c in self.items if c.is_active]
