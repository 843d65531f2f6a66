"""
System settings controller (super admin only).

Settings are keyed by name; saving a key that is already in the list
replaces that entry in place, a new key is appended.
"""

from typing import Any, Dict, List, Mapping, Optional

from academix_admin.controllers.base import EntityController
from academix_admin.models.setting import SystemSetting
from academix_admin.notifications import Notifier
from academix_admin.services.settings import SettingsService


class SettingsController(EntityController[SystemSetting]):
    entity_label = "Setting"

    def __init__(self, service: SettingsService, notifier: Optional[Notifier] = None, page_size: int = 100):
        super().__init__(service, notifier, page_size)

    def _upsert(self, setting: SystemSetting) -> None:
        if not self._replace(setting):
            self._append(setting)

    async def save(
        self,
        key: str,
        value: Any,
        description: Optional[str] = None,
        is_public: Optional[bool] = None,
    ) -> Optional[SystemSetting]:
        """Create or overwrite one setting"""
        metadata = {"key": key, "value": value, "description": description, "is_public": is_public}
        self._state.update(is_saving=True, error="")
        try:
            setting = await self.service.create(metadata)
        except Exception as e:
            with self._state.batch():
                self._state.update(is_saving=False)
                self._fail("Failed to save setting", e)
            return None

        with self._state.batch():
            self._upsert(setting)
            self._state.update(is_saving=False)
        self.notifier.success("Setting saved", f"{key} updated")
        return setting

    async def create(self, metadata: Mapping[str, Any]) -> Optional[SystemSetting]:
        return await self.save(
            str(metadata.get("key", "")),
            metadata.get("value"),
            description=metadata.get("description"),
            is_public=metadata.get("is_public"),
        )

    async def bulk_update(self, settings: List[Mapping[str, Any]]) -> bool:
        try:
            updated = await self.service.bulk_update(settings)
        except Exception as e:
            self._fail("Failed to update settings", e)
            return False
        with self._state.batch():
            for setting in updated:
                self._upsert(setting)
        self.notifier.success("Settings saved", f"{len(settings)} setting(s) updated")
        return True

    def get_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        setting = self.get_local(key)
        return setting.value if setting is not None else default

    def as_dict(self) -> Dict[str, str]:
        return {s.key: s.value for s in self.items}
