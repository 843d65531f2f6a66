"""
System settings API service.

Settings are keyed by name rather than id, and create is an upsert:
PUT system-settings/<key> writes the value whether or not the key exists.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from academix_admin.exceptions import AcademixError
from academix_admin.logging_config import get_logger
from academix_admin.models.common import Page, QueryFilters, extract_list, parse_records
from academix_admin.models.roles import AccessModule
from academix_admin.models.setting import SystemSetting
from academix_admin.services.base import ResourceService


logger = get_logger("services.settings")


class SettingsService(ResourceService[SystemSetting]):
    collection = "system-settings"
    record_key = "setting"
    list_key = "settings"
    model = SystemSetting
    module = AccessModule.SETTINGS

    def _setting_body(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        body: Dict[str, Any] = {"value": "" if values.get("value") is None else str(values["value"])}
        if values.get("description") is not None:
            body["description"] = values["description"]
        if values.get("is_public") is not None:
            body["is_public"] = bool(values["is_public"])
        return body

    async def create(self, metadata: Mapping[str, Any]) -> SystemSetting:
        """Create or overwrite the setting named by metadata["key"]"""
        key = str(metadata.get("key") or "").strip()
        if not key:
            raise AcademixError("Setting key is required", code="VALIDATION_ERROR")
        self.access.validate_modify(self.module)
        logger.info(f"Saving setting {key}")
        response = await self.client.put(self._path(key), self._setting_body(metadata))
        return self._decode_setting(response.data, key)

    async def update(self, key: str, changes: Mapping[str, Any]) -> SystemSetting:
        self.access.validate_modify(self.module)
        logger.info(f"Updating setting {key}")
        response = await self.client.put(self._path(key), self._setting_body(changes))
        return self._decode_setting(response.data, key)

    async def get_by_id(self, key: str) -> SystemSetting:
        self.access.validate_access(self.module)
        response = await self.client.get(self._path(key))
        return self._decode_setting(response.data, key)

    def _decode_setting(self, data: Any, key: str) -> SystemSetting:
        # Some responses omit the key; it is known from the request path
        if isinstance(data, dict) and isinstance(data.get(self.record_key), dict):
            data = data[self.record_key]
        if isinstance(data, dict) and "key" not in data:
            data = {**data, "key": key}
        return self._decode(data)

    async def list(self, filters: Optional[QueryFilters] = None, page: int = 1,
                   limit: int = 100) -> Page[SystemSetting]:
        return await super().list(filters, page, limit)

    async def list_public(self) -> List[SystemSetting]:
        """Settings flagged public; readable without a session"""
        response = await self.client.get(self._path("public"), auth=False)
        return parse_records(SystemSetting, extract_list(response.data, self.list_key), skip_invalid=True)

    async def bulk_update(self, settings: Sequence[Mapping[str, Any]]) -> List[SystemSetting]:
        self.access.validate_modify(self.module)
        body = [{"key": s["key"], **self._setting_body(s)} for s in settings]
        logger.info(f"Bulk updating {len(body)} settings")
        response = await self.client.post(self._path("bulk-update"), {"settings": body})
        return parse_records(SystemSetting, extract_list(response.data, self.list_key), skip_invalid=True)

    async def history(self, key: str) -> List[Dict[str, Any]]:
        """Change history entries for one key, newest first as returned"""
        self.access.validate_access(self.module)
        response = await self.client.get(self._path(key, "history"))
        return [entry for entry in extract_list(response.data, "history") if isinstance(entry, dict)]
