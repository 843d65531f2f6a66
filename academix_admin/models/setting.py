"""
System setting record.
"""

from typing import Any, Dict

from academix_admin.models.common import (
    FalseByDefault,
    LenientDatetime,
    LenientStr,
    Record,
    RequiredText,
    TextOrEmpty,
)


class SystemSetting(Record):
    """A key/value setting; the key is its identity"""

    key: RequiredText
    value: TextOrEmpty = ""
    description: LenientStr = None
    is_public: FalseByDefault = False
    updated_at: LenientDatetime = None

    @property
    def id(self) -> str:
        return self.key

    def to_update_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"value": self.value, "is_public": self.is_public}
        if self.description is not None:
            body["description"] = self.description
        return body
