"""
Shared decoding helpers for response records.

Optional fields use the `Lenient*` annotated types: a malformed value decodes
to None (or the field default) instead of failing the whole record. Required
fields are plain pydantic types, so a missing or unusable value fails
validation and surfaces as RecordParseError naming the field.
"""
import math
from dataclasses import dataclass, field, fields as dataclass_fields, replace
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, ClassVar, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError

from academix_admin.exceptions import RecordParseError


def _lenient_str(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def _lenient_int(value: Any) -> Optional[int]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _lenient_float(value: Any) -> Optional[float]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(result) else result


def _lenient_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _lenient_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
    if isinstance(value, int):
        return bool(value)
    return None


def _required_id(value: Any) -> str:
    if value is None or isinstance(value, (dict, list, bool)):
        raise ValueError("id must be a string or number")
    text = str(value).strip()
    if not text:
        raise ValueError("id must not be empty")
    return text


def _required_text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        raise ValueError("value must be text")
    return str(value)


def _true_by_default(value: Any) -> bool:
    result = _lenient_bool(value)
    return True if result is None else result


def _false_by_default(value: Any) -> bool:
    return bool(_lenient_bool(value))


def _count(value: Any) -> int:
    result = _lenient_int(value)
    return result if result is not None and result >= 0 else 0


LenientStr = Annotated[Optional[str], BeforeValidator(_lenient_str)]
TextOrEmpty = Annotated[str, BeforeValidator(lambda v: _lenient_str(v) or "")]
TrueByDefault = Annotated[bool, BeforeValidator(_true_by_default)]
FalseByDefault = Annotated[bool, BeforeValidator(_false_by_default)]
Count = Annotated[int, BeforeValidator(_count)]
LenientInt = Annotated[Optional[int], BeforeValidator(_lenient_int)]
LenientFloat = Annotated[Optional[float], BeforeValidator(_lenient_float)]
LenientDatetime = Annotated[Optional[datetime], BeforeValidator(_lenient_datetime)]
LenientBool = Annotated[Optional[bool], BeforeValidator(_lenient_bool)]
RecordId = Annotated[str, BeforeValidator(_required_id)]
RequiredText = Annotated[str, BeforeValidator(_required_text)]


class Record(BaseModel):
    """Base class for decoded backend records"""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    def to_json(self) -> Dict[str, Any]:
        """Wire representation, omitting unset optional values"""
        return self.model_dump(mode="json", exclude_none=True)

    def copy_with(self, **changes: Any):
        return self.model_copy(update=changes)


R = TypeVar("R", bound=BaseModel)
T = TypeVar("T")


def _error_fields(error: ValidationError) -> List[str]:
    fields = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
        if loc not in fields:
            fields.append(loc)
    return fields


def parse_record(model: Type[R], data: Any) -> R:
    """Decode one record or raise RecordParseError"""
    if not isinstance(data, dict):
        raise RecordParseError(model.__name__, ["<root>"], reason=f"expected object, got {type(data).__name__}")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise RecordParseError(model.__name__, _error_fields(e)) from e


def parse_records(model: Type[R], items: Any, skip_invalid: bool = False) -> List[R]:
    """
    Decode a list of records.

    With skip_invalid, malformed entries are dropped instead of failing the
    whole list (used by list views, where one bad row should not hide the
    rest).
    """
    if not isinstance(items, list):
        raise RecordParseError(model.__name__, ["<root>"], reason="expected a list")
    records = []
    for item in items:
        try:
            records.append(parse_record(model, item))
        except RecordParseError:
            if not skip_invalid:
                raise
    return records


def extract_list(data: Any, key: str) -> List[Any]:
    """Find the item list inside `data`, which is either the list or {key: [...]}"""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for candidate in (key, "items", "results"):
            value = data.get(candidate)
            if isinstance(value, list):
                return value
    return []


def extract_record(data: Any, key: str) -> Any:
    """Find a single record inside `data`, which is either the record or {key: {...}}"""
    if isinstance(data, dict) and isinstance(data.get(key), dict):
        return data[key]
    return data


@dataclass
class PaginationParams:
    """Standard pagination parameters"""
    page: int = 1
    limit: int = 20

    def to_query_params(self) -> Dict[str, int]:
        return {"page": self.page, "limit": self.limit}


@dataclass
class Page(Generic[T]):
    """One page of a list endpoint"""
    items: List[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20
    total_pages: int = 1

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages

    @classmethod
    def from_response(
        cls,
        model: Type[R],
        data: Any,
        key: str,
        params: Optional[PaginationParams] = None,
    ) -> "Page[R]":
        params = params or PaginationParams()
        items = parse_records(model, extract_list(data, key), skip_invalid=True)
        meta = data if isinstance(data, dict) else {}
        pagination = meta.get("pagination") if isinstance(meta.get("pagination"), dict) else meta

        total = _lenient_int(pagination.get("total")) or len(items)
        total_pages = _lenient_int(pagination.get("total_pages") or pagination.get("totalPages"))
        if total_pages is None:
            total_pages = max(1, math.ceil(total / params.limit)) if params.limit else 1
        return cls(
            items=items,
            total=total,
            page=_lenient_int(pagination.get("page")) or params.page,
            limit=params.limit,
            total_pages=total_pages,
        )


class QueryFilters:
    """
    Mixin for frozen filter dataclasses.

    Unset and empty values are omitted from the query; enums send their value
    and booleans are lower-cased. `QUERY_ALIASES` renames fields whose query
    parameter differs from the attribute name.
    """

    QUERY_ALIASES: ClassVar[Dict[str, str]] = {}

    def to_query_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        for f in dataclass_fields(self):
            value = getattr(self, f.name)
            if value is None or value == "":
                continue
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, bool):
                value = str(value).lower()
            params[self.QUERY_ALIASES.get(f.name, f.name)] = value
        return params

    def copy_with(self, **changes: Any):
        return replace(self, **changes)

    @property
    def has_filters(self) -> bool:
        return bool(self.to_query_params())


def nested_or_none(value: Any, handler):
    """Wrap-validator body: a malformed nested object decodes to None instead of failing the parent"""
    if value is None:
        return None
    try:
        return handler(value)
    except ValidationError:
        return None
