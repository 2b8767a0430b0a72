"""Convert raw datasource records to typed objects for the requested entity schema.

Attribute external IDs starting with "$" are JSONPath-like expressions
resolved against the nested record ($.a.b, $.a[0], $.a[*].b, $['a b']);
any other ID is a top-level key.
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from pagerduty_adapter.errors import ConversionError
from pagerduty_adapter.models.entity import AttributeSpec, AttributeType, EntitySpec
from pagerduty_adapter.models.raw import RawRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DateTimeFormat:
    """strptime format; values parsed without a zone are taken as UTC."""

    format: str
    has_timezone: bool


DEFAULT_DATETIME_FORMATS: tuple[DateTimeFormat, ...] = (
    # RFC 3339 ("Z" or +hh:mm offset)
    DateTimeFormat("%Y-%m-%dT%H:%M:%S%z", True),
    # RFC 3339 with fractional seconds, also 2006-01-02T15:04:05.000-0700
    DateTimeFormat("%Y-%m-%dT%H:%M:%S.%f%z", True),
    DateTimeFormat("%Y-%m-%dT%H:%M:%S", False),
    DateTimeFormat("%Y-%m-%d", False),
)

_MISSING = object()

_PATH_TOKEN = re.compile(
    r"\.(?P<key>[^.\[\]]+)"
    r"|\[(?P<index>-?\d+)\]"
    r"|\[(?P<wild>\*)\]"
    r"|\['(?P<qkey>[^']*)'\]"
    r'|\["(?P<dqkey>[^"]*)"\]'
)

_DURATION = re.compile(
    r"^(?:(?P<h>\d+(?:\.\d+)?)h)?(?:(?P<m>\d+(?:\.\d+)?)m)?(?:(?P<s>\d+(?:\.\d+)?)s)?$"
)

# Python's %f stops at microseconds.
_EXTRA_FRACTION = re.compile(r"(\.\d{6})\d+")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def resolve_path(data: dict[str, Any], path: str) -> Any:
    """
    Evaluate a JSONPath-like expression. Returns _MISSING when nothing matches.
    A wildcard anywhere in the path yields a list of all matches.
    """
    if path == "$":
        return data
    if not path.startswith("$"):
        raise ConversionError(f"Invalid JSONPath attribute name: {path!r}")

    values: list[Any] = [data]
    wildcard = False
    pos = 1
    while pos < len(path):
        m = _PATH_TOKEN.match(path, pos)
        if not m:
            raise ConversionError(f"Invalid JSONPath attribute name: {path!r}")
        pos = m.end()

        key = next(
            (g for g in (m.group("key"), m.group("qkey"), m.group("dqkey")) if g is not None),
            None,
        )
        matched: list[Any] = []
        for value in values:
            if m.group("wild"):
                wildcard = True
                if isinstance(value, list):
                    matched.extend(value)
                elif isinstance(value, dict):
                    matched.extend(value.values())
            elif m.group("index") is not None:
                idx = int(m.group("index"))
                if isinstance(value, list) and -len(value) <= idx < len(value):
                    matched.append(value[idx])
            elif isinstance(value, dict) and key in value:
                matched.append(value[key])
        values = matched

    if wildcard:
        return values
    return values[0] if values else _MISSING


def parse_datetime(value: str, formats: Sequence[DateTimeFormat] = DEFAULT_DATETIME_FORMATS) -> datetime:
    """Parse with the first matching format; result is always timezone-aware."""
    text = _EXTRA_FRACTION.sub(r"\1", value.strip())
    for fmt in formats:
        try:
            parsed = datetime.strptime(text, fmt.format)
        except ValueError:
            continue
        if not fmt.has_timezone or parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    raise ValueError(f"unrecognized datetime format: {value!r}")


def parse_duration(value: str) -> timedelta:
    """Parse "1h30m", "45s", "2.5m" or a plain number of seconds."""
    text = value.strip()
    try:
        return timedelta(seconds=float(text))
    except ValueError:
        pass
    m = _DURATION.match(text)
    if not text or not m:
        raise ValueError(f"unrecognized duration: {value!r}")
    return timedelta(
        hours=float(m.group("h") or 0),
        minutes=float(m.group("m") or 0),
        seconds=float(m.group("s") or 0),
    )


def _coerce(value: Any, attr_type: AttributeType, formats: Sequence[DateTimeFormat]) -> Any:
    if isinstance(value, (dict, list)):
        raise ValueError("nested value")

    if attr_type is AttributeType.STRING:
        if isinstance(value, bool):
            raise ValueError("boolean value")
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)):
            return str(value)
        return _fail(value)

    if attr_type is AttributeType.BOOL:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        return _fail(value)

    if attr_type is AttributeType.INT64:
        if isinstance(value, bool):
            raise ValueError("boolean value")
        if isinstance(value, int):
            return _int64(value)
        if isinstance(value, float) and value.is_integer():
            return _int64(int(value))
        if isinstance(value, str):
            return _int64(int(value.strip()))
        return _fail(value)

    if attr_type is AttributeType.DOUBLE:
        if isinstance(value, bool):
            raise ValueError("boolean value")
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            return float(value.strip())
        return _fail(value)

    if attr_type is AttributeType.DATETIME:
        if isinstance(value, str):
            return parse_datetime(value, formats)
        return _fail(value)

    if attr_type is AttributeType.DURATION:
        if isinstance(value, bool):
            raise ValueError("boolean value")
        if isinstance(value, (int, float)):
            return timedelta(seconds=value)
        if isinstance(value, str):
            return parse_duration(value)
        return _fail(value)

    raise ValueError(f"unsupported attribute type {attr_type}")


def _fail(value: Any) -> Any:
    raise ValueError(f"unexpected {type(value).__name__} value")


def _int64(value: int) -> int:
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError("out of int64 range")
    return value


def _convert_attribute(
    attr: AttributeSpec,
    value: Any,
    formats: Sequence[DateTimeFormat],
) -> Any:
    try:
        if attr.is_list:
            if not isinstance(value, list):
                raise ValueError("expected a list")
            return [_coerce(v, attr.type, formats) for v in value if v is not None]
        return _coerce(value, attr.type, formats)
    except (ValueError, OverflowError) as e:
        raise ConversionError(
            f"Attribute {attr.external_id!r}: cannot convert {value!r} to {attr.type.value}: {e}"
        ) from e


def convert_record(
    record: RawRecord,
    entity: EntitySpec,
    *,
    json_path_attribute_names: bool = True,
    datetime_formats: Sequence[DateTimeFormat] = DEFAULT_DATETIME_FORMATS,
    unique_id_attribute: Optional[str] = None,
) -> dict[str, Any]:
    """Convert one record. Missing or null attributes are omitted, except the unique ID."""
    obj: dict[str, Any] = {}
    for attr in entity.attributes:
        if json_path_attribute_names and attr.external_id.startswith("$"):
            value = resolve_path(record.data, attr.external_id)
        else:
            value = record.data.get(attr.external_id, _MISSING)

        if value is _MISSING or value is None:
            if attr.external_id == unique_id_attribute:
                raise ConversionError(f"Record is missing unique ID attribute {attr.external_id!r}")
            continue

        obj[attr.external_id] = _convert_attribute(attr, value, datetime_formats)
    return obj


def convert_records(
    records: Sequence[RawRecord],
    entity: EntitySpec,
    *,
    json_path_attribute_names: bool = True,
    datetime_formats: Sequence[DateTimeFormat] = DEFAULT_DATETIME_FORMATS,
    unique_id_attribute: Optional[str] = None,
) -> list[dict[str, Any]]:
    """Convert a page of records, preserving order."""
    objects = []
    for i, record in enumerate(records):
        try:
            objects.append(
                convert_record(
                    record,
                    entity,
                    json_path_attribute_names=json_path_attribute_names,
                    datetime_formats=datetime_formats,
                    unique_id_attribute=unique_id_attribute,
                )
            )
        except ConversionError as e:
            raise ConversionError(f"Record {i}: {e}") from e
    logger.debug("Converted %d %s records", len(objects), entity.external_id)
    return objects
