"""Boundary adapter from upstream JSON payloads to typed rows.

The reporting API is inconsistent: some endpoints return a bare array, others
wrap it under ``data`` or ``result`` or a report-specific key, and field names
arrive as either ``DeptId`` or ``deptId``. All of that tolerance lives here so
the aggregation core only sees ``TransactionRow`` objects.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence

from ledgerview.domain.entities import TransactionRow
from ledgerview.domain.errors import ValidationError, unsupported_payload
from ledgerview.logging_setup import get_logger
from ledgerview.utils.number_format import coerce_amount, to_decimal

logger = get_logger(__name__)

DEFAULT_WRAPPER_KEYS = ("data", "result", "Data", "Result", "items")


@dataclass(frozen=True)
class FieldMap:
    """Raw field names feeding each part of a ``TransactionRow``.

    Each entry lists candidate names tried in order; the lower-camel variant
    of every candidate is tried as well.
    """

    code: tuple[str, ...]
    name: tuple[str, ...]
    measures: Mapping[str, tuple[str, ...]]
    secondary_key: tuple[str, ...] = ()
    flag: tuple[str, ...] = ()
    subgroup: tuple[str, ...] = ()
    attributes: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    secondary_key_prefix: str = ""


def _camel_variants(name: str) -> tuple[str, ...]:
    lowered = name[:1].lower() + name[1:]
    return (name,) if lowered == name else (name, lowered)


def pick(item: Mapping[str, Any], *names: str) -> Any:
    """Return the first non-null value among field names and their casings."""
    for name in names:
        for candidate in _camel_variants(name):
            value = item.get(candidate)
            if value is not None:
                return value
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(item: Mapping[str, Any], names: tuple[str, ...]) -> Optional[str]:
    if not names:
        return None
    return _text(pick(item, *names)) or None


def unwrap_payload(
    payload: Any, keys: Sequence[str] = DEFAULT_WRAPPER_KEYS
) -> list[Any]:
    """Extract the row list from an API payload.

    Args:
        payload: Decoded JSON; a list or an object wrapping one
        keys: Wrapper keys tried in order

    Returns:
        List of raw row objects

    Raises:
        ValidationError: If no row list can be found
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, list):
                return value
        lists = [value for value in payload.values() if isinstance(value, list)]
        if len(lists) == 1:
            return lists[0]
    raise ValidationError(unsupported_payload(type(payload).__name__))


def normalize_row(item: Mapping[str, Any], field_map: FieldMap) -> TransactionRow:
    """Build one ``TransactionRow`` from a raw mapping."""
    measures = {}
    for measure, names in field_map.measures.items():
        raw = pick(item, *names)
        if raw is not None and to_decimal(raw) is None:
            logger.debug("Non-numeric %s value %r read as 0", measure, raw)
        measures[measure] = coerce_amount(raw)

    secondary_key: Optional[str] = None
    if field_map.secondary_key:
        secondary_key = _text(pick(item, *field_map.secondary_key))
        prefix = field_map.secondary_key_prefix
        if prefix and secondary_key.startswith(prefix):
            secondary_key = secondary_key[len(prefix) :].strip()
        secondary_key = secondary_key or None

    return TransactionRow(
        code=_text(pick(item, *field_map.code)),
        name=_text(pick(item, *field_map.name)),
        measures=measures,
        secondary_key=secondary_key,
        flag=_optional_text(item, field_map.flag),
        subgroup=_optional_text(item, field_map.subgroup),
        attributes={
            attr: _text(pick(item, *names))
            for attr, names in field_map.attributes.items()
        },
    )


def normalize_rows(items: Iterable[Any], field_map: FieldMap) -> list[TransactionRow]:
    """Normalize raw row objects into ``TransactionRow`` objects.

    Raises:
        ValidationError: If an element is not an object
    """
    rows = []
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise ValidationError(
                f"Row {index} is a {type(item).__name__}, expected an object"
            )
        rows.append(normalize_row(item, field_map))
    return rows
