"""Normalization of stored records with JSON-encoded nested fields.

Stored focus areas and diary entries keep their checklist, tags and
collaborators in single columns. Depending on which client wrote the row,
such a column holds a native list, a JSON string of a list, or nothing.
Everything here degrades malformed values to an empty list and logs the
problem instead of raising, so one corrupt column never hides the rest of
the record.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Mapping, Union

from reflection_engine.schema import (
    CHECKLIST,
    COLLABORATORS,
    NESTED_FIELDS,
    TAGS,
    ActionItem,
    Collaborator,
    Fallback,
    NormalizedRecord,
    Ok,
)

logger = logging.getLogger(__name__)

DecodeResult = Union[Ok, Fallback]


def _checklist_item(item: Any) -> ActionItem | None:
    if isinstance(item, str):
        return ActionItem(title=item, completed=False)
    if isinstance(item, dict):
        return ActionItem.from_dict(item)
    return None


def _tag(item: Any) -> str | None:
    return item if isinstance(item, str) else None


def _collaborator(item: Any) -> Collaborator | None:
    if isinstance(item, dict):
        return Collaborator.from_dict(item)
    return None


_ELEMENT_PARSERS: dict[str, Callable[[Any], Any]] = {
    CHECKLIST: _checklist_item,
    TAGS: _tag,
    COLLABORATORS: _collaborator,
}


def decode_field(raw: Any, field_name: str) -> DecodeResult:
    """Decode one nested field into ``Ok(items)`` or ``Fallback(reason)``."""

    parse_element = _ELEMENT_PARSERS[field_name]

    if raw is None:
        return Ok([])

    value = raw
    if isinstance(raw, str):
        try:
            value = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            return Fallback(f"{field_name}: invalid JSON ({exc})")
        if value is None:
            return Ok([])

    if not isinstance(value, (list, tuple)):
        return Fallback(f"{field_name}: expected an array, got {type(value).__name__}")

    items = []
    for index, element in enumerate(value):
        parsed = parse_element(element)
        if parsed is None:
            logger.warning(f"Dropped {field_name}[{index}]: unsupported {type(element).__name__} element")
            continue
        items.append(parsed)
    return Ok(items)


def _dedupe_collaborators(collaborators: list[Collaborator], record_id: Any) -> list[Collaborator]:
    seen: set[str] = set()
    unique = []
    for collaborator in collaborators:
        if collaborator.user_id is not None:
            if collaborator.user_id in seen:
                logger.warning(f"Record {record_id}: dropped duplicate collaborator {collaborator.user_id}")
                continue
            seen.add(collaborator.user_id)
        unique.append(collaborator)
    return unique


def normalize_record(raw: Mapping[str, Any]) -> NormalizedRecord:
    """Normalize one raw stored record. Never raises on malformed nested fields."""

    record_id = raw.get("id", "<no id>")
    decoded = {}
    for field_name in NESTED_FIELDS:
        result = decode_field(raw.get(field_name), field_name)
        if isinstance(result, Fallback):
            logger.warning(f"Record {record_id}: {result.reason}; using empty list")
        decoded[field_name] = result.items

    return NormalizedRecord(
        fields={key: value for key, value in raw.items() if key not in NESTED_FIELDS},
        checklist=decoded[CHECKLIST],
        tags=decoded[TAGS],
        collaborators=_dedupe_collaborators(decoded[COLLABORATORS], record_id),
        stored_fields=tuple(name for name in NESTED_FIELDS if name in raw),
    )


def normalize_records(raw_records: list[Mapping[str, Any]]) -> list[NormalizedRecord]:
    """Normalize a freshly fetched collection."""

    return [normalize_record(raw) for raw in raw_records]


def encode_field(record: NormalizedRecord, field_name: str) -> str:
    """Serialize one nested field back to its stored JSON string form."""

    if field_name == CHECKLIST:
        payload = [item.to_dict() for item in record.checklist]
    elif field_name == TAGS:
        payload = list(record.tags)
    elif field_name == COLLABORATORS:
        payload = [collaborator.to_dict() for collaborator in record.collaborators]
    else:
        raise ValueError(f"Not a nested field: '{field_name}'")
    return json.dumps(payload)


def encode_record(record: NormalizedRecord) -> dict:
    """Return the storage form of a record, nested fields as JSON strings.

    Only the nested columns the record was loaded with are written back.
    """

    stored = dict(record.fields)
    for field_name in record.stored_fields:
        stored[field_name] = encode_field(record, field_name)
    return stored
