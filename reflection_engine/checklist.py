"""Action-item updates, checklist progress and collaborator permissions."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Optional

from reflection_engine.schema import ActionItem, Collaborator, NormalizedRecord

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {"title", "completed", "deadline"}


def _utc_iso(now: Optional[datetime]) -> str:
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat()


def update_action_item(
    items: list[ActionItem],
    index: int,
    field: str,
    value: Any,
    now: Optional[datetime] = None,
) -> list[ActionItem]:
    """Return a new checklist with one field of one item replaced.

    Completing an open item stamps ``completed_at``; reopening clears it.
    """

    if field not in _EDITABLE_FIELDS:
        raise ValueError(f"Action item field '{field}' cannot be updated")
    if not 0 <= index < len(items):
        raise IndexError(f"Action item {index} out of range for {len(items)} items")

    item = items[index]
    if field == "completed":
        completed = bool(value)
        if completed and not item.completed:
            updated = replace(item, completed=True, completed_at=_utc_iso(now))
        elif not completed:
            updated = replace(item, completed=False, completed_at=None)
        else:
            updated = item
    else:
        updated = replace(item, **{field: value})

    return [updated if i == index else existing for i, existing in enumerate(items)]


def checklist_progress(items: list[ActionItem]) -> int:
    """Percentage of completed items, rounded half up; 0 for an empty list."""

    if not items:
        return 0
    done = sum(1 for item in items if item.completed)
    return int(done * 100 / len(items) + 0.5)


def find_collaborator(collaborators: list[Collaborator], user_id: str) -> Optional[Collaborator]:
    """Return the first collaborator entry for ``user_id``."""

    return next((c for c in collaborators if c.user_id == user_id), None)


def can_edit(record: NormalizedRecord, user_id: str) -> bool:
    """Owners can always edit; collaborators need edit permission."""

    if record.get("user_id") == user_id:
        return True
    collaborator = find_collaborator(record.collaborators, user_id)
    return collaborator is not None and collaborator.permission == "edit"


def apply_action_item_update(
    record: NormalizedRecord,
    user_id: str,
    index: int,
    field: str,
    value: Any,
    now: Optional[datetime] = None,
) -> NormalizedRecord:
    """Update one action item on behalf of ``user_id`` and recompute progress."""

    if not can_edit(record, user_id):
        raise PermissionError(f"User {user_id} has no edit permission on record {record.get('id')}")

    checklist = update_action_item(record.checklist, index, field, value, now=now)
    fields = dict(record.fields)
    fields["progress_percent"] = checklist_progress(checklist)
    logger.info(f"Record {record.get('id')}: progress now {fields['progress_percent']}%")
    return replace(record, fields=fields, checklist=checklist)
