"""Core data schema for focus areas, diary entries and their nested fields."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

CHECKLIST = "checklist"
TAGS = "tags"
COLLABORATORS = "collaborators"
NESTED_FIELDS = (CHECKLIST, TAGS, COLLABORATORS)


def _as_flag(value: Any) -> bool:
    """Read a stored completion flag; only booleans and "true"/"false" count."""

    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


@dataclass
class ActionItem:
    """One checklist entry of a focus area or diary entry."""

    title: str
    completed: bool = False
    deadline: Optional[str] = None
    completed_at: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, item: dict) -> "ActionItem":
        known = {"title", "completed", "deadline", "completed_at", "completedAt"}
        completed_at = item.get("completed_at", item.get("completedAt"))
        title = item.get("title")
        return cls(
            title="" if title is None else str(title),
            completed=_as_flag(item.get("completed")),
            deadline=item.get("deadline"),
            completed_at=completed_at,
            extra={key: value for key, value in item.items() if key not in known},
        )

    def to_dict(self) -> dict:
        data = dict(self.extra)
        data["title"] = self.title
        data["completed"] = self.completed
        if self.deadline is not None:
            data["deadline"] = self.deadline
        if self.completed_at is not None:
            data["completed_at"] = self.completed_at
        return data


@dataclass
class Collaborator:
    """A user sharing a focus area. Role and permission are not validated."""

    user_id: Optional[str]
    role: Optional[str] = None
    permission: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, item: dict) -> "Collaborator":
        known = {"user_id", "userId", "role", "permission"}
        user_id = item.get("user_id", item.get("userId"))
        return cls(
            user_id=None if user_id is None else str(user_id),
            role=item.get("role"),
            permission=item.get("permission"),
            extra={key: value for key, value in item.items() if key not in known},
        )

    def to_dict(self) -> dict:
        data = dict(self.extra)
        if self.user_id is not None:
            data["user_id"] = self.user_id
        if self.role is not None:
            data["role"] = self.role
        if self.permission is not None:
            data["permission"] = self.permission
        return data


@dataclass
class NormalizedRecord:
    """A stored record with its nested JSON fields decoded into typed lists.

    Every other column is kept untouched in ``fields``. ``stored_fields``
    names the nested columns the raw row carried; write-back only emits
    those. Lookups through ``get``/``[]`` see the typed lists under their
    storage names, so the search engine can treat a normalized record like a
    mapping.
    """

    fields: dict[str, Any] = field(default_factory=dict)
    checklist: list[ActionItem] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    collaborators: list[Collaborator] = field(default_factory=list)
    stored_fields: tuple[str, ...] = NESTED_FIELDS

    def get(self, name: str, default: Any = None) -> Any:
        if name in NESTED_FIELDS:
            return getattr(self, name)
        return self.fields.get(name, default)

    def __getitem__(self, name: str) -> Any:
        if name in NESTED_FIELDS:
            return getattr(self, name)
        return self.fields[name]

    def __contains__(self, name: object) -> bool:
        return name in NESTED_FIELDS or name in self.fields


@dataclass(frozen=True)
class SortOption:
    """A selectable sort order, declared statically per view."""

    value: str
    label: str

    @classmethod
    def for_field(cls, field_name: str, direction: str, label: str) -> "SortOption":
        return cls(value=f"{field_name}-{direction}", label=label)


@dataclass(frozen=True)
class Ok:
    """Nested field decoded into the expected list shape."""

    items: list


@dataclass(frozen=True)
class Fallback:
    """Nested field could not be decoded; it degrades to an empty list."""

    reason: str

    @property
    def items(self) -> list:
        return []
