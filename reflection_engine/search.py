"""Free-text filtering and declarative sorting of in-memory record lists."""

from __future__ import annotations

import locale
import logging
import unicodedata
from collections.abc import Mapping
from datetime import date, datetime, time, timezone
from functools import cmp_to_key
from typing import Any, Iterable, Optional, Sequence

from reflection_engine.config import Settings, settings
from reflection_engine.schema import NormalizedRecord

logger = logging.getLogger(__name__)

_DIRECTIONS = ("asc", "desc")
_EPOCH = 0.0
_UNSET = object()


def resolve_field(record: Any, path: str) -> Any:
    """Look up a field, following dotted paths into nested mappings."""

    current = record
    for part in path.split("."):
        if isinstance(current, (Mapping, NormalizedRecord)):
            current = current.get(part)
        else:
            return None
    return current


def _matches(value: Any, needle: str, match_string_lists: bool) -> bool:
    if isinstance(value, str):
        return needle in value.lower()
    if match_string_lists and isinstance(value, (list, tuple)):
        return any(isinstance(item, str) and needle in item.lower() for item in value)
    return False


def filter_records(
    data: Sequence[Any],
    search_fields: Iterable[str],
    query: Optional[str],
    match_string_lists: bool = False,
) -> list:
    """Keep records where any search field contains ``query``, case-insensitively.

    Only text fields are matched. With ``match_string_lists`` the match also
    looks inside lists of strings, such as tags.
    """

    if not query or not query.strip():
        return list(data)

    needle = query.lower()
    fields = tuple(search_fields)
    return [
        record
        for record in data
        if any(_matches(resolve_field(record, name), needle, match_string_lists) for name in fields)
    ]


def parse_sort_directive(directive: Optional[str]) -> tuple[Optional[str], str]:
    """Split ``"<field>-<direction>"`` on its last hyphen."""

    if not directive:
        return None, "asc"
    field_name, sep, direction = directive.rpartition("-")
    if sep and field_name and direction in _DIRECTIONS:
        return field_name, direction
    return directive, "asc"


def _timestamp(value: Any) -> float:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return _EPOCH
    else:
        return _EPOCH

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.timestamp()
    except (OverflowError, OSError, ValueError):
        return _EPOCH


def _text_key(value: str) -> str:
    folded = unicodedata.normalize("NFKD", value).casefold()
    try:
        return locale.strxfrm(folded)
    except ValueError:
        return folded


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _cmp(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


def compare_values(left: Any, right: Any, field_name: str, config: Settings = settings) -> int:
    """Three-way comparison of two field values for ascending order."""

    key = field_name.rsplit(".", 1)[-1]

    if key == "quarter":
        return _cmp(config.quarter_rank(left), config.quarter_rank(right))

    if key in config.date_fields:
        return _cmp(_timestamp(left), _timestamp(right))

    if isinstance(left, str) and isinstance(right, str):
        return _cmp(_text_key(left), _text_key(right)) or _cmp(left, right)

    if _is_number(left) and _is_number(right):
        return _cmp(left, right)

    return 0


def sort_records(data: Sequence[Any], directive: Optional[str], config: Settings = settings) -> list:
    """Return a stably sorted copy of ``data`` for a ``"<field>-<direction>"`` directive."""

    field_name, direction = parse_sort_directive(directive)
    if field_name is None:
        return list(data)

    sign = -1 if direction == "desc" else 1

    def comparator(a: Any, b: Any) -> int:
        return sign * compare_values(resolve_field(a, field_name), resolve_field(b, field_name), field_name, config)

    return sorted(data, key=cmp_to_key(comparator))


def search(
    data: Sequence[Any],
    search_fields: Iterable[str],
    query: Optional[str],
    sort_directive: Optional[str],
    match_string_lists: bool = False,
    config: Settings = settings,
) -> list:
    """Filter by free text, then sort. Pure; recomputes from scratch each call."""

    filtered = filter_records(data, search_fields, query, match_string_lists)
    return sort_records(filtered, sort_directive, config)


class SearchView:
    """Search and sort state held by one list view.

    ``results`` is derived again only when the collection object, the query
    or the sort selection changed since the previous read. A collection
    replaced after a write is a new object and always triggers a full pass.
    """

    def __init__(
        self,
        data: Sequence[Any],
        search_fields: Iterable[str],
        sort_field: Optional[str] = None,
        sort_order: str = "desc",
        match_string_lists: bool = False,
    ):
        if sort_order not in _DIRECTIONS:
            raise ValueError(f"Invalid sort order '{sort_order}'")
        self.data = data
        self.search_fields = tuple(search_fields)
        self.query = ""
        self.sort_field = sort_field
        self.sort_order = sort_order
        self.match_string_lists = match_string_lists
        self._cached_data: Any = _UNSET
        self._cache_key: Optional[tuple] = None
        self._cache: list = []
        self.recomputations = 0

    @property
    def sort_directive(self) -> Optional[str]:
        if self.sort_field is None:
            return None
        return f"{self.sort_field}-{self.sort_order}"

    def set_data(self, data: Sequence[Any]) -> None:
        self.data = data

    def set_query(self, query: str) -> None:
        self.query = query

    def set_sort(self, directive: Optional[str]) -> None:
        self.sort_field, self.sort_order = parse_sort_directive(directive)

    def handle_sort(self, field_name: str) -> None:
        """Toggle direction on the active field, or start a new field ascending."""

        if self.sort_field == field_name:
            self.sort_order = "asc" if self.sort_order == "desc" else "desc"
        else:
            self.sort_field = field_name
            self.sort_order = "asc"

    @property
    def results(self) -> list:
        key = (self.query, self.sort_directive)
        if self._cached_data is not self.data or self._cache_key != key:
            self._cache = search(
                self.data,
                self.search_fields,
                self.query,
                self.sort_directive,
                self.match_string_lists,
            )
            self._cached_data = self.data
            self._cache_key = key
            self.recomputations += 1
            logger.debug(f"Recomputed {len(self._cache)}/{len(self.data)} records for {key}")
        return self._cache
