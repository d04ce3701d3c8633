"""Filter, sort and paginate a collection of records.

The matching rules live here once. ``MemoryQueryExecutor`` runs
``apply_query`` directly over a snapshot; ``TableQueryExecutor`` translates
the same normalized ``ListQuery`` into SQL so both backends agree on what a
page contains.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping, Optional, Sequence

from backoffice.core.constants import MOVE_DIRECTIONS, SORT_ASC, SORT_DESC, SORT_DIRECTIONS
from backoffice.core.exceptions import InvalidQueryError
from backoffice.core.text import fold_text

STRING = "string"
NUMBER = "number"
DATE = "date"

ERROR_INVALID_QUERY = "invalid_query"
ERROR_FETCH_FAILED = "fetch_failed"


@dataclass(frozen=True)
class ListFields:
    """Which attributes of a record type can be searched, filtered and sorted."""

    search: tuple[str, ...]
    filters: tuple[str, ...]
    sortable: Mapping[str, str]
    default_sort: str
    default_direction: str = SORT_ASC
    tie_breaker: str = "id"
    aliases: Mapping[str, str] = field(default_factory=dict)

    def resolve(self, name: Optional[str]) -> str:
        key = (name or "").strip()
        return self.aliases.get(key, key)

    def kind_of(self, name: str) -> str:
        return self.sortable.get(name, STRING)


@dataclass(frozen=True)
class ListQuery:
    search: str = ""
    filters: Mapping[str, Optional[str]] = field(default_factory=dict)
    sort_field: Optional[str] = None
    sort_direction: Optional[str] = None
    page: int = 1
    page_size: int = 20

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def normalized(self, fields: ListFields) -> "ListQuery":
        """Resolve aliases and defaults; raise InvalidQueryError on bad input."""
        if self.page < 1:
            raise InvalidQueryError("page must be 1 or greater")
        if self.page_size < 1:
            raise InvalidQueryError("page_size must be 1 or greater")

        sort_field = fields.resolve(self.sort_field) or fields.default_sort
        if sort_field not in fields.sortable:
            raise InvalidQueryError(f"Cannot sort by {sort_field!r}")

        direction = (self.sort_direction or fields.default_direction).strip().lower()
        if direction not in SORT_DIRECTIONS:
            raise InvalidQueryError(f"Sort direction must be one of: {', '.join(SORT_DIRECTIONS)}")

        filters = {}
        for name, value in (self.filters or {}).items():
            if value is None or not str(value).strip():
                continue
            resolved = fields.resolve(name)
            if resolved not in fields.filters:
                raise InvalidQueryError(f"Cannot filter by {name!r}")
            filters[resolved] = str(value).strip()

        return replace(
            self,
            search=(self.search or "").strip(),
            filters=filters,
            sort_field=sort_field,
            sort_direction=direction,
        )


def query_from_mapping(
    data: Mapping[str, Any],
    fields: ListFields,
    *,
    default_page_size: int,
) -> ListQuery:
    """Build a query from loosely-typed parameters (query strings, JSON)."""
    try:
        page = int(data.get("page") or 1)
        page_size = int(data.get("page_size") or default_page_size)
    except (TypeError, ValueError):
        raise InvalidQueryError("page and page_size must be integers") from None
    filters = {name: data.get(name) for name in fields.filters}
    return ListQuery(
        search=str(data.get("search") or ""),
        filters=filters,
        sort_field=data.get("sort") or data.get("sort_field"),
        sort_direction=data.get("order") or data.get("sort_direction"),
        page=page,
        page_size=page_size,
    )


@dataclass
class Page:
    items: list
    total: int
    page: int = 1
    page_size: int = 20
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def failed(cls, query: ListQuery, message: str, kind: str = ERROR_FETCH_FAILED) -> "Page":
        return cls(
            items=[],
            total=0,
            page=query.page,
            page_size=query.page_size,
            error=message,
            error_kind=kind,
        )

    @property
    def pages(self) -> int:
        if self.total <= 0:
            return 0
        return math.ceil(self.total / self.page_size)

    def prepend(self, record) -> "Page":
        """Show a newly added record at the top of the first page."""
        if self.page != 1:
            return replace(self, total=self.total + 1)
        items = [record, *self.items][: self.page_size]
        return replace(self, items=items, total=self.total + 1)

    def replace_record(self, record) -> "Page":
        if not any(item.id == record.id for item in self.items):
            return self
        items = [record if item.id == record.id else item for item in self.items]
        return replace(self, items=items)

    def remove(self, record_id: str) -> "Page":
        items = [item for item in self.items if item.id != record_id]
        if len(items) == len(self.items):
            return self
        return replace(self, items=items, total=max(self.total - 1, 0))

    def move(self, record_id: str, direction: str) -> "Page":
        if direction not in MOVE_DIRECTIONS:
            raise InvalidQueryError(f"Move direction must be one of: {', '.join(MOVE_DIRECTIONS)}")
        index = next((idx for idx, item in enumerate(self.items) if item.id == record_id), None)
        if index is None:
            return self
        swap_index = index - 1 if direction == "up" else index + 1
        if swap_index < 0 or swap_index >= len(self.items):
            return self
        items = list(self.items)
        items[index], items[swap_index] = items[swap_index], items[index]
        return replace(self, items=items)


def _text(value) -> str:
    if value is None:
        return ""
    return fold_text(value)


def _sort_value(value, kind: str):
    # Missing values sort after present ones in ascending order.
    if value is None:
        return 1, 0
    if kind == NUMBER:
        return 0, float(value)
    if kind == DATE:
        if isinstance(value, datetime):
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            return 0, value.timestamp()
        if isinstance(value, date):
            return 0, float(value.toordinal())
        return 0, float(value)
    return 0, fold_text(value)


def matches(record, query: ListQuery, fields: ListFields) -> bool:
    """Search is any-field substring, filters are all-fields equality."""
    if query.search:
        needle = fold_text(query.search)
        if not any(needle in _text(getattr(record, name, None)) for name in fields.search):
            return False
    for name, value in query.filters.items():
        if _text(getattr(record, name, None)) != fold_text(value):
            return False
    return True


def sort_records(records: Iterable, query: ListQuery, fields: ListFields) -> list:
    tie_kind = fields.kind_of(fields.tie_breaker)
    ordered = sorted(
        records,
        key=lambda record: _sort_value(getattr(record, fields.tie_breaker, None), tie_kind),
    )
    kind = fields.kind_of(query.sort_field)
    # list.sort is stable, also with reverse=True, so ties keep the tie-breaker order.
    ordered.sort(
        key=lambda record: _sort_value(getattr(record, query.sort_field, None), kind),
        reverse=query.sort_direction == SORT_DESC,
    )
    return ordered


def paginate(records: Sequence, query: ListQuery) -> list:
    start = query.offset
    return list(records[start:start + query.page_size])


def apply_query(records: Iterable, query: ListQuery, fields: ListFields) -> Page:
    query = query.normalized(fields)
    filtered = [record for record in records if matches(record, query, fields)]
    ordered = sort_records(filtered, query, fields)
    return Page(
        items=paginate(ordered, query),
        total=len(filtered),
        page=query.page,
        page_size=query.page_size,
    )


__all__ = [
    "DATE",
    "ERROR_FETCH_FAILED",
    "ERROR_INVALID_QUERY",
    "ListFields",
    "ListQuery",
    "NUMBER",
    "Page",
    "STRING",
    "apply_query",
    "matches",
    "paginate",
    "query_from_mapping",
    "sort_records",
]
