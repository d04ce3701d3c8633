from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backoffice.core.constants import SORT_DESC
from backoffice.core.exceptions import InvalidQueryError, RemoteFetchError
from backoffice.core.text import fold_text
from backoffice.services.list_query import (
    ERROR_FETCH_FAILED,
    ERROR_INVALID_QUERY,
    STRING,
    ListFields,
    ListQuery,
    Page,
    apply_query,
)

logger = logging.getLogger(__name__)


class QueryExecutor(ABC):
    """Produces one page of records for a list query."""

    fields: ListFields

    @abstractmethod
    def execute(self, query: ListQuery) -> Page:
        """Return the requested page; raise on failure."""


class MemoryQueryExecutor(QueryExecutor):

    def __init__(self, source: Callable[[], Iterable], fields: ListFields) -> None:
        self._source = source
        self.fields = fields

    def execute(self, query: ListQuery) -> Page:
        return apply_query(self._source(), query, self.fields)


class TableQueryExecutor(QueryExecutor):
    """Runs a list query as SELECT ... ORDER BY ... OFFSET/LIMIT plus a COUNT."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        model,
        fields: ListFields,
        to_record: Optional[Callable] = None,
    ) -> None:
        self._session_factory = session_factory
        self._model = model
        self.fields = fields
        self._to_record = to_record or (lambda row: row)

    def _column(self, name: str):
        return getattr(self._model, name)

    def _comparable(self, name: str):
        column = self._column(name)
        if self.fields.kind_of(name) == STRING:
            return func.lower(column)
        return column

    def build_statement(self, query: ListQuery):
        """Return (page statement, count statement) for a normalized query."""
        stmt = select(self._model)
        if query.search:
            needle = fold_text(query.search)
            stmt = stmt.where(
                or_(
                    *(
                        func.lower(self._column(name)).contains(needle, autoescape=True)
                        for name in self.fields.search
                    )
                )
            )
        for name, value in query.filters.items():
            stmt = stmt.where(func.lower(self._column(name)) == fold_text(value))

        count_stmt = select(func.count()).select_from(stmt.subquery())

        sort_column = self._comparable(query.sort_field)
        if query.sort_direction == SORT_DESC:
            order = sort_column.desc().nulls_first()
        else:
            order = sort_column.asc().nulls_last()
        stmt = (
            stmt.order_by(order, self._comparable(self.fields.tie_breaker).asc())
            .offset(query.offset)
            .limit(query.page_size)
        )
        return stmt, count_stmt

    def execute(self, query: ListQuery) -> Page:
        query = query.normalized(self.fields)
        stmt, count_stmt = self.build_statement(query)
        with self._session_factory() as db:
            total = db.execute(count_stmt).scalar_one()
            rows = db.execute(stmt).scalars().all()
            items = [self._to_record(row) for row in rows]
        return Page(items=items, total=total, page=query.page, page_size=query.page_size)


class FallbackQueryExecutor(QueryExecutor):
    """Serve from ``fallback`` when the database read fails."""

    def __init__(self, primary: QueryExecutor, fallback: QueryExecutor) -> None:
        self._primary = primary
        self._fallback = fallback
        self.fields = primary.fields

    def execute(self, query: ListQuery) -> Page:
        try:
            return self._primary.execute(query)
        except SQLAlchemyError as exc:
            logger.warning("Database list query failed, serving local copy: %s", exc)
        try:
            return self._fallback.execute(query)
        except InvalidQueryError:
            raise
        except Exception as exc:
            raise RemoteFetchError("Local fallback failed") from exc


def run_list_query(executor: QueryExecutor, query: ListQuery) -> Page:
    """Execute a list query; failures become an empty page, never an exception."""
    try:
        return executor.execute(query)
    except InvalidQueryError as exc:
        logger.info("Rejected list query: %s", exc)
        return Page.failed(query, str(exc), ERROR_INVALID_QUERY)
    except Exception:
        logger.exception("List query failed")
        return Page.failed(query, "Failed to load records.", ERROR_FETCH_FAILED)


__all__ = [
    "FallbackQueryExecutor",
    "MemoryQueryExecutor",
    "QueryExecutor",
    "TableQueryExecutor",
    "run_list_query",
]
