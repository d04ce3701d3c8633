"""Debounced list session for live search.

Each ``submit`` bumps the generation and cancels whatever is still waiting.
Only the newest generation may publish a page, so a slow response to an old
keystroke can never overwrite a newer result.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import Awaitable, Callable, Optional

from starlette.concurrency import run_in_threadpool

from backoffice.core.exceptions import InvalidQueryError
from backoffice.services.inventory_repository import EVENT_ADDED, EVENT_REMOVED, EVENT_UPDATED
from backoffice.services.list_query import ListFields, ListQuery, Page, matches

logger = logging.getLogger(__name__)

PagePublisher = Callable[[int, Page], Awaitable[None]]


class LiveListSession:

    def __init__(
        self,
        run_query: Callable[[ListQuery], Page],
        *,
        on_page: PagePublisher,
        debounce_seconds: float = 0.3,
        fields: Optional[ListFields] = None,
    ) -> None:
        self._run_query = run_query
        self._on_page = on_page
        self._debounce = max(float(debounce_seconds), 0.0)
        self._fields = fields
        self._generation = 0
        self._task: Optional[asyncio.Task] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self.query: Optional[ListQuery] = None
        self.page: Optional[Page] = None
        # Generation and query that produced ``page``; lag behind while a submit is pending.
        self._page_generation = 0
        self._page_query: Optional[ListQuery] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending(self) -> bool:
        """True while a newer query than the visible page is debouncing or running."""
        return self._page_generation != self._generation

    def submit(self, query: ListQuery) -> int:
        self._loop = asyncio.get_running_loop()
        self._generation += 1
        generation = self._generation
        self._cancel_pending()
        self.query = query
        self._task = self._loop.create_task(self._run(generation, query))
        return generation

    async def _run(self, generation: int, query: ListQuery) -> None:
        if self._debounce:
            await asyncio.sleep(self._debounce)
        page = await run_in_threadpool(self._run_query, query)
        if generation != self._generation:
            logger.debug("Dropping stale list result %d (current %d)", generation, self._generation)
            return
        self.page = page
        self._page_generation = generation
        self._page_query = query
        await self._on_page(generation, page)

    def _cancel_pending(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait(self) -> None:
        """Wait for the newest submitted query to finish (or be cancelled)."""
        task = self._task
        if task is None:
            return
        with suppress(asyncio.CancelledError):
            await task

    async def close(self) -> None:
        self._generation += 1
        task = self._task
        self._cancel_pending()
        if task is not None:
            with suppress(asyncio.CancelledError):
                await task

    async def move(self, record_id: str, direction: str) -> None:
        if self.page is None or self.pending:
            return
        self.page = self.page.move(record_id, direction)
        await self._on_page(self._page_generation, self.page)

    def _visible(self, record) -> bool:
        if self._fields is None or self._page_query is None:
            return True
        try:
            query = self._page_query.normalized(self._fields)
        except InvalidQueryError:
            return False
        return matches(record, query, self._fields)

    async def apply_change(self, event: str, record) -> None:
        """Apply a repository change to the visible page without refetching.

        Changes arriving while a newer query is pending are left to that
        query's fetch.
        """
        if self.page is None or self.pending:
            return
        if event == EVENT_ADDED:
            if not self._visible(record):
                return
            page = self.page.prepend(record)
        elif event == EVENT_UPDATED:
            page = self.page.replace_record(record)
        elif event == EVENT_REMOVED:
            page = self.page.remove(record.id)
        else:
            return
        if page is self.page:
            return
        self.page = page
        try:
            await self._on_page(self._page_generation, page)
        except Exception:
            logger.exception("Failed to publish %s change for %s", event, record.id)

    def notify(self, event: str, record) -> None:
        """Repository listener; safe to call from any thread."""
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        asyncio.run_coroutine_threadsafe(self.apply_change(event, record), loop)


__all__ = ["LiveListSession"]
