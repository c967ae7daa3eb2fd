"""Search-as-you-type with last-request-wins semantics."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from pytflbus.exceptions import TflError
from pytflbus.models.stop import BusStop

_logger = logging.getLogger(__name__)


class StopSearcher(Protocol):
    async def search_stops(self, query: str, *, timeout: float | None = None) -> list[BusStop]:
        ...


class StopSearch:
    """Issue stop searches where a newer query supersedes older ones.

    Each :meth:`search` cancels the previous in-flight task, which aborts
    its HTTP request.  A superseded call returns ``None``; callers should
    ignore it.  Errors and timeouts resolve to an empty list so the
    search box never hangs.
    """

    def __init__(self, searcher: StopSearcher, *, debounce: float = 0.3, timeout: float = 5.0) -> None:
        self._searcher = searcher
        self._debounce = debounce
        self._timeout = timeout
        self._inflight: asyncio.Task[list[BusStop]] | None = None
        self._generation = 0

    @property
    def is_searching(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    def cancel(self) -> None:
        """Abort the in-flight search, if any."""
        self._generation += 1
        task = self._inflight
        self._inflight = None
        if task is not None and not task.done():
            task.cancel()

    async def search(self, query: str) -> list[BusStop] | None:
        self.cancel()
        generation = self._generation
        if not query.strip():
            return []

        task = asyncio.get_running_loop().create_task(self._run(query))
        self._inflight = task
        try:
            result = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                _logger.debug("Search %r superseded", query)
                return None
            raise
        finally:
            if self._inflight is task:
                self._inflight = None

        if generation != self._generation:
            _logger.debug("Discarding late result for %r", query)
            return None
        return result

    async def _run(self, query: str) -> list[BusStop]:
        if self._debounce > 0:
            await asyncio.sleep(self._debounce)
        try:
            return await asyncio.wait_for(
                self._searcher.search_stops(query, timeout=self._timeout),
                timeout=self._timeout,
            )
        except (TflError, asyncio.TimeoutError):
            _logger.debug("Search %r failed", query, exc_info=True)
            return []
