"""Periodic live-data polling keyed by the selected stop."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from pytflbus.exceptions import TflError

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class LivePoller(Generic[T]):
    """Run ``fetch(key)`` now and then every *interval* seconds.

    At most one loop is active per poller.  :meth:`start` with a new key
    cancels the previous loop before scheduling the next, and results are
    only delivered while their key and generation are still current, so
    nothing fetched for a previous stop reaches ``on_result`` once a new
    stop is being polled.

    A cycle that fails with :class:`TflError` delivers *empty* ("no data
    this cycle") and the loop keeps going.
    """

    def __init__(
        self,
        fetch: Callable[[str], Awaitable[T]],
        on_result: Callable[[str, T], None],
        *,
        interval: float,
        empty: Callable[[], T],
        name: str = "poller",
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._fetch = fetch
        self._on_result = on_result
        self._interval = interval
        self._empty = empty
        self._name = name
        self._task: asyncio.Task[None] | None = None
        self._key: str | None = None
        self._generation = 0

    @property
    def active_key(self) -> str | None:
        return self._key

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def interval(self) -> float:
        return self._interval

    def start(self, key: str) -> None:
        """Start polling for *key*, replacing any loop for a previous key."""
        self.stop()
        self._generation += 1
        self._key = key
        _logger.debug("%s: start key=%s gen=%d", self._name, key, self._generation)
        self._task = asyncio.get_running_loop().create_task(
            self._run(key, self._generation),
            name=f"{self._name}:{key}",
        )

    def stop(self) -> None:
        """Cancel the active loop, if any.  Safe to call repeatedly."""
        task = self._task
        self._task = None
        if self._key is not None:
            _logger.debug("%s: stop key=%s", self._name, self._key)
        self._key = None
        # Bumping the generation invalidates anything the old loop still delivers.
        self._generation += 1
        if task is not None and not task.done():
            task.cancel()

    async def aclose(self) -> None:
        """Stop and wait for the cancelled loop to unwind."""
        task = self._task
        self.stop()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def refresh(self) -> None:
        """Fetch once for the active key outside the regular schedule."""
        key = self._key
        if key is None:
            return
        await self._poll_once(key, self._generation)

    def _is_current(self, key: str, generation: int) -> bool:
        return self._key == key and self._generation == generation

    async def _poll_once(self, key: str, generation: int) -> None:
        try:
            result = await self._fetch(key)
        except TflError:
            _logger.debug("%s: fetch for key=%s failed", self._name, key, exc_info=True)
            result = self._empty()
        if not self._is_current(key, generation):
            _logger.debug("%s: discarding result for superseded key=%s", self._name, key)
            return
        self._on_result(key, result)

    async def _run(self, key: str, generation: int) -> None:
        while self._is_current(key, generation):
            await self._poll_once(key, generation)
            await asyncio.sleep(self._interval)
