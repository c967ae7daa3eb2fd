"""Favourite stops.

The tracker never touches storage directly; it is handed a
:class:`FavoritesPort` and only uses these capabilities.
"""

from __future__ import annotations

from typing import Protocol


class FavoritesPort(Protocol):
    def list(self) -> list[str]:
        ...

    def is_favorite(self, stop_id: str) -> bool:
        ...

    def add(self, stop_id: str) -> None:
        ...

    def remove(self, stop_id: str) -> None:
        ...


class InMemoryFavorites:
    """Ordered set of favourite stop ids (insertion order kept)."""

    def __init__(self, stop_ids: list[str] | None = None) -> None:
        self._ids: list[str] = []
        for stop_id in stop_ids or []:
            self.add(stop_id)

    def list(self) -> list[str]:
        return list(self._ids)

    def is_favorite(self, stop_id: str) -> bool:
        return stop_id in self._ids

    def add(self, stop_id: str) -> None:
        if stop_id and stop_id not in self._ids:
            self._ids.append(stop_id)

    def remove(self, stop_id: str) -> None:
        if stop_id in self._ids:
            self._ids.remove(stop_id)


def toggle_favorite(port: FavoritesPort, stop_id: str) -> bool:
    """Flip *stop_id* in *port*; return whether it is now a favourite."""
    if port.is_favorite(stop_id):
        port.remove(stop_id)
        return False
    port.add(stop_id)
    return True
