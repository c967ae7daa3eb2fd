"""In-memory store for the entities on the map.

This is the only component allowed to swap entity layers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from pytflbus.state.events import EntityLayer, IngestionSource, SnapshotUpdate
from pytflbus.state.policy import should_accept_update

if TYPE_CHECKING:
    from pytflbus.map.entities import MapEntity

_logger = logging.getLogger(__name__)


class LayerSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    entities: tuple[Any, ...] = ()
    generation: int | None = None
    source: IngestionSource | None = None
    key: str | None = None
    observed_at: datetime | None = None


class EntitySnapshot(BaseModel):
    """Immutable view of every layer at one point in time."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    layers: dict[EntityLayer, LayerSnapshot] = Field(default_factory=dict)
    version: int = 0

    def layer(self, layer: EntityLayer) -> LayerSnapshot:
        return self.layers.get(layer) or LayerSnapshot()

    @property
    def stops(self) -> tuple[MapEntity, ...]:
        return self.layer(EntityLayer.STOPS).entities

    @property
    def vehicles(self) -> tuple[MapEntity, ...]:
        return self.layer(EntityLayer.VEHICLES).entities

    @property
    def user_location(self) -> MapEntity | None:
        entities = self.layer(EntityLayer.USER_LOCATION).entities
        return entities[0] if entities else None

    def all_entities(self) -> tuple[MapEntity, ...]:
        user = self.user_location
        return self.stops + ((user,) if user is not None else ()) + self.vehicles


class EntityStore:
    """Holds the current :class:`EntitySnapshot` and swaps it atomically.

    ``apply`` builds a complete new snapshot and replaces the reference in
    one assignment; a reader holding the previous snapshot keeps a
    consistent view.
    """

    def __init__(self) -> None:
        self._snapshot = EntitySnapshot()
        self._generations: dict[EntityLayer, int] = {}
        self._listeners: list[Callable[[EntitySnapshot], None]] = []

    @property
    def snapshot(self) -> EntitySnapshot:
        return self._snapshot

    def next_generation(self, layer: EntityLayer) -> int:
        """Reserve a generation number for a request about to be issued."""
        generation = self._generations.get(layer, 0) + 1
        self._generations[layer] = generation
        return generation

    def subscribe(self, listener: Callable[[EntitySnapshot], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def apply(self, update: SnapshotUpdate) -> bool:
        """Apply *update*; return ``False`` when it was stale and dropped."""
        current = self._snapshot.layers.get(update.layer)
        if not should_accept_update(
            current_generation=current.generation if current is not None else None,
            incoming_generation=update.generation,
        ):
            _logger.debug(
                "Dropping stale %s update gen=%d (current gen=%s)",
                update.layer,
                update.generation,
                current.generation if current is not None else None,
            )
            return False

        layers = dict(self._snapshot.layers)
        layers[update.layer] = LayerSnapshot(
            entities=tuple(update.entities),
            generation=update.generation,
            source=update.source,
            key=update.key,
            observed_at=update.observed_at,
        )
        self._snapshot = EntitySnapshot(layers=layers, version=self._snapshot.version + 1)
        if update.generation > self._generations.get(update.layer, 0):
            self._generations[update.layer] = update.generation

        for listener in list(self._listeners):
            try:
                listener(self._snapshot)
            except Exception:
                _logger.debug("Snapshot listener failed", exc_info=True)
        return True

    def replace(
        self,
        layer: EntityLayer,
        entities: tuple[MapEntity, ...] | list[MapEntity],
        *,
        source: IngestionSource = IngestionSource.MANUAL,
        key: str | None = None,
    ) -> bool:
        """Replace a layer with a freshly reserved generation."""
        return self.apply(
            SnapshotUpdate(
                layer=layer,
                source=source,
                entities=tuple(entities),
                generation=self.next_generation(layer),
                key=key,
            )
        )

    def clear(self, layer: EntityLayer, *, source: IngestionSource = IngestionSource.MANUAL) -> bool:
        return self.replace(layer, (), source=source)
