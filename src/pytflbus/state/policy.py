"""Snapshot acceptance policy.

Last request wins: an update is applied only when its generation is at
least the generation currently held for the layer.  Late responses from
superseded requests are dropped here, regardless of whether their
producer remembered to cancel them.
"""

from __future__ import annotations


def should_accept_update(*, current_generation: int | None, incoming_generation: int) -> bool:
    if current_generation is None:
        return True
    return incoming_generation >= current_generation
