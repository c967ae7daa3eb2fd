"""Ingestion layer.

Defensive parsing helpers applied to raw TfL payloads before they become
models or map entities.
"""

__all__: list[str] = []
