"""Shared helper functions used across the models and planning modules.

Centralises identifier generation, timestamps and ring bookkeeping
that would otherwise be duplicated in every factory.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import UTC, datetime


def new_id(prefix: str) -> str:
    """Return a fresh identifier such as ``"marker_3f2a…"``.

    The prefix only aids readability; uniqueness comes from a UUID4.
    """
    return f"{prefix}_{uuid.uuid4().hex}"


def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string."""
    return datetime.now(UTC).isoformat()


def open_ring(coords: Sequence[Sequence[float]]) -> list[tuple[float, float]]:
    """Return ``(lng, lat)`` vertices with any closing duplicate removed."""
    ring = [(float(c[0]), float(c[1])) for c in coords]
    if len(ring) > 1 and ring[0] == ring[-1]:
        ring.pop()
    return ring


def close_ring(coords: Sequence[Sequence[float]]) -> list[tuple[float, float]]:
    """Return ``(lng, lat)`` vertices with the first vertex repeated at the end."""
    ring = open_ring(coords)
    if ring:
        ring.append(ring[0])
    return ring
