"""Tests for shared constants and helper functions."""

from __future__ import annotations

import unittest
from datetime import datetime

from rpas_sites.core.constants import (
    COLLECTION_SLOTS,
    DERIVED_SLOTS,
    MAP_ELEMENT_STYLES,
    MAP_LAYERS,
    resolve_element_type,
)
from rpas_sites.models.site import SLOT_ATTRIBUTES
from rpas_sites.utils.helpers import close_ring, new_id, open_ring, utc_now_iso

# ---------------------------------------------------------------------------
# Tests: core.constants
# ---------------------------------------------------------------------------


class TestConstants(unittest.TestCase):
    """Verify the slot tables agree with one another."""

    def test_every_slot_has_a_style(self) -> None:
        assert set(SLOT_ATTRIBUTES) == set(MAP_ELEMENT_STYLES)

    def test_layers_cover_every_slot_once(self) -> None:
        slots = [slot for layer in MAP_LAYERS.values() for slot in layer["elements"]]
        assert sorted(slots) == sorted(SLOT_ATTRIBUTES)

    def test_style_layer_matches_layer_table(self) -> None:
        for layer_id, layer in MAP_LAYERS.items():
            for slot in layer["elements"]:
                assert MAP_ELEMENT_STYLES[slot]["layer"] == layer_id, slot

    def test_derived_slots_are_polygons(self) -> None:
        for slot in DERIVED_SLOTS:
            assert MAP_ELEMENT_STYLES[slot]["type"] == "polygon"

    def test_collection_slots_known(self) -> None:
        assert COLLECTION_SLOTS <= set(SLOT_ATTRIBUTES)

    def test_singular_aliases(self) -> None:
        assert resolve_element_type("obstacle") == "obstacles"
        assert resolve_element_type("musterPoint") == "musterPoints"
        assert resolve_element_type("evacuationRoute") == "evacuationRoutes"
        assert resolve_element_type("launchPoint") == "launchPoint"


# ---------------------------------------------------------------------------
# Tests: utils.helpers
# ---------------------------------------------------------------------------


class TestNewId(unittest.TestCase):
    def test_prefix(self) -> None:
        assert new_id("site").startswith("site_")

    def test_unique(self) -> None:
        assert len({new_id("wp") for _ in range(1000)}) == 1000


class TestUtcNowIso(unittest.TestCase):
    def test_timezone_aware(self) -> None:
        parsed = datetime.fromisoformat(utc_now_iso())
        assert parsed.tzinfo is not None
        assert parsed.utcoffset().total_seconds() == 0


class TestRings(unittest.TestCase):
    def test_open_ring_drops_closing_vertex(self) -> None:
        assert open_ring([[0, 0], [1, 0], [1, 1], [0, 0]]) == [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]

    def test_open_ring_leaves_open_ring(self) -> None:
        assert open_ring([(0, 0), (1, 0), (1, 1)]) == [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]

    def test_open_ring_drops_altitude(self) -> None:
        assert open_ring([(0, 0, 5), (1, 0, 5)]) == [(0.0, 0.0), (1.0, 0.0)]

    def test_close_ring_idempotent(self) -> None:
        closed = close_ring([(0, 0), (1, 0), (1, 1)])
        assert closed[0] == closed[-1]
        assert close_ring(closed) == closed

    def test_close_empty(self) -> None:
        assert close_ring([]) == []
