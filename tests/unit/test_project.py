"""Tests for multi-site project operations."""

from __future__ import annotations

import pytest

from rpas_sites.core.config import PlanningConfig
from rpas_sites.core.exceptions import SiteLimitError, ValidationError
from rpas_sites.models.site import Site, create_default_site
from rpas_sites.planning.project import (
    add_site,
    find_site,
    remove_site,
    reorder_sites,
    replace_site,
)


def _project(count: int) -> list[Site]:
    sites: list[Site] = []
    for _ in range(count):
        sites = add_site(sites)
    return sites


class TestAddSite:
    def test_default_site_named_by_position(self) -> None:
        sites = add_site([])
        sites = add_site(sites)
        assert [s.name for s in sites] == ["Site 1", "Site 2"]
        assert [s.order for s in sites] == [0, 1]

    def test_given_site_appended_and_ordered(self) -> None:
        custom = create_default_site(name="Ridge", order=7)
        sites = add_site(_project(2), custom)
        assert sites[-1].id == custom.id
        assert sites[-1].order == 2

    def test_created_by_recorded(self) -> None:
        assert add_site([], created_by="user_1")[0].created_by == "user_1"

    def test_limit_enforced(self) -> None:
        sites = _project(10)
        with pytest.raises(SiteLimitError) as exc_info:
            add_site(sites)
        assert exc_info.value.limit == 10
        assert exc_info.value.code == "SITE_LIMIT_REACHED"

    def test_limit_from_config(self) -> None:
        config = PlanningConfig(max_sites_per_project=2)
        sites = add_site(add_site([], config=config), config=config)
        with pytest.raises(SiteLimitError):
            add_site(sites, config=config)

    def test_input_not_modified(self) -> None:
        sites = _project(1)
        add_site(sites)
        assert len(sites) == 1


class TestRemoveSite:
    def test_remaining_reordered(self) -> None:
        sites = _project(3)
        remaining = remove_site(sites, sites[0].id)
        assert [s.id for s in remaining] == [sites[1].id, sites[2].id]
        assert [s.order for s in remaining] == [0, 1]

    def test_unknown_id_unchanged(self) -> None:
        sites = _project(2)
        assert remove_site(sites, "site_missing") == sites

    def test_last_site_kept(self) -> None:
        sites = _project(1)
        with pytest.raises(ValidationError) as exc_info:
            remove_site(sites, sites[0].id)
        assert exc_info.value.code == "LAST_SITE"
        assert exc_info.value.stage == "project"
        assert len(sites) == 1


class TestLookupAndReplace:
    def test_find_site(self) -> None:
        sites = _project(3)
        assert find_site(sites, sites[1].id) is sites[1]
        assert find_site(sites, "site_missing") is None

    def test_replace_site(self) -> None:
        sites = _project(2)
        renamed = create_default_site(site_id=sites[1].id, name="Renamed", order=1)
        replaced = replace_site(sites, renamed)
        assert replaced[1].name == "Renamed"
        assert replaced[0] is sites[0]

    def test_reorder_contiguous(self) -> None:
        shuffled = [
            create_default_site(order=5),
            create_default_site(order=2),
            create_default_site(order=9),
        ]
        assert [s.order for s in reorder_sites(shuffled)] == [0, 1, 2]

    def test_reorder_keeps_unchanged_sites(self) -> None:
        sites = _project(2)
        assert all(a is b for a, b in zip(reorder_sites(sites), sites, strict=True))
