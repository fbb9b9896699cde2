"""Derive a site's SORA volumes from its flight plan parameters.

Buffer distances come from the site's ``flight_plan`` section:

- contingency volume: aircraft max speed (m/s) x ``contingency_buffer``
  reaction seconds
- ground risk buffer: ``max_altitude_agl`` for the ``"altitude"`` (1:1)
  method, the fixed ``ground_risk_buffer`` distance for ``"fixed"``

With the ``"manual"`` method the ground risk buffer is drawn by hand and
an existing one is kept as is.
"""

from __future__ import annotations

import dataclasses
import logging

from rpas_sites.core.config import PlanningConfig
from rpas_sites.core.constants import GROUND_RISK_BUFFER_METHODS
from rpas_sites.models.sections import SiteFlightPlanData
from rpas_sites.models.site import Site
from rpas_sites.spatial.buffers import generate_sora_volumes
from rpas_sites.utils.helpers import utc_now_iso

logger = logging.getLogger("rpas_sites.planning.sora")


def contingency_buffer_distance(
    max_speed_mps: float | None,
    reaction_seconds: float | None,
) -> float | None:
    """Distance in metres covered at ``max_speed_mps`` during ``reaction_seconds``."""
    if not max_speed_mps or not reaction_seconds:
        return None
    if max_speed_mps <= 0 or reaction_seconds <= 0:
        return None
    return max_speed_mps * reaction_seconds


def ground_risk_buffer_distance(
    flight_plan: SiteFlightPlanData,
    *,
    config: PlanningConfig | None = None,
) -> float:
    """Ground risk buffer distance in metres for the flight plan's method.

    ``"fixed"`` without a recorded distance falls back to the altitude rule.
    """
    altitude = flight_plan.max_altitude_agl or (config or PlanningConfig()).default_max_altitude_m
    method = flight_plan.ground_risk_buffer_method
    if method == "fixed" and flight_plan.ground_risk_buffer:
        return flight_plan.ground_risk_buffer
    if method not in GROUND_RISK_BUFFER_METHODS:
        logger.warning("Unknown ground risk buffer method, using altitude | method=%s", method)
    return altitude


def apply_sora_volumes(
    site: Site,
    *,
    aircraft_max_speed: float | None = None,
    config: PlanningConfig | None = None,
) -> Site:
    """Regenerate both derived polygons of ``site`` from its flight geography.

    Derived polygons are always rebuilt, never adjusted.  Without a
    flight geography the derived slots are cleared.
    """
    cfg = config or PlanningConfig()
    flight_plan = site.flight_plan
    flight_geography = site.map_data.flight_plan.flight_geography
    manual_ground_risk = flight_plan.ground_risk_buffer_method == "manual"

    if flight_geography is None:
        map_data = site.map_data.with_slot("contingencyVolume", None)
        if not manual_ground_risk:
            map_data = map_data.with_slot("groundRiskBuffer", None)
        logger.info("No flight geography, derived volumes cleared | site=%s", site.id)
        return dataclasses.replace(site, map_data=map_data, updated_at=utc_now_iso())

    speed = aircraft_max_speed or flight_plan.aircraft_max_speed
    seconds = flight_plan.contingency_buffer or cfg.default_contingency_seconds
    contingency_m = contingency_buffer_distance(speed, seconds)
    ground_risk_m = ground_risk_buffer_distance(flight_plan, config=cfg)

    volumes = generate_sora_volumes(flight_geography, contingency_m, ground_risk_m, config=cfg)

    map_data = site.map_data.with_slot("contingencyVolume", volumes.contingency_volume)
    if not manual_ground_risk:
        map_data = map_data.with_slot("groundRiskBuffer", volumes.ground_risk_buffer)

    logger.info(
        "SORA volumes applied | site=%s | contingency=%s m | ground_risk=%s m | method=%s",
        site.id,
        contingency_m,
        ground_risk_m,
        flight_plan.ground_risk_buffer_method,
    )
    return dataclasses.replace(site, map_data=map_data, updated_at=utc_now_iso())
