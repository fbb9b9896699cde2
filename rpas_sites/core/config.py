"""Planning configuration loaded from environment variables.

All values have defaults matching the regulatory defaults the planning
forms start from.  ``from_env()`` raises ``ConfigValidationError`` if
any numeric value is out of its valid range, so bad configuration is
caught at startup rather than in the middle of a buffer computation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from rpas_sites.core.constants import MAX_SITES_PER_PROJECT
from rpas_sites.core.exceptions import SitePlanningError


class ConfigValidationError(SitePlanningError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class PlanningConfig:
    """Immutable planning configuration.

    Attributes:
        max_sites_per_project: Upper bound on sites in one project.
        default_contingency_seconds: Reaction time multiplied by the
            aircraft max speed to size the contingency volume.
        default_max_altitude_m: Maximum altitude AGL used when a site has
            none recorded (also the 1:1 ground risk buffer distance).
        buffer_quad_segments: Segments per quarter circle when rounding
            buffered corners.
        max_waypoint_altitude_m: Altitude ceiling for waypoint validation.
        area_approximation_max_extent_km: Polygon extent below which the
            spherical area approximation is within 1 % of the geodesic area.
    """

    max_sites_per_project: int = MAX_SITES_PER_PROJECT
    default_contingency_seconds: float = 15.0
    default_max_altitude_m: float = 120.0
    buffer_quad_segments: int = 16
    max_waypoint_altitude_m: float = 400.0
    area_approximation_max_extent_km: float = 100.0

    @classmethod
    def from_env(cls) -> PlanningConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a numeric value is out of range.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``RPAS_BUFFER_QUAD_SEGMENTS=abc``).
        """
        config = cls(
            max_sites_per_project=int(
                os.getenv("RPAS_MAX_SITES_PER_PROJECT", str(MAX_SITES_PER_PROJECT))
            ),
            default_contingency_seconds=float(
                os.getenv("RPAS_DEFAULT_CONTINGENCY_SECONDS", "15")
            ),
            default_max_altitude_m=float(os.getenv("RPAS_DEFAULT_MAX_ALTITUDE_M", "120")),
            buffer_quad_segments=int(os.getenv("RPAS_BUFFER_QUAD_SEGMENTS", "16")),
            max_waypoint_altitude_m=float(os.getenv("RPAS_MAX_WAYPOINT_ALTITUDE_M", "400")),
            area_approximation_max_extent_km=float(os.getenv("RPAS_AREA_MAX_EXTENT_KM", "100")),
        )
        _validate(config)
        return config


def _validate(config: PlanningConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.max_sites_per_project < 1:
        raise ConfigValidationError(
            "RPAS_MAX_SITES_PER_PROJECT",
            config.max_sites_per_project,
            "must be >= 1",
        )

    if config.default_contingency_seconds <= 0:
        raise ConfigValidationError(
            "RPAS_DEFAULT_CONTINGENCY_SECONDS",
            config.default_contingency_seconds,
            "must be > 0 (seconds)",
        )

    if config.default_max_altitude_m <= 0:
        raise ConfigValidationError(
            "RPAS_DEFAULT_MAX_ALTITUDE_M",
            config.default_max_altitude_m,
            "must be > 0 (metres)",
        )

    if config.buffer_quad_segments < 1:
        raise ConfigValidationError(
            "RPAS_BUFFER_QUAD_SEGMENTS",
            config.buffer_quad_segments,
            "must be >= 1",
        )

    if config.max_waypoint_altitude_m <= 0:
        raise ConfigValidationError(
            "RPAS_MAX_WAYPOINT_ALTITUDE_M",
            config.max_waypoint_altitude_m,
            "must be > 0 (metres)",
        )

    if config.area_approximation_max_extent_km <= 0:
        raise ConfigValidationError(
            "RPAS_AREA_MAX_EXTENT_KM",
            config.area_approximation_max_extent_km,
            "must be > 0 (kilometres)",
        )
