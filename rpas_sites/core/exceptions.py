"""Site planning exception taxonomy.

Every domain exception inherits from ``SitePlanningError`` and carries
structured context fields so callers can render or log a consistent
error payload.

Taxonomy categories
-------------------
- ``ValidationError``:  caller supplied invalid values.
- ``GeometryError``:    a geometric computation failed on otherwise
  well-formed input (projection, buffering, pattern generation).
- ``ContractError``:    a stored document does not match the expected shape.

None of these are retryable: every operation in this package is
deterministic, so repeating a failed call yields the same failure.

Every exception exposes ``to_error_dict()`` for a stable structured
payload suitable for logging and UI error banners.
"""

from __future__ import annotations


class SitePlanningError(Exception):
    """Base exception for all site-planning errors.

    Attributes:
        message: Human-readable error description.
        stage: Operation where the error occurred
            (e.g. ``"buffers"``, ``"map_editing"``).
        code: Machine-readable error code (e.g. ``"BUFFER_FAILED"``).
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, GeometryError):
            return "geometry"
        return "unknown"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(SitePlanningError):
    """Input or domain-model validation failure."""

    default_code = "VALIDATION_FAILED"


class GeometryError(SitePlanningError):
    """A geometric computation failed."""

    default_code = "GEOMETRY_FAILED"


class ContractError(SitePlanningError):
    """Stored document does not match the expected shape."""

    default_code = "CONTRACT_MISMATCH"


# ---------------------------------------------------------------------------
# Concrete errors
# ---------------------------------------------------------------------------


class SiteLimitError(ValidationError):
    """Raised when a project would exceed its maximum number of sites.

    Attributes:
        limit: The configured maximum.
    """

    default_stage = "project"
    default_code = "SITE_LIMIT_REACHED"

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"A project may contain at most {limit} sites")


class UnknownElementTypeError(ValidationError):
    """Raised when a map element type has no style / slot definition."""

    default_stage = "map_editing"
    default_code = "UNKNOWN_ELEMENT_TYPE"

    def __init__(self, element_type: str) -> None:
        self.element_type = element_type
        super().__init__(f"Unknown map element type {element_type!r}")
