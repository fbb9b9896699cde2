"""Tests for the site planning exception taxonomy.

Validates:
- SitePlanningError hierarchy and structured attributes
- Category classification (validation, geometry, contract)
- ``to_error_dict()`` produces stable payload keys
- Concrete errors carry their stage and code defaults
"""

from __future__ import annotations

from typing import ClassVar

import pytest

from rpas_sites.core.config import ConfigValidationError
from rpas_sites.core.exceptions import (
    ContractError,
    GeometryError,
    SiteLimitError,
    SitePlanningError,
    UnknownElementTypeError,
    ValidationError,
)


class TestSitePlanningErrorBase:
    """SitePlanningError base class behaviour."""

    def test_default_attributes(self) -> None:
        err = SitePlanningError("boom")
        assert err.message == "boom"
        assert err.stage == ""
        assert err.code == ""
        assert err.category == "unknown"

    def test_custom_attributes(self) -> None:
        err = SitePlanningError("fail", stage="buffers", code="BUFFER_FAILED")
        assert err.stage == "buffers"
        assert err.code == "BUFFER_FAILED"

    def test_str_is_message(self) -> None:
        assert str(SitePlanningError("human-readable error")) == "human-readable error"

    def test_to_error_dict_keys(self) -> None:
        d = SitePlanningError("x", stage="s", code="C").to_error_dict()
        assert set(d.keys()) == {"category", "code", "stage", "message"}
        assert d["message"] == "x"
        assert d["stage"] == "s"
        assert d["code"] == "C"


class TestCategoryBases:
    """Category base classes set correct defaults."""

    def test_validation_error(self) -> None:
        err = ValidationError("bad input")
        assert err.category == "validation"
        assert err.code == "VALIDATION_FAILED"

    def test_geometry_error(self) -> None:
        err = GeometryError("no area")
        assert err.category == "geometry"
        assert err.code == "GEOMETRY_FAILED"

    def test_contract_error(self) -> None:
        err = ContractError("schema drift")
        assert err.category == "contract"
        assert err.code == "CONTRACT_MISMATCH"

    def test_code_override(self) -> None:
        err = GeometryError("x", code="BUFFER_NOT_POLYGON")
        assert err.code == "BUFFER_NOT_POLYGON"


class TestConcreteErrors:
    def test_site_limit_error(self) -> None:
        err = SiteLimitError(10)
        assert err.limit == 10
        assert err.category == "validation"
        assert err.to_error_dict() == {
            "category": "validation",
            "code": "SITE_LIMIT_REACHED",
            "stage": "project",
            "message": "A project may contain at most 10 sites",
        }

    def test_unknown_element_type_error(self) -> None:
        err = UnknownElementTypeError("helipad")
        assert err.element_type == "helipad"
        assert err.stage == "map_editing"
        assert "helipad" in err.message

    def test_config_validation_error(self) -> None:
        err = ConfigValidationError("RPAS_BUFFER_QUAD_SEGMENTS", 0, "must be >= 1")
        assert err.stage == "config"
        assert "RPAS_BUFFER_QUAD_SEGMENTS=0" in err.message


class TestAllExceptionsAreSitePlanningError:
    """Every custom exception inherits from SitePlanningError."""

    EXCEPTION_CLASSES: ClassVar[list[type[SitePlanningError]]] = [
        ValidationError,
        GeometryError,
        ContractError,
        SiteLimitError,
        UnknownElementTypeError,
        ConfigValidationError,
    ]

    @pytest.mark.parametrize("exc_class", EXCEPTION_CLASSES)
    def test_subclass(self, exc_class: type[SitePlanningError]) -> None:
        assert issubclass(exc_class, SitePlanningError)
        assert issubclass(exc_class, Exception)
