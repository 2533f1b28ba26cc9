from __future__ import annotations

import pytest

MARKER_NAME = "test_kind"


def test_kind(attribute: str) -> pytest.MarkDecorator:
    """Declare what kind of test a function is.

    Usage:
        @test_kind("unit, updated=2025-01-31")
        def test_parser(): ...

        @test_kind("integration")
        def test_pipeline(): ...

        @test_kind("end2end, resources=postgres, redis")
        def test_checkout(): ...

    The attribute is validated when pytest collects the test, not here.
    """

    if not isinstance(attribute, str):
        raise TypeError("test_kind attribute must be a string")
    return getattr(pytest.mark, MARKER_NAME)(attribute)


# Not a test, despite the name.
test_kind.__test__ = False  # type: ignore[attr-defined]
