"""Parsing of test_kind attribute text into classifications."""

from .models import Classification, IntegrationTestKind, OtherTestKind, UnitTestKind
from .parser import AttributeParser, parse_attribute

__all__ = [
    "Classification",
    "IntegrationTestKind",
    "OtherTestKind",
    "UnitTestKind",
    "AttributeParser",
    "parse_attribute",
]
