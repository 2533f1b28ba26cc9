from __future__ import annotations


class PolicyError(Exception):
    """
    Base exception for all test-kind policy failures.
    """

    pass


class AttributeParseError(PolicyError):
    """
    Raised when a test_kind attribute string cannot be turned into a classification.

    The offending attribute text is kept on the exception so hosts can point
    at the test that carries it.
    """

    code: str = "invalid-attribute"

    def __init__(self, attribute: str, message: str) -> None:
        super().__init__(message)
        self.attribute = attribute
        self.message = message

    def __str__(self) -> str:
        return f"{self.message} (in test_kind {self.attribute!r})"


class InvalidFormat(AttributeParseError):
    code = "invalid-format"


class InvalidDateFormat(AttributeParseError):
    code = "invalid-date-format"


class DateTooEarly(AttributeParseError):
    code = "date-too-early"


class DateTooLate(AttributeParseError):
    code = "date-too-late"


class InvalidOptions(AttributeParseError):
    code = "invalid-options"


class UndefinedKind(AttributeParseError):
    code = "undefined-kind"


class EmptyResourceList(AttributeParseError):
    code = "empty-resource-list"


class DuplicateResource(AttributeParseError):
    code = "duplicate-resource"


class UnknownResource(AttributeParseError):
    code = "unknown-resource"
