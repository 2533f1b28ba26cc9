from __future__ import annotations

import re
from datetime import date, timedelta
from typing import List, Tuple

from testkind.core.policy_engine.policy_config import TestKindConfig
from testkind.core.policy_engine.policy_exceptions import (
    DateTooEarly,
    DateTooLate,
    DuplicateResource,
    EmptyResourceList,
    InvalidDateFormat,
    InvalidFormat,
    InvalidOptions,
    UndefinedKind,
    UnknownResource,
)

from .models import Classification, IntegrationTestKind, OtherTestKind, UnitTestKind

MIN_UPDATED = date(2023, 10, 10)
MAX_DAYS_AHEAD = 2

_UPDATED_RE = re.compile(r"^updated\s*=\s*(?P<value>.*)$", re.S)
_RESOURCES_RE = re.compile(r"^resources\s*=\s*(?P<value>.*)$", re.S)
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

FORMAT_HELP = (
    "Invalid attribute format.\n"
    "Must be one of:\n"
    " * unit, updated=YYYY-MM-DD\n"
    " * integration\n"
    " * <something>, resources=<comma separated list of resources>"
)


def _split(text: str) -> List[str]:
    return [part.strip() for part in text.split(",", 1)]


def parse_updated(attribute: str, options: str, today: date) -> date:
    """Parse the `updated=YYYY-MM-DD` option of a unit test.

    The date must not be before 10 October 2023, nor more than 2 days after today.
    """

    m = _UPDATED_RE.match(options)
    if m is None:
        raise InvalidOptions(
            attribute, f"Invalid options for test kind 'unit': {options!r}"
        )

    raw = m.group("value").strip()
    if not _DATE_RE.match(raw):
        raise InvalidDateFormat(attribute, f"Invalid date format: {raw!r} (expected YYYY-MM-DD)")
    try:
        updated = date.fromisoformat(raw)
    except ValueError as e:
        raise InvalidDateFormat(attribute, f"Invalid date format: {e}") from e

    if updated < MIN_UPDATED:
        raise DateTooEarly(attribute, f"`updated={updated}` must not be before 10 October 2023.")

    max_date = today + timedelta(days=MAX_DAYS_AHEAD)
    if updated > max_date:
        raise DateTooLate(
            attribute,
            f"`updated={updated}` must not be more than {MAX_DAYS_AHEAD} days after "
            f"the current date. Max date = {max_date}.",
        )

    return updated


def parse_resources(
    attribute: str, kind: str, options: str, config: TestKindConfig
) -> Tuple[str, ...]:
    """Parse the `resources=a, b` option of any other kind of test."""

    if not config.is_kind_defined(kind):
        raise UndefinedKind(attribute, f"Undefined Test Kind: {kind}")

    m = _RESOURCES_RE.match(options)
    if m is None:
        raise InvalidOptions(
            attribute, f"Invalid list of resources for test kind {kind}: {options!r}"
        )

    resources = [r.strip() for r in m.group("value").split(",")]
    resources = [r for r in resources if r]
    if not resources:
        raise EmptyResourceList(attribute, "At least one resource must be specified")

    seen = set()
    duplicates: List[str] = []
    for r in resources:
        if r in seen and r not in duplicates:
            duplicates.append(r)
        seen.add(r)
    if duplicates:
        raise DuplicateResource(
            attribute, f"Resources may not be specified multiple times: {duplicates}"
        )

    unknown = [r for r in resources if not config.is_resource_known(r)]
    if unknown:
        raise UnknownResource(attribute, f"Unknown Resources: {unknown}")

    return tuple(resources)


def parse_attribute(text: str, config: TestKindConfig, today: date) -> Classification:
    """Convert test_kind attribute text into a classification.

    Accepted shapes:
    - "unit, updated=YYYY-MM-DD"
    - "integration"
    - "<kind>, resources=<r1>, <r2>, ..."

    Raises an AttributeParseError subclass carrying the text on failure.
    """

    if not isinstance(text, str):
        raise InvalidFormat(repr(text), "test_kind attribute must be a string")
    parts = _split(text)

    if len(parts) == 2 and parts[0] == "unit":
        return UnitTestKind(updated=parse_updated(text, parts[1], today))

    if len(parts) == 1 and parts[0] == "integration":
        return IntegrationTestKind()

    if len(parts) == 2 and parts[0]:
        kind, options = parts
        return OtherTestKind(kind=kind, resources=parse_resources(text, kind, options, config))

    raise InvalidFormat(text, FORMAT_HELP)


class AttributeParser:
    """Parser bound to a configuration snapshot and a fixed current date."""

    def __init__(self, config: TestKindConfig, today: date) -> None:
        self.config = config
        self.today = today

    def parse(self, text: str) -> Classification:
        return parse_attribute(text, self.config, self.today)
