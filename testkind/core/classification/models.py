from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Tuple, Union


@dataclass(frozen=True)
class UnitTestKind:
    """Unit test, aged out relative to the date it was last updated."""

    __test__ = False

    updated: date

    def __post_init__(self) -> None:
        if not isinstance(self.updated, date):
            raise TypeError("updated must be a date")
        if isinstance(self.updated, datetime):
            object.__setattr__(self, "updated", self.updated.date())

    @property
    def kind(self) -> str:
        return "unit"


@dataclass(frozen=True)
class IntegrationTestKind:
    """Stand-alone integration test. Never ages out, needs no resources."""

    __test__ = False

    @property
    def kind(self) -> str:
        return "integration"


@dataclass(frozen=True)
class OtherTestKind:
    """
    Any other kind of test, gated on external resources.

    Invariants
    - resources is a non-empty tuple of distinct names, in declaration order
    """

    __test__ = False

    kind: str
    resources: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.kind, str) or not self.kind:
            raise ValueError("kind must be a non-empty string")

        resources = self.resources
        if isinstance(resources, str):
            raise TypeError("resources must be an iterable of names, not a string")
        resources = tuple(resources)
        if not resources:
            raise ValueError("at least one resource is required")
        if len(set(resources)) != len(resources):
            raise ValueError("resources must be unique")
        object.__setattr__(self, "resources", resources)


# Closed set of classifications. New kinds are added here, not subclassed.
Classification = Union[UnitTestKind, IntegrationTestKind, OtherTestKind]
