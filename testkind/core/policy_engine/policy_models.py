from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class DispositionStatus(str, Enum):
    """
    What the host does with a test.

    Using str Enum ensures stable serialization and safe comparisons.
    """

    RUN = "RUN"
    IGNORE = "IGNORE"
    SKIP = "SKIP"


class AgeStatus(str, Enum):
    """Where a unit test sits in its aging window."""

    YOUNG = "YOUNG"
    AGED = "AGED"
    OLD = "OLD"


@dataclass(frozen=True)
class UnitAge:
    """
    Age disposition of a unit test.

    reason is only set for AGED results.
    """

    status: AgeStatus
    reason: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.status, AgeStatus):
            raise TypeError("status must be an AgeStatus")
        if self.status == AgeStatus.AGED and not self.reason:
            raise ValueError("AGED results require a reason")

    @classmethod
    def young(cls) -> "UnitAge":
        return cls(status=AgeStatus.YOUNG)

    @classmethod
    def aged(cls, reason: str) -> "UnitAge":
        return cls(status=AgeStatus.AGED, reason=reason)

    @classmethod
    def old(cls) -> "UnitAge":
        return cls(status=AgeStatus.OLD)


@dataclass(frozen=True)
class TestDisposition:
    """
    Immutable run/ignore/skip decision for a single test.

    Invariants
    - status is a DispositionStatus enum (not free-form text)
    - SKIP always carries a non-empty reason, RUN and IGNORE never do
    - to_dict returns JSON-safe primitives
    """

    __test__ = False

    status: DispositionStatus
    reason: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.status, DispositionStatus):
            raise TypeError("status must be a DispositionStatus")
        if self.status == DispositionStatus.SKIP:
            if not isinstance(self.reason, str) or not self.reason:
                raise ValueError("SKIP dispositions require a reason")
        elif self.reason is not None:
            raise ValueError(f"{self.status.value} dispositions carry no reason")

    @classmethod
    def run(cls) -> "TestDisposition":
        return cls(status=DispositionStatus.RUN)

    @classmethod
    def ignore(cls) -> "TestDisposition":
        return cls(status=DispositionStatus.IGNORE)

    @classmethod
    def skip(cls, reason: str) -> "TestDisposition":
        return cls(status=DispositionStatus.SKIP, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "reason": self.reason,
        }
