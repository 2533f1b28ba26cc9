from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from testkind.core.classification.models import (
    Classification,
    IntegrationTestKind,
    OtherTestKind,
    UnitTestKind,
)

from .policy_config import TestKindConfig
from .policy_models import AgeStatus, TestDisposition
from .unit_age import evaluate_unit_age

log = logging.getLogger("testkind.policy")


def format_names(names: Iterable[str]) -> str:
    return "{" + ", ".join(sorted(names)) + "}"


@dataclass(frozen=True)
class PolicyEngine:
    """
    Deterministic test disposition point.

    Invariants
    - Every classification maps to exactly one disposition
    - No mutation of the configuration
    - The current date is an input, never read from a clock
    """

    config: TestKindConfig = field(default_factory=TestKindConfig)

    def __post_init__(self) -> None:
        if not isinstance(self.config, TestKindConfig):
            raise TypeError("config must be a TestKindConfig instance")

    def decide(self, classification: Classification, now: date) -> TestDisposition:
        if isinstance(classification, UnitTestKind):
            decision = self._decide_unit(classification, now)
        elif isinstance(classification, IntegrationTestKind):
            decision = self._decide_integration()
        elif isinstance(classification, OtherTestKind):
            decision = self._decide_other(classification)
        else:
            raise TypeError(f"unknown classification: {type(classification).__name__}")

        log.debug("Test kind %r -> %s", classification, decision.to_dict())
        return decision

    def _decide_unit(self, classification: UnitTestKind, now: date) -> TestDisposition:
        max_days, skip_days = self.config.aging_thresholds()
        age = evaluate_unit_age(classification.updated, now, max_days, skip_days)

        # Only young unit tests run.
        if age.status == AgeStatus.YOUNG:
            if self.config.is_kind_excluded("unit"):
                return TestDisposition.skip("Unit tests are excluded")
            return TestDisposition.run()

        # Recently aged tests show as skipped, older ones vanish.
        if age.status == AgeStatus.AGED:
            return TestDisposition.skip(age.reason or "")
        return TestDisposition.ignore()

    def _decide_integration(self) -> TestDisposition:
        if self.config.is_kind_excluded("integration"):
            return TestDisposition.skip("Integration tests are excluded")
        return TestDisposition.run()

    def _decide_other(self, classification: OtherTestKind) -> TestDisposition:
        kind = classification.kind
        if self.config.is_kind_excluded(kind):
            return TestDisposition.skip(f"Test of kind: {kind} are excluded")

        missing = self.config.missing_resources(classification.resources)
        if not missing:
            return TestDisposition.run()
        return TestDisposition.skip(f"Test of kind: {kind} requires {format_names(missing)}")
