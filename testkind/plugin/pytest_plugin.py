from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from testkind.core.classification.parser import AttributeParser
from testkind.core.policy_engine.policy_config import (
    TestKindConfig,
    configure_logging,
    resolve_config,
)
from testkind.core.policy_engine.policy_engine import PolicyEngine
from testkind.core.policy_engine.policy_exceptions import AttributeParseError, InvalidFormat
from testkind.core.policy_engine.policy_models import DispositionStatus, TestDisposition

from .marker import MARKER_NAME

log = logging.getLogger("testkind.plugin")


@dataclass
class SessionPolicy:
    """Per-session policy: one configuration snapshot and one current date."""

    config: TestKindConfig
    today: date
    counts: Dict[DispositionStatus, int] = field(
        default_factory=lambda: {s: 0 for s in DispositionStatus}
    )

    def __post_init__(self) -> None:
        self.parser = AttributeParser(self.config, self.today)
        self.engine = PolicyEngine(config=self.config)

    def decide(self, attribute: str) -> TestDisposition:
        disposition = self.engine.decide(self.parser.parse(attribute), self.today)
        self.counts[disposition.status] += 1
        return disposition


policy_key = pytest.StashKey[SessionPolicy]()


def parse_today(raw: Optional[str]) -> date:
    if raw is None:
        return date.today()
    try:
        return date.fromisoformat(raw.strip())
    except ValueError as e:
        raise pytest.UsageError(f"--test-kind-today expects YYYY-MM-DD, got {raw!r}") from e


def marker_attribute(marker: Any) -> str:
    args: Sequence[Any] = marker.args
    if len(args) != 1 or marker.kwargs or not isinstance(args[0], str):
        raise InvalidFormat(
            repr(tuple(args)), "test_kind takes exactly one attribute string"
        )
    return args[0]


def apply_dispositions(
    items: Sequence[Any], policy: SessionPolicy
) -> Tuple[List[Any], List[Any], List[str]]:
    """Split collected items into kept and deselected ones.

    Skipped items are kept with a skip marker added. Returns (kept, deselected,
    errors); errors hold one line per item whose attribute did not parse.
    """

    kept: List[Any] = []
    deselected: List[Any] = []
    errors: List[str] = []

    for item in items:
        marker = item.get_closest_marker(MARKER_NAME)
        if marker is None:
            kept.append(item)
            continue

        try:
            disposition = policy.decide(marker_attribute(marker))
        except AttributeParseError as e:
            errors.append(f"{item.nodeid}: {e}")
            continue

        if disposition.status == DispositionStatus.IGNORE:
            deselected.append(item)
            continue
        if disposition.status == DispositionStatus.SKIP:
            item.add_marker(pytest.mark.skip(reason=disposition.reason))
        kept.append(item)

    return kept, deselected, errors


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("testkind", "test kind policy")
    group.addoption(
        "--test-kind-today",
        action="store",
        default=None,
        metavar="YYYY-MM-DD",
        help="Date used for unit test aging (default: today).",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        f"{MARKER_NAME}(attribute): declare the test kind, e.g. "
        "'unit, updated=YYYY-MM-DD', 'integration' or '<kind>, resources=a, b'",
    )
    configure_logging(os.environ)
    today = parse_today(config.getoption("test_kind_today", default=None))
    config.stash[policy_key] = SessionPolicy(config=resolve_config(os.environ), today=today)


def pytest_collection_modifyitems(
    session: pytest.Session, config: pytest.Config, items: List[pytest.Item]
) -> None:
    policy = config.stash.get(policy_key, None)
    if policy is None:
        return

    kept, deselected, errors = apply_dispositions(items, policy)
    if errors:
        raise pytest.UsageError("Invalid test_kind attributes:\n" + "\n".join(errors))

    if deselected:
        log.debug("Deselecting %d aged out tests", len(deselected))
        config.hook.pytest_deselected(items=deselected)
        items[:] = kept


def pytest_terminal_summary(terminalreporter: Any, exitstatus: int, config: pytest.Config) -> None:
    policy = config.stash.get(policy_key, None)
    if policy is None or not any(policy.counts.values()):
        return
    c = policy.counts
    terminalreporter.write_line(
        f"test_kind: {c[DispositionStatus.RUN]} run, "
        f"{c[DispositionStatus.SKIP]} skipped, "
        f"{c[DispositionStatus.IGNORE]} ignored"
    )
