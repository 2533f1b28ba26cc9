import logging
from datetime import date, timedelta

import pytest

from testkind.core.classification.models import IntegrationTestKind, OtherTestKind, UnitTestKind
from testkind.core.classification.parser import parse_attribute
from testkind.core.policy_engine.policy_config import TestKindConfig
from testkind.core.policy_engine.policy_engine import PolicyEngine
from testkind.core.policy_engine.policy_models import DispositionStatus, TestDisposition

NOW = date(2025, 6, 1)


def _unit(days_ago: int) -> UnitTestKind:
    return UnitTestKind(updated=NOW - timedelta(days=days_ago))


def test_young_unit_runs():
    engine = PolicyEngine(config=TestKindConfig())
    assert engine.decide(_unit(10), NOW) == TestDisposition.run()


def test_young_unit_is_skipped_when_unit_is_excluded():
    engine = PolicyEngine(config=TestKindConfig(excluded_kinds={"UNIT"}))
    assert engine.decide(_unit(10), NOW) == TestDisposition.skip("Unit tests are excluded")


def test_aging_disabled_keeps_old_units_running():
    engine = PolicyEngine(config=TestKindConfig(max_age_days=0))
    assert engine.decide(UnitTestKind(updated=date(2020, 1, 1)), NOW) == TestDisposition.run()


def test_aged_unit_is_skipped_with_countdown():
    engine = PolicyEngine(config=TestKindConfig(max_age_days=365, skip_window_days=30))
    assert engine.decide(_unit(370), NOW) == TestDisposition.skip("Silenced in 25 days")


def test_aged_unit_reason_wins_over_exclusion():
    engine = PolicyEngine(config=TestKindConfig(excluded_kinds={"unit"}))
    assert engine.decide(_unit(370), NOW).reason == "Silenced in 25 days"


def test_old_unit_is_ignored():
    engine = PolicyEngine(config=TestKindConfig(max_age_days=365, skip_window_days=30))
    assert engine.decide(_unit(400), NOW) == TestDisposition.ignore()


def test_integration_runs_unless_excluded():
    assert PolicyEngine(config=TestKindConfig()).decide(IntegrationTestKind(), NOW).status == (
        DispositionStatus.RUN
    )

    engine = PolicyEngine(config=TestKindConfig(excluded_kinds={"integration"}))
    assert engine.decide(IntegrationTestKind(), NOW) == TestDisposition.skip(
        "Integration tests are excluded"
    )


def test_other_kind_runs_when_resources_are_available():
    engine = PolicyEngine(config=TestKindConfig(available_resources={"db", "cache", "queue"}))
    assert engine.decide(OtherTestKind("api", ("db", "cache")), NOW) == TestDisposition.run()


def test_other_kind_reports_missing_resources():
    engine = PolicyEngine(config=TestKindConfig(available_resources={"db"}))
    d = engine.decide(OtherTestKind("api", ("db", "cache")), NOW)
    assert d == TestDisposition.skip("Test of kind: api requires {cache}")


def test_missing_resources_are_listed_sorted():
    engine = PolicyEngine(config=TestKindConfig())
    d = engine.decide(OtherTestKind("e2e", ("redis", "db")), NOW)
    assert d.reason == "Test of kind: e2e requires {db, redis}"


def test_excluded_other_kind_is_skipped_before_resource_check():
    engine = PolicyEngine(config=TestKindConfig(excluded_kinds={"Api"}))
    d = engine.decide(OtherTestKind("api", ("db",)), NOW)
    assert d == TestDisposition.skip("Test of kind: api are excluded")


def test_engine_rejects_bad_inputs():
    with pytest.raises(TypeError):
        PolicyEngine(config={"excluded_kinds": []})
    with pytest.raises(TypeError):
        PolicyEngine().decide("unit", NOW)


def test_parse_then_decide_end_to_end():
    cfg = TestKindConfig(
        excluded_kinds={"integration"},
        defined_kinds={"api"},
        available_resources={"db"},
    )
    engine = PolicyEngine(config=cfg)

    def _decide(text):
        return engine.decide(parse_attribute(text, cfg, NOW), NOW)

    assert _decide("unit, updated=2025-05-01").status == DispositionStatus.RUN
    assert _decide("integration").reason == "Integration tests are excluded"
    assert _decide("api, resources=db").status == DispositionStatus.RUN
    assert _decide("api, resources=db, s3").reason == "Test of kind: api requires {s3}"


def test_exclusion_checks_are_logged(caplog):
    engine = PolicyEngine(config=TestKindConfig())
    with caplog.at_level(logging.DEBUG, logger="testkind"):
        engine.decide(IntegrationTestKind(), NOW)

    assert "Check test of kind: integration are excluded: False" in caplog.text
