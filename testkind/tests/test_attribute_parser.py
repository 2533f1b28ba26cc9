from datetime import date, timedelta

import pytest

from testkind.core.classification.models import IntegrationTestKind, OtherTestKind, UnitTestKind
from testkind.core.classification.parser import AttributeParser, parse_attribute
from testkind.core.policy_engine.policy_config import TestKindConfig
from testkind.core.policy_engine.policy_exceptions import (
    AttributeParseError,
    DateTooEarly,
    DateTooLate,
    DuplicateResource,
    EmptyResourceList,
    InvalidDateFormat,
    InvalidFormat,
    InvalidOptions,
    PolicyError,
    UndefinedKind,
    UnknownResource,
)

TODAY = date(2025, 6, 1)
CFG = TestKindConfig()


def _parse(text: str, config: TestKindConfig = CFG):
    return parse_attribute(text, config, TODAY)


def test_unit_with_updated_date():
    assert _parse("unit, updated=2024-05-17") == UnitTestKind(updated=date(2024, 5, 17))


def test_unit_tolerates_spaces_around_parts():
    assert _parse("  unit ,updated = 2024-05-17 ") == UnitTestKind(updated=date(2024, 5, 17))


def test_integration_alone():
    assert _parse("integration") == IntegrationTestKind()
    assert _parse("  integration  ") == IntegrationTestKind()


def test_other_kind_with_resources():
    c = _parse("end2end, resources=postgres, redis")
    assert c == OtherTestKind(kind="end2end", resources=("postgres", "redis"))


def test_parsing_is_deterministic():
    text = "api, resources=db, cache"
    assert _parse(text) == _parse(text)
    assert _parse("unit, updated=2024-01-01") == _parse("unit, updated=2024-01-01")


@pytest.mark.parametrize("day", [date(2023, 10, 9), date(2020, 1, 1), date(1999, 12, 31)])
def test_dates_before_minimum_are_too_early(day):
    with pytest.raises(DateTooEarly):
        _parse(f"unit, updated={day.isoformat()}")


def test_minimum_and_maximum_dates_are_inclusive():
    assert _parse("unit, updated=2023-10-10").updated == date(2023, 10, 10)
    latest = TODAY + timedelta(days=2)
    assert _parse(f"unit, updated={latest.isoformat()}").updated == latest


@pytest.mark.parametrize("ahead", [3, 30, 3650])
def test_dates_after_today_plus_two_are_too_late(ahead):
    day = TODAY + timedelta(days=ahead)
    with pytest.raises(DateTooLate) as ei:
        _parse(f"unit, updated={day.isoformat()}")
    assert "2025-06-03" in str(ei.value)


def test_date_window_moves_with_today():
    text = "unit, updated=2026-01-01"
    with pytest.raises(DateTooLate):
        parse_attribute(text, CFG, date(2025, 12, 29))
    assert parse_attribute(text, CFG, date(2025, 12, 30)).updated == date(2026, 1, 1)


@pytest.mark.parametrize(
    "raw",
    ["2024/01/01", "2024-1-1", "24-01-01", "2024-02-30", "2024-13-01", "yesterday", ""],
)
def test_invalid_dates(raw):
    with pytest.raises(InvalidDateFormat):
        _parse(f"unit, updated={raw}")


def test_unit_requires_updated_option():
    with pytest.raises(InvalidOptions):
        _parse("unit, resources=db")


@pytest.mark.parametrize("text", ["", "unit", "api", ", resources=db", "   "])
def test_invalid_format(text):
    with pytest.raises(InvalidFormat):
        _parse(text)


def test_non_string_attribute_is_invalid_format():
    with pytest.raises(InvalidFormat):
        _parse(None)


def test_other_kind_requires_resources_option():
    with pytest.raises(InvalidOptions):
        _parse("api, needs=db")


def test_integration_with_options_is_parsed_as_other_kind():
    assert _parse("integration, resources=db") == OtherTestKind(
        kind="integration", resources=("db",)
    )


def test_empty_resource_list():
    with pytest.raises(EmptyResourceList):
        _parse("other, resources=")
    with pytest.raises(EmptyResourceList):
        _parse("other, resources= , ,")


def test_duplicate_resources():
    with pytest.raises(DuplicateResource):
        _parse("other, resources=db,db")
    with pytest.raises(DuplicateResource):
        _parse("other, resources=db, cache , db")


def test_duplicate_check_is_case_sensitive():
    assert _parse("other, resources=db, DB").resources == ("db", "DB")


def test_undefined_kind_is_rejected_before_options():
    cfg = TestKindConfig(defined_kinds={"End2End"})

    assert _parse("end2end, resources=db", cfg).kind == "end2end"
    with pytest.raises(UndefinedKind):
        _parse("api, resources=db", cfg)
    with pytest.raises(UndefinedKind):
        _parse("api, bogus", cfg)


def test_unit_and_integration_do_not_need_to_be_defined():
    cfg = TestKindConfig(defined_kinds={"api"})

    assert _parse("integration", cfg) == IntegrationTestKind()
    assert isinstance(_parse("unit, updated=2024-01-01", cfg), UnitTestKind)


def test_unknown_resources():
    cfg = TestKindConfig(known_resources={"Postgres", "redis"})

    assert _parse("api, resources=postgres, REDIS", cfg).resources == ("postgres", "REDIS")
    with pytest.raises(UnknownResource) as ei:
        _parse("api, resources=postgres, kafka", cfg)
    assert "kafka" in str(ei.value)


def test_errors_carry_the_attribute_text_and_code():
    text = "other, resources=db,db"
    with pytest.raises(AttributeParseError) as ei:
        _parse(text)

    err = ei.value
    assert isinstance(err, PolicyError)
    assert err.attribute == text
    assert err.code == "duplicate-resource"
    assert text in str(err)


def test_parser_object_binds_config_and_date():
    parser = AttributeParser(TestKindConfig(defined_kinds={"api"}), TODAY)

    assert parser.parse("api, resources=db") == OtherTestKind(kind="api", resources=("db",))
    with pytest.raises(UndefinedKind):
        parser.parse("e2e, resources=db")
