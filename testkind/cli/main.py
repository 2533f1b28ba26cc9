from __future__ import annotations

import argparse
import sys
from datetime import date
from typing import List

from testkind.cli.models import ClassificationOut, ConfigOut, DecisionOut, ErrorOut
from testkind.core.classification.models import Classification, OtherTestKind, UnitTestKind
from testkind.core.classification.parser import parse_attribute
from testkind.core.policy_engine.policy_config import TestKindConfig, configure_logging, get_config
from testkind.core.policy_engine.policy_engine import PolicyEngine
from testkind.core.policy_engine.policy_exceptions import AttributeParseError


def _today(raw: str | None) -> date:
    if not raw:
        return date.today()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {raw!r}, expected YYYY-MM-DD")


def _classification_out(classification: Classification) -> ClassificationOut:
    if isinstance(classification, UnitTestKind):
        return ClassificationOut(kind="unit", updated=classification.updated.isoformat())
    if isinstance(classification, OtherTestKind):
        return ClassificationOut(kind=classification.kind, resources=list(classification.resources))
    return ClassificationOut(kind=classification.kind)


def _config_out(config: TestKindConfig) -> ConfigOut:
    return ConfigOut(
        excluded_kinds=sorted(config.excluded_kinds),
        defined_kinds=sorted(config.defined_kinds),
        known_resources=sorted(config.known_resources),
        available_resources=sorted(config.available_resources),
        max_age_days=config.max_age_days,
        skip_window_days=config.skip_window_days,
    )


def cmd_decide(args: argparse.Namespace) -> int:
    """Show what would happen to a test carrying ATTRIBUTE."""

    config = get_config()
    today = args.today

    try:
        classification = parse_attribute(args.attribute, config, today)
    except AttributeParseError as e:
        if args.json:
            out = ErrorOut(error=e.message, code=e.code, attribute=e.attribute)
            print(out.model_dump_json(indent=2))
        else:
            print(f"error: {e}", file=sys.stderr)
        return 2

    disposition = PolicyEngine(config=config).decide(classification, today)

    if args.json:
        out = DecisionOut(
            attribute=args.attribute,
            today=today.isoformat(),
            classification=_classification_out(classification),
            status=disposition.status.value,
            reason=disposition.reason,
        )
        print(out.model_dump_json(indent=2))
        return 0

    line = disposition.status.value
    if disposition.reason:
        line += f": {disposition.reason}"
    print(line)
    return 0


def cmd_show_config(args: argparse.Namespace) -> int:
    """Print the resolved TEST_KIND_* configuration."""

    out = _config_out(get_config())
    if args.json:
        print(out.model_dump_json(indent=2))
        return 0

    def _names(values: List[str], empty: str) -> str:
        return ", ".join(values) if values else empty

    print(f"excluded kinds:      {_names(out.excluded_kinds, '-')}")
    print(f"defined kinds:       {_names(out.defined_kinds, '(all)')}")
    print(f"known resources:     {_names(out.known_resources, '(all)')}")
    print(f"available resources: {_names(out.available_resources, '-')}")
    print(f"unit max age:        {out.max_age_days or 'disabled'}")
    print(f"unit skip window:    {out.skip_window_days}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="testkind",
        description="Inspect test_kind attributes and TEST_KIND_* configuration",
    )
    sub = p.add_subparsers(dest="command", required=True)

    dp = sub.add_parser("decide", help="Show the disposition of a test_kind attribute")
    dp.add_argument("attribute", help="Attribute text, e.g. 'unit, updated=2025-01-31'")
    dp.add_argument("--today", type=_today, default=None, help="Override the current date (YYYY-MM-DD)")
    dp.add_argument("--json", action="store_true", help="Print JSON")
    dp.set_defaults(func=cmd_decide)

    sc = sub.add_parser("show-config", help="Show the resolved configuration")
    sc.add_argument("--json", action="store_true", help="Print JSON")
    sc.set_defaults(func=cmd_show_config)

    return p


def main(argv: List[str] | None = None) -> int:
    """CLI entry."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    if getattr(args, "today", None) is None:
        args.today = date.today()
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
