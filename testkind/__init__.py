"""Test kind control.

Declare what kind of test a function is and let the environment decide
whether it runs, is skipped with a reason, or is dropped entirely.

There are three basic kinds of tests:

* ``unit``: runs for TEST_KIND_UNIT_AGE days (365) after its ``updated``
  date, then shows as skipped for TEST_KIND_UNIT_SKIP days (30), then falls
  silent. ``TEST_KIND_UNIT_AGE=0`` disables aging.
* ``integration``: needs no external resources and never ages out.
* everything else: names at least one external resource; skipped unless all
  of them are listed in TEST_KIND_RESOURCES.

TEST_KIND_EXCLUDE skips whole kinds, TEST_KIND_DEFINED and
TEST_KIND_KNOWN_RESOURCES restrict which kind and resource names are valid.
"""

from .core.classification import (
    Classification,
    IntegrationTestKind,
    OtherTestKind,
    UnitTestKind,
    parse_attribute,
)
from .core.policy_engine import (
    PolicyEngine,
    TestDisposition,
    TestKindConfig,
    get_config,
    resolve_config,
)
from .plugin.marker import test_kind

__all__ = [
    "Classification",
    "IntegrationTestKind",
    "OtherTestKind",
    "UnitTestKind",
    "parse_attribute",
    "PolicyEngine",
    "TestDisposition",
    "TestKindConfig",
    "get_config",
    "resolve_config",
    "test_kind",
]
