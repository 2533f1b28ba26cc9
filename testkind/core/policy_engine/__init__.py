"""Test disposition policy.

Configuration snapshot, unit test aging and the engine that turns a
classification into RUN / IGNORE / SKIP.
"""

from .policy_config import ConfigResolver, TestKindConfig, configure_logging, get_config, resolve_config
from .policy_exceptions import AttributeParseError, PolicyError
from .policy_models import AgeStatus, DispositionStatus, TestDisposition, UnitAge
from .unit_age import evaluate_unit_age
from .policy_engine import PolicyEngine

__all__ = [
    "ConfigResolver",
    "TestKindConfig",
    "configure_logging",
    "get_config",
    "resolve_config",
    "AttributeParseError",
    "PolicyError",
    "AgeStatus",
    "DispositionStatus",
    "TestDisposition",
    "UnitAge",
    "evaluate_unit_age",
    "PolicyEngine",
]
