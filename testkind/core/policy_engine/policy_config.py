from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from threading import Lock
from typing import FrozenSet, Iterable, Mapping, Optional, Tuple

log = logging.getLogger("testkind.config")

DEFAULT_MAX_AGE_DAYS = 365
DEFAULT_SKIP_WINDOW_DAYS = 30

# Thresholds are unsigned 32-bit day counts.
MAX_DAYS = 2**32 - 1

ENV_EXCLUDE = "TEST_KIND_EXCLUDE"
ENV_UNIT_AGE = "TEST_KIND_UNIT_AGE"
ENV_UNIT_SKIP = "TEST_KIND_UNIT_SKIP"
ENV_KNOWN_RESOURCES = "TEST_KIND_KNOWN_RESOURCES"
ENV_RESOURCES = "TEST_KIND_RESOURCES"
ENV_DEFINED = "TEST_KIND_DEFINED"
ENV_LOG_LEVEL = "TEST_KIND_LOG_LEVEL"


def _env_list(environ: Mapping[str, str], name: str) -> FrozenSet[str]:
    """Read a comma separated list, stripping each item and dropping blanks."""

    raw = environ.get(name, "") or ""
    return frozenset(item.strip() for item in raw.split(",") if item.strip())


def _env_days(environ: Mapping[str, str], name: str, default: int) -> int:
    """Read a day count.

    Malformed or out of range values fall back to the default; a broken CI
    variable must not fail otherwise valid tests.
    """

    raw = (environ.get(name, "") or "").strip()
    if not raw:
        return int(default)
    # Plain ASCII digits with an optional leading plus, as an unsigned integer parse.
    digits = raw[1:] if raw.startswith("+") else raw
    if not (digits.isascii() and digits.isdigit()):
        log.warning("Ignoring malformed %s=%r, using %d", name, raw, default)
        return int(default)
    value = int(digits)
    if value > MAX_DAYS:
        log.warning("Ignoring out of range %s=%r, using %d", name, raw, default)
        return int(default)
    return value


def _freeze_names(value: Iterable[str]) -> FrozenSet[str]:
    if isinstance(value, str):
        raise TypeError("expected an iterable of names, not a string")
    names = frozenset(value)
    for n in names:
        if not isinstance(n, str):
            raise TypeError("names must be strings")
    return names


@dataclass(frozen=True)
class TestKindConfig:
    """
    Immutable policy configuration snapshot.

    Invariants
    - every registry is a frozenset, so the snapshot can be shared across threads
    - an empty defined_kinds / known_resources registry accepts every name
    - kind and registry lookups ignore case, resource availability does not
    """

    __test__ = False

    excluded_kinds: FrozenSet[str] = field(default_factory=frozenset)
    defined_kinds: FrozenSet[str] = field(default_factory=frozenset)
    known_resources: FrozenSet[str] = field(default_factory=frozenset)
    available_resources: FrozenSet[str] = field(default_factory=frozenset)
    max_age_days: int = DEFAULT_MAX_AGE_DAYS
    skip_window_days: int = DEFAULT_SKIP_WINDOW_DAYS

    def __post_init__(self) -> None:
        for name in ("excluded_kinds", "defined_kinds", "known_resources", "available_resources"):
            object.__setattr__(self, name, _freeze_names(getattr(self, name)))

        for name in ("max_age_days", "skip_window_days"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an int")
            if value < 0 or value > MAX_DAYS:
                raise ValueError(f"{name} must be between 0 and {MAX_DAYS}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TestKindConfig":
        """Build a snapshot from TEST_KIND_* variables (os.environ by default)."""

        env = os.environ if environ is None else environ
        return cls(
            excluded_kinds=_env_list(env, ENV_EXCLUDE),
            defined_kinds=_env_list(env, ENV_DEFINED),
            known_resources=_env_list(env, ENV_KNOWN_RESOURCES),
            available_resources=_env_list(env, ENV_RESOURCES),
            max_age_days=_env_days(env, ENV_UNIT_AGE, DEFAULT_MAX_AGE_DAYS),
            skip_window_days=_env_days(env, ENV_UNIT_SKIP, DEFAULT_SKIP_WINDOW_DAYS),
        )

    def is_kind_excluded(self, kind: str) -> bool:
        excluded = _contains_ignore_case(self.excluded_kinds, kind)
        log.debug("Check test of kind: %s are excluded: %s", kind, excluded)
        return excluded

    def is_kind_defined(self, kind: str) -> bool:
        if not self.defined_kinds:
            return True
        return _contains_ignore_case(self.defined_kinds, kind)

    def is_resource_known(self, resource: str) -> bool:
        if not self.known_resources:
            return True
        return _contains_ignore_case(self.known_resources, resource)

    def missing_resources(self, requested: Iterable[str]) -> FrozenSet[str]:
        return frozenset(requested) - self.available_resources

    def aging_thresholds(self) -> Tuple[int, int]:
        return self.max_age_days, self.skip_window_days


def _contains_ignore_case(names: FrozenSet[str], name: str) -> bool:
    folded = name.casefold()
    return any(n.casefold() == folded for n in names)


def resolve_config(environ: Optional[Mapping[str, str]] = None) -> TestKindConfig:
    return TestKindConfig.from_env(environ)


class ConfigResolver:
    """
    Resolve a TestKindConfig exactly once.

    Concurrent first callers block on the lock and all observe the same
    snapshot; later calls return it without locking.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = environ
        self._config: Optional[TestKindConfig] = None
        self._lock = Lock()

    @property
    def resolved(self) -> bool:
        return self._config is not None

    def resolve(self) -> TestKindConfig:
        config = self._config
        if config is not None:
            return config

        with self._lock:
            if self._config is None:
                self._config = resolve_config(self._environ)
                log.debug("Resolved test kind configuration: %s", self._config)
            return self._config


_PROCESS_RESOLVER = ConfigResolver()


def get_config() -> TestKindConfig:
    """Process-wide configuration, read from os.environ on first use."""

    return _PROCESS_RESOLVER.resolve()


def configure_logging(environ: Optional[Mapping[str, str]] = None) -> None:
    """Apply TEST_KIND_LOG_LEVEL to the package logger."""

    env = os.environ if environ is None else environ
    level = (env.get(ENV_LOG_LEVEL, "") or "WARNING").strip().upper()
    try:
        logging.getLogger("testkind").setLevel(level)
    except ValueError:
        log.warning("Ignoring unknown %s=%r", ENV_LOG_LEVEL, level)
