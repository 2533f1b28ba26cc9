from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ErrorOut(BaseModel):
    """A rejected attribute."""

    error: str
    code: str
    attribute: str


class ClassificationOut(BaseModel):
    """Parsed attribute."""

    kind: str
    updated: Optional[str] = None
    resources: List[str] = Field(default_factory=list)


class DecisionOut(BaseModel):
    """Disposition of one attribute on a given date."""

    attribute: str
    today: str
    classification: ClassificationOut
    status: str
    reason: Optional[str] = None


class ConfigOut(BaseModel):
    """Resolved TEST_KIND_* configuration."""

    excluded_kinds: List[str] = Field(default_factory=list)
    defined_kinds: List[str] = Field(default_factory=list)
    known_resources: List[str] = Field(default_factory=list)
    available_resources: List[str] = Field(default_factory=list)
    max_age_days: int
    skip_window_days: int
