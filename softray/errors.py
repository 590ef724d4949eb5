"""
Exception types raised by softray.

Configuration problems are reported eagerly, when a value or a camera is
built, so a render never starts with invalid input. Geometric degeneracies
(parallel rays, missed surfaces) are not errors and produce empty results.
"""

from __future__ import annotations
from typing import NamedTuple


class SoftrayError(Exception):
    """Base class for all softray errors."""
    pass


class ZeroVectorError(SoftrayError, ValueError):
    """An operation would produce the zero vector."""
    pass


class ConfigurationError(SoftrayError, ValueError):
    """A configuration value is missing or invalid.

    Attributes:
        field: Name of the offending field
        reason: Human readable description of the problem
    """

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class FieldProblem(NamedTuple):
    """One validation failure found while building a camera."""
    field: str
    reason: str


class CameraBuildError(ConfigurationError):
    """Camera validation failed on one or more fields."""

    def __init__(self, problems: list[FieldProblem]):
        first = problems[0]
        super().__init__(first.field, first.reason)
        self.problems = list(problems)
        self.args = ("; ".join(f"{p.field}: {p.reason}" for p in self.problems),)

    @property
    def fields(self) -> list[str]:
        return [p.field for p in self.problems]
