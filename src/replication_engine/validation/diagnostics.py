"""
Diagnostics primitives shared by the validator and rules.

- DiagnosticLevel: error/warning
- Diagnostic: a single validation finding
- ValidationReport: an immutable bag of diagnostics with a convenience .ok flag

Notes
-----
- `target_key` is "instance:publication/article".
- Prefer full words in codes (UPPER_SNAKE_CASE), e.g., "FILTER_CLAUSE_WITHOUT_WHERE".
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class DiagnosticLevel(StrEnum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """
    A single validation finding.

    code:
        Stable identifier in UPPER_SNAKE_CASE with full words.
    message:
        One-line human-readable message.
    hint:
        Optional guidance; empty string means "no hint".
    """

    target_key: str
    level: DiagnosticLevel
    code: str
    message: str
    hint: str = ""


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Immutable bag of diagnostics with a convenience 'ok' property."""

    diagnostics: tuple[Diagnostic, ...]

    @property
    def ok(self) -> bool:
        return not any(d.level == DiagnosticLevel.ERROR for d in self.diagnostics)

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.level == DiagnosticLevel.ERROR)
