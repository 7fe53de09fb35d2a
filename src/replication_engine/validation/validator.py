"""
Parameter validator: run shape/type rules over a target before any remote call.

- Rules are decoupled via a simple Protocol (each receives the TargetDescriptor only).
- Performs no I/O.
- `validate` returns a ValidationReport; `ensure_valid` raises on any ERROR and
  otherwise passes the target through unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from src.replication_engine.errors import ArticleValidationError
from src.replication_engine.models import TargetDescriptor
from src.replication_engine.validation.diagnostics import Diagnostic, ValidationReport
from src.replication_engine.validation.rules import default_rule_set


class ParameterRule(Protocol):
    """
    A parameter-only rule.

    Contract
    --------
    - Receives the target descriptor only.
    - Returns zero or more diagnostics; must not raise for normal invalid input.
    """

    code: str
    description: str

    def check(self, target: TargetDescriptor) -> list[Diagnostic]: ...


class ParameterValidator:
    """Runs every rule, in order, against one target."""

    def __init__(self, rules: Iterable[ParameterRule] | None = None) -> None:
        self._rules: tuple[ParameterRule, ...] = (
            tuple(default_rule_set()) if rules is None else tuple(rules)
        )

    @property
    def rules(self) -> tuple[ParameterRule, ...]:
        return self._rules

    def validate(self, target: TargetDescriptor) -> ValidationReport:
        diagnostics: list[Diagnostic] = []
        for rule in self._rules:
            diagnostics.extend(rule.check(target))
        return ValidationReport(diagnostics=tuple(diagnostics))

    def ensure_valid(self, target: TargetDescriptor) -> TargetDescriptor:
        """Return `target` unchanged, or raise ArticleValidationError listing every error."""
        report = self.validate(target)
        if report.ok:
            return target

        message = "; ".join(d.message for d in report.errors)
        raise ArticleValidationError(
            f"Invalid parameters for {target.article_key} on {target.instance}: {message}",
            instance=target.instance,
            publication=target.publication,
            article=target.name,
        )
