"""
Concrete parameter rules.

- Centralised RuleCode (StrEnum)
- One rule per caller-supplied optional parameter
- A 'default_rule_set()' factory
"""

from __future__ import annotations

import re
from enum import StrEnum

from src.constants import FILTER_KEYWORD
from src.replication_engine.models import TargetDescriptor
from src.replication_engine.options import CreationScriptOptions
from src.replication_engine.validation.diagnostics import Diagnostic, DiagnosticLevel

_LEADING_WHERE = re.compile(rf"^\s*{FILTER_KEYWORD}", re.IGNORECASE)


class RuleCode(StrEnum):
    """Codes emitted by the parameter rules."""

    CREATION_SCRIPT_OPTIONS_TYPE = "CREATION_SCRIPT_OPTIONS_TYPE"
    FILTER_CLAUSE_TYPE = "FILTER_CLAUSE_TYPE"
    FILTER_CLAUSE_WITHOUT_WHERE = "FILTER_CLAUSE_WITHOUT_WHERE"


def _target_key(target: TargetDescriptor) -> str:
    return f"{target.instance}:{target.article_key}"


class CreationScriptOptionsMustBeCapabilitySet:
    """Creation-script options, when supplied, must be a CreationScriptOptions value."""

    code = RuleCode.CREATION_SCRIPT_OPTIONS_TYPE.value
    description = "Creation script options must be a CreationScriptOptions value."

    def check(self, target: TargetDescriptor) -> list[Diagnostic]:
        options = target.creation_script_options
        if options is None or isinstance(options, CreationScriptOptions):
            return []

        return [
            Diagnostic(
                target_key=_target_key(target),
                level=DiagnosticLevel.ERROR,
                code=self.code,
                message=(
                    "Creation script options must be of type CreationScriptOptions, "
                    f"got {type(options).__name__}"
                ),
                hint="Build the value with build_creation_script_options().",
            )
        ]


class FilterClauseMustBeText:
    """The filter, when supplied, is predicate text."""

    code = RuleCode.FILTER_CLAUSE_TYPE.value
    description = "Filter clause must be a string."

    def check(self, target: TargetDescriptor) -> list[Diagnostic]:
        text = target.filter_clause
        if text is None or isinstance(text, str):
            return []

        return [
            Diagnostic(
                target_key=_target_key(target),
                level=DiagnosticLevel.ERROR,
                code=self.code,
                message=f"Filter clause must be a string, got {type(text).__name__}",
                hint="Quote the predicate in YAML, e.g. filter: \"1 = 1\".",
            )
        ]


class FilterClauseMustNotStartWithWhere:
    """The filter is a bare predicate; the WHERE keyword is added when the article is created."""

    code = RuleCode.FILTER_CLAUSE_WITHOUT_WHERE.value
    description = "Filter clause must not begin with WHERE."

    def check(self, target: TargetDescriptor) -> list[Diagnostic]:
        text = target.filter_clause
        if not isinstance(text, str):
            return []

        if not _LEADING_WHERE.match(text):
            return []

        return [
            Diagnostic(
                target_key=_target_key(target),
                level=DiagnosticLevel.ERROR,
                code=self.code,
                message=f"Filter clause must not begin with {FILTER_KEYWORD}: {text!r}",
                hint="Pass the predicate only, e.g. \"city = 'seattle'\".",
            )
        ]


def default_rule_set() -> tuple[
    CreationScriptOptionsMustBeCapabilitySet,
    FilterClauseMustBeText,
    FilterClauseMustNotStartWithWhere,
]:
    """Rules run against every target before any server is contacted."""
    return (
        CreationScriptOptionsMustBeCapabilitySet(),
        FilterClauseMustBeText(),
        FilterClauseMustNotStartWithWhere(),
    )
