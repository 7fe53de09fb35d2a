"""
Execution ports and result types.

- ExecutionPolicy: simulate-only toggle
- PipelineStep / ApplyStatus / StepResult: one structured line per pipeline site
- ArticleExecutor: protocol for anything that can commit an article (T-SQL, fakes, etc.)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from src.replication_engine.models import ArticleDescriptor


class ApplyStatus(StrEnum):
    OK = "ok"
    FAILED = "failed"
    SKIPPED = "skipped"  # simulate-only, or never reached


class PipelineStep(StrEnum):
    VALIDATE = "validate"
    CONNECT = "connect"
    LOOKUP_PUBLICATION = "lookup_publication"
    BUILD = "build"
    CONFIGURE = "configure"
    CHECK_EXISTENCE = "check_existence"
    CREATE = "create"
    REFRESH_SUBSCRIPTIONS = "refresh_subscriptions"
    READ_BACK = "read_back"


@dataclass(frozen=True)
class ExecutionPolicy:
    """Controls whether state-changing steps are issued."""

    dry_run: bool = False


@dataclass(frozen=True)
class StepResult:
    """Outcome for a single pipeline site."""

    step: PipelineStep
    status: ApplyStatus
    message: str  # one line; "(dry-run) would ..." in simulate-only runs


class ArticleExecutor(Protocol):
    """Issues the state-changing calls for an article."""

    def create_article(self, article: ArticleDescriptor) -> None: ...

    def refresh_subscriptions(self, article: ArticleDescriptor) -> None: ...

    def describe_create(self, article: ArticleDescriptor) -> str: ...

    def describe_refresh(self, article: ArticleDescriptor) -> str: ...
