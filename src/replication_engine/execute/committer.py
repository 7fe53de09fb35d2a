"""
ArticleCommitter

Commits a configured article in a deterministic order:

  1) check the server for an article of the same name in the publication
  2) already there → conflict; nothing is created
  3) absent → create it
  4) created in a Transactional/Snapshot publication → refresh subscriptions

Respects ExecutionPolicy:
- dry_run=True → steps 3 and 4 are not issued; SKIPPED results describe the
  statements that would have run. The existence check is read-only and still runs.

There are no retries. The existence check and the create are not atomic; a
concurrent creator can still win the race, in which case the create fails.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from src.enums import PublicationKind
from src.replication_engine.errors import (
    ArticleConflictError,
    ArticleCreationError,
    ReplicationArticleError,
    ReplicationLookupError,
    SubscriptionRefreshError,
    brief_error,
)
from src.replication_engine.execute.ports import (
    ApplyStatus,
    ArticleExecutor,
    ExecutionPolicy,
    PipelineStep,
    StepResult,
)
from src.replication_engine.models import ArticleDescriptor
from src.replication_engine.state.ports import ArticleReader


class CommitState(StrEnum):
    CONFIGURED = "configured"
    ALREADY_EXISTS = "already_exists"
    CREATION_FAILED = "creation_failed"
    REFRESH_FAILED = "refresh_failed"
    DONE = "done"


@dataclass(frozen=True)
class CommitReport:
    """Final state, per-step results, and the error for terminal failure states."""

    state: CommitState
    steps: tuple[StepResult, ...]
    error: ReplicationArticleError | None = None

    @property
    def ok(self) -> bool:
        return self.state is CommitState.DONE


def _names(article: ArticleDescriptor) -> dict[str, str]:
    return {
        "instance": article.connection.instance,
        "publication": article.publication,
        "article": article.name,
    }


class ArticleCommitter:
    """Execute the create decision for one article."""

    def __init__(self, reader: ArticleReader, executor: ArticleExecutor) -> None:
        self._reader = reader
        self._executor = executor

    def commit(
        self,
        article: ArticleDescriptor,
        kind: PublicationKind,
        *,
        policy: ExecutionPolicy,
    ) -> CommitReport:
        steps: list[StepResult] = []
        instance = article.connection.instance

        # 1) existence
        try:
            article.is_existing_object = self._reader.exists(article)
        except Exception as error:
            failure = ReplicationLookupError(
                f"Failed to check whether article {article.name} exists in publication "
                f"{article.publication} on {instance}: {brief_error(error)}",
                **_names(article),
            )
            failure.__cause__ = error
            steps.append(StepResult(PipelineStep.CHECK_EXISTENCE, ApplyStatus.FAILED, failure.message))
            return CommitReport(CommitState.CONFIGURED, tuple(steps), failure)

        # 2) conflict
        if article.is_existing_object:
            failure = ArticleConflictError(
                f"Article {article.name} already exists in publication {article.publication} "
                f"on {instance}",
                **_names(article),
            )
            steps.append(StepResult(PipelineStep.CHECK_EXISTENCE, ApplyStatus.FAILED, failure.message))
            return CommitReport(CommitState.ALREADY_EXISTS, tuple(steps), failure)

        steps.append(
            StepResult(
                PipelineStep.CHECK_EXISTENCE,
                ApplyStatus.OK,
                f"Article {article.name} not yet in publication {article.publication}",
            )
        )

        # 3) create
        if policy.dry_run:
            steps.append(
                StepResult(
                    PipelineStep.CREATE,
                    ApplyStatus.SKIPPED,
                    f"(dry-run) would execute: {self._executor.describe_create(article)}",
                )
            )
        else:
            try:
                self._executor.create_article(article)
            except Exception as error:
                failure = ArticleCreationError(
                    f"Failed to create article {article.name} in publication "
                    f"{article.publication} on {instance}: {brief_error(error)}",
                    **_names(article),
                )
                failure.__cause__ = error
                steps.append(StepResult(PipelineStep.CREATE, ApplyStatus.FAILED, failure.message))
                return CommitReport(CommitState.CREATION_FAILED, tuple(steps), failure)
            steps.append(
                StepResult(
                    PipelineStep.CREATE,
                    ApplyStatus.OK,
                    f"Created article {article.name} in publication {article.publication}",
                )
            )

        # 4) refresh (push-style kinds only)
        if not kind.requires_subscription_refresh:
            return CommitReport(CommitState.DONE, tuple(steps))

        if policy.dry_run:
            steps.append(
                StepResult(
                    PipelineStep.REFRESH_SUBSCRIPTIONS,
                    ApplyStatus.SKIPPED,
                    f"(dry-run) would execute: {self._executor.describe_refresh(article)}",
                )
            )
            return CommitReport(CommitState.DONE, tuple(steps))

        try:
            self._executor.refresh_subscriptions(article)
        except Exception as error:
            failure = SubscriptionRefreshError(
                f"Article {article.name} was created but refreshing subscriptions of "
                f"publication {article.publication} on {instance} failed: {brief_error(error)}",
                **_names(article),
            )
            failure.__cause__ = error
            steps.append(
                StepResult(PipelineStep.REFRESH_SUBSCRIPTIONS, ApplyStatus.FAILED, failure.message)
            )
            return CommitReport(CommitState.REFRESH_FAILED, tuple(steps), failure)

        steps.append(
            StepResult(
                PipelineStep.REFRESH_SUBSCRIPTIONS,
                ApplyStatus.OK,
                f"Refreshed subscriptions of publication {article.publication}",
            )
        )
        return CommitReport(CommitState.DONE, tuple(steps))
