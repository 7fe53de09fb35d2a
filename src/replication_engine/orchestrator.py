"""
End-to-end orchestration for adding an article.

Flow (one pass per target instance, in the order given):
  1) Validate caller parameters (no remote calls).
  2) Resolve a server handle for the instance.
  3) Look up the publication.
  4) Build the article variant for the publication kind.
  5) Apply creation-script options and filter clause.
  6) Commit: existence check, create, refresh subscriptions.
  7) Read the committed article back.

A failure at any step ends that target only; the next target still runs.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass

from src.enums import PublicationKind, ReportingMode
from src.logger import LOGGER
from src.replication_engine.build.article_builder import ArticleBuilder
from src.replication_engine.build.configurator import ArticleConfigurator
from src.replication_engine.errors import (
    ArticleConstructionError,
    ArticleValidationError,
    FailureCategory,
    ReplicationArticleError,
    ReplicationLookupError,
    ServerConnectionError,
    brief_error,
)
from src.replication_engine.execute.committer import ArticleCommitter
from src.replication_engine.execute.ports import (
    ApplyStatus,
    ExecutionPolicy,
    PipelineStep,
    StepResult,
)
from src.replication_engine.models import (
    ArticleDescriptor,
    ArticleRequest,
    PublicationMetadata,
    TargetDescriptor,
)
from src.replication_engine.state.ports import (
    ArticleReader,
    PublicationReader,
    ServerHandle,
    ServerResolver,
)
from src.replication_engine.validation.validator import ParameterValidator

_DRY_RUN_PREFIX = "(dry-run) "

# ---------- orchestration inputs/outputs ----------


@dataclass(frozen=True)
class ProvisioningOptions:
    """
    Toggles for a single run.

    simulate_only:
        Resolve and validate everything, but never issue the create or refresh calls.
    reporting_mode:
        FRIENDLY → one-line warnings; STRICT → errors with full detail and traceback.
    """

    simulate_only: bool = False
    reporting_mode: ReportingMode = ReportingMode.FRIENDLY


@dataclass(frozen=True)
class TargetFailure:
    """Why a target did not get its article."""

    category: FailureCategory
    message: str
    detail: str = ""
    error: ReplicationArticleError | None = None


@dataclass(frozen=True)
class TargetResult:
    """
    Outcome for one target instance.

    `article` is the read-back descriptor; its connection is already closed.
    """

    instance: str
    status: ApplyStatus
    steps: tuple[StepResult, ...]
    article: ArticleDescriptor | None = None
    failure: TargetFailure | None = None


@dataclass(frozen=True)
class ProvisioningReport:
    """Ordered per-target outcomes for a whole run."""

    results: tuple[TargetResult, ...]

    @property
    def ok(self) -> bool:
        return all(result.status != ApplyStatus.FAILED for result in self.results)

    @property
    def succeeded(self) -> tuple[TargetResult, ...]:
        return tuple(r for r in self.results if r.status == ApplyStatus.OK)

    @property
    def failed(self) -> tuple[TargetResult, ...]:
        return tuple(r for r in self.results if r.status == ApplyStatus.FAILED)


class _TargetFailed(Exception):
    """Carries a provisioning error out of the step helpers."""

    def __init__(self, error: ReplicationArticleError) -> None:
        super().__init__(error.message)
        self.error = error


# ---------- orchestrator ----------


class Orchestrator:
    """
    Glue for validate → resolve → look up → build → configure → commit → read back.

    This class does not issue any T-SQL itself; it delegates to injected components.
    """

    def __init__(
        self,
        validator: ParameterValidator,
        server_resolver: ServerResolver,
        publication_reader: PublicationReader,
        article_reader: ArticleReader,
        builder: ArticleBuilder,
        configurator: ArticleConfigurator,
        committer: ArticleCommitter,
    ) -> None:
        self._validator = validator
        self._server_resolver = server_resolver
        self._publication_reader = publication_reader
        self._article_reader = article_reader
        self._builder = builder
        self._configurator = configurator
        self._committer = committer

    # ----- public API -----

    def run(self, request: ArticleRequest, options: ProvisioningOptions) -> ProvisioningReport:
        """Run the pipeline once per instance, sequentially."""
        targets = request.targets()
        LOGGER.info(
            "Adding article %s to publication %s on %d instance(s)%s.",
            request.name,
            request.publication,
            len(targets),
            " (simulate only)" if options.simulate_only else "",
        )
        results = tuple(self.run_target(target, options) for target in targets)
        report = ProvisioningReport(results=results)
        LOGGER.info(
            "Finished: succeeded=%d, failed=%d, simulated=%d",
            len(report.succeeded),
            len(report.failed),
            len(results) - len(report.succeeded) - len(report.failed),
        )
        return report

    def run_target(self, target: TargetDescriptor, options: ProvisioningOptions) -> TargetResult:
        """Run all steps for a single target and never raise for a provisioning failure."""
        policy = ExecutionPolicy(dry_run=options.simulate_only)
        steps: list[StepResult] = []
        server: ServerHandle | None = None
        try:
            self._validate(target, steps)
            server = self._connect(target, steps)
            publication = self._lookup(server, target, policy, steps)
            article = self._build(server, target, publication, policy, steps)
            self._configure(article, target, policy, steps)
            self._commit(article, PublicationKind(publication.kind), policy, steps)
            if policy.dry_run:
                return TargetResult(
                    instance=target.instance, status=ApplyStatus.SKIPPED, steps=tuple(steps)
                )
            committed = self._read_back(article, steps)
        except _TargetFailed as failed:
            return TargetResult(
                instance=target.instance,
                status=ApplyStatus.FAILED,
                steps=tuple(steps),
                failure=self._report_failure(failed.error, options.reporting_mode),
            )
        finally:
            if server is not None:
                self._close(server)

        return TargetResult(
            instance=target.instance,
            status=ApplyStatus.OK,
            steps=tuple(steps),
            article=committed,
        )

    # ----- steps -----

    def _validate(self, target: TargetDescriptor, steps: list[StepResult]) -> None:
        try:
            self._validator.ensure_valid(target)
        except ReplicationArticleError as error:
            steps.append(StepResult(PipelineStep.VALIDATE, ApplyStatus.FAILED, error.message))
            raise _TargetFailed(error) from error
        except Exception as error:
            failure = ArticleValidationError(
                f"Failed to validate parameters for {target.article_key} on {target.instance}: "
                f"{brief_error(error)}",
                **_names(target),
            )
            failure.__cause__ = error
            steps.append(StepResult(PipelineStep.VALIDATE, ApplyStatus.FAILED, failure.message))
            raise _TargetFailed(failure) from error
        steps.append(StepResult(PipelineStep.VALIDATE, ApplyStatus.OK, "Parameters are valid"))

    def _connect(self, target: TargetDescriptor, steps: list[StepResult]) -> ServerHandle:
        try:
            server = self._server_resolver.resolve(target.instance, target.credential)
        except Exception as error:
            failure = ServerConnectionError(
                f"Failure connecting to {target.instance}: {brief_error(error)}",
                instance=target.instance,
                publication=target.publication,
                article=target.name,
            )
            failure.__cause__ = error
            steps.append(StepResult(PipelineStep.CONNECT, ApplyStatus.FAILED, failure.message))
            raise _TargetFailed(failure) from error
        steps.append(StepResult(PipelineStep.CONNECT, ApplyStatus.OK, f"Connected to {target.instance}"))
        return server

    def _lookup(
        self,
        server: ServerHandle,
        target: TargetDescriptor,
        policy: ExecutionPolicy,
        steps: list[StepResult],
    ) -> PublicationMetadata:
        names = _names(target)
        try:
            publication = self._publication_reader.lookup(
                server, target.database, target.publication, target.credential
            )
        except Exception as error:
            failure = ReplicationLookupError(
                f"Failed to look up publication {target.publication} in {target.database} "
                f"on {target.instance}: {brief_error(error)}",
                **names,
            )
            failure.__cause__ = error
            steps.append(
                StepResult(PipelineStep.LOOKUP_PUBLICATION, ApplyStatus.FAILED, failure.message)
            )
            raise _TargetFailed(failure) from error

        if publication is None or not publication.exists:
            failure = ReplicationLookupError(
                f"Publication {target.publication} does not exist in {target.database} "
                f"on {target.instance}",
                **names,
            )
            steps.append(
                StepResult(PipelineStep.LOOKUP_PUBLICATION, ApplyStatus.FAILED, failure.message)
            )
            raise _TargetFailed(failure)

        message = _describe(
            policy,
            f"Found {publication.kind} publication {publication.name} in {target.database}",
        )
        steps.append(StepResult(PipelineStep.LOOKUP_PUBLICATION, ApplyStatus.OK, message))
        return publication

    def _build(
        self,
        server: ServerHandle,
        target: TargetDescriptor,
        publication: PublicationMetadata,
        policy: ExecutionPolicy,
        steps: list[StepResult],
    ) -> ArticleDescriptor:
        try:
            article = self._builder.build(target, publication, server)
        except ReplicationArticleError as error:
            steps.append(StepResult(PipelineStep.BUILD, ApplyStatus.FAILED, error.message))
            raise _TargetFailed(error) from error
        except Exception as error:
            failure = ArticleConstructionError(
                f"Failed to build article {target.name} for publication {target.publication} "
                f"on {target.instance}: {brief_error(error)}",
                **_names(target),
            )
            failure.__cause__ = error
            steps.append(StepResult(PipelineStep.BUILD, ApplyStatus.FAILED, failure.message))
            raise _TargetFailed(failure) from error

        message = _describe(
            policy,
            f"Built {article.variant} article {article.name} for {article.source_object_name}",
        )
        steps.append(StepResult(PipelineStep.BUILD, ApplyStatus.OK, message))
        return article

    def _configure(
        self,
        article: ArticleDescriptor,
        target: TargetDescriptor,
        policy: ExecutionPolicy,
        steps: list[StepResult],
    ) -> None:
        try:
            self._configurator.configure(article, target)
        except ReplicationArticleError as error:
            steps.append(StepResult(PipelineStep.CONFIGURE, ApplyStatus.FAILED, error.message))
            raise _TargetFailed(error) from error

        applied = []
        if article.creation_script_options is not None:
            applied.append(f"creation script options {article.creation_script_options.as_hex()}")
        if article.filter_clause is not None:
            applied.append(f"filter clause {article.filter_clause!r}")
        message = _describe(
            policy,
            f"Set {', '.join(applied)} on {article.name}" if applied else "No optional fields to set",
        )
        steps.append(StepResult(PipelineStep.CONFIGURE, ApplyStatus.OK, message))

    def _commit(
        self,
        article: ArticleDescriptor,
        kind: PublicationKind,
        policy: ExecutionPolicy,
        steps: list[StepResult],
    ) -> None:
        report = self._committer.commit(article, kind, policy=policy)
        steps.extend(report.steps)
        for step in report.steps:
            if step.status == ApplyStatus.SKIPPED:
                LOGGER.info("%s: %s", article.connection.instance, step.message)
        if report.error is not None:
            raise _TargetFailed(report.error)

    def _read_back(self, article: ArticleDescriptor, steps: list[StepResult]) -> ArticleDescriptor:
        names = {
            "instance": article.connection.instance,
            "publication": article.publication,
            "article": article.name,
        }
        try:
            committed = self._article_reader.read(article)
        except Exception as error:
            failure = ReplicationLookupError(
                f"Failed to read back article {article.name} in publication "
                f"{article.publication} on {article.connection.instance}: {brief_error(error)}",
                **names,
            )
            failure.__cause__ = error
            steps.append(StepResult(PipelineStep.READ_BACK, ApplyStatus.FAILED, failure.message))
            raise _TargetFailed(failure) from error

        if committed is None:
            failure = ReplicationLookupError(
                f"Article {article.name} was not found in publication {article.publication} "
                f"on {article.connection.instance} after creation",
                **names,
            )
            steps.append(StepResult(PipelineStep.READ_BACK, ApplyStatus.FAILED, failure.message))
            raise _TargetFailed(failure)

        steps.append(
            StepResult(PipelineStep.READ_BACK, ApplyStatus.OK, f"Read back article {committed.name}")
        )
        return committed

    # ----- reporting -----

    @staticmethod
    def _report_failure(error: ReplicationArticleError, mode: ReportingMode) -> TargetFailure:
        if mode is ReportingMode.STRICT:
            LOGGER.error(error.message, exc_info=error)
            detail = "".join(traceback.format_exception(error))
            return TargetFailure(
                category=error.category, message=error.message, detail=detail, error=error
            )

        LOGGER.warning(error.message)
        return TargetFailure(category=error.category, message=error.message, error=error)

    @staticmethod
    def _close(server: ServerHandle) -> None:
        try:
            server.close()
        except Exception as error:
            LOGGER.warning(
                "Failed to close connection to %s: %s", server.instance, brief_error(error)
            )


# ---------- tiny helpers ----------


def _names(target: TargetDescriptor) -> dict[str, str]:
    return {
        "instance": target.instance,
        "publication": target.publication,
        "article": target.name,
    }


def _describe(policy: ExecutionPolicy, message: str) -> str:
    """Prefix simulate-only messages and log them, so every guarded site reports itself."""
    if not policy.dry_run:
        return message
    LOGGER.info("%s%s", _DRY_RUN_PREFIX, message)
    return f"{_DRY_RUN_PREFIX}{message}"
