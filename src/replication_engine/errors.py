"""
Error taxonomy for article provisioning.

Every error names the instance, publication and article it concerns. The
orchestrator turns any of them into a per-target failure record; none of them
aborts the processing of other targets.
"""

from __future__ import annotations

from enum import StrEnum


class FailureCategory(StrEnum):
    VALIDATION = "validation"
    CONNECTION = "connection"
    LOOKUP = "lookup"
    CONSTRUCTION = "construction"
    CONFIGURATION = "configuration"
    CONFLICT = "conflict"
    CREATION = "creation"
    REFRESH = "refresh"


class ReplicationArticleError(Exception):
    """Base class for all provisioning failures."""

    category: FailureCategory

    def __init__(
        self,
        message: str,
        *,
        instance: str = "",
        publication: str = "",
        article: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.instance = instance
        self.publication = publication
        self.article = article


class ArticleValidationError(ReplicationArticleError):
    category = FailureCategory.VALIDATION


class ServerConnectionError(ReplicationArticleError):
    category = FailureCategory.CONNECTION


class ReplicationLookupError(ReplicationArticleError):
    category = FailureCategory.LOOKUP


class ArticleConstructionError(ReplicationArticleError):
    category = FailureCategory.CONSTRUCTION


class ArticleConfigurationError(ReplicationArticleError):
    """Raised when an optional field cannot be applied; `field_name` says which one."""

    category = FailureCategory.CONFIGURATION

    def __init__(self, message: str, *, field_name: str, **names: str) -> None:
        super().__init__(message, **names)
        self.field_name = field_name


class ArticleConflictError(ReplicationArticleError):
    category = FailureCategory.CONFLICT


class ArticleCreationError(ReplicationArticleError):
    category = FailureCategory.CREATION


class SubscriptionRefreshError(ReplicationArticleError):
    """The article was created but its publication's subscriptions were not refreshed."""

    category = FailureCategory.REFRESH


def brief_error(error: BaseException) -> str:
    """One-line 'Type: first line' summary of an exception, for wrapped messages."""
    text = str(error).strip()
    first_line = text.splitlines()[0] if text else ""
    name = type(error).__name__
    return f"{name}: {first_line}" if first_line else name
