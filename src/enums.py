"""Enumerations used throughout the replication tooling."""

from enum import StrEnum


class PublicationKind(StrEnum):
    """Replication kind of a publication."""

    TRANSACTIONAL = "Transactional"
    SNAPSHOT = "Snapshot"
    MERGE = "Merge"

    @property
    def requires_subscription_refresh(self) -> bool:
        """Push-style publications must re-synchronise subscriptions after an article is added."""
        return self in (PublicationKind.TRANSACTIONAL, PublicationKind.SNAPSHOT)


class ArticleVariant(StrEnum):
    """Concrete article object type built for a publication."""

    LOG_BASED = "LogBased"
    TABLE_BASED = "TableBased"


class ReportingMode(StrEnum):
    """How per-target failures are reported."""

    FRIENDLY = "friendly"
    STRICT = "strict"
