"""Ports for the collaborators that talk to a publisher.

Defines:
- ServerHandle: an open connection able to run a batch in a given database
- ServerResolver: instance + credential -> ServerHandle
- PublicationReader: publication metadata lookup
- ArticleReader: existence check and read-back of a committed article

Implementations may raise any exception; callers wrap it in the matching
ReplicationArticleError for the step that failed.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from src.replication_engine.models import ArticleDescriptor, Credential, PublicationMetadata


class ServerHandle(Protocol):
    """An open connection to one instance."""

    instance: str

    def fetch_all(self, database: str, sql: str, params: Sequence[Any] = ()) -> list[tuple]: ...

    def execute(self, database: str, sql: str, params: Sequence[Any] = ()) -> None: ...

    def close(self) -> None: ...


class ServerResolver(Protocol):
    def resolve(self, instance: str, credential: Credential | None) -> ServerHandle: ...


class PublicationReader(Protocol):
    def lookup(
        self,
        server: ServerHandle,
        database: str,
        publication: str,
        credential: Credential | None = None,
    ) -> PublicationMetadata | None: ...


class ArticleReader(Protocol):
    def exists(self, article: ArticleDescriptor) -> bool: ...

    def read(self, article: ArticleDescriptor) -> ArticleDescriptor | None: ...
