"""Domain models for provisioning articles into publications."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from src import settings
from src.enums import ArticleVariant, PublicationKind
from src.replication_engine.identifiers import format_article_key, format_object_name

if TYPE_CHECKING:
    from src.replication_engine.state.ports import ServerHandle


@dataclass(frozen=True)
class Credential:
    """SQL authentication login. Absent credential means integrated security."""

    username: str
    password: str = field(default="", repr=False)


@dataclass(frozen=True)
class ArticleRequest:
    """
    One invocation: the same article added to the same publication on each instance.

    `creation_script_options` is deliberately typed `Any`; its shape is checked by
    the parameter validator before any server is contacted.
    """

    instances: Sequence[str]
    database: str
    publication: str
    name: str
    schema: str = settings.DEFAULT_SCHEMA
    credential: Credential | None = None
    filter_clause: str | None = None
    creation_script_options: Any = None

    def targets(self) -> tuple[TargetDescriptor, ...]:
        """Expand into one descriptor per instance, in the order given."""
        return tuple(
            TargetDescriptor(
                instance=instance,
                database=self.database,
                publication=self.publication,
                name=self.name,
                schema=self.schema,
                credential=self.credential,
                filter_clause=self.filter_clause,
                creation_script_options=self.creation_script_options,
            )
            for instance in self.instances
        )


@dataclass(frozen=True)
class TargetDescriptor:
    """Everything needed to provision the article on a single server."""

    instance: str
    database: str
    publication: str
    name: str
    schema: str = settings.DEFAULT_SCHEMA
    credential: Credential | None = None
    filter_clause: str | None = None
    creation_script_options: Any = None

    @property
    def article_key(self) -> str:
        return format_article_key(self.publication, self.name)


@dataclass(frozen=True)
class PublicationMetadata:
    """Publication as read from the publisher database."""

    name: str
    kind: PublicationKind | str
    database: str
    exists: bool = True


@dataclass
class ArticleDescriptor:
    """
    An article in a publication.

    Mutable until committed: the configurator sets the optional fields and the
    committer records `is_existing_object` from the server immediately before
    deciding whether to create.

    `connection` is the handle of the pipeline that built the article. The
    orchestrator closes it when that target finishes, so a read-back descriptor
    handed back to the caller carries a closed handle and is for inspection only.
    """

    variant: ArticleVariant
    connection: ServerHandle
    name: str
    database: str
    source_object: str
    source_schema: str
    publication: str
    filter_clause: str | None = None
    creation_script_options: Any = None
    is_existing_object: bool = False

    @property
    def article_key(self) -> str:
        """Unquoted 'publication/article'."""
        return format_article_key(self.publication, self.name)

    @property
    def source_object_name(self) -> str:
        """Unquoted 'database.schema.object'."""
        return format_object_name(self.database, self.source_schema, self.source_object)
