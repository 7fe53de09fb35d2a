"""
ArticleBuilder

Selects the article variant from the publication kind and populates the
identity fields of a new ArticleDescriptor:

  Transactional, Snapshot → LogBased
  Merge                   → TableBased

Any other kind is a construction error; there is no fallback variant.
"""

from __future__ import annotations

from src.enums import ArticleVariant, PublicationKind
from src.replication_engine.errors import ArticleConstructionError
from src.replication_engine.identifiers import is_valid_identifier
from src.replication_engine.models import ArticleDescriptor, PublicationMetadata, TargetDescriptor
from src.replication_engine.state.ports import ServerHandle

VARIANT_BY_KIND: dict[PublicationKind, ArticleVariant] = {
    PublicationKind.TRANSACTIONAL: ArticleVariant.LOG_BASED,
    PublicationKind.SNAPSHOT: ArticleVariant.LOG_BASED,
    PublicationKind.MERGE: ArticleVariant.TABLE_BASED,
}


def select_variant(kind: PublicationKind | str) -> ArticleVariant:
    """Map a publication kind to its article variant; raises ValueError for unknown kinds."""
    return VARIANT_BY_KIND[PublicationKind(kind)]


class ArticleBuilder:
    """Build an unconfigured ArticleDescriptor for one target."""

    def build(
        self,
        target: TargetDescriptor,
        publication: PublicationMetadata,
        server: ServerHandle,
    ) -> ArticleDescriptor:
        try:
            variant = select_variant(publication.kind)
        except ValueError as error:
            raise ArticleConstructionError(
                f"Unsupported publication kind {publication.kind!r} for publication "
                f"{publication.name} on {target.instance}; cannot build article {target.name}",
                instance=target.instance,
                publication=target.publication,
                article=target.name,
            ) from error

        identity = {
            "name": target.name,
            "database": target.database,
            "source_object": target.name,
            "source_schema": target.schema,
            "publication": publication.name,
        }
        invalid = sorted(key for key, value in identity.items() if not is_valid_identifier(value))
        if invalid:
            raise ArticleConstructionError(
                f"Cannot build article {target.name} for publication {target.publication} "
                f"on {target.instance}: invalid {', '.join(invalid)}",
                instance=target.instance,
                publication=target.publication,
                article=target.name,
            )

        return ArticleDescriptor(variant=variant, connection=server, **identity)
