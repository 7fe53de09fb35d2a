"""Read publications and articles from a publisher database."""

from __future__ import annotations

from src.enums import ArticleVariant, PublicationKind
from src.replication_engine.models import ArticleDescriptor, Credential, PublicationMetadata
from src.replication_engine.options import CreationScriptOptions
from src.replication_engine.sql import (
    SQL_SELECT_MERGE_PUBLICATION,
    SQL_SELECT_TRANSACTIONAL_PUBLICATION,
    SQL_SYSTEM_TABLE_EXISTS,
    sql_count_article,
    sql_select_article,
)
from src.replication_engine.state.ports import ServerHandle

# syspublications.repl_freq
_KIND_BY_REPLICATION_FREQUENCY: dict[int, PublicationKind] = {
    0: PublicationKind.TRANSACTIONAL,
    1: PublicationKind.SNAPSHOT,
}


def _system_table_exists(server: ServerHandle, database: str, table: str) -> bool:
    rows = server.fetch_all(database, SQL_SYSTEM_TABLE_EXISTS, (f"dbo.{table}",))
    return bool(rows) and rows[0][0] is not None


class PublicationReader:
    """
    Look up a publication by name.

    Transactional and snapshot publications live in `syspublications`; merge
    publications in `sysmergepublications`. A database that was never enabled
    for publishing has neither table and therefore no publications.
    """

    def lookup(
        self,
        server: ServerHandle,
        database: str,
        publication: str,
        credential: Credential | None = None,
    ) -> PublicationMetadata | None:
        if _system_table_exists(server, database, "syspublications"):
            rows = server.fetch_all(database, SQL_SELECT_TRANSACTIONAL_PUBLICATION, (publication,))
            if rows:
                name, frequency = rows[0]
                kind = _KIND_BY_REPLICATION_FREQUENCY.get(int(frequency), str(frequency))
                return PublicationMetadata(name=name, kind=kind, database=database)

        if _system_table_exists(server, database, "sysmergepublications"):
            rows = server.fetch_all(database, SQL_SELECT_MERGE_PUBLICATION, (publication,))
            if rows:
                return PublicationMetadata(
                    name=rows[0][0], kind=PublicationKind.MERGE, database=database
                )

        return None


class ArticleReader:
    """Existence check and read-back of an article, on the article's own connection."""

    def exists(self, article: ArticleDescriptor) -> bool:
        rows = article.connection.fetch_all(
            article.database,
            sql_count_article(article.variant),
            (article.publication, article.name),
        )
        return bool(rows) and int(rows[0][0]) > 0

    def read(self, article: ArticleDescriptor) -> ArticleDescriptor | None:
        rows = article.connection.fetch_all(
            article.database,
            sql_select_article(article.variant),
            (article.publication, article.name),
        )
        if not rows:
            return None

        name, source_schema, source_object, filter_clause, schema_option = rows[0]
        return ArticleDescriptor(
            variant=article.variant,
            connection=article.connection,
            name=name,
            database=article.database,
            source_object=source_object,
            source_schema=source_schema,
            publication=article.publication,
            filter_clause=filter_clause or None,
            creation_script_options=_decode_schema_option(schema_option),
            is_existing_object=True,
        )


def _decode_schema_option(value: bytes | int | None) -> CreationScriptOptions | None:
    """`schema_option` is binary(8); pyodbc returns bytes."""
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = int.from_bytes(value, byteorder="big")
    return CreationScriptOptions(int(value))
