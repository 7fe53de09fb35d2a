"""
Replication Executor

Façade over the replication stored procedures.

- All methods accept an ArticleDescriptor and run on its own connection.
- This module is the single place that chooses which procedure creates which variant.
- Values are always bound as parameters; `describe_*` renders an equivalent
  statement with escaped literals for logs and simulate-only reports.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from src.enums import ArticleVariant
from src.logger import LOGGER
from src.replication_engine.errors import brief_error
from src.replication_engine.identifiers import escape_sql_literal
from src.replication_engine.models import ArticleDescriptor
from src.replication_engine.options import CreationScriptOptions
from src.replication_engine.sql import (
    SQL_ADD_ARTICLE,
    SQL_ADD_MERGE_ARTICLE,
    SQL_ARTICLE_FILTER,
    SQL_ARTICLE_VIEW,
    SQL_DROP_ARTICLE,
    SQL_REFRESH_SUBSCRIPTIONS,
)

_ADD_PROCEDURE: dict[ArticleVariant, tuple[str, str]] = {
    ArticleVariant.LOG_BASED: ("sp_addarticle", SQL_ADD_ARTICLE),
    ArticleVariant.TABLE_BASED: ("sp_addmergearticle", SQL_ADD_MERGE_ARTICLE),
}

_ADD_PARAMETER_NAMES: dict[ArticleVariant, tuple[str, ...]] = {
    ArticleVariant.LOG_BASED: (
        "publication",
        "article",
        "source_owner",
        "source_object",
        "filter_clause",
        "schema_option",
    ),
    ArticleVariant.TABLE_BASED: (
        "publication",
        "article",
        "source_owner",
        "source_object",
        "subset_filterclause",
        "schema_option",
    ),
}


def _schema_option(article: ArticleDescriptor) -> int | None:
    options = article.creation_script_options
    return None if options is None else int(options)


def _render_value(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, int):
        return CreationScriptOptions(value).as_hex()
    return f"N'{escape_sql_literal(str(value))}'"


def _render_exec(procedure: str, names: Sequence[str], values: Sequence[Any]) -> str:
    assignments = ", ".join(
        f"@{name} = {_render_value(value)}" for name, value in zip(names, values, strict=True)
    )
    return f"EXEC {procedure} {assignments};"


def filter_object_names(article: ArticleDescriptor) -> tuple[str, str]:
    """Names of the filter procedure and synchronisation view for a filtered article."""
    return f"FLTR_{article.name}_1", f"SYNC_{article.name}_1"


@dataclass(frozen=True)
class _Statement:
    procedure: str
    sql_text: str
    parameter_names: tuple[str, ...]
    params: tuple[Any, ...]

    def render(self) -> str:
        return _render_exec(self.procedure, self.parameter_names, self.params)


class ReplicationExecutor:
    """Create articles and refresh subscriptions via T-SQL."""

    # ---------- helpers ----------

    @staticmethod
    def _create_statements(article: ArticleDescriptor) -> list[_Statement]:
        """
        Statements that add the article, in order.

        A filtered log-based article also needs its filter procedure and
        synchronisation view; merge articles carry the filter on the article itself.
        """
        procedure, sql_text = _ADD_PROCEDURE[article.variant]
        statements = [
            _Statement(
                procedure,
                sql_text,
                _ADD_PARAMETER_NAMES[article.variant],
                (
                    article.publication,
                    article.name,
                    article.source_schema,
                    article.source_object,
                    article.filter_clause,
                    _schema_option(article),
                ),
            )
        ]
        if article.variant is ArticleVariant.LOG_BASED and article.filter_clause:
            filter_name, view_name = filter_object_names(article)
            statements.append(
                _Statement(
                    "sp_articlefilter",
                    SQL_ARTICLE_FILTER,
                    ("publication", "article", "filter_name", "filter_clause"),
                    (article.publication, article.name, filter_name, article.filter_clause),
                )
            )
            statements.append(
                _Statement(
                    "sp_articleview",
                    SQL_ARTICLE_VIEW,
                    ("publication", "article", "view_name", "filter_clause"),
                    (article.publication, article.name, view_name, article.filter_clause),
                )
            )
        return statements

    @staticmethod
    def _run(article: ArticleDescriptor, sql_text: str, params: Sequence[Any]) -> None:
        article.connection.execute(article.database, sql_text, params)

    def _drop_partial_article(self, article: ArticleDescriptor, cause: Exception) -> None:
        """Remove an article whose filter objects could not be created."""
        try:
            self._run(article, SQL_DROP_ARTICLE, (article.publication, article.name))
        except Exception as error:
            LOGGER.error(
                "Failed to drop partially created article %s from publication %s on %s: %s",
                article.name,
                article.publication,
                article.connection.instance,
                brief_error(error),
            )
            cause.add_note(f"Article {article.name} was left in publication {article.publication}")

    # ---------- create ----------

    def create_article(self, article: ArticleDescriptor) -> None:
        """
        Add the article to its publication.

        Each procedure commits on its own; if a follow-up statement fails, the
        article added by the first one is dropped again before the error propagates.
        """
        add, *follow_ups = self._create_statements(article)
        self._run(article, add.sql_text, add.params)
        try:
            for statement in follow_ups:
                self._run(article, statement.sql_text, statement.params)
        except Exception as error:
            self._drop_partial_article(article, error)
            raise

    def describe_create(self, article: ArticleDescriptor) -> str:
        return " ".join(statement.render() for statement in self._create_statements(article))

    # ---------- refresh ----------

    def refresh_subscriptions(self, article: ArticleDescriptor) -> None:
        self._run(article, SQL_REFRESH_SUBSCRIPTIONS, (article.publication,))

    def describe_refresh(self, article: ArticleDescriptor) -> str:
        return _render_exec("sp_refreshsubscriptions", ("publication",), (article.publication,))
