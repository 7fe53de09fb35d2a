"""
ArticleConfigurator

Applies the optional fields to a built article, in order:
  1) creation-script options (if supplied)
  2) filter clause (if supplied)

No remote calls are made. A failure names the field that could not be applied.
"""

from __future__ import annotations

from src.enums import ArticleVariant
from src.replication_engine.errors import ArticleConfigurationError
from src.replication_engine.models import ArticleDescriptor, TargetDescriptor
from src.replication_engine.options import CreationScriptOptions

CREATION_SCRIPT_OPTIONS_FIELD = "creation_script_options"
FILTER_CLAUSE_FIELD = "filter_clause"

# Merge articles are synchronised by triggers, not by replication stored procedures.
_UNSUPPORTED_OPTIONS: dict[ArticleVariant, CreationScriptOptions] = {
    ArticleVariant.LOG_BASED: CreationScriptOptions.NONE,
    ArticleVariant.TABLE_BASED: CreationScriptOptions.CUSTOM_PROCEDURES,
}


class ArticleConfigurator:
    """Set creation-script options and filter clause on an ArticleDescriptor."""

    def configure(self, article: ArticleDescriptor, target: TargetDescriptor) -> ArticleDescriptor:
        if target.creation_script_options is not None:
            self._apply_creation_script_options(article, target.creation_script_options)
        if target.filter_clause is not None:
            self._apply_filter_clause(article, target.filter_clause)
        return article

    # ---------- helpers ----------

    @staticmethod
    def _fail(article: ArticleDescriptor, field_name: str, reason: str) -> ArticleConfigurationError:
        return ArticleConfigurationError(
            f"Cannot set {field_name} on article {article.name} in publication "
            f"{article.publication} on {article.connection.instance}: {reason}",
            field_name=field_name,
            instance=article.connection.instance,
            publication=article.publication,
            article=article.name,
        )

    def _apply_creation_script_options(
        self, article: ArticleDescriptor, options: CreationScriptOptions
    ) -> None:
        unsupported = options & _UNSUPPORTED_OPTIONS[article.variant]
        if unsupported:
            raise self._fail(
                article,
                CREATION_SCRIPT_OPTIONS_FIELD,
                f"{unsupported.name} is not supported for {article.variant} articles",
            )
        article.creation_script_options = options

    def _apply_filter_clause(self, article: ArticleDescriptor, filter_clause: str) -> None:
        predicate = filter_clause.strip()
        if not predicate:
            raise self._fail(article, FILTER_CLAUSE_FIELD, "filter clause is empty")
        article.filter_clause = predicate
