"""
Engine: high-level entry point for adding replication articles.

Responsibilities
----------------
- Wire default components (validator, SQL Server resolver and readers, builder,
  configurator, committer).
- Expose a single entry point:
    - add_article(request, options)

Notes:
-----
- No T-SQL here; work is delegated to injected components.
- Defaults are provided, but everything can be overridden for testing or custom behaviour.
"""

from __future__ import annotations

from src.replication_engine.build.article_builder import ArticleBuilder
from src.replication_engine.build.configurator import ArticleConfigurator
from src.replication_engine.execute.committer import ArticleCommitter
from src.replication_engine.execute.ports import ArticleExecutor
from src.replication_engine.execute.replication_executor import ReplicationExecutor
from src.replication_engine.models import ArticleRequest
from src.replication_engine.orchestrator import (
    Orchestrator,
    ProvisioningOptions,
    ProvisioningReport,
)
from src.replication_engine.state import ports
from src.replication_engine.state.connection import SqlServerResolver
from src.replication_engine.state.replication_reader import ArticleReader, PublicationReader
from src.replication_engine.validation.validator import ParameterValidator


class Engine:
    """
    High-level entry point.

    You can:
      - pass your own components (for custom behaviour), or
      - rely on defaults (SQL Server over pyodbc).
    """

    def __init__(
        self,
        validator: ParameterValidator | None = None,
        server_resolver: ports.ServerResolver | None = None,
        publication_reader: ports.PublicationReader | None = None,
        article_reader: ports.ArticleReader | None = None,
        builder: ArticleBuilder | None = None,
        configurator: ArticleConfigurator | None = None,
        executor: ArticleExecutor | None = None,
    ) -> None:
        self.validator = validator or ParameterValidator()
        self.server_resolver = server_resolver or SqlServerResolver()
        self.publication_reader = publication_reader or PublicationReader()
        self.article_reader = article_reader or ArticleReader()
        self.builder = builder or ArticleBuilder()
        self.configurator = configurator or ArticleConfigurator()
        self.executor = executor or ReplicationExecutor()

        self.orchestrator = Orchestrator(
            validator=self.validator,
            server_resolver=self.server_resolver,
            publication_reader=self.publication_reader,
            article_reader=self.article_reader,
            builder=self.builder,
            configurator=self.configurator,
            committer=ArticleCommitter(reader=self.article_reader, executor=self.executor),
        )

    def add_article(
        self,
        request: ArticleRequest,
        options: ProvisioningOptions | None = None,
    ) -> ProvisioningReport:
        """Add the requested article on every instance in the request."""
        return self.orchestrator.run(request, options or ProvisioningOptions())
