from __future__ import annotations

import src.replication_engine.orchestrator as orch_mod  # for monkeypatching LOGGER
from src.enums import PublicationKind
from src.replication_engine.build.article_builder import ArticleBuilder
from src.replication_engine.build.configurator import ArticleConfigurator
from src.replication_engine.engine import Engine
from src.replication_engine.execute.ports import ApplyStatus
from src.replication_engine.execute.replication_executor import ReplicationExecutor
from src.replication_engine.models import ArticleRequest, PublicationMetadata
from src.replication_engine.state.connection import SqlServerResolver
from src.replication_engine.state.replication_reader import ArticleReader, PublicationReader
from src.replication_engine.validation.validator import ParameterValidator

# ---------- fakes ----------


class FakeServer:
    instance = "srv1"

    def close(self) -> None:
        pass


class FakeResolver:
    def resolve(self, instance, credential):
        return FakeServer()


class FakePublicationReader:
    def lookup(self, server, database, publication, credential=None):
        return PublicationMetadata(publication, PublicationKind.SNAPSHOT, database)


class FakeStore:
    def __init__(self) -> None:
        self.calls: list[str] = []
        self.created = None

    def exists(self, article):
        return self.created is not None

    def read(self, article):
        return self.created

    def create_article(self, article):
        self.calls.append("create")
        self.created = article

    def refresh_subscriptions(self, article):
        self.calls.append("refresh")

    def describe_create(self, article):
        return "create"

    def describe_refresh(self, article):
        return "refresh"


class FakeLogger:
    def info(self, msg: str, *args, **kwargs) -> None:
        pass

    warning = error = info


# ---------- tests ----------


def test_default_components_target_sql_server() -> None:
    engine = Engine()

    assert isinstance(engine.validator, ParameterValidator)
    assert isinstance(engine.server_resolver, SqlServerResolver)
    assert isinstance(engine.publication_reader, PublicationReader)
    assert isinstance(engine.article_reader, ArticleReader)
    assert isinstance(engine.builder, ArticleBuilder)
    assert isinstance(engine.configurator, ArticleConfigurator)
    assert isinstance(engine.executor, ReplicationExecutor)


def test_injected_components_are_used(monkeypatch) -> None:
    monkeypatch.setattr(orch_mod, "LOGGER", FakeLogger(), raising=True)
    store = FakeStore()
    engine = Engine(
        server_resolver=FakeResolver(),
        publication_reader=FakePublicationReader(),
        article_reader=store,
        executor=store,
    )

    report = engine.add_article(
        ArticleRequest(instances=["srv1"], database="pubs", publication="snap", name="titles")
    )

    assert store.calls == ["create", "refresh"]
    assert report.results[0].status == ApplyStatus.OK
    assert report.results[0].article is store.created
