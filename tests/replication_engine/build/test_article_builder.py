import pytest

from src.enums import ArticleVariant, PublicationKind
from src.replication_engine.build.article_builder import ArticleBuilder, select_variant
from src.replication_engine.errors import ArticleConstructionError, FailureCategory
from src.replication_engine.models import PublicationMetadata, TargetDescriptor


class FakeServer:
    instance = "srv1"


def make_target(**overrides) -> TargetDescriptor:
    base = dict(instance="srv1", database="Northwind", publication="testPub", name="publishers")
    base.update(overrides)
    return TargetDescriptor(**base)


def make_publication(kind) -> PublicationMetadata:
    return PublicationMetadata(name="testPub", kind=kind, database="Northwind")


@pytest.mark.parametrize(
    ("kind", "variant"),
    [
        (PublicationKind.TRANSACTIONAL, ArticleVariant.LOG_BASED),
        (PublicationKind.SNAPSHOT, ArticleVariant.LOG_BASED),
        (PublicationKind.MERGE, ArticleVariant.TABLE_BASED),
        ("Merge", ArticleVariant.TABLE_BASED),
    ],
)
def test_variant_follows_publication_kind(kind, variant):
    assert select_variant(kind) is variant

    article = ArticleBuilder().build(make_target(), make_publication(kind), FakeServer())
    assert article.variant is variant


def test_identity_fields_are_populated():
    server = FakeServer()
    article = ArticleBuilder().build(
        make_target(schema="sales"), make_publication(PublicationKind.TRANSACTIONAL), server
    )

    assert article.connection is server
    assert article.name == "publishers"
    assert article.source_object == "publishers"
    assert article.source_schema == "sales"
    assert article.database == "Northwind"
    assert article.publication == "testPub"
    assert article.filter_clause is None
    assert article.creation_script_options is None
    assert article.is_existing_object is False


@pytest.mark.parametrize("kind", ["Peer-to-peer", "", "transactional"])
def test_unsupported_kind_is_a_construction_error(kind):
    with pytest.raises(ArticleConstructionError, match="Unsupported publication kind") as caught:
        ArticleBuilder().build(make_target(), make_publication(kind), FakeServer())

    assert caught.value.category is FailureCategory.CONSTRUCTION
    assert caught.value.publication == "testPub"
    assert caught.value.article == "publishers"


def test_invalid_identity_is_a_construction_error_naming_the_fields():
    target = make_target(name="x" * 200, schema=" ")
    with pytest.raises(ArticleConstructionError) as caught:
        ArticleBuilder().build(target, make_publication(PublicationKind.MERGE), FakeServer())

    assert "name" in caught.value.message
    assert "source_schema" in caught.value.message
    assert "testPub" in caught.value.message
