from src.enums import ArticleVariant, PublicationKind
from src.replication_engine.models import ArticleDescriptor, ArticleRequest, Credential


def test_targets_expand_one_per_instance_in_order():
    credential = Credential("repl_admin", "secret")
    request = ArticleRequest(
        instances=("srv1", "srv2"),
        database="Northwind",
        publication="testPub",
        name="publishers",
        credential=credential,
        filter_clause="city = 'seattle'",
    )

    targets = request.targets()

    assert [t.instance for t in targets] == ["srv1", "srv2"]
    assert all(t.schema == "dbo" for t in targets)
    assert all(t.credential is credential for t in targets)
    assert all(t.filter_clause == "city = 'seattle'" for t in targets)
    assert targets[0].article_key == "testPub/publishers"


def test_credential_password_is_hidden_from_repr():
    assert "secret" not in repr(Credential("repl_admin", "secret"))


def test_article_descriptor_keys():
    article = ArticleDescriptor(
        variant=ArticleVariant.LOG_BASED,
        connection=None,
        name="publishers",
        database="Northwind",
        source_object="publishers",
        source_schema="dbo",
        publication="testPub",
    )
    assert article.article_key == "testPub/publishers"
    assert article.source_object_name == "Northwind.dbo.publishers"
    assert article.is_existing_object is False


def test_only_push_style_kinds_refresh_subscriptions():
    assert PublicationKind.TRANSACTIONAL.requires_subscription_refresh
    assert PublicationKind.SNAPSHOT.requires_subscription_refresh
    assert not PublicationKind.MERGE.requires_subscription_refresh
