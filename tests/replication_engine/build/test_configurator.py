import pytest

from src.enums import ArticleVariant
from src.replication_engine.build.configurator import (
    CREATION_SCRIPT_OPTIONS_FIELD,
    FILTER_CLAUSE_FIELD,
    ArticleConfigurator,
)
from src.replication_engine.errors import ArticleConfigurationError, FailureCategory
from src.replication_engine.models import ArticleDescriptor, TargetDescriptor
from src.replication_engine.options import build_creation_script_options


class FakeServer:
    instance = "srv1"


def make_article(variant=ArticleVariant.LOG_BASED) -> ArticleDescriptor:
    return ArticleDescriptor(
        variant=variant,
        connection=FakeServer(),
        name="publishers",
        database="Northwind",
        source_object="publishers",
        source_schema="dbo",
        publication="testPub",
    )


def make_target(**overrides) -> TargetDescriptor:
    base = dict(instance="srv1", database="Northwind", publication="testPub", name="publishers")
    base.update(overrides)
    return TargetDescriptor(**base)


def test_no_optional_fields_leaves_article_untouched():
    article = make_article()
    ArticleConfigurator().configure(article, make_target())

    assert article.filter_clause is None
    assert article.creation_script_options is None


def test_filter_and_options_are_assigned():
    options = build_creation_script_options(["NonClusteredIndexes"])
    article = make_article()

    result = ArticleConfigurator().configure(
        article, make_target(filter_clause="city = 'seattle'", creation_script_options=options)
    )

    assert result is article
    assert article.filter_clause == "city = 'seattle'"
    assert article.creation_script_options == options


def test_filter_is_stripped_of_surrounding_whitespace():
    article = make_article()
    ArticleConfigurator().configure(article, make_target(filter_clause="  city = 'seattle'  "))
    assert article.filter_clause == "city = 'seattle'"


def test_blank_filter_names_the_filter_field():
    with pytest.raises(ArticleConfigurationError) as caught:
        ArticleConfigurator().configure(make_article(), make_target(filter_clause="   "))

    assert caught.value.field_name == FILTER_CLAUSE_FIELD
    assert caught.value.category is FailureCategory.CONFIGURATION
    assert FILTER_CLAUSE_FIELD in caught.value.message


def test_custom_procedures_are_incompatible_with_merge_articles():
    article = make_article(ArticleVariant.TABLE_BASED)
    target = make_target(
        creation_script_options=build_creation_script_options(["CustomProcedures"]),
        filter_clause="city = 'seattle'",
    )

    with pytest.raises(ArticleConfigurationError) as caught:
        ArticleConfigurator().configure(article, target)

    assert caught.value.field_name == CREATION_SCRIPT_OPTIONS_FIELD
    assert "CUSTOM_PROCEDURES" in caught.value.message
    # options are applied first; the filter is never reached
    assert article.filter_clause is None


def test_merge_article_accepts_the_default_options():
    options = build_creation_script_options()
    article = make_article(ArticleVariant.TABLE_BASED)

    ArticleConfigurator().configure(article, make_target(creation_script_options=options))

    assert article.creation_script_options == options
