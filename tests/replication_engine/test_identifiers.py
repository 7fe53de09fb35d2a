import pytest

from src.replication_engine import identifiers as ids


# --- quote_identifier ---

def test_quote_identifier_brackets_and_escapes_closing_bracket():
    assert ids.quote_identifier("Northwind") == "[Northwind]"
    assert ids.quote_identifier("we]ird") == "[we]]ird]"
    assert ids.quote_identifier("") == "[]"

def test_quote_identifier_rejects_none():
    with pytest.raises(ValueError):
        ids.quote_identifier(None)  # type: ignore[arg-type]


# --- escape_sql_literal ---

def test_escape_sql_literal_doubles_single_quotes():
    assert ids.escape_sql_literal("city = 'seattle'") == "city = ''seattle''"

def test_escape_sql_literal_handles_none_and_empty():
    assert ids.escape_sql_literal("") == ""
    assert ids.escape_sql_literal(None) == ""


# --- format_* ---

def test_format_object_name_and_article_key():
    assert ids.format_object_name("Northwind", "dbo", "publishers") == "Northwind.dbo.publishers"
    assert ids.format_article_key("testPub", "publishers") == "testPub/publishers"


# --- is_valid_identifier ---

@pytest.mark.parametrize("value", ["publishers", "a" * 128, "with space"])
def test_is_valid_identifier_accepts(value):
    assert ids.is_valid_identifier(value)

@pytest.mark.parametrize("value", [None, "", "   ", "a" * 129])
def test_is_valid_identifier_rejects(value):
    assert not ids.is_valid_identifier(value)
