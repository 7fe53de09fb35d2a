"""
Identifier utilities for the replication engine.

This module defines:
- Helpers to quote SQL Server identifiers and escape N'...' literals.
- Human-readable keys for objects and articles used in messages.
- A validity check for sysname-sized identifiers.

Conventions:
- Verbs: quote_*, escape_*, format_*, is_*.
- Identifiers are quoted with square brackets, doubling any embedded `]`.
"""

from __future__ import annotations

from src.constants import MAX_IDENTIFIER_LENGTH


def quote_identifier(identifier: str) -> str:
    """Quote a single SQL Server identifier with brackets, doubling any embedded `]`."""
    if identifier is None:
        raise ValueError("Identifier must not be None.")
    text = str(identifier)
    return f"[{text.replace(']', ']]')}]"


def escape_sql_literal(value: str | None) -> str:
    """
    Escape a Python string for use inside an N'...' literal.
    Doubles single quotes. Empty/None → empty string.
    """
    return (value or "").replace("'", "''")


def format_object_name(database: str, schema: str, name: str) -> str:
    """Unquoted 'database.schema.object' for messages."""
    return f"{database}.{schema}.{name}"


def format_article_key(publication: str, article: str) -> str:
    """Unquoted 'publication/article' for messages."""
    return f"{publication}/{article}"


def is_valid_identifier(identifier: str | None) -> bool:
    """True when the identifier is non-blank and fits in a sysname."""
    if identifier is None:
        return False
    text = str(identifier)
    return text.strip() != "" and len(text) <= MAX_IDENTIFIER_LENGTH
