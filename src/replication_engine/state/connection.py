"""
SQL Server connections.

`SqlServerResolver` opens one pyodbc connection per instance; `SqlServerConnection`
is the handle the rest of the engine uses. Every batch first switches to the
requested database so a single handle serves lookups in any database.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pyodbc

from src import settings
from src.replication_engine.identifiers import quote_identifier
from src.replication_engine.models import Credential


def _brace_value(value: str) -> str:
    """Wrap an ODBC attribute value in braces, doubling any closing brace."""
    escaped = value.replace("}", "}}")
    return "{" + escaped + "}"


def build_connection_string(instance: str, credential: Credential | None) -> str:
    """Render the ODBC connection string for `instance`."""
    parts = [
        f"DRIVER={{{settings.ODBC_DRIVER}}}",
        f"SERVER={instance}",
    ]
    if credential is None:
        parts.append("Trusted_Connection=yes")
    else:
        parts.append(f"UID={credential.username}")
        parts.append(f"PWD={_brace_value(credential.password)}")
    if settings.TRUST_SERVER_CERTIFICATE:
        parts.append("TrustServerCertificate=yes")
    parts.append(f"Connection Timeout={settings.CONNECTION_TIMEOUT}")
    return ";".join(parts) + ";"


class SqlServerConnection:
    """Thin wrapper over a pyodbc connection bound to one instance."""

    def __init__(self, instance: str, connection: pyodbc.Connection) -> None:
        self.instance = instance
        self._connection = connection

    @staticmethod
    def _use(cursor: pyodbc.Cursor, database: str) -> None:
        cursor.execute(f"USE {quote_identifier(database)};")

    def fetch_all(self, database: str, sql: str, params: Sequence[Any] = ()) -> list[tuple]:
        cursor = self._connection.cursor()
        try:
            self._use(cursor, database)
            cursor.execute(sql, *params)
            return [tuple(row) for row in cursor.fetchall()]
        finally:
            cursor.close()

    def execute(self, database: str, sql: str, params: Sequence[Any] = ()) -> None:
        cursor = self._connection.cursor()
        try:
            self._use(cursor, database)
            cursor.execute(sql, *params)
        finally:
            cursor.close()

    def close(self) -> None:
        self._connection.close()


class SqlServerResolver:
    """Open a connection to an instance, with autocommit for the replication procedures."""

    def resolve(self, instance: str, credential: Credential | None) -> SqlServerConnection:
        connection = pyodbc.connect(
            build_connection_string(instance, credential),
            autocommit=True,
        )
        return SqlServerConnection(instance, connection)
