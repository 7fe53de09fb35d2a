"""Shared constant values used across the replication tooling."""

from typing import Final

FILTER_KEYWORD: Final[str] = "WHERE"
MAX_IDENTIFIER_LENGTH: Final[int] = 128  # sysname
PASSWORD_ENVIRONMENT_VARIABLE: Final[str] = "REPLICATION_PASSWORD"
