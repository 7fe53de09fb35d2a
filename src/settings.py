"""Configuration values sourced from environment variables."""

import os
from typing import Final

LOG_LEVEL: Final[str] = os.getenv(key="LOG_LEVEL", default="INFO")
LOGGER_NAME: Final[str] = os.getenv(key="LOGGER_NAME", default="replication-articles")
LOG_COLOUR_ENABLED: Final[bool] = bool(
    os.getenv(key="LOG_COLOUR_ENABLED", default="True").upper() == "TRUE"
)

ODBC_DRIVER: Final[str] = os.getenv(key="ODBC_DRIVER", default="ODBC Driver 18 for SQL Server")
CONNECTION_TIMEOUT: Final[int] = int(os.getenv(key="CONNECTION_TIMEOUT", default="30"))
TRUST_SERVER_CERTIFICATE: Final[bool] = bool(
    os.getenv(key="TRUST_SERVER_CERTIFICATE", default="True").upper() == "TRUE"
)
DEFAULT_SCHEMA: Final[str] = os.getenv(key="DEFAULT_SCHEMA", default="dbo")
