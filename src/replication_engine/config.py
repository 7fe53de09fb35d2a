"""Load article requests from a YAML file of named entries.

Example:

    customers:
      instances: [sql01, sql02]
      database: Sales
      publication: SalesPub
      name: customers
      schema: ${DEFAULT_SCHEMA}
      filter: "region = 'EU'"
      options: [NonClusteredIndexes]
      include_default_options: true
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from src import settings
from src.replication_engine.models import ArticleRequest, Credential
from src.replication_engine.options import build_creation_script_options

_KNOWN_KEYS = frozenset(
    {
        "instances",
        "database",
        "publication",
        "name",
        "schema",
        "filter",
        "options",
        "include_default_options",
    }
)
_REQUIRED_KEYS = ("instances", "database", "publication", "name")


def load_article_config(
    path: str | Path,
    key: str,
    credential: Credential | None = None,
) -> ArticleRequest:
    """Load and resolve the article request stored under `key`."""
    with Path(path).open("r") as f:
        full_config = yaml.safe_load(f) or {}

    if key not in full_config:
        raise ValueError(f"Article '{key}' not found in config {path}.")

    entry = full_config[key]
    if not isinstance(entry, dict):
        raise ValueError(f"Article '{key}' in config {path} must be a mapping.")

    return _to_request(entry, credential)


def _to_request(conf: dict[str, Any], credential: Credential | None) -> ArticleRequest:
    """Build an ArticleRequest from one resolved config entry."""
    unknown = sorted(set(conf) - _KNOWN_KEYS)
    if unknown:
        raise ValueError(f"Unknown article config key(s): {unknown}")

    missing = [k for k in _REQUIRED_KEYS if conf.get(k) in (None, "", [])]
    if missing:
        raise ValueError(f"Missing article config key(s): {missing}")

    filter_clause = conf.get("filter")
    if filter_clause is not None and not isinstance(filter_clause, str):
        raise ValueError(
            f"Article config key 'filter' must be a string, got {type(filter_clause).__name__}"
        )

    instances = conf["instances"]
    if not isinstance(instances, list):
        instances = [instances]

    options = None
    if "options" in conf or "include_default_options" in conf:
        options = build_creation_script_options(
            names=conf.get("options") or (),
            include_defaults=bool(conf.get("include_default_options", True)),
        )

    return ArticleRequest(
        instances=tuple(_resolve(i, default="") for i in instances),
        database=_resolve(conf["database"], default=""),
        publication=_resolve(conf["publication"], default=""),
        name=_resolve(conf["name"], default=""),
        schema=_resolve(conf.get("schema"), default=settings.DEFAULT_SCHEMA),
        credential=credential,
        filter_clause=filter_clause,
        creation_script_options=options,
    )


def _resolve(value: Any, default: str) -> str:
    """Resolve '${NAME}' from settings, then the environment, else the default."""
    if value is None or value == "":
        return default
    value = str(value)
    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        return getattr(settings, var_name, None) or os.getenv(var_name, default)
    return value
