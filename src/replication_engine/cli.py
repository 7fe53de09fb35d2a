"""Command line entry point: add an article to a publication on one or more instances."""

from __future__ import annotations

import os
import sys
from argparse import ArgumentParser, Namespace
from collections.abc import Sequence

from src import settings
from src.constants import PASSWORD_ENVIRONMENT_VARIABLE
from src.enums import ReportingMode
from src.replication_engine.config import load_article_config
from src.replication_engine.engine import Engine
from src.replication_engine.execute.ports import ApplyStatus
from src.replication_engine.models import ArticleRequest, Credential
from src.replication_engine.options import build_creation_script_options
from src.replication_engine.orchestrator import ProvisioningOptions, ProvisioningReport


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="replication-articles")
    commands = parser.add_subparsers(dest="command", required=True)

    add = commands.add_parser("add", help="Add an article to an existing publication.")
    add.add_argument("--instance", dest="instances", action="append", default=[])
    add.add_argument("--database")
    add.add_argument("--publication")
    add.add_argument("--name", help="Name of the table to publish; also the article name.")
    add.add_argument("--schema", default=settings.DEFAULT_SCHEMA)
    add.add_argument("--filter", dest="filter_clause", help="Row filter without the WHERE keyword.")
    add.add_argument("--option", dest="options", action="append", default=[])
    add.add_argument("--no-default-options", dest="include_defaults", action="store_false")
    add.add_argument(
        "--username",
        help=f"SQL login; the password is read from ${PASSWORD_ENVIRONMENT_VARIABLE}.",
    )
    add.add_argument("--config", help="YAML file of named article requests.")
    add.add_argument("--key", help="Entry to use from --config.")
    add.add_argument("--whatif", action="store_true", help="Simulate only; create nothing.")
    add.add_argument("--strict", action="store_true", help="Report failures with full detail.")
    return parser


def _credential(args: Namespace) -> Credential | None:
    if not args.username:
        return None
    return Credential(args.username, os.getenv(PASSWORD_ENVIRONMENT_VARIABLE, ""))


def _request(args: Namespace, parser: ArgumentParser) -> ArticleRequest:
    credential = _credential(args)
    if args.config:
        if not args.key:
            parser.error("--key is required with --config")
        return load_article_config(args.config, args.key, credential)

    required = {
        "--instance": args.instances,
        "--database": args.database,
        "--publication": args.publication,
        "--name": args.name,
    }
    missing = [flag for flag, value in required.items() if not value]
    if missing:
        parser.error(f"missing required argument(s): {', '.join(missing)}")

    options = None
    if args.options or not args.include_defaults:
        options = build_creation_script_options(
            args.options, include_defaults=args.include_defaults
        )

    return ArticleRequest(
        instances=tuple(args.instances),
        database=args.database,
        publication=args.publication,
        name=args.name,
        schema=args.schema,
        credential=credential,
        filter_clause=args.filter_clause,
        creation_script_options=options,
    )


def format_report(report: ProvisioningReport) -> list[str]:
    """One line per target."""
    lines: list[str] = []
    for result in report.results:
        if result.status == ApplyStatus.OK and result.article is not None:
            detail = f"{result.article.article_key} ({result.article.variant})"
        elif result.failure is not None:
            detail = f"[{result.failure.category}] {result.failure.message}"
        else:
            skipped = [s.message for s in result.steps if s.status == ApplyStatus.SKIPPED]
            detail = "; ".join(skipped)
        lines.append(f"{result.instance}\t{result.status}\t{detail}")
    return lines


def main(argv: Sequence[str] | None = None, engine: Engine | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        request = _request(args, parser)
    except ValueError as error:
        parser.error(str(error))

    options = ProvisioningOptions(
        simulate_only=args.whatif,
        reporting_mode=ReportingMode.STRICT if args.strict else ReportingMode.FRIENDLY,
    )
    report = (engine or Engine()).add_article(request, options)
    for line in format_report(report):
        print(line)
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
