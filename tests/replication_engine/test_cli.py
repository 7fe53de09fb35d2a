from __future__ import annotations

import pytest

from src.enums import ArticleVariant, ReportingMode
from src.replication_engine.cli import format_report, main
from src.replication_engine.errors import FailureCategory
from src.replication_engine.execute.ports import ApplyStatus, PipelineStep, StepResult
from src.replication_engine.models import ArticleDescriptor
from src.replication_engine.options import CreationScriptOptions
from src.replication_engine.orchestrator import ProvisioningReport, TargetFailure, TargetResult

# ---------- fakes ----------


class FakeEngine:
    def __init__(self, results: tuple[TargetResult, ...] = ()) -> None:
        self.results = results
        self.calls = []

    def add_article(self, request, options=None):
        self.calls.append((request, options))
        return ProvisioningReport(results=self.results)


def ok_result(instance: str = "srv1") -> TargetResult:
    article = ArticleDescriptor(
        variant=ArticleVariant.LOG_BASED,
        connection=None,
        name="publishers",
        database="Northwind",
        source_object="publishers",
        source_schema="dbo",
        publication="testPub",
    )
    return TargetResult(instance=instance, status=ApplyStatus.OK, steps=(), article=article)


def failed_result(instance: str = "srv2") -> TargetResult:
    failure = TargetFailure(FailureCategory.CONFLICT, "Article publishers already exists")
    return TargetResult(instance=instance, status=ApplyStatus.FAILED, steps=(), failure=failure)


BASE_ARGS = ["add", "--instance", "srv1", "--database", "Northwind", "--publication", "testPub",
             "--name", "publishers"]


# ---------- tests ----------


def test_arguments_become_a_request_and_options():
    engine = FakeEngine((ok_result(),))

    code = main([*BASE_ARGS, "--instance", "srv2", "--filter", "city = 'seattle'"], engine=engine)

    assert code == 0
    ((request, options),) = engine.calls
    assert request.instances == ("srv1", "srv2")
    assert request.filter_clause == "city = 'seattle'"
    assert request.schema == "dbo"
    assert request.creation_script_options is None
    assert request.credential is None
    assert options.simulate_only is False
    assert options.reporting_mode is ReportingMode.FRIENDLY


def test_whatif_strict_and_options(monkeypatch):
    monkeypatch.setenv("REPLICATION_PASSWORD", "secret")
    engine = FakeEngine((ok_result(),))

    main(
        [*BASE_ARGS, "--whatif", "--strict", "--option", "DriPrimaryKey", "--no-default-options",
         "--username", "repl_admin"],
        engine=engine,
    )

    ((request, options),) = engine.calls
    assert options.simulate_only is True
    assert options.reporting_mode is ReportingMode.STRICT
    assert request.creation_script_options == CreationScriptOptions.DRI_PRIMARY_KEY
    assert request.credential.username == "repl_admin"
    assert request.credential.password == "secret"


def test_any_failed_target_gives_exit_code_one(capsys):
    engine = FakeEngine((ok_result(), failed_result()))

    code = main(BASE_ARGS, engine=engine)

    assert code == 1
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "srv1\tok\ttestPub/publishers (LogBased)",
        "srv2\tfailed\t[conflict] Article publishers already exists",
    ]


def test_missing_required_arguments_exit_with_usage_error():
    engine = FakeEngine()

    with pytest.raises(SystemExit) as caught:
        main(["add", "--instance", "srv1"], engine=engine)

    assert caught.value.code == 2
    assert engine.calls == []


def test_unknown_option_name_is_a_usage_error(capsys):
    with pytest.raises(SystemExit):
        main([*BASE_ARGS, "--option", "Sparkles"], engine=FakeEngine())

    assert "Unknown creation script option" in capsys.readouterr().err


def test_config_requires_key(tmp_path):
    with pytest.raises(SystemExit):
        main(["add", "--config", str(tmp_path / "articles.yml")], engine=FakeEngine())


def test_config_entry_is_loaded(tmp_path):
    path = tmp_path / "articles.yml"
    path.write_text(
        "pubs:\n  instances: [srv9]\n  database: pubs\n  publication: p\n  name: titles\n"
    )
    engine = FakeEngine()

    assert main(["add", "--config", str(path), "--key", "pubs"], engine=engine) == 0
    assert engine.calls[0][0].instances == ("srv9",)


def test_simulated_target_lists_skipped_steps():
    result = TargetResult(
        instance="srv1",
        status=ApplyStatus.SKIPPED,
        steps=(
            StepResult(PipelineStep.CREATE, ApplyStatus.SKIPPED, "(dry-run) would execute: a"),
            StepResult(PipelineStep.REFRESH_SUBSCRIPTIONS, ApplyStatus.SKIPPED, "(dry-run) b"),
        ),
    )

    assert format_report(ProvisioningReport((result,))) == [
        "srv1\tskipped\t(dry-run) would execute: a; (dry-run) b"
    ]


def test_incomplete_config_entry_is_a_usage_error(tmp_path, capsys):
    path = tmp_path / "articles.yml"
    path.write_text("pubs:\n  instances: [srv9]\n  name: titles\n")
    engine = FakeEngine()

    with pytest.raises(SystemExit) as caught:
        main(["add", "--config", str(path), "--key", "pubs"], engine=engine)

    assert caught.value.code == 2
    assert "Missing article config key(s)" in capsys.readouterr().err
    assert engine.calls == []
