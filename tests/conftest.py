import os

import pytest

# Name of the fixture that requires a live SQL Server publisher
_SQLSERVER_FIXTURE_NAME = "sqlserver_fixture"


@pytest.fixture(scope="session")
def sqlserver_fixture():
    """
    Connection to the publisher named by SQLSERVER_TEST_INSTANCE.

    Uses SQLSERVER_TEST_USERNAME / SQLSERVER_TEST_PASSWORD when set, integrated
    security otherwise.
    """
    from src.replication_engine.models import Credential
    from src.replication_engine.state.connection import SqlServerResolver

    instance = os.getenv("SQLSERVER_TEST_INSTANCE", "localhost")
    username = os.getenv("SQLSERVER_TEST_USERNAME")
    credential = (
        Credential(username, os.getenv("SQLSERVER_TEST_PASSWORD", "")) if username else None
    )

    server = SqlServerResolver().resolve(instance, credential)

    yield server

    server.close()


def _mark_tests_using_sqlserver_fixture(tests: list[pytest.Item]) -> None:
    """
    Adds the `requires_sqlserver` marker to tests that are using the fixture that
    requires a live publisher.

    :param tests: list of tests collected by `pytest`
    """
    for test in tests:
        if _SQLSERVER_FIXTURE_NAME in getattr(test, "fixturenames", ()):
            test.add_marker(pytest.mark.requires_sqlserver)


def _skip_sqlserver_tests(test: pytest.Item) -> None:
    """
    Tell `pytest` to skip tests that require a live publisher.

    :param test: test collected by `pytest`
    """
    if list(test.iter_markers(name="requires_sqlserver")):
        pytest.skip("Skipped tests that require a SQL Server publisher")


def pytest_addoption(parser: pytest.Parser):
    parser.addoption(
        "--include-sqlserver-tests",
        action="store_true",
        default=False,
        help="Run tests against a live SQL Server publisher.",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]):
    if not config.getoption("--include-sqlserver-tests"):
        _mark_tests_using_sqlserver_fixture(tests=items)


def pytest_runtest_setup(item: pytest.Item):
    if not item.config.getoption("--include-sqlserver-tests"):
        _skip_sqlserver_tests(test=item)
