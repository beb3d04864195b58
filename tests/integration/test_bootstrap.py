"""Integration tests for startup orchestration."""

from __future__ import annotations

import httpx
import pytest

from comments_microservice.adapters.db.context import CommentContext
from comments_microservice.adapters.white_label import (
    HttpWhiteLabelDirectory,
    InMemoryWhiteLabelDirectory,
)
from comments_microservice.bootstrap import AppContainer, bootstrap, run
from comments_microservice.bootstrap.bootstrap import SERVICE_LABEL
from comments_microservice.config import Settings
from comments_microservice.contracts import AddCommentContract
from comments_microservice.interfaces.schema import SchemaBootstrapError, SchemaState
from comments_microservice.interfaces.white_label import (
    RegistrationDescriptor,
    WhiteLabelDirectory,
)

# pylint: disable=magic-value-comparison,redefined-outer-name

ADDRESS = "http://directory.local:1041"


@pytest.fixture
def settings(sqlite_url) -> Settings:
    return Settings(db_url=sqlite_url, white_label_address=ADDRESS)


@pytest.fixture
def disposals(monkeypatch) -> list[CommentContext]:
    """Contexts disposed during the test, in order."""
    disposed: list[CommentContext] = []
    original = CommentContext.dispose

    def _dispose(self: CommentContext) -> None:
        disposed.append(self)
        original(self)

    monkeypatch.setattr(CommentContext, "dispose", _dispose)
    return disposed


def test_startup_readies_schema_then_registers(settings):
    directory = InMemoryWhiteLabelDirectory()
    app = bootstrap(settings, directory=directory)
    try:
        assert app.schema.initial_state is SchemaState.SCHEMA_ABSENT
        assert app.registered
        (entry,) = directory.entries
        assert entry.service_name == SERVICE_LABEL
        assert entry.context_type_identifier == "CommentContext"
        assert entry.directory_address == ADDRESS
        assert app.context.bootstrapper().status().state is SchemaState.READY
    finally:
        app.context.dispose()


def test_restarts_keep_one_directory_entry(settings):
    directory = InMemoryWhiteLabelDirectory()
    for _ in range(2):
        bootstrap(settings, directory=directory).context.dispose()
    assert directory.calls == 2
    assert len(directory.entries) == 1


def test_unreachable_directory_does_not_block_serving(settings):
    """Registration failure only affects discoverability."""

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    directory = HttpWhiteLabelDirectory(
        timeout=0.1, transport=httpx.MockTransport(refuse)
    )
    app = bootstrap(settings, directory=directory)
    try:
        assert not app.registered
        created = app.comments.add(AddCommentContract(unique_identity="a", text="b"))
        assert app.comments.get(created.id) == created
    finally:
        app.context.dispose()


def test_no_address_skips_registration(sqlite_url):
    directory = InMemoryWhiteLabelDirectory()
    app = bootstrap(Settings(db_url=sqlite_url), directory=directory)
    app.context.dispose()
    assert not app.registered
    assert directory.calls == 0


def test_schema_failure_is_fatal_and_skips_registration(settings, sqlite_engine_file):
    """A store with tables but no history never reaches registration."""
    with sqlite_engine_file.begin() as conn:
        conn.exec_driver_sql("CREATE TABLE comments (id INTEGER PRIMARY KEY)")

    directory = InMemoryWhiteLabelDirectory()
    served = []
    with pytest.raises(SchemaBootstrapError):
        run(settings, served.append, directory=directory)

    assert directory.calls == 0
    assert not served


def test_run_serves_the_container_and_returns_its_result(settings):
    directory = InMemoryWhiteLabelDirectory()

    def serve(app: AppContainer) -> str:
        assert app.registered
        assert app.context.bootstrapper().status().state is SchemaState.READY
        return "served"

    assert run(settings, serve, directory=directory) == "served"


def test_second_startup_finds_schema_ready(settings):
    directory = InMemoryWhiteLabelDirectory()
    bootstrap(settings, directory=directory).context.dispose()
    app = bootstrap(settings, directory=directory)
    app.context.dispose()
    assert app.schema.initial_state is SchemaState.SCHEMA_PRESENT
    assert app.schema.applied == ()


@pytest.mark.parametrize(
    "address", ["http://localhost:99999", "http://localhost:port", "localhost:1041"]
)
def test_malformed_address_does_not_block_serving(sqlite_url, address, disposals):
    """A bad directory address only costs discoverability."""
    app = bootstrap(Settings(db_url=sqlite_url, white_label_address=address))
    try:
        assert not app.registered
        assert not disposals
        created = app.comments.add(AddCommentContract(unique_identity="a", text="b"))
        assert app.comments.get(created.id) == created
    finally:
        app.context.dispose()


def test_unexpected_startup_error_disposes_context(settings, disposals):
    """Failures other than schema errors still release the engine."""

    class BrokenDirectory(WhiteLabelDirectory):
        """Directory with a programming error."""

        def register(self, descriptor: RegistrationDescriptor) -> None:
            raise AttributeError("bug")

    with pytest.raises(AttributeError):
        bootstrap(settings, directory=BrokenDirectory())

    assert len(disposals) == 1


def test_schema_failure_disposes_context(settings, sqlite_engine_file, disposals):
    with sqlite_engine_file.begin() as conn:
        conn.exec_driver_sql("CREATE TABLE comments (id INTEGER PRIMARY KEY)")

    with pytest.raises(SchemaBootstrapError):
        bootstrap(settings, directory=InMemoryWhiteLabelDirectory())

    assert len(disposals) == 1


def test_successful_startup_keeps_context_open(settings, disposals):
    app = bootstrap(settings, directory=InMemoryWhiteLabelDirectory())
    assert not disposals
    app.context.dispose()
    assert disposals == [app.context]
