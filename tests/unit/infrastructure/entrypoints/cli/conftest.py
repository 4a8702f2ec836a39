import re
from collections.abc import AsyncGenerator
from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Iterator
from contextlib import AbstractContextManager
from contextlib import asynccontextmanager
from contextlib import contextmanager
from typing import Any
from unittest import mock

import pytest
from typer.testing import CliRunner

from userservice.application.services.users import UserService
from userservice.domain.ports.executor import TaskExecutorPort

type DatabasePatcherFactory = Callable[[str], AbstractContextManager[mock.Mock]]
type DependencyPatcherFactory = Callable[..., AbstractContextManager[mock.Mock]]
type AsyncDependencyPatcherFactory = Callable[..., AbstractContextManager[mock.Mock]]

type TextCleaner = Callable[[str], str]


@pytest.fixture(autouse=True)
def force_rich_terminal_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Force Rich/Typer to use a standard terminal width and no colors
    ONLY for CLI unit tests to ensure consistent output assertions.
    """
    monkeypatch.setenv("COLUMNS", "100")
    monkeypatch.setenv("TERM", "dumb")
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setenv("CI", "true")


@pytest.fixture
def block_cli_configure_loggers() -> Iterable[mock.Mock]:
    """Prevent the CLI 'main' callback from re-configuring logging during tests."""
    with mock.patch("userservice.infrastructure.entrypoints.cli.main.configure_loggers") as patched:
        yield patched


@pytest.fixture
def runner(block_cli_configure_loggers: mock.Mock) -> CliRunner:
    return CliRunner()


@pytest.fixture
def target_path(request: pytest.FixtureRequest) -> str:
    if request.cls and hasattr(request.cls, "TARGET_PATH"):
        return request.cls.TARGET_PATH

    if hasattr(request.module, "TARGET_PATH"):
        return request.module.TARGET_PATH

    raise ValueError("Test class or module must define 'TARGET_PATH' to use auto-patching fixtures.")


# --- Patcher Factories ---


@pytest.fixture
def mock_get_db_factory() -> DatabasePatcherFactory:
    @contextmanager
    def _patcher(target_path: str) -> Iterator[mock.Mock]:
        session_mock = mock.Mock(name="db_session")

        @asynccontextmanager
        async def get_db() -> AsyncGenerator[mock.Mock]:
            yield session_mock

        with mock.patch(target_path, side_effect=get_db):
            yield session_mock

    return _patcher


@pytest.fixture
def mock_dependency_factory() -> DependencyPatcherFactory:
    """Factory to patch standard CLI dependencies (Repositories, Services)."""

    @contextmanager
    def _patcher(target_path: str, return_value: Any) -> Iterator[mock.Mock]:
        with mock.patch(target_path, return_value=return_value):
            yield return_value

    return _patcher


@pytest.fixture
def mock_async_context_dependency_factory() -> AsyncDependencyPatcherFactory:
    """Factory to patch async context manager CLI dependencies (worker pool)."""

    @contextmanager
    def _patcher(target_path: str, dependency_instance: Any) -> Iterator[mock.Mock]:
        @asynccontextmanager
        async def _mock_dependency() -> AsyncGenerator[Any]:
            yield dependency_instance

        with mock.patch(target_path, side_effect=_mock_dependency):
            yield dependency_instance

    return _patcher


# --- DB session Mock ---


@pytest.fixture
def mock_get_db(target_path: str, mock_get_db_factory: DatabasePatcherFactory) -> Iterable[mock.Mock]:
    with mock_get_db_factory(f"{target_path}.get_db") as mock_db:
        yield mock_db


# --- Service Mocks ---


@pytest.fixture
def mock_user_service(
    target_path: str,
    mock_dependency_factory: DependencyPatcherFactory,
) -> Iterable[mock.AsyncMock]:
    service = mock.AsyncMock(spec=UserService)
    with mock_dependency_factory(f"{target_path}.get_user_service", service) as mock_service:
        yield mock_service


@pytest.fixture
def mock_executor(
    target_path: str,
    mock_async_context_dependency_factory: AsyncDependencyPatcherFactory,
) -> Iterable[mock.Mock]:
    executor = mock.Mock(spec=TaskExecutorPort)
    with mock_async_context_dependency_factory(f"{target_path}.get_executor", executor) as mock_exec:
        yield mock_exec


# --- Helpers ---


@pytest.fixture
def clean_typer_text() -> TextCleaner:
    """
    There is no easy way to disable all the rich text generated by Rich/Typer:
    even with NO_COLOR or TERM=dumb, Typer still draws a box around errors.

    Then, the most pragmatic solution is to clean up the output without coupling
    our tests to specific terminal emulation settings.
    """

    def _cleaner(text: str) -> str:
        clean_text = re.sub(r"[│╭╰─]", "", text)
        return " ".join(clean_text.split())

    return _cleaner
