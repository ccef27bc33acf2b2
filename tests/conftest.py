import pytest
from unittest.mock import MagicMock

from typer.testing import CliRunner

from cliniccache.infrastructure.cache.cache_manager import CacheManager
from cliniccache.infrastructure.config import settings
from cliniccache.infrastructure.storage.disk_storage import InMemoryStorage

START_MS = 1_700_000_000_000


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def cache_manager(storage, clock):
    """A fresh CacheManager over in-memory storage with a controllable clock."""
    return CacheManager(storage=storage, clock=clock)


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keeps tests away from the user's config file, .env and cache directory."""
    monkeypatch.setenv(settings.CONFIG_FILE_ENV_VAR, str(tmp_path / "missing-config.yaml"))
    monkeypatch.setenv("CACHE_DIR", str(tmp_path / "storage"))
    monkeypatch.setattr(settings, "find_dotenv_path", lambda: None)
    settings.reset_configuration()
    settings.clear_test_config()
    yield
    settings.reset_configuration()
    settings.clear_test_config()


@pytest.fixture
def mock_console_display(mocker):
    """Patches ConsoleDisplay in main so CLI flows can assert on UI calls."""
    from cliniccache.domain.interfaces.user_interface import UserInterface

    mock = MagicMock(spec=UserInterface)
    mocker.patch('cliniccache.main.ConsoleDisplay', return_value=mock)
    return mock


@pytest.fixture
def fresh_app(mocker):
    """Rebuilds the composition root per test and closes disk storage afterwards."""
    from cliniccache import main

    # Keep pytest's own log capture handlers on the root logger
    mocker.patch('cliniccache.main.setup_logging')
    main.reset_dependencies()
    yield main.app
    main.reset_dependencies()
