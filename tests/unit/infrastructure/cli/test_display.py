import pytest
from unittest.mock import MagicMock

from rich.panel import Panel
from rich.table import Table

from cliniccache.domain.models.cache import CacheStats
from cliniccache.infrastructure.cli.display import MAX_KEYS_SHOWN, ConsoleDisplay


@pytest.fixture
def mock_console():
    """Fixture to create a mock rich Console object."""
    return MagicMock()


@pytest.fixture
def console_display(mock_console: MagicMock):
    """Fixture to create a ConsoleDisplay instance with a mocked console."""
    display = ConsoleDisplay()
    display.console = mock_console
    return display


def test_display_value_prints_panel(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_value("clinic_1", {"name": "Downtown"})
    mock_console.print.assert_called_once()
    (panel,), _ = mock_console.print.call_args
    assert isinstance(panel, Panel)
    assert "clinic_1" in str(panel.title)


def test_display_value_handles_non_json(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_value("k", {"when": object()})
    mock_console.print.assert_called_once()


def test_display_stats_prints_table(console_display: ConsoleDisplay, mock_console: MagicMock):
    stats = CacheStats(memory_size=1, persistent_size=0, memory_keys=["a"], persistent_keys=[])
    console_display.display_stats(stats)
    (table,), _ = mock_console.print.call_args
    assert isinstance(table, Table)
    assert table.row_count == 2


def test_format_keys_truncates():
    keys = [f"k{i}" for i in range(MAX_KEYS_SHOWN + 5)]
    assert ConsoleDisplay._format_keys(keys).endswith("(+5 more)")
    assert ConsoleDisplay._format_keys([]) == "[dim]-[/dim]"


@pytest.mark.parametrize("method, title", [
    ("display_error", "Error"),
    ("display_info", "Info"),
    ("display_warning", "Warning"),
])
def test_message_panels(console_display: ConsoleDisplay, mock_console: MagicMock, method, title):
    getattr(console_display, method)("Something happened")
    (panel,), _ = mock_console.print.call_args
    assert isinstance(panel, Panel)
    assert title in str(panel.title)
    assert panel.renderable.plain == "Something happened"
