import json
import logging
from typing import Any, List

from rich.box import HEAVY, ROUNDED, SIMPLE
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from cliniccache.domain.interfaces.user_interface import UserInterface
from cliniccache.domain.models.cache import CacheStats

logger = logging.getLogger(__name__)

MAX_KEYS_SHOWN = 50


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self):
        """Initializes the rich Console."""
        self._console = Console()

    @property
    def console(self):
        """Get the Rich console instance for direct operations."""
        return self._console

    @console.setter
    def console(self, console: Console) -> None:
        self._console = console

    def display_value(self, key: str, value: Any, **kwargs: Any) -> None:
        """Displays a cached payload as highlighted JSON inside a panel.

        Args:
            key: The key the payload was read from.
            value: The payload.
        """
        try:
            rendered: Any = Syntax(json.dumps(value, indent=2, ensure_ascii=False), "json", word_wrap=True)
        except (TypeError, ValueError, RecursionError):
            # Payloads read back from the memory tier may hold non-JSON values
            rendered = Text(repr(value))
        panel = Panel(
            rendered,
            title=f"[bold cyan]{key}[/bold cyan]",
            border_style="cyan",
            box=ROUNDED,
            padding=(0, 1),
        )
        self.console.print(panel)

    def display_stats(self, stats: CacheStats) -> None:
        """Displays per-tier entry counts and keys in a table."""
        table = Table(show_header=True, box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("Tier", style="bold")
        table.add_column("Entries", justify="right", style="cyan")
        table.add_column("Keys", style="white")
        table.add_row("memory", str(stats.memory_size), self._format_keys(stats.memory_keys))
        table.add_row("persistent", str(stats.persistent_size), self._format_keys(stats.persistent_keys))
        self.console.print(table)

    @staticmethod
    def _format_keys(keys: List[str]) -> str:
        if not keys:
            return "[dim]-[/dim]"
        shown = ", ".join(keys[:MAX_KEYS_SHOWN])
        if len(keys) > MAX_KEYS_SHOWN:
            shown += f" ... (+{len(keys) - MAX_KEYS_SHOWN} more)"
        return shown

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style.

        Args:
            error_message: The error message to display.
        """
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1),
        )
        self.console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        panel = Panel(
            Text(info_message, style="white"),
            title="[bold blue]Info[/bold blue]",
            border_style="blue",
            box=SIMPLE,
            padding=(0, 1),
        )
        self.console.print(panel)

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        logger.warning(f"Display warning: {warning_message}")
        panel = Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=HEAVY,
            padding=(0, 1),
        )
        self.console.print(panel)
