import json
import logging
from typing import Any, List, Optional

from rich.box import ROUNDED
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from neatsuite.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def display_response(self, data: Any, status: int, duration_ms: float, **kwargs: Any) -> None:
        """Renders a response body as highlighted JSON inside a panel.

        Args:
            data: Decoded response body.
            status: HTTP status code.
            duration_ms: Measured request duration.
            **kwargs: ``title`` overrides the panel title.
        """
        title = kwargs.get("title", "Response")
        if isinstance(data, (dict, list)):
            body = Syntax(json.dumps(data, indent=2, default=str), "json", word_wrap=True)
        else:
            body = "" if data is None else str(data)
        logger.debug(f"display_response called: status={status}, duration={duration_ms:.0f}ms")
        self.console.print(Panel(
            body,
            title=f"[bold]{title}[/bold] [dim]·[/dim] {status}",
            subtitle=f"[dim]{duration_ms:.0f} ms[/dim]",
            box=ROUNDED,
            border_style="green" if 200 <= status < 300 else "yellow",
        ))

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {error_message}")

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        self.console.print(f"[yellow]Warning:[/yellow] {warning_message}")

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        self.console.print(f"[blue]Info:[/blue] {info_message}")

    def display_validation_errors(self, errors: List[str]) -> None:
        table = Table(title="Configuration errors", box=ROUNDED, show_header=False)
        table.add_column("Problem", style="red")
        for error in errors:
            table.add_row(error)
        self.console.print(table)
