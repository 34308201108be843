"""Console output for the CLI.

Provides a Console class that wraps rich for consistent output.
Status messages go to stderr so stdout can carry the report.
"""

from typing import Any

from rich.console import Console as RichConsole


class Console:
    """CLI output manager wrapping rich."""

    def __init__(self, *, force_terminal: bool | None = None) -> None:
        """Initialize the console.

        Args:
            force_terminal: Force terminal mode (True/False) or auto-detect (None).
        """
        self._console = RichConsole(force_terminal=force_terminal, stderr=False)
        self._err_console = RichConsole(force_terminal=force_terminal, stderr=True)

    @property
    def out(self) -> RichConsole:
        """The stdout console, for reports."""
        return self._console

    def success(self, message: str) -> None:
        self._err_console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self._err_console.print(f"[red]✗[/red] {message}")

    def print(self, *args: Any, **kwargs: Any) -> None:
        self._console.print(*args, **kwargs)


# Module-level default instance for convenience
_default: Console | None = None


def get_console() -> Console:
    """Get the default console instance."""
    global _default
    if _default is None:
        _default = Console()
    return _default
