"""CLI output.

Results go to stdout so they can be piped (``kdeploy render ... | kubectl
apply -f -``); status lines and errors go to stderr.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from rich.console import Console as RichConsole
from rich.syntax import Syntax
from rich.table import Table


class Console:
    def __init__(self, *, force_terminal: bool | None = None) -> None:
        self._out = RichConsole(force_terminal=force_terminal)
        self._err = RichConsole(force_terminal=force_terminal, stderr=True)

    def success(self, message: str) -> None:
        self._err.print(f"[green]✓[/green] {message}")

    def info(self, message: str) -> None:
        self._err.print(f"[dim]{message}[/dim]")

    def error(self, message: str, *, hint: str | None = None) -> None:
        self._err.print(f"[red]✗[/red] {message}")
        if hint:
            self._err.print(f"  [dim]{hint}[/dim]")

    def print(self, *objects: Any, **kwargs: Any) -> None:
        self._out.print(*objects, **kwargs)

    def yaml(self, text: str) -> None:
        """Print YAML: highlighted on a terminal, byte for byte when piped."""
        if self._out.is_terminal:
            self._out.print(Syntax(text, "yaml", background_color="default"))
        else:
            self._out.out(text, end="", highlight=False)

    def table(
        self,
        rows: Iterable[Mapping[str, Any]],
        columns: list[tuple[str, str]],  # (key, header)
        *,
        title: str | None = None,
    ) -> None:
        table = Table(title=title, header_style="bold")
        for _, header in columns:
            table.add_column(header)
        for row in rows:
            table.add_row(*(str(row.get(key, "")) for key, _ in columns))
        self._err.print(table)


_console: Console | None = None


def get_console() -> Console:
    global _console
    if _console is None:
        _console = Console()
    return _console
