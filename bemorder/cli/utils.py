"""CLI utilities for dual-mode output (human-friendly + machine-readable).

Commands support both:
- Human mode (default): Rich formatting with colors and tables
- Machine mode (--json): Structured JSON output for scripts

Example:
    from ..utils import Output, ExitCode

    @app.command()
    def my_command():
        out = Output(console=console, json_mode=get_json_mode())
        out.success("Ordered artifacts", count=12)
        out.table("Order", ["#", "Path"], [["1", "button.css"]])
        raise typer.Exit(out.finish())
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, PrivateAttr, ConfigDict
from rich.console import Console
from rich.markup import escape
from rich.table import Table


class ExitCode:
    """Standardized exit codes for CLI commands.

        0 = Success
        1 = Validation error (bad arguments or options)
        2 = Invalid BEM naming
        3 = Missing or unreadable declaration file (artifact paths are
            only used for their names and are never opened)
        4 = Circular dependency
    """

    SUCCESS = 0
    VALIDATION_ERROR = 1
    NAMING_ERROR = 2
    FILE_ERROR = 3
    CYCLE_ERROR = 4


class Output(BaseModel):
    """Dual-mode output handler for CLI commands.

    In human mode: Uses Rich for pretty terminal output with colors and formatting.
    In JSON mode: Collects structured data and outputs JSON at the end.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    console: Console
    json_mode: bool = False

    _data: dict[str, Any] = PrivateAttr()
    _exit_code: int = PrivateAttr(default=ExitCode.SUCCESS)

    def model_post_init(self, __context: Any) -> None:
        # Ensure _data is a fresh dict for each instance
        self._data = {
            "status": "success",
            "warnings": [],
            "errors": [],
        }

    def success(self, message: str, **data: Any) -> None:
        """Output a success message with optional data."""
        if self.json_mode:
            self._data.update(data)
        else:
            self.console.print(f"[green]✓[/green] {message}")

    def warning(self, message: str, *, suggestion: str | None = None) -> None:
        """Output a warning message."""
        if self.json_mode:
            warning_obj: dict[str, Any] = {"message": message}
            if suggestion:
                warning_obj["suggestion"] = suggestion
            self._data["warnings"].append(warning_obj)
        else:
            self.console.print(f"[yellow]⚠[/yellow] {escape(message)}")
            if suggestion:
                self.console.print(f"  [dim]→ {suggestion}[/dim]")

    def error(
        self,
        message: str,
        *,
        suggestion: str | None = None,
        exit_code: int = ExitCode.VALIDATION_ERROR,
        **data: Any,
    ) -> None:
        """Output an error message and set exit code."""
        self._exit_code = exit_code
        self._data["status"] = "error"

        if self.json_mode:
            error_obj: dict[str, Any] = {"message": message, **data}
            if suggestion:
                error_obj["suggestion"] = suggestion
            self._data["errors"].append(error_obj)
        else:
            self.console.print(f"[red]✗[/red] {escape(message)}", highlight=False)
            if suggestion:
                self.console.print(f"  [dim]→ {suggestion}[/dim]")

    def text(self, message: str) -> None:
        """Output plain text (human mode only)."""
        if not self.json_mode:
            self.console.print(message, markup=False, highlight=False, soft_wrap=True)

    def table(
        self,
        title: str,
        columns: list[str],
        rows: list[list[str]],
        *,
        data_key: str | None = None,
    ) -> None:
        """Output a formatted table.

        Args:
            title: Table title
            columns: Column headers
            rows: Table rows (list of lists)
            data_key: Key to use in JSON output (defaults to snake_case of title)
        """
        key = data_key or title.lower().replace(" ", "_")

        if self.json_mode:
            self._data[key] = [dict(zip(columns, row)) for row in rows]
        else:
            table = Table(title=title, show_header=True, header_style="bold")
            for col in columns:
                table.add_column(col)
            for row in rows:
                table.add_row(*row)
            self.console.print(table)

    def set_data(self, key: str, value: Any) -> None:
        """Set arbitrary data in JSON output."""
        self._data[key] = value

    def finish(self) -> int:
        """Finalize output and return exit code.

        In JSON mode, prints the accumulated data as JSON to stdout.
        """
        if self.json_mode:
            self._data["exit_code"] = self._exit_code
            print(json.dumps(self._data, indent=2, default=str))

        return self._exit_code
