"""Output formatting utilities using Rich."""

import json
from enum import Enum
from typing import Any

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

error_console = Console(stderr=True)


class OutputFormat(str, Enum):
    """Supported output formats."""

    TEXT = "text"
    JSON = "json"
    YAML = "yaml"


class OutputFormatter:
    """Handles output formatting for CLI commands.

    Results go to stdout, diagnostics to stderr. Plain text results are
    written with ``click.echo`` so they reach stdout byte-for-byte, without
    Rich markup, wrapping or highlighting.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.TEXT,
        color: bool = True,
    ):
        self.format = format
        self.color = color
        self._console = Console(no_color=not color, soft_wrap=True)

    def print_text(self, text: str) -> None:
        """Print text to stdout exactly as given."""
        click.echo(text)

    def print_error(self, message: str) -> None:
        """Print a single-line error message to stderr."""
        line = " ".join(message.split())
        if self.color:
            error_console.print(f"[red]Error:[/red] {escape(line)}", soft_wrap=True)
        else:
            click.echo(f"Error: {line}", err=True)

    def print_data(self, data: dict[str, Any]) -> None:
        """Print structured data in the configured format."""
        if self.format == OutputFormat.JSON:
            self._print_json(data)
        elif self.format == OutputFormat.YAML:
            self._print_yaml(data)
        else:
            for key, value in data.items():
                click.echo(f"{key}: {value}")

    def _print_json(self, data: Any) -> None:
        """Print data as JSON."""
        json_str = json.dumps(data, indent=2, default=str)
        if self.color and self._console.is_terminal:
            self._console.print(Syntax(json_str, "json", theme="monokai"))
        else:
            click.echo(json_str)

    def _print_yaml(self, data: Any) -> None:
        """Print data as YAML."""
        yaml_str = yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
        if self.color and self._console.is_terminal:
            self._console.print(Syntax(yaml_str, "yaml", theme="monokai"))
        else:
            click.echo(yaml_str, nl=False)
