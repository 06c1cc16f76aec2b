"""This module holds the shared CLI context and the result printer."""

import json
from typing import Any

import click
import json5
from sibal.providers.database import DatabaseManager
from sibal.services.tools import ToolRegistry


class Context:
    """A context object to pass global options to subcommands."""

    def __init__(self, output_format: str):
        """Initializes the context.

        Args:
            output_format: The desired output format, 'text' or 'json'.
        """
        self.output_format = output_format
        self._registry: ToolRegistry | None = None

    @property
    def registry(self) -> ToolRegistry:
        """The tool registry, wired on first use so `--help` never touches the database."""
        if self._registry is None:
            self._registry = ToolRegistry.from_engine(DatabaseManager.get_engine())
        return self._registry


def parse_json_option(value: str | None, option_name: str) -> Any:
    """Parses a JSON-valued command-line option.

    JSON5 is accepted so single quotes and trailing commas do not get in the
    way when typing arguments in a shell.

    Args:
        value: The raw option value.
        option_name: The option name, used in the error message.

    Returns:
        The decoded value, or None when the option was not given.

    Raises:
        click.BadParameter: If the value is not valid JSON.
    """
    if value is None:
        return None
    try:
        return json5.loads(value)
    except ValueError as e:
        raise click.BadParameter(f"invalid JSON: {e}", param_hint=option_name) from e


def _format_scalar(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def echo_result(ctx: click.Context, result: Any) -> None:
    """Prints a tool result in the format chosen with `--output`.

    Args:
        ctx: The click context.
        result: A JSON-compatible value.
    """
    output_format = ctx.obj.output_format if isinstance(ctx.obj, Context) else "text"
    if output_format == "json":
        click.echo(json.dumps(result, indent=2, ensure_ascii=False))
        return

    if isinstance(result, dict):
        for key, value in result.items():
            if isinstance(value, list) and value:
                click.secho(f"{key}:", bold=True)
                for item in value:
                    click.echo(f"  - {_format_scalar(item)}")
            else:
                click.echo(f"{click.style(key, bold=True)}: {_format_scalar(value)}")
    elif isinstance(result, list):
        for item in result:
            click.echo(f"- {_format_scalar(item)}")
    else:
        click.echo(_format_scalar(result))
