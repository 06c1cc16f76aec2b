"""This module defines the 'tools' command group, a generic front for the tool registry."""

import click
from sibal.cli.analysis import run_tool
from sibal.cli.output import echo_result, parse_json_option


@click.group("tools")
def tools_group() -> None:
    """Groups commands that list and call registered tools."""
    pass


@tools_group.command("list")
@click.pass_context
def list_tools(ctx: click.Context) -> None:
    """Lists the registered tools.

    Args:
        ctx: The click context.
    """
    tools = ctx.obj.registry.list_tools()
    if ctx.obj.output_format == "json":
        echo_result(ctx, tools)
        return
    for tool in tools:
        click.echo(f"{click.style(tool['name'], bold=True)}: {tool['description']}")


@tools_group.command("call")
@click.argument("name")
@click.option("--args", "raw_args", default="{}", show_default=True, help="The tool arguments as a JSON object.")
@click.pass_context
def call(ctx: click.Context, name: str, raw_args: str) -> None:
    """Calls a tool by name.

    Args:
        ctx: The click context.
        name: The tool name.
        raw_args: The tool arguments as JSON.
    """
    args = parse_json_option(raw_args, "--args")
    if not isinstance(args, dict):
        raise click.BadParameter("expected a JSON object", param_hint="--args")
    run_tool(ctx, name, args)
