"""
CLI entry point for xcbridge.

This module provides the Typer-based command-line interface.

Commands:
    tools       List registered tools
    schema      Print a tool's public input schema
    call        Run one tool call and print the response
    serve       Serve line-delimited JSON calls over stdin/stdout

The session store lives as long as the process: `serve` keeps it across
calls, `call` starts from --defaults (if given) and discards it on exit.

stdout carries responses only; logs go to stderr.
"""

import json
import sys
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from xcbridge import __version__
from xcbridge.config import Settings, load_settings
from xcbridge.engine import Dispatcher
from xcbridge.errors import ConfigError
from xcbridge.logging_config import get_logger, setup_logging
from xcbridge.schema import CallRequest, ToolResponse, load_defaults_file

app = typer.Typer(
    name="xcbridge",
    help="Expose Xcode build and simulator tools to agents with session-aware parameters.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

logger = get_logger(__name__)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]xcbridge[/bold] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="YAML settings file. XCBRIDGE_* environment variables override it.",
            exists=True,
            readable=True,
            resolve_path=True,
        ),
    ] = None,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    xcbridge - session-aware tool server for Xcode automation.
    """
    try:
        settings = load_settings(path=config)
    except ConfigError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=2)

    setup_logging(settings)
    ctx.obj = settings


def _dispatcher(ctx: typer.Context, defaults: Path | None) -> Dispatcher:
    settings: Settings = ctx.obj or load_settings()
    dispatcher = Dispatcher(settings=settings)
    if defaults is not None:
        try:
            preset = load_defaults_file(defaults)
        except ValidationError as e:
            err_console.print(f"[red]Invalid defaults file {defaults}:[/red]\n{escape(str(e))}")
            raise typer.Exit(code=2)
        dispatcher.store.set_defaults(preset.to_partial())
        logger.info("Loaded session defaults from %s", defaults)
    return dispatcher


DefaultsOption = Annotated[
    Optional[Path],
    typer.Option(
        "--defaults",
        "-d",
        help="YAML file with initial session defaults.",
        exists=True,
        readable=True,
        resolve_path=True,
    ),
]


@app.command("tools")
def list_tools(ctx: typer.Context) -> None:
    """List registered tools."""
    dispatcher = _dispatcher(ctx, None)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Title")
    table.add_column("Destructive", justify="center")
    table.add_column("Description")

    for info in dispatcher.describe_tools():
        table.add_row(
            info["name"],
            info["annotations"]["title"],
            "yes" if info["annotations"]["destructiveHint"] else "",
            info["description"],
        )

    console.print(table)


@app.command()
def schema(
    ctx: typer.Context,
    tool_name: Annotated[str, typer.Argument(help="Tool name.")],
) -> None:
    """Print a tool's public input schema as JSON."""
    dispatcher = _dispatcher(ctx, None)
    for info in dispatcher.describe_tools():
        if info["name"] == tool_name:
            typer.echo(json.dumps(info["inputSchema"], indent=2))
            return

    err_console.print(f"[red]Tool not found: {tool_name}[/red]")
    raise typer.Exit(code=1)


@app.command()
def call(
    ctx: typer.Context,
    tool_name: Annotated[str, typer.Argument(help="Tool name.")],
    args: Annotated[
        str,
        typer.Option("--args", "-a", help="Tool arguments as a JSON object."),
    ] = "{}",
    defaults: DefaultsOption = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print the raw response object as JSON."),
    ] = False,
) -> None:
    """
    Run one tool call and print the response.

    Example:
        $ xcbridge call clean --defaults session.yaml --args '{"platform": "iOS"}'
    """
    try:
        arguments = json.loads(args)
    except json.JSONDecodeError as e:
        err_console.print(f"[red]--args is not valid JSON: {escape(str(e))}[/red]")
        raise typer.Exit(code=2)

    dispatcher = _dispatcher(ctx, defaults)
    response = dispatcher.call(tool_name, arguments)

    if json_output:
        typer.echo(json.dumps(response.to_wire(), indent=2))
    else:
        _display_response(response)

    raise typer.Exit(code=1 if response.is_error else 0)


def _display_response(response: ToolResponse) -> None:
    style = "red" if response.is_error else "green"
    console.print(response.text, style=style, markup=False, highlight=False)


@app.command()
def serve(ctx: typer.Context, defaults: DefaultsOption = None) -> None:
    """
    Serve line-delimited JSON calls over stdin/stdout.

    Each input line is {"id": ..., "tool": "...", "arguments": {...}};
    each reply is {"id": ..., "result": {"content": [...], "isError": ...}}.
    """
    dispatcher = _dispatcher(ctx, defaults)
    logger.info("Serving %d tools on stdio", len(dispatcher.registry))

    for line in sys.stdin:
        line = line.strip()
        if not line:
            continue
        typer.echo(json.dumps(handle_line(dispatcher, line)))
        sys.stdout.flush()


def handle_line(dispatcher: Dispatcher, line: str) -> dict[str, Any]:
    """Process one transport line into one reply object."""
    try:
        request = CallRequest.model_validate_json(line)
    except ValidationError as e:
        logger.warning("Malformed request: %s", line[:200])
        problems = "\n".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'root'}: {err['msg']}"
            for err in e.errors()
        )
        response = ToolResponse.error("Malformed request", problems)
        return {"id": None, "result": response.to_wire()}

    response = dispatcher.call(request.tool, request.arguments)
    return {"id": request.id, "result": response.to_wire()}


if __name__ == "__main__":
    app()
