"""CLI for running and poking at the CLDF MCP server."""

from __future__ import annotations

import asyncio
import json
import subprocess

from rich.console import Console
from rich.table import Table
import typer

app = typer.Typer(
    name="cldf-mcp",
    help="CLDF MCP Server management CLI",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


@app.command()
def serve(
    config_path: str = typer.Option(None, "--config", "-c", help="Path to cldf-mcp.toml"),
    log_level: str = typer.Option(None, "--log-level", "-l", help="Override log level"),
) -> None:
    """Run the MCP server on stdio."""
    from cldf_mcp.config import load_config
    from cldf_mcp.server import CldfMcpServer, configure_logging

    config = load_config(config_path)
    if log_level:
        config.server.log_level = log_level
        config.observability.log_level = log_level
    configure_logging(config)

    if not config.enabled:
        err_console.print("[yellow]![/] MCP server disabled in config")
        raise typer.Exit(0)

    asyncio.run(CldfMcpServer(config).run())


@app.command()
def tools() -> None:
    """List the tools this server exposes."""
    from cldf_mcp.tool_defs import TOOLS

    table = Table(title=f"{len(TOOLS)} CLDF tools")
    table.add_column("Tool", style="cyan")
    table.add_column("Required")
    table.add_column("Description")
    for tool in TOOLS:
        required = ", ".join(tool.inputSchema.get("required", []))
        table.add_row(tool.name, required, tool.description or "")
    console.print(table)


@app.command()
def call(
    name: str = typer.Argument(..., help="Tool name, e.g. cldf_schema_info"),
    args_json: str = typer.Option("{}", "--args", "-a", help="Tool arguments as JSON"),
    config_path: str = typer.Option(None, "--config", "-c", help="Path to cldf-mcp.toml"),
    stats: bool = typer.Option(
        False, "--stats", help="Print timing for the tool and each cldf run to stderr"
    ),
) -> None:
    """Invoke one tool and print its text result."""
    from cldf_mcp.config import load_config
    from cldf_mcp.server import CldfMcpServer

    try:
        arguments = json.loads(args_json)
    except json.JSONDecodeError as e:
        console.print(f"[red]✗[/] --args is not valid JSON: {e}")
        raise typer.Exit(2) from None
    if not isinstance(arguments, dict):
        console.print("[red]✗[/] --args must be a JSON object")
        raise typer.Exit(2)

    config = load_config(config_path)
    if stats:
        config.observability.enabled = True
        config.observability.metrics_enabled = True

    server = CldfMcpServer(config)
    content = asyncio.run(server.call_tool(name, arguments))
    text = content[0].text if content else ""
    # Plain print: output is usually JSON meant for piping
    print(text)
    if stats:
        err_console.print(_stats_table(server.obs.snapshot()))
    if text.startswith("Error: "):
        raise typer.Exit(1)


def _stats_table(snapshot: dict) -> Table:
    table = Table(title="Call timing")
    table.add_column("Kind")
    table.add_column("Name", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Failures", justify="right")
    table.add_column("Avg ms", justify="right")
    table.add_column("Max ms", justify="right")
    for kind in ("tools", "commands"):
        for name, row in snapshot[kind].items():
            table.add_row(
                kind[:-1],
                name,
                str(row["count"]),
                str(row["failures"]),
                f"{row['avg_ms']:.1f}",
                f"{row['max_ms']:.1f}",
            )
    return table


@app.command()
def check(
    config_path: str = typer.Option(None, "--config", "-c", help="Path to cldf-mcp.toml"),
) -> None:
    """Check that the configured cldf program runs (exit code 0 = available)."""
    from cldf_mcp.config import load_config

    cli_path = load_config(config_path).cldf.cli_path
    try:
        result = subprocess.run(
            [cli_path, "--version"],
            check=False,
            capture_output=True,
            text=True,
            timeout=30,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        console.print(f"[red]✗[/] cldf not available at '{cli_path}': {e}")
        raise typer.Exit(1) from None

    if result.returncode != 0:
        console.print(f"[red]✗[/] '{cli_path} --version' exited with {result.returncode}")
        if result.stderr:
            console.print(result.stderr.strip())
        raise typer.Exit(1)

    version = (result.stdout or result.stderr).strip()
    console.print(f"[green]✓[/] cldf available: {cli_path} ({version})")


def main() -> None:
    """Entry point for cldf-mcp CLI."""
    app()


if __name__ == "__main__":
    main()
