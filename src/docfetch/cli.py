from __future__ import annotations

import asyncio
import logging
import sys
from typing import Optional

import typer
from dotenv import load_dotenv

from .errors import RetrievalError, ValidationError
from .server import TRANSPORTS, run_server
from .workflows.doctor import build_doctor_report, format_doctor_report
from .workflows.fetcher import fetch_and_normalize, render_tool_text
from .workflows.fetcher_config import DEFAULT_MAX_LENGTH, DEFAULT_START_INDEX, _env_int, _env_str
from .workflows.web_fetch import FetchConfig

app = typer.Typer(add_help_option=False, no_args_is_help=False)


def _minimal_help() -> str:
    return """Docfetch (fetch + normalize)

Usage:
  docfetch get <url> [--max-length N] [--start-index N] [--raw] [--json]
  docfetch serve [--mode stdio|http] [--host H] [--port P]
  docfetch doctor

Common options:
  --max-length N   Maximum characters to return (default 20000).
  --start-index N  Character offset to start from (default 0).
  --raw            Skip HTML simplification and PDF extraction.
  --json           Print the normalized result as JSON.

Discoverability:
  --help-full     Expanded help + env vars.
  --find <query>  Search commands, flags, env vars.
  --doctor        Run environment diagnostics and exit.
"""


def _help_full() -> str:
    return """Docfetch CLI

Commands:
  get      Fetch a single URL and print its normalized content.
  serve    Run the MCP server exposing the `fetch` tool.
  doctor   Print environment and dependency diagnostics.

Output (get):
  Contents of <url>, followed by a truncation notice when more text is
  available and the list of images found inside the main content.

Exit codes (get):
  0  success (extraction failures are reported as content)
  2  invalid arguments
  3  retrieval failed (network error, timeout, non-2xx status)

Env vars:
  DOCFETCH_USER_AGENT   Override the User-Agent header.
  DOCFETCH_TIMEOUT      Request timeout in seconds (default 30).
  DOCFETCH_HOST         Bind host for `serve --mode http`.
  DOCFETCH_PORT         Bind port for `serve --mode http`.
  DOCFETCH_LOG_LEVEL    Logging level on stderr (default WARNING).
"""


_FIND_INDEX = [
    ("command", "get", "Fetch a single URL and print its normalized content."),
    ("command", "serve", "Run the MCP server exposing the fetch tool."),
    ("command", "doctor", "Print environment and dependency diagnostics."),
    ("flag", "--max-length", "Maximum characters to return."),
    ("flag", "--start-index", "Character offset to start from."),
    ("flag", "--raw", "Skip HTML simplification and PDF extraction."),
    ("flag", "--json", "Print the normalized result as JSON."),
    ("flag", "--mode", "MCP transport: stdio or http."),
    ("flag", "--help-full", "Expanded help and env vars."),
    ("flag", "--find", "Search commands, flags, env vars."),
    ("flag", "--doctor", "Run environment diagnostics and exit."),
    ("env", "DOCFETCH_USER_AGENT", "Override the User-Agent header."),
    ("env", "DOCFETCH_TIMEOUT", "Request timeout in seconds."),
    ("env", "DOCFETCH_HOST", "Bind host for HTTP mode."),
    ("env", "DOCFETCH_PORT", "Bind port for HTTP mode."),
    ("env", "DOCFETCH_LOG_LEVEL", "Logging level on stderr."),
]


def _run_find(query: str) -> str:
    needle = (query or "").strip().lower()
    if not needle:
        return ""
    lines = []
    for category, name, desc in _FIND_INDEX:
        haystack = f"{category} {name} {desc}".lower()
        if needle in haystack:
            lines.append(f"{category} {name} - {desc}")
    return "\n".join(lines)


def _configure_logging() -> None:
    # stdout carries tool output and the MCP stdio stream; logs go to stderr.
    level_name = _env_str("DOCFETCH_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    help: bool = typer.Option(False, "--help", "-h", is_eager=True, help="Show minimal help."),
    help_full: bool = typer.Option(False, "--help-full", is_eager=True, help="Show expanded help."),
    find: Optional[str] = typer.Option(None, "--find", is_eager=True, help="Search commands, flags, env vars."),
    doctor: bool = typer.Option(False, "--doctor", is_eager=True, help="Run environment diagnostics and exit."),
) -> None:
    load_dotenv()
    _configure_logging()
    if help_full:
        typer.echo(_help_full())
        raise typer.Exit(code=0)
    if find is not None:
        output = _run_find(find)
        if output:
            typer.echo(output)
        raise typer.Exit(code=0)
    if doctor:
        report = build_doctor_report()
        typer.echo(format_doctor_report(report))
        raise typer.Exit(code=0 if report.get("ok", True) else 2)
    if help or ctx.invoked_subcommand is None:
        typer.echo(_minimal_help())
        raise typer.Exit(code=0)


@app.command("doctor", add_help_option=True)
def doctor_cmd() -> None:
    """Print environment and dependency diagnostics."""
    report = build_doctor_report()
    typer.echo(format_doctor_report(report))
    raise typer.Exit(code=0 if report.get("ok", True) else 2)


@app.command("get", add_help_option=True)
def get_url(
    url: str = typer.Argument(..., help="URL to fetch."),
    max_length: int = typer.Option(DEFAULT_MAX_LENGTH, "--max-length", help="Maximum characters to return."),
    start_index: int = typer.Option(DEFAULT_START_INDEX, "--start-index", help="Character offset to start from."),
    raw: bool = typer.Option(False, "--raw", help="Skip HTML simplification and PDF extraction."),
    json_out: bool = typer.Option(False, "--json", help="Print the normalized result as JSON."),
) -> None:
    try:
        output = asyncio.run(
            fetch_and_normalize(
                url,
                max_length=max_length,
                start_index=start_index,
                raw=raw,
                config=FetchConfig.from_env(),
            )
        )
    except ValidationError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2)
    except RetrievalError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=3)
    if json_out:
        sys.stdout.write(output.to_json() + "\n")
    else:
        typer.echo(render_tool_text(url, output))
    raise typer.Exit(code=0)


@app.command("serve", add_help_option=True)
def serve(
    mode: str = typer.Option("stdio", "--mode", help="MCP transport: stdio or http."),
    host: Optional[str] = typer.Option(None, "--host", help="Bind host for HTTP mode."),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port for HTTP mode."),
) -> None:
    """Run the MCP server exposing the fetch tool."""
    if mode not in TRANSPORTS:
        typer.echo(f"Invalid mode: {mode}. Valid options are: {', '.join(TRANSPORTS)}", err=True)
        raise typer.Exit(code=1)
    try:
        run_server(
            mode,
            host=host or _env_str("DOCFETCH_HOST") or None,
            port=port or _env_int("DOCFETCH_PORT") or None,
        )
    except Exception as exc:
        typer.echo(f"Fatal error running server: {exc}", err=True)
        raise typer.Exit(code=1)
