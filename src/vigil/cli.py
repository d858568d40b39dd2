"""Command-line interface for vigil."""

from __future__ import annotations

import argparse
import datetime
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.table import Table

from vigil.config import ConfigError, VigilConfig, load_config
from vigil.logging import setup_logging
from vigil.watching import ChangeDetector, Watermark, categorize, watch_roots_for

console = Console()


def _project_options() -> argparse.ArgumentParser:
    """Options shared by every subcommand."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--root",
        type=Path,
        default=Path("."),
        help="Project root holding vigil.yaml and the watch roots (default: .)",
    )
    common.add_argument(
        "--config",
        type=Path,
        help="Config file path (default: <root>/vigil.yaml)",
    )
    common.add_argument(
        "--env",
        choices=["dev", "prod"],
        help="Override the environment from vigil.yaml",
    )
    return common


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="vigil",
        description="Vigil - live reload for templates, stylesheets, and scripts",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )
    common = _project_options()

    subparsers = parser.add_subparsers(dest="command", help="Command")

    serve_parser = subparsers.add_parser(
        "serve",
        parents=[common],
        help="Serve a static directory with live reload",
    )
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    serve_parser.add_argument(
        "--static",
        type=Path,
        help="Directory served at / (default: the project root)",
    )

    subparsers.add_parser(
        "scan",
        parents=[common],
        help="Show the newest watched file once and exit",
    )

    subparsers.add_parser(
        "config",
        parents=[common],
        help="Show the resolved configuration",
    )

    return parser


def _load(parsed: argparse.Namespace) -> VigilConfig:
    explicit: dict[str, str] = {}
    if parsed.env:
        explicit["environment"] = parsed.env
    return load_config(
        project_root=parsed.root,
        config_path=parsed.config,
        reload=True,
        **explicit,
    )


def _cmd_serve(config: VigilConfig, parsed: argparse.Namespace) -> int:
    from vigil.server import run_server

    if not config.is_dev:
        console.print(
            f"[yellow]Environment is {config.environment!r}; serving without live reload.[/yellow]"
        )
    run_server(config, host=parsed.host, port=parsed.port, static_dir=parsed.static)
    return 0


def _cmd_scan(config: VigilConfig) -> int:
    roots = watch_roots_for(config.project_root, config.watch_roots)
    detector = ChangeDetector(roots, Watermark())
    mtime, path = detector.latest_mtime()

    if path is None:
        console.print("[dim]No watched files found.[/dim]")
        for root in roots:
            marker = "found" if root.path.is_dir() else "missing"
            console.print(f"  {root.path} ({marker})", soft_wrap=True)
        return 1

    when = datetime.datetime.fromtimestamp(mtime).isoformat(sep=" ")
    console.print(f"[bold]{categorize(path).label}[/bold] {path}", soft_wrap=True)
    console.print(f"  modified {when} ({mtime})")
    return 0


def _cmd_config(config: VigilConfig) -> int:
    table = Table(title="Vigil Configuration")
    table.add_column("Setting", style="bold", no_wrap=True)
    table.add_column("Value")

    for key, value in config.to_dict().items():
        if isinstance(value, list):
            value = ", ".join(value)
        table.add_row(key, str(value))

    console.print(table)
    return 0


def run_cli(args: Sequence[str]) -> int:
    """Run the CLI with the given arguments."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.command is None:
        parser.print_help()
        return 1

    try:
        config = _load(parsed)
    except ConfigError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        return 2

    setup_logging(config.log_level, config.log_file)

    if parsed.command == "serve":
        return _cmd_serve(config, parsed)
    elif parsed.command == "scan":
        return _cmd_scan(config)
    elif parsed.command == "config":
        return _cmd_config(config)
    else:
        parser.print_help()
        return 1
