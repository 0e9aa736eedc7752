#!/usr/bin/env python3
"""gitagent CLI entrypoint."""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from gitagent.git.binary import GitBinaryResolver
from gitagent.git.errors import GitError
from gitagent.git.operations import RepositoryOperations
from gitagent.lib.config import Settings, load_settings
from gitagent.lib.paths import make_path_validator
from gitagent.lib.responses import error_response
from gitagent.lib.tools import dispatch
from gitagent.lib.validate import tool_names

TOOL_NAME_ENV = "TOOL_NAME"


def build_operations(settings: Settings) -> RepositoryOperations:
    """Operations facade confined to the configured roots."""
    resolver = GitBinaryResolver(env_vars=settings.binary_env_vars)
    return RepositoryOperations(make_path_validator(settings.roots), resolver=resolver)


def read_envelope(stream) -> dict | None:
    """Parse the JSON request body, or None if empty or not JSON."""
    raw = stream.read()
    if not raw or not raw.strip():
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return None


def cmd_call(args, settings: Settings) -> int:
    """Run one tool call: JSON envelope on stdin, JSON response on stdout."""
    tool = args.tool or os.environ.get(TOOL_NAME_ENV)
    if not tool:
        print(json.dumps(error_response(f"Missing {TOOL_NAME_ENV}.")))
        return 0

    envelope = read_envelope(sys.stdin)
    response = dispatch(
        build_operations(settings), tool, envelope or {},
        default_max_repos=settings.max_repos, pretty=args.pretty,
    )
    print(json.dumps(response))
    return 0


def cmd_tools(args, settings: Settings) -> int:
    """List available tool names."""
    for name in tool_names():
        print(name)
    return 0


def _bucket_summary(counts: dict[str, int]) -> str:
    parts = [f"{n} {name}" for name, n in counts.items() if n]
    return ", ".join(parts) if parts else "-"


def cmd_overview(args, settings: Settings) -> int:
    """Print the multi-repository overview as a table."""
    console = Console()
    ops = build_operations(settings)
    try:
        result = ops.repos_overview(args.path, args.max_repos or settings.max_repos)
    except GitError as e:
        console.print(f"[red]ERROR: {e}[/]")
        return 1

    if not result.repos:
        console.print(f"No repositories found under {result.repos_root}")
        return 0

    table = Table(title=f"Repositories under {result.repos_root}")
    table.add_column("Repository")
    table.add_column("Branch")
    table.add_column("State")
    table.add_column("Changes")
    table.add_column("Ignored", justify="right")
    for row in result.repos:
        if not row.ok:
            state = "[red]not a repo[/]"
        elif row.dirty:
            state = "[yellow]dirty[/]"
        else:
            state = "[green]clean[/]"
        table.add_row(
            row.relative_path,
            row.branch or "-",
            state,
            _bucket_summary(row.counts),
            str(row.ignored_count) if row.ignored_count is not None else "-",
        )
    console.print(table)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(prog='gitagent', description='Git operations for tool-calling clients')
    parser.add_argument('--config', '-c', help='Path to gitagent.yaml')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # gitagent call
    p_call = subparsers.add_parser('call', help='Run a tool call read from stdin')
    p_call.add_argument('tool', nargs='?', help=f'Tool name (defaults to ${TOOL_NAME_ENV})')
    p_call.add_argument('--pretty', action='store_true', help='Indent JSON results')
    p_call.set_defaults(func=cmd_call)

    # gitagent tools
    p_tools = subparsers.add_parser('tools', help='List tool names')
    p_tools.set_defaults(func=cmd_tools)

    # gitagent overview
    p_overview = subparsers.add_parser('overview', help='Summarise repositories under a directory')
    p_overview.add_argument('path', nargs='?', default='.', help='Directory to scan (default: first root)')
    p_overview.add_argument('--max-repos', '-n', type=int, help='Maximum repositories to report')
    p_overview.set_defaults(func=cmd_overview)

    args = parser.parse_args(argv)
    settings = load_settings(Path(args.config).resolve() if args.config else None)
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args, settings)


if __name__ == '__main__':
    sys.exit(main())
