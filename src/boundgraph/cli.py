"""boundgraph CLI entry point."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from boundgraph import __version__


@click.group()
@click.version_option(version=__version__, prog_name="boundgraph")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """boundgraph - architectural boundary checks for multi-project workspaces."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    elif quiet:
        logging.basicConfig(level=logging.ERROR)


def _parse_resolve_options(values: tuple[str, ...]) -> dict[str, str]:
    """Turn repeated ``PREFIX=PROJECT`` options into a mapping."""
    mapping: dict[str, str] = {}
    for value in values:
        prefix, sep, project = value.partition("=")
        if not sep or not prefix or not project:
            msg = f"expected PREFIX=PROJECT, got '{value}'"
            raise click.BadParameter(msg, param_hint="--resolve")
        mapping[prefix] = project
    return mapping


@main.command()
@click.argument("imports", nargs=-1, required=True)
@click.option(
    "--graph",
    "graph_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Project graph YAML file.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="boundaries.yml with allow patterns and tag constraints.",
)
@click.option("--file", "source_file", required=True, help="Workspace-relative importing file.")
@click.option(
    "--project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Workspace root (default: current directory).",
)
@click.option(
    "--resolve",
    "resolve",
    multiple=True,
    help="Map an import prefix to a project, as PREFIX=PROJECT (repeatable).",
)
@click.option("--scope", default="", help="Workspace package scope (e.g. 'acme').")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "json", "porcelain"]),
    default=None,
    help="Output format (default: rich if TTY, porcelain if piped).",
)
@click.option("--strict", is_flag=True, default=False, help="Exit 1 if violations found.")
def check(
    imports: tuple[str, ...],
    *,
    graph_path: Path,
    config_path: Path,
    source_file: str,
    project: Path | None,
    resolve: tuple[str, ...],
    scope: str,
    fmt: str | None,
    strict: bool,
) -> None:
    """Check IMPORTS written in --file against the workspace boundaries.

    Exit codes: 0 = clean or violations without --strict,
    1 = violations with --strict, 2 = configuration error.
    """
    from boundgraph.checker import CheckError, format_json, format_porcelain, format_rich, run_check
    from boundgraph.projects import MappingImportResolver

    project_root = project or Path.cwd()
    resolver = MappingImportResolver(_parse_resolve_options(resolve))

    if fmt is None:
        fmt = "rich" if sys.stdout.isatty() else "porcelain"

    try:
        result = run_check(
            graph_path,
            config_path,
            source_file,
            imports,
            project_path=str(project_root),
            resolver=resolver,
            scope=scope,
        )
    except CheckError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    formatters = {
        "rich": format_rich,
        "json": format_json,
        "porcelain": format_porcelain,
    }
    output = formatters[fmt](result)
    if output:
        click.echo(output)

    if strict and result.violations:
        sys.exit(1)


@main.command()
@click.argument("source")
@click.argument("target")
@click.option(
    "--graph",
    "graph_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Project graph YAML file.",
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON.")
def path(source: str, target: str, *, graph_path: Path, output_json: bool) -> None:
    """Show one dependency chain from SOURCE to TARGET (exit 1 if none)."""
    from rich.console import Console
    from rich.tree import Tree

    from boundgraph.graph.loader import load_graph
    from boundgraph.graph.reachability import find_path

    try:
        loaded = load_graph(graph_path)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)
    if loaded.errors:
        for error in loaded.errors:
            click.echo(f"Error: {error}", err=True)
        sys.exit(2)

    chain = find_path(loaded.graph, source, target)

    if output_json:
        click.echo(json.dumps({"source": source, "target": target, "path": chain}, indent=2))
    elif chain:
        tree = Tree(f"[bold]{chain[0]}[/]")
        branch = tree
        for name in chain[1:]:
            branch = branch.add(f"[cyan]{name}[/]")
        Console().print(tree)
    else:
        click.echo(f"No dependency path from '{source}' to '{target}'.")

    if not chain:
        sys.exit(1)


@main.command()
@click.argument("pattern")
@click.argument("specifier")
def match(pattern: str, specifier: str) -> None:
    """Tell whether SPECIFIER matches the allow PATTERN."""
    from boundgraph.rules.patterns import parse_pattern

    parsed = parse_pattern(pattern)
    if parsed.error is not None:
        click.echo(f"Warning: {parsed.error}", err=True)
    click.echo("true" if parsed.matches(specifier) else "false")
