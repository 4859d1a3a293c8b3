"""Sprig command line interface."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import click

from sprig import __version__
from sprig.ast_nodes import dump_tree
from sprig.config import PackageConfig, SprigConfig, find_config, load_config, source_files
from sprig.errors import CompileError, DiagnosticRenderer
from sprig.frontend import check_file, parse_source
from sprig.lexer import Lexer
from sprig.log import get_logger, init_logging

logger = get_logger(__name__)


def _load_project(path: Path) -> tuple[Path, SprigConfig]:
    """Config for *path*, or defaults rooted at *path* when there is none."""
    try:
        config_path = find_config(path)
    except FileNotFoundError:
        root = (path if path.is_dir() else path.parent).resolve()
        return root, SprigConfig(package=PackageConfig(name=root.name))
    logger.debug("using config %s", config_path)
    return config_path.parent, load_config(config_path)


def _fail_with(e: CompileError, color: bool) -> NoReturn:
    renderer = DiagnosticRenderer(color=color)
    for diag in e.diagnostics:
        click.echo(renderer.render(diag), err=True)
    raise SystemExit(1)


@click.group()
@click.version_option(__version__, prog_name="sprig")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """The Sprig language front end."""
    init_logging(verbose)


@main.command()
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.option("--no-color", is_flag=True, help="Render diagnostics without ANSI colors.")
def check(path: Path, no_color: bool) -> None:
    """Parse and check a Sprig file or project."""
    project_dir, config = _load_project(path)
    click.echo(f"checking {config.package.name}...")
    files = [path] if path.is_file() else source_files(project_dir, config)
    if not files:
        click.echo("warning: no .spg files found", err=True)
        return

    renderer = DiagnosticRenderer(color=config.check.color and not no_color)
    failed = 0
    for spg_file in files:
        result = check_file(spg_file)
        for diag in result.diagnostics:
            click.echo(renderer.render(diag), err=True)
        if not result.ok:
            failed += 1

    if failed:
        click.echo(f"{failed} of {len(files)} file(s) failed", err=True)
        raise SystemExit(1)
    click.echo(f"checked {len(files)} file(s): no errors")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--no-color", is_flag=True, help="Render diagnostics without ANSI colors.")
def view(file: Path, no_color: bool) -> None:
    """Print the syntax tree of a Sprig source file."""
    _, config = _load_project(file)
    try:
        program = parse_source(file.read_text(), str(file))
    except CompileError as e:
        _fail_with(e, color=config.check.color and not no_color)
    click.echo(dump_tree(program))


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--no-color", is_flag=True, help="Render diagnostics without ANSI colors.")
def tokens(file: Path, no_color: bool) -> None:
    """List the tokens of a Sprig source file."""
    _, config = _load_project(file)
    try:
        for tok in Lexer(file.read_text(), str(file)).tokens():
            click.echo(f"{tok.line}:{tok.column}\t{tok.kind.name}\t{tok.value!r}")
    except CompileError as e:
        _fail_with(e, color=config.check.color and not no_color)
