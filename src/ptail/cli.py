from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from ptail.config.loader import build_config, load_defaults, merge_options
from ptail.config.schema import TailDefaults
from ptail.engine.runner import tail_files
from ptail.engine.source import resolve_targets
from ptail.util.errors import ConfigError, OutputError, SourceError

app = typer.Typer(help="Print the last part of files", add_completion=False)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)

_PROG = "ptail"


def _report_source_error(error: SourceError) -> None:
    err_console.print(f"[red]{_PROG}:[/red] {escape(error.name)}: {escape(error.detail)}")


def _detach_stdout() -> None:
    # The reader went away; point fd 1 at devnull so the exit-time flush stays silent.
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())
    os.close(devnull)


def _load_defaults_or_exit(config_path: Path | None) -> TailDefaults:
    if config_path is None:
        return TailDefaults()
    try:
        return load_defaults(config_path)
    except ConfigError as exc:
        err_console.print(f"[red]Config error:[/red] {escape(str(exc))}")
        raise typer.Exit(2) from exc


@app.command()
def main(
    files: Annotated[list[str] | None, typer.Argument(metavar="[FILE]...", show_default=False)] = None,
    lines: Annotated[
        str | None,
        typer.Option("--lines", "-n", metavar="COUNT", help="Number of lines (default 10)"),
    ] = None,
    bytes_: Annotated[
        str | None, typer.Option("--bytes", "-c", metavar="COUNT", help="Number of bytes")
    ] = None,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Never print file headers")] = False,
    config_path: Annotated[
        Path | None, typer.Option("--config", help="YAML file with default options")
    ] = None,
) -> None:
    defaults = _load_defaults_or_exit(config_path)
    try:
        lines, bytes_, quiet = merge_options(defaults, lines, bytes_, quiet)
        config = build_config(files or ["-"], lines, bytes_, quiet)
    except ConfigError as exc:
        err_console.print(f"[red]{_PROG}:[/red] {escape(str(exc))}")
        raise typer.Exit(2) from exc

    try:
        errors = tail_files(
            config,
            sys.stdout.buffer,
            targets=resolve_targets(config.files),
            on_error=_report_source_error,
        )
    except OutputError as exc:
        if exc.broken_pipe:
            _detach_stdout()
        else:
            err_console.print(f"[red]{_PROG}:[/red] write error: {escape(exc.detail)}")
        raise typer.Exit(1) from exc
    raise typer.Exit(1 if errors else 0)


if __name__ == "__main__":
    app()
