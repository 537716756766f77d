from __future__ import annotations

import logging
import sys
from importlib.metadata import PackageNotFoundError, version as package_version
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from dotenv import load_dotenv

from .config import AppConfig
from .logging import configure_logging
from .models import BatchEntry
from .pipeline import (
    LineLookupError,
    convert_feature_lines,
    convert_line,
    join_methods,
    read_line,
    resolve_single_line,
)


app = typer.Typer(
    name="step-binder",
    help="Generate ATF step bindings and C# method stubs from Gherkin step lines",
    add_completion=False,
    no_args_is_help=True,
)
console = Console(stderr=True)
logger = logging.getLogger(__name__)


def _load_config() -> AppConfig:
    load_dotenv(override=False)
    return AppConfig()


def _version_callback(value: bool) -> None:
    if value:
        try:
            current = package_version("step-binder")
        except PackageNotFoundError:
            current = "unknown"
        typer.echo(f"step-binder {current}")
        raise typer.Exit()


def _write_output(out: str, text: str, encoding: str) -> Path:
    out_path = Path(out).resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    # Bytes keep the CRLF line endings intact on every platform
    out_path.write_bytes(text.encode(encoding))
    return out_path


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase verbosity (-v, -vv)"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-error output"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging with timestamps and source paths"),
):
    """Turn Given/When/Then lines into C# step methods."""
    global console
    console = configure_logging(verbosity=verbose, quiet=quiet, no_color=no_color, debug=debug)


@app.command()
def bind(
    text: Optional[str] = typer.Argument(None, help="Step line to convert; '-' or omitted reads stdin"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Read the step from this file (requires --line)"),
    line: Optional[int] = typer.Option(None, "--line", "-l", help="1-based line number within --file"),
    out: Optional[str] = typer.Option(None, "--out", "-o", help="Also write the generated method to this file"),
):
    """Convert a single step line into a binding attribute and method stub."""
    cfg = _load_config()

    if file is not None:
        if text is not None:
            raise typer.BadParameter("Pass either a step line or --file, not both")
        if line is None:
            raise typer.BadParameter("--line is required with --file")
        path = Path(file).resolve()
        if not path.exists():
            raise typer.BadParameter(f"File not found: {path}")
        try:
            source = read_line(path, line)
        except LineLookupError as e:
            raise typer.BadParameter(str(e)) from e
        except (OSError, UnicodeDecodeError) as e:
            raise typer.BadParameter(f"Cannot read {path}: {e}") from e
    elif text is None or text == "-":
        source = sys.stdin.read()
    else:
        source = text

    resolved = resolve_single_line(source)
    if not isinstance(resolved, str):
        typer.echo(resolved.message)
        raise typer.Exit(code=1)

    result = convert_line(resolved)
    if not result.ok:
        typer.echo(result.message)
        raise typer.Exit(code=1)

    typer.echo(result.text)
    if out:
        out_path = _write_output(out, result.text, cfg.output_encoding)
        console.print(f"[green]Wrote[/green] {out_path}")
    logger.info("Generated %s with %d parameter(s)", result.method_name, len(result.parameter_names))


@app.command(name="bind-file")
def bind_file(
    feature: str = typer.Argument(..., help="Path to a .feature file"),
    out: Optional[str] = typer.Option(None, "--out", "-o", help="Write generated methods here instead of stdout"),
    skip_conjunctions: Optional[bool] = typer.Option(
        None,
        "--skip-conjunctions/--no-skip-conjunctions",
        help="Skip And/Or/But lines instead of reporting them as errors",
    ),
):
    """Convert every Given/When/Then line of a feature file."""
    cfg = _load_config()
    path = Path(feature).resolve()
    if not path.exists():
        raise typer.BadParameter(f"Feature file not found: {path}")

    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise typer.BadParameter(f"Cannot read {path}: {e}") from e

    def _progress(i: int, total: int, entry: BatchEntry) -> None:
        pct = int(i * 100 / max(1, total))
        logger.debug("Converted %d/%d (%d%%) - line %d", i, total, pct, entry.line_number)

    entries = convert_feature_lines(lines, cfg, skip_conjunctions=skip_conjunctions, progress_callback=_progress)
    if not entries:
        console.print("[yellow]No step lines found[/yellow]")
        raise typer.Exit(code=0)

    output = join_methods(entries)
    if out:
        out_path = _write_output(out, output, cfg.output_encoding)
        console.print(f"[green]Wrote[/green] {out_path}")
    elif output:
        typer.echo(output)

    failed = [e for e in entries if not e.ok]
    if failed:
        table = Table(title="Rejected Steps")
        table.add_column("Line")
        table.add_column("Step")
        table.add_column("Error")
        for e in failed:
            table.add_row(str(e.line_number), escape(e.source.strip()), escape(e.result.message))
        console.print(table)
        raise typer.Exit(code=1)

    console.print(f"Converted [bold]{len(entries)}[/bold] steps from {path}")


if __name__ == "__main__":  # pragma: no cover
    app()
