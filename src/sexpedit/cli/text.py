"""
CLI Text Commands

read, check, normalize, balance, unmatched
"""

from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from sexpedit.config import get_engine_config
from sexpedit.exceptions import ReadError
from sexpedit.logging_config import logger
from sexpedit.normalize import Normalizer
from sexpedit.reader import print_tree, read, to_data
from sexpedit.safety import balance, scan_region
from sexpedit.syntax.structure import analyze
from .common import atomic_write, read_source, resolve_dialect
from .config import CLIConfig
from .output import echo, get_console, print_error, print_json, tree_renderable

console = get_console()


class LayoutMode(str, Enum):
    pretty = "pretty"
    indent = "indent"
    oneline = "oneline"
    multiline = "multiline"


def _read_or_exit(text: str, dialect, path: Path):
    try:
        return read(text, dialect)
    except ReadError as e:
        print_error("READ_ERROR", e.message, input_value=str(path), position=e.position)
        raise typer.Exit(code=1)


def read_cmd(
    file: Path = typer.Argument(..., help="Lisp source file", exists=True, dir_okay=False),
    dialect: Optional[str] = typer.Option(None, "--dialect", "-d", help="Dialect name (default: from extension)"),
):
    """
    Read a file into its lossless tree and print it.
    """
    text, _ = read_source(file)
    lisp = resolve_dialect(dialect, file)
    tree = _read_or_exit(text, lisp, file)

    if CLIConfig.is_machine_mode():
        print_json(to_data(tree))
    else:
        console.print(tree_renderable(to_data(tree), label=f"{file} ({lisp.name})"))


def check_cmd(
    file: Path = typer.Argument(..., help="Lisp source file", exists=True, dir_okay=False),
    dialect: Optional[str] = typer.Option(None, "--dialect", "-d", help="Dialect name (default: from extension)"),
):
    """
    Check that a file is balanced and prints back byte-for-byte.
    """
    text, _ = read_source(file)
    lisp = resolve_dialect(dialect, file)
    structure = analyze(text, lisp)

    roundtrip = False
    message = None
    try:
        roundtrip = print_tree(read(text, lisp)) == text
    except ReadError as e:
        message = str(e)

    result = {
        "status": "ok" if roundtrip and structure.balanced else "error",
        "file": str(file),
        "dialect": lisp.name,
        "balanced": structure.balanced,
        "roundtrip": roundtrip,
        "errors": structure.errors,
    }
    if message:
        result["message"] = message

    if CLIConfig.is_machine_mode():
        print_json(result)
    elif result["status"] == "ok":
        console.print(f"[green]{file}: balanced, round-trips exactly[/green]")
    else:
        console.print(f"[red]{file}: {message or 'unbalanced'}[/red]")
        for offset in structure.errors:
            console.print(f"[dim]  offending delimiter at offset {offset}[/dim]")

    if result["status"] != "ok":
        raise typer.Exit(code=1)


def normalize_cmd(
    file: Path = typer.Argument(..., help="Lisp source file", exists=True, dir_okay=False),
    mode: LayoutMode = typer.Option(LayoutMode.pretty, "--mode", "-m", help="Layout mode"),
    offset: int = typer.Option(0, "--offset", help="Column the text starts at"),
    dialect: Optional[str] = typer.Option(None, "--dialect", "-d", help="Dialect name (default: from extension)"),
    in_place: bool = typer.Option(False, "--in-place", "-i", help="Rewrite the file atomically"),
):
    """
    Lay out a whole file in one of the normalizer modes.
    """
    text, line_ending = read_source(file)
    lisp = resolve_dialect(dialect, file)
    normalizer = Normalizer(lisp, get_engine_config())
    try:
        result = normalizer.apply(text, mode.value, offset)
    except ReadError as e:
        print_error("READ_ERROR", e.message, input_value=str(file), position=e.position)
        raise typer.Exit(code=1)

    if text.endswith("\n") and not result.endswith("\n"):
        result += "\n"
    if in_place:
        atomic_write(file, result, line_ending)
        logger.info(f"Normalized {file} ({mode.value})")
        if CLIConfig.is_machine_mode():
            print_json({"status": "ok", "file": str(file), "mode": mode.value, "changed": result != text})
        else:
            console.print(f"[green]Normalized {file} ({mode.value})[/green]")
    else:
        echo(result, nl=False)


def balance_cmd(
    file: Path = typer.Argument(..., help="Lisp source file", exists=True, dir_okay=False),
    dialect: Optional[str] = typer.Option(None, "--dialect", "-d", help="Dialect name (default: from extension)"),
    in_place: bool = typer.Option(False, "--in-place", "-i", help="Rewrite the file atomically"),
):
    """
    Add the delimiters needed to make a file readable.
    """
    text, line_ending = read_source(file)
    lisp = resolve_dialect(dialect, file)
    result = balance(text, lisp)

    if in_place:
        atomic_write(file, result, line_ending)
        if CLIConfig.is_machine_mode():
            print_json({"status": "ok", "file": str(file), "changed": result != text})
        else:
            console.print(f"[green]Balanced {file}[/green]")
    else:
        echo(result, nl=False)


def unmatched_cmd(
    file: Path = typer.Argument(..., help="Lisp source file", exists=True, dir_okay=False),
    start: int = typer.Option(0, "--start", help="Span start offset"),
    end: Optional[int] = typer.Option(None, "--end", help="Span end offset (default: end of file)"),
    dialect: Optional[str] = typer.Option(None, "--dialect", "-d", help="Dialect name (default: from extension)"),
):
    """
    Report delimiters in a span that have no partner inside it.
    """
    text, _ = read_source(file)
    lisp = resolve_dialect(dialect, file)
    report = scan_region(text, (start, len(text) if end is None else end), lisp, get_engine_config())

    if CLIConfig.is_machine_mode():
        data = report.model_dump()
        data["balanced"] = report.balanced
        print_json(data)
    elif not report.complete:
        console.print(f"[yellow]Not scanned: {report.reason}[/yellow]")
    elif not report.unmatched:
        console.print("[green]No unmatched delimiters[/green]")
    else:
        for offset in report.unmatched:
            console.print(f"offset {offset}: [red]{text[offset]!r}[/red]")
