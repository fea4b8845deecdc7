"""
CLI Edit Commands

edit (structural operations at a point), delete, paste
"""

from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from sexpedit.config import get_engine_config
from sexpedit.logging_config import logger
from sexpedit.schemas import TransformResult
from sexpedit.transform import StructuralEditor
from .common import atomic_write, read_source, resolve_dialect
from .config import CLIConfig
from .output import echo, get_console, print_error, print_json

console = get_console()


class Operation(str, Enum):
    slurp = "slurp"
    barf = "barf"
    raise_ = "raise"
    convolute = "convolute"
    splice = "splice"
    join = "join"
    split = "split"
    move_up = "move-up"
    move_down = "move-down"
    teleport = "teleport"
    oneline = "oneline"
    multiline = "multiline"
    pretty = "pretty"


def _check_offset(name: str, value: int, text: str) -> None:
    if not 0 <= value <= len(text):
        print_error("BAD_OFFSET", f"{name} {value} is outside the buffer (0..{len(text)})",
                    position=value)
        raise typer.Exit(code=1)


def _dispatch(editor: StructuralEditor, op: Operation, text: str, cursor, count: int,
              target: Optional[int]) -> TransformResult:
    if op is Operation.teleport:
        if target is None:
            print_error("MISSING_TARGET", "teleport needs --target (offset of the destination opener)")
            raise typer.Exit(code=1)
        return editor.teleport(text, cursor, target, count)
    if op in (Operation.oneline, Operation.multiline, Operation.pretty):
        return editor.normalize_at(text, cursor, op.value)
    method = {
        Operation.slurp: editor.slurp,
        Operation.barf: editor.barf,
        Operation.raise_: editor.raise_sexp,
        Operation.convolute: editor.convolute,
        Operation.splice: editor.splice,
        Operation.join: editor.join,
        Operation.split: editor.split,
        Operation.move_up: editor.move_up,
        Operation.move_down: editor.move_down,
    }[op]
    return method(text, cursor, count)


def _report(result: TransformResult, file: Path, text: str, line_ending: str, in_place: bool) -> None:
    """Write or print a result and exit 1 when the operation was refused."""
    if not result.success:
        if CLIConfig.is_machine_mode():
            print_json(result.model_dump())
        else:
            console.print(f"[yellow]{result.operation} refused: {result.message}[/yellow]")
        raise typer.Exit(code=1)

    if in_place:
        if result.text != text:
            atomic_write(file, result.text, line_ending)
        logger.info(f"{result.operation} applied to {file}")
        if CLIConfig.is_machine_mode():
            data = result.model_dump(exclude={"text"})
            data["file"] = str(file)
            print_json(data)
        else:
            console.print(f"[green]{result.operation}: {file} updated, point {result.point}[/green]")
    elif CLIConfig.is_machine_mode():
        print_json(result.model_dump())
    else:
        echo(result.text, nl=False)


def edit_cmd(
    op: Operation = typer.Argument(..., help="Structural operation"),
    file: Path = typer.Argument(..., help="Lisp source file", exists=True, dir_okay=False),
    point: int = typer.Option(..., "--point", "-p", help="Cursor offset"),
    mark: Optional[int] = typer.Option(None, "--mark", help="Selection start; makes the selection active"),
    count: int = typer.Option(1, "--count", "-n", help="Repeat count (0 = all, slurp/barf only)"),
    target: Optional[int] = typer.Option(None, "--target", "-t", help="Destination opener offset (teleport)"),
    dialect: Optional[str] = typer.Option(None, "--dialect", "-d", help="Dialect name (default: from extension)"),
    in_place: bool = typer.Option(False, "--in-place", "-i", help="Rewrite the file atomically"),
):
    """
    Run a structural operation at a point.

    Machine mode prints the transform result as JSON; human mode prints
    the edited text. A refused operation exits with status 1 and leaves
    the file untouched.
    """
    text, line_ending = read_source(file)
    lisp = resolve_dialect(dialect, file)
    _check_offset("point", point, text)
    if mark is not None:
        _check_offset("mark", mark, text)
    if count < 0:
        print_error("BAD_COUNT", f"count must be >= 0, got {count}")
        raise typer.Exit(code=1)

    cursor = (mark, point) if mark is not None else point
    editor = StructuralEditor(lisp, get_engine_config())
    result = _dispatch(editor, op, text, cursor, count, target)
    _report(result, file, text, line_ending, in_place)


def delete_cmd(
    file: Path = typer.Argument(..., help="Lisp source file", exists=True, dir_okay=False),
    start: int = typer.Option(..., "--start", help="Region start offset"),
    end: int = typer.Option(..., "--end", help="Region end offset"),
    dialect: Optional[str] = typer.Option(None, "--dialect", "-d", help="Dialect name (default: from extension)"),
    in_place: bool = typer.Option(False, "--in-place", "-i", help="Rewrite the file atomically"),
):
    """
    Delete a region, keeping delimiters whose partner lies outside it.
    """
    text, line_ending = read_source(file)
    lisp = resolve_dialect(dialect, file)
    _check_offset("start", start, text)
    _check_offset("end", end, text)

    result = StructuralEditor(lisp, get_engine_config()).delete_region(text, (start, end))
    _report(result, file, text, line_ending, in_place)


def paste_cmd(
    file: Path = typer.Argument(..., help="Lisp source file", exists=True, dir_okay=False),
    point: int = typer.Option(..., "--point", "-p", help="Insertion offset"),
    content: str = typer.Option(..., "--text", help="Text to paste"),
    mark: Optional[int] = typer.Option(None, "--mark", help="Replace the region between mark and point"),
    dialect: Optional[str] = typer.Option(None, "--dialect", "-d", help="Dialect name (default: from extension)"),
    in_place: bool = typer.Option(False, "--in-place", "-i", help="Rewrite the file atomically"),
):
    """
    Paste text at a point, balancing it first.
    """
    text, line_ending = read_source(file)
    lisp = resolve_dialect(dialect, file)
    _check_offset("point", point, text)
    if mark is not None:
        _check_offset("mark", mark, text)

    cursor = (mark, point) if mark is not None else point
    result = StructuralEditor(lisp, get_engine_config()).paste(text, cursor, content)
    _report(result, file, text, line_ending, in_place)
