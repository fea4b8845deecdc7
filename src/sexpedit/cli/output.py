"""
CLI Output Utilities

Machine-aware output functions that adapt based on machine mode.
"""

import json
import re
import sys
from typing import Any, Optional

import typer
from rich.console import Console as RichConsole
from rich.markup import escape
from rich.tree import Tree

from sexpedit.cli.config import CLIConfig


class MachineAwareConsole:
    """
    A Console wrapper that automatically adapts output based on machine mode.
    Acts as a drop-in replacement for rich.console.Console.
    """

    def __init__(self):
        self._rich_console = RichConsole()

    def print(self, *args, **kwargs):
        """Print that respects machine mode."""
        if CLIConfig.is_machine_mode():
            for arg in args:
                if isinstance(arg, str):
                    # Remove rich markup
                    plain = re.sub(r'\[/?[a-z ]+\]', '', arg).strip()
                    if plain:
                        print(plain)
                elif hasattr(arg, '__rich__') or hasattr(arg, '__rich_console__'):
                    # Skip rich renderables in machine mode
                    pass
                elif arg:
                    print(arg)
        else:
            self._rich_console.print(*args, **kwargs)

    def __getattr__(self, name):
        """Delegate all other attributes to the rich console."""
        return getattr(self._rich_console, name)


_console = MachineAwareConsole()


def echo(message: str = "", nl: bool = True, err: bool = False) -> None:
    """
    Print a message respecting machine mode.
    In machine mode, prints plain text.
    """
    if CLIConfig.is_machine_mode():
        print(message, end="\n" if nl else "", file=sys.stderr if err else sys.stdout)
    else:
        typer.echo(message, nl=nl, err=err)


def print_json(data: Any, minified: Optional[bool] = None) -> None:
    """
    Print JSON data respecting machine mode.
    In machine mode, always minifies. In human mode, pretty prints.
    """
    if minified is None:
        minified = CLIConfig.is_machine_mode()

    if minified:
        echo(json.dumps(data, separators=(',', ':')))
    else:
        echo(json.dumps(data, indent=2))


def structured_error(code: str, message: str, input_value: Optional[str] = None,
                     position: Optional[int] = None, suggestions: Optional[list] = None) -> dict:
    """
    Create a structured error object for machine mode.

    Args:
        code: Error code (e.g., "READ_ERROR", "FILE_NOT_FOUND")
        message: Human-readable error message
        input_value: The input that caused the error
        position: Buffer offset the error refers to
        suggestions: List of alternative suggestions

    Returns:
        Structured error dictionary
    """
    error_obj = {
        "status": "error",
        "code": code,
        "message": message
    }
    if input_value:
        error_obj["input"] = input_value
    if position is not None and position >= 0:
        error_obj["position"] = position
    if suggestions:
        error_obj["suggestions"] = suggestions
    return error_obj


def print_error(code: str, message: str, **kwargs) -> None:
    """Print an error: JSON in machine mode, red text otherwise."""
    if CLIConfig.is_machine_mode():
        print_json(structured_error(code, message, **kwargs))
    else:
        _console.print(f"[red]Error: {message}[/red]")
        if kwargs.get("suggestions"):
            _console.print(f"[dim]Suggestions: {', '.join(kwargs['suggestions'])}[/dim]")


def tree_renderable(data: Any, label: str = "root") -> Tree:
    """Build a rich Tree from the JSON rendering of a lossless tree."""
    tree = Tree(f"[bold]{label}[/bold]")
    _add_nodes(tree, data)
    return tree


def _add_nodes(branch: Tree, data: Any) -> None:
    if "root" in data:
        for child in data["root"]:
            _add_nodes(branch, child)
    elif "atom" in data:
        branch.add(f"[cyan]{escape(data['atom'])}[/cyan]")
    elif "list" in data:
        sub = branch.add(f"[bold]{escape(data['list'])}[/bold]")
        for child in data["children"]:
            _add_nodes(sub, child)
    elif isinstance(data.get("payload"), dict):
        sub = branch.add(f"[magenta]{data['escape']}[/magenta]")
        for child in data.get("layout", []):
            _add_nodes(sub, child)
        _add_nodes(sub, data["payload"])
    elif data["escape"] not in ("space", "newline"):
        branch.add(f"[green]{data['escape']}[/green] {escape(repr(data['payload']))}")


def get_console() -> MachineAwareConsole:
    """
    Get the console instance for advanced usage.
    Note: Direct console usage should check machine mode.
    """
    return _console
