"""
Common CLI helpers shared by the command modules: dialect resolution,
source loading and atomic writes that keep the file's line endings.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Tuple

import typer

from sexpedit.dialects import DialectConfig, dialect_for_path, get_dialect
from sexpedit.exceptions import DialectError
from sexpedit.logging_config import logger
from .config import CLIConfig
from .output import print_error


def resolve_dialect(name: Optional[str], path: Optional[Path] = None) -> DialectConfig:
    """
    Pick the dialect: --dialect wins, then the file extension, then the default.

    Raises:
        typer.Exit: If --dialect names an unknown dialect
    """
    if name:
        try:
            return get_dialect(name)
        except DialectError as e:
            print_error("UNKNOWN_DIALECT", str(e), input_value=name, suggestions=e.known)
            raise typer.Exit(code=1)
    if path is not None:
        try:
            return dialect_for_path(path)
        except DialectError:
            logger.debug(f"No dialect for {path}, using {CLIConfig.DEFAULT_DIALECT}")
    return get_dialect(CLIConfig.DEFAULT_DIALECT)


def detect_line_ending(content: str) -> str:
    """'\\r\\n' for CRLF content, '\\n' otherwise."""
    if '\r\n' in content:
        return '\r\n'
    return '\n'


def normalize_line_endings(content: str, line_ending: str) -> str:
    """Convert all line endings to line_ending."""
    content = content.replace('\r\n', '\n')
    if line_ending == '\r\n':
        content = content.replace('\n', '\r\n')
    return content


def read_source(path: Path) -> Tuple[str, str]:
    """
    Read a source file as LF text.

    Returns:
        (text with LF line endings, original line ending)
    """
    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            content = f.read()
    except OSError as e:
        print_error("FILE_READ_ERROR", f"Failed to read {path}: {e}", input_value=str(path))
        raise typer.Exit(code=1)
    line_ending = detect_line_ending(content)
    return normalize_line_endings(content, '\n'), line_ending


def atomic_write(path: Path, content: str, line_ending: str = '\n') -> None:
    """
    Write file atomically using temp file + rename, restoring line endings.

    Raises:
        typer.Exit: If the write fails
    """
    content = normalize_line_endings(content, line_ending)
    # Temp file in the target directory keeps the rename on one filesystem
    fd, temp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
        os.replace(temp_path, str(path))
        logger.debug(f"Atomic write completed: {path}")
    except OSError as e:
        logger.error(f"Atomic write failed for {path}: {e}")
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        print_error("FILE_WRITE_ERROR", f"Failed to write {path}: {e}", input_value=str(path))
        raise typer.Exit(code=1)
