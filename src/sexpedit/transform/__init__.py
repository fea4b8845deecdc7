"""
Structural transforms.

Functional entry points build a StructuralEditor per call:

    result = slurp("(foo (bar) baz)", 10)
    result.text  # "(foo (bar baz))"
"""

from typing import Optional

from sexpedit.config import EngineConfig
from sexpedit.dialects import EMACS_LISP, DialectConfig
from sexpedit.schemas import TransformResult
from .context import Cursor, Edit, EditContext
from .facade import StructuralEditor


def _editor(dialect: Optional[DialectConfig], config: Optional[EngineConfig]) -> StructuralEditor:
    return StructuralEditor(dialect or EMACS_LISP, config)


def slurp(text: str, cursor: Cursor, count: int = 1, dialect: Optional[DialectConfig] = None,
          config: Optional[EngineConfig] = None) -> TransformResult:
    return _editor(dialect, config).slurp(text, cursor, count)


def barf(text: str, cursor: Cursor, count: int = 1, dialect: Optional[DialectConfig] = None,
         config: Optional[EngineConfig] = None) -> TransformResult:
    return _editor(dialect, config).barf(text, cursor, count)


def raise_sexp(text: str, cursor: Cursor, count: int = 1, dialect: Optional[DialectConfig] = None,
               config: Optional[EngineConfig] = None) -> TransformResult:
    return _editor(dialect, config).raise_sexp(text, cursor, count)


def convolute(text: str, cursor: Cursor, count: int = 1, dialect: Optional[DialectConfig] = None,
              config: Optional[EngineConfig] = None) -> TransformResult:
    return _editor(dialect, config).convolute(text, cursor, count)


def splice(text: str, cursor: Cursor, count: int = 1, dialect: Optional[DialectConfig] = None,
           config: Optional[EngineConfig] = None) -> TransformResult:
    return _editor(dialect, config).splice(text, cursor, count)


def join(text: str, cursor: Cursor, count: int = 1, dialect: Optional[DialectConfig] = None,
         config: Optional[EngineConfig] = None) -> TransformResult:
    return _editor(dialect, config).join(text, cursor, count)


def split(text: str, cursor: Cursor, count: int = 1, dialect: Optional[DialectConfig] = None,
          config: Optional[EngineConfig] = None) -> TransformResult:
    return _editor(dialect, config).split(text, cursor, count)


def move_up(text: str, cursor: Cursor, count: int = 1, dialect: Optional[DialectConfig] = None,
            config: Optional[EngineConfig] = None) -> TransformResult:
    return _editor(dialect, config).move_up(text, cursor, count)


def move_down(text: str, cursor: Cursor, count: int = 1, dialect: Optional[DialectConfig] = None,
              config: Optional[EngineConfig] = None) -> TransformResult:
    return _editor(dialect, config).move_down(text, cursor, count)


def teleport(text: str, cursor: Cursor, target: int, count: int = 1,
             dialect: Optional[DialectConfig] = None,
             config: Optional[EngineConfig] = None) -> TransformResult:
    return _editor(dialect, config).teleport(text, cursor, target, count)


__all__ = [
    "Cursor",
    "Edit",
    "EditContext",
    "StructuralEditor",
    "slurp",
    "barf",
    "raise_sexp",
    "convolute",
    "splice",
    "join",
    "split",
    "move_up",
    "move_down",
    "teleport",
]
