"""
Normalizer: canonical layouts for a span of Lisp text.

Every mode reads its input, lays the tree out again and reads the result
back. A result whose meaning differs from the input is discarded with a
warning and the input is returned unchanged.
"""

from typing import Optional

from sexpedit.config import EngineConfig, get_engine_config
from sexpedit.dialects import EMACS_LISP, DialectConfig
from sexpedit.exceptions import ConfigError, ReadError
from sexpedit.logging_config import logger
from sexpedit.reader.reader import Reader
from sexpedit.reader.tree import EscapeKind, Root, comments_of, contains_kind, strip_layout
from .layout import IndentLayout, PrettyLayout, oneline_text


MODES = ("pretty", "indent", "oneline", "multiline")


class Normalizer:
    """
    Usage:
        n = Normalizer(EMACS_LISP)
        n.normalize("(defun f (x) (let ((y 1)) (+ x y)))")
    """

    def __init__(self, dialect: DialectConfig = EMACS_LISP, config: Optional[EngineConfig] = None):
        self.dialect = dialect
        self.config = config or get_engine_config()
        self._reader = Reader(dialect)
        self._risky = frozenset(EscapeKind(kind) for kind in dialect.risky_kinds)

    def normalize(self, text: str, offset: int = 0) -> str:
        """Pretty layout: flat where it fits, broken by layout rules elsewhere."""
        return self._pretty(text, offset, force=False)

    def multiline(self, text: str, offset: int = 0) -> str:
        """Pretty layout with the outermost lists always broken."""
        return self._pretty(text, offset, force=True)

    def reindent(self, text: str, offset: int = 0) -> str:
        """Keep line breaks; fix spacing, blank lines and indentation."""
        tree = self._reader.read(text)
        layout = IndentLayout(self.dialect, self.config.fill_column)
        return self._verify(tree, text, layout.render_root(tree, offset), "indent")

    def oneline(self, text: str, offset: int = 0) -> str:
        """Comments hoisted onto their own lines, code joined onto one line."""
        tree = self._reader.read(text)
        code = strip_layout(tree, drop_comments=True)
        out = oneline_text(code, comments_of(tree), offset)
        return self._verify(tree, text, out, "oneline", drop_comments=True)

    def apply(self, text: str, mode: str, offset: int = 0) -> str:
        if mode not in MODES:
            raise ConfigError(f"Unknown layout mode '{mode}', expected one of {', '.join(MODES)}")
        if mode == "indent":
            return self.reindent(text, offset)
        return getattr(self, "normalize" if mode == "pretty" else mode)(text, offset)

    def _pretty(self, text: str, offset: int, force: bool) -> str:
        tree = self._reader.read(text)
        if len(text) > self.config.pretty_threshold:
            logger.debug(f"{len(text)} chars exceeds pretty threshold {self.config.pretty_threshold}, re-indenting only")
            return self.reindent(text, offset)
        if contains_kind(tree, self._risky):
            logger.debug(f"Span holds a {self.dialect.name} construct that is not reflowed, re-indenting only")
            return self.reindent(text, offset)

        layout = PrettyLayout(self.dialect, self.config.fill_column)
        render = layout.render_forced if force else layout.render
        out = layout.render_root(tree, offset, render)
        return self._verify(tree, text, out, "multiline" if force else "pretty")

    def _verify(self, tree: Root, text: str, out: str, mode: str, drop_comments: bool = False) -> str:
        try:
            result = self._reader.read(out)
        except ReadError as e:
            logger.warning(f"{mode} layout produced unreadable text ({e}), keeping original")
            return text
        if strip_layout(result, drop_comments) != strip_layout(tree, drop_comments):
            logger.warning(f"{mode} layout changed the code, keeping original")
            return text
        if drop_comments and comments_of(result) != comments_of(tree):
            logger.warning(f"{mode} layout lost or reordered comments, keeping original")
            return text
        return out


def normalize(text: str, dialect: Optional[DialectConfig] = None, offset: int = 0,
              config: Optional[EngineConfig] = None) -> str:
    """Pretty-print text with the given dialect."""
    return Normalizer(dialect or EMACS_LISP, config).normalize(text, offset)
