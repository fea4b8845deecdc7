"""
Single-pass tokenizer shared by the classifier, the structure builder,
the reader and the safe-region scanner.

The lexer never fails: unterminated strings and block comments come back
with closed=False and callers decide whether that is an error.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

from sexpedit.dialects import DialectConfig


class TokenType(str, Enum):
    OPEN = "open"
    CLOSE = "close"
    STRING = "string"
    COMMENT = "comment"
    NEWLINE = "newline"
    SPACE = "space"
    ATOM = "atom"
    CHAR = "char"
    PREFIX = "prefix"
    RAW = "raw"


FORM_START = frozenset({
    TokenType.OPEN,
    TokenType.STRING,
    TokenType.ATOM,
    TokenType.CHAR,
    TokenType.PREFIX,
    TokenType.RAW,
})


@dataclass(frozen=True)
class Token:
    type: TokenType
    start: int
    end: int
    text: str
    closed: bool = True
    kind: str = ""  # escape kind value for prefixes and string-likes

    @property
    def quote_start(self) -> int:
        """Offset of the opening '"' of a string-like token."""
        return self.start + self.text.index('"')


class Lexer:
    """
    Tokenize a slice of text as if it started at top level.

    Usage:
        tokens = list(Lexer(dialect).lex(text))
    """

    def __init__(self, dialect: DialectConfig):
        self.dialect = dialect
        self._openers = dialect.openers
        self._closers = dialect.closers
        self._space = dialect.whitespace
        self._stop = set(dialect.whitespace) | set(self._openers) | set(self._closers) | {'"', "\n", dialect.comment_char}

    def lex(self, text: str, start: int = 0, end: Optional[int] = None) -> Iterator[Token]:
        end = len(text) if end is None else min(end, len(text))
        i = start
        while i < end:
            token = self._next(text, i, end)
            yield token
            i = token.end

    def _next(self, text: str, i: int, end: int) -> Token:
        d = self.dialect
        c = text[i]

        if c == "\n":
            return Token(TokenType.NEWLINE, i, i + 1, c)

        if c in self._space:
            j = i + 1
            while j < end and text[j] in self._space:
                j += 1
            return Token(TokenType.SPACE, i, j, text[i:j])

        if d.block_comment and text.startswith(d.block_comment[0], i):
            return self._block_comment(text, i, end)

        if c == d.comment_char:
            j = text.find("\n", i, end)
            j = end if j == -1 else j
            return Token(TokenType.COMMENT, i, j, text[i:j])

        if c == '"':
            return self._string(text, i, i, end, "string")

        for prefix, kind in d.string_prefixes:
            if text.startswith(prefix, i) and i + len(prefix) <= end:
                return self._string(text, i, i + len(prefix) - 1, end, kind)

        if (d.char_prefix and text.startswith(d.char_prefix, i)
                and i + len(d.char_prefix) < end and text[i + len(d.char_prefix)] != "\n"):
            return self._char(text, i, end)

        if c in self._openers:
            return Token(TokenType.OPEN, i, i + 1, c)

        if c in self._closers:
            return Token(TokenType.CLOSE, i, i + 1, c)

        if d.unreadable_prefix and text.startswith(d.unreadable_prefix, i):
            j = text.find(">", i, end)
            if j != -1:
                return Token(TokenType.RAW, i, j + 1, text[i:j + 1])

        if d.dispatch_char and c == d.dispatch_char and i + 1 < end and text[i + 1] in self._openers:
            return Token(TokenType.PREFIX, i, i + 1, c, kind="dispatch")

        for prefix, kind in d.prefixes:
            if text.startswith(prefix, i):
                j = i + len(prefix)
                if self._form_follows(text, j, end):
                    return Token(TokenType.PREFIX, i, j, prefix, kind=kind)
                return Token(TokenType.ATOM, i, j, prefix)

        return self._atom(text, i, end)

    def _form_follows(self, text: str, j: int, end: int) -> bool:
        if j >= end:
            return False
        c = text[j]
        return not (c in self._space or c == "\n" or c in self._closers or c == self.dialect.comment_char)

    def _string(self, text: str, start: int, quote: int, end: int, kind: str) -> Token:
        j = quote + 1
        while j < end:
            c = text[j]
            if c == "\\":
                j += 2
                continue
            if c == '"':
                return Token(TokenType.STRING, start, j + 1, text[start:j + 1], kind=kind)
            j += 1
        return Token(TokenType.STRING, start, end, text[start:end], closed=False, kind=kind)

    def _block_comment(self, text: str, i: int, end: int) -> Token:
        open_, close = self.dialect.block_comment
        depth = 0
        j = i
        while j < end:
            if text.startswith(open_, j):
                depth += 1
                j += len(open_)
            elif text.startswith(close, j):
                depth -= 1
                j += len(close)
                if depth == 0:
                    return Token(TokenType.COMMENT, i, j, text[i:j])
            else:
                j += 1
        return Token(TokenType.COMMENT, i, end, text[i:end], closed=False)

    def _char(self, text: str, i: int, end: int) -> Token:
        j = i + len(self.dialect.char_prefix)
        last = text[j]
        j += 1
        # Emacs Lisp ?\x: the backslash escapes the following character
        if last == "\\" and self.dialect.char_prefix == "?" and j < end:
            last = text[j]
            j += 1
        if last.isalnum():
            j = self._atom_end(text, j, end)
        return Token(TokenType.CHAR, i, j, text[i:j])

    def _atom(self, text: str, i: int, end: int) -> Token:
        j = self._atom_end(text, i, end)
        if j == i:
            j = i + 1
        return Token(TokenType.ATOM, i, j, text[i:j])

    def _atom_end(self, text: str, j: int, end: int) -> int:
        while j < end:
            c = text[j]
            if c == "\\":
                j = min(j + 2, end)
                continue
            if c in self._stop:
                break
            j += 1
        return j


def lex(text: str, dialect: DialectConfig, start: int = 0, end: Optional[int] = None) -> List[Token]:
    """Tokenize text[start:end] into a list."""
    return list(Lexer(dialect).lex(text, start, end))
