"""
Reader: text to lossless tree.

Built on the shared lexer, so strings and comments are opaque tokens before
any structural rule runs. Unbalanced input raises ReadError; nothing is
dropped silently.
"""

import re
from typing import List, Optional, Tuple

from sexpedit.dialects import EMACS_LISP, DialectConfig
from sexpedit.exceptions import ReadError
from sexpedit.syntax.lexer import Lexer, Token, TokenType
from .tree import STRING_QUOTES, Atom, Escape, EscapeKind, Node, Root, SList


class _Frame:
    __slots__ = ("node", "start", "pending")

    def __init__(self, node, start: int):
        self.node = node
        self.start = start
        # (kind, offset, layout between the prefix and its form)
        self.pending: List[Tuple[EscapeKind, int, List[Node]]] = []


class Reader:
    """
    Usage:
        tree = Reader(CLOJURE).read("(defn f [x] x)")
    """

    def __init__(self, dialect: DialectConfig = EMACS_LISP):
        self.dialect = dialect
        self._number = re.compile(dialect.number_pattern + r"\Z") if dialect.number_pattern else None

    def read(self, text: str) -> Root:
        root = Root()
        stack = [_Frame(root, 0)]

        for tok in Lexer(self.dialect).lex(text):
            frame = stack[-1]
            if tok.type is TokenType.PREFIX:
                frame.pending.append((EscapeKind(tok.kind), tok.start, []))
            elif tok.type is TokenType.OPEN:
                stack.append(_Frame(SList(tok.text, self.dialect.closer_for(tok.text)), tok.start))
            elif tok.type is TokenType.CLOSE:
                if len(stack) == 1:
                    raise ReadError(f"unmatched '{tok.text}'", tok.start)
                if frame.node.closer != tok.text:
                    raise ReadError(
                        f"mismatched '{tok.text}' closes '{frame.node.opener}' opened at {frame.start}",
                        tok.start,
                    )
                self._check_pending(frame)
                stack.pop()
                self._add(stack[-1], frame.node)
            elif tok.type in (TokenType.SPACE, TokenType.NEWLINE, TokenType.COMMENT):
                if frame.pending:
                    frame.pending[-1][2].append(self._layout(tok))
                else:
                    frame.node.children.append(self._layout(tok))
            else:
                self._add(frame, self._leaf(tok))

        if len(stack) > 1:
            frame = stack[-1]
            raise ReadError(f"unclosed '{frame.node.opener}'", frame.start)
        self._check_pending(stack[0])
        return root

    def _layout(self, tok: Token) -> Escape:
        if tok.type is TokenType.SPACE:
            return Escape(EscapeKind.SPACE, tok.text)
        if tok.type is TokenType.NEWLINE:
            return Escape(EscapeKind.NEWLINE)
        if not tok.closed:
            raise ReadError("unterminated block comment", tok.start)
        return Escape(EscapeKind.COMMENT, tok.text)

    def _leaf(self, tok: Token) -> Node:
        if tok.type is TokenType.STRING:
            if not tok.closed:
                raise ReadError("unterminated string", tok.start)
            kind = EscapeKind(tok.kind)
            left, right = STRING_QUOTES[kind]
            return Escape(kind, tok.text[len(left):len(tok.text) - len(right)])
        if tok.type is TokenType.CHAR:
            return Escape(EscapeKind.CHAR, tok.text)
        if tok.type is TokenType.RAW:
            return Escape(EscapeKind.RAW, tok.text)
        if self._number is not None and self._number.match(tok.text):
            return Escape(EscapeKind.NUMBER, tok.text)
        return Atom(tok.text)

    @staticmethod
    def _add(frame: _Frame, node: Node) -> None:
        while frame.pending:
            kind, _, layout = frame.pending.pop()
            node = Escape(kind, node, layout)
        frame.node.children.append(node)

    @staticmethod
    def _check_pending(frame: _Frame) -> None:
        if frame.pending:
            _, position, _ = frame.pending[0]
            raise ReadError("reader macro is not followed by a form", position)


def read(text: str, dialect: Optional[DialectConfig] = None) -> Root:
    """Read text into a lossless tree."""
    return Reader(dialect or EMACS_LISP).read(text)
