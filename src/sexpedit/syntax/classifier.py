"""
Delimiter classifier.

Answers "what kind of position is this" by scanning forward from a
synchronization point, so the answer never depends on earlier calls.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from sexpedit.dialects import DialectConfig
from .lexer import Lexer, Token, TokenType


class Syntax(str, Enum):
    AT_OPEN = "at-open"
    AT_CLOSE = "at-close"
    IN_STRING = "in-string"
    IN_COMMENT = "in-comment"
    BARE = "bare"


@dataclass
class SyntaxState:
    """Lexical state at a position, relative to the sync point."""
    depth: int = 0
    open_positions: List[int] = field(default_factory=list)
    string_start: Optional[int] = None
    comment_start: Optional[int] = None


def sync_point(text: str, pos: int, openers: str = "(") -> int:
    """Start of the line holding the last column-0 open delimiter at or before pos."""
    pos = max(0, min(pos, len(text)))
    line_start = text.rfind("\n", 0, pos) + 1 if pos else 0
    while True:
        if line_start < len(text) and text[line_start] in openers and line_start <= pos:
            return line_start
        if line_start == 0:
            return 0
        line_start = text.rfind("\n", 0, line_start - 1) + 1


def _is_block(token: Token, dialect: DialectConfig) -> bool:
    return bool(dialect.block_comment) and token.text.startswith(dialect.block_comment[0])


def _scan(text: str, pos: int, dialect: DialectConfig) -> Tuple[SyntaxState, Optional[Token], Optional[Token]]:
    """Return (state at pos, token ending at or before pos, token starting at pos)."""
    state = SyntaxState()
    prev = None
    at = None
    start = sync_point(text, pos, dialect.openers)
    for tok in Lexer(dialect).lex(text, start):
        if tok.start >= pos:
            at = tok if tok.start == pos else None
            break
        if tok.end > pos:
            # token straddles pos
            if tok.type is TokenType.STRING:
                state.string_start = tok.start
            elif tok.type is TokenType.COMMENT:
                state.comment_start = tok.start
            break
        prev = tok
        if tok.type is TokenType.OPEN:
            state.open_positions.append(tok.start)
        elif tok.type is TokenType.CLOSE and state.open_positions:
            state.open_positions.pop()

    if prev is not None and prev.end == pos and state.string_start is None and state.comment_start is None:
        if prev.type is TokenType.STRING and not prev.closed:
            state.string_start = prev.start
        elif prev.type is TokenType.COMMENT and (not prev.closed or not _is_block(prev, dialect)):
            state.comment_start = prev.start
    state.depth = len(state.open_positions)
    return state, prev, at


def syntax_state(text: str, pos: int, dialect: DialectConfig) -> SyntaxState:
    return _scan(text, pos, dialect)[0]


def classify(text: str, pos: int, dialect: DialectConfig) -> Syntax:
    """
    Classify a buffer position.

    AT_OPEN wins over AT_CLOSE when pos sits between ")" and "(".
    """
    state, prev, at = _scan(text, pos, dialect)
    if state.string_start is not None:
        return Syntax.IN_STRING
    if state.comment_start is not None:
        return Syntax.IN_COMMENT
    if at is not None and at.type is TokenType.OPEN:
        return Syntax.AT_OPEN
    if prev is not None and prev.end == pos and prev.type is TokenType.CLOSE:
        return Syntax.AT_CLOSE
    return Syntax.BARE
