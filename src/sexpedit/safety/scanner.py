"""
Safe-region scanner.

Finds the delimiters a span would strand if it were deleted or copied on
its own, and partitions the span into sub-spans that are free of them.
"""

from typing import Dict, List, Optional, Tuple

from sexpedit.config import EngineConfig, get_engine_config
from sexpedit.dialects import EMACS_LISP, DialectConfig
from sexpedit.logging_config import logger
from sexpedit.schemas import ScanReport, Span
from sexpedit.syntax.lexer import Lexer, Token, TokenType


def _clamp(text: str, span: Tuple[int, int]) -> Tuple[int, int]:
    start, end = sorted(span)
    return max(0, start), min(len(text), end)


class _Scan:
    """Delimiter stack over one span; also remembers how wide each reported delimiter is."""

    def __init__(self, dialect: DialectConfig):
        self.dialect = dialect
        self.stack: List[Tuple[int, str]] = []
        self.unmatched: Dict[int, int] = {}

    def open(self, pos: int, char: str) -> None:
        self.stack.append((pos, char))

    def close(self, pos: int, char: str) -> None:
        if self.stack and self.dialect.closer_for(self.stack[-1][1]) == char:
            self.stack.pop()
        else:
            self.unmatched[pos] = 1

    def mark(self, pos: int, width: int = 1) -> None:
        self.unmatched[pos] = width

    def chars(self, text: str, lo: int, hi: int) -> None:
        for pos in range(lo, hi):
            char = text[pos]
            if char in self.dialect.openers:
                self.open(pos, char)
            elif char in self.dialect.closers:
                self.close(pos, char)

    def finish(self) -> Dict[int, int]:
        for pos, _ in self.stack:
            self.unmatched[pos] = 1
        self.stack = []
        return self.unmatched


def _scan(text: str, start: int, end: int, dialect: DialectConfig, config: EngineConfig) -> Dict[int, int]:
    scan = _Scan(dialect)
    block = dialect.block_comment
    for tok in Lexer(dialect).lex(text):
        if tok.end <= start:
            continue
        if tok.start >= end:
            break
        cut = tok.start < start or tok.end > end
        if tok.type is TokenType.OPEN:
            scan.open(tok.start, tok.text)
        elif tok.type is TokenType.CLOSE:
            scan.close(tok.start, tok.text)
        elif tok.type is TokenType.STRING:
            if not config.ignore_strings:
                scan.chars(text, max(tok.start, start), min(tok.end, end))
            if cut:
                _mark_string_quotes(scan, tok, start, end)
        elif tok.type is TokenType.COMMENT:
            if not config.ignore_comments:
                scan.chars(text, max(tok.start, start), min(tok.end, end))
            if cut and block and tok.text.startswith(block[0]):
                if tok.start >= start:
                    scan.mark(tok.start, len(block[0]))
                closing = tok.end - len(block[1])
                if tok.closed and closing < end and closing >= start:
                    scan.mark(closing, len(block[1]))
            elif cut and tok.start >= start:
                # Keep the comment char, or the rest of the line turns into code
                scan.mark(tok.start, len(dialect.comment_char))
    return scan.finish()


def _mark_string_quotes(scan: _Scan, tok: Token, start: int, end: int) -> None:
    opening = tok.quote_start
    if start <= tok.start:
        scan.mark(tok.start, opening - tok.start + 1)
    elif start <= opening < end:
        scan.mark(opening)
    closing = tok.end - 1
    if tok.closed and closing > opening and start <= closing < end:
        scan.mark(closing)


def scan_region(text: str, span: Tuple[int, int], dialect: DialectConfig = EMACS_LISP,
                config: Optional[EngineConfig] = None) -> ScanReport:
    """
    Report the delimiters in span that have no partner inside it.

    Spans longer than max_scan_length are not scanned: the report comes back
    with complete=False and an empty list, meaning "unknown".
    """
    config = config or get_engine_config()
    start, end = _clamp(text, span)
    if end - start > config.max_scan_length:
        reason = f"span of {end - start} chars exceeds max_scan_length {config.max_scan_length}"
        logger.debug(f"Skipping delimiter scan: {reason}")
        return ScanReport(span=(start, end), complete=False, reason=reason)
    unmatched = _scan(text, start, end, dialect, config)
    return ScanReport(span=(start, end), unmatched=sorted(unmatched))


def find_unmatched_delimiters(text: str, span: Tuple[int, int], dialect: DialectConfig = EMACS_LISP,
                              config: Optional[EngineConfig] = None) -> List[int]:
    return scan_region(text, span, dialect, config).unmatched


def _line_comments(text: str, dialect: DialectConfig, end: int) -> List[Token]:
    block = dialect.block_comment[0] if dialect.block_comment else None
    return [tok for tok in Lexer(dialect).lex(text, 0, end)
            if tok.type is TokenType.COMMENT and not (block and tok.text.startswith(block))]


def _protect_comment_newline(text: str, piece: Span, comments: List[Token]) -> List[Span]:
    # A comment that starts before the piece keeps its newline when code follows the piece
    for comment in comments:
        if comment.start < piece.start <= comment.end < piece.end:
            eol = text.find("\n", piece.end)
            rest = text[piece.end:] if eol == -1 else text[piece.end:eol]
            if rest.strip():
                pieces = [Span(piece.start, comment.end), Span(comment.end + 1, piece.end)]
                return [p for p in pieces if p.end > p.start]
    return [piece]


def partition_safe_regions(text: str, span: Tuple[int, int], dialect: DialectConfig = EMACS_LISP,
                           config: Optional[EngineConfig] = None) -> List[Span]:
    """
    Sub-spans of span free of unmatched delimiters, in reverse order.

    Deleting them one after another never shifts an offset that is still to
    be used.
    """
    config = config or get_engine_config()
    start, end = _clamp(text, span)
    if end - start > config.max_scan_length:
        logger.debug(f"Span of {end - start} chars not scanned, treating it as one safe region")
        return [Span(start, end)]

    unmatched = _scan(text, start, end, dialect, config)
    pieces: List[Span] = []
    cur = start
    for pos in sorted(unmatched):
        if pos > cur:
            pieces.append(Span(cur, pos))
        cur = max(cur, pos + unmatched[pos])
    if cur < end:
        pieces.append(Span(cur, end))

    if config.protect_comments:
        comments = _line_comments(text, dialect, end)
        protected: List[Span] = []
        for piece in pieces:
            protected.extend(_protect_comment_newline(text, piece, comments))
        pieces = protected

    return list(reversed(pieces))
