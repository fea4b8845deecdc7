"""
Repair arbitrary text into a balanced form.

Used on pasted text: missing openers are prepended, missing closers are
appended, and an unterminated string or block comment is closed.
"""

from typing import List, Tuple

from sexpedit.dialects import EMACS_LISP, DialectConfig
from sexpedit.syntax.lexer import Lexer, TokenType


def balance(text: str, dialect: DialectConfig = EMACS_LISP) -> str:
    """
    Return text with the minimal delimiters added to make it readable.

    >>> balance("foo)")
    '(foo)'
    >>> balance("(foo")
    '(foo)'
    """
    stack: List[str] = []
    missing: List[str] = []
    inserts: List[Tuple[int, str]] = []
    tail = ""
    last = None

    for tok in Lexer(dialect).lex(text):
        last = tok
        if tok.type is TokenType.OPEN:
            stack.append(tok.text)
        elif tok.type is TokenType.CLOSE:
            opener = dialect.opener_for(tok.text)
            # close whatever is still open inside the list this closer ends
            while stack and stack[-1] != opener:
                inserts.append((tok.start, dialect.closer_for(stack.pop())))
            if stack:
                stack.pop()
            else:
                missing.append(opener)
        elif tok.type is TokenType.STRING and not tok.closed:
            tail = '"'
        elif tok.type is TokenType.COMMENT and not tok.closed:
            tail = dialect.block_comment[1]

    block = dialect.block_comment
    if (last is not None and last.type is TokenType.COMMENT and stack and not tail
            and not (block and last.text.startswith(block[0]))):
        # closers after a line comment would be commented out
        tail = "\n"

    out = ["".join(reversed(missing))]
    cur = 0
    for pos, closer in inserts:
        out.append(text[cur:pos])
        out.append(closer)
        cur = pos
    out.append(text[cur:])
    out.append(tail)
    out.extend(dialect.closer_for(opener) for opener in reversed(stack))
    return "".join(out)
