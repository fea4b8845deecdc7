"""
Lexical layer: tokenizer, delimiter classifier, positional structure and
boundary queries.
"""

from .lexer import Lexer, Token, TokenType, lex
from .classifier import Syntax, SyntaxState, classify, sync_point, syntax_state
from .structure import Form, Structure, analyze, column
from .bounds import bounds_of_comment, bounds_of_list, bounds_of_string, bounds_of_thing

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "lex",
    "Syntax",
    "SyntaxState",
    "classify",
    "sync_point",
    "syntax_state",
    "Form",
    "Structure",
    "analyze",
    "column",
    "bounds_of_comment",
    "bounds_of_list",
    "bounds_of_string",
    "bounds_of_thing",
]
