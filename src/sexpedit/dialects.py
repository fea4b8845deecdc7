"""
Dialect configuration.

A DialectConfig is threaded explicitly through every call; there is no
implicit "current mode". Four presets cover Emacs Lisp, Clojure, Scheme
and Common Lisp.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

from .exceptions import DialectError


@dataclass(frozen=True)
class LayoutRule:
    """
    How a list headed by a given symbol is broken across lines.

    first_line: elements kept on the head's line, head included
    flat: element indices always rendered on one line (argument lists)
    bindings: element 1 is a binding list, one binding per line
    """
    first_line: int
    flat: FrozenSet[int] = frozenset()
    bindings: bool = False


DEFUN = LayoutRule(3, flat=frozenset({2}))
DEFVAR = LayoutRule(3)
LAMBDA = LayoutRule(2, flat=frozenset({1}))
BODY = LayoutRule(2)
LET = LayoutRule(2, bindings=True)
BLOCK = LayoutRule(1)


LISP_LAYOUT: Dict[str, LayoutRule] = {
    "defun": DEFUN,
    "defmacro": DEFUN,
    "defsubst": DEFUN,
    "cl-defun": DEFUN,
    "cl-defmacro": DEFUN,
    "cl-defmethod": DEFUN,
    "defgeneric": DEFUN,
    "defmethod": DEFUN,
    "define-minor-mode": DEFVAR,
    "defvar": DEFVAR,
    "defcustom": DEFVAR,
    "defconst": DEFVAR,
    "defparameter": DEFVAR,
    "lambda": LAMBDA,
    "let": LET,
    "let*": LET,
    "letrec": LET,
    "when-let": LET,
    "if-let": LET,
    "if": BODY,
    "when": BODY,
    "unless": BODY,
    "while": BODY,
    "dolist": BODY,
    "dotimes": BODY,
    "condition-case": DEFVAR,
    "with-current-buffer": BODY,
    "with-temp-buffer": BLOCK,
    "save-excursion": BLOCK,
    "progn": BLOCK,
    "prog1": BODY,
    "cond": BLOCK,
    "define": DEFVAR,
}

CLOJURE_LAYOUT: Dict[str, LayoutRule] = {
    "defn": DEFUN,
    "defn-": DEFUN,
    "defmacro": DEFUN,
    "defmethod": DEFVAR,
    "defmulti": DEFVAR,
    "def": DEFVAR,
    "ns": BODY,
    "fn": LAMBDA,
    "let": LET,
    "loop": LET,
    "binding": LET,
    "when-let": LET,
    "if-let": LET,
    "doseq": LET,
    "for": LET,
    "if": BODY,
    "when": BODY,
    "when-not": BODY,
    "if-not": BODY,
    "cond": BLOCK,
    "do": BLOCK,
    "try": BLOCK,
    "case": BODY,
}


@dataclass(frozen=True)
class DialectConfig:
    """
    Lexical and layout description of one Lisp dialect.

    prefixes are (text, escape kind value) pairs, longest first; a prefix
    only reads as a prefix when a form follows it directly.
    """
    name: str
    delimiters: Tuple[Tuple[str, str], ...] = (("(", ")"), ("[", "]"), ("{", "}"))
    comment_char: str = ";"
    block_comment: Optional[Tuple[str, str]] = None
    whitespace: str = " \t\r\f"
    char_prefix: Optional[str] = "?"
    prefixes: Tuple[Tuple[str, str], ...] = ()
    string_prefixes: Tuple[Tuple[str, str], ...] = ()
    dispatch_char: Optional[str] = "#"
    unreadable_prefix: Optional[str] = None
    number_pattern: Optional[str] = r"#(?:[xXoObB][-+]?[0-9a-fA-F]+|[0-9]+[rR][-+]?[0-9a-zA-Z]+)"
    layout: Mapping[str, LayoutRule] = field(default_factory=lambda: dict(LISP_LAYOUT))
    let_heads: FrozenSet[str] = frozenset({"let", "let*"})
    let_star: Optional[str] = "let*"
    vector_bindings: bool = False
    risky_kinds: FrozenSet[str] = frozenset({"raw"})
    extensions: Tuple[str, ...] = ()

    @property
    def openers(self) -> str:
        return "".join(o for o, _ in self.delimiters)

    @property
    def closers(self) -> str:
        return "".join(c for _, c in self.delimiters)

    def closer_for(self, opener: str) -> str:
        for o, c in self.delimiters:
            if o == opener:
                return c
        raise KeyError(opener)

    def opener_for(self, closer: str) -> str:
        for o, c in self.delimiters:
            if c == closer:
                return o
        raise KeyError(closer)

    def layout_rule(self, head: str) -> Optional[LayoutRule]:
        return self.layout.get(head)


LISP_QUOTES = (
    (",@", "unquote-splicing"),
    (",", "unquote"),
    ("'", "quote"),
    ("`", "quasiquote"),
)

EMACS_LISP = DialectConfig(
    name="emacs-lisp",
    char_prefix="?",
    prefixes=(("#'", "function"), ("#s", "record")) + LISP_QUOTES,
    unreadable_prefix="#<",
    extensions=(".el",),
)

CLOJURE = DialectConfig(
    name="clojure",
    whitespace=" \t\r\f,",
    char_prefix="\\",
    prefixes=(
        ("#?@", "reader-conditional-splicing"),
        ("#?", "reader-conditional"),
        ("#_", "discard"),
        ("#'", "function"),
        ("~@", "syntax-unquote-splicing"),
        ("~", "syntax-unquote"),
        ("@", "deref"),
        ("^", "meta"),
        ("'", "quote"),
        ("`", "quasiquote"),
    ),
    string_prefixes=(('#"', "regex"),),
    number_pattern=None,
    layout=CLOJURE_LAYOUT,
    let_heads=frozenset({"let"}),
    let_star=None,
    vector_bindings=True,
    risky_kinds=frozenset({"raw", "reader-conditional", "reader-conditional-splicing"}),
    extensions=(".clj", ".cljs", ".cljc", ".edn"),
)

SCHEME = DialectConfig(
    name="scheme",
    block_comment=("#|", "|#"),
    char_prefix="#\\",
    prefixes=(("#;", "datum-comment"),) + LISP_QUOTES,
    let_heads=frozenset({"let", "let*", "letrec"}),
    extensions=(".scm", ".ss", ".rkt"),
)

COMMON_LISP = DialectConfig(
    name="common-lisp",
    block_comment=("#|", "|#"),
    char_prefix="#\\",
    prefixes=(
        ("#'", "function"),
        ("#.", "read-eval"),
        ("#+", "feature"),
        ("#-", "feature-not"),
    ) + LISP_QUOTES,
    unreadable_prefix="#<",
    risky_kinds=frozenset({"raw", "feature", "feature-not", "read-eval"}),
    extensions=(".lisp", ".lsp", ".cl", ".asd"),
)

DIALECTS: Dict[str, DialectConfig] = {
    d.name: d for d in (EMACS_LISP, CLOJURE, SCHEME, COMMON_LISP)
}

ALIASES = {
    "elisp": "emacs-lisp",
    "el": "emacs-lisp",
    "clj": "clojure",
    "cl": "common-lisp",
    "lisp": "common-lisp",
    "racket": "scheme",
}


def get_dialect(name: str) -> DialectConfig:
    """Look up a preset by name or alias."""
    key = ALIASES.get(name.lower(), name.lower())
    if key not in DIALECTS:
        raise DialectError(name, sorted(DIALECTS))
    return DIALECTS[key]


def dialect_for_path(path) -> DialectConfig:
    """Pick a preset from a file extension."""
    suffix = Path(path).suffix.lower()
    for dialect in DIALECTS.values():
        if suffix in dialect.extensions:
            return dialect
    raise DialectError(suffix or str(path), sorted(DIALECTS))
