"""
Positional skeleton of a buffer.

analyze() turns the token stream into a tree of Forms that carry offsets,
which is what the boundary finder and the transforms query. It tolerates
unbalanced input and records every offending offset in `errors`.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from sexpedit.dialects import DialectConfig
from sexpedit.schemas import Span
from .lexer import Lexer, Token, TokenType


_LEAF_KINDS = {
    TokenType.ATOM: "atom",
    TokenType.STRING: "string",
    TokenType.CHAR: "char",
    TokenType.RAW: "raw",
}


@dataclass(eq=False)
class Form:
    kind: str  # root | list | atom | string | char | raw | comment | prefixed
    start: int
    end: int
    parent: Optional["Form"] = None
    children: List["Form"] = field(default_factory=list)
    opener: str = ""
    closer: str = ""
    prefix: str = ""
    pending: List["Form"] = field(default_factory=list, repr=False)

    @property
    def is_list(self) -> bool:
        return self.kind == "list"

    @property
    def inner_start(self) -> int:
        return self.start + len(self.opener)

    @property
    def inner_end(self) -> int:
        return self.end - len(self.closer)

    @property
    def span(self) -> Span:
        return Span(self.start, self.end)

    @property
    def sexps(self) -> List["Form"]:
        """Children that are expressions (comments excluded)."""
        return [c for c in self.children if c.kind != "comment"]

    def outermost(self) -> "Form":
        """This form together with every prefix wrapping it."""
        form = self
        while form.parent is not None and form.parent.kind == "prefixed":
            form = form.parent
        return form

    def body(self) -> "Form":
        """The form under all prefixes."""
        form = self
        while form.kind == "prefixed":
            form = form.children[-1]
        return form

    def container(self) -> Optional["Form"]:
        """The list or root that holds this expression as a child."""
        return self.outermost().parent

    def head(self) -> Optional["Form"]:
        sexps = self.sexps
        return sexps[0] if sexps else None

    def text(self, source: str) -> str:
        return source[self.start:self.end]


def column(text: str, pos: int) -> int:
    return pos - (text.rfind("\n", 0, pos) + 1)


class Structure:
    """
    Balanced-form index over one buffer snapshot.

    Usage:
        s = analyze(text, EMACS_LISP)
        lst = s.enclosing_list(point)
    """

    def __init__(self, text: str, dialect: DialectConfig, root: Form,
                 forms: List[Form], tokens: List[Token], errors: List[int]):
        self.text = text
        self.dialect = dialect
        self.root = root
        self.forms = forms
        self.tokens = tokens
        self.errors = errors
        self._lists_by_start: Dict[int, Form] = {}
        self._lists_by_end: Dict[int, Form] = {}
        for form in forms:
            if form.is_list:
                self._lists_by_start[form.start] = form
                if form.closer:
                    self._lists_by_end[form.end] = form

    @property
    def balanced(self) -> bool:
        return not self.errors

    def list_at_open(self, pos: int) -> Optional[Form]:
        return self._lists_by_start.get(pos)

    def list_at_close(self, pos: int) -> Optional[Form]:
        return self._lists_by_end.get(pos)

    def lists(self) -> List[Form]:
        return [f for f in self.forms if f.is_list]

    def enclosing_list(self, pos: int) -> Optional[Form]:
        """Innermost list whose delimiters surround pos."""
        best = None
        for form in self.forms:
            if form.is_list and form.inner_start <= pos <= form.inner_end:
                if best is None or form.start > best.start:
                    best = form
        return best

    def form_at(self, pos: int, kinds: Optional[Tuple[str, ...]] = None) -> Optional[Form]:
        """Innermost form with start <= pos < end, optionally restricted to kinds."""
        best = None
        for form in self.forms:
            if kinds is not None and form.kind not in kinds:
                continue
            if form.start <= pos < form.end:
                if best is None or form.start > best.start or (
                        form.start == best.start and form.end < best.end):
                    best = form
        return best

    def form_ending_at(self, pos: int, kinds: Tuple[str, ...]) -> Optional[Form]:
        for form in self.forms:
            if form.kind in kinds and form.end == pos:
                return form
        return None

    def top_level(self, form: Form) -> Form:
        while form.parent is not None and form.parent is not self.root:
            form = form.parent
        return form

    def path_of(self, form: Form) -> Tuple[int, ...]:
        path = []
        while form.parent is not None:
            path.append(form.parent.children.index(form))
            form = form.parent
        return tuple(reversed(path))

    def at_path(self, path: Tuple[int, ...]) -> Optional[Form]:
        form = self.root
        for index in path:
            if index >= len(form.children):
                return None
            form = form.children[index]
        return form


def _attach(container: Form, form: Form) -> None:
    while container.pending:
        prefix = container.pending.pop()
        prefix.children.append(form)
        form.parent = prefix
        prefix.end = form.end
        form = prefix
    form.parent = container
    container.children.append(form)


def _flush(container: Form) -> None:
    # Prefixes with nothing to wrap degrade to atoms
    if not container.pending:
        return
    for prefix in container.pending:
        for comment in prefix.children:
            comment.parent = container
        container.children.extend(prefix.children)
        prefix.children = []
        prefix.kind = "atom"
        prefix.parent = container
        container.children.append(prefix)
    container.pending = []
    container.children.sort(key=lambda f: f.start)


def analyze(text: str, dialect: DialectConfig) -> Structure:
    """Build the positional structure of a whole buffer."""
    tokens = list(Lexer(dialect).lex(text))
    root = Form("root", 0, len(text))
    stack = [root]
    forms: List[Form] = []
    errors: List[int] = []

    for tok in tokens:
        top = stack[-1]
        if tok.type in (TokenType.SPACE, TokenType.NEWLINE):
            continue
        if tok.type is TokenType.COMMENT:
            if top.pending:
                # Between a prefix and its form: the comment belongs to the prefix
                owner = top.pending[-1]
            else:
                owner = top
            form = Form("comment", tok.start, tok.end, parent=owner)
            owner.children.append(form)
            forms.append(form)
            if not tok.closed:
                errors.append(tok.start)
        elif tok.type is TokenType.PREFIX:
            form = Form("prefixed", tok.start, tok.end, prefix=tok.text)
            top.pending.append(form)
            forms.append(form)
        elif tok.type is TokenType.OPEN:
            form = Form("list", tok.start, tok.end, opener=tok.text)
            stack.append(form)
            forms.append(form)
        elif tok.type is TokenType.CLOSE:
            if len(stack) > 1 and dialect.closer_for(top.opener) == tok.text:
                stack.pop()
                _flush(top)
                top.closer = tok.text
                top.end = tok.end
                _attach(stack[-1], top)
            else:
                errors.append(tok.start)
        else:
            form = Form(_LEAF_KINDS[tok.type], tok.start, tok.end)
            if tok.type is TokenType.STRING and not tok.closed:
                errors.append(tok.start)
            _attach(top, form)
            forms.append(form)

    while len(stack) > 1:
        form = stack.pop()
        _flush(form)
        errors.append(form.start)
        form.end = len(text)
        _attach(stack[-1], form)
    _flush(root)

    return Structure(text, dialect, root, forms, tokens, sorted(errors))
