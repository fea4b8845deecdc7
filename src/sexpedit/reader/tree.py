"""
Lossless expression tree.

Every byte of the source survives in one of three node types: literal atoms,
delimited lists, and tagged escape nodes for everything else (strings,
comments, layout, reader macros, unreadable text).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union


class EscapeKind(str, Enum):
    """Closed set of escape node kinds."""

    # Opaque payloads (str)
    STRING = "string"
    REGEX = "regex"
    COMMENT = "comment"
    SPACE = "space"
    CHAR = "char"
    NUMBER = "number"
    RAW = "raw"

    # Layout marker (no payload)
    NEWLINE = "newline"

    # Prefix forms (payload is the wrapped node)
    QUOTE = "quote"
    QUASIQUOTE = "quasiquote"
    UNQUOTE = "unquote"
    UNQUOTE_SPLICING = "unquote-splicing"
    SYNTAX_UNQUOTE = "syntax-unquote"
    SYNTAX_UNQUOTE_SPLICING = "syntax-unquote-splicing"
    DEREF = "deref"
    META = "meta"
    FUNCTION = "function"
    DISCARD = "discard"
    DATUM_COMMENT = "datum-comment"
    DISPATCH = "dispatch"
    READER_CONDITIONAL = "reader-conditional"
    READER_CONDITIONAL_SPLICING = "reader-conditional-splicing"
    RECORD = "record"
    READ_EVAL = "read-eval"
    FEATURE = "feature"
    FEATURE_NOT = "feature-not"


# Surface text of every prefix kind.
PREFIX_TEXT: Dict[EscapeKind, str] = {
    EscapeKind.QUOTE: "'",
    EscapeKind.QUASIQUOTE: "`",
    EscapeKind.UNQUOTE: ",",
    EscapeKind.UNQUOTE_SPLICING: ",@",
    EscapeKind.SYNTAX_UNQUOTE: "~",
    EscapeKind.SYNTAX_UNQUOTE_SPLICING: "~@",
    EscapeKind.DEREF: "@",
    EscapeKind.META: "^",
    EscapeKind.FUNCTION: "#'",
    EscapeKind.DISCARD: "#_",
    EscapeKind.DATUM_COMMENT: "#;",
    EscapeKind.DISPATCH: "#",
    EscapeKind.READER_CONDITIONAL: "#?",
    EscapeKind.READER_CONDITIONAL_SPLICING: "#?@",
    EscapeKind.RECORD: "#s",
    EscapeKind.READ_EVAL: "#.",
    EscapeKind.FEATURE: "#+",
    EscapeKind.FEATURE_NOT: "#-",
}

# Quote pairs of the string-like kinds.
STRING_QUOTES: Dict[EscapeKind, Tuple[str, str]] = {
    EscapeKind.STRING: ('"', '"'),
    EscapeKind.REGEX: ('#"', '"'),
}

# Kinds whose payload is text that must never be re-interpreted.
OPAQUE_KINDS = frozenset({
    EscapeKind.STRING,
    EscapeKind.REGEX,
    EscapeKind.COMMENT,
    EscapeKind.SPACE,
    EscapeKind.CHAR,
    EscapeKind.NUMBER,
    EscapeKind.RAW,
    EscapeKind.NEWLINE,
})

LAYOUT_KINDS = frozenset({EscapeKind.SPACE, EscapeKind.NEWLINE})


@dataclass
class Atom:
    """Number, symbol or keyword, kept as its literal spelling."""
    text: str


@dataclass
class SList:
    """Delimited list; children include layout and comment escapes."""
    opener: str
    closer: str
    children: List["Node"] = field(default_factory=list)


@dataclass
class Escape:
    """
    Uniform wrapper for everything that is not an atom or a list.

    For prefix kinds, layout holds the comments (and the space around them)
    between the prefix and the wrapped form, as in '#| c |# x.
    """
    kind: EscapeKind
    payload: Union[str, "Node", None] = None
    layout: List["Node"] = field(default_factory=list)

    @property
    def is_prefix(self) -> bool:
        return self.kind in PREFIX_TEXT


@dataclass
class Root:
    """Top-level sequence produced by the reader."""
    children: List["Node"] = field(default_factory=list)


Node = Union[Atom, SList, Escape, Root]


def is_layout(node: Node) -> bool:
    return isinstance(node, Escape) and node.kind in LAYOUT_KINDS


def is_newline(node: Node) -> bool:
    return isinstance(node, Escape) and node.kind is EscapeKind.NEWLINE


def is_comment(node: Node) -> bool:
    return isinstance(node, Escape) and node.kind is EscapeKind.COMMENT


class NodeVisitor:
    """
    Dispatch on node type, ast.NodeVisitor style.

    Subclasses define visit_Atom / visit_SList / visit_Escape / visit_Root.
    Opaque escapes are never descended into by generic_visit.
    """

    def visit(self, node: Node) -> Any:
        method = getattr(self, "visit_" + type(node).__name__, self.generic_visit)
        return method(node)

    def generic_visit(self, node: Node) -> Any:
        for child in iter_children(node):
            self.visit(child)
        return None


class NodeTransformer(NodeVisitor):
    """
    Rebuild a tree bottom-up.

    A visit_* method returns the replacement node, or None to drop it.
    """

    def generic_visit(self, node: Node) -> Optional[Node]:
        if isinstance(node, (SList, Root)):
            children = []
            for child in node.children:
                new = self.visit(child)
                if new is not None:
                    children.append(new)
            if isinstance(node, SList):
                return SList(node.opener, node.closer, children)
            return Root(children)
        if isinstance(node, Escape) and node.is_prefix:
            payload = self.visit(node.payload)
            if payload is None:
                return None
            layout = [new for new in map(self.visit, node.layout) if new is not None]
            return Escape(node.kind, payload, layout)
        return node


def iter_children(node: Node) -> Iterator[Node]:
    """Direct children, skipping opaque escape payloads."""
    if isinstance(node, (SList, Root)):
        yield from node.children
    elif isinstance(node, Escape) and node.is_prefix:
        yield from node.layout
        yield node.payload


def walk(node: Node) -> Iterator[Node]:
    """Yield every node depth-first, parents before children."""
    yield node
    for child in iter_children(node):
        yield from walk(child)


def fold(node: Node, fn: Callable[[Node, List[Any]], Any]) -> Any:
    """Bottom-up fold: fn(node, folded_children)."""
    return fn(node, [fold(child, fn) for child in iter_children(node)])


class _StripLayout(NodeTransformer):

    def __init__(self, drop_comments: bool = False):
        self.drop_comments = drop_comments

    def visit_Escape(self, node: Escape) -> Optional[Node]:
        if node.kind in LAYOUT_KINDS:
            return None
        if self.drop_comments and node.kind is EscapeKind.COMMENT:
            return None
        return self.generic_visit(node)


def strip_layout(node: Node, drop_comments: bool = False) -> Node:
    """Tree meaning: the same tree with space/newline (and optionally comment) nodes removed."""
    return _StripLayout(drop_comments).visit(node)


def comments_of(node: Node) -> List[str]:
    """Comment texts in document order."""
    return [n.payload for n in walk(node) if is_comment(n)]


def contains_kind(node: Node, kinds) -> bool:
    return any(isinstance(n, Escape) and n.kind in kinds for n in walk(node))


def to_data(node: Node) -> Any:
    """JSON-friendly rendering of a tree."""
    if isinstance(node, Atom):
        return {"atom": node.text}
    if isinstance(node, SList):
        return {"list": node.opener + node.closer, "children": [to_data(c) for c in node.children]}
    if isinstance(node, Root):
        return {"root": [to_data(c) for c in node.children]}
    if node.is_prefix:
        data = {"escape": node.kind.value, "payload": to_data(node.payload)}
        if node.layout:
            data["layout"] = [to_data(n) for n in node.layout]
        return data
    return {"escape": node.kind.value, "payload": node.payload}
