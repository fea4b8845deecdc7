"""
Lossless reader and printer.

print_tree(read(text)) == text for every readable text.
"""

from .tree import (
    Atom,
    Escape,
    EscapeKind,
    Node,
    NodeTransformer,
    NodeVisitor,
    Root,
    SList,
    comments_of,
    fold,
    strip_layout,
    to_data,
    walk,
)
from .reader import Reader, read
from .printer import print_tree

__all__ = [
    "Atom",
    "Escape",
    "EscapeKind",
    "Node",
    "NodeTransformer",
    "NodeVisitor",
    "Root",
    "SList",
    "comments_of",
    "fold",
    "strip_layout",
    "to_data",
    "walk",
    "Reader",
    "read",
    "print_tree",
]
