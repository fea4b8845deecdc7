"""
Printer: lossless tree to text, the exact inverse of the reader.
"""

from typing import List

from .tree import PREFIX_TEXT, STRING_QUOTES, Atom, Escape, EscapeKind, Node, Root, SList


def _emit(node: Node, out: List[str]) -> None:
    if isinstance(node, Atom):
        out.append(node.text)
    elif isinstance(node, SList):
        out.append(node.opener)
        for child in node.children:
            _emit(child, out)
        out.append(node.closer)
    elif isinstance(node, Root):
        for child in node.children:
            _emit(child, out)
    elif node.kind is EscapeKind.NEWLINE:
        out.append("\n")
    elif node.kind in STRING_QUOTES:
        left, right = STRING_QUOTES[node.kind]
        out.append(left)
        out.append(node.payload)
        out.append(right)
    elif node.kind in PREFIX_TEXT:
        out.append(PREFIX_TEXT[node.kind])
        for child in node.layout:
            _emit(child, out)
        _emit(node.payload, out)
    else:
        out.append(node.payload)


def print_tree(node: Node) -> str:
    out: List[str] = []
    _emit(node, out)
    return "".join(out)
