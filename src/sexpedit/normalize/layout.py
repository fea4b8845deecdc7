"""
Layout engines used by the Normalizer.

Both engines work on items: the non-space children of a list paired with
the number of newlines that preceded them in the source. Columns are
absolute, so nested lines are indented from the column the text starts at.
"""

from typing import Callable, List, Optional, Tuple

from sexpedit.dialects import DialectConfig, LayoutRule
from sexpedit.reader.printer import print_tree
from sexpedit.reader.tree import (
    PREFIX_TEXT,
    Atom,
    Escape,
    EscapeKind,
    Node,
    Root,
    SList,
    is_comment,
    is_layout,
    is_newline,
)


Item = Tuple[Node, int]


def items_of(children: List[Node]) -> Tuple[List[Item], int]:
    """Pair each non-layout child with its preceding newline count; also return trailing newlines."""
    items: List[Item] = []
    newlines = 0
    for child in children:
        if is_newline(child):
            newlines += 1
        elif is_layout(child):
            continue
        else:
            items.append((child, newlines))
            newlines = 0
    return items, newlines


def end_column(rendered: str, col: int) -> int:
    index = rendered.rfind("\n")
    if index < 0:
        return col + len(rendered)
    return len(rendered) - index - 1


def prefix_text(node: Escape) -> str:
    """The prefix with any comments kept between it and its form."""
    return PREFIX_TEXT[node.kind] + "".join(print_tree(n) for n in node.layout)


def flat(node: Node, strict: bool = True) -> Optional[str]:
    """
    Single-line rendering, or None when the node holds a comment.

    With strict, a string or other payload spanning lines also yields None.
    """
    if isinstance(node, SList):
        parts = []
        for child in node.children:
            if is_layout(child):
                continue
            part = flat(child, strict)
            if part is None:
                return None
            parts.append(part)
        return node.opener + " ".join(parts) + node.closer
    if isinstance(node, Escape):
        if node.is_prefix:
            if any(is_comment(n) for n in node.layout):
                return None
            inner = flat(node.payload, strict)
            return None if inner is None else PREFIX_TEXT[node.kind] + inner
        if node.kind is EscapeKind.COMMENT:
            return None
    text = print_tree(node)
    if strict and "\n" in text:
        return None
    return text


class _Layout:

    def __init__(self, dialect: DialectConfig, fill_column: int):
        self.dialect = dialect
        self.fill_column = fill_column

    def render(self, node: Node, col: int) -> str:
        raise NotImplementedError

    def shape(self, node: SList, items: List[Item], col: int) -> Tuple[int, int, int, Optional[LayoutRule]]:
        """(elements on the head line, elements per later line, indent column, layout rule)."""
        inner = col + len(node.opener)
        code = [child for child, _ in items if not is_comment(child)]
        head = code[0] if code else None
        if node.opener == "{":
            return 2, 2, inner, None
        if node.opener == "(" and isinstance(head, Atom):
            rule = self.dialect.layout_rule(head.text)
            if rule is not None:
                return rule.first_line, 1, inner + 1, rule
            return 2, 1, inner + len(head.text) + 1, None
        return 1, 1, inner, None

    def render_root(self, root: Root, offset: int, render: Optional[Callable[[Node, int], str]] = None) -> str:
        render = render or self.render
        items, _ = items_of(root.children)
        out = []
        cur = offset
        for position, (child, newlines) in enumerate(items):
            if position:
                if newlines == 0:
                    out.append(" ")
                    cur += 1
                else:
                    out.append("\n" * min(newlines, 2) + " " * offset)
                    cur = offset
            rendered = render(child, cur)
            out.append(rendered)
            cur = end_column(rendered, cur)
        return "".join(out)


class PrettyLayout(_Layout):
    """Reflow lists: flat when they fit, otherwise broken by the dialect's layout rules."""

    def render(self, node: Node, col: int, force: bool = False) -> str:
        if isinstance(node, Escape) and node.is_prefix:
            prefix = prefix_text(node)
            return prefix + self.render(node.payload, end_column(prefix, col), force)
        if not isinstance(node, SList):
            return print_tree(node)
        if not force:
            text = flat(node)
            if text is not None and col + len(text) <= self.fill_column:
                return text
        items, _ = items_of(node.children)
        first_line, per_line, indent, rule = self.shape(node, items, col)
        return self.break_list(node, items, col, first_line, per_line, indent, rule)

    def render_forced(self, node: Node, col: int) -> str:
        return self.render(node, col, force=True)

    def break_list(self, node: SList, items: List[Item], col: int, first_line: int,
                   per_line: int, indent: int, rule: Optional[LayoutRule] = None) -> str:
        out = [node.opener]
        cur = col + len(node.opener)
        on_line = 0
        line_no = 0
        index = 0
        must_break = False
        after_comment = False

        for position, (child, newlines) in enumerate(items):
            if is_comment(child):
                text = print_tree(child)
                if position and not newlines:
                    out.append(" " + text)
                elif position or newlines:
                    out.append("\n" + " " * indent + text)
                else:
                    out.append(text)
                cur = end_column(out[-1], cur)
                must_break = after_comment = True
                continue

            capacity = first_line if line_no == 0 else per_line
            if must_break or (on_line and on_line >= capacity):
                out.append("\n" + " " * indent)
                cur = indent
                line_no += 1
                on_line = 0
            elif on_line:
                out.append(" ")
                cur += 1

            if rule is not None and index in rule.flat and flat(child) is not None:
                rendered = flat(child)
            elif rule is not None and rule.bindings and index == 1:
                rendered = self.bindings(child, cur)
            else:
                rendered = self.render(child, cur)
            out.append(rendered)
            cur = end_column(rendered, cur)
            on_line += 1
            index += 1
            must_break = "\n" in rendered
            after_comment = False

        if after_comment:
            out.append("\n" + " " * indent)
        out.append(node.closer)
        return "".join(out)

    def bindings(self, node: Node, col: int) -> str:
        """One binding per line; vector bindings go one pair per line."""
        if not isinstance(node, SList):
            return self.render(node, col)
        items, _ = items_of(node.children)
        code = [child for child, _ in items if not is_comment(child)]
        per_line = 2 if node.opener == "[" and self.dialect.vector_bindings else 1
        text = flat(node)
        if text is not None and len(code) <= per_line and col + len(text) <= self.fill_column:
            return text
        return self.break_list(node, items, col, per_line, per_line, col + len(node.opener))


class IndentLayout(_Layout):
    """Keep line breaks, fix spacing and indentation."""

    def render(self, node: Node, col: int) -> str:
        if isinstance(node, Escape) and node.is_prefix:
            prefix = prefix_text(node)
            return prefix + self.render(node.payload, end_column(prefix, col))
        if not isinstance(node, SList):
            return print_tree(node)
        items, _ = items_of(node.children)
        if not items:
            return node.opener + node.closer

        _, _, indent, rule = self.shape(node, items, col)
        head = items[0][0]
        if rule is None and node.opener == "(" and isinstance(head, Atom):
            # no argument on the head line: align under the head
            if len(items) < 2 or items[1][1] or is_comment(items[1][0]):
                indent = col + len(node.opener)

        out = [node.opener]
        cur = col + len(node.opener)
        for position, (child, newlines) in enumerate(items):
            if position and newlines:
                out.append("\n" * min(newlines, 2) + " " * indent)
                cur = indent
            elif position:
                out.append(" ")
                cur += 1
            rendered = self.render(child, cur)
            out.append(rendered)
            cur = end_column(rendered, cur)

        if is_comment(items[-1][0]):
            out.append("\n" + " " * indent)
        out.append(node.closer)
        return "".join(out)


def oneline_text(root: Root, comments: List[str], offset: int) -> str:
    """Hoisted comments, each on its own line, then the code on one line."""
    code = " ".join(flat(child, strict=False) for child, _ in items_of(root.children)[0])
    lines = list(comments)
    if code:
        lines.append(code)
    return ("\n" + " " * offset).join(lines)
