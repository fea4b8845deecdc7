"""
Join two neighbouring lists or strings, or split one in two at the point.
"""

from typing import Tuple

from sexpedit.exceptions import BoundaryNotFound, TransformRefused
from sexpedit.syntax.classifier import Syntax, classify
from sexpedit.syntax.structure import Form
from .context import LEFT, RIGHT, Edit, EditContext


_LEAVES = ("atom", "char", "raw", "string")


def _pair(ctx: EditContext) -> Tuple[Form, Form, str]:
    """The two expressions to join and the side the point is on."""
    s = ctx.structure
    string = s.form_ending_at(ctx.point, ("string",))
    if string is not None and string.outermost() is string:
        first, side = string, RIGHT
    else:
        string = s.form_at(ctx.point, ("string",))
        if string is not None and string.start == ctx.point:
            first, side = string, LEFT
        else:
            lst, side = ctx.list_at_point()
            first = lst.outermost()

    sexps, index = ctx.siblings(first)
    if side == RIGHT:
        if index + 1 >= len(sexps):
            raise BoundaryNotFound("nothing to join on the right")
        return first, sexps[index + 1], side
    if index == 0:
        raise BoundaryNotFound("nothing to join on the left")
    return sexps[index - 1], first, side


def join(ctx: EditContext) -> Edit:
    text = ctx.text
    left, right, side = _pair(ctx)
    if right.kind == "prefixed":
        raise TransformRefused("cannot join into an expression with a prefix")
    between = text[left.end:right.start]
    if between.strip():
        raise TransformRefused("only whitespace may separate joined expressions")
    left_body, right_body = left.body(), right

    if left_body.kind == "string" and right_body.kind == "string":
        left_quote = text[left_body.start:text.index('"', left_body.start) + 1]
        right_quote = text[right_body.start:text.index('"', right_body.start) + 1]
        if left_quote != right_quote:
            raise TransformRefused("strings of different kinds cannot be joined")
        new = text[:left_body.end - 1] + text[right_body.start + len(right_quote):]
    elif left_body.is_list and right_body.is_list:
        if left_body.opener != right_body.opener:
            raise TransformRefused(
                f"cannot join {left_body.opener}{left_body.closer} with {right_body.opener}{right_body.closer}"
            )
        separator = "\n" if "\n" in between else " "
        if not left_body.children or not right_body.children:
            separator = ""
        head = text[:left_body.inner_end].rstrip(" \t")
        tail = text[right_body.inner_start:].lstrip(" \t")
        new = head + separator + tail
    else:
        raise TransformRefused("only two lists or two strings can be joined")

    end = right.end + len(new) - len(text)
    return Edit(new, anchor=(left.start, end), side=side)


def split(ctx: EditContext) -> Edit:
    text = ctx.text
    point = ctx.point
    syntax = classify(text, point, ctx.dialect)

    if syntax is Syntax.IN_COMMENT:
        raise TransformRefused("cannot split a comment")

    if syntax is Syntax.IN_STRING:
        string = ctx.structure.form_at(point, ("string",))
        if string is None or point <= text.index('"', string.start):
            raise TransformRefused("point is not inside the string body")
        opening = text[string.start:text.index('"', string.start) + 1]
        new = text[:point] + '" ' + opening + text[point:]
        second = point + 2
        return Edit(new, anchor=(second, string.end + len(new) - len(text)), side=LEFT)

    lst = ctx.structure.enclosing_list(point)
    if lst is None:
        raise BoundaryNotFound("cannot split at the top level")
    leaf = ctx.structure.form_at(point, _LEAVES)
    if leaf is not None and leaf.start < point:
        point = leaf.outermost().end

    left_end = len(text[:point].rstrip(" \t"))
    left_end = max(left_end, lst.inner_start)
    right_start = point
    while right_start < lst.inner_end and text[right_start] in " \t\n":
        right_start += 1
    if not text[lst.inner_start:left_end].strip() or not text[right_start:lst.inner_end].strip():
        raise TransformRefused("split would leave an empty list")
    new = text[:left_end] + lst.closer + " " + lst.opener + text[right_start:]
    second = left_end + len(lst.closer) + 1
    end = lst.end + len(new) - len(text)
    return Edit(new, anchor=(second, end), side=LEFT)
