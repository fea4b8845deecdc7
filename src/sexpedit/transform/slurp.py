"""
Slurp and barf: grow or shrink a list by one neighbouring expression.

The point side picks the direction: right after a closer works on the
right end, right before an opener on the left end.
"""

from sexpedit.exceptions import BoundaryNotFound, TransformRefused
from .context import LEFT, RIGHT, Edit, EditContext, gap_text


def slurp(ctx: EditContext) -> Edit:
    lst, side = ctx.list_at_point()
    outer = lst.outermost()
    sexps, index = ctx.siblings(lst)
    text = ctx.text
    empty = not lst.children

    if side == RIGHT:
        if index + 1 >= len(sexps):
            raise BoundaryNotFound("nothing to slurp on the right")
        nxt = sexps[index + 1]
        gap = "" if empty else gap_text(text[outer.end:nxt.start])
        head = text[:lst.inner_end].rstrip(" \t")
        new = head + gap + ctx.text_of(nxt) + lst.closer + text[nxt.end:]
        end = nxt.end + len(new) - len(text)
        return Edit(new, anchor=(outer.start, end), side=RIGHT)

    if index == 0:
        raise BoundaryNotFound("nothing to slurp on the left")
    prev = sexps[index - 1]
    gap = "" if empty else gap_text(text[prev.end:outer.start])
    opening = text[outer.start:lst.inner_start]
    body = text[lst.inner_start:].lstrip(" \t")
    new = text[:prev.start] + opening + ctx.text_of(prev) + gap + body
    end = outer.end + len(new) - len(text)
    return Edit(new, anchor=(prev.start, end), side=LEFT)


def barf(ctx: EditContext) -> Edit:
    lst, side = ctx.list_at_point()
    outer = lst.outermost()
    sexps = lst.sexps
    text = ctx.text
    if len(sexps) < 2:
        raise TransformRefused("barfing would leave the list empty")

    if side == RIGHT:
        keep = sexps[-2]
        ejected = text[keep.end:lst.inner_end].rstrip(" \t")
        new = text[:keep.end] + lst.closer + ejected + text[lst.end:]
        return Edit(new, anchor=(outer.start, keep.end + len(lst.closer)), side=RIGHT)

    # the prefix travels with the opener
    keep = sexps[1]
    ejected = text[lst.inner_start:keep.start].lstrip(" \t")
    opening = text[outer.start:lst.inner_start]
    new = text[:outer.start] + ejected + opening + text[keep.start:]
    start = outer.start + len(ejected)
    return Edit(new, anchor=(start, outer.end + len(new) - len(text)), side=LEFT)
