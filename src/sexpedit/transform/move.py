"""
Move an expression among its siblings, or teleport it into another list.
"""

from typing import Tuple

from sexpedit.exceptions import BoundaryNotFound, TransformRefused
from .context import LEFT, Edit, EditContext


def _block(ctx: EditContext) -> Tuple[list, int, int, str, int, bool]:
    """(siblings, first index, last index, side, delta, region) of what is being moved."""
    if ctx.region is not None:
        _, sexps, first, last = ctx.region_forms()
        return sexps, first, last, ctx.region_side, 0, True
    form = ctx.sexp_at_point()
    sexps, index = ctx.siblings(form)
    side, delta = ctx.side_of(form)
    return sexps, index, index, side, delta, False


def move_up(ctx: EditContext) -> Edit:
    text = ctx.text
    sexps, first, last, side, delta, region = _block(ctx)
    if first == 0:
        raise BoundaryNotFound("nothing above to swap with")
    prev = sexps[first - 1]
    start, end = sexps[first].start, sexps[last].end
    moved = text[start:end]
    new = text[:prev.start] + moved + text[prev.end:start] + ctx.text_of(prev) + text[end:]
    return Edit(new, anchor=(prev.start, prev.start + len(moved)), side=side, delta=delta, region=region)


def move_down(ctx: EditContext) -> Edit:
    text = ctx.text
    sexps, first, last, side, delta, region = _block(ctx)
    if last + 1 >= len(sexps):
        raise BoundaryNotFound("nothing below to swap with")
    nxt = sexps[last + 1]
    start, end = sexps[first].start, sexps[last].end
    moved = text[start:end]
    between = text[end:nxt.start]
    new = text[:start] + ctx.text_of(nxt) + between + moved + text[nxt.end:]
    new_start = start + len(nxt.text(text)) + len(between)
    return Edit(new, anchor=(new_start, new_start + len(moved)), side=side, delta=delta, region=region)


def _removal_span(ctx: EditContext, start: int, end: int) -> Tuple[int, int, str]:
    """Span to delete around [start, end) and the text left in its place."""
    text = ctx.text
    left = start
    while left > 0 and text[left - 1] in " \t":
        left -= 1
    right = end
    while right < len(text) and text[right] in " \t":
        right += 1
    line_start = left == 0 or text[left - 1] == "\n"
    line_end = right == len(text) or text[right] == "\n"
    if line_start and line_end:
        # the line is now blank: drop it with its newline
        if right < len(text):
            return left, right + 1, ""
        return max(0, left - 1), right, ""
    if line_start or line_end:
        return left, right, ""
    if text[left - 1] in ctx.dialect.openers or text[right] in ctx.dialect.closers:
        return left, right, ""
    return left, right, " "


def teleport(ctx: EditContext, target: int) -> Edit:
    """Relocate the list at point into the list opening at target."""
    s = ctx.structure
    lst, _ = ctx.list_at_point()
    source = lst.outermost()
    if source.start <= target < source.end:
        raise TransformRefused("target lies inside the expression being moved")
    destination = s.list_at_open(target)
    if destination is None:
        raise TransformRefused(f"no open delimiter at target {target}")

    text = ctx.text
    moved = ctx.text_of(source)
    head = destination.head()
    if head is not None and head.kind == "atom" and head.start == destination.inner_start:
        insert_at, inserted = head.end, " " + moved
        offset_in_insert = 1
    else:
        insert_at = destination.inner_start
        inserted = moved + (" " if destination.children else "")
        offset_in_insert = 0

    del_start, del_end, filler = _removal_span(ctx, source.start, source.end)
    if del_start <= insert_at <= del_end and insert_at != del_start:
        insert_at = del_start
    removed = del_end - del_start - len(filler)

    if insert_at >= del_end:
        new = text[:insert_at] + inserted + text[insert_at:]
        new = new[:del_start] + filler + new[del_end:]
        new_start = insert_at - removed + offset_in_insert
        source_point = del_start
    else:
        new = text[:del_start] + filler + text[del_end:]
        new = new[:insert_at] + inserted + new[insert_at:]
        new_start = insert_at + offset_in_insert
        source_point = del_start + len(inserted)

    return Edit(new, anchor=(new_start, new_start + len(moved)), side=LEFT, scope_levels=0,
                scope_points=(new_start, min(source_point, len(new))))
