"""
Splice: remove a list's delimiters (and prefix), keeping its contents.

Splicing a let that is a body form of another let merges the two binding
lists instead.
"""

from typing import List, Optional, Set, Tuple

from sexpedit.exceptions import BoundaryNotFound
from sexpedit.logging_config import logger
from sexpedit.syntax.structure import Form
from .context import LEFT, Edit, EditContext


def _fuses(dialect, left: str, right: str) -> bool:
    """Would these two characters run together into one token?"""
    if not left or not right:
        return False
    separators = set(dialect.whitespace) | {"\n"}
    return (left not in separators and left not in dialect.openers
            and right not in separators and right not in dialect.closers)


def _splice_text(ctx: EditContext, text: str, lst: Form) -> Tuple[str, int, int]:
    """Splice one list in text; return (new text, contents start, contents end)."""
    outer = lst.outermost()
    body = text[lst.inner_start:lst.inner_end]
    before = text[outer.start - 1] if outer.start else ""
    after = text[outer.end] if outer.end < len(text) else ""
    left = " " if _fuses(ctx.dialect, before, body[:1]) else ""
    right = " " if _fuses(ctx.dialect, body[-1:], after) else ""
    new = text[:outer.start] + left + body + right + text[outer.end:]
    start = outer.start + len(left)
    return new, start, start + len(body)


def splice(ctx: EditContext) -> Edit:
    if ctx.region is not None:
        return _splice_region(ctx)

    lst, _ = ctx.list_at_point()
    merged = let_splice(ctx, lst)
    if merged is not None:
        return merged

    new, start, end = _splice_text(ctx, ctx.text, lst)
    if not lst.sexps:
        return Edit(new, point=start, scope_points=(start,))
    return Edit(new, anchor=(start, end), side=LEFT)


def _splice_region(ctx: EditContext) -> Edit:
    """Splice every outermost list the region covers, right to left."""
    region = ctx.region
    covered = [f for f in ctx.structure.lists()
               if region.start <= f.outermost().start and f.outermost().end <= region.end]
    if not covered:
        raise BoundaryNotFound("region covers no list")
    top = [f for f in covered
           if not any(o is not f and o.start <= f.start and f.end <= o.end for o in covered)]
    text = ctx.text
    end = region.end
    for lst in sorted(top, key=lambda f: f.start, reverse=True):
        before = len(text)
        text, _, _ = _splice_text(ctx, text, lst)
        end += len(text) - before
    return Edit(text, anchor=(region.start, end), side=ctx.region_side, region=True)


def _bindings(ctx: EditContext, bindings: Form) -> List[Tuple[str, Optional[Form]]]:
    """(name, value form) pairs of a binding list."""
    sexps = bindings.sexps
    pairs = []
    if bindings.opener == "[" and ctx.dialect.vector_bindings:
        for i in range(0, len(sexps), 2):
            value = sexps[i + 1] if i + 1 < len(sexps) else None
            pairs.append((ctx.text_of(sexps[i]), value))
        return pairs
    for binding in sexps:
        if binding.is_list and binding.sexps:
            parts = binding.sexps
            pairs.append((ctx.text_of(parts[0]), parts[1] if len(parts) > 1 else None))
        else:
            pairs.append((ctx.text_of(binding), None))
    return pairs


def _symbols(ctx: EditContext, form: Optional[Form]) -> Set[str]:
    if form is None:
        return set()
    return {ctx.text_of(f) for f in ctx.structure.forms
            if f.kind == "atom" and form.start <= f.start and f.end <= form.end}


def _is_let(ctx: EditContext, form: Form) -> bool:
    head = form.head()
    return (form.is_list and form.opener == "(" and head is not None and head.kind == "atom"
            and ctx.text_of(head) in ctx.dialect.let_heads
            and len(form.sexps) >= 2 and form.sexps[1].is_list)


def let_splice(ctx: EditContext, lst: Form) -> Optional[Edit]:
    """
    Merge a let into the let whose body it sits in.

    Returns None when lst is not such a let.
    """
    if lst.outermost() is not lst or not _is_let(ctx, lst):
        return None
    outer = lst.parent
    if outer.kind != "list" or not _is_let(ctx, outer) or outer.sexps.index(lst) < 2:
        return None

    text = ctx.text
    inner_bindings = lst.sexps[1]
    outer_bindings = outer.sexps[1]
    outer_pairs = _bindings(ctx, outer_bindings)
    outer_names = {name for name, _ in outer_pairs}
    inner_pairs = _bindings(ctx, inner_bindings)

    sequential = ctx.text_of(lst.head()) == ctx.dialect.let_star
    for name, value in inner_pairs:
        if name in outer_names or _symbols(ctx, value) & outer_names:
            sequential = True
        outer_names.add(name)

    edits: List[Tuple[int, int, str]] = []
    body = text[inner_bindings.end:lst.inner_end].strip()
    edits.append((lst.start, lst.end, body))

    merged = text[inner_bindings.inner_start:inner_bindings.inner_end].strip()
    if merged:
        existing = text[outer_bindings.inner_start:outer_bindings.inner_end].rstrip(" \t")
        separator = "\n" if "\n" in text[outer_bindings.start:outer_bindings.end] else " "
        if not existing.strip():
            separator = ""
        edits.append((outer_bindings.inner_start, outer_bindings.inner_end, existing + separator + merged))

    head = outer.head()
    star = ctx.dialect.let_star
    if sequential and star and ctx.text_of(head) != star:
        logger.debug(f"Merged bindings depend on each other, renaming {ctx.text_of(head)} to {star}")
        edits.append((head.start, head.end, star))

    new = text
    for start, end, replacement in sorted(edits, reverse=True):
        new = new[:start] + replacement + new[end:]
    outer_end = outer.end + len(new) - len(text)
    return Edit(new, anchor=(outer.outermost().start, outer_end), side=LEFT)
