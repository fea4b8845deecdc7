"""
Raise and convolute: move an expression outward through its enclosing lists.
"""

from sexpedit.exceptions import BoundaryNotFound, TransformRefused
from sexpedit.safety.scanner import find_unmatched_delimiters
from .context import Edit, EditContext


def raise_sexp(ctx: EditContext) -> Edit:
    """Replace the enclosing list (with its prefix) by the expression or region."""
    text = ctx.text
    region = ctx.region
    if region is not None:
        if find_unmatched_delimiters(text, region, ctx.dialect, ctx.config):
            raise TransformRefused("region is not balanced")
        container, sexps, first, last = ctx.region_forms()
        start, end = sexps[first].start, sexps[last].end
    else:
        form = ctx.sexp_at_point()
        container = form.parent
        start, end = form.start, form.end

    if container.kind != "list":
        raise BoundaryNotFound("cannot raise out of the top level")
    parent = container.outermost()
    new = text[:parent.start] + text[start:end] + text[parent.end:]
    anchor = (parent.start, parent.start + end - start)
    if region is not None:
        return Edit(new, anchor=anchor, side=ctx.region_side, region=True)

    side, delta = ctx.side_of(form)
    return Edit(new, anchor=anchor, side=side, delta=delta)


def convolute(ctx: EditContext) -> Edit:
    """
    Swap the two lists around the expression.

    With E in P in G, P = Pa E Pb and G = Ga P Gb, the result is Pa Ga E Gb Pb.
    """
    text = ctx.text
    form = ctx.sexp_at_point()
    inner = form.parent
    if inner.kind != "list":
        raise TransformRefused("convolute needs two enclosing lists")
    inner_outer = inner.outermost()
    grand = inner_outer.parent
    if grand.kind != "list":
        raise TransformRefused("convolute needs two enclosing lists")
    grand_outer = grand.outermost()

    pa = text[inner_outer.start:form.start]
    pb = text[form.end:inner_outer.end]
    ga = text[grand_outer.start:inner_outer.start]
    gb = text[inner_outer.end:grand_outer.end]
    middle = ctx.text_of(form)
    new = text[:grand_outer.start] + pa + ga + middle + gb + pb + text[grand_outer.end:]

    start = grand_outer.start + len(pa) + len(ga)
    side, delta = ctx.side_of(form)
    return Edit(new, anchor=(start, start + len(middle)), side=side, delta=delta, scope_levels=2)
