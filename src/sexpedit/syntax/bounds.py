"""
Boundary finder.

Every query is total: a missing containing structure is answered with None.
The structure can be passed in when the caller already analyzed the buffer.
"""

from typing import Optional

from sexpedit.dialects import DialectConfig
from sexpedit.schemas import Region, Span
from .structure import Form, Structure, analyze


_SEXP_LEAVES = ("atom", "char", "raw", "string")
_SEXP_KINDS = ("atom", "char", "raw", "string", "list", "prefixed")


def _structure(text: str, dialect: DialectConfig, structure: Optional[Structure]) -> Structure:
    return structure if structure is not None else analyze(text, dialect)


def bounds_of_string(text: str, pos: int, dialect: DialectConfig,
                     structure: Optional[Structure] = None) -> Optional[Span]:
    """The string containing pos or starting at pos."""
    s = _structure(text, dialect, structure)
    form = s.form_at(pos, ("string",))
    return form.span if form is not None else None


def _whole_line(text: str, form: Form) -> bool:
    line_start = text.rfind("\n", 0, form.start) + 1
    return not text[line_start:form.start].strip()


def _line_gap(text: str, left: Form, right: Form) -> bool:
    gap = text[left.end:right.start]
    return gap.count("\n") == 1 and not gap.strip()


def bounds_of_comment(text: str, pos: int, dialect: DialectConfig,
                      structure: Optional[Structure] = None) -> Optional[Span]:
    """
    The comment at pos.

    A comment that owns its whole line extends over the neighbouring
    whole-line comments.
    """
    s = _structure(text, dialect, structure)
    form = s.form_at(pos, ("comment",)) or s.form_ending_at(pos, ("comment",))
    if form is None:
        return None
    if not _whole_line(text, form):
        return form.span

    siblings = form.parent.children
    index = siblings.index(form)
    first = last = index
    while first > 0:
        prev = siblings[first - 1]
        if prev.kind != "comment" or not _whole_line(text, prev) or not _line_gap(text, prev, siblings[first]):
            break
        first -= 1
    while last + 1 < len(siblings):
        nxt = siblings[last + 1]
        if nxt.kind != "comment" or not _whole_line(text, nxt) or not _line_gap(text, siblings[last], nxt):
            break
        last += 1
    return Span(siblings[first].start, siblings[last].end)


def bounds_of_list(text: str, pos: int, dialect: DialectConfig,
                   structure: Optional[Structure] = None) -> Optional[Span]:
    """Innermost list enclosing pos; None at top level."""
    s = _structure(text, dialect, structure)
    form = s.enclosing_list(pos)
    return form.span if form is not None else None


def _symbol_scan(text: str, pos: int, dialect: DialectConfig) -> Optional[Span]:
    stop = set(dialect.whitespace) | set(dialect.openers) | set(dialect.closers) | {'"', "\n", dialect.comment_char}
    start = pos
    while start > 0 and text[start - 1] not in stop:
        start -= 1
    end = pos
    while end < len(text) and text[end] not in stop:
        end += 1
    return Span(start, end) if end > start else None


def bounds_of_thing(text: str, pos: int, dialect: DialectConfig,
                    region: Optional[Region] = None,
                    structure: Optional[Structure] = None) -> Optional[Span]:
    """
    Span most natural to operate on at pos.

    Order: region, string (inside or at either edge), list with a delimiter
    adjacent to pos, comment, sexp at or just before pos, raw symbol scan.
    """
    if region is not None:
        mark, point = region
        return Span(min(mark, point), max(mark, point))

    s = _structure(text, dialect, structure)

    string = s.form_at(pos, ("string",)) or s.form_ending_at(pos, ("string",))
    if string is not None:
        return string.span

    lst = s.list_at_open(pos) or s.list_at_close(pos)
    if lst is not None:
        return lst.outermost().span

    comment = bounds_of_comment(text, pos, dialect, s)
    if comment is not None:
        return comment

    form = s.form_at(pos, _SEXP_LEAVES) or s.form_ending_at(pos, _SEXP_KINDS)
    if form is not None:
        return form.outermost().span

    return _symbol_scan(text, pos, dialect)
