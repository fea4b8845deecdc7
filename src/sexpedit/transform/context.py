"""
Per-call editing context shared by the structural operations.

Each operation is a single step: it receives an EditContext over the
current text and returns an Edit describing the new text and where the
transformed expression ended up. Preconditions that do not hold raise
TransformRefused (or BoundaryNotFound for a missing structure).
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from sexpedit.config import EngineConfig
from sexpedit.dialects import DialectConfig
from sexpedit.exceptions import BoundaryNotFound, TransformRefused
from sexpedit.schemas import Region, Span
from sexpedit.syntax.structure import Form, Structure, analyze


Cursor = Union[int, Region]

LEFT = "left"
RIGHT = "right"
OFFSET = "offset"

_LEAVES = ("atom", "string", "char", "raw")


@dataclass
class Edit:
    """
    Outcome of one operation step.

    anchor: span of the resulting expression(s) in the new text
    side: where the point goes on that span (left, right or offset)
    delta: point - anchor start, for side == offset
    point: fallback point when there is no anchor
    scope_levels: enclosing lists re-laid out above the anchor (0: none)
    scope_points: offsets whose top-level forms are re-laid out as well
    region: the result keeps an active region over the anchor
    """
    text: str
    anchor: Optional[Tuple[int, int]] = None
    side: str = LEFT
    delta: int = 0
    point: int = 0
    scope_levels: int = 1
    scope_points: Tuple[int, ...] = ()
    region: bool = False


def gap_text(gap: str) -> str:
    """Whitespace without a line break collapses to one space; anything else is kept."""
    if "\n" in gap or gap.strip():
        return gap
    return " "


class EditContext:
    """
    Buffer snapshot, cursor and configuration for one step.

    Usage:
        ctx = EditContext(text, 10, EMACS_LISP, config)
        lst, side = ctx.list_at_point()
    """

    def __init__(self, text: str, cursor: Cursor, dialect: DialectConfig, config: EngineConfig):
        self.text = text
        self.dialect = dialect
        self.config = config
        if isinstance(cursor, (tuple, list)):
            self.mark, self.point = cursor
        else:
            self.mark, self.point = None, cursor
        if not 0 <= self.point <= len(text):
            raise TransformRefused(f"point {self.point} is outside the buffer")
        self.structure: Structure = analyze(text, dialect)
        if not self.structure.balanced:
            raise TransformRefused(f"buffer is unbalanced at offset {self.structure.errors[0]}")

    @property
    def region(self) -> Optional[Span]:
        if self.mark is None or self.mark == self.point:
            return None
        return Span(min(self.mark, self.point), max(self.mark, self.point))

    @property
    def region_side(self) -> str:
        return RIGHT if self.point > self.mark else LEFT

    def special(self) -> Optional[Tuple[Form, str]]:
        """The list the point is at, if it sits right before an opener or right after a closer."""
        s = self.structure
        for form in s.forms:
            if form.start == self.point and form.outermost() is form and form.body().is_list:
                return form.body(), LEFT
        lst = s.list_at_open(self.point)
        if lst is not None:
            return lst, LEFT
        lst = s.list_at_close(self.point)
        if lst is not None:
            return lst, RIGHT
        return None

    def list_at_point(self) -> Tuple[Form, str]:
        """The list to operate on; a non-special point moves to the enclosing opener."""
        found = self.special()
        if found is not None:
            return found
        lst = self.structure.enclosing_list(self.point)
        if lst is None:
            raise BoundaryNotFound("point is not inside a list")
        return lst, LEFT

    def sexp_at_point(self) -> Form:
        """
        The expression under the point, prefixes included.

        Between expressions the point first moves to the opener of the
        enclosing list, which then becomes the expression.
        """
        s = self.structure
        found = self.special()
        if found is not None:
            return found[0].outermost()
        form = s.form_at(self.point, _LEAVES)
        if form is None:
            form = s.form_ending_at(self.point, _LEAVES)
        if form is None:
            lst = s.enclosing_list(self.point)
            if lst is None:
                raise BoundaryNotFound("no expression at point")
            form = lst.outermost()
            self.point = form.start
        return form.outermost()

    def side_of(self, form: Form) -> Tuple[str, int]:
        if self.point == form.start:
            return LEFT, 0
        if self.point == form.end:
            return RIGHT, 0
        return OFFSET, self.point - form.start

    def siblings(self, form: Form) -> Tuple[List[Form], int]:
        """Expressions sharing form's container, and form's index among them."""
        outer = form.outermost()
        sexps = outer.parent.sexps
        return sexps, sexps.index(outer)

    def region_forms(self) -> Tuple[Form, List[Form], int, int]:
        """
        Sibling expressions covered by the region.

        Returns (container, siblings, first index, last index).
        """
        region = self.region
        s = self.structure
        container = s.enclosing_list(region.start) or s.root
        end_container = s.enclosing_list(region.end) or s.root
        if container is not end_container:
            raise TransformRefused("region crosses a list boundary")
        sexps = container.sexps
        covered = [i for i, f in enumerate(sexps) if region.start <= f.start and f.end <= region.end]
        if not covered:
            raise BoundaryNotFound("region covers no expression")
        for f in sexps:
            if f.start < region.start < f.end or f.start < region.end < f.end:
                raise TransformRefused("region cuts through an expression")
        return container, sexps, covered[0], covered[-1]

    def text_of(self, form: Form) -> str:
        return self.text[form.start:form.end]
