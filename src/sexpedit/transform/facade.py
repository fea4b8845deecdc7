"""
StructuralEditor: Orchestrate structural editing operations.

Main entry point for slurp/barf/raise/convolute/splice/join/split/move/
teleport and the layout and safe-action buffer commands.
"""

from typing import Callable, List, Optional, Tuple

from sexpedit.config import EngineConfig, get_engine_config
from sexpedit.dialects import EMACS_LISP, DialectConfig
from sexpedit.exceptions import ReadError, TransformRefused
from sexpedit.logging_config import logger
from sexpedit.normalize import Normalizer
from sexpedit.safety import safe_copy, safe_delete, safe_paste
from sexpedit.schemas import Region, Span, TransformResult
from sexpedit.syntax.structure import Form, Structure, analyze, column

from .context import LEFT, OFFSET, RIGHT, Cursor, Edit, EditContext
from .join_split import join, split
from .lift import convolute, raise_sexp
from .move import move_down, move_up, teleport
from .slurp import barf, slurp
from .splice import splice


Step = Callable[[EditContext], Edit]


def _point_of(cursor: Cursor) -> int:
    return cursor[1] if isinstance(cursor, (tuple, list)) else cursor


def _region_of(cursor: Cursor) -> Optional[Region]:
    return tuple(cursor) if isinstance(cursor, (tuple, list)) else None


def _locate(structure: Structure, start: int, end: int) -> Optional[Tuple[Form, Form]]:
    """First and last outermost expressions lying within [start, end)."""
    within = [f for f in structure.forms
              if f.outermost() is f and start <= f.start and f.end <= end]
    if not within:
        return None
    first = min(within, key=lambda f: (f.start, -f.end))
    last = max(within, key=lambda f: (f.end, -f.start))
    return first, last


class StructuralEditor:
    """
    Main facade for structural operations.

    Each operation:
    1. Analyzes the buffer (refusing unbalanced text)
    2. Resolves the list or expression at the point
    3. Rewrites the text (repeated `count` times)
    4. Re-lays out the affected scope per reindent_mode
    5. Restores the point to the same side of the result

    A refused operation never changes the text; it comes back as a
    TransformResult with success=False and the reason in `message`.
    """

    def __init__(self, dialect: DialectConfig = EMACS_LISP, config: Optional[EngineConfig] = None):
        self.dialect = dialect
        self.config = config or get_engine_config()
        self.normalizer = Normalizer(dialect, self.config)

    # Structural operations

    def slurp(self, text: str, cursor: Cursor, count: int = 1) -> TransformResult:
        """Pull the neighbouring expression into the list; count=0 slurps all."""
        return self._run("slurp", slurp, text, cursor, count, allow_all=True)

    def barf(self, text: str, cursor: Cursor, count: int = 1) -> TransformResult:
        """Push the last (or first) element out of the list; count=0 barfs all but one."""
        return self._run("barf", barf, text, cursor, count, allow_all=True)

    def raise_sexp(self, text: str, cursor: Cursor, count: int = 1) -> TransformResult:
        return self._run("raise", raise_sexp, text, cursor, count)

    def convolute(self, text: str, cursor: Cursor, count: int = 1) -> TransformResult:
        return self._run("convolute", convolute, text, cursor, count)

    def splice(self, text: str, cursor: Cursor, count: int = 1) -> TransformResult:
        return self._run("splice", splice, text, cursor, count)

    def join(self, text: str, cursor: Cursor, count: int = 1) -> TransformResult:
        return self._run("join", join, text, cursor, count)

    def split(self, text: str, cursor: Cursor, count: int = 1) -> TransformResult:
        return self._run("split", split, text, cursor, count)

    def move_up(self, text: str, cursor: Cursor, count: int = 1) -> TransformResult:
        return self._run("move-up", move_up, text, cursor, count)

    def move_down(self, text: str, cursor: Cursor, count: int = 1) -> TransformResult:
        return self._run("move-down", move_down, text, cursor, count)

    def teleport(self, text: str, cursor: Cursor, target: int, count: int = 1) -> TransformResult:
        """
        Move the list at point into the list whose opener is at target.

        count is accepted so every operation shares one signature; a teleport
        always moves exactly one expression.
        """
        return self._run("teleport", lambda ctx: teleport(ctx, target), text, cursor, 1)

    # Layout commands

    def normalize_at(self, text: str, cursor: Cursor, mode: str = "pretty") -> TransformResult:
        """Apply a normalizer mode to the list at point."""
        operation = f"normalize-{mode}"
        try:
            ctx = EditContext(text, cursor, self.dialect, self.config)
            lst, side = ctx.list_at_point()
            outer = lst.outermost()
            chunk = ctx.text_of(outer)
            try:
                laid_out = self.normalizer.apply(chunk, mode, column(text, outer.start))
            except ReadError as e:
                raise TransformRefused(str(e))
            new = text[:outer.start] + laid_out + text[outer.end:]
            point = outer.start if side == LEFT else outer.start + len(laid_out)
            return TransformResult(success=True, operation=operation, text=new, point=point)
        except TransformRefused as e:
            return self._refused(operation, text, cursor, e)

    def oneline_at(self, text: str, cursor: Cursor) -> TransformResult:
        return self.normalize_at(text, cursor, "oneline")

    def multiline_at(self, text: str, cursor: Cursor) -> TransformResult:
        return self.normalize_at(text, cursor, "multiline")

    # Safe actions

    def delete_region(self, text: str, region: Region) -> TransformResult:
        """Delete the region, keeping stranded delimiters when safe_actions is on."""
        new, point = safe_delete(text, region, self.dialect, self.config)
        return TransformResult(success=True, operation="delete", text=new, point=point)

    def copy_region(self, text: str, region: Region) -> str:
        return safe_copy(text, region, self.dialect, self.config)

    def paste(self, text: str, cursor: Cursor, pasted: str) -> TransformResult:
        """Insert pasted text at point (replacing an active region), balanced first."""
        region = _region_of(cursor)
        new, point = safe_paste(text, _point_of(cursor), pasted, self.dialect, self.config,
                                region=region if region and region[0] != region[1] else None)
        return TransformResult(success=True, operation="paste", text=new, point=point)

    # Pipeline

    def _run(self, operation: str, step: Step, text: str, cursor: Cursor, count: int,
             allow_all: bool = False) -> TransformResult:
        limit = None if (count <= 0 and allow_all) else max(count, 1)
        current_text, current_cursor = text, cursor
        done = 0
        try:
            while limit is None or done < limit:
                try:
                    ctx = EditContext(current_text, current_cursor, self.dialect, self.config)
                    edit = step(ctx)
                except TransformRefused:
                    if done == 0:
                        raise
                    break
                if not analyze(edit.text, self.dialect).balanced:
                    raise TransformRefused(f"{operation} would unbalance the buffer")
                current_text, point, region = self._finish(edit)
                current_cursor = region if region is not None else point
                done += 1
        except TransformRefused as e:
            return self._refused(operation, text, cursor, e)

        logger.debug(f"{operation} applied {done} time(s)")
        return TransformResult(
            success=True,
            operation=operation,
            text=current_text,
            point=_point_of(current_cursor),
            region=_region_of(current_cursor),
        )

    def _refused(self, operation: str, text: str, cursor: Cursor, error: TransformRefused) -> TransformResult:
        logger.debug(f"{operation} refused: {error.reason}")
        return TransformResult(
            success=False,
            operation=operation,
            text=text,
            point=_point_of(cursor),
            region=_region_of(cursor),
            message=error.reason,
        )

    def _finish(self, edit: Edit) -> Tuple[str, int, Optional[Region]]:
        """Re-lay out the scope of an edit and find the result again."""
        text = edit.text
        structure = analyze(text, self.dialect)
        located = _locate(structure, *edit.anchor) if edit.anchor else None
        paths = None
        if located is not None:
            paths = (structure.path_of(located[0]), structure.path_of(located[1]))

        spans = self._scopes(structure, located, edit)
        text = self._relayout(text, spans)

        if paths is None:
            return text, min(edit.point, len(text)), None
        structure = analyze(text, self.dialect)
        first, last = structure.at_path(paths[0]), structure.at_path(paths[1])
        if first is None or last is None:
            return text, min(edit.point, len(text)), None

        if edit.side == RIGHT:
            point = last.end
        elif edit.side == OFFSET:
            point = min(first.start + edit.delta, last.end)
        else:
            point = first.start
        if edit.region:
            mark = last.end if edit.side == LEFT else first.start
            return text, point, (mark, point)
        return text, point, None

    def _scopes(self, structure: Structure, located: Optional[Tuple[Form, Form]], edit: Edit) -> List[Span]:
        spans = []
        if located is not None and edit.scope_levels > 0:
            form = located[0]
            climbed = 0
            while climbed < edit.scope_levels:
                container = form.container()
                if container is None or container.kind != "list":
                    break
                form = container
                climbed += 1
            if climbed == 0:
                form = structure.top_level(located[0])
            spans.append(form.outermost().span)
        for pos in edit.scope_points:
            form = structure.form_at(pos) or structure.enclosing_list(pos)
            if form is not None and form.kind != "root":
                spans.append(structure.top_level(form).span)
        # drop spans nested in another
        spans = sorted(set(spans))
        return [s for s in spans if not any(o != s and o.covers(s) for o in spans)]

    def _relayout(self, text: str, spans: List[Span]) -> str:
        mode = self.config.reindent_mode
        if mode == "none" or not spans:
            return text
        layout = self.normalizer.normalize if mode == "pretty" else self.normalizer.reindent
        for span in sorted(spans, reverse=True):
            chunk = span.text_of(text)
            try:
                laid_out = layout(chunk, column(text, span.start))
            except ReadError as e:
                logger.debug(f"Skipping relayout of [{span.start}, {span.end}): {e}")
                continue
            text = text[:span.start] + laid_out + text[span.end:]
        return text
