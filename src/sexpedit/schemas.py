from pydantic import BaseModel, Field
from typing import List, NamedTuple, Optional, Tuple


class Span(NamedTuple):
    """
    Half-open [start, end) text offset pair.
    """
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def contains(self, pos: int) -> bool:
        return self.start <= pos < self.end

    def covers(self, other: "Span") -> bool:
        return self.start <= other.start and other.end <= self.end

    def text_of(self, text: str) -> str:
        return text[self.start:self.end]


# A host selection as (mark, point); the point side carries the cursor.
Region = Tuple[int, int]


class TransformResult(BaseModel):
    """
    Result of a structural operation on a buffer.

    A refused operation has success=False, the original text and point, and
    a human-readable reason in `message`.
    """
    success: bool
    operation: str
    text: str
    point: int
    region: Optional[Tuple[int, int]] = None  # (mark, point) when a selection is active
    message: Optional[str] = None


class ScanReport(BaseModel):
    """
    Outcome of an unmatched-delimiter scan.

    `complete` is False when the span exceeded the scan ceiling; an empty
    `unmatched` list then means "unknown", not "balanced".
    """
    span: Tuple[int, int]
    unmatched: List[int] = Field(default_factory=list)
    complete: bool = True
    reason: Optional[str] = None

    @property
    def balanced(self) -> bool:
        return self.complete and not self.unmatched
