"""
Page geometry for table regions.

PDF units, origin at the top-left corner of the page, y growing downwards
(the coordinate space PyMuPDF reports spans and table boxes in).
"""

from dataclasses import dataclass
from typing import Sequence

DEFAULT_TABLE_MARGIN = 3.0


@dataclass(frozen=True)
class BoundingBox:
    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "BoundingBox":
        left, top, right, bottom = values
        return cls(float(left), float(top), float(right), float(bottom))

    def inflate(self, margin: float) -> "BoundingBox":
        return BoundingBox(
            self.left - margin,
            self.top - margin,
            self.right + margin,
            self.bottom + margin,
        )

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom


@dataclass(frozen=True)
class TableRegion:
    """Where one detected table sits: 1-based page number plus its box."""

    page: int
    bounds: BoundingBox

    def contains(self, x: float, y: float, margin: float = DEFAULT_TABLE_MARGIN) -> bool:
        return self.bounds.inflate(margin).contains(x, y)
