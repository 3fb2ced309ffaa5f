"""
Projection of canonical geometry into a format's coordinate space.

Canonical rectangles are inches with a bottom-left origin. A Projection scales
them into the output unit and, for Y-down formats, flips the vertical axis
about the page height as the final step.
"""

from dataclasses import dataclass
from typing import Tuple

from bindery.config.units import DEFAULT_DPI, Unit, convert, to_inches
from bindery.geometry.shapes import Rect


@dataclass(frozen=True)
class Projection:
    unit: Unit
    page_height: float  # inches
    dpi: int = DEFAULT_DPI
    y_down: bool = False

    def length(self, inches: float) -> float:
        return convert(inches, self.unit, self.dpi)

    def x(self, inches: float) -> float:
        return self.length(inches)

    def y(self, inches: float) -> float:
        if self.y_down:
            return self.length(self.page_height - inches)
        return self.length(inches)

    def point(self, x: float, y: float) -> Tuple[float, float]:
        return self.x(x), self.y(y)

    def rect(self, r: Rect) -> Tuple[float, float, float, float]:
        """(x, y, width, height) of ``r``; y is the top edge when Y points down."""
        top_or_bottom = r.top if self.y_down else r.y
        return self.x(r.x), self.y(top_or_bottom), self.length(r.width), self.length(r.height)

    def bounds(self, r: Rect) -> Tuple[float, float, float, float]:
        """(left, top, right, bottom) in output units, for Y-down box APIs."""
        x, y, w, h = self.rect(r)
        if self.y_down:
            return x, y, x + w, y + h
        return x, y + h, x + w, y

    def unproject_rect(self, x: float, y: float, width: float, height: float) -> Rect:
        w = to_inches(width, self.unit, self.dpi)
        h = to_inches(height, self.unit, self.dpi)
        left = to_inches(x, self.unit, self.dpi)
        y_in = to_inches(y, self.unit, self.dpi)
        if self.y_down:
            y_in = self.page_height - y_in - h
        return Rect(left, y_in, w, h)
