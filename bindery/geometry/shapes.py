"""
Geometry primitives shared by the cover and interior engines.

All values are inches in a page-relative space with the origin at the
bottom-left corner and Y pointing up.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from bindery.config.bindings import BindingMethod, LayoutKind

# Region identifiers
BLEED_AREA = "bleed_area"
BACKGROUND_TRIM = "background_trim"
SPINE = "spine"
BACK_TRIM = "back_trim"
FRONT_TRIM = "front_trim"
LEFT_SAFE_AREA = "left_safe_area"
RIGHT_SAFE_AREA = "right_safe_area"
SAFE_AREA = "safe_area"
BARCODE_ZONE = "barcode_zone"
PUNCH_HOLE_ZONE = "punch_hole_zone"
GUTTER_LABEL = "gutter_label"

TOLERANCE = 1e-9


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height

    def contains(self, other: "Rect", tol: float = TOLERANCE) -> bool:
        return (
            other.x >= self.x - tol
            and other.y >= self.y - tol
            and other.right <= self.right + tol
            and other.top <= self.top + tol
        )

    def inset(self, left: float, bottom: float, right: float, top: float) -> "Rect":
        return Rect(self.x + left, self.y + bottom, self.width - left - right, self.height - bottom - top)

    def as_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class PunchHole:
    cx: float
    cy: float
    radius: float


@dataclass(frozen=True)
class CoverPage:
    """One physical page of a cover document and its named regions."""

    name: str  # "spread", "front", "back" or "placeholder"
    width: float
    height: float
    regions: Mapping[str, Rect]
    punch_holes: Tuple[PunchHole, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "regions", MappingProxyType(dict(self.regions)))

    def region(self, name: str) -> Optional[Rect]:
        return self.regions.get(name)


@dataclass(frozen=True)
class CoverGeometry:
    """Canonical cover layout. Built once per request and never mutated."""

    binding_name: str
    binding: Optional[BindingMethod]
    layout: Optional[LayoutKind]
    pages: Tuple[CoverPage, ...]
    values: Mapping[str, float]
    spine_text_drawable: bool
    trim_width: float
    trim_height: float
    page_count: int
    paper_stock: str
    book_title: Optional[str] = None
    spine_warning: str = ""
    uses_wrap: bool = False

    def __post_init__(self):
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    @property
    def supported(self) -> bool:
        return self.binding is not None

    @property
    def total_width(self) -> float:
        return self.values["total_width"]

    @property
    def total_height(self) -> float:
        return self.values["total_height"]

    def page(self, name: str) -> CoverPage:
        for p in self.pages:
            if p.name == name:
                return p
        raise KeyError(f"No cover page named '{name}'")

    def as_dict(self) -> dict:
        return {
            "bindingName": self.binding_name,
            "binding": self.binding.value if self.binding else None,
            "supported": self.supported,
            "spineTextDrawable": self.spine_text_drawable,
            "values": dict(self.values),
            "pages": [
                {
                    "name": p.name,
                    "width": p.width,
                    "height": p.height,
                    "regions": {k: r.as_dict() for k, r in p.regions.items()},
                    "punchHoles": [{"cx": h.cx, "cy": h.cy, "radius": h.radius} for h in p.punch_holes],
                }
                for p in self.pages
            ],
        }
