"""
Shared legend content for every output format.

Each renderer asks this module what to write and where (in canonical
inches), then projects the positions into its own units. Keeping the text
templates here means a PDF, a PSD and an IDML generated for the same request
show literally identical numbers.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from bindery.config.bindings import BARCODE_HEIGHT, BARCODE_WIDTH, LayoutKind, PUNCH_HOLE_OFFSET
from bindery.config.units import POINTS_PER_INCH
from bindery.geometry.interior import INTERIOR_TEMPLATE_PAGES, InteriorGeometry
from bindery.geometry.shapes import (
    BACKGROUND_TRIM,
    BARCODE_ZONE,
    BLEED_AREA,
    GUTTER_LABEL,
    LEFT_SAFE_AREA,
    RIGHT_SAFE_AREA,
    SAFE_AREA,
    SPINE,
    CoverGeometry,
    CoverPage,
    Rect,
)

# Colours as hex strings; every format converts from these
PALETTE = {
    "bleed": "#018685",
    "background": "#204B7F",
    "spine": "#EB746C",
    "page": "#FFFFFF",
    "barcode": "#FAD571",
    "punch_hole": "#999999",
    "text_primary": "#1A1A1A",
    "text_secondary": "#666666",
    "text_on_blue": "#FFFFFF",
}
BARCODE_OPACITY = 0.8
PUNCH_HOLE_OPACITY = 0.3

# Paint order of cover regions and the palette key each one is filled with
REGION_STYLES: Tuple[Tuple[str, str], ...] = (
    (BLEED_AREA, "bleed"),
    (BACKGROUND_TRIM, "background"),
    (SPINE, "spine"),
    (LEFT_SAFE_AREA, "page"),
    (RIGHT_SAFE_AREA, "page"),
    (SAFE_AREA, "page"),
    (BARCODE_ZONE, "barcode"),
)

# Legend layout, inches unless noted
_PT = 1 / POINTS_PER_INCH
LINE_HEIGHT = 50 * _PT
INDICATOR_WIDTH = 4 * _PT
INDICATOR_HEIGHT = 25 * _PT
TEXT_OFFSET = 12 * _PT
VALUE_RISE = 13 * _PT
COLUMN_INSET = 20 * _PT
VALUE_SIZE = 13  # pt
DESCRIPTION_SIZE = 10  # pt
NOTE_SIZE = 9  # pt
TITLE_SIZE = 16  # pt

BLEED_TEXT = "Bleed Area - Extend your color or BG till bleed area"
WRAP_TEXT = "Wrap Area - Extend your color or BG till here"
SAFETY_TEXT = "Safety Margin Keep all your important text inside it"
BARCODE_TEXT = "Barcode optional"
TRIM_TEXT = "Trim Size"
PUNCH_HOLE_VALUE = f'{PUNCH_HOLE_OFFSET:g}" punchhole'
GUTTER_LABEL_TEXT = "Gutter / Binding Side"
INTERIOR_MARGIN_TEXT = "Top / Bottom / Outside margin - Keep text inside"
INTERIOR_SIZE_TEXT = "Total Document Size (with bleed)"

REQUIREMENTS_TITLE = "Interior File Requirements"
REQUIREMENTS_INTRO = (
    "For your book, please provide a single PDF that encompasses all interior",
    "elements, including the title, copyright pages, and any desired blank pages.",
)
REQUIREMENTS_BULLETS = (
    "• Margins:",
    "• Minimum 0.5 in Safety Margin",
    "• Minimum 0.5 in Gutter Margin (more to be added if pages exceeds 150 pages; refer gutter section)",
    "• Exclusions: Do NOT include trim, bleed, or margin Marks",
    "• Font Embedding: All fonts must be embedded",
    "• Flatten Transparent Layers: Ensure transparency layers and vector objects are flattened",
    "• Security: Do NOT use any security or password file protection.",
)


@dataclass(frozen=True)
class LegendLine:
    indicator: str  # palette key of the colour bar
    value: str
    description: str
    note: str = ""  # small warning printed above the description


@dataclass(frozen=True)
class LegendColumn:
    """Legend lines stacked downward from (x, y), the bottom of the first indicator bar."""

    x: float
    y: float
    lines: Tuple[LegendLine, ...]

    def line_origin(self, index: int) -> Tuple[float, float]:
        return self.x, self.y - index * LINE_HEIGHT


@dataclass(frozen=True)
class PanelTitle:
    text: str
    center_x: float
    y: float  # baseline when no logo is drawn; renderers drop it by the logo height
    logo_top: float


def inches(value: float) -> str:
    return f"{value:.3f} in"


def size_text(width: float, height: float, precision: int = 3) -> str:
    return f"{width:.{precision}f} x {height:.{precision}f} in"


def trim_text(width: float, height: float) -> str:
    return f"{width:g} x {height:g} in"


def unsupported_message(binding_name: str) -> str:
    return f"Template for {binding_name} coming soon!"


def spine_text(geometry: CoverGeometry) -> str:
    return f"Spine Text Area for {geometry.page_count} pages using {geometry.paper_stock}"


def spine_label(geometry: CoverGeometry) -> Optional[str]:
    """Text printed inside the spine, or None when the spine is too thin for it."""
    if not geometry.spine_text_drawable:
        return None
    return geometry.book_title or "SPINE TEXT"


def barcode_value() -> str:
    return f"{BARCODE_WIDTH:g} x {BARCODE_HEIGHT:g} in"


def _edge_line(geometry: CoverGeometry) -> LegendLine:
    if geometry.uses_wrap:
        return LegendLine("bleed", inches(geometry.values["wrap"]), WRAP_TEXT)
    return LegendLine("bleed", inches(geometry.values["bleed"]), BLEED_TEXT)


def _size_line(geometry: CoverGeometry) -> LegendLine:
    suffix = "with wrap" if geometry.uses_wrap else "with bleed"
    return LegendLine(
        "bleed",
        size_text(geometry.total_width, geometry.total_height),
        f"Total Document Size {suffix}",
    )


def _spine_line(geometry: CoverGeometry) -> LegendLine:
    note = "" if geometry.spine_text_drawable else geometry.spine_warning
    return LegendLine("spine", f"{geometry.values['spine_width']:.3f}", spine_text(geometry), note)


def cover_legend(geometry: CoverGeometry, page: CoverPage) -> List[LegendColumn]:
    """Legend columns for one cover page; empty for placeholder geometry."""
    if not geometry.supported:
        return []

    trim = LegendLine("background", trim_text(geometry.trim_width, geometry.trim_height), TRIM_TEXT)
    safety = LegendLine("background", inches(geometry.values["safety"]), SAFETY_TEXT)
    barcode = LegendLine("barcode", barcode_value(), BARCODE_TEXT)

    if geometry.layout == LayoutKind.COIL_PAGES:
        safe = page.regions[SAFE_AREA]
        x = safe.x + COLUMN_INSET
        y = page.height / 2 + 30 * _PT
        if page.name == "front":
            lines = (_size_line(geometry), trim, LegendLine("punch_hole", PUNCH_HOLE_VALUE, "leave extra margin on left side"))
        else:
            lines = (
                _edge_line(geometry),
                safety,
                barcode,
                LegendLine("punch_hole", PUNCH_HOLE_VALUE, "leave extra margin on Right side"),
            )
        return [LegendColumn(x, y, lines)]

    y = page.height / 2 + 80 * _PT
    left = LegendColumn(page.regions[LEFT_SAFE_AREA].x + COLUMN_INSET, y, (_edge_line(geometry), safety, barcode))
    right = LegendColumn(
        page.regions[RIGHT_SAFE_AREA].x + COLUMN_INSET,
        y,
        (_size_line(geometry), trim, _spine_line(geometry)),
    )
    return [left, right]


def panel_titles(page: CoverPage) -> List[PanelTitle]:
    """'BACK COVER' / 'FRONT COVER' captions centred near the top of each safe area."""
    if page.name == "spread":
        panels = [("BACK COVER", page.regions[LEFT_SAFE_AREA]), ("FRONT COVER", page.regions[RIGHT_SAFE_AREA])]
    elif page.name in ("front", "back"):
        panels = [(f"{page.name.upper()} COVER", page.regions[SAFE_AREA])]
    else:
        return []
    titles = []
    for text, safe in panels:
        titles.append(PanelTitle(text, safe.x + safe.width / 2, safe.top - 70 * _PT, safe.top - 20 * _PT))
    return titles


def interior_legend(interior: InteriorGeometry, page_index: int) -> List[LegendColumn]:
    """Interior legend; the requirements page (index 1) has none."""
    if page_index == 1:
        return []
    m = interior.margins
    safe = interior.safe_rect(page_index)
    lines = (
        LegendLine("bleed", inches(m.bleed), BLEED_TEXT),
        LegendLine("background", inches(m.outside), INTERIOR_MARGIN_TEXT),
        LegendLine("background", inches(m.gutter), f"Gutter (inside) - By page count ({interior.page_count} pp)"),
        LegendLine("bleed", size_text(interior.page_width, interior.page_height), INTERIOR_SIZE_TEXT),
        LegendLine("background", size_text(interior.trim_width, interior.trim_height), TRIM_TEXT),
    )
    y = m.bleed + interior.trim_height / 2 + 80 * _PT
    return [LegendColumn(safe.x + COLUMN_INSET, y, lines)]


def interior_page_text(interior: InteriorGeometry, page_index: int, binding_name: Optional[str]) -> Tuple[str, ...]:
    """Heading followed by body lines for an interior template page."""
    if page_index == 1:
        return (REQUIREMENTS_TITLE,) + REQUIREMENTS_INTRO + REQUIREMENTS_BULLETS
    return (
        "Interior Page Template",
        f"{interior.trim_width:.2f}\" × {interior.trim_height:.2f}\" • {binding_name or 'Book'}",
        "Replace with your content. Top/bottom/outside: 0.5\". Gutter by page count.",
    )


def interior_footer(interior: InteriorGeometry, page_index: int) -> Tuple[str, ...]:
    lines = [f"Page {page_index + 1} of {INTERIOR_TEMPLATE_PAGES}"]
    if interior.page_count > 1:
        lines.append(f"Template for {interior.page_count}-page interior. Add more pages in your layout software.")
    return tuple(lines)


def gutter_label_position(interior: InteriorGeometry, page_index: int) -> Tuple[float, float, float]:
    """(x, y, rotation degrees) of the gutter caption, centred in the gutter strip."""
    strip: Rect = interior.regions(page_index)[GUTTER_LABEL]
    rotation = 90 if interior.is_recto(page_index) else -90
    return strip.x + strip.width / 2, strip.y + strip.height / 2, rotation


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    value = value.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)
