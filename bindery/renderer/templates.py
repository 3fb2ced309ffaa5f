from typing import Iterable, Optional

from reportlab.lib.colors import HexColor
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen.canvas import Canvas

from bindery.assets import AssetBundle
from bindery.geometry.projection import Projection
from bindery.geometry.shapes import PunchHole, Rect
from bindery.renderer.legend import (
    DESCRIPTION_SIZE,
    INDICATOR_HEIGHT,
    INDICATOR_WIDTH,
    NOTE_SIZE,
    PALETTE,
    PUNCH_HOLE_OPACITY,
    TEXT_OFFSET,
    TITLE_SIZE,
    VALUE_RISE,
    VALUE_SIZE,
    LegendColumn,
    PanelTitle,
)

LOGO_HEIGHT_PT = 36.0


def fill_rect(c: Canvas, proj: Projection, rect: Rect, color: str, alpha: float = 1.0):
    x, y, w, h = proj.rect(rect)
    c.saveState()
    c.setFillColor(HexColor(PALETTE.get(color, color)))
    c.setFillAlpha(alpha)
    c.rect(x, y, w, h, fill=1, stroke=0)
    c.restoreState()


def draw_punch_holes(c: Canvas, proj: Projection, holes: Iterable[PunchHole]):
    c.saveState()
    c.setFillColor(HexColor(PALETTE["punch_hole"]))
    c.setFillAlpha(PUNCH_HOLE_OPACITY)
    for hole in holes:
        x, y = proj.point(hole.cx, hole.cy)
        c.circle(x, y, proj.length(hole.radius), stroke=0, fill=1)
    c.restoreState()


def draw_legend_column(c: Canvas, proj: Projection, column: LegendColumn, assets: AssetBundle):
    for i, line in enumerate(column.lines):
        x_in, y_in = column.line_origin(i)
        x, y = proj.point(x_in, y_in)
        text_x = x + proj.length(TEXT_OFFSET)

        c.setFillColor(HexColor(PALETTE[line.indicator]))
        c.rect(x, y, proj.length(INDICATOR_WIDTH), proj.length(INDICATOR_HEIGHT), fill=1, stroke=0)

        c.setFillColor(HexColor(PALETTE["text_primary"]))
        c.setFont(assets.pdf_font(bold=True), VALUE_SIZE)
        c.drawString(text_x, y + proj.length(VALUE_RISE), line.value)

        c.setFillColor(HexColor(PALETTE["text_secondary"]))
        if line.note:
            c.setFont(assets.pdf_font(), NOTE_SIZE)
            c.drawString(text_x, y, line.note)
            y -= DESCRIPTION_SIZE
        c.setFont(assets.pdf_font(), DESCRIPTION_SIZE)
        c.drawString(text_x, y, line.description)


def draw_panel_title(c: Canvas, proj: Projection, title: PanelTitle, assets: AssetBundle, drop: float = 0.0):
    c.setFillColor(HexColor(PALETTE["text_primary"]))
    c.setFont(assets.pdf_font(), TITLE_SIZE)
    x, y = proj.point(title.center_x, title.y)
    c.drawCentredString(x, y - drop, title.text)


def draw_logo(c: Canvas, assets: AssetBundle, center_x: float, top: float) -> float:
    """Draw the logo centred under ``top`` (points); returns the height used."""
    if assets.logo_bytes is None:
        return 0.0
    image = assets.logo_image()
    w, h = image.size
    draw_h = LOGO_HEIGHT_PT
    draw_w = w * draw_h / h
    c.drawImage(ImageReader(image), center_x - draw_w / 2, top - draw_h, draw_w, draw_h, mask="auto")
    return draw_h


def draw_rotated_text(c: Canvas, x: float, y: float, text: str, angle: float, font: str, size: float,
                      color: Optional[str] = None):
    c.saveState()
    c.setFillColor(HexColor(PALETTE[color or "text_primary"]))
    c.setFont(font, size)
    c.translate(x, y)
    c.rotate(angle)
    c.drawCentredString(0, -size / 3.0, text)
    c.restoreState()
