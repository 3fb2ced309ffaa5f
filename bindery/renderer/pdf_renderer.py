import io
import logging
from typing import Optional, Sequence, Tuple

from pypdf import PdfReader, PdfWriter
from pypdf.generic import RectangleObject
from reportlab.pdfgen import canvas

from bindery.assets import AssetBundle
from bindery.config.units import Unit, inches_to_points
from bindery.geometry.interior import InteriorGeometry
from bindery.geometry.projection import Projection
from bindery.geometry.shapes import BACKGROUND_TRIM, BLEED_AREA, SAFE_AREA, Rect
from bindery.renderer.base import ResolutionPolicy
from bindery.renderer.legend import (
    GUTTER_LABEL_TEXT,
    gutter_label_position,
    interior_footer,
    interior_legend,
    interior_page_text,
)
from bindery.renderer.templates import draw_legend_column, draw_logo, draw_rotated_text, fill_rect

logger = logging.getLogger(__name__)

GUTTER_LABEL_SIZE = 8
BODY_SIZE = 10
HEADING_SIZE = 14
REQUIREMENTS_HEADING_SIZE = 12
BODY_LINE_HEIGHT = 14


def apply_page_boxes(pdf_bytes: bytes, boxes: Sequence[Tuple[Rect, Rect]]) -> bytes:
    """Write TrimBox and BleedBox (inches, bottom-left origin) onto each page.

    ``boxes`` holds one (trim, bleed) pair per page; values are clamped to the
    MediaBox.
    """
    reader = PdfReader(io.BytesIO(pdf_bytes))
    writer = PdfWriter()
    if reader.metadata:
        writer.add_metadata(reader.metadata)

    def clamp(val, lo, hi):
        return max(lo, min(hi, val))

    for page, (trim, bleed) in zip(reader.pages, boxes):
        media = page.mediabox
        for name, r in (("trimbox", trim), ("bleedbox", bleed)):
            box = RectangleObject([
                clamp(inches_to_points(r.x), media.left, media.right),
                clamp(inches_to_points(r.y), media.bottom, media.top),
                clamp(inches_to_points(r.right), media.left, media.right),
                clamp(inches_to_points(r.top), media.bottom, media.top),
            ])
            setattr(page, name, box)
        writer.add_page(page)

    out = io.BytesIO()
    writer.write(out)
    return out.getvalue()


class InteriorPdfRenderer:
    """Three-page interior template: title, file requirements, title."""

    file_name = "interior.pdf"

    def __init__(self, assets: Optional[AssetBundle] = None, binding_name: Optional[str] = None):
        self.assets = assets or AssetBundle()
        self.binding_name = binding_name

    def render(self, geometry: InteriorGeometry, policy: ResolutionPolicy) -> bytes:
        proj = Projection(Unit.POINT, geometry.page_height, policy.dpi)
        page_w = proj.length(geometry.page_width)
        page_h = proj.length(geometry.page_height)

        buf = io.BytesIO()
        c = canvas.Canvas(buf, pagesize=(page_w, page_h))
        c.setTitle("Interior Template")
        for page_index in range(geometry.template_pages):
            self._draw_page(c, proj, geometry, page_index)
            c.showPage()
        c.save()

        page_rect = Rect(0.0, 0.0, geometry.page_width, geometry.page_height)
        boxes = [(geometry.trim_rect, page_rect)] * geometry.template_pages
        logger.debug("Interior PDF: %d pages at %.2f x %.2f pt", geometry.template_pages, page_w, page_h)
        return apply_page_boxes(buf.getvalue(), boxes)

    def _draw_page(self, c, proj: Projection, geometry: InteriorGeometry, page_index: int):
        assets = self.assets
        regions = geometry.regions(page_index)
        safe = regions[SAFE_AREA]

        fill_rect(c, proj, regions[BLEED_AREA], "bleed")
        fill_rect(c, proj, regions[BACKGROUND_TRIM], "background")
        fill_rect(c, proj, safe, "page")

        gx, gy, angle = gutter_label_position(geometry, page_index)
        draw_rotated_text(c, proj.x(gx), proj.y(gy), GUTTER_LABEL_TEXT, angle, assets.pdf_font(), GUTTER_LABEL_SIZE,
                          color="text_on_blue")

        for column in interior_legend(geometry, page_index):
            draw_legend_column(c, proj, column, assets)

        safe_x, safe_y, safe_w, safe_h = proj.rect(safe)
        logo_h = draw_logo(c, assets, safe_x + safe_w / 2, safe_y + safe_h - 20)
        y = safe_y + safe_h - logo_h - 40 if logo_h else safe_y + safe_h - 24

        lines = interior_page_text(geometry, page_index, self.binding_name)
        heading, body = lines[0], lines[1:]
        c.setFillColorRGB(0.1, 0.1, 0.1)
        c.setFont(assets.pdf_font(bold=True), REQUIREMENTS_HEADING_SIZE if page_index == 1 else HEADING_SIZE)
        c.drawString(safe_x + 4, y, heading)
        y -= 2 * BODY_LINE_HEIGHT
        c.setFont(assets.pdf_font(), BODY_SIZE)
        for line in body:
            c.drawString(safe_x + 4, y, line)
            y -= BODY_LINE_HEIGHT

        c.setFillColorRGB(1, 1, 1)
        footer_y = safe_y - 14
        for i, line in enumerate(interior_footer(geometry, page_index)):
            c.setFont(assets.pdf_font(), 9 if i == 0 else 8)
            c.drawString(safe_x + 4, footer_y, line)
            footer_y -= 14
