import io
import logging
from typing import Optional

from reportlab.pdfgen import canvas

from bindery.assets import AssetBundle
from bindery.config.units import Unit, inches_to_points
from bindery.geometry.projection import Projection
from bindery.geometry.shapes import BACKGROUND_TRIM, BARCODE_ZONE, SPINE, CoverGeometry, CoverPage, Rect
from bindery.renderer.base import ResolutionPolicy
from bindery.renderer.legend import (
    BARCODE_OPACITY,
    REGION_STYLES,
    cover_legend,
    panel_titles,
    spine_label,
    unsupported_message,
)
from bindery.renderer.pdf_renderer import apply_page_boxes
from bindery.renderer.templates import (
    draw_legend_column,
    draw_logo,
    draw_panel_title,
    draw_punch_holes,
    draw_rotated_text,
    fill_rect,
)

logger = logging.getLogger(__name__)

SPINE_LABEL_SIZE = 10


class CoverPdfRenderer:
    """Print-ready cover template with colour-coded regions and a legend."""

    file_name = "cover.pdf"

    def __init__(self, assets: Optional[AssetBundle] = None):
        self.assets = assets or AssetBundle()

    def render(self, geometry: CoverGeometry, policy: ResolutionPolicy) -> bytes:
        buf = io.BytesIO()
        first = geometry.pages[0]
        c = canvas.Canvas(buf, pagesize=(inches_to_points(first.width), inches_to_points(first.height)))
        c.setTitle(f"{geometry.binding_name} Cover Template")

        if not geometry.supported:
            self._draw_placeholder(c, geometry)
            c.showPage()
            c.save()
            return buf.getvalue()

        boxes = []
        for page in geometry.pages:
            proj = Projection(Unit.POINT, page.height, policy.dpi)
            c.setPageSize((proj.length(page.width), proj.length(page.height)))
            self._draw_page(c, proj, geometry, page)
            c.showPage()
            boxes.append((_trim_box(page), Rect(0.0, 0.0, page.width, page.height)))
        c.save()

        logger.debug("Cover PDF for %s: %d page(s)", geometry.binding_name, len(geometry.pages))
        return apply_page_boxes(buf.getvalue(), boxes)

    def _draw_placeholder(self, c, geometry: CoverGeometry):
        page = geometry.pages[0]
        proj = Projection(Unit.POINT, page.height)
        c.setFont(self.assets.pdf_font(), 14)
        c.drawCentredString(proj.length(page.width) / 2, proj.length(page.height) / 2,
                            unsupported_message(geometry.binding_name))

    def _draw_page(self, c, proj: Projection, geometry: CoverGeometry, page: CoverPage):
        assets = self.assets
        for region, color in REGION_STYLES:
            rect = page.region(region)
            if rect is None:
                continue
            alpha = BARCODE_OPACITY if region == BARCODE_ZONE else 1.0
            fill_rect(c, proj, rect, color, alpha)

        draw_punch_holes(c, proj, page.punch_holes)

        for title in panel_titles(page):
            logo_h = draw_logo(c, assets, proj.x(title.center_x), proj.y(title.logo_top))
            draw_panel_title(c, proj, title, assets, drop=logo_h)

        for column in cover_legend(geometry, page):
            draw_legend_column(c, proj, column, assets)

        label = spine_label(geometry)
        spine = page.region(SPINE)
        if label and spine is not None:
            draw_rotated_text(
                c,
                proj.x(spine.x + spine.width / 2),
                proj.y(spine.y + spine.height / 2),
                label[:60],
                90,
                assets.pdf_font(bold=True),
                SPINE_LABEL_SIZE,
            )


def _trim_box(page: CoverPage) -> Rect:
    return page.region(BACKGROUND_TRIM) or Rect(0.0, 0.0, page.width, page.height)
