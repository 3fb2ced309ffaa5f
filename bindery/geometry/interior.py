"""
Interior page geometry

Page size, margins and the per-page safe rectangle for the interior template.
Recto pages (even indices, counting from 0) carry the gutter on the left;
verso pages carry it on the right.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from bindery.config.bindings import gutter_margin
from bindery.errors import InvalidRequestError
from bindery.geometry.shapes import BACKGROUND_TRIM, BLEED_AREA, GUTTER_LABEL, SAFE_AREA, Rect
from bindery.models import TemplateRequest

logger = logging.getLogger(__name__)

INTERIOR_BLEED = 0.125
INTERIOR_MARGIN = 0.5
INTERIOR_TEMPLATE_PAGES = 3


@dataclass(frozen=True)
class InteriorMargins:
    bleed: float
    top: float
    bottom: float
    outside: float
    gutter: float


@dataclass(frozen=True)
class InteriorGeometry:
    trim_width: float
    trim_height: float
    margins: InteriorMargins
    page_count: int
    template_pages: int = INTERIOR_TEMPLATE_PAGES

    @property
    def page_width(self) -> float:
        return self.trim_width + 2 * self.margins.bleed

    @property
    def page_height(self) -> float:
        return self.trim_height + 2 * self.margins.bleed

    @property
    def trim_rect(self) -> Rect:
        b = self.margins.bleed
        return Rect(b, b, self.trim_width, self.trim_height)

    @staticmethod
    def is_recto(page_index: int) -> bool:
        return page_index % 2 == 0

    def safe_rect(self, page_index: int) -> Rect:
        m = self.margins
        left = m.gutter if self.is_recto(page_index) else m.outside
        return Rect(
            m.bleed + left,
            m.bleed + m.bottom,
            self.trim_width - m.gutter - m.outside,
            self.trim_height - m.top - m.bottom,
        )

    def gutter_rect(self, page_index: int) -> Rect:
        """Binding-side strip of the trim, the width of the gutter margin."""
        m = self.margins
        if self.is_recto(page_index):
            x = m.bleed
        else:
            x = m.bleed + self.trim_width - m.gutter
        return Rect(x, m.bleed, m.gutter, self.trim_height)

    def regions(self, page_index: int) -> Mapping[str, Rect]:
        """Named rectangles of one template page; the gutter label strip follows the binding side."""
        return MappingProxyType({
            BLEED_AREA: Rect(0.0, 0.0, self.page_width, self.page_height),
            BACKGROUND_TRIM: self.trim_rect,
            SAFE_AREA: self.safe_rect(page_index),
            GUTTER_LABEL: self.gutter_rect(page_index),
        })

    def as_dict(self) -> dict:
        m = self.margins
        return {
            "trimWidth": self.trim_width,
            "trimHeight": self.trim_height,
            "pageWidth": self.page_width,
            "pageHeight": self.page_height,
            "pageCount": self.page_count,
            "margins": {
                "bleed": m.bleed,
                "top": m.top,
                "bottom": m.bottom,
                "outside": m.outside,
                "gutter": m.gutter,
            },
        }


def derive_interior_geometry(request: TemplateRequest) -> InteriorGeometry:
    margins = InteriorMargins(
        bleed=INTERIOR_BLEED,
        top=INTERIOR_MARGIN,
        bottom=INTERIOR_MARGIN,
        outside=INTERIOR_MARGIN,
        gutter=gutter_margin(request.page_count),
    )
    if margins.gutter + margins.outside >= request.trim_width or margins.top + margins.bottom >= request.trim_height:
        raise InvalidRequestError(
            f"Interior margins leave no text area on a {request.trim_width} x {request.trim_height} in page"
        )
    logger.debug("Interior gutter for %d pages: %.3f in", request.page_count, margins.gutter)
    return InteriorGeometry(
        trim_width=request.trim_width,
        trim_height=request.trim_height,
        margins=margins,
        page_count=request.page_count,
    )
