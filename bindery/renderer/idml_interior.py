import logging
from typing import Optional

from bindery.config.units import Unit
from bindery.geometry.interior import InteriorGeometry
from bindery.geometry.projection import Projection
from bindery.idml.package import IdmlPackage
from bindery.renderer.base import ResolutionPolicy
from bindery.renderer.legend import PALETTE, hex_to_rgb, interior_page_text

logger = logging.getLogger(__name__)


class InteriorIdmlRenderer:
    """Interior IDML: trim-sized pages with bleed and parity-aware margins."""

    file_name = "interior.idml"

    def __init__(self, binding_name: Optional[str] = None):
        self.binding_name = binding_name

    def render(self, geometry: InteriorGeometry, policy: ResolutionPolicy) -> bytes:
        m = geometry.margins
        pt = Projection(Unit.POINT, geometry.trim_height, y_down=True)
        width, height = pt.length(geometry.trim_width), pt.length(geometry.trim_height)

        pkg = IdmlPackage.skeleton(width, height, pages=geometry.template_pages, facing=True)
        pkg.add_swatch("SafeColor", hex_to_rgb(PALETTE["page"]))

        doc_prefs = pkg.preferences.find("DocumentPreference")
        bleed = f"{pt.length(m.bleed):g}"
        for side in ("Top", "Bottom", "InsideOrLeft", "OutsideOrRight"):
            doc_prefs.set(f"DocumentBleed{side}Offset", bleed)

        margins = pkg.preferences.find("MarginPreference")
        margins.set("Top", f"{pt.length(m.top):g}")
        margins.set("Bottom", f"{pt.length(m.bottom):g}")
        # Left/Right act as inside/outside on facing pages
        margins.set("Left", f"{pt.length(m.gutter):g}")
        margins.set("Right", f"{pt.length(m.outside):g}")

        for page_index in range(geometry.template_pages):
            spread = pkg.add_spread(f"u_page{page_index + 1}", width, height)
            page = spread.find("Page")
            left, right = (m.gutter, m.outside) if geometry.is_recto(page_index) else (m.outside, m.gutter)
            page.set("Name", str(page_index + 1))
            page_margins = page.makeelement("MarginPreference", {
                "Top": f"{pt.length(m.top):g}",
                "Bottom": f"{pt.length(m.bottom):g}",
                "Left": f"{pt.length(left):g}",
                "Right": f"{pt.length(right):g}",
                "ColumnCount": "1",
            })
            page.append(page_margins)

            # Safe rect is in bleed-page space; IDML pages are trim sized
            safe = geometry.safe_rect(page_index)
            story = f"u_page{page_index + 1}_text"
            frame = pkg.add_text_frame(spread, "Text_Body", story)
            x, y, w, h = pt.rect(safe)
            pkg.set_text_frame(frame, x - pt.length(m.bleed), y + pt.length(m.bleed), w, h)
            pkg.set_story_text(story, "\n".join(interior_page_text(geometry, page_index, self.binding_name)))

        logger.debug("Interior IDML: %d pages, gutter %.3f in", geometry.template_pages, m.gutter)
        return pkg.to_bytes()
