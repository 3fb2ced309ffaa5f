"""
InDesign cover package (IDML)

Builds a skeleton with the named frames and stories a cover template needs,
one spread per cover page, then sizes every frame from the canonical geometry
and fills the stories from the shared legend text.
"""

import logging

from bindery.config.bindings import LayoutKind
from bindery.config.units import Unit
from bindery.geometry.projection import Projection
from bindery.geometry.shapes import (
    BACKGROUND_TRIM,
    BARCODE_ZONE,
    BLEED_AREA,
    LEFT_SAFE_AREA,
    PUNCH_HOLE_ZONE,
    RIGHT_SAFE_AREA,
    SAFE_AREA,
    SPINE,
    CoverGeometry,
    CoverPage,
)
from bindery.idml.package import IdmlPackage
from bindery.renderer.base import ResolutionPolicy
from bindery.renderer.legend import (
    INDICATOR_HEIGHT,
    PALETTE,
    TEXT_OFFSET,
    VALUE_RISE,
    cover_legend,
    hex_to_rgb,
    panel_titles,
    spine_label,
    unsupported_message,
)

logger = logging.getLogger(__name__)

# Frame name, region and swatch for every rectangle the template carries
FRAMES = (
    ("Bleed_Rectangle", BLEED_AREA, "BleedColor"),
    ("Background_Rectangle", BACKGROUND_TRIM, "BackgroundColor"),
    ("Spine_Rectangle", SPINE, "SpineColor"),
    ("LeftSafe_Rectangle", LEFT_SAFE_AREA, "SafeColor"),
    ("RightSafe_Rectangle", RIGHT_SAFE_AREA, "SafeColor"),
    ("Safe_Rectangle", SAFE_AREA, "SafeColor"),
    ("Barcode_Rectangle", BARCODE_ZONE, "BarcodeColor"),
    ("PunchHole_Rectangle", PUNCH_HOLE_ZONE, "PunchHoleColor"),
)

SWATCHES = (
    ("BleedColor", "bleed"),
    ("BackgroundColor", "background"),
    ("SpineColor", "spine"),
    ("SafeColor", "page"),
    ("BarcodeColor", "barcode"),
    ("PunchHoleColor", "punch_hole"),
)

TEXT_FRAME_WIDTH = 4.0  # inches
TITLE_FRAME_HEIGHT = 0.4


class CoverIdmlRenderer:
    file_name = "cover.idml"

    def render(self, geometry: CoverGeometry, policy: ResolutionPolicy) -> bytes:
        first = geometry.pages[0]
        pt = Projection(Unit.POINT, first.height)
        pkg = IdmlPackage.skeleton(pt.length(first.width), pt.length(first.height), pages=len(geometry.pages))
        for name, key in SWATCHES:
            pkg.add_swatch(name, hex_to_rgb(PALETTE[key]))

        if not geometry.supported:
            spread = pkg.add_spread("u_placeholder", pt.length(first.width), pt.length(first.height))
            frame = pkg.add_text_frame(spread, "Text_ComingSoon", "u_coming_soon")
            pkg.set_text_frame(frame, 0, 0, pt.length(first.width), pt.length(first.height))
            pkg.set_story_text("u_coming_soon", unsupported_message(geometry.binding_name))
            return pkg.to_bytes()

        self._page_setup(pkg, geometry)
        for page in geometry.pages:
            self._build_page(pkg, geometry, page)

        logger.debug("Cover IDML for %s with %d spread(s)", geometry.binding_name, len(geometry.pages))
        return pkg.to_bytes()

    def _page_setup(self, pkg: IdmlPackage, geometry: CoverGeometry):
        page = geometry.pages[0]
        pt = Projection(Unit.POINT, page.height)
        doc_prefs = pkg.preferences.find("DocumentPreference")
        doc_prefs.set("PageWidth", f"{pt.length(page.width):g}")
        doc_prefs.set("PageHeight", f"{pt.length(page.height):g}")

        margins = pkg.preferences.find("MarginPreference")
        safety = f"{pt.length(geometry.values['safety']):g}"
        for side in ("Top", "Bottom", "Left", "Right"):
            margins.set(side, safety)
        if geometry.layout != LayoutKind.COIL_PAGES:
            # Two columns split by the spine mark the fold lines in InDesign
            margins.set("ColumnCount", "2")
            margins.set("ColumnGutter", f"{pt.length(geometry.values['spine_width']):g}")

    def _build_page(self, pkg: IdmlPackage, geometry: CoverGeometry, page: CoverPage):
        proj = Projection(Unit.POINT, page.height, y_down=True)
        spread = pkg.add_spread(f"u_{page.name}", proj.length(page.width), proj.length(page.height))
        prefix = f"u_{page.name}"

        for frame_name, region, swatch in FRAMES:
            rect = page.region(region)
            if rect is None:
                continue
            frame = pkg.add_rectangle(spread, frame_name)
            x, y, w, h = proj.rect(rect)
            pkg.set_frame(frame, x, y, w, h, fill=f"Color/{swatch}")

        for i, title in enumerate(panel_titles(page)):
            story = f"{prefix}_title_{i}"
            frame = pkg.add_text_frame(spread, f"Text_Logo_{i}", story)
            left = title.center_x - TEXT_FRAME_WIDTH / 2
            pkg.set_text_frame(frame, proj.x(left), proj.y(title.y + TITLE_FRAME_HEIGHT),
                               proj.length(TEXT_FRAME_WIDTH), proj.length(TITLE_FRAME_HEIGHT))
            pkg.set_story_text(story, title.text)

        for c, column in enumerate(cover_legend(geometry, page)):
            for i, line in enumerate(column.lines):
                x_in, y_in = column.line_origin(i)
                for part, text in (("value", line.value), ("desc", " ".join(filter(None, (line.note, line.description))))):
                    story = f"{prefix}_legend_{c}_{i}_{part}"
                    frame = pkg.add_text_frame(spread, f"Text_Legend_{c}_{i}_{part}", story)
                    # Value sits above the baseline rise, description below it
                    top = y_in + VALUE_RISE + INDICATOR_HEIGHT if part == "value" else y_in + VALUE_RISE
                    pkg.set_text_frame(frame, proj.x(x_in + TEXT_OFFSET), proj.y(top),
                                       proj.length(TEXT_FRAME_WIDTH), proj.length(INDICATOR_HEIGHT))
                    pkg.set_story_text(story, text)

        label = spine_label(geometry)
        spine = page.region(SPINE)
        if label and spine is not None:
            story = f"{prefix}_spine"
            frame = pkg.add_text_frame(spread, "Text_Spine", story)
            x, y, w, h = proj.rect(spine)
            pkg.set_text_frame(frame, x, y, w, h)
            pkg.set_story_text(story, label)
