"""
Layered raster cover (PSD)

Each region family is painted onto its own transparent Pillow layer at the
policy DPI and handed to psd-tools as a pixel layer. Spread covers keep the
colour layers at the top level with the artwork under "Your Artwork Here";
coil covers get a "Back Cover" and a "Front Cover" group. psd-tools computes
the flattened composite when the document is saved.
"""

import io
import logging
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw
from psd_tools import PSDImage
from psd_tools.constants import Resource
from psd_tools.psd.image_resources import GridGuidesInfo, ImageResource, ResoulutionInfo

from bindery.assets import AssetBundle
from bindery.config.bindings import LayoutKind
from bindery.config.units import POINTS_PER_INCH, Unit, inches_to_pixels
from bindery.geometry.projection import Projection
from bindery.geometry.shapes import (
    BACKGROUND_TRIM,
    BARCODE_ZONE,
    BLEED_AREA,
    LEFT_SAFE_AREA,
    RIGHT_SAFE_AREA,
    SAFE_AREA,
    SPINE,
    CoverGeometry,
    CoverPage,
    Rect,
)
from bindery.renderer.base import ResolutionPolicy
from bindery.renderer.legend import (
    BARCODE_OPACITY,
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
    cover_legend,
    hex_to_rgb,
    panel_titles,
    spine_label,
    unsupported_message,
)

logger = logging.getLogger(__name__)

ARTWORK_GROUP = "Your Artwork Here"
# Spread layers kept outside the artwork group
COLOR_LAYERS = frozenset({"Bleed Area", "Wrap Area", "Background Color", "Spine Color"})

# Guide positions are stored in 1/32 px; direction 0 is vertical, 1 horizontal
GUIDE_SCALE = 32

Layer = Tuple[str, Image.Image]


def _rgba(color: str, alpha: float = 1.0) -> Tuple[int, int, int, int]:
    r, g, b = hex_to_rgb(PALETTE.get(color, color))
    return r, g, b, int(round(255 * alpha))


class CoverPsdRenderer:
    file_name = "cover.psd"

    def __init__(self, assets: Optional[AssetBundle] = None):
        self.assets = assets or AssetBundle()

    def render(self, geometry: CoverGeometry, policy: ResolutionPolicy) -> bytes:
        dpi = policy.dpi
        # Coil pages share one canvas; the front group sits above the back group
        canvas_page = geometry.pages[0]
        size = (inches_to_pixels(canvas_page.width, dpi), inches_to_pixels(canvas_page.height, dpi))

        psd = PSDImage.new("RGBA", size, color=(255, 255, 255, 255))
        if not geometry.supported:
            _add_layer(psd, "Coming Soon", self._placeholder_layer(geometry, size, dpi))
        elif geometry.layout == LayoutKind.COIL_PAGES:
            for page in sorted(geometry.pages, key=lambda p: p.name != "back"):
                group = psd.create_group(name=f"{page.name.capitalize()} Cover")
                prefix = f"{page.name.upper()} - "
                for name, im in self._page_layers(geometry, page, size, dpi):
                    _add_layer(group, prefix + name, im)
        else:
            layers = self._page_layers(geometry, canvas_page, size, dpi)
            for name, im in layers:
                if name in COLOR_LAYERS:
                    _add_layer(psd, name, im)
            artwork = psd.create_group(name=ARTWORK_GROUP)
            for name, im in layers:
                if name not in COLOR_LAYERS:
                    _add_layer(artwork, name, im)

        _set_resolution(psd, dpi)
        if geometry.supported:
            _set_guides(psd, _guides(canvas_page, dpi))

        buf = io.BytesIO()
        psd.save(buf)
        logger.debug("Cover PSD %dx%d px at %d dpi with %d layers", size[0], size[1], dpi,
                     sum(1 for _ in psd.descendants()))
        return buf.getvalue()

    def _placeholder_layer(self, geometry: CoverGeometry, size, dpi: int) -> Image.Image:
        im = Image.new("RGBA", size, _rgba("background"))
        draw = ImageDraw.Draw(im)
        font = self.assets.pil_font(_pt_to_px(TITLE_SIZE * 2, dpi), bold=True)
        draw.text((size[0] / 2, size[1] / 2), unsupported_message(geometry.binding_name),
                  fill=_rgba("page"), font=font, anchor="mm")
        return im

    def _page_layers(self, geometry: CoverGeometry, page: CoverPage, size, dpi: int) -> List[Layer]:
        """Canvas-sized layers bottom to top: edge, background, spine, then artwork."""
        proj = Projection(Unit.PIXEL, page.height, dpi, y_down=True)
        edge_name = "Wrap Area" if geometry.uses_wrap else "Bleed Area"
        layers: List[Layer] = [
            (edge_name, self._fill_layer(proj, size, [page.region(BLEED_AREA)], "bleed")),
            ("Background Color", self._fill_layer(proj, size, [page.region(BACKGROUND_TRIM)], "background")),
        ]
        spine = page.region(SPINE)
        if spine is not None and spine.width > 0:
            layers.append(("Spine Color", self._fill_layer(proj, size, [spine], "spine")))
        safe_areas = [page.region(n) for n in (LEFT_SAFE_AREA, RIGHT_SAFE_AREA, SAFE_AREA)]
        layers.append(("White Page Area", self._fill_layer(proj, size, safe_areas, "page")))
        if page.region(BARCODE_ZONE) is not None:
            layers.append(("Barcode", self._fill_layer(proj, size, [page.region(BARCODE_ZONE)], "barcode",
                                                       BARCODE_OPACITY)))
        if page.punch_holes:
            layers.append(("Punch Holes", self._punch_hole_layer(proj, size, page)))
        layers.append(("Information", self._legend_layer(proj, size, geometry, page, dpi)))
        layers.append(("Logo & Text", self._label_layer(proj, size, geometry, page, dpi)))
        return layers

    def _fill_layer(self, proj: Projection, size, rects: List[Optional[Rect]], color: str,
                    alpha: float = 1.0) -> Image.Image:
        im = Image.new("RGBA", size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(im)
        for rect in rects:
            box = _box(proj, rect) if rect is not None else None
            if box is None:
                continue
            draw.rectangle(box, fill=_rgba(color, alpha))
        return im

    def _punch_hole_layer(self, proj: Projection, size, page: CoverPage) -> Image.Image:
        im = Image.new("RGBA", size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(im)
        for hole in page.punch_holes:
            cx, cy = proj.point(hole.cx, hole.cy)
            r = proj.length(hole.radius)
            draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=_rgba("punch_hole", PUNCH_HOLE_OPACITY))
        return im

    def _legend_layer(self, proj: Projection, size, geometry: CoverGeometry, page: CoverPage, dpi: int) -> Image.Image:
        im = Image.new("RGBA", size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(im)
        value_font = self.assets.pil_font(_pt_to_px(VALUE_SIZE, dpi), bold=True)
        desc_font = self.assets.pil_font(_pt_to_px(DESCRIPTION_SIZE, dpi))
        note_font = self.assets.pil_font(_pt_to_px(NOTE_SIZE, dpi))
        for column in cover_legend(geometry, page):
            for i, line in enumerate(column.lines):
                x_in, y_in = column.line_origin(i)
                bar = _box(proj, Rect(x_in, y_in, INDICATOR_WIDTH, INDICATOR_HEIGHT))
                if bar is not None:
                    draw.rectangle(bar, fill=_rgba(line.indicator))
                text_x = proj.x(x_in + TEXT_OFFSET)
                draw.text((text_x, proj.y(y_in + VALUE_RISE)), line.value, fill=_rgba("text_primary"),
                          font=value_font, anchor="ls")
                baseline = proj.y(y_in)
                if line.note:
                    draw.text((text_x, baseline), line.note, fill=_rgba("text_secondary"), font=note_font, anchor="ls")
                    baseline += _pt_to_px(DESCRIPTION_SIZE, dpi)
                draw.text((text_x, baseline), line.description, fill=_rgba("text_secondary"), font=desc_font,
                          anchor="ls")
        return im

    def _label_layer(self, proj: Projection, size, geometry: CoverGeometry, page: CoverPage, dpi: int) -> Image.Image:
        im = Image.new("RGBA", size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(im)
        logo = self.assets.logo_image()
        title_font = self.assets.pil_font(_pt_to_px(TITLE_SIZE, dpi))
        for title in panel_titles(page):
            drop = 0
            if logo is not None:
                logo_h = _pt_to_px(36, dpi)
                scaled = logo.resize((max(1, logo.width * logo_h // logo.height), logo_h))
                left = int(round(proj.x(title.center_x) - scaled.width / 2))
                im.alpha_composite(scaled, (left, int(round(proj.y(title.logo_top)))))
                drop = logo_h
            draw.text((proj.x(title.center_x), proj.y(title.y) + drop), title.text, fill=_rgba("text_primary"),
                      font=title_font, anchor="ms")

        label = spine_label(geometry)
        spine = page.region(SPINE)
        if label and spine is not None:
            font = self.assets.pil_font(_pt_to_px(10, dpi), bold=True)
            text_w = int(draw.textlength(label, font=font)) + 2
            text_h = _pt_to_px(14, dpi)
            strip = Image.new("RGBA", (text_w, text_h), (0, 0, 0, 0))
            ImageDraw.Draw(strip).text((text_w / 2, text_h / 2), label, fill=_rgba("text_primary"), font=font,
                                       anchor="mm")
            strip = strip.rotate(90, expand=True)
            cx, cy = proj.point(spine.x + spine.width / 2, spine.y + spine.height / 2)
            im.alpha_composite(strip, (int(round(cx - strip.width / 2)), int(round(cy - strip.height / 2))))
        return im


def _add_layer(parent, name: str, im: Image.Image) -> None:
    """Add ``im`` to a document or group as a pixel layer cropped to its painted pixels."""
    bbox = im.getbbox()
    if bbox is None:
        return
    parent.create_pixel_layer(im.crop(bbox), name=name, left=bbox[0], top=bbox[1])


def _set_resolution(psd: PSDImage, dpi: int) -> None:
    # 16.16 fixed point, pixels per inch, inch display units
    info = ResoulutionInfo(horizontal=dpi << 16, horizontal_unit=1, width_unit=1,
                           vertical=dpi << 16, vertical_unit=1, height_unit=1)
    psd.image_resources[Resource.RESOLUTION_INFO] = ImageResource(key=Resource.RESOLUTION_INFO, data=info)


def _set_guides(psd: PSDImage, guides: List[Tuple[float, bool]]) -> None:
    entries = [(int(round(pos * GUIDE_SCALE)), 1 if horizontal else 0) for pos, horizontal in guides]
    info = GridGuidesInfo(version=1, horizontal=18 * GUIDE_SCALE, vertical=18 * GUIDE_SCALE, data=entries)
    psd.image_resources[Resource.GRID_AND_GUIDES_INFO] = ImageResource(key=Resource.GRID_AND_GUIDES_INFO, data=info)


def _pt_to_px(points: float, dpi: int) -> int:
    return max(1, int(round(points * dpi / POINTS_PER_INCH)))


def _box(proj: Projection, rect: Rect) -> Optional[List[int]]:
    left, top, right, bottom = (int(round(v)) for v in proj.bounds(rect))
    if right <= left or bottom <= top:
        return None
    # Pillow boxes are inclusive of the far edge
    return [left, top, right - 1, bottom - 1]


def _guides(page: CoverPage, dpi: int) -> List[Tuple[float, bool]]:
    """Ruler guides on the trim edges and spine folds as ``(pixel position, horizontal)``."""
    proj = Projection(Unit.PIXEL, page.height, dpi, y_down=True)
    guides: List[Tuple[float, bool]] = []
    trim = page.region(BACKGROUND_TRIM)
    if trim is not None:
        guides += [(proj.x(trim.x), False), (proj.x(trim.right), False)]
        guides += [(proj.y(trim.top), True), (proj.y(trim.y), True)]
    spine = page.region(SPINE)
    if spine is not None:
        guides += [(proj.x(spine.x), False), (proj.x(spine.right), False)]
    return guides
