"""
Cover geometry derivation

Turns a TemplateRequest into the canonical set of named cover regions. This
is the only place cover arithmetic happens; the PDF, PSD and IDML writers
project these rectangles into their own units and never recompute them.
"""

import logging
import math
from typing import Dict, List, Optional

from bindery.config.bindings import (
    BARCODE_HEIGHT,
    BARCODE_WIDTH,
    PUNCH_HOLE_OFFSET,
    PUNCH_HOLE_RADIUS,
    PUNCH_HOLE_SPACING,
    LayoutKind,
    ResolvedParameters,
    resolve_binding,
    resolve_parameters,
)
from bindery.geometry.shapes import (
    BACK_TRIM,
    BACKGROUND_TRIM,
    BARCODE_ZONE,
    BLEED_AREA,
    FRONT_TRIM,
    LEFT_SAFE_AREA,
    PUNCH_HOLE_ZONE,
    RIGHT_SAFE_AREA,
    SAFE_AREA,
    SPINE,
    CoverGeometry,
    CoverPage,
    PunchHole,
    Rect,
)
from bindery.models import TemplateRequest

logger = logging.getLogger(__name__)


def derive_cover_geometry(request: TemplateRequest) -> CoverGeometry:
    """Compute the cover layout for a request.

    Unknown binding names yield a placeholder geometry (``supported`` is
    False) instead of an error; invalid dimensions raise InvalidRequestError.
    """
    method = resolve_binding(request.binding_name, request.is_hardcover_coil_wire)
    if method is None:
        logger.warning("Binding '%s' is not supported yet; using placeholder geometry", request.binding_name)
        return unsupported_geometry(request)

    params = resolve_parameters(request, method)
    layout = params.policy.layout
    if layout == LayoutKind.SPREAD:
        pages, values = _derive_spread(params)
    elif layout == LayoutKind.WRAP_SPREAD:
        pages, values = _derive_wrap_spread(params)
    else:
        pages, values = _derive_coil(params)

    return CoverGeometry(
        binding_name=request.binding_name,
        binding=method,
        layout=layout,
        pages=tuple(pages),
        values=values,
        spine_text_drawable=params.policy.spine_text_drawable(params.spine_width),
        trim_width=params.trim_width,
        trim_height=params.trim_height,
        page_count=request.page_count,
        paper_stock=request.paper_stock,
        book_title=request.book_title,
        spine_warning=params.policy.spine_warning,
        uses_wrap=params.policy.uses_wrap,
    )


def unsupported_geometry(request: TemplateRequest) -> CoverGeometry:
    """Single blank trim-sized page for bindings without a layout."""
    page = CoverPage(name="placeholder", width=request.trim_width, height=request.trim_height, regions={})
    return CoverGeometry(
        binding_name=request.binding_name,
        binding=None,
        layout=None,
        pages=(page,),
        values={"total_width": request.trim_width, "total_height": request.trim_height},
        spine_text_drawable=False,
        trim_width=request.trim_width,
        trim_height=request.trim_height,
        page_count=request.page_count,
        paper_stock=request.paper_stock,
        book_title=request.book_title,
    )


def _barcode_zone(safe: Rect, inset: float) -> Optional[Rect]:
    # Bottom-right corner of the safe area; dropped when it does not fit
    zone = Rect(safe.right - inset - BARCODE_WIDTH, safe.y + inset, BARCODE_WIDTH, BARCODE_HEIGHT)
    if not safe.contains(zone):
        logger.info("Safe area %.3f x %.3f in is too small for a barcode zone", safe.width, safe.height)
        return None
    return zone


def _derive_spread(p: ResolvedParameters):
    """Perfect bind and saddle stitch: back | spine | front with bleed all round."""
    bleed, spine, safety = p.edge, p.spine_width, p.safety
    trim_w, trim_h = p.trim_width, p.trim_height

    total_w = 2 * bleed + 2 * trim_w + spine
    total_h = trim_h + 2 * bleed
    left_fold = bleed + trim_w
    right_fold = left_fold + spine

    back_trim = Rect(bleed, bleed, trim_w, trim_h)
    front_trim = Rect(right_fold, bleed, trim_w, trim_h)
    left_safe = back_trim.inset(safety, safety, safety, safety)
    right_safe = front_trim.inset(safety, safety, safety, safety)

    regions: Dict[str, Rect] = {
        BLEED_AREA: Rect(0.0, 0.0, total_w, total_h),
        # Front/back colour stops at the bleed inset; the spine runs full height
        BACKGROUND_TRIM: Rect(bleed, bleed, total_w - 2 * bleed, trim_h),
        SPINE: Rect(left_fold, 0.0, spine, total_h),
        BACK_TRIM: back_trim,
        FRONT_TRIM: front_trim,
        LEFT_SAFE_AREA: left_safe,
        RIGHT_SAFE_AREA: right_safe,
    }
    barcode = _barcode_zone(left_safe, p.policy.barcode_inset)
    if barcode is not None:
        regions[BARCODE_ZONE] = barcode

    values = {
        "total_width": total_w,
        "total_height": total_h,
        "bleed": bleed,
        "spine_width": spine,
        "safety": safety,
        "cover_width": trim_w,
        "left_spine_fold_x": left_fold,
        "right_spine_fold_x": right_fold,
    }
    return [CoverPage("spread", total_w, total_h, regions)], values


def _derive_wrap_spread(p: ResolvedParameters):
    """Case bind: board panels and spine wrapped by ``wrap`` on every side."""
    wrap, spine, safety = p.edge, p.spine_width, p.safety

    total_w = 2 * wrap + 2 * p.panel_width + spine
    total_h = 2 * wrap + p.panel_height
    background_w = total_w - 2 * wrap
    background_h = total_h - 2 * wrap
    cover_w = (background_w - spine) / 2
    spine_start = wrap + cover_w
    spine_end = spine_start + spine

    back_trim = Rect(wrap, wrap, cover_w, background_h)
    front_trim = Rect(spine_end, wrap, cover_w, background_h)
    left_safe = back_trim.inset(safety, safety, safety, safety)
    right_safe = front_trim.inset(safety, safety, safety, safety)

    regions: Dict[str, Rect] = {
        BLEED_AREA: Rect(0.0, 0.0, total_w, total_h),
        BACKGROUND_TRIM: Rect(wrap, wrap, background_w, background_h),
        SPINE: Rect(spine_start, 0.0, spine, total_h),
        BACK_TRIM: back_trim,
        FRONT_TRIM: front_trim,
        LEFT_SAFE_AREA: left_safe,
        RIGHT_SAFE_AREA: right_safe,
    }
    barcode = _barcode_zone(left_safe, p.policy.barcode_inset)
    if barcode is not None:
        regions[BARCODE_ZONE] = barcode

    values = {
        "total_width": total_w,
        "total_height": total_h,
        "wrap": wrap,
        "spine_width": spine,
        "safety": safety,
        "cover_width": cover_w,
        "left_spine_fold_x": spine_start,
        "right_spine_fold_x": spine_end,
    }
    return [CoverPage("spread", total_w, total_h, regions)], values


def _hole_column_x(trim: Rect, binding_on_left: bool) -> float:
    return trim.x + PUNCH_HOLE_OFFSET if binding_on_left else trim.right - PUNCH_HOLE_OFFSET


def _punch_holes(trim: Rect, binding_on_left: bool) -> List[PunchHole]:
    cx = _hole_column_x(trim, binding_on_left)
    first = trim.y + PUNCH_HOLE_SPACING / 2
    # Every centre up to the trim top; the last circle may cross it
    count = int(math.floor((trim.top - first) / PUNCH_HOLE_SPACING + 1e-9)) + 1
    return [PunchHole(cx, first + i * PUNCH_HOLE_SPACING, PUNCH_HOLE_RADIUS) for i in range(max(count, 0))]


def _coil_page(p: ResolvedParameters, front: bool) -> CoverPage:
    edge, m = p.edge, p.margins
    page_w = p.trim_width + 2 * edge
    page_h = p.trim_height + 2 * edge
    trim = Rect(edge, edge, p.trim_width, p.trim_height)

    # The coil runs along the left edge of the front cover and the right edge of the back
    left = m.binding if front else m.outside
    right = m.outside if front else m.binding
    safe = trim.inset(left, m.bottom, right, m.top)

    holes = _punch_holes(trim, binding_on_left=front)
    zone = Rect(_hole_column_x(trim, front) - PUNCH_HOLE_RADIUS, trim.y, 2 * PUNCH_HOLE_RADIUS, trim.height)

    regions: Dict[str, Rect] = {
        BLEED_AREA: Rect(0.0, 0.0, page_w, page_h),
        BACKGROUND_TRIM: trim,
        SAFE_AREA: safe,
        PUNCH_HOLE_ZONE: zone,
    }
    if zone.x < safe.right and zone.right > safe.x:
        logger.warning("Binding-edge margin %.3f in overlaps the punch holes", m.binding)
    if not front:
        barcode = _barcode_zone(safe, p.policy.barcode_inset)
        if barcode is not None:
            regions[BARCODE_ZONE] = barcode

    return CoverPage("front" if front else "back", page_w, page_h, regions, tuple(holes))


def _derive_coil(p: ResolvedParameters):
    """Coil / Wire-O: front and back are separate single-sided pages."""
    front = _coil_page(p, front=True)
    back = _coil_page(p, front=False)
    m = p.margins
    values = {
        "total_width": front.width,
        "total_height": front.height,
        ("wrap" if p.policy.uses_wrap else "bleed"): p.edge,
        "safety": p.safety,
        "top_margin": m.top,
        "bottom_margin": m.bottom,
        "binding_margin": m.binding,
        "outside_margin": m.outside,
        "punch_hole_radius": PUNCH_HOLE_RADIUS,
        "punch_hole_spacing": PUNCH_HOLE_SPACING,
        "punch_hole_offset": PUNCH_HOLE_OFFSET,
    }
    return [front, back], values
