"""
Binding policy table

One record per binding method: which request fields it honours, the default
for every optional field, and the layout thresholds that differ between
bindings. Defaults are resolved here exactly once, before any geometry is
derived, so no other module needs its own fallbacks.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional

from bindery.errors import InvalidRequestError
from bindery.models import TemplateRequest

logger = logging.getLogger(__name__)

BARCODE_WIDTH = 1.75
BARCODE_HEIGHT = 1.0

PUNCH_HOLE_RADIUS = 0.075
PUNCH_HOLE_SPACING = 0.375
PUNCH_HOLE_OFFSET = 0.375  # hole centre distance from the binding edge


class BindingMethod(str, Enum):
    """Supported binding methods. Values match the names the order form sends."""

    PERFECT_BIND = "Perfect Bind / Softcover"
    SADDLE_STITCH = "Saddle Stitch"
    CASE_BIND = "Case Bind / Hardcover"
    COIL_WIRE_O_SOFTCOVER = "Coil / Wire-O Softcover"
    COIL_WIRE_O_HARDCOVER = "Coil / Wire-O Hardcover"


class LayoutKind(str, Enum):
    SPREAD = "spread"  # back | spine | front on one page, bleed around
    WRAP_SPREAD = "wrap_spread"  # same, with board wrap instead of bleed
    COIL_PAGES = "coil_pages"  # independent front and back pages


def _normalize(name: str) -> str:
    return re.sub(r"[\s_/\-]+", " ", name).strip().lower()


_ALIASES = {
    "perfect bind": BindingMethod.PERFECT_BIND,
    "softcover": BindingMethod.PERFECT_BIND,
    "saddle stitch": BindingMethod.SADDLE_STITCH,
    "case bind": BindingMethod.CASE_BIND,
    "hardcover": BindingMethod.CASE_BIND,
    "coil wire o softcover": BindingMethod.COIL_WIRE_O_SOFTCOVER,
    "coil wire o hardcover": BindingMethod.COIL_WIRE_O_HARDCOVER,
}
for _method in BindingMethod:
    _ALIASES[_normalize(_method.value)] = _method
    _ALIASES[_normalize(_method.name)] = _method

_GENERIC_COIL = {_normalize("Coil / Wire-O"), _normalize("Coil"), _normalize("Wire-O")}


def resolve_binding(name: str, is_hardcover_coil_wire: Optional[bool] = None) -> Optional[BindingMethod]:
    """Map a binding name to a BindingMethod, or None when it is not supported."""
    key = _normalize(name)
    if key in _GENERIC_COIL:
        if is_hardcover_coil_wire:
            return BindingMethod.COIL_WIRE_O_HARDCOVER
        return BindingMethod.COIL_WIRE_O_SOFTCOVER
    return _ALIASES.get(key)


@dataclass(frozen=True)
class EdgeMargins:
    top: float
    bottom: float
    binding: float
    outside: float


@dataclass(frozen=True)
class BindingPolicy:
    method: BindingMethod
    layout: LayoutKind
    honored_fields: FrozenSet[str]
    uses_wrap: bool = False
    default_bleed: float = 0.0
    default_wrap: float = 0.0
    default_safety: float = 0.375
    # None means the request must supply it
    default_spine_width: Optional[float] = None
    default_edge_margins: Optional[EdgeMargins] = None
    # Fixed margins ignore whatever the request says
    fixed_edge_margins: Optional[EdgeMargins] = None
    spine_text_min: Optional[float] = None
    spine_warning: str = ""
    barcode_inset: float = 5 / 72.0

    def spine_text_drawable(self, spine_width: float) -> bool:
        if self.spine_text_min is None:
            return False
        return spine_width >= self.spine_text_min


_SPREAD_FIELDS = frozenset({"bleed", "spine_width", "safety_margin"})

POLICIES: Mapping[BindingMethod, BindingPolicy] = MappingProxyType({
    BindingMethod.PERFECT_BIND: BindingPolicy(
        method=BindingMethod.PERFECT_BIND,
        layout=LayoutKind.SPREAD,
        honored_fields=_SPREAD_FIELDS,
        spine_text_min=0.125,
        spine_warning="(Do not add text on Spine if it's below 0.125\")",
    ),
    BindingMethod.SADDLE_STITCH: BindingPolicy(
        method=BindingMethod.SADDLE_STITCH,
        layout=LayoutKind.SPREAD,
        honored_fields=_SPREAD_FIELDS,
        default_spine_width=0.0,
        spine_text_min=0.125,
        spine_warning="(Do not add text on Spine if it's below 0.125\")",
    ),
    BindingMethod.CASE_BIND: BindingPolicy(
        method=BindingMethod.CASE_BIND,
        layout=LayoutKind.WRAP_SPREAD,
        honored_fields=frozenset({"wrap_amount", "spine_width", "safety_margin", "board_width", "board_height"}),
        uses_wrap=True,
        default_wrap=0.75,
        default_safety=0.5,
        spine_text_min=0.25,
        spine_warning="(Spine text not recommended if below 0.25\")",
        barcode_inset=10 / 72.0,
    ),
    BindingMethod.COIL_WIRE_O_SOFTCOVER: BindingPolicy(
        method=BindingMethod.COIL_WIRE_O_SOFTCOVER,
        layout=LayoutKind.COIL_PAGES,
        honored_fields=frozenset({
            "bleed",
            "safety_margin_top_bottom",
            "safety_margin_binding_edge",
            "safety_margin_outside_edge",
        }),
        default_spine_width=0.0,
        default_edge_margins=EdgeMargins(top=0.375, bottom=0.375, binding=0.75, outside=0.375),
        barcode_inset=10 / 72.0,
    ),
    BindingMethod.COIL_WIRE_O_HARDCOVER: BindingPolicy(
        method=BindingMethod.COIL_WIRE_O_HARDCOVER,
        layout=LayoutKind.COIL_PAGES,
        honored_fields=frozenset({"wrap_amount"}),
        uses_wrap=True,
        default_spine_width=0.0,
        fixed_edge_margins=EdgeMargins(top=0.375, bottom=0.375, binding=0.625, outside=0.375),
        barcode_inset=10 / 72.0,
    ),
})


def policy_for(method: BindingMethod) -> BindingPolicy:
    return POLICIES[method]


@dataclass(frozen=True)
class ResolvedParameters:
    """Request values after policy defaults have been applied, in inches"""

    policy: BindingPolicy
    trim_width: float
    trim_height: float
    panel_width: float
    panel_height: float
    edge: float  # bleed, or wrap for wrap-based bindings
    spine_width: float
    safety: float
    margins: EdgeMargins


_OPTIONAL_FIELDS = (
    "bleed",
    "wrap_amount",
    "spine_width",
    "board_width",
    "board_height",
    "safety_margin",
    "safety_margin_top_bottom",
    "safety_margin_binding_edge",
    "safety_margin_outside_edge",
)


def _honored(request: TemplateRequest, policy: BindingPolicy, field: str):
    if field not in policy.honored_fields:
        raise KeyError(f"{policy.method.value} does not use '{field}'")
    return getattr(request, field)


def _first(*values):
    for v in values:
        if v is not None:
            return v
    return None


def resolve_parameters(request: TemplateRequest, method: BindingMethod) -> ResolvedParameters:
    """Apply the binding's defaults to a request and check the result fits."""
    policy = policy_for(method)

    if request.trim_width <= 0 or request.trim_height <= 0:
        raise InvalidRequestError(
            f"Trim size must be positive, got {request.trim_width} x {request.trim_height} in"
        )

    ignored = sorted(
        f for f in _OPTIONAL_FIELDS
        if f not in policy.honored_fields and getattr(request, f) is not None
    )
    if ignored:
        logger.debug("%s ignores request fields: %s", method.value, ", ".join(ignored))

    if policy.uses_wrap:
        edge = _first(_honored(request, policy, "wrap_amount"), policy.default_wrap)
    else:
        edge = _first(_honored(request, policy, "bleed"), policy.default_bleed)

    if "spine_width" in policy.honored_fields:
        spine = _first(request.spine_width, policy.default_spine_width)
    else:
        spine = policy.default_spine_width
    if spine is None:
        raise InvalidRequestError(f"Spine width is required for {method.value}")
    if spine < 0:
        raise InvalidRequestError(f"Spine width must not be negative, got {spine}")

    panel_w, panel_h = request.trim_width, request.trim_height
    if "board_width" in policy.honored_fields:
        panel_w = _first(request.board_width, request.trim_width)
        panel_h = _first(request.board_height, request.trim_height)

    if policy.fixed_edge_margins is not None:
        margins = policy.fixed_edge_margins
        safety = margins.outside
    elif policy.default_edge_margins is not None:
        d = policy.default_edge_margins
        top_bottom = _first(_honored(request, policy, "safety_margin_top_bottom"), d.top)
        margins = EdgeMargins(
            top=top_bottom,
            bottom=top_bottom,
            binding=_first(_honored(request, policy, "safety_margin_binding_edge"), d.binding),
            outside=_first(_honored(request, policy, "safety_margin_outside_edge"), d.outside),
        )
        safety = margins.outside
    else:
        safety = _first(_honored(request, policy, "safety_margin"), policy.default_safety)
        margins = EdgeMargins(top=safety, bottom=safety, binding=safety, outside=safety)

    if margins.binding + margins.outside >= panel_w or margins.top + margins.bottom >= panel_h:
        raise InvalidRequestError(
            f"Safety margins ({margins.top}/{margins.bottom}/{margins.binding}/{margins.outside} in) "
            f"leave no content area on a {panel_w} x {panel_h} in panel"
        )

    return ResolvedParameters(
        policy=policy,
        trim_width=request.trim_width,
        trim_height=request.trim_height,
        panel_width=panel_w,
        panel_height=panel_h,
        edge=edge,
        spine_width=spine,
        safety=safety,
        margins=margins,
    )


# Interior gutter by page count: (first page count of the step, gutter inches)
GUTTER_STEPS = (
    (601, 1.25),
    (401, 1.0),
    (151, 0.75),
    (61, 0.675),
)
GUTTER_MIN = 0.5


def gutter_margin(page_count: int) -> float:
    """Recommended inside margin for an interior of ``page_count`` pages."""
    for threshold, gutter in GUTTER_STEPS:
        if page_count >= threshold:
            return gutter
    return GUTTER_MIN
