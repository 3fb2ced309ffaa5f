"""Tests for cover geometry derivation."""

import pytest
from pydantic import ValidationError

from bindery.config.bindings import BARCODE_HEIGHT, BARCODE_WIDTH, PUNCH_HOLE_RADIUS, BindingMethod, LayoutKind
from bindery.errors import InvalidRequestError
from bindery.geometry.cover import derive_cover_geometry
from bindery.geometry.shapes import (
    BACKGROUND_TRIM,
    BARCODE_ZONE,
    BLEED_AREA,
    LEFT_SAFE_AREA,
    PUNCH_HOLE_ZONE,
    RIGHT_SAFE_AREA,
    SAFE_AREA,
    SPINE,
    Rect,
)
from bindery.models import TemplateRequest


class TestPerfectBind:
    def test_totals_and_folds(self, perfect_geometry):
        g = perfect_geometry
        assert g.binding == BindingMethod.PERFECT_BIND
        assert g.total_width == pytest.approx(12.75)
        assert g.total_height == pytest.approx(9.25)
        assert g.values["left_spine_fold_x"] == pytest.approx(6.125)
        assert g.values["right_spine_fold_x"] == pytest.approx(6.625)

    def test_regions(self, perfect_geometry):
        page = perfect_geometry.page("spread")
        assert page.region(BLEED_AREA) == Rect(0.0, 0.0, 12.75, 9.25)
        assert page.region(BACKGROUND_TRIM) == Rect(0.125, 0.125, 12.5, 9.0)
        assert page.region(SPINE) == Rect(6.125, 0.0, 0.5, 9.25)
        assert page.region(LEFT_SAFE_AREA) == Rect(0.5, 0.5, 5.25, 8.25)
        assert page.region(RIGHT_SAFE_AREA) == Rect(7.0, 0.5, 5.25, 8.25)

    def test_safe_areas_inside_trim(self, perfect_geometry):
        page = perfect_geometry.pages[0]
        trim = page.region(BACKGROUND_TRIM)
        for name in (LEFT_SAFE_AREA, RIGHT_SAFE_AREA, BARCODE_ZONE):
            assert trim.contains(page.region(name))

    def test_barcode_in_back_safe_area_spine_corner(self, perfect_geometry):
        page = perfect_geometry.pages[0]
        safe = page.region(LEFT_SAFE_AREA)
        barcode = page.region(BARCODE_ZONE)
        assert (barcode.width, barcode.height) == (BARCODE_WIDTH, BARCODE_HEIGHT)
        assert safe.contains(barcode)
        assert barcode.right == pytest.approx(safe.right - 5 / 72.0)
        assert barcode.y == pytest.approx(safe.y + 5 / 72.0)

    def test_spine_text_drawable(self, perfect_geometry, request_factory):
        assert perfect_geometry.spine_text_drawable
        thin = derive_cover_geometry(request_factory(spine_width=0.1))
        assert not thin.spine_text_drawable
        assert "0.125" in thin.spine_warning

    def test_spine_is_required(self, request_factory):
        with pytest.raises(InvalidRequestError):
            derive_cover_geometry(request_factory(spine_width=None))


def test_saddle_stitch_has_zero_width_spine(saddle_request):
    g = derive_cover_geometry(saddle_request)
    assert g.total_width == pytest.approx(12.25)
    assert g.values["spine_width"] == 0.0
    assert g.pages[0].region(SPINE).width == 0.0
    assert not g.spine_text_drawable


class TestCaseBind:
    def test_wrap_spread(self, case_request):
        g = derive_cover_geometry(case_request)
        assert g.layout == LayoutKind.WRAP_SPREAD
        assert g.uses_wrap
        assert g.total_width == pytest.approx(14.5)
        assert g.total_height == pytest.approx(10.5)
        assert g.values["wrap"] == 0.75
        assert g.pages[0].region(SPINE) == Rect(6.75, 0.0, 1.0, 10.5)
        assert g.spine_text_drawable

    def test_board_size_sets_panels(self, request_factory):
        g = derive_cover_geometry(request_factory(
            binding_name="Case Bind / Hardcover", spine_width=0.5, board_width=6.25, board_height=9.5,
        ))
        assert g.total_width == pytest.approx(2 * 0.75 + 2 * 6.25 + 0.5)
        assert g.total_height == pytest.approx(2 * 0.75 + 9.5)
        assert g.values["cover_width"] == pytest.approx(6.25)

    def test_spine_threshold(self, request_factory):
        g = derive_cover_geometry(request_factory(binding_name="Case Bind / Hardcover", spine_width=0.2))
        assert not g.spine_text_drawable


class TestCoil:
    def test_two_pages(self, coil_geometry):
        assert [p.name for p in coil_geometry.pages] == ["front", "back"]
        for page in coil_geometry.pages:
            assert (page.width, page.height) == (6.25, 9.25)
        assert coil_geometry.page("front").region(SPINE) is None

    def test_binding_edge_mirrors(self, coil_geometry):
        front = coil_geometry.page("front").region(SAFE_AREA)
        back = coil_geometry.page("back").region(SAFE_AREA)
        assert front == Rect(0.875, 0.5, 4.875, 8.25)
        assert back == Rect(0.5, 0.5, 4.875, 8.25)

    def test_punch_holes(self, coil_geometry):
        front = coil_geometry.page("front")
        back = coil_geometry.page("back")
        trim = front.region(BACKGROUND_TRIM)
        assert len(front.punch_holes) == 24
        assert all(h.cx == pytest.approx(0.5) for h in front.punch_holes)
        assert all(h.cx == pytest.approx(5.75) for h in back.punch_holes)
        for hole in front.punch_holes:
            assert trim.y <= hole.cy - PUNCH_HOLE_RADIUS
            assert hole.cy <= trim.top
        zone = front.region(PUNCH_HOLE_ZONE)
        assert zone.x == pytest.approx(0.5 - PUNCH_HOLE_RADIUS)

    def test_last_punch_hole_may_cross_trim_top(self, request_factory):
        g = derive_cover_geometry(request_factory(binding_name="Coil / Wire-O Softcover", trim_height=8.5,
                                                  spine_width=None))
        front = g.page("front")
        trim = front.region(BACKGROUND_TRIM)
        assert len(front.punch_holes) == 23
        last = front.punch_holes[-1]
        assert last.cy == pytest.approx(8.5625)
        assert last.cy <= trim.top < last.cy + PUNCH_HOLE_RADIUS

    def test_barcode_on_back_only(self, coil_geometry):
        assert coil_geometry.page("front").region(BARCODE_ZONE) is None
        back = coil_geometry.page("back")
        assert back.region(SAFE_AREA).contains(back.region(BARCODE_ZONE))

    def test_hardcover_fixed_margins(self, coil_hardcover_request):
        g = derive_cover_geometry(coil_hardcover_request)
        assert g.binding == BindingMethod.COIL_WIRE_O_HARDCOVER
        assert g.uses_wrap
        assert g.values["wrap"] == 0.0
        assert g.values["binding_margin"] == 0.625
        assert g.page("front").width == 6.0


@pytest.mark.parametrize("binding, spine, drawable", [
    ("Perfect Bind / Softcover", 0.124, False),
    ("Perfect Bind / Softcover", 0.125, True),
    ("Perfect Bind / Softcover", 0.126, True),
    ("Case Bind / Hardcover", 0.249, False),
    ("Case Bind / Hardcover", 0.25, True),
    ("Case Bind / Hardcover", 0.26, True),
])
def test_spine_text_threshold(request_factory, binding, spine, drawable):
    g = derive_cover_geometry(request_factory(binding_name=binding, spine_width=spine))
    assert g.spine_text_drawable is drawable


TRIMS = [(5.0, 8.0), (6.0, 9.0), (8.5, 11.0)]


@pytest.mark.parametrize("trim_w, trim_h", TRIMS)
@pytest.mark.parametrize("spine", [0.0, 0.3, 1.1])
@pytest.mark.parametrize("bleed", [0.125, 0.25])
def test_spread_size_identity(request_factory, trim_w, trim_h, spine, bleed):
    g = derive_cover_geometry(request_factory(trim_width=trim_w, trim_height=trim_h, spine_width=spine, bleed=bleed))
    assert g.total_width == pytest.approx(2 * bleed + 2 * trim_w + spine)
    assert g.total_height == pytest.approx(trim_h + 2 * bleed)


@pytest.mark.parametrize("trim_w, trim_h", TRIMS)
@pytest.mark.parametrize("spine", [0.25, 1.1])
@pytest.mark.parametrize("wrap", [0.625, 0.75])
def test_case_bind_size_identity(request_factory, trim_w, trim_h, spine, wrap):
    g = derive_cover_geometry(request_factory(binding_name="Case Bind / Hardcover", trim_width=trim_w,
                                              trim_height=trim_h, spine_width=spine, wrap_amount=wrap))
    assert g.total_width == pytest.approx(2 * wrap + 2 * trim_w + spine)
    assert g.total_height == pytest.approx(trim_h + 2 * wrap)


@pytest.mark.parametrize("trim_w, trim_h", TRIMS)
@pytest.mark.parametrize("bleed", [0.125, 0.25])
def test_coil_page_size_identity(request_factory, trim_w, trim_h, bleed):
    g = derive_cover_geometry(request_factory(binding_name="Coil / Wire-O Softcover", trim_width=trim_w,
                                              trim_height=trim_h, spine_width=None, bleed=bleed))
    for page in g.pages:
        assert page.width == pytest.approx(trim_w + 2 * bleed)
        assert page.height == pytest.approx(trim_h + 2 * bleed)


def test_unknown_binding_yields_placeholder(unknown_request):
    g = derive_cover_geometry(unknown_request)
    assert not g.supported
    assert g.binding is None
    assert len(g.pages) == 1
    assert g.pages[0].regions == {}


def test_geometry_is_immutable(perfect_geometry):
    with pytest.raises(TypeError):
        perfect_geometry.pages[0].regions[SPINE] = Rect(0, 0, 1, 1)
    with pytest.raises(AttributeError):
        perfect_geometry.binding_name = "other"


def test_as_dict(perfect_geometry):
    data = perfect_geometry.as_dict()
    assert data["supported"] is True
    assert data["values"]["total_width"] == pytest.approx(12.75)
    assert data["pages"][0]["regions"][SPINE]["width"] == 0.5


@pytest.mark.parametrize("field, value", [
    ("trim_width", 0),
    ("trim_height", -1),
    ("bleed", -0.1),
    ("page_count", 0),
])
def test_request_rejects_bad_values(request_factory, field, value):
    with pytest.raises(ValidationError):
        request_factory(**{field: value})


def test_request_accepts_camel_case():
    request = TemplateRequest.model_validate({
        "bindingName": "Saddle Stitch",
        "trimWidth": 5.5,
        "trimHeight": 8.5,
        "packageType": "cover",
    })
    assert request.trim_width == 5.5
    assert request.includes_cover and not request.includes_interior
