"""Tests for the shared legend text and positions."""

from bindery.geometry.cover import derive_cover_geometry
from bindery.renderer.legend import (
    BLEED_TEXT,
    WRAP_TEXT,
    barcode_value,
    cover_legend,
    interior_footer,
    interior_legend,
    interior_page_text,
    panel_titles,
    size_text,
    spine_label,
    unsupported_message,
)


def _values(columns):
    return [line.value for column in columns for line in column.lines]


def test_spread_legend_columns(perfect_geometry):
    page = perfect_geometry.pages[0]
    columns = cover_legend(perfect_geometry, page)
    assert len(columns) == 2
    assert "12.750 x 9.250 in" in _values(columns)
    assert "0.125 in" in _values(columns)
    assert barcode_value() in _values(columns)
    assert "6 x 9 in" in _values(columns)
    assert columns[0].x < columns[1].x


def test_case_bind_uses_wrap_text(case_request):
    g = derive_cover_geometry(case_request)
    descriptions = [line.description for c in cover_legend(g, g.pages[0]) for line in c.lines]
    assert WRAP_TEXT in descriptions
    assert BLEED_TEXT not in descriptions


def test_thin_spine_shows_warning(request_factory):
    g = derive_cover_geometry(request_factory(spine_width=0.1))
    spine_line = cover_legend(g, g.pages[0])[1].lines[2]
    assert spine_line.value == "0.100"
    assert "0.125" in spine_line.note
    assert spine_label(g) is None


def test_spine_label_uses_title(perfect_geometry, request_factory):
    assert spine_label(perfect_geometry) == "My Book"
    assert spine_label(derive_cover_geometry(request_factory())) == "SPINE TEXT"


def test_coil_legend_per_page(coil_geometry):
    front = cover_legend(coil_geometry, coil_geometry.page("front"))
    back = cover_legend(coil_geometry, coil_geometry.page("back"))
    assert len(front) == len(back) == 1
    assert any("left side" in line.description for line in front[0].lines)
    assert any("Right side" in line.description for line in back[0].lines)
    assert barcode_value() in _values(back)


def test_legend_lines_stack_downward(perfect_geometry):
    column = cover_legend(perfect_geometry, perfect_geometry.pages[0])[0]
    ys = [column.line_origin(i)[1] for i in range(len(column.lines))]
    assert ys == sorted(ys, reverse=True)


def test_panel_titles(perfect_geometry, coil_geometry):
    assert [t.text for t in panel_titles(perfect_geometry.pages[0])] == ["BACK COVER", "FRONT COVER"]
    assert [t.text for t in panel_titles(coil_geometry.page("back"))] == ["BACK COVER"]


def test_placeholder_has_no_legend(unknown_request):
    g = derive_cover_geometry(unknown_request)
    assert cover_legend(g, g.pages[0]) == []
    assert panel_titles(g.pages[0]) == []
    assert unsupported_message("Lay Flat") == "Template for Lay Flat coming soon!"


def test_interior_text(interior):
    assert interior_legend(interior, 1) == []
    values = _values(interior_legend(interior, 0))
    assert "0.675 in" in values
    assert size_text(6.25, 9.25) in values
    assert interior_page_text(interior, 1, None)[0] == "Interior File Requirements"
    assert "Perfect Bind / Softcover" in interior_page_text(interior, 0, "Perfect Bind / Softcover")[1]
    assert interior_footer(interior, 2)[0] == "Page 3 of 3"
