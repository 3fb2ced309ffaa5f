"""Tests for checking a cover PDF against derived geometry."""

import pytest

from bindery.cover.cover_renderer import CoverPdfRenderer
from bindery.cover.cover_validator import validate_cover
from bindery.errors import PdfAnalysisError
from bindery.geometry.cover import derive_cover_geometry


def test_rendered_cover_passes(perfect_geometry, policy):
    report = validate_cover(CoverPdfRenderer().render(perfect_geometry, policy), perfect_geometry)
    assert report.ok
    assert report.issues == []
    assert report.width_pt == pytest.approx(918)
    assert report.expected_spine_pt == pytest.approx(36)


def test_wrong_spine_width_is_an_error(perfect_geometry, policy, request_factory):
    wider = derive_cover_geometry(request_factory(spine_width=1.0))
    report = validate_cover(CoverPdfRenderer().render(perfect_geometry, policy), wider)
    assert not report.ok
    assert report.expected_width_pt == pytest.approx(954)
    assert any(i.level == "error" and "does not match" in i.message for i in report.issues)


def test_page_count_mismatch(coil_geometry, perfect_geometry, policy):
    report = validate_cover(CoverPdfRenderer().render(coil_geometry, policy), perfect_geometry)
    assert not report.ok
    assert "Cover must have 1 page(s)" in report.issues[0].message


def test_coil_pages_checked_individually(coil_geometry, policy):
    report = validate_cover(CoverPdfRenderer().render(coil_geometry, policy), coil_geometry)
    assert report.ok
    assert report.as_dict()["expectedWidthPt"] == pytest.approx(450)


def test_unreadable_pdf():
    with pytest.raises(PdfAnalysisError):
        validate_cover(b"not a pdf at all", None)
