"""Shared pytest fixtures."""

import pytest

from bindery.config.settings import Settings
from bindery.geometry.cover import derive_cover_geometry
from bindery.geometry.interior import derive_interior_geometry
from bindery.models import TemplateRequest
from bindery.renderer.base import ResolutionPolicy

# Low raster resolution keeps PSD tests fast
TEST_DPI = 40


def make_request(**overrides) -> TemplateRequest:
    fields = {
        "binding_name": "Perfect Bind / Softcover",
        "trim_width": 6.0,
        "trim_height": 9.0,
        "spine_width": 0.5,
        "bleed": 0.125,
        "page_count": 100,
    }
    fields.update(overrides)
    return TemplateRequest(**fields)


@pytest.fixture
def perfect_request() -> TemplateRequest:
    return make_request(book_title="My Book")


@pytest.fixture
def saddle_request() -> TemplateRequest:
    return make_request(binding_name="Saddle Stitch", spine_width=None, page_count=48)


@pytest.fixture
def case_request() -> TemplateRequest:
    return make_request(binding_name="Case Bind / Hardcover", spine_width=1.0, bleed=None)


@pytest.fixture
def coil_request() -> TemplateRequest:
    return make_request(binding_name="Coil / Wire-O Softcover", spine_width=None)


@pytest.fixture
def coil_hardcover_request() -> TemplateRequest:
    return make_request(binding_name="Coil / Wire-O", is_hardcover_coil_wire=True, spine_width=None, bleed=None)


@pytest.fixture
def unknown_request() -> TemplateRequest:
    return make_request(binding_name="Lay Flat")


@pytest.fixture
def perfect_geometry(perfect_request):
    return derive_cover_geometry(perfect_request)


@pytest.fixture
def coil_geometry(coil_request):
    return derive_cover_geometry(coil_request)


@pytest.fixture
def interior(perfect_request):
    return derive_interior_geometry(perfect_request)


@pytest.fixture
def policy() -> ResolutionPolicy:
    return ResolutionPolicy(dpi=TEST_DPI)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(dpi=TEST_DPI, log_level="DEBUG")


@pytest.fixture
def request_factory():
    """Build a TemplateRequest from the 6 x 9 in perfect-bind defaults plus overrides."""
    return make_request
