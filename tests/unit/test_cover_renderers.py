"""Tests for the cover PDF, PSD and IDML writers."""

import io
import xml.etree.ElementTree as ET
import zipfile

from psd_tools import PSDImage
from psd_tools.constants import Resource
from pypdf import PdfReader

from bindery.cover.cover_renderer import CoverPdfRenderer
from bindery.cover.idml_renderer import CoverIdmlRenderer
from bindery.cover.psd_renderer import ARTWORK_GROUP, CoverPsdRenderer
from bindery.geometry.cover import derive_cover_geometry
from bindery.idml.package import DESIGNMAP, MANIFEST, MIMETYPE, read_part
from bindery.renderer.legend import PALETTE, hex_to_rgb


def _box(box):
    return [round(float(v), 2) for v in (box.left, box.bottom, box.right, box.top)]


class TestCoverPdf:
    def test_spread_page_and_boxes(self, perfect_geometry, policy):
        reader = PdfReader(io.BytesIO(CoverPdfRenderer().render(perfect_geometry, policy)))
        assert len(reader.pages) == 1
        page = reader.pages[0]
        assert _box(page.mediabox) == [0, 0, 918, 666]
        assert _box(page.trimbox) == [9, 9, 909, 657]
        assert _box(page.bleedbox) == [0, 0, 918, 666]
        assert reader.metadata.title == "Perfect Bind / Softcover Cover Template"

    def test_legend_text_in_content(self, perfect_geometry, policy):
        reader = PdfReader(io.BytesIO(CoverPdfRenderer().render(perfect_geometry, policy)))
        text = reader.pages[0].extract_text()
        assert "12.750 x 9.250 in" in text
        assert "FRONT COVER" in text

    def test_coil_has_two_pages(self, coil_geometry, policy):
        reader = PdfReader(io.BytesIO(CoverPdfRenderer().render(coil_geometry, policy)))
        assert len(reader.pages) == 2
        for page in reader.pages:
            assert _box(page.mediabox) == [0, 0, 450, 666]
            assert _box(page.trimbox) == [9, 9, 441, 657]

    def test_unsupported_binding_placeholder(self, unknown_request, policy):
        g = derive_cover_geometry(unknown_request)
        reader = PdfReader(io.BytesIO(CoverPdfRenderer().render(g, policy)))
        assert len(reader.pages) == 1
        assert "coming soon" in reader.pages[0].extract_text()


def _psd(geometry, policy):
    return PSDImage.open(io.BytesIO(CoverPsdRenderer().render(geometry, policy)))


def _names(layers):
    return [layer.name for layer in layers]


class TestCoverPsd:
    def test_spread_layers_and_artwork_group(self, perfect_geometry, policy):
        psd = _psd(perfect_geometry, policy)
        assert psd.size == (510, 370)
        assert _names(psd) == ["Bleed Area", "Background Color", "Spine Color", ARTWORK_GROUP]
        artwork = psd[3]
        assert artwork.is_group()
        assert _names(artwork) == ["White Page Area", "Barcode", "Information", "Logo & Text"]

    def test_layers_cropped_to_painted_pixels(self, perfect_geometry, policy):
        psd = _psd(perfect_geometry, policy)
        spine = psd[2]
        assert spine.name == "Spine Color"
        assert spine.bbox == (245, 0, 265, 370)

    def test_resolution_and_guides(self, perfect_geometry, policy):
        psd = _psd(perfect_geometry, policy)
        resolution = psd.image_resources.get_data(Resource.RESOLUTION_INFO)
        assert resolution.horizontal == 40 << 16
        assert resolution.vertical == 40 << 16
        assert resolution.horizontal_unit == 1
        guides = [tuple(g) for g in psd.image_resources.get_data(Resource.GRID_AND_GUIDES_INFO).data]
        # Trim left edge and spine fold are vertical; trim top is horizontal; 1/32 px units
        assert (5 * 32, 0) in guides
        assert (245 * 32, 0) in guides
        assert (5 * 32, 1) in guides

    def test_composite_colours(self, perfect_geometry, policy):
        im = _psd(perfect_geometry, policy).topil().convert("RGB")
        assert im.getpixel((2, 2)) == hex_to_rgb(PALETTE["bleed"])
        # Spine column near the bottom edge, clear of the spine label
        assert im.getpixel((255, 366)) == hex_to_rgb(PALETTE["spine"])

    def test_case_bind_names_wrap_layer(self, case_request, policy):
        psd = _psd(derive_cover_geometry(case_request), policy)
        assert psd[0].name == "Wrap Area"

    def test_coil_pages_are_grouped(self, coil_geometry, policy):
        psd = _psd(coil_geometry, policy)
        assert psd.size == (250, 370)
        assert _names(psd) == ["Back Cover", "Front Cover"]
        back, front = psd[0], psd[1]
        assert back.is_group() and front.is_group()
        assert "FRONT - Punch Holes" in _names(front)
        assert "BACK - Barcode" in _names(back)
        assert "FRONT - Barcode" not in _names(front)
        assert all(name.startswith("BACK - ") for name in _names(back))

    def test_zero_width_spine_has_no_spine_layer(self, saddle_request, policy):
        psd = _psd(derive_cover_geometry(saddle_request), policy)
        assert "Spine Color" not in [layer.name for layer in psd.descendants()]
        assert psd.size == (490, 370)

    def test_unsupported_binding_placeholder(self, unknown_request, policy):
        psd = _psd(derive_cover_geometry(unknown_request), policy)
        assert _names(psd) == ["Coming Soon"]
        assert psd.image_resources.get_data(Resource.GRID_AND_GUIDES_INFO) is None


class TestCoverIdml:
    def test_package_structure(self, perfect_geometry, policy):
        data = CoverIdmlRenderer().render(perfect_geometry, policy)
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            infos = zf.infolist()
            assert infos[0].filename == "mimetype"
            assert infos[0].compress_type == zipfile.ZIP_STORED
            assert zf.read("mimetype").decode() == MIMETYPE
            names = set(zf.namelist())

        manifest = [el.get("src") for el in read_part(data, MANIFEST)]
        for name in names - {"mimetype", MANIFEST, "META-INF/container.xml"}:
            assert name in manifest
        designmap = [el.get("src") for el in read_part(data, DESIGNMAP)]
        assert "Spreads/Spread_u_spread.xml" in designmap

    def test_spine_frame_in_points_y_down(self, perfect_geometry, policy):
        data = CoverIdmlRenderer().render(perfect_geometry, policy)
        spread = read_part(data, "Spreads/Spread_u_spread.xml")
        spine = spread.find(".//Rectangle[@Name='Spine_Rectangle']")
        assert spine.get("ItemTransform") == "36 0 0 666 441 0"
        assert spine.get("FillColor") == "Color/SpineColor"
        bleed = spread.find(".//Rectangle[@Name='Bleed_Rectangle']")
        assert bleed.get("ItemTransform") == "918 0 0 666 0 0"

    def test_stories_carry_legend_text(self, perfect_geometry, policy):
        data = CoverIdmlRenderer().render(perfect_geometry, policy)
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            text = " ".join(
                "".join(ET.fromstring(zf.read(n)).itertext())
                for n in zf.namelist() if n.startswith("Stories/")
            )
        assert "12.750 x 9.250 in" in text
        assert "My Book" in text
        assert "FRONT COVER" in text

    def test_coil_has_spread_per_page(self, coil_geometry, policy):
        data = CoverIdmlRenderer().render(coil_geometry, policy)
        designmap = [el.get("src") for el in read_part(data, DESIGNMAP)]
        assert "Spreads/Spread_u_front.xml" in designmap
        assert "Spreads/Spread_u_back.xml" in designmap
        prefs = read_part(data, "Resources/Preferences.xml").find("DocumentPreference")
        assert prefs.get("PageWidth") == "450"

    def test_unsupported_binding_placeholder(self, unknown_request, policy):
        g = derive_cover_geometry(unknown_request)
        data = CoverIdmlRenderer().render(g, policy)
        story = read_part(data, "Stories/Story_u_coming_soon.xml")
        assert "".join(story.itertext()) == "Template for Lay Flat coming soon!"
