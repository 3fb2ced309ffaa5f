"""Tests for the interior PDF, DOCX and IDML writers."""

import io
import zipfile

from docx import Document
from docx.oxml.ns import qn
from docx.shared import Twips
from pypdf import PdfReader

from bindery.idml.package import DESIGNMAP, read_part
from bindery.renderer.docx_renderer import HEADING_TEXT, InteriorDocxRenderer
from bindery.renderer.idml_interior import InteriorIdmlRenderer
from bindery.renderer.legend import REQUIREMENTS_TITLE
from bindery.renderer.pdf_renderer import InteriorPdfRenderer

BINDING = "Perfect Bind / Softcover"


class TestInteriorPdf:
    def test_pages_and_boxes(self, interior, policy):
        reader = PdfReader(io.BytesIO(InteriorPdfRenderer(binding_name=BINDING).render(interior, policy)))
        assert len(reader.pages) == 3
        for page in reader.pages:
            assert [round(float(v), 2) for v in page.mediabox] == [0, 0, 450, 666]
            assert [round(float(v), 2) for v in page.trimbox] == [9, 9, 441, 657]
        assert reader.metadata.title == "Interior Template"

    def test_requirements_on_second_page(self, interior, policy):
        reader = PdfReader(io.BytesIO(InteriorPdfRenderer().render(interior, policy)))
        assert REQUIREMENTS_TITLE in reader.pages[1].extract_text()
        assert "Page 1 of 3" in reader.pages[0].extract_text()


class TestInteriorDocx:
    def _doc(self, interior, policy, binding=BINDING):
        return Document(io.BytesIO(InteriorDocxRenderer(binding).render(interior, policy)))

    def test_page_setup(self, interior, policy):
        section = self._doc(interior, policy).sections[0]
        assert section.page_width == Twips(8640)
        assert section.page_height == Twips(12960)
        assert section.left_margin == Twips(972)
        assert section.right_margin == Twips(720)
        assert section.top_margin == section.bottom_margin == Twips(720)

    def test_mirror_margins(self, interior, policy):
        doc = self._doc(interior, policy)
        assert doc.settings.element.find(qn("w:mirrorMargins")) is not None

    def test_content(self, interior, policy):
        doc = self._doc(interior, policy)
        texts = [p.text for p in doc.paragraphs]
        assert texts[0] == HEADING_TEXT
        assert texts[1] == 'This document is formatted for a 6.000" x 9.000" book with a "Perfect Bind / Softcover" binding.'
        assert REQUIREMENTS_TITLE in texts
        assert doc.core_properties.title == "Interior Template"

    def test_default_binding_label(self, interior, policy):
        doc = self._doc(interior, policy, binding=None)
        assert 'a "Book" binding' in doc.paragraphs[1].text


class TestInteriorIdml:
    def test_spread_per_template_page(self, interior, policy):
        data = InteriorIdmlRenderer(BINDING).render(interior, policy)
        designmap = [el.get("src") for el in read_part(data, DESIGNMAP)]
        for n in (1, 2, 3):
            assert f"Spreads/Spread_u_page{n}.xml" in designmap
        prefs = read_part(data, "Resources/Preferences.xml").find("DocumentPreference")
        assert prefs.get("PageWidth") == "432"
        assert prefs.get("FacingPages") == "true"
        assert prefs.get("DocumentBleedTopOffset") == "9"

    def test_page_margins_swap_by_parity(self, interior, policy):
        data = InteriorIdmlRenderer(BINDING).render(interior, policy)
        recto = read_part(data, "Spreads/Spread_u_page1.xml").find(".//Page/MarginPreference")
        verso = read_part(data, "Spreads/Spread_u_page2.xml").find(".//Page/MarginPreference")
        assert (recto.get("Left"), recto.get("Right")) == ("48.6", "36")
        assert (verso.get("Left"), verso.get("Right")) == ("36", "48.6")

    def test_story_text(self, interior, policy):
        data = InteriorIdmlRenderer(BINDING).render(interior, policy)
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            story = zf.read("Stories/Story_u_page2_text.xml").decode("utf-8")
        assert REQUIREMENTS_TITLE in story
