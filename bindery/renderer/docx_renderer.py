"""
Interior Word template (DOCX)

Trim-sized pages with mirrored margins: the inside margin is the gutter for
the page count, so recto and verso pages both keep the binding side clear.
"""

import io
import logging
from typing import Optional

from docx import Document
from docx.enum.text import WD_BREAK
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Twips

from bindery.config.units import inches_to_twips
from bindery.geometry.interior import InteriorGeometry
from bindery.renderer.base import ResolutionPolicy
from bindery.renderer.legend import REQUIREMENTS_BULLETS, REQUIREMENTS_INTRO, REQUIREMENTS_TITLE

logger = logging.getLogger(__name__)

HEADING_TEXT = "Book Interior Template"
BODY_TEXT = (
    "You can start writing your book's interior content here. "
    "The page size and margins are already set up for you."
)


def _enable_mirror_margins(doc):
    settings = doc.settings.element
    if settings.find(qn("w:mirrorMargins")) is not None:
        return
    mirror = OxmlElement("w:mirrorMargins")
    # mirrorMargins belongs right after zoom in the settings sequence
    zoom = settings.find(qn("w:zoom"))
    if zoom is not None:
        zoom.addnext(mirror)
    else:
        settings.insert(0, mirror)


class InteriorDocxRenderer:
    file_name = "interior.docx"

    def __init__(self, binding_name: Optional[str] = None):
        self.binding_name = binding_name

    def render(self, geometry: InteriorGeometry, policy: ResolutionPolicy) -> bytes:
        m = geometry.margins
        doc = Document()
        section = doc.sections[0]
        section.page_width = Twips(inches_to_twips(geometry.trim_width))
        section.page_height = Twips(inches_to_twips(geometry.trim_height))
        section.top_margin = Twips(inches_to_twips(m.top))
        section.bottom_margin = Twips(inches_to_twips(m.bottom))
        # With mirrored margins left is the inside edge
        section.left_margin = Twips(inches_to_twips(m.gutter))
        section.right_margin = Twips(inches_to_twips(m.outside))
        _enable_mirror_margins(doc)

        doc.core_properties.title = "Interior Template"
        doc.add_heading(HEADING_TEXT, level=1)
        intro = doc.add_paragraph()
        intro.add_run(
            f'This document is formatted for a {geometry.trim_width:.3f}" x {geometry.trim_height:.3f}" '
            f'book with a "{self.binding_name or "Book"}" binding.'
        ).italic = True
        body = doc.add_paragraph()
        body.add_run().add_break()
        body.add_run(BODY_TEXT)

        body.add_run().add_break(WD_BREAK.PAGE)
        doc.add_heading(REQUIREMENTS_TITLE, level=2)
        doc.add_paragraph(" ".join(REQUIREMENTS_INTRO))
        for bullet in REQUIREMENTS_BULLETS:
            doc.add_paragraph(bullet.lstrip("• "), style="List Bullet")

        buf = io.BytesIO()
        doc.save(buf)
        logger.debug("Interior DOCX %.3fx%.3f in, gutter %.3f in", geometry.trim_width, geometry.trim_height, m.gutter)
        return buf.getvalue()
