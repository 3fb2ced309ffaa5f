"""
PDF inspection

Reports page count, per-page size in inches, whether every page shares one
size, the document title and the first page's bleed and trim boxes. PDFs can
be analysed from bytes, from inline base64, or downloaded from a URL.
"""

import base64
import binascii
import io
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import requests
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from bindery.config.units import points_to_inches
from bindery.errors import PdfAnalysisError, RemoteFetchError

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"
DEFAULT_TIMEOUT_S = 30.0


def _inches(points: float) -> float:
    return round(points_to_inches(points), 3)


@dataclass
class BoxInches:
    width: float
    height: float

    def as_dict(self) -> dict:
        return {"widthInches": self.width, "heightInches": self.height}


@dataclass
class PdfAnalysis:
    page_count: int
    page_dimensions: List[BoxInches] = field(default_factory=list)
    consistent_size: bool = True
    title: Optional[str] = None
    bleed_box: Optional[BoxInches] = None
    trim_box: Optional[BoxInches] = None

    @property
    def first_page_width(self) -> float:
        return self.page_dimensions[0].width if self.page_dimensions else 0.0

    @property
    def first_page_height(self) -> float:
        return self.page_dimensions[0].height if self.page_dimensions else 0.0

    def as_dict(self) -> dict:
        result = {
            "pageCount": self.page_count,
            "pageDimensions": [d.as_dict() for d in self.page_dimensions],
            "firstPageWidthInches": self.first_page_width,
            "firstPageHeightInches": self.first_page_height,
            "consistentSize": self.consistent_size,
        }
        if self.title:
            result["title"] = self.title
        if self.bleed_box is not None and self.trim_box is not None:
            result["firstPageBoxes"] = {"bleedBox": self.bleed_box.as_dict(), "trimBox": self.trim_box.as_dict()}
        return result


def analyze_pdf_bytes(data: bytes) -> PdfAnalysis:
    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted:
            # Page geometry is readable without the password for most files
            reader.decrypt("")
        pages = list(reader.pages)
    except (PyPdfError, ValueError) as e:
        raise PdfAnalysisError(f"Could not read PDF: {e}") from e

    dims: List[BoxInches] = []
    for page in pages:
        box = page.mediabox
        dims.append(BoxInches(_inches(float(box.width)), _inches(float(box.height))))
    consistent = all(d == dims[0] for d in dims)

    title = None
    if reader.metadata is not None and reader.metadata.title:
        title = str(reader.metadata.title).strip() or None

    bleed_box = trim_box = None
    if pages:
        first = pages[0]
        bleed_box = BoxInches(_inches(float(first.bleedbox.width)), _inches(float(first.bleedbox.height)))
        trim_box = BoxInches(_inches(float(first.trimbox.width)), _inches(float(first.trimbox.height)))

    logger.debug("Analysed PDF: %d pages, consistent=%s", len(pages), consistent)
    return PdfAnalysis(
        page_count=len(pages),
        page_dimensions=dims,
        consistent_size=consistent,
        title=title,
        bleed_box=bleed_box,
        trim_box=trim_box,
    )


def analyze_pdf_base64(text: str) -> PdfAnalysis:
    # Accept data URLs as sent by browsers
    if text.startswith("data:") and "," in text:
        text = text.split(",", 1)[1]
    try:
        data = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise PdfAnalysisError("PDF data is not valid base64") from e
    return analyze_pdf_bytes(data)


def fetch_pdf(url: str, timeout: float = DEFAULT_TIMEOUT_S) -> bytes:
    """Download a PDF, turning every failure into a RemoteFetchError with a readable message."""
    try:
        response = requests.get(url, timeout=timeout, allow_redirects=True)
    except requests.exceptions.Timeout as e:
        raise RemoteFetchError("timeout", f"Timed out after {timeout:g}s downloading {url}") from e
    except requests.exceptions.RequestException as e:
        raise RemoteFetchError("network", f"Could not reach {url}: {e}") from e

    if response.status_code == 404:
        raise RemoteFetchError("not_found", f"No file at {url} (HTTP 404). Check the link is correct and public.",
                               status_code=404)
    try:
        response.raise_for_status()
    except requests.exceptions.HTTPError as e:
        raise RemoteFetchError(
            "http_error", f"Server returned HTTP {response.status_code} for {url}", status_code=response.status_code
        ) from e

    content = response.content
    if content.lstrip()[:4] != PDF_MAGIC:
        content_type = response.headers.get("Content-Type", "")
        hint = "an HTML page" if "html" in content_type.lower() or content.lstrip()[:1] == b"<" else "not a PDF"
        raise RemoteFetchError(
            "not_a_pdf",
            f"The link returned {hint}. Use a direct download link to the PDF, not a sharing page.",
            status_code=response.status_code,
        )
    logger.info("Downloaded %d bytes from %s", len(content), url)
    return content


def analyze_pdf_url(url: str, timeout: float = DEFAULT_TIMEOUT_S) -> PdfAnalysis:
    return analyze_pdf_bytes(fetch_pdf(url, timeout))
