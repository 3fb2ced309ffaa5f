"""
Reference assets shared by the renderers: label fonts, the logo and the
optional production guide. Loaded once per package so every format draws
with the same files.
"""

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image, ImageFont
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from bindery.config.settings import Settings
from bindery.errors import AssetLoadError

logger = logging.getLogger(__name__)

DEFAULT_FONT = "Helvetica"
DEFAULT_BOLD_FONT = "Helvetica-Bold"


@dataclass(frozen=True)
class AssetBundle:
    """Fonts and images resolved from settings. Empty bundles fall back to built-ins."""

    font_regular_path: Optional[str] = None
    font_bold_path: Optional[str] = None
    pdf_font_regular: str = DEFAULT_FONT
    pdf_font_bold: str = DEFAULT_BOLD_FONT
    logo_bytes: Optional[bytes] = None
    guide_name: Optional[str] = None
    guide_bytes: Optional[bytes] = None

    def pdf_font(self, bold: bool = False) -> str:
        return self.pdf_font_bold if bold else self.pdf_font_regular

    def pil_font(self, size_px: int, bold: bool = False):
        path = self.font_bold_path if bold else self.font_regular_path
        size_px = max(int(size_px), 1)
        if path:
            return ImageFont.truetype(path, size_px)
        return ImageFont.load_default(size=size_px)

    def logo_image(self) -> Optional[Image.Image]:
        if self.logo_bytes is None:
            return None
        return Image.open(io.BytesIO(self.logo_bytes)).convert("RGBA")


def _read(asset: str, path: str) -> bytes:
    p = Path(path).expanduser()
    try:
        return p.read_bytes()
    except OSError as e:
        raise AssetLoadError(asset, path) from e


def _register_font(asset: str, path: str) -> str:
    name = f"Bindery-{Path(path).stem}"
    if name in pdfmetrics.getRegisteredFontNames():
        return name
    try:
        pdfmetrics.registerFont(TTFont(name, str(Path(path).expanduser())))
    except Exception as e:
        raise AssetLoadError(asset, path) from e
    return name


def load_assets(settings: Settings) -> AssetBundle:
    """Read every configured asset.

    A configured font or logo that cannot be read raises AssetLoadError. A
    missing production guide only logs a warning and is left out.
    """
    pdf_regular, pdf_bold = DEFAULT_FONT, DEFAULT_BOLD_FONT
    if settings.font_regular:
        pdf_regular = _register_font("regular font", settings.font_regular)
    if settings.font_bold:
        pdf_bold = _register_font("bold font", settings.font_bold)

    logo = None
    if settings.logo:
        logo = _read("logo", settings.logo)
        try:
            Image.open(io.BytesIO(logo)).verify()
        except Exception as e:
            raise AssetLoadError("logo", settings.logo) from e

    guide_name, guide = None, None
    if settings.guide:
        try:
            guide = _read("production guide", settings.guide)
            guide_name = Path(settings.guide).name
        except AssetLoadError as e:
            logger.warning("%s; the package will not include it", e)

    return AssetBundle(
        font_regular_path=settings.font_regular,
        font_bold_path=settings.font_bold or settings.font_regular,
        pdf_font_regular=pdf_regular,
        pdf_font_bold=pdf_bold,
        logo_bytes=logo,
        guide_name=guide_name,
        guide_bytes=guide,
    )
