"""
Error types raised while building book templates.

Every failure surfaced to a caller derives from TemplateError so the CLI and
the HTTP layer can turn it into one readable message.
"""

from typing import Optional


class TemplateError(Exception):
    """Base class for all template generation failures"""


class InvalidRequestError(TemplateError, ValueError):
    """Missing or out-of-range dimensions in a template request"""


class AssetLoadError(TemplateError):
    """A configured font, logo or reference file could not be read"""

    def __init__(self, asset: str, path: str):
        self.asset = asset
        self.path = path
        super().__init__(f"Could not load {asset} from '{path}'")


class GenerationError(TemplateError):
    """One of the format generators failed; the whole package is aborted"""

    def __init__(self, file_name: str, cause: Exception):
        self.file_name = file_name
        self.cause = cause
        super().__init__(f"Failed to generate {file_name}: {cause}")


class PdfAnalysisError(TemplateError):
    """The supplied bytes could not be parsed as a PDF"""


class RemoteFetchError(TemplateError):
    """Downloading a PDF for analysis failed.

    ``kind`` is one of ``not_found``, ``not_a_pdf``, ``http_error``,
    ``timeout`` or ``network``.
    """

    def __init__(self, kind: str, message: str, status_code: Optional[int] = None):
        self.kind = kind
        self.status_code = status_code
        super().__init__(message)
