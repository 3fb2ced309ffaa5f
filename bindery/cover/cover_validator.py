import io
from dataclasses import dataclass
from typing import List, Union

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from bindery.config.units import inches_to_points
from bindery.errors import PdfAnalysisError
from bindery.geometry.shapes import BACKGROUND_TRIM, CoverGeometry


@dataclass
class CoverIssue:
    level: str  # "error" | "warning" | "info"
    message: str


@dataclass
class CoverReport:
    ok: bool
    width_pt: float
    height_pt: float
    expected_width_pt: float
    expected_height_pt: float
    expected_spine_pt: float
    issues: List[CoverIssue]

    def as_dict(self) -> dict:
        return {
            "ok": self.ok,
            "widthPt": self.width_pt,
            "heightPt": self.height_pt,
            "expectedWidthPt": self.expected_width_pt,
            "expectedHeightPt": self.expected_height_pt,
            "expectedSpinePt": self.expected_spine_pt,
            "issues": [{"level": i.level, "message": i.message} for i in self.issues],
        }


def validate_cover(pdf: Union[bytes, str], geometry: CoverGeometry, tol: float = 0.5) -> CoverReport:
    """Check a cover PDF against the derived geometry: page count, page size, trim box, encryption."""
    issues: List[CoverIssue] = []
    try:
        reader = PdfReader(io.BytesIO(pdf) if isinstance(pdf, bytes) else pdf)
        pages = list(reader.pages)
    except PyPdfError as e:
        raise PdfAnalysisError(f"Could not read cover PDF: {e}") from e

    expected = geometry.pages
    if len(pages) != len(expected):
        issues.append(CoverIssue(
            "error",
            f"Cover must have {len(expected)} page(s) for {geometry.binding_name}. Found {len(pages)} page(s)."
        ))
    if not pages:
        raise PdfAnalysisError("Cover PDF has no pages")

    for index, (page, target) in enumerate(zip(pages, expected)):
        label = f"Page {index + 1}" if len(expected) > 1 else "Page"
        w = float(page.mediabox.width)
        h = float(page.mediabox.height)
        exp_w, exp_h = inches_to_points(target.width), inches_to_points(target.height)
        if abs(w - exp_w) > tol or abs(h - exp_h) > tol:
            issues.append(CoverIssue(
                "error",
                f"{label} size {w:.2f}x{h:.2f} pt does not match expected cover {exp_w:.2f}x{exp_h:.2f} pt."
            ))

        trim = target.region(BACKGROUND_TRIM)
        if trim is None:
            continue
        box = page.trimbox
        expected_box = [inches_to_points(v) for v in (trim.x, trim.y, trim.right, trim.top)]
        actual_box = [float(box.left), float(box.bottom), float(box.right), float(box.top)]
        if any(abs(a - e) > tol for a, e in zip(actual_box, expected_box)):
            issues.append(CoverIssue(
                "warning",
                f"{label} trim box {_fmt_box(actual_box)} does not match expected {_fmt_box(expected_box)} pt."
            ))

    if reader.is_encrypted:
        issues.append(CoverIssue("error", "PDF is encrypted. Covers must be unencrypted."))

    first = pages[0]
    ok = not any(i.level == "error" for i in issues)
    return CoverReport(
        ok=ok,
        width_pt=float(first.mediabox.width),
        height_pt=float(first.mediabox.height),
        expected_width_pt=inches_to_points(expected[0].width),
        expected_height_pt=inches_to_points(expected[0].height),
        expected_spine_pt=inches_to_points(geometry.values.get("spine_width", 0.0)),
        issues=issues,
    )


def _fmt_box(box: List[float]) -> str:
    return "[" + ", ".join(f"{v:.2f}" for v in box) + "]"
