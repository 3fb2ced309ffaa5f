"""Plain-text book specification summary shipped at the root of every package."""

from datetime import datetime
from typing import List, Optional

from bindery.geometry.interior import InteriorGeometry
from bindery.geometry.shapes import CoverGeometry
from bindery.models import TemplateRequest


def _in(value: float) -> str:
    return f'{value:.3f}"'


def generate_summary(request: TemplateRequest, geometry: Optional[CoverGeometry],
                     interior: Optional[InteriorGeometry], generated_at: datetime) -> str:
    lines = [
        "BOOK SPECIFICATION SUMMARY",
        "================================",
        f"Binding Type: {request.binding_name}",
        f"Page Count: {request.page_count}",
        f"Paper Stock: {request.paper_stock}",
    ]
    if request.book_title:
        lines.append(f"Title: {request.book_title}")

    if geometry is not None:
        lines += _cover_lines(request, geometry)

    if interior is not None:
        m = interior.margins
        lines += [
            "",
            "--- Interior Dimensions ---",
            f"Page Size: {_in(interior.trim_width)} x {_in(interior.trim_height)}",
            f"Page Size (with bleed): {_in(interior.page_width)} x {_in(interior.page_height)}",
            f"Margins (top / bottom / outside): {_in(m.top)} / {_in(m.bottom)} / {_in(m.outside)}",
            f"Gutter Margin: {_in(m.gutter)}",
        ]

    lines += ["", f"Generated on: {generated_at.strftime('%a, %d %b %Y %H:%M:%S')} UTC"]
    return "\n".join(lines)


def _cover_lines(request: TemplateRequest, geometry: CoverGeometry) -> List[str]:
    values = geometry.values
    lines = [
        "",
        "--- Cover Dimensions ---",
        f"Trim Size (Single Page): {_in(request.trim_width)} x {_in(request.trim_height)}",
    ]
    if not geometry.supported:
        lines.append(f"Cover layout for {request.binding_name} is not available yet.")
        return lines

    if "spine_width" in values:
        lines.append(f"Spine Width: {_in(values['spine_width'])}")
    if "wrap" in values:
        lines.append(f"Wrap: {_in(values['wrap'])}")
    else:
        lines.append(f"Bleed: {_in(values.get('bleed', 0.0))}")
    lines.append(f"Safety Margin: {_in(values['safety'])}")
    label = "Cover Page Size" if len(geometry.pages) > 1 else "Total Cover Size"
    edge = "wrap" if geometry.uses_wrap else "bleed"
    lines.append(f"{label} (with {edge}): {_in(geometry.total_width)} x {_in(geometry.total_height)}")
    if len(geometry.pages) > 1:
        lines.append(f"Cover Pages: {', '.join(p.name for p in geometry.pages)}")
    return lines
