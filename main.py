import json
import os
from typing import Optional

import click
from pydantic import ValidationError

from bindery.analysis.pdf_analyzer import analyze_pdf_bytes, analyze_pdf_url
from bindery.config.settings import PROFILES, Settings, setup_logging
from bindery.cover.cover_validator import validate_cover
from bindery.errors import TemplateError
from bindery.geometry.cover import derive_cover_geometry
from bindery.geometry.interior import derive_interior_geometry
from bindery.models import TemplateRequest
from bindery.packaging import generate_package_sync


def _build_request(**fields) -> TemplateRequest:
    try:
        return TemplateRequest(**{k: v for k, v in fields.items() if v is not None})
    except ValidationError as e:
        for err in e.errors():
            loc = ".".join(str(p) for p in err["loc"])
            click.echo(f"❌ {loc}: {err['msg']}", err=True)
        raise SystemExit(2)


@click.command(help="Generate a print template package (cover + interior) for a book, or inspect/validate a PDF.")
@click.option("--binding", "binding_name", type=str, default="Perfect Bind / Softcover", show_default=True, help="Binding method, e.g. 'Saddle Stitch', 'Case Bind / Hardcover', 'Coil / Wire-O'")
@click.option("--trim-width", "trim_width", type=float, default=6.0, show_default=True, help="Trim width in inches")
@click.option("--trim-height", "trim_height", type=float, default=9.0, show_default=True, help="Trim height in inches")
@click.option("--spine-width", "spine_width", type=float, default=None, help="Spine width in inches (required for perfect and case bind)")
@click.option("--bleed", type=float, default=None, help="Bleed in inches")
@click.option("--wrap", "wrap_amount", type=float, default=None, help="Case-bind wrap in inches")
@click.option("--board-width", "board_width", type=float, default=None, help="Case-bind board width in inches (defaults to trim width)")
@click.option("--board-height", "board_height", type=float, default=None, help="Case-bind board height in inches (defaults to trim height)")
@click.option("--safety-margin", "safety_margin", type=float, default=None, help="Safety margin in inches")
@click.option("--margin-top-bottom", "safety_margin_top_bottom", type=float, default=None, help="Coil softcover top/bottom margin")
@click.option("--margin-binding-edge", "safety_margin_binding_edge", type=float, default=None, help="Coil softcover binding-edge margin")
@click.option("--margin-outside-edge", "safety_margin_outside_edge", type=float, default=None, help="Coil softcover outside-edge margin")
@click.option("--hardcover-coil", "is_hardcover_coil_wire", is_flag=True, default=None, help="Use the hardcover variant for 'Coil / Wire-O'")
@click.option("--pages", "page_count", type=click.IntRange(min=1), default=100, show_default=True, help="Interior page count")
@click.option("--paper", "paper_stock", type=str, default="60# Uncoated", show_default=True, help="Paper stock")
@click.option("--title", "book_title", type=str, default=None, help="Book title for the spine label")
@click.option("--package", "package_type", type=click.Choice(["all", "cover", "interior"], case_sensitive=False), default="all", show_default=True, help="Which files to generate")
@click.option("--out", "out_dir", type=str, default="outputs", show_default=True, help="Directory for the generated zip")
@click.option("--profile", type=click.Choice(sorted(PROFILES), case_sensitive=False), default="print", show_default=True, help="Settings profile (raster DPI, timeouts)")
@click.option("--dpi", type=click.IntRange(min=1), default=None, help="Override the raster DPI of the profile")
@click.option("--geometry", "dump_geometry", is_flag=True, default=False, help="Print the derived cover and interior geometry as JSON and exit")
@click.option("--inspect", "inspect_source", type=str, default=None, help="Inspect a PDF (local path or http(s) URL) and exit")
@click.option("--validate-cover-path", "validate_cover_path", type=str, default=None, help="Validate a cover PDF against the geometry of the given book options and exit")
@click.option("--log-level", "log_level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False), default=None, help="Logging level (default from BINDERY_LOG_LEVEL or INFO)")
def main(binding_name: str, trim_width: float, trim_height: float, spine_width: Optional[float], bleed: Optional[float], wrap_amount: Optional[float], board_width: Optional[float], board_height: Optional[float], safety_margin: Optional[float], safety_margin_top_bottom: Optional[float], safety_margin_binding_edge: Optional[float], safety_margin_outside_edge: Optional[float], is_hardcover_coil_wire: Optional[bool], page_count: int, paper_stock: str, book_title: Optional[str], package_type: str,
         out_dir: str, profile: str, dpi: Optional[int], dump_geometry: bool, inspect_source: Optional[str], validate_cover_path: Optional[str], log_level: Optional[str]):
    settings = Settings.from_env(profile.lower())
    if dpi:
        settings = settings.model_copy(update={"dpi": dpi})
    setup_logging(log_level or settings.log_level)

    try:
        # Inspection mode
        if inspect_source:
            if inspect_source.startswith(("http://", "https://")):
                analysis = analyze_pdf_url(inspect_source, settings.fetch_timeout_s)
            else:
                with open(inspect_source, "rb") as f:
                    analysis = analyze_pdf_bytes(f.read())
            click.echo(json.dumps(analysis.as_dict(), indent=2))
            return

        request = _build_request(
            binding_name=binding_name,
            package_type=package_type.lower(),
            book_title=book_title,
            page_count=page_count,
            paper_stock=paper_stock,
            trim_width=trim_width,
            trim_height=trim_height,
            spine_width=spine_width,
            bleed=bleed,
            wrap_amount=wrap_amount,
            board_width=board_width,
            board_height=board_height,
            safety_margin=safety_margin,
            safety_margin_top_bottom=safety_margin_top_bottom,
            safety_margin_binding_edge=safety_margin_binding_edge,
            safety_margin_outside_edge=safety_margin_outside_edge,
            is_hardcover_coil_wire=is_hardcover_coil_wire,
        )

        # Cover validation mode
        if validate_cover_path:
            geometry = derive_cover_geometry(request)
            with open(validate_cover_path, "rb") as f:
                report = validate_cover(f.read(), geometry)
            click.echo(f"Cover validation for {validate_cover_path} ({request.binding_name})")
            click.echo(f"Expected size: {report.expected_width_pt:.2f} x {report.expected_height_pt:.2f} pt (spine {report.expected_spine_pt:.2f} pt)")
            click.echo(f"Actual size:   {report.width_pt:.2f} x {report.height_pt:.2f} pt")
            if not report.issues:
                click.echo("✅ No issues found.")
            else:
                for iss in report.issues:
                    click.echo(f"{iss.level.upper()}: {iss.message}")
            if not report.ok:
                raise SystemExit(1)
            return

        if dump_geometry:
            payload = {}
            if request.includes_cover:
                payload["cover"] = derive_cover_geometry(request).as_dict()
            if request.includes_interior:
                payload["interior"] = derive_interior_geometry(request).as_dict()
            click.echo(json.dumps(payload, indent=2))
            return

        package = generate_package_sync(request, settings)
    except (TemplateError, OSError) as e:
        click.echo(f"❌ {e}", err=True)
        raise SystemExit(1)

    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    out_path = os.path.join(out_dir, package.file_name)
    with open(out_path, "wb") as f:
        f.write(package.data)
    click.echo(f"✅ Generated {out_path} for {request.binding_name}, {request.trim_width:g}x{request.trim_height:g} in")
    for entry in package.entries:
        click.echo(f"   {entry}")


if __name__ == "__main__":
    main()
