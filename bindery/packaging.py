"""
Template package assembly

Derives the geometry of each requested part once, then renders its formats
concurrently and zips the results. Geometry and asset errors abort
before any rendering starts; a failure in any renderer aborts the whole
package, so callers never receive a partial archive.
"""

import asyncio
import io
import logging
import re
import zipfile
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from bindery.assets import AssetBundle, load_assets
from bindery.config.settings import Settings
from bindery.cover.cover_renderer import CoverPdfRenderer
from bindery.cover.idml_renderer import CoverIdmlRenderer
from bindery.cover.psd_renderer import CoverPsdRenderer
from bindery.errors import GenerationError
from bindery.geometry.cover import derive_cover_geometry
from bindery.geometry.interior import InteriorGeometry, derive_interior_geometry
from bindery.geometry.shapes import CoverGeometry
from bindery.models import TemplateRequest
from bindery.renderer.base import ResolutionPolicy
from bindery.renderer.docx_renderer import InteriorDocxRenderer
from bindery.renderer.idml_interior import InteriorIdmlRenderer
from bindery.renderer.pdf_renderer import InteriorPdfRenderer
from bindery.summary import generate_summary

logger = logging.getLogger(__name__)

SUMMARY_FILE = "summary.txt"
COVER_DIR = "Cover"
INTERIOR_DIR = "Interior"
GUIDE_DIR = "Guide"


@dataclass(frozen=True)
class TemplatePackage:
    file_name: str
    data: bytes
    entries: Tuple[str, ...]


Job = Tuple[str, Callable[[], bytes]]


def archive_name(request: TemplateRequest) -> str:
    # Header-safe ASCII only; the name travels in Content-Disposition
    binding = re.sub(r"[^A-Za-z0-9_.-]", "", request.binding_name)
    return f"Template_{binding}_{request.package_type}.zip"


def _cover_jobs(geometry: CoverGeometry, policy: ResolutionPolicy, assets: AssetBundle) -> List[Job]:
    renderers = [CoverPdfRenderer(assets), CoverPsdRenderer(assets), CoverIdmlRenderer()]
    return [(f"{COVER_DIR}/{r.file_name}", _bind(r, geometry, policy)) for r in renderers]


def _interior_jobs(interior: InteriorGeometry, policy: ResolutionPolicy, assets: AssetBundle,
                   binding_name: str) -> List[Job]:
    renderers = [
        InteriorDocxRenderer(binding_name),
        InteriorPdfRenderer(assets, binding_name),
        InteriorIdmlRenderer(binding_name),
    ]
    return [(f"{INTERIOR_DIR}/{r.file_name}", _bind(r, interior, policy)) for r in renderers]


def _bind(renderer, geometry, policy: ResolutionPolicy) -> Callable[[], bytes]:
    return lambda: renderer.render(geometry, policy)


async def _run(name: str, job: Callable[[], bytes]) -> Tuple[str, bytes]:
    try:
        data = await asyncio.to_thread(job)
    except Exception as e:
        logger.error("Generating %s failed: %s", name, e)
        raise GenerationError(name, e) from e
    logger.info("Generated %s (%d bytes)", name, len(data))
    return name, data


def _zip(files: List[Tuple[str, bytes]]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in files:
            zf.writestr(name, data)
    return buf.getvalue()


async def generate_package(request: TemplateRequest, settings: Optional[Settings] = None,
                           generated_at: Optional[datetime] = None) -> TemplatePackage:
    """Build the zip archive for a request."""
    settings = settings or Settings()
    logger.info("Template package '%s' requested for binding '%s'", request.package_type, request.binding_name)

    # Invalid requests fail here, before any format work starts
    geometry = derive_cover_geometry(request) if request.includes_cover else None
    interior = derive_interior_geometry(request) if request.includes_interior else None
    assets = load_assets(settings)
    policy = ResolutionPolicy.from_settings(settings)

    jobs: List[Job] = []
    if geometry is not None:
        jobs += _cover_jobs(geometry, policy, assets)
    if interior is not None:
        jobs += _interior_jobs(interior, policy, assets, request.binding_name)

    rendered = await asyncio.gather(*(_run(name, job) for name, job in jobs))

    summary = generate_summary(request, geometry, interior, generated_at or datetime.now(timezone.utc))
    files = [(SUMMARY_FILE, summary.encode("utf-8"))] + list(rendered)
    if assets.guide_bytes is not None:
        files.append((f"{GUIDE_DIR}/{assets.guide_name}", assets.guide_bytes))

    name = archive_name(request)
    logger.info("Zipped %d files into %s", len(files), name)
    return TemplatePackage(file_name=name, data=_zip(files), entries=tuple(n for n, _ in files))


def generate_package_sync(request: TemplateRequest, settings: Optional[Settings] = None) -> TemplatePackage:
    """Blocking wrapper for the CLI."""
    return asyncio.run(generate_package(request, settings))
