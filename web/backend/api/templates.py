"""
Template API endpoints

Generate template packages and preview the derived geometry.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from bindery.config.settings import Settings
from bindery.geometry.cover import derive_cover_geometry
from bindery.geometry.interior import derive_interior_geometry
from bindery.models import TemplateRequest
from bindery.packaging import generate_package
from web.backend.api.deps import get_settings

router = APIRouter()


@router.post("/generate")
async def generate_template(request: TemplateRequest, settings: Settings = Depends(get_settings)):
    """
    Generate a template package.

    Returns a zip with the summary plus the cover and/or interior files
    selected by ``packageType``.
    """
    package = await generate_package(request, settings)
    return Response(
        content=package.data,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{package.file_name}"'},
    )


@router.post("/geometry")
async def template_geometry(request: TemplateRequest):
    """Derived cover and interior geometry, in inches with the origin at the bottom-left."""
    result = {"success": True}
    if request.includes_cover:
        result["cover"] = derive_cover_geometry(request).as_dict()
    if request.includes_interior:
        result["interior"] = derive_interior_geometry(request).as_dict()
    return result
