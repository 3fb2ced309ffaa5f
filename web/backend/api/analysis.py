"""
PDF analysis API endpoints

Inspect a book PDF sent inline (base64) or by link.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from bindery.analysis.pdf_analyzer import analyze_pdf_base64, analyze_pdf_url
from bindery.config.settings import Settings
from bindery.errors import InvalidRequestError
from web.backend.api.deps import get_settings

router = APIRouter()


class AnalyzePdfRequest(BaseModel):
    """Exactly one of ``pdfBase64`` or ``url``"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    pdf_base64: Optional[str] = Field(None, description="PDF file contents, base64 or data URL")
    url: Optional[str] = Field(None, description="Direct link to a PDF")


@router.post("/pdf")
async def analyze_pdf(body: AnalyzePdfRequest, settings: Settings = Depends(get_settings)):
    if bool(body.pdf_base64) == bool(body.url):
        raise InvalidRequestError("Provide either pdfBase64 or url")
    if body.pdf_base64:
        analysis = await asyncio.to_thread(analyze_pdf_base64, body.pdf_base64)
    else:
        analysis = await asyncio.to_thread(analyze_pdf_url, body.url, settings.fetch_timeout_s)
    return {"success": True, "analysis": analysis.as_dict()}
