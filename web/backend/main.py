"""
FastAPI backend for Bindery Templates

Generates print template packages and inspects book PDFs for the order form.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bindery import __version__
from bindery.errors import (
    InvalidRequestError,
    PdfAnalysisError,
    RemoteFetchError,
    TemplateError,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Bindery Templates API",
    description="Print-ready cover and interior templates for books",
    version=__version__,
)

# CORS middleware - allow frontend to communicate
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite default port
        "http://localhost:3000",  # Alternative React port
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


def _status_for(exc: TemplateError) -> int:
    if isinstance(exc, (InvalidRequestError, PdfAnalysisError)):
        return 400
    if isinstance(exc, RemoteFetchError):
        return 502
    # GenerationError, AssetLoadError and anything else is a server fault
    return 500


@app.exception_handler(TemplateError)
async def template_error_handler(request: Request, exc: TemplateError):
    status = _status_for(exc)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    content = {"success": False, "error": str(exc)}
    if isinstance(exc, RemoteFetchError):
        content["kind"] = exc.kind
    return JSONResponse(status_code=status, content=content)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        messages.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(status_code=422, content={"success": False, "error": "; ".join(messages)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Return unexpected errors as JSON."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": str(exc)},
    )


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Bindery Templates API",
        "version": __version__,
        "docs": "/docs",
        "status": "running"
    }


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy"}


from web.backend.api import analysis, templates  # noqa: E402

app.include_router(templates.router, prefix="/api/templates", tags=["templates"])
app.include_router(analysis.router, prefix="/api/analysis", tags=["analysis"])

if __name__ == "__main__":
    import uvicorn

    from bindery.config.settings import Settings, setup_logging

    setup_logging(Settings.from_env().log_level)
    print("🚀 Starting Bindery Templates API...")
    print("📚 API Documentation: http://localhost:8000/docs")
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
    )
