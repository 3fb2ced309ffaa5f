"""API routes for Bindery Templates"""

from web.backend.api import analysis, templates

__all__ = ["analysis", "templates"]
