"""Canonical cover and interior layout geometry"""

from bindery.geometry.cover import derive_cover_geometry
from bindery.geometry.interior import derive_interior_geometry

__all__ = ["derive_cover_geometry", "derive_interior_geometry"]
