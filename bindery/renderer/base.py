"""
Renderer contract.

Every output format takes the canonical geometry and a resolution policy and
returns the finished file as bytes. Renderers own their document object for
the duration of one call and never modify the geometry they are given.
"""

from dataclasses import dataclass
from typing import Protocol

from bindery.config.settings import Settings
from bindery.config.units import DEFAULT_DPI
from bindery.geometry.interior import InteriorGeometry
from bindery.geometry.shapes import CoverGeometry


@dataclass(frozen=True)
class ResolutionPolicy:
    dpi: int = DEFAULT_DPI

    @classmethod
    def from_settings(cls, settings: Settings) -> "ResolutionPolicy":
        return cls(dpi=settings.dpi)


class CoverRenderer(Protocol):
    file_name: str

    def render(self, geometry: CoverGeometry, policy: ResolutionPolicy) -> bytes:
        ...


class InteriorRenderer(Protocol):
    file_name: str

    def render(self, geometry: InteriorGeometry, policy: ResolutionPolicy) -> bytes:
        ...
