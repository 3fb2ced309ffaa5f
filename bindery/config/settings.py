import logging
import os
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from bindery.config.units import DEFAULT_DPI


class Profile(BaseModel):
    dpi: int = DEFAULT_DPI
    fetch_timeout_s: float = 30.0


PRINT = Profile(dpi=300)
PROOF = Profile(dpi=150)

PROFILES: Dict[str, Profile] = {
    "print": PRINT,
    "proof": PROOF,
}


class Settings(BaseModel):
    """Runtime configuration for template generation."""

    dpi: int = Field(default=DEFAULT_DPI, gt=0, description="Raster resolution for layered cover files")
    font_regular: Optional[str] = Field(None, description="Path to a TTF used for labels")
    font_bold: Optional[str] = Field(None, description="Path to a bold TTF used for label values")
    logo: Optional[str] = Field(None, description="Logo image drawn on the interior title pages")
    guide: Optional[str] = Field(None, description="Production guide document added to packages")
    fetch_timeout_s: float = Field(default=30.0, gt=0, description="Timeout for remote PDF downloads")
    log_level: str = "INFO"

    @classmethod
    def from_profile(cls, name: str, **overrides) -> "Settings":
        if name not in PROFILES:
            raise ValueError(f"Unknown profile '{name}'. Choose from: {', '.join(PROFILES)}")
        profile = PROFILES[name]
        values = {"dpi": profile.dpi, "fetch_timeout_s": profile.fetch_timeout_s}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @classmethod
    def from_env(cls, profile: str = "print") -> "Settings":
        load_dotenv()
        return cls.from_profile(
            profile,
            dpi=_int_env("BINDERY_DPI"),
            font_regular=os.getenv("BINDERY_FONT_REGULAR"),
            font_bold=os.getenv("BINDERY_FONT_BOLD"),
            logo=os.getenv("BINDERY_LOGO"),
            guide=os.getenv("BINDERY_GUIDE"),
            fetch_timeout_s=_float_env("BINDERY_FETCH_TIMEOUT_S"),
            log_level=os.getenv("BINDERY_LOG_LEVEL"),
        )


def _int_env(name: str) -> Optional[int]:
    value = os.getenv(name)
    return int(value) if value else None


def _float_env(name: str) -> Optional[float]:
    value = os.getenv(name)
    return float(value) if value else None


_logging_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once; later calls only adjust the level."""
    global _logging_configured
    root = logging.getLogger()
    root.setLevel(level.upper())
    if _logging_configured:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    _logging_configured = True
