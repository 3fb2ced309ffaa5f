# Physical unit conversions. All geometry is computed in inches;
# each output format converts with convert() at the very end.

from enum import Enum


POINTS_PER_INCH = 72.0
TWIPS_PER_INCH = 1440  # 1/20 pt, word-processor page setup
DEFAULT_DPI = 300


class Unit(str, Enum):
    INCH = "inch"
    POINT = "point"
    PIXEL = "pixel"
    TWIP = "twip"


def per_inch(unit: Unit, dpi: int = DEFAULT_DPI) -> float:
    if unit == Unit.INCH:
        return 1.0
    if unit == Unit.POINT:
        return POINTS_PER_INCH
    if unit == Unit.PIXEL:
        if dpi <= 0:
            raise ValueError(f"DPI must be positive, got {dpi}")
        return float(dpi)
    if unit == Unit.TWIP:
        return float(TWIPS_PER_INCH)
    raise ValueError(f"Unknown unit '{unit}'")


def convert(inches: float, unit: Unit, dpi: int = DEFAULT_DPI) -> float:
    """Convert a length in inches to ``unit`` without rounding."""
    return inches * per_inch(unit, dpi)


def to_inches(value: float, unit: Unit, dpi: int = DEFAULT_DPI) -> float:
    return value / per_inch(unit, dpi)


def inches_to_points(inches: float) -> float:
    return convert(inches, Unit.POINT)


def points_to_inches(points: float) -> float:
    return to_inches(points, Unit.POINT)


def inches_to_pixels(inches: float, dpi: int = DEFAULT_DPI) -> int:
    # Raster formats snap to whole pixels
    return int(round(convert(inches, Unit.PIXEL, dpi)))


def inches_to_twips(inches: float) -> int:
    return int(round(convert(inches, Unit.TWIP)))
