"""
Request models for template generation

Defines the physical book description a template package is built from.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PackageType = Literal["all", "cover", "interior"]


class TemplateRequest(BaseModel):
    """Physical book dimensions plus binding method, all lengths in inches"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "bindingName": "Perfect Bind / Softcover",
                "packageType": "all",
                "pageCount": 200,
                "paperStock": "60# Uncoated",
                "trimWidth": 6.0,
                "trimHeight": 9.0,
                "spineWidth": 0.5,
                "bleed": 0.125,
                "safetyMargin": 0.375,
            }
        },
    )

    binding_name: str = Field(..., min_length=1, description="Binding method name, e.g. 'Perfect Bind / Softcover'")
    package_type: PackageType = Field(default="all", description="Which files to generate")
    book_title: Optional[str] = Field(None, description="Title printed on spine/page labels")
    page_count: int = Field(default=100, ge=1, description="Interior page count")
    paper_stock: str = Field(default="60# Uncoated", description="Paper stock identifier")
    trim_width: float = Field(..., gt=0, description="Trim width of a single panel")
    trim_height: float = Field(..., gt=0, description="Trim height of a single panel")
    spine_width: Optional[float] = Field(None, ge=0, description="Spine width")
    bleed: Optional[float] = Field(None, ge=0, description="Bleed beyond trim")
    wrap_amount: Optional[float] = Field(None, ge=0, description="Case-bind wrap beyond the board")
    board_width: Optional[float] = Field(None, gt=0, description="Case-bind board panel width (defaults to trim width)")
    board_height: Optional[float] = Field(None, gt=0, description="Case-bind board panel height (defaults to trim height)")
    safety_margin: Optional[float] = Field(None, ge=0, description="Single safety margin (legacy)")
    safety_margin_top_bottom: Optional[float] = Field(None, ge=0, description="Top and bottom safety margin")
    safety_margin_binding_edge: Optional[float] = Field(None, ge=0, description="Binding-edge safety margin")
    safety_margin_outside_edge: Optional[float] = Field(None, ge=0, description="Outside-edge safety margin")
    is_hardcover_coil_wire: Optional[bool] = Field(None, description="Hardcover flag for generic Coil / Wire-O")

    @property
    def includes_cover(self) -> bool:
        return self.package_type in ("all", "cover")

    @property
    def includes_interior(self) -> bool:
        return self.package_type in ("all", "interior")
