"""
Pydantic schemas for the conversion API.

Field names follow the JSON contract (camelCase on the wire) via aliases.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pdf_api.config import get


class ImageFormat(str, Enum):
    """Output image formats."""
    PNG = "png"
    JPG = "jpg"
    JPEG = "jpeg"

    @property
    def is_jpeg(self) -> bool:
        return self in (ImageFormat.JPG, ImageFormat.JPEG)

    @property
    def mime_type(self) -> str:
        return "image/jpeg" if self.is_jpeg else "image/png"


# =============================================================================
# Request
# =============================================================================

class ConvertRequest(BaseModel):
    """PDF to image conversion request."""
    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(..., min_length=1, description="Source PDF URL")
    format: ImageFormat = Field(
        default_factory=lambda: ImageFormat(get("render", "default_format")),
        description="Output format: png, jpg or jpeg",
    )
    quality: int = Field(
        default_factory=lambda: get("render", "default_quality"),
        ge=1,
        le=100,
        description="JPEG quality (ignored for PNG)",
    )
    scale: float = Field(
        default_factory=lambda: get("render", "default_scale"),
        gt=0,
        description="Zoom factor, 1.0 renders at 72 dpi",
    )
    max_pages: Optional[int] = Field(
        None,
        ge=0,
        alias="maxPages",
        description="Render at most this many pages (null or 0 renders all)",
    )

    @field_validator("format", mode="before")
    @classmethod
    def normalize_format(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("scale")
    @classmethod
    def validate_scale(cls, v: float) -> float:
        max_scale = get("render", "max_scale")
        if v > max_scale:
            raise ValueError(f"scale must be at most {max_scale}")
        return v


# =============================================================================
# Response
# =============================================================================

class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PageImage(_CamelModel):
    """A single rendered page."""
    page: int = Field(..., ge=1, description="1-based page number")
    data_url: str = Field(..., alias="dataUrl")
    width: int
    height: int


class ConversionMetadata(_CamelModel):
    """Echo of the request parameters plus completion time."""
    source_url: str = Field(..., alias="sourceUrl")
    format: str
    scale: float
    processed_at: datetime = Field(..., alias="processedAt")


class ConversionData(_CamelModel):
    """Payload of a successful conversion."""
    total_pages: int = Field(..., alias="totalPages")
    rendered_pages: int = Field(..., alias="renderedPages")
    pages: List[PageImage] = Field(default_factory=list)
    metadata: ConversionMetadata


class ConvertResponse(BaseModel):
    """Successful conversion envelope."""
    success: bool = True
    data: ConversionData


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Failure envelope shared by every endpoint."""
    success: bool = False
    error: ErrorDetail


class ServiceInfo(BaseModel):
    """Static service description."""
    name: str
    version: str
    status: str
    endpoints: dict[str, str]
