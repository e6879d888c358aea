"""
Pydantic Models and Schemas
===========================

Core data models for responsive image requests, generated variants and
resize options.
"""

from typing import List
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, PositiveInt


class _Missing:
    """Marker for an argument the caller did not supply at all."""

    _instance = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


# Enums
class OutputFormat(str, Enum):
    """Raster formats variants can be encoded as."""
    JPEG = "jpeg"
    WEBP = "webp"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def pil_format(self) -> str:
        return self.value.upper()


class MarkupPolicy(str, Enum):
    """Markup strategies for a set of variants."""
    PICTURE = "picture"
    SRCSET = "srcset"


# Request Models
class ImageRequest(BaseModel):
    """A single responsive image directive, validated."""
    source_path: str = Field(..., min_length=1, description="Path of the source raster")
    alt_text: str = Field(..., description="Alternative text; empty string is allowed")
    target_widths: List[PositiveInt] = Field(
        ..., min_length=1, description="Requested widths in the order given"
    )
    css_classes: str = Field("", description="Classes for the outer image element")
    link_url: str = Field("", description="Anchor href; no anchor when empty")
    link_target: str = Field("_self", description="Anchor target window token")

    model_config = ConfigDict(frozen=True)


class ResizeOptions(BaseModel):
    """Options passed to the resize primitive."""
    output_format: OutputFormat = Field(OutputFormat.JPEG, description="Output raster format")
    output_dir: Path = Field(..., description="Directory variants are written to")
    url_path: str = Field("/images/", description="URL prefix of written variants")
    quality: int = Field(80, ge=1, le=100, description="Encoder quality (1-100)")
    overwrite_existing: bool = Field(False, description="Re-encode existing outputs")


# Result Models
class ImageVariant(BaseModel):
    """One resized variant produced for one requested width."""
    width: PositiveInt = Field(..., description="Requested width this variant answers")
    url: str = Field(..., description="Public URL of the generated file")
    output_path: Path = Field(..., description="Filesystem path of the generated file")
    pixel_width: PositiveInt = Field(..., description="Actual pixel width")
    pixel_height: PositiveInt = Field(..., description="Actual pixel height")
    format: OutputFormat = Field(..., description="Encoded raster format")

    model_config = ConfigDict(frozen=True)
