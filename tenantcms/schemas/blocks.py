"""
Page layout blocks.

A page body is an ordered list of blocks. Each block carries a
``block_type`` discriminator and a type-specific payload; rich text is
stored as opaque editor JSON.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


class _Block(BaseModel):
    block_name: str | None = None


class HeroBlock(_Block):
    block_type: Literal["hero"] = "hero"
    heading: str = Field(..., min_length=1)
    subheading: str | None = None
    image: int | None = Field(None, description="Hero background or featured image (media id)")
    cta_text: str | None = None
    cta_link: str | None = None


class ContentBlock(_Block):
    block_type: Literal["content"] = "content"
    content: dict[str, Any] | list[Any] | str
    width: Literal["narrow", "normal", "wide", "full"] = "normal"


class GalleryImage(BaseModel):
    image: int
    caption: str | None = None


class ImageGalleryBlock(_Block):
    block_type: Literal["image-gallery"] = "image-gallery"
    images: list[GalleryImage] = Field(..., min_length=1)
    columns: int = Field(3, ge=1, le=6)


class ButtonLink(BaseModel):
    text: str = Field(..., min_length=1)
    link: str = Field(..., min_length=1)


class OptionalButtonLink(BaseModel):
    text: str | None = None
    link: str | None = None


class CallToActionBlock(_Block):
    block_type: Literal["call-to-action"] = "call-to-action"
    heading: str = Field(..., min_length=1)
    description: str | None = None
    primary_button: ButtonLink
    secondary_button: OptionalButtonLink | None = None
    background_color: Literal["default", "primary", "secondary", "dark"] = "default"


LayoutBlock = Annotated[
    Union[HeroBlock, ContentBlock, ImageGalleryBlock, CallToActionBlock],
    Field(discriminator="block_type"),
]


def dump_layout(blocks: list[BaseModel] | None) -> list[dict[str, Any]]:
    """Serialize validated blocks for the JSON ``layout`` column."""
    return [block.model_dump(mode="json") for block in blocks or []]
