"""Image inspection helpers for consumers of cached payloads."""

from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel


class ImageInfo(BaseModel):
    format: str
    width: int
    height: int
    mode: str


def describe_image(data: bytes) -> ImageInfo | None:
    """Return basic image metadata, or None if the bytes aren't an image."""
    if not data:
        return None
    try:
        with Image.open(io.BytesIO(data)) as img:
            return ImageInfo(
                format=img.format or "unknown",
                width=img.width,
                height=img.height,
                mode=img.mode,
            )
    except (UnidentifiedImageError, OSError, ValueError):
        return None
