"""Image codec and cost helpers."""

from __future__ import annotations

import io
import re
from pathlib import Path
from typing import Any, Protocol

from PIL import Image

from pixcache.errors.exceptions import CodecError

_SCALE_PATTERN = re.compile(r"@([23])x\.")


class ImageCodec(Protocol):
    """Turns raw bytes into a renderable image and back."""

    def decode(self, data: bytes) -> Any: ...

    def encode(self, image: Any) -> bytes: ...


class PillowCodec:
    """Default codec backed by Pillow. Encodes to PNG unless told otherwise."""

    def __init__(self, format: str = "PNG") -> None:
        self._format = format

    def decode(self, data: bytes) -> Image.Image:
        try:
            img = Image.open(io.BytesIO(data))
            # Force pixel decoding now, not lazily on first use
            img.load()
        except Exception as e:
            # Every decoder failure surfaces as CodecError
            raise CodecError(f"Cannot decode image: {e}", operation="decode", original=e) from e
        return img

    def encode(self, image: Image.Image) -> bytes:
        buf = io.BytesIO()
        try:
            image.save(buf, format=self._format)
        except (OSError, ValueError, KeyError) as e:
            raise CodecError(f"Cannot encode image: {e}", operation="encode", original=e) from e
        return buf.getvalue()


def scale_for_key(key: str) -> float:
    """Display scale implied by a retina suffix in the key (``@2x.``, ``@3x.``)."""
    match = _SCALE_PATTERN.search(key)
    return float(match.group(1)) if match else 1.0


def image_cost(image: Any, scale: float = 1.0) -> float:
    """Memory cost: height × width × scale. Unsized objects cost nothing."""
    size = getattr(image, "size", None)
    if not size or len(size) != 2:
        return 0.0
    width, height = size
    return float(height) * float(width) * scale


def load_image_bytes(path: str | Path) -> bytes:
    """Read an image file's raw bytes."""
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")
    return path.read_bytes()
