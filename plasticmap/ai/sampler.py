from __future__ import annotations

import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

# 200x200 keeps the cost flat for any upload size and still gives stable ratios.
DEFAULT_SAMPLE_SIZE: int = 200

_DECODE_FAILURES = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    ValueError,
)


class DecodeError(RuntimeError):
    """Raised when an upload cannot be decoded into pixels."""


@dataclass(frozen=True)
class PixelGrid:
    width: int
    height: int
    pixels: tuple[tuple[int, int, int], ...]

    def __len__(self) -> int:
        return len(self.pixels)


@dataclass
class PixelSampler:
    """Resample an arbitrary image onto a fixed square grid of RGB samples."""

    size: int = DEFAULT_SAMPLE_SIZE

    def sample(self, image: bytes | Image.Image) -> PixelGrid:
        if self.size <= 0:
            raise ValueError("Sample size must be positive")
        if isinstance(image, Image.Image):
            try:
                return self._resample(image)
            except _DECODE_FAILURES as exc:
                raise DecodeError(f"Unable to read image: {exc}") from exc
        if not image:
            raise DecodeError("Image payload is empty")
        try:
            with Image.open(io.BytesIO(image)) as img:
                img.load()
                return self._resample(img)
        except _DECODE_FAILURES as exc:
            raise DecodeError(f"Unable to decode image: {exc}") from exc

    def _resample(self, image: Image.Image) -> PixelGrid:
        rgb = image.convert("RGB").resize(
            (self.size, self.size), Image.Resampling.BILINEAR
        )
        pixels = tuple(tuple(p) for p in rgb.getdata())
        return PixelGrid(width=self.size, height=self.size, pixels=pixels)


__all__ = ["DEFAULT_SAMPLE_SIZE", "DecodeError", "PixelGrid", "PixelSampler"]
