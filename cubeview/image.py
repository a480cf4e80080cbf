"""RGBA pixel buffers, colour helpers and sprite sheets."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image as _PILImage

PathLike = Union[str, Path]

_EPSILON = 1e-9
_MASK = 0xFFFFFFFF


def color(r: int, g: int, b: int, a: int) -> int:
    """Pack RGBA components into one 32-bit value, red in the high byte."""
    return ((r << 24) | (g << 16) | (b << 8) | a) & _MASK


def is_equal(a: float, b: float) -> bool:
    """Tell whether two floats differ by less than 1e-9."""
    return abs(a - b) < _EPSILON


def load_png(path: PathLike) -> "Image":
    """Load a PNG file into an :class:`Image`."""
    return Image.from_png(path)


class Image:
    """A width x height grid of packed RGBA pixels."""

    def __init__(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"invalid image size {width}x{height}")
        self.pixels = np.zeros((height, width), dtype=np.uint32)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"pixel ({x}, {y}) outside {self.width}x{self.height} image"
            )

    def get(self, x: int, y: int) -> int:
        """Return the packed colour at (x, y)."""
        self._check(x, y)
        return int(self.pixels[y, x])

    def put(self, x: int, y: int, value: int) -> None:
        """Set the packed colour at (x, y)."""
        self._check(x, y)
        self.pixels[y, x] = value & _MASK

    def fill(self, value: int) -> None:
        """Fill the whole image with one colour."""
        self.pixels.fill(value & _MASK)

    def clear(self) -> None:
        """Make every pixel fully transparent black."""
        self.pixels.fill(0)

    def clear_region(self, x: int, y: int, width: int, height: int) -> None:
        """Zero a rectangle, clipped to the image bounds."""
        x0, y0 = max(x, 0), max(y, 0)
        x1 = min(x + width, self.width)
        y1 = min(y + height, self.height)
        if x1 > x0 and y1 > y0:
            self.pixels[y0:y1, x0:x1] = 0

    def blit(
        self,
        src: "Image",
        width: int,
        height: int,
        dest_x: int = 0,
        dest_y: int = 0,
        src_x: int = 0,
        src_y: int = 0,
    ) -> None:
        """Copy a width x height block of ``src`` into this image.

        The block starts at (src_x, src_y) in ``src`` and lands at
        (dest_x, dest_y) here; parts falling outside either image are skipped.
        """
        shift_x = max(0, -dest_x, -src_x)
        shift_y = max(0, -dest_y, -src_y)
        dx, sx = dest_x + shift_x, src_x + shift_x
        dy, sy = dest_y + shift_y, src_y + shift_y
        w = min(width - shift_x, self.width - dx, src.width - sx)
        h = min(height - shift_y, self.height - dy, src.height - sy)
        if w <= 0 or h <= 0:
            return
        self.pixels[dy:dy + h, dx:dx + w] = src.pixels[sy:sy + h, sx:sx + w]

    @classmethod
    def from_png(cls, path: PathLike) -> "Image":
        """Decode a PNG file; raises OSError when it cannot be read."""
        with _PILImage.open(path) as picture:
            rgba = np.asarray(picture.convert("RGBA"), dtype=np.uint8)
        height, width = rgba.shape[:2]
        image = cls(width, height)
        channels = rgba.astype(np.uint32)
        image.pixels = (
            (channels[..., 0] << 24)
            | (channels[..., 1] << 16)
            | (channels[..., 2] << 8)
            | channels[..., 3]
        ).astype(np.uint32)
        return image


@dataclass
class Sprite:
    """A sprite sheet cut into equally sized frames."""

    frames: tuple[tuple[Image, ...], ...]
    frame_w: int
    frame_h: int
    row_count: int
    col_count: int

    @classmethod
    def from_image(cls, image: Image, row_count: int, col_count: int) -> "Sprite":
        """Cut ``image`` into row_count x col_count frames."""
        if row_count < 1 or col_count < 1:
            raise ValueError("a sprite needs at least one row and one column")
        frame_w = image.width // col_count
        frame_h = image.height // row_count
        rows = []
        for row in range(row_count):
            frames = []
            for col in range(col_count):
                frame = Image(frame_w, frame_h)
                frame.blit(
                    image, frame_w, frame_h,
                    src_x=col * frame_w, src_y=row * frame_h,
                )
                frames.append(frame)
            rows.append(tuple(frames))
        return cls(tuple(rows), frame_w, frame_h, row_count, col_count)

    @classmethod
    def load(cls, path: PathLike, row_count: int, col_count: int) -> "Sprite":
        """Load a PNG sprite sheet and cut it into frames."""
        return cls.from_image(Image.from_png(path), row_count, col_count)

    def frame(self, index: int) -> Image:
        """Return the frame at a linear index, counted row by row."""
        if not 0 <= index < self.row_count * self.col_count:
            raise IndexError(f"frame index {index} out of range")
        return self.frames[index // self.col_count][index % self.col_count]