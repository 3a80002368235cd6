"""Image loading for digit portraits.

Reads an image with Pillow, scales it to fit the requested grid while keeping
its aspect ratio, and reduces it to one grayscale intensity per pixel by
averaging the RGB channels.  The result is a ``rows x cols`` uint8 array
ready for :meth:`digit_sequence.DigitSequence.from_pixels`.
"""

from typing import Optional

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError


class ImageLoadError(OSError):
    pass


def gray_palette(levels: int) -> Image.Image:
    """Palette image with ``levels`` evenly spaced grays."""
    if not 2 <= levels <= 256:
        raise ValueError(f"levels must be in [2, 256], got {levels}")
    grays = [round(i * 255 / (levels - 1)) for i in range(levels)]
    grays += [grays[-1]] * (256 - levels)
    palette = Image.new("P", (1, 1))
    palette.putpalette([g for g in grays for _ in range(3)])
    return palette


def to_grayscale(img: Image.Image) -> np.ndarray:
    """Average of the RGB channels, as uint8."""
    rgb = np.asarray(img.convert("RGB"), dtype=np.uint16)
    return (rgb.sum(axis=2) // 3).astype(np.uint8)


def dither(gray: np.ndarray, levels: int) -> np.ndarray:
    """Floyd–Steinberg dither ``gray`` down to ``levels`` shades."""
    img = Image.fromarray(gray).convert("RGB")
    quantized = img.quantize(palette=gray_palette(levels),
                             dither=Image.Dither.FLOYDSTEINBERG)
    return np.asarray(quantized.convert("L"), dtype=np.uint8)


def load_grayscale(path: str, width: int, height: int,
                   levels: Optional[int] = None) -> np.ndarray:
    """Load ``path`` scaled to fit ``width x height`` as grayscale pixels.

    The returned array may be smaller than ``height x width`` along one axis
    because the aspect ratio is kept; callers take the grid size from
    ``array.shape``.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
    try:
        with Image.open(path) as src:
            img = ImageOps.contain(src.convert("RGB"), (width, height))
    except FileNotFoundError:
        raise ImageLoadError(f"Unable to read image: '{path}'") from None
    except (UnidentifiedImageError, OSError) as e:
        raise ImageLoadError(f"Unable to decode image: '{path}' ({e})") from e

    gray = to_grayscale(img)
    if levels is not None:
        gray = dither(gray, levels)
    return gray
