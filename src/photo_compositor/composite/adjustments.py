"""
Tonal adjustments.

:py:func:`apply_adjustments` runs brightness, contrast, saturation, opacity
and hue on a pixel buffer, in that order. The color math works on 0-255
values; each step sees the output of the previous one.
"""

import logging
from typing import TYPE_CHECKING

import numpy as np

from photo_compositor.composite.utils import PixelBuffer, check_buffer, to_uint8

if TYPE_CHECKING:
    from photo_compositor.api.layers import Adjustments

logger = logging.getLogger(__name__)


def apply_adjustments(buffer: PixelBuffer, adjustments: "Adjustments") -> PixelBuffer:
    """
    Apply ``adjustments`` to ``buffer`` in place and return it.

    Contrast must stay within [-100, 100]; the contrast factor is singular at
    259.
    """
    check_buffer(buffer)
    if adjustments.is_identity():
        return buffer

    color = buffer[:, :, :3].astype(np.float32)
    color += adjustments.brightness * 2.55
    color = contrast_factor(adjustments.contrast) * (color - 128.0) + 128.0

    gray = (
        0.2989 * color[:, :, 0:1] + 0.587 * color[:, :, 1:2] + 0.114 * color[:, :, 2:3]
    )
    factor = 1.0 + adjustments.saturation / 100.0
    color = gray + factor * (color - gray)

    buffer[:, :, :3] = to_uint8(color)
    buffer[:, :, 3] = to_uint8(buffer[:, :, 3] * (adjustments.opacity / 100.0))

    if adjustments.hue != 0:
        rotated = rotate_hue(buffer[:, :, :3].astype(np.float32) / 255.0, adjustments.hue)
        buffer[:, :, :3] = to_uint8(255.0 * rotated)
    return buffer


def contrast_factor(contrast: float) -> float:
    return 259.0 * (contrast + 255.0) / (255.0 * (259.0 - contrast))


def rotate_hue(color: np.ndarray, degrees: float) -> np.ndarray:
    """
    Rotate the HSL hue of normalized RGB ``color`` by ``degrees``.

    Lightness and saturation are preserved; gray pixels are unchanged.
    """
    r, g, b = color[:, :, 0], color[:, :, 1], color[:, :, 2]
    c_max = np.max(color, axis=2)
    c_min = np.min(color, axis=2)
    delta = c_max - c_min
    lightness = (c_max + c_min) / 2.0

    hue = np.zeros_like(c_max)
    chromatic = delta > 0
    with np.errstate(divide="ignore", invalid="ignore"):
        hue_r = np.mod((g - b) / delta, 6.0)
        hue_g = (b - r) / delta + 2.0
        hue_b = (r - g) / delta + 4.0
    index = chromatic & (c_max == r)
    hue[index] = hue_r[index]
    index = chromatic & (c_max != r) & (c_max == g)
    hue[index] = hue_g[index]
    index = chromatic & (c_max != r) & (c_max != g)
    hue[index] = hue_b[index]
    hue = np.mod(hue * 60.0 + degrees, 360.0)

    # Half the chroma: equals S * min(L, 1 - L) in HSL terms.
    a = delta / 2.0
    result = np.empty_like(color)
    for i, n in enumerate((0.0, 8.0, 4.0)):
        k = np.mod(n + hue / 30.0, 12.0)
        result[:, :, i] = lightness - a * np.maximum(
            -1.0, np.minimum(np.minimum(k - 3.0, 9.0 - k), 1.0)
        )
    return result
