"""
Layer rasterization.

A layer is rendered into a canvas-sized buffer in three steps: the image is
scaled and placed with its center at the layer position, then the filter
runs, then the adjustments.
"""

import logging
import math
from typing import TYPE_CHECKING, Tuple

import numpy as np
from PIL import Image

from photo_compositor.composite.adjustments import apply_adjustments
from photo_compositor.composite.filters import apply_filter
from photo_compositor.composite.utils import BBox, PixelBuffer, new_buffer, paste
from photo_compositor.constants import FilterKind

if TYPE_CHECKING:
    from photo_compositor.api.layers import Layer

logger = logging.getLogger(__name__)


def rasterize(layer: "Layer", size: Tuple[int, int]) -> PixelBuffer:
    """
    Render ``layer`` into a new buffer of ``size`` (width, height).

    Visibility is not checked here; the caller decides which layers to draw.

    :raises ValueError: If the layer has no image.
    """
    if layer.image is None:
        raise ValueError("Layer %r has no image" % layer.id)
    width, height = size
    buffer = new_buffer(width, height)
    image = scale_image(layer.image, layer.scale)
    paste(buffer, placement(layer.position, image.shape[1], image.shape[0]), image)

    if layer.filter != FilterKind.NORMAL:
        apply_filter(buffer, layer.filter)
    return apply_adjustments(buffer, layer.effective_adjustments)


def scale_image(image: PixelBuffer, scale: float) -> PixelBuffer:
    """Resize ``image`` by ``scale`` with bilinear resampling."""
    if scale == 1.0:
        return image
    width = max(1, _round_half_up(image.shape[1] * scale))
    height = max(1, _round_half_up(image.shape[0] * scale))
    logger.debug(
        "Scaling %dx%d to %dx%d" % (image.shape[1], image.shape[0], width, height)
    )
    resized = Image.fromarray(image).resize(
        (width, height), Image.Resampling.BILINEAR
    )
    return np.asarray(resized, dtype=np.uint8)


def resize_image(image: PixelBuffer, size: Tuple[int, int]) -> PixelBuffer:
    """Stretch ``image`` to ``size`` (width, height)."""
    if (image.shape[1], image.shape[0]) == tuple(size):
        return image.copy()
    resized = Image.fromarray(image).resize(
        tuple(size), Image.Resampling.BILINEAR
    )
    return np.array(resized, dtype=np.uint8)


def placement(center: Tuple[float, float], width: int, height: int) -> BBox:
    """Bounding box of a ``width`` x ``height`` image centered at ``center``."""
    left = _round_half_up(center[0] - width / 2.0)
    top = _round_half_up(center[1] - height / 2.0)
    return (left, top, left + width, top + height)


def _round_half_up(value: float) -> int:
    # .5 rounds up: each 1-pixel step of the center moves the image 1 pixel.
    return int(math.floor(value + 0.5))
