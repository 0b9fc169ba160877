"""Utility functions for composite operations."""

from typing import Tuple

import numpy as np
from numpy.typing import NDArray

# (height, width, 4) uint8 RGBA array.
PixelBuffer = NDArray[np.uint8]

BBox = Tuple[int, int, int, int]


def new_buffer(width: int, height: int) -> PixelBuffer:
    """Allocate a fully transparent buffer."""
    return np.zeros((height, width, 4), dtype=np.uint8)


def check_buffer(buffer: np.ndarray) -> None:
    """Raise ValueError unless ``buffer`` is a (height, width, 4) uint8 array."""
    if not isinstance(buffer, np.ndarray):
        raise ValueError("Expected ndarray, got %s" % type(buffer).__name__)
    if buffer.dtype != np.uint8 or buffer.ndim != 3 or buffer.shape[2] != 4:
        raise ValueError(
            "Expected (height, width, 4) uint8 buffer, got %s %s"
            % (buffer.dtype, buffer.shape)
        )


def to_uint8(values: NDArray[np.floating]) -> PixelBuffer:
    """Round to nearest and clamp 0-255 floats into 8 bits."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def divide(a: NDArray[np.floating], b: NDArray[np.floating]) -> NDArray[np.floating]:
    """Safe division, where the divisor is zero the result is zero."""
    with np.errstate(divide="ignore", invalid="ignore"):
        c = np.true_divide(a, b)
        c[~np.isfinite(c)] = 0.0
    return c


def clip(x: NDArray[np.floating]) -> NDArray[np.floating]:
    """Clip between [0, 1]."""
    return np.clip(x, 0.0, 1.0)


def intersect(a: BBox, b: BBox) -> BBox:
    """Calculate intersection of two bounding boxes."""
    inter = (max(a[0], b[0]), max(a[1], b[1]), min(a[2], b[2]), min(a[3], b[3]))
    if inter[0] >= inter[2] or inter[1] >= inter[3]:
        return (0, 0, 0, 0)
    return inter


def paste(view: PixelBuffer, bbox: BBox, values: PixelBuffer) -> PixelBuffer:
    """Copy ``values`` placed at ``bbox`` into ``view``, clipped to the view."""
    viewport = (0, 0, view.shape[1], view.shape[0])
    inter = intersect(viewport, bbox)
    if inter == (0, 0, 0, 0):
        return view

    b = (inter[0] - bbox[0], inter[1] - bbox[1], inter[2] - bbox[0], inter[3] - bbox[1])
    view[inter[1] : inter[3], inter[0] : inter[2], :] = values[b[1] : b[3], b[0] : b[2], :]
    return view
