"""
Stylistic filters.

Each filter receives the RGBA pixels as a float32 array in the 0-255 range
and returns the filtered pixels; :py:func:`apply_filter` rounds the result
back into the caller's buffer. Filters are looked up by
:py:class:`~photo_compositor.constants.FilterKind` in ``FILTER_FUNC``.
"""

import logging
from typing import Union

import numpy as np
from scipy import ndimage
from skimage import filters as skfilters

from photo_compositor.composite.utils import PixelBuffer, check_buffer, divide, to_uint8
from photo_compositor.constants import (
    BLUR_SIGMA,
    SHARPEN_AMOUNT,
    SHARPEN_RADIUS,
    FilterKind,
)
from photo_compositor.registry import new_registry

logger = logging.getLogger(__name__)

FILTER_FUNC, register = new_registry(attribute="kind")

SEPIA_MATRIX = np.array(
    [
        [0.393, 0.769, 0.189],
        [0.349, 0.686, 0.168],
        [0.272, 0.534, 0.131],
    ],
    dtype=np.float32,
)


def apply_filter(buffer: PixelBuffer, kind: Union[FilterKind, str]) -> PixelBuffer:
    """
    Apply the filter ``kind`` to ``buffer`` in place and return it.

    ``normal`` leaves the buffer untouched.
    """
    check_buffer(buffer)
    kind = FilterKind(kind)
    if kind == FilterKind.NORMAL:
        return buffer
    logger.debug("Applying %s filter" % kind.value)
    values = FILTER_FUNC[kind](buffer.astype(np.float32))
    buffer[:] = to_uint8(values)
    return buffer


@register(FilterKind.GRAYSCALE)
def grayscale(values):
    values[:, :, :3] = values[:, :, :3].mean(axis=2, keepdims=True)
    return values


@register(FilterKind.SEPIA)
def sepia(values):
    values[:, :, :3] = np.minimum(255, values[:, :, :3] @ SEPIA_MATRIX.T)
    return values


@register(FilterKind.INVERT)
def invert(values):
    values[:, :, :3] = 255 - values[:, :, :3]
    return values


@register(FilterKind.VINTAGE)
def vintage(values):
    values[:, :, 0] = np.minimum(255, values[:, :, 0] * 0.9 + 20)
    values[:, :, 1] = np.minimum(255, values[:, :, 1] * 0.8 + 10)
    values[:, :, 2] = np.minimum(255, values[:, :, 2] * 0.7)
    return values


@register(FilterKind.COOL)
def cool(values):
    values[:, :, 2] = np.minimum(255, values[:, :, 2] + 30)
    return values


@register(FilterKind.WARM)
def warm(values):
    values[:, :, 0] = np.minimum(255, values[:, :, 0] + 30)
    values[:, :, 1] = np.minimum(255, values[:, :, 1] + 15)
    return values


@register(FilterKind.BLUR)
def blur(values, sigma=BLUR_SIGMA):
    """
    Gaussian blur over all four channels.

    Colors are blurred premultiplied by alpha so transparent surroundings do
    not bleed black into the edges.
    """
    alpha = values[:, :, 3:4] / 255.0
    premultiplied = values[:, :, :3] * alpha
    sigmas = (sigma, sigma, 0)
    premultiplied = ndimage.gaussian_filter(premultiplied, sigmas, mode="nearest")
    alpha = ndimage.gaussian_filter(alpha, sigmas, mode="nearest")
    values[:, :, :3] = divide(premultiplied, alpha)
    values[:, :, 3:4] = 255.0 * alpha
    return values


@register(FilterKind.SHARPEN)
def sharpen(values, radius=SHARPEN_RADIUS, amount=SHARPEN_AMOUNT):
    """
    Unsharp mask on the color channels; alpha is kept.

    The blurred reference is computed premultiplied and normalized by the
    blurred alpha, so the edge against transparent pixels is not sharpened.
    """
    alpha = values[:, :, 3:4] / 255.0
    color = values[:, :, :3]
    premultiplied = skfilters.gaussian(
        color * alpha, sigma=radius, preserve_range=True, channel_axis=2
    )
    coverage = skfilters.gaussian(
        alpha, sigma=radius, preserve_range=True, channel_axis=2
    )
    blurred = divide(premultiplied, coverage)
    values[:, :, :3] = np.where(alpha > 0, color + amount * (color - blurred), color)
    return values
