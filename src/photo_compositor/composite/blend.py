"""
Blend mode implementations.

Blend functions take the backdrop color ``Cb`` and the source color ``Cs`` as
float32 arrays normalized to [0, 1] and return the blended color.
:py:func:`blend` merges two pixel buffers with one of them.
"""

import logging
from typing import Union

import numpy as np

from photo_compositor.composite.utils import PixelBuffer, check_buffer, clip, to_uint8
from photo_compositor.constants import BlendMode

logger = logging.getLogger(__name__)


# Separable blend functions
def normal(Cb, Cs):
    return Cs


def multiply(Cb, Cs):
    return Cb * Cs


def screen(Cb, Cs):
    return Cb + Cs - (Cb * Cs)


def overlay(Cb, Cs):
    return hard_light(Cs, Cb)


def darken(Cb, Cs):
    return np.minimum(Cb, Cs)


def lighten(Cb, Cs):
    return np.maximum(Cb, Cs)


def color_dodge(Cb, Cs):
    B = np.zeros_like(Cb, dtype=np.float32)
    B[Cs == 1] = 1
    B[Cb == 0] = 0
    index = (Cs != 1) & (Cb != 0)
    B[index] = np.minimum(1, Cb[index] / (1 - Cs[index]))
    return B


def color_burn(Cb, Cs):
    B = np.zeros_like(Cb, dtype=np.float32)
    B[Cb == 1] = 1
    index = (Cb != 1) & (Cs != 0)
    B[index] = 1 - np.minimum(1, (1 - Cb[index]) / Cs[index])
    return B


def hard_light(Cb, Cs):
    # For 8-bit sources, Cs > 0.5 is the same as Cs >= 128 / 255.
    index = Cs > 0.5
    B = multiply(Cb, 2 * Cs)
    B[index] = screen(Cb, 2 * Cs - 1)[index]
    return B


def soft_light(Cb, Cs):
    index = Cs > 0.5
    B = 2 * Cb * Cs + Cb * Cb * (1 - 2 * Cs)
    B[index] = (2 * Cb * (1 - Cs) + np.sqrt(Cb) * (2 * Cs - 1))[index]
    return B


def difference(Cb, Cs):
    return np.abs(Cb - Cs)


def exclusion(Cb, Cs):
    return Cb + Cs - 2 * Cb * Cs


def average(Cb, Cs):
    """
    Stand-in for the non-separable modes (hue, saturation, color and
    luminosity). This is not HSL blending; it is kept because existing
    renders depend on it.
    """
    return (Cb + Cs) / 2


"""Blend function table."""
BLEND_FUNC = {
    BlendMode.NORMAL: normal,
    BlendMode.MULTIPLY: multiply,
    BlendMode.SCREEN: screen,
    BlendMode.OVERLAY: overlay,
    BlendMode.DARKEN: darken,
    BlendMode.LIGHTEN: lighten,
    BlendMode.COLOR_DODGE: color_dodge,
    BlendMode.COLOR_BURN: color_burn,
    BlendMode.HARD_LIGHT: hard_light,
    BlendMode.SOFT_LIGHT: soft_light,
    BlendMode.DIFFERENCE: difference,
    BlendMode.EXCLUSION: exclusion,
    BlendMode.HUE: average,
    BlendMode.SATURATION: average,
    BlendMode.COLOR: average,
    BlendMode.LUMINOSITY: average,
}


def blend(
    base: PixelBuffer, top: PixelBuffer, mode: Union[BlendMode, str]
) -> PixelBuffer:
    """
    Merge ``top`` over ``base`` and return a new buffer.

    The blended color replaces the base color and the alpha becomes
    ``a1 + a2 - a1 * a2``, but only where the top pixel has non-zero alpha.
    Elsewhere the base pixel is passed through unchanged. Neither input is
    modified.

    :param base: Accumulated composite, (height, width, 4) uint8.
    :param top: Rasterized layer of the same shape.
    :param mode: :py:class:`~photo_compositor.constants.BlendMode` or its value.
    :raises ValueError: On mismatched shapes or an unknown blend mode.
    """
    check_buffer(base)
    check_buffer(top)
    if base.shape != top.shape:
        raise ValueError(
            "Buffer dimensions do not match: %s vs %s" % (base.shape, top.shape)
        )
    blend_fn = BLEND_FUNC[BlendMode(mode)]

    Cb = base[:, :, :3].astype(np.float32) / 255.0
    Cs = top[:, :, :3].astype(np.float32) / 255.0
    alpha_b = base[:, :, 3].astype(np.float32) / 255.0
    alpha_s = top[:, :, 3].astype(np.float32) / 255.0

    color = to_uint8(255.0 * clip(blend_fn(Cb, Cs)))
    alpha = to_uint8(255.0 * (alpha_b + alpha_s - alpha_b * alpha_s))

    result = base.copy()
    index = top[:, :, 3] > 0
    result[index, :3] = color[index]
    result[index, 3] = alpha[index]
    return result
