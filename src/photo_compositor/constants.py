"""
Various constants for photo_compositor
"""

from enum import Enum


class FilterKind(str, Enum):
    """
    Stylistic filters. Exactly one filter is active per layer.
    """

    NORMAL = "normal"
    GRAYSCALE = "grayscale"
    SEPIA = "sepia"
    INVERT = "invert"
    BLUR = "blur"
    VINTAGE = "vintage"
    COOL = "cool"
    WARM = "warm"
    SHARPEN = "sharpen"


class BlendMode(str, Enum):
    """
    Blend modes.

    Hue, saturation, color and luminosity are approximated by the average of
    the base and source colors, not by blending in HSL space.
    """

    NORMAL = "normal"
    MULTIPLY = "multiply"
    SCREEN = "screen"
    OVERLAY = "overlay"
    DARKEN = "darken"
    LIGHTEN = "lighten"
    COLOR_DODGE = "color-dodge"
    COLOR_BURN = "color-burn"
    HARD_LIGHT = "hard-light"
    SOFT_LIGHT = "soft-light"
    DIFFERENCE = "difference"
    EXCLUSION = "exclusion"
    HUE = "hue"
    SATURATION = "saturation"
    COLOR = "color"
    LUMINOSITY = "luminosity"


# Adjustment bounds, inclusive.
BRIGHTNESS_RANGE = (-100, 100)
CONTRAST_RANGE = (-100, 100)
SATURATION_RANGE = (-100, 100)
HUE_RANGE = (-180, 180)
OPACITY_RANGE = (0, 100)

# Bounding box the canvas is fitted into, (width, height).
DEFAULT_MAX_SIZE = (1280, 720)

# Standard deviation in pixels, equivalent of CSS blur(4px).
BLUR_SIGMA = 4.0

# Unsharp mask parameters.
SHARPEN_RADIUS = 2.0
SHARPEN_AMOUNT = 1.0

DEFAULT_EXPORT_NAME = "edited-image.png"
