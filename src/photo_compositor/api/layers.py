"""
Layer module.

Layers are frozen value records. Editing a layer means building a new one
with :py:func:`attrs.evolve`, which is what
:py:class:`~photo_compositor.api.document.Document` does for every update::

    layer = Layer(image=pixels, name="Background")
    faded = attrs.evolve(layer, opacity=50, blend_mode="multiply")

Common layer properties:

- ``id``: Unique identifier, never changes
- ``name``: Display label
- ``visible``: Visibility flag
- ``image``: RGBA uint8 pixels, or None while the image is loading
- ``filter``: :py:class:`~photo_compositor.constants.FilterKind`
- ``adjustments``: :py:class:`Adjustments`
- ``blend_mode``: :py:class:`~photo_compositor.constants.BlendMode`
- ``opacity``: Opacity (0-100), overrides ``adjustments.opacity``
- ``position``: Canvas coordinate of the image center
- ``scale``: Size factor, 1.0 is the native size
"""

import logging
import numbers
import uuid
from typing import Optional, Tuple

import numpy as np
from attrs import define, evolve, field
from attrs.validators import instance_of

from photo_compositor.composite.utils import PixelBuffer, check_buffer
from photo_compositor.constants import (
    BRIGHTNESS_RANGE,
    CONTRAST_RANGE,
    HUE_RANGE,
    OPACITY_RANGE,
    SATURATION_RANGE,
    BlendMode,
    FilterKind,
)
from photo_compositor.validators import in_, positive, range_

logger = logging.getLogger(__name__)


def _integral(*bounds):
    return [instance_of(numbers.Integral), range_(*bounds)]


@define(frozen=True)
class Adjustments:
    """
    Tonal adjustments of a layer.

    .. py:attribute:: brightness

        Added to each color channel as ``brightness * 2.55``, [-100, 100].

    .. py:attribute:: contrast

        [-100, 100].

    .. py:attribute:: saturation

        [-100, 100]; -100 gives gray.

    .. py:attribute:: hue

        Hue rotation in degrees, [-180, 180].

    .. py:attribute:: opacity

        Alpha scale in percent, [0, 100].
    """

    brightness: int = field(default=0, validator=_integral(*BRIGHTNESS_RANGE))
    contrast: int = field(default=0, validator=_integral(*CONTRAST_RANGE))
    saturation: int = field(default=0, validator=_integral(*SATURATION_RANGE))
    hue: int = field(default=0, validator=_integral(*HUE_RANGE))
    opacity: int = field(default=100, validator=_integral(*OPACITY_RANGE))

    def is_identity(self) -> bool:
        return self == Adjustments()


def _new_id() -> str:
    return uuid.uuid4().hex


def _freeze_image(image: Optional[np.ndarray]) -> Optional[PixelBuffer]:
    if image is None:
        return None
    check_buffer(image)
    if image.flags.writeable:
        image = image.copy()
        image.setflags(write=False)
    return image


def _to_position(value) -> Tuple[float, float]:
    x, y = value
    return (float(x), float(y))


@define(frozen=True)
class Layer:
    """
    One editable image in the stack.

    The image array is copied and made read-only on construction, and it is
    ignored by ``==``; two layers compare equal when all their parameters do.
    """

    image: Optional[PixelBuffer] = field(
        default=None, converter=_freeze_image, eq=False, repr=False
    )
    name: str = field(default="", validator=instance_of(str))
    id: str = field(factory=_new_id, validator=instance_of(str))
    visible: bool = field(default=True, converter=bool)
    filter: FilterKind = field(
        default=FilterKind.NORMAL, converter=FilterKind, validator=in_(FilterKind)
    )
    adjustments: Adjustments = field(
        factory=Adjustments, validator=instance_of(Adjustments)
    )
    blend_mode: BlendMode = field(
        default=BlendMode.NORMAL, converter=BlendMode, validator=in_(BlendMode)
    )
    opacity: int = field(default=100, validator=_integral(*OPACITY_RANGE))
    position: Tuple[float, float] = field(default=(0.0, 0.0), converter=_to_position)
    scale: float = field(default=1.0, converter=float, validator=positive)

    @property
    def width(self) -> int:
        """Native width of the image, 0 without an image."""
        return 0 if self.image is None else self.image.shape[1]

    @property
    def height(self) -> int:
        """Native height of the image, 0 without an image."""
        return 0 if self.image is None else self.image.shape[0]

    def has_image(self) -> bool:
        return self.image is not None

    def is_visible(self) -> bool:
        return self.visible

    def is_renderable(self) -> bool:
        """Visible and holding an image."""
        return self.visible and self.image is not None

    @property
    def effective_adjustments(self) -> Adjustments:
        """Adjustments with the layer opacity in place of their own."""
        if self.adjustments.opacity == self.opacity:
            return self.adjustments
        return evolve(self.adjustments, opacity=self.opacity)

    def __repr__(self) -> str:
        return "%s(%r name=%r size=%dx%d%s)" % (
            self.__class__.__name__,
            self.id,
            self.name,
            self.width,
            self.height,
            "" if self.visible else " hidden",
        )
