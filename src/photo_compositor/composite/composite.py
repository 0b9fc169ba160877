"""Composite implementation for layer rendering and blending."""

import logging
from typing import TYPE_CHECKING, Callable, Iterable, Optional, Tuple, Union

import numpy as np
from PIL import Image

from photo_compositor.composite.adjustments import apply_adjustments
from photo_compositor.composite.blend import blend
from photo_compositor.composite.filters import apply_filter
from photo_compositor.composite.rasterize import rasterize, resize_image
from photo_compositor.composite.utils import PixelBuffer, check_buffer, new_buffer
from photo_compositor.constants import BlendMode, FilterKind

if TYPE_CHECKING:
    from photo_compositor.api.layers import Adjustments, Layer

logger = logging.getLogger(__name__)


def composite(
    layers: Iterable["Layer"],
    size: Tuple[int, int],
    layer_filter: Optional[Callable[["Layer"], bool]] = None,
    image: Optional[PixelBuffer] = None,
    filter: Union[FilterKind, str] = FilterKind.NORMAL,
    adjustments: Optional["Adjustments"] = None,
) -> PixelBuffer:
    """
    Composite layers and return the RGBA buffer.

    Layers are folded bottom-to-top: ``layers`` must list the bottom layer
    first. Invisible layers and layers without an image are skipped.

    Args:
        layers: Layers in bottom-to-top order
        size: Canvas (width, height)
        layer_filter: Optional callable(layer) -> bool to further restrict
            which of the visible layers are drawn
        image: Single image drawn when there are no layers at all. It is
            stretched to the canvas, then ``filter`` and ``adjustments`` apply
        filter: Filter for the single image
        adjustments: Adjustments for the single image

    Returns:
        (height, width, 4) uint8 ndarray

    Examples:
        >>> buffer = composite(document.layers, document.size)
        >>> # Only composite the bottom two layers
        >>> ids = {layer.id for layer in document.layers[:2]}
        >>> buffer = composite(document.layers, document.size,
        ...                    layer_filter=lambda l: l.id in ids and l.visible)
    """
    layers = list(layers)
    if not layers and image is not None:
        return _composite_image(image, size, filter, adjustments)

    compositor = Compositor(size, layer_filter)
    for layer in layers:
        compositor.apply(layer)
    return compositor.finish()


def composite_pil(
    layers: Iterable["Layer"],
    size: Tuple[int, int],
    layer_filter: Optional[Callable[["Layer"], bool]] = None,
) -> Image.Image:
    """Composite layers and return an RGBA PIL Image."""
    return Image.fromarray(composite(layers, size, layer_filter))


def _composite_image(
    image: PixelBuffer,
    size: Tuple[int, int],
    filter: Union[FilterKind, str],
    adjustments: Optional["Adjustments"],
) -> PixelBuffer:
    logger.debug("No layers, drawing the single image")
    check_buffer(image)
    buffer = resize_image(image, size)
    apply_filter(buffer, filter)
    if adjustments is not None:
        apply_adjustments(buffer, adjustments)
    return buffer


class Compositor(object):
    """Composite context.

    Example::

        compositor = Compositor(document.size)
        for layer in document.layers:
            compositor.apply(layer)
        buffer = compositor.finish()
    """

    def __init__(
        self,
        size: Tuple[int, int],
        layer_filter: Optional[Callable[["Layer"], bool]] = None,
    ):
        self._size = (int(size[0]), int(size[1]))
        self._layer_filter = layer_filter
        self._buffer = new_buffer(self.width, self.height)

    def apply(self, layer: "Layer") -> None:
        logger.debug("Compositing %s" % (layer,))

        if not layer.is_visible():
            logger.debug("Ignore hidden %s" % (layer,))
            return
        if layer.image is None:
            logger.debug("Ignore %s without image" % (layer,))
            return
        if self._layer_filter is not None and not self._layer_filter(layer):
            logger.debug("Ignore %s" % (layer,))
            return

        self._apply_source(rasterize(layer, self._size), layer.blend_mode)

    def _apply_source(self, source: PixelBuffer, blend_mode: BlendMode) -> None:
        if not np.any(self._buffer):
            # Nothing drawn yet; blending against zeros would darken the layer.
            logger.debug("Empty backdrop, taking the layer as-is")
            self._buffer = source
            return
        self._buffer = blend(self._buffer, source, blend_mode)

    def finish(self) -> PixelBuffer:
        return self._buffer

    @property
    def size(self) -> Tuple[int, int]:
        return self._size

    @property
    def width(self) -> int:
        return self._size[0]

    @property
    def height(self) -> int:
        return self._size[1]
