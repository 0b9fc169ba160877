"""
Document module.

:py:class:`Document` holds the canvas size, the layer stack and the active
layer. It is a frozen value: every edit returns a new document and leaves the
old one untouched, so a composite may keep reading a snapshot while edits
continue::

    document = Document.new()
    document = document.add_layer(background, name="Background")
    document = document.add_layer(texture, name="Texture")
    document = document.set_layer_blend_mode(document.active_id, "overlay")
    document = document.move_layer_down(document.active_id)
    image = document.topil()

Stack order: ``layers`` is ordered bottom-to-top. Index 0 is the bottom
layer, the last layer is drawn on top of everything else. "Up" moves a layer
towards the end of the tuple, "down" towards the start.
"""

import logging
from typing import Any, Callable, Optional, Tuple, Union

from attrs import define, evolve, field
from PIL import Image

from photo_compositor.api import pil_io
from photo_compositor.api.layers import Adjustments, Layer
from photo_compositor.composite import composite
from photo_compositor.composite.utils import PixelBuffer
from photo_compositor.constants import DEFAULT_MAX_SIZE, BlendMode, FilterKind

logger = logging.getLogger(__name__)


def _to_size(value: Optional[Tuple[int, int]]) -> Optional[Tuple[int, int]]:
    if value is None:
        return None
    width, height = value
    if width <= 0 or height <= 0:
        raise ValueError("Invalid canvas size: %r" % (value,))
    return (int(width), int(height))


@define(frozen=True)
class Document:
    """
    Layer stack with canvas size and active layer.

    .. py:attribute:: size

        Canvas (width, height), set when the first image is added.

    .. py:attribute:: layers

        Tuple of :py:class:`~photo_compositor.api.layers.Layer`, bottom first.

    .. py:attribute:: active_id

        Id of the layer receiving edits, or None.

    .. py:attribute:: max_size

        Bounding box the canvas is fitted into.
    """

    size: Optional[Tuple[int, int]] = field(default=None, converter=_to_size)
    layers: Tuple[Layer, ...] = field(default=(), converter=tuple)
    active_id: Optional[str] = None
    max_size: Tuple[int, int] = field(default=DEFAULT_MAX_SIZE, converter=tuple)

    def __attrs_post_init__(self) -> None:
        ids = [layer.id for layer in self.layers]
        if len(set(ids)) != len(ids):
            raise ValueError("Duplicate layer ids: %r" % ids)
        if self.active_id is not None and self.active_id not in ids:
            raise ValueError("Active layer %r is not in the stack" % self.active_id)

    @classmethod
    def new(
        cls,
        size: Optional[Tuple[int, int]] = None,
        max_size: Tuple[int, int] = DEFAULT_MAX_SIZE,
    ) -> "Document":
        """Create an empty document."""
        return cls(size=size, max_size=max_size)

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self):
        return iter(self.layers)

    def __getitem__(self, key: int) -> Layer:
        return self.layers[key]

    @property
    def width(self) -> int:
        return self.size[0] if self.size else 0

    @property
    def height(self) -> int:
        return self.size[1] if self.size else 0

    @property
    def layers_top_down(self) -> Tuple[Layer, ...]:
        """Layers in display order, top layer first."""
        return tuple(reversed(self.layers))

    @property
    def active_layer(self) -> Optional[Layer]:
        if self.active_id is None:
            return None
        return self.get_layer(self.active_id)

    def get_layer(self, layer_id: str) -> Layer:
        """
        :raises KeyError: If no layer has ``layer_id``.
        """
        return self.layers[self.index(layer_id)]

    def index(self, layer_id: str) -> int:
        for i, layer in enumerate(self.layers):
            if layer.id == layer_id:
                return i
        raise KeyError(layer_id)

    def add_layer(
        self, image: Optional[PixelBuffer], name: Optional[str] = None, **kwargs: Any
    ) -> "Document":
        """
        Add a new layer on top of the stack and make it active.

        The first image also fixes the canvas size. The new layer is centered
        on the canvas unless ``position`` is given; other keyword arguments are
        passed to :py:class:`~photo_compositor.api.layers.Layer`.
        """
        size = self.size
        if size is None:
            if image is None:
                raise ValueError("The first layer needs an image to size the canvas")
            size = pil_io.fit_canvas_size(
                image.shape[1], image.shape[0], *self.max_size
            )
            logger.debug("Canvas size %dx%d" % size)
        if name is None:
            name = "Layer %d" % (len(self.layers) + 1)
        kwargs.setdefault("position", (size[0] / 2.0, size[1] / 2.0))
        layer = Layer(image=image, name=name, **kwargs)
        logger.debug("Adding %s" % (layer,))
        return evolve(
            self, size=size, layers=self.layers + (layer,), active_id=layer.id
        )

    def remove_layer(self, layer_id: str) -> "Document":
        """Remove a layer; the active pointer is cleared if it pointed there."""
        index = self.index(layer_id)
        layers = self.layers[:index] + self.layers[index + 1 :]
        active_id = None if self.active_id == layer_id else self.active_id
        return evolve(self, layers=layers, active_id=active_id)

    def update_layer(self, layer_id: str, **changes: Any) -> "Document":
        """
        Replace a layer by a copy with ``changes`` applied.

        The id never changes, and the image can only be set on a layer that
        was added without one.
        """
        if "id" in changes:
            raise ValueError("Layer id is immutable")
        index = self.index(layer_id)
        if "image" in changes and self.layers[index].has_image():
            raise ValueError("Layer %r already has an image" % layer_id)
        layer = evolve(self.layers[index], **changes)
        layers = self.layers[:index] + (layer,) + self.layers[index + 1 :]
        return evolve(self, layers=layers)

    def set_active_layer(self, layer_id: Optional[str]) -> "Document":
        if layer_id is not None:
            self.index(layer_id)
        return evolve(self, active_id=layer_id)

    def toggle_layer_visibility(self, layer_id: str) -> "Document":
        return self.update_layer(layer_id, visible=not self.get_layer(layer_id).visible)

    def set_layer_blend_mode(
        self, layer_id: str, blend_mode: Union[BlendMode, str]
    ) -> "Document":
        return self.update_layer(layer_id, blend_mode=blend_mode)

    def set_layer_filter(
        self, layer_id: str, filter: Union[FilterKind, str]
    ) -> "Document":
        return self.update_layer(layer_id, filter=filter)

    def set_layer_adjustments(
        self, layer_id: str, adjustments: Adjustments
    ) -> "Document":
        return self.update_layer(layer_id, adjustments=adjustments)

    def set_layer_opacity(self, layer_id: str, opacity: int) -> "Document":
        return self.update_layer(layer_id, opacity=opacity)

    def set_layer_position(self, layer_id: str, x: float, y: float) -> "Document":
        return self.update_layer(layer_id, position=(x, y))

    def set_layer_scale(self, layer_id: str, scale: float) -> "Document":
        return self.update_layer(layer_id, scale=scale)

    def reset_layer(self, layer_id: str) -> "Document":
        """Drop the filter and the adjustments of a layer."""
        return self.update_layer(
            layer_id, filter=FilterKind.NORMAL, adjustments=Adjustments()
        )

    def move_layer_up(self, layer_id: str) -> "Document":
        """Swap a layer with the one above it. The top layer stays put."""
        index = self.index(layer_id)
        if index == len(self.layers) - 1:
            return self
        return self._swap(index, index + 1)

    def move_layer_down(self, layer_id: str) -> "Document":
        """Swap a layer with the one below it. The bottom layer stays put."""
        index = self.index(layer_id)
        if index == 0:
            return self
        return self._swap(index - 1, index)

    def _swap(self, i: int, j: int) -> "Document":
        layers = list(self.layers)
        layers[i], layers[j] = layers[j], layers[i]
        return evolve(self, layers=layers)

    def composite(
        self, layer_filter: Optional[Callable[[Layer], bool]] = None
    ) -> PixelBuffer:
        """
        Composite the visible layers into a (height, width, 4) uint8 array.

        :raises ValueError: If the canvas size is not known yet.
        """
        if self.size is None:
            raise ValueError("Document has no canvas size; add an image first")
        return composite(self.layers, self.size, layer_filter=layer_filter)

    def topil(self, layer_filter: Optional[Callable[[Layer], bool]] = None) -> Image.Image:
        """Composite and return an RGBA PIL Image."""
        return pil_io.to_pil(self.composite(layer_filter))

    def save(self, fp: pil_io.PathOrFile, format: Optional[str] = None) -> None:
        """Composite and write the result, the same pixels as :py:meth:`topil`."""
        pil_io.save_image(self.composite(), fp, format=format)

    def __repr__(self) -> str:
        return "%s(size=%s layers=%d active=%r)" % (
            self.__class__.__name__,
            "%dx%d" % self.size if self.size else None,
            len(self.layers),
            self.active_id,
        )
