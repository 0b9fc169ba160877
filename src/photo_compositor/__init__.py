"""
photo-compositor: layer compositing engine for photo editing.

This package renders an ordered stack of image layers, each with its own
placement, filter, tonal adjustments, blend mode and opacity, into a single
RGBA pixel buffer.

Basic usage::

    from photo_compositor import Document
    from photo_compositor.api.pil_io import load_image

    image, info = load_image('photo.png')
    document = Document.new().add_layer(image, name=info.filename)
    overlay, _ = load_image('texture.png')
    document = document.add_layer(overlay)
    document = document.set_layer_blend_mode(document.active_id, 'multiply')

    # Export to PNG
    document.save('edited-image.png')

Architecture:

- :py:mod:`photo_compositor.api`: Layer records, the layer stack and image I/O
- :py:mod:`photo_compositor.composite`: Pixel transforms and blending engine
"""

from photo_compositor.api.document import Document
from photo_compositor.api.layers import Adjustments, Layer
from photo_compositor.constants import BlendMode, FilterKind
from photo_compositor.version import __version__

__all__ = [
    "Adjustments",
    "BlendMode",
    "Document",
    "FilterKind",
    "Layer",
    "__version__",
]
