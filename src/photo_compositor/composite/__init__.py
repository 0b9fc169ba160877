"""
Composite module for layer rendering and blending.

This subpackage is the rendering engine: it turns a stack of layers into one
RGBA buffer. Buffers are ``(height, width, 4)`` uint8 NumPy arrays.

Key modules:

- :py:mod:`photo_compositor.composite.composite`: Pipeline over the layer stack
- :py:mod:`photo_compositor.composite.rasterize`: Renders one layer to the canvas
- :py:mod:`photo_compositor.composite.filters`: Stylistic filters (sepia, blur, ...)
- :py:mod:`photo_compositor.composite.adjustments`: Brightness, contrast, saturation, hue, opacity
- :py:mod:`photo_compositor.composite.blend`: Blend mode implementations

Example usage::

    from photo_compositor.composite import composite

    buffer = composite(document.layers, document.size)

Every call recomputes the whole stack. Layers are only read, so composites
of the same layers may run concurrently.
"""

from photo_compositor.composite.composite import composite, composite_pil

__all__ = [
    "composite",
    "composite_pil",
]
