"""
High-level API: layer records, the layer stack and image I/O.
"""

from photo_compositor.api.document import Document
from photo_compositor.api.layers import Adjustments, Layer
from photo_compositor.api.pil_io import ImageInfo, load_image

__all__ = [
    "Adjustments",
    "Document",
    "ImageInfo",
    "Layer",
    "load_image",
]
