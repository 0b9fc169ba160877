"""
PIL IO module.

Decoding images into pixel buffers and encoding buffers back to files. This
is the only place that touches the file system.
"""

import logging
import os
from typing import IO, Optional, Tuple, Union

import numpy as np
from attrs import define
from PIL import Image

from photo_compositor.composite.utils import PixelBuffer, check_buffer

logger = logging.getLogger(__name__)

PathOrFile = Union[str, "os.PathLike[str]", IO[bytes]]


@define(frozen=True)
class ImageInfo:
    """
    Information about a loaded image.

    .. py:attribute:: width
    .. py:attribute:: height
    .. py:attribute:: size

        Encoded size in bytes, 0 when unknown.

    .. py:attribute:: filename
    """

    width: int
    height: int
    size: int = 0
    filename: str = ""


def load_image(fp: PathOrFile) -> Tuple[PixelBuffer, ImageInfo]:
    """
    Decode an image file into an RGBA buffer.

    :param fp: File name or binary file object.
    :raises PIL.UnidentifiedImageError: If ``fp`` is not an image.
    """
    filename, size = _describe(fp)
    with Image.open(fp) as image:
        logger.debug("Loaded %s: %s %dx%d" % (filename, image.mode, *image.size))
        array = to_array(image)
    info = ImageInfo(
        width=array.shape[1], height=array.shape[0], size=size, filename=filename
    )
    return array, info


def to_array(image: Image.Image) -> PixelBuffer:
    """Convert a PIL Image of any mode to an RGBA buffer."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return np.array(image, dtype=np.uint8)


def to_pil(buffer: PixelBuffer) -> Image.Image:
    """Convert an RGBA buffer to a PIL Image."""
    check_buffer(buffer)
    return Image.fromarray(buffer)


def save_image(
    buffer: PixelBuffer, fp: PathOrFile, format: Optional[str] = None
) -> None:
    """Encode ``buffer`` to ``fp``; the format follows the file extension."""
    image = to_pil(buffer)
    if format is None and not isinstance(fp, (str, os.PathLike)):
        format = "PNG"
    if (format or "").upper() in ("JPEG", "JPG") or str(fp).lower().endswith(
        (".jpg", ".jpeg")
    ):
        # JPEG has no alpha channel.
        image = image.convert("RGB")
    image.save(fp, format=format)


def fit_canvas_size(
    width: int, height: int, max_width: int, max_height: int
) -> Tuple[int, int]:
    """
    Fit ``width`` x ``height`` inside the bounding box, keeping the aspect
    ratio. Sizes already inside the box are returned as they are.
    """
    if width <= 0 or height <= 0:
        raise ValueError("Invalid image size: %dx%d" % (width, height))
    max_width = min(max_width, width)
    max_height = min(max_height, height)
    w, h = float(width), float(height)
    if w > max_width:
        h *= max_width / w
        w = max_width
    if h > max_height:
        w *= max_height / h
        h = max_height
    return max(1, int(round(w))), max(1, int(round(h)))


def _describe(fp: PathOrFile) -> Tuple[str, int]:
    if isinstance(fp, (str, os.PathLike)):
        return os.path.basename(os.fspath(fp)), os.path.getsize(fp)
    name = getattr(fp, "name", "")
    size = 0
    if hasattr(fp, "seek") and hasattr(fp, "tell"):
        position = fp.tell()
        fp.seek(0, os.SEEK_END)
        size = fp.tell() - position
        fp.seek(position)
    return os.path.basename(str(name)) if name else "", size
