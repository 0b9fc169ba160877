import logging
from typing import Sequence

import numpy as np

logging.basicConfig(level=logging.DEBUG)


def solid(width: int, height: int, rgba: Sequence[int]) -> np.ndarray:
    """Buffer filled with a single color."""
    buffer = np.empty((height, width, 4), dtype=np.uint8)
    buffer[:, :] = rgba
    return buffer


def pixels(rows: Sequence[Sequence[Sequence[int]]]) -> np.ndarray:
    """Buffer from nested lists of RGBA tuples, one list per row."""
    return np.array(rows, dtype=np.uint8)


def random_buffer(
    width: int = 8, height: int = 8, seed: int = 0, opaque: bool = False
) -> np.ndarray:
    rng = np.random.default_rng(seed)
    buffer = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    if opaque:
        buffer[:, :, 3] = 255
    return buffer


def lightness(buffer: np.ndarray) -> np.ndarray:
    color = buffer[:, :, :3].astype(np.float32)
    return (color.max(axis=2) + color.min(axis=2)) / 2.0
