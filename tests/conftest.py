"""Pytest configuration for photo-compositor tests."""

import numpy as np
import pytest

from .photo_compositor.utils import random_buffer, solid


@pytest.fixture
def buffer() -> np.ndarray:
    """Random RGBA buffer with varying alpha."""
    return random_buffer(8, 6, seed=1)


@pytest.fixture
def opaque_buffer() -> np.ndarray:
    return random_buffer(8, 6, seed=2, opaque=True)


@pytest.fixture
def red_square() -> np.ndarray:
    return solid(4, 4, (255, 0, 0, 255))
