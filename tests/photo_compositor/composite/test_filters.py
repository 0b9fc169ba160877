import logging

import numpy as np
import pytest

from photo_compositor.composite.filters import FILTER_FUNC, apply_filter
from photo_compositor.constants import FilterKind

from ..utils import pixels, random_buffer, solid

logger = logging.getLogger(__name__)


def _edge(width=16, height=8, left=0, right=255):
    buffer = solid(width, height, (left, left, left, 255))
    buffer[:, width // 2 :, :3] = right
    return buffer


def test_filter_table_covers_all_but_normal():
    assert set(FILTER_FUNC) == set(FilterKind) - {FilterKind.NORMAL}


def test_normal_is_noop(buffer):
    expected = buffer.copy()
    result = apply_filter(buffer, FilterKind.NORMAL)
    assert result is buffer
    assert np.array_equal(result, expected)


@pytest.mark.parametrize("kind", list(FilterKind))
def test_filter_in_place(kind, buffer):
    result = apply_filter(buffer, kind)
    assert result is buffer
    assert result.dtype == np.uint8
    assert result.shape == (6, 8, 4)


def test_invert_is_involution(buffer):
    expected = buffer.copy()
    apply_filter(buffer, "invert")
    assert not np.array_equal(buffer, expected)
    apply_filter(buffer, "invert")
    assert np.array_equal(buffer, expected)


def test_invert_keeps_alpha():
    buffer = pixels([[(0, 100, 255, 17)]])
    apply_filter(buffer, FilterKind.INVERT)
    assert tuple(buffer[0, 0]) == (255, 155, 0, 17)


def test_grayscale():
    buffer = pixels([[(10, 20, 31, 200), (255, 0, 0, 255)]])
    apply_filter(buffer, FilterKind.GRAYSCALE)
    assert tuple(buffer[0, 0]) == (20, 20, 20, 200)
    assert tuple(buffer[0, 1]) == (85, 85, 85, 255)


def test_sepia():
    buffer = pixels([[(50, 100, 150, 255), (255, 255, 255, 255)]])
    apply_filter(buffer, FilterKind.SEPIA)
    assert tuple(buffer[0, 0]) == (125, 111, 87, 255)
    assert tuple(buffer[0, 1]) == (255, 255, 239, 255)


def test_vintage():
    buffer = pixels([[(100, 100, 100, 255), (200, 200, 200, 255)]])
    apply_filter(buffer, FilterKind.VINTAGE)
    assert tuple(buffer[0, 0]) == (110, 90, 70, 255)
    assert tuple(buffer[0, 1]) == (200, 170, 140, 255)


def test_cool_and_warm():
    buffer = pixels([[(10, 20, 240, 255), (10, 20, 30, 255)]])
    apply_filter(buffer, FilterKind.COOL)
    assert tuple(buffer[0, 0]) == (10, 20, 255, 255)
    assert tuple(buffer[0, 1]) == (10, 20, 60, 255)

    buffer = pixels([[(240, 250, 0, 255), (10, 20, 30, 255)]])
    apply_filter(buffer, FilterKind.WARM)
    assert tuple(buffer[0, 0]) == (255, 255, 0, 255)
    assert tuple(buffer[0, 1]) == (40, 35, 30, 255)


def test_blur_softens_edges():
    buffer = _edge()
    apply_filter(buffer, FilterKind.BLUR)
    middle = buffer[4, 6:10, 0]
    assert np.all(middle > 0)
    assert np.all(middle < 255)
    assert np.all(np.diff(buffer[4, :, 0].astype(int)) >= 0)
    assert np.all(buffer[:, :, 3] == 255)


def test_blur_uniform_unchanged():
    buffer = solid(10, 10, (30, 60, 90, 255))
    apply_filter(buffer, FilterKind.BLUR)
    assert np.array_equal(buffer, solid(10, 10, (30, 60, 90, 255)))


def test_blur_transparent_surroundings_do_not_darken():
    buffer = solid(20, 20, (0, 0, 0, 0))
    buffer[8:12, 8:12] = (255, 0, 0, 255)
    apply_filter(buffer, FilterKind.BLUR)
    visible = buffer[:, :, 3] > 0
    assert visible.sum() > 16
    assert buffer[10, 10, 3] < 255
    assert np.all(np.abs(buffer[visible, 0].astype(int) - 255) <= 1)
    assert np.all(buffer[visible, 1:3] <= 1)


def test_sharpen_increases_edge_contrast():
    buffer = _edge(left=100, right=150)
    apply_filter(buffer, FilterKind.SHARPEN)
    row = buffer[4, :, 0]
    assert row.min() < 100
    assert row.max() > 150
    assert row[0] == 100
    assert row[-1] == 150
    assert np.all(buffer[:, :, 3] == 255)


def test_sharpen_keeps_alpha():
    buffer = random_buffer(seed=11)
    alpha = buffer[:, :, 3].copy()
    apply_filter(buffer, FilterKind.SHARPEN)
    assert np.array_equal(buffer[:, :, 3], alpha)


def test_unknown_filter(buffer):
    with pytest.raises(ValueError):
        apply_filter(buffer, "emboss")


def test_sharpen_uniform_image_unchanged():
    buffer = solid(12, 10, (100, 100, 100, 255))
    apply_filter(buffer, FilterKind.SHARPEN)
    assert np.array_equal(buffer, solid(12, 10, (100, 100, 100, 255)))


def test_sharpen_transparent_surroundings_are_not_an_edge():
    buffer = solid(20, 20, (0, 0, 0, 0))
    buffer[7:13, 7:13] = (100, 100, 100, 255)
    apply_filter(buffer, FilterKind.SHARPEN)
    assert np.all(buffer[7:13, 7:13] == (100, 100, 100, 255))
    assert not np.any(buffer[:7])
