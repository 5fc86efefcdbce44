import numpy as np
import pytest

from stencil_map.core_types import StencilInputError
from stencil_map.utils import box_blur


def _naive_box_blur(src, radius):
    h, w = src.shape
    win = 2 * radius + 1
    tmp = np.zeros((h, w), dtype=np.float64)
    for y in range(h):
        for x in range(w):
            tmp[y, x] = sum(src[y, min(max(x + k, 0), w - 1)] for k in range(-radius, radius + 1)) / win
    out = np.zeros((h, w), dtype=np.float64)
    for y in range(h):
        for x in range(w):
            out[y, x] = sum(tmp[min(max(y + k, 0), h - 1), x] for k in range(-radius, radius + 1)) / win
    return out


def test_radius_zero_is_identity_copy(rng):
    src = rng.uniform(0, 255, size=(9, 13)).astype(np.float32)
    out = box_blur(src, 0)
    np.testing.assert_array_equal(out, src)
    out[0, 0] = -1.0
    assert src[0, 0] != -1.0


def test_shape_and_range_preserved(rng):
    src = rng.uniform(10, 200, size=(17, 23)).astype(np.float32)
    for radius in (1, 3, 8, 40):
        out = box_blur(src, radius)
        assert out.shape == src.shape
        assert out.dtype == np.float32
        assert out.min() >= src.min()
        assert out.max() <= src.max()


def test_flat_plane_stays_exactly_flat():
    src = np.full((20, 30), 127.3, dtype=np.float32)
    for radius in (1, 5, 16):
        np.testing.assert_array_equal(box_blur(src, radius), src)


def test_edges_repeat_nearest_pixel():
    src = np.array([[0.0, 0.0, 0.0, 9.0]], dtype=np.float32)
    out = box_blur(src, 1)
    np.testing.assert_allclose(out, [[0.0, 0.0, 3.0, 6.0]], atol=1e-5)


def test_matches_naive_sliding_window(rng):
    src = rng.uniform(0, 255, size=(7, 11))
    for radius in (1, 2, 6):
        np.testing.assert_allclose(box_blur(src, radius), _naive_box_blur(src, radius), atol=1e-3)


def test_rejects_empty_plane():
    with pytest.raises(StencilInputError):
        box_blur(np.zeros((0, 5), dtype=np.float32), 2)
