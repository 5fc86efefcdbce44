import numpy as np
import pytest

from conftest import solid_rgba
from stencil_map.utils import convolve_rgb, luma_plane


def test_luma_uses_rec601_weights():
    rgba = np.zeros((1, 3, 4), dtype=np.uint8)
    rgba[0, 0, :3] = (255, 0, 0)
    rgba[0, 1, :3] = (0, 255, 0)
    rgba[0, 2, :3] = (0, 0, 255)
    y = luma_plane(rgba)
    assert y.dtype == np.float32
    np.testing.assert_allclose(y[0], [0.299 * 255, 0.587 * 255, 0.114 * 255], rtol=1e-6)


def test_identity_kernel_returns_equal_copy(random_rgba):
    out = convolve_rgb(random_rgba, [0, 0, 0, 0, 1, 0, 0, 0, 0])
    np.testing.assert_array_equal(out, random_rgba)
    assert out is not random_rgba


def test_out_of_bounds_taps_contribute_nothing():
    rgba = solid_rgba(3, 3, (90, 90, 90), alpha=7)
    out = convolve_rgb(rgba, [1.0 / 9.0] * 9)
    assert out[1, 1, 0] == 90  # all nine taps inside
    assert out[0, 0, 0] == 40  # four taps inside
    assert out[0, 1, 0] == 60  # six taps inside
    assert np.all(out[..., 3] == 7)


def test_channels_are_clamped():
    rgba = solid_rgba(3, 3, (200, 10, 100))
    out = convolve_rgb(rgba, [0, 0, 0, 0, 2, 0, 0, 0, 0])
    assert tuple(out[1, 1, :3]) == (255, 20, 200)
    out = convolve_rgb(rgba, [0, 0, 0, 0, -1, 0, 0, 0, 0])
    assert tuple(out[1, 1, :3]) == (0, 0, 0)


def test_even_or_non_square_kernel_rejected(random_rgba):
    with pytest.raises(ValueError):
        convolve_rgb(random_rgba, [0.25, 0.25, 0.25, 0.25])
    with pytest.raises(ValueError):
        convolve_rgb(random_rgba, [1, 2, 3, 4, 5])
