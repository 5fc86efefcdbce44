import numpy as np
import pytest

from stencil_map.mode import HollowConfig, RealismConfig, SolidConfig
from stencil_map.stencil import adaptive_threshold, apply_detail, binarize, difference_of_gaussians
from stencil_map.stencil.binarize import dog_radii, threshold_bias
from stencil_map.stencil.detail import unsharp_mask


def _plane_with_spot(value, background=200.0, size=40):
    plane = np.full((size, size), background, dtype=np.float32)
    mid = size // 2
    plane[mid - 1 : mid + 2, mid - 1 : mid + 2] = value
    return plane


@pytest.mark.parametrize("threshold", [0, 100, 223, 255])
def test_adaptive_flat_plane_has_no_ink(threshold):
    plane = np.full((30, 30), 128.0, dtype=np.float32)
    out = adaptive_threshold(plane, threshold)
    assert np.all(out == 255.0)


def test_adaptive_dark_spot_is_ink():
    out = adaptive_threshold(_plane_with_spot(0.0), 223)
    assert np.count_nonzero(out == 0.0) == 9
    assert out[20, 20] == 0.0
    assert set(np.unique(out)) <= {0.0, 255.0}


def test_higher_threshold_means_more_ink():
    plane = _plane_with_spot(190.0)
    assert threshold_bias(223) < threshold_bias(100)
    assert np.count_nonzero(adaptive_threshold(plane, 223) == 0.0) == 9
    assert np.count_nonzero(adaptive_threshold(plane, 100) == 0.0) == 0


def test_dog_flat_plane_has_no_ink():
    plane = np.full((25, 25), 90.0, dtype=np.float32)
    for detail in (-2, 0, 3):
        assert np.all(difference_of_gaussians(plane, 223, detail) == 255.0)


def test_dog_marks_dark_stripe():
    plane = np.full((20, 30), 255.0, dtype=np.float32)
    plane[:, 14:17] = 0.0
    out = difference_of_gaussians(plane, 223, 0)
    ink_cols = np.unique(np.nonzero(out == 0.0)[1])
    assert list(ink_cols) == [14, 15, 16]
    assert np.all(out[:, 14:17] == 0.0)


def test_dog_radii():
    assert dog_radii(0) == (1, 2)
    assert dog_radii(-3) == (1, 2)
    assert dog_radii(5) == (4, 10)
    for d in range(-4, 6):
        narrow, wide = dog_radii(d)
        assert 1 <= narrow < wide


def test_detail_level_depends_on_mode(rng):
    luma = rng.uniform(0, 255, size=(16, 16)).astype(np.float32)
    assert apply_detail(luma, 2, "hollow") is luma
    blurred = apply_detail(luma, 2, "solid")
    assert blurred.shape == luma.shape
    assert not np.array_equal(blurred, luma)
    assert apply_detail(luma, 0, "solid") is luma


def test_unsharp_mask_keeps_flat_and_boosts_edges():
    flat = np.full((8, 8), 77.0, dtype=np.float32)
    np.testing.assert_array_equal(unsharp_mask(flat, -3), flat)

    step = np.zeros((6, 10), dtype=np.float32)
    step[:, :5] = 100.0
    step[:, 5:] = 150.0
    out = apply_detail(step, -2, "hollow")
    assert out[3, 4] < 100.0
    assert out[3, 5] > 150.0
    assert out.min() >= 0.0 and out.max() <= 255.0


def test_binarize_dispatch():
    plane = _plane_with_spot(0.0)
    solid = binarize(plane, SolidConfig(threshold=223, detail_level=0, thickness=0))
    np.testing.assert_array_equal(solid, adaptive_threshold(plane, 223))
    hollow = binarize(plane, HollowConfig(threshold=223, detail_level=1, thickness=0))
    np.testing.assert_array_equal(hollow, difference_of_gaussians(plane, 223, 1))
    with pytest.raises(TypeError):
        binarize(plane, RealismConfig())
