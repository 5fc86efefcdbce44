import numpy as np

from stencil_map.stencil import adjust_thickness


def _blank(h, w):
    return np.full((h, w), 255.0, dtype=np.float32)


def test_zero_thickness_returns_copy():
    src = _blank(5, 5)
    src[2, 2] = 0.0
    out = adjust_thickness(src, 0)
    np.testing.assert_array_equal(out, src)
    assert out is not src


def test_all_blank_stays_blank():
    for t in (-3, 3):
        assert np.all(adjust_thickness(_blank(9, 9), t) == 255.0)


def test_all_ink_survives_erosion():
    ink = np.zeros((7, 7), dtype=np.float32)
    np.testing.assert_array_equal(adjust_thickness(ink, -5), ink)


def test_single_dilation_grows_a_plus():
    src = _blank(7, 7)
    src[3, 3] = 0.0
    out = adjust_thickness(src, 1)
    ink = set(zip(*np.nonzero(out == 0.0)))
    assert ink == {(3, 3), (2, 3), (4, 3), (3, 2), (3, 4)}


def test_dilation_does_not_grow_from_the_frame():
    src = _blank(6, 6)
    src[0, 0] = 0.0
    out = adjust_thickness(src, 1)
    assert np.count_nonzero(out == 0.0) == 3


def test_passes_are_capped():
    src = _blank(41, 41)
    src[20, 20] = 0.0
    np.testing.assert_array_equal(adjust_thickness(src, 20), adjust_thickness(src, 15))
    np.testing.assert_array_equal(adjust_thickness(src, -20), adjust_thickness(src, -15))


def test_dilate_then_erode_is_not_identity():
    src = _blank(11, 11)
    src[4:7, 4:7] = 0.0
    src[5, 5] = 255.0
    out = adjust_thickness(adjust_thickness(src, 1), -1)
    assert out[5, 5] == 0.0
    assert not np.array_equal(out, src)


def test_erosion_treats_outside_as_ink():
    src = _blank(10, 10)
    src[:3, :3] = 0.0
    out = adjust_thickness(src, -1)
    ink = set(zip(*np.nonzero(out == 0.0)))
    assert ink == {(0, 0), (0, 1), (1, 0), (1, 1)}


def test_input_is_not_mutated():
    src = _blank(9, 9)
    src[4, 4] = 0.0
    before = src.copy()
    adjust_thickness(src, 3)
    adjust_thickness(src, -3)
    np.testing.assert_array_equal(src, before)
