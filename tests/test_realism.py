import numpy as np

from conftest import solid_rgba
from stencil_map.mode import RealismConfig
from stencil_map.realism import apply_brilliance, apply_vibrance, prefilter, run_realism, sharpen


def test_neutral_config_is_identity(random_rgba):
    out = run_realism(random_rgba, RealismConfig())
    np.testing.assert_array_equal(out, random_rgba)
    assert out is not random_rgba


def test_alpha_is_preserved(random_rgba):
    cfg = RealismConfig(saturation=180, contrast=130, brightness=90, sharpness=1.5, brilliance=40)
    out = run_realism(random_rgba, cfg)
    np.testing.assert_array_equal(out[..., 3], random_rgba[..., 3])
    assert out.dtype == np.uint8 and out.shape == random_rgba.shape


def test_zero_saturation_is_greyscale():
    out = apply_vibrance(solid_rgba(2, 2, (200, 100, 50)), 0)
    assert tuple(out[0, 0, :3]) == (124, 124, 124)


def test_vibrance_keeps_grey_grey():
    out = apply_vibrance(solid_rgba(2, 2, (90, 90, 90)), 200)
    r, g, b = out[0, 0, :3]
    assert r == g == b


def test_vibrance_boosts_muted_colour_more():
    muted = solid_rgba(1, 1, (140, 120, 110))
    vivid = solid_rgba(1, 1, (250, 20, 10))

    def spread(px):
        return int(px[0, 0, :3].max()) - int(px[0, 0, :3].min())

    muted_gain = spread(apply_vibrance(muted, 200)) / spread(muted)
    vivid_gain = spread(apply_vibrance(vivid, 200)) / spread(vivid)
    assert muted_gain > vivid_gain


def test_positive_brilliance_lifts_shadows():
    out = apply_brilliance(solid_rgba(2, 2, (40, 40, 40)), 100)
    assert out[0, 0, 0] > 40


def test_negative_brilliance_flattens():
    out = apply_brilliance(solid_rgba(2, 2, (200, 200, 200)), -100)
    assert tuple(out[0, 0, :3]) == (100, 100, 100)


def test_brilliance_leaves_black_alone():
    out = apply_brilliance(solid_rgba(2, 2, (0, 0, 0)), 100)
    assert np.all(out[..., :3] == 0)


def test_sharpen_keeps_flat_interior():
    out = sharpen(solid_rgba(6, 6, (120, 120, 120)), 2.0)
    assert np.all(out[1:-1, 1:-1, :3] == 120)
    assert np.all(out[0, 0, :3] == 255)


def test_prefilter_extremes():
    img = solid_rgba(2, 2, (30, 160, 250))
    assert np.all(prefilter(img, 100, 0)[..., :3] == 0)
    assert np.all(prefilter(img, 0, 100)[..., :3] == 128)
    np.testing.assert_array_equal(prefilter(img, 100, 100), img)
