import numpy as np
import pytest

from palette_recolour.colour_convert import (
    linear_rgb_to_oklab,
    linear_to_srgb,
    okhsl_to_oklab,
    oklab_to_linear_rgb,
    oklab_to_okhsl,
    saturate_okhsl,
    srgb_to_linear,
)


def test_srgb_transfer_endpoints_and_midpoint():
    out = srgb_to_linear(np.array([0.0, 0.5, 1.0], dtype=np.float32))
    assert out.dtype == np.float32
    np.testing.assert_allclose(out, [0.0, 0.2140411, 1.0], atol=1e-6)


def test_srgb_transfer_round_trip():
    values = np.linspace(0.0, 1.0, 256, dtype=np.float32)
    np.testing.assert_allclose(linear_to_srgb(srgb_to_linear(values)), values, atol=1e-5)


def test_oklab_reference_values():
    rgb = np.array(
        [[1.0, 1.0, 1.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]],
        dtype=np.float32,
    )
    lab = linear_rgb_to_oklab(rgb)
    expected = [
        [1.0, 0.0, 0.0],
        [0.627955, 0.224863, 0.125846],
        [0.866440, -0.233888, 0.179498],
        [0.452014, -0.032457, -0.311528],
    ]
    np.testing.assert_allclose(lab, expected, atol=1e-3)


def test_oklab_round_trip_preserves_shape():
    rng = np.random.default_rng(1)
    rgb = rng.random((5, 4, 3), dtype=np.float32)
    lab = linear_rgb_to_oklab(rgb)
    assert lab.shape == rgb.shape
    np.testing.assert_allclose(oklab_to_linear_rgb(lab), rgb, atol=1e-4)


def test_okhsl_of_neutrals():
    lab = linear_rgb_to_oklab(
        np.array([[0.0, 0.0, 0.0], [0.2, 0.2, 0.2], [1.0, 1.0, 1.0]], dtype=np.float32)
    )
    hsl = oklab_to_okhsl(lab)
    np.testing.assert_allclose(hsl[:, 0], 0.0)
    np.testing.assert_allclose(hsl[:, 1], 0.0)
    assert hsl[0, 2] == pytest.approx(0.0, abs=1e-6)
    assert hsl[2, 2] == pytest.approx(1.0, abs=1e-4)
    assert 0.0 < hsl[1, 2] < 1.0


def test_okhsl_of_srgb_red():
    lab = linear_rgb_to_oklab(np.array([1.0, 0.0, 0.0], dtype=np.float32))
    h, s, l = oklab_to_okhsl(lab)
    assert h == pytest.approx(29.23 / 360.0, abs=2e-3)
    assert s == pytest.approx(1.0, abs=5e-3)
    assert l == pytest.approx(0.568, abs=2e-3)


def test_okhsl_round_trip_in_gamut():
    rng = np.random.default_rng(3)
    rgb = (0.05 + 0.9 * rng.random((200, 3))).astype(np.float32)
    lab = linear_rgb_to_oklab(rgb)
    hsl = oklab_to_okhsl(lab)
    assert np.all(hsl[:, 1] >= 0.0)
    assert np.all(hsl[:, 1] <= 1.0 + 5e-3)
    assert np.all((hsl[:, 0] >= 0.0) & (hsl[:, 0] < 1.0))
    np.testing.assert_allclose(okhsl_to_oklab(hsl), lab, atol=1e-4)
    np.testing.assert_allclose(oklab_to_linear_rgb(okhsl_to_oklab(hsl)), rgb, atol=1e-3)


def test_okhsl_extremes_map_to_black_and_white():
    hsl = np.array([[0.3, 0.8, 0.0], [0.3, 0.8, 1.0]], dtype=np.float32)
    rgb = oklab_to_linear_rgb(okhsl_to_oklab(hsl))
    np.testing.assert_allclose(rgb[0], [0.0, 0.0, 0.0], atol=1e-6)
    np.testing.assert_allclose(rgb[1], [1.0, 1.0, 1.0], atol=1e-4)


@pytest.mark.parametrize(
    "s, factor, expected",
    [
        (0.5, 0.5, 0.75),
        (0.5, -0.5, 0.25),
        (0.5, 0.0, 0.5),
        (0.4, 1.0, 1.0),
        (0.4, -1.0, 0.0),
        (1.2, 0.5, 1.2),
    ],
)
def test_saturate_okhsl_is_relative(s, factor, expected):
    hsl = np.array([0.25, s, 0.6], dtype=np.float32)
    out = saturate_okhsl(hsl, factor)
    assert out[1] == pytest.approx(expected, abs=1e-6)
    assert out[0] == hsl[0] and out[2] == hsl[2]
    assert hsl[1] == pytest.approx(s)
