import numpy as np
import pytest

from palette_recolour.colour_space import (
    OKLAB_SPACE,
    RGB_SPACE,
    ColourSpace,
    colour_space_for,
)

SPACES = [RGB_SPACE, OKLAB_SPACE]


def _colours(n=16, seed=11):
    rng = np.random.default_rng(seed)
    return rng.random((n, 3), dtype=np.float32)


def test_mix_is_affine():
    a = _colours(seed=1)
    b = _colours(seed=2)
    np.testing.assert_array_equal(ColourSpace.mix(a, b, 0.0), a)
    np.testing.assert_array_equal(ColourSpace.mix(a, b, 1.0), b)
    np.testing.assert_allclose(ColourSpace.mix(a, b, 0.5), (a + b) / 2.0, atol=1e-7)
    np.testing.assert_allclose(
        ColourSpace.mix(a, b, 0.25) - a, 0.25 * (b - a), atol=1e-6
    )


def test_mix_accepts_per_row_factors():
    a = np.zeros((3, 3), dtype=np.float32)
    b = np.ones((3, 3), dtype=np.float32)
    out = ColourSpace.mix(a, b, np.array([0.0, 0.5, 1.0], dtype=np.float32))
    np.testing.assert_allclose(out[:, 0], [0.0, 0.5, 1.0])
    assert out.dtype == np.float32


def test_distance_squared_is_symmetric_and_non_negative():
    a = _colours(seed=3)
    b = _colours(seed=4)
    d_ab = ColourSpace.distance_squared(a, b)
    d_ba = ColourSpace.distance_squared(b, a)
    assert d_ab.shape == (16,)
    np.testing.assert_array_equal(d_ab, d_ba)
    assert np.all(d_ab >= 0.0)
    np.testing.assert_array_equal(ColourSpace.distance_squared(a, a), 0.0)
    assert ColourSpace.distance_squared([0, 0, 0], [1, 2, 2]) == pytest.approx(9.0)


def test_rgb_space_is_identity_copy():
    rgb = _colours()
    working = RGB_SPACE.to_working(rgb)
    np.testing.assert_array_equal(working, rgb)
    working[0, 0] = -1.0
    assert rgb[0, 0] != -1.0
    np.testing.assert_array_equal(RGB_SPACE.from_working(rgb), rgb)


@pytest.mark.parametrize("space", SPACES, ids=lambda s: s.name)
def test_working_round_trip(space):
    rgb = _colours(seed=5)
    np.testing.assert_allclose(space.from_working(space.to_working(rgb)), rgb, atol=1e-4)


@pytest.mark.parametrize("space", SPACES, ids=lambda s: s.name)
def test_saturation_space_round_trip(space):
    rgb = (0.1 + 0.8 * _colours(seed=6)).astype(np.float32)
    working = space.to_working(rgb)
    hsl = space.to_saturation_space(working)
    assert hsl.shape == working.shape
    back = space.from_saturation_space(hsl)
    np.testing.assert_allclose(space.from_working(back), rgb, atol=1e-3)


def test_oklab_space_differs_from_rgb():
    rgb = np.array([1.0, 0.0, 0.0], dtype=np.float32)
    assert not np.allclose(OKLAB_SPACE.to_working(rgb), rgb)


def test_colour_space_lookup():
    assert colour_space_for("rgb") is RGB_SPACE
    assert colour_space_for("OKLab") is OKLAB_SPACE
    with pytest.raises(ValueError, match="unknown working space"):
        colour_space_for("lab")
