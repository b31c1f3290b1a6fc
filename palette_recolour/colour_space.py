# palette_recolour/colour_space.py
from __future__ import annotations

"""
Working colour spaces.

A ColourSpace bundles the conversions the matcher needs:
  to_working(rgb) / from_working(colours)           linear RGB <-> working space
  to_saturation_space / from_saturation_space       working space <-> OKHSL
  distance_squared(a, b)                            Euclidean, squared
  mix(a, b, factor)                                 (1 - factor) * a + factor * b

Two spaces are provided:
  RGB_SPACE   : linear RGB is the working space (identity mapping)
  OKLAB_SPACE : perceptual OKLab (default)

Everything operates on float32 (..., 3) arrays and broadcasts, so one call
handles a single colour, a pixel block or the whole palette.
"""

from dataclasses import dataclass
from typing import Dict, Union

import numpy as np

from .colour_convert import (
    linear_rgb_to_oklab,
    okhsl_to_oklab,
    oklab_to_linear_rgb,
    oklab_to_okhsl,
)
from .core_types import (
    FromSaturation,
    FromWorking,
    Okhsl,
    RgbArray,
    ToSaturation,
    ToWorking,
    Working,
)


def _as_f32(rgb: np.ndarray) -> np.ndarray:
    return np.array(rgb, dtype=np.float32, copy=True)


@dataclass(frozen=True)
class ColourSpace:
    """Conversions and metric for one working space."""

    name: str
    _to_working: ToWorking
    _from_working: FromWorking
    _to_saturation: ToSaturation
    _from_saturation: FromSaturation

    def to_working(self, rgb: np.ndarray) -> Working:
        return self._to_working(rgb)

    def from_working(self, colours: np.ndarray) -> RgbArray:
        return self._from_working(colours)

    def to_saturation_space(self, colours: np.ndarray) -> Okhsl:
        return self._to_saturation(colours)

    def from_saturation_space(self, hsl: np.ndarray) -> Working:
        return self._from_saturation(hsl)

    @staticmethod
    def distance_squared(a: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Squared Euclidean distance over the last axis. Broadcasts; float32."""
        diff = np.asarray(a, dtype=np.float32) - np.asarray(b, dtype=np.float32)
        return np.sum(diff * diff, axis=-1, dtype=np.float32)

    @staticmethod
    def mix(
        a: np.ndarray, b: np.ndarray, factor: Union[float, np.ndarray]
    ) -> Working:
        """
        Affine blend: factor 0 gives a, factor 1 gives b.
        factor may be a scalar or an array matching the leading axes of a/b.
        """
        a_f = np.asarray(a, dtype=np.float32)
        b_f = np.asarray(b, dtype=np.float32)
        f = np.asarray(factor, dtype=np.float32)
        if f.ndim > 0:
            f = f[..., None]
        return ((1.0 - f) * a_f + f * b_f).astype(np.float32, copy=False)


RGB_SPACE = ColourSpace(
    name="rgb",
    _to_working=_as_f32,
    _from_working=_as_f32,
    _to_saturation=lambda rgb: oklab_to_okhsl(linear_rgb_to_oklab(rgb)),
    _from_saturation=lambda hsl: oklab_to_linear_rgb(okhsl_to_oklab(hsl)),
)

OKLAB_SPACE = ColourSpace(
    name="oklab",
    _to_working=linear_rgb_to_oklab,
    _from_working=oklab_to_linear_rgb,
    _to_saturation=oklab_to_okhsl,
    _from_saturation=okhsl_to_oklab,
)

COLOUR_SPACES: Dict[str, ColourSpace] = {
    RGB_SPACE.name: RGB_SPACE,
    OKLAB_SPACE.name: OKLAB_SPACE,
}


def colour_space_for(name: str) -> ColourSpace:
    """Look up a working space by name ("rgb" or "oklab")."""
    try:
        return COLOUR_SPACES[name.lower()]
    except KeyError:
        raise ValueError(
            f"unknown working space {name!r}; expected one of {sorted(COLOUR_SPACES)}"
        ) from None


__all__ = [
    "ColourSpace",
    "RGB_SPACE",
    "OKLAB_SPACE",
    "COLOUR_SPACES",
    "colour_space_for",
]
