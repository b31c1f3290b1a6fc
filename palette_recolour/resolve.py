# palette_recolour/resolve.py
from __future__ import annotations

"""
Closest-colour resolver.

For each pixel:
  1) convert to the working space
  2) squared distance to every palette entry
  3) nearest entry c1 (ties go to the earlier palette entry)
  4) no interpolation  -> c1
     "mix"             -> mix(c1, c2, 1 - d2 / (d1 + d2)), 0 when d1 + d2 == 0
     "interpolate"     -> mix(c1, c2, 0.5)
  5) mix(original, matched, mix_strength)
  6) optional relative saturation change in OKHSL
  7) back to linear RGB

resolve_pixels() is the vectorised form used by the pipeline; resolve() is the
single-pixel form. Both return None when the palette is too small for the mode.
"""

from typing import Optional, Tuple

import numpy as np

from .colour_convert import saturate_okhsl
from .config import RecolourConfig, required_palette_size
from .core_types import RgbArray, Working
from .palette_data import Palette


def mix_factor(d1: np.ndarray, d2: np.ndarray) -> np.ndarray:
    """
    Blend factor from c1 toward c2 for "mix" mode: 1 - d2 / (d1 + d2).

    0 at an exact match (c1 kept), 0.5 when equidistant. Both distances zero
    gives 0 rather than NaN.
    """
    d1_f = np.asarray(d1, dtype=np.float32)
    d2_f = np.asarray(d2, dtype=np.float32)
    total = d1_f + d2_f
    with np.errstate(divide="ignore", invalid="ignore"):
        factor = 1.0 - d2_f / total
    return np.where(total > 0.0, factor, 0.0).astype(np.float32, copy=False)


def nearest_two(
    src: Working, palette: Palette, want_second: bool
) -> Tuple[np.ndarray, np.ndarray, Optional[np.ndarray], Optional[np.ndarray]]:
    """
    Nearest and (optionally) second-nearest palette rows per source row.

    Returns (i1, d1, i2, d2) with squared distances. argmin returns the first
    occurrence, so equal distances resolve in palette order.
    """
    dist2 = palette.space.distance_squared(src[:, None, :], palette.colours[None, :, :])
    rows = np.arange(src.shape[0])

    i1 = np.argmin(dist2, axis=1)
    d1 = dist2[rows, i1]
    if not want_second:
        return i1, d1, None, None

    dist2[rows, i1] = np.inf
    i2 = np.argmin(dist2, axis=1)
    d2 = dist2[rows, i2]
    return i1, d1, i2, d2


def resolve_pixels(
    pixels: np.ndarray, palette: Palette, config: RecolourConfig
) -> Optional[RgbArray]:
    """
    Resolve a block of linear RGB pixels (..., 3).

    Returns float32 linear RGB with the input shape, or None when the palette
    has fewer entries than the interpolation mode needs.
    """
    mode = config.interpolation_mode
    if len(palette) < required_palette_size(mode):
        return None

    space = palette.space
    shape = np.shape(pixels)
    flat = np.asarray(pixels, dtype=np.float32).reshape(-1, 3)
    if flat.shape[0] == 0:
        return flat.reshape(shape).copy()

    src = space.to_working(flat)
    i1, d1, i2, d2 = nearest_two(src, palette, want_second=mode is not None)

    c1 = palette.colours[i1]
    if mode is None:
        matched = c1
    else:
        c2 = palette.colours[i2]
        factor = mix_factor(d1, d2) if mode == "mix" else 0.5
        matched = space.mix(c1, c2, factor)

    blended = space.mix(src, matched, config.mix_strength)

    if config.saturation is not None:
        hsl = space.to_saturation_space(blended)
        blended = space.from_saturation_space(saturate_okhsl(hsl, config.saturation))

    return space.from_working(blended).reshape(shape)


def resolve(
    pixel: np.ndarray, palette: Palette, config: RecolourConfig
) -> Optional[RgbArray]:
    """Resolve one linear RGB colour [3]. None if the palette is too small."""
    out = resolve_pixels(np.asarray(pixel, dtype=np.float32).reshape(1, 3), palette, config)
    return None if out is None else out[0]


__all__ = ["mix_factor", "nearest_two", "resolve_pixels", "resolve"]
