# palette_recolour/core_types.py
from __future__ import annotations

"""
Core type aliases and lightweight helpers.
"""

from typing import Callable, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str

F32Image = NDArray[np.float32]  # (H, W, 3) linear RGB
U8Image = NDArray[np.uint8]  # (H, W, 3)
U8Mask = NDArray[np.uint8]  # (H, W)
RgbArray = NDArray[np.float32]  # (..., 3) linear RGB
Oklab = NDArray[np.float32]  # (..., 3) OKLab
Okhsl = NDArray[np.float32]  # (..., 3) OKHSL, hue in turns
Working = NDArray[np.float32]  # (..., 3) working-space colours

# Callable signatures

ToWorking = Callable[[RgbArray], Working]
FromWorking = Callable[[Working], RgbArray]
ToSaturation = Callable[[Working], Okhsl]
FromSaturation = Callable[[Okhsl], Working]

_HEX_DIGITS = frozenset("0123456789abcdef")


# Small helpers


def is_hex_literal(token: str) -> bool:
    """True for 'rgb', 'rrggbb', '#rgb' or '#rrggbb' (case-insensitive)."""
    s = token[1:] if token.startswith("#") else token
    return len(s) in (3, 6) and all(ch in _HEX_DIGITS for ch in s.lower())


def normalise_hex(token: str) -> HexStr:
    """Normalise a hex literal to lowercase '#rrggbb'. Raises ValueError."""
    if not is_hex_literal(token):
        raise ValueError(f"not a hex colour: {token!r}")
    s = token.lstrip("#").lower()
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    return f"#{s}"


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rgb' or '#rrggbb' (hash optional, case-insensitive) into an RGB tuple."""
    s = normalise_hex(hex_str.strip())
    return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


def hex_list_to_u8_rgb_array(hex_list: Sequence[str]) -> U8Image:
    """
    Convert a sequence of hex strings ('#rrggbb' or 'rrggbb') to a (N,3) uint8 array.
    Uses hex_to_rgb for a single source of truth.
    """
    out = np.empty((len(hex_list), 3), dtype=np.uint8)
    for i, hx in enumerate(hex_list):
        out[i] = hex_to_rgb(hx)
    return out


def assert_f32_image_rgb(image: np.ndarray) -> F32Image:
    """Validate a float32 (H,W,3) image and return it typed as F32Image."""
    if image.dtype != np.float32 or image.ndim != 3 or image.shape[-1] != 3:
        raise TypeError("expected float32 (H,W,3) image")
    return image  # type: ignore[return-value]


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "F32Image",
    "U8Image",
    "U8Mask",
    "RgbArray",
    "Oklab",
    "Okhsl",
    "Working",
    # callable signatures
    "ToWorking",
    "FromWorking",
    "ToSaturation",
    "FromSaturation",
    # helpers
    "is_hex_literal",
    "normalise_hex",
    "rgb_to_hex",
    "hex_to_rgb",
    "hex_list_to_u8_rgb_array",
    "assert_f32_image_rgb",
]
