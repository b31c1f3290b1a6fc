# palette_recolour/palette_data.py
from __future__ import annotations

"""
Palette definitions and builders.

Palette files are plain UTF-8 text: whitespace-separated hex colours, each an
optional '#' followed by 3 or 6 hex digits. Entries are deduplicated after
normalisation (first occurrence wins) and keep file order.

Exports:
  Palette
  parse_palette_text(text, path=None) -> list of '#rrggbb'
  load_palette(path, space) -> Palette
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

import numpy as np

from .colour_convert import srgb_to_linear
from .colour_space import OKLAB_SPACE, ColourSpace
from .core_types import HexStr, RgbArray, Working, hex_list_to_u8_rgb_array, normalise_hex
from .errors import PaletteFormatError


@dataclass(frozen=True)
class Palette:
    """
    Ordered, unique palette entries.

    hex_codes  : lowercase '#rrggbb' in file order
    rgb_linear : float32 [P,3] linear RGB
    colours    : float32 [P,3] in the working space
    space      : the ColourSpace colours live in

    Arrays are read-only so the palette can be shared between worker threads.
    """

    hex_codes: Tuple[HexStr, ...]
    rgb_linear: RgbArray
    colours: Working
    space: ColourSpace

    def __len__(self) -> int:
        return len(self.hex_codes)

    @classmethod
    def from_hex(
        cls, hex_codes: Iterable[str], space: ColourSpace = OKLAB_SPACE
    ) -> "Palette":
        """Build from hex strings. Duplicates are dropped, order is kept."""
        unique = _normalise_unique(hex_codes)
        rgbs_u8 = hex_list_to_u8_rgb_array(unique)
        rgb_linear = srgb_to_linear(rgbs_u8.astype(np.float32) / 255.0).reshape(-1, 3)
        colours = space.to_working(rgb_linear).reshape(-1, 3)
        rgb_linear.setflags(write=False)
        colours.setflags(write=False)
        return cls(
            hex_codes=tuple(unique),
            rgb_linear=rgb_linear,
            colours=colours,
            space=space,
        )


def _normalise_unique(
    tokens: Iterable[str], path: Optional[str] = None
) -> List[HexStr]:
    codes: List[HexStr] = []
    seen = set()
    for position, token in enumerate(tokens, start=1):
        try:
            hx = normalise_hex(token)
        except ValueError:
            raise PaletteFormatError(token, position, path) from None
        if hx not in seen:
            seen.add(hx)
            codes.append(hx)
    return codes


def parse_palette_text(text: str, path: Optional[str] = None) -> List[HexStr]:
    """
    Split palette text into normalised '#rrggbb' codes, deduplicated in order.

    Raises PaletteFormatError on the first token that is not a hex colour.
    """
    return _normalise_unique(text.split(), path)


def _undecodable_token(raw: bytes, offset: int) -> Tuple[str, int]:
    """Whitespace token holding byte offset, and its 1-based position."""
    head = raw[:offset]
    before = head.split()
    inside = bool(head) and not head[-1:].isspace()
    position = len(before) + (0 if inside else 1)
    start = offset - len(before[-1]) if inside else offset
    token = raw[start:].split()[0]
    return token.decode("utf-8", errors="backslashreplace"), position


def load_palette(
    path: Union[str, Path], space: ColourSpace = OKLAB_SPACE
) -> Palette:
    """
    Read a palette file and convert its colours into the working space.

    Bytes that are not UTF-8 raise PaletteFormatError for the token holding them.
    """
    path = Path(path)
    raw = path.read_bytes()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        token, position = _undecodable_token(raw, exc.start)
        raise PaletteFormatError(token, position, str(path)) from None
    return Palette.from_hex(parse_palette_text(text, str(path)), space)


__all__ = ["Palette", "parse_palette_text", "load_palette"]
