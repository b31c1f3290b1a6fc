# palette_recolour/errors.py
from __future__ import annotations

"""
Error types raised by the recolouring core. All of them end the run.
"""

from typing import Optional


class RecolourError(Exception):
    """Base class for recolouring failures."""


class PaletteFormatError(RecolourError, ValueError):
    """A palette token is not a hex colour, or the file is not UTF-8 text."""

    def __init__(self, token: str, position: int, path: Optional[str] = None):
        self.token = token
        self.position = position
        self.path = path
        where = f" in {path}" if path else ""
        super().__init__(
            f"invalid colour {token!r} at token {position}{where}; "
            "expected '#rgb' or '#rrggbb'"
        )


# Same fatal class, kept under the name used for hex parse failures.
ColorParseError = PaletteFormatError


class InsufficientPaletteError(RecolourError):
    """The palette has fewer entries than the interpolation mode needs."""

    def __init__(self, required: int, available: int, pixel_index: int = 0):
        self.required = required
        self.available = available
        self.pixel_index = pixel_index
        super().__init__(
            f"not enough colours in the palette: need {required}, have {available} "
            f"(first failing pixel {pixel_index})"
        )


class ConfigError(RecolourError, ValueError):
    """Invalid run configuration."""


__all__ = [
    "RecolourError",
    "PaletteFormatError",
    "ColorParseError",
    "InsufficientPaletteError",
    "ConfigError",
]
