# palette_recolour/__init__.py
"""
palette_recolour package.

Purpose:
  Recolour images with a user-supplied palette. See recolour.py for the CLI.

Public API:
  run            : load a palette and recolour a linear RGB buffer in place
  recolour_image : recolour with an already loaded Palette
  resolve        : closest palette colour for one pixel
  load_palette   : parse a palette file into a Palette
  RecolourConfig : run settings (interpolation, mix strength, saturation, space)
  colour_space   : working spaces (RGB_SPACE, OKLAB_SPACE)
  colour_convert : colour transforms (sRGB, OKLab, OKHSL)
  image_io       : Pillow decode/encode to linear RGB floats
  errors         : PaletteFormatError, InsufficientPaletteError, ...

Quick start:
  from palette_recolour import RecolourConfig, run
  from palette_recolour.image_io import load_image_linear, save_image_linear
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import colour_convert
from . import colour_space
from . import core_types
from . import errors
from . import image_io
from . import utils

from .config import RecolourConfig
from .colour_space import OKLAB_SPACE, RGB_SPACE, ColourSpace, colour_space_for
from .errors import (
    ColorParseError,
    ConfigError,
    InsufficientPaletteError,
    PaletteFormatError,
    RecolourError,
)
from .palette_data import Palette, load_palette, parse_palette_text
from .pipeline import recolour_image, run
from .resolve import resolve, resolve_pixels

__all__ = [
    "__version__",
    "colour_convert",
    "colour_space",
    "core_types",
    "errors",
    "image_io",
    "utils",
    "RecolourConfig",
    "ColourSpace",
    "RGB_SPACE",
    "OKLAB_SPACE",
    "colour_space_for",
    "RecolourError",
    "PaletteFormatError",
    "ColorParseError",
    "InsufficientPaletteError",
    "ConfigError",
    "Palette",
    "load_palette",
    "parse_palette_text",
    "recolour_image",
    "run",
    "resolve",
    "resolve_pixels",
]
