# palette_recolour/config.py
from __future__ import annotations

"""
Run configuration.

Exports:
- InterpolationMode, WorkingSpace (Literal aliases)
- RecolourConfig: immutable settings handed to the resolver and pipeline
- default_workers() -> int
- required_palette_size(mode) -> int
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

from .errors import ConfigError

InterpolationMode = Literal["mix", "interpolate"]
WorkingSpace = Literal["oklab", "rgb"]

INTERPOLATION_MODES = ("mix", "interpolate")
WORKING_SPACES = ("oklab", "rgb")

DEFAULT_MIX_STRENGTH = 1.0
DEFAULT_OUTPUT_STEM = "colorized"


def default_workers() -> int:
    """Leave a few cores free for the system; returns a sensible worker count."""
    n = os.cpu_count() or 4
    reserve = 1 if n <= 6 else 2 if n <= 12 else 3 if n <= 18 else 4
    return max(1, n - reserve)


def required_palette_size(mode: Optional[InterpolationMode]) -> int:
    """Entries needed: the nearest colour, plus the runner-up when interpolating."""
    return 1 if mode is None else 2


@dataclass(frozen=True)
class RecolourConfig:
    """
    interpolation_mode : None (nearest only), "mix" (distance weighted) or
                         "interpolate" (fixed 50/50 between the two nearest)
    mix_strength       : 0 keeps the original pixel, 1 fully replaces it
    saturation         : optional relative saturation change in [-1, 1]
    working_space      : "oklab" (default) or "rgb"
    output_path        : where the CLI writes the result; None for the default
    """

    interpolation_mode: Optional[InterpolationMode] = None
    mix_strength: float = DEFAULT_MIX_STRENGTH
    saturation: Optional[float] = None
    working_space: WorkingSpace = "oklab"
    output_path: Optional[Path] = None

    def validate(self) -> "RecolourConfig":
        """Raise ConfigError for out-of-range settings; returns self."""
        if (
            self.interpolation_mode is not None
            and self.interpolation_mode not in INTERPOLATION_MODES
        ):
            raise ConfigError(
                f"interpolation mode must be one of {INTERPOLATION_MODES}, "
                f"got {self.interpolation_mode!r}"
            )
        if self.working_space not in WORKING_SPACES:
            raise ConfigError(
                f"working space must be one of {WORKING_SPACES}, "
                f"got {self.working_space!r}"
            )
        if not 0.0 <= float(self.mix_strength) <= 1.0:
            raise ConfigError(
                f"mix strength must be within [0, 1], got {self.mix_strength}"
            )
        if self.saturation is not None and not -1.0 <= float(self.saturation) <= 1.0:
            raise ConfigError(
                f"saturation must be within [-1, 1], got {self.saturation}"
            )
        return self

    @property
    def required_palette_size(self) -> int:
        return required_palette_size(self.interpolation_mode)


__all__ = [
    "InterpolationMode",
    "WorkingSpace",
    "INTERPOLATION_MODES",
    "WORKING_SPACES",
    "DEFAULT_MIX_STRENGTH",
    "DEFAULT_OUTPUT_STEM",
    "RecolourConfig",
    "default_workers",
    "required_palette_size",
]
