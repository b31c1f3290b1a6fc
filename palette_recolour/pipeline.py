# palette_recolour/pipeline.py
from __future__ import annotations

"""
Recolour pipeline.

Loads the palette once, then resolves every pixel of a float32 linear RGB
buffer in place. Rows are split into contiguous spans, one per worker thread.
Workers share the read-only palette and config and write only their own rows,
so the result does not depend on worker count or scheduling.

If any span cannot be resolved (palette too small for the mode) the run fails
with a single InsufficientPaletteError carrying the lowest failing pixel index.
A failing span writes nothing.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Union

from .colour_space import colour_space_for
from .config import RecolourConfig
from .core_types import F32Image, assert_f32_image_rgb
from .errors import InsufficientPaletteError
from .palette_data import Palette, load_palette
from .resolve import resolve_pixels
from .utils import (
    debug_log,
    format_seconds_compact,
    key_value_pairs_to_string,
    split_rows_into_parts,
)

# Upper limit on pixels per resolver call.
BLOCK_PIXELS = 1 << 16
# Upper limit on pixel x palette pairs per resolver call; the distance step
# holds a few float32 [N, P, 3] temporaries, so this caps memory per worker.
BLOCK_ELEMENTS = 1 << 20


def rows_per_block(width: int, palette_size: int) -> int:
    """Rows resolved per call for this width and palette; never less than one."""
    pixels = min(BLOCK_PIXELS, BLOCK_ELEMENTS // max(1, palette_size))
    return max(1, pixels // max(1, width))


def _recolour_rows(
    image: F32Image,
    start: int,
    end: int,
    palette: Palette,
    config: RecolourConfig,
) -> Optional[int]:
    """
    Resolve rows [start, end) in place.

    Returns the flat index of the first pixel that could not be resolved, or
    None when every row was written. Failure depends only on the palette,
    so the first pixel of the failing block is the first failing pixel.
    """
    width = int(image.shape[1])
    step = rows_per_block(width, len(palette))
    for r0 in range(start, end, step):
        r1 = min(r0 + step, end)
        out = resolve_pixels(image[r0:r1], palette, config)
        if out is None:
            return r0 * width
        image[r0:r1] = out
    return None


def recolour_image(
    image: F32Image,
    palette: Palette,
    config: RecolourConfig,
    *,
    workers: int = 1,
    debug: bool = False,
) -> None:
    """
    Recolour a float32 [H,W,3] linear RGB image in place.

    Raises InsufficientPaletteError when the palette has fewer entries than
    the interpolation mode needs. An image with no pixels is left as is.
    """
    assert_f32_image_rgb(image)
    height, width = int(image.shape[0]), int(image.shape[1])
    if height * width == 0:
        return
    spans = split_rows_into_parts(height, workers)

    t0 = time.perf_counter()
    if workers <= 1 or len(spans) <= 1:
        failures: List[Optional[int]] = [
            _recolour_rows(image, s, e, palette, config) for s, e in spans
        ]
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(_recolour_rows, image, s, e, palette, config)
                for s, e in spans
            ]
            failures = [f.result() for f in futures]
    elapsed = time.perf_counter() - t0

    failed = [idx for idx in failures if idx is not None]
    if failed:
        raise InsufficientPaletteError(
            config.required_palette_size, len(palette), min(failed)
        )

    if debug:
        total_pixels = height * width
        rate = (total_pixels / elapsed) / 1e6 if elapsed > 0 else float("inf")
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Pixels", total_pixels),
                    ("Spans", len(spans)),
                    ("Workers", workers),
                    ("Map time", format_seconds_compact(elapsed)),
                    ("MPx/s", float(rate)),
                ]
            )
        )


def run(
    image: F32Image,
    palette_path: Union[str, Path],
    config: RecolourConfig,
    *,
    workers: int = 1,
    debug: bool = False,
) -> None:
    """
    Load the palette for the configured working space, then recolour image in place.

    PaletteFormatError surfaces before any pixel is touched.
    """
    space = colour_space_for(config.working_space)
    palette = load_palette(palette_path, space)
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Palette", Path(palette_path).name),
                    ("Colours", len(palette)),
                    ("Space", space.name),
                ]
            )
        )
    recolour_image(image, palette, config, workers=workers, debug=debug)


__all__ = [
    "BLOCK_PIXELS",
    "BLOCK_ELEMENTS",
    "rows_per_block",
    "recolour_image",
    "run",
]
