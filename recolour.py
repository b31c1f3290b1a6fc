#!/usr/bin/env python3
"""
recolour.py
Recolour an image with the colours of a palette file.

Usage:
  python recolour.py IMAGE PALETTE [-o OUTPUT] [-i mix|interpolate] [-r]
                     [-m STRENGTH] [-s SATURATION] [--workers N] [--debug]

Matching:
  Every pixel is replaced by its nearest palette colour, measured in OKLab
  (default) or linear RGB (--rgb).
  -i mix         : blend the two nearest colours, weighted by distance.
  -i interpolate : blend the two nearest colours 50/50.
  -m             : 0 keeps the original pixel, 1 fully replaces it.
  -s             : relative saturation change in OKHSL, -1..1.

Palette:
  Text file of whitespace-separated hex colours (#rgb or #rrggbb, '#' optional).

Output:
  Written to OUTPUT, or colorized.<ext> in the current directory.
  Alpha is preserved. Nothing is written if recolouring fails.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from palette_recolour.config import (
    DEFAULT_MIX_STRENGTH,
    INTERPOLATION_MODES,
    RecolourConfig,
    default_workers,
)
from palette_recolour.errors import RecolourError
from palette_recolour.image_io import (
    default_output_path,
    linear_to_u8,
    load_image_linear,
    output_format,
    save_image_linear,
    supports_alpha,
)
from palette_recolour.pipeline import run
from palette_recolour.utils import (
    colour_usage_report,
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
    warn,
)


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments for palette recolouring.

    Returns:
      argparse.Namespace with:
        image: Path to the input image
        palette: Path to the palette file
        output: optional output Path
        interpolation_mode: None | "mix" | "interpolate"
        rgb: bool, match in linear RGB instead of OKLab
        mix_strength: float in [0, 1]
        saturation: optional float in [-1, 1]
        workers: threads for the pixel pipeline
        debug: bool for verbose details
    """
    parser = argparse.ArgumentParser(
        prog="recolour",
        description="Recolour an image with the colours of a palette file.",
    )
    parser.add_argument("image", type=Path, help="Input image")
    parser.add_argument("palette", type=Path, help="Palette file of hex colours")
    parser.add_argument(
        "-o", "--output", type=Path, default=None, help="Output path (optional)"
    )
    parser.add_argument(
        "-i",
        "--interpolation-mode",
        choices=list(INTERPOLATION_MODES),
        default=None,
        help="Blend the two nearest palette colours.",
    )
    parser.add_argument(
        "-r", "--rgb", action="store_true", help="Match in linear RGB (OKLab by default)"
    )
    parser.add_argument(
        "-m",
        "--mix-strength",
        type=float,
        default=DEFAULT_MIX_STRENGTH,
        help="Replacement strength - 0: don't replace, 1: fully replace",
    )
    parser.add_argument(
        "-s", "--saturation", type=float, default=None, help="Saturation change, -1..1"
    )
    parser.add_argument(
        "--workers", type=int, default=default_workers(), help="Pipeline threads"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> RecolourConfig:
    """Build and validate the run configuration from parsed CLI args."""
    return RecolourConfig(
        interpolation_mode=args.interpolation_mode,
        mix_strength=args.mix_strength,
        saturation=args.saturation,
        working_space="rgb" if args.rgb else "oklab",
        output_path=args.output,
    ).validate()


def recolour_file(
    src: Path, palette_path: Path, config: RecolourConfig, workers: int, debug: bool
) -> Path:
    """
    Process one image end-to-end:
      load -> recolour -> save -> report.
    """
    t_start = time.perf_counter()
    out_path = config.output_path or default_output_path(src)
    output_format(out_path)

    print_banner(src.name)

    rgb, alpha = load_image_linear(src)
    height, width = rgb.shape[0], rgb.shape[1]
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [("Loaded", f"{width}x{height}"), ("Alpha", alpha is not None)]
            )
        )
    t_loaded = time.perf_counter()

    run(rgb, palette_path, config, workers=workers, debug=debug)
    t_mapped = time.perf_counter()

    if alpha is not None and not supports_alpha(out_path):
        warn(f"{out_path.name} cannot store alpha; transparency dropped")
    save_image_linear(out_path, rgb, alpha)
    t_saved = time.perf_counter()

    log(f"Wrote {out_path} | size={width}x{height}")
    if debug:
        debug_log("Colours used (top 10):")
        for hex_code, count in colour_usage_report(linear_to_u8(rgb), alpha):
            debug_log(f"  {hex_code}: {count:,}")
        debug_log(
            f"Total {format_total_duration_compact(t_saved - t_start)}  "
            f"(load={format_total_duration_compact(t_loaded - t_start)}, "
            f"map={format_total_duration_compact(t_mapped - t_loaded)}, "
            f"save={format_total_duration_compact(t_saved - t_mapped)})"
        )
    else:
        log(f"Total time {format_total_duration_compact(t_saved - t_start)}")
    return out_path


# Entry point


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point. Returns the process exit status:
      0 on success, 1 on a recolouring or I/O error, 2 when an input is missing.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    for path in (args.image, args.palette):
        if not path.exists():
            error(f"not found: {path}")
            return 2

    try:
        config = config_from_args(args)
    except RecolourError as exc:
        error(str(exc))
        return 1

    print_config_line(
        "run",
        [
            ("Workers", args.workers),
            ("Space", config.working_space),
            ("Interpolation", config.interpolation_mode or "none"),
            ("Mix strength", float(config.mix_strength)),
            ("Saturation", "-" if config.saturation is None else float(config.saturation)),
        ],
        debug=False,
    )

    try:
        recolour_file(args.image, args.palette, config, args.workers, args.debug)
    except (RecolourError, OSError, ValueError) as exc:
        error(str(exc))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
