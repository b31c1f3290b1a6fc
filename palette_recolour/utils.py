# palette_recolour/utils.py
from __future__ import annotations

"""
Shared utilities for palette_recolour.

Includes duration formatting, row partitioning for worker threads, a colour
usage report for recoloured output, and tidy logging.
"""

import sys
from typing import Any, Iterable, List, Optional, Tuple

import numpy as np

from .core_types import U8Image, U8Mask, rgb_to_hex


#  Time / size formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def format_total_duration_compact(seconds: float) -> str:
    """Compact total duration: 'Mm Ss', 'Ss.s', or 'ms'."""
    if seconds >= 60.0:
        minutes = int(seconds // 60)
        rem = int(round(seconds - 60 * minutes))
        return f"{minutes}m {rem}s"
    if seconds >= 1.0:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000.0:.1f}ms"


# Partitioning


def split_rows_into_parts(height: int, parts: int) -> List[Tuple[int, int]]:
    """Partition range [0, height) into ~parts contiguous [start, end) row spans."""
    parts = max(1, int(parts))
    step = max(1, (height + parts - 1) // parts)
    return [(start, min(start + step, height)) for start in range(0, height, step)]


# Reporting


def colour_usage_report(
    rgb_u8: U8Image, alpha_mask: Optional[U8Mask] = None, top_k: int = 10
) -> List[Tuple[str, int]]:
    """
    Most used output colours among visible pixels.

    Returns a list of (hex, count) sorted by count descending, at most top_k rows.
    """
    if alpha_mask is None:
        flat = rgb_u8.reshape(-1, 3)
    else:
        flat = rgb_u8[alpha_mask > 0].reshape(-1, 3)
    if flat.shape[0] == 0:
        return []
    uniques, counts = np.unique(flat, axis=0, return_counts=True)
    order = np.argsort(-counts, kind="stable")[:top_k]
    return [
        (rgb_to_hex(tuple(int(v) for v in uniques[i])), int(counts[i]))
        for i in order
    ]


#  CLI logging


def enable_line_buffered_stdout() -> None:
    """
    Enable line-buffered stdout when supported.
    Helps live progress printing in terminals that expose .reconfigure().
    """
    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        try:
            reconfig(line_buffering=True, write_through=True)
        except (OSError, ValueError):
            pass


# Pretty logging


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1_234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        text = f"{value:.3f}".rstrip("0").rstrip(".")
        return text
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
    """
    out: List[str] = []
    for name, value in pairs:
        display = (
            format_bool_on_off(value)
            if isinstance(value, bool)
            else format_number_compact(value)
        )
        out.append(f"{name}{eq}{display}")
    return sep.join(out)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [run] Workers: 8  Space: oklab  Interpolation: mix  Mix strength: 1
    Routes to debug() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    """Section banner."""
    print(f"\n=== {title} ===", flush=True)


def log(message: str) -> None:
    """Plain log line."""
    print(message, flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", flush=True)


def error(message: str) -> None:
    """Error log line to stderr."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    # formatting
    "format_seconds_compact",
    "format_total_duration_compact",
    "format_bool_on_off",
    "format_number_compact",
    # partitioning / reporting
    "split_rows_into_parts",
    "colour_usage_report",
    # logging
    "enable_line_buffered_stdout",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
