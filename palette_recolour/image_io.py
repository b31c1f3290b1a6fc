# palette_recolour/image_io.py
from __future__ import annotations

import io
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image, ImageOps

from .colour_convert import linear_to_srgb, srgb_to_linear
from .config import DEFAULT_OUTPUT_STEM
from .core_types import F32Image, U8Image, U8Mask
from .errors import ConfigError

"""
Image I/O helpers. Decoding yields linear RGB floats; encoding gamma-encodes
back to 8-bit sRGB. Alpha is carried alongside and never recoloured.
"""

try:
    from PIL import ImageCms  # ICC conversion if profile present
except ImportError:  # pragma: no cover
    ImageCms = None  # type: ignore[assignment]

# Formats Pillow can write with an alpha channel.
_ALPHA_SUFFIXES = {".png", ".webp", ".tif", ".tiff", ".gif"}


def _convert_to_srgb(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    mode = "RGBA" if _has_alpha(im) else "RGB"
    icc_bytes = im.info.get("icc_profile")

    if icc_bytes and ImageCms is not None:
        try:
            src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
            dst_prof = ImageCms.createProfile("sRGB")
            im2 = ImageCms.profileToProfile(
                im.convert(mode),
                src_prof,
                dst_prof,
                renderingIntent=ImageCms.Intent.PERCEPTUAL,
                outputMode=mode,
            )
            if im2 is not None:
                return im2
        except (ImageCms.PyCMSError, OSError):
            pass

    return im.convert(mode)


def _has_alpha(im: Image.Image) -> bool:
    return im.mode in ("RGBA", "LA", "PA") or (
        im.mode == "P" and "transparency" in im.info
    )


def load_image_linear(path: Union[str, Path]) -> Tuple[F32Image, Optional[U8Mask]]:
    """
    Decode an image into (rgb, alpha).

    rgb   : float32 [H,W,3] linear RGB in [0,1]
    alpha : uint8 [H,W] when the source has transparency, else None
    """
    with Image.open(path) as im0:
        im = _convert_to_srgb(im0)
    arr = np.array(im, dtype=np.uint8)
    rgb = srgb_to_linear(arr[..., :3].astype(np.float32) / 255.0)
    alpha = arr[..., 3].copy() if arr.shape[-1] == 4 else None
    return np.ascontiguousarray(rgb, dtype=np.float32), alpha


def linear_to_u8(rgb_linear: np.ndarray) -> U8Image:
    """Clip linear RGB to [0,1], gamma-encode and round to uint8."""
    encoded = linear_to_srgb(np.clip(rgb_linear, 0.0, 1.0))
    return np.rint(encoded * 255.0).astype(np.uint8)


def output_format(path: Union[str, Path]) -> str:
    """
    Pillow format name for the output path's extension.
    Raises ConfigError when the extension is missing or Pillow cannot write it.
    """
    suffix = Path(path).suffix.lower()
    fmt = Image.registered_extensions().get(suffix) if suffix else None
    if fmt is None or fmt not in Image.SAVE:
        raise ConfigError(
            f"cannot write {Path(path).name!r}: unknown or missing image extension"
        )
    return fmt


def supports_alpha(path: Union[str, Path]) -> bool:
    return Path(path).suffix.lower() in _ALPHA_SUFFIXES


def save_image_linear(
    path: Union[str, Path],
    rgb_linear: np.ndarray,
    alpha: Optional[U8Mask] = None,
) -> Path:
    """
    Encode a linear RGB buffer and save it. Format follows the file suffix.
    Alpha is written when given and the format supports it. Raises ConfigError
    for an extension Pillow cannot write.
    """
    path = Path(path)
    fmt = output_format(path)
    rgb = linear_to_u8(rgb_linear)
    if alpha is not None and supports_alpha(path):
        out = np.concatenate([rgb, alpha[..., None].astype(np.uint8)], axis=-1)
        Image.fromarray(out).save(path, format=fmt)
    else:
        Image.fromarray(rgb).save(path, format=fmt)
    return path


def default_output_path(src: Union[str, Path]) -> Path:
    """'colorized' plus the input's extension ('.png' if it has none), in the cwd."""
    suffix = Path(src).suffix or ".png"
    return Path(f"{DEFAULT_OUTPUT_STEM}{suffix}")


__all__ = [
    "load_image_linear",
    "linear_to_u8",
    "save_image_linear",
    "supports_alpha",
    "output_format",
    "default_output_path",
]
