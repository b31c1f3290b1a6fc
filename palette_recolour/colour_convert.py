# palette_recolour/colour_convert.py
from __future__ import annotations

"""
Colour conversions (sRGB D65, OKLab, OKHSL).

Exports:
  srgb_to_linear(srgb)
  linear_to_srgb(linear)
  linear_rgb_to_oklab(rgb)
  oklab_to_linear_rgb(lab)
  oklab_to_okhsl(lab)
  okhsl_to_oklab(hsl)
  saturate_okhsl(hsl, factor)

All functions are vectorised over (..., 3) arrays and work element by element,
so a pixel converts to the same value whatever array it sits in.
OKLab / OKHSL follow Björn Ottosson's reference construction.
"""

import numpy as np

from .core_types import Oklab, Okhsl, RgbArray

# Achromatic / black / white cut-off for OKHSL.
OKHSL_EPS = 1e-6

# OKHSL lightness toe.
_TOE_K1 = 0.206
_TOE_K2 = 0.03
_TOE_K3 = (1.0 + _TOE_K1) / (1.0 + _TOE_K2)

# Per-channel polynomial fits for compute_max_saturation, ordered
# (k0, k1, k2, k3, k4, wl, wm, ws) for the red, green and blue limits.
_MAX_SAT_RED = (
    1.19086277, 1.76576728, 0.59662641, 0.75515197, 0.56771245,
    4.0767416621, -3.3077115913, 0.2309699292,
)  # fmt: skip
_MAX_SAT_GREEN = (
    0.73956515, -0.45954404, 0.08285427, 0.12541070, 0.14503204,
    -1.2684380046, 2.6097574011, -0.3413193965,
)  # fmt: skip
_MAX_SAT_BLUE = (
    1.35733652, -0.00915799, -1.15130210, -0.50559606, 0.00692167,
    -0.0041960863, -0.7034186147, 1.7076147010,
)  # fmt: skip


def _stack3(c0: np.ndarray, c1: np.ndarray, c2: np.ndarray, like: np.ndarray) -> np.ndarray:
    out = np.empty(like.shape, dtype=np.float32)
    out[..., 0] = c0
    out[..., 1] = c1
    out[..., 2] = c2
    return out


# sRGB transfer curve


def srgb_to_linear(srgb: np.ndarray) -> RgbArray:
    """
    Convert sRGB (non-linear 0..1) to linear RGB (0..1). Vectorised.
    Args:
      srgb: array[...,3] in 0..1 (float)
    Returns:
      float32 array[...,3]
    """
    srgb_f = np.asarray(srgb, dtype=np.float32)
    with np.errstate(invalid="ignore"):
        linear = np.where(
            srgb_f <= 0.04045, srgb_f / 12.92, ((srgb_f + 0.055) / 1.055) ** 2.4
        )
    return linear.astype(np.float32, copy=False)


def linear_to_srgb(linear: np.ndarray) -> RgbArray:
    """Linear RGB (0..1) to sRGB (non-linear 0..1). Returns float32."""
    lin = np.asarray(linear, dtype=np.float32)
    encoded = np.where(
        lin <= 0.0031308,
        lin * 12.92,
        1.055 * np.power(np.maximum(lin, 0.0031308), 1.0 / 2.4) - 0.055,
    )
    return encoded.astype(np.float32, copy=False)


# Linear RGB <-> OKLab


def _lab_to_linear_channels(L, a, b):
    l_ = L + 0.3963377774 * a + 0.2158037573 * b
    m_ = L - 0.1055613458 * a - 0.0638541728 * b
    s_ = L - 0.0894841775 * a - 1.2914855480 * b
    l, m, s = l_ * l_ * l_, m_ * m_ * m_, s_ * s_ * s_
    r = 4.0767416621 * l - 3.3077115913 * m + 0.2309699292 * s
    g = -1.2684380046 * l + 2.6097574011 * m - 0.3413193965 * s
    bl = -0.0041960863 * l - 0.7034186147 * m + 1.7076147010 * s
    return r, g, bl


def linear_rgb_to_oklab(rgb: np.ndarray) -> Oklab:
    """
    Linear RGB to OKLab.
    Preserves shape (...,3). Returns float32.
    """
    rgb_f = np.asarray(rgb, dtype=np.float32)
    r, g, b = rgb_f[..., 0], rgb_f[..., 1], rgb_f[..., 2]

    l = 0.4122214708 * r + 0.5363325363 * g + 0.0514459929 * b
    m = 0.2119034982 * r + 0.6806995451 * g + 0.1073969566 * b
    s = 0.0883024619 * r + 0.2817188376 * g + 0.6299787005 * b

    l_, m_, s_ = np.cbrt(l), np.cbrt(m), np.cbrt(s)

    L = 0.2104542553 * l_ + 0.7936177850 * m_ - 0.0040720468 * s_
    A = 1.9779984951 * l_ - 2.4285922050 * m_ + 0.4505937099 * s_
    B = 0.0259040371 * l_ + 0.7827717662 * m_ - 0.8086757660 * s_
    return _stack3(L, A, B, rgb_f)


def oklab_to_linear_rgb(lab: np.ndarray) -> RgbArray:
    """OKLab to linear RGB. No clipping. Returns float32 with shape preserved."""
    lab_f = np.asarray(lab, dtype=np.float32)
    r, g, b = _lab_to_linear_channels(lab_f[..., 0], lab_f[..., 1], lab_f[..., 2])
    return _stack3(r, g, b, lab_f)


# OKHSL helpers (float64 internally)


def _toe(x: np.ndarray) -> np.ndarray:
    k3x = _TOE_K3 * x - _TOE_K1
    return 0.5 * (k3x + np.sqrt(k3x * k3x + 4.0 * _TOE_K2 * _TOE_K3 * x))


def _toe_inv(x: np.ndarray) -> np.ndarray:
    return (x * x + _TOE_K1 * x) / (_TOE_K3 * (x + _TOE_K2))


def _compute_max_saturation(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Max saturation S = C/L for normalised hue (a, b) where one channel hits 0."""
    red = (-1.88170328 * a - 0.80936493 * b) > 1.0
    green = ~red & ((1.81444104 * a - 1.19445276 * b) > 1.0)
    k0, k1, k2, k3, k4, wl, wm, ws = (
        np.select([red, green], [r_c, g_c], b_c)
        for r_c, g_c, b_c in zip(_MAX_SAT_RED, _MAX_SAT_GREEN, _MAX_SAT_BLUE)
    )

    S = k0 + k1 * a + k2 * b + k3 * a * a + k4 * a * b

    k_l = 0.3963377774 * a + 0.2158037573 * b
    k_m = -0.1055613458 * a - 0.0638541728 * b
    k_s = -0.0894841775 * a - 1.2914855480 * b

    # One Halley step.
    l_ = 1.0 + S * k_l
    m_ = 1.0 + S * k_m
    s_ = 1.0 + S * k_s

    l, m, s = l_**3, m_**3, s_**3
    l_dS, m_dS, s_dS = 3.0 * k_l * l_**2, 3.0 * k_m * m_**2, 3.0 * k_s * s_**2
    l_dS2, m_dS2, s_dS2 = 6.0 * k_l**2 * l_, 6.0 * k_m**2 * m_, 6.0 * k_s**2 * s_

    f = wl * l + wm * m + ws * s
    f1 = wl * l_dS + wm * m_dS + ws * s_dS
    f2 = wl * l_dS2 + wm * m_dS2 + ws * s_dS2
    return S - f * f1 / (f1 * f1 - 0.5 * f * f2)


def _find_cusp(a: np.ndarray, b: np.ndarray):
    S_cusp = _compute_max_saturation(a, b)
    r, g, bl = _lab_to_linear_channels(1.0, S_cusp * a, S_cusp * b)
    L_cusp = np.cbrt(1.0 / np.maximum(np.maximum(r, g), bl))
    return L_cusp, L_cusp * S_cusp


def _halley_step(channel, L, C, k_l, k_m, k_s, dL, dC):
    wl, wm, ws = channel
    l_dt, m_dt, s_dt = dL + dC * k_l, dL + dC * k_m, dL + dC * k_s
    l_, m_, s_ = L + C * k_l, L + C * k_m, L + C * k_s
    v = wl * l_**3 + wm * m_**3 + ws * s_**3 - 1.0
    v1 = 3.0 * (wl * l_dt * l_**2 + wm * m_dt * m_**2 + ws * s_dt * s_**2)
    v2 = 6.0 * (wl * l_dt**2 * l_ + wm * m_dt**2 * m_ + ws * s_dt**2 * s_)
    u = v1 / (v1 * v1 - 0.5 * v * v2)
    return np.where(u >= 0.0, -v * u, np.inf)


def _find_gamut_intersection(a, b, L1, C1, L0, L_cusp, C_cusp):
    """Scale t along (L0,0)->(L1,C1) where the line leaves the sRGB gamut."""
    lower = ((L1 - L0) * C_cusp - (L_cusp - L0) * C1) <= 0.0
    t_lower = C_cusp * L0 / (C1 * L_cusp + C_cusp * (L0 - L1))
    t_upper = C_cusp * (L0 - 1.0) / (C1 * (L_cusp - 1.0) + C_cusp * (L0 - L1))

    k_l = 0.3963377774 * a + 0.2158037573 * b
    k_m = -0.1055613458 * a - 0.0638541728 * b
    k_s = -0.0894841775 * a - 1.2914855480 * b
    dL = L1 - L0
    dC = C1
    L = L0 * (1.0 - t_upper) + t_upper * L1
    C = t_upper * C1
    t_r = _halley_step(_MAX_SAT_RED[5:], L, C, k_l, k_m, k_s, dL, dC)
    t_g = _halley_step(_MAX_SAT_GREEN[5:], L, C, k_l, k_m, k_s, dL, dC)
    t_b = _halley_step(_MAX_SAT_BLUE[5:], L, C, k_l, k_m, k_s, dL, dC)
    t_upper = t_upper + np.minimum(t_r, np.minimum(t_g, t_b))

    return np.where(lower, t_lower, t_upper)


def _get_st_mid(a_: np.ndarray, b_: np.ndarray):
    S = 0.11516993 + 1.0 / (
        7.44778970
        + 4.15901240 * b_
        + a_
        * (
            -2.19557347
            + 1.75198401 * b_
            + a_
            * (-2.13704948 - 10.02301043 * b_ + a_ * (-4.24894561 + 5.38770819 * b_ + 4.69891013 * a_))
        )
    )
    T = 0.11239642 + 1.0 / (
        1.61320320
        - 0.68124379 * b_
        + a_
        * (
            0.40370612
            + 0.90148123 * b_
            + a_
            * (-0.27087943 + 0.61223990 * b_ + a_ * (0.00299215 - 0.45399568 * b_ - 0.14661872 * a_))
        )
    )
    return S, T


def _get_cs(L: np.ndarray, a_: np.ndarray, b_: np.ndarray):
    """Chroma anchors (C_0, C_mid, C_max) for lightness L and unit hue (a_, b_)."""
    L_cusp, C_cusp = _find_cusp(a_, b_)
    C_max = _find_gamut_intersection(a_, b_, L, 1.0, L, L_cusp, C_cusp)
    S_max, T_max = C_cusp / L_cusp, C_cusp / (1.0 - L_cusp)

    k = C_max / np.minimum(L * S_max, (1.0 - L) * T_max)

    S_mid, T_mid = _get_st_mid(a_, b_)
    C_a = L * S_mid
    C_b = (1.0 - L) * T_mid
    C_mid = 0.9 * k * np.sqrt(np.sqrt(1.0 / (1.0 / C_a**4 + 1.0 / C_b**4)))

    C_a = L * 0.4
    C_b = (1.0 - L) * 0.8
    C_0 = np.sqrt(1.0 / (1.0 / C_a**2 + 1.0 / C_b**2))
    return C_0, C_mid, C_max


# OKLab <-> OKHSL


def oklab_to_okhsl(lab: np.ndarray) -> Okhsl:
    """
    OKLab[...,3] to OKHSL[...,3] as (hue in turns [0,1), saturation, lightness).
    Achromatic colours, black and white get hue 0 and saturation 0.
    """
    lab64 = np.asarray(lab, dtype=np.float64)
    L, a, b = lab64[..., 0], lab64[..., 1], lab64[..., 2]
    C = np.hypot(a, b)
    chromatic = (C > OKHSL_EPS) & (L > OKHSL_EPS) & (L < 1.0 - OKHSL_EPS)

    safe_C = np.where(chromatic, C, 1.0)
    a_ = np.where(chromatic, a / safe_C, 1.0)
    b_ = np.where(chromatic, b / safe_C, 0.0)
    L_safe = np.clip(L, OKHSL_EPS, 1.0 - OKHSL_EPS)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        C_0, C_mid, C_max = _get_cs(L_safe, a_, b_)

        k_1 = 0.8 * C_0
        k_2 = 1.0 - k_1 / C_mid
        s_low = 0.8 * C / (k_1 + k_2 * C)

        k_0 = C_mid
        k_1 = 0.2 * C_mid * C_mid * 1.5625 / C_0
        k_2 = 1.0 - k_1 / (C_max - C_mid)
        t = (C - k_0) / (k_1 + k_2 * (C - k_0))
        s_high = 0.8 + 0.2 * t

        s = np.where(C < C_mid, s_low, s_high)

    h = (0.5 + 0.5 * np.arctan2(-b, -a) / np.pi) % 1.0
    h = np.where(chromatic, h, 0.0)
    s = np.where(chromatic, s, 0.0)
    l = _toe(np.clip(L, 0.0, None))
    return _stack3(h, s, l, lab64)


def okhsl_to_oklab(hsl: np.ndarray) -> Oklab:
    """OKHSL[...,3] (hue in turns) to OKLab[...,3]. Returns float32."""
    hsl64 = np.asarray(hsl, dtype=np.float64)
    h, s, l = hsl64[..., 0], hsl64[..., 1], hsl64[..., 2]
    L = _toe_inv(np.clip(l, 0.0, None))
    chromatic = (s > 0.0) & (l > OKHSL_EPS) & (l < 1.0 - OKHSL_EPS)

    a_ = np.cos(2.0 * np.pi * h)
    b_ = np.sin(2.0 * np.pi * h)
    L_safe = np.clip(L, OKHSL_EPS, 1.0 - OKHSL_EPS)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        C_0, C_mid, C_max = _get_cs(L_safe, a_, b_)

        t = 1.25 * s
        k_1 = 0.8 * C_0
        k_2 = 1.0 - k_1 / C_mid
        C_low = t * k_1 / (1.0 - k_2 * t)

        t = (s - 0.8) / 0.2
        k_0 = C_mid
        k_1 = 0.2 * C_mid * C_mid * 1.5625 / C_0
        k_2 = 1.0 - k_1 / (C_max - C_mid)
        C_high = k_0 + t * k_1 / (1.0 - k_2 * t)

        C = np.where(s < 0.8, C_low, C_high)

    C = np.where(chromatic, C, 0.0)
    return _stack3(L, C * a_, C * b_, hsl64)


def saturate_okhsl(hsl: np.ndarray, factor: float) -> Okhsl:
    """
    Relative saturation change.

    factor > 0 moves saturation toward 1.0 by that share of the headroom,
    factor < 0 moves it toward 0 by that share of the current value.
    """
    out = np.array(hsl, dtype=np.float32, copy=True)
    s = out[..., 1]
    if factor >= 0.0:
        difference = np.maximum(1.0 - s, 0.0)
    else:
        difference = np.maximum(s, 0.0)
    out[..., 1] = np.maximum(s + difference * np.float32(factor), 0.0)
    return out


__all__ = [
    "OKHSL_EPS",
    "srgb_to_linear",
    "linear_to_srgb",
    "linear_rgb_to_oklab",
    "oklab_to_linear_rgb",
    "oklab_to_okhsl",
    "okhsl_to_oklab",
    "saturate_okhsl",
]
