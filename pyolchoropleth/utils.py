from __future__ import annotations

import math
from typing import Any, Sequence, Tuple

import numpy as np
from matplotlib import colors as mcolors

RGB = Tuple[float, float, float]


def clamp(value: float, vmin: float = 0.0, vmax: float = 1.0) -> float:
    """Clamp numeric values to [vmin, vmax]."""
    lo = float(vmin)
    hi = float(vmax)
    if lo > hi:
        lo, hi = hi, lo

    try:
        v = float(value)
    except (TypeError, ValueError):
        return lo

    if not np.isfinite(v):
        return lo

    return float(np.clip(v, lo, hi))


def to_number(value: Any) -> float:
    """Parse a feature property into a float.

    Missing, boolean, non-numeric and non-finite values all come back as NaN,
    so callers only need a single ``math.isfinite`` check.
    """
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return math.nan
    try:
        v = float(value)
    except (TypeError, ValueError):
        return math.nan
    return v if math.isfinite(v) else math.nan


def is_finite_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def is_valid_color(color: Any) -> bool:
    """Return True if matplotlib can parse ``color`` ("#rrggbb", names, rgb tuples)."""
    if isinstance(color, str) and not color.strip():
        return False
    return bool(mcolors.is_color_like(color))


def to_rgb(color: Any) -> RGB:
    """Convert a color token to an (r, g, b) tuple of floats in [0, 1]."""
    r, g, b = mcolors.to_rgb(color)
    return (float(r), float(g), float(b))


def to_hex(color: Any) -> str:
    """Normalize a color token to lowercase "#rrggbb"."""
    return mcolors.to_hex(color, keep_alpha=False)


def interpolate_rgb(stops: Sequence[RGB], position: float) -> RGB:
    """Linearly interpolate between evenly spaced RGB stops.

    Args:
        stops: One or more RGB tuples (0-1 floats). Stop ``i`` sits at
            ``i / (len(stops) - 1)``.
        position: Ramp position, clamped to [0, 1].

    Returns:
        Interpolated (r, g, b) tuple.
    """
    if not stops:
        raise ValueError("interpolate_rgb requires at least one stop")
    if len(stops) == 1:
        return tuple(stops[0])  # type: ignore[return-value]

    t = clamp(position)
    arr = np.asarray(stops, dtype=np.float64)
    xs = np.linspace(0.0, 1.0, arr.shape[0])
    return (
        float(np.interp(t, xs, arr[:, 0])),
        float(np.interp(t, xs, arr[:, 1])),
        float(np.interp(t, xs, arr[:, 2])),
    )


def color_to_css(color: Any, alpha: float | None = None) -> str:
    """
    Convert color into a CSS color string.
    - Accepts "#RRGGBB", named colors and (r,g,b) / (r,g,b,a) tuples with 0-255 channels.
    - If alpha is provided, it overrides tuple alpha and the result is "rgba(...)".
    """
    if isinstance(color, str):
        if alpha is None:
            return color
        if not is_valid_color(color):
            # Best effort: hand unknown CSS strings through untouched
            return color
        r, g, b = (round(c * 255) for c in to_rgb(color))
        return f"rgba({r},{g},{b},{alpha})"

    if len(color) == 3:
        r, g, b = color
        a = alpha if alpha is not None else 1.0
        return f"rgba({r},{g},{b},{a})"

    r, g, b, a0 = color
    a = alpha if alpha is not None else (a0 / 255.0 if a0 > 1 else float(a0))
    return f"rgba({r},{g},{b},{a})"
