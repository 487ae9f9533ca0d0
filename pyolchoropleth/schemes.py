"""Static palette tables (ColorBrewer-derived).

Palettes are immutable configuration data: tuples of "#rrggbb" strings keyed by
scale kind and scheme name. Use :func:`get_scheme` to fetch a truncated copy.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional, Tuple

Palette = Tuple[str, ...]

SEQUENTIAL = "sequential"
DIVERGING = "diverging"
CATEGORICAL = "categorical"

SCALE_KINDS: Tuple[str, ...] = (SEQUENTIAL, DIVERGING, CATEGORICAL)

# Fallback ramp used when a configured palette cannot be parsed:
# lightest and darkest entries of the Blues ramp.
DEFAULT_RAMP: Palette = ("#f7fbff", "#4292c6")

# "No data" color. Not present in any palette below.
NEUTRAL_COLOR = "#cccccc"

SCHEMES: Mapping[str, Mapping[str, Palette]] = MappingProxyType({
    SEQUENTIAL: MappingProxyType({
        "Blues": ("#f7fbff", "#deebf7", "#c6dbef", "#9ecae1", "#6baed6", "#4292c6"),
        "Reds": ("#fee5d9", "#fcbba1", "#fc9272", "#fb6a4a", "#ef3b2c", "#cb181d"),
        "Greens": ("#edf8e9", "#c7e9c0", "#a1d99b", "#74c476", "#41ab5d", "#238b45"),
        "Purples": ("#f2f0f7", "#dadaeb", "#bcbddc", "#9e9ac8", "#756bb1", "#54278f"),
        "Oranges": ("#feedde", "#fdbe85", "#fd8d3c", "#e6550d", "#a63603", "#7f2704"),
    }),
    DIVERGING: MappingProxyType({
        "RdBu": ("#b2182b", "#ef8a62", "#fddbc7", "#d1e5f0", "#67a9cf", "#2166ac"),
        "PiYG": ("#c51b7d", "#e9a3c9", "#fde0ef", "#e6f5d0", "#a1d76a", "#4d9221"),
        "BrBG": ("#8c510a", "#d8b365", "#f6e8c3", "#c7eae5", "#5ab4ac", "#01665e"),
    }),
    CATEGORICAL: MappingProxyType({
        "Set1": ("#e41a1c", "#377eb8", "#4daf4a", "#984ea3", "#ff7f00", "#ffff33"),
        "Set2": ("#66c2a5", "#fc8d62", "#8da0cb", "#e78ac3", "#a6d854", "#ffd92f"),
        "Set3": ("#8dd3c7", "#ffffb3", "#bebada", "#fb8072", "#80b1d3", "#fdb462"),
    }),
})


def scheme_names(kind: str) -> Tuple[str, ...]:
    """Names of the built-in schemes for a scale kind, in table order."""
    try:
        return tuple(SCHEMES[kind])
    except KeyError:
        raise ValueError(f"Unknown scale kind: {kind!r}") from None


def get_scheme(kind: str, name: Optional[str] = None, steps: Optional[int] = None) -> Palette:
    """Return a built-in palette, optionally truncated to its first ``steps`` colors.

    Args:
        kind: "sequential", "diverging" or "categorical".
        name: Scheme name; defaults to the first scheme of ``kind``.
        steps: Number of colors to keep.

    Raises:
        ValueError: Unknown kind or scheme name.
    """
    names = scheme_names(kind)
    key = name if name is not None else names[0]
    if key not in SCHEMES[kind]:
        raise ValueError(f"Unknown {kind} scheme: {key!r} (expected one of {names})")
    palette = SCHEMES[kind][key]
    if steps is not None:
        palette = palette[: max(1, int(steps))]
    return palette
