"""Value-to-color classification for choropleth layers.

Three strategies are supported:

  - sequential: quantile-like breaks over the sorted samples, smooth ramp
    interpolation inside each break interval
  - diverging: the median sits exactly on the ramp center, each half is
    stretched linearly to its extreme
  - categorical: exact lookup of distinct values into palette slots

Typical usage:

    samples = extract_samples(geojson, "density")
    classify = ColorClassifier.build(samples, ColorScaleConfig(
        kind="sequential", palette=get_scheme("sequential", "Blues"), step_count=5))
    fill = classify(feature["properties"]["density"])

The returned classifier never raises: invalid palettes degrade to a default
blue ramp and non-finite queries resolve to the neutral "no data" color.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .models import ColorScaleConfig, Sample
from .schemes import CATEGORICAL, DEFAULT_RAMP, DIVERGING, NEUTRAL_COLOR, SEQUENTIAL
from .utils import RGB, clamp, interpolate_rgb, is_valid_color, to_hex, to_number, to_rgb

logger = logging.getLogger(__name__)

SampleLike = Union[Sample, float, int, str, None]


class ColorRamp:
    """Continuous RGB ramp through evenly spaced palette stops."""

    def __init__(self, palette: Sequence[Any]):
        colors = tuple(palette)
        if not colors or not all(is_valid_color(c) for c in colors):
            logger.warning(
                "Invalid color palette %r, falling back to default ramp %s",
                colors,
                list(DEFAULT_RAMP),
            )
            colors = DEFAULT_RAMP
            self.is_fallback = True
        else:
            self.is_fallback = False
        self.colors: Tuple[str, ...] = tuple(to_hex(c) for c in colors)
        self._stops: Tuple[RGB, ...] = tuple(to_rgb(c) for c in self.colors)
        if to_hex(NEUTRAL_COLOR) in self.colors:
            logger.warning(
                "Color palette %s contains the no-data color %s",
                list(self.colors),
                NEUTRAL_COLOR,
            )

    def __len__(self) -> int:
        return len(self.colors)

    def __call__(self, position: float) -> str:
        return to_hex(interpolate_rgb(self._stops, clamp(position)))


def _sample_value(sample: SampleLike) -> float:
    if isinstance(sample, Sample):
        return to_number(sample.value)
    return to_number(sample)


class ColorClassifier:
    """Deterministic ``value -> color`` mapping built from a sample set.

    Build instances with :meth:`build`. Instances are immutable and callable;
    ``classifier(value)`` and ``classifier.classify(value)`` are equivalent.
    """

    def __init__(
        self,
        kind: str,
        ramp: ColorRamp,
        values: np.ndarray,
        *,
        breaks: Tuple[float, ...] = (),
        midpoint: Optional[float] = None,
        categories: Optional[Mapping[float, int]] = None,
    ):
        self.kind = kind
        self.ramp = ramp
        self._values = values
        self.breaks = breaks
        self.midpoint = midpoint
        self._categories: Dict[float, int] = dict(categories or {})

    # ---------- construction ----------
    @classmethod
    def build(cls, samples: Iterable[SampleLike], config: ColorScaleConfig) -> "ColorClassifier":
        """Build a classifier for ``samples`` using ``config``.

        Args:
            samples: ``Sample`` objects or raw property values. Invalid values
                are excluded from the statistics.
            config: Scale kind, palette and step count.

        Returns:
            A callable classifier.
        """
        ramp = ColorRamp(config.usable_palette)
        values = np.sort(
            np.array(
                [v for v in (_sample_value(s) for s in samples) if math.isfinite(v)],
                dtype=np.float64,
            )
        )
        if values.size == 0:
            return cls(config.kind, ramp, values)

        if config.kind == SEQUENTIAL:
            # Break count follows the configured palette even when the ramp fell back
            steps = len(config.usable_palette) or len(ramp)
            return cls(config.kind, ramp, values, breaks=quantile_breaks(values, steps))
        if config.kind == DIVERGING:
            return cls(config.kind, ramp, values, midpoint=median_value(values))
        return cls(config.kind, ramp, values, categories=category_index(values))

    # ---------- inspection ----------
    @property
    def palette(self) -> Tuple[str, ...]:
        return self.ramp.colors

    @property
    def categories(self) -> Tuple[float, ...]:
        return tuple(self._categories)

    @property
    def min_value(self) -> Optional[float]:
        return float(self._values[0]) if self._values.size else None

    @property
    def max_value(self) -> Optional[float]:
        return float(self._values[-1]) if self._values.size else None

    @property
    def sample_count(self) -> int:
        return int(self._values.size)

    # ---------- classification ----------
    def ramp_position(self, value: Any) -> Optional[float]:
        """Normalized ramp position in [0, 1], or None for "no data".

        Categorical scales have no ramp and always return None.
        """
        v = to_number(value)
        if not math.isfinite(v) or self._values.size == 0:
            return None
        if self.kind == SEQUENTIAL:
            return self._sequential_position(v)
        if self.kind == DIVERGING:
            return self._diverging_position(v)
        return None

    def classify(self, value: Any) -> str:
        v = to_number(value)
        if not math.isfinite(v) or self._values.size == 0:
            return NEUTRAL_COLOR
        if self.kind == CATEGORICAL:
            index = self._categories.get(v)
            if index is None:
                return NEUTRAL_COLOR
            return self.ramp.colors[index % len(self.ramp)]
        return self.ramp(self.ramp_position(v))

    __call__ = classify

    def _sequential_position(self, v: float) -> float:
        breaks = self.breaks
        k = len(breaks) - 1
        if v < breaks[0]:
            return 0.0
        if v >= breaks[-1]:
            return 1.0

        # First non-empty interval [breaks[i], breaks[i + 1]) holding v
        i = int(np.searchsorted(breaks, v, side="right")) - 1
        start, end = breaks[i], breaks[i + 1]
        within = (v - start) / (end - start) if end > start else 0.0
        if k == 1:
            return clamp(within)
        return clamp(i / (k - 1) + within / k)

    def _diverging_position(self, v: float) -> float:
        lo = float(self._values[0])
        hi = float(self._values[-1])
        mid = float(self.midpoint)
        if v <= mid:
            span = mid - lo
            if span > 0:
                return clamp((v - lo) / span * 0.5)
            return 0.5 if v >= lo else 0.0
        span = hi - mid
        if span > 0:
            return clamp(0.5 + (v - mid) / span * 0.5)
        return 1.0

    def __repr__(self) -> str:
        return (
            f"ColorClassifier(kind={self.kind!r}, samples={self.sample_count}, "
            f"palette={list(self.palette)!r})"
        )


def quantile_breaks(sorted_values: Sequence[float], step_count: int) -> Tuple[float, ...]:
    """``step_count + 1`` break values picked at evenly spaced sorted positions."""
    values = np.asarray(sorted_values, dtype=np.float64)
    n = values.size
    k = max(1, int(step_count))
    return tuple(float(values[(i * (n - 1)) // k]) for i in range(k + 1))


def median_value(sorted_values: Sequence[float]) -> float:
    """Element at ``floor(n / 2)``; for even counts this is the upper median."""
    values = np.asarray(sorted_values, dtype=np.float64)
    return float(values[values.size // 2])


def category_index(sorted_values: Sequence[float]) -> Dict[float, int]:
    index: Dict[float, int] = {}
    for v in sorted_values:
        index.setdefault(float(v), len(index))
    return index


def extract_samples(data: Any, value_property: str) -> List[Sample]:
    """Read ``value_property`` from every feature of a GeoJSON-like collection.

    Args:
        data: A FeatureCollection dict or a sequence of feature dicts.
        value_property: Property to classify on.

    Returns:
        One ``Sample`` per feature. Features without an ``id`` (or with a
        ``None`` id) are keyed by their position in the collection.
    """
    features = data.get("features", []) if isinstance(data, Mapping) else data
    samples = []
    for i, feature in enumerate(features or []):
        props = feature.get("properties") or {}
        fid = feature.get("id")
        if fid is None:
            fid = i
        samples.append(Sample(feature_id=fid, value=to_number(props.get(value_property))))
    return samples


def legend_entries(
    values: Iterable[SampleLike], config: ColorScaleConfig
) -> List[Tuple[str, str]]:
    """Legend ``(color, label)`` pairs for a sample set.

    Categorical legends list the sorted distinct values, diverging legends
    show min/mid/max, sequential legends spread labels evenly over the range.
    """
    classifier = ColorClassifier.build(values, config)
    if classifier.sample_count == 0:
        return []

    lo, hi = classifier.min_value, classifier.max_value
    colors = classifier.palette

    if config.kind == CATEGORICAL:
        cats = classifier.categories
        return [(classifier(c), _format_category(c)) for c in cats[: len(colors)]]

    if config.kind == DIVERGING:
        mid = (lo + hi) / 2.0
        return [
            (classifier.ramp(0.0), f"{lo:.1f}"),
            (classifier.ramp(0.5), f"{mid:.1f}"),
            (classifier.ramp(1.0), f"{hi:.1f}"),
        ]

    if len(colors) == 1:
        return [(colors[0], f"{lo:.1f}")]
    step = (hi - lo) / (len(colors) - 1)
    return [(c, f"{lo + i * step:.1f}") for i, c in enumerate(colors)]


def _format_category(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
