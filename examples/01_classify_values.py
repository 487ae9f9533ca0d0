#!/usr/bin/env python3
"""Classification Example

This example shows how the same densities are colored by each scale kind:
- Sequential quantile breaks with smooth interpolation
- Diverging around the median
- Categorical lookup with palette wrap-around
"""

import logging

from pyolchoropleth import ColorClassifier, ColorScaleConfig, get_scheme, legend_entries

DENSITIES = [1.2, 8.5, 12.0, 40.3, 41.0, 95.8, 210.4, 1021.0, None]


def main():
    """Print the color of every density for each scale kind."""
    logging.basicConfig(level=logging.INFO)

    configs = {
        "sequential": ColorScaleConfig("sequential", get_scheme("sequential", "Blues"), 5),
        "diverging": ColorScaleConfig("diverging", get_scheme("diverging", "RdBu")),
        "categorical": ColorScaleConfig("categorical", get_scheme("categorical", "Set2")),
    }

    for kind, config in configs.items():
        classify = ColorClassifier.build(DENSITIES, config)
        print(f"{kind}: {classify!r}")
        for value in DENSITIES:
            print(f"  {value!s:>8} -> {classify(value)}")
        print("  legend:", legend_entries(DENSITIES, config))


if __name__ == "__main__":
    main()
