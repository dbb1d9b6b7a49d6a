#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Star Catalog Inspector

Decodes one or more binary star catalogs and reports what they contain:
record count, magnitude range and the brightest stars.

Usage
-----
    python -m tools.inspect_stars stars.bin more_stars.bin --top 10
"""

from pathlib import Path
from typing import List
import logging
import sys

import numpy as np

# Add parent directory for imports when run as a script
sys.path.insert(0, str(Path(__file__).parent.parent))

from ephemeris.star_catalog import StarCatalog, StarCatalogError, read_star_catalog


logger = logging.getLogger(__name__)


def summarize(catalog: StarCatalog, top: int = 5) -> List[str]:
    """
    Human-readable summary lines for a catalog.

    Parameters
    ----------
    catalog : StarCatalog
        Decoded catalog
    top : int
        Number of brightest stars to list
    """
    lines = [f"Stars: {len(catalog)}"]
    if len(catalog) == 0:
        return lines

    distances = np.linalg.norm(catalog.positions, axis=1)
    lines.append(
        f"Apparent magnitude: {catalog.magnitudes.min():.2f} .. {catalog.magnitudes.max():.2f}"
    )
    lines.append(
        f"Absolute magnitude: {catalog.absolute_magnitudes.min():.2f} .. "
        f"{catalog.absolute_magnitudes.max():.2f}"
    )
    lines.append(f"Distance: {distances.min():.3g} .. {distances.max():.3g}")

    lines.append(f"Brightest {min(top, len(catalog))}:")
    for index in np.argsort(catalog.magnitudes)[:top]:
        x, y, z = catalog.positions[index]
        r, g, b = catalog.colors[index]
        lines.append(
            f"  mag {catalog.magnitudes[index]:+6.2f}  "
            f"pos ({x:+.3g}, {y:+.3g}, {z:+.3g})  "
            f"rgb ({r:.2f}, {g:.2f}, {b:.2f})"
        )
    return lines


# Command-line interface
def main():
    """Command-line entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Inspect binary star catalog files"
    )

    parser.add_argument(
        "paths",
        type=Path,
        nargs="+",
        help="Catalog files"
    )

    parser.add_argument(
        "--top",
        type=int,
        default=5,
        help="Number of brightest stars to list (default: 5)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    args = parser.parse_args()

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s"
    )

    failures = 0
    for path in args.paths:
        try:
            catalog = read_star_catalog(path)
        except (OSError, StarCatalogError) as e:
            logger.error(f"{path}: {e}")
            failures += 1
            continue

        logger.info(f"{path}")
        for line in summarize(catalog, args.top):
            logger.info(f"  {line}")

    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
