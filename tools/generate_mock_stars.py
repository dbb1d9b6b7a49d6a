#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Mock Star Catalog Generator

Writes a synthetic binary star catalog with a plausible sky: most stars are
concentrated along the galactic plane, the rest spread isotropically. Useful
for running the viewer without downloading a real catalog.

Magnitudes follow a power law weighted toward faint stars, colors follow the
B-V index (bright stars bluer, with the occasional red giant), and distances
come from the distance modulus with a rough main-sequence absolute
magnitude.

Usage
-----
Command-line:
    python -m tools.generate_mock_stars --output stars.bin --count 40000 --seed 7

Programmatic:
    from tools.generate_mock_stars import generate_mock_catalog

    data = generate_mock_catalog(count=1000, seed=7)
"""

from pathlib import Path
from typing import Optional, Tuple
import logging
import sys

import numpy as np

# Add parent directory for imports when run as a script
sys.path.insert(0, str(Path(__file__).parent.parent))

from ephemeris.star_catalog import encode_star_catalog


logger = logging.getLogger(__name__)


# Galactic north pole and node (J2000, degrees)
GALACTIC_POLE_RA = 192.85948
GALACTIC_POLE_DEC = 27.12825
GALACTIC_NODE_LON = 32.93192

DISK_FRACTION = 0.8
DISK_SPREAD_DEG = 5.0
MIN_DISTANCE_PC = 1.3

# B-V -> RGB knots
_BV_KNOTS = np.array([-0.4, 0.0, 0.6, 1.2, 2.0])
_RGB_KNOTS = np.array([
    [155, 176, 255],
    [202, 215, 255],
    [255, 244, 234],
    [255, 196, 120],
    [255, 140, 90],
])

# A few bright stars so familiar ones exist: ra, dec, parallax (mas), mag, B-V
FAMOUS_STARS = [
    (101.28, -16.71, 379.21, -1.46, 0.0),   # Sirius
    (279.23, 38.78, 128.93, 0.03, 0.0),     # Vega
    (88.79, 7.40, 5.00, 0.42, 1.85),        # Betelgeuse
    (213.91, 19.18, 88.85, -0.05, 1.23),    # Arcturus
    (78.63, -8.20, 3.89, 0.13, -0.03),      # Rigel
]


def galactic_to_equatorial(l_deg: np.ndarray, b_deg: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Convert galactic longitude/latitude to right ascension/declination.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        (ra, dec) in degrees, ra in [0, 360)
    """
    l = np.radians(l_deg)
    b = np.radians(b_deg)
    dec_g = np.radians(GALACTIC_POLE_DEC)
    l_omega = np.radians(GALACTIC_NODE_LON)

    sin_dec = np.sin(dec_g) * np.sin(b) + np.cos(dec_g) * np.cos(b) * np.cos(l - l_omega)
    dec = np.arcsin(np.clip(sin_dec, -1.0, 1.0))

    y = np.cos(b) * np.sin(l - l_omega)
    x = np.cos(dec_g) * np.sin(b) - np.sin(dec_g) * np.cos(b) * np.cos(l - l_omega)
    ra = np.degrees(np.arctan2(y, x)) + GALACTIC_POLE_RA

    return np.mod(ra, 360.0), np.degrees(dec)


def bv_to_rgb(color_index: np.ndarray) -> np.ndarray:
    """Approximate star color (0..255 RGB) from the B-V index."""
    color_index = np.asarray(color_index, dtype=float)
    return np.stack(
        [np.interp(color_index, _BV_KNOTS, _RGB_KNOTS[:, k]) for k in range(3)],
        axis=-1,
    ).round().astype(np.uint8)


def equatorial_to_file_axes(ra_deg: np.ndarray, dec_deg: np.ndarray, distance: np.ndarray) -> np.ndarray:
    """
    Catalog file axes (X, Y, Z) for equatorial coordinates.

    The file stores the equatorial vector as (x, -z, y), which the loader
    turns back into a y-up frame before tilting it onto the ecliptic.
    """
    ra = np.radians(ra_deg)
    dec = np.radians(dec_deg)
    x = distance * np.cos(dec) * np.cos(ra)
    y = distance * np.cos(dec) * np.sin(ra)
    z = distance * np.sin(dec)
    return np.stack([x, -z, y], axis=-1)


def generate_mock_catalog(count: int = 40000, seed: Optional[int] = None) -> bytes:
    """
    Build a mock catalog.

    Parameters
    ----------
    count : int
        Number of random stars (the famous stars are added on top)
    seed : int, optional
        Random seed for reproducibility

    Returns
    -------
    bytes
        Encoded catalog
    """
    if count < 0:
        raise ValueError("Star count must not be negative")

    rng = np.random.default_rng(seed)

    in_disk = rng.random(count) < DISK_FRACTION
    l = rng.random(count) * 360.0
    b = np.where(
        in_disk,
        rng.normal(0.0, DISK_SPREAD_DEG, count),
        np.degrees(np.arcsin(2 * rng.random(count) - 1)),
    )
    ra, dec = galactic_to_equatorial(l, b)

    mag = -1.5 + 13.5 * np.sqrt(rng.random(count))

    normalized_mag = (mag + 1.5) / 13.5
    main_sequence = -0.3 + normalized_mag * 2.1 + (rng.random(count) - 0.5) * 0.4
    red_giant = 1.0 + rng.random(count) * 0.8
    is_giant = (mag < 3) & (rng.random(count) < 0.1)
    color_index = np.clip(np.where(is_giant, red_giant, main_sequence), -0.4, 2.0)

    abs_mag = -5 + (color_index + 0.4) * 8
    distance = 10 ** ((mag - abs_mag + 5) / 5)
    distance *= 0.8 + rng.random(count) * 0.4
    distance = np.maximum(MIN_DISTANCE_PC, distance)

    famous = np.array(FAMOUS_STARS, dtype=float)
    famous_distance = 1000.0 / famous[:, 2]
    famous_abs = famous[:, 3] - 5 * np.log10(famous_distance) + 5

    ra = np.concatenate([ra, famous[:, 0]])
    dec = np.concatenate([dec, famous[:, 1]])
    distance = np.concatenate([distance, famous_distance])
    mag = np.concatenate([mag, famous[:, 3]])
    abs_mag = np.concatenate([abs_mag, famous_abs])
    color_index = np.concatenate([color_index, famous[:, 4]])

    return encode_star_catalog(
        mag,
        abs_mag,
        bv_to_rgb(color_index),
        equatorial_to_file_axes(ra, dec, distance),
    )


# Command-line interface
def main():
    """Command-line entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Generate a mock binary star catalog"
    )

    parser.add_argument(
        "--output", "-o",
        type=Path,
        required=True,
        help="Output catalog file"
    )

    parser.add_argument(
        "--count", "-n",
        type=int,
        default=40000,
        help="Number of random stars (default: 40000)"
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: random)"
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

    try:
        data = generate_mock_catalog(args.count, args.seed)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_bytes(data)

    logger.info(f"Saved {args.count + len(FAMOUS_STARS)} stars to {args.output} ({len(data)} bytes)")


if __name__ == "__main__":
    main()
