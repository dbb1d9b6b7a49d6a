#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Binary Star Catalog Parser

Reads the packed little-endian background star catalog::

    int32   record count
    repeat count times (23 bytes each):
        float32 apparent magnitude
        float32 absolute magnitude
        uint8   r, g, b
        float32 Y, Z, X        (file order)

On load the Y axis is negated, colors are normalised by their brightest
channel, and positions are rotated about X from the ecliptic into the equatorial
orientation.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

import numpy as np

logger = logging.getLogger(__name__)

HEADER_SIZE = 4

RECORD_DTYPE = np.dtype([
    ("mag", "<f4"),
    ("abs_mag", "<f4"),
    ("r", "u1"),
    ("g", "u1"),
    ("b", "u1"),
    ("y", "<f4"),
    ("z", "<f4"),
    ("x", "<f4"),
])
RECORD_SIZE = RECORD_DTYPE.itemsize  # 23, no padding

# Obliquity rotation about X, baked as in the published catalog
ROTATION_COS = 0.9174077
ROTATION_SIN = 0.3979486


class StarCatalogError(Exception):
    """Base class for star catalog decoding failures."""
    pass


class BufferTooSmallError(StarCatalogError):
    """The buffer cannot hold the header or the declared number of records."""
    pass


class InvalidRecordCountError(StarCatalogError):
    """The header declares a negative number of records."""
    pass


@dataclass
class StarCatalog:
    """
    Decoded star catalog, one row per star.

    Attributes
    ----------
    positions : np.ndarray
        Display-frame positions, shape (N, 3)
    colors : np.ndarray
        RGB normalised so the brightest channel is 1, shape (N, 3)
    magnitudes : np.ndarray
        Apparent magnitudes, shape (N,)
    absolute_magnitudes : np.ndarray
        Absolute magnitudes, shape (N,)
    """

    positions: np.ndarray
    colors: np.ndarray
    magnitudes: np.ndarray
    absolute_magnitudes: np.ndarray

    def __len__(self) -> int:
        return len(self.magnitudes)

    @classmethod
    def empty(cls) -> "StarCatalog":
        return cls(
            positions=np.empty((0, 3), dtype=np.float32),
            colors=np.empty((0, 3), dtype=np.float32),
            magnitudes=np.empty(0, dtype=np.float32),
            absolute_magnitudes=np.empty(0, dtype=np.float32),
        )

    @classmethod
    def concatenate(cls, catalogs: Iterable["StarCatalog"]) -> "StarCatalog":
        catalogs = list(catalogs)
        if not catalogs:
            return cls.empty()
        return cls(
            positions=np.concatenate([c.positions for c in catalogs]),
            colors=np.concatenate([c.colors for c in catalogs]),
            magnitudes=np.concatenate([c.magnitudes for c in catalogs]),
            absolute_magnitudes=np.concatenate([c.absolute_magnitudes for c in catalogs]),
        )


def parse_star_catalog(buffer: bytes) -> StarCatalog:
    """
    Decode a binary star catalog.

    Parameters
    ----------
    buffer : bytes
        Raw file contents. Trailing bytes past the declared records are ignored.

    Returns
    -------
    StarCatalog
        Decoded stars

    Raises
    ------
    BufferTooSmallError
        If the header or the declared records do not fit in the buffer
    InvalidRecordCountError
        If the declared record count is negative
    """
    if len(buffer) < HEADER_SIZE:
        raise BufferTooSmallError(
            f"Star catalog needs a {HEADER_SIZE}-byte header, got {len(buffer)} bytes"
        )

    count = int(np.frombuffer(buffer, dtype="<i4", count=1)[0])
    if count < 0:
        raise InvalidRecordCountError(f"Star catalog declares {count} records")

    needed = HEADER_SIZE + count * RECORD_SIZE
    if len(buffer) < needed:
        raise BufferTooSmallError(
            f"Star catalog declares {count} records ({needed} bytes) "
            f"but only {len(buffer)} bytes are available"
        )

    records = np.frombuffer(buffer, dtype=RECORD_DTYPE, count=count, offset=HEADER_SIZE)

    x = records["x"].astype(np.float32)
    y = -records["y"].astype(np.float32)
    z = records["z"].astype(np.float32)

    positions = np.empty((count, 3), dtype=np.float32)
    positions[:, 0] = x
    positions[:, 1] = y * ROTATION_COS - z * ROTATION_SIN
    positions[:, 2] = y * ROTATION_SIN + z * ROTATION_COS

    rgb = np.stack([records["r"], records["g"], records["b"]], axis=-1).astype(np.float32)
    scale = np.maximum(rgb.max(axis=-1, initial=0.0, keepdims=True), 1.0)
    colors = rgb / scale

    return StarCatalog(
        positions=positions,
        colors=colors,
        magnitudes=records["mag"].astype(np.float32),
        absolute_magnitudes=records["abs_mag"].astype(np.float32),
    )


def encode_star_catalog(
    magnitudes: np.ndarray,
    absolute_magnitudes: np.ndarray,
    rgb: np.ndarray,
    file_xyz: np.ndarray,
) -> bytes:
    """
    Pack raw records into the binary catalog format.

    Parameters
    ----------
    magnitudes, absolute_magnitudes : np.ndarray
        Shape (N,)
    rgb : np.ndarray
        Integer colors 0..255, shape (N, 3)
    file_xyz : np.ndarray
        Positions as (X, Y, Z) in file axes, before any load-time transform,
        shape (N, 3)
    """
    count = len(magnitudes)
    records = np.zeros(count, dtype=RECORD_DTYPE)
    records["mag"] = magnitudes
    records["abs_mag"] = absolute_magnitudes
    rgb = np.asarray(rgb)
    records["r"], records["g"], records["b"] = rgb[:, 0], rgb[:, 1], rgb[:, 2]
    file_xyz = np.asarray(file_xyz)
    records["x"], records["y"], records["z"] = file_xyz[:, 0], file_xyz[:, 1], file_xyz[:, 2]
    return np.array([count], dtype="<i4").tobytes() + records.tobytes()


def read_star_catalog(path: Union[str, Path]) -> StarCatalog:
    """Read and decode one catalog file."""
    with open(path, "rb") as f:
        return parse_star_catalog(f.read())


def load_star_catalogs(
    paths: Iterable[Union[str, Path]],
    max_magnitude: Optional[float] = None,
) -> StarCatalog:
    """
    Load several catalog files into one.

    A source that cannot be read or decoded is logged and skipped; the
    remaining sources are still loaded.

    Parameters
    ----------
    paths : iterable of path
        Catalog files
    max_magnitude : float, optional
        Drop stars fainter than this apparent magnitude
    """
    catalogs: List[StarCatalog] = []
    for path in paths:
        try:
            catalog = read_star_catalog(path)
        except (OSError, StarCatalogError) as e:
            logger.warning(f"Skipping star catalog {path}: {e}")
            continue
        logger.debug(f"Loaded {len(catalog)} stars from {path}")
        catalogs.append(catalog)

    merged = StarCatalog.concatenate(catalogs)
    if max_magnitude is not None:
        keep = merged.magnitudes <= max_magnitude
        merged = StarCatalog(
            positions=merged.positions[keep],
            colors=merged.colors[keep],
            magnitudes=merged.magnitudes[keep],
            absolute_magnitudes=merged.absolute_magnitudes[keep],
        )
    return merged
