#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orrery Ephemeris Package

Orbital state propagation for the orrery: Keplerian elements to display-frame
positions, the body table with its parent hierarchy, the per-frame body
registry and the binary background star catalog.

Nothing in this package depends on the camera, the overlay or pygame, so it
can be used on its own for headless position queries.
"""

from .orbit import (
    AU_IN_KM,
    AU_TO_DISPLAY_UNITS,
    KM_TO_DISPLAY_UNITS,
    J2000,
    KEPLER_ITERATIONS,
    DEFAULT_ORBIT_SEGMENTS,
    FOCUS_SEGMENT_MULTIPLIER,
    ScaleMode,
    OrbitalElements,
    days_since_j2000,
    mean_anomaly,
    solve_kepler,
    ecliptic_position,
    to_display_frame,
    didactic_distance,
    didactic_radius,
    position,
    position_at_days,
    orbit_path,
    orbit_segments,
)

from .bodies import (
    ECLIPTIC_UP,
    BodyType,
    CelestialBody,
    BodyFrame,
    BodyRegistry,
    hierarchy_order,
    north_vector,
    system_multipliers,
)

from .catalog import (
    CatalogError,
    body_to_record,
    load_bodies,
    load_bodies_json,
)

from .solar_system import (
    SOLAR_SYSTEM_RECORDS,
    default_bodies,
)

from .star_catalog import (
    StarCatalog,
    StarCatalogError,
    BufferTooSmallError,
    InvalidRecordCountError,
    parse_star_catalog,
    encode_star_catalog,
    read_star_catalog,
    load_star_catalogs,
)


__all__ = [
    # Orbit
    "AU_IN_KM",
    "AU_TO_DISPLAY_UNITS",
    "KM_TO_DISPLAY_UNITS",
    "J2000",
    "KEPLER_ITERATIONS",
    "DEFAULT_ORBIT_SEGMENTS",
    "FOCUS_SEGMENT_MULTIPLIER",
    "ScaleMode",
    "OrbitalElements",
    "days_since_j2000",
    "mean_anomaly",
    "solve_kepler",
    "ecliptic_position",
    "to_display_frame",
    "didactic_distance",
    "didactic_radius",
    "position",
    "position_at_days",
    "orbit_path",
    "orbit_segments",

    # Bodies
    "ECLIPTIC_UP",
    "BodyType",
    "CelestialBody",
    "BodyFrame",
    "BodyRegistry",
    "hierarchy_order",
    "north_vector",
    "system_multipliers",

    # Body table
    "CatalogError",
    "body_to_record",
    "load_bodies",
    "load_bodies_json",
    "SOLAR_SYSTEM_RECORDS",
    "default_bodies",

    # Star catalog
    "StarCatalog",
    "StarCatalogError",
    "BufferTooSmallError",
    "InvalidRecordCountError",
    "parse_star_catalog",
    "encode_star_catalog",
    "read_star_catalog",
    "load_star_catalogs",
]

__version__ = "1.0.0"
