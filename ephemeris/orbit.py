#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orbital State Propagator

Keplerian propagation of precomputed orbital elements into the shared
display frame. Elements are expressed in AU and degrees, mean motion in
degrees per day, and time as days since the J2000 reference epoch.

Every function here is pure and vectorised with numpy: passing an array of
epochs evaluates the whole batch at once, which is how orbit paths are
sampled.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

import numpy as np

# Length units
AU_IN_KM = 149597870.7
AU_TO_DISPLAY_UNITS = 1000.0
KM_TO_DISPLAY_UNITS = AU_TO_DISPLAY_UNITS / AU_IN_KM

# Reference epoch (2000-01-01 12:00 UTC)
J2000 = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
SECONDS_PER_DAY = 86400.0

# Newton-Raphson iterations for Kepler's equation. Fixed count, no early exit.
KEPLER_ITERATIONS = 5

# Orbit path sampling
DEFAULT_ORBIT_SEGMENTS = 1024
FOCUS_SEGMENT_MULTIPLIER = 4

# Didactic (orrery) scaling: r_visual = A * r_physical ** B
DIDACTIC_SCALE_FACTOR = 300.0
DIDACTIC_EXPONENT = 0.45
DIDACTIC_MIN_DISTANCE_AU = 1e-4
DIDACTIC_RADIUS_FACTOR = 0.3
DIDACTIC_RADIUS_EXPONENT = 0.38
DIDACTIC_MIN_RADIUS = 1.5

ArrayLike = Union[float, np.ndarray]


class ScaleMode(Enum):
    """How physical distances map onto display units."""

    REALISTIC = "realistic"
    DIDACTIC = "didactic"


@dataclass(frozen=True)
class OrbitalElements:
    """
    Keplerian elements of a closed orbit.

    Attributes
    ----------
    a : float
        Semi-major axis (AU)
    e : float
        Eccentricity, 0 <= e < 1
    i : float
        Inclination (degrees)
    O : float
        Longitude of the ascending node (degrees)
    w : float
        Argument of periapsis (degrees)
    M0 : float
        Mean anomaly at the J2000 epoch (degrees)
    n : float
        Mean motion (degrees/day). Zero marks a body that does not orbit.
    """

    a: float
    e: float
    i: float
    O: float
    w: float
    M0: float
    n: float

    @property
    def is_stationary(self) -> bool:
        """True for a non-orbiting central body."""
        return self.n == 0

    @property
    def period(self) -> Optional[float]:
        """Orbital period in days, or None for a stationary body."""
        if self.is_stationary:
            return None
        return 360.0 / abs(self.n)


def days_since_j2000(when: datetime) -> float:
    """
    Elapsed days between J2000 and ``when``.

    Naive datetimes are interpreted as UTC.
    """
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return (when - J2000).total_seconds() / SECONDS_PER_DAY


def mean_anomaly(elements: OrbitalElements, days: ArrayLike) -> np.ndarray:
    """Mean anomaly in degrees, wrapped to [0, 360)."""
    return np.mod(elements.M0 + elements.n * np.asarray(days, dtype=float), 360.0)


def solve_kepler(
    mean_anomaly_rad: ArrayLike,
    eccentricity: float,
    iterations: int = KEPLER_ITERATIONS,
) -> np.ndarray:
    """
    Solve Kepler's equation E - e*sin(E) = M by Newton-Raphson.

    The iteration is seeded at E = M and always runs ``iterations`` steps,
    so the cost and accuracy are the same for every call.

    Parameters
    ----------
    mean_anomaly_rad : float or np.ndarray
        Mean anomaly (radians)
    eccentricity : float
        Orbit eccentricity, 0 <= e < 1
    iterations : int
        Number of Newton steps

    Returns
    -------
    np.ndarray
        Eccentric anomaly (radians), same shape as the input
    """
    M = np.asarray(mean_anomaly_rad, dtype=float)
    E = M.copy()
    for _ in range(iterations):
        E = E - (E - eccentricity * np.sin(E) - M) / (1 - eccentricity * np.cos(E))
    return E


def ecliptic_position(elements: OrbitalElements, days: ArrayLike) -> np.ndarray:
    """
    Heliocentric (or parent-centric) position in the ecliptic frame.

    Returns
    -------
    np.ndarray
        Position in AU, z-up, shape ``(..., 3)``
    """
    a, e = elements.a, elements.e

    M = np.radians(mean_anomaly(elements, days))
    E = solve_kepler(M, e)

    # Perifocal coordinates
    P = a * (np.cos(E) - e)
    Q = a * math.sqrt(1 - e * e) * np.sin(E)

    cos_O, sin_O = math.cos(math.radians(elements.O)), math.sin(math.radians(elements.O))
    cos_w, sin_w = math.cos(math.radians(elements.w)), math.sin(math.radians(elements.w))
    cos_i, sin_i = math.cos(math.radians(elements.i)), math.sin(math.radians(elements.i))

    x = P * (cos_w * cos_O - sin_w * sin_O * cos_i) - Q * (sin_w * cos_O + cos_w * sin_O * cos_i)
    y = P * (cos_w * sin_O + sin_w * cos_O * cos_i) + Q * (cos_w * cos_O * cos_i - sin_w * sin_O)
    z = P * (sin_w * sin_i) + Q * (cos_w * sin_i)

    return np.stack([x, y, z], axis=-1)


def to_display_frame(ecliptic: np.ndarray) -> np.ndarray:
    """Remap z-up ecliptic axes onto the y-up display frame: (x, y, z) -> (x, z, -y)."""
    ecliptic = np.asarray(ecliptic, dtype=float)
    return np.stack([ecliptic[..., 0], ecliptic[..., 2], -ecliptic[..., 1]], axis=-1)


def didactic_radius(radius_km: float) -> float:
    """Display radius of a body in didactic mode (power law, floored)."""
    return max(DIDACTIC_MIN_RADIUS, DIDACTIC_RADIUS_FACTOR * radius_km ** DIDACTIC_RADIUS_EXPONENT)


def didactic_distance(distance_au: float, system_multiplier: float = 1.0) -> float:
    """Display distance of an orbit of ``distance_au`` in didactic mode."""
    visual = DIDACTIC_SCALE_FACTOR * distance_au ** DIDACTIC_EXPONENT
    if system_multiplier > 1:
        visual *= system_multiplier
    return visual


def _didactic_scale(display_au: np.ndarray, system_multiplier: float) -> np.ndarray:
    distance = np.linalg.norm(display_au, axis=-1, keepdims=True)
    with np.errstate(divide="ignore", invalid="ignore"):
        visual = DIDACTIC_SCALE_FACTOR * np.power(distance, DIDACTIC_EXPONENT)
        if system_multiplier > 1:
            visual = visual * system_multiplier
        scaled = display_au / distance * visual
    return np.where(distance < DIDACTIC_MIN_DISTANCE_AU, 0.0, scaled)


def position_at_days(
    elements: OrbitalElements,
    days: ArrayLike,
    scale_mode: ScaleMode = ScaleMode.REALISTIC,
    system_multiplier: float = 1.0,
) -> np.ndarray:
    """
    Display-frame position at ``days`` since J2000.

    Parameters
    ----------
    elements : OrbitalElements
        Orbit of the body, relative to its parent
    days : float or np.ndarray
        Days since J2000
    scale_mode : ScaleMode
        Realistic (linear) or didactic (power-law) distances
    system_multiplier : float
        Extra didactic spread for satellites of one parent

    Returns
    -------
    np.ndarray
        Position(s) in display units, shape ``(..., 3)``
    """
    days = np.asarray(days, dtype=float)
    if elements.is_stationary:
        return np.zeros(days.shape + (3,))

    display_au = to_display_frame(ecliptic_position(elements, days))

    if scale_mode == ScaleMode.DIDACTIC:
        return _didactic_scale(display_au, system_multiplier)
    return display_au * AU_TO_DISPLAY_UNITS


def position(
    elements: OrbitalElements,
    when: datetime,
    scale_mode: ScaleMode = ScaleMode.REALISTIC,
    system_multiplier: float = 1.0,
) -> np.ndarray:
    """Display-frame position of a body at ``when``."""
    return position_at_days(elements, days_since_j2000(when), scale_mode, system_multiplier)


def orbit_path(
    elements: OrbitalElements,
    segments: int = DEFAULT_ORBIT_SEGMENTS,
    scale_mode: ScaleMode = ScaleMode.REALISTIC,
    system_multiplier: float = 1.0,
) -> np.ndarray:
    """
    Sample one full orbital period.

    Returns ``segments + 1`` points evenly spaced in mean anomaly; the last
    point repeats the first so the path closes. A stationary body has no
    path and yields an empty ``(0, 3)`` array, as does ``segments <= 0``.
    """
    if elements.is_stationary or segments <= 0:
        return np.empty((0, 3))

    days = np.linspace(0.0, elements.period, segments + 1)
    return position_at_days(elements, days, scale_mode, system_multiplier)


def orbit_segments(
    is_focus: bool,
    base_segments: int = DEFAULT_ORBIT_SEGMENTS,
    orbit_extent: Optional[float] = None,
    camera_distance: Optional[float] = None,
    min_salience: float = 1e-3,
) -> int:
    """
    Number of path segments to generate for one orbit this frame.

    The focused body gets ``FOCUS_SEGMENT_MULTIPLIER`` times more segments
    so its path does not facet at close range. An orbit whose extent is
    negligible compared with the camera distance gets none.
    """
    if orbit_extent is not None and camera_distance is not None and camera_distance > 0:
        if orbit_extent / camera_distance < min_salience:
            return 0
    if is_focus:
        return base_segments * FOCUS_SEGMENT_MULTIPLIER
    return base_segments
