#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Celestial Bodies and the Per-Frame Body Registry

A CelestialBody is the static, externally supplied description of one body.
The BodyRegistry turns the whole table into BodyFrames (world position,
bounding radius, north vector) for a given instant, resolving bodies whose
elements are relative to a parent. Positions are recomputed from scratch on
every update; nothing is carried over between frames.
"""

import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .orbit import (
    AU_IN_KM,
    KM_TO_DISPLAY_UNITS,
    OrbitalElements,
    ScaleMode,
    days_since_j2000,
    didactic_distance,
    didactic_radius,
    position_at_days,
)

# Global reference "up" of the display frame (ecliptic north)
ECLIPTIC_UP = np.array([0.0, 1.0, 0.0])


class BodyType(Enum):
    """Classification of a celestial body."""

    STAR = "star"
    PLANET = "planet"
    DWARF = "dwarf"
    MOON = "moon"
    ASTEROID = "asteroid"
    COMET = "comet"
    TNO = "tno"


@dataclass(frozen=True)
class CelestialBody:
    """
    Static description of a body.

    Attributes
    ----------
    id : str
        Unique identifier
    name : str
        Display name
    body_type : BodyType
        Classification
    radius_km : float
        Mean radius (km)
    orbit : OrbitalElements
        Elements relative to the parent (or to the system origin)
    parent_id : str, optional
        Body whose frame the elements are expressed in
    axial_tilt : float
        Obliquity of the rotation axis (degrees)
    ring_outer_radius : float, optional
        Outer edge of a ring system, in body radii
    color : tuple
        RGB display color
    """

    id: str
    name: str
    body_type: BodyType
    radius_km: float
    orbit: OrbitalElements
    parent_id: Optional[str] = None
    axial_tilt: float = 0.0
    ring_outer_radius: Optional[float] = None
    color: Tuple[int, int, int] = (200, 200, 200)


@dataclass
class BodyFrame:
    """
    Resolved state of one body for the current frame.

    Attributes
    ----------
    body_id : str
        Body identifier
    parent_id : str, optional
        Parent identifier
    position : np.ndarray
        World position in display units
    radius : float
        Bounding radius in display units
    body_type : BodyType
        Classification, carried for overlay ranking
    north : np.ndarray
        Unit vector of the body's own north pole
    """

    body_id: str
    parent_id: Optional[str]
    position: np.ndarray
    radius: float
    body_type: BodyType = BodyType.PLANET
    north: np.ndarray = field(default_factory=lambda: ECLIPTIC_UP.copy())


def north_vector(axial_tilt: float) -> np.ndarray:
    """Body north: ecliptic up tipped about the display x axis by ``axial_tilt`` degrees."""
    tilt = math.radians(axial_tilt)
    return np.array([0.0, math.cos(tilt), math.sin(tilt)])


def hierarchy_order(bodies: Iterable[CelestialBody]) -> List[CelestialBody]:
    """
    Order bodies so every parent precedes its satellites.

    Raises
    ------
    ValueError
        If a parent is unknown or the parent references form a cycle.
    """
    by_id = {body.id: body for body in bodies}
    ordered: List[CelestialBody] = []
    state: Dict[str, int] = {}  # 1 = visiting, 2 = done

    def visit(body: CelestialBody) -> None:
        mark = state.get(body.id)
        if mark == 2:
            return
        if mark == 1:
            raise ValueError(f"Parent cycle through body '{body.id}'")
        state[body.id] = 1
        if body.parent_id is not None:
            parent = by_id.get(body.parent_id)
            if parent is None:
                raise ValueError(f"Body '{body.id}' references unknown parent '{body.parent_id}'")
            visit(parent)
        state[body.id] = 2
        ordered.append(body)

    for body in by_id.values():
        visit(body)
    return ordered


def system_multipliers(bodies: Iterable[CelestialBody]) -> Dict[str, float]:
    """
    Didactic spread factor per planetary system.

    The power-law didactic distance compresses satellite orbits so much that
    moons would sit inside their (enlarged) parent. For each parent this
    returns the smallest factor that clears the parent, or its rings when
    the moon physically orbits outside them, while preserving the orbital
    ratios inside the system. Parents that need no spreading are omitted.
    """
    bodies = list(bodies)
    by_id = {body.id: body for body in bodies}
    systems: Dict[str, List[CelestialBody]] = defaultdict(list)
    for body in bodies:
        if body.parent_id is not None:
            systems[body.parent_id].append(body)

    multipliers: Dict[str, float] = {}
    for parent_id, satellites in systems.items():
        parent = by_id.get(parent_id)
        if parent is None:
            continue

        parent_radius_vis = didactic_radius(parent.radius_km)
        ring_outer_vis = 0.0
        ring_outer_au = 0.0
        if parent.ring_outer_radius:
            ring_outer_vis = parent_radius_vis * parent.ring_outer_radius
            ring_outer_au = parent.radius_km * parent.ring_outer_radius / AU_IN_KM

        max_multiplier = 1.0
        for moon in satellites:
            distance_au = moon.orbit.a
            if distance_au < 1e-6:
                continue

            algo_distance = didactic_distance(distance_au)
            outside_rings = ring_outer_au > 0 and distance_au > ring_outer_au
            clearance = ring_outer_vis if outside_rings else parent_radius_vis
            safe_distance = clearance + didactic_radius(moon.radius_km) + 2

            if algo_distance < safe_distance:
                max_multiplier = max(max_multiplier, safe_distance / algo_distance)

        if max_multiplier > 1:
            multipliers[parent_id] = max_multiplier

    return multipliers


class BodyRegistry:
    """
    Explicit registry of body id -> current world position and radius.

    Parameters
    ----------
    bodies : iterable of CelestialBody
        The static body table
    scale_mode : ScaleMode
        Realistic or didactic distances and radii

    Attributes
    ----------
    bodies : dict
        Body id -> CelestialBody
    frames : dict
        Body id -> BodyFrame for the most recent update
    """

    def __init__(
        self,
        bodies: Iterable[CelestialBody],
        scale_mode: ScaleMode = ScaleMode.REALISTIC,
    ):
        self._order = hierarchy_order(bodies)
        self.bodies: Dict[str, CelestialBody] = {body.id: body for body in self._order}
        self.frames: Dict[str, BodyFrame] = {}
        self.scale_mode = scale_mode
        self._multipliers = system_multipliers(self._order)

    def display_radius(self, body: CelestialBody) -> float:
        """Bounding radius of ``body`` in display units."""
        if self.scale_mode == ScaleMode.DIDACTIC:
            return didactic_radius(body.radius_km)
        return body.radius_km * KM_TO_DISPLAY_UNITS

    def system_multiplier(self, body: CelestialBody) -> float:
        """Didactic spread applied to ``body``'s orbit (1 outside didactic mode)."""
        if self.scale_mode != ScaleMode.DIDACTIC or body.parent_id is None:
            return 1.0
        return self._multipliers.get(body.parent_id, 1.0)

    def local_position(self, body: CelestialBody, days: float) -> np.ndarray:
        """Position of ``body`` relative to its parent."""
        return position_at_days(
            body.orbit, days, self.scale_mode, self.system_multiplier(body)
        )

    def update_days(self, days: float) -> Dict[str, BodyFrame]:
        """Recompute every frame at ``days`` since J2000."""
        frames: Dict[str, BodyFrame] = {}
        for body in self._order:
            local = self.local_position(body, days)
            if body.parent_id is not None:
                world = frames[body.parent_id].position + local
            else:
                world = local

            frames[body.id] = BodyFrame(
                body_id=body.id,
                parent_id=body.parent_id,
                position=world,
                radius=self.display_radius(body),
                body_type=body.body_type,
                north=north_vector(body.axial_tilt),
            )

        self.frames = frames
        return frames

    def update(self, when: datetime) -> Dict[str, BodyFrame]:
        """Recompute every frame at ``when``."""
        return self.update_days(days_since_j2000(when))

    def position(self, body_id: str) -> np.ndarray:
        """World position from the most recent update."""
        return self.frames[body_id].position

    def radius(self, body_id: str) -> float:
        """Bounding radius from the most recent update."""
        return self.frames[body_id].radius

    def __contains__(self, body_id: object) -> bool:
        return body_id in self.bodies

    def __getitem__(self, body_id: str) -> BodyFrame:
        return self.frames[body_id]

    def __iter__(self) -> Iterator[BodyFrame]:
        return iter(self.frames.values())

    def __len__(self) -> int:
        return len(self.bodies)
