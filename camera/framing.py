#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Camera Framing Planner

Computes the pose from which a body is best observed:

- far enough that its bounding sphere fits both the vertical and the
  horizontal field of view, with a margin;
- on the lit side, looking back along the light direction but swung 30
  degrees about the up axis so the terminator stays visible;
- clear of other bodies, by swinging around the target when a solid
  collider sits between the camera and the target.

All functions are pure; the planner never mutates the camera.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from .pose import GLOBAL_UP, CameraIntrinsics, CameraPose, normalize

logger = logging.getLogger(__name__)

# Direction used when the target coincides with the light source
DEGENERATE_LIGHT_DIRECTION = np.array([0.0, 0.3, 1.0])
COINCIDENT_TOLERANCE = 0.001


class OcclusionFallback(Enum):
    """What to do when every candidate position is occluded."""

    ORIGINAL_POSITION = "original_position"
    RAISE = "raise"


class NonIntersectableGeometryError(Exception):
    """A collider's geometry cannot be ray tested."""
    pass


class OccludedViewError(Exception):
    """No unoccluded camera position was found."""

    def __init__(self, target_id: Optional[str], occluder_id: Optional[str]):
        self.target_id = target_id
        self.occluder_id = occluder_id
        super().__init__(f"View of '{target_id}' is blocked by '{occluder_id}' from every direction tried")


@dataclass
class SphereCollider:
    """
    Spherical occluder.

    Attributes
    ----------
    id : str
        Identifier, used to exclude the target itself
    center : np.ndarray
        World position
    radius : float
        Sphere radius
    solid : bool
        Only solid colliders block the view
    """

    id: str
    center: np.ndarray
    radius: float
    solid: bool = True

    def intersect(self, origin: np.ndarray, direction: np.ndarray, max_distance: float) -> Optional[float]:
        """
        Distance along a ray to the sphere surface.

        Parameters
        ----------
        origin : np.ndarray
            Ray origin
        direction : np.ndarray
            Unit ray direction
        max_distance : float
            Length of the tested segment

        Returns
        -------
        float or None
            Distance to the first hit within the segment; 0 when the origin is
            inside the sphere; None when the segment misses.

        Raises
        ------
        NonIntersectableGeometryError
            If the centre or radius is not a finite, usable value
        """
        center = np.asarray(self.center, dtype=float)
        if not np.all(np.isfinite(center)) or not math.isfinite(self.radius) or self.radius < 0:
            raise NonIntersectableGeometryError(
                f"Collider '{self.id}' has no usable geometry (radius={self.radius})"
            )

        oc = np.asarray(origin, dtype=float) - center
        b = float(np.dot(oc, direction))
        c = float(np.dot(oc, oc)) - self.radius ** 2
        discriminant = b * b - c
        if discriminant < 0:
            return None

        root = math.sqrt(discriminant)
        far_hit = -b + root
        if far_hit < 0:
            return None
        near_hit = -b - root
        hit = near_hit if near_hit >= 0 else 0.0
        if hit > max_distance:
            return None
        return hit


@dataclass
class FramingConfig:
    """
    Framing planner settings.

    Attributes
    ----------
    margin : float
        Padding factor applied to the fitted distance (default 1.2)
    phase_offset : float
        Swing away from the light axis (degrees, default 30)
    occlusion_step : float
        Rotation per occlusion retry (degrees, default 30)
    max_occlusion_attempts : int
        Candidate positions tried, the original included (default 12)
    fallback : OcclusionFallback
        Policy when every candidate is occluded (default ORIGINAL_POSITION)
    body_up_ratio : float
        Distance/radius ratio below which the body's north is used as up
    ecliptic_up_ratio : float
        Distance/radius ratio above which the global up is used
    """

    margin: float = 1.2
    phase_offset: float = 30.0
    occlusion_step: float = 30.0
    max_occlusion_attempts: int = 12
    fallback: OcclusionFallback = OcclusionFallback.ORIGINAL_POSITION
    body_up_ratio: float = 5.0
    ecliptic_up_ratio: float = 50.0

    def __post_init__(self):
        if self.margin <= 0:
            raise ValueError("Framing margin must be positive")
        if self.max_occlusion_attempts < 1:
            raise ValueError("At least one occlusion attempt is required")
        if not 0 < self.body_up_ratio < self.ecliptic_up_ratio:
            raise ValueError("Up blending ratios must satisfy 0 < body_up_ratio < ecliptic_up_ratio")


@dataclass
class FramingResult:
    """
    Output of the planner.

    Attributes
    ----------
    position : np.ndarray
        Camera position
    target : np.ndarray
        Look-at point (the body centre)
    up : np.ndarray
        Up vector for the final pose
    distance : float
        Camera to target distance
    occluded : bool
        True if the returned position is still blocked (fail-open fallback)
    occluder : str, optional
        Id of the blocking collider, if any
    """

    position: np.ndarray
    target: np.ndarray
    up: np.ndarray
    distance: float
    occluded: bool = False
    occluder: Optional[str] = None

    def pose(self) -> CameraPose:
        """The result as a camera pose."""
        return CameraPose(self.position.copy(), self.target.copy(), self.up.copy())


def rotate_about_axis(vector: np.ndarray, axis: np.ndarray, angle: float) -> np.ndarray:
    """Rodrigues rotation of ``vector`` about unit ``axis`` by ``angle`` radians."""
    axis = normalize(axis)
    vector = np.asarray(vector, dtype=float)
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    return (
        vector * cos_a
        + np.cross(axis, vector) * sin_a
        + axis * np.dot(axis, vector) * (1 - cos_a)
    )


def ideal_distance(radius: float, fov: float, aspect: float, margin: float = 1.2) -> float:
    """
    Distance at which a sphere of ``radius`` fits the view.

    Parameters
    ----------
    radius : float
        Bounding radius
    fov : float
        Vertical field of view (degrees)
    aspect : float
        Width / height
    margin : float
        Padding factor

    Returns
    -------
    float
        The larger of the vertical and horizontal fit distances, times margin
    """
    vertical = math.radians(fov)
    horizontal = 2 * math.atan(math.tan(vertical / 2) * aspect)
    distance_vertical = radius / math.sin(vertical / 2)
    distance_horizontal = radius / math.sin(horizontal / 2)
    return max(distance_vertical, distance_horizontal) * margin


def solar_aligned_direction(
    target: np.ndarray,
    light: np.ndarray,
    up_hint: Optional[np.ndarray] = None,
    phase_offset: float = 30.0,
) -> np.ndarray:
    """
    Unit direction from the target toward the camera.

    The camera sits on the lit side: the light-to-target vector is reversed
    and then rotated by ``phase_offset`` degrees about the up hint (global up
    when no hint is given).
    """
    target = np.asarray(target, dtype=float)
    light = np.asarray(light, dtype=float)

    if np.linalg.norm(target - light) < COINCIDENT_TOLERANCE:
        return normalize(DEGENERATE_LIGHT_DIRECTION)

    camera_dir = -normalize(target - light)
    axis = normalize(up_hint) if up_hint is not None else GLOBAL_UP
    return normalize(rotate_about_axis(camera_dir, axis, math.radians(phase_offset)))


def check_occlusion(
    camera_pos: np.ndarray,
    target_pos: np.ndarray,
    colliders: Iterable[SphereCollider],
    exclude: Sequence[str] = (),
) -> Tuple[bool, Optional[SphereCollider]]:
    """
    Test the camera-to-target segment against solid colliders.

    Colliders in ``exclude`` and non-solid ones are ignored. A collider that
    cannot be ray tested is logged and treated as not blocking.

    Returns
    -------
    Tuple[bool, Optional[SphereCollider]]
        (occluded, nearest blocking collider)
    """
    camera_pos = np.asarray(camera_pos, dtype=float)
    offset = np.asarray(target_pos, dtype=float) - camera_pos
    distance = float(np.linalg.norm(offset))
    if distance < 1e-12:
        return False, None
    direction = offset / distance

    nearest: Optional[SphereCollider] = None
    nearest_hit = math.inf
    for collider in colliders:
        if not collider.solid or collider.id in exclude:
            continue
        try:
            hit = collider.intersect(camera_pos, direction, distance)
        except NonIntersectableGeometryError as e:
            logger.debug(f"Ignoring collider in occlusion test: {e}")
            continue
        if hit is not None and hit < nearest_hit:
            nearest, nearest_hit = collider, hit

    return nearest is not None, nearest


def find_unoccluded_position(
    target_pos: np.ndarray,
    initial_pos: np.ndarray,
    colliders: Sequence[SphereCollider],
    exclude: Sequence[str] = (),
    max_attempts: int = 12,
    step: float = 30.0,
) -> Tuple[np.ndarray, Optional[SphereCollider]]:
    """
    Swing the camera about the global up axis until the target is visible.

    Attempt ``k`` rotates the initial offset by ``k * step`` degrees, so the
    first attempt is the initial position itself.

    Returns
    -------
    Tuple[np.ndarray, Optional[SphereCollider]]
        The first clear position and None, or the initial position and the
        collider blocking it when every attempt is occluded.
    """
    target_pos = np.asarray(target_pos, dtype=float)
    initial_pos = np.asarray(initial_pos, dtype=float)
    offset = initial_pos - target_pos
    first_occluder: Optional[SphereCollider] = None

    for attempt in range(max_attempts):
        candidate = target_pos + rotate_about_axis(offset, GLOBAL_UP, math.radians(attempt * step))
        occluded, occluder = check_occlusion(candidate, target_pos, colliders, exclude)
        if not occluded:
            if attempt > 0:
                logger.debug(f"Occlusion cleared after rotating {attempt * step:.0f} degrees")
            return candidate, None
        if attempt == 0:
            first_occluder = occluder
            logger.debug(f"Camera view blocked by '{occluder.id}', searching around target")

    return initial_pos, first_occluder


def dynamic_up(
    distance: float,
    radius: float,
    body_up: Optional[np.ndarray] = None,
    body_up_ratio: float = 5.0,
    ecliptic_up_ratio: float = 50.0,
) -> np.ndarray:
    """
    Up vector blended between the body's north and the global up.

    Close to the body (``distance / radius`` at most ``body_up_ratio``) the
    body's own north is up; beyond ``ecliptic_up_ratio`` the global up is.
    In between the blend is linear in log distance.
    """
    if body_up is None or radius <= 0 or distance <= 0:
        return GLOBAL_UP.copy()

    north = normalize(body_up)
    ratio = distance / radius
    t = (math.log10(ratio) - math.log10(body_up_ratio)) / (
        math.log10(ecliptic_up_ratio) - math.log10(body_up_ratio)
    )
    t = min(max(t, 0.0), 1.0)
    return normalize(north + (GLOBAL_UP - north) * t)


class FramingPlanner:
    """
    Computes observing poses for bodies.

    Parameters
    ----------
    config : FramingConfig, optional
        Planner settings
    """

    def __init__(self, config: Optional[FramingConfig] = None):
        self.config = config or FramingConfig()

    def frame(
        self,
        target_pos: np.ndarray,
        target_radius: float,
        intrinsics: CameraIntrinsics,
        light_pos: np.ndarray,
        up_hint: Optional[np.ndarray] = None,
        colliders: Sequence[SphereCollider] = (),
        target_id: Optional[str] = None,
    ) -> FramingResult:
        """
        Ideal pose for observing a body.

        Parameters
        ----------
        target_pos : np.ndarray
            Body centre
        target_radius : float
            Bounding radius (rings included)
        intrinsics : CameraIntrinsics
            Lens of the viewing camera
        light_pos : np.ndarray
            Position of the light source
        up_hint : np.ndarray, optional
            Body north; global up when omitted
        colliders : sequence of SphereCollider
            Potential occluders
        target_id : str, optional
            Id of the target's own collider, excluded from occlusion tests

        Returns
        -------
        FramingResult
            Camera pose and occlusion report

        Raises
        ------
        OccludedViewError
            Only with the RAISE fallback, when no clear position exists
        """
        config = self.config
        target_pos = np.asarray(target_pos, dtype=float)

        distance = ideal_distance(target_radius, intrinsics.fov, intrinsics.aspect, config.margin)
        direction = solar_aligned_direction(target_pos, light_pos, up_hint, config.phase_offset)
        position = target_pos + direction * distance

        occluder: Optional[SphereCollider] = None
        if colliders:
            exclude = (target_id,) if target_id is not None else ()
            position, occluder = find_unoccluded_position(
                target_pos, position, colliders, exclude,
                config.max_occlusion_attempts, config.occlusion_step,
            )

        if occluder is not None:
            if config.fallback == OcclusionFallback.RAISE:
                raise OccludedViewError(target_id, occluder.id)
            logger.warning(
                f"No unoccluded view of '{target_id}' found; "
                f"keeping original position (blocked by '{occluder.id}')"
            )

        up = dynamic_up(distance, target_radius, up_hint, config.body_up_ratio, config.ecliptic_up_ratio)

        return FramingResult(
            position=position,
            target=target_pos.copy(),
            up=up,
            distance=distance,
            occluded=occluder is not None,
            occluder=occluder.id if occluder is not None else None,
        )
