#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orbit Controls for the Orrery Viewer

Manual camera controls: the camera orbits a look-at target on a sphere and
zooms multiplicatively, so the same keys work from a moon's surface out to
the edge of the solar system. Every manual change raises an input flag that
the scene consumes once per frame to cancel any running transition.
"""

import math
import numpy as np

from camera import GLOBAL_UP, CameraPose


class OrbitControls:
    """
    Spherical camera controls around a target.

    The camera offset from the target is described by:
    - theta: azimuth about the global up axis
    - phi: elevation above the ecliptic plane
    - distance: distance from the target

    Parameters
    ----------
    theta : float
        Initial azimuth in radians (default 0.0)
    phi : float
        Initial elevation in radians (default π/4)
    distance : float
        Initial distance from the target (default 1000.0)
    min_distance : float
        Minimum zoom distance (default 0.5)
    max_distance : float
        Maximum zoom distance (default 1e13)
    rotation_speed : float
        Rotation per input in radians (default 0.03)
    zoom_factor : float
        Distance ratio per zoom input (default 1.05)

    Attributes
    ----------
    target : np.ndarray
        Current look-at point
    user_input : bool
        Set by any manual change, cleared by consume_input()
    """

    def __init__(
        self,
        theta: float = 0.0,
        phi: float = math.pi / 4,
        distance: float = 1000.0,
        min_distance: float = 0.5,
        max_distance: float = 1e13,
        rotation_speed: float = 0.03,
        zoom_factor: float = 1.05,
    ):
        if not 0 < min_distance <= max_distance:
            raise ValueError("Zoom limits must satisfy 0 < min_distance <= max_distance")
        if zoom_factor <= 1:
            raise ValueError("zoom_factor must be greater than 1")

        self.theta = theta
        self.phi = phi
        self.distance = distance
        self.min_distance = min_distance
        self.max_distance = max_distance
        self.rotation_speed = rotation_speed
        self.zoom_factor = zoom_factor
        self.target = np.zeros(3)
        self.user_input = False

    def get_offset(self) -> np.ndarray:
        """
        Camera offset from the target in the y-up display frame.

        Returns
        -------
        np.ndarray
            Offset vector [x, y, z]
        """
        x = self.distance * math.cos(self.phi) * math.sin(self.theta)
        y = self.distance * math.sin(self.phi)
        z = self.distance * math.cos(self.phi) * math.cos(self.theta)
        return np.array([x, y, z])

    def get_pose(self) -> CameraPose:
        """Camera pose for the current control state."""
        return CameraPose(self.target + self.get_offset(), self.target.copy(), GLOBAL_UP.copy())

    def sync_from_pose(self, pose: CameraPose) -> None:
        """
        Adopt an externally driven pose (transition or tracking) without
        raising the input flag.
        """
        offset = pose.position - pose.target
        distance = float(np.linalg.norm(offset))
        self.target = np.array(pose.target, dtype=float)
        if distance < 1e-12:
            return
        self.distance = distance
        self.phi = math.asin(max(-1.0, min(1.0, offset[1] / distance)))
        self.theta = math.atan2(offset[0], offset[2]) % (2 * math.pi)

    def consume_input(self) -> bool:
        """Return and clear the manual input flag."""
        flag = self.user_input
        self.user_input = False
        return flag

    def rotate(self, d_theta: float, d_phi: float) -> None:
        """Rotate by explicit angles (mouse drag)."""
        self.theta = (self.theta + d_theta) % (2 * math.pi)
        self.phi = max(-math.pi / 2 + 0.01, min(math.pi / 2 - 0.01, self.phi + d_phi))
        self.user_input = True

    def rotate_left(self) -> None:
        """Rotate camera left (decrease theta)."""
        self.rotate(-self.rotation_speed, 0.0)

    def rotate_right(self) -> None:
        """Rotate camera right (increase theta)."""
        self.rotate(self.rotation_speed, 0.0)

    def rotate_up(self) -> None:
        """Rotate camera up (increase phi)."""
        self.rotate(0.0, self.rotation_speed)

    def rotate_down(self) -> None:
        """Rotate camera down (decrease phi)."""
        self.rotate(0.0, -self.rotation_speed)

    def zoom_in(self, steps: float = 1.0) -> None:
        """Zoom camera in (divide distance)."""
        self.distance = max(self.min_distance, self.distance / self.zoom_factor ** steps)
        self.user_input = True

    def zoom_out(self, steps: float = 1.0) -> None:
        """Zoom camera out (multiply distance)."""
        self.distance = min(self.max_distance, self.distance * self.zoom_factor ** steps)
        self.user_input = True

    @property
    def theta_degrees(self) -> float:
        """Current azimuth in degrees."""
        return math.degrees(self.theta) % 360

    @property
    def phi_degrees(self) -> float:
        """Current elevation in degrees."""
        return math.degrees(self.phi)

    def __repr__(self) -> str:
        return (
            f"OrbitControls(θ={self.theta_degrees:.1f}°, "
            f"φ={self.phi_degrees:.1f}°, "
            f"dist={self.distance:.3g})"
        )
