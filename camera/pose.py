#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Camera Pose, Intrinsics and Projection

A CameraPose is where the camera is, what it looks at and which way is up.
CameraIntrinsics carries the lens (vertical field of view, aspect ratio and
clip planes). Together they give OpenGL-style view and projection matrices,
used both by the overlay projection and by the pygame renderer.
"""

import math
from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

GLOBAL_UP = np.array([0.0, 1.0, 0.0])


def normalize(v: np.ndarray, fallback: np.ndarray = GLOBAL_UP) -> np.ndarray:
    """Unit vector along ``v``, or ``fallback`` when ``v`` has no length."""
    v = np.asarray(v, dtype=float)
    norm = np.linalg.norm(v)
    if norm < 1e-12:
        return np.array(fallback, dtype=float)
    return v / norm


@dataclass
class CameraPose:
    """
    Camera placement.

    Attributes
    ----------
    position : np.ndarray
        Eye position in display units
    target : np.ndarray
        Look-at point
    up : np.ndarray
        Up vector (unit length)
    """

    position: np.ndarray
    target: np.ndarray = field(default_factory=lambda: np.zeros(3))
    up: np.ndarray = field(default_factory=lambda: GLOBAL_UP.copy())

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=float)
        self.target = np.asarray(self.target, dtype=float)
        self.up = normalize(self.up)

    @property
    def distance(self) -> float:
        """Eye to target distance."""
        return float(np.linalg.norm(self.position - self.target))

    @property
    def forward(self) -> np.ndarray:
        """Unit viewing direction."""
        return normalize(self.target - self.position, fallback=np.array([0.0, 0.0, -1.0]))

    def copy(self) -> "CameraPose":
        return CameraPose(self.position.copy(), self.target.copy(), self.up.copy())

    def is_close(self, other: "CameraPose", tolerance: float = 1e-6) -> bool:
        """True when both poses coincide within ``tolerance``."""
        return (
            np.allclose(self.position, other.position, atol=tolerance)
            and np.allclose(self.target, other.target, atol=tolerance)
            and np.allclose(self.up, other.up, atol=tolerance)
        )

    def basis(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Orthonormal camera basis.

        Returns
        -------
        Tuple[np.ndarray, np.ndarray, np.ndarray]
            (forward, up, right) unit vectors
        """
        forward = self.forward
        right = np.cross(forward, self.up)

        if np.linalg.norm(right) < 0.001:
            # Looking along the up vector
            right = np.array([1.0, 0.0, 0.0])
        else:
            right = right / np.linalg.norm(right)

        up = np.cross(right, forward)
        up = up / np.linalg.norm(up)

        return forward, up, right

    def view_matrix(self) -> np.ndarray:
        """4x4 world-to-camera matrix (right-handed, camera looks down -z)."""
        forward, up, right = self.basis()
        view = np.identity(4)
        view[0, :3] = right
        view[1, :3] = up
        view[2, :3] = -forward
        view[:3, 3] = -view[:3, :3] @ self.position
        return view


@dataclass
class CameraIntrinsics:
    """
    Lens parameters.

    Attributes
    ----------
    fov : float
        Vertical field of view (degrees)
    aspect : float
        Viewport width / height
    near : float
        Near clip distance
    far : float
        Far clip distance
    """

    fov: float = 45.0
    aspect: float = 16.0 / 9.0
    near: float = 0.1
    far: float = 1e13

    def __post_init__(self):
        if not 0 < self.fov < 180:
            raise ValueError(f"Field of view must be in (0, 180) degrees, got {self.fov}")
        if self.aspect <= 0:
            raise ValueError("Aspect ratio must be positive")
        if not 0 < self.near < self.far:
            raise ValueError("Clip planes must satisfy 0 < near < far")

    @classmethod
    def for_viewport(cls, width: int, height: int, fov: float = 45.0, **kwargs) -> "CameraIntrinsics":
        return cls(fov=fov, aspect=width / max(height, 1), **kwargs)

    @property
    def vertical_fov(self) -> float:
        """Vertical field of view (radians)."""
        return math.radians(self.fov)

    @property
    def horizontal_fov(self) -> float:
        """Horizontal field of view (radians), from the vertical one and the aspect."""
        return 2 * math.atan(math.tan(self.vertical_fov / 2) * self.aspect)

    def projection_matrix(self) -> np.ndarray:
        """4x4 OpenGL perspective matrix."""
        f = 1.0 / math.tan(self.vertical_fov / 2)
        near, far = self.near, self.far
        proj = np.zeros((4, 4))
        proj[0, 0] = f / self.aspect
        proj[1, 1] = f
        proj[2, 2] = (far + near) / (near - far)
        proj[2, 3] = 2 * far * near / (near - far)
        proj[3, 2] = -1.0
        return proj


def project_points(
    points: np.ndarray,
    pose: CameraPose,
    intrinsics: CameraIntrinsics,
    width: int,
    height: int,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Project world points to pixel coordinates.

    Parameters
    ----------
    points : np.ndarray
        World positions, shape (N, 3)
    pose : CameraPose
        Viewing camera
    intrinsics : CameraIntrinsics
        Lens
    width, height : int
        Viewport size in pixels

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        Pixel coordinates (N, 2) with y growing downward, and a boolean mask
        (N,) of points in front of the camera. Pixel values for points behind
        the camera are meaningless.
    """
    points = np.asarray(points, dtype=float).reshape(-1, 3)
    if len(points) == 0:
        return np.empty((0, 2)), np.empty(0, dtype=bool)

    homogeneous = np.hstack([points, np.ones((len(points), 1))])
    clip = homogeneous @ (intrinsics.projection_matrix() @ pose.view_matrix()).T

    w = clip[:, 3]
    in_front = w > 0
    safe_w = np.where(in_front, w, 1.0)
    ndc = clip[:, :2] / safe_w[:, None]

    screen = np.empty((len(points), 2))
    screen[:, 0] = (ndc[:, 0] * 0.5 + 0.5) * width
    screen[:, 1] = (-ndc[:, 1] * 0.5 + 0.5) * height
    return screen, in_front
