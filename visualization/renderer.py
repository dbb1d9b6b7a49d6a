#!/usr/bin/env python3
"""
Renderer Module

Pygame-based rendering for the orrery viewer.
Draws the background starfield, orbit paths, bodies, overlay icons and
labels, and the info panel. All projection goes through camera.project_points
so what is drawn matches what the overlay declutter engine laid out.
"""

import math
import numpy as np
from typing import List, Tuple, Optional, Dict
import pygame

from camera import CameraIntrinsics, CameraPose, project_points
from ephemeris import BodyFrame, CelestialBody, StarCatalog
from overlay import OverlayCandidate


class Colors:
    """Default color palette."""

    BACKGROUND = (3, 4, 12)
    TEXT = (220, 220, 220)
    TEXT_DIM = (150, 150, 160)

    # Orbit colors
    ORBIT = (70, 80, 110)
    ORBIT_FOCUS = (140, 170, 230)

    # Overlay
    ICON = (200, 200, 220)
    ICON_FOCUS = (255, 210, 90)
    LABEL = (210, 210, 225)
    LABEL_FOCUS = (255, 230, 150)

    RING = (180, 170, 140)


def star_brightness(magnitudes: np.ndarray) -> np.ndarray:
    """Display brightness in [0.15, 1] from apparent magnitude (brighter stars are smaller magnitudes)."""
    return np.clip(1.0 - (magnitudes + 1.5) / 8.0, 0.15, 1.0)


class Renderer:
    """
    Handles all rendering operations.

    Parameters
    ----------
    screen : pygame.Surface
        Target surface.
    min_body_pixels : int
        Smallest radius a body is drawn with (pixels).
    max_stars : int
        Brightest stars drawn per frame.
    """

    def __init__(
        self,
        screen: pygame.Surface,
        min_body_pixels: int = 2,
        max_stars: int = 5000,
    ):
        self.screen = screen
        self.screen_width = screen.get_width()
        self.screen_height = screen.get_height()
        self.min_body_pixels = min_body_pixels
        self.max_stars = max_stars

    def clear(self, color: Tuple[int, int, int] = Colors.BACKGROUND) -> None:
        """Clear screen with background color."""
        self.screen.fill(color)

    def project(
        self, points: np.ndarray, pose: CameraPose, intrinsics: CameraIntrinsics
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Project world points to this screen."""
        return project_points(points, pose, intrinsics, self.screen_width, self.screen_height)

    def apparent_radius(
        self, radius: float, depth: float, intrinsics: CameraIntrinsics
    ) -> float:
        """On-screen radius in pixels of a sphere at ``depth``."""
        if depth <= 0:
            return 0.0
        focal = (self.screen_height / 2) / math.tan(intrinsics.vertical_fov / 2)
        return radius / depth * focal

    def draw_starfield(
        self, stars: StarCatalog, pose: CameraPose, intrinsics: CameraIntrinsics
    ) -> None:
        """
        Draw catalog stars as points at infinity.

        Only the camera orientation matters, so stars are projected as unit
        directions from a camera placed at the origin.
        """
        if len(stars) == 0:
            return

        count = min(len(stars), self.max_stars)
        order = np.argsort(stars.magnitudes)[:count]
        norms = np.linalg.norm(stars.positions[order], axis=1, keepdims=True)
        directions = stars.positions[order] / np.maximum(norms, 1e-12)

        sky_pose = CameraPose(np.zeros(3), pose.forward, pose.up)
        screen, in_front = self.project(directions, sky_pose, intrinsics)

        brightness = star_brightness(stars.magnitudes[order])
        colors = np.clip(stars.colors[order] * brightness[:, None] * 255, 0, 255).astype(int)

        for index in np.nonzero(in_front)[0]:
            x, y = screen[index]
            if 0 <= x < self.screen_width and 0 <= y < self.screen_height:
                size = 2 if brightness[index] > 0.7 else 1
                pygame.draw.circle(self.screen, tuple(colors[index]), (int(x), int(y)), size)

    def draw_orbit_path(
        self,
        path: np.ndarray,
        pose: CameraPose,
        intrinsics: CameraIntrinsics,
        color: Tuple[int, int, int] = Colors.ORBIT,
        width: int = 1,
    ) -> None:
        """Draw an orbit path as a polyline, dropping segments that cross behind the camera."""
        if len(path) < 2:
            return

        screen, in_front = self.project(path, pose, intrinsics)
        limit = 4 * max(self.screen_width, self.screen_height)

        for i in range(len(path) - 1):
            if not (in_front[i] and in_front[i + 1]):
                continue
            p1, p2 = screen[i], screen[i + 1]
            if np.any(np.abs(p1) > limit) or np.any(np.abs(p2) > limit):
                continue
            pygame.draw.line(
                self.screen,
                color,
                (int(p1[0]), int(p1[1])),
                (int(p2[0]), int(p2[1])),
                width,
            )

    def draw_orbits(
        self,
        paths: Dict[str, np.ndarray],
        pose: CameraPose,
        intrinsics: CameraIntrinsics,
        focus_id: Optional[str] = None,
    ) -> None:
        """Draw all orbit paths, the focused body's on top."""
        for body_id, path in paths.items():
            if body_id != focus_id:
                self.draw_orbit_path(path, pose, intrinsics)
        if focus_id in paths:
            self.draw_orbit_path(paths[focus_id], pose, intrinsics, Colors.ORBIT_FOCUS, 2)

    def draw_bodies(
        self,
        frames: Dict[str, BodyFrame],
        bodies: Dict[str, CelestialBody],
        pose: CameraPose,
        intrinsics: CameraIntrinsics,
    ) -> None:
        """Draw bodies as shaded discs, far to near."""
        if not frames:
            return

        ids = list(frames)
        points = np.array([frames[body_id].position for body_id in ids])
        screen, in_front = self.project(points, pose, intrinsics)
        depths = (points - pose.position) @ pose.forward

        for index in np.argsort(-depths):
            if not in_front[index]:
                continue
            body_id = ids[index]
            frame = frames[body_id]
            body = bodies[body_id]

            radius_px = self.apparent_radius(frame.radius, depths[index], intrinsics)
            if radius_px > 4 * max(self.screen_width, self.screen_height):
                continue
            center = (int(screen[index, 0]), int(screen[index, 1]))

            if body.ring_outer_radius:
                ring_px = int(max(radius_px * body.ring_outer_radius, self.min_body_pixels + 2))
                pygame.draw.circle(self.screen, Colors.RING, center, ring_px, 1)

            self._draw_shaded_disc(center, max(radius_px, self.min_body_pixels), body.color)

    def _draw_shaded_disc(
        self, center: Tuple[int, int], radius: float, color: Tuple[int, int, int]
    ) -> None:
        """Disc with a brighter core, like a lit sphere seen face on."""
        radius = int(radius)
        if radius <= 3:
            pygame.draw.circle(self.screen, color, center, max(radius, 1))
            return

        highlight = tuple(min(255, int(c * 1.3) + 20) for c in color)
        for i in range(radius, 0, -max(1, radius // 12)):
            factor = i / radius
            shade = tuple(
                int(color[k] + (highlight[k] - color[k]) * (1 - factor)) for k in range(3)
            )
            pygame.draw.circle(self.screen, shade, center, i)

    def draw_overlays(
        self,
        candidates: List[OverlayCandidate],
        font: pygame.font.Font,
        focus_id: Optional[str] = None,
        icon_size: int = 20,
        label_offset_x: int = 12,
    ) -> None:
        """Draw the icons and labels the declutter engine allowed."""
        half = icon_size // 2
        for candidate in candidates:
            is_focus = candidate.body_id == focus_id
            x, y = int(candidate.x), int(candidate.y)

            if candidate.show_icon:
                color = Colors.ICON_FOCUS if is_focus else Colors.ICON
                pygame.draw.circle(self.screen, color, (x, y), half, 1)

            if candidate.show_label:
                color = Colors.LABEL_FOCUS if is_focus else Colors.LABEL
                surface = font.render(candidate.name, True, color)
                self.screen.blit(surface, (x + label_offset_x, y - surface.get_height() // 2))

    def draw_text(
        self,
        text: str,
        position: Tuple[int, int],
        font: pygame.font.Font,
        color: Tuple[int, int, int] = Colors.TEXT,
    ) -> int:
        """Draw text and return height."""
        surface = font.render(text, True, color)
        self.screen.blit(surface, position)
        return surface.get_height()

    def draw_info_panel(
        self,
        state,
        focus_name: str,
        font: pygame.font.Font,
        time_scale: float,
        paused: bool,
        scale_mode: str,
    ) -> None:
        """Draw information panel."""
        pose = state.pose
        visible_labels = sum(1 for c in state.overlays if c.show_label)

        info_lines = [
            f"Date: {state.time.strftime('%Y-%m-%d %H:%M')} UTC",
            f"Time Scale: {time_scale:g} days/s" + (" [PAUSED]" if paused else ""),
            f"Scale: {scale_mode}",
            "",
            f"Focus: {focus_name}",
            f"Camera Distance: {pose.distance:.4g}",
            f"Camera: {state.transition_phase.value}",
            f"Labels: {visible_labels}/{len(state.overlays)}",
            "",
            "Controls:",
            "Drag / arrows : Orbit camera",
            "Wheel / +/- : Zoom",
            "TAB / SHIFT+TAB : Next/previous body",
            "[ ] : Time scale",
            "M : Scale mode",
            "L : Labels",
            "SPACE : Pause/Resume",
            "ESC : Quit",
        ]

        y = 10
        for line in info_lines:
            y += self.draw_text(line, (10, y), font) + 2
