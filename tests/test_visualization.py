#!/usr/bin/env python3
"""
Tests for the Viewer Components

These tests verify:
1. Orbit controls offsets, clamps and the input flag
2. Controls follow externally driven poses
3. The renderer draws onto an off-screen surface
"""

import math

import numpy as np
import pytest

pygame = pytest.importorskip("pygame")

from conftest import J2000_UTC
from camera import CameraIntrinsics, CameraPose
from ephemeris import BodyRegistry, ScaleMode, StarCatalog, default_bodies
from visualization import Colors, OrbitControls, Renderer
from visualization.renderer import star_brightness


class TestOrbitControls:
    """Tests for manual camera controls."""

    def test_offset_on_z_axis(self):
        controls = OrbitControls(theta=0.0, phi=0.0, distance=10.0)
        np.testing.assert_allclose(controls.get_offset(), [0.0, 0.0, 10.0], atol=1e-12)

    def test_offset_elevation(self):
        controls = OrbitControls(theta=0.0, phi=math.pi / 2, distance=10.0)
        np.testing.assert_allclose(controls.get_offset(), [0.0, 10.0, 0.0], atol=1e-12)

    def test_pose_relative_to_target(self):
        controls = OrbitControls(distance=50.0)
        controls.target = np.array([100.0, 0.0, 0.0])
        pose = controls.get_pose()
        np.testing.assert_allclose(pose.target, [100.0, 0.0, 0.0])
        assert pose.distance == pytest.approx(50.0)

    def test_sync_round_trip(self):
        """Adopting a pose reproduces it exactly and raises no input flag."""
        pose = CameraPose(np.array([3.0, 4.0, -12.0]), np.array([1.0, 1.0, 1.0]))
        controls = OrbitControls()
        controls.sync_from_pose(pose)
        np.testing.assert_allclose(controls.get_pose().position, pose.position, atol=1e-9)
        assert not controls.user_input

    def test_input_flag(self):
        controls = OrbitControls()
        assert not controls.consume_input()
        controls.rotate_left()
        assert controls.consume_input()
        assert not controls.consume_input()
        controls.zoom_in()
        assert controls.consume_input()

    def test_zoom_is_multiplicative(self):
        controls = OrbitControls(distance=100.0, zoom_factor=2.0)
        controls.zoom_in()
        assert controls.distance == pytest.approx(50.0)
        controls.zoom_out(3)
        assert controls.distance == pytest.approx(400.0)

    def test_zoom_clamped(self):
        controls = OrbitControls(distance=1.0, min_distance=0.5, max_distance=2.0)
        for _ in range(50):
            controls.zoom_in()
        assert controls.distance == 0.5
        for _ in range(50):
            controls.zoom_out()
        assert controls.distance == 2.0

    def test_elevation_clamped(self):
        controls = OrbitControls(phi=0.0)
        controls.rotate(0.0, 10.0)
        assert controls.phi < math.pi / 2
        controls.rotate(0.0, -20.0)
        assert controls.phi > -math.pi / 2

    def test_invalid_limits(self):
        with pytest.raises(ValueError):
            OrbitControls(min_distance=10.0, max_distance=1.0)
        with pytest.raises(ValueError):
            OrbitControls(zoom_factor=1.0)


class TestRenderer:
    """Smoke tests on an off-screen surface."""

    @pytest.fixture
    def renderer(self):
        return Renderer(pygame.Surface((320, 240)))

    def test_clear(self, renderer):
        renderer.clear()
        assert renderer.screen.get_at((0, 0))[:3] == Colors.BACKGROUND

    def test_apparent_radius(self, renderer):
        intrinsics = CameraIntrinsics(fov=90.0, aspect=320 / 240)
        assert renderer.apparent_radius(1.0, 10.0, intrinsics) == pytest.approx(12.0)
        assert renderer.apparent_radius(1.0, -1.0, intrinsics) == 0.0

    def test_draw_bodies(self, renderer):
        bodies = default_bodies()
        registry = BodyRegistry(bodies, ScaleMode.DIDACTIC)
        frames = registry.update(J2000_UTC)
        pose = CameraPose(np.array([0.0, 200.0, 50.0]))
        intrinsics = CameraIntrinsics.for_viewport(320, 240)

        renderer.clear()
        renderer.draw_bodies(frames, registry.bodies, pose, intrinsics)
        # The Sun sits at the centre of the view
        assert renderer.screen.get_at((160, 120))[:3] != Colors.BACKGROUND

    def test_draw_orbit_path(self, renderer):
        theta = np.linspace(0.0, 2 * math.pi, 65)
        path = np.stack([10 * np.cos(theta), np.zeros_like(theta), 10 * np.sin(theta)], axis=1)
        renderer.clear()
        renderer.draw_orbit_path(path, CameraPose(np.array([0.0, 30.0, 1.0])), CameraIntrinsics.for_viewport(320, 240))
        pixels = pygame.surfarray.array3d(renderer.screen)
        assert np.any(np.all(pixels == Colors.ORBIT, axis=2))

    def test_empty_starfield(self, renderer):
        renderer.clear()
        renderer.draw_starfield(StarCatalog.empty(), CameraPose(np.array([0.0, 0.0, 1.0])), CameraIntrinsics())

    def test_star_brightness(self):
        np.testing.assert_allclose(star_brightness(np.array([-1.5, 2.5, 20.0])), [1.0, 0.5, 0.15])
