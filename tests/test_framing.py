#!/usr/bin/env python3
"""
Tests for the Camera Framing Planner

These tests verify:
1. Ideal distance fits both fields of view with a margin
2. The camera sits on the lit side, swung by the phase offset
3. Segment occlusion against solid sphere colliders
4. The rotating occlusion search and its fallback policies
5. Dynamic up blending between body north and global up
"""

import logging
import math

import numpy as np
import pytest

from conftest import assert_unit
from camera import (
    GLOBAL_UP,
    CameraIntrinsics,
    FramingConfig,
    FramingPlanner,
    NonIntersectableGeometryError,
    OccludedViewError,
    OcclusionFallback,
    SphereCollider,
    check_occlusion,
    dynamic_up,
    find_unoccluded_position,
    ideal_distance,
    rotate_about_axis,
    solar_aligned_direction,
)
from camera.framing import DEGENERATE_LIGHT_DIRECTION


class TestIdealDistance:
    """Tests for fitting a sphere into the view."""

    def test_reference_value(self):
        """radius 10, 45 degrees, aspect 1.5, margin 1.2."""
        assert ideal_distance(10.0, 45.0, 1.5, 1.2) == pytest.approx(31.357, abs=1e-3)

    def test_narrow_viewport_uses_horizontal(self):
        """With aspect < 1 the horizontal fit dominates."""
        narrow = ideal_distance(10.0, 45.0, 0.5, 1.0)
        vertical_only = 10.0 / math.sin(math.radians(22.5))
        assert narrow > vertical_only

    def test_linear_in_radius_and_margin(self):
        base = ideal_distance(1.0, 60.0, 1.0, 1.0)
        assert ideal_distance(3.0, 60.0, 1.0, 1.0) == pytest.approx(3 * base)
        assert ideal_distance(1.0, 60.0, 1.0, 2.0) == pytest.approx(2 * base)


class TestSolarAlignedDirection:
    """Tests for the lit-side viewing direction."""

    def test_faces_light_without_offset(self):
        """With no phase offset the camera sits between target and light."""
        direction = solar_aligned_direction(np.array([100.0, 0.0, 0.0]), np.zeros(3), phase_offset=0.0)
        np.testing.assert_allclose(direction, [-1.0, 0.0, 0.0])

    def test_phase_offset(self):
        """Default offset swings the camera 30 degrees about global up."""
        direction = solar_aligned_direction(np.array([100.0, 0.0, 0.0]), np.zeros(3))
        np.testing.assert_allclose(direction, [-math.cos(math.radians(30)), 0.0, math.sin(math.radians(30))],
                                   atol=1e-12)

    def test_up_hint_axis(self):
        """The swing happens about the supplied up hint."""
        direction = solar_aligned_direction(
            np.array([100.0, 0.0, 0.0]), np.zeros(3), up_hint=np.array([0.0, 0.0, 1.0]),
        )
        assert direction[2] == pytest.approx(0.0, abs=1e-12)
        assert np.dot(direction, [-1.0, 0.0, 0.0]) == pytest.approx(math.cos(math.radians(30)))

    def test_coincident_with_light(self):
        """Target on the light source uses the fixed fallback direction."""
        direction = solar_aligned_direction(np.array([0.0, 0.0, 0.0005]), np.zeros(3))
        np.testing.assert_allclose(direction, DEGENERATE_LIGHT_DIRECTION / np.linalg.norm(DEGENERATE_LIGHT_DIRECTION))

    def test_unit_length(self):
        direction = solar_aligned_direction(np.array([3.0, -4.0, 12.0]), np.array([1.0, 1.0, 1.0]))
        assert_unit(direction)


class TestSphereCollider:
    """Tests for ray-sphere intersection."""

    def test_hit(self):
        sphere = SphereCollider("s", np.array([5.0, 0.0, 0.0]), 1.0)
        assert sphere.intersect(np.zeros(3), np.array([1.0, 0.0, 0.0]), 10.0) == pytest.approx(4.0)

    def test_miss(self):
        sphere = SphereCollider("s", np.array([5.0, 3.0, 0.0]), 1.0)
        assert sphere.intersect(np.zeros(3), np.array([1.0, 0.0, 0.0]), 10.0) is None

    def test_beyond_segment(self):
        sphere = SphereCollider("s", np.array([20.0, 0.0, 0.0]), 1.0)
        assert sphere.intersect(np.zeros(3), np.array([1.0, 0.0, 0.0]), 10.0) is None

    def test_behind_origin(self):
        sphere = SphereCollider("s", np.array([-5.0, 0.0, 0.0]), 1.0)
        assert sphere.intersect(np.zeros(3), np.array([1.0, 0.0, 0.0]), 10.0) is None

    def test_origin_inside(self):
        """A ray starting inside the sphere hits at distance zero."""
        sphere = SphereCollider("s", np.zeros(3), 2.0)
        assert sphere.intersect(np.zeros(3), np.array([1.0, 0.0, 0.0]), 10.0) == 0.0

    @pytest.mark.parametrize("center,radius", [
        ((np.nan, 0.0, 0.0), 1.0),
        ((0.0, 0.0, 0.0), math.inf),
        ((0.0, 0.0, 0.0), -1.0),
    ])
    def test_degenerate_geometry(self, center, radius):
        sphere = SphereCollider("bad", np.array(center), radius)
        with pytest.raises(NonIntersectableGeometryError):
            sphere.intersect(np.zeros(3), np.array([1.0, 0.0, 0.0]), 10.0)


class TestCheckOcclusion:
    """Tests for segment occlusion."""

    camera = np.zeros(3)
    target = np.array([10.0, 0.0, 0.0])

    def test_blocked(self):
        blocker = SphereCollider("blocker", np.array([5.0, 0.0, 0.0]), 1.0)
        occluded, occluder = check_occlusion(self.camera, self.target, [blocker])
        assert occluded
        assert occluder is blocker

    def test_nearest_reported(self):
        far = SphereCollider("far", np.array([7.0, 0.0, 0.0]), 1.0)
        near = SphereCollider("near", np.array([3.0, 0.0, 0.0]), 1.0)
        _, occluder = check_occlusion(self.camera, self.target, [far, near])
        assert occluder.id == "near"

    def test_target_excluded(self):
        own = SphereCollider("target", self.target, 2.0)
        assert check_occlusion(self.camera, self.target, [own], exclude=("target",)) == (False, None)

    def test_non_solid_ignored(self):
        ghost = SphereCollider("ghost", np.array([5.0, 0.0, 0.0]), 1.0, solid=False)
        assert check_occlusion(self.camera, self.target, [ghost]) == (False, None)

    def test_degenerate_collider_non_blocking(self, caplog):
        """Raycasting failures are caught and treated as clear."""
        bad = SphereCollider("bad", np.array([np.nan, 0.0, 0.0]), 1.0)
        with caplog.at_level(logging.DEBUG, logger="camera.framing"):
            assert check_occlusion(self.camera, self.target, [bad]) == (False, None)
        assert "bad" in caplog.text

    def test_zero_length_segment(self):
        blocker = SphereCollider("blocker", np.zeros(3), 1.0)
        assert check_occlusion(self.camera, self.camera, [blocker]) == (False, None)


class TestOcclusionSearch:
    """Tests for the rotating occlusion search."""

    def test_clear_initial_position_kept(self):
        position, occluder = find_unoccluded_position(np.zeros(3), np.array([10.0, 0.0, 0.0]), [])
        np.testing.assert_allclose(position, [10.0, 0.0, 0.0])
        assert occluder is None

    def test_rotates_past_blocker(self):
        """The first clear candidate is one 30 degree step around global up."""
        blocker = SphereCollider("blocker", np.array([5.0, 0.0, 0.0]), 1.0)
        position, occluder = find_unoccluded_position(
            np.zeros(3), np.array([10.0, 0.0, 0.0]), [blocker],
        )
        expected = rotate_about_axis(np.array([10.0, 0.0, 0.0]), GLOBAL_UP, math.radians(30))
        np.testing.assert_allclose(position, expected, atol=1e-12)
        assert occluder is None

    def test_distance_preserved(self):
        target = np.array([1.0, 2.0, 3.0])
        blocker = SphereCollider("blocker", target + np.array([5.0, 0.0, 0.0]), 1.0)
        position, _ = find_unoccluded_position(target, target + np.array([10.0, 0.0, 0.0]), [blocker])
        assert np.linalg.norm(position - target) == pytest.approx(10.0)

    def test_exhausted_returns_original(self):
        """Every attempt blocked: original position and the first occluder."""
        shell = SphereCollider("shell", np.zeros(3), 3.0)
        initial = np.array([10.0, 0.0, 0.0])
        position, occluder = find_unoccluded_position(np.zeros(3), initial, [shell])
        np.testing.assert_array_equal(position, initial)
        assert occluder.id == "shell"


class TestDynamicUp:
    """Tests for up-vector blending."""

    north = np.array([0.0, 0.0, 1.0])

    def test_close_uses_body_north(self):
        np.testing.assert_allclose(dynamic_up(3.0, 1.0, self.north), self.north)
        np.testing.assert_allclose(dynamic_up(5.0, 1.0, self.north), self.north)

    def test_far_uses_global_up(self):
        np.testing.assert_allclose(dynamic_up(50.0, 1.0, self.north), GLOBAL_UP, atol=1e-12)
        np.testing.assert_allclose(dynamic_up(1e6, 1.0, self.north), GLOBAL_UP, atol=1e-12)

    def test_log_midpoint(self):
        """Halfway in log distance blends halfway."""
        up = dynamic_up(math.sqrt(5.0 * 50.0), 1.0, self.north)
        np.testing.assert_allclose(up, [0.0, math.sqrt(0.5), math.sqrt(0.5)], atol=1e-12)

    def test_without_north(self):
        np.testing.assert_allclose(dynamic_up(10.0, 1.0, None), GLOBAL_UP)

    def test_unit_length(self):
        for distance in (1.0, 7.0, 20.0, 40.0, 100.0):
            assert_unit(dynamic_up(distance, 1.0, np.array([0.3, 0.2, 0.9])))


class TestFramingPlanner:
    """Tests for the assembled planner."""

    intrinsics = CameraIntrinsics(fov=45.0, aspect=1.5)
    target = np.array([100.0, 0.0, 0.0])

    def test_frame_without_colliders(self):
        result = FramingPlanner().frame(self.target, 10.0, self.intrinsics, np.zeros(3))
        assert result.distance == pytest.approx(ideal_distance(10.0, 45.0, 1.5, 1.2))
        assert np.linalg.norm(result.position - self.target) == pytest.approx(result.distance)
        np.testing.assert_array_equal(result.target, self.target)
        assert not result.occluded
        assert result.occluder is None

    def test_camera_on_lit_side(self):
        """The camera is closer to the light than the target is."""
        result = FramingPlanner().frame(self.target, 10.0, self.intrinsics, np.zeros(3))
        assert np.linalg.norm(result.position) < np.linalg.norm(self.target)

    def test_pose(self):
        result = FramingPlanner().frame(self.target, 10.0, self.intrinsics, np.zeros(3))
        pose = result.pose()
        np.testing.assert_array_equal(pose.position, result.position)
        np.testing.assert_array_equal(pose.target, result.target)
        assert pose.distance == pytest.approx(result.distance)

    def test_up_follows_body_north_when_close(self):
        """At ideal distance (about three radii) the body's north is up."""
        north = np.array([0.0, 0.0, 1.0])
        result = FramingPlanner().frame(self.target, 10.0, self.intrinsics, np.zeros(3), up_hint=north)
        np.testing.assert_allclose(result.up, north)

    def test_own_collider_ignored(self):
        own = SphereCollider("body", self.target, 10.0)
        result = FramingPlanner().frame(
            self.target, 10.0, self.intrinsics, np.zeros(3), colliders=[own], target_id="body",
        )
        assert not result.occluded

    def test_fail_open_fallback(self, caplog):
        """By default an occluded search keeps the original position and warns."""
        shell = SphereCollider("shell", self.target, 20.0)
        plain = FramingPlanner().frame(self.target, 10.0, self.intrinsics, np.zeros(3))

        with caplog.at_level(logging.WARNING):
            result = FramingPlanner().frame(
                self.target, 10.0, self.intrinsics, np.zeros(3), colliders=[shell], target_id="body",
            )

        assert result.occluded
        assert result.occluder == "shell"
        np.testing.assert_allclose(result.position, plain.position)
        assert "shell" in caplog.text

    def test_raise_fallback(self):
        shell = SphereCollider("shell", self.target, 20.0)
        planner = FramingPlanner(FramingConfig(fallback=OcclusionFallback.RAISE))
        with pytest.raises(OccludedViewError) as info:
            planner.frame(self.target, 10.0, self.intrinsics, np.zeros(3), colliders=[shell], target_id="body")
        assert info.value.target_id == "body"
        assert info.value.occluder_id == "shell"

    def test_config_validation(self):
        with pytest.raises(ValueError):
            FramingConfig(margin=0.0)
        with pytest.raises(ValueError):
            FramingConfig(max_occlusion_attempts=0)
        with pytest.raises(ValueError):
            FramingConfig(body_up_ratio=60.0, ecliptic_up_ratio=50.0)
