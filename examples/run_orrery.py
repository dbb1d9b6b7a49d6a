#!/usr/bin/env python3
"""
Example: Running the Orrery Scene Headless

Demonstrates how to drive the scene programmatically without a window.
Useful for:
- Querying body positions at arbitrary dates
- Checking camera framing and transitions
- Inspecting which labels survive decluttering
"""

import sys
import os
from datetime import datetime, timedelta, timezone

import numpy as np

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from camera import CameraIntrinsics, FramingPlanner, OcclusionFallback, FramingConfig, SphereCollider
from ephemeris import (
    BodyRegistry,
    OrbitalElements,
    ScaleMode,
    default_bodies,
    position,
)
from scene import Scene, SceneConfig


EPOCH = datetime(2025, 6, 21, tzinfo=timezone.utc)


def example_body_positions():
    """
    Resolve the whole body table at one instant in both scale modes.
    """
    print("=" * 70)
    print("Example 1: Body Positions")
    print("=" * 70)

    bodies = default_bodies()
    for mode in (ScaleMode.REALISTIC, ScaleMode.DIDACTIC):
        registry = BodyRegistry(bodies, mode)
        registry.update(EPOCH)

        print(f"\n{mode.value.capitalize()} scale at {EPOCH.date()}:")
        print(f"{'Body':^12} {'Distance':^14} {'Radius':^10}")
        print("-" * 40)
        for body_id in ("mercury", "earth", "moon", "jupiter", "neptune"):
            frame = registry[body_id]
            distance = np.linalg.norm(frame.position)
            print(f"{body_id:^12} {distance:^14.4g} {frame.radius:^10.3g}")


def example_single_orbit():
    """
    Propagate a single set of elements directly.
    """
    print("\n" + "=" * 70)
    print("Example 2: Propagating Elements")
    print("=" * 70)

    elements = OrbitalElements(a=1.0, e=0.2, i=10.0, O=30.0, w=45.0, M0=0.0, n=1.0)
    print(f"\nPeriod: {elements.period:.1f} days")
    for days in (0, 90, 180, 270):
        when = datetime(2000, 1, 1, 12, tzinfo=timezone.utc) + timedelta(days=days)
        x, y, z = position(elements, when)
        print(f"  day {days:3d}: ({x:+9.2f}, {y:+9.2f}, {z:+9.2f})")


def example_framing():
    """
    Ask the planner for an observing pose, with and without an occluder.
    """
    print("\n" + "=" * 70)
    print("Example 3: Framing a Body")
    print("=" * 70)

    planner = FramingPlanner()
    intrinsics = CameraIntrinsics(fov=45.0, aspect=1.5)
    target = np.array([100.0, 0.0, 0.0])

    result = planner.frame(target, 10.0, intrinsics, light_pos=np.zeros(3))
    print(f"\nClear view: distance {result.distance:.2f}, position {np.round(result.position, 2)}")

    blocker = SphereCollider("blocker", (result.position + target) / 2, 5.0)
    result = planner.frame(target, 10.0, intrinsics, np.zeros(3), colliders=[blocker], target_id="target")
    print(f"With occluder: position {np.round(result.position, 2)} (occluded={result.occluded})")

    strict = FramingPlanner(FramingConfig(fallback=OcclusionFallback.RAISE))
    print(f"Strict planner fallback: {strict.config.fallback.value}")


def example_focus_transition():
    """
    Focus a body and step the scene on a simulated clock until the camera
    arrives.
    """
    print("\n" + "=" * 70)
    print("Example 4: Focus Transition")
    print("=" * 70)

    now = [0.0]
    scene = Scene(default_bodies(), SceneConfig(), clock=lambda: now[0])
    scene.initialize(EPOCH)

    arrived = []
    scene.request_focus("saturn", on_complete=lambda: arrived.append(now[0]))

    frame_dt = 1.0 / 60.0
    while not arrived and now[0] < 5.0:
        state = scene.step(EPOCH, 1280, 720)
        now[0] += frame_dt

    print(f"\nArrived after {arrived[0]:.2f} s" if arrived else "\nDid not arrive")
    print(f"Camera distance to Saturn: {np.linalg.norm(state.pose.position - state.bodies['saturn'].position):.2f}")
    labels = [c.name for c in state.overlays if c.show_label]
    print(f"Visible labels: {', '.join(labels)}")


def main():
    """Run all examples."""
    example_body_positions()
    example_single_orbit()
    example_framing()
    example_focus_transition()

    print("\n" + "=" * 70)
    print("All examples complete!")
    print("=" * 70)


if __name__ == "__main__":
    main()
