#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orrery Scene Package

Frame-synchronous orchestration of the propagator, framing planner,
transition controller and overlay declutter engine. Runs without any
display, so it drives both the pygame viewer and headless runs.

Usage:
    from datetime import datetime, timezone
    from ephemeris import default_bodies
    from scene import Scene, SceneConfig

    scene = Scene(default_bodies(), SceneConfig())
    scene.initialize(datetime(2024, 1, 1, tzinfo=timezone.utc))
    scene.request_focus("saturn")
    state = scene.step(datetime(2024, 1, 1, tzinfo=timezone.utc), 1280, 720)
"""

from .scene import (
    Scene,
    SceneConfig,
    FrameState,
    bounding_radius,
    colliders_from_registry,
)


__all__ = [
    "Scene",
    "SceneConfig",
    "FrameState",
    "bounding_radius",
    "colliders_from_registry",
]

__version__ = "1.0.0"
