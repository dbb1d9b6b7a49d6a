#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orrery - Solar System Scene and Visualization

A real-time orrery core: Keplerian propagation of the solar system, a camera
that frames bodies from their lit side and flies between them along curved
paths, and a screen-space declutter pass for body labels.

The package is divided into these subpackages:
- ephemeris: Orbital elements, body table, body registry, star catalog
- camera: Camera pose, framing planner, transition controller
- overlay: Label/icon declutter engine
- scene: Per-frame orchestration of the above
- visualization: Pygame-based interactive viewer

Example usage:

    # Headless
    from Orrery.scene import Scene, SceneConfig
    from Orrery.ephemeris import default_bodies

    scene = Scene(default_bodies(), SceneConfig())
    scene.initialize()
    scene.request_focus("saturn")
    state = scene.step(scene.time, 1280, 720)

    # With visualization
    from Orrery.visualization import run_visualizer
    run_visualizer()
"""

__version__ = "1.0.0"

# Re-export commonly used items for convenience
from .ephemeris import (
    BodyType,
    CelestialBody,
    OrbitalElements,
    ScaleMode,
    default_bodies,
    AU_IN_KM,
    AU_TO_DISPLAY_UNITS,
)
from .scene import (
    Scene,
    SceneConfig,
    FrameState,
)

__all__ = [
    # Main classes
    "Scene",
    "SceneConfig",
    "FrameState",
    "CelestialBody",
    "OrbitalElements",
    "BodyType",
    "ScaleMode",
    "default_bodies",

    # Constants
    "AU_IN_KM",
    "AU_TO_DISPLAY_UNITS",

    # Subpackages
    "ephemeris",
    "camera",
    "overlay",
    "scene",
    "visualization",
]
