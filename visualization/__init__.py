#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orrery Visualization Package

This package provides Pygame-based visualization components for the
orrery: manual orbit controls, the renderer and the interactive viewer.

The visualization package depends on the scene package but can be
optionally omitted if only running headless.

Usage:
    from visualization import run_visualizer

    run_visualizer()
"""

from .controls import OrbitControls
from .renderer import Renderer, Colors
from .visualizer import Visualizer, run_visualizer


__all__ = [
    "OrbitControls",
    "Renderer",
    "Colors",
    "Visualizer",
    "run_visualizer",
]

__version__ = "1.0.0"
