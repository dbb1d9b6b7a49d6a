#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orrery Overlay Package

Screen-space layout of body icons and labels: projection, priority ranking
and greedy collision resolution.
"""

from .declutter import (
    FOCUS_PRIORITY,
    DEFAULT_PRIORITY,
    TYPE_PRIORITIES,
    BoundingBox2D,
    DeclutterConfig,
    DeclutterEngine,
    OverlayCandidate,
    body_priority,
    icon_box,
    label_box,
    label_width,
    priority_order,
    project_candidates,
    resolve_collisions,
)


__all__ = [
    "FOCUS_PRIORITY",
    "DEFAULT_PRIORITY",
    "TYPE_PRIORITIES",
    "BoundingBox2D",
    "DeclutterConfig",
    "DeclutterEngine",
    "OverlayCandidate",
    "body_priority",
    "icon_box",
    "label_box",
    "label_width",
    "priority_order",
    "project_candidates",
    "resolve_collisions",
]

__version__ = "1.0.0"
