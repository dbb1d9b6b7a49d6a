#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orrery Camera Package

Camera pose and projection, the framing planner that picks observing poses,
and the transition controller that animates the camera between them.

The package knows nothing about orbits: callers pass in positions, radii and
colliders explicitly.

Usage:
    from camera import CameraIntrinsics, CameraPose, FramingPlanner, TransitionController

    planner = FramingPlanner()
    result = planner.frame(target_pos, target_radius, CameraIntrinsics(), light_pos)

    controller = TransitionController()
    controller.start(controller.pose, result.pose(), light_pos)
    while controller.update() is not None:
        ...
"""

from .pose import (
    GLOBAL_UP,
    CameraPose,
    CameraIntrinsics,
    normalize,
    project_points,
)

from .easing import (
    EASING_FUNCTIONS,
    get_easing,
    linear,
    ease_out_quad,
    ease_in_out_cubic,
    ease_out_quart,
    ease_out_quint,
)

from .framing import (
    FramingConfig,
    FramingPlanner,
    FramingResult,
    OcclusionFallback,
    OccludedViewError,
    NonIntersectableGeometryError,
    SphereCollider,
    check_occlusion,
    dynamic_up,
    find_unoccluded_position,
    ideal_distance,
    rotate_about_axis,
    solar_aligned_direction,
)

from .transition import (
    IntroConfig,
    PathKind,
    TransitionConfig,
    TransitionController,
    TransitionPhase,
    TransitionState,
    fly_in_position,
    log_lerp,
    quadratic_bezier,
    safe_control_point,
)


__all__ = [
    # Pose
    "GLOBAL_UP",
    "CameraPose",
    "CameraIntrinsics",
    "normalize",
    "project_points",

    # Easing
    "EASING_FUNCTIONS",
    "get_easing",
    "linear",
    "ease_out_quad",
    "ease_in_out_cubic",
    "ease_out_quart",
    "ease_out_quint",

    # Framing
    "FramingConfig",
    "FramingPlanner",
    "FramingResult",
    "OcclusionFallback",
    "OccludedViewError",
    "NonIntersectableGeometryError",
    "SphereCollider",
    "check_occlusion",
    "dynamic_up",
    "find_unoccluded_position",
    "ideal_distance",
    "rotate_about_axis",
    "solar_aligned_direction",

    # Transition
    "IntroConfig",
    "PathKind",
    "TransitionConfig",
    "TransitionController",
    "TransitionPhase",
    "TransitionState",
    "fly_in_position",
    "log_lerp",
    "quadratic_bezier",
    "safe_control_point",
]

__version__ = "1.0.0"
