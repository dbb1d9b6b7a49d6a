#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Overlay Declutter Engine

Decides, every frame, which body icons and labels may be drawn without
colliding on screen. Bodies are projected to pixels, ranked by priority
(focus first, then by body type) and placed greedily: an icon that overlaps
an already placed icon hides the body's icon and label; a label that
overlaps a placed label or icon hides just the label. The focused body is
always shown.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set

import numpy as np

from camera import CameraIntrinsics, CameraPose, project_points
from ephemeris.bodies import BodyFrame, BodyType

FOCUS_PRIORITY = 100.0
DEFAULT_PRIORITY = 4.0
TYPE_PRIORITIES: Dict[BodyType, float] = {
    BodyType.PLANET: 10.0,
    BodyType.DWARF: 8.0,
    BodyType.MOON: 6.0,
}


@dataclass
class BoundingBox2D:
    """
    Axis-aligned screen rectangle (pixels, y down).

    Attributes
    ----------
    x, y : float
        Top-left corner
    width, height : float
        Size
    """

    x: float
    y: float
    width: float
    height: float

    def intersects(self, other: "BoundingBox2D") -> bool:
        """Strict overlap test; boxes that only touch do not intersect."""
        return (
            self.x < other.x + other.width
            and self.x + self.width > other.x
            and self.y < other.y + other.height
            and self.y + self.height > other.y
        )

    def intersects_any(self, others: Iterable["BoundingBox2D"]) -> bool:
        return any(self.intersects(other) for other in others)


@dataclass
class DeclutterConfig:
    """
    Overlay layout settings.

    Attributes
    ----------
    icon_size : float
        Side of the square icon box, centred on the body (pixels)
    label_offset_x : float
        Horizontal offset of the label box from the body (pixels)
    label_height : float
        Label box height; the box is vertically centred on the body
    label_char_width : float
        Estimated pixels per character
    label_min_width, label_max_width : float
        Clamp for the estimated label width
    focus_priority : float
        Priority of the focused body
    type_priorities : dict
        BodyType -> priority
    default_priority : float
        Priority of any other type
    exclude_light : bool
        Leave the light source out of the overlay
    hidden_types : set
        Body types whose overlays are switched off
    """

    icon_size: float = 20.0
    label_offset_x: float = 12.0
    label_height: float = 20.0
    label_char_width: float = 8.0
    label_min_width: float = 60.0
    label_max_width: float = 120.0
    focus_priority: float = FOCUS_PRIORITY
    type_priorities: Dict[BodyType, float] = field(default_factory=lambda: dict(TYPE_PRIORITIES))
    default_priority: float = DEFAULT_PRIORITY
    exclude_light: bool = True
    hidden_types: Set[BodyType] = field(default_factory=set)

    def __post_init__(self):
        if self.icon_size <= 0 or self.label_height <= 0:
            raise ValueError("Overlay box sizes must be positive")
        if self.label_min_width > self.label_max_width:
            raise ValueError("label_min_width must not exceed label_max_width")


@dataclass
class OverlayCandidate:
    """
    One projected body and its overlay decision.

    Attributes
    ----------
    body_id : str
        Body identifier
    name : str
        Display name
    body_type : BodyType
        Classification
    x, y : float
        Screen position (pixels)
    distance : float
        Distance from the camera
    priority : float
        Ranking score
    show_icon : bool
        Icon may be drawn
    show_label : bool
        Label may be drawn
    """

    body_id: str
    name: str
    body_type: BodyType
    x: float
    y: float
    distance: float
    priority: float
    show_icon: bool = True
    show_label: bool = True


def body_priority(body_type: BodyType, is_focus: bool, config: Optional[DeclutterConfig] = None) -> float:
    config = config or DeclutterConfig()
    if is_focus:
        return config.focus_priority
    return config.type_priorities.get(body_type, config.default_priority)


def label_width(name: str, config: Optional[DeclutterConfig] = None) -> float:
    """Estimated label width, clamped."""
    config = config or DeclutterConfig()
    return min(config.label_max_width, max(config.label_min_width, len(name) * config.label_char_width))


def icon_box(x: float, y: float, config: Optional[DeclutterConfig] = None) -> BoundingBox2D:
    config = config or DeclutterConfig()
    half = config.icon_size / 2
    return BoundingBox2D(x - half, y - half, config.icon_size, config.icon_size)


def label_box(x: float, y: float, name: str, config: Optional[DeclutterConfig] = None) -> BoundingBox2D:
    config = config or DeclutterConfig()
    return BoundingBox2D(
        x + config.label_offset_x,
        y - config.label_height / 2,
        label_width(name, config),
        config.label_height,
    )


def priority_order(candidates: Iterable[OverlayCandidate]) -> List[OverlayCandidate]:
    """Priority descending, then camera distance ascending, then body id."""
    return sorted(candidates, key=lambda c: (-c.priority, c.distance, c.body_id))


def project_candidates(
    frames: Iterable[BodyFrame],
    pose: CameraPose,
    intrinsics: CameraIntrinsics,
    width: int,
    height: int,
    focus_id: Optional[str] = None,
    names: Optional[Mapping[str, str]] = None,
    light_id: Optional[str] = None,
    config: Optional[DeclutterConfig] = None,
) -> List[OverlayCandidate]:
    """
    Project tracked bodies to screen space and score them.

    Bodies of a hidden type and the light source (when excluded) are
    dropped before projection, unless they are the focus. Bodies behind
    the camera are dropped after projection.

    Returns
    -------
    list of OverlayCandidate
        Unsorted, all flags set
    """
    config = config or DeclutterConfig()
    names = names or {}

    tracked: List[BodyFrame] = []
    for frame in frames:
        if frame.body_id != focus_id:
            if frame.body_type in config.hidden_types:
                continue
            if config.exclude_light and frame.body_id == light_id:
                continue
        tracked.append(frame)

    if not tracked:
        return []

    points = np.array([frame.position for frame in tracked], dtype=float)
    screen, in_front = project_points(points, pose, intrinsics, width, height)
    distances = np.linalg.norm(points - pose.position, axis=1)

    candidates: List[OverlayCandidate] = []
    for index, frame in enumerate(tracked):
        if not in_front[index]:
            continue
        candidates.append(OverlayCandidate(
            body_id=frame.body_id,
            name=names.get(frame.body_id, frame.body_id),
            body_type=frame.body_type,
            x=float(screen[index, 0]),
            y=float(screen[index, 1]),
            distance=float(distances[index]),
            priority=body_priority(frame.body_type, frame.body_id == focus_id, config),
        ))
    return candidates


def resolve_collisions(
    candidates: Iterable[OverlayCandidate],
    focus_id: Optional[str] = None,
    config: Optional[DeclutterConfig] = None,
) -> List[OverlayCandidate]:
    """
    Greedy placement in priority order.

    Returns
    -------
    list of OverlayCandidate
        Every input candidate, in placement order, with show_icon and
        show_label decided
    """
    config = config or DeclutterConfig()
    placed_icons: List[BoundingBox2D] = []
    placed_labels: List[BoundingBox2D] = []

    ordered = priority_order(candidates)
    for candidate in ordered:
        icon = icon_box(candidate.x, candidate.y, config)
        label = label_box(candidate.x, candidate.y, candidate.name, config)

        if candidate.body_id == focus_id:
            show_icon, show_label = True, True
        elif icon.intersects_any(placed_icons):
            show_icon, show_label = False, False
        else:
            show_icon = True
            show_label = not (label.intersects_any(placed_labels) or label.intersects_any(placed_icons))

        candidate.show_icon = show_icon
        candidate.show_label = show_label
        if show_icon:
            placed_icons.append(icon)
        if show_label:
            placed_labels.append(label)

    return ordered


class DeclutterEngine:
    """
    Per-frame overlay layout.

    Parameters
    ----------
    config : DeclutterConfig, optional
        Layout settings

    Attributes
    ----------
    candidates : list of OverlayCandidate
        Result of the most recent update, rebuilt every frame
    """

    def __init__(self, config: Optional[DeclutterConfig] = None):
        self.config = config or DeclutterConfig()
        self.candidates: List[OverlayCandidate] = []

    def set_type_visible(self, body_type: BodyType, visible: bool) -> None:
        """Toggle a whole category of overlays."""
        if visible:
            self.config.hidden_types.discard(body_type)
        else:
            self.config.hidden_types.add(body_type)

    def update(
        self,
        frames: Iterable[BodyFrame],
        pose: CameraPose,
        intrinsics: CameraIntrinsics,
        width: int,
        height: int,
        focus_id: Optional[str] = None,
        names: Optional[Mapping[str, str]] = None,
        light_id: Optional[str] = None,
    ) -> List[OverlayCandidate]:
        """Project, rank and place overlays for one frame."""
        projected = project_candidates(
            frames, pose, intrinsics, width, height,
            focus_id=focus_id, names=names, light_id=light_id, config=self.config,
        )
        self.candidates = resolve_collisions(projected, focus_id, self.config)
        return self.candidates

    @property
    def visible_labels(self) -> List[OverlayCandidate]:
        return [c for c in self.candidates if c.show_label]

    @property
    def visible_icons(self) -> List[OverlayCandidate]:
        return [c for c in self.candidates if c.show_icon]
