#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Camera Transition Controller

Animates the live camera pose toward a destination pose. Two path kinds are
supported:

- curved: a quadratic Bezier whose control point bends the path away from
  the light source, or lifts it into an arc when the light is not in the way;
- fly-in: logarithmic radial interpolation for journeys spanning many orders
  of magnitude (the deep-space intro).

The controller owns its TransitionState exclusively. Each frame the caller
invokes update(), which advances the state by reading the injected clock.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Sequence

import numpy as np

from .easing import EasingFunction, ease_out_quint, get_easing
from .pose import GLOBAL_UP, CameraPose, normalize

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class TransitionPhase(Enum):
    """Lifecycle of a transition."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PathKind(Enum):
    """Interpolation used for the camera position."""

    CURVED = "curved"
    FLY_IN = "fly_in"


@dataclass
class TransitionConfig:
    """
    Transition settings.

    Attributes
    ----------
    duration : float
        Default focus transition length (seconds, default 2.0)
    easing : str
        Easing for curved transitions (default ease_out_quint)
    fly_in_easing : str
        Easing for fly-in transitions (default ease_in_out_cubic)
    light_clearance : float
        Fraction of the travel distance; a midpoint closer than this to the
        light is pushed away from it (default 0.3)
    light_push : float
        Push applied in that case, as a fraction of the travel (default 0.4)
    arc_height : float
        Lift of the midpoint along up otherwise, as a fraction of the
        travel (default 0.2)
    identical_tolerance : float
        Start and end poses closer than this complete immediately
    """

    duration: float = 2.0
    easing: str = "ease_out_quint"
    fly_in_easing: str = "ease_in_out_cubic"
    light_clearance: float = 0.3
    light_push: float = 0.4
    arc_height: float = 0.2
    identical_tolerance: float = 1e-6

    def __post_init__(self):
        if self.duration < 0:
            raise ValueError("Transition duration must not be negative")
        get_easing(self.easing)
        get_easing(self.fly_in_easing)


@dataclass
class IntroConfig:
    """
    Deep-space intro flight.

    Attributes
    ----------
    start_position : tuple
        Camera position at the start of the intro (display units)
    end_position : tuple
        Camera position at the end (inner solar system overview)
    target : tuple
        Look-at point for the whole flight
    duration : float
        Flight length (seconds, default 12)
    enabled : bool
        Whether the host should play the intro
    """

    start_position: Sequence[float] = (-95809369.0, 999990981402.0, 4245931557.0)
    end_position: Sequence[float] = (0.0, 1746.0, 7.0)
    target: Sequence[float] = (0.0, 0.0, 0.0)
    duration: float = 12.0
    enabled: bool = True

    def __post_init__(self):
        if self.duration < 0:
            raise ValueError("Intro duration must not be negative")

    def start_pose(self) -> CameraPose:
        return CameraPose(np.array(self.start_position, dtype=float), np.array(self.target, dtype=float))

    def end_pose(self) -> CameraPose:
        return CameraPose(np.array(self.end_position, dtype=float), np.array(self.target, dtype=float))


@dataclass
class TransitionState:
    """
    The one active transition.

    Attributes
    ----------
    start : CameraPose
        Pose at the start
    end : CameraPose
        Destination pose
    control : np.ndarray
        Bezier control point (unused by fly-in paths)
    start_time : float
        Clock reading at start (seconds)
    duration : float
        Length (seconds)
    phase : TransitionPhase
        Lifecycle phase
    kind : PathKind
        Position interpolation
    easing : callable
        Easing applied to raw progress
    on_complete : callable, optional
        Invoked once on completion, never on cancellation
    center : np.ndarray
        Origin of the radial interpolation for fly-in paths
    progress : float
        Raw progress at the last update
    """

    start: CameraPose
    end: CameraPose
    control: np.ndarray
    start_time: float
    duration: float
    phase: TransitionPhase = TransitionPhase.RUNNING
    kind: PathKind = PathKind.CURVED
    easing: EasingFunction = ease_out_quint
    on_complete: Optional[Callable[[], None]] = None
    center: np.ndarray = field(default_factory=lambda: np.zeros(3))
    progress: float = 0.0


def safe_control_point(
    start: np.ndarray,
    end: np.ndarray,
    light: np.ndarray,
    clearance: float = 0.3,
    push: float = 0.4,
    arc_height: float = 0.2,
) -> np.ndarray:
    """
    Bezier control point for a path from ``start`` to ``end``.

    If the midpoint lies within ``clearance`` times the travel distance of
    the light, it is pushed directly away from the light by ``push`` times
    the travel. Otherwise it is raised along the global up by
    ``arc_height`` times the travel.
    """
    start = np.asarray(start, dtype=float)
    end = np.asarray(end, dtype=float)
    midpoint = (start + end) * 0.5
    travel = float(np.linalg.norm(end - start))

    light_to_mid = midpoint - np.asarray(light, dtype=float)
    if np.linalg.norm(light_to_mid) > travel * clearance:
        return midpoint + GLOBAL_UP * (travel * arc_height)

    return midpoint + normalize(light_to_mid) * (travel * push)


def quadratic_bezier(p0: np.ndarray, p1: np.ndarray, p2: np.ndarray, t: float) -> np.ndarray:
    """Point at ``t`` on the quadratic Bezier p0, p1, p2."""
    u = 1 - t
    return u * u * p0 + 2 * u * t * p1 + t * t * p2


def log_lerp(a: float, b: float, t: float) -> float:
    """Interpolate in log space. Non-positive inputs are floored to 1."""
    if a <= 0:
        a = 1.0
    if b <= 0:
        b = 1.0
    log_a, log_b = math.log(a), math.log(b)
    return math.exp(log_a + (log_b - log_a) * t)


def fly_in_position(
    start: np.ndarray,
    end: np.ndarray,
    t: float,
    center: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Position at ``t`` of a logarithmic radial flight.

    The distance to ``center`` is interpolated geometrically (distances are
    floored to 1); the direction is interpolated linearly and re-normalised.
    """
    center = np.zeros(3) if center is None else np.asarray(center, dtype=float)
    start_offset = np.asarray(start, dtype=float) - center
    end_offset = np.asarray(end, dtype=float) - center

    distance = log_lerp(
        max(float(np.linalg.norm(start_offset)), 1.0),
        max(float(np.linalg.norm(end_offset)), 1.0),
        t,
    )

    start_dir = normalize(start_offset)
    end_dir = normalize(end_offset)
    direction = normalize(start_dir + (end_dir - start_dir) * t, fallback=end_dir)
    return center + direction * distance


class TransitionController:
    """
    Drives the camera pose between planner-supplied poses.

    Parameters
    ----------
    config : TransitionConfig, optional
        Durations, easings and path shaping
    clock : callable, optional
        Monotonic clock in seconds (default time.monotonic)
    initial_pose : CameraPose, optional
        Pose before any transition

    Attributes
    ----------
    pose : CameraPose
        Current camera pose. Written only by the controller while running.
    state : TransitionState or None
        Active or just-finished transition
    """

    def __init__(
        self,
        config: Optional[TransitionConfig] = None,
        clock: Optional[Clock] = None,
        initial_pose: Optional[CameraPose] = None,
    ):
        self.config = config or TransitionConfig()
        self.clock = clock or time.monotonic
        self.pose = initial_pose.copy() if initial_pose is not None else CameraPose(np.array([0.0, 0.0, 10.0]))
        self.state: Optional[TransitionState] = None

    @property
    def phase(self) -> TransitionPhase:
        if self.state is None:
            return TransitionPhase.IDLE
        return self.state.phase

    @property
    def is_running(self) -> bool:
        return self.phase == TransitionPhase.RUNNING

    @property
    def progress(self) -> float:
        """Raw progress of the current transition in [0, 1]; 1 when not running."""
        if not self.is_running:
            return 1.0
        return self._raw_progress(self.state)

    def set_pose(self, pose: CameraPose) -> None:
        """
        Replace the pose from outside (manual controls).

        Raises
        ------
        RuntimeError
            While a transition is running
        """
        if self.is_running:
            raise RuntimeError("Camera pose is owned by the running transition")
        self.pose = pose.copy()

    def start(
        self,
        start_pose: CameraPose,
        end_pose: CameraPose,
        light_pos: np.ndarray,
        duration: Optional[float] = None,
        on_complete: Optional[Callable[[], None]] = None,
        easing: Optional[str] = None,
    ) -> TransitionState:
        """
        Begin a curved transition. A running transition is cancelled first.

        Parameters
        ----------
        start_pose : CameraPose
            Pose at t = 0 (usually the current pose)
        end_pose : CameraPose
            Destination pose
        light_pos : np.ndarray
            Light source the path should bend around
        duration : float, optional
            Seconds; defaults to the configured duration
        on_complete : callable, optional
            Invoked once when the transition completes
        easing : str, optional
            Easing name; defaults to the configured one

        Returns
        -------
        TransitionState
            The new state
        """
        config = self.config
        control = safe_control_point(
            start_pose.position, end_pose.position, light_pos,
            config.light_clearance, config.light_push, config.arc_height,
        )
        return self._begin(
            start_pose, end_pose, control, PathKind.CURVED,
            config.duration if duration is None else duration,
            get_easing(easing or config.easing),
            on_complete,
        )

    def start_fly_in(
        self,
        start_pose: CameraPose,
        end_pose: CameraPose,
        duration: Optional[float] = None,
        on_complete: Optional[Callable[[], None]] = None,
        easing: Optional[str] = None,
        center: Optional[np.ndarray] = None,
    ) -> TransitionState:
        """
        Begin a logarithmic radial flight about ``center`` (default: the end
        pose's target). A running transition is cancelled first.
        """
        config = self.config
        center = end_pose.target if center is None else np.asarray(center, dtype=float)
        return self._begin(
            start_pose, end_pose, end_pose.position.copy(), PathKind.FLY_IN,
            config.duration if duration is None else duration,
            get_easing(easing or config.fly_in_easing),
            on_complete,
            center=center.copy(),
        )

    def _begin(
        self,
        start_pose: CameraPose,
        end_pose: CameraPose,
        control: np.ndarray,
        kind: PathKind,
        duration: float,
        easing: EasingFunction,
        on_complete: Optional[Callable[[], None]],
        center: Optional[np.ndarray] = None,
    ) -> TransitionState:
        if duration < 0:
            raise ValueError("Transition duration must not be negative")
        if self.is_running:
            self.stop()

        self.state = TransitionState(
            start=start_pose.copy(),
            end=end_pose.copy(),
            control=control,
            start_time=self.clock(),
            duration=duration,
            kind=kind,
            easing=easing,
            on_complete=on_complete,
            center=np.zeros(3) if center is None else center,
        )
        self.pose = start_pose.copy()
        logger.debug(
            f"Started {kind.value} transition ({duration:.2f}s) "
            f"over {np.linalg.norm(end_pose.position - start_pose.position):.3g} units"
        )
        return self.state

    def _raw_progress(self, state: TransitionState) -> float:
        if state.duration <= 0 or state.start.is_close(state.end, self.config.identical_tolerance):
            return 1.0
        elapsed = self.clock() - state.start_time
        return min(max(elapsed / state.duration, 0.0), 1.0)

    def _interpolate(self, state: TransitionState, raw_t: float) -> CameraPose:
        if raw_t >= 1:
            return state.end.copy()

        t = state.easing(raw_t)
        start, end = state.start, state.end

        if state.kind == PathKind.FLY_IN:
            position = fly_in_position(start.position, end.position, t, state.center)
        else:
            position = quadratic_bezier(start.position, state.control, end.position, t)

        target = start.target + (end.target - start.target) * t
        up = normalize(start.up + (end.up - start.up) * t, fallback=end.up)
        return CameraPose(position, target, up)

    def update(self) -> Optional[CameraPose]:
        """
        Advance the running transition.

        Returns
        -------
        CameraPose or None
            The interpolated pose while running (the exact end pose on the
            completing frame), None otherwise. A completed or cancelled
            transition settles back to idle on this call.
        """
        state = self.state
        if state is None:
            return None
        if state.phase != TransitionPhase.RUNNING:
            self.state = None
            return None

        raw_t = self._raw_progress(state)
        state.progress = raw_t
        self.pose = self._interpolate(state, raw_t)

        if raw_t >= 1:
            state.phase = TransitionPhase.COMPLETED
            logger.debug(f"Completed {state.kind.value} transition")
            if state.on_complete is not None:
                state.on_complete()

        return self.pose.copy()

    def stop(self) -> bool:
        """
        Cancel the running transition, freezing the pose where it is.

        Returns
        -------
        bool
            True if a transition was running
        """
        if not self.is_running:
            return False
        self.state.phase = TransitionPhase.CANCELLED
        logger.debug(f"Cancelled {self.state.kind.value} transition at {self.state.progress:.0%}")
        return True
