#!/usr/bin/env python3
"""
Scene Module

Per-frame orchestration of the orrery. A Scene owns the body registry, the
framing planner, the transition controller and the declutter engine, and
runs them in a fixed order every frame:

1. manual input cancels any running camera transition;
2. every body position is recomputed for the frame's timestamp;
3. a pending focus change is framed and a transition toward it started;
4. overlays are projected and decluttered against the current pose;
5. the transition controller advances the camera pose, or, when idle, the
   camera keeps tracking the focused body.

Time, viewport and input are passed in explicitly on every step; the scene
keeps no wall-clock or window state of its own. It can run headless.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from camera import (
    CameraIntrinsics,
    CameraPose,
    FramingConfig,
    FramingPlanner,
    FramingResult,
    IntroConfig,
    SphereCollider,
    TransitionConfig,
    TransitionController,
    TransitionPhase,
)
from ephemeris import (
    AU_TO_DISPLAY_UNITS,
    DEFAULT_ORBIT_SEGMENTS,
    BodyFrame,
    BodyRegistry,
    CelestialBody,
    ScaleMode,
    didactic_distance,
    orbit_path,
    orbit_segments,
)
from overlay import DeclutterConfig, DeclutterEngine, OverlayCandidate

logger = logging.getLogger(__name__)


@dataclass
class SceneConfig:
    """
    Configuration for a scene.

    Attributes
    ----------
    scale_mode : ScaleMode
        Realistic or didactic distances and radii.
    light_id : str
        Body that lights the scene (the Sun).
    initial_focus : str, optional
        Body focused after initialization.
    fov : float
        Vertical field of view of the viewing camera (degrees).
    orbit_segments : int
        Path segments for an unfocused orbit.
    min_orbit_salience : float
        Orbits smaller than this fraction of their camera distance get no path.
    focus_tracking_rate : float
        Fraction of the remaining offset the idle camera closes each frame
        while following the focused body.
    initial_camera_position : tuple
        Camera position before any transition.
    framing : FramingConfig
        Framing planner settings.
    transition : TransitionConfig
        Transition settings.
    intro : IntroConfig
        Deep-space intro flight.
    declutter : DeclutterConfig
        Overlay layout settings.
    """

    scale_mode: ScaleMode = ScaleMode.DIDACTIC
    light_id: str = "sun"
    initial_focus: Optional[str] = "sun"
    fov: float = 45.0
    orbit_segments: int = DEFAULT_ORBIT_SEGMENTS
    min_orbit_salience: float = 1e-3
    focus_tracking_rate: float = 0.1
    initial_camera_position: Sequence[float] = (0.0, 1746.0, 7.0)
    framing: FramingConfig = field(default_factory=FramingConfig)
    transition: TransitionConfig = field(default_factory=TransitionConfig)
    intro: IntroConfig = field(default_factory=IntroConfig)
    declutter: DeclutterConfig = field(default_factory=DeclutterConfig)

    def __post_init__(self):
        if not 0 <= self.focus_tracking_rate <= 1:
            raise ValueError("focus_tracking_rate must be in [0, 1]")
        if self.orbit_segments < 0:
            raise ValueError("orbit_segments must not be negative")


@dataclass
class FrameState:
    """
    Everything computed for one frame.

    Attributes
    ----------
    time : datetime
        Simulated timestamp of the frame.
    step_count : int
        Number of frames stepped so far.
    bodies : dict
        Body id -> BodyFrame.
    pose : CameraPose
        Camera pose after this frame.
    overlays : list
        Overlay candidates in placement order.
    focus_id : str, optional
        Focused body.
    transition_phase : TransitionPhase
        Controller phase after this frame.
    framing : FramingResult, optional
        Planner output if a focus change was processed this frame.
    """

    time: datetime
    step_count: int
    bodies: Dict[str, BodyFrame]
    pose: CameraPose
    overlays: List[OverlayCandidate] = field(default_factory=list)
    focus_id: Optional[str] = None
    transition_phase: TransitionPhase = TransitionPhase.IDLE
    framing: Optional[FramingResult] = None


def bounding_radius(body: CelestialBody, radius: float) -> float:
    """Framing radius: the body's display radius, widened to its rings."""
    if body.ring_outer_radius:
        return radius * body.ring_outer_radius
    return radius


def colliders_from_registry(registry: BodyRegistry) -> List[SphereCollider]:
    """One solid sphere per body at its current position."""
    return [
        SphereCollider(id=frame.body_id, center=frame.position.copy(), radius=frame.radius)
        for frame in registry
    ]


class Scene:
    """
    Frame-synchronous orrery scene.

    Parameters
    ----------
    bodies : sequence of CelestialBody
        Static body table.
    config : SceneConfig, optional
        Scene configuration.
    clock : callable, optional
        Monotonic clock in seconds for camera transitions.

    Attributes
    ----------
    config : SceneConfig
        Current configuration.
    registry : BodyRegistry
        Body id -> position and radius for the current frame.
    planner : FramingPlanner
        Observing pose planner.
    controller : TransitionController
        Camera animation owner.
    declutter : DeclutterEngine
        Overlay layout.
    focus_id : str, optional
        Currently focused body.
    state : FrameState, optional
        Result of the most recent step.
    """

    def __init__(
        self,
        bodies: Sequence[CelestialBody],
        config: Optional[SceneConfig] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.config = config or SceneConfig()
        self.bodies = list(bodies)
        self.registry = BodyRegistry(self.bodies, self.config.scale_mode)
        self.planner = FramingPlanner(self.config.framing)
        self.controller = TransitionController(
            self.config.transition,
            clock=clock,
            initial_pose=CameraPose(np.array(self.config.initial_camera_position, dtype=float)),
        )
        self.declutter = DeclutterEngine(self.config.declutter)
        self.names = {body.id: body.name for body in self.bodies}

        self.focus_id: Optional[str] = None
        self.state: Optional[FrameState] = None
        self.time: Optional[datetime] = None
        self.step_count = 0

        self._pending_focus: Optional[str] = None
        self._pending_callback: Optional[Callable[[], None]] = None
        self._initialized = False

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def initialize(self, when: Optional[datetime] = None) -> None:
        """
        Resolve body positions at ``when`` (default: now, UTC) and apply the
        initial focus. Must be called before stepping.
        """
        self.time = when or datetime.now(timezone.utc)
        self.registry.update(self.time)

        focus = self.config.initial_focus
        if focus is not None:
            if focus not in self.registry:
                raise KeyError(f"Unknown initial focus body '{focus}'")
            self.focus_id = focus
            pose = self.controller.pose
            self.controller.set_pose(CameraPose(pose.position, self.registry.position(focus), pose.up))

        self._initialized = True
        logger.debug(f"Scene initialized with {len(self.registry)} bodies at {self.time.isoformat()}")

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------

    def request_focus(self, body_id: str, on_complete: Optional[Callable[[], None]] = None) -> None:
        """
        Focus ``body_id`` on the next step.

        Raises
        ------
        KeyError
            If the body is unknown
        """
        if body_id not in self.registry:
            raise KeyError(f"Unknown body '{body_id}'")
        self._pending_focus = body_id
        self._pending_callback = on_complete

    def start_intro(self, on_complete: Optional[Callable[[], None]] = None) -> None:
        """Play the configured deep-space fly-in."""
        intro = self.config.intro
        self.controller.start_fly_in(
            intro.start_pose(), intro.end_pose(), duration=intro.duration, on_complete=on_complete,
        )
        logger.debug("Intro flight started")

    def set_camera_pose(self, pose: CameraPose) -> None:
        """Apply a manually controlled pose. Ignored while a transition runs."""
        if self.controller.is_running:
            return
        self.controller.set_pose(pose)

    def set_scale_mode(self, scale_mode: ScaleMode) -> None:
        """
        Switch between realistic and didactic scaling.

        Positions are rebuilt on the next step; if a body is focused it is
        re-framed at the new scale.
        """
        if scale_mode == self.registry.scale_mode:
            return
        self.config.scale_mode = scale_mode
        self.registry = BodyRegistry(self.bodies, scale_mode)
        if self.time is not None:
            self.registry.update(self.time)
        if self.focus_id is not None:
            self.request_focus(self.focus_id)
        logger.info(f"Scale mode set to {scale_mode.value}")

    @property
    def camera_pose(self) -> CameraPose:
        return self.controller.pose

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def intrinsics(self, width: int, height: int) -> CameraIntrinsics:
        """Lens of the viewing camera for a viewport size."""
        return CameraIntrinsics.for_viewport(width, height, self.config.fov)

    def light_position(self) -> np.ndarray:
        if self.config.light_id in self.registry:
            return self.registry.position(self.config.light_id)
        return np.zeros(3)

    def colliders(self) -> List[SphereCollider]:
        return colliders_from_registry(self.registry)

    def frame_body(self, body_id: str, intrinsics: CameraIntrinsics) -> FramingResult:
        """Planner output for observing ``body_id`` at the current positions."""
        frame = self.registry[body_id]
        body = self.registry.bodies[body_id]
        return self.planner.frame(
            frame.position,
            bounding_radius(body, frame.radius),
            intrinsics,
            self.light_position(),
            up_hint=frame.north,
            colliders=self.colliders(),
            target_id=body_id,
        )

    def orbit_extent(self, body_id: str) -> float:
        """Apoapsis distance of a body's orbit in display units."""
        body = self.registry.bodies[body_id]
        apoapsis = body.orbit.a * (1 + body.orbit.e)
        if self.registry.scale_mode == ScaleMode.DIDACTIC:
            return didactic_distance(apoapsis, self.registry.system_multiplier(body))
        return apoapsis * AU_TO_DISPLAY_UNITS

    def orbit_path(self, body_id: str, segments: Optional[int] = None) -> np.ndarray:
        """
        World-space orbit path of ``body_id`` for the current frame.

        The path is centred on the parent's current position. Without an
        explicit ``segments`` the count follows focus and salience rules.
        """
        body = self.registry.bodies[body_id]
        center = self.registry.position(body.parent_id) if body.parent_id else np.zeros(3)

        if segments is None:
            camera_distance = float(np.linalg.norm(self.controller.pose.position - center))
            segments = orbit_segments(
                body_id == self.focus_id,
                self.config.orbit_segments,
                self.orbit_extent(body_id),
                camera_distance,
                self.config.min_orbit_salience,
            )

        path = orbit_path(
            body.orbit, segments, self.registry.scale_mode, self.registry.system_multiplier(body),
        )
        return path + center

    # -------------------------------------------------------------------------
    # Frame
    # -------------------------------------------------------------------------

    def step(
        self,
        when: datetime,
        width: int,
        height: int,
        user_input: bool = False,
    ) -> FrameState:
        """
        Advance the scene by one frame.

        Parameters
        ----------
        when : datetime
            Simulated timestamp of this frame
        width, height : int
            Viewport size in pixels
        user_input : bool
            Manual camera input happened since the last frame

        Returns
        -------
        FrameState
            Positions, camera pose and overlays for this frame

        Raises
        ------
        RuntimeError
            If the scene was not initialized
        """
        if not self._initialized:
            raise RuntimeError("Scene not initialized. Call initialize() first.")

        cancelled = user_input and self.controller.stop()
        if cancelled:
            logger.info("Camera transition cancelled by user input")

        self.time = when
        frames = self.registry.update(when)
        intrinsics = self.intrinsics(width, height)

        framing = None
        if self._pending_focus is not None:
            framing = self._begin_focus_transition(intrinsics)

        overlays = self.declutter.update(
            frames.values(), self.controller.pose, intrinsics, width, height,
            focus_id=self.focus_id, names=self.names, light_id=self.config.light_id,
        )

        # The cancelling frame keeps the frozen pose
        if self.controller.update() is None and not cancelled:
            self._track_focus()

        self.step_count += 1
        self.state = FrameState(
            time=when,
            step_count=self.step_count,
            bodies=frames,
            pose=self.controller.pose.copy(),
            overlays=overlays,
            focus_id=self.focus_id,
            transition_phase=self.controller.phase,
            framing=framing,
        )
        return self.state

    def _begin_focus_transition(self, intrinsics: CameraIntrinsics) -> FramingResult:
        body_id, callback = self._pending_focus, self._pending_callback
        self._pending_focus, self._pending_callback = None, None

        result = self.frame_body(body_id, intrinsics)
        self.focus_id = body_id
        self.controller.start(
            self.controller.pose, result.pose(), self.light_position(), on_complete=callback,
        )
        logger.debug(f"Focusing '{body_id}' from {result.distance:.3g} units")
        return result

    def _track_focus(self) -> None:
        """Ease the idle camera's target toward the focused body, carrying the camera along."""
        if self.focus_id is None or self.controller.is_running:
            return
        pose = self.controller.pose
        shift = (self.registry.position(self.focus_id) - pose.target) * self.config.focus_tracking_rate
        self.controller.set_pose(CameraPose(pose.position + shift, pose.target + shift, pose.up))
