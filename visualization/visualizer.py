#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Visualizer Module for the Orrery

Provides a Pygame-based interactive view of the solar system. The visualizer
is the render-loop driver: each frame it advances simulated time, feeds the
manual-input edge and viewport size to Scene.step, and draws the result.
"""

import sys
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import numpy as np
import pygame

# Add parent directory to path for imports when running as script
if __name__ == "__main__":
    import os
    sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ephemeris import CelestialBody, ScaleMode, StarCatalog, default_bodies
from scene import FrameState, Scene, SceneConfig
from .controls import OrbitControls
from .renderer import Renderer

logger = logging.getLogger(__name__)


class Visualizer:
    """
    Interactive visualization of the orrery.

    The visualizer creates a Pygame window and renders the scene from the
    scene's camera. The mouse and keyboard drive OrbitControls; any manual
    input immediately cancels a running camera transition.

    Parameters
    ----------
    scene : Scene
        The scene to drive (initialized by the visualizer if needed)
    width : int
        Window width in pixels (default 1280)
    height : int
        Window height in pixels (default 720)
    title : str
        Window title
    time_scale : float
        Initial simulated days per real second
    paused : bool
        Start paused (default False)
    stars : StarCatalog, optional
        Background starfield
    start_time : datetime, optional
        Initial simulated time (default now, UTC)

    Attributes
    ----------
    screen : pygame.Surface
        The Pygame display surface
    controls : OrbitControls
        Manual camera controls
    renderer : Renderer
        The rendering engine
    time : datetime
        Current simulated time
    time_scale : float
        Current time scale (days per second)
    paused : bool
        Whether simulated time is paused
    running : bool
        Whether the visualizer is running
    """

    DEFAULT_TIME_SCALE = 0.5  # half a day per second
    MIN_TIME_SCALE = 1.0 / 1440.0
    MAX_TIME_SCALE = 3650.0
    DRAG_SENSITIVITY = 0.005

    def __init__(
        self,
        scene: Scene,
        width: int = 1280,
        height: int = 720,
        title: str = "Orrery",
        time_scale: float = DEFAULT_TIME_SCALE,
        paused: bool = False,
        stars: Optional[StarCatalog] = None,
        start_time: Optional[datetime] = None,
    ):
        # Initialize Pygame
        pygame.init()

        self.width = width
        self.height = height
        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption(title)

        self.scene = scene
        self.time = start_time or datetime.now(timezone.utc)
        if not scene.is_initialized:
            scene.initialize(self.time)

        self.controls = OrbitControls()
        self.controls.sync_from_pose(scene.camera_pose)
        self.renderer = Renderer(self.screen)
        self.stars = stars if stars is not None else StarCatalog.empty()

        self.time_scale = time_scale
        self.paused = paused
        self.running = False
        self.show_labels = True
        self.state: Optional[FrameState] = None

        self._dragging = False
        self._focus_order: List[str] = [body.id for body in scene.bodies]

        # Pygame resources
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont('Arial', 14)

    def play_intro(self) -> None:
        """Start the deep-space fly-in."""
        self.scene.start_intro()

    def cycle_focus(self, step: int = 1) -> str:
        """Focus the next (or previous) body in table order."""
        current = self.scene.focus_id
        if current in self._focus_order:
            index = (self._focus_order.index(current) + step) % len(self._focus_order)
        else:
            index = 0
        body_id = self._focus_order[index]
        self.scene.request_focus(body_id)
        logger.info(f"Focus: {self.scene.names[body_id]}")
        return body_id

    def _handle_events(self) -> None:
        """Handle Pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event.key, event.mod)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._dragging = True

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self._dragging = False

            elif event.type == pygame.MOUSEMOTION and self._dragging:
                dx, dy = event.rel
                self.controls.rotate(-dx * self.DRAG_SENSITIVITY, dy * self.DRAG_SENSITIVITY)

            elif event.type == pygame.MOUSEWHEEL:
                if event.y > 0:
                    self.controls.zoom_in(3 * event.y)
                elif event.y < 0:
                    self.controls.zoom_out(-3 * event.y)

    def _handle_keydown(self, key: int, mod: int = 0) -> None:
        """Handle key press events."""
        if key == pygame.K_ESCAPE:
            self.running = False

        elif key == pygame.K_SPACE:
            self.paused = not self.paused

        elif key == pygame.K_TAB:
            self.cycle_focus(-1 if mod & pygame.KMOD_SHIFT else 1)

        elif key == pygame.K_l:
            self.show_labels = not self.show_labels

        elif key == pygame.K_m:
            mode = ScaleMode.REALISTIC if self.scene.registry.scale_mode == ScaleMode.DIDACTIC else ScaleMode.DIDACTIC
            self.scene.set_scale_mode(mode)
            print(f"Scale mode: {mode.value}")

        elif key == pygame.K_LEFTBRACKET:
            # Decrease time scale
            self.time_scale = max(self.MIN_TIME_SCALE, self.time_scale / 2)
            print(f"Time scale: {self.time_scale:g} days/s")

        elif key == pygame.K_RIGHTBRACKET:
            # Increase time scale
            self.time_scale = min(self.MAX_TIME_SCALE, self.time_scale * 2)
            print(f"Time scale: {self.time_scale:g} days/s")

    def _handle_continuous_keys(self) -> None:
        """Handle continuous key presses for camera control."""
        keys = pygame.key.get_pressed()

        if keys[pygame.K_LEFT]:
            self.controls.rotate_left()
        if keys[pygame.K_RIGHT]:
            self.controls.rotate_right()
        if keys[pygame.K_UP]:
            self.controls.rotate_up()
        if keys[pygame.K_DOWN]:
            self.controls.rotate_down()

        if keys[pygame.K_PLUS] or keys[pygame.K_EQUALS] or keys[pygame.K_KP_PLUS]:
            self.controls.zoom_in()
        if keys[pygame.K_MINUS] or keys[pygame.K_KP_MINUS]:
            self.controls.zoom_out()

    def _update(self, dt: float) -> None:
        """
        Advance simulated time and step the scene.

        Parameters
        ----------
        dt : float
            Real time delta in seconds
        """
        if not self.paused:
            self.time += timedelta(days=dt * self.time_scale)

        user_input = self.controls.consume_input()
        self.state = self.scene.step(self.time, self.width, self.height, user_input=user_input)

        if user_input:
            self.scene.set_camera_pose(self.controls.get_pose())
        else:
            self.controls.sync_from_pose(self.scene.camera_pose)

    def _orbit_paths(self) -> Dict[str, np.ndarray]:
        paths: Dict[str, np.ndarray] = {}
        for body in self.scene.bodies:
            if body.orbit.is_stationary:
                continue
            path = self.scene.orbit_path(body.id)
            if len(path):
                paths[body.id] = path
        return paths

    def _render(self) -> None:
        """Render the current frame."""
        self.renderer.clear()

        if self.state is None:
            pygame.display.flip()
            return

        scene = self.scene
        pose = scene.camera_pose
        intrinsics = scene.intrinsics(self.width, self.height)

        self.renderer.draw_starfield(self.stars, pose, intrinsics)
        self.renderer.draw_orbits(self._orbit_paths(), pose, intrinsics, scene.focus_id)
        self.renderer.draw_bodies(self.state.bodies, scene.registry.bodies, pose, intrinsics)

        if self.show_labels:
            self.renderer.draw_overlays(self.state.overlays, self.font, scene.focus_id)

        focus_name = scene.names.get(scene.focus_id, "-") if scene.focus_id else "-"
        self.renderer.draw_info_panel(
            self.state,
            focus_name,
            self.font,
            self.time_scale,
            self.paused,
            scene.registry.scale_mode.value,
        )

        # Update display
        pygame.display.flip()

    def run(self) -> None:
        """
        Run the visualization main loop.

        This blocks until the user closes the window or presses ESC.
        """
        self.running = True

        while self.running:
            # Get time delta
            dt = self.clock.tick(60) / 1000.0  # Convert to seconds

            # Handle events
            self._handle_events()

            # Handle continuous key presses
            self._handle_continuous_keys()

            # Step the scene
            self._update(dt)

            # Render
            self._render()

        pygame.quit()

    def step(self) -> bool:
        """
        Perform a single visualization step.

        This is useful for external control of the visualization loop.

        Returns
        -------
        bool
            False if the visualizer should stop, True otherwise
        """
        dt = self.clock.tick(60) / 1000.0

        self._handle_events()

        if not self.running:
            return False

        self._handle_continuous_keys()
        self._update(dt)
        self._render()

        return True

    def close(self) -> None:
        """Close the visualizer and clean up resources."""
        pygame.quit()


def run_visualizer(
    bodies: Optional[List[CelestialBody]] = None,
    config: Optional[SceneConfig] = None,
    stars: Optional[StarCatalog] = None,
    start_time: Optional[datetime] = None,
    time_scale: float = Visualizer.DEFAULT_TIME_SCALE,
    paused: bool = False,
    play_intro: bool = True,
    focus: Optional[str] = None,
    width: int = 1280,
    height: int = 720,
) -> None:
    """
    Convenience function to launch the visualizer.

    Parameters
    ----------
    bodies : list of CelestialBody, optional
        Body table (default: the built-in solar system)
    config : SceneConfig, optional
        Scene configuration
    stars : StarCatalog, optional
        Background starfield
    start_time : datetime, optional
        Initial simulated time (default now, UTC)
    time_scale : float
        Initial simulated days per real second
    paused : bool
        Start paused
    play_intro : bool
        Fly in from deep space (only if the intro is enabled in the config)
    focus : str, optional
        Body to frame right after start-up
    width : int
        Window width
    height : int
        Window height
    """
    config = config or SceneConfig()
    scene = Scene(bodies if bodies is not None else default_bodies(), config)

    visualizer = Visualizer(
        scene,
        width=width,
        height=height,
        time_scale=time_scale,
        paused=paused,
        stars=stars,
        start_time=start_time,
    )

    print(f"Loaded {len(scene.bodies)} bodies ({scene.registry.scale_mode.value} scale)")
    if stars is not None:
        print(f"  Stars: {len(stars)}")

    if play_intro and config.intro.enabled:
        visualizer.play_intro()
    elif focus is not None:
        scene.request_focus(focus)

    visualizer.run()


if __name__ == "__main__":
    print("Starting Orrery")
    print("=" * 50)
    print("\nControls:")
    print("  Mouse drag / arrow keys: Orbit camera")
    print("  Wheel / +/- : Zoom in/out")
    print("  TAB / SHIFT+TAB : Focus next/previous body")
    print("  [ ] : Decrease/increase time scale")
    print("  M : Toggle realistic/didactic scale")
    print("  L : Toggle labels")
    print("  SPACE : Pause/Resume")
    print("  ESC : Quit")
    print()

    run_visualizer()
