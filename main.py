#!/usr/bin/env python3
"""
Orrery - Solar System Viewer

Command-line entry point for running the orrery scene, either headless
(frame loop with printed summaries) or in the interactive pygame viewer.

Usage:
    python main.py                                  # Interactive viewer with intro
    python main.py --focus saturn --no-intro        # Start focused on Saturn
    python main.py --headless --duration 10         # Headless frame run
    python main.py --export-bodies bodies.json      # Write the body table
    python main.py --help                           # Show all options
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timezone


def parse_date(value: str) -> datetime:
    """ISO 8601 timestamp; naive values are taken as UTC."""
    try:
        when = datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid ISO date: {value!r}")
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when


def main():
    parser = argparse.ArgumentParser(
        description="Solar System Orrery and Viewer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                    # Viewer with deep-space intro
  %(prog)s --focus jupiter --no-intro         # Start framed on Jupiter
  %(prog)s --scale-mode realistic             # True distances and radii
  %(prog)s --date 2030-01-01T00:00:00         # Start at a given date
  %(prog)s --stars stars.bin                  # Background starfield
  %(prog)s --headless --duration 10 --focus mars

Controls (visualization mode):
  Mouse drag / arrows : Orbit camera
  Wheel / +/-         : Zoom in/out
  TAB / SHIFT+TAB     : Focus next/previous body
  [ ]                 : Decrease/increase time scale
  M                   : Toggle realistic/didactic scale
  L                   : Toggle labels
  SPACE               : Pause/Resume
  ESC                 : Quit
        """,
    )

    # -------------------------------------------------------------------------
    # Data
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--bodies",
        type=str,
        default=None,
        help="JSON body table (default: built-in solar system)",
    )
    parser.add_argument(
        "--stars",
        type=str,
        nargs="*",
        default=[],
        help="Binary star catalog files for the background",
    )
    parser.add_argument(
        "--export-bodies",
        type=str,
        default=None,
        metavar="PATH",
        help="Write the body table to PATH as JSON and exit",
    )

    # -------------------------------------------------------------------------
    # Scene parameters
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--date",
        type=parse_date,
        default=None,
        help="Initial simulated time, ISO 8601 (default: now, UTC)",
    )
    parser.add_argument(
        "--focus",
        type=str,
        default=None,
        help="Body to focus after start-up (e.g. earth, saturn)",
    )
    parser.add_argument(
        "--scale-mode",
        type=str,
        choices=["didactic", "realistic"],
        default="didactic",
        help="Distance/radius scaling (default: didactic)",
    )
    parser.add_argument(
        "--time-scale",
        type=float,
        default=0.5,
        help="Simulated days per real second (default: 0.5)",
    )
    parser.add_argument(
        "--no-intro",
        action="store_true",
        help="Skip the deep-space intro flight",
    )

    # -------------------------------------------------------------------------
    # Headless mode
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run the frame loop without visualization",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=10.0,
        help="Headless run length in viewer seconds (default: 10)",
    )
    parser.add_argument(
        "--timestep",
        type=float,
        default=1.0 / 60.0,
        help="Headless frame interval in seconds (default: 1/60)",
    )

    # -------------------------------------------------------------------------
    # Visualization parameters
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--width",
        type=int,
        default=1280,
        help="Window width in pixels (default: 1280)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=720,
        help="Window height in pixels (default: 720)",
    )
    parser.add_argument(
        "--paused",
        action="store_true",
        help="Start with simulated time paused",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if args.timestep <= 0:
        parser.error("--timestep must be positive")

    # -------------------------------------------------------------------------
    # Import scene components
    # -------------------------------------------------------------------------
    from ephemeris import (
        CatalogError,
        ScaleMode,
        body_to_record,
        default_bodies,
        load_bodies_json,
        load_star_catalogs,
    )
    from scene import SceneConfig

    try:
        bodies = load_bodies_json(args.bodies) if args.bodies else default_bodies()
    except (OSError, CatalogError) as e:
        print(f"\nError: Could not load body table: {e}")
        sys.exit(1)

    if args.export_bodies:
        with open(args.export_bodies, "w", encoding="utf-8") as f:
            json.dump([body_to_record(body) for body in bodies], f, indent=2)
        print(f"Wrote {len(bodies)} bodies to {args.export_bodies}")
        return

    ids = {body.id for body in bodies}
    if args.focus is not None and args.focus not in ids:
        print(f"\nError: Unknown body '{args.focus}'. Known bodies: {', '.join(sorted(ids))}")
        sys.exit(1)

    # -------------------------------------------------------------------------
    # Create scene configuration
    # -------------------------------------------------------------------------
    config = SceneConfig(
        scale_mode=ScaleMode(args.scale_mode),
        initial_focus="sun" if "sun" in ids else None,
    )
    config.intro.enabled = not args.no_intro

    stars = load_star_catalogs(args.stars) if args.stars else None
    start_time = args.date or datetime.now(timezone.utc)

    # -------------------------------------------------------------------------
    # Print configuration summary
    # -------------------------------------------------------------------------
    print("=" * 60)
    print("Orrery - Solar System Viewer")
    print("=" * 60)
    print(f"\nBodies: {len(bodies)}")
    print(f"Scale Mode: {args.scale_mode}")
    print(f"Start Time: {start_time.isoformat()}")
    print(f"Time Scale: {args.time_scale:g} days/s")
    if args.focus:
        print(f"Focus: {args.focus}")
    if stars is not None:
        print(f"Stars: {len(stars)}")

    # -------------------------------------------------------------------------
    # Run
    # -------------------------------------------------------------------------
    if args.headless:
        run_headless(args, bodies, config, start_time)
    else:
        try:
            from visualization import run_visualizer
        except ImportError as e:
            print(f"\nError: Could not import visualization module: {e}")
            print("Try running with --headless flag for the frame loop without graphics.")
            sys.exit(1)

        print(f"\n{'=' * 60}")
        print("Starting Visualization")
        print(f"{'=' * 60}")
        print()

        run_visualizer(
            bodies,
            config,
            stars=stars,
            start_time=start_time,
            time_scale=args.time_scale,
            paused=args.paused,
            play_intro=not args.no_intro and not args.focus,
            focus=args.focus,
            width=args.width,
            height=args.height,
        )


def run_headless(args, bodies, config, start_time) -> None:
    """Step the scene on a simulated clock and print periodic summaries."""
    from datetime import timedelta

    from scene import Scene

    elapsed = 0.0
    scene = Scene(bodies, config, clock=lambda: elapsed)
    scene.initialize(start_time)
    if args.focus:
        scene.request_focus(args.focus)

    print(f"\n{'=' * 60}")
    print(f"Running headless for {args.duration:.1f} seconds...")
    print(f"Frame interval: {args.timestep * 1000:.1f} ms")
    print(f"{'=' * 60}")

    report_interval = max(args.timestep, args.duration / 5)
    next_report = 0.0
    when = start_time
    state = None

    while elapsed <= args.duration:
        state = scene.step(when, args.width, args.height)

        if elapsed >= next_report:
            pose = state.pose
            shown = sum(1 for c in state.overlays if c.show_label)
            print(f"\nTime: {elapsed:.2f} s  ({when.isoformat()})")
            print(f"  Camera: {_fmt(pose.position)} -> {_fmt(pose.target)}")
            print(f"  Transition: {state.transition_phase.value}")
            print(f"  Labels shown: {shown}/{len(state.overlays)}")
            next_report += report_interval

        elapsed += args.timestep
        when = when + timedelta(days=args.timestep * args.time_scale)

    # Final summary
    print(f"\n{'=' * 60}")
    print("Run Complete!")
    print(f"{'=' * 60}")
    print(f"Frames stepped: {scene.step_count}")
    print(f"Focus: {scene.focus_id}")
    if state is None:
        return

    print("\nBody positions (display units):")
    for body in scene.bodies:
        frame = state.bodies[body.id]
        print(f"  {body.name:<12} {_fmt(frame.position)}  r={frame.radius:.3g}")

    visible = [c.name for c in state.overlays if c.show_label]
    print(f"\nVisible labels: {', '.join(visible) if visible else 'none'}")


def _fmt(v) -> str:
    return "(" + ", ".join(f"{x:+.4g}" for x in v) + ")"


if __name__ == "__main__":
    main()
