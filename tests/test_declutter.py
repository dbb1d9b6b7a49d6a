#!/usr/bin/env python3
"""
Tests for the Overlay Declutter Engine

These tests verify:
1. Box geometry and strict intersection
2. Priority ranking and tie-breaking
3. Greedy collision resolution (icons, labels, focus exemption)
4. Projection filtering (behind camera, light, hidden types)
"""

import random

import numpy as np
import pytest

from camera import CameraIntrinsics, CameraPose
from ephemeris import BodyFrame, BodyType
from overlay import (
    FOCUS_PRIORITY,
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


def candidate(body_id, x, y, priority=10.0, distance=1.0, name=None, body_type=BodyType.PLANET):
    return OverlayCandidate(
        body_id=body_id, name=name or body_id, body_type=body_type,
        x=x, y=y, distance=distance, priority=priority,
    )


def frame(body_id, position, body_type=BodyType.PLANET):
    return BodyFrame(body_id, None, np.array(position, dtype=float), 1.0, body_type)


# Camera on +z looking at the origin; one world unit at the origin is 40 pixels.
POSE = CameraPose(np.array([0.0, 0.0, 10.0]))
LENS = CameraIntrinsics(fov=90.0, aspect=1.0)


class TestBoxes:
    """Tests for screen boxes."""

    def test_overlap(self):
        assert BoundingBox2D(0, 0, 10, 10).intersects(BoundingBox2D(5, 5, 10, 10))

    def test_touching_edges_do_not_intersect(self):
        assert not BoundingBox2D(0, 0, 10, 10).intersects(BoundingBox2D(10, 0, 10, 10))
        assert not BoundingBox2D(0, 0, 10, 10).intersects(BoundingBox2D(0, 10, 10, 10))

    def test_intersects_any(self):
        box = BoundingBox2D(0, 0, 10, 10)
        assert not box.intersects_any([])
        assert box.intersects_any([BoundingBox2D(50, 50, 1, 1), BoundingBox2D(9, 9, 5, 5)])

    @pytest.mark.parametrize("name,width", [
        ("Io", 60.0),
        ("Ganymede!!", 80.0),
        ("A very long body designation", 120.0),
    ])
    def test_label_width_clamped(self, name, width):
        assert label_width(name) == width

    def test_icon_centred(self):
        assert icon_box(100.0, 50.0) == BoundingBox2D(90.0, 40.0, 20.0, 20.0)

    def test_label_right_of_body(self):
        assert label_box(100.0, 50.0, "Mars") == BoundingBox2D(112.0, 40.0, 60.0, 20.0)


class TestPriority:
    """Tests for ranking."""

    def test_type_priorities(self):
        assert body_priority(BodyType.PLANET, False) == 10.0
        assert body_priority(BodyType.DWARF, False) == 8.0
        assert body_priority(BodyType.MOON, False) == 6.0
        assert body_priority(BodyType.COMET, False) == 4.0
        assert body_priority(BodyType.MOON, True) == FOCUS_PRIORITY

    def test_order(self):
        """Priority first, then nearer, then id."""
        ordered = priority_order([
            candidate("c", 0, 0, priority=6.0, distance=1.0),
            candidate("b", 0, 0, priority=10.0, distance=5.0),
            candidate("a", 0, 0, priority=10.0, distance=5.0),
            candidate("d", 0, 0, priority=10.0, distance=2.0),
        ])
        assert [c.body_id for c in ordered] == ["d", "a", "b", "c"]


class TestCollisions:
    """Tests for greedy placement."""

    def test_same_spot(self):
        """The lower-ranked of two coincident bodies is hidden entirely."""
        placed = resolve_collisions([
            candidate("near", 200, 200, distance=1.0),
            candidate("far", 200, 200, distance=2.0),
        ])
        by_id = {c.body_id: c for c in placed}
        assert by_id["near"].show_icon and by_id["near"].show_label
        assert not by_id["far"].show_icon and not by_id["far"].show_label

    def test_label_hidden_icon_kept(self):
        """Icons clear but labels overlap: only the label goes."""
        placed = resolve_collisions([
            candidate("a", 100, 100, priority=10.0),
            candidate("b", 125, 100, priority=6.0),
        ])
        by_id = {c.body_id: c for c in placed}
        assert by_id["a"].show_label
        assert by_id["b"].show_icon
        assert not by_id["b"].show_label

    def test_label_blocked_by_icon(self):
        """A label running into a placed icon is hidden."""
        placed = resolve_collisions([
            candidate("right", 160, 100, priority=10.0),
            candidate("left", 100, 100, priority=6.0),
        ])
        left = next(c for c in placed if c.body_id == "left")
        assert left.show_icon
        assert not left.show_label

    def test_focus_always_shown(self):
        placed = resolve_collisions([
            candidate("planet", 200, 200, priority=10.0),
            candidate("moon", 200, 200, priority=FOCUS_PRIORITY),
        ], focus_id="moon")
        by_id = {c.body_id: c for c in placed}
        assert by_id["moon"].show_icon and by_id["moon"].show_label
        assert not by_id["planet"].show_icon

    def test_far_apart_all_shown(self):
        placed = resolve_collisions([candidate(f"b{k}", 200 * k, 100) for k in range(4)])
        assert all(c.show_icon and c.show_label for c in placed)

    def test_placement_invariants(self):
        """Shown boxes never overlap anything placed before them."""
        rng = random.Random(42)
        config = DeclutterConfig()
        candidates = [
            candidate(f"body{k}", rng.uniform(0, 400), rng.uniform(0, 300),
                      priority=rng.choice([4.0, 6.0, 8.0, 10.0]), distance=rng.uniform(1, 100))
            for k in range(60)
        ]

        placed_icons, placed_labels = [], []
        for c in resolve_collisions(candidates, config=config):
            icon = icon_box(c.x, c.y, config)
            label = label_box(c.x, c.y, c.name, config)
            if c.show_label:
                assert c.show_icon
                assert not label.intersects_any(placed_labels)
                assert not label.intersects_any(placed_icons)
            if c.show_icon:
                assert not icon.intersects_any(placed_icons)
                placed_icons.append(icon)
            if c.show_label:
                placed_labels.append(label)


class TestProjection:
    """Tests for candidate projection."""

    def test_origin_projects_to_centre(self):
        candidates = project_candidates([frame("a", [0, 0, 0])], POSE, LENS, 800, 800)
        assert candidates[0].x == pytest.approx(400.0)
        assert candidates[0].y == pytest.approx(400.0)
        assert candidates[0].distance == pytest.approx(10.0)

    def test_axes(self):
        """+x goes right, +y goes up (smaller pixel y)."""
        candidates = project_candidates(
            [frame("right", [1, 0, 0]), frame("up", [0, 1, 0])], POSE, LENS, 800, 800,
        )
        by_id = {c.body_id: c for c in candidates}
        assert by_id["right"].x == pytest.approx(440.0)
        assert by_id["up"].y == pytest.approx(360.0)

    def test_behind_camera_dropped(self):
        candidates = project_candidates([frame("behind", [0, 0, 20])], POSE, LENS, 800, 800)
        assert candidates == []

    def test_light_excluded(self):
        frames = [frame("sun", [0, 0, 0], BodyType.STAR), frame("earth", [1, 0, 0])]
        ids = [c.body_id for c in project_candidates(frames, POSE, LENS, 800, 800, light_id="sun")]
        assert ids == ["earth"]

    def test_light_kept_when_focused(self):
        frames = [frame("sun", [0, 0, 0], BodyType.STAR)]
        candidates = project_candidates(frames, POSE, LENS, 800, 800, focus_id="sun", light_id="sun")
        assert [c.body_id for c in candidates] == ["sun"]
        assert candidates[0].priority == FOCUS_PRIORITY

    def test_hidden_types(self):
        config = DeclutterConfig(hidden_types={BodyType.MOON})
        frames = [frame("moon", [0, 0, 0], BodyType.MOON), frame("io", [1, 0, 0], BodyType.MOON)]
        ids = [c.body_id for c in project_candidates(frames, POSE, LENS, 800, 800,
                                                     focus_id="io", config=config)]
        assert ids == ["io"]

    def test_names(self):
        candidates = project_candidates([frame("earth", [0, 0, 0])], POSE, LENS, 800, 800,
                                        names={"earth": "Earth"})
        assert candidates[0].name == "Earth"


class TestDeclutterEngine:
    """Tests for the per-frame engine."""

    def test_update(self):
        engine = DeclutterEngine()
        frames = [frame("a", [0, 0, 0]), frame("b", [0.01, 0, 0]), frame("c", [5, 0, 0])]
        engine.update(frames, POSE, LENS, 800, 800)
        assert {c.body_id for c in engine.visible_icons} == {"a", "c"}
        assert len(engine.visible_labels) == 2

    def test_set_type_visible(self):
        engine = DeclutterEngine()
        frames = [frame("titan", [0, 0, 0], BodyType.MOON)]
        engine.set_type_visible(BodyType.MOON, False)
        assert engine.update(frames, POSE, LENS, 800, 800) == []
        engine.set_type_visible(BodyType.MOON, True)
        assert len(engine.update(frames, POSE, LENS, 800, 800)) == 1

    def test_config_validation(self):
        with pytest.raises(ValueError):
            DeclutterConfig(icon_size=0)
        with pytest.raises(ValueError):
            DeclutterConfig(label_min_width=200.0)
