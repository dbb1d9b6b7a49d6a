#!/usr/bin/env python3
"""
Pytest Configuration and Shared Fixtures

Provides common fixtures for testing the orrery packages: the default body
table, resolved registries, a controllable clock and small hand-built body
tables.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import numpy as np
import pytest

# Add parent directory for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ephemeris import (
    BodyRegistry,
    BodyType,
    CelestialBody,
    OrbitalElements,
    ScaleMode,
    default_bodies,
)


# =============================================================================
# CLOCK
# =============================================================================

class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """A fresh FakeClock at t = 0."""
    return FakeClock()


# =============================================================================
# BODIES
# =============================================================================

J2000_UTC = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def epoch():
    """The J2000 reference epoch."""
    return J2000_UTC


@pytest.fixture(scope="session")
def solar_system():
    """The built-in body table."""
    return default_bodies()


@pytest.fixture
def realistic_registry(solar_system, epoch):
    """Registry resolved at J2000 with linear scaling."""
    registry = BodyRegistry(solar_system, ScaleMode.REALISTIC)
    registry.update(epoch)
    return registry


@pytest.fixture
def didactic_registry(solar_system, epoch):
    """Registry resolved at J2000 with didactic scaling."""
    registry = BodyRegistry(solar_system, ScaleMode.DIDACTIC)
    registry.update(epoch)
    return registry


def make_elements(a=1.0, e=0.0, i=0.0, O=0.0, w=0.0, M0=0.0, n=1.0) -> OrbitalElements:
    return OrbitalElements(a=a, e=e, i=i, O=O, w=w, M0=M0, n=n)


def make_body(body_id, parent_id=None, body_type=BodyType.PLANET, radius_km=1000.0, **elements) -> CelestialBody:
    stationary = elements.pop("stationary", False)
    orbit = make_elements(a=0.0, n=0.0) if stationary else make_elements(**elements)
    return CelestialBody(
        id=body_id,
        name=body_id.capitalize(),
        body_type=body_type,
        radius_km=radius_km,
        orbit=orbit,
        parent_id=parent_id,
    )


@pytest.fixture
def tiny_system():
    """Star, one planet at 1 AU and its moon."""
    return [
        make_body("star", body_type=BodyType.STAR, radius_km=700000.0, stationary=True),
        make_body("planet", radius_km=6000.0, a=1.0),
        make_body("satellite", parent_id="planet", body_type=BodyType.MOON, radius_km=1500.0,
                  a=0.0025, n=13.0),
    ]


def sample_record(**overrides):
    """A valid body table record."""
    record = {
        "id": "earth",
        "name": "Earth",
        "type": "planet",
        "radius_km": 6371.0,
        "axial_tilt": 23.44,
        "color": [70, 130, 230],
        "orbit": {"a": 1.0, "e": 0.0167, "i": 0.0, "O": 0.0,
                  "w": 102.94, "M0": 357.53, "n": 0.9856},
    }
    record.update(overrides)
    return record


def assert_unit(v):
    np.testing.assert_allclose(np.linalg.norm(v), 1.0, atol=1e-9)
