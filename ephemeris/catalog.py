#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Body Table Loading

Reads the static body table (orbital elements plus hierarchy) from JSON or
from plain dictionaries. This is the data-quality boundary: the propagator
trusts its inputs, so malformed entries are rejected here.

Expected record layout::

    {
        "id": "earth",
        "name": "Earth",
        "type": "planet",
        "radius_km": 6371.0,
        "parent": null,
        "axial_tilt": 23.44,
        "ring_outer_radius": null,
        "color": [70, 130, 230],
        "orbit": {"a": 1.0, "e": 0.0167, "i": 0.0, "O": 0.0,
                  "w": 102.94, "M0": 357.53, "n": 0.9856}
    }
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from .bodies import BodyType, CelestialBody, hierarchy_order
from .orbit import OrbitalElements

logger = logging.getLogger(__name__)

ELEMENT_KEYS = ("a", "e", "i", "O", "w", "M0", "n")


class CatalogError(ValueError):
    """A body table entry is malformed."""
    pass


def parse_elements(data: Dict[str, Any], body_id: str = "?") -> OrbitalElements:
    """
    Build validated OrbitalElements from a mapping.

    Raises
    ------
    CatalogError
        On missing or non-finite values, eccentricity outside [0, 1), or a
        negative semi-major axis.
    """
    values = {}
    for key in ELEMENT_KEYS:
        if key not in data:
            raise CatalogError(f"Body '{body_id}': orbit is missing element '{key}'")
        try:
            value = float(data[key])
        except (TypeError, ValueError):
            raise CatalogError(f"Body '{body_id}': element '{key}' is not a number: {data[key]!r}")
        if not math.isfinite(value):
            raise CatalogError(f"Body '{body_id}': element '{key}' is not finite")
        values[key] = value

    if not 0 <= values["e"] < 1:
        raise CatalogError(
            f"Body '{body_id}': eccentricity {values['e']} outside [0, 1) "
            "(only closed orbits are supported)"
        )
    if values["a"] < 0:
        raise CatalogError(f"Body '{body_id}': semi-major axis must not be negative")

    return OrbitalElements(**values)


def parse_body(data: Dict[str, Any]) -> CelestialBody:
    """Build one CelestialBody from a record."""
    body_id = data.get("id")
    if not body_id or not isinstance(body_id, str):
        raise CatalogError(f"Body record without a valid 'id': {data!r}")

    try:
        body_type = BodyType(data.get("type", "planet"))
    except ValueError:
        raise CatalogError(f"Body '{body_id}': unknown type {data.get('type')!r}")

    try:
        radius_km = float(data["radius_km"])
    except KeyError:
        raise CatalogError(f"Body '{body_id}': missing 'radius_km'")
    except (TypeError, ValueError):
        raise CatalogError(f"Body '{body_id}': 'radius_km' is not a number")
    if not math.isfinite(radius_km) or radius_km < 0:
        raise CatalogError(f"Body '{body_id}': radius must be finite and non-negative")

    if "orbit" not in data:
        raise CatalogError(f"Body '{body_id}': missing 'orbit'")
    orbit = parse_elements(data["orbit"], body_id)

    ring = data.get("ring_outer_radius")
    color = tuple(int(c) for c in data.get("color", (200, 200, 200)))
    if len(color) != 3:
        raise CatalogError(f"Body '{body_id}': color must have three components")

    return CelestialBody(
        id=body_id,
        name=str(data.get("name", body_id)),
        body_type=body_type,
        radius_km=radius_km,
        orbit=orbit,
        parent_id=data.get("parent"),
        axial_tilt=float(data.get("axial_tilt", 0.0)),
        ring_outer_radius=float(ring) if ring is not None else None,
        color=color,
    )


def load_bodies(records: Iterable[Dict[str, Any]]) -> List[CelestialBody]:
    """
    Parse and validate a whole body table.

    Besides per-record checks this rejects duplicate ids, unknown parents
    and parent cycles. The returned list keeps the input order.
    """
    bodies: List[CelestialBody] = []
    seen = set()
    for record in records:
        body = parse_body(record)
        if body.id in seen:
            raise CatalogError(f"Duplicate body id '{body.id}'")
        seen.add(body.id)
        bodies.append(body)

    try:
        hierarchy_order(bodies)
    except ValueError as e:
        raise CatalogError(str(e))

    return bodies


def load_bodies_json(path: Union[str, Path]) -> List[CelestialBody]:
    """Load a body table from a JSON file containing a list of records."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            records = json.load(f)
        except json.JSONDecodeError as e:
            raise CatalogError(f"{path}: invalid JSON: {e}")

    if not isinstance(records, list):
        raise CatalogError(f"{path}: expected a list of body records")

    bodies = load_bodies(records)
    logger.info(f"Loaded {len(bodies)} bodies from {path}")
    return bodies


def body_to_record(body: CelestialBody) -> Dict[str, Any]:
    """Inverse of parse_body, for writing tables back to JSON."""
    orbit = body.orbit
    return {
        "id": body.id,
        "name": body.name,
        "type": body.body_type.value,
        "radius_km": body.radius_km,
        "parent": body.parent_id,
        "axial_tilt": body.axial_tilt,
        "ring_outer_radius": body.ring_outer_radius,
        "color": list(body.color),
        "orbit": {key: getattr(orbit, key) for key in ELEMENT_KEYS},
    }
