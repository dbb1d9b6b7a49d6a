#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Default Solar System Body Table

Mean J2000 elements for the Sun, the planets, their major moons, a few dwarf
planets and a periodic comet. Planet and dwarf elements are heliocentric
ecliptic; moon elements are relative to their parent, with the semi-major
axis converted from km to AU.
"""

from typing import Any, Dict, List

from .bodies import CelestialBody
from .catalog import load_bodies
from .orbit import AU_IN_KM


def _km(distance_km: float) -> float:
    return distance_km / AU_IN_KM


SOLAR_SYSTEM_RECORDS: List[Dict[str, Any]] = [
    {
        "id": "sun", "name": "Sun", "type": "star", "radius_km": 695700.0,
        "color": [255, 220, 120], "axial_tilt": 7.25,
        "orbit": {"a": 0.0, "e": 0.0, "i": 0.0, "O": 0.0, "w": 0.0, "M0": 0.0, "n": 0.0},
    },
    {
        "id": "mercury", "name": "Mercury", "type": "planet", "radius_km": 2439.7,
        "color": [170, 160, 150], "axial_tilt": 0.03,
        "orbit": {"a": 0.387098, "e": 0.205630, "i": 7.0050, "O": 48.3313,
                  "w": 29.1241, "M0": 174.7948, "n": 4.092334},
    },
    {
        "id": "venus", "name": "Venus", "type": "planet", "radius_km": 6051.8,
        "color": [230, 200, 140], "axial_tilt": 177.36,
        "orbit": {"a": 0.723330, "e": 0.006773, "i": 3.3946, "O": 76.6799,
                  "w": 54.8910, "M0": 50.4161, "n": 1.602131},
    },
    {
        "id": "earth", "name": "Earth", "type": "planet", "radius_km": 6371.0,
        "color": [70, 130, 230], "axial_tilt": 23.44,
        "orbit": {"a": 1.000000, "e": 0.016709, "i": 0.0, "O": 0.0,
                  "w": 102.9372, "M0": 357.5291, "n": 0.985609},
    },
    {
        "id": "moon", "name": "Moon", "type": "moon", "radius_km": 1737.4, "parent": "earth",
        "color": [190, 190, 190], "axial_tilt": 6.68,
        "orbit": {"a": _km(384400.0), "e": 0.0549, "i": 5.145, "O": 125.08,
                  "w": 318.15, "M0": 115.3654, "n": 13.176358},
    },
    {
        "id": "mars", "name": "Mars", "type": "planet", "radius_km": 3389.5,
        "color": [210, 100, 60], "axial_tilt": 25.19,
        "orbit": {"a": 1.523679, "e": 0.093400, "i": 1.8497, "O": 49.5574,
                  "w": 286.5016, "M0": 19.3730, "n": 0.524071},
    },
    {
        "id": "phobos", "name": "Phobos", "type": "moon", "radius_km": 11.2667, "parent": "mars",
        "color": [150, 130, 120],
        "orbit": {"a": _km(9376.0), "e": 0.0151, "i": 1.075, "O": 49.2,
                  "w": 150.057, "M0": 177.4, "n": 1128.8447},
    },
    {
        "id": "deimos", "name": "Deimos", "type": "moon", "radius_km": 6.2, "parent": "mars",
        "color": [160, 140, 125],
        "orbit": {"a": _km(23463.2), "e": 0.00033, "i": 1.788, "O": 316.65,
                  "w": 260.729, "M0": 53.2, "n": 285.1618},
    },
    {
        "id": "ceres", "name": "Ceres", "type": "dwarf", "radius_km": 469.7,
        "color": [160, 160, 150], "axial_tilt": 4.0,
        "orbit": {"a": 2.7675, "e": 0.0758, "i": 10.593, "O": 80.305,
                  "w": 73.597, "M0": 77.372, "n": 0.214},
    },
    {
        "id": "jupiter", "name": "Jupiter", "type": "planet", "radius_km": 69911.0,
        "color": [220, 180, 140], "axial_tilt": 3.13,
        "orbit": {"a": 5.20260, "e": 0.048498, "i": 1.3030, "O": 100.4542,
                  "w": 273.8777, "M0": 20.0202, "n": 0.083086},
    },
    {
        "id": "io", "name": "Io", "type": "moon", "radius_km": 1821.6, "parent": "jupiter",
        "color": [230, 210, 110],
        "orbit": {"a": _km(421700.0), "e": 0.0041, "i": 0.036, "O": 43.977,
                  "w": 84.129, "M0": 171.016, "n": 203.488955},
    },
    {
        "id": "europa", "name": "Europa", "type": "moon", "radius_km": 1560.8, "parent": "jupiter",
        "color": [210, 200, 180],
        "orbit": {"a": _km(671034.0), "e": 0.009, "i": 0.466, "O": 219.106,
                  "w": 88.970, "M0": 324.528, "n": 101.374724},
    },
    {
        "id": "ganymede", "name": "Ganymede", "type": "moon", "radius_km": 2634.1, "parent": "jupiter",
        "color": [170, 160, 150],
        "orbit": {"a": _km(1070412.0), "e": 0.0013, "i": 0.177, "O": 63.552,
                  "w": 192.417, "M0": 317.540, "n": 50.317609},
    },
    {
        "id": "callisto", "name": "Callisto", "type": "moon", "radius_km": 2410.3, "parent": "jupiter",
        "color": [120, 110, 100],
        "orbit": {"a": _km(1882709.0), "e": 0.0074, "i": 0.192, "O": 298.848,
                  "w": 52.643, "M0": 181.408, "n": 21.571071},
    },
    {
        "id": "saturn", "name": "Saturn", "type": "planet", "radius_km": 58232.0,
        "color": [230, 210, 160], "axial_tilt": 26.73, "ring_outer_radius": 2.27,
        "orbit": {"a": 9.55491, "e": 0.055546, "i": 2.4886, "O": 113.6634,
                  "w": 339.3939, "M0": 317.0207, "n": 0.033444},
    },
    {
        "id": "titan", "name": "Titan", "type": "moon", "radius_km": 2574.7, "parent": "saturn",
        "color": [220, 170, 90],
        "orbit": {"a": _km(1221870.0), "e": 0.0288, "i": 0.348, "O": 28.06,
                  "w": 180.532, "M0": 163.31, "n": 22.576976},
    },
    {
        "id": "uranus", "name": "Uranus", "type": "planet", "radius_km": 25362.0,
        "color": [160, 220, 230], "axial_tilt": 97.77, "ring_outer_radius": 2.0,
        "orbit": {"a": 19.21845, "e": 0.047318, "i": 0.7733, "O": 74.0005,
                  "w": 96.6612, "M0": 142.5905, "n": 0.011725},
    },
    {
        "id": "neptune", "name": "Neptune", "type": "planet", "radius_km": 24622.0,
        "color": [80, 110, 230], "axial_tilt": 28.32,
        "orbit": {"a": 30.11039, "e": 0.008606, "i": 1.7700, "O": 131.7806,
                  "w": 272.8461, "M0": 260.2471, "n": 0.005980},
    },
    {
        "id": "pluto", "name": "Pluto", "type": "dwarf", "radius_km": 1188.3,
        "color": [200, 180, 160], "axial_tilt": 122.53,
        "orbit": {"a": 39.482, "e": 0.2488, "i": 17.16, "O": 110.299,
                  "w": 113.834, "M0": 14.53, "n": 0.003973},
    },
    {
        "id": "eris", "name": "Eris", "type": "tno", "radius_km": 1163.0,
        "color": [220, 220, 220],
        "orbit": {"a": 67.864, "e": 0.43607, "i": 44.040, "O": 35.951,
                  "w": 151.639, "M0": 205.989, "n": 0.001771},
    },
    {
        "id": "halley", "name": "1P/Halley", "type": "comet", "radius_km": 5.5,
        "color": [180, 220, 255],
        "orbit": {"a": 17.834, "e": 0.96714, "i": 162.26, "O": 58.42,
                  "w": 111.33, "M0": 38.38, "n": 0.013102},
    },
]


def default_bodies() -> List[CelestialBody]:
    """The built-in solar system table, validated."""
    return load_bodies(SOLAR_SYSTEM_RECORDS)
