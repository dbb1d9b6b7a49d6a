#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orrery Tools Package

This package provides utility tools for the orrery, including:

- Star catalog inspection: summarize binary star catalog files
- Mock star catalogs: generate a synthetic starfield for development
"""

from .generate_mock_stars import (
    generate_mock_catalog,
    galactic_to_equatorial,
    bv_to_rgb,
    equatorial_to_file_axes,
    FAMOUS_STARS,
)
from .inspect_stars import summarize

__all__ = [
    "generate_mock_catalog",
    "galactic_to_equatorial",
    "bv_to_rgb",
    "equatorial_to_file_axes",
    "FAMOUS_STARS",
    "summarize",
]

__version__ = "1.0.0"
