#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Easing Functions

Maps linear progress t in [0, 1] onto eased progress in [0, 1]. Every
function fixes 0 and 1 and is non-decreasing, so an eased transition never
moves backwards.
"""

from typing import Callable, Dict

EasingFunction = Callable[[float], float]


def linear(t: float) -> float:
    return t


def ease_out_quad(t: float) -> float:
    """Faster start, slower end."""
    return 1 - (1 - t) * (1 - t)


def ease_in_out_cubic(t: float) -> float:
    """Smooth acceleration and deceleration."""
    if t < 0.5:
        return 4 * t * t * t
    return 1 - (-2 * t + 2) ** 3 / 2


def ease_out_quart(t: float) -> float:
    return 1 - (1 - t) ** 4


def ease_out_quint(t: float) -> float:
    """Fast start, very slow landing."""
    return 1 - (1 - t) ** 5


EASING_FUNCTIONS: Dict[str, EasingFunction] = {
    "linear": linear,
    "ease_out_quad": ease_out_quad,
    "ease_in_out_cubic": ease_in_out_cubic,
    "ease_out_quart": ease_out_quart,
    "ease_out_quint": ease_out_quint,
}


def get_easing(name: str) -> EasingFunction:
    """
    Look up an easing function by name.

    Raises
    ------
    ValueError
        If the name is unknown
    """
    try:
        return EASING_FUNCTIONS[name]
    except KeyError:
        raise ValueError(
            f"Unknown easing '{name}'. Valid options: {', '.join(EASING_FUNCTIONS)}"
        ) from None
