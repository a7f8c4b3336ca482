"""
Easing curves: remap normalized progress in [0, 1] to shaped progress.

All curves satisfy f(0) == 0 and f(1) == 1.  ``ease_out_back`` and
``elastic`` overshoot 1 in between.
"""

from __future__ import annotations

import math
from typing import Callable

EasingFn = Callable[[float], float]

_BACK_C1 = 1.70158
_BACK_C3 = _BACK_C1 + 1.0
_ELASTIC_C4 = (2.0 * math.pi) / 3.0


def linear(t: float) -> float:
    return t


def ease_in(t: float) -> float:
    return t * t


def ease_out(t: float) -> float:
    return t * (2.0 - t)


def ease_in_out(t: float) -> float:
    if t < 0.5:
        return 2.0 * t * t
    return -1.0 + (4.0 - 2.0 * t) * t


def ease_out_back(t: float) -> float:
    """Overshoot slightly past 1 and settle back."""
    if t >= 1.0:
        return 1.0
    u = t - 1.0
    return 1.0 + _BACK_C3 * u ** 3 + _BACK_C1 * u ** 2


def elastic(t: float) -> float:
    """Damped spring that rings around 1."""
    if t <= 0.0:
        return 0.0
    if t >= 1.0:
        return 1.0
    return 2.0 ** (-10.0 * t) * math.sin((t * 10.0 - 0.75) * _ELASTIC_C4) + 1.0


EASINGS: dict[str, EasingFn] = {
    "linear": linear,
    "ease_in": ease_in,
    "ease_out": ease_out,
    "ease_in_out": ease_in_out,
    "back": ease_out_back,
    "ease_out_back": ease_out_back,
    "elastic": elastic,
    "spring": elastic,
}


def get_easing(name: str) -> EasingFn:
    try:
        return EASINGS[name]
    except KeyError:
        raise KeyError(f"Unknown easing '{name}', expected one of {sorted(EASINGS)}") from None
