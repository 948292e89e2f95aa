"""Projectile aiming: from aim angle and power to an impact cell."""

from __future__ import annotations

import math
from typing import Sequence, Tuple

from .adversaries import Agent
from .grid import Position


MIN_ANGLE = -45.0
MAX_ANGLE = 45.0
MIN_POWER = 10.0
MAX_POWER = 100.0
RANGE_FACTOR = 0.95


def _clamp(value: float, low: float, high: float, fallback: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(number):
        return fallback
    return max(low, min(high, number))


def clamp_aim(angle: float, power: float) -> Tuple[float, float]:
    return (
        _clamp(angle, MIN_ANGLE, MAX_ANGLE, 0.0),
        _clamp(power, MIN_POWER, MAX_POWER, MIN_POWER),
    )


def resolve_target(angle: float, power: float, rows: int, cols: int) -> Position:
    """Cell hit by a projectile launched from the bottom centre of the board.

    ``angle`` is in degrees from straight up-range (positive leans right) and
    ``power`` in percent; both are clamped to their ranges first. The travel
    distance is ``power% * 0.95 * rows`` cells.
    """

    angle, power = clamp_aim(angle, power)
    distance = power / 100.0 * RANGE_FACTOR * rows
    theta = math.radians(angle)
    y = rows - distance * math.cos(theta)
    x = cols / 2.0 + distance * math.sin(theta)
    row = max(0, min(rows - 1, int(math.floor(y))))
    col = max(0, min(cols - 1, int(math.floor(x))))
    return row, col


def apply_projectile(agents: Sequence[Agent], target: Position) -> Tuple[Agent, ...]:
    """Remove the first agent standing on ``target``, if any."""

    remaining = list(agents)
    for index, agent in enumerate(remaining):
        if agent.position == tuple(target):
            del remaining[index]
            break
    return tuple(remaining)
