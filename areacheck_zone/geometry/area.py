"""
Membership Area Module
======================

Composition of shapes into the area a point is tested against.

Design:
- MembershipArea protocol: any object with contains() + mask() qualifies
- CompositeArea is the union of its shapes
- default_area() is the lab area; callers inject their own to swap it
"""

from dataclasses import dataclass
from typing import Protocol, Tuple

import numpy as np

from areacheck_zone.geometry.shapes import QuarterDisc, Rectangle, RightTriangle


class MembershipArea(Protocol):
    """Pure, deterministic membership test over (x, y, R)."""

    def contains(self, x: float, y: float, r: float) -> bool:
        ...

    def mask(self, xs: np.ndarray, ys: np.ndarray, r: float) -> np.ndarray:
        ...


@dataclass(frozen=True)
class CompositeArea:
    """
    Union of shapes.

    Attributes:
        shapes: Shapes whose union forms the area (at least one)

    Example:
        >>> area = CompositeArea(shapes=(QuarterDisc(), Rectangle()))
        >>> area.contains(-0.5, -0.25, r=1.0)
        True
    """

    shapes: Tuple[MembershipArea, ...]

    def __post_init__(self):
        if not self.shapes:
            raise ValueError("CompositeArea requires at least one shape")
        object.__setattr__(self, "shapes", tuple(self.shapes))

    def contains(self, x: float, y: float, r: float) -> bool:
        return any(shape.contains(x, y, r) for shape in self.shapes)

    def mask(self, xs: np.ndarray, ys: np.ndarray, r: float) -> np.ndarray:
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        result = np.zeros(np.broadcast(xs, ys).shape, dtype=bool)
        for shape in self.shapes:
            result |= shape.mask(xs, ys, r)
        return result


def default_area() -> CompositeArea:
    """
    Lab area:
        Q1 - quarter disc of radius R/2
        Q2 - empty
        Q3 - rectangle R wide, R/2 tall
        Q4 - right triangle with legs R/2
    """
    return CompositeArea(shapes=(QuarterDisc(), RightTriangle(), Rectangle()))


DEFAULT_AREA = default_area()


def evaluate(x: float, y: float, r: float, area: MembershipArea = DEFAULT_AREA) -> bool:
    """Return True when (x, y) lies inside ``area`` sized for radius ``r``."""
    return bool(area.contains(float(x), float(y), float(r)))
