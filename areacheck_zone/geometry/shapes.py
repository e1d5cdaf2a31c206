"""
Geometric Shapes Module
========================

Pure geometric representations - NO state, NO side effects.

Every shape is sized relative to the radius R supplied at query time, so one
immutable instance serves every allowed R.

Design:
- Immutable shapes (frozen dataclass pattern)
- Closed regions: boundary points count as inside (EPS tolerance)
- Scalar contains() and vectorised mask() share the same inequalities
- Thread-safe by design (immutability)
"""

import numpy as np
from dataclasses import dataclass
from typing import Tuple

EPS = 1e-9


def _validate_factor(name: str, value: float) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be > 0, got {value}")


@dataclass(frozen=True)
class QuarterDisc:
    """
    Quarter of a disc centred at the origin, lying in the first quadrant.

    Attributes:
        radius_factor: Disc radius as a fraction of R (default: R/2)

    Inside when:
        x >= 0, y >= 0 and x^2 + y^2 <= (radius_factor * R)^2
    """

    radius_factor: float = 0.5

    def __post_init__(self):
        _validate_factor("radius_factor", self.radius_factor)

    def contains(self, x: float, y: float, r: float) -> bool:
        radius = self.radius_factor * r
        if x < -EPS or y < -EPS:
            return False
        return x * x + y * y <= radius * radius + EPS

    def mask(self, xs: np.ndarray, ys: np.ndarray, r: float) -> np.ndarray:
        radius = self.radius_factor * r
        return (
            (xs >= -EPS)
            & (ys >= -EPS)
            & (xs * xs + ys * ys <= radius * radius + EPS)
        )


@dataclass(frozen=True)
class RightTriangle:
    """
    Right triangle in the fourth quadrant with legs on both axes.

    Vertices: (0, 0), (width_factor * R, 0), (0, -height_factor * R).

    The hypotenuse side is tested with the cross product of the edge vector
    and the vector to the point, the way a line side is computed.

    Attributes:
        width_factor: Leg along +X as a fraction of R (default: R/2)
        height_factor: Leg along -Y as a fraction of R (default: R/2)
    """

    width_factor: float = 0.5
    height_factor: float = 0.5

    def __post_init__(self):
        _validate_factor("width_factor", self.width_factor)
        _validate_factor("height_factor", self.height_factor)

    def _hypotenuse(self, r: float) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        start = (0.0, -self.height_factor * r)
        end = (self.width_factor * r, 0.0)
        return start, end

    def contains(self, x: float, y: float, r: float) -> bool:
        if x < -EPS or y > EPS:
            return False
        (sx, sy), (ex, ey) = self._hypotenuse(r)
        # (end - start) x (point - start) >= 0  ->  point is on the origin side
        cross = (ex - sx) * (y - sy) - (ey - sy) * (x - sx)
        return cross >= -EPS

    def mask(self, xs: np.ndarray, ys: np.ndarray, r: float) -> np.ndarray:
        (sx, sy), (ex, ey) = self._hypotenuse(r)
        cross = (ex - sx) * (ys - sy) - (ey - sy) * (xs - sx)
        return (xs >= -EPS) & (ys <= EPS) & (cross >= -EPS)


@dataclass(frozen=True)
class Rectangle:
    """
    Axis-aligned rectangle in the third quadrant anchored at the origin.

    Attributes:
        width_factor: Extent along -X as a fraction of R (default: R)
        height_factor: Extent along -Y as a fraction of R (default: R/2)
    """

    width_factor: float = 1.0
    height_factor: float = 0.5

    def __post_init__(self):
        _validate_factor("width_factor", self.width_factor)
        _validate_factor("height_factor", self.height_factor)

    def contains(self, x: float, y: float, r: float) -> bool:
        if x > EPS or y > EPS:
            return False
        return x >= -self.width_factor * r - EPS and y >= -self.height_factor * r - EPS

    def mask(self, xs: np.ndarray, ys: np.ndarray, r: float) -> np.ndarray:
        return (
            (xs <= EPS)
            & (ys <= EPS)
            & (xs >= -self.width_factor * r - EPS)
            & (ys >= -self.height_factor * r - EPS)
        )
