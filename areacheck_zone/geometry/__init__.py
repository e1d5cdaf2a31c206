"""
Geometry Layer
==============

Bounded Context: Pure geometric shapes and membership queries.

Responsibilities:
- Shape representation (immutable, sized relative to R)
- Point-in-area tests (scalar and vectorised)
- NO state, NO history, NO transport

Design Philosophy:
- Pure functions where possible
- Immutable data structures
- Fail-fast validation
- Zero side effects
"""

from areacheck_zone.geometry.shapes import EPS, QuarterDisc, RightTriangle, Rectangle
from areacheck_zone.geometry.area import (
    CompositeArea,
    DEFAULT_AREA,
    MembershipArea,
    default_area,
    evaluate,
)
from areacheck_zone.geometry.detector import AreaDetector

__all__ = [
    "EPS",
    "QuarterDisc",
    "RightTriangle",
    "Rectangle",
    "CompositeArea",
    "DEFAULT_AREA",
    "MembershipArea",
    "default_area",
    "evaluate",
    "AreaDetector",
]
