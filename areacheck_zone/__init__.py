"""
Areacheck Zone
==============

Bounded Context: The membership area a point is checked against.

Architecture:

    areacheck_zone/
    └── geometry/          # Pure geometry (immutable, stateless)
        ├── shapes.py      # QuarterDisc, RightTriangle, Rectangle
        ├── area.py        # CompositeArea, default_area(), evaluate()
        └── detector.py    # AreaDetector (vectorised masks, raster)

Usage:

    from areacheck_zone import default_area, evaluate

    area = default_area()
    evaluate(0.2, 0.1, r=2.0, area=area)   # True (quarter disc)
    evaluate(-1.0, 1.0, r=2.0, area=area)  # False (second quadrant is empty)
"""

from areacheck_zone.geometry import (
    EPS,
    QuarterDisc,
    RightTriangle,
    Rectangle,
    CompositeArea,
    DEFAULT_AREA,
    MembershipArea,
    default_area,
    evaluate,
    AreaDetector,
)

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
