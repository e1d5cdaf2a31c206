"""
Area Detector Module
====================

Stateless batch detection logic - applies an area to many points at once.

Design:
- Pure functions (no state)
- Vectorised via numpy masks
- Thread-safe (no mutations)
"""

from typing import Tuple

import numpy as np

from areacheck_zone.geometry.area import MembershipArea


class AreaDetector:
    """
    Stateless detector for applying area geometry to point batches.

    Design Philosophy:
    - All methods are static (no instance state)
    - Same inequalities as MembershipArea.contains(), evaluated on arrays
    """

    @staticmethod
    def detect_points(area: MembershipArea, points: np.ndarray, r: float) -> np.ndarray:
        """
        Detect which points are inside the area.

        Args:
            area: Membership area
            points: Nx2 array of (x, y)
            r: Radius the area is sized for

        Returns:
            Boolean mask of shape (N,) where True = inside area

        Raises:
            ValueError: If points is not an Nx2 array
        """
        points = np.asarray(points, dtype=np.float64)
        if points.size == 0:
            return np.array([], dtype=bool)
        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError(f"points must be Nx2 array, got shape {points.shape}")

        return area.mask(points[:, 0], points[:, 1], r)

    @staticmethod
    def raster(
        area: MembershipArea,
        r: float,
        extent: Tuple[float, float, float, float],
        step: float,
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Sample the area on a regular grid.

        Args:
            area: Membership area
            r: Radius the area is sized for
            extent: (x_min, x_max, y_min, y_max), inclusive
            step: Grid spacing

        Returns:
            Tuple of (xs, ys, grid) where grid[i, j] tells whether
            (xs[j], ys[i]) is inside. Rows run from y_max down to y_min.

        Raises:
            ValueError: If step is not positive or extent is empty
        """
        if step <= 0:
            raise ValueError(f"step must be > 0, got {step}")
        x_min, x_max, y_min, y_max = extent
        if x_min > x_max or y_min > y_max:
            raise ValueError(f"Invalid extent: {extent}")

        # Round the count so that floating drift does not drop the last sample
        nx = int(round((x_max - x_min) / step)) + 1
        ny = int(round((y_max - y_min) / step)) + 1
        xs = np.linspace(x_min, x_min + (nx - 1) * step, nx)
        ys = np.linspace(y_max, y_max - (ny - 1) * step, ny)

        grid_x, grid_y = np.meshgrid(xs, ys)
        grid = area.mask(grid_x, grid_y, r)
        return xs, ys, grid
