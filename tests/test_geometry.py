import numpy as np
import pytest

from areacheck_zone import (
    AreaDetector,
    CompositeArea,
    QuarterDisc,
    Rectangle,
    RightTriangle,
    default_area,
    evaluate,
)


@pytest.fixture
def area():
    return default_area()


@pytest.mark.parametrize(
    "x, y, r, expected",
    [
        # Origin belongs to every shape
        (0.0, 0.0, 1.0, True),
        # Q1: quarter disc of radius R/2
        (0.5, 0.5, 2.0, True),
        (0.8, 0.8, 2.0, False),
        (1.0, 0.0, 2.0, True),
        (0.0, 1.0, 2.0, True),
        # Q4: triangle under y = x - R/2
        (0.5, -0.5, 2.0, True),
        (0.6, -0.6, 2.0, False),
        (1.01, 0.0, 2.0, False),
        # Q3: rectangle R wide, R/2 tall
        (-2.0, -1.0, 2.0, True),
        (-2.1, -0.5, 2.0, False),
        (-1.0, -1.1, 2.0, False),
        # Q2 is empty
        (-0.1, 0.1, 2.0, False),
        (-1.0, 1.0, 3.0, False),
    ],
)
def test_default_area_membership(area, x, y, r, expected):
    assert evaluate(x, y, r, area) is expected


def test_area_scales_with_radius(area):
    assert evaluate(1.2, 0.0, 3.0, area) is True
    assert evaluate(1.2, 0.0, 2.0, area) is False


def test_evaluate_is_deterministic(area):
    results = {evaluate(0, 0, 1, area) for _ in range(100)}
    assert results == {True}


def test_vectorised_mask_matches_scalar_contains(area):
    xs = np.linspace(-3.0, 3.0, 49)
    ys = np.linspace(-3.0, 3.0, 49)
    points = np.array([(x, y) for x in xs for y in ys])

    for r in (1.0, 1.5, 2.0, 2.5, 3.0):
        mask = AreaDetector.detect_points(area, points, r)
        expected = [area.contains(x, y, r) for x, y in points]
        assert mask.tolist() == expected


def test_detect_points_empty_and_bad_shape(area):
    assert AreaDetector.detect_points(area, np.empty((0, 2)), 1.0).shape == (0,)
    with pytest.raises(ValueError):
        AreaDetector.detect_points(area, np.zeros((3, 3)), 1.0)


def test_raster_layout(area):
    xs, ys, grid = AreaDetector.raster(area, 2.0, (-1.0, 1.0, -1.0, 1.0), 0.5)

    assert xs.tolist() == [-1.0, -0.5, 0.0, 0.5, 1.0]
    assert ys.tolist() == [1.0, 0.5, 0.0, -0.5, -1.0]
    assert grid.shape == (5, 5)
    # Rows run top to bottom: (0, 1) is on the quarter circle, (-1, 1) is in Q2
    assert grid[0, 2]
    assert not grid[0, 0]
    # (-1, -1) is the rectangle corner for R = 2
    assert grid[4, 0]


def test_raster_rejects_bad_arguments(area):
    with pytest.raises(ValueError):
        AreaDetector.raster(area, 1.0, (-1, 1, -1, 1), 0)
    with pytest.raises(ValueError):
        AreaDetector.raster(area, 1.0, (1, -1, -1, 1), 0.5)


def test_custom_area_is_swappable():
    only_rectangle = CompositeArea(shapes=(Rectangle(width_factor=1.0, height_factor=1.0),))

    assert evaluate(-0.9, -0.9, 1.0, only_rectangle) is True
    assert evaluate(0.1, 0.1, 1.0, only_rectangle) is False


def test_shapes_reject_non_positive_factors():
    with pytest.raises(ValueError):
        QuarterDisc(radius_factor=0)
    with pytest.raises(ValueError):
        RightTriangle(width_factor=-1)
    with pytest.raises(ValueError):
        Rectangle(height_factor=0)
    with pytest.raises(ValueError):
        CompositeArea(shapes=())
