import numpy as np
import pytest

from chess_board_locator import (
    IntersectionCloud,
    IntersectionPoint,
    NoIntersectionsError,
    NoSolutionError,
    select_corner_candidates,
)

CENTROID = np.array([0.3, -0.1, 1.2])


def _quadrant_points():
    offsets = np.array([
        [-0.2, 0.2, 0.0],   # a1: left, below
        [-0.2, -0.2, 0.0],  # a8: left, above
        [0.2, 0.2, 0.0],    # h1: right, below
        [0.2, -0.2, 0.0],   # h8: unused
        [0.0, 0.0, 0.0],    # centroid itself
    ])
    return CENTROID + offsets


def test_quadrants_around_centroid():
    candidates = select_corner_candidates(_quadrant_points())
    assert candidates.a1 == [0]
    assert candidates.a8 == [1]
    assert candidates.h1 == [2]
    assert candidates.is_complete
    assert candidates.combinations == 1


def test_dead_zone_excludes_points_near_centroid_axes():
    offsets = np.array([
        [-0.04, 0.3, 0.0],
        [0.04, -0.3, 0.0],
        [-0.3, 0.04, 0.0],
        [0.3, -0.04, 0.0],
    ])
    candidates = select_corner_candidates(CENTROID + offsets, dead_zone=0.05)
    assert candidates.a1 == []
    assert candidates.a8 == []
    assert candidates.h1 == []
    assert not candidates.is_complete

    # A tighter dead zone admits them
    candidates = select_corner_candidates(CENTROID + offsets, dead_zone=0.03)
    assert candidates.a1 == [0, 2]
    assert candidates.h1 == []


def test_accepts_intersection_cloud():
    data = IntersectionCloud("cam", 0.0)
    for i, p in enumerate(_quadrant_points()):
        data.append(IntersectionPoint(i, i, tuple(p)))
    candidates = select_corner_candidates(data)
    assert (candidates.a1, candidates.a8, candidates.h1) == ([0], [1], [2])


def test_empty_cloud_has_no_centroid():
    with pytest.raises(NoIntersectionsError):
        select_corner_candidates(np.empty((0, 3)))
    with pytest.raises(NoSolutionError):
        select_corner_candidates(IntersectionCloud("cam", 0.0))
