import sys
from pathlib import Path

import numpy as np
import pytest

# Make scripts/ importable when running from a source checkout
sys.path.insert(0, str(Path(__file__).parent.parent))

from chess_board_locator import LineSegment, OrganizedPointCloud

PIXEL_PITCH = 20
GRID_ORIGIN = 100
METERS_PER_PIXEL = 0.01


def make_grid_segments(n_lines: int, pitch: int = PIXEL_PITCH, origin: int = GRID_ORIGIN):
    """
    Horizontal and vertical segments of a regular grid of n_lines x n_lines.

    Vertical segments lean by one pixel over their length; an exactly
    vertical segment has no slope and never intersects.
    """
    end = origin + pitch * (n_lines - 1)
    horizontal = [
        LineSegment(origin - 50, origin + pitch * j, end + 50, origin + pitch * j)
        for j in range(n_lines)
    ]
    vertical = [
        LineSegment(origin + pitch * i, origin - 50, origin + pitch * i + 1, end + 100)
        for i in range(n_lines)
    ]
    return horizontal, vertical


def make_flat_cloud(width: int = 640, height: int = 480, frame_id: str = "camera_rgb_optical_frame",
                    stamp: float = 12.5):
    """Cloud mapping pixel (c, r) to (c * 0.01, r * 0.01, 1.0)."""
    return OrganizedPointCloud.from_function(
        width,
        height,
        lambda c, r: (c * METERS_PER_PIXEL, r * METERS_PER_PIXEL, np.ones_like(c, dtype=np.float64)),
        frame_id=frame_id,
        stamp=stamp,
    )


@pytest.fixture
def flat_cloud():
    return make_flat_cloud()


@pytest.fixture
def grid_segments():
    return make_grid_segments
