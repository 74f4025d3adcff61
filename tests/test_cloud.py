import numpy as np
import pytest

from chess_board_locator import OrganizedPointCloud
from chess_board_locator.camera import deproject_depth


def test_point_lookup_is_column_row():
    points = np.zeros((3, 4, 3))
    points[2, 1] = (1.0, 2.0, 3.0)
    cloud = OrganizedPointCloud(points)
    assert (cloud.width, cloud.height) == (4, 3)
    np.testing.assert_allclose(cloud.point_at(1, 2), [1.0, 2.0, 3.0])


def test_invalid_and_outside_pixels_have_no_point():
    points = np.zeros((3, 4, 3))
    points[0, 0] = (np.nan, 0.0, 1.0)
    cloud = OrganizedPointCloud(points)
    assert cloud.point_at(0, 0) is None
    assert cloud.point_at(4, 0) is None
    assert cloud.point_at(0, -1) is None


def test_rejects_unorganized_points():
    with pytest.raises(ValueError):
        OrganizedPointCloud(np.zeros((10, 3)))


def test_save_and_load(tmp_path):
    cloud = OrganizedPointCloud.from_function(5, 4, lambda c, r: (c, r, c + r))
    np.save(tmp_path / "cloud.npy", cloud.points)

    loaded = OrganizedPointCloud.load(tmp_path / "cloud.npy", frame_id="cam", stamp=2.0)

    assert loaded.frame_id == "cam"
    assert loaded.stamp == 2.0
    np.testing.assert_allclose(loaded.point_at(3, 2), [3.0, 2.0, 5.0])
    with pytest.raises(FileNotFoundError):
        OrganizedPointCloud.load(tmp_path / "missing.npy")


def test_deproject_depth():
    K = np.array([[500.0, 0.0, 2.0], [0.0, 500.0, 1.0], [0.0, 0.0, 1.0]])
    depth = np.full((3, 5), 1000, dtype=np.uint16)
    depth[0, 0] = 0

    points = deproject_depth(depth, K, depth_scale=0.001)

    assert points.shape == (3, 5, 3)
    np.testing.assert_allclose(points[1, 2], [0.0, 0.0, 1.0])
    np.testing.assert_allclose(points[2, 4], [2.0 / 500.0, 1.0 / 500.0, 1.0])
    assert np.all(np.isnan(points[0, 0]))
    assert OrganizedPointCloud(points).point_at(0, 0) is None
