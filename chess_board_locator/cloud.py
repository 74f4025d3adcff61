"""
Organized point cloud with pixel random access.
"""

from dataclasses import dataclass
from pathlib import Path

import numpy as np


@dataclass
class OrganizedPointCloud:
    """
    Depth-registered point cloud laid out like the color image.

    Parameters
    ----------
    points : np.ndarray
        HxWx3 array of camera-frame points in meters. Invalid pixels are NaN.
    frame_id : str
        Camera frame the points are expressed in.
    stamp : float
        Acquisition time in seconds.
    """

    points: np.ndarray
    frame_id: str = "camera_rgb_optical_frame"
    stamp: float = 0.0

    def __post_init__(self):
        self.points = np.asarray(self.points, dtype=np.float64)
        if self.points.ndim != 3 or self.points.shape[2] != 3:
            raise ValueError(
                f"Organized cloud must be HxWx3, got shape {self.points.shape}"
            )

    @property
    def width(self) -> int:
        return self.points.shape[1]

    @property
    def height(self) -> int:
        return self.points.shape[0]

    def point_at(self, column: int, row: int) -> np.ndarray | None:
        """
        Look up the 3-D point behind a pixel.

        Returns
        -------
        np.ndarray or None
            (x, y, z) in meters, or None if the pixel is outside the cloud
            or has no valid depth.
        """
        if not (0 <= column < self.width and 0 <= row < self.height):
            return None
        p = self.points[row, column]
        if not np.all(np.isfinite(p)):
            return None
        return p.copy()

    @classmethod
    def from_function(cls, width: int, height: int, fn, **kwargs) -> "OrganizedPointCloud":
        """Build a cloud by evaluating fn(column, row) -> (x, y, z) on every pixel."""
        cols, rows = np.meshgrid(np.arange(width), np.arange(height))
        x, y, z = fn(cols, rows)
        points = np.stack(np.broadcast_arrays(x, y, z), axis=-1).astype(np.float64)
        return cls(points, **kwargs)

    @classmethod
    def load(cls, path: str | Path, frame_id: str = "camera_rgb_optical_frame",
             stamp: float = 0.0) -> "OrganizedPointCloud":
        """Load an HxWx3 cloud saved with numpy.save."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Point cloud file not found: {path}")
        return cls(np.load(path), frame_id=frame_id, stamp=stamp)
