"""
Intersections of horizontal and vertical lines, lifted into 3-D.
"""

import logging
import math
from dataclasses import dataclass, field

import numpy as np

from .cloud import OrganizedPointCloud
from .lines import LineSegment

logger = logging.getLogger(__name__)

# Below this a run or a slope difference is treated as zero.
SLOPE_EPS = 1e-9


@dataclass(frozen=True)
class IntersectionPoint:
    """Pixel (u, v) and the camera-frame point behind it."""

    u: int
    v: int
    xyz: tuple[float, float, float]


@dataclass
class IntersectionCloud:
    """
    Ordered, append-only set of deduplicated intersection points.

    Tagged with the frame id and stamp of the point cloud the points
    were looked up in.
    """

    frame_id: str
    stamp: float
    points: list[IntersectionPoint] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def append(self, point: IntersectionPoint):
        self.points.append(point)

    def xyz(self) -> np.ndarray:
        """Nx3 array of the camera-frame points."""
        if not self.points:
            return np.empty((0, 3))
        return np.array([p.xyz for p in self.points], dtype=np.float64)

    def pixels(self) -> list[tuple[int, int]]:
        return [(p.u, p.v) for p in self.points]

    def is_duplicate(self, xyz: np.ndarray, threshold: float) -> bool:
        """True if any member lies within L1 distance < threshold of xyz."""
        for p in self.points:
            if (abs(p.xyz[0] - xyz[0]) + abs(p.xyz[1] - xyz[1])
                    + abs(p.xyz[2] - xyz[2])) < threshold:
                return True
        return False


def _slope_intercept(segment: LineSegment) -> tuple[float, float] | None:
    if abs(segment.dx) < SLOPE_EPS:
        return None
    m = segment.dy / segment.dx
    return m, segment.y0 - m * segment.x0


def find_intersection(
    a: LineSegment,
    b: LineSegment,
    width: int = 640,
    height: int = 480
) -> tuple[float, float] | None:
    """
    Intersect the infinite lines through two segments.

    Parameters
    ----------
    a, b : LineSegment
        Segments defining the two lines.
    width, height : int
        Image bounds; intersections outside [0, width) x [0, height) are
        rejected.

    Returns
    -------
    tuple or None
        (x, y) pixel coordinates, or None when either segment has no
        horizontal run, the lines are parallel, or the point is out of
        bounds.
    """
    la = _slope_intercept(a)
    lb = _slope_intercept(b)
    if la is None or lb is None:
        return None

    ma, ba = la
    mb, bb = lb
    if abs(ma - mb) < SLOPE_EPS:
        return None

    x = (bb - ba) / (ma - mb)
    y = ma * x + ba
    if not (math.isfinite(x) and math.isfinite(y)):
        return None

    if 0 <= x < width and 0 <= y < height:
        return x, y
    return None


def extract_intersections(
    horizontal: list[LineSegment],
    vertical: list[LineSegment],
    cloud: OrganizedPointCloud,
    image_size: tuple[int, int] = (640, 480),
    dedup_threshold: float = 0.03
) -> IntersectionCloud:
    """
    Build the deduplicated intersection cloud for a frame.

    Pairs are visited horizontal-major. Each in-bounds intersection is
    looked up in the point cloud; points without valid depth are skipped
    and a point within L1 distance dedup_threshold of an earlier one is
    dropped.

    Parameters
    ----------
    horizontal, vertical : list of LineSegment
        Classified segments.
    cloud : OrganizedPointCloud
        Depth-registered cloud for pixel lookup.
    image_size : tuple
        (width, height) of the sensor image.
    dedup_threshold : float
        Merge distance in meters.

    Returns
    -------
    IntersectionCloud
        Intersections tagged with the cloud's frame id and stamp.
    """
    width, height = image_size
    data = IntersectionCloud(frame_id=cloud.frame_id, stamp=cloud.stamp)
    missing_depth = 0

    for hl in horizontal:
        for vl in vertical:
            p = find_intersection(hl, vl, width, height)
            if p is None:
                continue
            u, v = int(p[0]), int(p[1])
            xyz = cloud.point_at(u, v)
            if xyz is None:
                missing_depth += 1
                continue
            if data.is_duplicate(xyz, dedup_threshold):
                continue
            data.append(IntersectionPoint(u, v, tuple(float(c) for c in xyz)))

    if missing_depth:
        logger.debug("Skipped %d intersections without valid depth", missing_depth)
    logger.debug("Created data cloud of size %d", len(data))
    return data
