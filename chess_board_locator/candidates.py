"""
Corner candidate selection around the intersection centroid.
"""

import logging
from dataclasses import dataclass, field

import numpy as np

from .exceptions import NoIntersectionsError
from .intersections import IntersectionCloud

logger = logging.getLogger(__name__)


@dataclass
class CandidateSet:
    """Indices into the intersection cloud that may be the a1, a8 and h1 corners."""

    a1: list[int] = field(default_factory=list)
    a8: list[int] = field(default_factory=list)
    h1: list[int] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """True if every corner has at least one candidate."""
        return bool(self.a1 and self.a8 and self.h1)

    @property
    def combinations(self) -> int:
        return len(self.a1) * len(self.a8) * len(self.h1)


def select_corner_candidates(
    points: IntersectionCloud | np.ndarray,
    dead_zone: float = 0.05
) -> CandidateSet:
    """
    Partition intersection points into a1/a8/h1 candidates.

    Camera frame convention is x right, y down. Relative to the centroid,
    a1 candidates are left and below, a8 left and above, h1 right and
    below, each by more than dead_zone on both axes. Everything else,
    including the h8 quadrant, is left out.

    Parameters
    ----------
    points : IntersectionCloud or np.ndarray
        Intersection cloud or Nx3 array of its points.
    dead_zone : float
        Margin around the centroid in meters.

    Returns
    -------
    CandidateSet
        Candidate indices; sets may be empty.

    Raises
    ------
    NoIntersectionsError
        If there are no points to take a centroid of.
    """
    xyz = points.xyz() if isinstance(points, IntersectionCloud) else np.asarray(points)
    if len(xyz) == 0:
        raise NoIntersectionsError("No intersections found, centroid is undefined")

    cx, cy, _ = xyz.mean(axis=0)
    candidates = CandidateSet()
    for i, (x, y, _z) in enumerate(xyz):
        if x < cx - dead_zone and y > cy + dead_zone:
            candidates.a1.append(i)
        elif x < cx - dead_zone and y < cy - dead_zone:
            candidates.a8.append(i)
        elif x > cx + dead_zone and y > cy + dead_zone:
            candidates.h1.append(i)

    logger.debug(
        "Candidates a1=%d a8=%d h1=%d",
        len(candidates.a1), len(candidates.a8), len(candidates.h1)
    )
    return candidates
