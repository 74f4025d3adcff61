"""
Rigid transform fitting and exhaustive board pose search.
"""

import itertools
import logging
import math
from dataclasses import dataclass

import numpy as np

from .candidates import CandidateSet
from .config import IdealBoard
from .exceptions import NoSolutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RigidTransform:
    """
    Rotation and translation mapping points p -> R @ p + t.

    Parameters
    ----------
    rotation : np.ndarray
        3x3 orthonormal rotation matrix.
    translation : np.ndarray
        Translation vector (3,).
    score : float
        Fit error of the transform, lower is better.
    """

    rotation: np.ndarray
    translation: np.ndarray
    score: float = math.nan

    @classmethod
    def from_matrix(cls, T: np.ndarray, score: float = math.nan) -> "RigidTransform":
        T = np.asarray(T, dtype=np.float64)
        return cls(T[:3, :3].copy(), T[:3, 3].copy(), score)

    @property
    def matrix(self) -> np.ndarray:
        """4x4 homogeneous matrix."""
        T = np.eye(4)
        T[:3, :3] = self.rotation
        T[:3, 3] = np.asarray(self.translation).flatten()
        return T

    def apply(self, points: np.ndarray) -> np.ndarray:
        """Transform an Nx3 array of points."""
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        return points @ self.rotation.T + self.translation

    def inverse(self) -> "RigidTransform":
        R_inv = self.rotation.T
        return RigidTransform(R_inv, -R_inv @ self.translation, self.score)


def estimate_rigid_transform(source: np.ndarray, target: np.ndarray) -> RigidTransform:
    """
    Least-squares rigid transform mapping source points onto target points.

    SVD solution of the absolute orientation problem. Reflections are
    corrected so the rotation is proper; no scaling is estimated.

    Parameters
    ----------
    source : np.ndarray
        Nx3 points (N >= 3).
    target : np.ndarray
        Corresponding Nx3 points.

    Returns
    -------
    RigidTransform
        Transform with target ~= R @ source + t.
    """
    source = np.asarray(source, dtype=np.float64)
    target = np.asarray(target, dtype=np.float64)
    if source.shape != target.shape or source.ndim != 2 or source.shape[1] != 3:
        raise ValueError(
            f"Expected matching Nx3 point sets, got {source.shape} and {target.shape}"
        )

    centroid_src = source.mean(axis=0)
    centroid_dst = target.mean(axis=0)

    H = (source - centroid_src).T @ (target - centroid_dst)
    U, _, Vt = np.linalg.svd(H)
    R = Vt.T @ U.T

    # Ensure a proper rotation (determinant = +1)
    if np.linalg.det(R) < 0:
        Vt[2, :] *= -1
        R = Vt.T @ U.T

    t = centroid_dst - R @ centroid_src
    return RigidTransform(R, t)


def grid_score(points: np.ndarray, nodes: np.ndarray) -> float:
    """
    Sum over points of the squared planar distance to the nearest grid node.

    Only x and y are compared; z is ignored.

    Parameters
    ----------
    points : np.ndarray
        Nx3 points in the board frame.
    nodes : np.ndarray
        Mx2 grid nodes.
    """
    points = np.asarray(points, dtype=np.float64)
    if len(points) == 0:
        return 0.0
    diff = points[:, None, :2] - nodes[None, :, :]
    d2 = np.sum(diff * diff, axis=-1)
    return float(np.sum(np.min(d2, axis=1)))


def search_pose(
    points: np.ndarray,
    candidates: CandidateSet,
    board: IdealBoard | None = None
) -> RigidTransform:
    """
    Find the camera-to-board transform that best fits the ideal grid.

    Every (a1, a8, h1) candidate triple is tried, a1 outermost and h1
    innermost. Each triple seeds a rigid fit onto the board's reference
    corners, and the whole point set is scored against the interior grid.
    The first transform with the smallest score wins.

    The search is cubic in candidate set size. Candidate sets are expected
    to stay in single digits; tighten the dead zone upstream if they grow.

    Parameters
    ----------
    points : np.ndarray
        Nx3 intersection points in the camera frame.
    candidates : CandidateSet
        Corner candidate indices into points.
    board : IdealBoard, optional
        Board geometry. Defaults to the standard 57.15 mm board.

    Returns
    -------
    RigidTransform
        Best camera-to-board transform, carrying its score.

    Raises
    ------
    NoSolutionError
        If a candidate set is empty or no triple yields a finite score.
    """
    board = board or IdealBoard()
    points = np.asarray(points, dtype=np.float64)

    if not candidates.is_complete:
        raise NoSolutionError(
            f"Incomplete corner candidates: a1={len(candidates.a1)} "
            f"a8={len(candidates.a8)} h1={len(candidates.h1)}"
        )

    target = board.reference_corners
    nodes = board.interior_nodes
    best = None

    logger.debug("Evaluating %d candidates", candidates.combinations)
    for i, j, k in itertools.product(candidates.a1, candidates.a8, candidates.h1):
        source = points[[i, j, k]]
        transform = estimate_rigid_transform(source, target)
        score = grid_score(transform.apply(points), nodes)
        if not math.isfinite(score):
            continue
        if best is None or score < best.score:
            best = RigidTransform(transform.rotation, transform.translation, score)

    if best is None:
        raise NoSolutionError("No candidate triple produced a finite score")

    logger.debug("final score %f", best.score)
    return best
