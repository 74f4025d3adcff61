"""
Debug rendering of line detection and board pose.
"""

import logging
from pathlib import Path

import cv2
import numpy as np

from .lines import LineSegment

logger = logging.getLogger(__name__)


def draw_detection(
    edges: np.ndarray,
    horizontal: list[LineSegment],
    vertical: list[LineSegment],
    pixels: list[tuple[int, int]]
) -> np.ndarray:
    """
    Draw classified lines and intersections on top of the edge image.

    Horizontal lines are red, vertical lines green and intersections are
    filled blue dots.

    Parameters
    ----------
    edges : np.ndarray
        Single-channel edge image (or a BGR image).
    horizontal, vertical : list of LineSegment
        Classified segments.
    pixels : list of tuple
        Intersection pixels (u, v).

    Returns
    -------
    np.ndarray
        New BGR image with the overlay.
    """
    if edges.ndim == 2:
        canvas = cv2.cvtColor(edges, cv2.COLOR_GRAY2BGR)
    else:
        canvas = edges.copy()

    for segment in horizontal:
        p0, p1 = segment.endpoints
        cv2.line(canvas, p0, p1, (0, 0, 255), 3, cv2.LINE_AA)
    for segment in vertical:
        p0, p1 = segment.endpoints
        cv2.line(canvas, p0, p1, (0, 255, 0), 3, cv2.LINE_AA)
    for u, v in pixels:
        cv2.circle(canvas, (int(u), int(v)), 5, (255, 0, 0), -1)
    return canvas


class DebugSink:
    """
    Writes per-frame debug artifacts to a directory.

    For each frame the annotated image is saved as frame_XXXXXX.png and the
    intersection cloud, transformed into the board frame, as
    frame_XXXXXX_points.npy.

    Parameters
    ----------
    output_dir : str or Path
        Directory for the artifacts. Created if missing.
    """

    def __init__(self, output_dir: str | Path):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def emit(
        self,
        frame_index: int,
        image: np.ndarray | None,
        board_points: np.ndarray | None
    ):
        stem = f"frame_{frame_index:06d}"
        if image is not None:
            cv2.imwrite(str(self.output_dir / f"{stem}.png"), image)
        if board_points is not None:
            np.save(self.output_dir / f"{stem}_points.npy", board_points)
        logger.debug("Wrote debug artifacts for frame %d to %s", frame_index, self.output_dir)


def plot_frames(T_cam_board: np.ndarray, board_points: np.ndarray | None = None):
    """
    Plot the camera and board frames in 3D.

    Parameters
    ----------
    T_cam_board : np.ndarray
        4x4 board-to-camera transform (board pose in the camera frame).
    board_points : np.ndarray, optional
        Nx3 intersection points in the camera frame.
    """
    import matplotlib.pyplot as plt

    fig = plt.figure(figsize=(10, 8))
    ax = fig.add_subplot(111, projection='3d')

    def plot_frame(T, label, scale=0.1):
        R_mat = T[:3, :3]
        t = T[:3, 3]
        ax.quiver(t[0], t[1], t[2], R_mat[0, 0], R_mat[1, 0], R_mat[2, 0], length=scale, color='r')
        ax.quiver(t[0], t[1], t[2], R_mat[0, 1], R_mat[1, 1], R_mat[2, 1], length=scale, color='g')
        ax.quiver(t[0], t[1], t[2], R_mat[0, 2], R_mat[1, 2], R_mat[2, 2], length=scale, color='b')
        ax.text(t[0], t[1], t[2], label)

    plot_frame(np.eye(4), "Camera")
    plot_frame(T_cam_board, "Board")

    points = [np.zeros(3), T_cam_board[:3, 3]]
    if board_points is not None and len(board_points):
        ax.scatter(board_points[:, 0], board_points[:, 1], board_points[:, 2], s=8, c='k')
        points.extend(board_points)

    ax.set_xlabel('X (m)')
    ax.set_ylabel('Y (m)')
    ax.set_zlabel('Z (m)')

    points = np.vstack(points)
    center = np.mean(points, axis=0)
    radius = np.max(np.linalg.norm(points - center, axis=1)) + 0.1
    ax.set_xlim(center[0] - radius, center[0] + radius)
    ax.set_ylim(center[1] - radius, center[1] + radius)
    ax.set_zlim(center[2] - radius, center[2] + radius)

    plt.title("Chess Board Pose")
    plt.show()
