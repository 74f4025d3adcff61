"""
Per-frame chess board localization.

Detection proceeds as follows:
  1) Line segments are found in the blue channel of the color image.
  2) Lines are split into horizontal and vertical groups.
  3) Intersections between the groups are looked up in the point cloud
     and deduplicated.
  4) Corner candidates for a1, a8 and h1 are picked around the centroid.
  5) Every candidate triple is fit to the ideal board; the best fit wins.
  6) The inverse of the best fit is published as the board pose.
"""

import logging
from dataclasses import dataclass, field

import numpy as np

from .broadcast import StampedTransform, TransformBroadcaster, TransformRecorder
from .candidates import CandidateSet, select_corner_candidates
from .cloud import OrganizedPointCloud
from .config import LocatorConfig
from .exceptions import ImageConversionError, NoSolutionError
from .intersections import IntersectionCloud, extract_intersections
from .lines import LineDetector, LineSegment, classify_lines
from .pose import RigidTransform, search_pose
from .visualization import DebugSink, draw_detection

logger = logging.getLogger(__name__)


@dataclass
class LocatorResult:
    """Everything computed for one image/cloud pair."""

    frame_index: int
    horizontal: list[LineSegment] = field(default_factory=list)
    vertical: list[LineSegment] = field(default_factory=list)
    intersections: IntersectionCloud | None = None
    candidates: CandidateSet | None = None
    camera_to_board: RigidTransform | None = None
    published: StampedTransform | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.published is not None

    @property
    def score(self) -> float | None:
        if self.camera_to_board is None:
            return None
        return self.camera_to_board.score


def finalize_pose(
    camera_to_board: RigidTransform,
    cloud: OrganizedPointCloud,
    broadcaster: TransformBroadcaster,
    target_frame: str = "chess_board"
) -> StampedTransform:
    """
    Publish the board pose in the camera frame.

    The search solves camera -> board; the published transform is its
    inverse, stamped with the point cloud's frame and time.
    """
    stamped = StampedTransform(
        parent_frame=cloud.frame_id,
        child_frame=target_frame,
        stamp=cloud.stamp,
        transform=camera_to_board.inverse(),
    )
    broadcaster.send_transform(stamped)
    return stamped


class ChessBoardLocator:
    """
    Locates a chess board in synchronized color image / point cloud pairs.

    Parameters
    ----------
    config : LocatorConfig, optional
        Locator parameters. Defaults are used when omitted.
    broadcaster : TransformBroadcaster, optional
        Receives the board pose of every successful frame. Defaults to an
        in-memory TransformRecorder.
    debug_sink : DebugSink, optional
        Receives debug artifacts when config.debug is set.
    detector : LineDetector, optional
        Line detector; built from config when omitted.
    """

    def __init__(
        self,
        config: LocatorConfig | None = None,
        broadcaster: TransformBroadcaster | None = None,
        debug_sink: DebugSink | None = None,
        detector: LineDetector | None = None
    ):
        self.config = config or LocatorConfig()
        self.broadcaster = broadcaster if broadcaster is not None else TransformRecorder()
        self.debug_sink = debug_sink
        self.detector = detector or LineDetector(self.config)
        self.board = self.config.board
        self.frame_count = 0

    @property
    def debug(self) -> bool:
        return self.config.debug and self.debug_sink is not None

    def process(self, image: np.ndarray, cloud: OrganizedPointCloud) -> LocatorResult:
        """
        Locate the board in one image/cloud pair.

        Parameters
        ----------
        image : np.ndarray
            BGR color image registered with the cloud.
        cloud : OrganizedPointCloud
            Depth-registered point cloud of the same frame.

        Returns
        -------
        LocatorResult
            Result of the frame. On failure, error is set and nothing was
            published.
        """
        try:
            segments, edges = self.detector.detect(image)
        except ImageConversionError as e:
            frame_index = self._next_frame()
            logger.error("Conversion failed for frame %d: %s", frame_index, e)
            return LocatorResult(frame_index, error=f"image conversion failed: {e}")

        return self.process_segments(segments, cloud, edges=edges)

    def process_segments(
        self,
        segments: list[LineSegment],
        cloud: OrganizedPointCloud,
        edges: np.ndarray | None = None
    ) -> LocatorResult:
        """
        Locate the board from already detected line segments.

        Parameters
        ----------
        segments : list of LineSegment
            Line segments found in the color image.
        cloud : OrganizedPointCloud
            Depth-registered point cloud of the same frame.
        edges : np.ndarray, optional
            Image to draw debug output on.

        Returns
        -------
        LocatorResult
            Result of the frame.
        """
        cfg = self.config
        result = LocatorResult(self._next_frame())
        logger.info("New image/cloud (frame %d).", result.frame_index)

        result.horizontal, result.vertical = classify_lines(segments)
        logger.debug(
            "horizontal lines: %d, vertical lines: %d",
            len(result.horizontal), len(result.vertical)
        )

        result.intersections = extract_intersections(
            result.horizontal,
            result.vertical,
            cloud,
            image_size=cfg.image_size,
            dedup_threshold=cfg.dedup_threshold,
        )
        points = result.intersections.xyz()

        try:
            result.candidates = select_corner_candidates(points, cfg.dead_zone)
            result.camera_to_board = search_pose(points, result.candidates, self.board)
        except NoSolutionError as e:
            logger.warning("No board pose for frame %d: %s", result.frame_index, e)
            result.error = str(e)
        else:
            result.published = finalize_pose(
                result.camera_to_board, cloud, self.broadcaster, cfg.target_frame
            )
            logger.info("published %d", result.frame_index)

        if self.debug:
            self._emit_debug(result, edges)
        return result

    def _next_frame(self) -> int:
        index = self.frame_count
        self.frame_count += 1
        return index

    def _emit_debug(self, result: LocatorResult, edges: np.ndarray | None):
        image = None
        if edges is not None:
            image = draw_detection(
                edges, result.horizontal, result.vertical, result.intersections.pixels()
            )
        board_points = None
        if result.camera_to_board is not None:
            board_points = result.camera_to_board.apply(result.intersections.xyz())
        self.debug_sink.emit(result.frame_index, image, board_points)
