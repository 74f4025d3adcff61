"""
Line segment detection and horizontal/vertical classification.
"""

import logging
from dataclasses import dataclass
from enum import Enum

import cv2
import numpy as np

from .config import LocatorConfig
from .exceptions import ImageConversionError

logger = logging.getLogger(__name__)


class Orientation(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class LineSegment:
    """Pixel-space segment from (x0, y0) to (x1, y1)."""

    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def dx(self) -> float:
        return self.x1 - self.x0

    @property
    def dy(self) -> float:
        return self.y1 - self.y0

    @property
    def orientation(self) -> Orientation:
        # Exact diagonals go to VERTICAL.
        if abs(self.dx) > abs(self.dy):
            return Orientation.HORIZONTAL
        return Orientation.VERTICAL

    @property
    def endpoints(self) -> tuple[tuple[int, int], tuple[int, int]]:
        """Integer endpoints, as expected by OpenCV drawing functions."""
        return (int(self.x0), int(self.y0)), (int(self.x1), int(self.y1))


def classify_lines(
    segments: list[LineSegment]
) -> tuple[list[LineSegment], list[LineSegment]]:
    """
    Split segments into horizontal and vertical groups.

    A segment is horizontal when |dx| > |dy| and vertical otherwise. Input
    order is preserved within each group.

    Parameters
    ----------
    segments : list of LineSegment
        Detected segments.

    Returns
    -------
    tuple
        (horizontal, vertical) lists of segments.
    """
    horizontal = []
    vertical = []
    for segment in segments:
        if segment.orientation is Orientation.HORIZONTAL:
            horizontal.append(segment)
        else:
            vertical.append(segment)
    return horizontal, vertical


class LineDetector:
    """
    Probabilistic Hough line detector tuned for blue/white chess boards.

    The blue channel is thresholded, cleaned up with an erode/dilate pass,
    run through Canny and dilated again before the Hough transform.

    Parameters
    ----------
    config : LocatorConfig
        Threshold, Canny and Hough parameters.
    """

    def __init__(self, config: LocatorConfig | None = None):
        self.config = config or LocatorConfig()

    @staticmethod
    def blue_channel(image: np.ndarray) -> np.ndarray:
        """
        Extract the blue channel of a BGR image.

        Raises
        ------
        ImageConversionError
            If the image is not an 8-bit BGR array.
        """
        if image is None or not isinstance(image, np.ndarray):
            raise ImageConversionError("Expected a BGR image as a numpy array")
        if image.dtype != np.uint8:
            raise ImageConversionError(f"Expected an 8-bit image, got {image.dtype}")
        if image.ndim != 3 or image.shape[2] not in (3, 4):
            raise ImageConversionError(
                f"Expected a 3-channel BGR image, got shape {image.shape}"
            )
        return np.ascontiguousarray(image[:, :, 0])

    def edges(self, image: np.ndarray) -> np.ndarray:
        """
        Compute the dilated edge map fed to the Hough transform.

        Parameters
        ----------
        image : np.ndarray
            BGR image.

        Returns
        -------
        np.ndarray
            Single-channel uint8 edge image.
        """
        cfg = self.config
        src = self.blue_channel(image)

        _, src = cv2.threshold(src, cfg.binary_threshold, 255, cv2.THRESH_BINARY)
        src = cv2.erode(src, None)
        src = cv2.dilate(src, None)

        dst = cv2.Canny(src, cfg.canny_low, cfg.canny_high, apertureSize=cfg.canny_aperture)
        return cv2.dilate(dst, None)

    def detect_edges(self, edges: np.ndarray) -> list[LineSegment]:
        """Run the probabilistic Hough transform on an edge image."""
        cfg = self.config
        lines = cv2.HoughLinesP(
            edges,
            cfg.hough_rho,
            np.pi / 180,
            cfg.hough_threshold,
            minLineLength=cfg.hough_min_length,
            maxLineGap=cfg.hough_max_gap,
        )
        if lines is None:
            return []
        return [LineSegment(*map(float, l)) for l in lines.reshape(-1, 4)]

    def detect(self, image: np.ndarray) -> tuple[list[LineSegment], np.ndarray]:
        """
        Detect line segments in a BGR image.

        Returns
        -------
        tuple
            (segments, edges) where edges is the image the lines were found in.
        """
        edges = self.edges(image)
        segments = self.detect_edges(edges)
        logger.debug("Found %d lines", len(segments))
        return segments, edges
