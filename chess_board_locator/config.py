"""
Locator configuration and ideal board geometry.
"""

from dataclasses import dataclass, field, fields
from functools import cached_property
from pathlib import Path

import numpy as np
import yaml


@dataclass
class LocatorConfig:
    """
    Tunable parameters of the chess board locator.

    Parameters
    ----------
    image_width, image_height : int
        Sensor resolution in pixels. Intersections outside are rejected.
    hough_rho : int
        Hough accumulator resolution step (pixels).
    hough_threshold : int
        Hough accumulator threshold.
    hough_min_length : int
        Minimum accepted segment length (pixels).
    hough_max_gap : int
        Maximum gap joining collinear segments (pixels).
    binary_threshold : int
        Threshold applied to the blue channel before edge detection.
    canny_low, canny_high, canny_aperture : int
        Canny edge detector parameters.
    square_size : float
        Board square side length (meters).
    dedup_threshold : float
        L1 distance (meters) below which two intersections are merged.
    dead_zone : float
        Margin (meters) around the centroid excluded from corner candidates.
    target_frame : str
        Name of the frame published for the board.
    debug : bool
        Emit debug artifacts through the diagnostics sink.
    """

    image_width: int = 640
    image_height: int = 480
    hough_rho: int = 1
    hough_threshold: int = 50
    hough_min_length: int = 100
    hough_max_gap: int = 10
    binary_threshold: int = 100
    canny_low: int = 30
    canny_high: int = 200
    canny_aperture: int = 3
    square_size: float = 0.05715
    dedup_threshold: float = 0.03
    dead_zone: float = 0.05
    target_frame: str = "chess_board"
    debug: bool = False

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            expected = (int, float) if f.type is float else f.type
            if not isinstance(value, expected) or (isinstance(value, bool) and f.type is not bool):
                raise ValueError(
                    f"{f.name} must be {f.type.__name__}, got {type(value).__name__}"
                )
        if self.image_width <= 0 or self.image_height <= 0:
            raise ValueError(
                f"Image size must be positive, got {self.image_width}x{self.image_height}"
            )
        if self.square_size <= 0:
            raise ValueError(f"square_size must be positive, got {self.square_size}")
        if self.dedup_threshold < 0 or self.dead_zone < 0:
            raise ValueError("dedup_threshold and dead_zone must be non-negative")

    @property
    def image_size(self) -> tuple[int, int]:
        """(width, height) in pixels."""
        return self.image_width, self.image_height

    @property
    def board(self) -> "IdealBoard":
        return IdealBoard(square_size=self.square_size)

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_config(config_path: str | Path) -> LocatorConfig:
    """
    Load a locator configuration from a YAML file.

    Keys missing from the file keep their defaults.

    Parameters
    ----------
    config_path : str or Path
        Path to the YAML file.

    Returns
    -------
    LocatorConfig
        The parsed configuration.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the file contains unknown keys or is not a mapping.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Locator config file not found: {config_path}")

    with open(config_path, 'r') as f:
        params = yaml.safe_load(f) or {}

    if not isinstance(params, dict):
        raise ValueError(f"{config_path} must contain a mapping of parameters")

    known = {f.name for f in fields(LocatorConfig)}
    unknown = sorted(set(params) - known)
    if unknown:
        raise ValueError(f"Unknown locator parameters in {config_path}: {', '.join(unknown)}")

    return LocatorConfig(**params)


@dataclass(frozen=True)
class IdealBoard:
    """
    Ideal 8x8 chess board in its own frame.

    Origin at the outer board corner, x along the a1-h1 rank, y along the
    a1-a8 file, z out of the board. Units are meters.
    """

    square_size: float = 0.05715
    squares: int = field(default=8)

    @property
    def a1(self) -> np.ndarray:
        s = self.square_size
        return np.array([s, s, 0.0])

    @property
    def a8(self) -> np.ndarray:
        s = self.square_size
        return np.array([s, (self.squares - 1) * s, 0.0])

    @property
    def h1(self) -> np.ndarray:
        s = self.square_size
        return np.array([(self.squares - 1) * s, s, 0.0])

    @property
    def reference_corners(self) -> np.ndarray:
        """3x3 array of the a1, a8, h1 interior corners (one per row)."""
        return np.vstack([self.a1, self.a8, self.h1])

    @cached_property
    def interior_nodes(self) -> np.ndarray:
        """(squares-1)^2 x 2 array of interior grid nodes (x, y)."""
        idx = np.arange(1, self.squares) * self.square_size
        xx, yy = np.meshgrid(idx, idx, indexing="ij")
        return np.column_stack([xx.ravel(), yy.ravel()])
