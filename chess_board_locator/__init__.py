"""
Chess Board Locator Package

Estimates the pose of a chess board calibration target relative to an
RGB-D camera from one color image and its depth-registered point cloud.

Modules
-------
config : Locator parameters and ideal board geometry
lines : Line detection and horizontal/vertical classification
cloud : Organized point cloud with pixel lookup
intersections : 3-D line intersections with deduplication
candidates : a1/a8/h1 corner candidate selection
pose : Rigid transform fitting and exhaustive pose search
broadcast : Stamped transforms and broadcasters
visualization : Debug images and frame plots
locator : Per-frame orchestration
camera : RealSense RGB-D source
"""

from .config import LocatorConfig, IdealBoard, load_config
from .exceptions import (
    LocatorError,
    ImageConversionError,
    NoSolutionError,
    NoIntersectionsError,
)
from .lines import Orientation, LineSegment, LineDetector, classify_lines
from .cloud import OrganizedPointCloud
from .intersections import (
    IntersectionPoint,
    IntersectionCloud,
    find_intersection,
    extract_intersections,
)
from .candidates import CandidateSet, select_corner_candidates
from .pose import RigidTransform, estimate_rigid_transform, grid_score, search_pose
from .broadcast import (
    NumpyEncoder,
    StampedTransform,
    TransformBroadcaster,
    TransformRecorder,
    JsonTransformWriter,
    load_transforms,
)
from .visualization import DebugSink, draw_detection, plot_frames
from .locator import ChessBoardLocator, LocatorResult, finalize_pose
from .camera import RealSenseCamera

__version__ = "0.1.0"
__all__ = [
    # Config
    "LocatorConfig",
    "IdealBoard",
    "load_config",
    # Errors
    "LocatorError",
    "ImageConversionError",
    "NoSolutionError",
    "NoIntersectionsError",
    # Lines
    "Orientation",
    "LineSegment",
    "LineDetector",
    "classify_lines",
    # Cloud
    "OrganizedPointCloud",
    # Intersections
    "IntersectionPoint",
    "IntersectionCloud",
    "find_intersection",
    "extract_intersections",
    # Candidates
    "CandidateSet",
    "select_corner_candidates",
    # Pose
    "RigidTransform",
    "estimate_rigid_transform",
    "grid_score",
    "search_pose",
    # Broadcast
    "NumpyEncoder",
    "StampedTransform",
    "TransformBroadcaster",
    "TransformRecorder",
    "JsonTransformWriter",
    "load_transforms",
    # Visualization
    "DebugSink",
    "draw_detection",
    "plot_frames",
    # Locator
    "ChessBoardLocator",
    "LocatorResult",
    "finalize_pose",
    # Camera
    "RealSenseCamera",
]
