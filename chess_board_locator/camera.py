"""
RealSense RGB-D source of synchronized image / point cloud pairs.
"""

import numpy as np

from .cloud import OrganizedPointCloud

try:
    import pyrealsense2 as rs
    REALSENSE_AVAILABLE = True
except ImportError:
    REALSENSE_AVAILABLE = False


def deproject_depth(
    depth: np.ndarray,
    K: np.ndarray,
    depth_scale: float
) -> np.ndarray:
    """
    Convert a depth image registered to the color camera into 3-D points.

    Parameters
    ----------
    depth : np.ndarray
        HxW raw depth image (sensor units). Zero means no depth.
    K : np.ndarray
        3x3 color camera intrinsics matrix.
    depth_scale : float
        Meters per depth unit.

    Returns
    -------
    np.ndarray
        HxWx3 points in meters in the color optical frame (x right, y down,
        z forward). Pixels without depth are NaN.
    """
    h, w = depth.shape
    fx, fy = K[0, 0], K[1, 1]
    cx, cy = K[0, 2], K[1, 2]

    cols, rows = np.meshgrid(np.arange(w), np.arange(h))
    z = depth.astype(np.float64) * depth_scale
    z[depth == 0] = np.nan
    x = (cols - cx) / fx * z
    y = (rows - cy) / fy * z
    return np.stack([x, y, z], axis=-1)


class RealSenseCamera:
    """
    RealSense camera wrapper delivering color images with aligned point clouds.

    Parameters
    ----------
    lazy : bool
        If True, delays pipeline initialization until initialize() is called.
    resolution : tuple
        Color and depth resolution (width, height). Default is (640, 480).
    fps : int
        Frame rate. Default is 30.
    frame_id : str
        Frame id stamped on the produced clouds.
    """

    def __init__(
        self,
        lazy: bool = False,
        resolution: tuple = (640, 480),
        fps: int = 30,
        frame_id: str = "camera_color_optical_frame"
    ):
        if not REALSENSE_AVAILABLE:
            raise RuntimeError("pyrealsense2 is not installed")

        self.pipeline = None
        self.config = None
        self.profile = None
        self.intrinsics = None
        self.depth_scale = None
        self.align = None
        self.resolution = resolution
        self.fps = fps
        self.frame_id = frame_id

        if not lazy:
            self.initialize()

    def initialize(self) -> bool:
        """
        Initialize the camera pipeline.

        Returns
        -------
        bool
            True if initialization succeeded, False if the device is busy.
        """
        if self.pipeline is not None:
            return True

        try:
            self.pipeline = rs.pipeline()
            self.config = rs.config()
            w, h = self.resolution
            self.config.enable_stream(rs.stream.color, w, h, rs.format.bgr8, self.fps)
            self.config.enable_stream(rs.stream.depth, w, h, rs.format.z16, self.fps)
            self.profile = self.pipeline.start(self.config)

            color_stream = self.profile.get_stream(rs.stream.color)
            self.intrinsics = color_stream.as_video_stream_profile().get_intrinsics()
            depth_sensor = self.profile.get_device().first_depth_sensor()
            self.depth_scale = depth_sensor.get_depth_scale()
            self.align = rs.align(rs.stream.color)
            return True
        except RuntimeError as e:
            self.pipeline = None
            if "Device or resource busy" in str(e):
                return False
            raise

    @property
    def is_initialized(self) -> bool:
        """Check if camera is initialized."""
        return self.pipeline is not None

    def get_intrinsics_matrix(self) -> np.ndarray:
        """
        Get the color camera intrinsics matrix.

        Returns
        -------
        np.ndarray
            3x3 intrinsics matrix, identity if the camera is not running.
        """
        if not self.intrinsics:
            return np.eye(3)

        return np.array([
            [self.intrinsics.fx, 0, self.intrinsics.ppx],
            [0, self.intrinsics.fy, self.intrinsics.ppy],
            [0, 0, 1]
        ])

    def get_frame_pair(self) -> tuple[np.ndarray, OrganizedPointCloud] | None:
        """
        Capture one color image and its depth-registered point cloud.

        Returns
        -------
        tuple or None
            (bgr_image, cloud), or None if capture failed or timed out.
        """
        if not self.pipeline:
            return None

        try:
            frames = self.pipeline.wait_for_frames(timeout_ms=1000)
        except RuntimeError:
            return None

        aligned = self.align.process(frames)
        color_frame = aligned.get_color_frame()
        depth_frame = aligned.get_depth_frame()
        if not color_frame or not depth_frame:
            return None

        image = np.asanyarray(color_frame.get_data()).copy()
        depth = np.asanyarray(depth_frame.get_data())
        points = deproject_depth(depth, self.get_intrinsics_matrix(), self.depth_scale)
        cloud = OrganizedPointCloud(
            points,
            frame_id=self.frame_id,
            stamp=color_frame.get_timestamp() / 1000.0,
        )
        return image, cloud

    def stop(self):
        """Stop the camera pipeline."""
        if getattr(self, "pipeline", None):
            try:
                self.pipeline.stop()
            except RuntimeError:
                pass
            self.pipeline = None

    def __del__(self):
        self.stop()

    def __enter__(self):
        if not self.is_initialized:
            self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
