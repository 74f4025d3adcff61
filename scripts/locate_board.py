#!/usr/bin/env python3
"""
Chess Board Locator - Locate Board Script

Estimates the chess board pose from a saved image/point cloud pair or from
a live RealSense camera, and writes the poses as JSON lines.
Can be run standalone or imported as a module.

Usage:
    python scripts/locate_board.py --image frame.png --cloud frame.npy --plot
    python scripts/locate_board.py --live --frames 100 --output data/poses.jsonl
"""

import sys
import argparse
import logging
from dataclasses import replace
from pathlib import Path

import cv2

# Add parent directory to path for standalone execution
sys.path.insert(0, str(Path(__file__).parent.parent))

from chess_board_locator import (
    ChessBoardLocator,
    DebugSink,
    JsonTransformWriter,
    LocatorConfig,
    LocatorResult,
    OrganizedPointCloud,
    RealSenseCamera,
    load_config,
    plot_frames,
)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_locator(
    config: LocatorConfig,
    output_path: str | Path,
    debug_dir: str | Path | None = None
) -> ChessBoardLocator:
    """
    Create a locator that writes poses to a JSON lines file.

    Parameters
    ----------
    config : LocatorConfig
        Locator parameters. Debug output is enabled when debug_dir is given.
    output_path : str or Path
        JSON lines file receiving the board poses.
    debug_dir : str or Path, optional
        Directory for debug images and transformed clouds.

    Returns
    -------
    ChessBoardLocator
        Configured locator.
    """
    sink = None
    if debug_dir is not None:
        config = replace(config, debug=True)
        sink = DebugSink(debug_dir)
    return ChessBoardLocator(config, JsonTransformWriter(output_path), debug_sink=sink)


def report(result: LocatorResult):
    """Print a one-line summary of a frame result."""
    n_points = len(result.intersections) if result.intersections is not None else 0
    if result.ok:
        xyz = result.published.transform.translation
        print(
            f"✓ Frame {result.frame_index}: {n_points} intersections, "
            f"score {result.score:.6f}, board at "
            f"[{xyz[0]:.3f}, {xyz[1]:.3f}, {xyz[2]:.3f}] m"
        )
    else:
        print(f"✗ Frame {result.frame_index}: {result.error}")


def locate_from_files(
    locator: ChessBoardLocator,
    image_path: str | Path,
    cloud_path: str | Path,
    frame_id: str = "camera_rgb_optical_frame",
    stamp: float = 0.0
) -> LocatorResult:
    """
    Locate the board in a saved image and point cloud.

    Parameters
    ----------
    locator : ChessBoardLocator
        Locator to run.
    image_path : str or Path
        Color image readable by OpenCV.
    cloud_path : str or Path
        HxWx3 point cloud saved with numpy.save.
    frame_id : str
        Camera frame id of the cloud.
    stamp : float
        Timestamp of the pair in seconds.

    Returns
    -------
    LocatorResult
        Result of the frame.
    """
    image_path = Path(image_path)
    if not image_path.exists():
        raise FileNotFoundError(f"Image file not found: {image_path}")

    # cv2.imread returns None on unreadable files; the locator reports that.
    image = cv2.imread(str(image_path))
    cloud = OrganizedPointCloud.load(cloud_path, frame_id=frame_id, stamp=stamp)
    result = locator.process(image, cloud)
    report(result)
    return result


def locate_live(locator: ChessBoardLocator, frames: int = 0, max_failures: int = 30) -> int:
    """
    Locate the board in frames from a RealSense camera.

    Parameters
    ----------
    locator : ChessBoardLocator
        Locator to run.
    frames : int
        Number of frame pairs to process; 0 runs until interrupted.
    max_failures : int
        Consecutive failed captures after which the camera is given up.

    Returns
    -------
    int
        Number of frames with a published pose.
    """
    cfg = locator.config
    published = 0
    processed = 0
    failures = 0

    with RealSenseCamera(resolution=cfg.image_size) as camera:
        if not camera.is_initialized:
            raise RuntimeError("Camera is busy")
        print("✓ Camera initialized")
        try:
            while frames == 0 or processed < frames:
                pair = camera.get_frame_pair()
                if pair is None:
                    failures += 1
                    print(f"WARNING: Failed to capture frame pair ({failures}/{max_failures})")
                    if failures >= max_failures:
                        print("ERROR: Camera stopped delivering frames")
                        break
                    continue
                failures = 0
                result = locator.process(*pair)
                processed += 1
                if result.ok:
                    published += 1
                report(result)
        except KeyboardInterrupt:
            print("\n\nCapture interrupted by user")

    print(f"Processed {processed} frames, published {published} poses")
    return published


def main():
    parser = argparse.ArgumentParser(description="Locate a chess board in RGB-D data")
    parser.add_argument("--image", help="Color image of the board")
    parser.add_argument("--cloud", help="HxWx3 point cloud (.npy) registered to the image")
    parser.add_argument("--frame-id", default="camera_rgb_optical_frame", help="Camera frame id")
    parser.add_argument("--stamp", type=float, default=0.0, help="Timestamp of the pair (s)")
    parser.add_argument("--live", action="store_true", help="Use a RealSense camera")
    parser.add_argument("--frames", type=int, default=0, help="Frames to process in live mode (0 = forever)")
    parser.add_argument("--config", help="Locator parameters YAML")
    parser.add_argument("--output", default="data/board_poses.jsonl", help="Output JSON lines file")
    parser.add_argument("--debug-dir", help="Directory for debug images and clouds")
    parser.add_argument("--plot", action="store_true", help="Show 3D plot of the board pose")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )

    if not args.live and not (args.image and args.cloud):
        parser.error("either --live or both --image and --cloud are required")

    print("=" * 60)
    print("Chess Board Locator")
    print("=" * 60)

    try:
        config = load_config(args.config) if args.config else LocatorConfig()
    except (FileNotFoundError, ValueError, TypeError) as e:
        print(f"ERROR: Failed to load locator parameters: {e}")
        return 1

    locator = build_locator(config, args.output, args.debug_dir)

    if args.live:
        try:
            published = locate_live(locator, args.frames)
        except RuntimeError as e:
            print(f"ERROR: Failed to initialize camera: {e}")
            return 1
        return 0 if published else 1

    try:
        result = locate_from_files(locator, args.image, args.cloud, args.frame_id, args.stamp)
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: {e}")
        return 1

    if not result.ok:
        return 1

    print(f"\nSaved pose to {args.output}")
    if args.plot:
        plot_frames(result.published.transform.matrix, result.intersections.xyz())
    return 0


if __name__ == "__main__":
    exit(main())
