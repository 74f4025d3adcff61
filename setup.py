"""
Chess Board Locator Package Setup
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text() if readme_path.exists() else ""

setup(
    name="chess-board-locator",
    version="0.1.0",
    description="Chess board pose estimation for RGB-D cameras",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy",
        "opencv-contrib-python",
        "PyYAML",
        "scipy",
        "matplotlib",
    ],
    extras_require={
        "camera": [
            "pyrealsense2",
        ],
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "chess-board-locate=scripts.locate_board:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Image Processing",
        "Topic :: Scientific/Engineering :: Robotics",
    ],
    keywords="robotics, calibration, chess board, pose estimation, realsense, point cloud",
)
