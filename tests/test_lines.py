import numpy as np
import pytest

from chess_board_locator import (
    ImageConversionError,
    LineDetector,
    LineSegment,
    Orientation,
    classify_lines,
)


def test_classify_splits_by_dominant_extent():
    h = LineSegment(10, 10, 200, 30)
    v = LineSegment(50, 10, 60, 300)
    h_reversed = LineSegment(200, 30, 10, 10)
    horizontal, vertical = classify_lines([v, h, h_reversed])
    assert horizontal == [h, h_reversed]
    assert vertical == [v]


def test_exact_diagonal_is_vertical():
    diagonal = LineSegment(0, 0, 100, -100)
    assert diagonal.orientation is Orientation.VERTICAL
    horizontal, vertical = classify_lines([diagonal])
    assert horizontal == []
    assert vertical == [diagonal]


def test_classify_empty():
    assert classify_lines([]) == ([], [])


@pytest.mark.parametrize(
    "image",
    [
        None,
        np.zeros((48, 64), dtype=np.uint8),
        np.zeros((48, 64, 3), dtype=np.float32),
        np.zeros((48, 64, 2), dtype=np.uint8),
    ],
)
def test_blue_channel_rejects_unconvertible_images(image):
    with pytest.raises(ImageConversionError):
        LineDetector.blue_channel(image)


def test_blue_channel_takes_first_bgr_channel():
    image = np.zeros((4, 5, 3), dtype=np.uint8)
    image[:, :, 0] = 7
    image[:, :, 2] = 200
    blue = LineDetector.blue_channel(image)
    assert blue.shape == (4, 5)
    assert np.all(blue == 7)


def test_detect_finds_horizontal_edge():
    image = np.zeros((480, 640, 3), dtype=np.uint8)
    image[:240, :, 0] = 255

    segments, edges = LineDetector().detect(image)

    assert edges.shape == (480, 640)
    assert len(segments) > 0
    horizontal, vertical = classify_lines(segments)
    assert vertical == []
    for segment in horizontal:
        assert abs(segment.y0 - 240) <= 3
        assert abs(segment.x1 - segment.x0) >= 90
