from pathlib import Path

import pytest

from chess_board_locator import IdealBoard, LocatorConfig, load_config

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


def test_defaults_match_reference_constants():
    config = LocatorConfig()
    assert config.image_size == (640, 480)
    assert (config.hough_rho, config.hough_threshold, config.hough_min_length) == (1, 50, 100)
    assert config.square_size == pytest.approx(0.05715)
    assert config.dedup_threshold == pytest.approx(0.03)
    assert config.dead_zone == pytest.approx(0.05)
    assert config.target_frame == "chess_board"
    assert config.debug is False
    assert config.board == IdealBoard(square_size=0.05715)


def test_shipped_parameters_are_the_defaults():
    assert load_config(CONFIG_DIR / "locator_parameters.yaml") == LocatorConfig()


def test_partial_file_keeps_defaults(tmp_path):
    path = tmp_path / "params.yaml"
    path.write_text("image_width: 1280\nimage_height: 720\nsquare_size: 0.03\n")

    config = load_config(path)

    assert config.image_size == (1280, 720)
    assert config.board.square_size == pytest.approx(0.03)
    assert config.hough_threshold == 50


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "params.yaml"
    path.write_text("")
    assert load_config(path) == LocatorConfig()


def test_unknown_keys_are_rejected(tmp_path):
    path = tmp_path / "params.yaml"
    path.write_text("square_size: 0.05\nsquare_sise: 0.06\n")
    with pytest.raises(ValueError, match="square_sise"):
        load_config(path)


def test_non_mapping_is_rejected(tmp_path):
    path = tmp_path / "params.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_config(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    "kwargs",
    [{"image_width": 0}, {"square_size": -0.01}, {"dead_zone": -1.0}],
)
def test_invalid_values_are_rejected(kwargs):
    with pytest.raises(ValueError):
        LocatorConfig(**kwargs)


@pytest.mark.parametrize(
    "kwargs",
    [{"image_width": None}, {"hough_threshold": 50.5}, {"square_size": "0.05"}, {"debug": 1},
     {"image_height": True}],
)
def test_wrongly_typed_values_are_rejected(kwargs):
    with pytest.raises(ValueError):
        LocatorConfig(**kwargs)


def test_null_value_in_file_is_rejected(tmp_path):
    path = tmp_path / "params.yaml"
    path.write_text("image_width:\n")
    with pytest.raises(ValueError, match="image_width"):
        load_config(path)


def test_integer_accepted_for_float_parameter():
    assert LocatorConfig(dead_zone=0).dead_zone == 0
