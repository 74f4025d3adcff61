import json

import numpy as np
import pytest
from scipy.spatial.transform import Rotation as R

from chess_board_locator import (
    JsonTransformWriter,
    NumpyEncoder,
    RigidTransform,
    StampedTransform,
    TransformRecorder,
    load_transforms,
)


def _stamped(score=0.25):
    rot = R.from_euler("z", 90, degrees=True).as_matrix()
    return StampedTransform("camera", "chess_board", 4.5, RigidTransform(rot, np.array([0.1, 0.2, 0.3]), score))


def test_as_dict_contains_pose_in_common_formats():
    data = _stamped().as_dict()
    assert data["parent_frame"] == "camera"
    assert data["child_frame"] == "chess_board"
    assert data["xyz"] == pytest.approx([0.1, 0.2, 0.3])
    s = np.sqrt(0.5)
    assert data["quaternion_xyzw"] == pytest.approx([0.0, 0.0, s, s])
    assert np.array(data["T_parent_child"]).shape == (4, 4)
    assert data["score"] == pytest.approx(0.25)
    json.dumps(data)


def test_unscored_transform_serializes_null_score():
    data = _stamped(score=np.nan).as_dict()
    assert data["score"] is None
    restored = StampedTransform.from_dict(data)
    assert np.isnan(restored.transform.score)


def test_numpy_encoder():
    payload = {"a": np.float32(1.5), "b": np.int64(3), "c": np.arange(3)}
    assert json.loads(json.dumps(payload, cls=NumpyEncoder)) == {"a": 1.5, "b": 3, "c": [0, 1, 2]}


def test_recorder_keeps_order():
    recorder = TransformRecorder()
    assert recorder.latest is None
    first, second = _stamped(1.0), _stamped(2.0)
    recorder.send_transform(first)
    recorder.send_transform(second)
    assert recorder.transforms == [first, second]
    assert recorder.latest is second


def test_json_writer_appends_lines(tmp_path):
    path = tmp_path / "out" / "poses.jsonl"
    writer = JsonTransformWriter(path)
    writer.send_transform(_stamped(1.0))
    writer.send_transform(_stamped(2.0))

    assert writer.count == 2
    assert len(path.read_text().splitlines()) == 2
    loaded = load_transforms(path)
    assert [t.transform.score for t in loaded] == [1.0, 2.0]
    np.testing.assert_allclose(loaded[0].transform.matrix, _stamped().transform.matrix)
