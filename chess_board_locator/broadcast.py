"""
Stamped transforms and the broadcasters that publish them.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import numpy as np
from scipy.spatial.transform import Rotation as R

from .pose import RigidTransform


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy types."""

    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        return super().default(obj)


@dataclass(frozen=True)
class StampedTransform:
    """
    Transform of child_frame expressed in parent_frame at a given time.

    Parameters
    ----------
    parent_frame : str
        Frame the child pose is expressed in (the camera frame).
    child_frame : str
        Frame being located (the board).
    stamp : float
        Time of the data the transform was computed from, in seconds.
    transform : RigidTransform
        Child-to-parent transform.
    """

    parent_frame: str
    child_frame: str
    stamp: float
    transform: RigidTransform

    def as_dict(self) -> dict:
        """
        Serializable representation.

        Returns
        -------
        dict
            Homogeneous matrix, translation, quaternion [x, y, z, w],
            frames, stamp and fit score.
        """
        quat = R.from_matrix(self.transform.rotation).as_quat()  # [x, y, z, w]
        score = self.transform.score
        return {
            "parent_frame": self.parent_frame,
            "child_frame": self.child_frame,
            "stamp": float(self.stamp),
            "T_parent_child": self.transform.matrix.tolist(),
            "xyz": np.asarray(self.transform.translation).flatten().tolist(),
            "quaternion_xyzw": quat.tolist(),
            "score": None if np.isnan(score) else float(score),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StampedTransform":
        score = data.get("score")
        transform = RigidTransform.from_matrix(
            np.array(data["T_parent_child"]),
            score=np.nan if score is None else score,
        )
        return cls(data["parent_frame"], data["child_frame"], data["stamp"], transform)


class TransformBroadcaster(Protocol):
    """Anything that can publish a stamped transform."""

    def send_transform(self, stamped: StampedTransform) -> None:
        ...


class TransformRecorder:
    """Broadcaster that keeps every published transform in memory."""

    def __init__(self):
        self.transforms: list[StampedTransform] = []

    def send_transform(self, stamped: StampedTransform):
        self.transforms.append(stamped)

    @property
    def latest(self) -> StampedTransform | None:
        return self.transforms[-1] if self.transforms else None


class JsonTransformWriter:
    """
    Broadcaster appending each transform as one JSON line to a file.

    Parameters
    ----------
    output_path : str or Path
        Output file. Parent directories are created; an existing file is
        appended to.
    """

    def __init__(self, output_path: str | Path):
        self.output_path = Path(output_path)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.count = 0

    def send_transform(self, stamped: StampedTransform):
        with open(self.output_path, 'a') as f:
            f.write(json.dumps(stamped.as_dict(), cls=NumpyEncoder) + "\n")
        self.count += 1


def load_transforms(path: str | Path) -> list[StampedTransform]:
    """
    Load transforms written by JsonTransformWriter.

    Parameters
    ----------
    path : str or Path
        JSON lines file.

    Returns
    -------
    list of StampedTransform
        Transforms in publication order.
    """
    transforms = []
    with open(path, 'r') as f:
        for line in f:
            line = line.strip()
            if line:
                transforms.append(StampedTransform.from_dict(json.loads(line)))
    return transforms
