import json
import math
from pathlib import Path

from domain.models.transforms import CameraPose
from infra.io.load_errors import CameraPoseLoadError


def parse_camera_pose(metadata: dict, path: Path) -> CameraPose:
    """Read poses[0] as (qx, qy, qz, qw, tx, ty, tz). Later poses are ignored."""
    if not isinstance(metadata, dict):
        raise CameraPoseLoadError(path, "metadata document is not a JSON object")

    poses = metadata.get("poses")
    if not isinstance(poses, list) or len(poses) == 0:
        raise CameraPoseLoadError(path, "metadata has no 'poses' entries")

    first_pose = poses[0]
    if not isinstance(first_pose, (list, tuple)) or len(first_pose) != 7:
        raise CameraPoseLoadError(path, "poses[0] must contain 7 values [qx, qy, qz, qw, tx, ty, tz]")

    if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in first_pose):
        raise CameraPoseLoadError(path, "poses[0] contains non-numeric values")

    qx, qy, qz, qw = first_pose[:4]
    if math.sqrt(qx * qx + qy * qy + qz * qz + qw * qw) == 0.0:
        raise CameraPoseLoadError(path, "poses[0] has a zero-length quaternion")

    return CameraPose.from_values(first_pose)


class CameraPoseRepository:
    def __init__(self, metadata_json: Path):
        self.metadata_json = metadata_json


    def load(self) -> CameraPose:
        if not self.metadata_json.exists():
            raise CameraPoseLoadError(self.metadata_json, "metadata file does not exist")

        try:
            with open(self.metadata_json, "r", encoding="utf-8") as f:
                metadata = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CameraPoseLoadError(self.metadata_json, f"failed to read metadata ({e})") from e

        return parse_camera_pose(metadata, self.metadata_json)
