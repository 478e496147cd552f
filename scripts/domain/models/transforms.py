from dataclasses import dataclass, field
import numpy as np
from scipy.spatial.transform import Rotation as R


@dataclass(frozen=True)
class CameraPose:
    """
    Placement of the reference camera in world space.

    - rotation: unit quaternion, scalar-last (x, y, z, w)
    - position: translation (x, y, z)
    """
    rotation: np.ndarray # shape=(4,), (x, y, z, w)
    position: np.ndarray # shape=(3,), (x, y, z)


    @classmethod
    def from_values(cls, values) -> 'CameraPose':
        values = np.asarray(values, dtype=np.float64)
        if values.shape != (7,):
            raise ValueError(f"Camera pose must have 7 values (qx, qy, qz, qw, tx, ty, tz), got shape {values.shape}.")

        return cls(rotation=values[:4].copy(), position=values[4:].copy())


    def to_values(self) -> list[float]:
        return [float(v) for v in np.concatenate([self.rotation, self.position])]


    def to_matrix(self) -> np.ndarray:
        matrix = np.eye(4)
        matrix[:3, :3] = R.from_quat(self.rotation).as_matrix()
        matrix[:3, 3] = self.position

        return matrix


@dataclass
class Placement:
    """
    Position, orientation and per-axis scale of a scene object.

    The object matrix is T(position) @ R(rotation) @ S(scale).
    """
    position: np.ndarray = field(default_factory=lambda: np.zeros(3)) # shape=(3,)
    rotation: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 0.0, 1.0])) # shape=(4,), (x, y, z, w)
    scale: np.ndarray = field(default_factory=lambda: np.ones(3)) # shape=(3,)


    @property
    def rotation_matrix(self) -> np.ndarray:
        return R.from_quat(self.rotation).as_matrix()


    def to_matrix(self) -> np.ndarray:
        matrix = np.eye(4)
        matrix[:3, :3] = self.rotation_matrix * self.scale[np.newaxis, :]
        matrix[:3, 3] = self.position

        return matrix


    def translate(self, offset: np.ndarray) -> 'Placement':
        return Placement(
            position=self.position + np.asarray(offset, dtype=np.float64),
            rotation=self.rotation.copy(),
            scale=self.scale.copy(),
        )


    def rotate_local(self, local_rotation: R) -> 'Placement':
        world_rotation = R.from_quat(self.rotation) * local_rotation

        return Placement(
            position=self.position.copy(),
            rotation=world_rotation.as_quat(),
            scale=self.scale.copy(),
        )


    def with_scale(self, scale: np.ndarray) -> 'Placement':
        return Placement(
            position=self.position.copy(),
            rotation=self.rotation.copy(),
            scale=np.asarray(scale, dtype=np.float64),
        )


    def to_dict(self) -> dict:
        return {
            "position": self.position.tolist(),
            "rotation": self.rotation.tolist(),
            "scale": self.scale.tolist(),
        }
