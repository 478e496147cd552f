from dataclasses import dataclass, fields
import numpy as np


@dataclass
class TransformParameters:
    """User-adjusted transform applied on top of the camera alignment."""
    offset_x: float = 0.0
    offset_y: float = 0.0
    offset_z: float = 0.0
    rotation_y: float = 0.0 # radians
    mirror_x: bool = False
    mirror_y: bool = False
    mirror_z: bool = False


    @property
    def offset(self) -> np.ndarray:
        return np.array([self.offset_x, self.offset_y, self.offset_z], dtype=np.float64)


    @property
    def mirror_scale(self) -> np.ndarray:
        return np.array([
            -1.0 if self.mirror_x else 1.0,
            -1.0 if self.mirror_y else 1.0,
            -1.0 if self.mirror_z else 1.0,
        ])


    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]


    def set_value(self, name: str, value) -> None:
        if name not in self.field_names():
            raise KeyError(f"Unknown transform parameter: {name}")

        if name.startswith('mirror_'):
            setattr(self, name, bool(value))
        else:
            setattr(self, name, float(value))


    def reset(self) -> None:
        for f in fields(self):
            setattr(self, f.name, f.default)
