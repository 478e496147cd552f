import math
import yaml
from pathlib import Path
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Optional

from config.project_path_config import (
    AGENT_TRAJECTORY_CSV_PATH,
    CAMERA_METADATA_JSON_PATH,
    POINT_CLOUD_PLY_PATH,
)


@dataclass
class WindowConfig:
    title: str = "Mass Coords Viewer"
    width: int = 1600
    height: int = 1000
    panel_width: int = 320
    background_color: list[float] = field(default_factory=lambda: [1.0, 1.0, 1.0, 1.0])


@dataclass
class CameraConfig:
    fov_deg: float = 60.0
    near: float = 0.1
    far: float = 1000.0
    position: list[float] = field(default_factory=lambda: [10.0, 10.0, 10.0])
    target: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    up: list[float] = field(default_factory=lambda: [0.0, 1.0, 0.0])


@dataclass
class PointCloudStyleConfig:
    point_size: float = 3.0 # pixels
    flat_color: list[float] = field(default_factory=lambda: [0.6, 0.6, 0.6])


@dataclass
class TrajectoryStyleConfig:
    point_size: float = 6.0 # pixels
    saturation: float = 0.9
    lightness: float = 0.5


@dataclass
class MarkerConfig:
    radius: float = 0.12
    resolution: int = 16
    color: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])


@dataclass
class GroundConfig:
    circle_radii: list[float] = field(default_factory=lambda: [6.0, 12.0])
    height: float = -4.0
    segments: int = 128
    color: list[float] = field(default_factory=lambda: [0.6, 0.6, 0.6])
    axes_size: float = 5.0


@dataclass
class PlaybackConfig:
    speed: float = 1.0
    min_speed: float = 0.1
    max_speed: float = 10.0
    start_playing: bool = False


@dataclass
class TransformLimitsConfig:
    offset_min: float = -10.0
    offset_max: float = 10.0
    rotation_min: float = -math.pi
    rotation_max: float = math.pi


@dataclass
class LoadingConfig:
    max_workers: int = 3
    timeout_s: Optional[float] = None


@dataclass
class PathsConfig:
    point_cloud_ply: str = POINT_CLOUD_PLY_PATH
    camera_metadata_json: str = CAMERA_METADATA_JSON_PATH
    agent_trajectory_csv: str = AGENT_TRAJECTORY_CSV_PATH


@dataclass
class ViewerConfig:
    window: WindowConfig = field(default_factory=WindowConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    point_cloud: PointCloudStyleConfig = field(default_factory=PointCloudStyleConfig)
    trajectories: TrajectoryStyleConfig = field(default_factory=TrajectoryStyleConfig)
    markers: MarkerConfig = field(default_factory=MarkerConfig)
    ground: GroundConfig = field(default_factory=GroundConfig)
    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    transform_limits: TransformLimitsConfig = field(default_factory=TransformLimitsConfig)
    loading: LoadingConfig = field(default_factory=LoadingConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)


    @classmethod
    def parse(cls, config_dict: Optional[dict[str, Any]]) -> 'ViewerConfig':
        def init_dataclass(dc_cls, d: dict, section: str):
            if not isinstance(d, dict):
                raise ValueError(f"Config section '{section}' must be a mapping, got {type(d).__name__}.")

            kwargs = {}

            for f in fields(dc_cls):
                if f.name not in d:
                    continue

                value = d[f.name]

                if is_dataclass(f.type):
                    value = init_dataclass(f.type, value, section=f.name)

                kwargs[f.name] = value

            return dc_cls(**kwargs)

        return init_dataclass(cls, config_dict or {}, section="root")


    @classmethod
    def parse_config_yml(cls, yml_path: Path) -> 'ViewerConfig':
        with open(yml_path, 'r') as f:
            config_dict = yaml.safe_load(f)

        return cls.parse(config_dict)
