import math
from pathlib import Path

import pytest

from config.viewer_config import ViewerConfig
from infra.io.project_io_manager import ProjectIOManager


CONFIG_YML = Path(__file__).parent.parent / "scripts" / "config" / "viewer_config.yml"


def test_defaults_without_config_file() -> None:
    config = ViewerConfig.parse(None)

    assert config.camera.fov_deg == 60.0
    assert config.camera.position == [10.0, 10.0, 10.0]
    assert config.ground.circle_radii == [6.0, 12.0]
    assert config.ground.height == -4.0
    assert config.markers.radius == 0.12
    assert config.playback.speed == 1.0
    assert config.playback.start_playing is False
    assert config.transform_limits.rotation_max == pytest.approx(math.pi)
    assert config.paths.point_cloud_ply == "0000000.ply"


def test_partial_sections_keep_other_defaults() -> None:
    config = ViewerConfig.parse({"playback": {"speed": 2.5}, "unknown_section": {"a": 1}})

    assert config.playback.speed == 2.5
    assert config.playback.max_speed == 10.0
    assert config.window.width == 1600


def test_unknown_keys_are_ignored() -> None:
    config = ViewerConfig.parse({"markers": {"radius": 0.5, "shape": "cube"}})

    assert config.markers.radius == 0.5


def test_non_mapping_section_is_rejected() -> None:
    with pytest.raises(ValueError, match="playback"):
        ViewerConfig.parse({"playback": [1, 2]})


def test_shipped_yml_parses_to_defaults() -> None:
    config = ViewerConfig.parse_config_yml(CONFIG_YML)

    assert config == ViewerConfig()


def test_yml_overrides_paths(tmp_path) -> None:
    path = tmp_path / "viewer.yml"
    path.write_text("paths:\n  agent_trajectory_csv: other.csv\nloading:\n  timeout_s: 5\n")

    config = ViewerConfig.parse_config_yml(path)

    assert config.paths.agent_trajectory_csv == "other.csv"
    assert config.paths.camera_metadata_json == "metadata.json"
    assert config.loading.timeout_s == 5


def test_configured_paths_resolve_under_project_dir(tmp_path) -> None:
    config = ViewerConfig.parse({"paths": {"agent_trajectory_csv": "runs/other.csv"}})

    io_manager = ProjectIOManager(project_dir=tmp_path, paths=config.paths)

    assert io_manager.get_trajectory_repo().csv_path == tmp_path / "runs" / "other.csv"
    assert io_manager.get_camera_pose_repo().metadata_json == tmp_path / "metadata.json"
    assert io_manager.get_point_cloud_repo().ply_path == tmp_path / "0000000.ply"
