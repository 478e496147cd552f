import colorsys

import numpy as np
import open3d as o3d

from app.scene_builder import (
    AXES_NAME,
    TRAJECTORY_NAME,
    agent_color,
    build_ground_circle,
    build_ground_geometries,
    build_marker_mesh,
    build_trajectory_point_clouds,
    point_cloud_material,
)
from config.viewer_config import GroundConfig, MarkerConfig, PointCloudStyleConfig, TrajectoryStyleConfig
from domain.models.agent_trajectories import AgentTrajectories
from infra.io.point_cloud_repository import PointCloudRepository


def test_ground_circle_lies_on_radius_and_height() -> None:
    circle = build_ground_circle(radius=6.0, height=-4.0, segments=128)
    points = np.asarray(circle.points)

    assert len(points) == 128
    assert len(circle.lines) == 128
    np.testing.assert_allclose(np.linalg.norm(points[:, [0, 2]], axis=1), 6.0)
    np.testing.assert_allclose(points[:, 1], -4.0)


def test_ground_geometries_include_axes_and_each_circle() -> None:
    names = [name for name, _, _ in build_ground_geometries(GroundConfig())]

    assert names[0] == AXES_NAME
    assert len(names) == 3


def test_agent_colors_spread_over_hue() -> None:
    style = TrajectoryStyleConfig()

    assert agent_color(0, 4, style) == colorsys.hls_to_rgb(0.0, 0.5, 0.9)
    assert agent_color(1, 4, style) == colorsys.hls_to_rgb(0.25, 0.5, 0.9)


def test_empty_trajectories_get_no_geometry() -> None:
    trajectories = AgentTrajectories(positions=[[[0.0, 0.0, 0.0]], np.zeros((0, 3)), [[1.0, 1.0, 1.0]]])

    geometries = build_trajectory_point_clouds(trajectories, TrajectoryStyleConfig())

    assert [name for name, _, _ in geometries] == [TRAJECTORY_NAME.format(index=0), TRAJECTORY_NAME.format(index=2)]
    assert all(pcd.has_colors() for _, pcd, _ in geometries)


def test_marker_mesh_has_configured_radius() -> None:
    mesh = build_marker_mesh(MarkerConfig(radius=0.12))

    np.testing.assert_allclose(np.linalg.norm(np.asarray(mesh.vertices), axis=1), 0.12, atol=1e-9)


def test_point_cloud_material_depends_on_vertex_colors(project_dir) -> None:
    style = PointCloudStyleConfig()
    pcd = o3d.geometry.PointCloud(o3d.utility.Vector3dVector(np.zeros((2, 3))))

    flat = point_cloud_material(pcd, style)
    np.testing.assert_allclose(np.asarray(flat.base_color)[:3], style.flat_color)

    colored_pcd = PointCloudRepository(ply_path=project_dir / "0000000.ply").load()
    colored = point_cloud_material(colored_pcd, style)
    np.testing.assert_allclose(np.asarray(colored.base_color)[:3], [1.0, 1.0, 1.0])
