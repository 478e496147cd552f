import colorsys
import numpy as np
import open3d as o3d
import open3d.visualization.rendering as rendering

from config.viewer_config import GroundConfig, MarkerConfig, PointCloudStyleConfig, TrajectoryStyleConfig
from domain.models.agent_trajectories import AgentTrajectories


POINT_CLOUD_NAME = "point_cloud"
AXES_NAME = "axes"
GROUND_CIRCLE_NAME = "ground_circle_{index}"
TRAJECTORY_NAME = "agent_trajectory_{index:04d}"
MARKER_NAME = "agent_marker_{index:04d}"


def unlit_material(color=(1.0, 1.0, 1.0), point_size: float = 1.0) -> rendering.MaterialRecord:
    material = rendering.MaterialRecord()
    material.shader = "defaultUnlit"
    material.base_color = [*color[:3], 1.0]
    material.point_size = point_size

    return material


def point_cloud_material(point_cloud: o3d.geometry.PointCloud, style: PointCloudStyleConfig) -> rendering.MaterialRecord:
    # Vertex colors are modulated by base_color, so keep it white when present.
    if point_cloud.has_colors():
        return unlit_material(point_size=style.point_size)

    return unlit_material(color=style.flat_color, point_size=style.point_size)


def agent_color(index: int, agent_count: int, style: TrajectoryStyleConfig) -> tuple[float, float, float]:
    hue = index / agent_count if agent_count > 0 else 0.0
    return colorsys.hls_to_rgb(hue, style.lightness, style.saturation)


def build_trajectory_point_clouds(
    trajectories: AgentTrajectories,
    style: TrajectoryStyleConfig,
) -> list[tuple[str, o3d.geometry.PointCloud, rendering.MaterialRecord]]:
    geometries = []

    for index, positions in enumerate(trajectories.positions):
        if len(positions) == 0:
            continue

        pcd = o3d.geometry.PointCloud(o3d.utility.Vector3dVector(positions))
        color = agent_color(index, trajectories.agent_count, style)
        pcd.paint_uniform_color(color)

        geometries.append((
            TRAJECTORY_NAME.format(index=index),
            pcd,
            unlit_material(point_size=style.point_size),
        ))

    return geometries


def build_marker_mesh(config: MarkerConfig) -> o3d.geometry.TriangleMesh:
    mesh = o3d.geometry.TriangleMesh.create_sphere(radius=config.radius, resolution=config.resolution)
    mesh.compute_vertex_normals()
    mesh.paint_uniform_color(config.color)

    return mesh


def build_ground_circle(radius: float, height: float, segments: int) -> o3d.geometry.LineSet:
    theta = np.linspace(0.0, 2.0 * np.pi, segments, endpoint=False)
    points = np.stack([np.cos(theta) * radius, np.full_like(theta, height), np.sin(theta) * radius], axis=1)
    lines = np.stack([np.arange(segments), (np.arange(segments) + 1) % segments], axis=1)

    line_set = o3d.geometry.LineSet(
        points=o3d.utility.Vector3dVector(points),
        lines=o3d.utility.Vector2iVector(lines),
    )

    return line_set


def build_ground_geometries(config: GroundConfig) -> list[tuple[str, o3d.geometry.Geometry3D, rendering.MaterialRecord]]:
    geometries = [(
        AXES_NAME,
        o3d.geometry.TriangleMesh.create_coordinate_frame(size=config.axes_size),
        unlit_material(),
    )]

    for index, radius in enumerate(config.circle_radii):
        line_set = build_ground_circle(radius=radius, height=config.height, segments=config.segments)
        material = unlit_material(color=config.color)
        material.shader = "unlitLine"
        material.line_width = 1.0

        geometries.append((GROUND_CIRCLE_NAME.format(index=index), line_set, material))

    return geometries
