from pathlib import Path
from typing import Optional

from config.project_path_config import ProjectPathConfig
from config.viewer_config import PathsConfig
from infra.io.camera_pose_repository import CameraPoseRepository
from infra.io.point_cloud_repository import PointCloudRepository
from infra.io.trajectory_repository import TrajectoryRepository


class ProjectIOManager:
    def __init__(self, project_dir: Path, paths: Optional[PathsConfig] = None):
        self.project_dir = project_dir

        paths = paths or PathsConfig()
        self.path_config = ProjectPathConfig(
            project_dir=project_dir,
            point_cloud_ply=paths.point_cloud_ply,
            camera_metadata_json=paths.camera_metadata_json,
            agent_trajectory_csv=paths.agent_trajectory_csv,
        )

        self.point_cloud_repo = PointCloudRepository(
            ply_path=self.path_config.get_point_cloud_path()
        )
        self.camera_pose_repo = CameraPoseRepository(
            metadata_json=self.path_config.get_camera_metadata_path()
        )
        self.trajectory_repo = TrajectoryRepository(
            csv_path=self.path_config.get_agent_trajectory_path()
        )


    def get_point_cloud_repo(self) -> PointCloudRepository:
        return self.point_cloud_repo


    def get_camera_pose_repo(self) -> CameraPoseRepository:
        return self.camera_pose_repo


    def get_trajectory_repo(self) -> TrajectoryRepository:
        return self.trajectory_repo
