from pathlib import Path


POINT_CLOUD_PLY_PATH = '0000000.ply'

CAMERA_METADATA_JSON_PATH = 'metadata.json'

AGENT_TRAJECTORY_CSV_PATH = 'agents_trajectory.csv'


class ProjectPathConfig:
    def __init__(
        self,
        project_dir: Path,
        point_cloud_ply: str = POINT_CLOUD_PLY_PATH,
        camera_metadata_json: str = CAMERA_METADATA_JSON_PATH,
        agent_trajectory_csv: str = AGENT_TRAJECTORY_CSV_PATH,
    ):
        self.project_dir = project_dir
        self.point_cloud_ply = point_cloud_ply
        self.camera_metadata_json = camera_metadata_json
        self.agent_trajectory_csv = agent_trajectory_csv


    def get_point_cloud_path(self) -> Path:
        return self.project_dir / self.point_cloud_ply


    def get_camera_metadata_path(self) -> Path:
        return self.project_dir / self.camera_metadata_json


    def get_agent_trajectory_path(self) -> Path:
        return self.project_dir / self.agent_trajectory_csv
