from pathlib import Path
import open3d as o3d

from infra.io.load_errors import PointCloudLoadError


class PointCloudRepository:
    def __init__(self, ply_path: Path):
        self.ply_path = ply_path


    def load(self) -> o3d.geometry.PointCloud:
        if not self.ply_path.exists():
            raise PointCloudLoadError(self.ply_path, "point cloud file does not exist")

        pcd = o3d.io.read_point_cloud(str(self.ply_path))

        if pcd.is_empty():
            raise PointCloudLoadError(self.ply_path, "point cloud is empty or could not be parsed")

        return pcd
