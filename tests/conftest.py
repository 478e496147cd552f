import sys
import os
import json
from pathlib import Path

import numpy as np
import open3d as o3d
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "scripts"))


TRAJECTORY_CSV = """agent_0_x,agent_0_y,agent_0_z,agent_1_x,agent_1_y,agent_1_z
0.0,0.0,0.0,10.0,10.0,10.0
1.0,1.0,1.0,11.0,abc,11.0
2.0,2.0,2.0,12.0,12.0,12.0
"""


def write_point_cloud(path: Path, with_colors: bool) -> o3d.geometry.PointCloud:
    points = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
    pcd = o3d.geometry.PointCloud(o3d.utility.Vector3dVector(points))
    if with_colors:
        pcd.colors = o3d.utility.Vector3dVector(np.tile([1.0, 0.0, 0.0], (len(points), 1)))

    o3d.io.write_point_cloud(str(path), pcd, write_ascii=True)
    return pcd


@pytest.fixture()
def project_dir(tmp_path) -> Path:
    """Project directory with all three inputs in their default locations."""
    write_point_cloud(tmp_path / "0000000.ply", with_colors=True)

    with open(tmp_path / "metadata.json", "w") as f:
        json.dump({"poses": [[0.0, 0.0, 0.0, 1.0, 1.0, 2.0, 3.0], [0.0, 0.0, 0.0, 1.0, 9.0, 9.0, 9.0]]}, f)

    (tmp_path / "agents_trajectory.csv").write_text(TRAJECTORY_CSV)

    return tmp_path
