from typing import Optional
import numpy as np
from scipy.spatial.transform import Rotation as R

from domain.models.transforms import CameraPose, Placement
from domain.models.transform_parameters import TransformParameters


def compute_base_alignment(camera_pose: CameraPose) -> Placement:
    """
    Express the world-space point cloud in the camera's frame.

    Orientation is the inverse camera rotation, position is the negated camera
    translation rotated by that inverse.
    """
    rotation_inv = R.from_quat(camera_pose.rotation).inv()
    position = rotation_inv.apply(-np.asarray(camera_pose.position, dtype=np.float64))

    return Placement(
        position=position,
        rotation=rotation_inv.as_quat(),
        scale=np.ones(3),
    )


def apply_transform_parameters(base: Placement, params: TransformParameters) -> Placement:
    # Order matters: world offset, then local yaw on top of the base orientation.
    placement = base.translate(params.offset)
    placement = placement.rotate_local(R.from_rotvec([0.0, params.rotation_y, 0.0]))

    return placement.with_scale(params.mirror_scale)


def compute_point_cloud_placement(
    camera_pose: Optional[CameraPose],
    params: TransformParameters,
) -> Optional[Placement]:
    if camera_pose is None:
        return None

    return apply_transform_parameters(compute_base_alignment(camera_pose), params)


class PoseAligner:
    """
    Recomputes the point-cloud placement from scratch whenever an input changes.

    Nothing is applied until both the point cloud and the camera pose are present.
    """
    def __init__(self):
        self.camera_pose: Optional[CameraPose] = None
        self.point_cloud_ready: bool = False
        self.placement: Optional[Placement] = None


    @property
    def ready(self) -> bool:
        return self.point_cloud_ready and self.camera_pose is not None


    def set_camera_pose(self, camera_pose: CameraPose) -> None:
        self.camera_pose = camera_pose


    def set_point_cloud_ready(self, ready: bool = True) -> None:
        self.point_cloud_ready = ready


    def recompute(self, params: TransformParameters) -> Optional[Placement]:
        if not self.ready:
            return None

        self.placement = compute_point_cloud_placement(self.camera_pose, params)
        return self.placement
