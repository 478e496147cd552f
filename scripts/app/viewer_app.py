from pathlib import Path
import numpy as np
import open3d as o3d

from app.scene_loader import CAMERA_POSE, POINT_CLOUD, TRAJECTORIES, SceneLoader
from app.viewer_state import ViewerState
from config.viewer_config import ViewerConfig
from domain.pose_aligner import compute_point_cloud_placement
from domain.models.transform_parameters import TransformParameters
from infra.io.project_io_manager import ProjectIOManager


class ViewerApp:
    def __init__(self, project_dir: Path, config: ViewerConfig):
        self.project_dir = project_dir
        self.config = config
        self.io_manager = ProjectIOManager(project_dir=project_dir, paths=config.paths)


    def _create_loader(self) -> SceneLoader:
        return SceneLoader(
            io_manager=self.io_manager,
            max_workers=self.config.loading.max_workers,
            timeout_s=self.config.loading.timeout_s,
        )


    def run(self, web: bool = False, play: bool = False):
        # Imported here so summaries work on machines without a display.
        import open3d.visualization.gui as gui
        from app.viewer_window import ViewerWindow

        if web:
            print("[Info] Serving the viewer to the browser through WebRTC...")
            o3d.visualization.webrtc_server.enable_webrtc()

        app = gui.Application.instance
        app.initialize()

        state = ViewerState(config=self.config)
        if play:
            state.clock.set_playing(True)

        window = ViewerWindow(state=state)
        loader = self._create_loader()

        loader.start(
            on_loaded={
                POINT_CLOUD: window.on_point_cloud_loaded,
                CAMERA_POSE: window.on_camera_pose_loaded,
                TRAJECTORIES: window.on_trajectories_loaded,
            },
            on_error=window.on_load_error,
            dispatch=window.dispatch,
        )

        try:
            app.run()
        finally:
            loader.shutdown(wait=False)
            state.shutdown()


    def summarize(self) -> dict:
        loader = self._create_loader()

        try:
            scene = loader.load_all()
        finally:
            loader.shutdown(wait=True)

        summary = {
            "project_dir": str(self.project_dir),
            "errors": {name: str(e) for name, e in scene.errors.items()},
        }

        if scene.point_cloud is not None:
            summary["point_count"] = len(scene.point_cloud.points)
            summary["point_colors"] = scene.point_cloud.has_colors()

        if scene.camera_pose is not None:
            summary["camera_pose"] = scene.camera_pose.to_values()

        if scene.trajectories is not None:
            summary["agent_count"] = scene.trajectories.agent_count
            summary["agent_lengths"] = scene.trajectories.lengths
            summary["max_frame"] = scene.trajectories.max_frame

        if scene.point_cloud is not None and scene.camera_pose is not None:
            placement = compute_point_cloud_placement(scene.camera_pose, TransformParameters())
            summary["point_cloud_matrix"] = np.round(placement.to_matrix(), 6).tolist()

        return summary
