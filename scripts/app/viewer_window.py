from typing import Callable
import numpy as np
import open3d as o3d
import open3d.visualization.gui as gui
import open3d.visualization.rendering as rendering

from app.scene_builder import (
    MARKER_NAME,
    POINT_CLOUD_NAME,
    build_ground_geometries,
    build_marker_mesh,
    build_trajectory_point_clouds,
    point_cloud_material,
    unlit_material,
)
from app.scene_loader import CAMERA_POSE, POINT_CLOUD, TRAJECTORIES
from app.viewer_state import TickUpdate, ViewerState, tick_viewer
from domain.events import TransformParametersChanged, TransformParametersReset
from domain.marker_states import marker_matrix
from domain.models.agent_trajectories import AgentTrajectories
from domain.models.transforms import CameraPose


class ViewerWindow:
    def __init__(self, state: ViewerState):
        self.state = state
        self.config = state.config
        self.marker_names: list[str] = []
        self._aligned_once = False

        app = gui.Application.instance
        self.window = app.create_window(self.config.window.title, self.config.window.width, self.config.window.height)
        em = self.window.theme.font_size

        self.scene_widget = gui.SceneWidget()
        self.scene_widget.scene = rendering.Open3DScene(self.window.renderer)
        self.scene_widget.scene.set_background(self.config.window.background_color)
        self.scene_widget.scene.show_axes(False)

        self.panel = gui.Vert(0.5 * em, gui.Margins(0.5 * em, 0.5 * em, 0.5 * em, 0.5 * em))
        self._build_transform_controls(em)
        self._build_playback_controls(em)

        self.status_label = gui.Label("Loading...")
        self.panel.add_child(self.status_label)

        self.window.add_child(self.scene_widget)
        self.window.add_child(self.panel)

        self.window.set_on_layout(self._on_layout)
        self.window.set_on_tick_event(self._on_tick)
        self.window.set_on_close(self._on_close)

        self._add_static_geometry()
        self._setup_camera()


    # ------------------------------------------------------------------ controls

    def _add_slider_row(self, grid: gui.VGrid, label: str, slider_type, lo: float, hi: float, value: float, on_change):
        slider = gui.Slider(slider_type)
        slider.set_limits(lo, hi)
        if slider_type == gui.Slider.INT:
            slider.int_value = int(value)
        else:
            slider.double_value = value
        slider.set_on_value_changed(on_change)

        grid.add_child(gui.Label(label))
        grid.add_child(slider)

        return slider


    def _build_transform_controls(self, em: float):
        limits = self.config.transform_limits
        params = self.state.params

        folder = gui.CollapsableVert("PLY Transform", 0.25 * em, gui.Margins(em, 0, 0, 0))
        grid = gui.VGrid(2, 0.25 * em)

        self.offset_sliders = {}
        for name, label in (("offset_x", "Offset X"), ("offset_y", "Offset Y"), ("offset_z", "Offset Z")):
            self.offset_sliders[name] = self._add_slider_row(
                grid, label, gui.Slider.DOUBLE, limits.offset_min, limits.offset_max,
                getattr(params, name), self._publish_change(name),
            )

        self.rotation_slider = self._add_slider_row(
            grid, "Rotation Y", gui.Slider.DOUBLE, limits.rotation_min, limits.rotation_max,
            params.rotation_y, self._publish_change("rotation_y"),
        )
        folder.add_child(grid)

        self.mirror_checkboxes = {}
        for name, label in (("mirror_x", "Mirror X"), ("mirror_y", "Mirror Y"), ("mirror_z", "Mirror Z")):
            checkbox = gui.Checkbox(label)
            checkbox.checked = getattr(params, name)
            checkbox.set_on_checked(self._publish_change(name))
            folder.add_child(checkbox)
            self.mirror_checkboxes[name] = checkbox

        reset_button = gui.Button("Reset Transform")
        reset_button.set_on_clicked(self._on_reset_transform)
        folder.add_child(reset_button)

        folder.set_is_open(True)
        self.panel.add_child(folder)


    def _build_playback_controls(self, em: float):
        playback = self.config.playback

        folder = gui.CollapsableVert("Playback", 0.25 * em, gui.Margins(em, 0, 0, 0))

        self.play_switch = gui.ToggleSwitch("Play / Pause")
        self.play_switch.is_on = self.state.clock.playing
        self.play_switch.set_on_clicked(self._on_play_toggled)
        folder.add_child(self.play_switch)

        grid = gui.VGrid(2, 0.25 * em)
        self.speed_slider = self._add_slider_row(
            grid, "Speed", gui.Slider.DOUBLE, playback.min_speed, playback.max_speed,
            self.state.clock.speed, self._on_speed_changed,
        )
        self.frame_slider = self._add_slider_row(
            grid, "Frame", gui.Slider.INT, 0, 0, 0, lambda _: None,
        )
        self.frame_slider.enabled = False
        folder.add_child(grid)

        step_row = gui.Horiz(0.25 * em)
        prev_button = gui.Button("<")
        prev_button.set_on_clicked(lambda: self._on_step(-1))
        next_button = gui.Button(">")
        next_button.set_on_clicked(lambda: self._on_step(1))
        self.frame_label = gui.Label("Frame 0 / -1")
        step_row.add_child(prev_button)
        step_row.add_child(next_button)
        step_row.add_child(self.frame_label)
        folder.add_child(step_row)

        folder.set_is_open(True)
        self.panel.add_child(folder)


    def _publish_change(self, name: str):
        def publish(value):
            self.state.events.publish(TransformParametersChanged(name=name, value=value))

        return publish


    def _on_reset_transform(self):
        self.state.events.publish(TransformParametersReset())

        for slider in self.offset_sliders.values():
            slider.double_value = 0.0
        self.rotation_slider.double_value = 0.0
        for checkbox in self.mirror_checkboxes.values():
            checkbox.checked = False


    def _on_play_toggled(self, is_on: bool):
        self.state.clock.set_playing(is_on)


    def _on_speed_changed(self, value: float):
        self.state.clock.set_speed(value)


    def _on_step(self, delta: int):
        self.state.clock.set_playing(False)
        self.play_switch.is_on = False
        self.state.clock.step(delta)


    # ------------------------------------------------------------------ scene

    def _add_static_geometry(self):
        for name, geometry, material in build_ground_geometries(self.config.ground):
            self.scene_widget.scene.add_geometry(name, geometry, material)


    def _setup_camera(self):
        camera_config = self.config.camera
        bounds = o3d.geometry.AxisAlignedBoundingBox(
            np.full(3, -max(self.config.ground.circle_radii, default=10.0)),
            np.full(3, max(self.config.ground.circle_radii, default=10.0)),
        )
        self.scene_widget.setup_camera(camera_config.fov_deg, bounds, np.array(camera_config.target))
        self.scene_widget.scene.camera.look_at(
            np.array(camera_config.target),
            np.array(camera_config.position),
            np.array(camera_config.up),
        )


    def _apply_projection(self, width: int, height: int):
        camera_config = self.config.camera
        aspect = width / height if height > 0 else 1.0

        self.scene_widget.scene.camera.set_projection(
            camera_config.fov_deg, aspect, camera_config.near, camera_config.far,
            rendering.Camera.FovType.Vertical,
        )


    def _on_layout(self, layout_context):
        content = self.window.content_rect
        panel_width = min(self.config.window.panel_width, content.width)

        self.scene_widget.frame = gui.Rect(content.x, content.y, content.width - panel_width, content.height)
        self.panel.frame = gui.Rect(content.get_right() - panel_width, content.y, panel_width, content.height)

        self._apply_projection(self.scene_widget.frame.width, self.scene_widget.frame.height)


    # ------------------------------------------------------------------ loads

    def on_point_cloud_loaded(self, point_cloud: o3d.geometry.PointCloud):
        scene = self.scene_widget.scene
        if scene.has_geometry(POINT_CLOUD_NAME):
            scene.remove_geometry(POINT_CLOUD_NAME)

        scene.add_geometry(POINT_CLOUD_NAME, point_cloud, point_cloud_material(point_cloud, self.config.point_cloud))
        self.state.clear_diagnostics(POINT_CLOUD)
        self.state.set_point_cloud(point_cloud)
        self._refresh_status()


    def on_camera_pose_loaded(self, camera_pose: CameraPose):
        self.state.clear_diagnostics(CAMERA_POSE)
        self.state.set_camera_pose(camera_pose)
        self._refresh_status()


    def on_trajectories_loaded(self, trajectories: AgentTrajectories):
        scene = self.scene_widget.scene

        for name, pcd, material in build_trajectory_point_clouds(trajectories, self.config.trajectories):
            scene.add_geometry(name, pcd, material)

        marker_mesh = build_marker_mesh(self.config.markers)
        marker_material = unlit_material(color=self.config.markers.color)
        self.marker_names = []
        for index in range(trajectories.agent_count):
            name = MARKER_NAME.format(index=index)
            scene.add_geometry(name, marker_mesh, marker_material)
            scene.show_geometry(name, False)
            self.marker_names.append(name)

        self.state.clear_diagnostics(TRAJECTORIES)
        self.state.set_trajectories(trajectories)
        self.frame_slider.set_limits(0, max(trajectories.max_frame, 0))
        print(f"[Info] {trajectories.agent_count} agents, max frame {trajectories.max_frame}")
        self._refresh_status()


    def on_load_error(self, name: str, error: Exception):
        self.state.add_diagnostic(f"{name}: {error}")
        self._refresh_status()


    def _refresh_status(self):
        if self.state.diagnostics:
            self.status_label.text = "\n".join(f"[Error] {d}" for d in self.state.diagnostics)
        elif self.state.aligner.ready:
            self.status_label.text = "Point cloud aligned to camera pose."
        else:
            self.status_label.text = "Loading..."


    # ------------------------------------------------------------------ tick

    def apply_tick_update(self, update: TickUpdate):
        scene = self.scene_widget.scene

        if update.placement is not None and scene.has_geometry(POINT_CLOUD_NAME):
            scene.set_geometry_transform(POINT_CLOUD_NAME, update.placement.to_matrix())
            if not self._aligned_once:
                print("[Info] PLY aligned to camera space.")
                self._aligned_once = True
                self._refresh_status()

        if update.frame_changed:
            for name, marker in zip(self.marker_names, update.markers):
                if marker.visible:
                    scene.set_geometry_transform(name, marker_matrix(marker.position))
                scene.show_geometry(name, marker.visible)

            self.frame_slider.int_value = update.frame
            self.frame_label.text = f"Frame {update.frame} / {self.state.trajectories.max_frame}"


    def _on_tick(self) -> bool:
        if self.state.closed:
            return False

        update = tick_viewer(self.state)
        self.apply_tick_update(update)

        return update.frame_changed or update.placement is not None


    def _on_close(self) -> bool:
        self.state.shutdown()
        return True


    def dispatch(self, callback: Callable[[], None]):
        gui.Application.instance.post_to_main_thread(self.window, callback)
