from dataclasses import dataclass, field
from typing import Optional
import open3d as o3d

from config.viewer_config import ViewerConfig
from domain.events import EventQueue, TransformParametersChanged, TransformParametersReset, ViewerEvent
from domain.marker_states import MarkerState, compute_marker_states
from domain.models.agent_trajectories import AgentTrajectories
from domain.models.transform_parameters import TransformParameters
from domain.models.transforms import CameraPose, Placement
from domain.playback_clock import PlaybackClock
from domain.pose_aligner import PoseAligner


@dataclass
class TickUpdate:
    frame: int
    frame_changed: bool
    markers: list[MarkerState] = field(default_factory=list)
    placement: Optional[Placement] = None # set only when the placement changed since the last tick


class ViewerState:
    """
    Everything the viewer mutates at runtime.

    Only touched from the GUI thread; background loads hand their results
    over through the setters below.
    """
    def __init__(self, config: Optional[ViewerConfig] = None):
        self.config = config or ViewerConfig()

        self.params = TransformParameters()
        self.aligner = PoseAligner()
        self.events = EventQueue()

        self.point_cloud: Optional[o3d.geometry.PointCloud] = None
        self.trajectories = AgentTrajectories()
        self.clock = PlaybackClock(
            max_frame=self.trajectories.max_frame,
            speed=self.config.playback.speed,
            playing=self.config.playback.start_playing,
        )

        self.diagnostics: list[str] = []
        self.closed = False

        self._placement_dirty = False
        self.markers_dirty = True
        self.last_frame: Optional[int] = None


    @property
    def camera_pose(self) -> Optional[CameraPose]:
        return self.aligner.camera_pose


    @property
    def placement(self) -> Optional[Placement]:
        return self.aligner.placement


    def set_point_cloud(self, point_cloud: o3d.geometry.PointCloud) -> Optional[Placement]:
        self.point_cloud = point_cloud
        self.aligner.set_point_cloud_ready(True)

        return self.recompute_placement()


    def set_camera_pose(self, camera_pose: CameraPose) -> Optional[Placement]:
        self.aligner.set_camera_pose(camera_pose)

        return self.recompute_placement()


    def set_trajectories(self, trajectories: AgentTrajectories) -> None:
        self.trajectories = trajectories
        self.clock.set_max_frame(trajectories.max_frame)
        self.markers_dirty = True


    def add_diagnostic(self, message: str) -> None:
        self.diagnostics.append(message)


    def clear_diagnostics(self, source: str) -> None:
        """Drop messages reported for `source`, e.g. a timeout for a load that finished late."""
        self.diagnostics = [d for d in self.diagnostics if not d.startswith(f"{source}: ")]


    def recompute_placement(self) -> Optional[Placement]:
        placement = self.aligner.recompute(self.params)

        if placement is not None:
            self._placement_dirty = True

        return placement


    def apply_event(self, event: ViewerEvent) -> None:
        if isinstance(event, TransformParametersChanged):
            self.params.set_value(event.name, event.value)
        elif isinstance(event, TransformParametersReset):
            self.params.reset()
        else:
            raise TypeError(f"Unsupported viewer event: {event!r}")


    def process_events(self) -> bool:
        events = self.events.drain()

        for event in events:
            self.apply_event(event)

        if events:
            self.recompute_placement()

        return len(events) > 0


    def take_placement_update(self) -> Optional[Placement]:
        if not self._placement_dirty:
            return None

        self._placement_dirty = False
        return self.aligner.placement


    def shutdown(self) -> None:
        self.closed = True
        self.events.drain()
        self.point_cloud = None
        self.clock.set_playing(False)


def tick_viewer(state: ViewerState) -> TickUpdate:
    """Advance one rendered frame: apply pending control events, then playback."""
    state.process_events()

    frame = state.clock.tick()
    frame_changed = frame != state.last_frame or state.markers_dirty

    markers = compute_marker_states(state.trajectories, frame) if frame_changed else []

    state.last_frame = frame
    state.markers_dirty = False

    return TickUpdate(
        frame=frame,
        frame_changed=frame_changed,
        markers=markers,
        placement=state.take_placement_update(),
    )
