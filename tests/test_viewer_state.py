import numpy as np
import open3d as o3d
import pytest

from app.viewer_state import ViewerState, tick_viewer
from config.viewer_config import ViewerConfig
from domain.events import TransformParametersChanged, TransformParametersReset
from domain.models.agent_trajectories import AgentTrajectories
from domain.models.transforms import CameraPose


POSE = CameraPose.from_values([0.0, 0.0, 0.0, 1.0, 1.0, 2.0, 3.0])


def make_point_cloud() -> o3d.geometry.PointCloud:
    return o3d.geometry.PointCloud(o3d.utility.Vector3dVector(np.zeros((3, 3))))


def test_placement_waits_for_point_cloud_and_pose() -> None:
    state = ViewerState()

    assert state.set_camera_pose(POSE) is None
    assert tick_viewer(state).placement is None

    placement = state.set_point_cloud(make_point_cloud())

    assert placement is not None
    np.testing.assert_allclose(placement.position, [-1.0, -2.0, -3.0])


def test_placement_update_is_reported_once() -> None:
    state = ViewerState()
    state.set_point_cloud(make_point_cloud())
    state.set_camera_pose(POSE)

    assert tick_viewer(state).placement is not None
    assert tick_viewer(state).placement is None


def test_parameter_events_recompute_on_next_tick() -> None:
    state = ViewerState()
    state.set_point_cloud(make_point_cloud())
    state.set_camera_pose(POSE)
    tick_viewer(state)

    state.events.publish(TransformParametersChanged(name="offset_x", value=2.0))
    state.events.publish(TransformParametersChanged(name="mirror_z", value=True))
    update = tick_viewer(state)

    np.testing.assert_allclose(update.placement.position, [1.0, -2.0, -3.0])
    np.testing.assert_allclose(update.placement.scale, [1.0, 1.0, -1.0])
    assert len(state.events) == 0


def test_reset_event_restores_defaults() -> None:
    state = ViewerState()
    state.events.publish(TransformParametersChanged(name="rotation_y", value=1.0))
    state.events.publish(TransformParametersReset())
    tick_viewer(state)

    assert state.params.rotation_y == 0.0


def test_unknown_parameter_is_rejected() -> None:
    state = ViewerState()
    state.events.publish(TransformParametersChanged(name="scale", value=2.0))

    with pytest.raises(KeyError):
        tick_viewer(state)


def test_tick_plays_markers_and_loops() -> None:
    state = ViewerState(ViewerConfig.parse({"playback": {"start_playing": True}}))
    state.set_trajectories(AgentTrajectories(positions=[
        [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]],
        [[5.0, 5.0, 5.0]],
    ]))

    first = tick_viewer(state)
    assert first.frame == 1
    assert [m.visible for m in first.markers] == [True, False]

    second = tick_viewer(state)
    assert second.frame == 0
    assert [m.visible for m in second.markers] == [True, True]


def test_markers_only_recomputed_when_frame_changes() -> None:
    state = ViewerState()
    state.set_trajectories(AgentTrajectories(positions=[[[0.0, 0.0, 0.0]]]))

    assert tick_viewer(state).frame_changed
    update = tick_viewer(state)
    assert not update.frame_changed
    assert update.markers == []


def test_shutdown_stops_playback_and_clears_state() -> None:
    state = ViewerState()
    state.set_point_cloud(make_point_cloud())
    state.clock.set_playing(True)
    state.events.publish(TransformParametersReset())

    state.shutdown()

    assert state.closed
    assert state.point_cloud is None
    assert not state.clock.playing
    assert len(state.events) == 0


def test_late_load_clears_its_timeout_message() -> None:
    state = ViewerState()
    state.add_diagnostic("camera_pose: metadata.json: still loading after 1.0 s")
    state.add_diagnostic("trajectories: agents_trajectory.csv: trajectory file does not exist")

    state.clear_diagnostics("camera_pose")

    assert state.diagnostics == ["trajectories: agents_trajectory.csv: trajectory file does not exist"]


def test_event_queue_keeps_every_pending_event() -> None:
    state = ViewerState()
    for i in range(5000):
        state.events.publish(TransformParametersChanged(name="offset_x", value=float(i)))
    state.events.publish(TransformParametersChanged(name="mirror_y", value=True))

    assert len(state.events) == 5001
    state.process_events()

    assert state.params.offset_x == 4999.0
    assert state.params.mirror_y is True
