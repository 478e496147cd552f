import threading
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Any, Callable, Optional

from infra.io.load_errors import SceneLoadError
from infra.io.project_io_manager import ProjectIOManager


POINT_CLOUD = "point_cloud"
CAMERA_POSE = "camera_pose"
TRAJECTORIES = "trajectories"


@dataclass
class LoadedScene:
    point_cloud: Any = None
    camera_pose: Any = None
    trajectories: Any = None
    errors: Optional[dict[str, Exception]] = None


def run_inline(callback: Callable[[], None]) -> None:
    callback()


class SceneLoader:
    """
    Loads the point cloud, camera pose and trajectories as independent tasks.

    Each result is handed to its callback through `dispatch`, which the GUI
    sets to post onto its main thread. Callers that need both the point cloud
    and the pose must tolerate either arriving first.
    """
    def __init__(
        self,
        io_manager: ProjectIOManager,
        max_workers: int = 3,
        timeout_s: Optional[float] = None,
    ):
        self.io_manager = io_manager
        self.timeout_s = timeout_s
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="scene-loader")
        self._watchdog: Optional[threading.Timer] = None
        self._futures: dict[str, Future] = {}


    def _loaders(self) -> dict[str, tuple[Callable[[], Any], Any]]:
        return {
            POINT_CLOUD: (self.io_manager.get_point_cloud_repo().load, self.io_manager.path_config.get_point_cloud_path()),
            CAMERA_POSE: (self.io_manager.get_camera_pose_repo().load, self.io_manager.path_config.get_camera_metadata_path()),
            TRAJECTORIES: (self.io_manager.get_trajectory_repo().load, self.io_manager.path_config.get_agent_trajectory_path()),
        }


    def start(
        self,
        on_loaded: dict[str, Callable[[Any], None]],
        on_error: Callable[[str, Exception], None],
        dispatch: Callable[[Callable[[], None]], None] = run_inline,
    ) -> dict[str, Future]:
        for name, (load, _) in self._loaders().items():
            print(f"[Info] Loading {name}...")
            future = self.executor.submit(load)
            future.add_done_callback(self._make_done_callback(name, on_loaded.get(name), on_error, dispatch))
            self._futures[name] = future

        if self.timeout_s is not None:
            self._watchdog = threading.Timer(self.timeout_s, self._report_stalled, args=(on_error, dispatch))
            self._watchdog.daemon = True
            self._watchdog.start()

        return dict(self._futures)


    def _make_done_callback(self, name, callback, on_error, dispatch):
        def done(future: Future):
            if future.cancelled():
                return

            error = future.exception()
            if error is not None:
                print(f"[Error] Failed to load {name}: {error}")
                dispatch(lambda: on_error(name, error))
                return

            result = future.result()
            print(f"[Info] Loaded {name}.")
            if callback is not None:
                dispatch(lambda: callback(result))

        return done


    def _report_stalled(self, on_error, dispatch) -> None:
        paths = {name: path for name, (_, path) in self._loaders().items()}

        for name, future in self._futures.items():
            if future.done():
                continue

            error = SceneLoadError(paths[name], f"still loading after {self.timeout_s} s")
            print(f"[Warning] {name} load timed out: {error}")
            dispatch(lambda name=name, error=error: on_error(name, error))


    def load_all(self) -> LoadedScene:
        """Load everything and block until all three tasks finished or timed out."""
        scene = LoadedScene(errors={})
        loaders = self._loaders()

        futures = {name: self.executor.submit(load) for name, (load, _) in loaders.items()}

        for name, future in futures.items():
            try:
                setattr(scene, name, future.result(timeout=self.timeout_s))
                print(f"[Info] Loaded {name}.")
            except FutureTimeoutError:
                error = SceneLoadError(loaders[name][1], f"still loading after {self.timeout_s} s")
                print(f"[Warning] {name} load timed out: {error}")
                scene.errors[name] = error
            except Exception as e:
                print(f"[Error] Failed to load {name}: {e}")
                scene.errors[name] = e

        return scene


    def cancel_watchdog(self) -> None:
        if self._watchdog is not None:
            self._watchdog.cancel()
            self._watchdog = None


    def shutdown(self, wait: bool = False) -> None:
        """Stop the watchdog. Without waiting, loads that have not started are dropped."""
        self.cancel_watchdog()
        self.executor.shutdown(wait=wait, cancel_futures=not wait)
