from pathlib import Path


class SceneLoadError(Exception):
    """A scene input could not be loaded."""
    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class PointCloudLoadError(SceneLoadError):
    pass


class CameraPoseLoadError(SceneLoadError):
    pass


class TrajectoryLoadError(SceneLoadError):
    pass
