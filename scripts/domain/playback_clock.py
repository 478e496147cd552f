import math
from dataclasses import dataclass


@dataclass
class PlaybackState:
    frame: int = 0
    playing: bool = False
    speed: float = 1.0


class PlaybackClock:
    """
    Frame counter advanced once per rendered tick.

    Advancing past max_frame loops back to 0. The advanced value is truncated
    every tick, so fractional speed never carries over to the next tick.
    """
    def __init__(self, max_frame: int = -1, speed: float = 1.0, playing: bool = False):
        self.max_frame = max_frame
        self.state = PlaybackState(frame=0, playing=playing, speed=speed)


    @property
    def frame(self) -> int:
        return self.state.frame


    @property
    def playing(self) -> bool:
        return self.state.playing


    @property
    def speed(self) -> float:
        return self.state.speed


    def set_max_frame(self, max_frame: int) -> None:
        self.max_frame = max_frame
        if self.state.frame > max(self.max_frame, 0):
            self.seek(0)


    def set_speed(self, speed: float) -> None:
        self.state.speed = float(speed)


    def set_playing(self, playing: bool) -> None:
        self.state.playing = bool(playing)


    def toggle(self) -> bool:
        self.state.playing = not self.state.playing
        return self.state.playing


    def seek(self, frame: int) -> int:
        upper = max(self.max_frame, 0)
        self.state.frame = min(max(int(frame), 0), upper)
        return self.state.frame


    def step(self, delta: int) -> int:
        return self.seek(self.state.frame + delta)


    def tick(self) -> int:
        if not self.state.playing:
            return self.state.frame

        frame = self.state.frame + self.state.speed
        if frame > self.max_frame:
            frame = 0

        self.state.frame = math.floor(frame)
        return self.state.frame
