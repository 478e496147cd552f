from collections import deque
from dataclasses import dataclass
from typing import Deque, Union


@dataclass(frozen=True)
class TransformParametersChanged:
    name: str
    value: Union[float, bool]


@dataclass(frozen=True)
class TransformParametersReset:
    pass


ViewerEvent = Union[TransformParametersChanged, TransformParametersReset]


class EventQueue:
    """FIFO of control events, filled by the GUI and drained on the next tick."""
    def __init__(self):
        self._events: Deque[ViewerEvent] = deque()


    def __len__(self) -> int:
        return len(self._events)


    def publish(self, event: ViewerEvent) -> None:
        self._events.append(event)


    def drain(self) -> list[ViewerEvent]:
        events = []
        while self._events:
            events.append(self._events.popleft())

        return events
