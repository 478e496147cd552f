from dataclasses import dataclass
from typing import Optional
import numpy as np

from domain.models.agent_trajectories import AgentTrajectories


@dataclass
class MarkerState:
    visible: bool
    position: Optional[np.ndarray] = None # shape=(3,)


def compute_marker_states(trajectories: AgentTrajectories, frame: int) -> list[MarkerState]:
    states = []

    for agent_index in range(trajectories.agent_count):
        position = trajectories.position_at(agent_index, frame)

        if position is None:
            states.append(MarkerState(visible=False))
        else:
            states.append(MarkerState(visible=True, position=position))

    return states


def marker_matrix(position: np.ndarray) -> np.ndarray:
    matrix = np.eye(4)
    matrix[:3, 3] = position

    return matrix
