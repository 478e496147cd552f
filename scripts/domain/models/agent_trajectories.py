from dataclasses import dataclass, field
from typing import Optional
import numpy as np


@dataclass
class AgentTrajectories:
    """
    Per-agent position sequences indexed by frame.

    Rows without valid numbers for an agent are dropped rather than padded,
    so sequences can have different lengths.
    """
    positions: list[np.ndarray] = field(default_factory=list) # each shape=(N_a, 3)


    def __post_init__(self):
        self.positions = [np.asarray(p, dtype=np.float64).reshape(-1, 3) for p in self.positions]


    def __len__(self) -> int:
        return len(self.positions)


    @property
    def agent_count(self) -> int:
        return len(self.positions)


    @property
    def lengths(self) -> list[int]:
        return [len(p) for p in self.positions]


    @property
    def max_frame(self) -> int:
        if not self.positions:
            return -1

        return max(self.lengths) - 1


    def position_at(self, agent_index: int, frame: int) -> Optional[np.ndarray]:
        agent_positions = self.positions[agent_index]

        if frame < 0 or frame >= len(agent_positions):
            return None

        return agent_positions[frame]
