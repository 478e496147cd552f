import io
from pathlib import Path
import numpy as np
import pandas as pd

from domain.models.agent_trajectories import AgentTrajectories
from infra.io.load_errors import TrajectoryLoadError


AGENT_COLUMN_TEMPLATE = "agent_{index}_{axis}"
AXES = ("x", "y", "z")


def count_agents(columns) -> int:
    return sum(1 for c in columns if str(c).endswith("_x"))


def parse_agent_trajectories(csv_text: str) -> AgentTrajectories:
    text = csv_text.strip()
    if not text:
        return AgentTrajectories()

    # Rows may be longer than the header (trailing commas); size the frame to the widest row.
    width = max(line.count(",") + 1 for line in text.splitlines())
    raw = pd.read_csv(
        io.StringIO(text),
        header=None,
        names=list(range(width)),
        index_col=False,
        dtype=str,
        keep_default_na=False,
    )

    header = [str(c) for c in raw.iloc[0]]
    df = raw.iloc[1:]

    agent_count = count_agents(header)
    positions = []

    for agent_index in range(agent_count):
        columns = [AGENT_COLUMN_TEMPLATE.format(index=agent_index, axis=axis) for axis in AXES]

        # A missing column makes every row of this agent unparseable.
        if any(c not in header for c in columns):
            positions.append(np.zeros((0, 3)))
            continue

        values = pd.DataFrame({
            c: pd.to_numeric(df[header.index(c)].astype(str).str.strip(), errors='coerce')
            for c in columns
        })
        valid = values.notna().all(axis=1)

        positions.append(values[valid].to_numpy(dtype=np.float64))

    return AgentTrajectories(positions=positions)


class TrajectoryRepository:
    def __init__(self, csv_path: Path):
        self.csv_path = csv_path


    def load(self) -> AgentTrajectories:
        if not self.csv_path.exists():
            raise TrajectoryLoadError(self.csv_path, "trajectory file does not exist")

        try:
            csv_text = self.csv_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TrajectoryLoadError(self.csv_path, f"failed to read trajectory file ({e})") from e

        return parse_agent_trajectories(csv_text)
