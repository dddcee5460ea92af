"""Config -- load simulation parameters from YAML files.

World size, the random seed, display flags and the starting scenario live
in YAML and are parsed into a typed dataclass here.  Behaviour constants
stay with the agents that use them.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for deterministic replay (None for a fresh run).
        rows: Number of grid rows.
        columns: Number of grid columns.
        show_debug_info: Start with sound levels and agent actions shown.
        enable_audio: Start with audio cues enabled.
        ticks_per_second: Simulation speed while the viewer is running.
        scenario: Path of a scenario YAML to build at start-up.
    """

    seed: int | None = 42
    rows: int = 9
    columns: int = 9
    show_debug_info: bool = False
    enable_audio: bool = False
    ticks_per_second: float = 4.0
    scenario: Path | None = None

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        A relative ``scenario`` path is taken relative to the config file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        scenario = data.get("scenario")
        scenario_path: Path | None = None
        if scenario:
            scenario_path = Path(scenario)
            if not scenario_path.is_absolute():
                scenario_path = path.parent / scenario_path

        return cls(
            seed=data.get("seed", cls.seed),
            rows=data.get("rows", cls.rows),
            columns=data.get("columns", cls.columns),
            show_debug_info=data.get("show_debug_info", cls.show_debug_info),
            enable_audio=data.get("enable_audio", cls.enable_audio),
            ticks_per_second=data.get("ticks_per_second", cls.ticks_per_second),
            scenario=scenario_path,
        )
