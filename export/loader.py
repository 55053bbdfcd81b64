# keywords: [loader, hdf5, run traces, analysis]
"""Load run traces back from HDF5 exports."""

import json
from pathlib import Path
from typing import Any, Dict, List, Union

import h5py
import numpy as np

from interfaces import ActorState

from .recorder import RunTrace
from .utils import arrays_to_states

STATE_DATASETS = (
    "row", "col", "direction", "step_count",
    "body_length", "collected_length", "body_cells", "collected_cells",
)


def _as_str(value: Any) -> str:
    return value.decode() if isinstance(value, bytes) else str(value)


class TraceLoader:
    """Load and access run traces from a session directory or ``.h5`` file."""

    def __init__(self, session_dir: Union[str, Path]):
        """Initialize loader with a session directory or H5 file path."""
        path = Path(session_dir)

        if path.is_file() and path.suffix in [".h5", ".hdf5"]:
            self.h5_path = path
        else:
            h5_files = list(path.glob("*.h5")) + list(path.glob("*.hdf5"))
            if not h5_files:
                raise FileNotFoundError(f"No HDF5 file found in {path}")
            if len(h5_files) > 1:
                if Path(path / "traces.h5") in h5_files:
                    self.h5_path = Path(path / "traces.h5")
                else:
                    raise FileNotFoundError(
                        f"Multiple HDF5 files found in {path}. Please specify one directly."
                    )
            else:
                self.h5_path = h5_files[0]

        self.h5_file = h5py.File(self.h5_path, "r")

    def get_metadata(self) -> Dict[str, Any]:
        """Get session metadata from root attributes."""
        metadata = {}
        for key, value in self.h5_file.attrs.items():
            if key == "world":
                continue
            metadata[key] = value.item() if isinstance(value, np.generic) else value
        return metadata

    def get_world(self) -> Dict[str, Any]:
        if "world" not in self.h5_file.attrs:
            return {}
        return json.loads(_as_str(self.h5_file.attrs["world"]))

    def list_runs(self) -> List[str]:
        return sorted(self.h5_file["runs"].keys())

    def get_run(self, run: Union[int, str]) -> RunTrace:
        """Rebuild a RunTrace by index or group name."""
        name = run if isinstance(run, str) else f"run_{run:04d}"
        if name not in self.h5_file["runs"]:
            raise KeyError(f"Run {name} not found in {self.h5_path}")
        group = self.h5_file["runs"][name]

        arrays = {key: group[key][:] for key in STATE_DATASETS}
        success = int(group.attrs["success"])
        initial_state = None
        if "initial_state" in group.attrs:
            initial_state = ActorState.from_dict(json.loads(_as_str(group.attrs["initial_state"])))
        program = None
        if "program" in group.attrs:
            program = json.loads(_as_str(group.attrs["program"]))

        return RunTrace(
            challenge_id=_as_str(group.attrs["challenge_id"]),
            initial_state=initial_state,
            states=arrays_to_states(arrays),
            success=None if success < 0 else bool(success),
            outcome=_as_str(group.attrs["outcome"]),
            program=program,
        )

    def get_trajectory(self, run: Union[int, str]) -> np.ndarray:
        """Head positions of a run as an ``(n, 2)`` array."""
        name = run if isinstance(run, str) else f"run_{run:04d}"
        group = self.h5_file["runs"][name]
        return np.stack([group["row"][:], group["col"][:]], axis=1)

    def close(self):
        self.h5_file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
