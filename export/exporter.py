# keywords: [exporter, hdf5, run traces, compression]
"""HDF5-based exporter for interpreter run traces."""

import json
import warnings
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import h5py
import numpy as np

from .recorder import RunTrace
from .schema import SCHEMA_VERSION, validate_trace
from .utils import states_to_arrays, to_json_attr


class TraceExporter:
    """Writes run traces for one session into ``<output>/<name>_<timestamp>/traces.h5``."""

    def __init__(
        self,
        session_name: str,
        output_base_dir: str = "traces",
        validate_data: bool = True,
        compression: Optional[str] = "gzip",
        compression_level: int = 4,
    ):
        """Initialize exporter.

        Args:
            session_name: Name of the session (used in the directory name)
            output_base_dir: Base directory for output
            validate_data: Whether to validate traces before saving
            compression: HDF5 compression ('gzip', 'lzf', None)
            compression_level: Compression level (1-9 for gzip)
        """
        self.session_name = session_name
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.validate_data = validate_data

        self.output_dir = Path(output_base_dir) / f"{session_name}_{self.timestamp}"
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self._compression_kwargs: Dict[str, Any] = {}
        if compression:
            self._compression_kwargs["compression"] = compression
            if compression == "gzip":
                self._compression_kwargs["compression_opts"] = compression_level

        self.h5_path = self.output_dir / "traces.h5"
        self.h5_file = h5py.File(self.h5_path, "w")
        self.h5_file.attrs["session_name"] = session_name
        self.h5_file.attrs["timestamp"] = self.timestamp
        self.h5_file.attrs["start_time"] = datetime.now().isoformat()
        self.h5_file.attrs["schema_version"] = SCHEMA_VERSION
        self.h5_file.attrs["compression"] = compression or "none"

        self.runs_group = self.h5_file.create_group("runs")
        self.run_count = 0
        self._world_config: Optional[Dict[str, Any]] = None

    def save_world(self, world_config: Dict[str, Any]):
        """Store the world description; also written to world.json for quick inspection."""
        self._world_config = world_config
        self.h5_file.attrs["world"] = to_json_attr(world_config)
        with open(self.output_dir / "world.json", "w") as f:
            f.write(to_json_attr(world_config))

    def write_trace(self, trace: RunTrace) -> str:
        """Write one run trace and return the name of its group."""
        if self.validate_data:
            rows = self._world_config.get("rows") if self._world_config else None
            cols = self._world_config.get("cols") if self._world_config else None
            for w in validate_trace(trace, rows, cols):
                warnings.warn(f"Validation: {w}")

        name = f"run_{self.run_count:04d}"
        group = self.runs_group.create_group(name)
        group.attrs["run_id"] = self.run_count
        group.attrs["challenge_id"] = trace.challenge_id
        group.attrs["outcome"] = trace.outcome or "unknown"
        # -1 marks a run without a verdict (cancelled)
        group.attrs["success"] = -1 if trace.success is None else int(trace.success)
        group.attrs["state_changes"] = len(trace.states)
        if trace.program is not None:
            group.attrs["program"] = json.dumps(trace.program)
        if trace.initial_state is not None:
            group.attrs["initial_state"] = json.dumps(trace.initial_state.to_dict())

        for key, values in states_to_arrays(trace.states).items():
            self._write_dataset(group, key, values)

        self.run_count += 1
        self.h5_file.flush()
        return name

    def _write_dataset(self, group: h5py.Group, name: str, data: np.ndarray):
        # Chunked compression cannot be applied to empty datasets
        kwargs = self._compression_kwargs if data.size > 0 else {}
        group.create_dataset(name, data=data, **kwargs)

    def close(self):
        """Finalize the file."""
        if self.h5_file is not None:
            self.h5_file.attrs["end_time"] = datetime.now().isoformat()
            self.h5_file.attrs["total_runs"] = self.run_count
            self.h5_file.close()
            self.h5_file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
