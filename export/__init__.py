# keywords: [export module, public API, run traces, versioning]
"""Run Trace Export Module

Records interpreter callbacks into run traces and persists them to HDF5 for
replay and analysis.
"""

from typing import List

# Version of the export module. Define this FIRST to avoid circular imports.
__version__ = "1.0.0"

from .recorder import RunRecorder, RunTrace
from .exporter import TraceExporter
from .loader import TraceLoader
from .schema import SCHEMA_VERSION, validate_trace
from .utils import program_to_dicts

# Public API definition
__all__: List[str] = [
    "RunRecorder",
    "RunTrace",
    "TraceExporter",
    "TraceLoader",
    "SCHEMA_VERSION",
    "validate_trace",
    "program_to_dicts",
    "__version__",
]
