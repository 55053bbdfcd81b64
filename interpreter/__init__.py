# keywords: [interpreter module, public API, block programs]
"""Command interpreter for block programs.

Normalizes command trees, expands them into atomic effects, paces the effects
and reports a single verdict per run.
"""

from typing import List

__version__ = "1.0.0"

from .normalize import MalformedProgramError, normalize_program
from .expand import count_blocks, count_effects, iter_effects
from .scheduler import CancellationToken, ExecutionScheduler
from .verdict import evaluate, outcome_for
from .interpreter import CommandInterpreter

__all__: List[str] = [
    "CommandInterpreter",
    "ExecutionScheduler",
    "CancellationToken",
    "MalformedProgramError",
    "normalize_program",
    "iter_effects",
    "count_effects",
    "count_blocks",
    "evaluate",
    "outcome_for",
    "__version__",
]
