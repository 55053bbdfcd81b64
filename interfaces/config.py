# keywords: [config, pacing, run settings, type safety]
"""Configuration types for interpreter pacing and command-line runs."""

from typing import NamedTuple, Dict, Optional
from dataclasses import dataclass, field


class PacingConfig(NamedTuple):
    """Fixed delays (seconds) the scheduler waits before each atomic effect.

    These are presentational only; any non-negative values keep the
    interpreter's ordering and verdict behaviour unchanged.
    """
    move_delay: float = 0.4
    turn_delay: float = 0.2


# Zero-delay pacing for tests and headless runs
NO_PACING = PacingConfig(move_delay=0.0, turn_delay=0.0)


@dataclass
class RunConfig:
    """Complete configuration for a command-line run."""
    # Inputs
    catalog_path: str
    challenge_id: str
    program_path: str

    pacing: PacingConfig = field(default_factory=PacingConfig)

    # Output settings
    export_dir: Optional[str] = None
    run_name: str = "run"
    log_to_console: bool = True  # Print every state change
    log_level: str = "WARNING"
    enforce_block_limit: bool = True

    def __post_init__(self):
        if self.pacing.move_delay < 0 or self.pacing.turn_delay < 0:
            raise ValueError("pacing delays must be non-negative")

    def to_dict(self) -> Dict:
        """Convert to dict for export."""
        return {
            "catalog_path": self.catalog_path,
            "challenge_id": self.challenge_id,
            "program_path": self.program_path,
            "pacing": self.pacing._asdict(),
            "export_dir": self.export_dir,
            "run_name": self.run_name,
            "log_to_console": self.log_to_console,
            "log_level": self.log_level,
            "enforce_block_limit": self.enforce_block_limit,
        }
