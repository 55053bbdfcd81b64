# keywords: [challenge grid world, block game environment]
"""Challenge Grid World - bounded grid with goal or collectible objectives."""

from .types import CellSpec, StartSpec, GridSpec, ChallengeSpec
from .world import ChallengeGridWorld, ConfigurationError, DIR_VECTORS, turn_direction
from .catalog import ChallengeCatalog, load_catalog, within_block_limit

__version__ = "1.0.0"
__all__ = [
    "ChallengeGridWorld",
    "ConfigurationError",
    "DIR_VECTORS",
    "turn_direction",
    "CellSpec",
    "StartSpec",
    "GridSpec",
    "ChallengeSpec",
    "ChallengeCatalog",
    "load_catalog",
    "within_block_limit",
]
