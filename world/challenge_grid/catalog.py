# keywords: [challenge catalog, json, block budget, loader]
"""Load challenge catalogs and check block budgets."""

import json
import logging
from pathlib import Path
from typing import Dict, Union

from pydantic import ValidationError

from .types import ChallengeSpec
from .world import ChallengeGridWorld, ConfigurationError

logger = logging.getLogger(__name__)


class ChallengeCatalog:
    """Challenges from a ``{"challenges": [...]}`` JSON document, keyed by id."""

    def __init__(self, challenges: Dict[str, ChallengeSpec]):
        self.challenges = challenges

    def __len__(self) -> int:
        return len(self.challenges)

    def __contains__(self, challenge_id: str) -> bool:
        return challenge_id in self.challenges

    def __iter__(self):
        return iter(self.challenges.values())

    def get(self, challenge_id: str) -> ChallengeSpec:
        if challenge_id not in self.challenges:
            raise KeyError(f"Unknown challenge: {challenge_id}. Available: {list(self.challenges)}")
        return self.challenges[challenge_id]

    def build_world(self, challenge_id: str) -> ChallengeGridWorld:
        return ChallengeGridWorld.from_challenge(self.get(challenge_id))


def load_catalog(path: Union[str, Path]) -> ChallengeCatalog:
    """Load and validate a challenge catalog file.

    Args:
        path: JSON file with a top-level ``challenges`` list

    Returns:
        ChallengeCatalog with every entry validated

    Raises:
        ConfigurationError: if the document or any challenge is invalid
    """
    with open(path, "r") as f:
        document = json.load(f)

    entries = document.get("challenges") if isinstance(document, dict) else None
    if not isinstance(entries, list):
        raise ConfigurationError(f"{path}: expected a top-level 'challenges' list")

    challenges: Dict[str, ChallengeSpec] = {}
    for index, entry in enumerate(entries):
        try:
            spec = ChallengeSpec.model_validate(entry)
        except ValidationError as e:
            raise ConfigurationError(f"{path}: challenge #{index} is invalid: {e}") from e
        if spec.id in challenges:
            raise ConfigurationError(f"{path}: duplicate challenge id {spec.id!r}")
        challenges[spec.id] = spec

    logger.info(f"Loaded {len(challenges)} challenges from {path}")
    return ChallengeCatalog(challenges)


def within_block_limit(blocks_used: int, spec: ChallengeSpec) -> bool:
    """Whether a program of ``blocks_used`` blocks fits the challenge budget."""
    if spec.max_blocks is None:
        return True
    return blocks_used <= spec.max_blocks
