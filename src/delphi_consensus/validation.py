"""Study settings validation for callers of the consensus engine.

The engine accepts any configuration and any rating. Callers that want strict
behaviour validate here first; nothing is clamped.
"""

from typing import Iterable, List

from .consensus.types import ConsensusConfig
from .errors import InvalidStudySettingsError


def validate_consensus_config(config: ConsensusConfig) -> ConsensusConfig:
    """Check a study's consensus settings.

    Args:
        config: Settings to check

    Returns:
        The same config, for chaining

    Raises:
        InvalidStudySettingsError: If the Likert bounds are inverted or equal,
            or a threshold is out of range
    """
    if config.likert_max <= config.likert_min:
        raise InvalidStudySettingsError(
            f"likert_max ({config.likert_max}) must exceed likert_min ({config.likert_min})"
        )
    if config.iqr_threshold < 0:
        raise InvalidStudySettingsError(
            f"iqr_threshold must be non-negative, got {config.iqr_threshold}"
        )
    if not 0 <= config.net_agreement_threshold <= 100:
        raise InvalidStudySettingsError(
            "net_agreement_threshold must be a percentage in [0, 100], "
            f"got {config.net_agreement_threshold}"
        )
    return config


def find_out_of_range_ratings(
    ratings: Iterable[float],
    config: ConsensusConfig,
) -> List[float]:
    """Return the ratings outside [likert_min, likert_max], in input order."""
    return [r for r in ratings if r < config.likert_min or r > config.likert_max]
