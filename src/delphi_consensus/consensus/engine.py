"""
Consensus Engine

Computes descriptive statistics for one rating item and classifies it as
having reached consensus under a study's rule and threshold.
"""

from typing import Iterable

from .descriptive import (
    mean,
    median,
    net_agreement_percentage,
    population_std_dev,
    quartile,
)
from .types import ConsensusConfig, ConsensusResult, ConsensusRule


def is_consensus_reached(
    iqr: float,
    agreement_percentage: float,
    config: ConsensusConfig,
) -> bool:
    """Apply the configured consensus rule to computed statistics."""
    if config.rule == ConsensusRule.IQR:
        return iqr <= config.iqr_threshold
    return agreement_percentage >= config.net_agreement_threshold


def compute_consensus(
    ratings: Iterable[float],
    config: ConsensusConfig,
) -> ConsensusResult:
    """
    Calculate consensus statistics for a sample of ratings.

    Pure and total over well-formed input: no I/O, no shared state, and the
    caller's sequence is never mutated. Ratings outside the Likert bounds are
    not rejected and will skew the statistics.

    Args:
        ratings: One rating per participant for a single item. May be empty.
        config: Consensus rule, thresholds and Likert bounds.

    Returns:
        ConsensusResult. An empty sample yields ConsensusResult.empty().
    """
    values = list(ratings)
    if not values:
        return ConsensusResult.empty()

    sorted_values = sorted(values)

    med = median(sorted_values)
    q1 = quartile(sorted_values, 0.25)
    q3 = quartile(sorted_values, 0.75)
    iqr = q3 - q1

    agreement = net_agreement_percentage(values, config.likert_min, config.likert_max)

    return ConsensusResult(
        median=med,
        q1=q1,
        q3=q3,
        iqr=iqr,
        mean=mean(values),
        standard_deviation=population_std_dev(values),
        total_responses=len(values),
        agreement_percentage=agreement,
        consensus_reached=is_consensus_reached(iqr, agreement, config),
    )


def get_consensus_interpretation(result: ConsensusResult) -> str:
    """Get a status label for a result: no_data, consensus or no_consensus."""
    if not result.has_data:
        return "no_data"
    elif result.consensus_reached:
        return "consensus"
    else:
        return "no_consensus"
