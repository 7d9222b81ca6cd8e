"""
Delphi Consensus Engine

Pure statistics for Likert-scale rating items:

- Median, quartiles (closest-rank interpolation) and interquartile range
- Mean and population standard deviation
- Net agreement: gap between top-third and bottom-third responders
- Consensus verdict under the IQR or net agreement rule
"""

from .types import (
    ConsensusRule,
    ConsensusConfig,
    ConsensusResult,
)

from .engine import (
    compute_consensus,
    is_consensus_reached,
    get_consensus_interpretation,
)

from .descriptive import (
    median,
    quartile,
    mean,
    population_std_dev,
    net_agreement_percentage,
)

__all__ = [
    # Types
    "ConsensusRule",
    "ConsensusConfig",
    "ConsensusResult",
    # Engine
    "compute_consensus",
    "is_consensus_reached",
    "get_consensus_interpretation",
    # Statistics
    "median",
    "quartile",
    "mean",
    "population_std_dev",
    "net_agreement_percentage",
]
