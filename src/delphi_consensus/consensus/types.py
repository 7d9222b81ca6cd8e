"""
Consensus Engine - Type Definitions

Fixed-shape value types consumed and produced by the consensus engine.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Union


class ConsensusRule(Enum):
    """Policy used to judge consensus from computed statistics.

    IQR: consensus when the interquartile range is at or below a threshold
    NET_AGREEMENT: consensus when net agreement is at or above a threshold
    """

    IQR = "iqr"
    NET_AGREEMENT = "net_agreement"

    @classmethod
    def parse(cls, value: Union["ConsensusRule", str]) -> "ConsensusRule":
        """Parse a rule from an enum member or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = [rule.value for rule in cls]
            raise ValueError(f"invalid consensus rule '{value}', must be one of {valid}")


DEFAULT_RULE = ConsensusRule.IQR
DEFAULT_IQR_THRESHOLD = 1.0
DEFAULT_NET_AGREEMENT_THRESHOLD = 75.0
DEFAULT_LIKERT_MIN = 1
DEFAULT_LIKERT_MAX = 9


@dataclass(frozen=True)
class ConsensusConfig:
    """
    Consensus rule configuration for one study.

    Bounds are not validated here; see delphi_consensus.validation.
    """

    rule: ConsensusRule = DEFAULT_RULE
    """Which statistic decides consensus."""

    iqr_threshold: float = DEFAULT_IQR_THRESHOLD
    """Consensus reached when IQR <= this value (rule=iqr)."""

    net_agreement_threshold: float = DEFAULT_NET_AGREEMENT_THRESHOLD
    """Consensus reached when agreement percentage >= this value (rule=net_agreement)."""

    likert_min: int = DEFAULT_LIKERT_MIN
    likert_max: int = DEFAULT_LIKERT_MAX

    def __post_init__(self):
        """Coerce a stored rule name (e.g. "iqr") to ConsensusRule."""
        object.__setattr__(self, "rule", ConsensusRule.parse(self.rule))

    @classmethod
    def from_study_settings(cls, settings: Mapping[str, Any]) -> "ConsensusConfig":
        """Build a config from persisted study columns.

        Args:
            settings: Mapping with any of consensus_rule, iqr_threshold,
                net_agreement_threshold, likert_min, likert_max.

        Returns:
            ConsensusConfig, with defaults for missing or null columns
        """

        def _get(key: str, default: Any) -> Any:
            value = settings.get(key)
            return default if value is None else value

        return cls(
            rule=ConsensusRule.parse(_get("consensus_rule", DEFAULT_RULE)),
            iqr_threshold=float(_get("iqr_threshold", DEFAULT_IQR_THRESHOLD)),
            net_agreement_threshold=float(
                _get("net_agreement_threshold", DEFAULT_NET_AGREEMENT_THRESHOLD)
            ),
            likert_min=int(_get("likert_min", DEFAULT_LIKERT_MIN)),
            likert_max=int(_get("likert_max", DEFAULT_LIKERT_MAX)),
        )

    def to_study_settings(self) -> Dict[str, Any]:
        return {
            "consensus_rule": self.rule.value,
            "iqr_threshold": self.iqr_threshold,
            "net_agreement_threshold": self.net_agreement_threshold,
            "likert_min": self.likert_min,
            "likert_max": self.likert_max,
        }


@dataclass(frozen=True)
class ConsensusResult:
    """
    Statistics and verdict for one rating item.

    Created fresh on every computation. A result with total_responses == 0
    means "no data yet", not "consensus failed".
    """

    median: float
    q1: float
    q3: float
    iqr: float
    mean: float

    standard_deviation: float
    """Population standard deviation (divides by n)."""

    total_responses: int

    agreement_percentage: float
    """Net agreement: |high - low| / n * 100."""

    consensus_reached: bool

    @classmethod
    def empty(cls) -> "ConsensusResult":
        """Zero-valued, non-consensus result for an empty sample."""
        return cls(
            median=0.0,
            q1=0.0,
            q3=0.0,
            iqr=0.0,
            mean=0.0,
            standard_deviation=0.0,
            total_responses=0,
            agreement_percentage=0.0,
            consensus_reached=False,
        )

    @property
    def has_data(self) -> bool:
        return self.total_responses > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)
