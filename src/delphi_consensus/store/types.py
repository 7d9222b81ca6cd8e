"""Delphi study record types.

Minimal records the round orchestrator and results export consume. Each
serializes to and from plain dicts for the JSON data file and backups.
"""

import logging
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from ..consensus.types import (
    DEFAULT_IQR_THRESHOLD,
    DEFAULT_LIKERT_MAX,
    DEFAULT_LIKERT_MIN,
    DEFAULT_NET_AGREEMENT_THRESHOLD,
    ConsensusConfig,
)

logger = logging.getLogger(__name__)

BACKUP_VERSION = "1.0.0"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class _Record:
    """Dict conversion shared by the record dataclasses."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        # Ignore columns from newer schema versions
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class Study(_Record):
    """A Delphi study and its consensus settings.

    Attributes:
        id: Study identifier
        title: Display title
        description: Free-text description
        consensus_rule: 'iqr' or 'net_agreement'
        iqr_threshold: Consensus when IQR <= threshold
        net_agreement_threshold: Consensus when agreement % >= threshold
        likert_min: Lowest rating on the scale
        likert_max: Highest rating on the scale
        current_round: Round currently open for rating
        created_at: ISO 8601 creation timestamp
    """

    id: str
    title: str
    description: str = ""
    consensus_rule: str = "iqr"
    iqr_threshold: float = DEFAULT_IQR_THRESHOLD
    net_agreement_threshold: float = DEFAULT_NET_AGREEMENT_THRESHOLD
    likert_min: int = DEFAULT_LIKERT_MIN
    likert_max: int = DEFAULT_LIKERT_MAX
    current_round: int = 1
    created_at: str = ""

    def consensus_config(self) -> ConsensusConfig:
        return ConsensusConfig.from_study_settings(self.to_dict())


@dataclass(frozen=True)
class DelphiItem(_Record):
    """A ratable statement derived from panel proposals.

    final_median and final_iqr stay None until a round has been computed.
    """

    id: str
    study_id: str
    item_text: str
    round_number: int = 1
    domain: str = ""
    item_number: int = 0
    status: str = "active"
    consensus_reached: bool = False
    final_median: Optional[float] = None
    final_iqr: Optional[float] = None
    created_at: str = ""


@dataclass(frozen=True)
class ItemResponse(_Record):
    """One participant's rating of one item in one round."""

    id: str
    item_id: str
    participant_id: str
    round_number: int = 1
    rating: Optional[float] = None
    comment: str = ""
    group_median: Optional[float] = None
    group_iqr: Optional[float] = None
    submitted_at: Optional[str] = None
    created_at: str = ""


T = TypeVar("T", bound=_Record)


def _records_from_rows(cls: Type[T], rows: Iterable[Any], kind: str) -> List[T]:
    """Build records from backup rows, skipping malformed ones with a warning."""
    records: List[T] = []
    for index, row in enumerate(rows):
        try:
            records.append(cls.from_dict(row))
        except (TypeError, AttributeError) as e:
            logger.warning(f"Skipping malformed {kind} record {index} in backup: {e}")
    return records


@dataclass
class BackupData:
    """Full export of a data store."""

    version: str = BACKUP_VERSION
    exported_at: str = ""
    studies: List[Study] = field(default_factory=list)
    items: List[DelphiItem] = field(default_factory=list)
    responses: List[ItemResponse] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "exported_at": self.exported_at,
            "data": {
                "studies": [s.to_dict() for s in self.studies],
                "items": [i.to_dict() for i in self.items],
                "responses": [r.to_dict() for r in self.responses],
            },
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "BackupData":
        data = payload.get("data", {})
        return cls(
            version=payload.get("version", BACKUP_VERSION),
            exported_at=payload.get("exported_at", ""),
            studies=_records_from_rows(Study, data.get("studies", []), "study"),
            items=_records_from_rows(DelphiItem, data.get("items", []), "item"),
            responses=_records_from_rows(ItemResponse, data.get("responses", []), "response"),
        )
