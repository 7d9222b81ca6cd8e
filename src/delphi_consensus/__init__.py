"""Delphi Consensus - statistical consensus for multi-round Delphi studies.

Usage:
    from delphi_consensus import ConsensusConfig, ConsensusRule, compute_consensus

    config = ConsensusConfig(rule=ConsensusRule.IQR, iqr_threshold=1.0)
    result = compute_consensus([7, 8, 8, 9, 7], config)
    print(result.median, result.iqr, result.consensus_reached)

Round processing against a data store:
    from delphi_consensus import LocalDataStore, update_consensus_for_round

    store = LocalDataStore.from_config()  # storage path, autosave, study defaults
    update_consensus_for_round(store, study_id, round_number=2)
"""

from delphi_consensus.consensus import (
    ConsensusConfig,
    ConsensusResult,
    ConsensusRule,
    compute_consensus,
    get_consensus_interpretation,
)
from delphi_consensus.errors import (
    BackupVersionError,
    DelphiError,
    InvalidStudySettingsError,
    RecordNotFoundError,
)
from delphi_consensus.results import (
    export_results_csv,
    results_overview,
    summarize_results,
)
from delphi_consensus.rounds import (
    group_feedback_for_participant,
    update_consensus_for_round,
)
from delphi_consensus.store import DataStore, LocalDataStore
from delphi_consensus.unified_config import (
    UnifiedConfig,
    configure_logging,
    get_config,
    load_config,
    reload_config,
)
from delphi_consensus.validation import validate_consensus_config

__version__ = "0.1.0"

__all__ = [
    # Engine
    "ConsensusConfig",
    "ConsensusResult",
    "ConsensusRule",
    "compute_consensus",
    "get_consensus_interpretation",
    # Orchestration
    "update_consensus_for_round",
    "group_feedback_for_participant",
    "validate_consensus_config",
    # Results
    "summarize_results",
    "results_overview",
    "export_results_csv",
    # Storage
    "DataStore",
    "LocalDataStore",
    # Configuration
    "UnifiedConfig",
    "get_config",
    "reload_config",
    "load_config",
    "configure_logging",
    # Errors
    "DelphiError",
    "InvalidStudySettingsError",
    "RecordNotFoundError",
    "BackupVersionError",
    # Version
    "__version__",
]
