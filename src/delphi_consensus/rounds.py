"""Round orchestration: feeding finalized responses through the consensus engine.

When a rating round closes, every active item's ratings are run through
compute_consensus() with the owning study's settings. The item keeps the
result as its final statistics, and each response in the round keeps the
group median and IQR as feedback for the next round.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .consensus import ConsensusResult, compute_consensus
from .store.protocol import DataStore
from .errors import InvalidStudySettingsError
from .validation import find_out_of_range_ratings, validate_consensus_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemConsensus:
    """Consensus computed for one item in one round."""

    item_id: str
    round_number: int
    result: ConsensusResult


@dataclass(frozen=True)
class GroupFeedback:
    """What a participant sees about an item when the next round opens."""

    item_id: str
    item_text: str
    own_rating: Optional[float]
    group_median: Optional[float]
    group_iqr: Optional[float]
    consensus_reached: bool


def update_consensus_for_round(
    store: DataStore,
    study_id: str,
    round_number: int,
) -> List[ItemConsensus]:
    """Compute and persist consensus for every active item of a study.

    Items with no ratings in the round are reported with an empty result and
    left untouched in the store. Otherwise every response to the item in the
    round, rated or not, receives the group median and IQR.

    Args:
        store: Data store holding the study, items and responses
        study_id: Study to process
        round_number: Round whose responses are finalized

    Returns:
        One ItemConsensus per active item, in item order

    Raises:
        InvalidStudySettingsError: If the study's consensus settings are unusable
        RecordNotFoundError: If the study does not exist
    """
    study = store.get_study(study_id)
    try:
        config = study.consensus_config()
    except ValueError as e:
        raise InvalidStudySettingsError(f"study {study_id}: {e}") from e
    validate_consensus_config(config)

    outcomes: List[ItemConsensus] = []
    for item in store.list_items(study_id, status="active"):
        responses = store.list_responses(item.id, round_number=round_number)
        ratings = [r.rating for r in responses if r.rating is not None]

        out_of_range = find_out_of_range_ratings(ratings, config)
        if out_of_range:
            logger.warning(
                f"Item {item.id} has {len(out_of_range)} rating(s) outside "
                f"[{config.likert_min}, {config.likert_max}]: {out_of_range}"
            )

        result = compute_consensus(ratings, config)
        outcomes.append(ItemConsensus(item.id, round_number, result))

        if not result.has_data:
            logger.debug(f"No ratings for item {item.id} in round {round_number}")
            continue

        store.update_item(
            item.id,
            final_median=result.median,
            final_iqr=result.iqr,
            consensus_reached=result.consensus_reached,
        )
        for response in responses:
            store.update_response(
                response.id,
                group_median=result.median,
                group_iqr=result.iqr,
            )

    reached = sum(1 for o in outcomes if o.result.consensus_reached)
    logger.info(
        f"Round {round_number} of study {study_id}: "
        f"{reached}/{len(outcomes)} items reached consensus ({config.rule.value})"
    )
    return outcomes


def group_feedback_for_participant(
    store: DataStore,
    study_id: str,
    round_number: int,
    participant_id: str,
) -> List[GroupFeedback]:
    """Collect per-item group statistics for a participant's next round.

    Args:
        store: Data store
        study_id: Study the participant belongs to
        round_number: The round that was just computed
        participant_id: Participant receiving feedback

    Returns:
        One GroupFeedback per active item, in item order
    """
    feedback: List[GroupFeedback] = []
    for item in store.list_items(study_id, status="active"):
        own = next(
            (
                r
                for r in store.list_responses(item.id, round_number=round_number)
                if r.participant_id == participant_id
            ),
            None,
        )
        feedback.append(
            GroupFeedback(
                item_id=item.id,
                item_text=item.item_text,
                own_rating=own.rating if own else None,
                group_median=item.final_median,
                group_iqr=item.final_iqr,
                consensus_reached=item.consensus_reached,
            )
        )
    return feedback
