"""Study results: per-item consensus summaries and CSV export."""

import csv
import io
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .consensus import ConsensusResult, compute_consensus
from .store.protocol import DataStore

CSV_HEADERS = [
    "Domain",
    "Item Number",
    "Recommendation",
    "Median",
    "IQR",
    "Responses",
    "Agreement %",
    "Consensus",
]


@dataclass(frozen=True)
class ItemSummary:
    """Final statistics for one item alongside a fresh computation over all responses."""

    item_id: str
    domain: str
    item_number: int
    recommendation: str
    final_median: Optional[float]
    final_iqr: Optional[float]
    consensus_reached: bool
    result: ConsensusResult

    @property
    def total_responses(self) -> int:
        return self.result.total_responses

    @property
    def agreement_percentage(self) -> float:
        return self.result.agreement_percentage


def _sort_key(summary: ItemSummary):
    # consensus first, then median descending with never-computed medians
    # first (as SQL DESC orders NULLs), then domain and item number
    median = summary.final_median if summary.final_median is not None else float("inf")
    return (not summary.consensus_reached, -median, summary.domain, summary.item_number)


def summarize_results(store: DataStore, study_id: str) -> List[ItemSummary]:
    """Summarize every item of a study over all of its rated responses.

    Returns:
        ItemSummary list ordered consensus first, then by final median
        (descending, uncomputed medians first), domain and item number
    """
    config = store.get_study(study_id).consensus_config()

    summaries = []
    for item in store.list_items(study_id):
        ratings = [
            r.rating for r in store.list_responses(item.id) if r.rating is not None
        ]
        summaries.append(
            ItemSummary(
                item_id=item.id,
                domain=item.domain,
                item_number=item.item_number,
                recommendation=item.item_text,
                final_median=item.final_median,
                final_iqr=item.final_iqr,
                consensus_reached=item.consensus_reached,
                result=compute_consensus(ratings, config),
            )
        )
    return sorted(summaries, key=_sort_key)


def results_overview(summaries: Iterable[ItemSummary]) -> Dict[str, int]:
    """Count total items and how many did or did not reach consensus."""
    summaries = list(summaries)
    consensus = sum(1 for s in summaries if s.consensus_reached)
    return {
        "total_items": len(summaries),
        "consensus_reached": consensus,
        "no_consensus": len(summaries) - consensus,
    }


def _fmt(value: Optional[float], places: int) -> str:
    return "" if value is None else f"{value:.{places}f}"


def export_results_csv(
    summaries: Iterable[ItemSummary],
    consensus_only: bool = True,
) -> str:
    """Render item summaries as CSV text.

    Args:
        summaries: Items to export, already ordered
        consensus_only: Export only items that reached consensus

    Returns:
        CSV document with a header row
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)

    for s in summaries:
        if consensus_only and not s.consensus_reached:
            continue
        writer.writerow(
            [
                s.domain,
                s.item_number,
                s.recommendation,
                _fmt(s.final_median, 2),
                _fmt(s.final_iqr, 2),
                s.total_responses,
                _fmt(s.agreement_percentage, 1),
                "Yes" if s.consensus_reached else "No",
            ]
        )

    return buffer.getvalue()
