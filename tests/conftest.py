"""Shared test configuration and fixtures."""
import os

import pytest

from delphi_consensus.store import LocalDataStore

# =============================================================================
# Environment Reset
# =============================================================================


@pytest.fixture(autouse=True)
def reset_env(monkeypatch):
    """Clear environment variables before each test."""
    for name in list(os.environ):
        if name.startswith("DELPHI_"):
            monkeypatch.delenv(name, raising=False)


# =============================================================================
# Data Store Fixtures
# =============================================================================


@pytest.fixture
def store():
    """Empty in-memory data store."""
    return LocalDataStore()


@pytest.fixture
def rated_study(store):
    """Study on a 1-9 scale with three active items rated in round 1.

    - agreed: tight high ratings (IQR 0.25, consensus under IQR rule)
    - polarized: split between the extremes (IQR 8, no consensus)
    - unrated: no responses at all
    """
    study = store.create_study(
        "Sepsis management guidelines",
        consensus_rule="iqr",
        iqr_threshold=1.0,
        net_agreement_threshold=75.0,
        likert_min=1,
        likert_max=9,
    )
    agreed = store.create_item(
        study.id, "Give antibiotics within one hour", domain="Treatment", item_number=1
    )
    polarized = store.create_item(
        study.id, "Routine steroid use", domain="Treatment", item_number=2
    )
    unrated = store.create_item(
        study.id, "Lactate every two hours", domain="Monitoring", item_number=3
    )

    for participant, rating in zip(["p1", "p2", "p3", "p4"], [8, 8, 9, 8]):
        store.create_response(agreed.id, participant, round_number=1, rating=rating)
    for participant, rating in zip(["p1", "p2", "p3", "p4"], [1, 1, 9, 9]):
        store.create_response(polarized.id, participant, round_number=1, rating=rating)

    return {
        "study": study,
        "agreed": agreed,
        "polarized": polarized,
        "unrated": unrated,
    }
