"""Tests for consensus configuration and result types."""

import dataclasses

import pytest

from delphi_consensus.consensus import ConsensusConfig, ConsensusResult, ConsensusRule


class TestConsensusRule:
    def test_parse_strings(self):
        assert ConsensusRule.parse("iqr") is ConsensusRule.IQR
        assert ConsensusRule.parse(" NET_AGREEMENT ") is ConsensusRule.NET_AGREEMENT

    def test_parse_member(self):
        assert ConsensusRule.parse(ConsensusRule.IQR) is ConsensusRule.IQR

    def test_parse_unknown_rule(self):
        with pytest.raises(ValueError, match="invalid consensus rule"):
            ConsensusRule.parse("majority")


class TestConsensusConfig:
    def test_defaults(self):
        """Defaults match a new study: IQR rule, threshold 1, 75%, scale 1-9."""
        config = ConsensusConfig()

        assert config.rule is ConsensusRule.IQR
        assert config.iqr_threshold == 1.0
        assert config.net_agreement_threshold == 75.0
        assert config.likert_min == 1
        assert config.likert_max == 9

    def test_is_immutable(self):
        config = ConsensusConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.iqr_threshold = 2.0

    def test_from_study_settings(self):
        config = ConsensusConfig.from_study_settings(
            {
                "consensus_rule": "net_agreement",
                "iqr_threshold": "1.5",
                "net_agreement_threshold": 80,
                "likert_min": 1,
                "likert_max": 5,
                "title": "ignored",
            }
        )

        assert config.rule is ConsensusRule.NET_AGREEMENT
        assert config.iqr_threshold == 1.5
        assert config.net_agreement_threshold == 80.0
        assert config.likert_max == 5

    def test_from_study_settings_missing_and_null_columns(self):
        config = ConsensusConfig.from_study_settings({"iqr_threshold": None})
        assert config == ConsensusConfig()

    def test_study_settings_round_trip(self):
        config = ConsensusConfig(rule=ConsensusRule.NET_AGREEMENT, likert_max=7)
        assert ConsensusConfig.from_study_settings(config.to_study_settings()) == config


class TestConsensusResult:
    def test_empty_has_no_data(self):
        result = ConsensusResult.empty()

        assert result.has_data is False
        assert result.consensus_reached is False
        assert result.median == 0.0

    def test_to_dict_has_all_fields(self):
        keys = set(ConsensusResult.empty().to_dict())
        assert keys == {
            "median",
            "q1",
            "q3",
            "iqr",
            "mean",
            "standard_deviation",
            "total_responses",
            "agreement_percentage",
            "consensus_reached",
        }


class TestRuleCoercion:
    """A rule given as its stored string is coerced to ConsensusRule."""

    def test_string_rule_coerced(self):
        config = ConsensusConfig(rule="iqr")
        assert config.rule is ConsensusRule.IQR

    def test_string_rule_dispatches_to_iqr(self):
        from delphi_consensus.consensus import compute_consensus

        result = compute_consensus([5, 5, 5, 5], ConsensusConfig(rule="iqr", iqr_threshold=1.0))

        assert result.iqr == 0
        assert result.consensus_reached is True

    def test_string_rule_dispatches_to_net_agreement(self):
        from delphi_consensus.consensus import compute_consensus

        config = ConsensusConfig(rule="net_agreement", net_agreement_threshold=75.0)
        result = compute_consensus([1, 1, 1, 1], config)

        # IQR is 0 but the net agreement rule decides: 100% >= 75%
        assert result.consensus_reached is True
        assert compute_consensus([5, 5, 5, 5], config).consensus_reached is False

    def test_unknown_rule_rejected_at_construction(self):
        with pytest.raises(ValueError, match="invalid consensus rule"):
            ConsensusConfig(rule="majority")
