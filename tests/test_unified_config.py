"""Tests for the unified YAML configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from delphi_consensus.consensus import ConsensusConfig, ConsensusRule
from delphi_consensus.unified_config import (
    ConsensusDefaultsConfig,
    UnifiedConfig,
    get_effective_config,
    load_config,
)


def _write(path: Path, text: str) -> Path:
    path.write_text(text)
    return path


class TestUnifiedConfigSchema:
    """Pydantic schema validation."""

    def test_default_config_is_valid(self):
        config = UnifiedConfig()

        assert config.consensus.rule == "iqr"
        assert config.consensus.iqr_threshold == 1.0
        assert config.consensus.net_agreement_threshold == 75.0
        assert config.logging.level == "WARNING"
        assert config.storage.path.endswith("data.json")

    def test_defaults_convert_to_engine_config(self):
        assert UnifiedConfig().consensus.to_consensus_config() == ConsensusConfig()

    def test_rule_is_normalized(self):
        config = ConsensusDefaultsConfig(rule="NET_AGREEMENT")
        assert config.to_consensus_config().rule is ConsensusRule.NET_AGREEMENT

    def test_unknown_rule_rejected(self):
        with pytest.raises(ValidationError):
            ConsensusDefaultsConfig(rule="majority")

    def test_inverted_likert_bounds_rejected(self):
        with pytest.raises(ValidationError, match="likert_max"):
            ConsensusDefaultsConfig(likert_min=7, likert_max=7)

    def test_threshold_bounds(self):
        with pytest.raises(ValidationError):
            ConsensusDefaultsConfig(net_agreement_threshold=120)
        with pytest.raises(ValidationError):
            ConsensusDefaultsConfig(iqr_threshold=-1)

    def test_log_level_uppercased(self):
        assert UnifiedConfig(logging={"level": "debug"}).logging.level == "DEBUG"

    def test_to_yaml_contains_section(self):
        assert UnifiedConfig().to_yaml().startswith("delphi:")


class TestLoadConfig:
    """YAML loading."""

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml") == UnifiedConfig()

    def test_none_path_uses_defaults(self):
        assert load_config(None) == UnifiedConfig()

    def test_load_consensus_section(self, tmp_path):
        path = _write(
            tmp_path / "delphi_consensus.yaml",
            "delphi:\n"
            "  consensus:\n"
            "    rule: net_agreement\n"
            "    net_agreement_threshold: 70\n"
            "    likert_min: 1\n"
            "    likert_max: 5\n",
        )

        config = load_config(path)

        assert config.consensus.rule == "net_agreement"
        assert config.consensus.net_agreement_threshold == 70
        assert config.consensus.likert_max == 5

    def test_env_var_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DELPHI_TEST_DIR", "/srv/delphi")
        path = _write(
            tmp_path / "c.yaml",
            "delphi:\n  storage:\n    path: ${DELPHI_TEST_DIR}/data.json\n",
        )

        assert load_config(path).storage.path == "/srv/delphi/data.json"

    def test_invalid_yaml_falls_back(self, tmp_path):
        path = _write(tmp_path / "bad.yaml", "delphi: [unclosed\n")
        assert load_config(path) == UnifiedConfig()

    def test_invalid_yaml_strict_raises(self, tmp_path):
        path = _write(tmp_path / "bad.yaml", "delphi: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config(path, strict=True)

    def test_invalid_values_strict_raises(self, tmp_path):
        path = _write(
            tmp_path / "bad.yaml",
            "delphi:\n  consensus:\n    likert_min: 9\n    likert_max: 1\n",
        )
        with pytest.raises(ValueError, match="Configuration error"):
            load_config(path, strict=True)


class TestEnvironmentOverrides:
    """Environment variables take precedence over YAML."""

    def test_consensus_overrides(self, tmp_path, monkeypatch):
        path = _write(tmp_path / "c.yaml", "delphi:\n  consensus:\n    rule: iqr\n")
        monkeypatch.setenv("DELPHI_CONSENSUS_RULE", "net_agreement")
        monkeypatch.setenv("DELPHI_NET_AGREEMENT_THRESHOLD", "66.5")
        monkeypatch.setenv("DELPHI_LIKERT_MAX", "7")

        config = get_effective_config(path)

        assert config.consensus.rule == "net_agreement"
        assert config.consensus.net_agreement_threshold == 66.5
        assert config.consensus.likert_max == 7

    def test_storage_and_logging_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DELPHI_DATA_PATH", str(tmp_path / "store.json"))
        monkeypatch.setenv("DELPHI_AUTOSAVE", "no")
        monkeypatch.setenv("DELPHI_LOG_LEVEL", "info")

        config = get_effective_config(tmp_path / "absent.yaml")

        assert config.storage.path == str(tmp_path / "store.json")
        assert config.storage.autosave is False
        assert config.logging.level == "INFO"

    def test_config_file_from_env(self, tmp_path, monkeypatch):
        path = _write(tmp_path / "custom.yaml", "delphi:\n  consensus:\n    iqr_threshold: 2\n")
        monkeypatch.setenv("DELPHI_CONFIG", str(path))
        monkeypatch.chdir(tmp_path)

        assert get_effective_config().consensus.iqr_threshold == 2.0


class TestConfigureLogging:
    def test_applies_level_to_package_logger(self):
        import logging

        from delphi_consensus.unified_config import configure_logging

        logger = logging.getLogger("delphi_consensus")
        previous = logger.level
        try:
            configure_logging(UnifiedConfig(logging={"level": "DEBUG"}))
            assert logger.level == logging.DEBUG
        finally:
            logger.setLevel(previous)
