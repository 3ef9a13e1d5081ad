"""Tests for resolution configuration loading."""

from pathlib import Path

import pytest
import yaml

from whiskey_agent.core.enums import CandidateSelection
from whiskey_agent.ingestion.config import (
    CONFIG_ENV_VAR,
    AgentConfig,
    JudgeConfig,
    ResolutionConfig,
    get_default_config,
    load_config,
    reset_default_config,
)

PROJECT_CONFIG = Path(__file__).parent.parent / "config" / "resolution.yaml"


@pytest.fixture(autouse=True)
def fresh_default_config():
    """Make sure no cached configuration leaks between tests."""
    reset_default_config()
    yield
    reset_default_config()


class TestDefaults:
    """Tests for built-in defaults."""

    def test_resolution_defaults(self) -> None:
        """Test the built-in thresholds."""
        config = ResolutionConfig()
        assert config.fuzzy_threshold == 0.85
        assert config.token_threshold == 0.90
        assert config.judge_edit_floor == 0.6
        assert config.judge_token_floor == 0.7
        assert config.candidate_limit == 50
        assert config.selection == CandidateSelection.FIRST
        assert config.numeric_guard is True

    def test_judge_defaults(self) -> None:
        """Test the judge is off by default with a cap of five candidates."""
        config = JudgeConfig()
        assert config.enabled is False
        assert config.max_candidates == 5
        assert config.min_confidence == 0.7

    def test_empty_dict(self) -> None:
        """Test an empty document yields defaults."""
        config = AgentConfig.from_dict(None)
        assert config.resolution == ResolutionConfig()
        assert config.judge == JudgeConfig()
        assert config.config_path is None


class TestFromDict:
    """Tests for parsing configuration dictionaries."""

    def test_partial_thresholds(self) -> None:
        """Test missing keys fall back to defaults."""
        config = ResolutionConfig.from_dict({"thresholds": {"fuzzy": 0.9}, "selection": "BEST"})
        assert config.fuzzy_threshold == 0.9
        assert config.token_threshold == 0.90
        assert config.selection == CandidateSelection.BEST

    def test_threshold_out_of_range(self) -> None:
        """Test thresholds outside [0, 1] are rejected."""
        with pytest.raises(ValueError, match="fuzzy_threshold"):
            ResolutionConfig.from_dict({"thresholds": {"fuzzy": 1.5}})

    def test_non_positive_limit(self) -> None:
        """Test the candidate limit must be positive."""
        with pytest.raises(ValueError, match="candidate_limit"):
            ResolutionConfig.from_dict({"candidate_limit": 0})

    def test_unknown_selection(self) -> None:
        """Test an unknown selection policy is rejected."""
        with pytest.raises(ValueError):
            ResolutionConfig.from_dict({"selection": "random"})

    def test_judge_section(self) -> None:
        """Test the judge section is parsed."""
        config = JudgeConfig.from_dict(
            {"enabled": True, "provider": "OpenAI", "model": "gpt-4o", "timeout_seconds": 5}
        )
        assert config.enabled is True
        assert config.provider == "openai"
        assert config.model == "gpt-4o"
        assert config.timeout_seconds == 5.0


class TestLoadConfig:
    """Tests for loading YAML files."""

    def test_load_yaml(self, tmp_path: Path) -> None:
        """Test a YAML file is loaded and its path recorded."""
        path = tmp_path / "resolution.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "resolution": {"thresholds": {"token": 0.8}, "numeric_guard": False},
                    "judge": {"enabled": True, "max_candidates": 3},
                    "global": {"database_path": str(tmp_path / "catalog.db")},
                }
            )
        )

        config = load_config(path)

        assert config.resolution.token_threshold == 0.8
        assert config.resolution.numeric_guard is False
        assert config.judge.max_candidates == 3
        assert config.global_config.database_path == str(tmp_path / "catalog.db")
        assert config.config_path == path.resolve()

    def test_empty_yaml(self, tmp_path: Path) -> None:
        """Test an empty file yields defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(path).resolution == ResolutionConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_project_config_matches_defaults(self) -> None:
        """Test the shipped config file mirrors the built-in defaults."""
        config = load_config(PROJECT_CONFIG)

        assert config.resolution == ResolutionConfig()
        assert config.judge.enabled is False


class TestDefaultConfig:
    """Tests for the cached default configuration."""

    def test_env_var_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the environment variable selects the config file."""
        path = tmp_path / "custom.yaml"
        path.write_text("resolution:\n  candidate_limit: 7\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        config = get_default_config()

        assert config.resolution.candidate_limit == 7
        assert get_default_config() is config

    def test_reset(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test reset drops the cached instance."""
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.yaml"))
        first = get_default_config()

        reset_default_config()

        assert get_default_config() is not first
