"""
Resolution Configuration Module
===============================

Loads matching thresholds, judge settings and global paths from a YAML
file. Missing keys fall back to the defaults below, so an empty or absent
file yields a working configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from whiskey_agent.core.enums import CandidateSelection

CONFIG_ENV_VAR = "WHISKEY_AGENT_CONFIG"


@dataclass
class ResolutionConfig:
    """Thresholds and candidate policy for the match cascade."""

    fuzzy_threshold: float = 0.85
    token_threshold: float = 0.90
    judge_edit_floor: float = 0.6
    judge_token_floor: float = 0.7
    candidate_limit: int = 50
    selection: CandidateSelection = CandidateSelection.FIRST
    numeric_guard: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ResolutionConfig:
        """Create from dictionary, using defaults for missing values."""
        if data is None:
            return cls()
        thresholds = data.get("thresholds") or {}
        config = cls(
            fuzzy_threshold=float(thresholds.get("fuzzy", 0.85)),
            token_threshold=float(thresholds.get("token", 0.90)),
            judge_edit_floor=float(thresholds.get("judge_edit_floor", 0.6)),
            judge_token_floor=float(thresholds.get("judge_token_floor", 0.7)),
            candidate_limit=int(data.get("candidate_limit", 50)),
            selection=CandidateSelection(str(data.get("selection", "first")).lower()),
            numeric_guard=bool(data.get("numeric_guard", True)),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Reject thresholds outside [0, 1] and non-positive limits."""
        for name in ("fuzzy_threshold", "token_threshold", "judge_edit_floor", "judge_token_floor"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")
        if self.candidate_limit < 1:
            raise ValueError(f"candidate_limit must be positive, got {self.candidate_limit}")


@dataclass
class JudgeConfig:
    """Settings for the LLM dedup judge."""

    enabled: bool = False
    provider: str = "anthropic"
    model: str | None = None
    max_candidates: int = 5
    min_confidence: float = 0.7
    timeout_seconds: float = 20.0

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> JudgeConfig:
        """Create from dictionary, using defaults for missing values."""
        if data is None:
            return cls()
        return cls(
            enabled=bool(data.get("enabled", False)),
            provider=str(data.get("provider", "anthropic")).lower(),
            model=data.get("model"),
            max_candidates=int(data.get("max_candidates", 5)),
            min_confidence=float(data.get("min_confidence", 0.7)),
            timeout_seconds=float(data.get("timeout_seconds", 20)),
        )


@dataclass
class GlobalConfig:
    """Global configuration settings."""

    database_path: str = "~/.whiskey_agent/whiskey_agent.db"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> GlobalConfig:
        """Create from dictionary."""
        if data is None:
            return cls()
        return cls(
            database_path=data.get("database_path", "~/.whiskey_agent/whiskey_agent.db"),
        )


@dataclass
class AgentConfig:
    """Top-level configuration loaded from resolution.yaml."""

    resolution: ResolutionConfig = field(default_factory=ResolutionConfig)
    judge: JudgeConfig = field(default_factory=JudgeConfig)
    global_config: GlobalConfig = field(default_factory=GlobalConfig)
    config_path: Path | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> AgentConfig:
        """Create from dictionary."""
        data = data or {}
        return cls(
            resolution=ResolutionConfig.from_dict(data.get("resolution")),
            judge=JudgeConfig.from_dict(data.get("judge")),
            global_config=GlobalConfig.from_dict(data.get("global")),
        )


def load_config(config_path: Path | str) -> AgentConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the resolution.yaml file

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a threshold or limit is out of range
    """
    config_path = Path(config_path).expanduser().resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        data = yaml.safe_load(f)

    config = AgentConfig.from_dict(data)
    config.config_path = config_path
    return config


# Global configuration instance
_default_config: AgentConfig | None = None


def get_default_config() -> AgentConfig:
    """
    Get the default configuration instance.

    Loads from the path in the WHISKEY_AGENT_CONFIG environment variable,
    or falls back to config/resolution.yaml at the project root. Built-in
    defaults apply when neither exists.
    """
    global _default_config

    if _default_config is None:
        config_path = os.environ.get(CONFIG_ENV_VAR)
        if config_path:
            path = Path(config_path)
        else:
            project_root = Path(__file__).parent.parent.parent
            path = project_root / "config" / "resolution.yaml"

        _default_config = load_config(path) if path.exists() else AgentConfig()

    return _default_config


def reset_default_config() -> None:
    """Reset the default configuration (useful for testing)."""
    global _default_config
    _default_config = None
