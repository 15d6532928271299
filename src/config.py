"""Summarizer configuration loader.

Loads runtime settings from configs/summarizer.yaml:

    max_subtitle_length: 60     # null = no truncation
    user_agent: "ShortcutSummarizer/1.0"
    timeout_s: 30
    max_concurrency: 4

The resulting SummarizerConfig is passed explicitly to SubtitleExtractor and
ShortcutService; nothing reads configuration from module globals.

Usage:
    from config import load_config, get_default_config

    cfg = load_config("configs/summarizer.yaml")
    cfg = get_default_config()   # file if present, else built-in defaults
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from paths import SUMMARIZER_CONFIG_PATH


@dataclass(frozen=True)
class SummarizerConfig:
    """Settings shared by the extractor, the service and the CLIs."""
    max_subtitle_length: int | None = None  # None = unlimited
    user_agent: str = "ShortcutSummarizer/1.0"
    timeout_s: float = 30.0
    max_concurrency: int = 4

    def with_max_length(self, max_length: int | None) -> "SummarizerConfig":
        return replace(self, max_subtitle_length=max_length)


def _positive_int_or_none(value: Any, key: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"'{key}' must be a positive integer or null, got {value!r}")
    return value


def config_from_dict(raw: dict[str, Any]) -> SummarizerConfig:
    """Build a config from an already-parsed mapping, applying defaults."""
    defaults = SummarizerConfig()
    try:
        timeout = float(raw.get("timeout_s", defaults.timeout_s))
    except (TypeError, ValueError):
        raise ValueError(f"'timeout_s' must be a number, got {raw.get('timeout_s')!r}")

    concurrency = _positive_int_or_none(
        raw.get("max_concurrency", defaults.max_concurrency), "max_concurrency"
    )
    return SummarizerConfig(
        max_subtitle_length=_positive_int_or_none(
            raw.get("max_subtitle_length"), "max_subtitle_length"
        ),
        user_agent=str(raw.get("user_agent", defaults.user_agent)),
        timeout_s=timeout,
        max_concurrency=concurrency or defaults.max_concurrency,
    )


def load_config(config_path: str | Path | None = None) -> SummarizerConfig:
    """Load summarizer settings from YAML.

    Args:
        config_path: Path to config file. Defaults to configs/summarizer.yaml.

    Returns:
        SummarizerConfig with defaults filled in for missing keys.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config is malformed.
    """
    path = Path(config_path) if config_path else SUMMARIZER_CONFIG_PATH

    if not path.exists():
        raise FileNotFoundError(f"Summarizer config not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        return SummarizerConfig()
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid summarizer config: expected a mapping in {path}")

    return config_from_dict(raw)


def get_default_config() -> SummarizerConfig:
    """Config from configs/summarizer.yaml, or built-in defaults if absent."""
    if SUMMARIZER_CONFIG_PATH.exists():
        return load_config(SUMMARIZER_CONFIG_PATH)
    return SummarizerConfig()
