"""Configuration management for bemorder.

Settings:
- ordering: which orderer strategy is used when none is passed explicitly
- sources: which file suffixes mark per-stem declaration files

Config resolution order (highest priority first):
1. Programmatic (BemorderConfig constructed in code, installed with configure())
2. Environment variables (BEMORDER_STRATEGY, BEMORDER_DEPS_SUFFIXES)
3. Config file (~/.config/bemorder/config.json, managed by `bemorder config`)
4. Hardcoded defaults
"""

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)


# =============================================================================
# Config file location
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "bemorder"
CONFIG_FILE = CONFIG_DIR / "config.json"

VALID_STRATEGIES = ("bfs", "weight")


# =============================================================================
# Config dataclasses
# =============================================================================


@dataclass
class OrderingConfig:
    """Ordering settings.

    - strategy: "bfs" keeps arrival order for independent stems,
      "weight" sorts them by dependency depth then name
    """

    strategy: str = "bfs"


@dataclass
class SourcesConfig:
    """Declaration file settings.

    A file whose name ends with one of ``deps_suffixes`` declares the
    dependencies of the stem in front of the suffix
    (``button.deps.yaml`` -> ``button``).
    """

    deps_suffixes: list[str] = field(
        default_factory=lambda: [".deps.yaml", ".deps.yml", ".deps.json"]
    )


# =============================================================================
# Main config class
# =============================================================================


@dataclass
class BemorderConfig:
    """Top-level bemorder configuration.

    Examples:
        # Package use, no files needed
        config = BemorderConfig(ordering=OrderingConfig(strategy="weight"))

        # CLI use, loads from ~/.config/bemorder/config.json
        config = BemorderConfig.load()
    """

    ordering: OrderingConfig = field(default_factory=OrderingConfig)
    sources: SourcesConfig = field(default_factory=SourcesConfig)

    @classmethod
    def load(cls) -> "BemorderConfig":
        """Load config from file + env vars.

        Priority: env var values > config.json values > defaults.
        """
        config = cls()

        # Layer 1: config file
        if CONFIG_FILE.exists():
            try:
                with open(CONFIG_FILE) as f:
                    data = json.load(f)
                _apply_dict(config, data)
            except (json.JSONDecodeError, OSError) as exc:
                logger.warning("Failed to load config from %s: %s", CONFIG_FILE, exc)

        # Layer 2: env var overrides
        if val := os.environ.get("BEMORDER_STRATEGY"):
            if val in VALID_STRATEGIES:
                config.ordering.strategy = val
            else:
                logger.warning("Invalid BEMORDER_STRATEGY=%r, ignoring", val)
        if val := os.environ.get("BEMORDER_DEPS_SUFFIXES"):
            suffixes = [s.strip() for s in val.split(",") if s.strip()]
            if suffixes:
                config.sources.deps_suffixes = suffixes
            else:
                logger.warning("Invalid BEMORDER_DEPS_SUFFIXES=%r, ignoring", val)

        return config

    def save(self) -> None:
        """Save config to ~/.config/bemorder/config.json."""
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        with open(CONFIG_FILE, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for display."""
        return {
            "ordering": asdict(self.ordering),
            "sources": asdict(self.sources),
        }


# =============================================================================
# Config dict application
# =============================================================================


def _apply_dict(config: BemorderConfig, data: dict) -> None:
    """Apply a dict of values onto a BemorderConfig."""
    ordering = data.get("ordering")
    if isinstance(ordering, dict):
        strategy = ordering.get("strategy")
        if strategy in VALID_STRATEGIES:
            config.ordering.strategy = strategy
        elif strategy is not None:
            logger.warning("Invalid ordering.strategy=%r in config file, ignoring", strategy)

    sources = data.get("sources")
    if isinstance(sources, dict):
        suffixes = sources.get("deps_suffixes")
        if isinstance(suffixes, list) and all(isinstance(s, str) for s in suffixes):
            config.sources.deps_suffixes = list(suffixes)


# =============================================================================
# Global config singleton
# =============================================================================

_config: BemorderConfig | None = None


def get_config() -> BemorderConfig:
    """Get the global BemorderConfig instance.

    First call loads from file + env vars. Subsequent calls return cached instance.
    Use configure() to replace the global config programmatically.
    """
    global _config
    if _config is None:
        _config = BemorderConfig.load()
    return _config


def configure(config: BemorderConfig) -> None:
    """Set the global BemorderConfig programmatically.

    Use this when bemorder is used as a package:
        from bemorder.config import configure, BemorderConfig, OrderingConfig
        configure(BemorderConfig(ordering=OrderingConfig(strategy="weight")))
    """
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global config (forces reload on next get_config())."""
    global _config
    _config = None
