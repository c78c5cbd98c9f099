"""Resolver configuration.

Settings can be built in code or loaded from a YAML file:

    snippets:
      context_lines: 5
      max_concurrent_fetches: 8

The ``snippets:`` wrapper is optional; top-level keys are accepted too.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from reviewlens.errors import ConfigError


# ============================================================
# Constants
# ============================================================

DEFAULT_CONTEXT_LINES = 5
DEFAULT_MAX_CONCURRENT_FETCHES = 8


# ============================================================
# Configuration
# ============================================================


@dataclass(frozen=True)
class ResolverConfig:
    """Settings for snippet resolution.

    Attributes:
        context_lines: Maximum number of lines in a snippet window
        max_concurrent_fetches: Upper bound on content fetches in flight
    """

    context_lines: int = DEFAULT_CONTEXT_LINES
    max_concurrent_fetches: int = DEFAULT_MAX_CONCURRENT_FETCHES

    def __post_init__(self):
        for name in ("context_lines", "max_concurrent_fetches"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict | None) -> ResolverConfig:
        """Build configuration from a dictionary, using defaults for missing keys.

        Raises:
            ConfigError: If a value is not a positive integer
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping, got {type(data).__name__}")
        if "snippets" in data:
            return cls.from_dict(data["snippets"])

        return cls(
            context_lines=data.get("context_lines", DEFAULT_CONTEXT_LINES),
            max_concurrent_fetches=data.get(
                "max_concurrent_fetches", DEFAULT_MAX_CONCURRENT_FETCHES
            ),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> ResolverConfig:
        """Load configuration from a YAML file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigError: If the YAML is invalid or holds invalid values
        """
        text = Path(path).read_text()
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        return cls.from_dict(data)
