"""Data models for browser discovery, ranking rules, and configuration."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Quality(Enum):
    """Release channel of a browser build."""
    STABLE = "stable"
    DEV = "dev"
    CANARY = "canary"
    CUSTOM = "custom"  # explicit preferred-path override
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str) -> "Quality":
        """
        Parse a user-supplied channel name.

        Args:
            value: Channel name, case-insensitive (e.g. "Stable", "canary")

        Returns:
            Matching Quality

        Raises:
            ValueError: If value names no known channel
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(q.value for q in cls)
            raise ValueError(f"Unknown quality: {value!r} (expected one of {choices})") from None


@dataclass(frozen=True)
class Executable:
    """A browser binary found on disk."""
    path: str
    quality: Quality


@dataclass(frozen=True)
class VariantSpec:
    """Base rank of one named build of a browser family, e.g. "Firefox Nightly.app"."""
    name: str
    weight: int
    quality: Quality


@dataclass(frozen=True)
class PriorityRule:
    """Ranks any candidate path matched by pattern. Higher weight wins."""
    pattern: re.Pattern
    weight: int
    quality: Quality

    def matches(self, path: str) -> bool:
        return self.pattern.match(path) is not None


@dataclass
class FinderConfig:
    """Local configuration (from config.yaml)."""
    log_level: str = "INFO"
    preferred_paths: dict[str, str] = field(default_factory=dict)
    home: Optional[str] = None
