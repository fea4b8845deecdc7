"""
Engine Configuration.

Unified configuration for layout, transform and safe-action behaviour.
All values configurable via SEXPEDIT_* environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

from .exceptions import ConfigError


DEFAULT_FILL_COLUMN = 80                # Width a flat list must fit in
DEFAULT_PRETTY_THRESHOLD = 4000         # Longer spans are only re-indented
DEFAULT_MAX_SCAN_LENGTH = 1500          # Longer spans are not balance-checked
DEFAULT_REINDENT_MODE = "indent"

REINDENT_MODES = ("indent", "pretty", "none")


def _env_int(key: str, default: int) -> int:
    """Read integer from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    """Read boolean from environment variable."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


def _env_str(key: str, default: str) -> str:
    """Read string from environment variable."""
    return os.getenv(key) or default


@dataclass
class EngineConfig:
    """
    Engine configuration shared by the normalizer, transforms and safety scanner.

    Environment Variables:
        SEXPEDIT_FILL_COLUMN: Width used to decide whether a list stays flat (default: 80)
        SEXPEDIT_PRETTY_THRESHOLD: Spans longer than this are re-indented, never reflowed (default: 4000)
        SEXPEDIT_REINDENT_MODE: Layout pass run after a transform: indent, pretty or none (default: indent)
        SEXPEDIT_SAFE_ACTIONS: Route delete/copy/paste through the safe-region scanner (default: true)
        SEXPEDIT_IGNORE_STRINGS: Delimiters inside strings are not counted (default: true)
        SEXPEDIT_IGNORE_COMMENTS: Delimiters inside comments are not counted (default: true)
        SEXPEDIT_PROTECT_COMMENTS: Never delete the newline that ends a surviving comment (default: true)
        SEXPEDIT_MAX_SCAN_LENGTH: Spans longer than this are not scanned at all (default: 1500)

    Override for large selections:
        SEXPEDIT_MAX_SCAN_LENGTH=20000 sexpedit unmatched big.el --start 0 --end 18000
    """

    # Layout
    fill_column: int = field(default_factory=lambda: _env_int(
        "SEXPEDIT_FILL_COLUMN", DEFAULT_FILL_COLUMN
    ))
    pretty_threshold: int = field(default_factory=lambda: _env_int(
        "SEXPEDIT_PRETTY_THRESHOLD", DEFAULT_PRETTY_THRESHOLD
    ))
    reindent_mode: str = field(default_factory=lambda: _env_str(
        "SEXPEDIT_REINDENT_MODE", DEFAULT_REINDENT_MODE
    ))

    # Safe actions
    safe_actions: bool = field(default_factory=lambda: _env_bool(
        "SEXPEDIT_SAFE_ACTIONS", True
    ))
    ignore_strings: bool = field(default_factory=lambda: _env_bool(
        "SEXPEDIT_IGNORE_STRINGS", True
    ))
    ignore_comments: bool = field(default_factory=lambda: _env_bool(
        "SEXPEDIT_IGNORE_COMMENTS", True
    ))
    protect_comments: bool = field(default_factory=lambda: _env_bool(
        "SEXPEDIT_PROTECT_COMMENTS", True
    ))
    max_scan_length: int = field(default_factory=lambda: _env_int(
        "SEXPEDIT_MAX_SCAN_LENGTH", DEFAULT_MAX_SCAN_LENGTH
    ))

    def __post_init__(self):
        if self.reindent_mode not in REINDENT_MODES:
            raise ConfigError(
                f"Invalid reindent mode '{self.reindent_mode}', expected one of {', '.join(REINDENT_MODES)}"
            )

    def replace(self, **changes) -> "EngineConfig":
        """Return a copy with some fields overridden."""
        values = self.to_dict()
        values.update(changes)
        return EngineConfig(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary (for JSON output)."""
        return {
            "fill_column": self.fill_column,
            "pretty_threshold": self.pretty_threshold,
            "reindent_mode": self.reindent_mode,
            "safe_actions": self.safe_actions,
            "ignore_strings": self.ignore_strings,
            "ignore_comments": self.ignore_comments,
            "protect_comments": self.protect_comments,
            "max_scan_length": self.max_scan_length,
        }


# Global instance for convenience
_default_config: Optional[EngineConfig] = None


def get_engine_config() -> EngineConfig:
    """Get the global engine configuration."""
    global _default_config
    if _default_config is None:
        _default_config = EngineConfig()
    return _default_config


def reset_engine_config() -> None:
    """Reset global config (useful after env var changes or for testing)."""
    global _default_config
    _default_config = None
