"""
Configuration module for reposcanner.

Provides a dataclass-based configuration with sensible defaults
and a global configuration accessor.
"""

from dataclasses import dataclass, field
from typing import List

from .reposcan_constants import (
    DEFAULT_FILE_EXTENSIONS,
    DEFAULT_EXCLUDE_PATHS,
    DEFAULT_BUG_KEYWORDS,
    BLOCK_WINDOW_SIZE,
    MIN_BLOCK_LENGTH,
)


@dataclass
class ScannerConfig:
    """Configuration settings for a repository scan."""

    # File discovery
    file_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_FILE_EXTENSIONS))
    exclude_paths: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATHS))

    # History analysis
    bug_keywords: List[str] = field(default_factory=lambda: list(DEFAULT_BUG_KEYWORDS))

    # Duplication detection
    block_size: int = BLOCK_WINDOW_SIZE
    min_block_length: int = MIN_BLOCK_LENGTH

    # Reporting
    top_n: int = 10
    output_format: str = 'json'
    output_path: str = ''

    # Debug settings
    debug: bool = False
    verbose: bool = False

    def to_dict(self) -> dict:
        """Convert config to dictionary (for the `conf` mapping)."""
        return {
            'file_extensions': list(self.file_extensions),
            'exclude_paths': list(self.exclude_paths),
            'bug_keywords': list(self.bug_keywords),
            'block_size': self.block_size,
            'min_block_length': self.min_block_length,
            'top_n': self.top_n,
            'output_format': self.output_format,
            'output_path': self.output_path,
            'debug': self.debug,
            'verbose': self.verbose,
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'ScannerConfig':
        """Create config from dictionary, ignoring unknown keys."""
        config = cls()
        for key, value in d.items():
            if hasattr(config, key):
                setattr(config, key, value)
        return config


# Global configuration instance
_config: ScannerConfig = ScannerConfig()

# Dict-like access used for verbose/debug checks throughout the package
conf = _config.to_dict()


def get_config() -> ScannerConfig:
    """Get the global configuration instance."""
    return _config


def set_config(config: ScannerConfig) -> None:
    """Set the global configuration instance and refresh `conf`."""
    global _config
    _config = config
    update_conf_from_config()


def update_conf_from_config():
    """Update the `conf` dict in place from the current config."""
    conf.clear()
    conf.update(_config.to_dict())
