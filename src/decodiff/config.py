"""Configuration management for decodiff."""

import os
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Pattern

from .errors import ConfigInvalidError

DEFAULT_VERSION_PREFIX = "v5"
DEFAULT_LEGACY_TAG = "4.27.0"
DEFAULT_ASSET_DIR = "decomoji"
DEFAULT_ASSET_EXTENSION = ".png"
DEFAULT_OUTPUT_DIR = "./scripts/manager/configs"


@dataclass(frozen=True)
class ManifestConfig:
    """Configuration for one manifest generation run."""

    # Repository
    repo_path: str = "."

    # Tag selection
    version_prefix: str = DEFAULT_VERSION_PREFIX
    legacy_tag: Optional[str] = DEFAULT_LEGACY_TAG
    tag_sort: Optional[str] = None

    # Asset filter
    asset_dir: str = DEFAULT_ASSET_DIR
    asset_extension: str = DEFAULT_ASSET_EXTENSION

    # Output options
    output_dir: str = DEFAULT_OUTPUT_DIR
    dry_run: bool = False

    # Rename detection
    find_renames_threshold: int = 100  # percentage

    # Seconds per git query
    git_timeout: int = 60

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.version_prefix:
            raise ConfigInvalidError("version_prefix cannot be empty")
        try:
            re.compile(self.version_prefix)
        except re.error as e:
            raise ConfigInvalidError(f"version_prefix is not a valid pattern: {e}") from e
        if self.legacy_tag is not None and not self.legacy_tag.strip():
            raise ConfigInvalidError("legacy_tag cannot be blank")
        if not self.asset_dir.strip("/"):
            raise ConfigInvalidError("asset_dir cannot be empty")
        if not self.asset_extension.startswith("."):
            raise ConfigInvalidError("asset_extension must start with '.'")
        if not (0 <= self.find_renames_threshold <= 100):
            raise ConfigInvalidError("find_renames_threshold must be between 0 and 100")
        if self.git_timeout <= 0:
            raise ConfigInvalidError("git_timeout must be positive")

    @property
    def asset_pattern(self) -> Pattern[str]:
        """Pattern a path must match to count as an asset."""
        return re.compile(
            re.escape(self.asset_dir.strip("/"))
            + "/.*"
            + re.escape(self.asset_extension)
            + "$"
        )

    @property
    def git_env(self) -> Dict[str, str]:
        """Get Git environment variables for deterministic output."""
        env = os.environ.copy()

        # Use platform-appropriate null device
        null_device = "NUL" if os.name == "nt" else "/dev/null"

        env.update(
            {
                "LC_ALL": "C",
                "GIT_CONFIG_GLOBAL": null_device,
                "GIT_CONFIG_SYSTEM": null_device,
                "GIT_TERMINAL_PROMPT": "0",
                "GIT_PAGER": "cat",
            }
        )
        return env

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to a dictionary for the run summary."""
        return {
            "repo_path": self.repo_path,
            "version_prefix": self.version_prefix,
            "legacy_tag": self.legacy_tag,
            "tag_sort": self.tag_sort,
            "asset_filter": {
                "dir": self.asset_dir,
                "extension": self.asset_extension,
            },
            "output_dir": self.output_dir,
            "dry_run": self.dry_run,
            "rename_detection": {
                "threshold_pct": self.find_renames_threshold,
            },
        }
