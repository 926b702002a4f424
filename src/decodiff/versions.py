"""Release tag enumeration and version pairing."""

import logging
import re
from dataclasses import dataclass
from typing import List, Sequence

from .config import ManifestConfig
from .vcs import HistorySource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionPair:
    """Two adjacent release tags; the manifest is filed under ``to_tag``."""

    from_tag: str
    to_tag: str


def list_version_tags(history: HistorySource, config: ManifestConfig) -> List[str]:
    """Return release tags matching the version prefix, baseline first.

    An empty list means no release tag matched; the legacy baseline is
    only prepended when there is at least one real tag to diff against.
    """
    prefix = re.compile(config.version_prefix)
    tags = [tag for tag in history.list_tags() if prefix.match(tag)]
    logger.debug(
        "Matched version tags",
        extra={"prefix": config.version_prefix, "count": len(tags)},
    )
    if not tags:
        return []

    if config.legacy_tag is not None:
        tags.insert(0, config.legacy_tag)
    return tags


def build_version_pairs(tags: Sequence[str]) -> List[VersionPair]:
    """Pair each tag with its successor."""
    return [VersionPair(tags[i], tags[i + 1]) for i in range(len(tags) - 1)]
