"""Per-version diff collection restricted to asset paths."""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from .config import ManifestConfig
from .vcs import HistorySource, RenamePair
from .versions import VersionPair

logger = logging.getLogger(__name__)

# Change buckets in query order, with the git diff-filter each one uses
DIFF_TYPES = (
    ("upload", "A"),
    ("modify", "M"),
    ("rename", "R"),
    ("delete", "D"),
)


@dataclass
class DiffLog:
    """Asset paths changed between a tag and its predecessor."""

    tag: str
    upload: List[str] = field(default_factory=list)
    modify: List[str] = field(default_factory=list)
    rename: List[RenamePair] = field(default_factory=list)
    delete: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.upload or self.modify or self.rename or self.delete)

    @classmethod
    def from_dict(cls, tag: str, log: Mapping[str, Optional[Iterable[Any]]]) -> "DiffLog":
        """Build from a ``{bucket: paths}`` mapping; absent or None buckets are empty."""
        return cls(
            tag=tag,
            upload=list(log.get("upload") or []),
            modify=list(log.get("modify") or []),
            rename=[(before, after) for before, after in log.get("rename") or []],
            delete=list(log.get("delete") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["rename"] = [list(pair) for pair in self.rename]
        return data


class DiffCollector:
    """Runs the four diff-filter queries for each version pair."""

    def __init__(self, history: HistorySource, config: ManifestConfig):
        self.history = history
        self.config = config
        self._pattern = config.asset_pattern

    def is_asset(self, path: str) -> bool:
        return self._pattern.search(path) is not None

    def collect(self, pair: VersionPair) -> DiffLog:
        """Collect the asset changes introduced by ``pair.to_tag``.

        A rename with only one side inside the asset filter counts as an
        upload of the new path or a delete of the old one.
        """
        buckets: Dict[str, List[Any]] = {}
        moved_in: List[str] = []
        moved_out: List[str] = []
        for bucket, mode in DIFF_TYPES:
            logger.info("Diff[%s]: %s...%s", mode, pair.from_tag, pair.to_tag)
            if mode != "R":
                buckets[bucket] = [
                    path
                    for path in self.history.diff_names(pair.from_tag, pair.to_tag, mode)
                    if self.is_asset(path)
                ]
                continue

            renames = []
            for before, after in self.history.diff_renames(pair.from_tag, pair.to_tag):
                before_is_asset, after_is_asset = self.is_asset(before), self.is_asset(after)
                if before_is_asset and after_is_asset:
                    renames.append((before, after))
                elif before_is_asset:
                    moved_out.append(before)
                elif after_is_asset:
                    moved_in.append(after)
            buckets[bucket] = renames

        buckets["upload"].extend(moved_in)
        buckets["delete"].extend(moved_out)

        log = DiffLog.from_dict(pair.to_tag, buckets)
        logger.debug("Collected diff log", extra={"diff_log": log.to_dict()})
        return log

    def collect_all(self, pairs: Iterable[VersionPair]) -> Iterator[DiffLog]:
        """Yield a diff log per pair, in pair order."""
        for pair in pairs:
            yield self.collect(pair)
