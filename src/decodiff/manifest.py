"""Reshaping diff logs into finder manifests."""

import logging
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional

from .collector import DiffLog
from .config import ManifestConfig

logger = logging.getLogger(__name__)


@dataclass
class FinderEntry:
    """One image as the finder sees it."""

    name: str
    path: str
    created_ver: Optional[str] = None  # set for first appearances
    update_ver: Optional[str] = None  # set for every later change

    def __post_init__(self) -> None:
        if (self.created_ver is None) == (self.update_ver is None):
            raise ValueError("exactly one of created_ver and update_ver must be set")

    def to_dict(self) -> Dict[str, str]:
        data = {"name": self.name, "path": self.path}
        if self.created_ver is not None:
            data["created_ver"] = self.created_ver
        else:
            data["update_ver"] = self.update_ver
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FinderEntry":
        return cls(
            name=data["name"],
            path=data["path"],
            created_ver=data.get("created_ver"),
            update_ver=data.get("update_ver"),
        )


@dataclass
class RenameAlias:
    """Old asset path kept as an alias for its new path."""

    name: str
    alias_for: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "alias_for": self.alias_for}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenameAlias":
        return cls(name=data["name"], alias_for=data["alias_for"])


@dataclass
class Manifest:
    """What the finder should retire, publish and alias for one version."""

    fixed: List[FinderEntry] = field(default_factory=list)
    upload: List[FinderEntry] = field(default_factory=list)
    rename: List[RenameAlias] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[Dict[str, str]]]:
        return {
            "fixed": [entry.to_dict() for entry in self.fixed],
            "upload": [entry.to_dict() for entry in self.upload],
            "rename": [alias.to_dict() for alias in self.rename],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Manifest":
        return cls(
            fixed=[FinderEntry.from_dict(item) for item in data.get("fixed") or []],
            upload=[FinderEntry.from_dict(item) for item in data.get("upload") or []],
            rename=[RenameAlias.from_dict(item) for item in data.get("rename") or []],
        )


class ManifestBuilder:
    """Routes each diff bucket into the manifest's three lists.

    ========  ==================  ==================  ================
    bucket    upload              fixed               rename
    ========  ==================  ==================  ================
    upload    path, created_ver   -                   -
    modify    path, update_ver    path, update_ver    -
    rename    after, update_ver   before, update_ver  before -> after
    delete    -                   path, update_ver    -
    ========  ==================  ==================  ================
    """

    def __init__(self, config: ManifestConfig):
        self.config = config

    def purename(self, path: str) -> str:
        """File name without directory or image extension."""
        name = PurePosixPath(path).name
        extension = self.config.asset_extension
        if name.endswith(extension) and len(name) > len(extension):
            return name[: -len(extension)]
        return PurePosixPath(name).stem

    def to_finder_entry(self, path: str, tag: str, created: bool = False) -> FinderEntry:
        if created:
            return FinderEntry(name=self.purename(path), path=f"./{path}", created_ver=tag)
        return FinderEntry(name=self.purename(path), path=f"./{path}", update_ver=tag)

    def build(self, diff_log: DiffLog) -> Manifest:
        """Build the manifest for ``diff_log.tag``."""
        tag = diff_log.tag
        manifest = Manifest()

        for path in diff_log.upload:
            logger.debug("%s upload %s", tag, path)
            manifest.upload.append(self.to_finder_entry(path, tag, created=True))

        for path in diff_log.modify:
            logger.debug("%s modify %s", tag, path)
            manifest.fixed.append(self.to_finder_entry(path, tag))
            manifest.upload.append(self.to_finder_entry(path, tag))

        for before, after in diff_log.rename:
            logger.debug("%s rename %s -> %s", tag, before, after)
            manifest.fixed.append(self.to_finder_entry(before, tag))
            manifest.upload.append(self.to_finder_entry(after, tag))
            manifest.rename.append(RenameAlias(name=before, alias_for=after))

        for path in diff_log.delete:
            logger.debug("%s delete %s", tag, path)
            manifest.fixed.append(self.to_finder_entry(path, tag))

        return manifest
