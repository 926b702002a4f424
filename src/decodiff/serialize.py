"""Manifest JSON serialization for decodiff."""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from .config import ManifestConfig
from .errors import ManifestWriteError
from .manifest import Manifest

logger = logging.getLogger(__name__)


class ManifestSerializer:
    """Writes manifests as compact JSON files named after their tag."""

    def __init__(self, config: ManifestConfig):
        """Initialize with configuration."""
        self.config = config

    def to_json_string(self, manifest: Manifest) -> str:
        """Render a manifest as compact JSON, keys in fixed/upload/rename order."""
        return json.dumps(
            manifest.to_dict(),
            ensure_ascii=False,
            separators=(",", ":"),
        )

    def from_json_string(self, text: str) -> Manifest:
        """Parse a manifest previously written by :meth:`to_json_string`."""
        return Manifest.from_dict(json.loads(text))

    def manifest_path(self, tag: str) -> Path:
        return Path(self.config.output_dir) / f"{tag}.json"

    def write(self, manifest: Manifest, tag: str) -> Path:
        """Write the manifest for ``tag``; the output directory must exist."""
        path = self.manifest_path(tag)
        json_str = self.to_json_string(manifest)
        try:
            path.write_text(json_str, encoding="utf-8")
        except OSError as e:
            raise ManifestWriteError(str(path), e.strerror or str(e)) from e
        except UnicodeEncodeError as e:
            raise ManifestWriteError(str(path), f"path is not valid UTF-8: {e}") from e

        logger.info("%s has been saved!", path)
        return path

    def to_summary_string(self, payload: Dict[str, Any]) -> str:
        """Convert a run summary to pretty-printed JSON."""
        return json.dumps(payload, ensure_ascii=False, indent=2)

    def create_success_envelope(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create success envelope around payload."""
        logger.debug("Creating success envelope")
        return {"ok": True, "data": payload}

    def create_error_envelope(
        self, error_code: str, error_message: str, details: Dict[str, Any] = None
    ) -> Dict[str, Any]:
        """Create error envelope."""
        logger.debug("Creating error envelope", extra={"code": error_code})
        error_data = {
            "code": error_code,
            "message": error_message,
        }
        if details:
            error_data["details"] = details

        return {"ok": False, "error": error_data}
