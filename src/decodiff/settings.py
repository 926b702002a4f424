"""Application-wide settings and environment loading."""

import logging
import os
from functools import lru_cache
from typing import Dict, Optional

from dotenv import load_dotenv

from .config import (
    DEFAULT_ASSET_DIR,
    DEFAULT_ASSET_EXTENSION,
    DEFAULT_LEGACY_TAG,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_VERSION_PREFIX,
)

logger = logging.getLogger(__name__)

load_dotenv()
logger.debug("Environment variables loaded from .env if present")


@lru_cache(maxsize=1)
def get_default_settings() -> Dict[str, Optional[str]]:
    """Return CLI defaults, overridden by DECODIFF_* environment variables."""
    legacy_tag: Optional[str] = os.getenv("DECODIFF_LEGACY_TAG", DEFAULT_LEGACY_TAG)
    if legacy_tag is not None and not legacy_tag.strip():
        legacy_tag = None

    settings = {
        "repo_path": os.getenv("DECODIFF_REPO", "."),
        "version_prefix": os.getenv("DECODIFF_VERSION_PREFIX", DEFAULT_VERSION_PREFIX),
        "legacy_tag": legacy_tag,
        "asset_dir": os.getenv("DECODIFF_ASSET_DIR", DEFAULT_ASSET_DIR),
        "asset_extension": os.getenv("DECODIFF_ASSET_EXT", DEFAULT_ASSET_EXTENSION),
        "output_dir": os.getenv("DECODIFF_OUTPUT_DIR", DEFAULT_OUTPUT_DIR),
    }
    logger.debug("Default settings resolved", extra={"settings": settings})
    return settings
