"""Main CLI entry point for decodiff."""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from .collector import DiffCollector
from .config import ManifestConfig
from .errors import DecoDiffError
from .logging_utils import configure_logging
from .manifest import ManifestBuilder
from .serialize import ManifestSerializer
from .settings import get_default_settings
from .vcs import GitHistory, HistorySource
from .versions import build_version_pairs, list_version_tags

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    defaults = get_default_settings()
    parser = argparse.ArgumentParser(
        prog="decodiff",
        description="Write per-version decomoji finder manifests from git tags",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  decodiff
  decodiff --repo ../decomoji --output-dir ./configs
  decodiff --prefix 'v6' --legacy-tag v5.99.0 --tag-sort version:refname
  decodiff --dry-run --log-level DEBUG
        """,
    )

    parser.add_argument(
        "--repo",
        default=defaults["repo_path"],
        help="Path to the git checkout (default: current directory)",
    )
    parser.add_argument(
        "--prefix",
        default=defaults["version_prefix"],
        help="Pattern release tags must start with (default: %(default)s)",
    )
    legacy = parser.add_mutually_exclusive_group()
    legacy.add_argument(
        "--legacy-tag",
        default=defaults["legacy_tag"],
        help="Baseline tag diffed against the first release (default: %(default)s)",
    )
    legacy.add_argument(
        "--no-legacy-tag",
        action="store_true",
        help="Do not prepend a baseline tag",
    )
    parser.add_argument(
        "--asset-dir",
        default=defaults["asset_dir"],
        help="Directory holding the images (default: %(default)s)",
    )
    parser.add_argument(
        "--asset-ext",
        default=defaults["asset_extension"],
        help="Image file extension (default: %(default)s)",
    )
    parser.add_argument(
        "--output-dir",
        default=defaults["output_dir"],
        help="Existing directory manifests are written to (default: %(default)s)",
    )
    parser.add_argument(
        "--find-renames",
        type=int,
        default=100,
        help="Rename detection threshold percentage (default: 100)",
    )
    parser.add_argument(
        "--tag-sort",
        help="Sort key passed to git tag --sort, e.g. version:refname",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=60,
        help="Seconds allowed per git query (default: 60)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build manifests and print them instead of writing files",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (default: LOG_LEVEL env var or INFO)",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command line arguments."""
    if not (0 <= args.find_renames <= 100):
        raise ValueError("--find-renames must be between 0 and 100")
    if args.timeout <= 0:
        raise ValueError("--timeout must be positive")


def create_config(args: argparse.Namespace) -> ManifestConfig:
    """Create configuration from command line arguments."""
    return ManifestConfig(
        repo_path=args.repo,
        version_prefix=args.prefix,
        legacy_tag=None if args.no_legacy_tag else args.legacy_tag,
        tag_sort=args.tag_sort,
        asset_dir=args.asset_dir,
        asset_extension=args.asset_ext,
        output_dir=args.output_dir,
        dry_run=args.dry_run,
        find_renames_threshold=args.find_renames,
        git_timeout=args.timeout,
    )


def run_pipeline(config: ManifestConfig, history: HistorySource) -> Dict[str, Any]:
    """Write one manifest per release tag and return a run summary.

    Tags are processed in order and each manifest is written before the
    next tag is diffed, so a failure leaves earlier manifests in place.
    """
    summary: Dict[str, Any] = {
        "config": config.to_dict(),
        "tags": [],
        "written": [],
        "manifests": {},
    }

    tags = list_version_tags(history, config)
    if not tags:
        logger.info("No tags match %r, nothing to process", config.version_prefix)
        return summary

    pairs = build_version_pairs(tags)
    collector = DiffCollector(history, config)
    builder = ManifestBuilder(config)
    serializer = ManifestSerializer(config)

    logger.info("-" * 37)
    for diff_log in collector.collect_all(pairs):
        if diff_log.is_empty:
            logger.info("No asset changes in %s", diff_log.tag)
        manifest = builder.build(diff_log)
        summary["tags"].append(diff_log.tag)
        if config.dry_run:
            summary["manifests"][diff_log.tag] = manifest.to_dict()
        else:
            path = serializer.write(manifest, diff_log.tag)
            summary["written"].append(str(path))
        logger.info("-" * 37)

    return summary


def output_result(serializer: ManifestSerializer, result: Dict[str, Any]) -> None:
    """Print a result envelope to stdout."""
    print(serializer.to_summary_string(result))


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    serializer = ManifestSerializer(ManifestConfig())
    try:
        validate_args(args)

        config = create_config(args)

        with GitHistory(config) as history:
            summary = run_pipeline(config, history)

        output_result(serializer, serializer.create_success_envelope(summary))
        return 0

    except DecoDiffError as e:
        logger.error("%s", e.message, exc_info=True)
        output_result(serializer, serializer.create_error_envelope(e.code, e.message, e.details))
        return 1

    except Exception as e:
        logger.exception("Unexpected error")
        output_result(
            serializer,
            serializer.create_error_envelope(
                "INTERNAL_ERROR",
                f"Internal error: {str(e)}",
                {"type": type(e).__name__},
            )
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
