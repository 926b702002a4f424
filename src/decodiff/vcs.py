"""Version control queries for decodiff."""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Protocol, Tuple

from .config import ManifestConfig
from .errors import GitTimeoutError, ToolInvocationError

logger = logging.getLogger(__name__)

# diff-filter modes answered by a plain --name-only query
NAME_ONLY_MODES = ("A", "M", "D")

RenamePair = Tuple[str, str]


class HistorySource(Protocol):
    """The three queries the manifest pipeline asks of a history."""

    def list_tags(self) -> List[str]:
        ...

    def diff_names(self, from_tag: str, to_tag: str, mode: str) -> List[str]:
        ...

    def diff_renames(self, from_tag: str, to_tag: str) -> List[RenamePair]:
        ...


def split_records(text: str) -> List[str]:
    """Split line-oriented git output into non-empty records."""
    records = []
    for line in text.split("\n"):
        line = line.rstrip("\r")
        if line:
            records.append(line)
    return records


def parse_rename_records(text: str, min_score: int = 0) -> List[RenamePair]:
    """Parse `git diff --name-status --diff-filter=R` output.

    Each record looks like ``R100<TAB>old/path<TAB>new/path``. The status
    token is dropped; records scoring below ``min_score`` are skipped.
    """
    renames = []
    for record in split_records(text):
        parts = record.split("\t")
        status = parts[0]
        if not status.startswith("R") or len(parts) != 3:
            logger.warning("Skipping unexpected rename record: %r", record)
            continue

        score_text = status[1:]
        if score_text.isdigit() and int(score_text) < min_score:
            logger.debug(
                "Skipping rename below similarity threshold",
                extra={"record": record, "min_score": min_score},
            )
            continue

        renames.append((parts[1], parts[2]))
    return renames


class GitHistory:
    """Git-backed history queries run against a local checkout."""

    def __init__(self, config: ManifestConfig):
        """Initialize with configuration."""
        self.config = config
        self.workdir: Optional[Path] = None

    def __enter__(self) -> "GitHistory":
        """Context manager entry."""
        self.workdir = Path(self.config.repo_path).resolve()
        logger.debug("Opened git history", extra={"workdir": str(self.workdir)})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        logger.debug(
            "Closed git history",
            extra={"workdir": str(self.workdir), "failed": exc_type is not None},
        )
        self.workdir = None

    def _run_git(self, args: List[str]) -> str:
        """Run a git query and return its stdout."""
        # core.quotepath=false keeps non-ASCII file names unescaped
        cmd = [
            "git",
            "-c",
            "core.quotepath=false",
            "-c",
            "color.ui=false",
        ] + args
        cwd = self.workdir or Path(self.config.repo_path)
        timeout = self.config.git_timeout
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                env=self.config.git_env,
                timeout=timeout,
                check=True,
                capture_output=True,
                text=True,
                encoding="utf-8",
                # undecodable names pass through and fail the asset filter
                errors="surrogateescape",
            )
        except subprocess.TimeoutExpired as e:
            raise GitTimeoutError(args, timeout) from e
        except subprocess.CalledProcessError as e:
            reason = (e.stderr or "").strip() or f"exit status {e.returncode}"
            raise ToolInvocationError(args, reason, e.returncode) from e
        except OSError as e:
            raise ToolInvocationError(args, str(e)) from e
        return result.stdout

    def _diff_args(self, from_tag: str, to_tag: str, fmt: str, mode: str) -> List[str]:
        return [
            "diff",
            fmt,
            f"--find-renames={self.config.find_renames_threshold}%",
            f"--diff-filter={mode}",
            f"{from_tag}...{to_tag}",
        ]

    def list_tags(self) -> List[str]:
        """List all tags in the order git reports them."""
        args = ["tag", "--list"]
        if self.config.tag_sort:
            args.append(f"--sort={self.config.tag_sort}")
        return split_records(self._run_git(args))

    def diff_names(self, from_tag: str, to_tag: str, mode: str) -> List[str]:
        """List paths changed between two tags with the given diff-filter."""
        if mode not in NAME_ONLY_MODES:
            raise ValueError(f"Unsupported diff mode: {mode!r}")
        output = self._run_git(self._diff_args(from_tag, to_tag, "--name-only", mode))
        return split_records(output)

    def diff_renames(self, from_tag: str, to_tag: str) -> List[RenamePair]:
        """List (before, after) path pairs renamed between two tags."""
        output = self._run_git(self._diff_args(from_tag, to_tag, "--name-status", "R"))
        return parse_rename_records(output, self.config.find_renames_threshold)
