"""Pytest configuration and fixtures for decodiff tests."""

import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Dict, Generator, List, Optional, Tuple

import pytest

from decodiff.vcs import NAME_ONLY_MODES, parse_rename_records, split_records

# Smallest byte string git treats as a PNG image
PNG_BYTES = b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01'


class FakeHistory:
    """History source answering from canned git output."""

    def __init__(
        self,
        tag_output: str = "",
        diff_outputs: Optional[Dict[Tuple[str, str, str], str]] = None,
    ):
        self.tag_output = tag_output
        self.diff_outputs = diff_outputs or {}
        self.calls: List[Tuple[str, ...]] = []

    def list_tags(self) -> List[str]:
        self.calls.append(("tags",))
        return split_records(self.tag_output)

    def diff_names(self, from_tag: str, to_tag: str, mode: str) -> List[str]:
        assert mode in NAME_ONLY_MODES
        self.calls.append((mode, from_tag, to_tag))
        return split_records(self.diff_outputs.get((from_tag, to_tag, mode), ""))

    def diff_renames(self, from_tag: str, to_tag: str) -> List[Tuple[str, str]]:
        self.calls.append(("R", from_tag, to_tag))
        return parse_rename_records(self.diff_outputs.get((from_tag, to_tag, "R"), ""))


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp(prefix="decodiff_test_"))
    try:
        yield temp_path
    finally:
        if temp_path.exists():
            shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def output_dir(temp_dir: Path) -> Path:
    """An existing directory for manifests."""
    path = temp_dir / "configs"
    path.mkdir()
    return path


class GitRepoHelper:
    """Helper class for git repository operations in tests."""

    def __init__(self, repo_path: Path):
        self.repo_path = repo_path
        self.env = os.environ.copy()
        self.env.update({
            "GIT_AUTHOR_NAME": "Test User",
            "GIT_AUTHOR_EMAIL": "test@example.com",
            "GIT_COMMITTER_NAME": "Test User",
            "GIT_COMMITTER_EMAIL": "test@example.com",
        })

    def run_git(self, args: list[str]) -> subprocess.CompletedProcess:
        """Run git command in the repository."""
        return subprocess.run(
            ["git"] + args,
            cwd=self.repo_path,
            env=self.env,
            check=True,
            capture_output=True,
            text=True,
        )

    def create_file(self, path: str, content: str) -> None:
        """Create a file with content."""
        file_path = self.repo_path / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)

    def create_image(self, path: str, salt: bytes = b"") -> None:
        """Create a small PNG-like binary file."""
        file_path = self.repo_path / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(PNG_BYTES + salt)

    def delete_file(self, path: str) -> None:
        """Delete a file."""
        file_path = self.repo_path / path
        if file_path.exists():
            file_path.unlink()

    def move_file(self, old: str, new: str) -> None:
        """Rename a tracked file."""
        self.run_git(["mv", old, new])

    def commit_and_tag(self, message: str, tag: str) -> str:
        """Commit everything and tag the result, return commit SHA."""
        self.run_git(["add", "-A"])
        self.run_git(["commit", "-m", message])
        self.run_git(["tag", tag])
        result = self.run_git(["rev-parse", "HEAD"])
        return result.stdout.strip()


@pytest.fixture
def git_repo(temp_dir: Path) -> Generator[Path, None, None]:
    """Create a temporary git repository for testing."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")

    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    helper = GitRepoHelper(repo_path)
    helper.run_git(["init"])
    helper.run_git(["config", "user.name", "Test User"])
    helper.run_git(["config", "user.email", "test@example.com"])

    (repo_path / "README.md").write_text("# Test Repository\n")
    helper.run_git(["add", "README.md"])
    helper.run_git(["commit", "-m", "Initial commit"])

    yield repo_path


@pytest.fixture
def git_helper(git_repo: Path) -> GitRepoHelper:
    """Create a git repository helper."""
    return GitRepoHelper(git_repo)


@pytest.fixture
def make_history():
    """Factory for canned-output history sources."""
    return FakeHistory
