"""Error definitions and handling for the decodiff tool."""

from typing import Any, Dict, List, Optional


class DecoDiffError(Exception):
    """Base exception for decodiff errors."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize error with code, message, and optional details."""
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON serialization."""
        result = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class ToolInvocationError(DecoDiffError):
    """A git query could not be run or exited non-zero."""

    def __init__(
        self,
        args: List[str],
        reason: str,
        returncode: Optional[int] = None,
        code: str = "GIT_INVOCATION_FAILED",
    ):
        super().__init__(
            code=code,
            message=f"git {' '.join(args)} failed: {reason}",
            details={"args": args, "returncode": returncode, "reason": reason},
        )


class GitTimeoutError(ToolInvocationError):
    """A git query exceeded its timeout."""

    def __init__(self, args: List[str], timeout_seconds: int):
        super().__init__(
            args,
            f"timed out after {timeout_seconds}s",
            code="GIT_TIMEOUT",
        )
        self.details["timeout_seconds"] = timeout_seconds


class ManifestWriteError(DecoDiffError):
    """A manifest file could not be written."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            code="MANIFEST_WRITE_FAILED",
            message=f"Failed to write manifest {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class ConfigInvalidError(DecoDiffError):
    """Invalid run configuration."""

    def __init__(self, reason: str):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Invalid configuration: {reason}",
            details={"reason": reason},
        )
