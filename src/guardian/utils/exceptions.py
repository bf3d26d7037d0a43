"""Exceptions for the git diff source."""


class GitDiffError(RuntimeError):
    """Raised when a git diff command cannot be run or fails."""
