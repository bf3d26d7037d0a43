"""Collect changed files and diff text from git."""

import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from guardian.utils.exceptions import GitDiffError

DEFAULT_DIFF_RANGE = "origin/main..HEAD"


@dataclass
class CIInfo:
    """CI environment detected from well-known variables."""

    detected: bool = False
    system: str = ""  # "github" | "gitlab" | ""
    base_ref: str = ""
    head_ref: str = ""


@dataclass
class DiffResult:
    changed_files: list[str] = field(default_factory=list)
    diff_content: str = ""


def detect_ci(environ: dict[str, str] | None = None) -> CIInfo:
    """Detect GitHub Actions or GitLab CI merge request context."""
    env = os.environ if environ is None else environ

    base = env.get("GITHUB_BASE_REF", "")
    if base:
        return CIInfo(
            detected=True,
            system="github",
            base_ref=base,
            head_ref=env.get("GITHUB_HEAD_REF", ""),
        )

    base = env.get("CI_MERGE_REQUEST_TARGET_BRANCH_NAME", "")
    if base:
        return CIInfo(
            detected=True,
            system="gitlab",
            base_ref=base,
            head_ref=env.get("CI_MERGE_REQUEST_SOURCE_BRANCH_NAME", ""),
        )

    return CIInfo()


def determine_diff_range(
    explicit: str | None = None,
    environ: dict[str, str] | None = None,
) -> str:
    """Resolve the diff range: explicit argument, then CI, then the default."""
    if explicit:
        return explicit

    ci = detect_ci(environ)
    if ci.detected and ci.base_ref:
        head = ci.head_ref or "HEAD"
        return f"origin/{ci.base_ref}..{head}"

    return DEFAULT_DIFF_RANGE


def _run_git(args: list[str], cwd: str | Path | None) -> str:
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as exc:
        raise GitDiffError("git executable not found") from exc
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        raise GitDiffError(f"running git {' '.join(args)}: {stderr or exc}") from exc
    return result.stdout


def get_changed_files(diff_range: str, cwd: str | Path | None = None) -> list[str]:
    """Return paths from ``git diff --name-only <range>``."""
    raw = _run_git(["diff", "--name-only", diff_range], cwd).strip()
    if not raw:
        return []
    return [line.strip() for line in raw.split("\n") if line.strip()]


def get_diff(diff_range: str, cwd: str | Path | None = None) -> DiffResult:
    """Return the changed files and the full unified diff for ``diff_range``.

    Raises:
        GitDiffError: If git is missing or either command fails.
    """
    changed_files = get_changed_files(diff_range, cwd)
    diff_content = _run_git(["diff", diff_range], cwd)
    return DiffResult(changed_files=changed_files, diff_content=diff_content)
