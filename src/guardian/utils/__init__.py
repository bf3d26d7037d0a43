"""Utilities for guardian."""

from guardian.utils.diff_parser import parse_diff
from guardian.utils.exceptions import GitDiffError
from guardian.utils.git_diff import (
    CIInfo,
    DiffResult,
    detect_ci,
    determine_diff_range,
    get_diff,
)
from guardian.utils.path_matcher import (
    filter_by_globs,
    match_segment_glob,
    matches,
    matches_any,
)

__all__ = [
    "CIInfo",
    "DiffResult",
    "GitDiffError",
    "detect_ci",
    "determine_diff_range",
    "filter_by_globs",
    "get_diff",
    "match_segment_glob",
    "matches",
    "matches_any",
    "parse_diff",
]
