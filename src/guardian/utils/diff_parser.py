"""Parse unified diff text into per-file added lines."""

from guardian.models.diff_models import FileDiff

FILE_HEADER = "diff --git "
NEW_PATH_HEADER = "+++ b/"
OLD_PATH_HEADER = "--- "
HUNK_HEADER = "@@"


def parse_diff(diff_content: str) -> list[FileDiff]:
    """Split a unified diff into one FileDiff per ``diff --git`` section.

    Args:
        diff_content: Raw output of ``git diff``.

    Returns:
        FileDiff entries in diff order. Each holds the "+++ b/" path and the
        added lines with their leading "+" stripped. Context, removed and
        metadata lines are dropped. Empty input yields an empty list.
    """
    if not diff_content:
        return []

    result: list[FileDiff] = []
    current_path: str | None = None  # None until the first file header
    current_lines: list[str] = []

    for line in diff_content.split("\n"):
        if line.startswith(FILE_HEADER):
            if current_path is not None:
                result.append(FileDiff(path=current_path, added_lines=tuple(current_lines)))
            current_path = ""
            current_lines = []
            continue

        if line.startswith(NEW_PATH_HEADER):
            if current_path is not None:
                current_path = line[len(NEW_PATH_HEADER):]
            continue

        if line.startswith(OLD_PATH_HEADER) or line.startswith(HUNK_HEADER):
            continue

        if line.startswith("+") and current_path is not None:
            current_lines.append(line[1:])

    if current_path is not None:
        result.append(FileDiff(path=current_path, added_lines=tuple(current_lines)))

    return result
