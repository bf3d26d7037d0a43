"""Models for representing parsed unified diffs."""

from pydantic import BaseModel, ConfigDict, Field


class FileDiff(BaseModel):
    """Added lines for a single file touched by a unified diff."""

    model_config = ConfigDict(frozen=True)

    path: str = ""  # Taken from the "+++ b/" header; empty for deletions
    added_lines: tuple[str, ...] = Field(default_factory=tuple)  # Without the leading "+"
