"""Report models for rule checking."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Violation(BaseModel):
    model_config = ConfigDict(frozen=False)

    rule_id: str
    severity: str                       # "error" | "warning"
    description: str
    file_path: str
    diff_snippet: str = ""              # Offending added line with its "+" prefix
    llm_explanation: str | None = None  # Filled in after the engine by the explainer


class EngineResult(BaseModel):
    model_config = ConfigDict(frozen=False)

    violations: list[Violation] = Field(default_factory=list)
    error_count: int = 0
    warning_count: int = 0

    @property
    def passed(self) -> bool:
        """True if no ERROR-severity violations survived filtering."""
        return self.error_count == 0
