"""LLM-backed agents."""

from guardian.agents.exceptions import AgentError, ExplanationError
from guardian.agents.explainer import ViolationExplainer, parse_explanations

__all__ = [
    "AgentError",
    "ExplanationError",
    "ViolationExplainer",
    "parse_explanations",
]
