"""Exceptions for agent operations."""


class AgentError(Exception):
    """Base exception for all agent operations."""


class ExplanationError(AgentError):
    """Raised when the LLM cannot produce violation explanations."""
