"""Exceptions for the .agreements/ store."""


class AgreementsError(Exception):
    """Base exception for agreements store operations."""


class AgreementsNotFoundError(AgreementsError):
    """Raised when no .agreements/ directory exists above the start directory."""


class AgreementsLoadError(AgreementsError):
    """Raised when a store file cannot be read or parsed."""


class AgreementsValidationError(AgreementsError):
    """Raised when a loaded document fails validation.

    ``problems`` holds every individual issue found.
    """

    def __init__(self, kind: str, problems: list[str]) -> None:
        self.kind = kind
        self.problems = list(problems)
        details = "\n  - ".join(self.problems)
        super().__init__(f"{kind} validation failed:\n  - {details}")


class ProposalNotFoundError(AgreementsError):
    """Raised when no proposal file carries the requested id."""
