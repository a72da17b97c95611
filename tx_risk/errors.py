from __future__ import annotations


class RiskAnalysisError(Exception):
    """Base class for transaction risk analysis failures."""


class ValidationError(RiskAnalysisError, ValueError):
    """The request is missing a required field; no collaborator was called."""


class AnalysisError(RiskAnalysisError, RuntimeError):
    """A mandatory lookup (address or gas) failed; no partial result exists."""

    def __init__(self, details: str) -> None:
        super().__init__(details)
        self.details = details
