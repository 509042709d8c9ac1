"""
Exception hierarchy for the quote acceptance engine.

Evaluation outcomes are never exceptions: ineligible quotes are rejected with
feedback and missing inputs yield no result. These errors cover setup only.
"""


class AcceptanceError(Exception):
    """Base exception for all engine errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(AcceptanceError):
    """Invalid configuration section."""

    pass
