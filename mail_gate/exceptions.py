"""Custom exceptions for mail-gate.

Validation outcomes are returned as values, never raised. These exceptions
cover misuse and configuration problems only.
"""


class MailGateError(Exception):
    """Base exception for all mail-gate errors."""

    pass


class UnknownHeaderError(MailGateError, KeyError):
    """Raised when a header name matches no known header or alias."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown header: {self.name!r}"


class ConfigurationError(MailGateError):
    """Raised when a collaborator is missing required configuration."""

    pass
