"""
Error Reporting Module

Out-of-band reporting of failures that do not surface as return values,
such as a message the transport refused to deliver.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum


class Severity(Enum):
    """Severity levels for reported errors."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


_LEVELS = {
    Severity.LOW: logging.INFO,
    Severity.MEDIUM: logging.WARNING,
    Severity.HIGH: logging.ERROR,
    Severity.CRITICAL: logging.CRITICAL,
}


class ErrorReporterBase(ABC):
    """Abstract base class for error reporters."""

    @abstractmethod
    def log(self, message: str, severity: Severity = Severity.MEDIUM) -> None:
        """
        Report an error.

        Args:
            message: Human readable description of the failure
            severity: How serious the failure is
        """
        pass


class LoggingErrorReporter(ErrorReporterBase):
    """Reports errors through the standard logging module."""

    def __init__(self, logger_name: str = "mail_gate.errors"):
        self.logger = logging.getLogger(logger_name)

    def log(self, message: str, severity: Severity = Severity.MEDIUM) -> None:
        self.logger.log(_LEVELS[severity], message, extra={"severity": severity.value})
