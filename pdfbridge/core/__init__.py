"""Core job control for pdfbridge."""

from pdfbridge.core.remediation import Attempt, RemediationRetryController

__all__ = [
    "Attempt",
    "RemediationRetryController",
]
