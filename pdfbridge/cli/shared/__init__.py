"""Shared CLI utilities for pdfbridge commands."""

from pdfbridge.cli.shared.context import TaskContext, print_error

__all__ = [
    "TaskContext",
    "print_error",
]
