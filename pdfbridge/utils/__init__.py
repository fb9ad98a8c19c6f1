"""Utility module for pdfbridge."""

from pdfbridge.utils.fs import (
    delete_paths,
    discover_files,
    get_unique_path,
    is_hidden,
    temporary_directory,
)

__all__ = [
    "delete_paths",
    "discover_files",
    "get_unique_path",
    "is_hidden",
    "temporary_directory",
]
