"""Utility functions for the SchoolWise client."""

from .common import (
    validate_file_path,
    validate_directory_path,
    sanitize_school_name,
    unique_path,
    open_file_externally,
)

__all__ = [
    "validate_file_path",
    "validate_directory_path",
    "sanitize_school_name",
    "unique_path",
    "open_file_externally",
]
