"""Code constants for verification issues and skipped crates.

These constants prevent stringly-typed codes and ensure client code
matches on the values reported by ``rust_project.api``.
"""

from enum import Enum


class ValidationCode(str, Enum):
    """Project verification error and warning codes."""

    # Errors (blocking)
    INVALID_STRUCTURE = "INVALID_STRUCTURE"
    DANGLING_DEPENDENCY = "DANGLING_DEPENDENCY"

    # Warnings (non-blocking)
    MISSING_DISPLAY_NAME = "MISSING_DISPLAY_NAME"
    NO_PARENT_DIRECTORY = "NO_PARENT_DIRECTORY"
    DUPLICATE_DISPLAY_NAME = "DUPLICATE_DISPLAY_NAME"
    MISSING_PROC_MACRO_DYLIB = "MISSING_PROC_MACRO_DYLIB"
    CONFLICTING_SOURCE = "CONFLICTING_SOURCE"
    RELATIVE_ROOT_MODULE = "RELATIVE_ROOT_MODULE"


class SkipReason(str, Enum):
    """Why a crate was left out of the loadable set."""

    MISSING_DISPLAY_NAME = "MISSING_DISPLAY_NAME"
    NO_PARENT_DIRECTORY = "NO_PARENT_DIRECTORY"
