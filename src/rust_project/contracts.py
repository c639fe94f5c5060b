"""Public result models for project verification."""

from typing import List, Optional
from pydantic import BaseModel


class ValidationIssue(BaseModel):
    """A single verification issue (error or warning)."""
    code: str  # a ValidationCode value
    message: str
    crate_index: Optional[int] = None
    display_name: Optional[str] = None
    dep_index: Optional[int] = None  # For DANGLING_DEPENDENCY errors
    related_crate_index: Optional[int] = None  # For DUPLICATE_DISPLAY_NAME / CONFLICTING_SOURCE


class ValidationResult(BaseModel):
    """Result of verifying a project document."""
    ok: bool  # True if no errors (warnings don't block)
    errors: List[ValidationIssue]
    warnings: List[ValidationIssue]
