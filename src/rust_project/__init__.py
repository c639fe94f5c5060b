"""rust_project: rust-project.json model and parallel source loader."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("rust-project-loader")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from rust_project.api import (
    LoadReport,
    build_crate_graph,
    load_cargo_sources,
    load_project,
    load_project_sources,
    load_sources,
    verify_project,
)
from rust_project.codes import SkipReason, ValidationCode
from rust_project.contracts import ValidationIssue, ValidationResult
from rust_project.kernel.project import Crate, Dep, Project, Runnable, Sysroot

__all__ = [
    "__version__",
    "Crate",
    "Dep",
    "LoadReport",
    "Project",
    "Runnable",
    "SkipReason",
    "Sysroot",
    "ValidationCode",
    "ValidationIssue",
    "ValidationResult",
    "build_crate_graph",
    "load_cargo_sources",
    "load_project",
    "load_project_sources",
    "load_sources",
    "verify_project",
]
