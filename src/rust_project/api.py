"""Public API for rust_project.

High-level functions that take a document or manifest path and return
complete, structured results. Callers should use these instead of
importing from ``_internal``.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from rust_project.codes import ValidationCode
from rust_project.contracts import ValidationIssue, ValidationResult
from rust_project.kernel.graph import CrateGraph
from rust_project.kernel.loader import UnitResult
from rust_project.kernel.project import Project
from rust_project.kernel.resolve import ResolvedUnit, Resolution, SkippedCrate, resolve_roots
from rust_project.kernel.scheduler import load_units
from rust_project.kernel.timing import TimingReporter, timed
from rust_project.kernel.walk import FileEnumerator, walk_files
from rust_project._internal.io.cargo_metadata import run_cargo_metadata, units_from_metadata
from rust_project._internal.io.project_json import load_project_from_dict, load_project_from_path
from rust_project._internal.verify import verify_project as _verify_project


PHASE_DOCUMENT = "reading project document"
PHASE_CARGO_METADATA = "running cargo-metadata"
PHASE_LOADING = "loading"


def _normalize_path(path: Union[str, os.PathLike, Path]) -> Path:
    """Normalize path input to Path object."""
    return Path(path) if not isinstance(path, Path) else path


@dataclass
class LoadReport:
    """Per-unit load results plus the crates that could not be resolved."""
    results: Dict[str, UnitResult]
    skipped: List[SkippedCrate] = field(default_factory=list)

    @property
    def loaded_names(self) -> List[str]:
        return sorted(self.results)

    @property
    def failed(self) -> Dict[str, OSError]:
        return {name: r.error for name, r in self.results.items() if r.error is not None}

    @property
    def file_count(self) -> int:
        return sum(r.file_count for r in self.results.values())


def load_project(path: Union[str, os.PathLike, Path]) -> Project:
    """Read a rust-project document. Raises ProjectDocumentError on bad input."""
    return load_project_from_path(_normalize_path(path))


def build_crate_graph(project: Project) -> CrateGraph:
    """Build the dependency graph, raising DanglingDependencyError on bad indices."""
    return CrateGraph.from_project(project)


def load_sources(
    units: Sequence[ResolvedUnit],
    reporter: Optional[TimingReporter] = None,
    max_workers: Optional[int] = None,
    honor_source: bool = False,
    enumerate_files: FileEnumerator = walk_files,
) -> Dict[str, UnitResult]:
    """Fan out over units and return name -> result. Never raises for unit I/O errors."""
    with timed(reporter, PHASE_LOADING):
        return load_units(
            units,
            max_workers=max_workers,
            enumerate_files=enumerate_files,
            honor_source=honor_source,
        )


def _load_resolution(
    resolution: Resolution,
    reporter: Optional[TimingReporter],
    max_workers: Optional[int],
    honor_source: bool,
) -> LoadReport:
    results = load_sources(
        resolution.units,
        reporter=reporter,
        max_workers=max_workers,
        honor_source=honor_source,
    )
    return LoadReport(results=results, skipped=list(resolution.skipped))


def load_project_sources(
    path: Union[str, os.PathLike, Path],
    reporter: Optional[TimingReporter] = None,
    max_workers: Optional[int] = None,
    honor_source: bool = False,
) -> LoadReport:
    """Load a rust-project document and read the sources of every named crate."""
    with timed(reporter, PHASE_DOCUMENT):
        project = load_project(path)
    return _load_resolution(resolve_roots(project.crates), reporter, max_workers, honor_source)


def load_cargo_sources(
    manifest_path: Union[str, os.PathLike, Path],
    reporter: Optional[TimingReporter] = None,
    max_workers: Optional[int] = None,
    cargo: Optional[str] = None,
) -> LoadReport:
    """Run ``cargo metadata`` on a manifest and read the sources of every target."""
    with timed(reporter, PHASE_CARGO_METADATA):
        metadata = run_cargo_metadata(_normalize_path(manifest_path), cargo=cargo)
    resolution = units_from_metadata(metadata)
    return _load_resolution(resolution, reporter, max_workers, honor_source=False)


def verify_project(
    project: Union[Project, str, os.PathLike, Path, Dict[str, Any]],
) -> ValidationResult:
    """Check a project against the producer contract.

    Accepts a parsed Project, a document dict or a path. A document that
    cannot be parsed yields a single INVALID_STRUCTURE error.
    """
    if not isinstance(project, Project):
        try:
            if isinstance(project, dict):
                project = load_project_from_dict(project)
            else:
                project = load_project(project)
        except (OSError, ValueError) as e:
            return ValidationResult(
                ok=False,
                errors=[ValidationIssue(
                    code=ValidationCode.INVALID_STRUCTURE.value,
                    message=f"Failed to load project: {e}",
                )],
                warnings=[],
            )
    return _verify_project(project)
