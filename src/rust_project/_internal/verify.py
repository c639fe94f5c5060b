"""Consumer-side checks of the producer contract.

Parsing a document never rejects these problems; this module reports
them so a producer can be fixed.
"""

from __future__ import annotations

from typing import Dict, List

from rust_project.codes import SkipReason, ValidationCode
from rust_project.contracts import ValidationIssue, ValidationResult
from rust_project.kernel.graph import find_dangling_dependencies
from rust_project.kernel.project import Project
from rust_project.kernel.resolve import resolve_roots


def verify_project(project: Project) -> ValidationResult:
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []
    crates = project.crates

    for crate_index, dep_name, target_index in find_dangling_dependencies(crates):
        errors.append(ValidationIssue(
            code=ValidationCode.DANGLING_DEPENDENCY.value,
            message=(
                f"Crate {crate_index} depends on '{dep_name}' at index {target_index}, "
                f"out of range for {len(crates)} crates"
            ),
            crate_index=crate_index,
            display_name=crates[crate_index].display_name,
            dep_index=target_index,
        ))

    resolution = resolve_roots(crates)
    for skipped in resolution.skipped:
        if skipped.reason == SkipReason.MISSING_DISPLAY_NAME:
            code = ValidationCode.MISSING_DISPLAY_NAME
            message = f"Crate {skipped.crate_index} ({skipped.root_module}) has no display_name and will not be loaded"
        else:
            code = ValidationCode.NO_PARENT_DIRECTORY
            message = f"Crate {skipped.crate_index} root module '{skipped.root_module}' has no parent directory"
        warnings.append(ValidationIssue(
            code=code.value,
            message=message,
            crate_index=skipped.crate_index,
            display_name=crates[skipped.crate_index].display_name,
        ))

    first_by_name: Dict[str, int] = {}
    first_by_root: Dict[str, int] = {}
    for index, crate in enumerate(crates):
        if not crate.root_module.is_absolute():
            warnings.append(ValidationIssue(
                code=ValidationCode.RELATIVE_ROOT_MODULE.value,
                message=f"Crate {index} root module '{crate.root_module}' is not an absolute path",
                crate_index=index,
                display_name=crate.display_name,
            ))

        if crate.is_proc_macro and crate.proc_macro_dylib_path is None:
            warnings.append(ValidationIssue(
                code=ValidationCode.MISSING_PROC_MACRO_DYLIB.value,
                message=f"Proc-macro crate {index} has no proc_macro_dylib_path",
                crate_index=index,
                display_name=crate.display_name,
            ))

        if crate.display_name is not None:
            if crate.display_name in first_by_name:
                warnings.append(ValidationIssue(
                    code=ValidationCode.DUPLICATE_DISPLAY_NAME.value,
                    message=(
                        f"Crates {first_by_name[crate.display_name]} and {index} share display_name "
                        f"'{crate.display_name}'; only one of them will be loaded"
                    ),
                    crate_index=index,
                    display_name=crate.display_name,
                    related_crate_index=first_by_name[crate.display_name],
                ))
            else:
                first_by_name[crate.display_name] = index

        root_key = str(crate.root_module)
        if root_key in first_by_root:
            other = first_by_root[root_key]
            if crates[other].source != crate.source:
                warnings.append(ValidationIssue(
                    code=ValidationCode.CONFLICTING_SOURCE.value,
                    message=(
                        f"Crates {other} and {index} share root module '{root_key}' "
                        f"but declare different source sets"
                    ),
                    crate_index=index,
                    display_name=crate.display_name,
                    related_crate_index=other,
                ))
        else:
            first_by_root[root_key] = index

    return ValidationResult(ok=len(errors) == 0, errors=errors, warnings=warnings)
