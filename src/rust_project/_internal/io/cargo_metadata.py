"""Derive crates from ``cargo metadata`` output."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rust_project._internal.config import cargo_executable
from rust_project.kernel.project import Build, Crate, Dep, Edition, TargetKind
from rust_project.kernel.resolve import Resolution, resolve_roots


class CargoMetadataError(ValueError):
    """Raised when ``cargo metadata`` fails or returns unusable output."""


class CargoExecutableNotFoundError(CargoMetadataError):
    """Raised when the cargo executable cannot be started."""


class CargoTarget(BaseModel):
    name: str
    kind: List[str] = Field(default_factory=list)
    src_path: Path
    edition: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class CargoPackage(BaseModel):
    id: str
    name: str
    version: str = ""
    edition: str = "2021"
    manifest_path: Path
    targets: List[CargoTarget] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class CargoNodeDep(BaseModel):
    name: str
    pkg: str

    model_config = ConfigDict(extra="ignore")


class CargoResolveNode(BaseModel):
    id: str
    deps: List[CargoNodeDep] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class CargoResolve(BaseModel):
    nodes: List[CargoResolveNode] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class CargoMetadata(BaseModel):
    """The subset of ``cargo metadata --format-version 1`` used here."""
    packages: List[CargoPackage]
    workspace_members: List[str] = Field(default_factory=list)
    resolve: Optional[CargoResolve] = None
    workspace_root: Optional[Path] = None

    model_config = ConfigDict(extra="ignore")


_LIB_KINDS = {"lib", "rlib", "dylib", "cdylib", "staticlib", "proc-macro"}
_TARGET_KINDS = {
    "bin": TargetKind.BIN,
    "example": TargetKind.EXAMPLE,
    "test": TargetKind.TEST,
    "bench": TargetKind.BENCH,
    "custom-build": TargetKind.BUILD_SCRIPT,
}


def run_cargo_metadata(manifest_path: Path, cargo: Optional[str] = None) -> CargoMetadata:
    """Run ``cargo metadata`` for a manifest and parse its output."""
    if not manifest_path.exists():
        raise FileNotFoundError(f"Manifest not found: {manifest_path}")

    cmd = [
        cargo or cargo_executable(),
        "metadata",
        "--format-version",
        "1",
        "--manifest-path",
        str(manifest_path),
    ]
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError as e:
        raise CargoExecutableNotFoundError(f"cargo executable not found: {cmd[0]}") from e

    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()
        raise CargoMetadataError(
            f"cargo metadata failed with exit code {proc.returncode}: {stderr}"
        )
    return parse_cargo_metadata(proc.stdout)


def parse_cargo_metadata(text: str) -> CargoMetadata:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CargoMetadataError(f"cargo metadata produced invalid JSON: {e}") from e
    try:
        return CargoMetadata.model_validate(data)
    except ValidationError as e:
        raise CargoMetadataError(f"unexpected cargo metadata shape: {e}") from e


def target_kind(target: CargoTarget) -> TargetKind:
    if any(kind in _LIB_KINDS for kind in target.kind):
        return TargetKind.LIB
    for kind in target.kind:
        if kind in _TARGET_KINDS:
            return _TARGET_KINDS[kind]
    return TargetKind.OTHER


def _edition(raw: Optional[str]) -> Edition:
    # Editions newer than the document format knows map to the default.
    try:
        return Edition(raw)
    except ValueError:
        return Edition.EDITION_2021


def crates_from_metadata(metadata: CargoMetadata) -> List[Crate]:
    """One crate per (package, target), with deps taken from the resolve graph.

    Library targets are what other packages depend on. Every non-library
    target of a package also depends on that package's own library.
    """
    members = set(metadata.workspace_members)
    nodes: Dict[str, CargoResolveNode] = {}
    if metadata.resolve is not None:
        nodes = {node.id: node for node in metadata.resolve.nodes}

    # First pass: assign indices so deps can refer forward.
    index_of_lib: Dict[str, int] = {}
    lib_names: Dict[str, str] = {}
    slots = []
    for package in metadata.packages:
        for target in package.targets:
            kind = target_kind(target)
            if kind == TargetKind.LIB and package.id not in index_of_lib:
                index_of_lib[package.id] = len(slots)
                lib_names[package.id] = target.name.replace("-", "_")
            slots.append((package, target, kind))

    crates: List[Crate] = []
    for index, (package, target, kind) in enumerate(slots):
        deps: List[Dep] = []
        own_lib = index_of_lib.get(package.id)
        if own_lib is not None and own_lib != index and kind != TargetKind.BUILD_SCRIPT:
            deps.append(Dep(crate_index=own_lib, name=lib_names[package.id]))

        node = nodes.get(package.id)
        features: List[str] = []
        if node is not None:
            features = node.features
            for node_dep in node.deps:
                dep_index = index_of_lib.get(node_dep.pkg)
                if dep_index is not None and dep_index != index:
                    deps.append(Dep(crate_index=dep_index, name=node_dep.name))

        crates.append(Crate(
            display_name=target.name,
            root_module=target.src_path,
            edition=_edition(target.edition or package.edition),
            deps=tuple(deps),
            is_workspace_member=package.id in members,
            cfg=tuple(f'feature="{feature}"' for feature in features),
            build=Build(label=f"{package.name}::{target.name}", build_file=package.manifest_path, target_kind=kind),
            env={
                "CARGO_PKG_NAME": package.name,
                "CARGO_PKG_VERSION": package.version,
                "CARGO_MANIFEST_DIR": str(package.manifest_path.parent),
                "CARGO_CRATE_NAME": target.name.replace("-", "_"),
            },
            is_proc_macro="proc-macro" in target.kind,
        ))
    return crates


def units_from_metadata(metadata: CargoMetadata) -> Resolution:
    """Every target with a resolvable source directory, keyed by target name."""
    return resolve_roots(crates_from_metadata(metadata))
