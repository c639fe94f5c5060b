"""Pydantic models for the rust-project document.

The document describes a workspace for build systems other than Cargo:
the crates, their dependency edges, the sysroot and a set of prebuilt
runnables. Parsing is permissive about graph consistency; use
:class:`rust_project.kernel.graph.CrateGraph` or
:func:`rust_project.api.verify_project` to check it.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Dict, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_validator,
    model_serializer,
    model_validator,
)

from rust_project._internal.canonical_json import canonical_dumps


class Edition(str, Enum):
    """Rust language edition of a crate."""
    EDITION_2015 = "2015"
    EDITION_2018 = "2018"
    EDITION_2021 = "2021"


class TargetKind(str, Enum):
    """Kind of build target a crate was produced from."""
    BIN = "bin"
    LIB = "lib"  # any library crate-type (dylib, rlib, proc-macro, ...)
    EXAMPLE = "example"
    TEST = "test"
    BENCH = "bench"
    BUILD_SCRIPT = "buildScript"
    OTHER = "other"


class RunnableKind(str, Enum):
    CHECK = "check"
    FLYCHECK = "flycheck"
    RUN = "run"
    TEST_ONE = "testOne"


def _canonical_set(values: Any) -> tuple:
    """Canonicalize a set-like field to a sorted tuple without duplicates."""
    if values is None:
        return ()
    if isinstance(values, (str, Path)):
        values = [values]
    return tuple(sorted(set(values), key=str))


class _OmitNoneModel(BaseModel):
    """Base model that leaves selected optional fields out of its dump when unset."""

    # Fields dropped from serialized output when None (never emitted as null)
    _omit_if_none: ClassVar[frozenset] = frozenset()

    @model_serializer(mode="wrap")
    def drop_absent_optionals(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        data = handler(self)
        for name in self._omit_if_none:
            if data.get(name, "") is None:
                del data[name]
        return data


class Source(BaseModel):
    """Explicit (super)set of files comprising a crate.

    Any file under one of ``include_dirs`` belongs to the crate unless it
    is also under one of ``exclude_dirs``. If two crates share a file,
    they must declare the same source.
    """
    include_dirs: tuple[Path, ...] = ()
    exclude_dirs: tuple[Path, ...] = ()

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("include_dirs", "exclude_dirs", mode="before")
    @classmethod
    def canonicalize_dirs(cls, v: Any) -> tuple:
        return _canonical_set(v)

    def contains(self, path: Path) -> bool:
        """Return True if ``path`` is under an include dir and no exclude dir."""
        if not any(_is_within(path, d) for d in self.include_dirs):
            return False
        return not any(_is_within(path, d) for d in self.exclude_dirs)


def _is_within(path: Path, directory: Path) -> bool:
    return path == directory or directory in path.parents


class Build(BaseModel):
    """Build-system specific metadata for a crate (e.g. a Buck target)."""
    label: str
    build_file: Path  # the BUCK/TARGETS file
    target_kind: TargetKind = TargetKind.BIN

    model_config = ConfigDict(frozen=True, extra="ignore")


class Dep(BaseModel):
    """Dependency edge: index into ``Project.crates`` plus the local name."""
    crate_index: int = Field(..., alias="crate")
    name: str

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class Crate(_OmitNoneModel):
    """One logical compilation unit."""
    display_name: Optional[str] = None  # cosmetic, but required for loading
    root_module: Path
    edition: Edition = Edition.EDITION_2021
    deps: tuple[Dep, ...] = ()
    is_workspace_member: bool = False
    source: Optional[Source] = None
    cfg: tuple[str, ...] = ()
    target: Optional[str] = None
    build: Optional[Build] = None
    env: Dict[str, str] = Field(default_factory=dict)
    is_proc_macro: bool = False
    proc_macro_dylib_path: Optional[Path] = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    _omit_if_none: ClassVar[frozenset] = frozenset({"source", "target", "build", "proc_macro_dylib_path"})

    @field_validator("cfg", mode="before")
    @classmethod
    def canonicalize_cfg(cls, v: Any) -> tuple:
        """Activated cfgs are a set: order and duplicates carry no meaning."""
        return _canonical_set(v)

    @property
    def source_root(self) -> Optional[Path]:
        """Parent directory of the root module, or None if it has none."""
        parent = self.root_module.parent
        if parent == self.root_module:
            return None
        return parent


class Sysroot(_OmitNoneModel):
    """Sysroot paths.

    ``sysroot`` is the toolchain directory (a superset of the library
    sources). ``sysroot_src`` is only needed when the library sources are
    packaged separately from the binaries.
    """
    sysroot: Path
    sysroot_src: Optional[Path] = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    _omit_if_none: ClassVar[frozenset] = frozenset({"sysroot_src"})


class Runnable(BaseModel):
    """Prebuilt command line; opaque to the loader."""
    program: str
    args: tuple[str, ...] = ()
    cwd: Path
    kind: RunnableKind

    model_config = ConfigDict(frozen=True, extra="ignore")


class Project(BaseModel):
    """Root of a rust-project document.

    ``crates`` must include every transitive dependency of every workspace
    member as well as the sysroot crates (std, core, ...). This is a
    producer contract and is not checked here.
    """
    sysroot: Sysroot
    crates: tuple[Crate, ...] = ()
    runnables: tuple[Runnable, ...] = ()
    generated: str = ""

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def nest_sysroot(cls, data: Any) -> Any:
        """Fold the flattened ``sysroot``/``sysroot_src`` keys into a Sysroot."""
        if not isinstance(data, dict):
            return data
        sysroot = data.get("sysroot")
        if sysroot is None or isinstance(sysroot, (dict, Sysroot)):
            return data
        data = dict(data)
        data["sysroot"] = {
            "sysroot": sysroot,
            "sysroot_src": data.pop("sysroot_src", None),
        }
        return data

    @model_serializer(mode="wrap")
    def flatten_sysroot(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        data = handler(self)
        sysroot = data.pop("sysroot")
        return {**sysroot, **data}

    def to_document(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict in document form."""
        return self.model_dump(mode="json", by_alias=True)


def parse_project(data: Dict[str, Any]) -> Project:
    """Parse a document dict into a Project.

    Dependency indices are not checked; a dangling index still parses.
    """
    return Project.model_validate(data)


def dumps_project(project: Project) -> str:
    """Canonical JSON text of a project document."""
    return canonical_dumps(project.to_document())
