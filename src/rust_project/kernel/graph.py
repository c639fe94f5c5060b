"""Index-addressed crate graph with eager dependency validation."""

from __future__ import annotations

from typing import Iterator, List, NewType, Optional, Sequence, Tuple

from rust_project.kernel.project import Crate, Project


CrateId = NewType("CrateId", int)


class ProjectValidationError(ValueError):
    """Raised when a project document is structurally inconsistent."""


class DanglingDependencyError(ProjectValidationError):
    """Raised when a dependency edge points outside ``Project.crates``."""

    def __init__(self, crate_index: int, dep_name: str, target_index: int, crate_count: int):
        self.crate_index = crate_index
        self.dep_name = dep_name
        self.target_index = target_index
        self.crate_count = crate_count
        super().__init__(
            f"crate {crate_index} depends on '{dep_name}' at index {target_index}, "
            f"but the project only has {crate_count} crates"
        )


def find_dangling_dependencies(crates: Sequence[Crate]) -> List[Tuple[int, str, int]]:
    """Return (crate_index, dep_name, target_index) for every out-of-range dep."""
    dangling: List[Tuple[int, str, int]] = []
    for index, crate in enumerate(crates):
        for dep in crate.deps:
            if not 0 <= dep.crate_index < len(crates):
                dangling.append((index, dep.name, dep.crate_index))
    return dangling


class CrateGraph:
    """Dependency graph over ``Project.crates``.

    Construction runs a single validation pass; every CrateId handed out
    afterwards is known to be in range.
    """

    def __init__(self, crates: Sequence[Crate]):
        dangling = find_dangling_dependencies(crates)
        if dangling:
            crate_index, dep_name, target_index = dangling[0]
            raise DanglingDependencyError(crate_index, dep_name, target_index, len(crates))

        self._crates: Tuple[Crate, ...] = tuple(crates)
        self._deps: List[List[Tuple[CrateId, str]]] = []
        self._rdeps: List[List[CrateId]] = [[] for _ in self._crates]
        for index, crate in enumerate(self._crates):
            edges = [(CrateId(dep.crate_index), dep.name) for dep in crate.deps]
            self._deps.append(edges)
            for target, _ in edges:
                if CrateId(index) not in self._rdeps[target]:
                    self._rdeps[target].append(CrateId(index))

    @classmethod
    def from_project(cls, project: Project) -> "CrateGraph":
        return cls(project.crates)

    def __len__(self) -> int:
        return len(self._crates)

    def __iter__(self) -> Iterator[CrateId]:
        return (CrateId(i) for i in range(len(self._crates)))

    def crate(self, crate_id: CrateId) -> Crate:
        return self._crates[crate_id]

    def dependencies(self, crate_id: CrateId) -> List[Tuple[CrateId, str]]:
        """Direct dependencies as (target, local name), in document order."""
        return list(self._deps[crate_id])

    def dependents(self, crate_id: CrateId) -> List[CrateId]:
        """Crates that directly depend on ``crate_id``."""
        return list(self._rdeps[crate_id])

    def workspace_members(self) -> List[CrateId]:
        return [cid for cid in self if self._crates[cid].is_workspace_member]

    def transitive_dependencies(self, crate_id: CrateId) -> List[CrateId]:
        """All crates reachable from ``crate_id``, breadth-first, excluding itself.

        Cycles are tolerated; each crate appears once.
        """
        seen = {crate_id}
        order: List[CrateId] = []
        queue = [crate_id]
        while queue:
            current = queue.pop(0)
            for target, _ in self._deps[current]:
                if target not in seen:
                    seen.add(target)
                    order.append(target)
                    queue.append(target)
        return order

    def by_display_name(self, name: str) -> Optional[CrateId]:
        """Last crate with ``display_name == name`` (matching loader overwrite)."""
        found: Optional[CrateId] = None
        for cid in self:
            if self._crates[cid].display_name == name:
                found = cid
        return found

