"""Resolve crates to loadable (name, source root) units."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from rust_project.codes import SkipReason
from rust_project.kernel.project import Crate, Source

logger = logging.getLogger(__name__)


class ResolvedUnit(BaseModel):
    """A crate that can be loaded: its display name and source root."""
    name: str
    root: Path
    crate_index: Optional[int] = None
    source: Optional[Source] = None

    model_config = ConfigDict(frozen=True)


class SkippedCrate(BaseModel):
    """A crate excluded from loading, with the reason."""
    crate_index: int
    root_module: Path
    reason: SkipReason

    model_config = ConfigDict(frozen=True)


class Resolution(BaseModel):
    """Resolved units plus the crates that were skipped.

    ``len(units) + len(skipped)`` always equals the number of input crates,
    so an empty workspace can be told apart from one where every crate was
    dropped.
    """
    units: List[ResolvedUnit]
    skipped: List[SkippedCrate]

    @property
    def names(self) -> List[str]:
        return [u.name for u in self.units]


def resolve_roots(crates: Sequence[Crate]) -> Resolution:
    """Map each crate with a display name and a parent directory to a unit."""
    units: List[ResolvedUnit] = []
    skipped: List[SkippedCrate] = []
    for index, crate in enumerate(crates):
        reason = None
        root = crate.source_root
        if crate.display_name is None:
            reason = SkipReason.MISSING_DISPLAY_NAME
        elif root is None:
            reason = SkipReason.NO_PARENT_DIRECTORY

        if reason is not None:
            logger.debug("skipping crate %d (%s): %s", index, crate.root_module, reason.value)
            skipped.append(SkippedCrate(crate_index=index, root_module=crate.root_module, reason=reason))
            continue

        units.append(ResolvedUnit(
            name=crate.display_name,
            root=root,
            crate_index=index,
            source=crate.source,
        ))
    return Resolution(units=units, skipped=skipped)
