"""Read every file belonging to one unit."""

from __future__ import annotations

import errno
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from rust_project.kernel.resolve import ResolvedUnit
from rust_project.kernel.walk import FileEnumerator, walk_files

logger = logging.getLogger(__name__)


class InvalidDataError(OSError):
    """A file was read but is not valid UTF-8 text."""


@dataclass(frozen=True)
class UnitResult:
    """Outcome of loading one unit: all file contents, or the first error."""
    name: str
    root: Path
    contents: Optional[Tuple[str, ...]] = None
    error: Optional[OSError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def file_count(self) -> int:
        return len(self.contents) if self.contents is not None else 0

    def unwrap(self) -> Tuple[str, ...]:
        """Return the contents or raise the unit's error."""
        if self.error is not None:
            raise self.error
        return self.contents or ()


def read_text(path: Path) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise InvalidDataError(errno.EILSEQ, f"stream did not contain valid UTF-8: {e.reason}", str(path)) from e


def _unit_files(unit: ResolvedUnit, enumerate_files: FileEnumerator, honor_source: bool) -> Iterator[Path]:
    if not honor_source or unit.source is None:
        yield from enumerate_files(unit.root)
        return

    # Walk the include dirs in place of the root; drop excluded subtrees.
    seen = set()
    for include_dir in unit.source.include_dirs:
        if not include_dir.exists():
            continue
        for path in enumerate_files(include_dir):
            if path in seen or not unit.source.contains(path):
                continue
            seen.add(path)
            yield path


def load_unit(
    unit: ResolvedUnit,
    enumerate_files: FileEnumerator = walk_files,
    honor_source: bool = False,
) -> UnitResult:
    """Read all files of one unit, stopping at the first failure.

    By default everything under the unit's root is read and the crate's
    ``source`` include/exclude sets are ignored. With ``honor_source`` the
    include dirs are walked instead and excluded files are skipped; an
    include dir that does not exist contributes no files.

    A path the OS rejects outright (e.g. one with an embedded NUL) is
    reported as an EINVAL OSError for this unit only.
    """
    contents: List[str] = []
    try:
        for path in _unit_files(unit, enumerate_files, honor_source):
            contents.append(read_text(path))
    except OSError as e:
        logger.debug("unit %s failed: %s", unit.name, e)
        return UnitResult(name=unit.name, root=unit.root, error=e)
    except ValueError as e:
        logger.debug("unit %s has an invalid path: %s", unit.name, e)
        error = OSError(errno.EINVAL, str(e), str(unit.root))
        return UnitResult(name=unit.name, root=unit.root, error=error)
    return UnitResult(name=unit.name, root=unit.root, contents=tuple(contents))
