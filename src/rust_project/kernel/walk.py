"""Recursive directory enumeration.

Yields regular files only; symlinks are not followed. Unreadable
entries below the root are skipped, but a root that cannot be listed
raises its OSError.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Iterator, Union

FileEnumerator = Callable[[Path], Iterator[Path]]


def walk_files(root: Union[str, os.PathLike]) -> Iterator[Path]:
    """Yield every regular file under ``root``, in no particular order."""
    root_str = os.fspath(root)
    if os.path.isfile(root_str) and not os.path.islink(root_str):
        yield Path(root_str)
        return

    # Listing the root happens before the first yield so that a missing
    # root surfaces on the first next().
    stack = [root_str]
    is_root = True
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError:
            if is_root:
                raise
            continue
        is_root = False

        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    stack.append(entry.path)
                elif entry.is_file(follow_symlinks=False):
                    yield Path(entry.path)
            except OSError:
                continue
