"""Load many units concurrently and collect results by name."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Optional, Sequence

from rust_project._internal.config import default_worker_count
from rust_project.kernel.loader import UnitResult, load_unit
from rust_project.kernel.resolve import ResolvedUnit
from rust_project.kernel.walk import FileEnumerator, walk_files


def load_units(
    units: Sequence[ResolvedUnit],
    max_workers: Optional[int] = None,
    enumerate_files: FileEnumerator = walk_files,
    honor_source: bool = False,
) -> Dict[str, UnitResult]:
    """Run :func:`load_unit` for every unit on a thread pool.

    Each unit is read start to finish on a single worker. Failures stay in
    their own entry; this function does not raise for them. When two units
    share a name, whichever finishes last wins.
    """
    results: Dict[str, UnitResult] = {}
    if not units:
        return results

    workers = max_workers or default_worker_count()
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(load_unit, unit, enumerate_files, honor_source)
            for unit in units
        ]
        for future in as_completed(futures):
            result = future.result()
            results[result.name] = result
    return results
