"""Fan-out load benchmark (gated)."""

from __future__ import annotations

import os

import pytest

from rust_project.kernel.resolve import ResolvedUnit
from rust_project.kernel.scheduler import load_units


def _budget_from_env(var_name: str, default_ms: float) -> float:
    raw = os.getenv(var_name)
    if not raw:
        return default_ms
    try:
        return float(raw)
    except ValueError:
        return default_ms


MAX_WIDE_FANOUT_MS = _budget_from_env("RUST_PROJECT_MAX_WIDE_FANOUT_MS", 2000.0)


def _assert_budget(benchmark, max_ms: float) -> None:
    mean_ms = benchmark.stats.stats.mean * 1000.0
    assert mean_ms < max_ms, f"Mean {mean_ms:.2f} ms exceeded budget {max_ms:.2f} ms"


@pytest.mark.perf
def test_wide_fanout(benchmark, tmp_path):
    units = []
    for i in range(200):
        root = tmp_path / f"crate{i}" / "src"
        root.mkdir(parents=True)
        for j in range(10):
            (root / f"m{j}.rs").write_text(f"pub fn f{j}() {{}}\n" * 50, encoding="utf-8")
        units.append(ResolvedUnit(name=f"crate{i}", root=root))

    results = benchmark.pedantic(lambda: load_units(units), rounds=3, iterations=1)

    assert len(results) == 200
    assert all(r.file_count == 10 for r in results.values())
    _assert_budget(benchmark, MAX_WIDE_FANOUT_MS)
