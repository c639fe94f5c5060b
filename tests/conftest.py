"""Pytest configuration for tests.

No sys.path hacks - tests should import from installed rust_project package.
"""

import json
from pathlib import Path

import pytest

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures"


def pytest_addoption(parser):
    """Add gated perf test option."""
    parser.addoption(
        "--run-perf",
        action="store_true",
        default=False,
        help="Run performance benchmarks (gated)."
    )


def pytest_collection_modifyitems(config, items):
    """Skip perf-marked tests unless --run-perf is set."""
    if config.getoption("--run-perf"):
        return
    skip_perf = pytest.mark.skip(reason="perf tests gated; pass --run-perf")
    for item in items:
        if "perf" in item.keywords:
            item.add_marker(skip_perf)


@pytest.fixture
def basic_document() -> dict:
    return json.loads((FIXTURES / "project_json" / "basic.json").read_text(encoding="utf-8"))


def make_tree(root: Path, files: dict) -> Path:
    """Create ``files`` (relative path -> text or bytes) under ``root``."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


def crate_entry(name, root_module, **extra) -> dict:
    entry = {
        "display_name": name,
        "root_module": str(root_module),
        "edition": "2021",
        "deps": [],
        "is_workspace_member": True,
        "cfg": [],
        "env": {},
        "is_proc_macro": False,
    }
    entry.update(extra)
    return entry


def write_document(path: Path, crates: list, **extra) -> Path:
    doc = {"sysroot": "/toolchain", "crates": crates, "runnables": [], "generated": "test"}
    doc.update(extra)
    path.write_text(json.dumps(doc, indent=2), encoding="utf-8")
    return path
