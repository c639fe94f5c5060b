from pathlib import Path

from rust_project.codes import SkipReason
from rust_project.kernel.project import Crate, parse_project
from rust_project.kernel.resolve import ResolvedUnit, resolve_roots


def test_named_crate_resolves_unnamed_is_skipped():
    project = parse_project({
        "sysroot": "/toolchain",
        "crates": [
            {"display_name": "a", "root_module": "/ws/a/lib.rs", "deps": [], "cfg": [], "env": {}},
            {"display_name": None, "root_module": "/ws/b/lib.rs", "deps": [], "cfg": [], "env": {}},
        ],
        "runnables": [],
        "generated": "",
    })
    resolution = resolve_roots(project.crates)

    assert [(u.name, u.root) for u in resolution.units] == [("a", Path("/ws/a"))]
    assert len(resolution.skipped) == 1
    assert resolution.skipped[0].crate_index == 1
    assert resolution.skipped[0].reason == SkipReason.MISSING_DISPLAY_NAME


def test_root_without_parent_is_skipped():
    crates = [
        Crate(display_name="root", root_module=Path("/")),
        Crate(display_name="ok", root_module=Path("/ws/ok/src/lib.rs")),
    ]
    resolution = resolve_roots(crates)
    assert resolution.names == ["ok"]
    assert resolution.skipped[0].reason == SkipReason.NO_PARENT_DIRECTORY


def test_counts_add_up(basic_document):
    basic_document["crates"].append({"root_module": "/ws/anon/lib.rs"})
    crates = parse_project(basic_document).crates
    resolution = resolve_roots(crates)

    assert len(resolution.units) == 3
    assert len(resolution.skipped) == len(crates) - len(resolution.units)


def test_unit_carries_crate_index_and_source(basic_document):
    units = resolve_roots(parse_project(basic_document).crates).units
    app = units[2]
    assert isinstance(app, ResolvedUnit)
    assert app.crate_index == 2
    assert app.root == Path("/ws/app/src")
    assert app.source is not None
    assert units[0].source is None


def test_empty_input():
    resolution = resolve_roots([])
    assert resolution.units == []
    assert resolution.skipped == []
