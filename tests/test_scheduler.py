import errno
import threading

import pytest

from conftest import make_tree
from rust_project._internal.config import WORKERS_ENV, default_worker_count
from rust_project.kernel.resolve import ResolvedUnit
from rust_project.kernel.scheduler import load_units


def _units(tmp_path, layout):
    units = []
    for name, files in layout.items():
        root = tmp_path / name
        make_tree(root, files)
        units.append(ResolvedUnit(name=name, root=root))
    return units


def test_every_unit_gets_an_entry(tmp_path):
    layout = {
        f"crate{i}": {f"f{j}.rs": f"// {i}.{j}" for j in range(i + 1)}
        for i in range(6)
    }
    results = load_units(_units(tmp_path, layout), max_workers=3)

    assert sorted(results) == sorted(layout)
    for name, files in layout.items():
        assert results[name].ok
        assert results[name].file_count == len(files)


def test_broken_root_does_not_affect_siblings(tmp_path):
    units = _units(tmp_path, {"a": {"lib.rs": "a"}, "c": {"lib.rs": "c", "x.rs": "x"}})
    units.insert(1, ResolvedUnit(name="b", root=tmp_path / "does-not-exist"))

    results = load_units(units, max_workers=2)
    assert set(results) == {"a", "b", "c"}
    assert not results["b"].ok
    assert results["a"].unwrap() == ("a",)
    assert results["c"].file_count == 2


def test_duplicate_names_keep_one_result(tmp_path):
    make_tree(tmp_path, {"one/lib.rs": "one", "two/lib.rs": "two", "two/x.rs": "x"})
    units = [
        ResolvedUnit(name="dup", root=tmp_path / "one"),
        ResolvedUnit(name="dup", root=tmp_path / "two"),
    ]
    results = load_units(units, max_workers=2)

    assert list(results) == ["dup"]
    assert results["dup"].root in (tmp_path / "one", tmp_path / "two")
    assert results["dup"].file_count == (1 if results["dup"].root == tmp_path / "one" else 2)


def test_units_run_on_worker_threads(tmp_path):
    units = _units(tmp_path, {"a": {"lib.rs": "a"}, "b": {"lib.rs": "b"}})
    seen = set()

    def enumerate_files(root):
        seen.add(threading.current_thread().name)
        yield root / "lib.rs"

    results = load_units(units, max_workers=2, enumerate_files=enumerate_files)
    assert all(r.ok for r in results.values())
    assert threading.main_thread().name not in seen


def test_empty_units():
    assert load_units([]) == {}


def test_worker_count_from_env(monkeypatch):
    monkeypatch.setenv(WORKERS_ENV, "7")
    assert default_worker_count() == 7


@pytest.mark.parametrize("raw", ["", "zero", "0", "-2"])
def test_worker_count_invalid_env_falls_back(monkeypatch, raw):
    monkeypatch.setenv(WORKERS_ENV, raw)
    assert default_worker_count() >= 1


def test_invalid_path_does_not_affect_siblings(tmp_path):
    units = _units(tmp_path, {"a": {"lib.rs": "a"}, "c": {"lib.rs": "c"}})
    units.insert(1, ResolvedUnit(name="bad", root=tmp_path / "b\x00c"))

    results = load_units(units, max_workers=2)
    assert set(results) == {"a", "bad", "c"}
    assert results["bad"].error.errno == errno.EINVAL
    assert results["a"].unwrap() == ("a",)
    assert results["c"].unwrap() == ("c",)


def test_enumerator_value_error_stays_in_its_unit(tmp_path):
    units = _units(tmp_path, {"a": {"lib.rs": "a"}, "b": {"lib.rs": "b"}})

    def enumerate_files(root):
        if root.name == "b":
            raise ValueError("unsupported path")
        yield root / "lib.rs"

    results = load_units(units, max_workers=2, enumerate_files=enumerate_files)
    assert results["a"].ok
    assert not results["b"].ok
    assert isinstance(results["b"].error, OSError)
    assert "unsupported path" in str(results["b"].error)
