"""Tests for ngmock.inheritance."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import pytest

from ngmock.config import RunOptions
from ngmock.diagnostics import Diagnostics
from ngmock.errors import CyclicInheritance
from ngmock.generator import MockGenerator
from ngmock.inheritance import InheritanceResolver
from ngmock.models import MockCollection, MockDescriptor, MockKind


def _service(
    tmp_path: Path, name: str, methods: Sequence[str], base: Optional[str] = None
) -> MockDescriptor:
    source = tmp_path / f"{name.lower()}.service.ts"
    return MockDescriptor(
        kind=MockKind.SERVICE,
        source_class_name=name,
        mock_class_name=f"Mock{name}",
        source_path=source,
        target_path=tmp_path / f"{name.lower()}.service.mock.ts",
        methods=tuple(methods),
        base_mock_ref=f"Mock{base}" if base else None,
        deferred=base is not None,
    )


def test_three_level_chain_is_transitive(tmp_path: Path, diagnostics: Diagnostics) -> None:
    a = _service(tmp_path, "A", ["x"])
    b = _service(tmp_path, "B", ["y"], base="A")
    c = _service(tmp_path, "C", ["z"], base="B")

    methods = InheritanceResolver(diagnostics).resolve_methods(c, [a, b, c])

    assert methods == ("z", "y", "x")


def test_duplicates_keep_first_occurrence(tmp_path: Path, diagnostics: Diagnostics) -> None:
    a = _service(tmp_path, "A", ["save", "load"])
    b = _service(tmp_path, "B", ["load", "reset"], base="A")

    methods = InheritanceResolver(diagnostics).resolve_methods(b, [a, b])

    assert methods == ("load", "reset", "save")


def test_missing_parent_keeps_own_methods(tmp_path: Path, diagnostics: Diagnostics) -> None:
    b = _service(tmp_path, "B", ["y"], base="Unknown")

    methods = InheritanceResolver(diagnostics).resolve_methods(b, [b])

    assert methods == ("y",)
    assert diagnostics.codes() == ["missing-parent-mock"]


def test_cycle_raises(tmp_path: Path, diagnostics: Diagnostics) -> None:
    a = _service(tmp_path, "A", ["x"], base="B")
    b = _service(tmp_path, "B", ["y"], base="A")

    with pytest.raises(CyclicInheritance) as excinfo:
        InheritanceResolver(diagnostics).resolve_methods(a, [a, b])

    assert excinfo.value.chain == ["MockA", "MockB", "MockA"]


def test_resolve_rebuilds_collection_and_writes(tmp_path: Path, diagnostics: Diagnostics) -> None:
    a = _service(tmp_path, "A", ["x"])
    b = _service(tmp_path, "B", ["y"], base="A")
    collection = MockCollection()
    collection.add(a)
    collection.add(b)
    generator = MockGenerator(RunOptions(app_dir=tmp_path), diagnostics)

    resolved = InheritanceResolver(diagnostics).resolve(collection, generator.complete)

    final_b = resolved.of_kind(MockKind.SERVICE)[1]
    assert final_b.deferred is False
    assert final_b.methods == ("y", "x")
    assert "'y',\n  'x'" in (tmp_path / "b.service.mock.ts").read_text(encoding="utf-8")
    # Phase-one entries are left untouched.
    assert collection.of_kind(MockKind.SERVICE)[1].deferred is True


def test_cyclic_descriptor_is_skipped(tmp_path: Path, diagnostics: Diagnostics) -> None:
    a = _service(tmp_path, "A", ["x"], base="B")
    b = _service(tmp_path, "B", ["y"], base="A")
    collection = MockCollection()
    collection.add(a)
    collection.add(b)
    generator = MockGenerator(RunOptions(app_dir=tmp_path), diagnostics)

    resolved = InheritanceResolver(diagnostics).resolve(collection, generator.complete)

    assert all(item.skipped for item in resolved.of_kind(MockKind.SERVICE))
    assert diagnostics.codes().count("cyclic-inheritance") == 2
    assert not (tmp_path / "a.service.mock.ts").exists()
