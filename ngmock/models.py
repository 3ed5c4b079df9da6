"""Core data models shared across ngmock components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

MOCK_PREFIX = "Mock"


class MockKind(Enum):
    """Closed set of mock categories, decided from the file naming convention."""

    COMPONENT = "component"
    DIRECTIVE = "directive"
    PIPE = "pipe"
    SERVICE = "service"

    @property
    def plural(self) -> str:
        return f"{self.value}s"

    @property
    def source_suffix(self) -> str:
        return f".{self.value}.ts"

    @property
    def aggregator_stem(self) -> str:
        return f"{self.plural}.mock"

    @property
    def aggregator_constant(self) -> str:
        return f"{MOCK_PREFIX}{self.plural.capitalize()}"


class SaveMode(Enum):
    CREATE = "create"
    UPDATE = "update"


class ExportForm(Enum):
    """How an existing service mock binding was declared."""

    VALUE = "value"
    CLASS = "class"


@dataclass(frozen=True)
class ClassDeclaration:
    """Syntactic view of one class, as produced by a class parser."""

    name: str
    source_path: Path
    base_class: Optional[str] = None
    methods: Tuple[str, ...] = ()
    decorators: Tuple[str, ...] = ()
    text: str = ""

    @property
    def decorator_text(self) -> str:
        return "\n".join(self.decorators)

    @property
    def metadata_text(self) -> str:
        """Decorator text, or the whole class text when no decorator was captured."""
        return self.decorator_text or self.text


@dataclass
class MockDescriptor:
    """One classified source class and the outcome of generating its mock."""

    kind: MockKind
    source_class_name: str
    mock_class_name: str
    source_path: Path
    target_path: Path
    content: str = ""
    skipped: bool = False
    save_mode: SaveMode = SaveMode.CREATE
    selector: Optional[str] = None
    pipe_token: Optional[str] = None
    base_mock_ref: Optional[str] = None
    methods: Tuple[str, ...] = ()
    export_form: ExportForm = ExportForm.VALUE
    deferred: bool = False

    @property
    def key(self) -> Tuple[Path, str]:
        return (self.target_path, self.mock_class_name)


@dataclass
class KindSummary:
    mocked: int = 0
    skipped: int = 0


@dataclass
class RunSummary:
    """Per-kind counts derived from the final collection."""

    kinds: Dict[MockKind, KindSummary] = field(default_factory=dict)

    @property
    def mocked(self) -> int:
        return sum(item.mocked for item in self.kinds.values())

    @property
    def skipped(self) -> int:
        return sum(item.skipped for item in self.kinds.values())

    def as_dict(self) -> Dict[str, Dict[str, int]]:
        return {
            kind.plural: {"mocked": item.mocked, "skipped": item.skipped}
            for kind, item in self.kinds.items()
        }


class MockCollection:
    """Descriptors partitioned by kind, in discovery order."""

    def __init__(self, entries: Optional[Dict[MockKind, List[MockDescriptor]]] = None) -> None:
        self._entries: Dict[MockKind, List[MockDescriptor]] = {kind: [] for kind in MockKind}
        if entries:
            for kind, descriptors in entries.items():
                self._entries[kind] = list(descriptors)

    def add(self, descriptor: MockDescriptor) -> bool:
        """Append a descriptor; return False when its (target, name) pair is already held."""
        if self.contains(descriptor):
            return False
        self._entries[descriptor.kind].append(descriptor)
        return True

    def contains(self, descriptor: MockDescriptor) -> bool:
        return any(entry.key == descriptor.key for entry in self._entries[descriptor.kind])

    def of_kind(self, kind: MockKind) -> List[MockDescriptor]:
        return list(self._entries[kind])

    def sharing_target(self, descriptor: MockDescriptor) -> List[MockDescriptor]:
        return [
            entry
            for entry in self._entries[descriptor.kind]
            if entry.target_path == descriptor.target_path
        ]

    def deferred(self) -> List[MockDescriptor]:
        return [entry for entry in self._entries[MockKind.SERVICE] if entry.deferred]

    def replace(self, old: MockDescriptor, new: MockDescriptor) -> "MockCollection":
        """Return a new collection with ``old`` swapped for ``new`` at the same position."""
        entries = {kind: list(items) for kind, items in self._entries.items()}
        bucket = entries[old.kind]
        for index, entry in enumerate(bucket):
            if entry.key == old.key:
                bucket[index] = new
                break
        else:
            raise KeyError(f"{old.mock_class_name} is not part of this collection")
        return MockCollection(entries)

    def summary(self) -> RunSummary:
        summary = RunSummary()
        for kind, items in self._entries.items():
            skipped = sum(1 for item in items if item.skipped)
            summary.kinds[kind] = KindSummary(mocked=len(items) - skipped, skipped=skipped)
        return summary

    def __iter__(self) -> Iterator[MockDescriptor]:
        for kind in MockKind:
            yield from self._entries[kind]

    def __len__(self) -> int:
        return sum(len(items) for items in self._entries.values())


__all__ = [
    "ClassDeclaration",
    "ExportForm",
    "KindSummary",
    "MOCK_PREFIX",
    "MockCollection",
    "MockDescriptor",
    "MockKind",
    "RunSummary",
    "SaveMode",
]
