"""Maintenance of the per-kind mock aggregators, provider list and index."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Sequence

from .diagnostics import Diagnostics
from .errors import AnchorNotFound
from .logging import get_logger, shorten_path
from .merge import insert_at_anchor
from .merge.markers import (
    IMPORT_ANCHOR,
    REEXPORT_ANCHOR,
    array_anchor,
    identifier_present,
    line_present,
)
from .models import MOCK_PREFIX, ExportForm, MockCollection, MockDescriptor, MockKind
from .paths import INDEX_FILENAME, PROVIDERS_STEM, module_specifier, source_specifier

PROVIDERS_CONSTANT = f"{MOCK_PREFIX}ServiceProviders"


@dataclass
class AggregatorOutcome:
    """What happened to one aggregator file during a run."""

    path: Path
    action: str

    @property
    def written(self) -> bool:
        return self.action in {"created", "updated", "refreshed"}


class BarrelMaintainer:
    """Creates or incrementally extends the aggregator files under ``mocks/``."""

    def __init__(
        self,
        mocks_dir: Path,
        diagnostics: Diagnostics,
        *,
        refresh: bool = False,
    ) -> None:
        self.mocks_dir = mocks_dir
        self.diagnostics = diagnostics
        self.refresh = refresh
        self.logger = get_logger("barrels")

    def update(self, collection: MockCollection) -> List[AggregatorOutcome]:
        try:
            self.mocks_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            self.diagnostics.error(
                "unwritable-aggregator",
                f"Cannot create the aggregator folder: {exc}",
                path=self.mocks_dir,
            )
            return []
        outcomes: List[AggregatorOutcome] = []
        index_modules: List[str] = []

        for kind in MockKind:
            entries = self._entries_for(collection.of_kind(kind))
            kind_path = self.mocks_dir / f"{kind.aggregator_stem}.ts"
            if entries:
                outcomes.append(
                    self._maintain(
                        kind_path,
                        entries,
                        fresh=lambda items, k=kind: self._kind_content(k, items),
                        merge=lambda text, items, k=kind: self._merge_kind(k, text, items),
                    )
                )
            if kind_path.exists():
                index_modules.append(f"./{kind.aggregator_stem}")

            if kind is MockKind.SERVICE:
                providers_path = self.mocks_dir / f"{PROVIDERS_STEM}.ts"
                if entries:
                    outcomes.append(
                        self._maintain(
                            providers_path,
                            entries,
                            fresh=self._providers_content,
                            merge=self._merge_providers,
                        )
                    )
                if providers_path.exists():
                    index_modules.append(f"./{PROVIDERS_STEM}")

        if index_modules:
            outcomes.append(self._maintain_index(index_modules))
        return outcomes

    # ------------------------------------------------------------------
    # Entry selection

    def _entries_for(self, descriptors: Sequence[MockDescriptor]) -> List[MockDescriptor]:
        """Descriptors to aggregate, de-duplicated by mock class name."""
        if self.refresh:
            candidates = [
                item for item in descriptors if not item.deferred and item.target_path.exists()
            ]
        else:
            candidates = [item for item in descriptors if not item.skipped and not item.deferred]

        seen: Dict[str, MockDescriptor] = {}
        for descriptor in candidates:
            first = seen.get(descriptor.mock_class_name)
            if first is None:
                seen[descriptor.mock_class_name] = descriptor
            elif first.target_path != descriptor.target_path:
                self.diagnostics.warning(
                    "duplicate-mock-name",
                    f"{descriptor.mock_class_name} is already aggregated from "
                    f"{shorten_path(first.target_path)}; skipping this one",
                    path=descriptor.target_path,
                )
        return list(seen.values())

    # ------------------------------------------------------------------
    # Create-or-merge

    def _maintain(
        self,
        path: Path,
        entries: List[MockDescriptor],
        *,
        fresh: Callable[[List[MockDescriptor]], str],
        merge: Callable[[str, List[MockDescriptor]], str],
    ) -> AggregatorOutcome:
        try:
            existing = _read(path)
            if self.refresh or not existing.strip():
                action = "refreshed" if self.refresh and existing.strip() else "created"
                return self._write(path, fresh(entries), action)

            delta = [
                item for item in entries if not identifier_present(existing, item.mock_class_name)
            ]
            if not delta:
                return self._unchanged(path)
            merged = merge(existing, delta)
            return self._write(path, merged, "updated")
        except AnchorNotFound as exc:
            return self._anchor_missing(path, exc)
        except (OSError, UnicodeDecodeError) as exc:
            return self._unreadable(path, exc)

    def _maintain_index(self, modules: List[str]) -> AggregatorOutcome:
        path = self.mocks_dir / INDEX_FILENAME
        lines = [f"export * from '{module}';" for module in modules]
        try:
            existing = _read(path)
            if self.refresh or not existing.strip():
                action = "refreshed" if self.refresh and existing.strip() else "created"
                return self._write(path, _as_block(lines), action)

            delta = [line for line in lines if not line_present(existing, line)]
            if not delta:
                return self._unchanged(path)
            merged = insert_at_anchor(existing, REEXPORT_ANCHOR, _as_block(delta))
            return self._write(path, merged, "updated")
        except AnchorNotFound as exc:
            return self._anchor_missing(path, exc)
        except (OSError, UnicodeDecodeError) as exc:
            return self._unreadable(path, exc)

    # ------------------------------------------------------------------
    # Content builders

    def _kind_content(self, kind: MockKind, entries: List[MockDescriptor]) -> str:
        imports = [self._import_line(item) for item in entries]
        exports = [self._export_line(item) for item in entries]
        names = ",\n".join(f"  {item.mock_class_name}" for item in entries)
        return (
            _as_block(imports)
            + f"\nexport const {kind.aggregator_constant} = [\n{names}\n];\n\n"
            + _as_block(exports)
        )

    def _merge_kind(self, kind: MockKind, text: str, delta: List[MockDescriptor]) -> str:
        text = insert_at_anchor(text, IMPORT_ANCHOR, _as_block(self._import_line(i) for i in delta))
        text = insert_at_anchor(
            text,
            array_anchor(kind.aggregator_constant),
            "".join(f"\n  {item.mock_class_name}," for item in delta),
        )
        return insert_at_anchor(
            text, REEXPORT_ANCHOR, _as_block(self._export_line(i) for i in delta)
        )

    def _providers_content(self, entries: List[MockDescriptor]) -> str:
        class_imports = [self._class_import_line(item) for item in entries]
        mock_imports = [self._import_line(item) for item in entries]
        providers = ",\n".join(f"  {self._provider_entry(item)}" for item in entries)
        return (
            _as_block(class_imports)
            + "\n"
            + _as_block(mock_imports)
            + f"\nexport const {PROVIDERS_CONSTANT} = [\n{providers}\n];\n"
        )

    def _merge_providers(self, text: str, delta: List[MockDescriptor]) -> str:
        imports = [self._class_import_line(item) for item in delta]
        imports.extend(self._import_line(item) for item in delta)
        text = insert_at_anchor(text, IMPORT_ANCHOR, _as_block(imports))
        return insert_at_anchor(
            text,
            array_anchor(PROVIDERS_CONSTANT),
            "".join(f"\n  {self._provider_entry(item)}," for item in delta),
        )

    def _specifier(self, descriptor: MockDescriptor) -> str:
        return module_specifier(descriptor.target_path, self.mocks_dir)

    def _import_line(self, descriptor: MockDescriptor) -> str:
        return f"import {{ {descriptor.mock_class_name} }} from '{self._specifier(descriptor)}';"

    def _class_import_line(self, descriptor: MockDescriptor) -> str:
        specifier = source_specifier(self._specifier(descriptor))
        return f"import {{ {descriptor.source_class_name} }} from '{specifier}';"

    def _export_line(self, descriptor: MockDescriptor) -> str:
        return f"export * from '{self._specifier(descriptor)}';"

    @staticmethod
    def _provider_entry(descriptor: MockDescriptor) -> str:
        style = "useClass" if descriptor.export_form is ExportForm.CLASS else "useValue"
        return (
            f"{{ provide: {descriptor.source_class_name}, "
            f"{style}: {descriptor.mock_class_name} }}"
        )

    # ------------------------------------------------------------------
    # Outcomes

    def _write(self, path: Path, text: str, action: str) -> AggregatorOutcome:
        path.write_text(text, encoding="utf-8")
        self.logger.info("%s is successfully %s.", shorten_path(path), action)
        return AggregatorOutcome(path=path, action=action)

    def _unchanged(self, path: Path) -> AggregatorOutcome:
        self.logger.debug("%s is up to date.", shorten_path(path))
        return AggregatorOutcome(path=path, action="unchanged")

    def _anchor_missing(self, path: Path, exc: AnchorNotFound) -> AggregatorOutcome:
        self.diagnostics.warning(
            "anchor-not-found",
            f"Left aggregator unchanged; it no longer has the generated layout ({exc.anchor})",
            path=path,
        )
        return AggregatorOutcome(path=path, action="skipped")

    def _unreadable(self, path: Path, exc: Exception) -> AggregatorOutcome:
        self.diagnostics.error(
            "unreadable-aggregator",
            f"Left aggregator unchanged; it cannot be read or written: {exc}",
            path=path,
        )
        return AggregatorOutcome(path=path, action="skipped")


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8") if path.exists() else ""


def _as_block(lines: Iterable[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


__all__ = ["AggregatorOutcome", "BarrelMaintainer", "PROVIDERS_CONSTANT"]
