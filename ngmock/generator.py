"""Source classification, mock synthesis and per-file reconciliation."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional, Sequence

from . import content
from .config import RunOptions
from .diagnostics import Diagnostics
from .errors import AnchorNotFound, UnclassifiableSource
from .logging import get_logger
from .merge import ContentInspector, ExistingMock, insert_at_anchor
from .merge.markers import spy_list_anchor
from .models import (
    MOCK_PREFIX,
    ClassDeclaration,
    ExportForm,
    MockCollection,
    MockDescriptor,
    MockKind,
    SaveMode,
)
from .paths import kind_for_target, mock_path_for


class MockGenerator:
    """Turns class declarations into mock files without clobbering existing content."""

    def __init__(
        self,
        options: RunOptions,
        diagnostics: Diagnostics,
        inspector: ContentInspector | None = None,
    ) -> None:
        self.options = options
        self.diagnostics = diagnostics
        self.inspector = inspector or ContentInspector()
        self.logger = get_logger("generator")

    # ------------------------------------------------------------------
    # Phase one

    def process(
        self, declarations: Iterable[ClassDeclaration], collection: MockCollection
    ) -> None:
        """Classify, synthesize and flush every declaration into ``collection``."""
        for declaration in declarations:
            descriptor = self._classify_guarded(declaration)
            if descriptor is None:
                continue
            if collection.contains(descriptor):
                self.diagnostics.debug(
                    "duplicate-descriptor",
                    f"{descriptor.mock_class_name} was already generated in this run",
                    path=descriptor.target_path,
                )
                continue
            if not descriptor.deferred:
                descriptor = self.complete(descriptor, collection.sharing_target(descriptor))
            collection.add(descriptor)

    def classify(self, declaration: ClassDeclaration) -> MockDescriptor:
        """Build the descriptor for one class; raises UnclassifiableSource."""
        target = mock_path_for(declaration.source_path)
        kind = kind_for_target(target)
        if kind is None:
            raise UnclassifiableSource(declaration.name, str(target))

        descriptor = MockDescriptor(
            kind=kind,
            source_class_name=declaration.name,
            mock_class_name=f"{MOCK_PREFIX}{declaration.name}",
            source_path=declaration.source_path,
            target_path=target,
        )

        if kind in (MockKind.COMPONENT, MockKind.DIRECTIVE):
            selector = content.extract_selector(declaration.metadata_text)
            if selector is None:
                self.diagnostics.warning(
                    "missing-metadata",
                    f"No selector found for {declaration.name}",
                    path=declaration.source_path,
                )
            return replace(descriptor, selector=selector)

        if kind is MockKind.PIPE:
            pipe_token = content.extract_pipe_name(declaration.metadata_text)
            if pipe_token is None:
                self.diagnostics.warning(
                    "missing-metadata",
                    f"No pipe name found for {declaration.name}",
                    path=declaration.source_path,
                )
            return replace(descriptor, pipe_token=pipe_token)

        base_mock_ref = (
            f"{MOCK_PREFIX}{declaration.base_class}" if declaration.base_class else None
        )
        deferred = bool(base_mock_ref) and self.options.whole_application_mode
        if base_mock_ref and not deferred:
            self.diagnostics.warning(
                "inheritance-unsupported",
                f"{descriptor.mock_class_name} won't have methods from its base class "
                f"{declaration.base_class}. Generate with --app-dir to include them.",
                path=declaration.source_path,
            )
        return replace(
            descriptor,
            base_mock_ref=base_mock_ref,
            methods=tuple(declaration.methods),
            deferred=deferred,
        )

    # ------------------------------------------------------------------
    # Reconciliation and writes

    def complete(
        self, descriptor: MockDescriptor, peers: Sequence[MockDescriptor]
    ) -> MockDescriptor:
        """Reconcile against the target file and write it; failures leave it skipped."""
        try:
            result = self.reconcile(descriptor, peers)
            if not result.skipped:
                self._write(result)
        except Exception as exc:
            self.logger.debug("Synthesis failed for %s", descriptor.mock_class_name, exc_info=True)
            self.diagnostics.error(
                "synthesis-failed",
                f"Failed to generate {descriptor.mock_class_name}: {exc}",
                path=descriptor.target_path,
            )
            return replace(descriptor, skipped=True)
        return result

    def reconcile(
        self, descriptor: MockDescriptor, peers: Sequence[MockDescriptor]
    ) -> MockDescriptor:
        """Decide between append, method-append, combine and skip for ``descriptor``.

        ``peers`` are the descriptors of this run that share the target path,
        in discovery order. Only the combine path reads them.
        """
        fresh = content.render(descriptor)
        existing = self.inspector.inspect(descriptor.target_path, descriptor.mock_class_name)

        if not existing.found:
            merged = _append_block(existing.content, fresh) if existing.file_has_content else fresh
            return replace(descriptor, content=merged, save_mode=SaveMode.CREATE, skipped=False)

        if descriptor.kind is MockKind.SERVICE and not self.options.force:
            return self._append_methods(descriptor, existing)

        if self.options.force:
            blocks = [
                content.render(peer)
                for peer in peers
                if not peer.deferred and peer.key != descriptor.key
            ]
            blocks.append(fresh)
            return replace(
                descriptor,
                content="\n".join(blocks),
                save_mode=SaveMode.UPDATE,
                export_form=ExportForm.VALUE,
                skipped=False,
            )

        return self._skip_existing(descriptor)

    def _append_methods(self, descriptor: MockDescriptor, existing: ExistingMock) -> MockDescriptor:
        export_form = existing.export_form or ExportForm.VALUE
        missing = self.inspector.missing_methods(
            existing.content, descriptor.methods, descriptor.mock_class_name
        )
        if not missing:
            return self._skip_existing(replace(descriptor, export_form=export_form))

        delta = "".join(f"\n  '{method}'," for method in missing)
        try:
            merged = insert_at_anchor(
                existing.content, spy_list_anchor(descriptor.mock_class_name), delta
            )
        except AnchorNotFound:
            self.diagnostics.warning(
                "anchor-not-found",
                f"Cannot add methods {', '.join(missing)} to {descriptor.mock_class_name}; "
                "its spy list was not found",
                path=descriptor.target_path,
            )
            return replace(descriptor, skipped=True, export_form=export_form)

        return replace(
            descriptor,
            content=merged,
            save_mode=SaveMode.UPDATE,
            export_form=export_form,
            skipped=False,
        )

    def _skip_existing(self, descriptor: MockDescriptor) -> MockDescriptor:
        self.diagnostics.debug(
            "already-exists",
            f"Skipped creating {descriptor.mock_class_name}. Mock already exists.",
            path=descriptor.target_path,
        )
        return replace(descriptor, skipped=True)

    def _write(self, descriptor: MockDescriptor) -> None:
        descriptor.target_path.parent.mkdir(parents=True, exist_ok=True)
        descriptor.target_path.write_text(descriptor.content, encoding="utf-8")
        self.logger.info(
            "%s is successfully %sd.", descriptor.mock_class_name, descriptor.save_mode.value
        )

    def _classify_guarded(self, declaration: ClassDeclaration) -> Optional[MockDescriptor]:
        try:
            return self.classify(declaration)
        except UnclassifiableSource as exc:
            self.diagnostics.error(
                "unclassifiable-source", str(exc), path=declaration.source_path
            )
        except Exception as exc:
            self.logger.debug("Classification failed for %s", declaration.name, exc_info=True)
            self.diagnostics.error(
                "synthesis-failed",
                f"Failed to classify {declaration.name}: {exc}",
                path=declaration.source_path,
            )
        return None


def _append_block(existing: str, block: str) -> str:
    """Append ``block`` after ``existing`` separated by one blank line."""
    if not existing.endswith("\n"):
        existing += "\n"
    return f"{existing}\n{block}"


__all__ = ["MockGenerator"]
