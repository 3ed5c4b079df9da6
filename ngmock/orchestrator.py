"""Pipeline orchestration for mock generation runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .barrels import AggregatorOutcome, BarrelMaintainer
from .config import RunOptions
from .diagnostics import Diagnostics
from .generator import MockGenerator
from .inheritance import InheritanceResolver
from .logging import get_logger, shorten_path
from .models import MockCollection, MockKind, RunSummary
from .parsing import ClassParser, TypeScriptClassParser
from .paths import MOCKS_DIRNAME
from .repo_scanner import MockableFileScanner


@dataclass
class RunResult:
    """Outcome of one generation run."""

    collection: MockCollection
    diagnostics: Diagnostics
    aggregators: List[AggregatorOutcome] = field(default_factory=list)

    @property
    def summary(self) -> RunSummary:
        return self.collection.summary()

    @property
    def aggregator_paths(self) -> List[Path]:
        return [outcome.path for outcome in self.aggregators if outcome.written]


class Orchestrator:
    """Coordinates discovery, synthesis, inheritance resolution and aggregation."""

    def __init__(
        self,
        scanner: MockableFileScanner | None = None,
        parser: ClassParser | None = None,
    ) -> None:
        self.scanner = scanner or MockableFileScanner()
        self.parser = parser or TypeScriptClassParser()
        self.logger = get_logger("orchestrator")

    def run(
        self,
        paths: Sequence[str | Path],
        options: RunOptions,
        diagnostics: Diagnostics | None = None,
    ) -> RunResult:
        diagnostics = diagnostics or Diagnostics()
        collection = MockCollection()

        files = self._resolve_inputs(paths, options)
        if not files:
            diagnostics.error(
                "no-input",
                "Cannot find files to mock. Pass file paths or set --app-dir "
                "(and --src-dir for a custom source folder) to mock the whole application.",
            )
            return RunResult(collection=collection, diagnostics=diagnostics)

        self.logger.debug("Processing %d source files", len(files))
        generator = MockGenerator(options, diagnostics)
        for path in files:
            try:
                declarations = self.parser.parse(path)
            except (OSError, UnicodeDecodeError) as exc:
                diagnostics.error("unreadable-source", f"Cannot read source: {exc}", path=path)
                continue
            if not declarations:
                diagnostics.debug(
                    "no-class-declaration", "No class declaration found.", path=path
                )
                continue
            generator.process(declarations, collection)

        if options.whole_application_mode:
            collection = InheritanceResolver(diagnostics).resolve(collection, generator.complete)

        aggregators: List[AggregatorOutcome] = []
        mocks_dir = self._mocks_dir(options)
        if mocks_dir is not None and not options.skip_aggregators:
            maintainer = BarrelMaintainer(
                mocks_dir, diagnostics, refresh=options.refresh_aggregators
            )
            aggregators = maintainer.update(collection)

        result = RunResult(collection=collection, diagnostics=diagnostics, aggregators=aggregators)
        self._log_summary(result.summary)
        return result

    def _resolve_inputs(self, paths: Sequence[str | Path], options: RunOptions) -> List[Path]:
        source_root = options.source_root
        if source_root is not None:
            discovered: Iterable[Path] = self.scanner.scan(source_root, options.exclude_paths)
        else:
            discovered = (Path(path) for path in paths)

        # Keep first occurrences so repeated arguments do not produce duplicate mocks.
        unique: List[Path] = []
        seen = set()
        for path in discovered:
            resolved = Path(path).expanduser().resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            unique.append(resolved)
        return unique

    @staticmethod
    def _mocks_dir(options: RunOptions) -> Optional[Path]:
        source_root = options.source_root
        if source_root is None:
            return None
        return Path(source_root).expanduser().resolve() / MOCKS_DIRNAME

    def _log_summary(self, summary: RunSummary) -> None:
        self.logger.info("****** Execution Summary ******")
        for kind in MockKind:
            counts = summary.kinds.get(kind)
            if counts is None:
                continue
            if counts.skipped:
                self.logger.warning(
                    "%d %s skipped due to already existing mocks.", counts.skipped, kind.plural
                )
            if counts.mocked:
                self.logger.info("%d %s mocked.", counts.mocked, kind.plural)
        if not summary.mocked and not summary.skipped:
            self.logger.info("Nothing to mock.")


def describe(result: RunResult) -> str:
    """One-line, human readable account of a run."""
    summary = result.summary
    parts = [
        f"{counts.mocked} {kind.plural} mocked, {counts.skipped} skipped"
        for kind, counts in summary.kinds.items()
        if counts.mocked or counts.skipped
    ]
    written = ", ".join(shorten_path(path) for path in result.aggregator_paths)
    text = "; ".join(parts) or "nothing to mock"
    return f"{text}. Aggregators written: {written}" if written else text


__all__ = ["Orchestrator", "RunResult", "describe"]
