"""Discovery of mockable Angular source files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

from .models import MockKind

_EXCLUDED_DIRS = {
    "node_modules",
    "dist",
    "coverage",
    "__pycache__",
}

_MOCKABLE_SUFFIXES = tuple(kind.source_suffix for kind in MockKind)


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or the configured excludes."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            if self.directory_only and rel_path.startswith(f"{self.pattern}/"):
                return True
            return False

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.exists():
        return []

    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def is_mockable(filename: str) -> bool:
    """True for ``*.component.ts``-style sources, excluding declaration files."""
    if filename.endswith(".d.ts"):
        return False
    return filename.endswith(_MOCKABLE_SUFFIXES)


class MockableFileScanner:
    """Walks an application source tree and yields files that can be mocked."""

    def scan(self, source_root: Path, exclude_paths: Sequence[str] = ()) -> List[Path]:
        """Return mockable files under ``source_root`` in stable, sorted walk order."""
        root_path = Path(source_root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Source directory not found: {source_root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {source_root}")

        rules = _parse_gitignore(root_path / ".gitignore")
        for pattern in exclude_paths:
            rule = build_ignore_rule(pattern)
            if rule is not None:
                rules.append(rule)

        return list(self._iter_files(root_path, rules))

    @staticmethod
    def _iter_files(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept_dirs = []
            for name in sorted(dirnames):
                if name in _EXCLUDED_DIRS or name.startswith("."):
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if _should_ignore(rel_path, True, rules):
                    continue
                kept_dirs.append(name)
            dirnames[:] = kept_dirs

            for filename in sorted(filenames):
                if not is_mockable(filename):
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _should_ignore(rel_path, False, rules):
                    continue
                yield current_dir / filename


__all__ = ["IgnoreRule", "MockableFileScanner", "build_ignore_rule", "is_mockable"]
