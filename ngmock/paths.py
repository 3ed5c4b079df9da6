"""Path conventions for mock files and aggregator module specifiers."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional

from .models import MockKind

MOCKS_DIRNAME = "mocks"
INDEX_FILENAME = "index.ts"
PROVIDERS_STEM = "service-providers.mock"

_KIND_SUFFIX = re.compile(
    r"\.(" + "|".join(kind.value for kind in MockKind) + r")\.mock(?:\.[^./]+)?$"
)


def mock_path_for(source_path: Path) -> Path:
    """Map ``a/foo.service.ts`` to ``a/foo.service.mock.ts``."""
    suffix = source_path.suffix
    if not suffix:
        return source_path.with_name(f"{source_path.name}.mock")
    return source_path.with_suffix(f".mock{suffix}")


def kind_for_target(target_path: Path) -> Optional[MockKind]:
    """Resolve the mock kind from a mock file name, or None when it has no kind infix."""
    match = _KIND_SUFFIX.search(target_path.name)
    if match is None:
        return None
    return MockKind(match.group(1))


def module_specifier(target: Path, base_dir: Path) -> str:
    """Relative, extension-less POSIX import specifier from ``base_dir`` to ``target``."""
    relative = Path(os.path.relpath(target, base_dir)).as_posix()
    if relative.endswith(".ts"):
        relative = relative[: -len(".ts")]
    if not relative.startswith("."):
        relative = f"./{relative}"
    return relative


def source_specifier(mock_specifier: str) -> str:
    """Specifier of the source class module for a mock specifier."""
    if mock_specifier.endswith(".mock"):
        return mock_specifier[: -len(".mock")]
    return mock_specifier


__all__ = [
    "INDEX_FILENAME",
    "MOCKS_DIRNAME",
    "PROVIDERS_STEM",
    "kind_for_target",
    "mock_path_for",
    "module_specifier",
    "source_specifier",
]
