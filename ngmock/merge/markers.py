"""Structural markers used to recognise previously generated mock content."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Pattern, Sequence

from ..models import ExportForm

# String literals are matched first so comment openers inside them are left alone.
_COMMENT_PATTERN = re.compile(
    r"'(?:\\.|[^'\\\n])*'"
    r'|"(?:\\.|[^"\\\n])*"'
    r"|`(?:\\.|[^`\\])*`"
    r"|(?P<comment>//[^\n]*|/\*.*?\*/)",
    re.DOTALL,
)

IMPORT_ANCHOR = re.compile(r"^(?=[ \t]*import\s)", re.MULTILINE)
REEXPORT_ANCHOR = re.compile(r"^(?=[ \t]*export\s+\*\s+from\s)", re.MULTILINE)


def mask_comments(text: str) -> str:
    """Blank out comment bodies while keeping offsets and line breaks intact."""

    def _blank(match: re.Match[str]) -> str:
        if match.group("comment") is None:
            return match.group(0)
        return re.sub(r"[^\n]", " ", match.group(0))

    return _COMMENT_PATTERN.sub(_blank, text)


def export_marker(mock_class_name: str) -> Pattern[str]:
    """Line-anchored marker for ``export const|class <mock_class_name>``."""
    name = re.escape(mock_class_name)
    return re.compile(
        rf"^[ \t]*export\s+(?:declare\s+)?(const|let|var|class|abstract\s+class)\s+{name}(?![\w$])",
        re.MULTILINE,
    )


def spy_list_anchor(mock_class_name: str) -> Pattern[str]:
    """Marker ending right after the ``[`` of a ``jasmine.createSpyObj`` method list."""
    name = re.escape(mock_class_name)
    return re.compile(
        rf"export\s+const\s+{name}\s*(?::[^=]+)?=\s*jasmine\.createSpyObj\(\s*"
        rf"""(['"]){name}\1\s*,\s*\["""
    )


def array_anchor(constant_name: str) -> Pattern[str]:
    """Marker ending right after the ``[`` of ``export const <constant_name> = [``."""
    name = re.escape(constant_name)
    return re.compile(rf"export\s+const\s+{name}\s*(?::[^=]+)?=\s*\[")


def identifier_present(text: str, identifier: str) -> bool:
    """True when ``identifier`` appears as a whole word outside comments."""
    pattern = re.compile(rf"(?<![\w$]){re.escape(identifier)}(?![\w$])")
    return pattern.search(mask_comments(text)) is not None


def line_present(text: str, line: str) -> bool:
    return any(existing.strip() == line.strip() for existing in mask_comments(text).splitlines())


@dataclass(frozen=True)
class ExistingMock:
    """What a target file already holds for one mock."""

    content: str
    found: bool
    export_form: Optional[ExportForm] = None

    @property
    def file_has_content(self) -> bool:
        return bool(self.content.strip())


class ContentInspector:
    """Detects generated mocks and their export form inside existing files."""

    def inspect(self, path: Path, mock_class_name: str) -> ExistingMock:
        if not path.exists():
            return ExistingMock(content="", found=False)
        content = path.read_text(encoding="utf-8")
        return self.inspect_text(content, mock_class_name)

    def inspect_text(self, content: str, mock_class_name: str) -> ExistingMock:
        match = export_marker(mock_class_name).search(mask_comments(content))
        if match is None:
            return ExistingMock(content=content, found=False)
        form = ExportForm.CLASS if match.group(1).endswith("class") else ExportForm.VALUE
        return ExistingMock(content=content, found=True, export_form=form)

    def missing_methods(
        self,
        content: str,
        methods: Sequence[str],
        mock_class_name: Optional[str] = None,
    ) -> List[str]:
        """Return the methods that are not yet listed as quoted entries.

        With ``mock_class_name`` only that mock's ``createSpyObj`` list is
        searched; otherwise, or when the list is not found, the whole file is.
        """
        masked = mask_comments(content)
        if mock_class_name is not None:
            own_list = _spy_list_text(masked, mock_class_name)
            if own_list is not None:
                masked = own_list
        missing: List[str] = []
        for method in methods:
            quoted = re.compile(rf"""(['"]){re.escape(method)}\1""")
            if quoted.search(masked) is None and method not in missing:
                missing.append(method)
        return missing


def _spy_list_text(masked: str, mock_class_name: str) -> Optional[str]:
    match = spy_list_anchor(mock_class_name).search(masked)
    if match is None:
        return None
    end = masked.find("]", match.end())
    return masked[match.end() : end if end != -1 else len(masked)]


__all__ = [
    "ContentInspector",
    "ExistingMock",
    "IMPORT_ANCHOR",
    "REEXPORT_ANCHOR",
    "array_anchor",
    "export_marker",
    "identifier_present",
    "line_present",
    "mask_comments",
    "spy_list_anchor",
]
