"""Mock source templates and decorator metadata extraction."""

from __future__ import annotations

import re
from typing import Optional, Sequence

from .models import MockDescriptor, MockKind

_SELECTOR_PATTERN = re.compile(r"""\bselector\s*:\s*(['"])(.*?)\1""")
_PIPE_NAME_PATTERN = re.compile(r"""\bname\s*:\s*(['"])(.*?)\1""")


def for_component(mock_class_name: str, selector: Optional[str]) -> str:
    lines = ["import { Component } from '@angular/core';", "", "@Component({"]
    if selector:
        lines.append(f"  selector: '{selector}',")
    lines.append(f"  template: '<div>{mock_class_name}</div>'")
    lines.append("})")
    lines.append(f"export class {mock_class_name} {{}}")
    return "\n".join(lines) + "\n"


def for_directive(mock_class_name: str, selector: Optional[str]) -> str:
    lines = ["import { Directive } from '@angular/core';", "", "@Directive({"]
    if selector:
        lines.append(f"  selector: '{selector}',")
    lines.append("})")
    lines.append(f"export class {mock_class_name} {{}}")
    return "\n".join(lines) + "\n"


def for_pipe(mock_class_name: str, pipe_name: Optional[str]) -> str:
    lines = ["import { Pipe, PipeTransform } from '@angular/core';", "", "@Pipe({"]
    if pipe_name:
        lines.append(f"  name: '{pipe_name}',")
    lines.extend(
        [
            "})",
            f"export class {mock_class_name} implements PipeTransform {{",
            "",
            "  transform(val: any) {",
            "    return val;",
            "  }",
            "}",
        ]
    )
    return "\n".join(lines) + "\n"


def for_service(mock_class_name: str, methods: Sequence[str]) -> str:
    if not methods:
        return f"export const {mock_class_name} = {{}};\n"
    entries = ",\n".join(f"  '{method}'" for method in methods)
    return (
        f"export const {mock_class_name} = jasmine.createSpyObj('{mock_class_name}', [\n"
        f"{entries}\n"
        "]);\n"
    )


def render(descriptor: MockDescriptor) -> str:
    """Render the fresh mock block for a descriptor."""
    if descriptor.kind is MockKind.COMPONENT:
        return for_component(descriptor.mock_class_name, descriptor.selector)
    if descriptor.kind is MockKind.DIRECTIVE:
        return for_directive(descriptor.mock_class_name, descriptor.selector)
    if descriptor.kind is MockKind.PIPE:
        return for_pipe(descriptor.mock_class_name, descriptor.pipe_token)
    return for_service(descriptor.mock_class_name, descriptor.methods)


def extract_selector(decorator_text: str) -> Optional[str]:
    """Return the first quoted ``selector:`` value, or None."""
    match = _SELECTOR_PATTERN.search(decorator_text)
    return match.group(2) if match and match.group(2) else None


def extract_pipe_name(decorator_text: str) -> Optional[str]:
    """Return the first quoted ``name:`` value, or None."""
    match = _PIPE_NAME_PATTERN.search(decorator_text)
    return match.group(2) if match and match.group(2) else None


__all__ = [
    "extract_pipe_name",
    "extract_selector",
    "for_component",
    "for_directive",
    "for_pipe",
    "for_service",
    "render",
]
