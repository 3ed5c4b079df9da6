"""Tree-sitter powered TypeScript class parser."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from .base import ClassParser
from ..models import ClassDeclaration

_CLASS_NODES = {"class_declaration", "abstract_class_declaration"}
_METHOD_NODES = {"method_definition", "method_signature", "abstract_method_signature"}
_ACCESSOR_TOKENS = {"get", "set"}


class TypeScriptClassParser(ClassParser):
    """Extracts class names, heritage, methods and decorators from TypeScript files."""

    def __init__(self) -> None:
        self._parser: Optional[Parser] = None

    def parse(self, path: Path) -> List[ClassDeclaration]:
        source = path.read_text(encoding="utf-8")
        return self.parse_source(source, path)

    def parse_source(self, source: str, path: Path) -> List[ClassDeclaration]:
        source_bytes = source.encode("utf-8")
        tree = self._get_parser().parse(source_bytes)
        declarations: List[ClassDeclaration] = []
        for class_node, outer_node in self._top_level_classes(tree.root_node):
            declaration = self._build_declaration(class_node, outer_node, source_bytes, path)
            if declaration is not None:
                declarations.append(declaration)
        return declarations

    def _get_parser(self) -> Parser:
        if self._parser is None:
            language = Language(tree_sitter_typescript.language_typescript())
            self._parser = Parser(language)
        return self._parser

    @staticmethod
    def _top_level_classes(root: Node) -> Iterable[tuple[Node, Node]]:
        for child in root.named_children:
            if child.type in _CLASS_NODES:
                yield child, child
            elif child.type == "export_statement":
                declaration = child.child_by_field_name("declaration")
                if declaration is not None and declaration.type in _CLASS_NODES:
                    yield declaration, child

    def _build_declaration(
        self, node: Node, outer: Node, source_bytes: bytes, path: Path
    ) -> Optional[ClassDeclaration]:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None
        name = self._node_text(name_node, source_bytes)
        decorators = [
            self._node_text(child, source_bytes)
            for candidate in (outer, node)
            for child in candidate.children
            if child.type == "decorator"
        ]
        if outer is not node:
            decorators = list(dict.fromkeys(decorators))
        return ClassDeclaration(
            name=name,
            source_path=path,
            base_class=self._base_class(node, source_bytes),
            methods=tuple(self._method_names(node, source_bytes)),
            decorators=tuple(decorators),
            text=self._node_text(outer, source_bytes),
        )

    def _base_class(self, node: Node, source_bytes: bytes) -> Optional[str]:
        for child in node.children:
            if child.type != "class_heritage":
                continue
            for clause in child.children:
                if clause.type != "extends_clause":
                    continue
                value = clause.child_by_field_name("value")
                if value is None:
                    continue
                # ``Base<T>`` and ``ns.Base`` both reduce to the last identifier.
                text = self._node_text(value, source_bytes)
                return text.split("<", 1)[0].strip().split(".")[-1]
        return None

    def _method_names(self, node: Node, source_bytes: bytes) -> List[str]:
        body = node.child_by_field_name("body")
        if body is None:
            return []
        names: List[str] = []
        for member in body.named_children:
            if member.type not in _METHOD_NODES:
                continue
            if any(child.type in _ACCESSOR_TOKENS for child in member.children):
                continue
            name_node = member.child_by_field_name("name")
            if name_node is None:
                continue
            name = self._node_text(name_node, source_bytes)
            if name == "constructor":
                continue
            names.append(name)
        return names

    @staticmethod
    def _node_text(node: Node, source_bytes: bytes) -> str:
        return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


__all__ = ["TypeScriptClassParser"]
