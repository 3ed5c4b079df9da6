"""Tests for the tree-sitter TypeScript class parser."""

from __future__ import annotations

from pathlib import Path

from ngmock.parsing import TypeScriptClassParser


def _parse(tmp_path: Path, filename: str, source: str):  # type: ignore[no-untyped-def]
    path = tmp_path / filename
    path.write_text(source, encoding="utf-8")
    return TypeScriptClassParser().parse(path)


def test_parser_extracts_decorated_component(tmp_path: Path) -> None:
    classes = _parse(
        tmp_path,
        "hero.component.ts",
        """import { Component } from '@angular/core';

@Component({
  selector: 'app-hero',
  templateUrl: './hero.component.html'
})
export class HeroComponent {
  ngOnInit() {}
}
""",
    )
    assert len(classes) == 1
    hero = classes[0]
    assert hero.name == "HeroComponent"
    assert hero.base_class is None
    assert hero.methods == ("ngOnInit",)
    assert "selector: 'app-hero'" in hero.decorator_text
    assert hero.text.startswith("@Component")


def test_parser_collects_methods_and_heritage(tmp_path: Path) -> None:
    classes = _parse(
        tmp_path,
        "users.service.ts",
        """@Injectable()
export class UsersService extends ApiService<User> {
  private cache = new Map();

  constructor(private http: HttpClient) {
    super(http);
  }

  get size() { return this.cache.size; }

  list() { return []; }

  async find(id: string) { return null; }

  private static build() {}
}
""",
    )
    service = classes[0]
    assert service.name == "UsersService"
    assert service.base_class == "ApiService"
    assert service.methods == ("list", "find", "build")


def test_parser_returns_classes_in_declaration_order(tmp_path: Path) -> None:
    classes = _parse(
        tmp_path,
        "pair.service.ts",
        """class Internal {}

export class First { a() {} }

export abstract class Second {
  abstract b(): void;
}
""",
    )
    assert [item.name for item in classes] == ["Internal", "First", "Second"]
    assert classes[2].methods == ("b",)


def test_parser_ignores_files_without_classes(tmp_path: Path) -> None:
    assert _parse(tmp_path, "consts.service.ts", "export const X = 1;\n") == []
