"""Tests for ngmock.generator."""

from __future__ import annotations

from pathlib import Path

from ngmock import content
from ngmock.config import RunOptions
from ngmock.diagnostics import Diagnostics
from ngmock.generator import MockGenerator
from ngmock.models import ClassDeclaration, ExportForm, MockCollection, MockKind, SaveMode


def _declaration(path: Path, name: str, **kwargs) -> ClassDeclaration:  # type: ignore[no-untyped-def]
    return ClassDeclaration(name=name, source_path=path, **kwargs)


def _generator(diagnostics: Diagnostics, **options: object) -> MockGenerator:
    return MockGenerator(RunOptions(**options), diagnostics)  # type: ignore[arg-type]


def test_classify_resolves_kind_and_names(tmp_path: Path, diagnostics: Diagnostics) -> None:
    source = tmp_path / "hero.component.ts"
    declaration = _declaration(
        source, "HeroComponent", decorators=("@Component({ selector: 'app-hero' })",)
    )
    descriptor = _generator(diagnostics).classify(declaration)

    assert descriptor.kind is MockKind.COMPONENT
    assert descriptor.mock_class_name == "MockHeroComponent"
    assert descriptor.target_path == tmp_path / "hero.component.mock.ts"
    assert descriptor.selector == "app-hero"
    assert diagnostics.records == []


def test_missing_selector_is_a_diagnostic_not_a_failure(
    tmp_path: Path, diagnostics: Diagnostics
) -> None:
    source = tmp_path / "bare.component.ts"
    collection = MockCollection()
    _generator(diagnostics).process([_declaration(source, "BareComponent")], collection)

    written = (tmp_path / "bare.component.mock.ts").read_text(encoding="utf-8")
    assert "selector" not in written
    assert "export class MockBareComponent {}" in written
    assert diagnostics.codes() == ["missing-metadata"]
    assert collection.of_kind(MockKind.COMPONENT)[0].skipped is False


def test_unclassifiable_source_is_skipped_and_reported(
    tmp_path: Path, diagnostics: Diagnostics
) -> None:
    collection = MockCollection()
    good = _declaration(tmp_path / "title.pipe.ts", "TitlePipe", decorators=("@Pipe({name: 'title'})",))
    bad = _declaration(tmp_path / "helpers.ts", "Helpers")
    _generator(diagnostics).process([bad, good], collection)

    assert len(collection) == 1
    assert collection.of_kind(MockKind.PIPE)[0].pipe_token == "title"
    assert "unclassifiable-source" in diagnostics.codes()
    assert not (tmp_path / "helpers.mock.ts").exists()


def test_new_mock_is_appended_to_existing_file(tmp_path: Path, diagnostics: Diagnostics) -> None:
    target = tmp_path / "shared.directive.mock.ts"
    target.write_text("// hand written\nexport const helper = 1;", encoding="utf-8")
    collection = MockCollection()
    _generator(diagnostics).process(
        [_declaration(tmp_path / "shared.directive.ts", "FocusDirective")], collection
    )

    descriptor = collection.of_kind(MockKind.DIRECTIVE)[0]
    assert descriptor.save_mode is SaveMode.CREATE
    assert target.read_text(encoding="utf-8") == (
        "// hand written\nexport const helper = 1;\n\n" + content.for_directive("MockFocusDirective", None)
    )


def test_existing_non_service_mock_is_skipped(tmp_path: Path, diagnostics: Diagnostics) -> None:
    target = tmp_path / "hero.component.mock.ts"
    target.write_text("export class MockHeroComponent { custom = true; }\n", encoding="utf-8")
    collection = MockCollection()
    _generator(diagnostics).process(
        [_declaration(tmp_path / "hero.component.ts", "HeroComponent")], collection
    )

    assert collection.of_kind(MockKind.COMPONENT)[0].skipped is True
    assert target.read_text(encoding="utf-8") == "export class MockHeroComponent { custom = true; }\n"
    assert "already-exists" in diagnostics.codes()


def test_method_append_inserts_only_new_methods(tmp_path: Path, diagnostics: Diagnostics) -> None:
    target = tmp_path / "foo.service.mock.ts"
    original = (
        "import { of } from 'rxjs';\n"
        "\n"
        "export const MockFoo = jasmine.createSpyObj('MockFoo', [\n"
        "  'a',\n"
        "  'b'\n"
        "]);\n"
        "MockFoo.a.and.returnValue(of(1));\n"
    )
    target.write_text(original, encoding="utf-8")
    collection = MockCollection()
    _generator(diagnostics).process(
        [_declaration(tmp_path / "foo.service.ts", "Foo", methods=("a", "b", "c"))], collection
    )

    descriptor = collection.of_kind(MockKind.SERVICE)[0]
    assert descriptor.save_mode is SaveMode.UPDATE
    assert descriptor.export_form is ExportForm.VALUE
    assert target.read_text(encoding="utf-8") == original.replace(
        "createSpyObj('MockFoo', [\n", "createSpyObj('MockFoo', [\n  'c',\n", 1
    )


def test_method_append_skips_when_nothing_is_new(tmp_path: Path, diagnostics: Diagnostics) -> None:
    target = tmp_path / "foo.service.mock.ts"
    target.write_text(content.for_service("MockFoo", ["a"]), encoding="utf-8")
    collection = MockCollection()
    _generator(diagnostics).process(
        [_declaration(tmp_path / "foo.service.ts", "Foo", methods=("a",))], collection
    )

    assert collection.of_kind(MockKind.SERVICE)[0].skipped is True


def test_method_append_without_spy_list_warns(tmp_path: Path, diagnostics: Diagnostics) -> None:
    target = tmp_path / "foo.service.mock.ts"
    target.write_text("export class MockFoo {\n  a() {}\n}\n", encoding="utf-8")
    collection = MockCollection()
    _generator(diagnostics).process(
        [_declaration(tmp_path / "foo.service.ts", "Foo", methods=("a", "b"))], collection
    )

    descriptor = collection.of_kind(MockKind.SERVICE)[0]
    assert descriptor.skipped is True
    assert descriptor.export_form is ExportForm.CLASS
    assert "anchor-not-found" in diagnostics.codes()
    assert target.read_text(encoding="utf-8") == "export class MockFoo {\n  a() {}\n}\n"


def test_force_combines_blocks_sharing_a_target(tmp_path: Path, diagnostics: Diagnostics) -> None:
    source = tmp_path / "pair.service.ts"
    target = tmp_path / "pair.service.mock.ts"
    target.write_text(
        "export const MockFirst = {};\n// tweaked by hand\nexport const MockSecond = {};\n",
        encoding="utf-8",
    )
    collection = MockCollection()
    _generator(diagnostics, force=True).process(
        [
            _declaration(source, "First", methods=("one",)),
            _declaration(source, "Second", methods=("two",)),
        ],
        collection,
    )

    expected = (
        content.for_service("MockFirst", ["one"]) + "\n" + content.for_service("MockSecond", ["two"])
    )
    assert target.read_text(encoding="utf-8") == expected
    assert [item.skipped for item in collection.of_kind(MockKind.SERVICE)] == [False, False]


def test_service_with_base_class_is_deferred_in_app_mode(
    tmp_path: Path, diagnostics: Diagnostics
) -> None:
    collection = MockCollection()
    declaration = _declaration(
        tmp_path / "child.service.ts", "Child", base_class="Base", methods=("own",)
    )
    _generator(diagnostics, app_dir=tmp_path).process([declaration], collection)

    descriptor = collection.of_kind(MockKind.SERVICE)[0]
    assert descriptor.deferred is True
    assert descriptor.base_mock_ref == "MockBase"
    assert not descriptor.target_path.exists()


def test_service_with_base_class_in_single_file_mode_warns(
    tmp_path: Path, diagnostics: Diagnostics
) -> None:
    collection = MockCollection()
    declaration = _declaration(
        tmp_path / "child.service.ts", "Child", base_class="Base", methods=("own",)
    )
    _generator(diagnostics).process([declaration], collection)

    descriptor = collection.of_kind(MockKind.SERVICE)[0]
    assert descriptor.deferred is False
    assert descriptor.methods == ("own",)
    assert "inheritance-unsupported" in diagnostics.codes()
    assert "'own'" in descriptor.target_path.read_text(encoding="utf-8")


def test_reconciling_twice_is_a_no_op(tmp_path: Path, diagnostics: Diagnostics) -> None:
    declaration = _declaration(tmp_path / "foo.service.ts", "Foo", methods=("bar",))
    _generator(diagnostics).process([declaration], MockCollection())
    first = (tmp_path / "foo.service.mock.ts").read_text(encoding="utf-8")

    second_run = MockCollection()
    _generator(diagnostics).process([declaration], second_run)

    assert second_run.of_kind(MockKind.SERVICE)[0].skipped is True
    assert (tmp_path / "foo.service.mock.ts").read_text(encoding="utf-8") == first


def test_comment_opener_inside_string_does_not_duplicate_mock(
    tmp_path: Path, diagnostics: Diagnostics
) -> None:
    target = tmp_path / "pair.service.mock.ts"
    original = (
        "export const MockA = jasmine.createSpyObj('MockA', [\n"
        "  'x'\n"
        "]);\n"
        "MockA.x.and.returnValue('assets/*');\n"
        "\n"
        "export const MockB = {};\n"
        "/* end */\n"
    )
    target.write_text(original, encoding="utf-8")
    collection = MockCollection()
    _generator(diagnostics).process([_declaration(tmp_path / "pair.service.ts", "B")], collection)

    assert target.read_text(encoding="utf-8") == original
    assert collection.of_kind(MockKind.SERVICE)[0].skipped is True


def test_method_listed_by_another_mock_is_still_added(
    tmp_path: Path, diagnostics: Diagnostics
) -> None:
    target = tmp_path / "pair.service.mock.ts"
    original = (
        "export const MockFirst = jasmine.createSpyObj('MockFirst', [\n"
        "  'save'\n"
        "]);\n"
        "\n"
        "export const MockSecond = jasmine.createSpyObj('MockSecond', [\n"
        "  'load'\n"
        "]);\n"
    )
    target.write_text(original, encoding="utf-8")
    collection = MockCollection()
    _generator(diagnostics).process(
        [_declaration(tmp_path / "pair.service.ts", "Second", methods=("load", "save"))],
        collection,
    )

    assert target.read_text(encoding="utf-8") == original.replace(
        "createSpyObj('MockSecond', [\n", "createSpyObj('MockSecond', [\n  'save',\n", 1
    )


def test_metadata_falls_back_to_class_text(tmp_path: Path, diagnostics: Diagnostics) -> None:
    declaration = _declaration(
        tmp_path / "title.pipe.ts",
        "TitlePipe",
        text="@Pipe({ name: 'title' })\nexport class TitlePipe {}",
    )

    descriptor = _generator(diagnostics).classify(declaration)

    assert descriptor.pipe_token == "title"
    assert diagnostics.records == []


def test_decorator_metadata_wins_over_class_text(
    tmp_path: Path, diagnostics: Diagnostics
) -> None:
    declaration = _declaration(
        tmp_path / "hero.component.ts",
        "HeroComponent",
        decorators=("@Component({ selector: 'app-hero' })",),
        text="@Component({ selector: 'app-hero' })\nclass HeroComponent { selector: 'other' }",
    )

    assert _generator(diagnostics).classify(declaration).selector == "app-hero"
