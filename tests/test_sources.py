"""Tests for loading declaration files."""

import json
import logging

import pytest

from bemorder.errors import DeclarationFileError
from bemorder.sources import (
    iter_declaration_files,
    load_declaration_file,
    load_declarations,
)

CIRCULAR_BUNDLE = """\
admin-post:
  mustDeps:
    - block: mixins
    - block: variables
mixins:
  mustDeps:
    - block: variables
variables:
  mustDeps:
    - block: admin-post
"""


def test_per_stem_yaml_file(tmp_path):
    path = tmp_path / "button.deps.yaml"
    path.write_text("mustDeps:\n  - block: i-bem\n    elems: [dom]\n")

    assert load_declaration_file(path) == [("button", {"i-bem__dom"})]


def test_per_stem_json_file(tmp_path):
    path = tmp_path / "film-header.deps.json"
    path.write_text(
        json.dumps(
            {
                "mustDeps": [
                    {"block": "button", "elem": "elem", "elemMods": {"size": "s"}}
                ]
            }
        )
    )

    assert load_declaration_file(path) == [
        ("film-header", {"button__elem_size", "button__elem_size_s"})
    ]


def test_empty_per_stem_file_declares_no_dependencies(tmp_path):
    path = tmp_path / "block.deps.yml"
    path.write_text("")

    assert load_declaration_file(path) == [("block", set())]


def test_bundle_file(tmp_path):
    path = tmp_path / "deps-circular.yaml"
    path.write_text(CIRCULAR_BUNDLE)

    assert load_declaration_file(path) == [
        ("admin-post", {"mixins", "variables"}),
        ("mixins", {"variables"}),
        ("variables", {"admin-post"}),
    ]


def test_bundle_file_must_be_a_mapping(tmp_path):
    path = tmp_path / "bundle.yaml"
    path.write_text("- block: a\n")

    with pytest.raises(DeclarationFileError, match="bundle file"):
        load_declaration_file(path)


def test_invalid_yaml(tmp_path):
    path = tmp_path / "broken.deps.yaml"
    path.write_text("mustDeps: [unclosed\n")

    with pytest.raises(DeclarationFileError) as exc_info:
        load_declaration_file(path)
    assert exc_info.value.path == str(path)


def test_invalid_json(tmp_path):
    path = tmp_path / "broken.deps.json"
    path.write_text("{not json")

    with pytest.raises(DeclarationFileError):
        load_declaration_file(path)


def test_file_that_is_not_utf8(tmp_path):
    path = tmp_path / "a.deps.yaml"
    path.write_bytes(b"\xff\xfe")

    with pytest.raises(DeclarationFileError) as exc_info:
        load_declarations([path])
    assert exc_info.value.path == str(path)


def test_missing_file(tmp_path):
    with pytest.raises(DeclarationFileError):
        load_declaration_file(tmp_path / "missing.deps.yaml")


def test_custom_suffixes(tmp_path):
    path = tmp_path / "block.bemdeps.yaml"
    path.write_text("mustDeps:\n  - block: base\n")

    assert load_declaration_file(path, suffixes=[".bemdeps.yaml"]) == [
        ("block", {"base"})
    ]


def test_directories_expand_to_sorted_declaration_files(tmp_path):
    blocks = tmp_path / "blocks"
    (blocks / "button").mkdir(parents=True)
    (blocks / "input").mkdir()
    (blocks / "input" / "input.deps.yaml").write_text("mustDeps: []\n")
    (blocks / "button" / "button.deps.yaml").write_text("mustDeps: []\n")
    (blocks / "button" / "button.css").write_text("")
    (blocks / "notes.yaml").write_text("a: {}\n")

    files = iter_declaration_files([blocks])

    assert files == [
        blocks / "button" / "button.deps.yaml",
        blocks / "input" / "input.deps.yaml",
    ]


def test_multiple_sources_for_one_stem_are_merged(tmp_path):
    bundle = tmp_path / "bundle.yaml"
    bundle.write_text(
        "admin-post:\n"
        "  mustDeps:\n"
        "    - block: mixins\n"
        "    - block: variables\n"
        "    - block: button\n"
        "button:\n"
        "  mustDeps:\n"
        "    - block: i-bem__dom\n"
    )
    deps_dir = tmp_path / "blocks"
    deps_dir.mkdir()
    (deps_dir / "admin-post.deps.yaml").write_text("mustDeps:\n  - block: layout\n")

    declarations = load_declarations([bundle, deps_dir])

    assert declarations == {
        "admin-post": {"mixins", "variables", "button", "layout"},
        "button": {"i-bem__dom"},
    }


def test_non_yaml_declaration_files_are_skipped(tmp_path, caplog):
    legacy = tmp_path / "block.deps.js"
    legacy.write_text("({mustDeps: [{block: 'a'}]})")

    with caplog.at_level(logging.INFO, logger="bemorder"):
        declarations = load_declarations([legacy], suffixes=[".deps.js"])

    assert declarations == {}
    assert "not a YAML or JSON file" in caplog.text


def test_suffixes_default_to_config(tmp_path, monkeypatch):
    from bemorder.config import BemorderConfig, SourcesConfig, configure

    configure(BemorderConfig(sources=SourcesConfig(deps_suffixes=[".d.yaml"])))
    (tmp_path / "a.d.yaml").write_text("mustDeps:\n  - block: b\n")
    (tmp_path / "c.deps.yaml").write_text("mustDeps:\n  - block: d\n")

    assert load_declarations([tmp_path]) == {"a": {"b"}}
