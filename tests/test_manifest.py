from __future__ import annotations

import json
from pathlib import Path

import pytest

from fs_sandbox import (
    DirectoryNode,
    FileNode,
    MalformedManifestError,
    Manifest,
    SymlinkNode,
    UnknownPathTypeError,
    load_manifest,
)
from fs_sandbox.manifest import parse_permissions


def test_manifest_parses_every_node_shape() -> None:
    manifest = Manifest.from_mapping(
        {
            "src": {
                "main.py": "print('hi')",
                "data.bin": {"contents": b"\x00\x01"},
                "cache": {"type": "directory", "permissions": "0o700"},
                "link": ["../elsewhere"],
            },
            "empty": {},
        }
    )

    nodes = {node.path: node for node in manifest.walk()}
    assert isinstance(nodes["src"], DirectoryNode)
    assert nodes["src/main.py"] == FileNode(path="src/main.py", contents="print('hi')")
    assert nodes["src/data.bin"] == FileNode(path="src/data.bin", contents=b"\x00\x01")
    assert nodes["src/cache"] == DirectoryNode(path="src/cache", permissions=0o700)
    assert nodes["src/link"] == SymlinkNode(path="src/link", target="../elsewhere")
    assert nodes["empty"] == DirectoryNode(path="empty")
    assert len(manifest) == 6


def test_walk_is_depth_first_in_key_order() -> None:
    manifest = Manifest.from_mapping({"b": {"x": "1", "y": {"z": "2"}}, "a": "3"})
    assert [node.path for node in manifest.walk()] == ["b", "b/x", "b/y", "b/y/z", "a"]


def test_typed_file_defaults_to_empty_contents() -> None:
    manifest = Manifest.from_mapping({"f": {"type": "file", "permissions": 0o600}})
    assert list(manifest.walk()) == [FileNode(path="f", contents="", permissions=0o600)]


@pytest.mark.parametrize(
    "value",
    [None, 42, [], ["a", "b"], [None], {"contents": 3}],
)
def test_malformed_entries(value: object) -> None:
    with pytest.raises(MalformedManifestError, match="Malformed manifest") as excinfo:
        Manifest.from_mapping({"dir": {"entry": value}})
    assert excinfo.value.path == "dir/entry"


def test_unknown_type_reports_type_and_path() -> None:
    with pytest.raises(UnknownPathTypeError, match="Unknown path type") as excinfo:
        Manifest.from_mapping({"file": {"contents": "x", "type": "bogus"}})
    assert excinfo.value.path_type == "bogus"
    assert excinfo.value.path == "file"


def test_top_level_must_be_mapping() -> None:
    with pytest.raises(MalformedManifestError):
        Manifest.from_mapping(["not", "a", "mapping"])  # type: ignore[arg-type]


def test_parse_permissions() -> None:
    assert parse_permissions(None) is None
    assert parse_permissions(0o644) == 0o644
    assert parse_permissions("666") == 0o666
    assert parse_permissions("0o755") == 0o755
    with pytest.raises(MalformedManifestError):
        parse_permissions("rwx", "f")
    with pytest.raises(MalformedManifestError):
        parse_permissions(True, "f")


def test_load_manifest_formats(tmp_path: Path) -> None:
    yaml_path = tmp_path / "tree.yaml"
    yaml_path.write_text(
        "docs:\n"
        "  readme.md: hello\n"
        "  link: [/usr/bin/env]\n"
        "cache:\n"
        "  type: directory\n"
        "  permissions: '700'\n",
        encoding="utf-8",
    )
    toml_path = tmp_path / "tree.toml"
    toml_path.write_text(
        "[docs]\n"
        "\"readme.md\" = \"hello\"\n"
        "link = [\"/usr/bin/env\"]\n"
        "[cache]\n"
        "type = \"directory\"\n"
        "permissions = \"700\"\n",
        encoding="utf-8",
    )
    json_path = tmp_path / "tree.json"
    json_path.write_text(
        json.dumps(
            {
                "docs": {"readme.md": "hello", "link": ["/usr/bin/env"]},
                "cache": {"type": "directory", "permissions": "700"},
            }
        ),
        encoding="utf-8",
    )

    expected = [
        DirectoryNode(
            path="docs",
            children=(
                FileNode(path="docs/readme.md", contents="hello"),
                SymlinkNode(path="docs/link", target="/usr/bin/env"),
            ),
        ),
        FileNode(path="docs/readme.md", contents="hello"),
        SymlinkNode(path="docs/link", target="/usr/bin/env"),
        DirectoryNode(path="cache", permissions=0o700),
    ]
    for path in (yaml_path, toml_path, json_path):
        assert list(load_manifest(path).walk()) == expected, path


def test_load_manifest_rejects_unknown_suffix(tmp_path: Path) -> None:
    path = tmp_path / "tree.ini"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported manifest format"):
        load_manifest(path)


def test_parse_permissions_range() -> None:
    assert parse_permissions("7777") == 0o7777
    assert parse_permissions(0) == 0
    with pytest.raises(MalformedManifestError, match="out of range"):
        parse_permissions(0o10000, "f")
    with pytest.raises(MalformedManifestError, match="out of range"):
        parse_permissions(-1, "f")


def test_load_manifest_reports_broken_yaml(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("a: [unclosed\n", encoding="utf-8")
    with pytest.raises(MalformedManifestError, match="invalid YAML"):
        load_manifest(path)
