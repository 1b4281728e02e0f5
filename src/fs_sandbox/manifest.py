"""Manifest parsing for bulk file tree creation.

A manifest is a nested mapping keyed by path segment. Each value is one of:

- a string (or bytes): a file with that content
- a one-element list: a symbolic link pointing at the element
- a mapping with ``type`` and/or ``contents``: a typed file or empty directory
- any other mapping: a directory whose entries are parsed recursively

Raw data is parsed into node objects up front so that a bad entry is
reported before anything is written to disk.
"""

from __future__ import annotations

import json
import os
import posixpath
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Mapping, Union

import yaml

from .errors import MalformedManifestError, UnknownPathTypeError

LEAF_KEYS = ("type", "contents")
MAX_MODE = 0o7777


@dataclass(frozen=True)
class FileNode:
    path: str
    contents: str | bytes = ""
    permissions: int | None = None


@dataclass(frozen=True)
class DirectoryNode:
    path: str
    permissions: int | None = None
    children: tuple["ManifestNode", ...] = ()


@dataclass(frozen=True)
class SymlinkNode:
    path: str
    target: str


ManifestNode = Union[FileNode, DirectoryNode, SymlinkNode]


def parse_permissions(value: Any, path: str = "") -> int | None:
    """Accept an int mode or an octal string such as ``"644"`` or ``"0o700"``.

    Manifest files should quote modes: an unquoted ``755`` in YAML, TOML or
    JSON arrives as the decimal int 755, not ``0o755``.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise MalformedManifestError(path, f"invalid permissions {value!r}")
    if isinstance(value, int):
        mode = value
    elif isinstance(value, str):
        text = value.strip().lower()
        if text.startswith("0o"):
            text = text[2:]
        try:
            mode = int(text, 8)
        except ValueError:
            raise MalformedManifestError(path, f"invalid permissions {value!r}") from None
    else:
        raise MalformedManifestError(path, f"invalid permissions {value!r}")
    if not 0 <= mode <= MAX_MODE:
        raise MalformedManifestError(path, f"permissions {value!r} out of range")
    return mode


def _is_leaf_mapping(value: Mapping[str, Any]) -> bool:
    return any(key in value for key in LEAF_KEYS)


def _parse_typed(value: Mapping[str, Any], path: str) -> ManifestNode:
    path_type = value.get("type", "file")
    permissions = parse_permissions(value.get("permissions"), path)
    if path_type == "file":
        contents = value.get("contents", "")
        if contents is None:
            contents = ""
        if not isinstance(contents, (str, bytes)):
            raise MalformedManifestError(path, "file contents must be text or bytes")
        return FileNode(path=path, contents=contents, permissions=permissions)
    if path_type == "directory":
        return DirectoryNode(path=path, permissions=permissions)
    raise UnknownPathTypeError(path_type, path)


def parse_node(value: Any, path: str) -> ManifestNode:
    if isinstance(value, (str, bytes)):
        return FileNode(path=path, contents=value)
    if isinstance(value, (list, tuple)):
        if len(value) != 1 or not isinstance(value[0], (str, os.PathLike)):
            raise MalformedManifestError(path, "a link must hold exactly one target")
        return SymlinkNode(path=path, target=os.fspath(value[0]))
    if isinstance(value, Mapping):
        if _is_leaf_mapping(value):
            return _parse_typed(value, path)
        return DirectoryNode(path=path, children=_parse_children(value, path))
    raise MalformedManifestError(path)


def _parse_children(entries: Mapping[str, Any], parent: str) -> tuple[ManifestNode, ...]:
    children = []
    for name, value in entries.items():
        name = str(name)
        path = posixpath.join(parent, name) if parent else name
        children.append(parse_node(value, path))
    return tuple(children)


@dataclass(frozen=True)
class Manifest:
    """A validated file tree, relative to wherever it gets materialized."""

    entries: tuple[ManifestNode, ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Manifest":
        if not isinstance(data, Mapping):
            raise MalformedManifestError("", "top level must be a mapping")
        return cls(entries=_parse_children(data, ""))

    def walk(self) -> Iterator[ManifestNode]:
        """Yield every node depth-first, parents before their children."""
        stack = list(reversed(self.entries))
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, DirectoryNode):
                stack.extend(reversed(node.children))

    def __len__(self) -> int:
        return sum(1 for _ in self.walk())


def load_manifest(path: Path) -> Manifest:
    """Load a manifest from a ``.json``, ``.yaml``/``.yml`` or ``.toml`` file."""
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise MalformedManifestError("", f"invalid YAML in {path}: {e}") from e
    elif suffix == ".toml":
        with open(path, "rb") as f:
            data = tomllib.load(f)
    elif suffix == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
    else:
        raise ValueError(f"Unsupported manifest format: {path}")
    return Manifest.from_mapping(data or {})
