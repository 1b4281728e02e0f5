"""Disposable filesystem sandboxes for tests and tooling."""

__version__ = "0.1.0"

from .config import SandboxSettings, load_sandbox_settings
from .errors import (
    MalformedManifestError,
    ManifestError,
    PathEscapeError,
    SandboxError,
    UnknownPathTypeError,
)
from .manifest import DirectoryNode, FileNode, Manifest, SymlinkNode, load_manifest
from .random_data import generate_random_data
from .sandbox import Sandbox

__all__ = [
    "Sandbox",
    "SandboxSettings",
    "load_sandbox_settings",
    "Manifest",
    "FileNode",
    "DirectoryNode",
    "SymlinkNode",
    "load_manifest",
    "generate_random_data",
    "SandboxError",
    "PathEscapeError",
    "ManifestError",
    "MalformedManifestError",
    "UnknownPathTypeError",
]
