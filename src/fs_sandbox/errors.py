"""Exceptions raised by fs_sandbox."""

from __future__ import annotations


class SandboxError(Exception):
    """Base class for sandbox errors."""


class PathEscapeError(SandboxError, ValueError):
    """A path resolves outside the sandbox root."""

    def __init__(self, path: str, root: str) -> None:
        super().__init__(f"Path escapes sandbox {root}: {path}")
        self.path = path
        self.root = root


class ManifestError(SandboxError, ValueError):
    """A manifest could not be turned into a file tree."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class MalformedManifestError(ManifestError):
    def __init__(self, path: str, detail: str | None = None) -> None:
        message = f"Malformed manifest at {path!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, path)


class UnknownPathTypeError(ManifestError):
    def __init__(self, path_type: object, path: str) -> None:
        super().__init__(f"Unknown path type {path_type!r} at {path!r}", path)
        self.path_type = path_type
