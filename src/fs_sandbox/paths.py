"""Path helpers shared by the sandbox and the CLI."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from .config import SandboxSettings, load_sandbox_settings


def default_base_dir() -> Path:
    return Path(tempfile.gettempdir())


def resolve_base_dir(
    settings: SandboxSettings | None = None,
    config_path: Path | None = None,
) -> Path:
    settings = settings or load_sandbox_settings(config_path=config_path)
    if settings.base_dir is not None:
        return Path(settings.base_dir).expanduser()
    return default_base_dir()


def normalize_path(root: str, path: str | os.PathLike[str]) -> str:
    """Absolutize ``path`` against ``root`` without touching the filesystem.

    Absolute paths are only collapsed, so normalizing twice is a no-op.
    """
    return os.path.normpath(os.path.join(root, os.fspath(path)))


def is_within(root: str, path: str) -> bool:
    """Segment-aware check that ``path`` is ``root`` or lies beneath it."""
    root = os.path.normpath(root)
    path = os.path.normpath(path)
    if path == root:
        return True
    return path.startswith(root.rstrip(os.sep) + os.sep)
