"""fs_sandbox config helpers."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "sandbox.toml"

DEFAULT_MIN_BYTES = 5 * 1024
DEFAULT_MAX_BYTES = 2000 * 1024


@dataclass
class SandboxSettings:
    """Defaults applied to new sandboxes and random payloads."""

    base_dir: Path | str | None = None
    prefix: str = "sandbox-"
    cleanup_on_exit: bool = True
    min_bytes: int = DEFAULT_MIN_BYTES
    max_bytes: int = DEFAULT_MAX_BYTES


def _expand_path(path: str | Path) -> Path:
    return Path(path).expanduser().resolve()


def _default_config_dirs() -> list[Path]:
    repo_root = Path(__file__).resolve().parents[2]
    return [
        Path.home() / ".config" / "fs_sandbox",
        repo_root / "config",
    ]


def _find_config(filename: str) -> Path | None:
    for base in _default_config_dirs():
        candidate = base / filename
        if candidate.exists():
            return candidate
    return None


def _load_toml(path: Path | None) -> dict[str, Any]:
    if not path or not path.exists():
        return {}
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_sandbox_settings(config_path: Path | None = None) -> SandboxSettings:
    path = config_path or _find_config(CONFIG_FILENAME)
    data = _load_toml(path)
    settings = SandboxSettings()

    sandbox = data.get("sandbox")
    if isinstance(sandbox, dict):
        base_dir = sandbox.get("base_dir")
        if isinstance(base_dir, str) and base_dir:
            settings.base_dir = _expand_path(base_dir)
        prefix = sandbox.get("prefix")
        if isinstance(prefix, str):
            settings.prefix = prefix
        cleanup_on_exit = sandbox.get("cleanup_on_exit")
        if isinstance(cleanup_on_exit, bool):
            settings.cleanup_on_exit = cleanup_on_exit

    random_data = data.get("random_data")
    if isinstance(random_data, dict):
        for key in ("min_bytes", "max_bytes"):
            value = random_data.get(key)
            if isinstance(value, int) and not isinstance(value, bool):
                setattr(settings, key, value)

    return settings
