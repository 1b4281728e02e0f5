from __future__ import annotations

from pathlib import Path

import pytest

from fs_sandbox import Sandbox, SandboxSettings


@pytest.fixture
def settings(tmp_path: Path) -> SandboxSettings:
    return SandboxSettings(base_dir=tmp_path / "sandboxes")


@pytest.fixture
def sandbox(settings: SandboxSettings):
    sb = Sandbox(settings=settings)
    yield sb
    sb.cleanup()
