"""Disposable filesystem sandbox.

A ``Sandbox`` owns one root directory. Files, directories and links are
created beneath it either one at a time or from a manifest, and the whole
tree is removed by ``cleanup()`` or, failing that, when the process exits.
"""

from __future__ import annotations

import atexit
import logging
import os
import shutil
import stat
import sys
import tempfile
from pathlib import Path
from typing import Any, Callable, Mapping

from .config import SandboxSettings, load_sandbox_settings
from .errors import PathEscapeError, SandboxError
from .manifest import DirectoryNode, Manifest, SymlinkNode, parse_permissions
from .paths import is_within, normalize_path, resolve_base_dir

logger = logging.getLogger(__name__)

PathLike = str | os.PathLike[str]


class Sandbox:
    """
    An isolated directory tree for tests and tooling.

    When ``root`` is omitted a unique directory is created under the
    configured base directory. A caller-supplied root is used as given and
    only created once something is written into it.
    """

    def __init__(
        self,
        root: PathLike | None = None,
        *,
        settings: SandboxSettings | None = None,
        cleanup_on_exit: bool | None = None,
    ) -> None:
        self.settings = settings or load_sandbox_settings()
        if root is None:
            base_dir = resolve_base_dir(self.settings)
            base_dir.mkdir(parents=True, exist_ok=True)
            root = tempfile.mkdtemp(prefix=self.settings.prefix, dir=base_dir)
        self.root = os.path.normpath(os.path.abspath(os.fspath(root)))

        if cleanup_on_exit is None:
            cleanup_on_exit = self.settings.cleanup_on_exit
        self._cleaned = False
        self._exit_hook_registered = False
        if cleanup_on_exit:
            atexit.register(self._cleanup_at_exit)
            self._exit_hook_registered = True
        logger.debug("Sandbox ready at %s", self.root)

    def __repr__(self) -> str:
        return f"Sandbox(root={self.root!r})"

    def __enter__(self) -> "Sandbox":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.cleanup()

    def normalize(self, path: PathLike) -> str:
        return normalize_path(self.root, path)

    def is_sandboxed(self, path: PathLike) -> bool:
        return is_within(self.root, self.normalize(path))

    def _contained(self, path: PathLike) -> str:
        if self._cleaned:
            raise SandboxError(f"Sandbox {self.root} was cleaned up")
        target = self.normalize(path)
        if not is_within(self.root, target):
            raise PathEscapeError(os.fspath(path), self.root)
        return target

    def exists(self, path: PathLike) -> bool:
        return os.path.lexists(self.normalize(path))

    def write(self, path: PathLike, data: str | bytes) -> str:
        """Write ``data`` to ``path``, creating parent directories. Returns the absolute path."""
        target = self._contained(path)
        os.makedirs(os.path.dirname(target), exist_ok=True)
        if isinstance(data, bytes):
            Path(target).write_bytes(data)
        else:
            Path(target).write_text(data, encoding="utf-8")
        return target

    def read(self, path: PathLike, encoding: str | None = "utf-8") -> str | bytes:
        """Read a file back. Pass ``encoding=None`` to get bytes."""
        target = self.normalize(path)
        if encoding is None:
            return Path(target).read_bytes()
        return Path(target).read_text(encoding=encoding)

    def mkdir(self, path: PathLike) -> str:
        target = self._contained(path)
        os.makedirs(target, exist_ok=True)
        return target

    def symlink(self, target: PathLike, path: PathLike) -> str:
        """Create a link at ``path`` pointing to ``target``, which is used verbatim."""
        link = self._contained(path)
        os.makedirs(os.path.dirname(link), exist_ok=True)
        os.symlink(os.fspath(target), link)
        return link

    def chmod(self, path: PathLike, permissions: int | str) -> str:
        target = self._contained(path)
        os.chmod(target, parse_permissions(permissions, os.fspath(path)))
        return target

    def create_files_from_manifest(
        self,
        manifest: Manifest | Mapping[str, Any],
        prefix: PathLike | None = None,
    ) -> list[str]:
        """
        Materialize a manifest under the root, or under ``root/prefix``.

        The manifest is validated before anything is created. Entries are
        created depth-first so directories always exist before their contents.

        Returns:
            Absolute paths of the created entries, in creation order.

        Raises:
            MalformedManifestError: An entry has an unsupported shape.
            UnknownPathTypeError: A typed entry names an unknown type.
        """
        if not isinstance(manifest, Manifest):
            manifest = Manifest.from_mapping(manifest)
        base = self._contained(prefix) if prefix else self.root
        plan = [
            (node, self._contained(os.path.join(base, *node.path.split("/"))))
            for node in manifest.walk()
        ]

        created: list[str] = []
        for node, target in plan:
            if isinstance(node, SymlinkNode):
                os.makedirs(os.path.dirname(target), exist_ok=True)
                os.symlink(node.target, target)
            elif isinstance(node, DirectoryNode):
                os.makedirs(target, exist_ok=True)
                if node.permissions is not None:
                    os.chmod(target, node.permissions)
            else:
                self.write(target, node.contents)
                if node.permissions is not None:
                    os.chmod(target, node.permissions)
            created.append(target)

        logger.debug("Created %d manifest entries under %s", len(created), base)
        return created

    def cleanup(self) -> None:
        """
        Remove the root and everything beneath it.

        Entries that cannot be inspected or removed are skipped silently, and
        calling this on an already removed root does nothing. Once cleaned up,
        the sandbox refuses further writes.
        """
        if self._exit_hook_registered:
            atexit.unregister(self._cleanup_at_exit)
            self._exit_hook_registered = False
        self._cleaned = True
        self._remove_tree()

    def _cleanup_at_exit(self) -> None:
        try:
            self._remove_tree()
        except Exception:
            logger.debug("Exit cleanup failed for %s", self.root, exc_info=True)

    def _remove_tree(self) -> None:
        if not os.path.lexists(self.root):
            return
        if os.path.islink(self.root) or not os.path.isdir(self.root):
            logger.debug("Sandbox root %s is not a directory, leaving it", self.root)
            return
        if sys.version_info >= (3, 12):
            shutil.rmtree(self.root, onexc=self._on_remove_error)
        else:
            shutil.rmtree(self.root, onerror=self._on_remove_error)
        logger.debug("Removed sandbox %s", self.root)

    def _on_remove_error(self, func: Callable[..., Any], path: str, exc: Any) -> None:
        # Restore owner permissions and retry once; never chmod outside the root.
        if not os.path.lexists(path):
            return
        try:
            parent = os.path.dirname(path)
            if is_within(self.root, parent):
                os.chmod(parent, stat.S_IRWXU)
            if os.path.isdir(path) and not os.path.islink(path):
                os.chmod(path, stat.S_IRWXU)
                shutil.rmtree(path, ignore_errors=True)
            else:
                os.unlink(path)
        except OSError as err:
            logger.debug("Could not remove %s: %s", path, err)
