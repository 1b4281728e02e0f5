"""fs_sandbox command-line helpers."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable

from .config import load_sandbox_settings
from .errors import SandboxError
from .manifest import load_manifest
from .random_data import generate_random_data
from .sandbox import Sandbox


def _settings(args: argparse.Namespace):
    config_path = Path(args.config).expanduser().resolve() if args.config else None
    return load_sandbox_settings(config_path=config_path)


def _materialize_command(args: argparse.Namespace) -> int:
    manifest_path = Path(args.manifest).expanduser().resolve()
    try:
        manifest = load_manifest(manifest_path)
    except (OSError, ValueError) as e:
        print(f"error: {e}")
        return 1

    sandbox = Sandbox(
        Path(args.root).expanduser().resolve() if args.root else None,
        settings=_settings(args),
        cleanup_on_exit=False,
    )
    print(f"sandbox: {sandbox.root}")
    try:
        created = sandbox.create_files_from_manifest(manifest, prefix=args.prefix)
    except (SandboxError, OSError) as e:
        print(f"error: {e}")
        if args.cleanup:
            sandbox.cleanup()
        return 1

    for path in created:
        print(path)
    print(f"entries={len(created)}")
    if args.cleanup:
        sandbox.cleanup()
    return 0


def _random_data_command(args: argparse.Namespace) -> int:
    try:
        data = generate_random_data(
            min_bytes=args.min_bytes,
            max_bytes=args.max_bytes,
            settings=_settings(args),
        )
    except ValueError as e:
        print(f"error: {e}")
        return 1

    if args.output:
        output_path = Path(args.output).expanduser().resolve()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(data)
        print(f"random_data: {output_path} bytes={len(data)}")
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.flush()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fs-sandbox")
    parser.add_argument("--config", help="Settings file override (sandbox.toml).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    subparsers = parser.add_subparsers(dest="command")

    materialize = subparsers.add_parser(
        "materialize", help="Create a file tree from a manifest file."
    )
    materialize.add_argument("manifest", help="Manifest path (.json, .yaml, .toml).")
    materialize.add_argument("--root", help="Sandbox root (default: new temp dir).")
    materialize.add_argument("--prefix", help="Subdirectory to build the tree in.")
    materialize.add_argument(
        "--cleanup",
        action="store_true",
        help="Remove the sandbox after building it (validation run).",
    )
    materialize.set_defaults(func=_materialize_command)

    random_data = subparsers.add_parser(
        "random-data", help="Generate a random payload."
    )
    random_data.add_argument("--min-bytes", type=int, help="Minimum payload size.")
    random_data.add_argument("--max-bytes", type=int, help="Maximum payload size.")
    random_data.add_argument(
        "--output",
        help="Output file path (default: raw bytes to stdout).",
    )
    random_data.set_defaults(func=_random_data_command)

    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "command", None):
        parser.print_help()
        return 1
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
