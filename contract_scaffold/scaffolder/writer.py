"""File-writing primitives used while generating a project.

All functions overwrite whatever already exists at the destination and
create missing parent directories.  They are synchronous; async callers run
them with ``asyncio.to_thread``.
"""

from __future__ import annotations

import shutil
import stat
from pathlib import Path


def write_resource_file(content: str, file_name: str, directory: str | Path) -> Path:
    """Write *content* as UTF-8 text to ``directory/file_name``.

    Returns:
        The path that was written.
    """
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / file_name
    target.write_text(content, encoding="utf-8")
    return target


def copy_resource_file(source: str | Path, destination: str | Path) -> Path:
    """Copy a binary resource byte-for-byte to *destination*."""
    dest = Path(destination)
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_bytes(Path(source).read_bytes())
    return dest


def import_solidity_project(source_dir: str | Path, destination_dir: str | Path) -> list[Path]:
    """Recursively copy an existing contract folder into *destination_dir*.

    The contents of *source_dir* (not the folder itself) land in
    *destination_dir*, keeping their relative layout.

    Returns:
        Sorted list of copied file paths.

    Raises:
        NotADirectoryError: If *source_dir* is not a directory.
        ValueError: If *destination_dir* is *source_dir* or lies inside it.
    """
    src = Path(source_dir)
    if not src.is_dir():
        raise NotADirectoryError(f"Not a directory: {src}")
    dest = Path(destination_dir)
    if dest.resolve().is_relative_to(src.resolve()):
        raise ValueError(f"Cannot import {src} into {dest}: destination is inside the source")
    shutil.copytree(src, dest, dirs_exist_ok=True)
    return sorted(dest / p.relative_to(src) for p in src.rglob("*") if p.is_file())


def make_executable(path: Path) -> None:
    """Set the executable bit on a file."""
    current = path.stat().st_mode
    path.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
