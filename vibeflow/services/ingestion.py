"""File ingestion: turns a folder's flat file list into ProjectFiles."""

from __future__ import annotations

import asyncio
import logging
import os
import re
from pathlib import Path
from typing import Protocol

from vibeflow.models.project import ProjectFile

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_BYTES = 1024 * 1024  # Larger files are listed with empty content.

_LINE_BREAK = re.compile(r"\r?\n")


class FileHandle(Protocol):
    """One entry of a directory picker's flat file list."""

    @property
    def name(self) -> str: ...

    @property
    def relative_path(self) -> str: ...

    @property
    def size(self) -> int: ...

    async def read_text(self) -> str: ...


class LocalFileHandle:
    """A file on disk, addressed relative to the folder that was picked."""

    def __init__(self, path: Path, root: Path):
        self._path = path
        # The picked folder's own name leads the relative path, as in a browser.
        self._relative_path = "/".join(
            (root.name, *path.relative_to(root).parts)
        )
        self._size = path.stat().st_size

    @property
    def name(self) -> str:
        return self._path.name

    @property
    def relative_path(self) -> str:
        return self._relative_path

    @property
    def size(self) -> int:
        return self._size

    async def read_text(self) -> str:
        data = await asyncio.to_thread(self._path.read_bytes)
        return data.decode("utf-8", errors="replace")


def collect_directory(root: str | os.PathLike[str]) -> list[LocalFileHandle]:
    """Return a handle for every regular file below ``root``."""
    root_path = Path(root).resolve()
    if not root_path.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    handles: list[LocalFileHandle] = []
    for dirpath, _dirs, files in os.walk(root_path):
        for f in files:
            path = Path(dirpath) / f
            if path.is_file():
                handles.append(LocalFileHandle(path, root_path))
    return handles


def _leaf_name(path: str) -> str:
    return path.split("/")[-1]


def is_ignorable(handle: FileHandle) -> bool:
    """Hidden files and empty files never become ProjectFiles."""
    name = _leaf_name(handle.relative_path or handle.name)
    return name.startswith(".") or handle.size == 0


def get_extension(path: str) -> str:
    """Lower-cased suffix after the last dot of the leaf name, or ``"other"``."""
    leaf = _leaf_name(path)
    if "." not in leaf:
        return "other"
    return leaf.rsplit(".", 1)[1].lower()


def count_lines(content: str) -> int:
    if not content:
        return 0
    return len(_LINE_BREAK.split(content))


async def _read_content(handle: FileHandle) -> str:
    if handle.size > MAX_FILE_SIZE_BYTES:
        return ""
    try:
        return await handle.read_text()
    except (OSError, UnicodeError) as e:
        logger.warning(f"Could not read {handle.relative_path or handle.name}: {e}")
        return ""


async def _ingest_one(handle: FileHandle) -> ProjectFile:
    path = handle.relative_path or handle.name
    content = await _read_content(handle)
    return ProjectFile(
        name=handle.name,
        path=path,
        content=content,
        extension=get_extension(path),
        lines=count_lines(content),
    )


async def ingest_files(handles: list[FileHandle]) -> list[ProjectFile]:
    """Read every non-ignorable file and return them sorted by path.

    All reads of the batch complete before this returns, so callers never
    aggregate a partial upload.
    """
    kept = [h for h in handles if not is_ignorable(h)]
    skipped = len(handles) - len(kept)
    if skipped:
        logger.debug(f"Skipped {skipped} hidden or empty files")

    files = await asyncio.gather(*(_ingest_one(h) for h in kept))
    return sorted(files, key=lambda f: f.path)
