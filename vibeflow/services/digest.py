"""Bounded-size text summary of a project, used as prompt context.

The construct counts are keyword tallies over the concatenated sources, not
a parse; they are meant as rough hints for the model.
"""

from __future__ import annotations

import json
import logging
import re
import threading

from vibeflow.models.project import ProcessedProject, ProjectDigest

logger = logging.getLogger(__name__)

MAX_DIGEST_CHARS = 2000
FILE_LIST_LIMIT = 10

_LOOP_PATTERN = re.compile(r"\b(for|while|forEach|map)\b", re.ASCII)
_ASYNC_PATTERN = re.compile(r"\b(async|await|Promise)\b", re.ASCII)
_CLASS_PATTERN = re.compile(r"\bclass\s+\w+", re.ASCII)
_FUNCTION_PATTERN = re.compile(r"\bfunction\s+\w+", re.ASCII)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return sign + "".join(reversed(digits))


def hash_string(text: str) -> str:
    """32-bit ``hash * 31 + unit`` over UTF-16 code units, in base 36."""
    data = text.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return _to_base36(h)


def content_key(project: ProcessedProject) -> str:
    # Projects with equal totals share a digest.
    return json.dumps(
        {
            "totalFiles": project.summary.total_files,
            "totalLines": project.summary.total_lines,
        },
        separators=(",", ":"),
    )


def find_entry_point(project: ProcessedProject) -> str:
    for f in project.files:
        if "main" in f.path or "index" in f.path:
            return f.path
    return "unknown"


def render_digest(project: ProcessedProject) -> str:
    all_code = "\n".join(f.content for f in project.files)
    loop_count = len(_LOOP_PATTERN.findall(all_code))
    async_count = len(_ASYNC_PATTERN.findall(all_code))
    class_count = len(_CLASS_PATTERN.findall(all_code))
    function_count = len(_FUNCTION_PATTERN.findall(all_code))

    file_names = ", ".join(f.path for f in project.files[:FILE_LIST_LIMIT])
    extensions = ", ".join(
        f"{stat.extension}: {stat.count}" for stat in project.summary.extension_histogram
    )

    digest = f"""PROJECT OVERVIEW:
- Files: {project.summary.total_files}
- Total Lines: {project.summary.total_lines}
- Entry Point: {find_entry_point(project)}

CODE CONSTRUCTS:
- Loops: {loop_count}
- Async Operations: {async_count}
- Classes: {class_count}
- Functions: {function_count}

FILE LIST (top 10):
{file_names}

EXTENSIONS:
{extensions}""".strip()

    return digest[:MAX_DIGEST_CHARS]


class DigestCache:
    """Thread-safe map from content key to digest, kept for the process lifetime."""

    def __init__(self) -> None:
        self._entries: dict[str, ProjectDigest] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> ProjectDigest | None:
        with self._lock:
            return self._entries.get(key)

    def store(self, key: str, digest: ProjectDigest) -> None:
        with self._lock:
            self._entries[key] = digest

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


_digest_cache = DigestCache()


def build_digest(project: ProcessedProject, cache: DigestCache | None = None) -> ProjectDigest:
    """Return the cached digest for this project's content key, building it on a miss."""
    cache = _digest_cache if cache is None else cache
    key = content_key(project)

    cached = cache.get(key)
    if cached is not None:
        return cached

    result = ProjectDigest(digest=render_digest(project), hash=hash_string(key))
    cache.store(key, result)
    logger.debug(f"Built digest {result.hash} ({len(result.digest)} chars)")
    return result
