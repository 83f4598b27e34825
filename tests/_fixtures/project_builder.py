from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from vibeflow.models.project import ProcessedProject, ProjectFile
from vibeflow.services.aggregator import process_project
from vibeflow.services.ingestion import ingest_files

FIXED_NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeHandle:
    """In-memory stand-in for a directory picker entry."""

    def __init__(
        self,
        relative_path: str,
        content: str = "",
        size: int | None = None,
        fail: bool = False,
    ):
        self.relative_path = relative_path
        self.name = relative_path.split("/")[-1]
        self.content = content
        self.size = len(content.encode("utf-8")) if size is None else size
        self.fail = fail
        self.reads = 0

    async def read_text(self) -> str:
        self.reads += 1
        if self.fail:
            raise OSError("permission denied")
        return self.content


def handles_from(files: dict[str, str]) -> list[FakeHandle]:
    return [FakeHandle(path, content) for path, content in files.items()]


def ingest(files: dict[str, str]) -> list[ProjectFile]:
    return asyncio.run(ingest_files(handles_from(files)))


def build_project(files: dict[str, str]) -> ProcessedProject:
    return process_project(ingest(files), now=FIXED_NOW)


def make_file(path: str, content: str = "x", extension: str | None = None, lines: int | None = None) -> ProjectFile:
    return ProjectFile(
        name=path.split("/")[-1],
        path=path,
        content=content,
        extension=extension or (path.rsplit(".", 1)[1] if "." in path.split("/")[-1] else "other"),
        lines=lines if lines is not None else (content.count("\n") + 1 if content else 0),
    )
