"""Summary statistics over an ingested file list."""

from __future__ import annotations

from datetime import datetime, timezone

from vibeflow.models.project import (
    ExtensionStat,
    LineStat,
    ProcessedProject,
    ProjectFile,
    ProjectSummary,
)
from vibeflow.services.graph import build_hierarchy_graph

HISTOGRAM_LIMIT = 12
TOP_FILES_LIMIT = 12


def extension_histogram(files: list[ProjectFile]) -> list[ExtensionStat]:
    """Extension counts, most frequent first.

    Ties keep first-seen order (dicts preserve insertion order and the sort
    is stable).
    """
    counts: dict[str, int] = {}
    for f in files:
        counts[f.extension] = counts.get(f.extension, 0) + 1

    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [ExtensionStat(extension=ext, count=count) for ext, count in ordered[:HISTOGRAM_LIMIT]]


def summarize(files: list[ProjectFile], now: datetime | None = None) -> ProjectSummary:
    return ProjectSummary(
        total_files=len(files),
        total_lines=sum(f.lines for f in files),
        extension_histogram=extension_histogram(files),
        last_uploaded_at=now or datetime.now(timezone.utc),
    )


def top_files_by_lines(files: list[ProjectFile]) -> list[LineStat]:
    """The largest files by line count, zero-line files excluded."""
    non_empty = [f for f in files if f.lines > 0]
    non_empty.sort(key=lambda f: f.lines, reverse=True)
    return [LineStat(path=f.path, lines=f.lines) for f in non_empty[:TOP_FILES_LIMIT]]


def process_project(files: list[ProjectFile], now: datetime | None = None) -> ProcessedProject:
    """Aggregate and build the hierarchy graph over the same ordered file list."""
    return ProcessedProject(
        files=files,
        summary=summarize(files, now=now),
        graph=build_hierarchy_graph(files),
        top_files_by_lines=top_files_by_lines(files),
    )


def build_project_summary_message(project: ProcessedProject) -> str:
    """A short human-readable recap used to open a reasoning chat."""
    extension_line = ", ".join(
        f"{item.extension} ({item.count})" for item in project.summary.extension_histogram[:3]
    )
    return (
        f"I analysed {project.summary.total_files} files totalling "
        f"{project.summary.total_lines} lines. "
        f"Top file types: {extension_line or 'diverse set'}. "
        "Ask anything about this project."
    )
