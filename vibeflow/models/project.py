"""Project-related data models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    """Serializes with camelCase keys, accepts either spelling on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProjectFile(_WireModel):
    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    content: str
    extension: str
    lines: int


class FileMeta(_WireModel):
    """A ProjectFile without its content, for responses."""

    name: str
    path: str
    extension: str
    lines: int


class ExtensionStat(_WireModel):
    extension: str
    count: int


class LineStat(_WireModel):
    path: str
    lines: int


class ProjectSummary(_WireModel):
    total_files: int
    total_lines: int
    extension_histogram: list[ExtensionStat]
    last_uploaded_at: datetime


class GraphNode(_WireModel):
    id: str
    label: str


class GraphEdge(_WireModel):
    id: str
    source: str
    target: str


class HierarchyGraph(_WireModel):
    nodes: list[GraphNode]
    edges: list[GraphEdge]


class ProcessedProject(_WireModel):
    files: list[ProjectFile]
    summary: ProjectSummary
    graph: HierarchyGraph
    top_files_by_lines: list[LineStat]


class ProjectDigest(_WireModel):
    digest: str
    hash: str


class ScanProjectRequest(_WireModel):
    path: str


class ProjectUploadResponse(_WireModel):
    summary: ProjectSummary
    graph: HierarchyGraph
    top_files_by_lines: list[LineStat]
    digest: ProjectDigest
    files: list[FileMeta]
    summary_message: str
