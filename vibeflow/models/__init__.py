"""Pydantic data models for the VibeFlow API."""

from vibeflow.models.jury import (
    AnalyzeRequest,
    AnalyzeResponse,
    Answer,
    BeforeAfter,
    CodeMetrics,
    EvaluateRequest,
    EvaluateResponse,
    GreyArea,
    JuryStage,
    ReliabilityCounts,
)
from vibeflow.models.project import (
    ExtensionStat,
    FileMeta,
    GraphEdge,
    GraphNode,
    HierarchyGraph,
    LineStat,
    ProcessedProject,
    ProjectDigest,
    ProjectFile,
    ProjectSummary,
    ProjectUploadResponse,
    ScanProjectRequest,
)
from vibeflow.models.reasoning import ChatMessage, ChatRequest, ChatResponse, ProjectOverview

__all__ = [
    "AnalyzeRequest",
    "AnalyzeResponse",
    "Answer",
    "BeforeAfter",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "CodeMetrics",
    "EvaluateRequest",
    "EvaluateResponse",
    "ExtensionStat",
    "FileMeta",
    "GraphEdge",
    "GraphNode",
    "GreyArea",
    "HierarchyGraph",
    "JuryStage",
    "LineStat",
    "ProcessedProject",
    "ProjectDigest",
    "ProjectFile",
    "ProjectOverview",
    "ProjectSummary",
    "ProjectUploadResponse",
    "ReliabilityCounts",
    "ScanProjectRequest",
]
