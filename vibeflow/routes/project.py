"""Project upload and scan routes."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from fastapi import APIRouter, File, HTTPException, UploadFile

from vibeflow.models.project import FileMeta, ProjectUploadResponse, ScanProjectRequest
from vibeflow.services.aggregator import build_project_summary_message, process_project
from vibeflow.services.digest import build_digest
from vibeflow.services.ingestion import FileHandle, collect_directory, ingest_files

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/project")


class UploadHandle:
    """Adapts a multipart upload to the ingestion FileHandle interface.

    Browsers send a directory picker entry's relative path as the filename.
    """

    def __init__(self, upload: UploadFile):
        self._upload = upload
        self._path = (upload.filename or "").replace("\\", "/").lstrip("/")
        size = upload.size
        if size is None:
            upload.file.seek(0, os.SEEK_END)
            size = upload.file.tell()
            upload.file.seek(0)
        self._size = size

    @property
    def name(self) -> str:
        return self._path.split("/")[-1]

    @property
    def relative_path(self) -> str:
        return self._path

    @property
    def size(self) -> int:
        return self._size

    async def read_text(self) -> str:
        data = await self._upload.read()
        return data.decode("utf-8", errors="replace")


async def _process(handles: list[FileHandle], source: str) -> ProjectUploadResponse:
    project_files = await ingest_files(handles)
    project = process_project(project_files)
    digest = build_digest(project)
    logger.info(
        f"Processed {source}: {project.summary.total_files} files, "
        f"{project.summary.total_lines} lines"
    )

    return ProjectUploadResponse(
        summary=project.summary,
        graph=project.graph,
        top_files_by_lines=project.top_files_by_lines,
        digest=digest,
        files=[
            FileMeta(name=f.name, path=f.path, extension=f.extension, lines=f.lines)
            for f in project.files
        ],
        summary_message=build_project_summary_message(project),
    )


@router.post("/upload", response_model=ProjectUploadResponse)
async def upload_project(files: list[UploadFile] = File(...)) -> ProjectUploadResponse:
    """Ingest an uploaded folder and return its statistics, tree graph and digest."""
    handles = [UploadHandle(f) for f in files if f.filename]
    if not handles:
        raise HTTPException(status_code=400, detail="No files uploaded.")
    return await _process(handles, "upload")


@router.post("/scan", response_model=ProjectUploadResponse)
async def scan_project(req: ScanProjectRequest) -> ProjectUploadResponse:
    """Ingest a folder on the server's own filesystem."""
    project_path = Path(req.path)
    if not project_path.exists():
        raise HTTPException(status_code=404, detail=f"Project path does not exist: {req.path}")
    if not project_path.is_dir():
        raise HTTPException(status_code=400, detail=f"Path is not a directory: {req.path}")

    return await _process(collect_directory(project_path), req.path)
