"""FastAPI application entrypoint for srcroot service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..models import ArtifactSpec
from ..modules import DEFAULT_FRAGMENT_NAME, UnmatchedPolicy
from ..orchestrator import ResolutionRun
from ..repo_scanner import resolve_repository
from ..report import decisions_payload
from ..selection import DEFAULT_TARGET_ROOT


class ArtifactModel(BaseModel):
    file_name: str
    package: str = ""


class ResolveRequest(BaseModel):
    paths: List[str] = Field(default_factory=list)
    fragments: Dict[str, str] = Field(default_factory=dict)
    existing_artifact_roots: List[str] = Field(default_factory=list)
    artifact: Optional[ArtifactModel] = None
    default_root: str = DEFAULT_TARGET_ROOT
    fragment_name: str = DEFAULT_FRAGMENT_NAME
    unmatched: UnmatchedPolicy = UnmatchedPolicy.ROOT


class ScanRequest(BaseModel):
    path: str


class DecisionModel(BaseModel):
    module: str
    root: str
    reason: str
    places_artifact: bool


class DiagnosticModel(BaseModel):
    code: str
    message: str
    source: str
    item: Optional[str] = None


class ResolveResponse(BaseModel):
    decisions: List[DecisionModel]
    detected_roots: Dict[str, List[str]]
    overrides: Dict[str, List[str]]
    diagnostics: List[DiagnosticModel]
    planned_artifacts: Optional[List[str]] = None


class HealthResponse(BaseModel):
    status: str


def build_run(payload: ResolveRequest) -> ResolutionRun:
    """Create and fill a fresh, non-strict run from a request body."""
    artifact = None
    if payload.artifact is not None:
        artifact = ArtifactSpec(
            file_name=payload.artifact.file_name, package=payload.artifact.package
        )
    run = ResolutionRun(
        fragment_name=payload.fragment_name,
        artifact=artifact,
        default_root=payload.default_root,
        unmatched=payload.unmatched,
        strict=False,
    )
    run.ingest_paths(payload.paths)
    for path, text in payload.fragments.items():
        run.ingest_fragment(path, text)
    for root in payload.existing_artifact_roots:
        run.mark_artifact_present(root)
    run.commit()
    return run


def create_app(
    repository_resolver: Callable[[str], ResolutionRun] = resolve_repository,
) -> FastAPI:
    """Create the FastAPI application exposing srcroot operations."""

    app = FastAPI(title="srcroot Service", version="1.0.0")

    async def get_repository_resolver() -> Callable[[str], ResolutionRun]:
        return repository_resolver

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/resolve", response_model=ResolveResponse)
    async def resolve(payload: ResolveRequest) -> ResolveResponse:
        run = build_run(payload)
        return ResolveResponse(**decisions_payload(run))

    @app.post("/scan", response_model=ResolveResponse)
    async def scan(
        payload: ScanRequest,
        resolver: Callable[[str], ResolutionRun] = Depends(get_repository_resolver),
    ) -> ResolveResponse:
        loop = asyncio.get_running_loop()
        run = await loop.run_in_executor(None, resolver, payload.path)
        return ResolveResponse(**decisions_payload(run))

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(
        _: Any, exc: NotADirectoryError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(
        _: Any, exc: RuntimeError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
