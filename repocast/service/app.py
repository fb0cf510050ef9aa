"""FastAPI application entrypoint for repocast service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import RepocastConfig
from ..errors import (
    AnalysisServiceError,
    IndexingFailed,
    IndexingTimeout,
    InsufficientCitations,
    InvalidRepositoryUrl,
    NarrativeError,
    QueryFailed,
    ValidationFailed,
)
from ..orchestrator import EpisodeOutcome, Orchestrator


class GenerateRequest(BaseModel):
    repo_url: str
    max_wait: Optional[float] = None
    include_script: bool = False


class CitationModel(BaseModel):
    filepath: str
    line_start: Optional[int] = None
    line_end: Optional[int] = None
    label: Optional[str] = None
    note: Optional[str] = None


class GenerateResponse(BaseModel):
    success: bool
    data: Dict[str, Any]


class HealthResponse(BaseModel):
    status: str


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] | None = None,
    *,
    config: RepocastConfig | None = None,
) -> FastAPI:
    """Create the FastAPI application exposing episode generation."""

    factory = orchestrator_factory or (lambda: Orchestrator(config))
    app = FastAPI(title="Repocast Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # Lazy-instantiate per request so requests never share state.
        return factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(
        payload: GenerateRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> GenerateResponse:
        def _run() -> EpisodeOutcome:
            return orchestrator.run(
                payload.repo_url,
                max_wait=payload.max_wait,
                include_script=payload.include_script,
            )

        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(None, _run)
        data = outcome.to_dict()
        data["citations"] = [
            CitationModel(**citation).model_dump(exclude_none=True)
            for citation in data["citations"]
        ]
        return GenerateResponse(success=True, data=data)

    @app.exception_handler(InvalidRepositoryUrl)
    async def invalid_url_handler(_: Any, exc: InvalidRepositoryUrl) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": f"{exc}. Format: https://github.com/OWNER/REPO"},
        )

    @app.exception_handler(ValidationFailed)
    async def validation_handler(_: Any, exc: ValidationFailed) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"error": "Episode validation failed", "details": list(exc.errors)},
        )

    @app.exception_handler(InsufficientCitations)
    async def citations_handler(_: Any, exc: InsufficientCitations) -> JSONResponse:
        return JSONResponse(
            status_code=422, content={"error": str(exc), "citation_count": exc.found}
        )

    @app.exception_handler(IndexingTimeout)
    async def timeout_handler(_: Any, exc: IndexingTimeout) -> JSONResponse:
        return JSONResponse(status_code=504, content={"error": str(exc)})

    async def upstream_handler(_: Any, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=502, content={"error": str(exc)})

    for error_type in (IndexingFailed, QueryFailed, AnalysisServiceError, NarrativeError):
        app.add_exception_handler(error_type, upstream_handler)

    return app


def run_service(
    host: str = "0.0.0.0", port: int = 8000, *, config: RepocastConfig | None = None
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(config=config)
    uvicorn.run(app, host=host, port=port)
