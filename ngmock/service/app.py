"""FastAPI application entrypoint for ngmock service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import ConfigError, RunOptions
from ..orchestrator import Orchestrator, RunResult


class GenerateRequest(BaseModel):
    paths: List[str] = Field(default_factory=list)
    app_dir: Optional[str] = None
    src_dir: Optional[str] = None
    force: bool = False
    skip_aggregators: bool = False
    refresh_aggregators: bool = False
    exclude_paths: List[str] = Field(default_factory=list)


class DiagnosticModel(BaseModel):
    severity: str
    code: str
    message: str
    path: Optional[str] = None


class GenerateResponse(BaseModel):
    summary: Dict[str, Dict[str, int]]
    aggregators: List[str]
    diagnostics: List[DiagnosticModel]


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing mock generation."""

    app = FastAPI(title="ngmock Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # One orchestrator per request so runs never share a collection.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(
        payload: GenerateRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> GenerateResponse:
        options = RunOptions.from_sources(
            app_dir=payload.app_dir,
            src_dir=payload.src_dir,
            force=payload.force,
            skip_aggregators=payload.skip_aggregators,
            refresh_aggregators=payload.refresh_aggregators,
            exclude_paths=payload.exclude_paths,
        )

        def _run() -> RunResult:
            return orchestrator.run(payload.paths, options)

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run)
        return GenerateResponse(
            summary=result.summary.as_dict(),
            aggregators=[str(path) for path in result.aggregator_paths],
            diagnostics=[
                DiagnosticModel(**record.as_dict()) for record in result.diagnostics.records
            ],
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(
        _: Any, exc: ConfigError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
