"""FastAPI application entrypoint for docctx service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..analysis import ProjectAnalyzer
from ..config import ConfigError
from ..insights import assess_readiness, build_recommendations
from ..report import analysis_to_dict, selection_to_dict

AnalyzerFactory = Callable[[str], ProjectAnalyzer]


class AnalyzeRequest(BaseModel):
    path: str
    strategy: Optional[str] = None
    include_content: bool = False


class SelectRequest(BaseModel):
    path: str
    task_type: Optional[str] = None
    strategy: Optional[str] = None
    max_tokens: Optional[int] = Field(default=None, gt=0)
    include_content: bool = False


class ReadinessRequest(BaseModel):
    path: str
    strategy: Optional[str] = None


class ReadinessResponse(BaseModel):
    score: int
    strengths: List[str]
    weaknesses: List[str]
    recommendations: List[str]


class HealthResponse(BaseModel):
    status: str


def _default_analyzer(path: str) -> ProjectAnalyzer:
    return ProjectAnalyzer(path)


async def _run_blocking(func: Callable[[], Any]) -> Any:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def create_app(analyzer_factory: AnalyzerFactory = _default_analyzer) -> FastAPI:
    """Create the FastAPI application exposing docctx operations."""

    app = FastAPI(title="DocCtx Service", version="0.1.0")

    async def get_factory() -> AnalyzerFactory:
        return analyzer_factory

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze")
    async def analyze(
        payload: AnalyzeRequest,
        factory: AnalyzerFactory = Depends(get_factory),
    ) -> Dict[str, Any]:
        def _run() -> Dict[str, Any]:
            # A fresh analyzer per request keeps caches out of shared state.
            analysis = factory(payload.path).analyze(payload.strategy)
            return analysis_to_dict(analysis, include_content=payload.include_content)

        return await _run_blocking(_run)

    @app.post("/select")
    async def select(
        payload: SelectRequest,
        factory: AnalyzerFactory = Depends(get_factory),
    ) -> Dict[str, Any]:
        def _run() -> Dict[str, Any]:
            analyzer = factory(payload.path)
            analysis = analyzer.analyze(payload.strategy)
            selected = analyzer.select_context(analysis, payload.task_type, max_tokens=payload.max_tokens)
            result = selection_to_dict(selected, include_content=payload.include_content)
            result["recommendations"] = vars(build_recommendations(analysis, selected))
            return result

        return await _run_blocking(_run)

    @app.post("/readiness", response_model=ReadinessResponse)
    async def readiness(
        payload: ReadinessRequest,
        factory: AnalyzerFactory = Depends(get_factory),
    ) -> ReadinessResponse:
        def _run() -> ReadinessResponse:
            report = assess_readiness(factory(payload.path).analyze(payload.strategy))
            return ReadinessResponse(**vars(report))

        return await _run_blocking(_run)

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Any, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:
    """Serve the default application with uvicorn until interrupted."""
    app = create_app()
    uvicorn.run(app, host=host, port=port)
