"""FastAPI application entrypoint for stubgen service mode."""

from __future__ import annotations

from typing import Any, Callable, List, Optional

from pydantic import BaseModel

try:  # pragma: no cover - optional dependency
    from fastapi import Depends, FastAPI
    from fastapi.responses import JSONResponse

    _FASTAPI_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - service mode optional
    FastAPI = None  # type: ignore[assignment]
    Depends = None  # type: ignore[assignment]
    JSONResponse = None  # type: ignore[assignment]
    _FASTAPI_AVAILABLE = False

from ..config import ConfigError
from ..planner import Planner, build_selection_options
from ..schema import SourceFilePayload, to_parsed_file


class PlanRequest(SourceFilePayload):
    only: Optional[str] = None
    exclude: Optional[str] = None
    exported: bool = False


class FieldResponse(BaseModel):
    name: str
    type: str
    index: int
    short_name: str
    is_basic_type: bool
    is_named: bool
    declaration: str


class CandidateResponse(BaseModel):
    name: str
    test_name: str
    receiver: Optional[FieldResponse] = None
    parameters: List[FieldResponse] = []
    results: List[FieldResponse] = []
    returns_error: bool = False
    returns_multiple: bool = False
    only_returns_one_value: bool = False
    only_returns_error: bool = False


class PlanResponse(BaseModel):
    source_path: str
    test_path: str
    package: str
    uses_reflection: bool
    candidates: List[CandidateResponse] = []


class HealthResponse(BaseModel):
    status: str


def create_app(planner_factory: Callable[[], Planner] = Planner) -> FastAPI:
    """Create the FastAPI application exposing test planning."""

    if not _FASTAPI_AVAILABLE:
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install stubgen[service]`."
        )

    app = FastAPI(title="Stubgen Service", version="0.1.0")

    async def get_planner() -> Planner:
        return planner_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/plan", response_model=PlanResponse)
    async def plan(
        payload: PlanRequest,
        planner: Planner = Depends(get_planner),
    ) -> PlanResponse:
        options = build_selection_options(
            only=payload.only,
            exclude=payload.exclude,
            exported=payload.exported,
        )
        result = planner.plan(to_parsed_file(payload), options)
        return PlanResponse.model_validate(result.to_dict())

    @app.exception_handler(ConfigError)
    async def config_error_handler(
        _: Any, exc: ConfigError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    if not _FASTAPI_AVAILABLE:
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install stubgen[service]`."
        )

    try:
        import uvicorn
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install uvicorn`."
        ) from exc

    app = create_app()
    uvicorn.run(app, host=host, port=port)
