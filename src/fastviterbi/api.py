"""HTTP API for fastviterbi.

Decoding errors are mapped to 422 by one exception handler, so endpoints only
describe the happy path.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fastviterbi import __version__
from fastviterbi.config import AppConfig, load_config
from fastviterbi.core import run_decode
from fastviterbi.errors import FastViterbiError
from fastviterbi.models import DecodeRequest, DecodeResponse, HealthResponse, LimitsResponse


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the service for `config`, loading the active profile when omitted."""
    settings = config or load_config()
    settings.configure_logging(root=False)

    app = FastAPI(
        title="fastviterbi",
        version=__version__,
        description="Layered Viterbi decoding for map matching.",
    )
    app.state.config = settings

    @app.exception_handler(FastViterbiError)
    async def decode_error(_: Request, exc: FastViterbiError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    @app.get("/health", response_model=HealthResponse, tags=["system"])
    def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__, env=settings.env)

    @app.get("/v1/limits", response_model=LimitsResponse, tags=["system"])
    def limits() -> LimitsResponse:
        return LimitsResponse(
            max_layers=settings.limits.max_layers,
            max_candidates=settings.limits.max_candidates,
        )

    @app.post("/v1/decode", response_model=DecodeResponse, tags=["decoding"])
    def decode(payload: DecodeRequest) -> DecodeResponse:
        return run_decode(payload, limits=settings.limits)

    return app


app = create_app()
