# src/api/main.py
from contextlib import asynccontextmanager
from typing import Optional

import logging
import time

import httpx
from fastapi import Depends, FastAPI, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.requests import Request
from starlette.responses import Response as StarletteResponse

from src.config.settings import Settings, load_settings
from src.monitoring.logs import configure_logging
from src.monitoring.metrics import REQUESTS, LATENCY
from src.relay.ats_client import AtsBackend, StubAtsBackend, build_backend
from src.relay.orchestrator import submit_application
from .auth import UNAUTHORIZED_MESSAGE, AuthError, require_relay_token
from .schemas import (
    ApplyResponse,
    ErrorResponse,
    JobBoardPayload,
    UnauthorizedResponse,
)

logger = logging.getLogger("relay")


# =========================
# App factory (lifespan)
# =========================
def create_app(settings: Optional[Settings] = None, backend: Optional[AtsBackend] = None) -> FastAPI:
    """
    Monta a aplicação com configuração e backend explícitos.
      - backend injetado (testes): usado como está
      - modo stub: criado já aqui, sem depender do lifespan
      - produção: httpx.AsyncClient aberto/fechado no lifespan
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Inicialização
        configure_logging(settings.log_level)
        client = None
        if app.state.backend is None:
            client = httpx.AsyncClient()
            app.state.backend = build_backend(settings, client)
        logger.info(
            "relay starting on port %s (env=%s, ats=%s)",
            settings.port,
            settings.environment,
            _ats_mode(app.state.backend),
        )
        yield
        # Finalização
        if client is not None:
            await client.aclose()

    app = FastAPI(title="Job Board ATS Relay", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    if backend is None and not settings.is_production:
        backend = StubAtsBackend()
    app.state.backend = backend

    _register(app)
    return app


def _ats_mode(backend: Optional[AtsBackend]) -> str:
    if backend is None:
        return "unavailable"
    return "stub" if isinstance(backend, StubAtsBackend) else "http"


def _register(app: FastAPI):
    # =========================
    # Middleware de métricas
    # =========================
    @app.middleware("http")
    async def metrics_and_access_log(request: Request, call_next):
        start = time.perf_counter()
        path = request.url.path
        method = request.method
        status_code = 500
        try:
            response: StarletteResponse = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            dur = time.perf_counter() - start
            try:
                LATENCY.labels(endpoint=path).observe(dur)
                REQUESTS.labels(endpoint=path, method=method, status=str(status_code)).inc()
            except Exception:
                # nunca quebre a requisição por falha de métrica
                pass

    @app.exception_handler(AuthError)
    async def unauthorized(request: Request, exc: AuthError):
        return JSONResponse(status_code=401, content={"message": UNAUTHORIZED_MESSAGE})

    # =========================
    # Endpoints
    # =========================
    @app.get("/health")
    def health(request: Request):
        return {
            "status": "ok",
            "environment": request.app.state.settings.environment,
            "ats_mode": _ats_mode(request.app.state.backend),
        }

    @app.get("/metrics")
    def metrics():
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.post(
        "/apply",
        response_model=ApplyResponse,
        responses={401: {"model": UnauthorizedResponse}, 500: {"model": ErrorResponse}},
        dependencies=[Depends(require_relay_token)],
        openapi_extra={
            "requestBody": {
                "required": True,
                "content": {"application/json": {"schema": JobBoardPayload.model_json_schema()}},
            }
        },
    )
    async def apply(request: Request):
        # corpo lido só depois do auth: 401 independe do conteúdo;
        # corpo inválido vira 500 no orquestrador
        result = await submit_application(await request.body(), request.app.state.backend)
        status, body = result.to_response()
        return JSONResponse(status_code=status, content=body)


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = load_settings()
    uvicorn.run("src.api.main:app", host=_settings.host, port=_settings.port, reload=False)
