"""Aplicación FastAPI del Sistema de Gestión de Estacionamiento."""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

from . import __version__
from .config import Settings, configure_logging
from .context import AppContext, get_context
from .db import ping
from .errors import register_exception_handlers
from .routes import auth_router, payment_router

logger = logging.getLogger(__name__)

SERVICE_NAME = "pms_service"

# --- Métricas Prometheus ---
REQUEST_COUNT = Counter(
    "pms_requests_total",
    "Total requests processed by the PMS backend",
    ["method", "endpoint", "status_code"]
)
REQUEST_LATENCY = Histogram(
    "pms_request_latency_seconds",
    "Request latency in seconds for the PMS backend",
    ["endpoint"]
)


def create_app(settings: Optional[Settings] = None, context: Optional[AppContext] = None) -> FastAPI:
    """
    Construye la aplicación. Si no se pasa 'context', se conecta a MongoDB
    durante el arranque (lifespan) y el arranque falla si la base no responde.
    """
    if settings is None:
        settings = context.settings if context is not None else Settings.from_env()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.ctx is None
        if owned:
            logger.info("Inicializando conexión a la base de datos...")
            app.state.ctx = AppContext.build(settings)
        logger.info(f"Backend API base URL: http://{settings.host}:{settings.port}/api")
        try:
            yield
        finally:
            if owned:
                app.state.ctx.close()
                app.state.ctx = None

    app = FastAPI(
        title="Parking Management System - Backend",
        description="Handles user signup, login, profile updates and simulated payments.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.ctx = context

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        start_time = time.time()
        endpoint = request.url.path
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as exc:
            logger.error(f"Unhandled exception during request processing: {exc}", exc_info=True)
            response = JSONResponse(status_code=500, content={"message": "Internal Server Error"})
        finally:
            latency = time.time() - start_time
            REQUEST_LATENCY.labels(endpoint=endpoint).observe(latency)
            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=status_code
            ).inc()

        return response

    # --- Configuración de CORS (cliente alojado aparte) ---
    # Por fuera del middleware de métricas: cubre también sus respuestas 500
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # --- Endpoints de Salud y Métricas ---
    @app.get("/metrics", tags=["Monitoring"])
    def metrics():
        """Exposes application metrics for Prometheus."""
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/health", tags=["Monitoring"])
    def health_check(ctx: AppContext = Depends(get_context)):
        """Health check: el servicio solo está sano si MongoDB responde."""
        if not ping(ctx.db):
            return JSONResponse(
                status_code=503,
                content={"status": "unavailable", "service": SERVICE_NAME, "database": "down"},
            )
        return {"status": "ok", "service": SERVICE_NAME, "database": "up"}

    app.include_router(auth_router)
    app.include_router(payment_router)
    return app


def run() -> None:
    """Punto de entrada de consola: arranca uvicorn con la configuración del entorno."""
    import uvicorn

    configure_logging()
    settings = Settings.from_env()
    logging.getLogger().setLevel(settings.log_level.upper())
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
