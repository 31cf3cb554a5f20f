# -*- coding: utf-8 -*-
"""
backend/app/main.py

Punto de entrada principal del backend de la tienda.

- .env cargado antes de leer settings (override solo fuera de producción)
- Logging centralizado (plain / json con python-json-logger)
- Observabilidad Prometheus (/metrics)
- Errores de dominio TiendaError → JSON {"detail": {"error", "message", "request_id"}}
- Ciclo de vida: create_all opcional (DB_AUTO_CREATE) y cierre de la pasarela

Autor: Arena
Fecha: 2026-10-19
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_PYTHON_ENV = os.getenv("PYTHON_ENV", "development").strip().strip('"').strip("'").lower()
load_dotenv(dotenv_path=_ENV_PATH, override=_PYTHON_ENV != "production")

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from app.shared.config import get_settings
from app.shared.config.logging_config import setup_logging
from app.shared.database.database import engine, init_models
from app.shared.middleware import (
    JSONExceptionMiddleware,
    RequestLoggingMiddleware,
    register_domain_exception_handler,
)
from app.shared.utils.json_response import UTF8JSONResponse, detail_response
from app.observability.prom import setup_observability
from app.modules.tienda.adapters import close_payment_gateway
from app.modules.tienda.exceptions import TiendaError
from app.modules.tienda.routes.dependencies import status_for_error

settings = get_settings()
setup_logging(level=settings.log_level, fmt=settings.log_format)
logger = logging.getLogger(__name__)

logger.info("[dotenv] %s (PYTHON_ENV=%s)", _ENV_PATH, settings.python_env)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ────────── STARTUP ──────────
    if settings.db_auto_create:
        await init_models()
    logger.info("🟢 %s iniciado (env=%s)", settings.app_name, settings.python_env)
    try:
        yield
    finally:
        # ────────── SHUTDOWN ──────────
        await close_payment_gateway()
        await engine.dispose()
        logger.info("🔴 %s apagado", settings.app_name)


openapi_tags = [
    {"name": "tienda:orders", "description": "Órdenes, pagos PayPal y pagos con saldo"},
    {"name": "tienda:nickname", "description": "Disponibilidad de nicknames"},
    {"name": "tienda:support", "description": "Cola de soporte para recuperación de nicknames"},
    {"name": "tienda:webhooks", "description": "Notificaciones del proveedor de pagos"},
]

app = FastAPI(
    title=f"{settings.app_name} API",
    version=settings.app_version,
    lifespan=lifespan,
    openapi_tags=openapi_tags,
    default_response_class=UTF8JSONResponse,
)


def _configure_cors(app_instance: FastAPI) -> None:
    origins = settings.get_cors_origins()
    if settings.is_prod and origins == ["*"]:
        logger.error("CORS wildcard rechazado en producción; configure CORS_ORIGINS")
        return

    wildcard = origins == ["*"]
    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=not wildcard,
        allow_methods=["*"] if wildcard else ["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        max_age=600,
    )
    logger.info("CORS habilitado para %s", origins)


# El orden real de ejecución de middlewares es inverso al registro:
# CORS se registra al final para ejecutarse primero.
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(JSONExceptionMiddleware)
setup_observability(app, http_metrics=settings.http_metrics_enabled)
_configure_cors(app)

register_domain_exception_handler(app, TiendaError, status_for_error)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return detail_response(exc.status_code, exc.detail, headers=getattr(exc, "headers", None))


from app.routes import router as main_router

app.include_router(main_router)


@app.get("/")
async def root():
    return {"service": settings.app_name, "status": "active"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.app_host, port=settings.app_port, reload=settings.is_dev)

# Fin del archivo backend/app/main.py
