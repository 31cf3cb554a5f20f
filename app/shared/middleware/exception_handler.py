# -*- coding: utf-8 -*-
"""
backend/app/shared/middleware/exception_handler.py

Respuestas JSON estructuradas para errores.

- register_domain_exception_handler(): traduce una jerarquía de errores de
  dominio (con `.code` y `.message`) a HTTP mediante un resolvedor de status.
- JSONExceptionMiddleware: captura excepciones no manejadas y responde 500
  en JSON con request_id.

Cuerpo común: {"detail": {"error": <code>, "message": <texto>, "request_id": <id>}}

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.shared.utils.json_response import detail_response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADERS = ["x-request-id", "x-correlation-id"]


def get_request_id(request: Request) -> str:
    """request_id ya fijado por el middleware, el de los headers o uno nuevo."""
    existing = getattr(request.state, "request_id", None)
    if existing:
        return existing
    for header in REQUEST_ID_HEADERS:
        value = request.headers.get(header)
        if value:
            return value
    return uuid.uuid4().hex[:16]


def error_response(status_code: int, code: str, message: str, request_id: str) -> JSONResponse:
    return detail_response(
        status_code,
        {"error": code, "message": message, "request_id": request_id},
        request_id=request_id,
    )


def register_domain_exception_handler(
    app: FastAPI,
    exc_type: type[Exception],
    status_for: Callable[[Exception], int],
) -> None:
    async def _handler(request: Request, exc: Exception) -> JSONResponse:
        status_code = status_for(exc)
        code = getattr(exc, "code", "error")
        message = getattr(exc, "message", str(exc))
        log = logger.warning if status_code >= 500 else logger.info
        log(
            "domain_error status=%s code=%s method=%s path=%s message=%s",
            status_code, code, request.method, request.url.path, message,
        )
        return error_response(status_code, code, message, get_request_id(request))

    app.add_exception_handler(exc_type, _handler)


class JSONExceptionMiddleware(BaseHTTPMiddleware):
    """Convierte excepciones no manejadas en 500 JSON con request_id."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = get_request_id(request)
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "unhandled_exception request_id=%s method=%s path=%s error=%r",
                request_id, request.method, request.url.path, e,
            )
            return error_response(500, "internal_server_error", "Internal server error", request_id)


__all__ = [
    "JSONExceptionMiddleware",
    "get_request_id",
    "error_response",
    "register_domain_exception_handler",
]

# Fin del archivo backend/app/shared/middleware/exception_handler.py
