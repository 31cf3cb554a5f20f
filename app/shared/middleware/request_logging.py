# -*- coding: utf-8 -*-
"""
backend/app/shared/middleware/request_logging.py

Una línea de log por request de la API de la tienda.

- Fija request.state.request_id (lo reutilizan los manejadores de error)
  y lo devuelve en X-Request-ID.
- Nivel según status: INFO (<400), WARNING (4xx), ERROR (5xx).
- /metrics y /health no se registran.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .exception_handler import get_request_id

logger = logging.getLogger(__name__)

QUIET_PREFIXES = ("/metrics", "/health", "/favicon.ico")


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, quiet_prefixes: Iterable[str] = QUIET_PREFIXES):
        super().__init__(app)
        self.quiet_prefixes = tuple(quiet_prefixes)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = get_request_id(request)
        request.state.request_id = request_id

        path = request.url.path
        if path.startswith(self.quiet_prefixes):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        response.headers.setdefault("X-Request-ID", request_id)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.log(
            _level_for(response.status_code),
            "http %s %s -> %d (%.1f ms) request_id=%s",
            request.method,
            path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response


__all__ = ["RequestLoggingMiddleware", "QUIET_PREFIXES"]

# Fin del archivo backend/app/shared/middleware/request_logging.py
