# -*- coding: utf-8 -*-
"""
backend/app/observability/prom.py

Prometheus para el backend de la tienda.

- TiendaHTTPMetricsMiddleware: conteo y latencia por plantilla de ruta
  (/tienda/orden/{order_id}, no el id concreto) y clase de status.
- /metrics: exposición pull del registry por defecto, o agregada entre
  workers cuando PROMETHEUS_MULTIPROC_DIR está definido.

Los contadores de negocio (órdenes, webhooks, reintentos hacia PayPal)
viven en app.modules.tienda.metrics.

Autor: Arena
Fecha: 2026-10-19
"""
from __future__ import annotations

import os
from time import perf_counter

from fastapi import FastAPI
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    multiprocess,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

HTTP_REQUESTS_TOTAL = Counter(
    "tienda_http_requests_total",
    "Requests HTTP de la API por ruta y clase de status",
    ["method", "route", "status_class"],
)
HTTP_REQUEST_SECONDS = Histogram(
    "tienda_http_request_seconds",
    "Latencia de requests HTTP (s)",
    ["method", "route"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 15.0),
)

UNINSTRUMENTED = ("/metrics",)


def route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class TiendaHTTPMetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if request.url.path.startswith(UNINSTRUMENTED):
            return await call_next(request)

        started = perf_counter()
        response = await call_next(request)
        route = route_template(request)
        HTTP_REQUEST_SECONDS.labels(request.method, route).observe(perf_counter() - started)
        HTTP_REQUESTS_TOTAL.labels(request.method, route, f"{response.status_code // 100}xx").inc()
        return response


def _exposition() -> bytes:
    if os.environ.get("PROMETHEUS_MULTIPROC_DIR"):
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        return generate_latest(registry)
    return generate_latest()


def setup_observability(app: FastAPI, *, http_metrics: bool = True, path: str = "/metrics") -> None:
    """Registra el middleware HTTP (opcional) y el endpoint de exposición."""
    if http_metrics:
        app.add_middleware(TiendaHTTPMetricsMiddleware)

    @app.get(path, include_in_schema=False)
    def metrics() -> Response:
        return Response(content=_exposition(), media_type=CONTENT_TYPE_LATEST)


__all__ = ["TiendaHTTPMetricsMiddleware", "route_template", "setup_observability"]

# Fin del archivo backend/app/observability/prom.py
