# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/metrics.py

Métricas Prometheus del motor de órdenes. Se registran en el registry por
defecto, así aparecen en el endpoint /metrics de app.observability.prom.

Autor: Arena
Fecha: 2026-10-19
"""

from prometheus_client import Counter

ORDERS_CREATED_TOTAL = Counter(
    "tienda_orders_created_total",
    "Órdenes creadas por medio de pago y tipo de artículo",
    ["method", "item_type"],
)
ORDERS_COMPLETED_TOTAL = Counter(
    "tienda_orders_completed_total",
    "Órdenes completadas por medio de pago",
    ["method"],
)
ORDERS_FAILED_TOTAL = Counter(
    "tienda_orders_failed_total",
    "Órdenes en estado failed por medio de pago y código",
    ["method", "code"],
)
ORDERS_CANCELLED_TOTAL = Counter(
    "tienda_orders_cancelled_total",
    "Órdenes canceladas por el usuario",
    ["method"],
)
GATEWAY_RETRIES_TOTAL = Counter(
    "tienda_gateway_retries_total",
    "Reintentos hacia el proveedor de pagos por motivo",
    ["gateway", "reason"],
)
FULFILLMENT_FAILURES_TOTAL = Counter(
    "tienda_fulfillment_failures_total",
    "Entregas fallidas tras un pago confirmado",
    ["item_type", "code"],
)
DUPLICATE_DELIVERIES_TOTAL = Counter(
    "tienda_duplicate_deliveries_total",
    "Capturas repetidas (cliente o webhook) sobre órdenes ya completadas",
    ["source"],
)
WEBHOOKS_RECEIVED_TOTAL = Counter(
    "tienda_webhooks_received_total",
    "Webhooks del proveedor por tipo de evento y resultado",
    ["event_type", "outcome"],
)


def gateway_retry_hook(gateway: str):
    """Callback para retry_with_backoff que cuenta cada reintento."""

    def _hook(attempt: int, reason: str) -> None:
        GATEWAY_RETRIES_TOTAL.labels(gateway, reason).inc()

    return _hook


__all__ = [
    "ORDERS_CREATED_TOTAL",
    "ORDERS_COMPLETED_TOTAL",
    "ORDERS_FAILED_TOTAL",
    "ORDERS_CANCELLED_TOTAL",
    "GATEWAY_RETRIES_TOTAL",
    "FULFILLMENT_FAILURES_TOTAL",
    "DUPLICATE_DELIVERIES_TOTAL",
    "WEBHOOKS_RECEIVED_TOTAL",
    "gateway_retry_hook",
]

# Fin del archivo backend/app/modules/tienda/metrics.py
