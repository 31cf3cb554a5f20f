# -*- coding: utf-8 -*-
"""
backend/app/routes/health_routes.py

GET /health de la tienda: base de datos y pasarela de pago configurada.

Autor: Arena
Fecha: 2026-10-19
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from app.shared.config import get_settings, get_tienda_settings
from app.shared.database.database import check_database_health

router = APIRouter()


def _payments_summary() -> dict:
    tienda = get_tienda_settings()
    return {
        "gateway": "stub" if tienda.use_payment_stubs else "paypal",
        "mode": tienda.paypal_mode,
        "webhook_signatures": not tienda.allow_insecure_webhooks,
        "currency": tienda.default_currency,
    }


@router.get("/health", summary="Estado del backend de la tienda")
async def health_check() -> dict:
    settings = get_settings()
    db_ok = await check_database_health(timeout_s=2.0)

    return {
        "status": "ok" if db_ok else "degraded",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.python_env,
        "checked_at": datetime.now(timezone.utc).isoformat(),
        "database": {"reachable": db_ok},
        "payments": _payments_summary(),
    }

# Fin del archivo backend/app/routes/health_routes.py
