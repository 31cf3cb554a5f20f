# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/routes/__init__.py

Ensamblador de rutas del módulo Tienda.

Incluye:
- /tienda/orden*, /tienda/historial
- /tienda/verificar-nickname/{nickname}
- /tienda/soporte/*, /tienda/admin/soporte*
- /tienda/webhook/paypal

Autor: Arena
Fecha: 2026-10-19
"""

from fastapi import APIRouter

from .orders import router as orders_router
from .nickname import router as nickname_router
from .support import router as support_router
from .webhooks_paypal import router as webhooks_paypal_router

router = APIRouter()

# Prefijo común /tienda para todas las rutas del módulo
router.include_router(orders_router, prefix="/tienda")
router.include_router(nickname_router, prefix="/tienda")
router.include_router(support_router, prefix="/tienda")
router.include_router(webhooks_paypal_router, prefix="/tienda")

__all__ = ["router"]

# Fin del archivo backend/app/modules/tienda/routes/__init__.py
