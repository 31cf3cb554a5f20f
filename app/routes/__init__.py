# -*- coding: utf-8 -*-
"""
backend/app/routes/__init__.py

Ensamblador principal de ruteadores de la API.

- /health (sin prefijo)
- /tienda/* (módulo Tienda)

Autor: Arena
Fecha: 2026-10-19
"""

from fastapi import APIRouter

from .health_routes import router as health_router
from app.modules.tienda.routes import router as tienda_router

router = APIRouter()

router.include_router(health_router)
router.include_router(tienda_router)

__all__ = ["router"]

# Fin del archivo backend/app/routes/__init__.py
