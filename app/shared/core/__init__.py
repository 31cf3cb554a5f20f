# -*- coding: utf-8 -*-
"""
backend/app/shared/core/__init__.py

Utilidades compartidas de infraestructura (reintentos HTTP).

Autor: Arena
Fecha: 2026-10-19
"""

from .http_retry_utils import DEFAULT_RETRY_STATUS, retry_with_backoff

__all__ = [
    "retry_with_backoff",
    "DEFAULT_RETRY_STATUS",
]

# Fin del archivo backend/app/shared/core/__init__.py
