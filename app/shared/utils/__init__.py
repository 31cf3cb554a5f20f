# -*- coding: utf-8 -*-
"""
backend/app/shared/utils/__init__.py

Exportación de utilidades comunes.

Autor: Arena
Fecha: 2026-10-19
"""

from .base_models import UTF8SafeModel
from .json_response import UTF8JSONResponse, detail_response
from .jwt_utils import create_access_token, decode_token

__all__ = [
    "UTF8SafeModel",
    "UTF8JSONResponse",
    "detail_response",
    "create_access_token",
    "decode_token",
]

# Fin del archivo backend/app/shared/utils/__init__.py
