# -*- coding: utf-8 -*-
"""
backend/app/shared/utils/json_response.py

Respuestas JSON de la API de la tienda.

- UTF8JSONResponse: default_response_class de la app (charset explícito;
  nicknames y mensajes llevan acentos).
- detail_response(): envuelve cualquier error en {"detail": ...}, el mismo
  sobre que usan HTTPException y los errores de dominio, y propaga el
  X-Request-ID cuando se conoce.

Autor: Arena
Fecha: 2026-10-19
"""

from typing import Any, Mapping, Optional

from fastapi.responses import JSONResponse


class UTF8JSONResponse(JSONResponse):
    media_type = "application/json; charset=utf-8"


def detail_response(
    status_code: int,
    detail: Any,
    *,
    request_id: Optional[str] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> UTF8JSONResponse:
    merged = dict(headers or {})
    if request_id:
        merged["X-Request-ID"] = request_id
    return UTF8JSONResponse(
        status_code=status_code,
        content={"detail": detail},
        headers=merged or None,
    )


__all__ = ["UTF8JSONResponse", "detail_response"]

# Fin del archivo backend/app/shared/utils/json_response.py
