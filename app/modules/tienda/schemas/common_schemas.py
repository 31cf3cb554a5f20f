# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/schemas/common_schemas.py

Esquemas comunes (metadatos de paginación) para el módulo Tienda.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

from math import ceil

from pydantic import BaseModel, Field


class PageMeta(BaseModel):
    """
    Metadatos de paginación para respuestas con listas.
    """

    total: int = Field(ge=0, description="Número total de registros.")
    limit: int = Field(ge=1, description="Límite de registros por página.")
    offset: int = Field(ge=0, description="Offset actual de la consulta.")
    page: int = Field(ge=1, description="Página actual (1-based).")
    pages: int = Field(ge=0, description="Número total de páginas.")

    @classmethod
    def build(cls, *, total: int, limit: int, offset: int) -> "PageMeta":
        return cls(
            total=total,
            limit=limit,
            offset=offset,
            page=offset // limit + 1,
            pages=ceil(total / limit) if total else 0,
        )


__all__ = ["PageMeta"]

# Fin del archivo backend/app/modules/tienda/schemas/common_schemas.py
