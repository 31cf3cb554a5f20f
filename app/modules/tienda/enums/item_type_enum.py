# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/enums/item_type_enum.py

Tipo de artículo del catálogo de la tienda.

Autor: Arena
Fecha: 2026-10-19
"""

from enum import StrEnum
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM

from app.shared.database.base import as_pg_enum as _as_pg_enum


class ItemType(StrEnum):
    CREDITS = "credits"
    MEMBERSHIP = "membership"
    SERVICE = "service"

    __pg_enum_name__ = "store_item_type_enum"

    @classmethod
    def as_pg_enum(
        cls,
        name: str = "store_item_type_enum",
        schema: str | None = "public",
    ) -> PG_ENUM:
        return _as_pg_enum(cls, name=name, schema=schema)


__all__ = ["ItemType"]

# Fin del archivo backend/app/modules/tienda/enums/item_type_enum.py
