# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/enums/user_role_enum.py

Rol de la cuenta de usuario (solo se distingue admin para la cola de soporte).

Autor: Arena
Fecha: 2026-10-19
"""

from enum import StrEnum
from sqlalchemy.dialects.postgresql import ENUM as PG_ENUM

from app.shared.database.base import as_pg_enum as _as_pg_enum


class UserRole(StrEnum):
    USER = "user"
    ADMIN = "admin"

    __pg_enum_name__ = "user_role_enum"

    @classmethod
    def as_pg_enum(
        cls,
        name: str = "user_role_enum",
        schema: str | None = "public",
    ) -> PG_ENUM:
        return _as_pg_enum(cls, name=name, schema=schema)


__all__ = ["UserRole"]

# Fin del archivo backend/app/modules/tienda/enums/user_role_enum.py
