# -*- coding: utf-8 -*-
"""
backend/app/shared/auth_context.py

Identidad verificada del llamador.

Las operaciones de la tienda reciben el user_id de forma explícita; este
módulo convierte los claims del JWT en un `Identity` inmutable. No hay
estado de request implícito.

Tipo de user_id: str (claim `sub`)

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from fastapi import HTTPException, status

from app.modules.tienda.enums import UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    user_id: str
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": "unauthorized", "message": detail},
        headers={"WWW-Authenticate": "Bearer"},
    )


def identity_from_claims(claims: Mapping[str, Any]) -> Identity:
    """
    Construye la identidad a partir de los claims ya validados.

    Raises:
        HTTPException 401: sin `sub` o con un `role` desconocido
    """
    user_id = claims.get("sub") or claims.get("user_id")
    if not user_id:
        logger.warning("Auth context missing sub claim")
        raise _unauthorized("Missing subject in token")

    raw_role = claims.get("role") or UserRole.USER.value
    try:
        role = UserRole(str(raw_role).lower())
    except ValueError:
        logger.warning("Unknown role in token: %s", raw_role)
        raise _unauthorized("Invalid role in token")

    return Identity(user_id=str(user_id), role=role)


__all__ = ["Identity", "identity_from_claims"]

# Fin del archivo backend/app/shared/auth_context.py
