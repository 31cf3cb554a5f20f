# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/routes/dependencies.py

Dependencias FastAPI del módulo Tienda.

- get_identity: Bearer JWT → Identity(user_id, role). La identidad se pasa
  explícitamente a cada operación; no se guarda en request.state.
- require_admin: 403 si el rol no es admin.
- get_*_service: fábricas por request (se sobreescriben en tests vía
  app.dependency_overrides).
- status_for_error: traducción TiendaError → código HTTP.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from app.shared.auth_context import Identity, identity_from_claims
from app.shared.utils.jwt_utils import decode_token
from app.modules.tienda.adapters import PaymentGateway, get_payment_gateway
from app.modules.tienda.exceptions import (
    ConflictError,
    ForbiddenError,
    GatewayFailedError,
    InsufficientFundsError,
    NotFoundError,
    TiendaError,
    ValidationError,
)
from app.modules.tienda.services import NicknameService, OrderService, SupportService

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Identidad
# ---------------------------------------------------------------------------
async def get_identity(
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> Identity:
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "authentication_required", "message": "Authorization header is required"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "invalid_token_format", "message": "Authorization header must be 'Bearer <token>'"},
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = decode_token(token.strip())
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "invalid_token", "message": "Token is invalid or expired"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity_from_claims(claims)


async def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    if not identity.is_admin:
        logger.info("Admin route denied for user=%s", identity.user_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error": "forbidden", "message": "Administrator role required"},
        )
    return identity


# ---------------------------------------------------------------------------
# Servicios
# ---------------------------------------------------------------------------
def get_gateway() -> PaymentGateway:
    return get_payment_gateway()


def get_nickname_service() -> NicknameService:
    return NicknameService()


def get_support_service(
    nickname_service: NicknameService = Depends(get_nickname_service),
) -> SupportService:
    return SupportService(nickname_service=nickname_service)


def get_order_service(gateway: PaymentGateway = Depends(get_gateway)) -> OrderService:
    return OrderService(gateway=gateway)


# ---------------------------------------------------------------------------
# Errores
# ---------------------------------------------------------------------------
_STATUS_BY_ERROR: list[tuple[type[TiendaError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InsufficientFundsError, status.HTTP_402_PAYMENT_REQUIRED),
    (GatewayFailedError, status.HTTP_502_BAD_GATEWAY),
]


def status_for_error(exc: Exception) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


__all__ = [
    "get_identity",
    "require_admin",
    "get_gateway",
    "get_nickname_service",
    "get_support_service",
    "get_order_service",
    "status_for_error",
]

# Fin del archivo backend/app/modules/tienda/routes/dependencies.py
