# -*- coding: utf-8 -*-
"""
backend/app/shared/utils/jwt_utils.py

JWT helpers (python-jose):
- create_access_token(data, expires_delta?)
- decode_token(token)

La emisión de sesiones pertenece al servicio de autenticación; aquí solo se
firma (tests, herramientas) y se valida el Bearer que llega a la tienda.
Secreto, algoritmo y expiración se leen de settings en cada llamada.

Autor: Arena
Actualizado: 2026-10-19
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt, ExpiredSignatureError
import logging
import uuid

from app.shared.config import settings

logger = logging.getLogger(__name__)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Crea un JWT firmado con expiración (`sub` = user_id, `role` opcional).
    """
    to_encode = data.copy()

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    iat = _now_utc()
    to_encode.update({
        "exp": iat + expires_delta,
        "iat": iat,
        "jti": str(uuid.uuid4()),
        "token_type": "access",
    })

    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decodifica y valida un JWT. Devuelve None si es inválido o expiró.
    """
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as e:
        logger.warning("Token expirado: %s", e)
        return None
    except JWTError as e:
        logger.warning("Token inválido: %s", e)
        return None

# Fin del archivo backend/app/shared/utils/jwt_utils.py
