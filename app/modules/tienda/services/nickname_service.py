# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/services/nickname_service.py

Reserva de nicknames.

- verify: consulta consultiva (formato + disponibilidad); no reserva nada.
- claim: UPDATE dentro de un SAVEPOINT; el UNIQUE de nickname_key decide
  las carreras y la violación se reporta como conflicto (resultado
  esperado, no error).
- reclaim: usado al aprobar una solicitud de soporte; libera el handle de un
  titular inactivo renombrándolo a `jugador_<hex>` y luego reclama.

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config.settings_tienda import get_tienda_settings
from app.modules.tienda.exceptions import NotFoundError, ValidationError
from app.modules.tienda.models import UserAccount
from app.modules.tienda.repositories import UserAccountRepository
from app.modules.tienda.schemas.metadata_schemas import (
    NICKNAME_MAX_LENGTH,
    NICKNAME_MIN_LENGTH,
    NICKNAME_PATTERN,
)
from app.modules.tienda.schemas.nickname_schemas import NicknameCheckResponse

logger = logging.getLogger(__name__)

_NICKNAME_RE = re.compile(NICKNAME_PATTERN)
RELEASED_PREFIX = "jugador_"


def is_valid_nickname(nickname: str) -> bool:
    return (
        NICKNAME_MIN_LENGTH <= len(nickname) <= NICKNAME_MAX_LENGTH
        and _NICKNAME_RE.match(nickname) is not None
    )


def _as_utc(value: datetime) -> datetime:
    # SQLite devuelve datetimes naive
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class NicknameService:
    def __init__(
        self,
        account_repo: Optional[UserAccountRepository] = None,
        *,
        reclaim_inactive_days: Optional[int] = None,
    ):
        self.account_repo = account_repo or UserAccountRepository()
        self.reclaim_inactive_days = (
            reclaim_inactive_days
            if reclaim_inactive_days is not None
            else get_tienda_settings().nickname_reclaim_inactive_days
        )

    @staticmethod
    def days_inactive(account: UserAccount, now: Optional[datetime] = None) -> Optional[int]:
        if account.last_seen_at is None:
            return None
        now = now or datetime.now(timezone.utc)
        return (now - _as_utc(account.last_seen_at)).days

    def is_reclaimable(self, account: UserAccount) -> bool:
        days = self.days_inactive(account)
        return days is not None and days >= self.reclaim_inactive_days

    # ------------------------------------------------------------------
    # Consulta
    # ------------------------------------------------------------------
    async def verify(self, session: AsyncSession, nickname: str) -> NicknameCheckResponse:
        nickname = nickname.strip()
        if not is_valid_nickname(nickname):
            return NicknameCheckResponse(
                nickname=nickname,
                available=False,
                reason="invalid_format",
                message=(
                    f"Nickname must be {NICKNAME_MIN_LENGTH}-{NICKNAME_MAX_LENGTH} characters, "
                    "start with a letter or digit and use only letters, digits, '_', '.' or '-'"
                ),
            )

        holder = await self.account_repo.get_by_nickname_key(session, nickname.lower())
        if holder is None:
            return NicknameCheckResponse(
                nickname=nickname, available=True, reason="available", message="Nickname is available"
            )

        if self.is_reclaimable(holder):
            return NicknameCheckResponse(
                nickname=nickname,
                available=False,
                reason="reclaimable",
                requires_support=True,
                days_inactive=self.days_inactive(holder),
                message="Nickname belongs to an inactive account and can be reclaimed through support",
            )

        return NicknameCheckResponse(
            nickname=nickname, available=False, reason="in_use", message="Nickname is already in use"
        )

    # ------------------------------------------------------------------
    # Reserva
    # ------------------------------------------------------------------
    async def claim(self, session: AsyncSession, user_id: str, nickname: str) -> bool:
        """
        Asigna `nickname` a `user_id`.

        Returns:
            True si quedó asignado (o ya era suyo), False si otro lo tiene.

        Raises:
            ValidationError: formato inválido
            NotFoundError: la cuenta no existe
        """
        if not is_valid_nickname(nickname):
            raise ValidationError(f"Invalid nickname '{nickname}'", code="invalid_nickname")

        holder = await self.account_repo.get_by_nickname_key(session, nickname.lower())
        if holder is not None and holder.user_id != user_id:
            logger.info("Nickname claim conflict: '%s' held by another account", nickname)
            return False

        try:
            async with session.begin_nested():
                updated = await self.account_repo.set_nickname(session, user_id, nickname)
        except IntegrityError:
            logger.info("Nickname claim conflict: '%s' taken concurrently (user=%s)", nickname, user_id)
            return False

        if updated == 0:
            raise NotFoundError(f"Account {user_id} not found", code="account_not_found")

        logger.info("Nickname claimed: user=%s nickname=%s", user_id, nickname)
        return True

    async def reclaim(self, session: AsyncSession, user_id: str, nickname: str) -> bool:
        holder = await self.account_repo.get_by_nickname_key(session, nickname.lower())
        if holder is not None and holder.user_id != user_id and self.is_reclaimable(holder):
            released = f"{RELEASED_PREFIX}{uuid.uuid4().hex[:10]}"
            await self.account_repo.set_nickname(session, holder.user_id, released)
            logger.info(
                "Nickname '%s' released from inactive user=%s (now %s)",
                nickname, holder.user_id, released,
            )
        return await self.claim(session, user_id, nickname)


__all__ = ["NicknameService", "is_valid_nickname"]

# Fin del archivo backend/app/modules/tienda/services/nickname_service.py
