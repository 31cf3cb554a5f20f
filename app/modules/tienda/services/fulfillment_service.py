# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/services/fulfillment_service.py

Despachador de entregas: aplica el efecto de una orden pagada.

Se ejecuta exactamente una vez por orden, dentro de la unidad de trabajo
que la mueve a COMPLETED (la transición compare-and-set va primero). El
resultado (FulfillmentOutcome) se guarda en la orden y es lo que reciben
los reintentos idempotentes.

| item / service    | efecto                                           | estado   |
|-------------------|--------------------------------------------------|----------|
| credits           | abono en el ledger (order:<id>:credits)          | applied  |
| membership        | extiende desde max(ahora, ends_at)               | applied  |
| rename_nickname   | claim en SAVEPOINT; conflicto → failed            | applied  |
| reclaim_nickname  | abre solicitud de soporte                        | deferred |
| reset_record      | wins/losses/draws = 0                            | applied  |
| reset_stats       | además rank_level = 1, hours_played = 0          | applied  |

Autor: Arena
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.tienda.enums import FulfillmentStatus, ItemType, LedgerReason, ServiceKind, SupportStatus
from app.modules.tienda.exceptions import NotFoundError
from app.modules.tienda.metrics import FULFILLMENT_FAILURES_TOTAL
from app.modules.tienda.models import Order, StoreItem
from app.modules.tienda.repositories import MembershipRepository, UserGameStatsRepository
from app.modules.tienda.schemas.metadata_schemas import (
    ReclaimNicknameMetadata,
    RenameNicknameMetadata,
    load_metadata,
)
from .ledger_service import LedgerService
from .nickname_service import NicknameService
from .support_service import SupportService

logger = logging.getLogger(__name__)

DEFAULT_MEMBERSHIP_TIER = "premium"


@dataclass
class FulfillmentOutcome:
    status: FulfillmentStatus
    result: dict[str, Any] = field(default_factory=dict)
    failure_code: Optional[str] = None
    failure_reason: Optional[str] = None

    @classmethod
    def failed(cls, kind: str, code: str, reason: str) -> "FulfillmentOutcome":
        return cls(
            status=FulfillmentStatus.FAILED,
            result={"type": kind, "error": code},
            failure_code=code,
            failure_reason=reason,
        )


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class FulfillmentService:
    def __init__(
        self,
        ledger_service: Optional[LedgerService] = None,
        nickname_service: Optional[NicknameService] = None,
        support_service: Optional[SupportService] = None,
        membership_repo: Optional[MembershipRepository] = None,
        stats_repo: Optional[UserGameStatsRepository] = None,
    ):
        self.ledger = ledger_service or LedgerService()
        self.nicknames = nickname_service or NicknameService()
        self.support = support_service or SupportService(nickname_service=self.nicknames)
        self.membership_repo = membership_repo or MembershipRepository()
        self.stats_repo = stats_repo or UserGameStatsRepository()

    async def apply(
        self, session: AsyncSession, order: Order, item: StoreItem
    ) -> FulfillmentOutcome:
        item_type = ItemType(order.item_type)
        if item_type == ItemType.CREDITS:
            outcome = await self._credits(session, order, item)
        elif item_type == ItemType.MEMBERSHIP:
            outcome = await self._membership(session, order, item)
        else:
            outcome = await self._service(session, order)

        if outcome.status == FulfillmentStatus.FAILED:
            FULFILLMENT_FAILURES_TOTAL.labels(item_type.value, outcome.failure_code or "unknown").inc()
            logger.warning(
                "Fulfillment failed for order=%s: %s (%s)",
                order.id, outcome.failure_code, outcome.failure_reason,
            )
        else:
            logger.info("Fulfillment %s for order=%s", outcome.status.value, order.id)
        return outcome

    # ------------------------------------------------------------------
    # credits
    # ------------------------------------------------------------------
    async def _credits(self, session: AsyncSession, order: Order, item: StoreItem) -> FulfillmentOutcome:
        if not item.credits_granted:
            return FulfillmentOutcome.failed("credits", "invalid_item", f"Item {item.id} grants no credits")

        entry = await self.ledger.credit(
            session,
            order.user_id,
            item.credits_granted,
            reason=LedgerReason.PURCHASE_CREDITS,
            idempotency_key=f"order:{order.id}:credits",
            order_id=order.id,
        )
        return FulfillmentOutcome(
            status=FulfillmentStatus.APPLIED,
            result={
                "type": "credits",
                "credits_granted": item.credits_granted,
                "balance_after": entry.balance_after,
            },
        )

    # ------------------------------------------------------------------
    # membership
    # ------------------------------------------------------------------
    async def _membership(self, session: AsyncSession, order: Order, item: StoreItem) -> FulfillmentOutcome:
        if not item.duration_days:
            return FulfillmentOutcome.failed("membership", "invalid_item", f"Item {item.id} has no duration")

        now = datetime.now(timezone.utc)
        duration = timedelta(days=item.duration_days)
        tier = item.membership_tier or DEFAULT_MEMBERSHIP_TIER
        grant = await self.membership_repo.get_by_user_id(session, order.user_id)

        if grant is None:
            grant = await self.membership_repo.create(
                session,
                user_id=order.user_id,
                tier=tier,
                starts_at=now,
                ends_at=now + duration,
            )
        else:
            current_end = _as_utc(grant.ends_at)
            if current_end <= now:
                grant.starts_at = now
            grant.ends_at = max(now, current_end) + duration
            grant.tier = tier
            await session.flush()

        return FulfillmentOutcome(
            status=FulfillmentStatus.APPLIED,
            result={
                "type": "membership",
                "tier": tier,
                "days_added": item.duration_days,
                "ends_at": _as_utc(grant.ends_at).isoformat(),
            },
        )

    # ------------------------------------------------------------------
    # services
    # ------------------------------------------------------------------
    async def _service(self, session: AsyncSession, order: Order) -> FulfillmentOutcome:
        kind = ServiceKind(order.service_kind)
        metadata = load_metadata(order.metadata_json)

        if kind == ServiceKind.RENAME_NICKNAME:
            if not isinstance(metadata, RenameNicknameMetadata):
                return FulfillmentOutcome.failed(kind.value, "invalid_metadata", "Order has no new nickname")
            return await self._rename(session, order, metadata.new_nickname)

        if kind == ServiceKind.RECLAIM_NICKNAME:
            if not isinstance(metadata, ReclaimNicknameMetadata):
                return FulfillmentOutcome.failed(kind.value, "invalid_metadata", "Order has no requested nickname")
            request = await self.support.open_request(session, order, metadata.requested_nickname)
            return FulfillmentOutcome(
                status=FulfillmentStatus.DEFERRED,
                result={
                    "type": kind.value,
                    "support_request_id": request.id,
                    "status": SupportStatus.PENDING.value,
                    "nickname": metadata.requested_nickname,
                },
            )

        values: dict[str, Any] = {"wins": 0, "losses": 0, "draws": 0}
        if kind == ServiceKind.RESET_STATS:
            values.update(rank_level=1, hours_played=Decimal("0"))
        rows = await self.stats_repo.reset(session, order.user_id, **values)
        return FulfillmentOutcome(
            status=FulfillmentStatus.APPLIED,
            result={"type": kind.value, "games_reset": rows},
        )

    async def _rename(self, session: AsyncSession, order: Order, nickname: str) -> FulfillmentOutcome:
        kind = ServiceKind.RENAME_NICKNAME.value
        try:
            claimed = await self.nicknames.claim(session, order.user_id, nickname)
        except NotFoundError as e:
            return FulfillmentOutcome.failed(kind, "account_not_found", e.message)

        if not claimed:
            return FulfillmentOutcome.failed(
                kind, "nickname_conflict", f"Nickname '{nickname}' was taken before the purchase completed"
            )
        return FulfillmentOutcome(
            status=FulfillmentStatus.APPLIED,
            result={"type": kind, "nickname": nickname},
        )


__all__ = ["FulfillmentService", "FulfillmentOutcome"]

# Fin del archivo backend/app/modules/tienda/services/fulfillment_service.py
