# -*- coding: utf-8 -*-
"""
backend/tests/modules/tienda/services/test_support_service.py

Tests de la cola de revisión de soporte (reclamo de nickname):
pendiente → en_revision → {aprobado, rechazado}.

Autor: Arena
Fecha: 2026-10-19
"""

import pytest

from app.modules.tienda.enums import FulfillmentStatus, SupportStatus
from app.modules.tienda.exceptions import ConflictError, NicknameConflictError, NotFoundError
from app.modules.tienda.models import Order, SupportRequest, UserAccount


@pytest.fixture
def reclaim_request(seed, db, order_service, fund):
    """Compra 'recuperar nickname' con saldo y devuelve (orden, id de solicitud)."""

    async def _open(nickname: str, user_id: str = "user-1"):
        await fund(user_id, 1500, key=f"reclaim-{nickname}")
        result = await order_service.purchase_with_balance(
            db, user_id, "reclaim", {"nickname_solicitado": nickname}
        )
        return result.order, result.fulfillment["support_request_id"]

    return _open


class TestOpenRequest:
    @pytest.mark.asyncio
    async def test_purchase_opens_pending_request(self, seed, reclaim_request, fetch):
        order, request_id = await reclaim_request("OldTimer")

        request = await fetch(SupportRequest, request_id)
        assert request.status == SupportStatus.PENDING
        assert request.order_id == order.id
        assert request.user_id == seed["user"]
        assert request.requested_nickname == "OldTimer"
        assert order.fulfillment_status == FulfillmentStatus.DEFERRED


class TestReview:
    @pytest.mark.asyncio
    async def test_start_review_then_approve(self, seed, db, support_service, reclaim_request, fetch):
        """Test: aprobar reclama el handle del titular inactivo."""
        order, request_id = await reclaim_request("OldTimer")

        reviewing = await support_service.start_review(db, request_id, seed["admin"])
        assert reviewing.status == SupportStatus.UNDER_REVIEW
        assert reviewing.reviewed_by == seed["admin"]

        approved = await support_service.resolve(db, request_id, seed["admin"], approve=True, notes="ok")
        assert approved.status == SupportStatus.APPROVED
        assert approved.resolved_by == seed["admin"]
        assert approved.resolved_at is not None

        requester = await fetch(UserAccount, seed["user"])
        assert requester.nickname == "OldTimer"
        stored = await fetch(Order, order.id)
        assert stored.fulfillment_status == FulfillmentStatus.APPLIED
        assert stored.fulfillment_result["status"] == "aprobado"

    @pytest.mark.asyncio
    async def test_start_review_twice_is_conflict(self, seed, db, support_service, reclaim_request):
        _, request_id = await reclaim_request("OldTimer")
        await support_service.start_review(db, request_id, seed["admin"])
        with pytest.raises(ConflictError):
            await support_service.start_review(db, request_id, seed["admin"])

    @pytest.mark.asyncio
    async def test_approve_against_active_holder_keeps_request_open(
        self, seed, db, support_service, reclaim_request, fetch
    ):
        """Test: reclamo que choca → Conflict y la solicitud sigue pendiente."""
        _, request_id = await reclaim_request("Rival")

        with pytest.raises(NicknameConflictError):
            await support_service.resolve(db, request_id, seed["admin"], approve=True)

        request = await fetch(SupportRequest, request_id)
        assert request.status == SupportStatus.PENDING
        rival = await fetch(UserAccount, seed["rival"])
        assert rival.nickname == "Rival"

    @pytest.mark.asyncio
    async def test_resolved_request_cannot_be_resolved_again(
        self, seed, db, support_service, reclaim_request
    ):
        _, request_id = await reclaim_request("OldTimer")
        await support_service.resolve(db, request_id, seed["admin"], approve=False, notes="no")

        with pytest.raises(ConflictError) as exc:
            await support_service.resolve(db, request_id, seed["admin"], approve=True)
        assert exc.value.code == "support_request_resolved"

    @pytest.mark.asyncio
    async def test_unknown_request_is_not_found(self, seed, db, support_service):
        with pytest.raises(NotFoundError):
            await support_service.resolve(db, "missing", seed["admin"], approve=False)


class TestQueries:
    @pytest.mark.asyncio
    async def test_list_filters_and_paginates(self, seed, db, support_service, reclaim_request):
        _, first = await reclaim_request("OldTimer")
        _, second = await reclaim_request("Legend")
        await support_service.start_review(db, second, seed["admin"])

        pending, total_pending = await support_service.list_requests(
            db, status=SupportStatus.PENDING, limit=10, offset=0
        )
        assert total_pending == 1
        assert [r.id for r in pending] == [first]

        page, total = await support_service.list_requests(db, limit=1, offset=1)
        assert total == 2
        assert len(page) == 1

    @pytest.mark.asyncio
    async def test_user_sees_only_own_requests(self, seed, db, support_service, reclaim_request):
        _, request_id = await reclaim_request("OldTimer")

        mine = await support_service.list_user_requests(db, seed["user"])
        theirs = await support_service.list_user_requests(db, seed["rival"])
        assert [r.id for r in mine] == [request_id]
        assert theirs == []

        detail = await support_service.get_request(db, request_id)
        assert detail.requested_nickname == "OldTimer"

# Fin del archivo backend/tests/modules/tienda/services/test_support_service.py
