# -*- coding: utf-8 -*-
"""
backend/tests/modules/tienda/conftest.py

Fixtures del módulo Tienda.

- Motor ASYNC SQLite en archivo (uno por test) con BEGIN IMMEDIATE, para
  que las pruebas de concurrencia serialicen escrituras como lo haría
  PostgreSQL con bloqueos de fila.
- Tipos Postgres (JSONB / ENUM) parcheados a equivalentes SQLite.
- Catálogo y cuentas sembrados; pasarela stub inyectada.

Autor: Arena
Fecha: 2026-10-19
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import JSON, String, event, select
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.shared.database.base import Base
import app.modules.tienda.models  # noqa: F401  (registra tablas)
from app.modules.tienda.adapters import StubGateway, set_payment_gateway
from app.modules.tienda.enums import ItemType, LedgerReason, ServiceKind, UserRole
from app.modules.tienda.models import StoreItem, UserAccount, UserGameStats, Wallet
from app.modules.tienda.services import (
    FulfillmentService,
    LedgerService,
    NicknameService,
    OrderService,
    SupportService,
)


def _patch_pg_types_for_sqlite(metadata):
    """Reemplaza tipos Postgres (JSONB/Enum) por equivalentes compatibles con SQLite."""
    for table in metadata.tables.values():
        table.schema = None
        for col in table.columns:
            t = col.type
            if isinstance(t, JSONB):
                col.type = JSON()
            elif isinstance(t, SQLEnum):
                col.type = String(50)


_patch_pg_types_for_sqlite(Base.metadata)


@pytest.fixture
async def engine(tmp_path):
    eng = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'tienda.db'}",
        connect_args={"timeout": 30},
    )

    @event.listens_for(eng.sync_engine, "connect")
    def _no_implicit_begin(dbapi_conn, connection_record):
        dbapi_conn.isolation_level = None

    @event.listens_for(eng.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


# -----------------------------------------------------------------------------
# Catálogo y cuentas
# -----------------------------------------------------------------------------
USER = "user-1"
RIVAL = "user-2"
INACTIVE = "user-3"
ADMIN = "admin-1"

CATALOG = [
    dict(id="credits-500", name="500 créditos", item_type=ItemType.CREDITS,
         price=Decimal("4.99"), currency="USD", credits_granted=500),
    dict(id="credits-eur", name="500 créditos (EUR)", item_type=ItemType.CREDITS,
         price=Decimal("4.99"), currency="EUR", credits_granted=500),
    dict(id="membership-30", name="Premium 30 días", item_type=ItemType.MEMBERSHIP,
         price=Decimal("9.99"), currency="USD", credit_price=1000, duration_days=30,
         membership_tier="premium"),
    dict(id="rename", name="Cambio de nickname", item_type=ItemType.SERVICE,
         service_kind=ServiceKind.RENAME_NICKNAME, price=Decimal("2.99"), currency="USD",
         credit_price=300),
    dict(id="reclaim", name="Recuperar nickname", item_type=ItemType.SERVICE,
         service_kind=ServiceKind.RECLAIM_NICKNAME, price=Decimal("14.99"), currency="USD",
         credit_price=1500),
    dict(id="reset-record", name="Reiniciar récord", item_type=ItemType.SERVICE,
         service_kind=ServiceKind.RESET_RECORD, price=Decimal("1.99"), currency="USD",
         credit_price=200),
    dict(id="reset-stats", name="Reiniciar estadísticas", item_type=ItemType.SERVICE,
         service_kind=ServiceKind.RESET_STATS, price=Decimal("3.99"), currency="USD",
         credit_price=400),
    dict(id="retired", name="Artículo retirado", item_type=ItemType.CREDITS,
         price=Decimal("1.00"), currency="USD", credits_granted=100, active=False),
]


@pytest.fixture
async def seed(session_factory):
    now = datetime.now(timezone.utc)
    async with session_factory() as session:
        async with session.begin():
            session.add_all([StoreItem(**item) for item in CATALOG])
            session.add_all([
                UserAccount(user_id=USER, nickname="PlayerOne", nickname_key="playerone", last_seen_at=now),
                UserAccount(user_id=RIVAL, nickname="Rival", nickname_key="rival", last_seen_at=now),
                UserAccount(
                    user_id=INACTIVE, nickname="OldTimer", nickname_key="oldtimer",
                    last_seen_at=now - timedelta(days=400),
                ),
                UserAccount(
                    user_id=ADMIN, nickname="Admin", nickname_key="admin",
                    role=UserRole.ADMIN, last_seen_at=now,
                ),
            ])
            session.add_all([
                UserGameStats(user_id=USER, game_id="chess", wins=10, losses=4, draws=2,
                              rank_level=7, hours_played=Decimal("42.50")),
                UserGameStats(user_id=USER, game_id="go", wins=3, losses=1, draws=0,
                              rank_level=3, hours_played=Decimal("5.00")),
            ])
    return {"user": USER, "rival": RIVAL, "inactive": INACTIVE, "admin": ADMIN}


# -----------------------------------------------------------------------------
# Pasarela y servicios
# -----------------------------------------------------------------------------
@pytest.fixture
def gateway():
    gw = StubGateway()
    set_payment_gateway(gw)
    try:
        yield gw
    finally:
        set_payment_gateway(None)


@pytest.fixture
def ledger_service():
    return LedgerService()


@pytest.fixture
def nickname_service():
    return NicknameService(reclaim_inactive_days=180)


@pytest.fixture
def support_service(nickname_service):
    return SupportService(nickname_service=nickname_service)


@pytest.fixture
def order_service(gateway, ledger_service, nickname_service, support_service):
    fulfillment = FulfillmentService(
        ledger_service=ledger_service,
        nickname_service=nickname_service,
        support_service=support_service,
    )
    return OrderService(gateway=gateway, ledger_service=ledger_service, fulfillment_service=fulfillment)


@pytest.fixture
def fund(session_factory, ledger_service):
    """Abona saldo inicial a un usuario (asiento de ajuste)."""

    async def _fund(user_id: str, amount: int, key: str = "seed-funds") -> None:
        async with session_factory() as session:
            async with session.begin():
                await ledger_service.credit(
                    session, user_id, amount, reason=LedgerReason.ADJUSTMENT, idempotency_key=key
                )

    return _fund


@pytest.fixture
def fetch(session_factory):
    """Lee una fila en una sesión nueva (sin identity map del servicio)."""

    async def _fetch(model, obj_id):
        async with session_factory() as session:
            return await session.get(model, obj_id)

    return _fetch


@pytest.fixture
def balance_of(session_factory):
    async def _balance(user_id: str) -> int:
        async with session_factory() as session:
            result = await session.execute(select(Wallet.balance).where(Wallet.user_id == user_id))
            return int(result.scalar() or 0)

    return _balance

# Fin del archivo backend/tests/modules/tienda/conftest.py
