# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/repositories/__init__.py

Repositorios del módulo Tienda.

Autor: Arena
Fecha: 2026-10-19
"""

from .item_repository import StoreItemRepository
from .order_repository import OrderRepository
from .wallet_repository import WalletRepository
from .ledger_repository import BalanceLedgerRepository
from .membership_repository import MembershipRepository
from .account_repository import UserAccountRepository
from .stats_repository import UserGameStatsRepository
from .support_repository import SupportRequestRepository

__all__ = [
    "StoreItemRepository",
    "OrderRepository",
    "WalletRepository",
    "BalanceLedgerRepository",
    "MembershipRepository",
    "UserAccountRepository",
    "UserGameStatsRepository",
    "SupportRequestRepository",
]

# Fin del archivo backend/app/modules/tienda/repositories/__init__.py
