# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/models/__init__.py

Modelos ORM del módulo Tienda. Importar este paquete registra todas las
tablas en Base.metadata.

Autor: Arena
Fecha: 2026-10-19
"""

from .item_models import StoreItem
from .order_models import Order
from .wallet_models import Wallet
from .ledger_models import BalanceLedgerEntry
from .membership_models import MembershipGrant
from .account_models import UserAccount
from .stats_models import UserGameStats
from .support_models import SupportRequest

__all__ = [
    "StoreItem",
    "Order",
    "Wallet",
    "BalanceLedgerEntry",
    "MembershipGrant",
    "UserAccount",
    "UserGameStats",
    "SupportRequest",
]

# Fin del archivo backend/app/modules/tienda/models/__init__.py
