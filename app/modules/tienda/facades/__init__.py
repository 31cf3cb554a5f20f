# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/facades/__init__.py

Fachadas del módulo Tienda (orquestación de entradas externas).

Autor: Arena
Fecha: 2026-10-19
"""

from .webhooks import WebhookSignatureError, handle_paypal_webhook

__all__ = ["WebhookSignatureError", "handle_paypal_webhook"]

# Fin del archivo backend/app/modules/tienda/facades/__init__.py
