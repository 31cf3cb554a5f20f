# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/facades/webhooks/__init__.py

Autor: Arena
Fecha: 2026-10-19
"""

from .paypal_webhook import WebhookSignatureError, extract_intent_id, handle_paypal_webhook

__all__ = ["WebhookSignatureError", "extract_intent_id", "handle_paypal_webhook"]

# Fin del archivo backend/app/modules/tienda/facades/webhooks/__init__.py
