# -*- coding: utf-8 -*-
"""
backend/app/modules/tienda/facades/webhooks/constants.py

Eventos de PayPal que procesa la tienda.
"""

# El comprador aprobó; resource.id es el intent (orden PayPal)
PAYPAL_EVENT_APPROVED = frozenset({"CHECKOUT.ORDER.APPROVED"})
# Captura confirmada; el intent viene en supplementary_data.related_ids.order_id
PAYPAL_EVENT_CAPTURED = frozenset({"PAYMENT.CAPTURE.COMPLETED"})
PAYPAL_EVENT_FAILED = frozenset({"PAYMENT.CAPTURE.DENIED", "PAYMENT.CAPTURE.DECLINED"})

__all__ = ["PAYPAL_EVENT_APPROVED", "PAYPAL_EVENT_CAPTURED", "PAYPAL_EVENT_FAILED"]

# Fin del archivo backend/app/modules/tienda/facades/webhooks/constants.py
